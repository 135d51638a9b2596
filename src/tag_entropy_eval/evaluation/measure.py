"""
Measure tag entropy for a set of users' recommendations.
"""

# pyright: basic
import logging
from collections.abc import Hashable, Iterable, Iterator
from pathlib import Path
from typing import Any

import pandas as pd

from tag_entropy_eval.data.sources import ItemTagSource, RecommendationSource
from tag_entropy_eval.evaluation.metrics import TagEntropyAccumulator, TagEntropyMetric
from tag_entropy_eval.evaluation.options import load_eval_options
from tag_entropy_eval.vocabulary import TagVocabulary

logger = logging.getLogger(__name__)


def user_eval_results(
    acc: TagEntropyAccumulator,
    users: Iterable[Hashable],
    recs_source: RecommendationSource,
    vocabulary: TagVocabulary,
    tags: ItemTagSource,
) -> Iterator[dict[str, Any]]:
    """
    Measure each user in turn, yielding their per-user result rows.
    """
    columns = acc.metric.user_columns
    for user in users:
        values = acc.measure_user(user, recs_source, vocabulary, tags)
        row: dict[str, Any] = {"user_id": user}
        row.update(zip(columns, values))
        yield row


def measure_users(
    metric: TagEntropyMetric,
    users: Iterable[Hashable],
    recs_source: RecommendationSource,
    vocabulary: TagVocabulary,
    tags: ItemTagSource,
    *,
    algorithm: str | None = None,
    dataset: str | None = None,
) -> tuple[pd.DataFrame, pd.Series]:
    """
    Measure tag entropy for one algorithm's recommendations on one data set.

    Returns:
        The per-user results (unavailable values are missing), and the global
        results indexed by column label.
    """
    logger.info("measuring %s for algorithm %s on %s", metric.label, algorithm, dataset)
    acc = metric.make_accumulator(algorithm, dataset)

    records = list(user_eval_results(acc, users, recs_source, vocabulary, tags))
    user_df = pd.DataFrame.from_records(records, columns=["user_id"] + metric.user_columns)
    user_df[metric.user_columns] = user_df[metric.user_columns].astype("float64")
    n_missing = len(user_df) - acc.count
    if n_missing:
        logger.info("%d of %d users had no recommendations", n_missing, len(user_df))

    results = pd.Series(acc.finalize(), index=metric.columns, dtype="float64")
    logger.info("aggregate metrics over %d users:\n%s", acc.count, results)
    return user_df, results


def measure_run(
    run_dir: Path,
    users: Iterable[Hashable],
    recs_source: RecommendationSource,
    vocabulary: TagVocabulary,
    tags: ItemTagSource,
) -> tuple[pd.DataFrame, pd.Series]:
    """
    Measure tag entropy for an evaluation run directory.

    The run directory is ``<data set>/<algorithm>``; the metric is configured
    from the run's ``options.toml`` (see :mod:`tag_entropy_eval.evaluation.options`).
    """
    options = load_eval_options(run_dir)
    metric = TagEntropyMetric.from_options(options.tag_entropy)
    return measure_users(
        metric,
        users,
        recs_source,
        vocabulary,
        tags,
        algorithm=run_dir.name,
        dataset=run_dir.parent.name,
    )
