"""
Tag entropy of recommendation lists.

Tag entropy measures how many distinct vocabulary tags a recommendation list
surfaces.  Each distinct recommended item is picked with probability ``1/L``
and each of its ``S`` distinct tags with probability ``1/S``; a tag contributes
``-p log2 p`` for ``p = 1/(S L)`` once, from the first item (in list order)
that carries it.
"""

# pyright: basic
from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable

import numpy as np
from lenskit.data import ItemList

from tag_entropy_eval.data.sources import ItemTagSource, RecommendationSource
from tag_entropy_eval.evaluation.options import TagEntropyOptions
from tag_entropy_eval.vocabulary import TagVocabulary

logger = logging.getLogger(__name__)


def tag_entropy(
    recs: ItemList | Iterable[Hashable] | None,
    vocabulary: TagVocabulary,
    tags: ItemTagSource,
) -> float | None:
    """
    Compute the tag entropy of a single recommendation list.

    Items are processed in recommendation order, after removing repeated
    items, and each item's tags in the order the tag source returns them.
    When two items carry the same tag, the higher-ranked item is the one
    the tag is attributed to.

    Args:
        recs:
            The recommendation list, or ``None`` if no recommendations were
            available for the user.
        vocabulary:
            The tags to count; other tags are ignored.
        tags:
            The source of each item's tags.

    Returns:
        The entropy, or ``None`` if ``recs`` is ``None``.  A list with no
        items has entropy 0.
    """
    if recs is None:
        return None

    if isinstance(recs, ItemList):
        item_ids = recs.ids().tolist()
    else:
        item_ids = list(recs)

    items = list(dict.fromkeys(item_ids))
    n_items = len(items)
    if n_items == 0:
        logger.debug("empty recommendation list, entropy is 0")
        return 0.0

    entropy_vec = vocabulary.new_tag_vector()
    seen: set[str] = set()
    for item in items:
        item_tags = list(dict.fromkeys(tags.item_tags(item)))
        n_tags = len(item_tags)
        if n_tags == 0:
            continue

        work = vocabulary.new_tag_vector()
        for tag in item_tags:
            if tag not in vocabulary or tag in seen:
                continue
            seen.add(tag)

            p = (1.0 / n_tags) * (1.0 / n_items)
            work[vocabulary.tag_id(tag)] = -p * np.log2(p)

        entropy_vec.add(work)

    return entropy_vec.sum()


class TagEntropyAccumulator:
    """
    Accumulate per-user tag entropies for one algorithm and data set.

    An accumulator belongs to a single evaluation run and is not safe for
    concurrent use.
    """

    metric: TagEntropyMetric
    algorithm: str | None
    dataset: str | None
    total: float
    count: int

    def __init__(self, metric: TagEntropyMetric, algorithm: str | None = None, dataset: str | None = None):
        self.metric = metric
        self.algorithm = algorithm
        self.dataset = dataset
        self.total = 0.0
        self.count = 0

    def accumulate(self, value: float | None):
        "Record one user's entropy.  Unavailable (``None``) values are skipped."
        if value is None:
            return
        self.total += value
        self.count += 1

    def measure_user(
        self,
        user: Hashable,
        recs_source: RecommendationSource,
        vocabulary: TagVocabulary,
        tags: ItemTagSource,
    ) -> list[float | None]:
        """
        Measure one user's recommendations and accumulate the result.

        Returns:
            The values for the per-user columns.
        """
        recs = recs_source.recommend(user, self.metric.list_size)
        value = tag_entropy(recs, vocabulary, tags)
        if value is None:
            logger.debug("user %s: no recommendations", user)
        else:
            logger.debug("user %s: %s=%.4f", user, self.metric.label, value)
        self.accumulate(value)
        return [value]

    def finalize(self) -> list[float]:
        """
        Get the global results: the mean entropy over all users with a value.

        Raises:
            RuntimeError: if no user values have been accumulated.
        """
        if self.count == 0:
            msg = f"no users measured for {self.metric.label}"
            if self.algorithm or self.dataset:
                msg += f" (algorithm {self.algorithm}, data set {self.dataset})"
            raise RuntimeError(msg)
        return [self.total / self.count]


class TagEntropyMetric:
    """
    Tag entropy of the top-N recommendation lists.

    Args:
        list_size:
            The number of recommendations to request for each user.
    """

    list_size: int
    label: str

    def __init__(self, list_size: int):
        if list_size <= 0:
            raise ValueError(f"list size must be positive, got {list_size}")
        self.list_size = list_size
        self.label = f"TagEntropy@{list_size}"

    @classmethod
    def from_options(cls, options: TagEntropyOptions) -> TagEntropyMetric:
        "Create the metric from its configuration options."
        return cls(options.list_size)

    @property
    def columns(self) -> list[str]:
        "Labels for the global result columns."
        return [self.label]

    @property
    def user_columns(self) -> list[str]:
        # per-user and global results have the same fields
        return [self.label]

    def make_accumulator(self, algorithm: str | None = None, dataset: str | None = None) -> TagEntropyAccumulator:
        """
        Make a fresh accumulator for one algorithm and data set.
        """
        return TagEntropyAccumulator(self, algorithm, dataset)

    def __repr__(self) -> str:
        return f"TagEntropyMetric(list_size={self.list_size})"
