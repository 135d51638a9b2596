"""
Interfaces to the data the tag entropy metric consumes, along with in-memory
implementations backed by pandas data frames.
"""

# pyright: basic
from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable
from typing import Protocol

import pandas as pd
from lenskit.data import ItemList

logger = logging.getLogger(__name__)


class ItemTagSource(Protocol):
    """
    Look up the free-text tags applied to an item.
    """

    def item_tags(self, item: Hashable) -> Iterable[str]: ...


class RecommendationSource(Protocol):
    """
    Produce a user's recommendation list, with the user's training items
    already removed.
    """

    def recommend(self, user: Hashable, n: int) -> ItemList | None:
        """
        Get up to ``n`` recommendations for a user.

        Returns:
            The recommendations in rank order, or ``None`` if no
            recommendations could be produced for this user.
        """
        ...


class FrameTagSource:
    """
    Item tags from a frame of tag applications.  Items without any
    applications have no tags.
    """

    _tags: dict[Hashable, list[str]]

    def __init__(self, df: pd.DataFrame, item_column: str = "item_id", tag_column: str = "tag"):
        self._tags = {item: list(group) for item, group in df.groupby(item_column, sort=False)[tag_column]}
        logger.debug("indexed tags for %d items", len(self._tags))

    def item_tags(self, item: Hashable) -> list[str]:
        return self._tags.get(item, [])


class FrameRecommendationSource:
    """
    Recommendations from a frame of precomputed recommendation lists.

    The frame needs ``user_id`` and ``item_id`` columns, and either a
    ``score`` column (higher is better) or a ``rank`` column (lower is better).
    If a training frame is provided, each user's training items are excluded
    from their list before it is truncated.
    """

    _recs: dict[Hashable, pd.DataFrame]
    _train: dict[Hashable, set]

    def __init__(self, recs: pd.DataFrame, train: pd.DataFrame | None = None):
        if "score" in recs.columns:
            recs = recs.sort_values(["user_id", "score"], ascending=[True, False], kind="stable")
        elif "rank" in recs.columns:
            recs = recs.sort_values(["user_id", "rank"], kind="stable")
        else:
            raise ValueError("recommendation frame needs a score or rank column")

        self._recs = {user: urecs for user, urecs in recs.groupby("user_id", sort=False)}
        if train is None:
            self._train = {}
        else:
            self._train = {user: set(items) for user, items in train.groupby("user_id")["item_id"]}
        logger.debug("loaded recommendations for %d users", len(self._recs))

    def users(self) -> list[Hashable]:
        return list(self._recs.keys())

    def recommend(self, user: Hashable, n: int) -> ItemList | None:
        urecs = self._recs.get(user)
        if urecs is None:
            logger.debug("user %s has no recommendations", user)
            return None

        exclude = self._train.get(user)
        if exclude:
            urecs = urecs[~urecs["item_id"].isin(exclude)]
        if len(urecs) == 0:
            logger.debug("user %s has no recommendations outside their training items", user)
            return None

        urecs = urecs.iloc[:n]
        scores = urecs["score"].to_numpy() if "score" in urecs.columns else None
        return ItemList(item_ids=urecs["item_id"].to_numpy(), scores=scores, ordered=True)
