"""
The controlled tag vocabulary and the sparse vectors indexed by it.
"""

# pyright: basic
from __future__ import annotations

import logging
from collections.abc import Iterable

import pandas as pd
from lenskit.data import Vocabulary

logger = logging.getLogger(__name__)


class TagVocabulary:
    """
    A fixed set of recognized tags, each with a stable integer index.

    Tags are numbered in order of first appearance when the vocabulary is
    constructed, and the numbering never changes afterwards.
    """

    vocab: Vocabulary

    def __init__(self, tags: Iterable[str]):
        self.vocab = Vocabulary(list(dict.fromkeys(tags)), name="tag", reorder=False)
        logger.debug("built tag vocabulary with %d tags", len(self.vocab))

    @classmethod
    def from_frame(cls, df: pd.DataFrame, column: str = "tag", min_count: int = 1) -> TagVocabulary:
        """
        Build a vocabulary from a frame of tag applications.

        Args:
            df:
                The tag applications (one row per application).
            column:
                The column holding the tag strings.
            min_count:
                The minimum number of applications for a tag to be included.

        Returns:
            The vocabulary, numbered in sorted tag order.
        """
        counts = df[column].value_counts()
        counts = counts[counts >= min_count]
        logger.info("keeping %d of %d distinct tags (min count %d)", len(counts), df[column].nunique(), min_count)
        return cls(sorted(counts.index))

    def has_tag(self, tag: str) -> bool:
        return tag in self.vocab

    def tag_id(self, tag: str) -> int:
        "Get the index of a tag.  Raises :class:`KeyError` for unknown tags."
        if tag not in self.vocab:
            raise KeyError(tag)
        return int(self.vocab.number(tag))

    def new_tag_vector(self) -> SparseTagVector:
        "Create a new, empty vector over this vocabulary's tag indices."
        return SparseTagVector(len(self.vocab))

    def __contains__(self, tag: object) -> bool:
        return tag in self.vocab

    def __len__(self) -> int:
        return len(self.vocab)

    def __repr__(self) -> str:
        return f"<TagVocabulary with {len(self)} tags>"


class SparseTagVector:
    """
    A sparse vector keyed by tag index.  Unset entries read as 0.
    """

    size: int
    _values: dict[int, float]

    def __init__(self, size: int):
        self.size = size
        self._values = {}

    def get(self, key: int, default: float = 0.0) -> float:
        return self._values.get(key, default)

    def set(self, key: int, value: float):
        if key < 0 or key >= self.size:
            raise KeyError(f"tag index {key} not in vocabulary of size {self.size}")
        self._values[key] = value

    def add(self, other: SparseTagVector):
        """
        Add another vector to this one, in place.  The result is defined over
        the union of both vectors' set keys.
        """
        if other.size != self.size:
            raise ValueError(f"vector size mismatch: {self.size} != {other.size}")
        for key, value in other._values.items():
            self._values[key] = self._values.get(key, 0.0) + value

    def sum(self) -> float:
        return sum(self._values.values(), 0.0)

    __getitem__ = get
    __setitem__ = set

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"<SparseTagVector {len(self)}/{self.size} set>"
