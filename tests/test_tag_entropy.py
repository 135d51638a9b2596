import logging

import numpy as np
import pandas as pd
import pytest
from lenskit.data import ItemList

from tag_entropy_eval.data.sources import FrameTagSource
from tag_entropy_eval.evaluation.metrics.tag_entropy import tag_entropy
from tag_entropy_eval.vocabulary import TagVocabulary

logger = logging.getLogger(__name__)


@pytest.fixture
def vocab():
    return TagVocabulary(["action", "drama"])


@pytest.fixture
def tags():
    df = pd.DataFrame(
        {
            "item_id": ["a", "a", "b", "b", "c", "d", "d"],
            "tag": ["action", "comedy", "action", "drama", "action", "comedy", "comedy"],
        }
    )
    return FrameTagSource(df)


def test_entropy_two_items_shared_tag(vocab, tags):
    # action and drama each count once with p = 1/4
    score = tag_entropy(["a", "b"], vocab, tags)
    assert score == pytest.approx(1.0)


def test_entropy_item_list(vocab, tags):
    recs = ItemList(item_ids=["a", "b"], scores=[2.0, 1.0], ordered=True)
    score = tag_entropy(recs, vocab, tags)
    assert score == pytest.approx(1.0)


def test_entropy_first_item_wins(vocab, tags):
    # c only has action, so it takes action with p = 1/2; b then only adds drama at p = 1/4
    score = tag_entropy(["c", "b"], vocab, tags)
    assert score == pytest.approx(0.5 + 0.5)

    # with b first, action comes from b and c adds nothing
    score = tag_entropy(["b", "c"], vocab, tags)
    assert score == pytest.approx(0.5 + 0.5)


def test_entropy_attribution_follows_rank(vocab, tags):
    # a (S=2) vs c (S=1) both carry action, L = 2
    a_first = tag_entropy(["a", "c"], vocab, tags)
    c_first = tag_entropy(["c", "a"], vocab, tags)
    assert a_first == pytest.approx(0.5)
    assert c_first == pytest.approx(0.5)

    # with three items, p for action differs depending on which item claims it
    a_first = tag_entropy(["a", "c", "b"], vocab, tags)
    c_first = tag_entropy(["c", "a", "b"], vocab, tags)
    p_a = 1 / 6
    p_c = 1 / 3
    p_drama = 1 / 6
    assert a_first == pytest.approx(-p_a * np.log2(p_a) - p_drama * np.log2(p_drama))
    assert c_first == pytest.approx(-p_c * np.log2(p_c) - p_drama * np.log2(p_drama))


def test_entropy_same_single_tag():
    vocab = TagVocabulary(["action"])
    df = pd.DataFrame({"item_id": [1, 2, 3, 4], "tag": ["action"] * 4})
    tags = FrameTagSource(df)
    score = tag_entropy([1, 2, 3, 4], vocab, tags)
    p = 1 / 4
    assert score == pytest.approx(-p * np.log2(p))


def test_entropy_unavailable(vocab, tags):
    assert tag_entropy(None, vocab, tags) is None


def test_entropy_empty_list(vocab, tags):
    assert tag_entropy([], vocab, tags) == 0.0
    assert tag_entropy(ItemList(item_ids=[]), vocab, tags) == 0.0


def test_entropy_item_without_tags(vocab, tags):
    assert tag_entropy(["zzz"], vocab, tags) == 0.0


def test_entropy_out_of_vocabulary_only(vocab, tags):
    assert tag_entropy(["d"], vocab, tags) == 0.0


def test_entropy_ignores_duplicate_items(vocab, tags):
    assert tag_entropy(["a", "b", "a", "b", "b"], vocab, tags) == pytest.approx(tag_entropy(["a", "b"], vocab, tags))


def test_entropy_ignores_duplicate_tags(vocab):
    df = pd.DataFrame({"item_id": ["x", "x", "x"], "tag": ["action", "action", "drama"]})
    score = tag_entropy(["x"], vocab, FrameTagSource(df))
    # S = 2 after removing the repeated application
    assert score == pytest.approx(1.0)


def test_entropy_unknown_tags_add_no_terms(vocab):
    base = pd.DataFrame({"item_id": ["x", "y"], "tag": ["action", "drama"]})
    extra = pd.concat([base, pd.DataFrame({"item_id": ["x"], "tag": ["noir"]})], ignore_index=True)
    assert tag_entropy(["x", "y"], vocab, FrameTagSource(base)) == pytest.approx(1.0)

    # unknown tags still count toward the item's tag total, but never contribute terms
    with_noir = tag_entropy(["x", "y"], vocab, FrameTagSource(extra))
    p_x = 1 / 4
    p_y = 1 / 2
    assert with_noir == pytest.approx(-p_x * np.log2(p_x) - p_y * np.log2(p_y))



def test_entropy_non_negative(vocab, tags):
    for recs in [["a"], ["a", "b"], ["b", "c", "d"], ["a", "b", "c", "d"]]:
        score = tag_entropy(recs, vocab, tags)
        logger.info("%s: %f", recs, score)
        assert score >= 0.0
