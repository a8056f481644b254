from __future__ import annotations

from conftest import make_pin
from pinboard.ranking import interest_weight, rank_feed


def _feed(categories):
    return [make_pin(f"p{i}", category=c) for i, c in enumerate(categories)]


def test_interest_order_with_recency_tiebreak():
    feed = _feed(["tech", "art", "food", "art"])
    ranked = rank_feed(feed, {"art": 5, "tech": 2})
    assert [p.category for p in ranked] == ["art", "art", "tech", "food"]
    assert [p.pin_id for p in ranked] == ["p1", "p3", "p0", "p2"]


def test_empty_mapping_is_identity():
    feed = _feed(["b", "a", "c"])
    assert rank_feed(feed, {}) == feed


def test_all_zero_mapping_is_identity():
    feed = _feed(["b", "a", "c", "a"])
    assert rank_feed(feed, {"a": 0, "b": 0}) == feed


def test_equal_weights_keep_relative_order():
    feed = _feed(["x", "y", "x", "z", "y", "x"])
    ranked = rank_feed(feed, {"x": 1, "y": 1, "z": 4})
    assert [p.pin_id for p in ranked] == ["p3", "p0", "p1", "p2", "p4", "p5"]


def test_category_lookup_is_exact():
    pin = make_pin("p", category="Art")
    assert interest_weight(pin, {"art": 3}) == 0
    assert interest_weight(pin, {"Art": 3}) == 3


def test_empty_category_uses_empty_key():
    pins = [make_pin("a", category="food"), make_pin("b")]
    assert interest_weight(pins[1], {"": 7}) == 7
    assert [p.pin_id for p in rank_feed(pins, {"": 7})] == ["b", "a"]


def test_input_list_untouched():
    feed = _feed(["tech", "art"])
    snapshot = list(feed)
    rank_feed(feed, {"art": 1})
    assert feed == snapshot
