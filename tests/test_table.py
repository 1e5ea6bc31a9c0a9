"""
Tests for KeyedTable: hashing, probing, tombstones, full-table handling.
"""

import pytest

from folio_core.table import Deleted, Empty, KeyedTable, Occupied, SlotRef, normalize_key, symbol_hash


# Single-letter keys hash to their byte value; in a 7-slot table A, H, O and V
# all start probing at slot 2.
COLLIDING = ["A", "H", "O", "V"]


def _make_table(keys, capacity=7):
    t = KeyedTable(capacity)
    for i, k in enumerate(keys):
        t.upsert(k, i)
    return t


# --- Hashing ---


def test_normalize_key_uppercases():
    assert normalize_key("aapl") == "AAPL"


def test_symbol_hash_polynomial():
    assert symbol_hash("A") == 65
    assert symbol_hash("AB") == (65 * 31 + 66) % 101


def test_symbol_hash_case_insensitive():
    assert symbol_hash("msft") == symbol_hash("MSFT")


def test_colliding_keys_share_origin():
    assert {symbol_hash(k, 7) for k in COLLIDING} == {2}


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        KeyedTable(0)


# --- Upsert / lookup ---


def test_new_table_all_empty():
    t = KeyedTable(5)
    assert len(t) == 0
    assert all(isinstance(t.slot(i), Empty) for i in range(5))


def test_upsert_then_lookup():
    t = KeyedTable()
    ref = t.upsert("aapl", 1)
    assert not ref.found
    assert t.lookup_exact("AAPL") == 1
    assert t.lookup_exact("Aapl") == 1
    assert "aapl" in t
    assert len(t) == 1


def test_stored_key_is_canonical():
    t = KeyedTable()
    ref = t.upsert("tsla", "x")
    slot = t.slot(ref.index)
    assert isinstance(slot, Occupied)
    assert slot.key == "TSLA"


def test_upsert_existing_overwrites():
    t = KeyedTable()
    t.upsert("IBM", 1)
    ref = t.upsert("ibm", 2)
    assert ref.found
    assert t.lookup_exact("IBM") == 2
    assert len(t) == 1


def test_lookup_missing_returns_none():
    t = _make_table(["A"])
    assert t.lookup_exact("Z") is None


def test_linear_probing_places_collisions_consecutively():
    t = _make_table(COLLIDING[:3])
    assert t.find_slot("A") == SlotRef(2, found=True)
    assert t.find_slot("H") == SlotRef(3, found=True)
    assert t.find_slot("O") == SlotRef(4, found=True)


def test_probe_wraps_around():
    # 'E' (69) and 'L' (76) both start at slot 6, the last one.
    t = KeyedTable(7)
    t.upsert("E", 1)
    t.upsert("L", 2)
    assert t.find_slot("E").index == 6
    assert t.find_slot("L").index == 0


# --- Tombstones ---


def test_delete_marks_slot_deleted():
    t = _make_table(COLLIDING[:3])
    assert t.delete("h")
    assert isinstance(t.slot(3), Deleted)
    assert len(t) == 2
    assert t.lookup_exact("H") is None


def test_delete_missing_returns_false():
    t = _make_table(["A"])
    assert not t.delete("Q")


def test_deleted_slot_exposes_no_entry():
    t = _make_table(COLLIDING[:2])
    t.delete("H")
    state = t.slot(3)
    assert not hasattr(state, "value")
    assert list(t.items()) == [("A", 0)]


def test_lookup_probes_through_tombstone():
    t = _make_table(COLLIDING[:3])
    t.delete("H")
    assert t.lookup_exact("O") == 2


def test_insert_reuses_first_tombstone():
    t = _make_table(COLLIDING[:3])
    t.delete("H")
    ref = t.find_slot("V")
    assert ref == SlotRef(3, found=False)
    t.upsert("V", 9)
    assert t.slot(3) == Occupied("V", 9)


def test_existing_key_past_tombstone_is_not_duplicated():
    t = _make_table(COLLIDING[:3])
    t.delete("H")
    ref = t.upsert("O", 42)
    assert ref == SlotRef(4, found=True)
    assert isinstance(t.slot(3), Deleted)
    assert len(t) == 2
    assert t.lookup_exact("O") == 42


def test_tombstone_requires_found_ref():
    t = KeyedTable(7)
    with pytest.raises(ValueError):
        t.tombstone(t.find_slot("A"))


# --- Full table ---


def test_capacity_plus_one_insert_is_full():
    t = _make_table(["A", "B", "C"], capacity=3)
    ref = t.upsert("D", 3)
    assert ref.is_full
    assert t.lookup_exact("D") is None
    assert len(t) == 3


def test_full_table_still_finds_existing_keys():
    t = _make_table(["A", "B", "C"], capacity=3)
    assert t.lookup_exact("C") == 2
    assert t.upsert("b", 7).found


def test_insert_after_delete_in_full_table():
    t = _make_table(["A", "B", "C"], capacity=3)
    t.delete("B")
    ref = t.upsert("D", 3)
    assert not ref.is_full
    assert ref.index == 0
    assert t.lookup_exact("D") == 3


def test_store_into_full_ref_raises():
    t = _make_table(["A", "B", "C"], capacity=3)
    with pytest.raises(ValueError):
        t.store(t.find_slot("D"), "D", 3)


def test_lookup_missing_in_saturated_table_with_tombstone():
    t = _make_table(["A", "B", "C"], capacity=3)
    t.delete("B")
    assert t.lookup_exact("D") is None
    assert t.lookup_exact("B") is None
    assert t.lookup_exact("A") == 0


# --- Iteration ---


def test_items_in_slot_order():
    t = KeyedTable(7)
    t.upsert("B", "b")  # 66 % 7 = 3
    t.upsert("A", "a")  # 65 % 7 = 2
    assert [k for k, _ in t.items()] == ["A", "B"]


def test_for_each_occupied_visits_live_entries():
    t = _make_table(COLLIDING[:3])
    t.delete("A")
    seen = []
    t.for_each_occupied(lambda k, v: seen.append((k, v)))
    assert seen == [("H", 1), ("O", 2)]


def test_clear_resets_table():
    t = _make_table(COLLIDING)
    t.clear()
    assert len(t) == 0
    assert list(t.items()) == []
