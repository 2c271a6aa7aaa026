"""Tests for the evidence set store."""

import pytest

from code_diff.core import EvidenceSet, SymbolRecord


def rec(name, address, hits=1):
    return SymbolRecord(name, address, hits)


@pytest.fixture
def evidence():
    s = EvidenceSet("include")
    s.replace_all([rec("alpha", 0x10), rec("beta", 0x20), rec("gamma", 0x30)])
    return s


def test_starts_empty():
    s = EvidenceSet()
    assert len(s) == 0
    assert not s
    assert s.as_tuple() == ()


def test_contains_by_name_or_address(evidence):
    assert evidence.contains_name("beta")
    assert not evidence.contains_name("delta")
    assert evidence.contains_address(0x30)
    assert not evidence.contains_address(0x40)
    assert evidence.contains(rec("delta", 0x20))
    assert evidence.contains(rec("alpha", 0x99))
    assert not evidence.contains(rec("delta", 0x40))


def test_insert_sorted_keeps_order(evidence):
    pos = evidence.insert_sorted(rec("delta", 0x40))
    assert pos == 2
    assert [r.symbol_name for r in evidence] == ["alpha", "beta", "delta", "gamma"]
    assert evidence.contains_address(0x40)


def test_insert_duplicate_name_raises(evidence):
    with pytest.raises(ValueError):
        evidence.insert_sorted(rec("beta", 0x99))
    assert len(evidence) == 3


def test_replace_all_rejects_unsorted():
    s = EvidenceSet()
    with pytest.raises(ValueError):
        s.replace_all([rec("b", 1), rec("a", 2)])
    with pytest.raises(ValueError):
        s.replace_all([rec("a", 1), rec("a", 2)])
    assert len(s) == 0


def test_remove_where_preserves_survivor_order(evidence):
    removed = evidence.remove_where(lambda r: r.symbol_name == "beta")
    assert removed == 1
    assert [r.symbol_name for r in evidence] == ["alpha", "gamma"]
    assert not evidence.contains_address(0x20)
    assert evidence.remove_where(lambda r: False) == 0


def test_remove_at_updates_indexes(evidence):
    record = evidence.remove_at(0)
    assert record.symbol_name == "alpha"
    assert not evidence.contains_name("alpha")
    assert not evidence.contains_address(0x10)
    assert evidence[0].symbol_name == "beta"


def test_shared_address_survives_partial_removal():
    s = EvidenceSet()
    s.replace_all([rec("a", 0x10), rec("b", 0x10)])
    s.remove_at(0)
    assert s.contains_address(0x10)


def test_clear(evidence):
    evidence.clear()
    assert len(evidence) == 0
    assert not evidence.contains_name("alpha")
