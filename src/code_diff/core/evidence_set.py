"""Name-sorted, unique-by-name record sets."""

from bisect import bisect_left
from collections import Counter
from typing import Callable, Iterable, Iterator

from code_diff.core.records import SymbolRecord


class EvidenceSet:
    """Ordered set of SymbolRecord, strictly ascending by symbol_name.

    Membership only changes through insert_sorted, replace_all, remove_where
    and remove_at, which all keep the ordering invariant. A parallel list of
    names backs the binary searches and an address counter answers address
    lookups without scanning.
    """

    def __init__(self, label: str = "set"):
        """Initialize an empty set.

        Args:
            label: Name used in error messages (e.g. "include", "exclude")
        """
        self.label = label
        self._records: list[SymbolRecord] = []
        self._names: list[str] = []
        self._addresses: Counter[int] = Counter()

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    def __iter__(self) -> Iterator[SymbolRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> SymbolRecord:
        return self._records[index]

    def __repr__(self) -> str:
        return f"EvidenceSet({self.label!r}, {len(self)} records)"

    def as_tuple(self) -> tuple[SymbolRecord, ...]:
        """Read-only view of the current records."""
        return tuple(self._records)

    def _position(self, name: str) -> int:
        return bisect_left(self._names, name)

    def contains_name(self, name: str) -> bool:
        pos = self._position(name)
        return pos < len(self._names) and self._names[pos] == name

    def contains_address(self, address: int) -> bool:
        return self._addresses[address] > 0

    def contains(self, record: SymbolRecord) -> bool:
        """True if any record is name-or-address equal to record."""
        return self.contains_name(record.symbol_name) or self.contains_address(record.address)

    def insert_sorted(self, record: SymbolRecord) -> int:
        """Insert a record whose name is not yet present.

        Returns:
            Index the record was inserted at

        Raises:
            ValueError: If a record with the same name already exists
        """
        pos = self._position(record.symbol_name)
        if pos < len(self._names) and self._names[pos] == record.symbol_name:
            raise ValueError(f"{self.label}: duplicate symbol {record.symbol_name!r}")
        self._records.insert(pos, record)
        self._names.insert(pos, record.symbol_name)
        self._addresses[record.address] += 1
        return pos

    def replace_all(self, records: Iterable[SymbolRecord]) -> None:
        """Replace the whole set.

        Raises:
            ValueError: If records are not strictly ascending by name
        """
        new_records = list(records)
        for prev, cur in zip(new_records, new_records[1:]):
            if not prev.symbol_name < cur.symbol_name:
                raise ValueError(
                    f"{self.label}: records must be strictly sorted by name "
                    f"({prev.symbol_name!r} before {cur.symbol_name!r})"
                )
        self._records = new_records
        self._reindex()

    def remove_where(self, predicate: Callable[[SymbolRecord], bool]) -> int:
        """Remove every record matching predicate, keeping survivor order.

        Returns:
            Number of records removed
        """
        kept = [r for r in self._records if not predicate(r)]
        removed = len(self._records) - len(kept)
        if removed:
            self._records = kept
            self._reindex()
        return removed

    def remove_at(self, index: int) -> SymbolRecord:
        """Remove and return the record at index."""
        record = self._records.pop(index)
        del self._names[index]
        self._addresses[record.address] -= 1
        if self._addresses[record.address] <= 0:
            del self._addresses[record.address]
        return record

    def clear(self) -> None:
        self._records = []
        self._reindex()

    def _reindex(self) -> None:
        self._names = [r.symbol_name for r in self._records]
        self._addresses = Counter(r.address for r in self._records)
