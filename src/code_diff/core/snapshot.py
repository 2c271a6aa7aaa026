"""Snapshot capture and symbol-level deduplication."""

from dataclasses import dataclass
from typing import Callable, Iterable

from code_diff.core.records import SymbolRecord

Sample = tuple[int, int]  # (address, hit_count)
Resolver = Callable[[int], str]


@dataclass(frozen=True)
class Snapshot:
    """Immutable copy of one recording window's raw samples."""
    samples: tuple[Sample, ...]

    @classmethod
    def capture(cls, samples: Iterable[Sample]) -> "Snapshot":
        """Freeze samples so later instrumentation writes cannot leak in."""
        return cls(tuple((int(address), int(hits)) for address, hits in samples))

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self):
        return iter(self.samples)


def deduplicate(snapshot: Iterable[Sample], resolve: Resolver) -> list[SymbolRecord]:
    """Collapse raw samples to one record per resolved symbol name.

    The first sample seen for a name wins; later samples resolving to the
    same name are dropped, hit counts included. Sample order comes from the
    execution engine and is not otherwise meaningful, so which address
    survives is an arbitrary but stable tie-break.

    Args:
        snapshot: Raw (address, hit_count) samples
        resolve: Maps an address to its display name

    Returns:
        Records sorted ascending by symbol name
    """
    seen: set[str] = set()
    records: list[SymbolRecord] = []

    for address, hits in snapshot:
        name = resolve(address)
        if name in seen:
            continue
        seen.add(name)
        records.append(SymbolRecord(symbol_name=name, address=address, hit_count=hits))

    records.sort(key=lambda r: r.symbol_name)
    return records
