"""Include/exclude narrowing over successive recording windows.

The include set is the analyst's hypothesis: symbols that ran every time the
behavior of interest happened. The exclude set is a denylist of every symbol
ever seen running while the behavior did not happen. Positive evidence
intersects the include set with what just ran; negative evidence grows the
exclude set and prunes the newly excluded symbols out of the include set.

Matching against the include set uses name-or-address equality (see
SymbolRecord.matches), so a record can be kept or pruned purely because its
address collides with another symbol's. Matching against the exclude set
when filtering fresh evidence is by name only.
"""

from typing import Iterable, NamedTuple

from code_diff.core.evidence_set import EvidenceSet
from code_diff.core.records import SymbolRecord
from code_diff.core.snapshot import Resolver, Sample, deduplicate


class EvidenceView(NamedTuple):
    """Read-only copy of both sets after an update."""
    include: tuple[SymbolRecord, ...]
    exclude: tuple[SymbolRecord, ...]


class _MatchIndex:
    """Name and address lookup over a batch of records."""

    def __init__(self, records: Iterable[SymbolRecord]):
        self.names: set[str] = set()
        self.addresses: set[int] = set()
        for record in records:
            self.names.add(record.symbol_name)
            self.addresses.add(record.address)

    def matches(self, record: SymbolRecord) -> bool:
        return record.symbol_name in self.names or record.address in self.addresses


class NarrowingEngine:
    """Applies positive and negative evidence to an include/exclude pair."""

    def __init__(self, include: EvidenceSet, exclude: EvidenceSet, resolve: Resolver):
        """Initialize the engine.

        Args:
            include: Hypothesis set, mutated in place
            exclude: Denylist, mutated in place (grows only)
            resolve: Maps an address to its display name
        """
        self.include = include
        self.exclude = exclude
        self.resolve = resolve

    def view(self) -> EvidenceView:
        return EvidenceView(self.include.as_tuple(), self.exclude.as_tuple())

    def apply_positive(self, snapshot: Iterable[Sample]) -> EvidenceView:
        """Record that the sampled code ran while the behavior happened."""
        recorded = deduplicate(snapshot, self.resolve)

        if not self.include and not self.exclude:
            self.include.replace_all(recorded)
            return self.view()

        current = [r for r in recorded if not self.exclude.contains_name(r.symbol_name)]

        if self.include:
            # Keep only hypotheses corroborated by this window.
            corroborated = _MatchIndex(current)
            self.include.remove_where(lambda r: not corroborated.matches(r))
        else:
            # First positive evidence after negative evidence only.
            self.include.replace_all(recorded)
            excluded = _MatchIndex(self.exclude)
            self.include.remove_where(excluded.matches)

        return self.view()

    def apply_negative(self, snapshot: Iterable[Sample]) -> EvidenceView:
        """Record that the sampled code ran while the behavior did not happen."""
        recorded = deduplicate(snapshot, self.resolve)

        if not self.include and not self.exclude:
            self.exclude.replace_all(recorded)
            return self.view()

        if not self.exclude:
            self.exclude.replace_all(recorded)
            current = recorded
        else:
            # Only the delta needs reconciling; older exclude entries were
            # applied to include when they were added.
            current = []
            for record in recorded:
                if not self.exclude.contains_name(record.symbol_name):
                    self.exclude.insert_sorted(record)
                    current.append(record)

        if self.include:
            pruned = _MatchIndex(current)
            self.include.remove_where(pruned.matches)

        return self.view()
