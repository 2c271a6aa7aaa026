"""Evidence narrowing core: records, snapshots, evidence sets and the engine."""

from code_diff.core.evidence_set import EvidenceSet
from code_diff.core.narrowing import EvidenceView, NarrowingEngine
from code_diff.core.records import SymbolRecord
from code_diff.core.snapshot import Snapshot, deduplicate

__all__ = [
    "EvidenceSet",
    "EvidenceView",
    "NarrowingEngine",
    "Snapshot",
    "SymbolRecord",
    "deduplicate",
]
