"""Replay collaborators: file-backed symbols, recorded profiles, in-memory engine."""

from code_diff.replay.engine import MemoryPatcher, ReplayEngine
from code_diff.replay.profile import load_profile, parse_profile
from code_diff.replay.symbol_map import SymbolMap, parse_map_line

__all__ = [
    "MemoryPatcher",
    "ReplayEngine",
    "SymbolMap",
    "load_profile",
    "parse_map_line",
    "parse_profile",
]
