"""Collaborator interfaces consumed by a narrowing session."""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Sequence


class RunState(Enum):
    """Execution engine run state."""
    UNINITIALIZED = "uninitialized"
    PAUSED = "paused"
    RUNNING = "running"


@dataclass(frozen=True)
class Symbol:
    """A named code region from the symbol table."""
    name: str
    address: int  # start address
    size: int

    @property
    def end(self) -> int:
        """First address past the symbol."""
        return self.address + self.size

    def contains(self, address: int) -> bool:
        return self.address <= address < self.end


class ExecutionEngine(Protocol):
    """Instrumented engine producing per-address hit counts."""

    def get_profile_samples(self) -> Sequence[tuple[int, int]]:
        ...

    def clear_profile_cache(self) -> None:
        ...

    def set_instrumentation_enabled(self, enabled: bool) -> None:
        ...

    def get_run_state(self) -> RunState:
        ...

    def set_run_state(self, state: RunState) -> None:
        ...


class SymbolTable(Protocol):
    """Address to symbol mapping."""

    def is_empty(self) -> bool:
        ...

    def resolve(self, address: int) -> str:
        ...

    def find_symbol_containing(self, address: int) -> Symbol | None:
        ...


class InstructionPatcher(Protocol):
    """Writes a forced-return instruction at a symbol's entry point."""

    def write_fixed_return_opcode(self, address: int) -> None:
        ...
