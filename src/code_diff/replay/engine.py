"""In-memory execution engine and patcher fed by recorded profiles."""

import threading
from collections import Counter
from typing import Iterable

from rich.console import Console

from code_diff.config import settings
from code_diff.interfaces import RunState

console = Console()


class ReplayEngine:
    """Execution engine stand-in that accumulates replayed hit counts.

    Hits are only counted while instrumentation is enabled, mirroring a
    profiling JIT. record_hits may be called from another thread; sample
    reads return a copy taken under the lock.
    """

    def __init__(self, started: bool = True, show_output: bool = False):
        """Initialize the engine.

        Args:
            started: Start PAUSED when True, UNINITIALIZED otherwise
            show_output: Whether to print engine events
        """
        self._run_state = RunState.PAUSED if started else RunState.UNINITIALIZED
        self._instrumented = False
        self._hits: Counter[int] = Counter()
        self._order: list[int] = []
        self._lock = threading.Lock()
        self.show_output = show_output
        self.cache_clears = 0

    @property
    def instrumentation_enabled(self) -> bool:
        return self._instrumented

    def record_hits(self, samples: Iterable[tuple[int, int]]) -> int:
        """Add replayed (address, hits) samples to the current window.

        Returns:
            Number of samples counted (0 while instrumentation is off)
        """
        if not self._instrumented:
            if self.show_output:
                console.print("[yellow]⚠ Instrumentation disabled, samples dropped[/yellow]")
            return 0

        counted = 0
        with self._lock:
            for address, hits in samples:
                if address not in self._hits:
                    self._order.append(address)
                self._hits[address] += hits
                counted += 1
        return counted

    def get_profile_samples(self) -> list[tuple[int, int]]:
        """Per-address hit counts in first-hit order."""
        with self._lock:
            return [(address, self._hits[address]) for address in self._order]

    def clear_profile_cache(self) -> None:
        with self._lock:
            self._hits.clear()
            self._order.clear()
        self.cache_clears += 1

    def set_instrumentation_enabled(self, enabled: bool) -> None:
        self._instrumented = enabled
        if self.show_output:
            console.print(f"[dim]Profiling {'enabled' if enabled else 'disabled'}[/dim]")

    def get_run_state(self) -> RunState:
        return self._run_state

    def set_run_state(self, state: RunState) -> None:
        self._run_state = state


class MemoryPatcher:
    """Records forced-return patches instead of writing guest memory."""

    def __init__(self, opcode: int | None = None):
        self.opcode = opcode if opcode is not None else settings.stub_opcode
        self.patches: dict[int, int] = {}

    def write_fixed_return_opcode(self, address: int) -> None:
        self.patches[address] = self.opcode
