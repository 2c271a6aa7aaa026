"""Narrowing session: recording state machine and per-entry actions."""

from dataclasses import replace
from enum import Enum
from typing import Callable, Iterable

from rich.console import Console

from code_diff.config import Settings, settings as default_settings
from code_diff.core import EvidenceSet, EvidenceView, NarrowingEngine, Snapshot, SymbolRecord
from code_diff.errors import PreconditionError
from code_diff.interfaces import ExecutionEngine, InstructionPatcher, RunState, SymbolTable
from code_diff.render import build_rows, format_row

console = Console()

NOT_STARTED_MESSAGE = "Emulation must be started to record."
NO_SYMBOLS_MESSAGE = (
    "Symbol map not found.\n\n"
    "If one does not exist, generate one first (from addresses, a signature "
    "database or loaded modules)."
)
NOT_RECORDING_MESSAGE = "Start recording before marking code as executed or not executed."

HELP_TEXT = """\
Finds functions based on when they should be running.
A symbol map must be loaded prior to use.

'record': keeps track of which functions run. Stopping the recording
discards the current recording without any change to the lists.
'exclude' (code did not get executed): while recording, adds the recorded
functions to the exclude list, then resets the recording.
'include' (code has been executed): while recording, adds the recorded
functions to the include list, then resets the recording.

After both exclude and include have been used once, the exclude list is
subtracted from the include list and the remaining includes are shown.
Keep using exclude/include to narrow down the results.

Example: find a function that runs when HP is modified.
1. Start recording and play without letting HP change, then mark 'exclude'.
2. Immediately gain or lose HP and mark 'include'.
3. Repeat 1 or 2 to narrow down the results.
Includes should be short recordings focused on the behavior you want.

Marking 'include' twice keeps only functions that ran in both recordings.

'stub ROW' places a return instruction at the top of the symbol.
The lists live for the whole session and are lost when the tool exits."""


class SessionState(Enum):
    """Recording state of a narrowing session."""
    IDLE = "idle"
    RECORDING = "recording"


class NarrowingSession:
    """Owns one include/exclude pair and the recording state around it.

    Display rows are addressed the way the candidate list shows them: row 0
    is the header and row i is include record i - 1. Actions given the
    header row or an out-of-range row do nothing.
    """

    def __init__(
        self,
        engine: ExecutionEngine,
        symbols: SymbolTable,
        patcher: InstructionPatcher | None = None,
        config: Settings | None = None,
        on_navigate: Callable[[int], None] | None = None,
    ):
        """Initialize the session.

        Args:
            engine: Instrumented execution engine
            symbols: Symbol table used for name resolution and lookups
            patcher: Writes the forced-return opcode for stub_symbol
            config: Settings (defaults to the global settings)
            on_navigate: Called with an address by go_to_symbol/select_entry
        """
        self.engine = engine
        self.symbols = symbols
        self.patcher = patcher
        self.config = config or default_settings
        self.on_navigate = on_navigate

        self._include = EvidenceSet("include")
        self._exclude = EvidenceSet("exclude")
        self._narrowing = NarrowingEngine(self._include, self._exclude, symbols.resolve)
        self._state = SessionState.IDLE
        self._rows: list[str] = []
        self._stubbed: set[int] = set()

    # ------------------------------------------------------------------
    # Read-only views

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def marks_enabled(self) -> bool:
        """Whether mark_positive/mark_negative are currently allowed."""
        return self._state is SessionState.RECORDING

    @property
    def include(self) -> tuple[SymbolRecord, ...]:
        return self._include.as_tuple()

    @property
    def exclude(self) -> tuple[SymbolRecord, ...]:
        return self._exclude.as_tuple()

    @property
    def current_include_count(self) -> int:
        return len(self._include)

    @property
    def current_exclude_count(self) -> int:
        return len(self._exclude)

    @property
    def stubbed_addresses(self) -> frozenset[int]:
        """Addresses of include entries that have been stubbed."""
        return frozenset(self._stubbed)

    def rows(self) -> list[str]:
        """Displayed candidate list, header first.

        Empty until the first mark and again after reset.
        """
        return list(self._rows)

    def view(self) -> EvidenceView:
        return self._narrowing.view()

    # ------------------------------------------------------------------
    # State transitions

    def start_recording(self) -> None:
        """Enter the recording state.

        Raises:
            PreconditionError: If the engine has not been started or the
                symbol table is empty. The session stays idle.
        """
        if self._state is SessionState.RECORDING:
            return

        if self.engine.get_run_state() is RunState.UNINITIALIZED:
            raise PreconditionError(NOT_STARTED_MESSAGE)
        if self.symbols.is_empty():
            raise PreconditionError(NO_SYMBOLS_MESSAGE)

        self._invalidate_cache()
        self.engine.set_instrumentation_enabled(True)
        self._state = SessionState.RECORDING
        self._status("[green]●[/green] Recording started")

    def stop_recording(self) -> None:
        """Leave the recording state, discarding the current window."""
        if self._state is SessionState.IDLE:
            return

        self._invalidate_cache()
        self.engine.set_instrumentation_enabled(False)
        self._state = SessionState.IDLE
        self._status("[dim]Recording stopped[/dim]")

    def reset(self) -> None:
        """Clear both sets and the displayed list and return to idle."""
        if self._state is SessionState.RECORDING:
            self.stop_recording()
        self._invalidate_cache()
        self._rows = []
        self._stubbed.clear()
        self._include.clear()
        self._exclude.clear()
        self.engine.set_instrumentation_enabled(False)
        self._status("[dim]Session reset[/dim]")

    # ------------------------------------------------------------------
    # Evidence

    def mark_positive(self, snapshot: Iterable[tuple[int, int]] | None = None) -> EvidenceView:
        """Mark the current recording window as "this code executed".

        Args:
            snapshot: Samples to apply; taken from the engine when omitted

        Returns:
            Include/exclude view after the update

        Raises:
            PreconditionError: If the session is not recording
        """
        return self._update(snapshot, positive=True)

    def mark_negative(self, snapshot: Iterable[tuple[int, int]] | None = None) -> EvidenceView:
        """Mark the current recording window as "this code did not execute".

        Args:
            snapshot: Samples to apply; taken from the engine when omitted

        Returns:
            Include/exclude view after the update

        Raises:
            PreconditionError: If the session is not recording
        """
        return self._update(snapshot, positive=False)

    def _update(self, snapshot, positive: bool) -> EvidenceView:
        if not self.marks_enabled:
            raise PreconditionError(NOT_RECORDING_MESSAGE)

        old_state = self.engine.get_run_state()
        paused = self.config.pause_during_update and old_state is RunState.RUNNING
        if paused:
            self.engine.set_run_state(RunState.PAUSED)

        try:
            if snapshot is None:
                frozen = Snapshot.capture(self.engine.get_profile_samples())
            else:
                frozen = Snapshot.capture(snapshot)

            if positive:
                view = self._narrowing.apply_positive(frozen)
            else:
                view = self._narrowing.apply_negative(frozen)

            self._rows = build_rows(view.include)
            self._stubbed &= {r.address for r in view.include}
            # Start a fresh recording window.
            self.engine.clear_profile_cache()
        finally:
            if paused:
                self.engine.set_run_state(old_state)

        self._status(
            f"[dim]{'Included' if positive else 'Excluded'} {len(frozen)} samples → "
            f"Included: {len(view.include)}  Excluded: {len(view.exclude)}[/dim]"
        )
        return view

    # ------------------------------------------------------------------
    # Per-entry actions

    def _entry(self, row: int) -> SymbolRecord | None:
        if row < 1 or row > len(self._include):
            return None
        return self._include[row - 1]

    def _refresh_row(self, row: int, record: SymbolRecord) -> None:
        """Rewrite a display row with the symbol's current name and the recorded hits."""
        if row < len(self._rows):
            current = replace(record, symbol_name=self.symbols.resolve(record.address))
            self._rows[row] = format_row(current)

    def select_entry(self, row: int) -> int | None:
        """Navigate to the entry's recorded address.

        Returns:
            The address, or None for the header or an invalid row
        """
        record = self._entry(row)
        if record is None:
            return None
        self._refresh_row(row, record)
        self._navigate(record.address)
        return record.address

    def go_to_symbol(self, row: int) -> int | None:
        """Navigate to the start of the symbol containing the entry.

        Returns:
            Symbol start address, or None when there is nothing to go to
        """
        record = self._entry(row)
        if record is None:
            return None
        self._refresh_row(row, record)
        symbol = self.symbols.find_symbol_containing(record.address)
        if symbol is None:
            return None
        self._navigate(symbol.address)
        return symbol.address

    def stub_symbol(self, row: int) -> int | None:
        """Patch the entry's symbol to return immediately.

        This changes execution state outside the session and is not undone
        by reset.

        Returns:
            Patched symbol start address, or None when nothing was patched
        """
        record = self._entry(row)
        if record is None or self.patcher is None:
            return None
        self._refresh_row(row, record)
        symbol = self.symbols.find_symbol_containing(record.address)
        if symbol is None:
            return None
        self.patcher.write_fixed_return_opcode(symbol.address)
        self._stubbed.add(record.address)
        self._status(f"[yellow]Stubbed {symbol.name} at {symbol.address:#x}[/yellow]")
        return symbol.address

    def delete_include_entry(self, row: int) -> bool:
        """Remove one include entry and its display row.

        Returns:
            True if an entry was removed
        """
        if self._entry(row) is None:
            return False
        record = self._include.remove_at(row - 1)
        if row < len(self._rows):
            del self._rows[row]
        if not any(r.address == record.address for r in self._include):
            self._stubbed.discard(record.address)
        return True

    # ------------------------------------------------------------------
    # Helpers

    def _invalidate_cache(self) -> None:
        """Clear compiled code so the next run picks up the profiling mode."""
        old_state = self.engine.get_run_state()
        if old_state is RunState.RUNNING:
            self.engine.set_run_state(RunState.PAUSED)

        self.engine.clear_profile_cache()

        if old_state is RunState.RUNNING:
            self.engine.set_run_state(RunState.RUNNING)

    def _navigate(self, address: int) -> None:
        if self.on_navigate is not None:
            self.on_navigate(address)

    def _status(self, message: str) -> None:
        if self.config.show_status:
            console.print(message)


__all__ = [
    "HELP_TEXT",
    "NarrowingSession",
    "SessionState",
]
