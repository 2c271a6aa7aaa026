"""Test configuration."""

import pytest

from code_diff.config import Settings
from code_diff.interfaces import RunState, Symbol
from code_diff.replay import MemoryPatcher, ReplayEngine, SymbolMap
from code_diff.session import NarrowingSession


class TrackingEngine(ReplayEngine):
    """Replay engine that remembers every run state it was put in."""

    def __init__(self, started: bool = True):
        super().__init__(started=started)
        self.state_history: list[RunState] = []

    def set_run_state(self, state: RunState) -> None:
        self.state_history.append(state)
        super().set_run_state(state)


@pytest.fixture
def symbol_table():
    """Three adjacent symbols: foo, bar, baz."""
    return SymbolMap(
        [
            Symbol(name="foo", address=0x100, size=0x100),
            Symbol(name="bar", address=0x200, size=0x100),
            Symbol(name="baz", address=0x300, size=0x100),
        ],
        unknown_label=" --- ",
    )


@pytest.fixture
def engine():
    return TrackingEngine()


@pytest.fixture
def patcher():
    return MemoryPatcher(opcode=0x4E800020)


@pytest.fixture
def test_settings():
    return Settings(show_status=False, pause_during_update=True)


@pytest.fixture
def session(engine, symbol_table, patcher, test_settings):
    """Idle session over the replay collaborators."""
    return NarrowingSession(engine, symbol_table, patcher, config=test_settings)


@pytest.fixture
def recording_session(session):
    session.start_recording()
    return session


@pytest.fixture
def map_file(tmp_path):
    """Symbol map file using both supported line layouts."""
    path = tmp_path / "game.map"
    path.write_text(
        "# comment line\n"
        ".text section layout\n"
        "00000100 00000100 foo\n"
        "00000200 00000100 00000200 4 bar\n"
        "\n"
        "00000300 100 baz qux\n",
        encoding="utf-8",
    )
    return path
