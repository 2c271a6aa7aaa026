"""Console output mirroring to a log file."""

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO

from rich.console import Console

console = Console()


class TeeOutput:
    """Stream that forwards every write to the terminal and to a log file."""

    def __init__(self, terminal: TextIO, log_file: TextIO):
        self.terminal = terminal
        self.log_file = log_file

    def write(self, text: str) -> int:
        for stream in (self.terminal, self.log_file):
            stream.write(text)
            stream.flush()
        return len(text)

    def flush(self):
        self.terminal.flush()
        self.log_file.flush()

    def isatty(self):
        return self.terminal.isatty()


@contextmanager
def log_console_output(log_path: Path | None) -> Iterator[None]:
    """Mirror stdout into log_path for the duration of the block.

    A None path leaves stdout untouched. stdout is restored and the log
    closed even when the block raises.
    """
    if log_path is None:
        yield
        return

    console.print(f"[dim]Logging console output to: {log_path.name}[/dim]")
    terminal = sys.stdout
    with open(log_path, "w", encoding="utf-8") as log_file:
        sys.stdout = TeeOutput(terminal, log_file)
        try:
            yield
        finally:
            sys.stdout = terminal
