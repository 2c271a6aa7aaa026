"""Symbol table loaded from a text symbol map."""

from bisect import bisect_right
from pathlib import Path
from typing import Iterable

from code_diff.config import settings
from code_diff.interfaces import Symbol


def _parse_hex(token: str) -> int | None:
    try:
        return int(token, 16)
    except ValueError:
        return None


def parse_map_line(line: str) -> Symbol | None:
    """Parse one symbol map line.

    Two layouts are accepted, numbers in hex:
        start size name...
        start size vaddr align name...

    Returns:
        Symbol, or None for blank, comment, section header or malformed lines
    """
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None

    parts = stripped.split()
    if len(parts) < 3:
        return None

    start = _parse_hex(parts[0])
    size = _parse_hex(parts[1])
    if start is None or size is None:
        return None

    name_parts = parts[2:]
    if len(parts) >= 5 and _parse_hex(parts[2]) is not None and _parse_hex(parts[3]) is not None:
        name_parts = parts[4:]

    name = " ".join(name_parts)
    if not name:
        return None
    return Symbol(name=name, address=start, size=size)


class SymbolMap:
    """Sorted symbol list with containing-symbol lookup."""

    def __init__(self, symbols: Iterable[Symbol] = (), unknown_label: str | None = None):
        """Initialize the map.

        Args:
            symbols: Symbols in any order
            unknown_label: Name returned by resolve for unmapped addresses
        """
        self.unknown_label = unknown_label if unknown_label is not None else settings.unknown_symbol_label
        if not self.unknown_label:
            raise ValueError("unknown_label must be non-empty")
        self._symbols: list[Symbol] = sorted(symbols, key=lambda s: s.address)
        self._starts: list[int] = [s.address for s in self._symbols]

    @classmethod
    def from_file(cls, path: Path, unknown_label: str | None = None) -> "SymbolMap":
        """Load a symbol map file, skipping lines that do not parse.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        if not path.exists():
            raise FileNotFoundError(f"Symbol map not found: {path}")
        text = path.read_text(encoding="utf-8", errors="replace")
        symbols = [s for s in (parse_map_line(line) for line in text.splitlines()) if s]
        return cls(symbols, unknown_label=unknown_label)

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self):
        return iter(self._symbols)

    def is_empty(self) -> bool:
        return not self._symbols

    def find_symbol_containing(self, address: int) -> Symbol | None:
        """Innermost symbol containing address.

        Nested entries are allowed, so the search walks back past symbols
        that end before address.
        """
        idx = bisect_right(self._starts, address) - 1
        while idx >= 0:
            symbol = self._symbols[idx]
            # Zero-sized symbols still own their start address.
            if symbol.contains(address) or symbol.address == address:
                return symbol
            idx -= 1
        return None

    def resolve(self, address: int) -> str:
        """Display name for address, or the unknown label."""
        symbol = self.find_symbol_containing(address)
        return symbol.name if symbol else self.unknown_label
