"""Symbol-level records produced from profiling samples."""

from dataclasses import dataclass

MAX_ADDRESS = 0xFFFFFFFF
MAX_HIT_COUNT = 0xFFFFFFFFFFFFFFFF


@dataclass(frozen=True)
class SymbolRecord:
    """One symbol seen in a recording window.

    symbol_name is the key: an evidence set never holds two records with
    the same name.
    """
    symbol_name: str
    address: int  # 32-bit guest address of the first sample seen for the symbol
    hit_count: int

    def __post_init__(self):
        if not self.symbol_name:
            raise ValueError("symbol_name must be non-empty")
        if not 0 <= self.address <= MAX_ADDRESS:
            raise ValueError(f"address out of 32-bit range: {self.address:#x}")
        if not 0 <= self.hit_count <= MAX_HIT_COUNT:
            raise ValueError(f"hit_count out of 64-bit range: {self.hit_count}")

    def matches(self, other: "SymbolRecord") -> bool:
        """Name-or-address equality.

        True when either the names or the addresses are equal. This is
        broader than symbol identity: two differently named records that
        share an address still match.
        """
        return self.symbol_name == other.symbol_name or self.address == other.address
