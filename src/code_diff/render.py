"""Display formatting for candidate lists."""

from typing import Iterable

from rich.table import Table

from code_diff.core.records import SymbolRecord

HEADER_ROW = "Address\tHits\tSymbol"


def format_row(record: SymbolRecord) -> str:
    """Format a record as a tab-separated display row.

    Tabs inside the symbol name are replaced so the row always splits into
    exactly three columns.
    """
    symbol = record.symbol_name.replace("\t", "  ")
    return f"{record.address:x}\t{record.hit_count}\t{symbol}"


def build_rows(include: Iterable[SymbolRecord]) -> list[str]:
    """Header row followed by one row per include record."""
    return [HEADER_ROW] + [format_row(r) for r in include]


def build_table(
    include: Iterable[SymbolRecord],
    stubbed: set[int] | None = None,
    limit: int | None = None,
    title: str | None = None,
) -> Table:
    """Render include records as a rich table.

    Args:
        include: Records to show, in display order
        stubbed: Record addresses whose symbol has been stubbed (shown in red)
        limit: Maximum number of rows to show
        title: Table title

    Returns:
        Table whose "Row" column matches the session's display row indices
    """
    stubbed = stubbed or set()
    table = Table(title=title)
    table.add_column("Row", justify="right", style="dim")
    table.add_column("Address", style="cyan", no_wrap=True)
    table.add_column("Hits", justify="right", style="yellow")
    table.add_column("Symbol", style="green")

    records = list(include)
    shown = records if limit is None else records[:limit]
    for row, record in enumerate(shown, start=1):
        address, hits, symbol = format_row(record).split("\t")
        style = "red" if record.address in stubbed else None
        table.add_row(str(row), address, hits, symbol, style=style)

    if limit is not None and len(records) > limit:
        table.caption = f"{len(records) - limit} more not shown"
    return table
