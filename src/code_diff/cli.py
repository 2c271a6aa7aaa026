"""CLI interface for the code diff tool."""

from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from code_diff.config import settings
from code_diff.errors import CodeDiffError
from code_diff.output import log_console_output
from code_diff.render import build_table
from code_diff.replay import MemoryPatcher, ReplayEngine, SymbolMap, load_profile
from code_diff.session import HELP_TEXT, NarrowingSession

console = Console()

STEP_KINDS = ("include", "exclude")


def _parse_step(ctx, param, values: tuple[str, ...]) -> list[tuple[str, Path]]:
    """Parse --step values of the form include:FILE or exclude:FILE."""
    steps = []
    for value in values:
        kind, sep, path = value.partition(":")
        kind = kind.strip().lower()
        if not sep or kind not in STEP_KINDS or not path:
            raise click.BadParameter(f"expected include:FILE or exclude:FILE, got {value!r}")
        steps.append((kind, Path(path)))
    return steps


def build_session(symbol_map: Path) -> tuple[NarrowingSession, ReplayEngine, MemoryPatcher]:
    """Create a session over replay collaborators for a symbol map file."""
    symbols = SymbolMap.from_file(symbol_map)
    engine = ReplayEngine(started=True)
    patcher = MemoryPatcher()
    session = NarrowingSession(engine, symbols, patcher)
    return session, engine, patcher


def apply_step(session: NarrowingSession, engine: ReplayEngine, kind: str, profile: Path) -> None:
    """Replay a profile into the engine and mark it as included or excluded."""
    engine.record_hits(load_profile(profile))
    if kind == "include":
        session.mark_positive()
    else:
        session.mark_negative()


def print_candidates(session: NarrowingSession) -> None:
    """Print the include list and set sizes."""
    table = build_table(
        session.include,
        stubbed=set(session.stubbed_addresses),
        limit=settings.max_display_rows,
        title="Candidates",
    )
    console.print(table)
    console.print(
        f"[cyan]Excluded:[/cyan] {session.current_exclude_count}    "
        f"[cyan]Included:[/cyan] {session.current_include_count}"
    )


def handle_shell_command(command: str, session: NarrowingSession, engine: ReplayEngine) -> bool:
    """Run one shell command.

    Args:
        command: Raw command line, e.g. "/include run1.json"
        session: Session to act on
        engine: Engine the session records from

    Returns:
        False when the shell should exit
    """
    name, _, arg = command.strip().partition(" ")
    name = name.lower().lstrip("/")
    arg = arg.strip()

    if name in ("exit", "quit"):
        console.print("[cyan]Exiting.[/cyan]")
        return False

    if name == "help":
        console.print(Panel(HELP_TEXT, title="Code Diff Tool Help", border_style="cyan"))
        console.print("[dim]Commands: /record /stop /include FILE /exclude FILE /list "
                      "/delete ROW /goto ROW /stub ROW /reset /exit[/dim]")
    elif name == "record":
        session.start_recording()
        console.print("[green]✓[/green] Recording")
    elif name == "stop":
        session.stop_recording()
        console.print("[green]✓[/green] Recording stopped")
    elif name in STEP_KINDS:
        if not arg:
            console.print(f"[yellow]Usage: /{name} FILE[/yellow]")
            return True
        apply_step(session, engine, name, Path(arg))
        print_candidates(session)
    elif name == "list":
        print_candidates(session)
    elif name == "reset":
        session.reset()
        console.print("[green]✓[/green] Reset all")
    elif name in ("delete", "goto", "stub"):
        if not arg.isdigit():
            console.print(f"[yellow]Usage: /{name} ROW[/yellow]")
            return True
        row = int(arg)
        if name == "delete":
            done = session.delete_include_entry(row)
            result = f"Deleted row {row}" if done else None
        elif name == "goto":
            address = session.go_to_symbol(row)
            result = f"Symbol starts at {address:#010x}" if address is not None else None
        else:
            address = session.stub_symbol(row)
            result = f"Stubbed symbol at {address:#010x}" if address is not None else None
        if result is None:
            console.print(f"[dim]Nothing to do for row {row}[/dim]")
        else:
            console.print(f"[green]✓[/green] {result}")
    else:
        console.print(f"[yellow]Unknown command: {command.strip()}. Type /help[/yellow]")

    return True


@click.group()
@click.version_option()
def cli() -> None:
    """Code Diff - find functions by when they run."""
    pass


@cli.command()
@click.argument("symbol_map", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--limit",
    "-l",
    type=int,
    default=50,
    help="Maximum number of symbols to list (default: 50)"
)
def symbols(symbol_map: Path, limit: int) -> None:
    """Load a symbol map and list its symbols.

    Example:
        code-diff symbols game.map --limit 20
    """
    try:
        symbol_table = SymbolMap.from_file(symbol_map)

        if symbol_table.is_empty():
            console.print("[yellow]No symbols found[/yellow]")
            return

        table = Table(title=f"Symbols (showing {min(limit, len(symbol_table))} of {len(symbol_table)})")
        table.add_column("Address", style="cyan", no_wrap=True)
        table.add_column("Size", justify="right", style="yellow")
        table.add_column("Name", style="green")

        for symbol in list(symbol_table)[:limit]:
            table.add_row(f"{symbol.address:08x}", f"{symbol.size:x}", symbol.name)

        console.print(table)

    except Exception as e:
        console.print(f"[red]Error: {str(e)}[/red]")
        raise click.Abort()


@cli.command()
@click.argument("symbol_map", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--step",
    "-s",
    "steps",
    multiple=True,
    required=True,
    callback=_parse_step,
    help="include:FILE or exclude:FILE, applied in the order given"
)
@click.option(
    "--log-output",
    "-l",
    type=click.Path(path_type=Path),
    help="Save all console output to log file"
)
def narrow(symbol_map: Path, steps: list[tuple[str, Path]], log_output: Path | None) -> None:
    """Apply recorded profiles in order and show the remaining candidates.

    Example:
        code-diff narrow game.map -s exclude:idle.json -s include:hp_change.json
    """
    with log_console_output(log_output):
        try:
            session, engine, _ = build_session(symbol_map)
            session.start_recording()

            for kind, profile in steps:
                console.print(f"[dim]{kind}: {profile}[/dim]")
                apply_step(session, engine, kind, profile)

            session.stop_recording()
            print_candidates(session)

        except (CodeDiffError, FileNotFoundError, ValueError) as e:
            console.print(f"[red]Error: {str(e)}[/red]")
            raise click.Abort()


@cli.command()
@click.argument("symbol_map", type=click.Path(exists=True, path_type=Path))
def shell(symbol_map: Path) -> None:
    """Interactive narrowing session over recorded profiles.

    Example:
        code-diff shell game.map
    """
    try:
        session, engine, _ = build_session(symbol_map)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {str(e)}[/red]")
        raise click.Abort()

    console.print("[bold cyan]Code Diff Tool[/bold cyan]")
    console.print("[dim]Type /help for usage, /exit to quit[/dim]\n")

    while True:
        try:
            user_input = console.input("[bold cyan]code-diff>[/bold cyan] ").strip()
        except (EOFError, KeyboardInterrupt):
            console.print("\n[cyan]Exiting.[/cyan]")
            break

        if not user_input:
            continue

        try:
            if not handle_shell_command(user_input, session, engine):
                break
        except (CodeDiffError, ValueError) as e:
            console.print(f"[red]{str(e)}[/red]")


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
