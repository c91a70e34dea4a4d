import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from snapstack.serialization import to_json
from snapstack.session import CliSettings, echo_json, open_manager


def _snippet(record: object, width: int = 60) -> str:
    text = to_json(record).decode("utf-8")
    return text if len(text) <= width else text[: width - 3] + "..."


def log(settings: CliSettings) -> None:
    manager = open_manager(settings)
    records = manager.sequence()
    console = Console()

    if not records:
        console.print(f"No states stored under '{escape(settings.key)}'.")
        return

    cursor = manager.current()
    table = Table(title=f"States: {escape(settings.key)}", show_header=True, header_style="bold", box=None, padding=(0, 1))
    table.add_column("", width=1)
    table.add_column("ID", justify="right")
    table.add_column("State", overflow="ellipsis", min_width=20)

    for index, record in enumerate(records):
        is_current = index == cursor
        table.add_row(
            "[green]>[/green]" if is_current else "",
            str(index),
            escape(_snippet(record)),
            style="" if is_current else "dim",
        )
    console.print(table)


def status(settings: CliSettings, json_output: bool) -> None:
    manager = open_manager(settings)
    summary = {
        "key": settings.key,
        "count": len(manager.sequence()),
        "current": manager.current(),
        "first": manager.first(),
        "last": manager.last(),
    }
    if json_output:
        echo_json(summary)
        return

    console = Console()
    console.print(f"Key: [bold]{escape(settings.key)}[/bold]")
    console.print(f"States: {summary['count']}")
    console.print(f"Current index: {summary['current']} (last {summary['last']})")


def keys(settings: CliSettings) -> None:
    for key in settings.storage().keys():
        typer.echo(key)
