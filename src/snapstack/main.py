from collections.abc import Sequence
from pathlib import Path
from sys import exit
from typing import Annotated, Any, final, override

import typer
from typer.core import TyperGroup

from snapstack.exceptions import SnapstackError
from snapstack.session import DEFAULT_KEY, CliSettings

app: typer.Typer


@final
class SnapstackGroup(TyperGroup):
    @override
    def main(  # pyright: ignore[reportAny]
        self,
        args: Sequence[str] | None = None,
        prog_name: str | None = None,
        complete_var: str | None = None,
        standalone_mode: bool = True,
        windows_expand_args: bool = True,
        **extra: Any,  # pyright: ignore[reportAny, reportExplicitAny]
    ) -> Any:  # pyright: ignore[reportExplicitAny]
        try:
            return super().main(args, prog_name, complete_var, standalone_mode, windows_expand_args, **extra)  #  pyright: ignore[reportAny]
        except SnapstackError as e:
            typer.secho(f"Error: {e.message}", err=True, fg=typer.colors.RED)
            exit(e.exit_code)
        except Exception as e:
            typer.secho("Unexpected Internal Error", err=True, fg=typer.colors.RED)
            typer.echo(str(e), err=True)
            exit(1)


app = typer.Typer(cls=SnapstackGroup, no_args_is_help=True)

FieldsOption = Annotated[
    list[str] | None,
    typer.Option(
        "--field",
        "-f",
        help="Print only these fields (NAME=<json>), dispatched through the recall template.",
    ),
]


def _settings(ctx: typer.Context) -> CliSettings:
    settings = ctx.obj
    if not isinstance(settings, CliSettings):
        return CliSettings()
    return settings


@app.callback()
def root(
    ctx: typer.Context,
    key: Annotated[str, typer.Option("--key", "-k", help="Name of the stored state history.")] = DEFAULT_KEY,
    home: Annotated[
        Path | None,
        typer.Option("--home", help="Directory holding stored histories (defaults to SNAPSTACK_HOME)."),
    ] = None,
    dev: Annotated[
        bool | None,
        typer.Option("--dev/--no-dev", help="Trace every operation to stderr (defaults to SNAPSTACK_DEV)."),
    ] = None,
) -> None:
    """
    Keep a linear history of JSON state snapshots and move through it.
    """
    ctx.obj = CliSettings(key=key, home=home, dev=dev)


@app.command("append")
def append(ctx: typer.Context, record: Annotated[str, typer.Argument(help="State as a JSON document.")]) -> None:
    """
    Append a state and make it current.
    """
    from snapstack.commands import edit

    edit.append(_settings(ctx), record)


@app.command("insert")
def insert(
    ctx: typer.Context,
    index: Annotated[int, typer.Argument(help="Position to insert at (the count appends).")],
    record: Annotated[str, typer.Argument(help="State as a JSON document.")],
) -> None:
    """
    Insert a state at a position.
    """
    from snapstack.commands import edit

    edit.insert(_settings(ctx), index, record)


@app.command("replace")
def replace(
    ctx: typer.Context,
    index: Annotated[int, typer.Argument(help="Position of the state to replace.")],
    record: Annotated[str, typer.Argument(help="State as a JSON document.")],
) -> None:
    """
    Replace the state at a position.
    """
    from snapstack.commands import edit

    edit.replace(_settings(ctx), index, record)


@app.command("delete")
def delete(ctx: typer.Context, index: Annotated[int, typer.Argument(help="Position of the state to delete.")]) -> None:
    """
    Delete the state at a position and print it.
    """
    from snapstack.commands import edit

    edit.delete(_settings(ctx), index)


@app.command("recall")
def recall(
    ctx: typer.Context,
    index: Annotated[int, typer.Argument(help="Position of the state to recall.")],
    fields: FieldsOption = None,
) -> None:
    """
    Make the state at a position current and print it.
    """
    from snapstack.commands import navigate

    navigate.recall(_settings(ctx), index, fields)


@app.command("undo")
def undo(ctx: typer.Context, fields: FieldsOption = None) -> None:
    """
    Step back to the previous state.
    """
    from snapstack.commands import navigate

    navigate.undo(_settings(ctx), fields)


@app.command("redo")
def redo(ctx: typer.Context, fields: FieldsOption = None) -> None:
    """
    Step forward to the next state.
    """
    from snapstack.commands import navigate

    navigate.redo(_settings(ctx), fields)


@app.command("log")
def log(ctx: typer.Context) -> None:
    """
    Display the stored states, marking the current one.
    """
    from snapstack.commands import log

    log.log(_settings(ctx))


@app.command("status")
def status(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output the summary as JSON.")] = False,
) -> None:
    """
    Show the number of states and the current index.
    """
    from snapstack.commands import log

    log.status(_settings(ctx), json_output)


@app.command("keys")
def keys(ctx: typer.Context) -> None:
    """
    List the stored history keys.
    """
    from snapstack.commands import log

    log.keys(_settings(ctx))


if __name__ == "__main__":
    app()
