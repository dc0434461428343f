"""
CLI entry point for evsifter.

Commands:
    check       Evaluate one event against every rule in a rule file

The CLI is a thin shell over evsifter.config and the sifters: it loads the
inputs, evaluates each rule on its own and prints the verdicts. Rules are
not chained; each verdict is reported independently.

Exit codes:
    0   every rule accepted the event
    1   at least one rule rejected it
    2   a rule could not evaluate it, or an input failed to load
"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from evsifter import __version__
from evsifter.config import build_sifters, load_event, load_rules
from evsifter.errors import SifterError
from evsifter.schema import Action, Verdict
from evsifter.sifters import SifterUnit

EXIT_ACCEPTED = 0
EXIT_REJECTED = 1
EXIT_ERROR = 2

app = typer.Typer(
    name="evsifter",
    help="Evaluate relay admission rules against events.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]evsifter[/bold] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    evsifter - admission rules for relay event streams.
    """
    pass


@app.command()
def check(
    rules_path: Annotated[
        Path,
        typer.Argument(
            help="Path to the rules YAML file.",
            exists=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    event_path: Annotated[
        Path,
        typer.Argument(
            help="Path to a JSON file holding one event.",
            exists=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output verdicts in JSON format.",
        ),
    ] = False,
) -> None:
    """
    Evaluate an event against every rule in a rule file.

    Example:
        $ evsifter check rules.yaml event.json
    """
    try:
        sifters = build_sifters(load_rules(rules_path))
        event = load_event(event_path)
    except SifterError as e:
        if json_output:
            print(json.dumps({"error": e.to_dict()}, indent=2))
        else:
            console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=EXIT_ERROR)

    verdicts = [(sifter, sifter.evaluate(event)) for sifter in sifters]

    if json_output:
        print(json.dumps(_verdicts_to_list(verdicts), indent=2))
    else:
        _display_verdicts(verdicts)

    raise typer.Exit(code=_exit_code(verdicts))


def _exit_code(verdicts: list[tuple[SifterUnit, Verdict]]) -> int:
    actions = {verdict.action for _, verdict in verdicts}
    if Action.ERROR in actions:
        return EXIT_ERROR
    if Action.REJECT in actions:
        return EXIT_REJECTED
    return EXIT_ACCEPTED


def _verdicts_to_list(verdicts: list[tuple[SifterUnit, Verdict]]) -> list[dict]:
    return [
        {
            "index": i,
            "sifter": sifter.name,
            "mode": sifter.mode.value,
            "action": verdict.action.value,
            "message": verdict.message,
        }
        for i, (sifter, verdict) in enumerate(verdicts)
    ]


def _display_verdicts(verdicts: list[tuple[SifterUnit, Verdict]]) -> None:
    """Display verdicts as a table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", style="dim", width=4)
    table.add_column("Sifter")
    table.add_column("Mode")
    table.add_column("Verdict")
    table.add_column("Message")

    for i, (sifter, verdict) in enumerate(verdicts):
        if verdict.accepted:
            status = "[green]✓ accept[/green]"
        elif verdict.rejected:
            status = "[yellow]⊘ reject[/yellow]"
        else:
            status = "[red]✗ error[/red]"
        table.add_row(str(i), sifter.name, sifter.mode.value, status, escape(verdict.message))

    console.print(table)


if __name__ == "__main__":
    app()
