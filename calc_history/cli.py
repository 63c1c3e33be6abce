"""CLI interface for Calc History.

Commands:
- add/subtract/multiply/divide: Run one operation
- run: Run a sequence of operations and show the history
- session: Line-oriented session with named histories
- interactive: Guided session with prompts
- config: Show or change configuration
"""

import shlex
from pathlib import Path
from typing import List

import click
import questionary
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import coerce_value, load_config, save_config
from .session import (
    OPERATIONS,
    CalcSession,
    parse_count,
    parse_operand,
    parse_steps,
)


console = Console()

# Let negative operands through as arguments instead of options
NUMERIC_ARGS = {"ignore_unknown_options": True}

SESSION_HELP = """Commands:
  <op> A B       add, sub, mul, div (or full names)
  history [N]    show last N records
  use NAME       switch to (or create) a named history
  stores         list histories
  quit           leave the session"""


def _print_history(entries: List[str], title: str = "History"):
    """Print records as a numbered table."""
    if not entries:
        console.print("[dim]No operations in history.[/dim]")
        return

    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Operation")

    for i, entry in enumerate(entries, 1):
        table.add_row(str(i), entry)

    console.print(table)


def _print_result(session: CalcSession, result: int):
    """Print the last record, or only the result in compact mode."""
    if session.config.compact_mode:
        console.print(str(result))
    else:
        console.print(session.history.get_last_operations(1)[0])


def _session_from_context(ctx) -> CalcSession:
    return CalcSession(ctx.obj["config"])


@click.group()
@click.version_option(version=__version__, prog_name="calc-history")
@click.option(
    "--path",
    "-p",
    default=".",
    help="Project path for configuration (default: current directory)",
)
@click.pass_context
def main(ctx, path: str):
    """Calc History - integer calculator with operation history.

    Every operation is recorded as "<a> <op> <b> = <result>".
    Division truncates toward zero; division by zero aborts.
    """
    ctx.ensure_object(dict)
    project_path = str(Path(path).resolve())
    ctx.obj["project_path"] = project_path
    ctx.obj["config"] = load_config(project_path)


# --- One-shot Operations ---


def _run_single(ctx, operation: str, a: int, b: int):
    session = _session_from_context(ctx)
    try:
        result = session.apply(operation, a, b)
    except ValueError as e:
        raise click.BadParameter(str(e))
    _print_result(session, result)


@main.command(context_settings=NUMERIC_ARGS)
@click.argument("a", type=int)
@click.argument("b", type=int)
@click.pass_context
def add(ctx, a: int, b: int):
    """Add two integers."""
    _run_single(ctx, "add", a, b)


@main.command(context_settings=NUMERIC_ARGS)
@click.argument("a", type=int)
@click.argument("b", type=int)
@click.pass_context
def subtract(ctx, a: int, b: int):
    """Subtract B from A."""
    _run_single(ctx, "subtract", a, b)


@main.command(context_settings=NUMERIC_ARGS)
@click.argument("a", type=int)
@click.argument("b", type=int)
@click.pass_context
def multiply(ctx, a: int, b: int):
    """Multiply two integers."""
    _run_single(ctx, "multiply", a, b)


@main.command(context_settings=NUMERIC_ARGS)
@click.argument("a", type=int)
@click.argument("b", type=int)
@click.pass_context
def divide(ctx, a: int, b: int):
    """Divide A by B, truncating toward zero.

    Dividing by zero aborts the process.
    """
    _run_single(ctx, "divide", a, b)


# --- Run Command ---


@main.command(context_settings=NUMERIC_ARGS)
@click.argument("steps", nargs=-1, required=True)
@click.option(
    "--last",
    "-n",
    type=click.IntRange(min=0),
    default=None,
    help="Number of records to show afterwards (default: history_limit)",
)
@click.pass_context
def run(ctx, steps: tuple, last: int):
    """Run several operations in one history.

    STEPS are triples OP A B, e.g.: calc run add 2 2 mul 3 3
    """
    session = _session_from_context(ctx)
    try:
        parsed = parse_steps(list(steps))
        for _, a, b in parsed:
            session.check_operand(a)
            session.check_operand(b)
    except ValueError as e:
        raise click.UsageError(str(e))

    for operation, a, b in parsed:
        session.apply(operation, a, b)

    _print_history(session.last(last))


# --- Session Command ---


def handle_session_line(session: CalcSession, line: str) -> bool:
    """Execute one session line.

    Returns:
        False when the session should end, True otherwise.
    """
    try:
        parts = shlex.split(line)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        return True

    if not parts:
        return True

    command, args = parts[0].lower(), parts[1:]

    if command in ("quit", "exit"):
        return False

    if command == "help":
        console.print(SESSION_HELP)
        return True

    try:
        if command == "history":
            if len(args) > 1:
                raise ValueError("Usage: history [N]")
            count = parse_count(args[0]) if args else None
            _print_history(session.last(count), title=f"History: {session.current}")

        elif command == "use":
            if len(args) != 1:
                raise ValueError("Usage: use NAME")
            session.use(args[0])
            console.print(f"[green]Using history: {args[0]}[/green]")

        elif command == "stores":
            table = Table(title="Histories")
            table.add_column("Name")
            table.add_column("Records", justify="right")
            for name, size in session.store_sizes():
                marker = " *" if name == session.current else ""
                table.add_row(f"{name}{marker}", str(size))
            console.print(table)

        else:
            if len(args) != 2:
                raise ValueError(f"Usage: {command} A B")
            result = session.apply(command, parse_operand(args[0]), parse_operand(args[1]))
            _print_result(session, result)

    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")

    return True


@main.command()
@click.pass_context
def session(ctx):
    """Start a line-oriented calculator session.

    Type 'help' for commands. Histories live until the session ends.
    """
    calc_session = _session_from_context(ctx)
    console.print("[dim]Type 'help' for commands, 'quit' to leave.[/dim]")

    while True:
        try:
            line = click.prompt(
                "calc", prompt_suffix="> ", default="", show_default=False
            )
        except click.Abort:
            # End of input
            break

        if not handle_session_line(calc_session, line):
            break


# --- Interactive Command ---


def _is_int(text: str):
    try:
        int(text)
        return True
    except ValueError:
        return "Enter an integer"


@main.command()
@click.pass_context
def interactive(ctx):
    """Guided session: pick operations and operands from prompts."""
    calc_session = _session_from_context(ctx)

    while True:
        operation = questionary.select(
            "Operation:",
            choices=OPERATIONS + ["Quit"],
        ).ask()
        if operation is None or operation == "Quit":
            break

        a = questionary.text("First operand:", validate=_is_int).ask()
        if a is None:
            break
        b = questionary.text("Second operand:", validate=_is_int).ask()
        if b is None:
            break

        try:
            result = calc_session.apply(operation, int(a), int(b))
        except ValueError as e:
            console.print(f"[red]Error: {e}[/red]")
            continue
        _print_result(calc_session, result)

    _print_history(calc_session.last())


# --- Config Commands ---


@main.group()
def config():
    """Show or change configuration."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx):
    """Show effective configuration."""
    table = Table(title="Configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for key, value in ctx.obj["config"].to_dict().items():
        table.add_row(key, str(value))

    console.print(table)


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx, key: str, value: str):
    """Set a configuration value in .calc-history/config.json."""
    try:
        coerced = coerce_value(key, value)
    except ValueError as e:
        raise click.BadParameter(str(e))

    calc_config = ctx.obj["config"]
    setattr(calc_config, key, coerced)
    config_file = save_config(ctx.obj["project_path"], calc_config)
    console.print(f"[green]Set {key} = {coerced}[/green] [dim]({config_file})[/dim]")


if __name__ == "__main__":
    main()
