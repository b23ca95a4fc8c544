"""
Main entry point for cmdguard CLI.

This module provides the command-line interface for cmdguard: it reads a
command from the arguments or standard input, shows the risk analysis, and
runs the command only after explicit confirmation.
"""

import asyncio
import importlib.metadata
import json
import sys
from typing import Any, List, Optional, Sequence, Tuple

import typer
from rich.console import Console
from rich.markup import escape

from cmdguard.config.settings import Settings, settings
from cmdguard.executor import platform_utils, shell_manager
from cmdguard.executor.command_parser import CommandParser
from cmdguard.ui import formatter
from cmdguard.utils.logging import get_logger, initialize_logging
from cmdguard.utils.security import safety_analyzer

app = typer.Typer(
    name="cmdguard",
    help="Analyzes shell commands for safety risks before execution",
    add_completion=False,
)

console = Console(no_color=not settings.get("ui", "use_colors", True))

logger = get_logger("main")

USAGE = 'Usage: cmdguard "command" or echo "command" | cmdguard'


def get_version() -> str:
    """Get the installed version of cmdguard."""
    try:
        return importlib.metadata.version("cmdguard")
    except importlib.metadata.PackageNotFoundError:
        return "0.1.0"  # Default during development


def version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold green]cmdguard version[/] {get_version()}")
        raise typer.Exit()


def read_command(command: Optional[List[str]]) -> str:
    """
    Resolve the command text from positional arguments or piped stdin.

    Args:
        command (Optional[List[str]]): Positional command tokens.

    Returns:
        str: The trimmed command text, empty when none was provided.
    """
    if command:
        return " ".join(command).strip()
    if not sys.stdin.isatty():
        return sys.stdin.read().strip()
    return ""


def confirm_execution() -> bool:
    """Ask for confirmation; only 'y' or 'yes' proceeds, EOF cancels."""
    try:
        answer = console.input("\n[bold cyan]▶ Execute this command? (y/n): [/]")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _write_stdout(line: str) -> None:
    sys.stdout.write(line)
    sys.stdout.flush()


def _write_stderr(line: str) -> None:
    sys.stderr.write(line)
    sys.stderr.flush()


def execute(command_text: str) -> shell_manager.CommandResult:
    """Run the confirmed command unmodified through the system shell."""
    console.print("\n[bold]Executing command:[/]")
    shell_mgr = shell_manager.ShellManager(shell=settings.get_shell())
    return shell_mgr.run_command(
        command_text,
        stdout_callback=_write_stdout,
        stderr_callback=_write_stderr,
        timeout=settings.get_timeout(),
    )


def parse_assignment(assignment: str) -> Tuple[str, str, Any]:
    """
    Parse a SECTION.KEY=VALUE setting assignment.

    VALUE is read as JSON when possible (so `true` and `30` keep their
    types) and as a plain string otherwise.

    Raises:
        ValueError: If the assignment is malformed or names an unknown setting.
    """
    target, sep, raw = assignment.partition("=")
    section, dot, key = target.partition(".")
    if not (sep and dot and section and key):
        raise ValueError(f"Expected SECTION.KEY=VALUE, got '{assignment}'")
    if key not in Settings.DEFAULT_SETTINGS.get(section, {}):
        raise ValueError(f"Unknown setting '{target}'")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return section, key, value


def update_config(assignments: Sequence[str], reset: bool = False) -> bool:
    """
    Apply setting changes and save them.

    Every assignment is parsed before anything changes, so a bad one leaves
    the settings untouched.

    Args:
        assignments (Sequence[str]): SECTION.KEY=VALUE assignments.
        reset (bool): Restore the defaults before applying assignments.

    Returns:
        bool: True if the settings were saved.
    """
    parsed = [parse_assignment(assignment) for assignment in assignments]
    if reset:
        settings.reset_to_defaults()
    for section, key, value in parsed:
        settings.set(section, key, value)
    return settings.save()


# Define typer arguments at module level to avoid B008
_COMMAND_ARG = typer.Argument(None, help="Command to analyze.", show_default=False)


@app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True}
)
def guard(
    command: Optional[List[str]] = _COMMAND_ARG,
    simulate: bool = typer.Option(
        False, "--simulate", help="Only explain, do not prompt for execution."
    ),
    rewrite: bool = typer.Option(
        False, "--rewrite", help="Show the safer command variant without analyzing."
    ),
    explain: bool = typer.Option(
        False, "--explain", help="Show a detailed breakdown of the command."
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
    show_config: bool = typer.Option(
        False, "--show-config", help="Print the current settings and exit."
    ),
    set_config: Optional[List[str]] = typer.Option(
        None,
        "--set-config",
        metavar="SECTION.KEY=VALUE",
        help="Update a setting and save it. May be repeated.",
    ),
    reset_config: bool = typer.Option(
        False, "--reset-config", help="Restore the default settings and exit."
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the application version and exit.",
    ),
) -> None:
    """
    Analyze a shell command before running it.

    The command is classified into a risk tier, explained, and executed
    only after you confirm.
    """
    initialize_logging(debug=debug)

    if debug:
        platform_info = platform_utils.get_platform_info()
        console.print("[bold]System Information:[/]")
        console.print(f"  • OS: {platform_info.get('os_name', 'Unknown')}")
        console.print(f"  • Shell: {settings.get_shell() or platform_info['shell']}")
        console.print(f"  • Python: {platform_info.get('python_version', 'Unknown')}")

    if show_config or set_config or reset_config:
        if set_config or reset_config:
            try:
                saved = update_config(set_config or [], reset=reset_config)
            except ValueError as e:
                formatter.render_error(str(e), console)
                raise typer.Exit(1) from e
            if not saved:
                formatter.render_error(
                    f"Could not save settings to {settings.config_file}", console
                )
                raise typer.Exit(1)
            console.print(
                f"[bold green]Settings saved to[/] {escape(str(settings.config_file))}"
            )
        if show_config:
            console.print_json(data=settings.get_all())
        return

    command_text = read_command(command)
    if not command_text:
        formatter.render_error(f"No command provided. {USAGE}", console)
        raise typer.Exit(1)

    try:
        result = safety_analyzer.analyze_command(command_text)

        if rewrite:
            formatter.render_rewrite(result, console)
        else:
            formatter.render_analysis(
                result,
                console,
                show_dry_run=settings.get("ui", "show_dry_run", True),
            )
            if explain:
                components = CommandParser().extract_command_components(
                    command_text, result.findings
                )
                formatter.render_components(components, console)
    except Exception as e:
        logger.debug("Analysis failed", exc_info=True)
        formatter.render_error(str(e), console)
        raise typer.Exit(1) from e

    if rewrite:
        return

    if simulate:
        console.print("\n(--simulate: not prompting for execution)")
        return

    if not confirm_execution():
        console.print("\nCommand cancelled.")
        return

    try:
        exec_result = execute(command_text)
    except (OSError, asyncio.TimeoutError) as e:
        formatter.render_error(f"Failed to execute command: {e}", console)
        raise typer.Exit(1) from e

    formatter.render_execution_result(exec_result, console)


if __name__ == "__main__":
    app()
