"""Record a theme install."""

import typer
from rich.console import Console

from themestats.cli.commands._runner import run_with_client
from themestats.cli.output import format_error, format_success, json_output
from themestats.cli.utils import validate_theme_id

console = Console()


def install_command(theme_id: str, json_flag: bool) -> None:
    """Count an install of THEME_ID for this identity (once per theme, ever)."""
    try:
        theme_id = validate_theme_id(theme_id)
    except ValueError as e:
        format_error(console, str(e))
        raise typer.Exit(code=2)

    result, _, _ = run_with_client(console, lambda client: client.install(theme_id))

    if json_flag:
        json_output(console, result)
    elif result.get("alreadyCounted"):
        console.print(f"[yellow]Install of {theme_id} was already counted[/yellow] (installs: {result['count']})")
    else:
        format_success(console, f"Install of {theme_id} counted (installs: {result['count']})")
