"""Rate a theme."""

import typer
from rich.console import Console

from themestats.cli.commands._runner import run_with_client
from themestats.cli.output import format_error, format_success, json_output
from themestats.cli.utils import ConfigManager, validate_rating, validate_theme_id

console = Console()


def rate_command(theme_id: str, rating: int, turnstile_token: str | None, json_flag: bool) -> None:
    """Rate THEME_ID from 1 to 5.

    The first rating needs a Turnstile token; the certificate returned
    for it is saved and used for every later rating.
    """
    try:
        theme_id = validate_theme_id(theme_id)
        rating = validate_rating(rating)
    except ValueError as e:
        format_error(console, str(e))
        raise typer.Exit(code=2)

    manager = ConfigManager()
    result, config, client = run_with_client(
        console, lambda c: c.rate(theme_id, rating, turnstile_token=turnstile_token), manager,
    )
    if client.certificate and client.certificate != config.certificate:
        manager.save_certificate(client.certificate)

    if json_flag:
        json_output(console, result)
    else:
        format_success(console, f"Rated {theme_id} {rating}/5")
        console.print(f"[cyan]Average:[/cyan] {result['average']} ({result['count']} ratings)")
        if result.get("certificate"):
            console.print("[cyan]Certificate saved; no Turnstile token needed next time.[/cyan]")
