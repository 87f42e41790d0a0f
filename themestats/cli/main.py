"""Main CLI entry point for the themes stats client."""

import typer
from rich.console import Console

from themestats.cli.commands.init import init_command
from themestats.cli.commands.install import install_command
from themestats.cli.commands.rate import rate_command
from themestats.cli.commands.ratings import ratings_command
from themestats.cli.commands.stats import stats_command
from themestats.cli.commands.whoami import whoami_command

app = typer.Typer(
    name="themestats",
    help="Themestats - signed install counts and ratings for community themes",
    no_args_is_help=True,
    add_completion=False,
)
console = Console()


@app.command("init")
def init(
    api_url: str = typer.Option(..., "-u", "--api-url", help="Service base URL"),
    force: bool = typer.Option(False, "-f", "--force", help="Overwrite config"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Generate an identity keypair and store the service URL."""
    init_command(api_url, force, json_flag)


@app.command("whoami")
def whoami(
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the local identity."""
    whoami_command(json_flag)


@app.command("install")
def install(
    theme_id: str = typer.Argument(..., help="Theme ID"),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Record an install of a theme."""
    install_command(theme_id, json_flag)


@app.command("rate")
def rate(
    theme_id: str = typer.Argument(..., help="Theme ID"),
    rating: int = typer.Argument(..., help="Rating from 1 to 5"),
    turnstile_token: str = typer.Option(
        None, "-t", "--turnstile-token",
        help="Turnstile token (first rating, or to renew a rejected certificate)",
    ),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Rate a theme from 1 to 5."""
    rate_command(theme_id, rating, turnstile_token, json_flag)


@app.command("stats")
def stats(
    theme_id: str = typer.Option(None, "-s", "--theme", help="Filter by theme ID"),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Show install counts and ratings."""
    stats_command(theme_id, json_flag)


@app.command("ratings")
def ratings(
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """List the ratings this identity has given."""
    ratings_command(json_flag)


if __name__ == "__main__":
    app()
