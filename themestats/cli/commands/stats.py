"""Show theme statistics."""

from rich.console import Console

from themestats.cli.commands._runner import run_with_client
from themestats.cli.output import format_table, json_output

console = Console()


def stats_command(theme_id: str | None, json_flag: bool) -> None:
    """Show installs and ratings for every theme, or one theme."""
    result, _, _ = run_with_client(console, lambda client: client.stats())
    if theme_id is not None:
        result = {k: v for k, v in result.items() if k == theme_id}

    if json_flag:
        json_output(console, result)
        return
    rows = [
        (tid, str(s["installs"]), f"{s['rating']:.1f}", str(s["ratingCount"]))
        for tid, s in sorted(result.items())
    ]
    format_table(console, "Theme Stats", ["Theme", "Installs", "Rating", "Ratings"], rows)
