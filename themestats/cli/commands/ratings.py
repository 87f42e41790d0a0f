"""List this identity's ratings."""

from rich.console import Console

from themestats.cli.commands._runner import run_with_client
from themestats.cli.output import format_table, json_output

console = Console()


def ratings_command(json_flag: bool) -> None:
    """Fetch, with a signed request, every rating this identity has given."""
    result, _, _ = run_with_client(console, lambda client: client.my_ratings())

    if json_flag:
        json_output(console, result)
        return
    if not result:
        console.print("No ratings yet.")
        return
    format_table(console, "My Ratings", ["Theme", "Rating"], [(tid, str(r)) for tid, r in sorted(result.items())])
