"""CLI command implementations."""

from themestats.cli.commands.init import init_command
from themestats.cli.commands.install import install_command
from themestats.cli.commands.rate import rate_command
from themestats.cli.commands.ratings import ratings_command
from themestats.cli.commands.stats import stats_command
from themestats.cli.commands.whoami import whoami_command

__all__ = [
    "init_command",
    "install_command",
    "rate_command",
    "ratings_command",
    "stats_command",
    "whoami_command",
]
