"""Show the local identity."""

import typer
from rich.console import Console

from themestats.cli.output import format_error, format_key_value, json_output
from themestats.cli.utils import ConfigError, ConfigManager
from themestats.client import key_id_for
from themestats.protocol.keys import generate_display_name

console = Console()


def whoami_command(json_flag: bool) -> None:
    """Print key id, display name and certificate status without contacting the service."""
    try:
        config = ConfigManager().load()
    except ConfigError as e:
        format_error(console, str(e), hint="Run 'themestats init' to create an identity")
        raise typer.Exit(code=1)

    key_id = key_id_for(config.private_key.public_key())
    data = {
        "key_id": key_id,
        "display_name": generate_display_name(key_id),
        "api_url": config.api_url,
        "certified": config.certificate is not None,
    }
    if json_flag:
        json_output(console, data)
    else:
        format_key_value(console, data)
