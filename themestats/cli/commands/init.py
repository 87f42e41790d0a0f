"""Initialize a client identity."""

import typer
from rich.console import Console

from themestats.cli.output import format_error, format_success, json_output
from themestats.cli.utils import ConfigManager, validate_api_url
from themestats.client import generate_keypair, key_id_for
from themestats.protocol.keys import generate_display_name

console = Console()


def init_command(api_url: str, force: bool, json_flag: bool) -> None:
    """Generate a P-256 identity and store it with the service URL.

    Creates ~/.themestats/config.yaml and ~/.themestats/identity.pem; the
    private key file is chmod 600. The identity is registered by the
    service on its first signed request.
    """
    try:
        api_url = validate_api_url(api_url)
    except ValueError as e:
        format_error(console, str(e))
        raise typer.Exit(code=2)

    config = ConfigManager()

    if config.exists() and not force:
        format_error(
            console,
            f"Configuration already exists at {config.config_path}",
            hint="Use --force to overwrite (this discards the current identity)",
        )
        raise typer.Exit(code=1)

    private_key, public_key = generate_keypair()
    config.save(api_url, private_key)
    key_id = key_id_for(public_key)

    if json_flag:
        json_output(
            console,
            {
                "status": "initialized",
                "api_url": api_url,
                "key_id": key_id,
                "display_name": generate_display_name(key_id),
                "config_path": str(config.config_path),
            },
        )
    else:
        format_success(console, "Identity initialized successfully")
        console.print(f"[cyan]API URL:[/cyan]       {api_url}")
        console.print(f"[cyan]Key ID:[/cyan]        {key_id}")
        console.print(f"[cyan]Display name:[/cyan]  {generate_display_name(key_id)}")
        console.print(f"[cyan]Config:[/cyan]        {config.config_path}")
