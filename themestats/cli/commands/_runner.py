"""Shared plumbing for commands that call the service."""

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

import typer
from rich.console import Console

from themestats.cli.output import format_error
from themestats.cli.utils import ConfigError, ConfigManager
from themestats.cli.utils.config import ClientConfig
from themestats.client import ApiError, RateLimitError, ThemeStatsClient, ThemeStatsClientError, TransportError

T = TypeVar("T")


def run_with_client(
    console: Console,
    action: Callable[[ThemeStatsClient], Awaitable[T]],
    manager: ConfigManager | None = None,
) -> tuple[T, ClientConfig, ThemeStatsClient]:
    """Load config, open a client, run ``action`` and map failures to exit codes.

    Exit codes: 1 config missing, 3 request failed, 4 rate limited.
    """
    manager = manager or ConfigManager()
    try:
        config = manager.load()
    except ConfigError as e:
        format_error(console, str(e), hint="Run 'themestats init' to create an identity")
        raise typer.Exit(code=1)

    async def _run() -> tuple[Any, ThemeStatsClient]:
        async with ThemeStatsClient(config.api_url, config.private_key, certificate=config.certificate) as client:
            return await action(client), client

    try:
        result, client = asyncio.run(_run())
    except RateLimitError as e:
        hint = f"Retry in {e.retry_after} seconds" if e.retry_after else None
        format_error(console, e.api_message, hint=hint)
        raise typer.Exit(code=4)
    except ApiError as e:
        format_error(console, f"{e.api_message} ({e.code})")
        raise typer.Exit(code=3)
    except (TransportError, ThemeStatsClientError) as e:
        format_error(console, f"Request failed: {e}")
        raise typer.Exit(code=3)
    return result, config, client
