"""
discord-relay CLI — `discord-relay` command.

Commands:
  discord-relay serve      Connect to Discord and serve the relay endpoint
"""

from typing import Optional

import click
import uvicorn
from rich.console import Console

from discord_relay import __version__
from discord_relay.config import Settings
from discord_relay.errors import RelayError
from discord_relay.logs import configure_logging
from discord_relay.transport.gateway import DiscordSession
from discord_relay.transport.http import create_app

console = Console()

LOG_LEVELS = click.Choice(["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"], case_sensitive=False)


def _load_settings(**overrides) -> Settings:
    try:
        return Settings.from_env().with_overrides(**overrides)
    except RelayError as e:
        console.print(f"[red]Fatal error: {e}[/red]")
        raise SystemExit(1)


def build_server(settings: Settings) -> uvicorn.Server:
    session = DiscordSession(
        settings.discord_token,
        ready_timeout=settings.ready_timeout,
        poll_interval=settings.ready_poll_interval,
    )
    config = uvicorn.Config(
        create_app(session),
        host=settings.host,
        port=settings.port,
        limit_concurrency=settings.max_concurrency,
        log_config=None,
        lifespan="on",
    )
    return uvicorn.Server(config)


@click.group()
@click.version_option(__version__)
def main():
    """Relay JSON requests to Discord users as direct messages."""


@main.command("serve")
@click.option("--host", default=None, help="Listen address (RELAY_HOST, default 0.0.0.0)")
@click.option("--port", type=int, default=None, help="Listen port (RELAY_PORT, default 80)")
@click.option("--log-level", type=LOG_LEVELS, default=None, help="Relay log level (RELAY_LOG_LEVEL)")
def serve_cmd(host: Optional[str], port: Optional[int], log_level: Optional[str]):
    """Connect to Discord, wait until ready, then serve HTTP."""
    settings = _load_settings(host=host, port=port, log_level=log_level)
    configure_logging(settings.log_level, settings.discord_log_level)
    console.print(f"[cyan]Starting discord-relay on {settings.host}:{settings.port}[/cyan]")

    server = build_server(settings)
    server.run()
    if not server.started:
        # lifespan startup failed (readiness timeout or login error)
        console.print("[red]Fatal error: relay failed to start[/red]")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
