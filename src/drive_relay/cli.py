# cli.py
import logging
import sys

import click

from drive_relay.config.settings import (
    MINTER_REQUIRED_FIELDS,
    RELAY_REQUIRED_FIELDS,
    Settings,
    get_settings,
    validate_settings,
)

# Configure logging
logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def load_validated_settings(required) -> Settings:
    """Load settings and exit with status 1 if a required value is missing."""
    settings = get_settings()
    configure_logging(settings.log_level)
    validation = validate_settings(settings, required)
    if not validation.ok:
        click.echo(f"{validation.message}. Check .env", err=True)
        sys.exit(1)
    return settings


@click.group()
def cli():
    """Drive relay: upload server and OAuth token minter"""
    pass


@cli.command()
@click.option("--host", default=None, help="Interface to bind (defaults to HOST)")
@click.option("--port", type=int, default=None, help="Port to listen on (defaults to PORT)")
def serve(host, port):
    """Start the upload relay"""
    settings = load_validated_settings(RELAY_REQUIRED_FIELDS)
    summary = settings.masked_summary()
    logger.info("[CFG] client_id: %s", summary["client_id"])
    logger.info("[CFG] secret? %s refresh? %s", summary["client_secret"], summary["refresh_token"])

    import uvicorn
    from drive_relay.main import create_app

    app = create_app(settings)
    uvicorn.run(
        app,
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


@cli.command("mint-token")
@click.option("--host", default="localhost", show_default=True,
              help="Host part of the registered redirect URI")
@click.option("--port", type=int, default=3000, show_default=True,
              help="Port part of the registered redirect URI")
@click.option("--no-browser", is_flag=True, help="Only print the consent URL")
def mint_token(host, port, no_browser):
    """Run the one-time OAuth consent flow and print a refresh token"""
    settings = load_validated_settings(MINTER_REQUIRED_FIELDS)

    from drive_relay.token_minter import redirect_uri_for, run_token_minter

    logger.info("Waiting for the OAuth callback on %s", redirect_uri_for(host, port))
    sys.exit(run_token_minter(settings, host=host, port=port, open_browser=not no_browser))


@cli.command("show-config")
def show_config():
    """Show current configuration (secrets masked)"""
    settings = get_settings()
    validation = validate_settings(settings, RELAY_REQUIRED_FIELDS)

    print("Current Configuration:")
    for key, value in settings.masked_summary().items():
        print(f"  {key}: {value}")
    print(validation.message)


if __name__ == "__main__":
    cli()
