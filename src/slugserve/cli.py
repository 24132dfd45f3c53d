"""CLI interface for slugserve."""

import logging
import sys
from pathlib import Path

import click

from slugserve.config import Config


@click.group()
def cli() -> None:
    """slugserve - static pages and an OAuth redirect landing."""


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover slugserve.toml)",
)
@click.option(
    "--content-root",
    "-r",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Directory holding the HTML pages (overrides config)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--callback-path",
    default=None,
    help="Path of the OAuth redirect endpoint (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
def serve(
    config_path: Path | None,
    content_root: Path | None,
    host: str | None,
    port: int | None,
    callback_path: str | None,
    verbose: bool,
) -> None:
    """Start the page server."""
    from slugserve.server import run_server

    _configure_logging(verbose)

    try:
        config = Config.load(config_path).with_overrides(
            host=host,
            port=port,
            root_dir=content_root,
            callback_path=callback_path,
        )
    except (OSError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"App listening on {config.server.host}:{config.server.port}")
    click.echo(f"Content root: {config.content.root_dir}")
    click.echo(f"OAuth redirect path: {config.oauth.callback_path}")
    if config.oauth.client_id is None:
        click.echo(click.style("OAuth client: not configured", fg="yellow"))

    run_server(config)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # aiohttp logs every request at INFO; keep it for verbose runs only
    logging.getLogger("aiohttp.access").setLevel(
        logging.INFO if verbose else logging.WARNING,
    )


if __name__ == "__main__":
    cli()
