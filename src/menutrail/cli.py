"""CLI interface for menutrail.

Command-line tool for serving and inspecting menu active trails.
"""

import logging
import sys
from pathlib import Path

import click

from menutrail.config import Config
from menutrail.core.types import RequestContext, TrailSourceMode

CONFIG_OPTION_HELP = "Path to configuration file (default: auto-discover menutrail.toml)"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(config_path: Path | None) -> Config:
    """Load configuration, exiting with an error message on failure."""
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


@click.group()
def cli() -> None:
    """menutrail - Menu active trails by path."""


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help=CONFIG_OPTION_HELP,
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
    "--trail-source",
    type=click.Choice([mode.value for mode in TrailSourceMode]),
    default=None,
    help="Default trail source (overrides config)",
)
@click.option(
    "--cache/--no-cache",
    default=None,
    help="Enable/disable trail caching (overrides config, default: enabled)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)
def serve(
    config_path: Path | None,
    host: str | None,
    port: int | None,
    trail_source: str | None,
    cache: bool | None,
    verbose: bool,
) -> None:
    """Start the active trail server."""
    from menutrail.server import run_server

    _configure_logging(verbose)
    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        trail_source=trail_source,
        cache_enabled=cache,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Default trail source: {TrailSourceMode.resolve(config.trail.trail_source)}")
    if config.cache.enabled:
        click.echo(f"Cache: {config.cache.backend}")
    else:
        click.echo("Cache: disabled")

    run_server(config)


@cli.command()
@click.argument("menu_name")
@click.argument("path")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help=CONFIG_OPTION_HELP,
)
@click.option(
    "--lang",
    "langcode",
    default="en",
    help="Language code of the request (default: en)",
)
@click.option(
    "--trail-source",
    type=click.Choice([mode.value for mode in TrailSourceMode]),
    default=None,
    help="Default trail source (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)
def trail(
    menu_name: str,
    path: str,
    config_path: Path | None,
    langcode: str,
    trail_source: str | None,
    verbose: bool,
) -> None:
    """Print the active trail of MENU_NAME for PATH."""
    from menutrail.services import build_services

    _configure_logging(verbose)
    config = _load_config(config_path).with_overrides(trail_source=trail_source)
    services = build_services(config)
    resolver = services.create_resolver(RequestContext(path_info=path, langcode=langcode))

    mode = resolver.get_trail_source(menu_name)
    if mode is None:
        click.echo(click.style(f"Menu not found: {menu_name}", fg="yellow"), err=True)
    else:
        click.echo(f"Trail source: {mode}")

    if mode is TrailSourceMode.PATH:
        active_link = resolver.get_active_trail_link(menu_name)
    elif mode is TrailSourceMode.CORE:
        active_link = resolver.get_active_link(menu_name)
    else:
        active_link = None

    if active_link is not None:
        click.echo(f"Active link: {active_link.id} ({active_link.title} -> {active_link.url})")
    else:
        click.echo("Active link: none")

    for link_id in resolver.get_active_trail_ids(menu_name):
        click.echo(f"  {link_id!r}")


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help=CONFIG_OPTION_HELP,
)
def menus(config_path: Path | None) -> None:
    """List configured menus and their trail source."""
    config = _load_config(config_path)
    if not config.menus:
        click.echo("No menus configured")
        return

    for menu in config.menus:
        mode = TrailSourceMode.effective(menu.trail_source, config.trail.trail_source)
        click.echo(f"{menu.name}: {menu.label} [{mode}] ({len(menu.links)} links)")


if __name__ == "__main__":
    cli()
