"""CLI entry point for openrpc-inspector."""

import asyncio
import json
import logging
from pathlib import Path

import click
import yaml

from openrpc_inspector.exchange.http import load_exchange
from openrpc_inspector.exchange.jsonrpc import parse_rpc_api_exchange
from openrpc_inspector.parser.base import OpenRpcMetadata
from openrpc_inspector.parser.detect import detect_format
from openrpc_inspector.parser.openrpc import OpenRpcDocumentError, load_openrpc


def _load_api(spec_path: Path) -> OpenRpcMetadata:
    """Load an OpenRPC document, turning loader errors into CLI errors."""
    if detect_format(spec_path) != "openrpc":
        raise click.ClickException(f"{spec_path} is not an OpenRPC document")
    try:
        return load_openrpc(spec_path)
    except OpenRpcDocumentError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    envvar="OPENRPC_INSPECTOR_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging verbosity.",
)
def main(log_level: str):
    """OpenRPC Inspector — interpret captured JSON-RPC traffic using OpenRPC API docs."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument("spec_path", type=click.Path(exists=True, path_type=Path))
def methods(spec_path: Path):
    """List the JSON-RPC methods declared by an OpenRPC document."""
    api = _load_api(spec_path)
    click.echo(f"{api.spec.info.title} ({len(api.request_matchers)} methods)")
    for name, method in api.request_matchers.items():
        suffix = " [deprecated]" if method.deprecated else ""
        summary = f" - {method.summary}" if method.summary else ""
        click.echo(f"  {name}{summary}{suffix}")


@main.command()
@click.argument("spec_path", type=click.Path(exists=True, path_type=Path))
@click.argument("exchange_path", type=click.Path(exists=True, path_type=Path))
@click.option("--no-response", is_flag=True, help="Ignore the captured response, if any.")
def inspect(spec_path: Path, exchange_path: Path, no_response: bool):
    """Interpret a captured exchange against an OpenRPC document, printing JSON."""
    api = _load_api(spec_path)
    try:
        exchange = load_exchange(exchange_path)
    except (ValueError, yaml.YAMLError) as e:
        raise click.ClickException(str(e)) from e

    if exchange.request.url and not api.matches_server(exchange.request.url):
        click.echo(f"Warning: {exchange.request.url} is not a server of {api.spec.info.title}", err=True)

    result = asyncio.run(parse_rpc_api_exchange(api, exchange))
    if not no_response:
        result.update_with_response(exchange.response)

    click.echo(json.dumps(result.as_serializable(), indent=2))
