"""Theurgy Chain - Look up a chain's display name in the chain catalog."""

from __future__ import annotations

import asyncio
import sys
from typing import Optional

import click

from ..registry.catalog import ChainCatalog
from .common import load_command_settings


@click.command()
@click.argument("chain_id")
@click.option(
    "--chain-list-url",
    envvar="CHAIN_LIST_URL",
    default=None,
    help="Chain metadata list (JSON array of {chainId, name})",
)
def chain(chain_id: str, chain_list_url: Optional[str]) -> None:
    """Show the display name of CHAIN_ID (decimal or 0x-hex)."""
    settings = load_command_settings()
    catalog = ChainCatalog(chain_list_url or settings.chain_list_url, timeout=settings.rpc_timeout)

    asyncio.run(catalog.load())

    name = catalog.lookup(chain_id)
    if not name:
        click.echo(f"Unknown chain: {chain_id}")
        sys.exit(1)
    click.echo(name)
