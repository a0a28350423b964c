"""
Theurgy Status - Show the wallet's network, balance and registered name.

Flow:
1. Load the chain catalog
2. Authorize accounts and read the active chain
3. Ask the wallet to move to the registry's chain if needed
4. Read balance and stored name
"""

from __future__ import annotations

import asyncio
from typing import Optional

import click

from .common import build_orchestrator, echo_display, load_command_settings, registry_options


@click.command()
@registry_options
def status(rpc_url: Optional[str], contract: Optional[str], chain_id: Optional[str]) -> None:
    """Show network, balance and registered name."""
    click.echo("=== Nomen Status ===")
    click.echo("")

    settings = load_command_settings(rpc_url, contract, chain_id)
    orchestrator = build_orchestrator(settings)

    if orchestrator.session.provider is None:
        click.secho("  No wallet configured (set WALLET_RPC_URL).", fg="yellow")

    asyncio.run(orchestrator.start())

    state = orchestrator.session.state
    info = orchestrator.catalog.get(state.chain_id)
    click.echo(f"  Account:  {state.account or ''}")
    echo_display(orchestrator.display, info.currency_symbol if info else "")

    if state.chain_id and orchestrator.registry.binding is None:
        click.echo("")
        click.secho(
            f"  Registry unavailable on chain {state.chain_id} "
            f"(requires chain {settings.contract_chain_id or '?'}).",
            fg="yellow",
        )
