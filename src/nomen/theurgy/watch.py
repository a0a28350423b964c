"""
Theurgy Watch - Follow wallet changes.

Applies account and network notifications as they arrive and prints the
display whenever network, balance or name change. Stops on Ctrl-C.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import click

from ..registry.orchestrator import DisplayState, RegistrationOrchestrator
from .common import build_orchestrator, echo_display, load_command_settings, registry_options


async def _watch(orchestrator: RegistrationOrchestrator) -> None:
    await orchestrator.start()
    echo_display(orchestrator.display)

    def _changed(display: DisplayState) -> None:
        click.echo("")
        echo_display(display)

    orchestrator.on_display(_changed)

    tasks = [asyncio.create_task(orchestrator.run())]
    if orchestrator.session.provider is not None:
        tasks.append(asyncio.create_task(orchestrator.session.provider.watch()))
    await asyncio.gather(*tasks)


@click.command()
@registry_options
def watch(rpc_url: Optional[str], contract: Optional[str], chain_id: Optional[str]) -> None:
    """Follow account and network changes."""
    click.echo("=== Nomen Watch (Ctrl-C to stop) ===")
    click.echo("")

    settings = load_command_settings(rpc_url, contract, chain_id)
    orchestrator = build_orchestrator(settings)

    if orchestrator.session.provider is None:
        click.secho("  No wallet configured (set WALLET_RPC_URL).", fg="yellow")
        return

    try:
        asyncio.run(_watch(orchestrator))
    except KeyboardInterrupt:
        click.echo("")
        click.echo("=== Watch stopped ===")
