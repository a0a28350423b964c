"""
Theurgy Register - Store a name for the wallet's account.

Flow:
1. Make sure the wallet is on the registry's chain
2. Check the name is free
3. If taken, offer free alternatives; a chosen one must be confirmed
   before it is submitted
4. Send setName and show the refreshed name
"""

from __future__ import annotations

import asyncio
import sys
from typing import Optional

import click

from ..registry.orchestrator import RegistrationOrchestrator, RegistrationResult, RegistrationState
from .common import build_orchestrator, load_command_settings, registry_options


class ClickPrompt:
    """Conflict prompt on the terminal. 0 dismisses."""

    async def notify_conflict(self, name: str) -> None:
        click.secho(f"Name {name} does already exist", fg="red")
        click.echo("Looking for free alternatives...")

    async def choose(self, name: str, candidates: list[str]) -> Optional[str]:
        click.echo("")
        click.echo("Choose a suggested name:")
        for i, candidate in enumerate(candidates, start=1):
            click.echo(f"  {i}. {candidate}")
        click.echo("  0. cancel")
        index = click.prompt(
            "Selection",
            type=click.IntRange(0, len(candidates)),
            default=0,
            show_default=False,
        )
        return candidates[index - 1] if index else None


def _report(result: RegistrationResult, orchestrator: RegistrationOrchestrator) -> None:
    if result.state is RegistrationState.CONFIRMED:
        click.secho(f"SUCCESS: Name set to {orchestrator.display.name}", fg="green")
    elif result.state is RegistrationState.NETWORK_INVALID:
        click.secho("Registry unavailable: wrong network, no wallet or no account.", fg="yellow")
    elif result.state is RegistrationState.CANCELLED:
        if result.suggestions:
            click.echo("Cancelled.")
        else:
            click.secho("No suggestions available.", fg="yellow")
    elif result.state is RegistrationState.FAILED:
        click.secho("FAILED: Transaction was rejected or not confirmed.", fg="red")


async def _register(orchestrator: RegistrationOrchestrator, name: str) -> RegistrationResult:
    await orchestrator.start()

    result = await orchestrator.submit(name)
    while result is not None and result.needs_resubmit:
        click.echo(f"Selected: {result.selected}")
        if not click.confirm(f"Register {orchestrator.pending_name} now?", default=False):
            click.echo(f"Run 'nomen register {orchestrator.pending_name}' to submit it later.")
            return result
        result = await orchestrator.submit(orchestrator.pending_name)

    return result


@click.command()
@click.argument("name")
@registry_options
def register(name: str, rpc_url: Optional[str], contract: Optional[str], chain_id: Optional[str]) -> None:
    """Register NAME for the wallet's first account."""
    click.echo("=== Nomen Register ===")
    click.echo("")

    if not name.strip():
        click.secho("ERROR: Name is required.", fg="red")
        sys.exit(1)

    settings = load_command_settings(rpc_url, contract, chain_id)
    orchestrator = build_orchestrator(settings, prompt=ClickPrompt())

    result = asyncio.run(_register(orchestrator, name))
    if result is None:
        sys.exit(1)

    if result.needs_resubmit:
        return
    _report(result, orchestrator)
    if not result.confirmed:
        sys.exit(1)
