"""
Nomen CLI

Command-line interface for the NameStorage registry: one name per
account, read and written through the configured wallet.

Commands:
  status    - Show network, balance and registered name
  register  - Register a name (suggests alternatives when taken)
  chain     - Look up a chain's display name
  watch     - Follow wallet account / network changes
  whoami    - Show authorized accounts and active chain
"""

from __future__ import annotations

import asyncio
import sys
from typing import Optional

import click

from .registry.session import WalletSession
from .theurgy.common import build_orchestrator, load_command_settings, registry_options


# ============ Constants ============

VERSION = "1.0.0"


# ============ Banner ============


def _print_banner() -> None:
    border = click.style("  ◆ ═══════════════════════════════════════ ◆", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()
    click.echo(
        click.style("        N O M E N", fg="bright_white", bold=True)
        + click.style(f"        v{VERSION}", dim=True)
    )
    click.secho("        ─── On-chain Name Registry ───", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="nomen")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Nomen: on-chain name registry client."""
    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .theurgy.chain import chain
from .theurgy.register import register
from .theurgy.status import status
from .theurgy.watch import watch

cli.add_command(status)
cli.add_command(register)
cli.add_command(chain)
cli.add_command(watch)


# ============ Identity ============


async def _whoami(session: WalletSession) -> tuple[list[str], Optional[str]]:
    accounts = await session.connect()
    return accounts, await session.get_active_chain_id()


@cli.command()
@registry_options
def whoami(rpc_url: Optional[str], contract: Optional[str], chain_id: Optional[str]) -> None:
    """Show authorized accounts and the active chain."""
    settings = load_command_settings(rpc_url, contract, chain_id)
    orchestrator = build_orchestrator(settings)

    if orchestrator.session.provider is None:
        click.echo("No wallet found.")
        click.echo("Set WALLET_RPC_URL (and optionally PRIVATE_KEY) in ~/.nomen/.env.")
        sys.exit(1)

    accounts, active = asyncio.run(_whoami(orchestrator.session))
    if not accounts:
        click.echo("No authorized accounts.")
        sys.exit(1)

    for account in accounts:
        click.echo(f"Address: {account}")
    click.echo(f"Chain:   {active or 'unknown'}")


# ============ Entry Points ============


def main() -> None:
    """Nomen CLI entry point."""
    # Ensure UTF-8 output on Windows (for Unicode box-drawing / symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass  # Fallback: old Python or non-tty
    cli()


if __name__ == "__main__":
    main()
