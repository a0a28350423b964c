"""Shared setup for commands: settings, logging, provider and orchestrator."""

from __future__ import annotations

import sys
from dataclasses import replace
from typing import Optional

import click

from ..config import Settings, load_settings
from ..errors import NomenError
from ..logs import configure_logging
from ..pneuma.provider import discover_provider
from ..registry.orchestrator import ConflictPrompt, DisplayState, RegistrationOrchestrator
from ..utils import normalize_chain_id


def registry_options(func):
    """Options every registry-facing command accepts."""
    func = click.option(
        "--rpc-url",
        envvar="WALLET_RPC_URL",
        default=None,
        help="Wallet / node JSON-RPC endpoint",
    )(func)
    func = click.option(
        "--contract",
        envvar="NAME_CONTRACT_ADDRESS",
        default=None,
        help="NameStorage contract address",
    )(func)
    func = click.option(
        "--chain-id",
        envvar="NAME_CONTRACT_NETWORK_ID",
        default=None,
        help="Chain id the registry is deployed on",
    )(func)
    return func


def load_command_settings(
    rpc_url: Optional[str] = None,
    contract: Optional[str] = None,
    chain_id: Optional[str] = None,
) -> Settings:
    """Load settings, apply command-line overrides and configure logging."""
    try:
        settings = load_settings()
    except NomenError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)

    overrides = {}
    if rpc_url:
        overrides["wallet_rpc_url"] = rpc_url
    if contract:
        overrides["contract_address"] = contract
    if chain_id:
        overrides["contract_chain_id"] = normalize_chain_id(chain_id)
    if overrides:
        settings = replace(settings, **overrides)

    configure_logging(settings.log_level, settings.log_format)
    return settings


def build_orchestrator(
    settings: Settings,
    prompt: Optional[ConflictPrompt] = None,
) -> RegistrationOrchestrator:
    try:
        provider = discover_provider(settings)
    except NomenError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)
    return RegistrationOrchestrator.from_settings(settings, provider, prompt=prompt)


def echo_display(display: DisplayState, currency: str = "") -> None:
    balance = f"{display.balance} {currency}".strip() if display.balance else ""
    click.echo(f"  Network:  {display.network}")
    click.echo(f"  Balance:  {balance}")
    click.echo(f"  Name:     {display.name}")
