"""
Wallet session: the provider handle, authorized accounts and active chain.

Provider notifications never touch ``SessionState`` directly. They are queued
as typed events and applied by whoever drains ``WalletSession.events``;
``WalletSession.apply`` is the only mutator.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import structlog

from ..errors import ProviderError
from ..pneuma.provider import ACCOUNTS_CHANGED, NETWORK_CHANGED, WalletProvider
from ..utils import hex_to_int, normalize_chain_id

log = structlog.get_logger()


@dataclass(frozen=True)
class AccountsChanged:
    accounts: tuple[str, ...]


@dataclass(frozen=True)
class NetworkChanged:
    chain_id: Optional[str]


SessionEvent = Union[AccountsChanged, NetworkChanged]


@dataclass
class SessionState:
    provider_present: bool = False
    accounts: list[str] = field(default_factory=list)
    chain_id: Optional[str] = None

    @property
    def account(self) -> Optional[str]:
        """The acting identity: first authorized account."""
        return self.accounts[0] if self.accounts else None


class WalletSession:
    def __init__(
        self,
        provider: Optional[WalletProvider],
        state: Optional[SessionState] = None,
    ) -> None:
        self.provider = provider
        self.state = state or SessionState()
        self.state.provider_present = provider is not None
        self.events: asyncio.Queue[SessionEvent] = asyncio.Queue()
        self._subscribed = False

    async def connect(self) -> list[str]:
        """Request account authorization. Refusal or no provider yields []."""
        if self.provider is None:
            return []
        try:
            accounts = await self.provider.request_accounts()
        except ProviderError as exc:
            log.info("account_authorization_refused", code=exc.code, error=exc.message)
            accounts = []
        self.apply(AccountsChanged(tuple(accounts)))
        return accounts

    async def get_active_chain_id(self) -> Optional[str]:
        if self.provider is None:
            return None
        try:
            return await self.provider.get_chain_id()
        except ProviderError as exc:
            log.warning("chain_id_query_failed", code=exc.code, error=exc.message)
            return None

    async def get_balance(self, account: Optional[str]) -> Optional[int]:
        """Native balance in wei, or None without provider / account."""
        if self.provider is None or not account:
            return None
        try:
            wei = await self.provider.request("eth_getBalance", [account, "latest"])
        except ProviderError as exc:
            log.warning("balance_query_failed", account=account, error=exc.message)
            return None
        return hex_to_int(wei) if wei is not None else None

    def subscribe(self) -> None:
        """Register the account and network listeners once per session."""
        if self.provider is None or self._subscribed:
            return
        self.provider.on(ACCOUNTS_CHANGED, self._on_accounts_changed)
        self.provider.on(NETWORK_CHANGED, self._on_network_changed)
        self._subscribed = True

    def _on_accounts_changed(self, accounts: Any) -> None:
        log.info("accounts_changed", accounts=accounts)
        self.events.put_nowait(AccountsChanged(tuple(str(a) for a in accounts or ())))

    def _on_network_changed(self, network_id: Any) -> None:
        log.info("network_changed", network_id=network_id)
        self.events.put_nowait(NetworkChanged(normalize_chain_id(network_id)))

    def apply(self, event: SessionEvent) -> bool:
        """Apply one event to the session state. Returns True if anything changed."""
        if isinstance(event, AccountsChanged):
            accounts = list(event.accounts)
            if accounts == self.state.accounts:
                return False
            self.state.accounts = accounts
            return True

        if event.chain_id == self.state.chain_id:
            return False
        self.state.chain_id = event.chain_id
        return True
