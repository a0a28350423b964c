"""
Wallet providers.

A provider answers EIP-1193 style requests and pushes two notifications:

- ``accountsChanged`` with the new list of authorized addresses
- ``networkChanged`` with the new chain id as a decimal string

``JsonRpcWalletProvider`` forwards everything to a wallet or node endpoint
and discovers changes by polling. ``LocalAccountProvider`` keeps the key
in-process, signs locally and switches among configured networks.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional, Protocol

import httpx
import structlog
from eth_account.signers.local import LocalAccount

from ..config import Settings
from ..errors import METHOD_NOT_FOUND, UNRECOGNIZED_CHAIN, ProviderError
from ..sigil.eth import get_account
from ..utils import chain_id_to_hex, normalize_chain_id
from .rpc import DEFAULT_TIMEOUT, JsonRpcTransport
from .tx import build_transaction, sign_transaction

log = structlog.get_logger()

ACCOUNTS_CHANGED = "accountsChanged"
NETWORK_CHANGED = "networkChanged"

Listener = Callable[[Any], None]


class WalletProvider(Protocol):
    async def request(self, method: str, params: Optional[list] = None) -> Any:
        ...

    def on(self, event: str, listener: Listener) -> None:
        ...

    async def request_accounts(self) -> list[str]:
        ...

    async def get_chain_id(self) -> Optional[str]:
        ...

    async def request_chain_switch(self, chain_id_hex: str) -> Any:
        ...

    async def watch(self) -> None:
        ...


class BaseProvider:
    """Listener bookkeeping and the high-level calls shared by providers."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        raise NotImplementedError

    def on(self, event: str, listener: Listener) -> None:
        self._listeners.setdefault(event, []).append(listener)

    def emit(self, event: str, payload: Any) -> None:
        for listener in list(self._listeners.get(event, [])):
            listener(payload)

    async def request_accounts(self) -> list[str]:
        """Ask for authorization; endpoints without eth_requestAccounts get eth_accounts."""
        try:
            accounts = await self.request("eth_requestAccounts")
        except ProviderError as exc:
            if exc.code != METHOD_NOT_FOUND:
                raise
            accounts = await self.request("eth_accounts")
        return [str(a) for a in accounts or []]

    async def get_chain_id(self) -> Optional[str]:
        return normalize_chain_id(await self.request("eth_chainId"))

    async def request_chain_switch(self, chain_id_hex: str) -> Any:
        return await self.request("wallet_switchEthereumChain", [{"chainId": chain_id_hex}])

    async def watch(self) -> None:
        """Emit change notifications until cancelled. Push-only providers return at once."""
        return None


class JsonRpcWalletProvider(BaseProvider):
    """Provider backed by a remote wallet / node JSON-RPC endpoint."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = 2.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__()
        self.transport = JsonRpcTransport(url, timeout=timeout, client=client)
        self.poll_interval = poll_interval
        self._seen_accounts: Optional[list[str]] = None
        self._seen_chain_id: Optional[str] = None

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        return await self.transport.call(method, params)

    async def poll_once(self) -> None:
        """Compare accounts and chain id against the last poll and emit on change."""
        accounts = [str(a) for a in await self.request("eth_accounts") or []]
        chain_id = await self.get_chain_id()

        if self._seen_accounts is not None and accounts != self._seen_accounts:
            self.emit(ACCOUNTS_CHANGED, accounts)
        if self._seen_chain_id is not None and chain_id != self._seen_chain_id:
            self.emit(NETWORK_CHANGED, chain_id)

        self._seen_accounts = accounts
        self._seen_chain_id = chain_id

    async def watch(self) -> None:
        while True:
            try:
                await self.poll_once()
            except ProviderError as exc:
                log.warning("provider_poll_failed", url=self.transport.url, error=str(exc))
            await asyncio.sleep(self.poll_interval)


class LocalAccountProvider(BaseProvider):
    """
    In-process wallet: one local key, a node per network.

    ``networks`` maps decimal chain ids to RPC URLs the wallet may switch to.
    The starting endpoint is always reachable even if it is not listed.
    """

    def __init__(
        self,
        account: LocalAccount,
        rpc_url: str,
        networks: Optional[dict[str, str]] = None,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__()
        self.account = account
        self.networks = dict(networks or {})
        self.timeout = timeout
        self._client = client
        self.transport = JsonRpcTransport(rpc_url, timeout=timeout, client=client)

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        if method in ("eth_requestAccounts", "eth_accounts"):
            return [self.account.address]
        if method == "wallet_switchEthereumChain":
            return await self._switch_chain(params or [])
        if method == "eth_sendTransaction":
            if not params:
                raise ProviderError(-32602, "eth_sendTransaction requires a transaction object")
            return await self._send_transaction(params[0])
        return await self.transport.call(method, params)

    async def _switch_chain(self, params: list) -> None:
        requested = params[0].get("chainId") if params and isinstance(params[0], dict) else None
        target = normalize_chain_id(requested)
        if target is None:
            raise ProviderError(-32602, f"Invalid chainId: {requested!r}")

        if target == await self.get_chain_id():
            return None

        url = self.networks.get(target)
        if not url:
            raise ProviderError(UNRECOGNIZED_CHAIN, f"Unrecognized chain ID {chain_id_to_hex(target)}")

        self.transport = JsonRpcTransport(url, timeout=self.timeout, client=self._client)
        log.info("local_wallet_switched", chain_id=target, url=url)
        self.emit(NETWORK_CHANGED, target)
        return None

    async def _send_transaction(self, call: dict[str, Any]) -> str:
        sender = call.get("from") or self.account.address
        if str(sender).lower() != self.account.address.lower():
            raise ProviderError(4100, f"Account {sender} is not authorized")

        chain_id = await self.get_chain_id()
        if chain_id is None:
            raise ProviderError(-32603, "Node did not report a chain id")

        tx = await build_transaction(self.request, self.account.address, call, int(chain_id))
        raw_tx = sign_transaction(self.account, tx)
        return await self.transport.call("eth_sendRawTransaction", [raw_tx])


def discover_provider(
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[BaseProvider]:
    """
    Build the provider described by settings.

    Returns:
        A provider, or None when no wallet endpoint is configured. Absence is
        a valid state, not an error.
    """
    if not settings.wallet_rpc_url:
        return None

    if settings.private_key:
        return LocalAccountProvider(
            get_account(settings.private_key),
            settings.wallet_rpc_url,
            networks=settings.networks,
            timeout=settings.rpc_timeout,
            client=client,
        )

    return JsonRpcWalletProvider(
        settings.wallet_rpc_url,
        timeout=settings.rpc_timeout,
        poll_interval=settings.poll_interval,
        client=client,
    )
