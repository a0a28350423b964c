"""Shared fixtures: an in-memory wallet provider that also plays the registry contract."""

from __future__ import annotations

from typing import Any, Optional

import pytest
from eth_abi import decode, encode

from nomen.errors import METHOD_NOT_FOUND, ProviderError
from nomen.pneuma.provider import NETWORK_CHANGED, BaseProvider
from nomen.pneuma.rpc import keccak256
from nomen.registry.catalog import ChainCatalog, ChainInfo
from nomen.registry.client import RegistryClient
from nomen.registry.orchestrator import RegistrationOrchestrator
from nomen.registry.session import WalletSession
from nomen.registry.suggest import SuggestionEngine

CONTRACT = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
ACCOUNT = "0xABC"


def _selector(signature: str) -> str:
    return "0x" + keccak256(signature.encode("utf-8"))[:4].hex()


READ_NAME = _selector("readName()")
IS_NAME_EXISTS = _selector("isNameExists(string)")
SET_NAME = _selector("setName(string)")


class FakeProvider(BaseProvider):
    """Wallet + NameStorage contract in one object.

    ``taken`` is the set of registered names, ``names`` maps accounts to
    their stored name.
    """

    def __init__(
        self,
        accounts: tuple[str, ...] = (ACCOUNT,),
        chain_id: Optional[str] = "1",
        taken: tuple[str, ...] = (),
        names: Optional[dict[str, str]] = None,
    ) -> None:
        super().__init__()
        self.accounts = list(accounts)
        self.chain_id = chain_id
        self.taken = set(taken)
        self.names = dict(names or {})
        self.balance = 0
        self.receipt_status = "0x1"
        self.switch_error: Optional[Exception] = None
        self.send_error: Optional[Exception] = None
        self.exists_error: Optional[Exception] = None
        self.accounts_error: Optional[Exception] = None
        self.calls: list[tuple[str, list]] = []
        self.sent: list[str] = []
        self.checked: list[str] = []
        self.receipts: dict[str, dict] = {}

    def count(self, method: str) -> int:
        return sum(1 for m, _ in self.calls if m == method)

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        params = params or []
        self.calls.append((method, params))

        if method in ("eth_requestAccounts", "eth_accounts"):
            if self.accounts_error:
                raise self.accounts_error
            return list(self.accounts)
        if method == "eth_chainId":
            return hex(int(self.chain_id)) if self.chain_id else None
        if method == "wallet_switchEthereumChain":
            if self.switch_error:
                raise self.switch_error
            self.chain_id = str(int(params[0]["chainId"], 16))
            self.emit(NETWORK_CHANGED, self.chain_id)
            return None
        if method == "eth_getBalance":
            return hex(self.balance)
        if method == "eth_call":
            return self._call(params[0])
        if method == "eth_sendTransaction":
            return self._send(params[0])
        if method == "eth_getTransactionReceipt":
            return self.receipts.get(params[0])
        raise ProviderError(METHOD_NOT_FOUND, f"{method} not supported")

    def _call(self, call: dict) -> str:
        data = call["data"]
        selector, args = data[:10], bytes.fromhex(data[10:])
        if selector == READ_NAME:
            return "0x" + encode(["string"], [self.names.get(call.get("from"), "")]).hex()
        if selector == IS_NAME_EXISTS:
            (name,) = decode(["string"], args)
            self.checked.append(name)
            if self.exists_error:
                raise self.exists_error
            return "0x" + encode(["bool"], [name in self.taken]).hex()
        raise ProviderError(-32000, "execution reverted")

    def _send(self, tx: dict) -> str:
        if self.send_error:
            raise self.send_error
        assert tx["data"][:10] == SET_NAME
        (name,) = decode(["string"], bytes.fromhex(tx["data"][10:]))
        self.sent.append(name)
        tx_hash = "0x" + f"{len(self.sent):064x}"
        if self.receipt_status == "0x1":
            self.names[tx["from"]] = name
            self.taken.add(name)
        self.receipts[tx_hash] = {"transactionHash": tx_hash, "status": self.receipt_status}
        return tx_hash


class ScriptedPrompt:
    """Conflict prompt that records what it was shown and returns a fixed answer."""

    def __init__(self, answer: Optional[str] = None) -> None:
        self.answer = answer
        self.notified: list[str] = []
        self.offered: list[list[str]] = []

    async def notify_conflict(self, name: str) -> None:
        self.notified.append(name)

    async def choose(self, name: str, candidates: list[str]) -> Optional[str]:
        self.offered.append(list(candidates))
        if self.answer == "<first>":
            return candidates[0]
        return self.answer


def fixed_source(*texts: str):
    """Random source returning ``texts`` in order, then repeating the last one."""
    values = list(texts)

    def source() -> str:
        return values.pop(0) if len(values) > 1 else values[0]

    return source


CHAINS = {
    "1": ChainInfo("1", "Ethereum Mainnet", "ETH"),
    "4": ChainInfo("4", "Ethereum Testnet Rinkeby", "RIN"),
}


def make_orchestrator(
    provider: Optional[FakeProvider],
    required_chain_id: Optional[str] = "1",
    prompt: Optional[ScriptedPrompt] = None,
    source=None,
) -> RegistrationOrchestrator:
    session = WalletSession(provider)
    registry = RegistryClient(session, required_chain_id, CONTRACT, poll_interval=0.01)
    suggestions = SuggestionEngine(registry, session, source=source)
    catalog = ChainCatalog(chains=CHAINS)
    return RegistrationOrchestrator(
        session, catalog, registry, suggestions=suggestions, prompt=prompt or ScriptedPrompt()
    )


@pytest.fixture()
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture()
def session(provider: FakeProvider) -> WalletSession:
    s = WalletSession(provider)
    s.state.accounts = [ACCOUNT]
    s.state.chain_id = "1"
    return s


@pytest.fixture()
def registry(session: WalletSession) -> RegistryClient:
    return RegistryClient(session, "1", CONTRACT, poll_interval=0.01)
