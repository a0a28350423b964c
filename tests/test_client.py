"""Unit tests for nomen.registry.client."""

from __future__ import annotations

import pytest
from conftest import ACCOUNT, CONTRACT, FakeProvider

from nomen.errors import USER_REJECTED, ProviderError
from nomen.registry.client import RegistryBinding, RegistryClient
from nomen.registry.session import WalletSession


class TestRegistryBinding:
    def test_matching_chain(self) -> None:
        assert RegistryBinding.resolve("1", "0x1", CONTRACT) == RegistryBinding("1", CONTRACT)

    @pytest.mark.parametrize(
        "active, required, address",
        [("4", "1", CONTRACT), (None, "1", CONTRACT), ("1", None, CONTRACT), ("1", "1", None)],
    )
    def test_no_binding(self, active: str | None, required: str | None, address: str | None) -> None:
        assert RegistryBinding.resolve(active, required, address) is None


class TestReads:
    async def test_read_name(self, provider: FakeProvider, registry: RegistryClient) -> None:
        provider.names[ACCOUNT] = "alice"

        assert await registry.read_name(ACCOUNT) == "alice"
        method, params = provider.calls[-1]
        assert method == "eth_call"
        assert params[0]["from"] == ACCOUNT
        assert params[0]["to"] == CONTRACT
        assert params[1] == "latest"

    async def test_read_name_unset_is_empty(self, registry: RegistryClient) -> None:
        assert await registry.read_name(ACCOUNT) == ""

    async def test_read_name_without_account(
        self, provider: FakeProvider, registry: RegistryClient
    ) -> None:
        assert await registry.read_name(None) == ""
        assert provider.count("eth_call") == 0

    async def test_name_exists(self, provider: FakeProvider, registry: RegistryClient) -> None:
        provider.taken.add("alice")

        assert await registry.name_exists(ACCOUNT, "alice") is True
        assert await registry.name_exists(ACCOUNT, "bob") is False
        assert await registry.check_name(ACCOUNT, "alice") is True
        assert provider.checked == ["alice", "bob", "alice"]


class TestWithoutBinding:
    @pytest.fixture()
    def unbound(self, provider: FakeProvider) -> RegistryClient:
        session = WalletSession(provider)
        session.state.accounts = [ACCOUNT]
        session.state.chain_id = "4"
        return RegistryClient(session, "1", CONTRACT)

    async def test_everything_is_empty_and_silent(
        self, provider: FakeProvider, unbound: RegistryClient
    ) -> None:
        provider.taken.add("alice")

        assert unbound.binding is None
        assert await unbound.read_name(ACCOUNT) == ""
        assert await unbound.name_exists(ACCOUNT, "alice") is False
        assert await unbound.check_name(ACCOUNT, "alice") is None
        assert await unbound.set_name(ACCOUNT, "alice") is False
        assert provider.calls == []

    async def test_binding_follows_session_state(
        self, provider: FakeProvider, unbound: RegistryClient
    ) -> None:
        unbound.session.state.chain_id = "1"
        assert unbound.binding == RegistryBinding("1", CONTRACT)

    async def test_no_provider(self) -> None:
        session = WalletSession(None)
        session.state.chain_id = "1"
        registry = RegistryClient(session, "1", CONTRACT)

        assert registry.binding is None
        assert await registry.read_name(ACCOUNT) == ""


class TestSetName:
    async def test_confirmed_transaction(
        self, provider: FakeProvider, registry: RegistryClient
    ) -> None:
        assert await registry.set_name(ACCOUNT, "alice") is True
        assert provider.sent == ["alice"]
        assert provider.count("eth_getTransactionReceipt") == 1
        assert await registry.read_name(ACCOUNT) == "alice"

    async def test_user_rejection(self, provider: FakeProvider, registry: RegistryClient) -> None:
        provider.send_error = ProviderError(USER_REJECTED, "User denied transaction signature.")
        assert await registry.set_name(ACCOUNT, "alice") is False

    async def test_reverted_receipt(self, provider: FakeProvider, registry: RegistryClient) -> None:
        provider.receipt_status = "0x0"
        assert await registry.set_name(ACCOUNT, "alice") is False

    async def test_empty_transaction_hash(
        self, provider: FakeProvider, registry: RegistryClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(provider, "_send", lambda tx: "")
        assert await registry.set_name(ACCOUNT, "alice") is False
        assert provider.count("eth_getTransactionReceipt") == 0

    async def test_receipt_never_arrives(
        self, provider: FakeProvider, session: WalletSession
    ) -> None:
        provider.receipts = _NeverReceipts()
        registry = RegistryClient(session, "1", CONTRACT, receipt_timeout=0.05, poll_interval=0.01)

        assert await registry.set_name(ACCOUNT, "alice") is False

    async def test_without_account(self, provider: FakeProvider, registry: RegistryClient) -> None:
        assert await registry.set_name(None, "alice") is False
        assert provider.sent == []


class _NeverReceipts(dict):
    def __setitem__(self, key: str, value: dict) -> None:
        pass
