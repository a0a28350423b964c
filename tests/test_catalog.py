"""Unit tests for nomen.registry.catalog."""

from __future__ import annotations

import httpx
import pytest
import respx

from nomen.registry.catalog import ChainCatalog, ChainInfo, parse_chain_list

CHAINS_URL = "https://chains.test/chains.json"

SAMPLE = [
    {"chainId": 1, "name": "Ethereum Mainnet", "nativeCurrency": {"symbol": "ETH"}},
    {"chainId": 137, "name": "Polygon Mainnet", "nativeCurrency": {"symbol": "POL"}},
    {"chainId": 84532, "name": "Base Sepolia Testnet"},
    {"name": "no id"},
    {"chainId": 5},
    "garbage",
]


class TestParseChainList:
    def test_indexes_by_string_chain_id(self) -> None:
        chains = parse_chain_list(SAMPLE)
        assert set(chains) == {"1", "137", "84532"}
        assert chains["137"] == ChainInfo("137", "Polygon Mainnet", "POL")
        assert chains["84532"].currency_symbol == ""

    def test_non_list_payload(self) -> None:
        assert parse_chain_list({"chains": SAMPLE}) == {}


class TestChainCatalog:
    @respx.mock
    async def test_load_and_lookup(self) -> None:
        respx.get(CHAINS_URL).mock(return_value=httpx.Response(200, json=SAMPLE))
        catalog = ChainCatalog(CHAINS_URL)

        chains = await catalog.load()

        assert len(chains) == 3
        assert catalog.lookup("1") == "Ethereum Mainnet"
        assert catalog.lookup(137) == "Polygon Mainnet"
        assert catalog.lookup("0x1") == "Ethereum Mainnet"

    @respx.mock
    async def test_lookup_miss_is_empty(self) -> None:
        respx.get(CHAINS_URL).mock(return_value=httpx.Response(200, json=SAMPLE))
        catalog = ChainCatalog(CHAINS_URL)
        await catalog.load()

        assert catalog.lookup("999999") == ""
        assert catalog.lookup(None) == ""
        assert catalog.lookup("not-a-chain") == ""

    @respx.mock
    async def test_loads_only_once(self) -> None:
        route = respx.get(CHAINS_URL).mock(return_value=httpx.Response(200, json=SAMPLE))
        catalog = ChainCatalog(CHAINS_URL)

        first = await catalog.load()
        second = await catalog.load()

        assert first is second
        assert route.call_count == 1

    @respx.mock
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(500),
            httpx.Response(200, content=b"<html>not json</html>"),
        ],
    )
    async def test_failed_load_is_terminal_miss(self, response: httpx.Response) -> None:
        route = respx.get(CHAINS_URL).mock(return_value=response)
        catalog = ChainCatalog(CHAINS_URL)

        assert await catalog.load() == {}
        assert catalog.lookup("1") == ""

        # No retry within the session
        assert await catalog.load() == {}
        assert route.call_count == 1

    @respx.mock
    async def test_connection_error(self) -> None:
        respx.get(CHAINS_URL).mock(side_effect=httpx.ConnectError("offline"))
        catalog = ChainCatalog(CHAINS_URL)

        assert await catalog.load() == {}
        assert catalog.loaded is True

    async def test_preloaded_catalog_skips_fetch(self) -> None:
        catalog = ChainCatalog(CHAINS_URL, chains={"1": ChainInfo("1", "Ethereum Mainnet")})
        assert await catalog.load() == {"1": ChainInfo("1", "Ethereum Mainnet")}
        assert catalog.lookup("1") == "Ethereum Mainnet"
