"""
Chain catalog: chain id -> human-readable network name.

The list is fetched once per session. A failed fetch leaves the catalog
empty for the rest of the session and every lookup misses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import httpx
import structlog

from ..config import DEFAULT_CHAIN_LIST_URL
from ..utils import normalize_chain_id

log = structlog.get_logger()


@dataclass(frozen=True)
class ChainInfo:
    chain_id: str
    display_name: str
    currency_symbol: str = ""


def parse_chain_list(payload: Any) -> dict[str, ChainInfo]:
    """Index a chains.json payload by decimal chain id string.

    Entries without a usable ``chainId`` or ``name`` are skipped.
    """
    chains: dict[str, ChainInfo] = {}
    if not isinstance(payload, list):
        return chains

    for item in payload:
        if not isinstance(item, dict):
            continue
        chain_id = normalize_chain_id(item.get("chainId"))
        name = item.get("name")
        if chain_id is None or not isinstance(name, str):
            continue
        currency = item.get("nativeCurrency")
        symbol = currency.get("symbol", "") if isinstance(currency, dict) else ""
        chains[chain_id] = ChainInfo(chain_id, name, str(symbol or ""))
    return chains


class ChainCatalog:
    def __init__(
        self,
        url: str = DEFAULT_CHAIN_LIST_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        chains: Optional[dict[str, ChainInfo]] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._client = client
        self._chains: dict[str, ChainInfo] = dict(chains or {})
        self._loaded = chains is not None

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> dict[str, ChainInfo]:
        """Fetch the chain list on first call; later calls return the same mapping."""
        if self._loaded:
            return self._chains
        self._loaded = True

        try:
            if self._client is not None:
                response = await self._client.get(self.url, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(self.url)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError):
            log.warning("chain_catalog_load_failed", url=self.url, exc_info=True)
            return self._chains

        self._chains = parse_chain_list(payload)
        log.debug("chain_catalog_loaded", url=self.url, chains=len(self._chains))
        return self._chains

    def get(self, chain_id: Any) -> Optional[ChainInfo]:
        key = normalize_chain_id(chain_id)
        return self._chains.get(key) if key is not None else None

    def lookup(self, chain_id: Any) -> str:
        """Display name for a chain id, or "" when unknown."""
        info = self.get(chain_id)
        return info.display_name if info else ""
