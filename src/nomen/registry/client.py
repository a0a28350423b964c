"""
Typed wrapper around the NameStorage registry contract.

Every operation first resolves the registry binding from the *current*
session state. Without a binding the operation returns an empty result
and issues no RPC traffic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import structlog

from ..errors import ProviderError
from ..pneuma.abi import name_storage_abi
from ..pneuma.rpc import decode_function_result, encode_function_call
from ..pneuma.tx import receipt_succeeded, wait_for_receipt
from ..utils import normalize_chain_id
from .session import WalletSession

log = structlog.get_logger()


@dataclass(frozen=True)
class RegistryBinding:
    chain_id: str
    address: str

    @classmethod
    def resolve(
        cls,
        active_chain_id: Optional[str],
        required_chain_id: Optional[str],
        address: Optional[str],
    ) -> Optional["RegistryBinding"]:
        active = normalize_chain_id(active_chain_id)
        required = normalize_chain_id(required_chain_id)
        if active is None or required is None or not address or active != required:
            return None
        return cls(active, address)


class RegistryClient:
    def __init__(
        self,
        session: WalletSession,
        required_chain_id: Optional[str],
        contract_address: Optional[str],
        abi: Optional[list[dict[str, Any]]] = None,
        receipt_timeout: float = 120,
        poll_interval: float = 2.0,
    ) -> None:
        self.session = session
        self.required_chain_id = normalize_chain_id(required_chain_id)
        self.contract_address = contract_address
        self.abi = abi if abi is not None else name_storage_abi()
        self.receipt_timeout = receipt_timeout
        self.poll_interval = poll_interval

    @property
    def binding(self) -> Optional[RegistryBinding]:
        if self.session.provider is None:
            return None
        return RegistryBinding.resolve(
            self.session.state.chain_id, self.required_chain_id, self.contract_address
        )

    async def _call(self, account: Optional[str], function_name: str, args: list) -> Any:
        binding = self.binding
        if binding is None:
            return None

        call = {"to": binding.address, "data": encode_function_call(self.abi, function_name, args)}
        if account:
            call["from"] = account
        result = await self.session.provider.request("eth_call", [call, "latest"])
        if result is None or result == "0x":
            return None
        return decode_function_result(self.abi, function_name, result)

    async def read_name(self, account: Optional[str]) -> str:
        """Name stored for ``account``; "" without binding or account."""
        if not account or self.binding is None:
            return ""
        name = await self._call(account, "readName", [])
        return name or ""

    async def check_name(self, account: Optional[str], candidate: str) -> Optional[bool]:
        """Whether ``candidate`` is registered, or None when the registry is not bound."""
        if self.binding is None:
            return None
        return bool(await self._call(account, "isNameExists", [candidate]))

    async def name_exists(self, account: Optional[str], candidate: str) -> bool:
        return bool(await self.check_name(account, candidate))

    async def set_name(self, account: Optional[str], candidate: str) -> bool:
        """
        Submit ``setName(candidate)`` from ``account`` and wait for the receipt.

        Returns:
            True only for a confirmed, non-reverted receipt carrying a
            transaction hash. Rejections and timeouts return False.
        """
        binding = self.binding
        if binding is None or not account:
            return False

        provider = self.session.provider
        calldata = encode_function_call(self.abi, "setName", [candidate])
        try:
            tx_hash = await provider.request(
                "eth_sendTransaction",
                [{"from": account, "to": binding.address, "data": calldata}],
            )
            if not tx_hash:
                log.info("set_name_no_transaction", name=candidate)
                return False
            receipt = await wait_for_receipt(
                provider.request,
                tx_hash,
                timeout=self.receipt_timeout,
                poll_interval=self.poll_interval,
            )
        except ProviderError as exc:
            log.info("set_name_rejected", name=candidate, code=exc.code, error=exc.message)
            return False
        except TimeoutError:
            log.warning("set_name_unconfirmed", name=candidate, timeout=self.receipt_timeout)
            return False

        ok = receipt_succeeded(receipt)
        log.info("set_name_result", name=candidate, tx_hash=receipt.get("transactionHash"), ok=ok)
        return ok
