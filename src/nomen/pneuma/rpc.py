"""
Async JSON-RPC client and ABI call encoding.

Lightweight alternative to web3.py: uses httpx for HTTP + eth-abi for encoding.
Every call is a single suspension point; nothing here retries.
"""

from __future__ import annotations

import itertools
from typing import Any, Optional

import httpx
import structlog
from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_hash.auto import keccak

from ..errors import INTERNAL_ERROR, ContractError, ProviderError, RpcError

log = structlog.get_logger()

DEFAULT_TIMEOUT = 30.0

_request_ids = itertools.count(1)


def keccak256(data: bytes) -> bytes:
    """Compute Keccak-256 (NOT the same as hashlib.sha3_256 / NIST SHA-3)."""
    return keccak(data)


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format.

    eth-account requires checksummed addresses in transaction fields.
    """
    addr = address.lower().replace("0x", "")
    addr_hash = keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


class JsonRpcTransport:
    """
    Posts JSON-RPC 2.0 requests to one endpoint.

    A shared ``httpx.AsyncClient`` may be injected; otherwise a short-lived
    client is opened per request.
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._client = client

    async def call(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            ProviderError: If the endpoint answers with a JSON-RPC error
            RpcError: If the request cannot be completed
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(_request_ids),
        }

        try:
            if self._client is not None:
                response = await self._client.post(self.url, json=payload, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.url, json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            log.debug("rpc_transport_error", method=method, url=self.url, error=str(exc))
            raise RpcError(INTERNAL_ERROR, f"{method} failed: {exc}") from exc

        if not isinstance(data, dict):
            raise RpcError(INTERNAL_ERROR, f"{method} returned a malformed response")

        error = data.get("error")
        if error:
            if isinstance(error, dict):
                raise ProviderError(
                    int(error.get("code", INTERNAL_ERROR)),
                    str(error.get("message", "RPC error")),
                    error.get("data"),
                )
            raise ProviderError(INTERNAL_ERROR, str(error))

        return data.get("result")


def _find_function(abi: list, function_name: str) -> dict:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ContractError(f"Function {function_name} not found in ABI")


def encode_function_call(abi: list, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Args:
        abi: Contract ABI
        function_name: Function name to call
        args: Function arguments

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = _find_function(abi, function_name)

    input_types = [inp["type"] for inp in func.get("inputs", [])]
    if len(input_types) != len(args):
        raise ContractError(
            f"{function_name} expects {len(input_types)} argument(s), got {len(args)}"
        )
    sig = f"{function_name}({','.join(input_types)})"

    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    selector = keccak256(sig.encode("utf-8"))[:4]

    encoded_args = encode(input_types, args) if args else b""

    return "0x" + selector.hex() + encoded_args.hex()


def decode_function_result(abi: list, function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        Decoded result (single value, tuple, or None for no outputs)
    """
    func = _find_function(abi, function_name)

    output_types = [out["type"] for out in func.get("outputs", [])]
    if not output_types:
        return None

    try:
        raw = bytes.fromhex(data[2:]) if data.startswith("0x") else bytes.fromhex(data)
        decoded = decode(output_types, raw)
    except (DecodingError, ValueError) as exc:
        raise ContractError(f"Cannot decode {function_name} result: {exc}") from exc

    if len(decoded) == 1:
        return decoded[0]
    return decoded
