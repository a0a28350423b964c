"""
Transaction Builder - Build, sign, and confirm Ethereum transactions.

Used by the in-process wallet: eth-account signs, the node receives the raw
transaction. Receipt polling is shared by every provider.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable, Optional

from eth_account.signers.local import LocalAccount

from ..utils import hex_to_int
from .rpc import to_checksum_address

DEFAULT_GAS_LIMIT = 500_000

Request = Callable[..., Awaitable[Any]]


async def build_transaction(
    request: Request,
    sender: str,
    call: dict[str, Any],
    chain_id: int,
) -> dict[str, Any]:
    """
    Fill in an eth_sendTransaction-style call object for local signing.

    Args:
        request: Coroutine function issuing JSON-RPC requests to the node
        sender: Address whose nonce is used
        call: ``{"to", "data", "value"?, "gas"?}`` as sent by the registry client
        chain_id: Chain id the signature is bound to

    Returns:
        Unsigned transaction dict
    """
    nonce = hex_to_int(await request("eth_getTransactionCount", [sender, "pending"]))
    gas_price = hex_to_int(await request("eth_gasPrice"))

    tx: dict[str, Any] = {
        "to": to_checksum_address(call["to"]),
        "data": call.get("data", "0x"),
        "value": hex_to_int(call.get("value", 0)),
        "nonce": nonce,
        "gas": hex_to_int(call["gas"]) if call.get("gas") else DEFAULT_GAS_LIMIT,
        "gasPrice": gas_price,
        "chainId": chain_id,
    }
    return tx


def sign_transaction(account: LocalAccount, tx: dict[str, Any]) -> str:
    """Sign a transaction and return the 0x-prefixed raw bytes."""
    signed = account.sign_transaction(tx)
    raw = signed.raw_transaction.hex()
    return raw if raw.startswith("0x") else "0x" + raw


async def wait_for_receipt(
    request: Request,
    tx_hash: str,
    timeout: float = 120,
    poll_interval: float = 2.0,
) -> dict:
    """
    Wait for a transaction receipt.

    Args:
        request: Coroutine function issuing JSON-RPC requests
        tx_hash: Transaction hash
        timeout: Maximum wait time in seconds
        poll_interval: Polling interval in seconds

    Returns:
        Transaction receipt dict

    Raises:
        TimeoutError: If receipt not found within timeout
    """
    start = time.monotonic()
    while time.monotonic() - start < timeout:
        receipt: Optional[dict] = await request("eth_getTransactionReceipt", [tx_hash])
        if receipt is not None:
            return receipt
        await asyncio.sleep(poll_interval)

    raise TimeoutError(f"Transaction {tx_hash} not confirmed within {timeout}s")


def receipt_succeeded(receipt: Optional[dict]) -> bool:
    """A receipt counts only with a transaction hash and a non-reverted status."""
    if not receipt or not receipt.get("transactionHash"):
        return False
    status = receipt.get("status")
    if status is None:
        return True
    return hex_to_int(status) == 1
