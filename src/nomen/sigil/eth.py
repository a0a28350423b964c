"""
ECDSA / secp256k1 key handling for the in-process wallet.

When PRIVATE_KEY is configured, nomen acts as its own wallet: the key below
signs registry transactions locally and the address is the single authorized
account.

Dependencies: eth-account (no full web3.py needed)
"""

from __future__ import annotations

from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..config import NOMEN_ENV
from ..errors import ConfigError


def normalize_private_key(private_key: Optional[str]) -> str:
    """
    Validate and 0x-prefix a hex private key.

    Raises:
        ConfigError: If the key is missing or not 32 bytes of hex
    """
    if not private_key:
        raise ConfigError(f"PRIVATE_KEY not found. Set PRIVATE_KEY in {NOMEN_ENV}")

    key = private_key.strip()
    if not key.startswith("0x"):
        key = "0x" + key

    try:
        raw = bytes.fromhex(key[2:])
    except ValueError:
        raise ConfigError("PRIVATE_KEY is not valid hex")
    if len(raw) != 32:
        raise ConfigError("PRIVATE_KEY must be 32 bytes")

    return key


def get_account(private_key: Optional[str]) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: hex private key, with or without 0x prefix

    Returns:
        LocalAccount instance for signing transactions
    """
    return Account.from_key(normalize_private_key(private_key))
