"""Error types shared across nomen.

Every error carries an ``exit_code`` used by the CLI when it aborts.
"""

from __future__ import annotations

from typing import Any, Optional


class NomenError(RuntimeError):
    exit_code: int = 1


class ConfigError(NomenError):
    exit_code = 2


class ProviderError(NomenError):
    """A wallet provider refused or failed a request.

    ``code`` follows EIP-1193 / JSON-RPC conventions (4001 user rejected,
    4902 unrecognized chain, -32601 method not found).
    """

    exit_code = 3

    def __init__(self, code: int, message: str, data: Optional[Any] = None) -> None:
        super().__init__(f"[{code}] {message}")
        self.code = code
        self.message = message
        self.data = data


class RpcError(ProviderError):
    """Transport-level failure talking to a JSON-RPC endpoint."""


class ContractError(NomenError):
    exit_code = 4


USER_REJECTED = 4001
UNRECOGNIZED_CHAIN = 4902
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603
