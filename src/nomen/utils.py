from __future__ import annotations

from typing import Any, Optional

WEI_PER_ETHER = 10**18


def normalize_chain_id(value: Any) -> Optional[str]:
    """Return a chain id as a decimal string, accepting ints and 0x-hex.

    ``None``, empty strings and unparseable values map to ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value) if value >= 0 else None
    text = str(value).strip()
    if not text:
        return None
    try:
        number = int(text, 16) if text.lower().startswith("0x") else int(text)
    except ValueError:
        return None
    return str(number) if number >= 0 else None


def chain_id_to_hex(chain_id: str) -> str:
    return hex(int(chain_id))


def hex_to_int(value: Any) -> int:
    if isinstance(value, int):
        return value
    text = str(value)
    return int(text, 16) if text.lower().startswith("0x") else int(text)


def from_wei(wei: int) -> str:
    """Format a wei amount as ether without floating point loss."""
    sign = "-" if wei < 0 else ""
    whole, frac = divmod(abs(wei), WEI_PER_ETHER)
    if not frac:
        return f"{sign}{whole}"
    return f"{sign}{whole}.{frac:018d}".rstrip("0")
