"""
ABI Loader - Loads contract ABIs from the artifacts bundled with nomen.

Artifacts live in ``pneuma/contracts/<Name>.json`` and carry the compiled
contract's ``abi`` list.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from ..errors import ContractError

CONTRACTS_DIR = Path(__file__).resolve().parent / "contracts"


@lru_cache(maxsize=16)
def load_abi(contract_name: str) -> list[dict[str, Any]]:
    """
    Load the ABI for a bundled contract artifact.

    Args:
        contract_name: Contract name (e.g., "NameStorage")

    Returns:
        ABI as a list of dicts

    Raises:
        ContractError: If the artifact is missing or has no ABI
    """
    artifact_path = CONTRACTS_DIR / f"{contract_name}.json"

    if not artifact_path.exists():
        raise ContractError(f"ABI not found: {artifact_path}")

    with artifact_path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)

    abi = artifact.get("abi")
    if not isinstance(abi, list):
        raise ContractError(f"No ABI in artifact for {contract_name}")

    return abi


def name_storage_abi() -> list[dict[str, Any]]:
    """Load NameStorage ABI."""
    return load_abi("NameStorage")
