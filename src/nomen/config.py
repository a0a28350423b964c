"""
Configuration for nomen.

Values come from the process environment, optionally seeded from
``~/.nomen/.env``. Variables already present in the environment win over the
file.

    NAME_CONTRACT_NETWORK_ID   chain id the registry is deployed on
    NAME_CONTRACT_ADDRESS      registry contract address
    WALLET_RPC_URL             wallet / node endpoint (unset = no wallet)
    PRIVATE_KEY                sign locally instead of through the endpoint
    NOMEN_NETWORKS             JSON object {chainId: rpcUrl} for switching
    CHAIN_LIST_URL             chain metadata list
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigError
from .utils import normalize_chain_id

NOMEN_DIR = Path.home() / ".nomen"
NOMEN_ENV = NOMEN_DIR / ".env"

DEFAULT_CHAIN_LIST_URL = "https://chainid.network/chains.json"
DEFAULT_RPC_TIMEOUT = 30.0
DEFAULT_RECEIPT_TIMEOUT = 120.0
DEFAULT_POLL_INTERVAL = 2.0

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
_LOG_FORMATS = ("text", "json")


@dataclass(frozen=True)
class Settings:
    contract_chain_id: Optional[str] = None
    contract_address: Optional[str] = None
    wallet_rpc_url: Optional[str] = None
    private_key: Optional[str] = None
    networks: dict[str, str] = field(default_factory=dict)
    chain_list_url: str = DEFAULT_CHAIN_LIST_URL
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    log_level: str = "WARNING"
    log_format: str = "text"

    @property
    def registry_configured(self) -> bool:
        return bool(self.contract_chain_id and self.contract_address)


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def _choice(env: Mapping[str, str], name: str, default: str, choices: tuple[str, ...]) -> str:
    raw = (env.get(name) or default).strip()
    for choice in choices:
        if raw.lower() == choice.lower():
            return choice
    raise ConfigError(f"{name} must be one of {', '.join(choices)}, got {raw!r}")


def _networks(env: Mapping[str, str]) -> dict[str, str]:
    raw = env.get("NOMEN_NETWORKS")
    if not raw or not raw.strip():
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"NOMEN_NETWORKS is not valid JSON: {exc}")
    if not isinstance(parsed, dict):
        raise ConfigError("NOMEN_NETWORKS must be a JSON object of chainId -> rpcUrl")

    networks: dict[str, str] = {}
    for chain_id, url in parsed.items():
        key = normalize_chain_id(chain_id)
        if key is None or not isinstance(url, str) or not url:
            raise ConfigError(f"Invalid NOMEN_NETWORKS entry: {chain_id!r} -> {url!r}")
        networks[key] = url
    return networks


def settings_from_env(env: Mapping[str, str]) -> Settings:
    """Build settings from a mapping of environment variables."""
    return Settings(
        contract_chain_id=normalize_chain_id(env.get("NAME_CONTRACT_NETWORK_ID")),
        contract_address=(env.get("NAME_CONTRACT_ADDRESS") or "").strip() or None,
        wallet_rpc_url=(env.get("WALLET_RPC_URL") or "").strip() or None,
        private_key=(env.get("PRIVATE_KEY") or "").strip() or None,
        networks=_networks(env),
        chain_list_url=(env.get("CHAIN_LIST_URL") or "").strip() or DEFAULT_CHAIN_LIST_URL,
        rpc_timeout=_float(env, "NOMEN_RPC_TIMEOUT", DEFAULT_RPC_TIMEOUT),
        receipt_timeout=_float(env, "NOMEN_RECEIPT_TIMEOUT", DEFAULT_RECEIPT_TIMEOUT),
        poll_interval=_float(env, "NOMEN_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
        log_level=_choice(env, "NOMEN_LOG_LEVEL", "WARNING", _LOG_LEVELS),
        log_format=_choice(env, "NOMEN_LOG_FORMAT", "text", _LOG_FORMATS),
    )


def load_settings(env_path: Optional[Path] = None) -> Settings:
    """
    Load settings from the environment.

    Args:
        env_path: Path to a .env file (default: ~/.nomen/.env)

    Returns:
        Frozen Settings instance

    Raises:
        ConfigError: If a variable is present but malformed
    """
    env_path = env_path or NOMEN_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)
    return settings_from_env(os.environ)
