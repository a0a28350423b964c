"""Unit tests for environment-driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from nomen.config import DEFAULT_CHAIN_LIST_URL, load_settings, settings_from_env
from nomen.errors import ConfigError


class TestSettingsFromEnv:
    def test_defaults(self) -> None:
        settings = settings_from_env({})
        assert settings.contract_chain_id is None
        assert settings.wallet_rpc_url is None
        assert settings.networks == {}
        assert settings.chain_list_url == DEFAULT_CHAIN_LIST_URL
        assert settings.rpc_timeout == 30.0
        assert settings.log_level == "WARNING"
        assert settings.registry_configured is False

    def test_registry_binding_values(self) -> None:
        settings = settings_from_env(
            {"NAME_CONTRACT_NETWORK_ID": "0x4", "NAME_CONTRACT_ADDRESS": " 0xabc "}
        )
        assert settings.contract_chain_id == "4"
        assert settings.contract_address == "0xabc"
        assert settings.registry_configured is True

    def test_networks_keys_are_normalized(self) -> None:
        settings = settings_from_env(
            {"NOMEN_NETWORKS": '{"0x1": "https://eth.example", "137": "https://polygon.example"}'}
        )
        assert settings.networks == {
            "1": "https://eth.example",
            "137": "https://polygon.example",
        }

    @pytest.mark.parametrize(
        "raw", ["not json", "[1, 2]", '{"mainnet": "https://x"}', '{"1": ""}']
    )
    def test_malformed_networks(self, raw: str) -> None:
        with pytest.raises(ConfigError):
            settings_from_env({"NOMEN_NETWORKS": raw})

    @pytest.mark.parametrize("raw", ["soon", "0", "-5"])
    def test_bad_timeouts(self, raw: str) -> None:
        with pytest.raises(ConfigError):
            settings_from_env({"NOMEN_RPC_TIMEOUT": raw})

    def test_log_settings_are_case_insensitive(self) -> None:
        settings = settings_from_env({"NOMEN_LOG_LEVEL": "debug", "NOMEN_LOG_FORMAT": "JSON"})
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"

    def test_unknown_log_level(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            settings_from_env({"NOMEN_LOG_LEVEL": "LOUD"})
        assert exc_info.value.exit_code == 2


class TestLoadSettings:
    def test_env_file_fills_missing_values(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("NAME_CONTRACT_ADDRESS", "placeholder")
        monkeypatch.delenv("NAME_CONTRACT_ADDRESS")
        monkeypatch.setenv("NAME_CONTRACT_NETWORK_ID", "5")
        env_file = tmp_path / ".env"
        env_file.write_text(
            "NAME_CONTRACT_ADDRESS=0xfeed\nNAME_CONTRACT_NETWORK_ID=1\n", encoding="utf-8"
        )

        settings = load_settings(env_file)

        assert settings.contract_address == "0xfeed"
        # Real environment wins over the file
        assert settings.contract_chain_id == "5"
