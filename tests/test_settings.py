"""
Tests for configuration loading.
"""

import pytest
from pydantic import ValidationError

from chain.contracts import DATA_LIQUIDITY_POOL, TEE_POOL, resolve_contract
from shared.config.settings import DEFAULT_PROOF_URL, Settings, load_settings
from shared.errors import ConfigurationError


def test_defaults(monkeypatch):
    for name in ("PROOF_URL", "USER_EMAIL", "CONFIRMATIONS", "CHAIN_ID", "SERVICE_BASE"):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.PROOF_URL == DEFAULT_PROOF_URL
    assert settings.USER_EMAIL == "user@example.com"
    assert settings.CONFIRMATIONS == 1
    assert settings.CHAIN_ID is None
    assert settings.SERVICE_BASE == "/proof"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("USER_EMAIL", "alice@example.com")
    monkeypatch.setenv("CHAIN_ID", "14800")
    monkeypatch.setenv("SERVICE_BASE", "/tee-proof/")
    monkeypatch.setenv("REQUEST_TIMEOUT_S", "30")

    settings = load_settings()

    assert settings.USER_EMAIL == "alice@example.com"
    assert settings.CHAIN_ID == 14800
    assert settings.SERVICE_BASE == "/tee-proof"
    assert settings.REQUEST_TIMEOUT_S == 30.0


def test_confirmations_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(CONFIRMATIONS=0)


class TestResolveContract:

    def test_known_contracts(self, settings):
        assert resolve_contract(TEE_POOL, settings).address == settings.TEE_POOL_ADDRESS
        dlp = resolve_contract(DATA_LIQUIDITY_POOL, settings)
        assert dlp.address == settings.DATA_LIQUIDITY_POOL_ADDRESS
        assert [f["name"] for f in dlp.abi] == ["publicKey"]

    def test_unknown_contract(self, settings):
        with pytest.raises(ConfigurationError, match="Unknown contract"):
            resolve_contract("DataRegistryProxy", settings)

    def test_missing_address(self, settings):
        settings.TEE_POOL_ADDRESS = ""

        with pytest.raises(ConfigurationError, match="TEE_POOL_ADDRESS"):
            resolve_contract(TEE_POOL, settings)
