"""
Settings - Configuration management
Role: Chain endpoints, contract addresses, wallet key, proof template values and agent ports

Every field defaults from the environment (a local .env file is loaded first),
so tests and scripts can also build Settings(...) explicitly.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

DEFAULT_PROOF_URL = (
    "https://github.com/vana-com/vana-satya-proof-template/releases/download/v24/gsc-my-proof-24.tar.gz"
)


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default)


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


class Settings(BaseModel):
    # Chain
    RPC_URL: str = Field(default_factory=lambda: _env("RPC_URL", "https://rpc.moksha.vana.org"))
    CHAIN_ID: Optional[int] = Field(
        default_factory=lambda: int(os.environ["CHAIN_ID"]) if os.getenv("CHAIN_ID") else None
    )
    PRIVATE_KEY: str = Field(default_factory=lambda: _env("PRIVATE_KEY"))
    TEE_POOL_ADDRESS: str = Field(default_factory=lambda: _env("TEE_POOL_ADDRESS"))
    DATA_LIQUIDITY_POOL_ADDRESS: str = Field(default_factory=lambda: _env("DATA_LIQUIDITY_POOL_ADDRESS"))
    CONFIRMATIONS: int = Field(default_factory=lambda: _env_int("CONFIRMATIONS", 1), ge=1)
    RECEIPT_TIMEOUT_S: float = Field(default_factory=lambda: _env_float("RECEIPT_TIMEOUT_S", 120.0))
    RECEIPT_POLL_S: float = Field(default_factory=lambda: _env_float("RECEIPT_POLL_S", 2.0))

    # Proof request template
    PROOF_URL: str = Field(default_factory=lambda: _env("PROOF_URL", DEFAULT_PROOF_URL))
    USER_EMAIL: str = Field(default_factory=lambda: _env("USER_EMAIL", "user@example.com"))
    REQUEST_TIMEOUT_S: float = Field(default_factory=lambda: _env_float("REQUEST_TIMEOUT_S", 300.0))

    # Agent / sidecar
    AGENT_SEED: str = Field(default_factory=lambda: _env("AGENT_SEED", "proof-agent-seed"))
    UAGENTS_PORT: int = Field(default_factory=lambda: _env_int("UAGENTS_PORT", 8001))
    PUBLIC_BASE_URL: str = Field(default_factory=lambda: _env("PUBLIC_BASE_URL"))
    SERVICE_BASE: str = Field(default_factory=lambda: _env("SERVICE_BASE", "/proof").rstrip("/"))
    PORT: int = Field(default_factory=lambda: _env_int("PORT", 8080))

    LOG_LEVEL: str = Field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))


def load_settings() -> Settings:
    """Read a fresh Settings from the current environment"""
    return Settings()
