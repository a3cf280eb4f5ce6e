"""Pydantic models for configuration schemas."""

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, Field, field_validator

from .errors import ConfigurationError
from .models import PoolRecord

POOL_CREATED_TOPIC = "0x783cca1c0412dd0d695e784568c96da2e9c22ff989357a2e8b1d9b2b4e6b7118"


class PoolIdPolicy(str, Enum):
    """How a pool's contract id is derived from a pool-created event."""

    PAYLOAD = "payload"  # slice the pool address out of the event data
    SYNTHETIC = "synthetic"  # derive a stable id from the token pair


class TokenConfig(BaseModel):
    """Configuration for a token on one network."""

    token_id: str
    decimals: int = 8


class NetworkConfig(BaseModel):
    """Configuration for a Hedera network and its SaucerSwap deployment."""

    name: str
    mirror_node_url: str
    json_rpc_url: str | None = None
    explorer_url: str | None = None
    factory_contract: str | None = None  # None where SaucerSwap V2 is not deployed
    router_contract: str | None = None
    pool_id_policy: PoolIdPolicy = PoolIdPolicy.SYNTHETIC
    tokens: Dict[str, TokenConfig] = {}

    def get_token(self, symbol: str) -> TokenConfig | None:
        """Look up a token by symbol. HBAR routes through WHBAR."""
        symbol = symbol.upper()
        if symbol == "HBAR":
            symbol = "WHBAR"
        return self.tokens.get(symbol)


class QueryConfig(BaseModel):
    """Configuration for pool discovery."""

    pool_created_topic: str = POOL_CREATED_TOPIC
    log_page_limit: int = Field(
        default=100, ge=20, le=100, description="Factory logs fetched per query"
    )
    request_timeout: float = Field(
        default=10.0, gt=0, description="Per-request HTTP timeout in seconds"
    )
    max_display_pools: int = Field(
        default=20, description="Pools shown in chat responses and HTTP payloads"
    )
    resolve_liquidity: bool = Field(
        default=False, description="Call liquidity() on each pool contract"
    )


class SwapConfig(BaseModel):
    """Configuration for swap execution and simulation."""

    fee_tier: int = Field(default=3000, description="Fee tier used for routing")
    gas_limit: int = 300_000
    deadline_seconds: int = 1800
    receipt_timeout: int = 120
    slippage_per_unit: float = Field(
        default=0.001, description="Simulated slippage per unit of input"
    )
    max_slippage: float = Field(default=0.05, description="Cap on simulated slippage")
    popular_pairs: List[str] = []
    rates: Dict[str, Dict[str, float]] = {}


class ModelConfig(BaseModel):
    """Configuration for LLM models."""

    provider: str = "openai"
    model_name: str = "gpt-4o-mini"
    max_tokens: int | None = None


class Config(BaseModel):
    """Main configuration container."""

    networks: Dict[str, NetworkConfig] = {}
    demo_pools: List[PoolRecord] = []
    query: QueryConfig = QueryConfig()
    swap: SwapConfig = SwapConfig()
    models: ModelConfig = ModelConfig()

    def get_network(self, name: str) -> NetworkConfig:
        """Get a network by name.

        Raises:
            ConfigurationError: If the network is not configured.
        """
        network = self.networks.get((name or "").strip().lower())
        if network is None:
            supported = ", ".join(sorted(self.networks)) or "none"
            raise ConfigurationError(
                f"Unsupported network: {name}. Supported networks: {supported}"
            )
        return network


class DexSettings(BaseModel):
    """Runtime settings supplied by the agent or the environment."""

    network: str = "mainnet"
    mirror_node_url: str | None = None
    demo_mode: bool = False
    private_key: str | None = Field(default=None, repr=False)
    account_id: str | None = None

    @field_validator("network", mode="before")
    @classmethod
    def _normalize_network(cls, value):
        if not value:
            return "mainnet"
        return str(value).strip().lower()

    @field_validator("demo_mode", mode="before")
    @classmethod
    def _parse_demo_mode(cls, value):
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "y", "on"}
        return bool(value)

    @field_validator("mirror_node_url", "private_key", "account_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def has_wallet(self) -> bool:
        """Whether both credentials needed for real swaps are configured."""
        return bool(self.private_key and self.account_id)
