"""Domain models for decoded SaucerSwap pools."""

from dataclasses import dataclass
from typing import List

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

LIQUIDITY_AVAILABLE = "Available"
LIQUIDITY_UNKNOWN = "N/A"


class TokenMetadata(BaseModel):
    """Descriptive metadata for a Hedera token."""

    model_config = ConfigDict(frozen=True)

    token_id: str
    name: str
    symbol: str
    decimals: int = Field(default=8, ge=0)
    description: str | None = None


class PoolRecord(BaseModel):
    """A liquidity pool with both of its tokens resolved."""

    id: int = Field(ge=1, description="1-based position in the result set")
    contract_id: str
    token_a: TokenMetadata
    token_b: TokenMetadata
    fee: int = Field(ge=0, le=1_000_000, description="Fee in hundredths of a basis point")
    liquidity: str = LIQUIDITY_AVAILABLE

    @model_validator(mode="after")
    def _check_distinct_tokens(self) -> "PoolRecord":
        if self.token_a.token_id == self.token_b.token_id:
            raise ValueError(
                f"Pool {self.contract_id} references token {self.token_a.token_id} twice"
            )
        return self

    @computed_field
    @property
    def fee_percent(self) -> float:
        """Fee tier as a percentage (3000 -> 0.30)."""
        return self.fee / 10_000

    @property
    def pair(self) -> str:
        return f"{self.token_a.symbol}/{self.token_b.symbol}"

    def has_symbols(self, symbol_a: str, symbol_b: str) -> bool:
        """Check whether the pool trades exactly this pair, in either order."""
        pool_symbols = {self.token_a.symbol.upper(), self.token_b.symbol.upper()}
        return pool_symbols == {symbol_a.upper(), symbol_b.upper()}


class RawLogEntry(BaseModel):
    """A contract log entry as returned by the mirror node."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    topics: List[str] = Field(default_factory=list)
    data: str = "0x"

    @field_validator("topics", mode="before")
    @classmethod
    def _default_topics(cls, value):
        return [] if value is None else value

    @field_validator("data", mode="before")
    @classmethod
    def _default_data(cls, value):
        return "0x" if value is None else value


@dataclass(frozen=True)
class PoolCandidate:
    """Fields decoded from one pool-created event, before token lookup."""

    token0_id: str
    token1_id: str
    fee: int
    pool_id: str
