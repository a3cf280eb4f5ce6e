"""LangChain tools exposing the SaucerSwap actions to the agent."""

from langchain_core.tools import StructuredTool, tool
from pydantic import BaseModel, Field

from ..actions import describe_dex, run_get_pool_info, run_list_pools, run_swap_tokens
from ..config_loader import get_config, load_settings
from .swap import SwapRequest


class SwapTokensInput(BaseModel):
    """Input for the swap_tokens tool."""

    amount: float = Field(gt=0, description="Amount of the input token to swap")
    from_token: str = Field(description="Symbol of the token to sell (e.g., HBAR, USDC)")
    to_token: str = Field(description="Symbol of the token to buy (e.g., SAUCE, USDT)")
    network: str | None = Field(
        default=None,
        description="Hedera network (mainnet, testnet). Defaults to HEDERA_NETWORK",
    )


@tool
def list_pools() -> str:
    """List the SaucerSwap V2 liquidity pools on the configured Hedera network.

    Returns:
        Formatted pool list with fee tiers, contract ids and tokens
    """
    return run_list_pools(load_settings()).response


@tool
def get_pool_info(token_a: str, token_b: str) -> str:
    """Get the SaucerSwap V2 pools for a token pair.

    Args:
        token_a: First token symbol (e.g., WHBAR)
        token_b: Second token symbol (e.g., USDC)

    Returns:
        Pool details, or the reason no pool was found
    """
    return run_get_pool_info(token_a, token_b, load_settings()).response


@tool
def get_dex_status() -> str:
    """Describe the active Hedera DEX integration: network, mirror node and swap mode."""
    settings = load_settings()
    status = describe_dex(settings, get_config())
    return f"{status['text']} (swaps: {status['values']['swapExecution']})"


def swap_tokens(
    amount: float, from_token: str, to_token: str, network: str | None = None
) -> str:
    settings = load_settings()
    request = SwapRequest(
        amount=amount,
        from_token=from_token.upper(),
        to_token=to_token.upper(),
        network=(network or settings.network).lower(),
    )
    return run_swap_tokens(request, settings).response


swap_tokens_tool = StructuredTool(
    name="swap_tokens",
    description="""Swap tokens through the SaucerSwap V2 router on Hedera.

    Executes the swap when HEDERA_PRIVATE_KEY and HEDERA_ACCOUNT_ID are set,
    otherwise returns a clearly marked simulation with an estimated output.
    NEVER log or expose private keys.""",
    func=lambda **kwargs: swap_tokens(**kwargs),
    args_schema=SwapTokensInput,
)


# Export tools
dex_tools = [list_pools, get_pool_info, swap_tokens_tool, get_dex_status]
