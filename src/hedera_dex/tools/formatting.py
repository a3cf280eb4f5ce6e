"""Human-readable chat responses for pool and swap results."""

from typing import List

from ..models import LIQUIDITY_AVAILABLE, LIQUIDITY_UNKNOWN, PoolRecord
from .pools import PoolListing, PoolLookup
from .swap import ExecutedSwap, SimulatedSwap, SwapRequest


def format_fee(pool: PoolRecord) -> str:
    return f"{pool.fee_percent:.2f}%"


def format_liquidity(liquidity: str) -> str | None:
    """Format a liquidity value for display, or None if there is nothing to show."""
    if liquidity == LIQUIDITY_AVAILABLE:
        return "Available"
    if liquidity in (LIQUIDITY_UNKNOWN, "0", ""):
        return None
    try:
        value = int(liquidity)
    except ValueError:
        return liquidity
    return f"{value:,}" if value > 0 else None


def format_pool_listing(listing: PoolListing, max_pools: int = 20) -> str:
    lines = [f"SaucerSwap V2 Liquidity Pools ({listing.network})", ""]
    lines.append(f"Found {len(listing.pools)} active pools:")
    lines.append("")

    for pool in listing.pools[:max_pools]:
        lines.append(f"{pool.id}. {pool.pair}")
        lines.append(f"   • Fee Tier: {format_fee(pool)}")
        lines.append(f"   • Contract ID: {pool.contract_id}")
        liquidity = format_liquidity(pool.liquidity)
        if liquidity:
            lines.append(f"   • Liquidity: {liquidity}")
        lines.append(f"   • Token A: {pool.token_a.name} ({pool.token_a.symbol})")
        lines.append(f"   • Token B: {pool.token_b.name} ({pool.token_b.symbol})")
        lines.append("")

    if len(listing.pools) > max_pools:
        lines.append(f"... and {len(listing.pools) - max_pools} more pools.")

    lines.append(f"Data source: {listing.data_source}")
    return "\n".join(lines)


def _single_pool_details(pool: PoolRecord) -> List[str]:
    lines = [f"**{pool.pair} Pool**", ""]
    lines.append(f"• **Fee Tier:** {format_fee(pool)}")
    lines.append(f"• **Contract ID:** {pool.contract_id}")
    liquidity = format_liquidity(pool.liquidity)
    if liquidity:
        lines.append(f"• **Liquidity:** {liquidity}")

    lines.append("")
    lines.append("**Token Details:**")
    for token in (pool.token_a, pool.token_b):
        lines.append(f"• **{token.symbol}:** {token.name} ({token.decimals} decimals)")

    descriptions = [t for t in (pool.token_a, pool.token_b) if t.description]
    if descriptions:
        lines.append("")
        lines.append("**Descriptions:**")
        for token in descriptions:
            lines.append(f"• **{token.symbol}:** {token.description}")
    return lines


def format_pool_lookup(lookup: PoolLookup) -> str:
    lines = [f"Pool Information for {lookup.token_pair}", ""]

    if len(lookup.pools) == 1:
        lines.extend(_single_pool_details(lookup.pools[0]))
    else:
        lines.append(f"Found {len(lookup.pools)} pools for this token pair:")
        lines.append("")
        for index, pool in enumerate(lookup.pools, start=1):
            lines.append(f"{index}. **{pool.pair}** ({format_fee(pool)} fee)")
            lines.append(f"   • Contract ID: {pool.contract_id}")
            liquidity = format_liquidity(pool.liquidity)
            if liquidity:
                lines.append(f"   • Liquidity: {liquidity}")
            lines.append("")

    lines.append("")
    lines.append(f"Data source: {lookup.data_source}")
    return "\n".join(lines)


def format_executed_swap(request: SwapRequest, swap: ExecutedSwap) -> str:
    lines = ["**Token Swap Executed Successfully!**", "", "**Transaction Details:**"]
    lines.append(f"• **From:** {request.amount} {request.from_token}")
    lines.append(f"• **To:** {swap.amount_out} {request.to_token}")
    lines.append(f"• **Transaction ID:** {swap.transaction_id}")
    lines.append(f"• **Network:** {swap.network.upper()}")
    if swap.explorer_url:
        lines.append(f"• **Explorer:** {swap.explorer_url}")
    lines.append("")
    lines.append("Transaction may take a few moments to confirm. Check your wallet for updated balances.")
    return "\n".join(lines)


def format_simulated_swap(request: SwapRequest, swap: SimulatedSwap) -> str:
    lines = [f"**Token Swap Simulation** ({request.network})", "", "**Swap Details:**"]
    lines.append(f"• **From:** {request.amount} {request.from_token}")
    lines.append(f"• **To:** ~{swap.estimated_output} {request.to_token}")
    lines.append(f"• **Fee Tier:** {swap.fee_tier}%")
    lines.append(f"• **Price Impact:** {swap.price_impact}%")
    lines.append(f"• **Route:** {swap.route}")
    lines.append(f"• **Network:** {request.network.upper()}")
    lines.append("")
    lines.append("**Simulation Mode**")
    lines.append("This is a simulation. To execute real swaps:")
    lines.append("1. Set HEDERA_PRIVATE_KEY")
    lines.append("2. Set HEDERA_ACCOUNT_ID")
    lines.append(f"3. Ensure sufficient {request.from_token} balance")
    lines.append("4. Ensure the target token is associated to the account")
    return "\n".join(lines)
