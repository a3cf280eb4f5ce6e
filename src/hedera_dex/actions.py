"""Agent actions: list pools, get pool info, swap tokens.

Each action takes the user's message and the runtime settings, and returns an
``ActionResult`` holding a one-line summary, the formatted chat response and
structured values. Actions never raise; failures come back with
``success=False`` and a reason tag, while the full error goes to the log.
"""

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

from .config_loader import get_config
from .config_models import Config, DexSettings
from .errors import HederaDexError, MessageParseError, PoolNotFoundError
from .tools.formatting import (
    format_executed_swap,
    format_pool_listing,
    format_pool_lookup,
    format_simulated_swap,
)
from .tools.pools import PoolQueryService
from .tools.swap import ExecutedSwap, SimulatedSwap, SwapExecutor, SwapRequest

logger = logging.getLogger(__name__)

LIST_POOLS = "LIST_POOLS"
GET_POOL_INFO = "GET_POOL_INFO"
SWAP_TOKENS = "SWAP_TOKENS"

PAIR_PATTERNS = [
    re.compile(r"\b([a-z]{2,10})/([a-z]{2,10})\b", re.IGNORECASE),
    re.compile(r"\b([a-z]{2,10})\s+(?:and|with)\s+([a-z]{2,10})\b", re.IGNORECASE),
]
POOL_KEYWORDS = ("pool", "pair", "details")

SWAP_PATTERNS = [
    re.compile(r"swap\s+(\d+(?:\.\d+)?)\s+(\w+)\s+(?:for|to|into)\s+(\w+)", re.IGNORECASE),
    re.compile(r"(\d+(?:\.\d+)?)\s+(\w+)\s+(?:for|to|into)\s+(\w+)", re.IGNORECASE),
]
SWAP_KEYWORDS = ("swap", "trade", "exchange", "buy", "sell")
SWAP_AMOUNT = re.compile(r"\d+(\.\d+)?\s*(hbar|whbar|usdt|usdc|sauce|bonzo|kbl)\b", re.IGNORECASE)
SWAP_CONNECTORS = (" for ", " to ", " into ")


@dataclass
class ActionResult:
    """Outcome of an action, ready for the agent runtime."""

    success: bool
    text: str
    response: str
    values: Dict[str, Any] = field(default_factory=dict)
    data: Dict[str, Any] = field(default_factory=dict)
    error: str | None = None


@dataclass(frozen=True)
class Action:
    """An agent capability with its trigger check and handler."""

    name: str
    similes: Tuple[str, ...]
    description: str
    validate: Callable[[str], bool]
    handler: Callable[..., ActionResult]
    examples: Tuple[str, ...] = ()


def _timestamp() -> int:
    return int(time.time() * 1000)


def _failure(action_name: str, error_tag: str, prefix: str, error: Exception) -> ActionResult:
    """Turn an exception into a user-facing failure and log the details."""
    logger.error(f"Error in {action_name} action: {error}", exc_info=True)

    if isinstance(error, HederaDexError):
        message, reason = error.message, error.reason
    else:
        message, reason = str(error), "UNEXPECTED_ERROR"

    data = {
        "actionName": action_name,
        "error": message,
        "reason": reason,
        "timestamp": _timestamp(),
    }
    if isinstance(error, PoolNotFoundError):
        data["availableTokens"] = error.available_symbols

    text = f"{prefix}: {message}"
    return ActionResult(
        success=False,
        text=text,
        response=text,
        values={"success": False, "error": error_tag},
        data=data,
        error=message,
    )


# --- Message parsing ---------------------------------------------------------


def parse_token_pair(text: str) -> Tuple[str, str]:
    """Extract a token pair like "WHBAR/USDC" or "SAUCE and XSAUCE".

    Raises:
        MessageParseError: If no pair is found.
    """
    for pattern in PAIR_PATTERNS:
        match = pattern.search(text or "")
        if match:
            return match.group(1).upper(), match.group(2).upper()
    raise MessageParseError(
        'Could not extract token pair from message. Please specify tokens like '
        '"WHBAR/USDC" or "WHBAR and USDC"'
    )


def parse_swap_request(text: str, network: str) -> SwapRequest:
    """Extract a swap like "Swap 10 HBAR for USDT".

    Raises:
        MessageParseError: If the message has no amount and token pair.
    """
    for pattern in SWAP_PATTERNS:
        match = pattern.search(text or "")
        if match:
            amount, from_token, to_token = match.groups()
            return SwapRequest(
                amount=float(amount),
                from_token=from_token.upper(),
                to_token=to_token.upper(),
                network=network,
            )
    raise MessageParseError(
        'Could not parse swap parameters. Please use format like "Swap 10 HBAR for USDT"'
    )


def validate_list_pools(text: str) -> bool:
    return True


def validate_pool_info(text: str) -> bool:
    """A pool keyword and a token pair are both required."""
    lowered = (text or "").lower()
    if not any(keyword in lowered for keyword in POOL_KEYWORDS):
        return False
    return any(pattern.search(lowered) for pattern in PAIR_PATTERNS)


def validate_swap(text: str) -> bool:
    """A swap keyword, an amount of a known token and a for/to/into connector."""
    lowered = (text or "").lower()
    has_keyword = any(keyword in lowered for keyword in SWAP_KEYWORDS)
    has_amount = SWAP_AMOUNT.search(lowered) is not None
    has_connector = any(connector in lowered for connector in SWAP_CONNECTORS)
    return has_keyword and has_amount and has_connector


# --- Handlers ----------------------------------------------------------------


def run_list_pools(settings: DexSettings, service: PoolQueryService | None = None) -> ActionResult:
    """List pools for the configured network."""
    logger.info("Handling LIST_POOLS action")
    try:
        service = service or PoolQueryService(get_config())
        listing = service.list_pools(
            settings.network,
            mirror_node_url=settings.mirror_node_url,
            demo_mode=settings.demo_mode,
        )
    except Exception as e:
        return _failure(LIST_POOLS, "FETCH_POOLS_FAILED", "Failed to fetch pools from SaucerSwap", e)

    max_pools = service.config.query.max_display_pools
    return ActionResult(
        success=True,
        text=f"Successfully fetched {len(listing.pools)} pools from SaucerSwap",
        response=format_pool_listing(listing, max_pools),
        values={
            "success": True,
            "poolCount": len(listing.pools),
            "network": listing.network,
            "demoMode": listing.demo_mode,
        },
        data={
            "actionName": LIST_POOLS,
            "timestamp": _timestamp(),
            "pools": [pool.model_dump() for pool in listing.pools[:max_pools]],
            "totalPools": len(listing.pools),
            "dataSource": listing.data_source,
        },
    )


def run_get_pool_info(
    symbol_a: str,
    symbol_b: str,
    settings: DexSettings,
    service: PoolQueryService | None = None,
) -> ActionResult:
    """Look up the pools for a token pair on the configured network."""
    logger.info("Handling GET_POOL_INFO action")
    try:
        service = service or PoolQueryService(get_config())
        lookup = service.find_pool(
            settings.network,
            symbol_a,
            symbol_b,
            mirror_node_url=settings.mirror_node_url,
        )
    except Exception as e:
        return _failure(GET_POOL_INFO, "GET_POOL_INFO_FAILED", "Failed to get pool information", e)

    return ActionResult(
        success=True,
        text=f"Found {len(lookup.pools)} pool(s) for {lookup.token_pair}",
        response=format_pool_lookup(lookup),
        values={
            "success": True,
            "poolCount": len(lookup.pools),
            "tokenPair": lookup.token_pair,
            "network": settings.network,
        },
        data={
            "actionName": GET_POOL_INFO,
            "timestamp": _timestamp(),
            "pools": [pool.model_dump() for pool in lookup.pools],
            "tokenPair": lookup.token_pair,
            "dataSource": lookup.data_source,
        },
    )


def run_swap_tokens(
    request: SwapRequest,
    settings: DexSettings,
    executor: SwapExecutor | None = None,
) -> ActionResult:
    """Execute or simulate a swap."""
    logger.info(f"Parsed swap: {request.amount} {request.from_token} -> {request.to_token}")
    try:
        executor = executor or SwapExecutor(get_config(), settings)
        result = executor.execute(request)
    except Exception as e:
        return _failure(SWAP_TOKENS, "SWAP_TOKENS_FAILED", "Failed to process token swap", e)

    values = {
        "success": result.kind != "failed",
        "amount": request.amount,
        "fromToken": request.from_token,
        "toToken": request.to_token,
        "network": request.network,
        "simulation": result.kind == "simulated",
    }
    data = {"actionName": SWAP_TOKENS, "timestamp": _timestamp(), "kind": result.kind}

    if isinstance(result, ExecutedSwap):
        values["transactionId"] = result.transaction_id
        data["transactionId"] = result.transaction_id
        return ActionResult(
            success=True,
            text=f"Successfully executed swap: {request.amount} {request.from_token} → {request.to_token}",
            response=format_executed_swap(request, result),
            values=values,
            data=data,
        )

    if isinstance(result, SimulatedSwap):
        values["estimatedOutput"] = result.estimated_output
        data["swapDetails"] = {
            "estimatedOutput": result.estimated_output,
            "feeTier": result.fee_tier,
            "priceImpact": result.price_impact,
            "route": result.route,
        }
        return ActionResult(
            success=True,
            text=(
                f"Simulated swap: {request.amount} {request.from_token} → "
                f"{result.estimated_output} {request.to_token}"
            ),
            response=format_simulated_swap(request, result),
            values=values,
            data=data,
        )

    logger.error(f"Swap failed ({result.reason}): {result.message}")
    text = f"Failed to process token swap: {result.message}"
    values["error"] = "SWAP_TOKENS_FAILED"
    data.update({"error": result.message, "reason": result.reason})
    return ActionResult(
        success=False, text=text, response=text, values=values, data=data, error=result.message
    )


def handle_list_pools(
    message: str, settings: DexSettings, service: PoolQueryService | None = None
) -> ActionResult:
    return run_list_pools(settings, service)


def handle_get_pool_info(
    message: str, settings: DexSettings, service: PoolQueryService | None = None
) -> ActionResult:
    try:
        symbol_a, symbol_b = parse_token_pair(message)
    except MessageParseError as e:
        return _failure(GET_POOL_INFO, "GET_POOL_INFO_FAILED", "Failed to get pool information", e)
    return run_get_pool_info(symbol_a, symbol_b, settings, service)


def handle_swap_tokens(
    message: str, settings: DexSettings, executor: SwapExecutor | None = None
) -> ActionResult:
    try:
        request = parse_swap_request(message, settings.network)
    except MessageParseError as e:
        return _failure(SWAP_TOKENS, "SWAP_TOKENS_FAILED", "Failed to process token swap", e)
    return run_swap_tokens(request, settings, executor)


HEDERA_DEX_PROVIDER = "HEDERA_DEX_PROVIDER"


def describe_dex(settings: DexSettings, config: Config | None = None) -> Dict[str, Any]:
    """Describe the DEX integration for the agent's context."""
    config = config or get_config()
    network_config = config.networks.get(settings.network)
    mirror_node_url = settings.mirror_node_url or (
        network_config.mirror_node_url if network_config else None
    )
    return {
        "name": HEDERA_DEX_PROVIDER,
        "text": (
            f"Hedera DEX integration active on {settings.network} network "
            f"using Mirror Node at {mirror_node_url}"
        ),
        "values": {
            "network": settings.network,
            "mirrorNodeUrl": mirror_node_url,
            "capabilities": ["list_pools", "pool_information", "swap_tokens"],
            "demoMode": settings.demo_mode,
            "swapExecution": "live" if settings.has_wallet else "simulation",
        },
        "data": {
            "supportedNetworks": sorted(config.networks),
            "factoryContracts": {
                name: network.factory_contract for name, network in config.networks.items()
            },
        },
    }


ACTIONS: List[Action] = [
    Action(
        name=LIST_POOLS,
        similes=("GET_POOLS", "SHOW_POOLS", "FETCH_POOLS", "SAUCERSWAP_POOLS"),
        description="Lists all liquidity pools from SaucerSwap V2 with tokens, liquidity and fees",
        validate=validate_list_pools,
        handler=handle_list_pools,
        examples=(
            "Show me all the liquidity pools on SaucerSwap",
            "What pools are available for trading?",
        ),
    ),
    Action(
        name=GET_POOL_INFO,
        similes=("POOL_INFO", "SHOW_POOL", "POOL_DETAILS", "GET_POOL_DETAILS", "FIND_POOL"),
        description="Gets specific pool information by token pair (e.g., WHBAR/USDC, SAUCE/XSAUCE)",
        validate=validate_pool_info,
        handler=handle_get_pool_info,
        examples=(
            "Show WHBAR/USDC pool details",
            "Get pool info for SAUCE and XSAUCE",
        ),
    ),
    Action(
        name=SWAP_TOKENS,
        similes=("TRADE_TOKENS", "EXCHANGE_TOKENS", "SWAP", "TRADE", "EXCHANGE", "BUY_TOKENS", "SELL_TOKENS"),
        description="Swaps tokens via SaucerSwap DEX with specified amounts and token pairs",
        validate=validate_swap,
        handler=handle_swap_tokens,
        examples=(
            "Swap 10 HBAR for USDT",
            "Trade 100 USDC for SAUCE",
            "Exchange 5.5 WHBAR to BONZO",
        ),
    ),
]


def get_action(name: str) -> Action | None:
    for action in ACTIONS:
        if action.name == name or name in action.similes:
            return action
    return None
