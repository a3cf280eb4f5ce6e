"""Hedera SaucerSwap DEX agent.

Pool discovery from mirror-node factory logs, pool lookup by token pair and
token swaps, exposed as agent actions, LangChain tools and HTTP endpoints.
"""

from .actions import ACTIONS, ActionResult, describe_dex
from .config_loader import get_config, load_settings
from .tools.pools import PoolQueryService
from .tools.swap import SwapExecutor

__all__ = [
    "ACTIONS",
    "ActionResult",
    "PoolQueryService",
    "SwapExecutor",
    "describe_dex",
    "get_config",
    "load_settings",
]
