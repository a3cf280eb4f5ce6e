"""Tools for the Hedera DEX agent."""

from .log_decoder import (
    decode_pool_created,
    decode_pool_created_logs,
    hex_to_entity_id,
    synthetic_pool_id,
)
from .mirror_node import MirrorNodeClient
from .pool_assembler import PoolAssembler, assemble_pool
from .pools import (
    DemoDataFallback,
    NoFallback,
    PoolListing,
    PoolLookup,
    PoolQueryService,
)
from .swap import (
    ExecutedSwap,
    SimulatedSwap,
    SwapExecutor,
    SwapFailure,
    SwapRequest,
    simulate_swap,
)

__all__ = [
    # Log decoding
    "decode_pool_created",
    "decode_pool_created_logs",
    "hex_to_entity_id",
    "synthetic_pool_id",
    # Mirror node
    "MirrorNodeClient",
    # Pools
    "PoolAssembler",
    "assemble_pool",
    "DemoDataFallback",
    "NoFallback",
    "PoolListing",
    "PoolLookup",
    "PoolQueryService",
    # Swaps
    "ExecutedSwap",
    "SimulatedSwap",
    "SwapExecutor",
    "SwapFailure",
    "SwapRequest",
    "simulate_swap",
]
