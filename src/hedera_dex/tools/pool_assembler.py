"""Combine decoded pool candidates with token metadata into pool records."""

import logging
from typing import Iterable, List

from ..models import LIQUIDITY_AVAILABLE, LIQUIDITY_UNKNOWN, PoolCandidate, PoolRecord, TokenMetadata
from .mirror_node import MirrorNodeClient

logger = logging.getLogger(__name__)


def assemble_pool(
    candidate: PoolCandidate,
    token_a: TokenMetadata | None,
    token_b: TokenMetadata | None,
    index: int,
    liquidity: str | None = None,
) -> PoolRecord | None:
    """Build a pool record from a candidate and its two token lookups.

    Args:
        candidate: Decoded pool-created event
        token_a: Metadata for token0, or None if the lookup failed
        token_b: Metadata for token1, or None if the lookup failed
        index: 1-based position of the record in the result set
        liquidity: Exact liquidity amount if known

    Returns:
        The pool record, or None if either token is unresolved.
    """
    if token_a is None or token_b is None:
        logger.warning(
            f"Failed to fetch token info for pool: {candidate.token0_id}/{candidate.token1_id}"
        )
        return None

    if token_a.token_id == token_b.token_id:
        logger.warning(f"Skipping pool {candidate.pool_id}: both sides are {token_a.token_id}")
        return None

    if not liquidity or liquidity == LIQUIDITY_UNKNOWN:
        liquidity = LIQUIDITY_AVAILABLE

    return PoolRecord(
        id=index,
        contract_id=candidate.pool_id,
        token_a=token_a,
        token_b=token_b,
        fee=candidate.fee,
        liquidity=liquidity,
    )


class PoolAssembler:
    """Resolve the tokens of each candidate and build the pool list."""

    def __init__(self, client: MirrorNodeClient, resolve_liquidity: bool = False):
        self.client = client
        self.resolve_liquidity = resolve_liquidity

    def assemble(self, candidates: Iterable[PoolCandidate]) -> List[PoolRecord]:
        """Build pool records for every candidate whose tokens resolve.

        Records are numbered 1..n in output order. A candidate with an
        unresolved token is dropped; the rest of the batch continues.
        """
        pools: List[PoolRecord] = []
        for candidate in candidates:
            token_a, token_b = self.client.fetch_token_pair(
                candidate.token0_id, candidate.token1_id
            )

            liquidity = None
            if self.resolve_liquidity and token_a and token_b:
                liquidity = self.client.fetch_pool_liquidity(candidate.pool_id)

            pool = assemble_pool(candidate, token_a, token_b, len(pools) + 1, liquidity)
            if pool is None:
                continue

            pools.append(pool)
            logger.info(
                f"Successfully parsed pool: {pool.pair} (fee: {pool.fee_percent:.2f}%)"
            )

        return pools
