"""Decoding of SaucerSwap V2 factory pool-created events.

A pool-created log carries the two token addresses and the fee tier as
indexed topics::

    topics[0]  event signature
    topics[1]  token0, 32-byte word whose low bytes hold the entity number
    topics[2]  token1, same layout
    topics[3]  fee tier, unsigned integer

The pool's own id is either sliced out of the data payload (bytes 32..52) or,
where the payload layout cannot be trusted, derived from the token pair. The
choice is a per-network ``PoolIdPolicy``.
"""

import logging
import re
from typing import Iterable, List

from ..config_models import POOL_CREATED_TOPIC, PoolIdPolicy
from ..models import PoolCandidate, RawLogEntry
from .utils import entity_number, strip_hex_prefix

logger = logging.getLogger(__name__)

INVALID_ENTITY_ID = "0.0.0"
MAX_ENTITY_NUMBER = 100_000_000
MAX_FEE = 1_000_000
SYNTHETIC_POOL_OFFSET = 1_000_000

# Byte range of the pool address inside the event data
POOL_ADDRESS_START = 32
POOL_ADDRESS_END = 52

HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")


def parse_uint(value: str) -> int:
    """Parse an unsigned hex word, with or without 0x.

    Raises:
        ValueError: If the value is empty or holds anything but hex digits.
    """
    digits = strip_hex_prefix(value.strip())
    if not HEX_DIGITS.fullmatch(digits):
        raise ValueError(f"Not an unsigned hex value: {value!r}")
    return int(digits, 16)


def hex_to_entity_id(value: str) -> str:
    """Decode a padded hex word into a ``0.0.N`` id.

    Only the last 4 bytes are used. Zero, values above ``MAX_ENTITY_NUMBER``
    and unparseable input map to ``INVALID_ENTITY_ID``.
    """
    tail = strip_hex_prefix(value.strip())[-8:]
    try:
        entity_num = parse_uint(tail)
    except ValueError:
        return INVALID_ENTITY_ID

    if entity_num == 0 or entity_num > MAX_ENTITY_NUMBER:
        return INVALID_ENTITY_ID

    return f"0.0.{entity_num}"


def extract_pool_address(data: str) -> str:
    """Decode the pool id from bytes 32..52 of the event data."""
    raw = strip_hex_prefix(data.strip())
    start, end = POOL_ADDRESS_START * 2, POOL_ADDRESS_END * 2
    if len(raw) < end:
        return INVALID_ENTITY_ID
    return hex_to_entity_id(raw[start:end])


def synthetic_pool_id(token0_id: str, token1_id: str) -> str:
    """Derive a stable pool id from a token pair.

    The two entity numbers are sorted and combined with the Cantor pairing
    function, so the id does not depend on token order and differs for every
    distinct unordered pair.
    """
    if INVALID_ENTITY_ID in (token0_id, token1_id):
        return INVALID_ENTITY_ID
    try:
        low, high = sorted((entity_number(token0_id), entity_number(token1_id)))
    except ValueError:
        return INVALID_ENTITY_ID

    total = low + high
    paired = total * (total + 1) // 2 + high
    return f"0.0.{SYNTHETIC_POOL_OFFSET + paired}"


def is_pool_created(entry: RawLogEntry, event_topic: str = POOL_CREATED_TOPIC) -> bool:
    """Check whether a log entry is a pool-created event."""
    return len(entry.topics) >= 4 and entry.topics[0].lower() == event_topic.lower()


def decode_pool_created(
    entry: RawLogEntry, policy: PoolIdPolicy = PoolIdPolicy.SYNTHETIC
) -> PoolCandidate | None:
    """Decode one pool-created entry.

    Returns:
        The candidate, or None when any decoded id is invalid.

    Raises:
        ValueError: If the fee topic is not valid hex.
    """
    token0_id = hex_to_entity_id(entry.topics[1])
    token1_id = hex_to_entity_id(entry.topics[2])
    fee = parse_uint(entry.topics[3])

    if policy == PoolIdPolicy.PAYLOAD:
        pool_id = extract_pool_address(entry.data)
    else:
        pool_id = synthetic_pool_id(token0_id, token1_id)

    if INVALID_ENTITY_ID in (token0_id, token1_id, pool_id):
        logger.warning(
            f"Skipping pool with invalid IDs: token0={token0_id}, "
            f"token1={token1_id}, pool={pool_id}"
        )
        return None

    if fee > MAX_FEE:
        logger.warning(f"Skipping pool {pool_id} with out-of-range fee {fee}")
        return None

    return PoolCandidate(token0_id=token0_id, token1_id=token1_id, fee=fee, pool_id=pool_id)


def decode_pool_created_logs(
    logs: Iterable[RawLogEntry],
    policy: PoolIdPolicy = PoolIdPolicy.SYNTHETIC,
    event_topic: str = POOL_CREATED_TOPIC,
) -> List[PoolCandidate]:
    """Turn factory logs into pool candidates, preserving input order.

    Unrelated events are skipped silently; malformed pool-created events are
    logged and skipped without stopping the batch.
    """
    candidates = []
    for entry in logs:
        if not is_pool_created(entry, event_topic):
            if entry.topics:
                logger.debug(f"Skipping non-pool-creation event with topic: {entry.topics[0]}")
            continue

        try:
            candidate = decode_pool_created(entry, policy)
        except ValueError as e:
            logger.warning(f"Error parsing pool creation event: {e}")
            continue

        if candidate is not None:
            logger.debug(
                f"Decoded pool candidate {candidate.token0_id}/{candidate.token1_id} "
                f"fee={candidate.fee} pool={candidate.pool_id}"
            )
            candidates.append(candidate)

    return candidates
