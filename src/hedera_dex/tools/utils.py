"""Utility functions for Hedera entity ids."""

from typing import Tuple


def strip_hex_prefix(value: str) -> str:
    """Remove a leading 0x from a hex string."""
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def parse_entity_id(entity_id: str) -> Tuple[int, int, int]:
    """Split a ``shard.realm.num`` id into its three integers.

    Raises:
        ValueError: If the id is not in ``shard.realm.num`` form.
    """
    parts = entity_id.strip().split(".")
    if len(parts) != 3:
        raise ValueError(f"Invalid Hedera entity ID format: {entity_id}")
    try:
        shard, realm, num = (int(part) for part in parts)
    except ValueError:
        raise ValueError(f"Invalid Hedera entity ID format: {entity_id}")
    if shard < 0 or realm < 0 or num < 0:
        raise ValueError(f"Invalid Hedera entity ID format: {entity_id}")
    return shard, realm, num


def entity_number(entity_id: str) -> int:
    """Return the ``num`` part of a ``shard.realm.num`` id."""
    return parse_entity_id(entity_id)[2]


def hedera_id_to_evm_address(entity_id: str) -> str:
    """Convert a Hedera entity id to its long-zero EVM address.

    The 20 bytes are the shard (4 bytes), realm (8 bytes) and entity
    number (8 bytes), big-endian.

    Args:
        entity_id: Id like "0.0.3949434"

    Returns:
        Lower-case 0x-prefixed EVM address
    """
    shard, realm, num = parse_entity_id(entity_id)
    raw = shard.to_bytes(4, "big") + realm.to_bytes(8, "big") + num.to_bytes(8, "big")
    return "0x" + raw.hex()
