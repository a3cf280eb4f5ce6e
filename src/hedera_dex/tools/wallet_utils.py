"""Utility functions for the operator wallet."""

from web3 import Web3

from ..config_models import DexSettings
from .utils import hedera_id_to_evm_address


def load_operator_account(w3: Web3, settings: DexSettings):
    """Load the signing account from HEDERA_PRIVATE_KEY.

    Raises:
        ValueError: If the key is missing or not a valid ECDSA key
    """
    if not settings.private_key:
        raise ValueError("HEDERA_PRIVATE_KEY not found in settings")

    try:
        return w3.eth.account.from_key(settings.private_key)
    except Exception as e:
        raise ValueError(f"Invalid private key in HEDERA_PRIVATE_KEY: {str(e)}")


def operator_evm_address(settings: DexSettings) -> str:
    """Get the long-zero EVM address of HEDERA_ACCOUNT_ID.

    Raises:
        ValueError: If the account id is missing or malformed
    """
    if not settings.account_id:
        raise ValueError("HEDERA_ACCOUNT_ID not found in settings")
    return hedera_id_to_evm_address(settings.account_id)
