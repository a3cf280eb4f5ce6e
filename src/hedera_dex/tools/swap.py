"""Token swaps through the SaucerSwap V2 router.

A swap is either executed on chain (when wallet credentials are configured)
or simulated from a static rate table. The result type says which one
happened: ``ExecutedSwap``, ``SimulatedSwap`` or ``SwapFailure``.
"""

import logging
import time
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, List, Union

from eth_abi import encode
from eth_typing import HexStr
from web3 import Web3

from ..config_models import Config, DexSettings, NetworkConfig, SwapConfig
from ..errors import ConfigurationError
from .utils import hedera_id_to_evm_address
from .wallet_utils import load_operator_account, operator_evm_address

logger = logging.getLogger(__name__)

EXACT_INPUT_SIGNATURE = "exactInput((bytes,address,uint256,uint256,uint256))"
REFUND_ETH_SIGNATURE = "refundETH()"
MULTICALL_SIGNATURE = "multicall(bytes[])"

# HBAR values sent through the JSON-RPC relay are denominated in weibars
WEIBARS_PER_HBAR = 10**18
NATIVE_SYMBOLS = ("HBAR", "WHBAR")


@dataclass(frozen=True)
class SwapRequest:
    """An exact-input swap request."""

    amount: float
    from_token: str
    to_token: str
    network: str

    @property
    def route(self) -> str:
        return f"{self.from_token} → {self.to_token}"


@dataclass(frozen=True)
class ExecutedSwap:
    """A swap submitted on chain."""

    transaction_id: str
    network: str
    amount_out: str = "Unknown"
    explorer_url: str | None = None
    kind: str = field(default="executed", init=False)


@dataclass(frozen=True)
class SimulatedSwap:
    """An illustrative estimate; nothing was sent to the network."""

    estimated_output: str
    fee_tier: str
    price_impact: str
    route: str
    kind: str = field(default="simulated", init=False)


@dataclass(frozen=True)
class SwapFailure:
    """A swap that could not be simulated or executed."""

    reason: str
    message: str
    kind: str = field(default="failed", init=False)


SwapResult = Union[ExecutedSwap, SimulatedSwap, SwapFailure]


def _selector(signature: str) -> bytes:
    return Web3.keccak(text=signature)[:4]


def encode_swap_path(token_ids: List[str], fees: List[int]) -> bytes:
    """Encode a V3 swap path: token (20 bytes), fee (3 bytes), token, ...

    Args:
        token_ids: Hedera token ids along the route
        fees: Fee tier of each hop, one fewer than token_ids

    Raises:
        ValueError: If the lengths don't line up or an id is malformed
    """
    if len(token_ids) != len(fees) + 1:
        raise ValueError("Invalid path: tokens length must be fees length + 1")

    path = b""
    for i, token_id in enumerate(token_ids):
        path += bytes.fromhex(hedera_id_to_evm_address(token_id)[2:])
        if i < len(fees):
            path += fees[i].to_bytes(3, "big")
    return path


def encode_swap_calldata(
    path: bytes,
    recipient: str,
    deadline: int,
    amount_in: int,
    amount_out_minimum: int = 0,
) -> bytes:
    """Encode ``multicall([exactInput(params), refundETH()])`` for the router."""
    swap_call = _selector(EXACT_INPUT_SIGNATURE) + encode(
        ["(bytes,address,uint256,uint256,uint256)"],
        [(path, recipient, deadline, amount_in, amount_out_minimum)],
    )
    refund_call = _selector(REFUND_ETH_SIGNATURE)
    return _selector(MULTICALL_SIGNATURE) + encode(["bytes[]"], [[swap_call, refund_call]])


def to_smallest_unit(amount: float, decimals: int) -> int:
    return int(Decimal(str(amount)) * (10**decimals))


def simulate_swap(request: SwapRequest, swap_config: SwapConfig) -> SimulatedSwap | SwapFailure:
    """Estimate a swap from the static rate table.

    Slippage grows with the amount (``slippage_per_unit`` per unit, capped at
    ``max_slippage``). Popular HBAR/stablecoin pairs are quoted at the 0.30%
    tier, everything else at 0.15%.
    """
    rate = swap_config.rates.get(request.from_token, {}).get(request.to_token)
    if not rate:
        return SwapFailure(
            "NO_RATE", f"No rate available for {request.from_token}/{request.to_token} pair"
        )

    base_output = request.amount * rate
    slippage = min(request.amount * swap_config.slippage_per_unit, swap_config.max_slippage)
    estimated_output = base_output * (1 - slippage)

    pair_key = f"{request.from_token}/{request.to_token}"
    fee_tier = "0.30" if pair_key in swap_config.popular_pairs else "0.15"

    return SimulatedSwap(
        estimated_output=f"{estimated_output:.6f}",
        fee_tier=fee_tier,
        price_impact=f"{slippage * 100:.3f}",
        route=request.route,
    )


def _default_web3_factory(rpc_url: str) -> Web3:
    return Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": 30}))


class SwapExecutor:
    """Runs swap requests against the router, or simulates them."""

    def __init__(
        self,
        config: Config,
        settings: DexSettings,
        web3_factory: Callable[[str], Web3] | None = None,
    ):
        self.config = config
        self.settings = settings
        self.web3_factory = web3_factory or _default_web3_factory

    def execute(self, request: SwapRequest) -> SwapResult:
        """Execute the swap if credentials are configured, otherwise simulate it."""
        try:
            network_config = self.config.get_network(request.network)
        except ConfigurationError as e:
            return SwapFailure(e.reason, e.message)

        if request.amount <= 0:
            return SwapFailure("INVALID_REQUEST", "Swap amount must be greater than zero")

        if not self.settings.has_wallet:
            logger.warning("No wallet credentials provided, using simulation mode")
            return simulate_swap(request, self.config.swap)

        logger.info(f"Attempting real swap execution on {network_config.name}")
        return self._execute_onchain(request, network_config)

    def _execute_onchain(self, request: SwapRequest, network_config: NetworkConfig) -> SwapResult:
        if not network_config.router_contract or not network_config.json_rpc_url:
            return SwapFailure(
                "CONFIGURATION_ERROR",
                f"Router contract not found for network: {network_config.name}",
            )

        token_in = network_config.get_token(request.from_token)
        token_out = network_config.get_token(request.to_token)
        if not token_in or not token_out:
            available = ", ".join(["HBAR", *sorted(network_config.tokens)])
            return SwapFailure(
                "UNKNOWN_TOKEN",
                f"Token addresses not found for {request.from_token}/{request.to_token} "
                f"on {network_config.name}. Available tokens: {available}",
            )

        swap_config = self.config.swap
        try:
            w3 = self.web3_factory(network_config.json_rpc_url)
            if not w3.is_connected():
                return SwapFailure(
                    "SWAP_EXECUTION_FAILED",
                    f"Failed to connect to Hedera JSON-RPC relay for {network_config.name}",
                )

            account = load_operator_account(w3, self.settings)
            recipient = operator_evm_address(self.settings)

            path = encode_swap_path(
                [token_in.token_id, token_out.token_id], [swap_config.fee_tier]
            )
            deadline = int(time.time()) + swap_config.deadline_seconds
            amount_in = to_smallest_unit(request.amount, token_in.decimals)
            data = encode_swap_calldata(path, recipient, deadline, amount_in)

            value = 0
            if request.from_token in NATIVE_SYMBOLS:
                value = int(Decimal(str(request.amount)) * WEIBARS_PER_HBAR)

            tx = {
                "from": account.address,
                "to": Web3.to_checksum_address(
                    hedera_id_to_evm_address(network_config.router_contract)
                ),
                "value": value,
                "data": HexStr("0x" + data.hex()),
                "gas": swap_config.gas_limit,
                "gasPrice": w3.eth.gas_price,
                "nonce": w3.eth.get_transaction_count(account.address),
                "chainId": w3.eth.chain_id,
            }

            signed_tx = account.sign_transaction(tx)
            tx_hash = w3.eth.send_raw_transaction(signed_tx.raw_transaction)
            receipt = w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=swap_config.receipt_timeout
            )
        except Exception as e:
            logger.exception("Error executing real swap")
            return SwapFailure("SWAP_EXECUTION_FAILED", str(e))

        if receipt["status"] != 1:
            return SwapFailure(
                "SWAP_EXECUTION_FAILED",
                f"Transaction failed with status: {receipt['status']}",
            )

        transaction_id = Web3.to_hex(tx_hash)
        explorer_url = None
        if network_config.explorer_url:
            explorer_url = f"{network_config.explorer_url}/transaction/{transaction_id}"

        logger.info(f"Swap executed: {transaction_id}")
        return ExecutedSwap(
            transaction_id=transaction_id,
            network=network_config.name,
            explorer_url=explorer_url,
        )
