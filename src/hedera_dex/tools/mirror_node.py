"""Hedera mirror node REST client."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Tuple

import requests
from pydantic import ValidationError

from ..errors import MirrorNodeError
from ..models import LIQUIDITY_UNKNOWN, RawLogEntry, TokenMetadata
from .utils import hedera_id_to_evm_address

logger = logging.getLogger(__name__)

DEFAULT_DECIMALS = 8
LIQUIDITY_SELECTOR = "0x1a686502"  # liquidity()


def token_metadata_from_payload(token_id: str, payload: Dict[str, Any]) -> TokenMetadata:
    """Build token metadata from a mirror node token payload.

    Missing fields fall back to conservative defaults instead of failing:
    decimals to 8, the name to the symbol, and the description to the token
    memo or a generated sentence.
    """
    try:
        decimals = int(payload.get("decimals"))
    except (TypeError, ValueError):
        decimals = DEFAULT_DECIMALS
    if decimals < 0:
        decimals = DEFAULT_DECIMALS

    symbol = payload.get("symbol") or "UNKNOWN"
    name = payload.get("name") or symbol
    description = payload.get("memo") or f"{name} token on Hedera"

    return TokenMetadata(
        token_id=token_id,
        name=name,
        symbol=symbol,
        decimals=decimals,
        description=description,
    )


class MirrorNodeClient:
    """Read-only client for the mirror node endpoints the plugin needs.

    Each call is a single attempt with a bounded timeout; nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Mirror node base URL, e.g. https://testnet.mirrornode.hedera.com
            timeout: Per-request timeout in seconds
            session: HTTP session to use. A private one is created if omitted.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "MirrorNodeClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get_json(self, path: str, params: Dict[str, Any] | None = None) -> Any:
        response = self.session.get(
            f"{self.base_url}{path}", params=params, timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    def fetch_contract_logs(self, contract_id: str, limit: int = 100) -> List[RawLogEntry]:
        """Fetch the most recent event logs emitted by a contract.

        Args:
            contract_id: Contract id like "0.0.3946833"
            limit: Maximum number of logs to fetch

        Returns:
            Parsed log entries. Entries that are not log objects are dropped.

        Raises:
            MirrorNodeError: If the request fails or the body is malformed.
        """
        path = f"/api/v1/contracts/{contract_id}/results/logs"
        logger.info(f"Fetching pool creation events from: {self.base_url}{path}")
        try:
            payload = self._get_json(path, params={"limit": limit})
        except (requests.RequestException, ValueError) as e:
            raise MirrorNodeError(f"Failed to fetch logs for {contract_id}: {e}") from e

        if not isinstance(payload, dict):
            raise MirrorNodeError(f"Malformed logs response for {contract_id}")

        entries = []
        for raw_log in payload.get("logs") or []:
            try:
                entries.append(RawLogEntry.model_validate(raw_log))
            except ValidationError:
                logger.debug(f"Skipping malformed log entry: {raw_log!r}")

        logger.info(f"Found {len(entries)} contract events")
        return entries

    def fetch_token_info(self, token_id: str) -> TokenMetadata | None:
        """Fetch token metadata.

        Returns:
            The token metadata, or None if the lookup failed for any reason.
        """
        try:
            payload = self._get_json(f"/api/v1/tokens/{token_id}")
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Failed to fetch token info for {token_id}: {e}")
            return None

        if not isinstance(payload, dict):
            logger.error(f"Malformed token info for {token_id}")
            return None

        try:
            return token_metadata_from_payload(token_id, payload)
        except ValidationError as e:
            logger.error(f"Malformed token info for {token_id}: {e}")
            return None

    def fetch_token_pair(
        self, token0_id: str, token1_id: str
    ) -> Tuple[TokenMetadata | None, TokenMetadata | None]:
        """Fetch both tokens of a pool concurrently and wait for both."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            future0 = executor.submit(self.fetch_token_info, token0_id)
            future1 = executor.submit(self.fetch_token_info, token1_id)
            return future0.result(), future1.result()

    def fetch_pool_liquidity(self, pool_id: str) -> str:
        """Read a pool's in-range liquidity by calling ``liquidity()``.

        Returns:
            The liquidity as a decimal string, or "N/A" if it can't be read.
        """
        try:
            response = self.session.post(
                f"{self.base_url}/api/v1/contracts/call",
                json={
                    "to": hedera_id_to_evm_address(pool_id),
                    "data": LIQUIDITY_SELECTOR,
                    "estimate": False,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            result = response.json().get("result")
            if result:
                return str(int(result, 16))
        except (requests.RequestException, ValueError, AttributeError, TypeError) as e:
            logger.debug(f"Could not fetch liquidity for pool {pool_id}: {e}")
        return LIQUIDITY_UNKNOWN
