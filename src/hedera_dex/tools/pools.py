"""Pool listing and pool lookup on top of the decode/assemble pipeline.

Listing and lookup share one fetch-and-decode path and differ only in their
fallback policy: listing always produces something to show (the demo dataset
when the mirror node fails or has nothing), lookup reports failures as they
are.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List

from ..config_models import Config, NetworkConfig
from ..errors import ConfigurationError, MirrorNodeError, PoolNotFoundError
from ..models import PoolRecord
from .log_decoder import decode_pool_created_logs
from .mirror_node import MirrorNodeClient
from .pool_assembler import PoolAssembler

logger = logging.getLogger(__name__)

DEMO_DATA_SOURCE = "Demo Mode (Mock Data)"

ClientFactory = Callable[[str, float], MirrorNodeClient]


@dataclass
class PoolBatch:
    """Pools produced by one load together with where they came from."""

    pools: List[PoolRecord]
    data_source: str
    from_demo: bool = False


@dataclass
class PoolListing:
    """Result of listing pools."""

    pools: List[PoolRecord]
    data_source: str
    network: str
    mirror_node_url: str
    factory_contract: str | None
    demo_mode: bool


@dataclass
class PoolLookup:
    """Result of looking up pools by token pair."""

    pools: List[PoolRecord]
    token_pair: str
    data_source: str
    mirror_node_url: str


def mirror_source(mirror_node_url: str) -> str:
    return f"Hedera Mirror Node ({mirror_node_url})"


class FallbackPolicy(ABC):
    """Decides what a pool load returns when the live path comes up short."""

    @abstractmethod
    def on_empty(self, mirror_node_url: str) -> PoolBatch:
        """Result when the mirror node answered but no pools were decoded."""

    @abstractmethod
    def on_error(self, mirror_node_url: str, error: MirrorNodeError) -> PoolBatch:
        """Result when the factory logs could not be fetched."""


class DemoDataFallback(FallbackPolicy):
    """Substitute the demo dataset for empty or failed loads."""

    def __init__(self, demo_pools: List[PoolRecord]):
        self.demo_pools = demo_pools

    def _demo(self) -> List[PoolRecord]:
        return [pool.model_copy(deep=True) for pool in self.demo_pools]

    def on_empty(self, mirror_node_url: str) -> PoolBatch:
        logger.warning("No pools found in contract events, using mock data")
        return PoolBatch(
            self._demo(),
            f"{mirror_source(mirror_node_url)} - No pools found, using mock data",
            from_demo=True,
        )

    def on_error(self, mirror_node_url: str, error: MirrorNodeError) -> PoolBatch:
        logger.warning(f"Mirror node unavailable ({error}), using mock data")
        return PoolBatch(
            self._demo(),
            f"{mirror_source(mirror_node_url)} - Error fetching data, using mock data",
            from_demo=True,
        )


class NoFallback(FallbackPolicy):
    """Report the live result unchanged and let errors propagate."""

    def on_empty(self, mirror_node_url: str) -> PoolBatch:
        return PoolBatch([], mirror_source(mirror_node_url))

    def on_error(self, mirror_node_url: str, error: MirrorNodeError) -> PoolBatch:
        raise error


class PoolQueryService:
    """Lists and looks up SaucerSwap V2 pools for a configured network."""

    def __init__(self, config: Config, client_factory: ClientFactory | None = None):
        """Initialize the service.

        Args:
            config: Network table, demo dataset and query settings
            client_factory: Builds a mirror node client from (base_url, timeout)
        """
        self.config = config
        self.client_factory = client_factory or MirrorNodeClient

    def resolve_mirror_node_url(
        self, network_config: NetworkConfig, override: str | None = None
    ) -> str:
        """An explicit override always wins over the network default."""
        return (override or network_config.mirror_node_url).rstrip("/")

    def demo_pools(self) -> List[PoolRecord]:
        return [pool.model_copy(deep=True) for pool in self.config.demo_pools]

    def list_pools(
        self,
        network: str,
        mirror_node_url: str | None = None,
        demo_mode: bool = False,
        factory_contract: str | None = None,
        fallback: FallbackPolicy | None = None,
    ) -> PoolListing:
        """List the pools created by the network's factory contract.

        Never raises on mirror node failures: the fallback policy (demo data
        by default) supplies the result and the data source says so.

        Raises:
            ConfigurationError: If the network is not configured.
        """
        network_config = self.config.get_network(network)
        url = self.resolve_mirror_node_url(network_config, mirror_node_url)
        factory = factory_contract or network_config.factory_contract

        if demo_mode:
            logger.info("Using demo mode with mock data")
            batch = PoolBatch(self.demo_pools(), DEMO_DATA_SOURCE, from_demo=True)
        elif not factory:
            logger.warning(f"SaucerSwap V2 Factory not available on {network_config.name}, using demo data")
            batch = PoolBatch(
                self.demo_pools(),
                f"Demo Mode ({network_config.name} not supported)",
                from_demo=True,
            )
        else:
            if fallback is None:
                fallback = DemoDataFallback(self.config.demo_pools)
            batch = self._load_pools(network_config, url, factory, fallback)

        logger.info(f"Successfully fetched {len(batch.pools)} pools")
        return PoolListing(
            pools=batch.pools,
            data_source=batch.data_source,
            network=network_config.name,
            mirror_node_url=url,
            factory_contract=factory,
            demo_mode=batch.from_demo,
        )

    def find_pool(
        self,
        network: str,
        symbol_a: str,
        symbol_b: str,
        mirror_node_url: str | None = None,
        factory_contract: str | None = None,
    ) -> PoolLookup:
        """Find the pools trading a token pair, in either order.

        Raises:
            ConfigurationError: If the network or its factory is not configured.
            MirrorNodeError: If the factory logs can't be fetched.
            PoolNotFoundError: If no decoded pool matches the pair.
        """
        network_config = self.config.get_network(network)
        url = self.resolve_mirror_node_url(network_config, mirror_node_url)
        factory = factory_contract or network_config.factory_contract
        if not factory:
            raise ConfigurationError(f"Factory contract not found for network: {network_config.name}")

        token_pair = f"{symbol_a.upper()}/{symbol_b.upper()}"
        logger.info(f"Looking for pool: {token_pair}")

        batch = self._load_pools(network_config, url, factory, NoFallback())
        matching = [pool for pool in batch.pools if pool.has_symbols(symbol_a, symbol_b)]
        if not matching:
            available = sorted(
                {symbol for pool in batch.pools for symbol in (pool.token_a.symbol, pool.token_b.symbol)}
            )
            raise PoolNotFoundError(token_pair, available)

        return PoolLookup(
            pools=matching,
            token_pair=token_pair,
            data_source=mirror_source(url),
            mirror_node_url=url,
        )

    def fetch_live_pools(self, network_config: NetworkConfig, url: str, factory: str) -> List[PoolRecord]:
        """Fetch factory logs, decode them and resolve every pool's tokens.

        Raises:
            MirrorNodeError: If the factory logs can't be fetched.
        """
        query = self.config.query
        client = self.client_factory(url, query.request_timeout)
        try:
            logs = client.fetch_contract_logs(factory, limit=query.log_page_limit)
            candidates = decode_pool_created_logs(
                logs,
                policy=network_config.pool_id_policy,
                event_topic=query.pool_created_topic,
            )
            assembler = PoolAssembler(client, resolve_liquidity=query.resolve_liquidity)
            pools = assembler.assemble(candidates)
        finally:
            client.close()

        logger.info(f"Successfully parsed {len(pools)} pools from {len(logs)} logs")
        return pools

    def _load_pools(
        self,
        network_config: NetworkConfig,
        url: str,
        factory: str,
        fallback: FallbackPolicy,
    ) -> PoolBatch:
        try:
            pools = self.fetch_live_pools(network_config, url, factory)
        except MirrorNodeError as e:
            logger.error(f"Error fetching pool data from Hedera Mirror Node: {e}")
            return fallback.on_error(url, e)

        if not pools:
            return fallback.on_empty(url)

        return PoolBatch(
            pools, f"{mirror_source(url)} - {len(pools)} pools from contract events"
        )
