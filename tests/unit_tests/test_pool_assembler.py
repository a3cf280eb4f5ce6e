"""Unit tests for pool assembly."""

from unittest.mock import Mock

from hedera_dex.models import PoolCandidate, TokenMetadata
from hedera_dex.tools.pool_assembler import PoolAssembler, assemble_pool

WHBAR = TokenMetadata(token_id="0.0.1456986", name="Wrapped Hbar", symbol="WHBAR", decimals=8)
USDC = TokenMetadata(token_id="0.0.456858", name="USD Coin", symbol="USDC", decimals=6)
SAUCE = TokenMetadata(token_id="0.0.731861", name="SaucerSwap", symbol="SAUCE", decimals=6)

TOKENS = {token.token_id: token for token in (WHBAR, USDC, SAUCE)}


def candidate(token0_id, token1_id, fee=3000, pool_id="0.0.3964804"):
    return PoolCandidate(token0_id=token0_id, token1_id=token1_id, fee=fee, pool_id=pool_id)


def mock_client():
    client = Mock()
    client.fetch_token_pair.side_effect = lambda a, b: (TOKENS.get(a), TOKENS.get(b))
    return client


class TestAssemblePool:
    """Test building a single pool record."""

    def test_builds_record(self):
        pool = assemble_pool(candidate("0.0.1456986", "0.0.456858"), WHBAR, USDC, 1)

        assert pool.id == 1
        assert pool.contract_id == "0.0.3964804"
        assert pool.pair == "WHBAR/USDC"
        assert pool.fee_percent == 0.30
        assert pool.liquidity == "Available"

    def test_missing_token_drops_candidate(self):
        assert assemble_pool(candidate("0.0.1456986", "0.0.999"), WHBAR, None, 1) is None

    def test_same_token_twice_drops_candidate(self):
        assert assemble_pool(candidate("0.0.1456986", "0.0.1456986"), WHBAR, WHBAR, 1) is None

    def test_unknown_liquidity_becomes_available(self):
        pool = assemble_pool(candidate("0.0.1456986", "0.0.456858"), WHBAR, USDC, 1, "N/A")
        assert pool.liquidity == "Available"

    def test_known_liquidity_is_kept(self):
        pool = assemble_pool(candidate("0.0.1456986", "0.0.456858"), WHBAR, USDC, 1, "5000")
        assert pool.liquidity == "5000"


class TestPoolAssembler:
    """Test assembling a batch of candidates."""

    def test_ids_are_contiguous_after_drops(self):
        """A dropped candidate does not leave a gap in the numbering."""
        assembler = PoolAssembler(mock_client())

        pools = assembler.assemble(
            [
                candidate("0.0.1456986", "0.0.456858", 3000),
                candidate("0.0.1456986", "0.0.999", 500),
                candidate("0.0.731861", "0.0.456858", 1500),
            ]
        )

        assert [pool.id for pool in pools] == [1, 2]
        assert [pool.pair for pool in pools] == ["WHBAR/USDC", "SAUCE/USDC"]

    def test_liquidity_not_requested_by_default(self):
        client = mock_client()

        PoolAssembler(client).assemble([candidate("0.0.1456986", "0.0.456858")])

        client.fetch_pool_liquidity.assert_not_called()

    def test_resolves_liquidity_when_enabled(self):
        client = mock_client()
        client.fetch_pool_liquidity.return_value = "123456789"

        pools = PoolAssembler(client, resolve_liquidity=True).assemble(
            [candidate("0.0.1456986", "0.0.456858")]
        )

        client.fetch_pool_liquidity.assert_called_once_with("0.0.3964804")
        assert pools[0].liquidity == "123456789"

    def test_empty_input(self):
        assert PoolAssembler(mock_client()).assemble([]) == []
