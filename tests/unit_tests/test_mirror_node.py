"""Unit tests for the mirror node client."""

from unittest.mock import Mock

import pytest
import requests

from hedera_dex.errors import MirrorNodeError
from hedera_dex.tools.mirror_node import MirrorNodeClient, token_metadata_from_payload

from conftest import FakeMirrorNode, make_response

BASE_URL = "https://testnet.mirrornode.hedera.com"


class TestTokenMetadataFromPayload:
    """Test building token metadata from mirror node payloads."""

    def test_full_payload(self):
        token = token_metadata_from_payload(
            "0.0.456858",
            {"symbol": "USDC", "name": "USD Coin", "decimals": "6", "memo": "USDC on Hedera"},
        )
        assert token.symbol == "USDC"
        assert token.name == "USD Coin"
        assert token.decimals == 6
        assert token.description == "USDC on Hedera"

    def test_defaults(self):
        """Missing fields fall back instead of failing."""
        token = token_metadata_from_payload("0.0.731861", {"symbol": "SAUCE"})
        assert token.name == "SAUCE"
        assert token.decimals == 8
        assert token.description == "SAUCE token on Hedera"

    def test_unparseable_decimals(self):
        token = token_metadata_from_payload("0.0.1", {"symbol": "X", "decimals": "lots"})
        assert token.decimals == 8

    def test_missing_symbol(self):
        token = token_metadata_from_payload("0.0.1", {})
        assert token.symbol == "UNKNOWN"


class TestFetchContractLogs:
    """Test fetching factory logs."""

    def test_requests_logs_with_limit_and_timeout(self):
        session = Mock()
        session.get.return_value = make_response({"logs": []})
        client = MirrorNodeClient(BASE_URL + "/", timeout=5.0, session=session)

        client.fetch_contract_logs("0.0.1197038", limit=50)

        session.get.assert_called_once_with(
            f"{BASE_URL}/api/v1/contracts/0.0.1197038/results/logs",
            params={"limit": 50},
            timeout=5.0,
        )

    def test_parses_entries(self, pool_log):
        session = Mock()
        session.get.return_value = make_response(
            {"logs": [pool_log("0.0.1456986", "0.0.456858", 3000)]}
        )
        client = MirrorNodeClient(BASE_URL, session=session)

        logs = client.fetch_contract_logs("0.0.1197038")

        assert len(logs) == 1
        assert len(logs[0].topics) == 4

    def test_skips_malformed_entries(self, pool_log):
        session = Mock()
        session.get.return_value = make_response(
            {"logs": [42, {"topics": "not-a-list"}, pool_log("0.0.1456986", "0.0.456858", 3000)]}
        )
        client = MirrorNodeClient(BASE_URL, session=session)

        assert len(client.fetch_contract_logs("0.0.1197038")) == 1

    def test_missing_logs_key(self):
        session = Mock()
        session.get.return_value = make_response({"links": {}})
        client = MirrorNodeClient(BASE_URL, session=session)

        assert client.fetch_contract_logs("0.0.1197038") == []

    def test_connection_error_raises(self):
        session = Mock()
        session.get.side_effect = requests.ConnectionError("refused")
        client = MirrorNodeClient(BASE_URL, session=session)

        with pytest.raises(MirrorNodeError) as exc_info:
            client.fetch_contract_logs("0.0.1197038")
        assert exc_info.value.reason == "MIRROR_NODE_UNAVAILABLE"

    def test_http_error_raises(self):
        session = Mock()
        session.get.return_value = make_response({}, status_code=503)
        client = MirrorNodeClient(BASE_URL, session=session)

        with pytest.raises(MirrorNodeError):
            client.fetch_contract_logs("0.0.1197038")

    def test_invalid_json_raises(self):
        response = make_response(None)
        response.json.side_effect = ValueError("No JSON object could be decoded")
        session = Mock()
        session.get.return_value = response
        client = MirrorNodeClient(BASE_URL, session=session)

        with pytest.raises(MirrorNodeError):
            client.fetch_contract_logs("0.0.1197038")

    def test_non_object_body_raises(self):
        session = Mock()
        session.get.return_value = make_response(["unexpected"])
        client = MirrorNodeClient(BASE_URL, session=session)

        with pytest.raises(MirrorNodeError):
            client.fetch_contract_logs("0.0.1197038")


class TestFetchTokenInfo:
    """Test token metadata lookups."""

    def test_found(self):
        client = MirrorNodeClient(BASE_URL, session=FakeMirrorNode())

        token = client.fetch_token_info("0.0.456858")

        assert token.symbol == "USDC"
        assert token.decimals == 6

    def test_not_found_returns_none(self):
        client = MirrorNodeClient(BASE_URL, session=FakeMirrorNode())
        assert client.fetch_token_info("0.0.999") is None

    def test_malformed_fields_return_none(self):
        """A payload whose fields have the wrong types is a failed lookup."""
        fake = FakeMirrorNode(tokens={"0.0.456858": {"symbol": 123, "name": ["USD Coin"]}})
        client = MirrorNodeClient(BASE_URL, session=fake)

        assert client.fetch_token_info("0.0.456858") is None

    def test_network_error_returns_none(self):
        session = Mock()
        session.get.side_effect = requests.Timeout("slow")
        client = MirrorNodeClient(BASE_URL, session=session)

        assert client.fetch_token_info("0.0.456858") is None

    def test_fetch_token_pair_returns_both(self):
        """Both lookups complete even when one of them fails."""
        fake = FakeMirrorNode()
        client = MirrorNodeClient(BASE_URL, session=fake)

        token_a, token_b = client.fetch_token_pair("0.0.1456986", "0.0.999")

        assert token_a.symbol == "WHBAR"
        assert token_b is None
        assert sorted(fake.requested) == [
            f"{BASE_URL}/api/v1/tokens/0.0.1456986",
            f"{BASE_URL}/api/v1/tokens/0.0.999",
        ]


class TestFetchPoolLiquidity:
    """Test the liquidity() contract call."""

    def test_decodes_result(self):
        session = Mock()
        session.post.return_value = make_response({"result": "0x" + format(123456789, "064x")})
        client = MirrorNodeClient(BASE_URL, session=session)

        assert client.fetch_pool_liquidity("0.0.3964804") == "123456789"

        _, kwargs = session.post.call_args
        assert kwargs["json"]["to"] == "0x00000000000000000000000000000000003c7f84"
        assert kwargs["json"]["data"] == "0x1a686502"

    def test_failure_returns_unknown(self):
        session = Mock()
        session.post.side_effect = requests.ConnectionError("refused")
        client = MirrorNodeClient(BASE_URL, session=session)

        assert client.fetch_pool_liquidity("0.0.3964804") == "N/A"

    def test_empty_result_returns_unknown(self):
        session = Mock()
        session.post.return_value = make_response({"result": ""})
        client = MirrorNodeClient(BASE_URL, session=session)

        assert client.fetch_pool_liquidity("0.0.3964804") == "N/A"


class TestSessionOwnership:
    """Test that only privately created sessions are closed."""

    def test_injected_session_is_not_closed(self):
        session = Mock()
        with MirrorNodeClient(BASE_URL, session=session):
            pass
        session.close.assert_not_called()

    def test_own_session_is_closed(self, monkeypatch):
        session = Mock()
        monkeypatch.setattr(requests, "Session", Mock(return_value=session))

        client = MirrorNodeClient(BASE_URL)
        client.close()

        session.close.assert_called_once()
