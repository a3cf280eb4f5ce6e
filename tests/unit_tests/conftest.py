"""Shared fixtures: a fake mirror node and pool-created log builders."""

import threading
from unittest.mock import Mock

import pytest
import requests

from hedera_dex.config_loader import ConfigLoader
from hedera_dex.config_models import POOL_CREATED_TOPIC
from hedera_dex.tools.mirror_node import MirrorNodeClient

TOKENS = {
    "0.0.1456986": {"symbol": "WHBAR", "name": "Wrapped Hbar", "decimals": "8", "memo": ""},
    "0.0.456858": {"symbol": "USDC", "name": "USD Coin", "decimals": "6", "memo": "USDC on Hedera"},
    "0.0.731861": {"symbol": "SAUCE", "name": "SaucerSwap", "decimals": "6", "memo": ""},
    "0.0.1460200": {"symbol": "XSAUCE", "name": "xSAUCE", "decimals": "6", "memo": ""},
}


def word(value: int) -> str:
    """Encode an integer as a 0x-prefixed 32-byte hex word."""
    return "0x" + format(value, "064x")


def entity_num(entity_id: str) -> int:
    return int(entity_id.split(".")[-1])


def make_response(payload, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return response


class FakeMirrorNode:
    """Stands in for ``requests.Session``, dispatching GETs by URL."""

    def __init__(self, logs=None, tokens=None, fail_logs=False):
        self.logs = logs or []
        self.tokens = TOKENS if tokens is None else tokens
        self.fail_logs = fail_logs
        self.requested = []
        self._lock = threading.Lock()

    def get(self, url, params=None, timeout=None):
        with self._lock:
            self.requested.append(url)

        if url.endswith("/results/logs"):
            if self.fail_logs:
                raise requests.ConnectionError("mirror node down")
            return make_response({"logs": self.logs})

        token_id = url.rsplit("/", 1)[-1]
        if token_id in self.tokens:
            return make_response({"token_id": token_id, **self.tokens[token_id]})
        return make_response({"_status": {"messages": [{"message": "Not found"}]}}, 404)

    def close(self):
        pass


@pytest.fixture
def pool_log():
    """Build a raw pool-created log dict."""

    def _build(token0: str, token1: str, fee: int, pool_id: str | None = None, topic=POOL_CREATED_TOPIC):
        data = "0x" + "0" * 64
        if pool_id is not None:
            data += format(entity_num(pool_id), "040x") + "0" * 24
        return {
            "address": "0x00000000000000000000000000000000003c3951",
            "topics": [topic, word(entity_num(token0)), word(entity_num(token1)), word(fee)],
            "data": data,
        }

    return _build


@pytest.fixture
def config():
    return ConfigLoader().load()


@pytest.fixture
def fake_mirror():
    return FakeMirrorNode()


@pytest.fixture
def client_factory_for():
    """Build a client factory that serves every client from one fake session."""

    def _build(fake: FakeMirrorNode):
        created_urls = []

        def factory(base_url, timeout):
            created_urls.append(base_url)
            return MirrorNodeClient(base_url, timeout, session=fake)

        factory.created_urls = created_urls
        return factory

    return _build
