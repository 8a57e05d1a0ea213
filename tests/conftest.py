import json

import pytest
import requests

import fetch_coingecko
from settings import Settings

_NO_JSON = object()


class FakeResponse:
    def __init__(self, status_code=200, json_data=_NO_JSON, text=None, headers=None):
        self.status_code = status_code
        self._json = json_data
        self.headers = headers or {}
        if text is None:
            text = "" if json_data is _NO_JSON else json.dumps(json_data)
        self.text = text

    def json(self):
        if self._json is _NO_JSON:
            return json.loads(self.text)
        return self._json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


def make_coin(i, **overrides):
    coin = {
        "id": f"coin-{i}",
        "symbol": f"c{i}",
        "name": f"Coin {i}",
        "current_price": 1000.0 + i,
        "market_cap": 5_000_000.4 + i,
        "market_cap_rank": i,
        "total_volume": 123_456.7,
        "high_24h": 1010.126,
        "low_24h": 990.5,
        "price_change_24h": -3.14159,
        "price_change_percentage_24h": 0.125,
        "last_updated": "2024-03-01T12:00:00.000Z",
    }
    coin.update(overrides)
    return coin


class FakeApi:
    """Replays queued responses (or raises queued exceptions) for requests.get."""

    def __init__(self):
        self.queue = []
        self.calls = []

    def add(self, item):
        self.queue.append(item)
        return self

    def get(self, url, params=None, **kwargs):
        self.calls.append((url, dict(params or {})))
        item = self.queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def api(monkeypatch):
    fake = FakeApi()
    monkeypatch.setattr(fetch_coingecko.requests, "get", fake.get)
    return fake


@pytest.fixture
def sleeps(monkeypatch):
    recorded = []
    monkeypatch.setattr(fetch_coingecko.time, "sleep", recorded.append)
    return recorded


@pytest.fixture
def settings():
    return Settings()
