"""
Records decoded from the CoinGecko API.

Metric fields come back as a JSON number or null, so they are decoded into
Optional[float] here and every later step deals with None explicitly.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional


class CoinGeckoError(Exception):
    """Base error for anything that goes wrong talking to CoinGecko."""


class RateLimitError(CoinGeckoError):
    """Raised when the API keeps answering 429 after all retries."""


class DecodeError(CoinGeckoError):
    """Raised when a response body does not have the expected shape."""


IDENTITY_KEYS = ["id", "symbol", "name"]

METRIC_KEYS = [
    "current_price",
    "market_cap",
    "market_cap_rank",
    "total_volume",
    "high_24h",
    "low_24h",
    "price_change_24h",
    "price_change_percentage_24h",
]


def _identity(payload, key):
    value = payload.get(key)
    if not isinstance(value, str):
        raise DecodeError(f"Coin '{payload.get('id', 'Unknown ID')}' has missing/invalid '{key}'")
    return value


def to_optional_float(value, key="value"):
    if value is None:
        return None
    # bool is an int subclass but never a valid metric
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"Expected number or null for '{key}', got {type(value).__name__}")
    try:
        number = float(value)
    except OverflowError as e:
        raise DecodeError(f"Number too large for '{key}'") from e
    if not math.isfinite(number):
        raise DecodeError(f"Non-finite number for '{key}'")
    return number


def round_rank(value: float) -> int:
    """Round half away from zero (7.5 -> 8, -7.5 -> -8)."""
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_fixed(value: Optional[float], decimals: int) -> str:
    if value is None:
        return ""
    return f"{value:.{decimals}f}"


@dataclass(frozen=True)
class MarketRecord:
    id: str
    symbol: str
    name: str
    current_price: Optional[float] = None
    market_cap: Optional[float] = None
    market_cap_rank: Optional[float] = None
    total_volume: Optional[float] = None
    high_24h: Optional[float] = None
    low_24h: Optional[float] = None
    price_change_24h: Optional[float] = None
    price_change_percentage_24h: Optional[float] = None
    last_updated: str = ""

    @classmethod
    def from_api(cls, payload):
        if not isinstance(payload, dict):
            raise DecodeError(f"Expected coin object, got {type(payload).__name__}")
        metrics = {key: to_optional_float(payload.get(key), key) for key in METRIC_KEYS}
        last_updated = payload.get("last_updated")
        if last_updated is not None and not isinstance(last_updated, str):
            raise DecodeError(f"Coin '{payload.get('id')}' has invalid 'last_updated'")
        return cls(
            id=_identity(payload, "id"),
            symbol=_identity(payload, "symbol"),
            name=_identity(payload, "name"),
            last_updated=last_updated or "",
            **metrics,
        )


@dataclass(frozen=True)
class CoinListing:
    id: str
    symbol: str
    name: str

    @classmethod
    def from_api(cls, payload):
        if not isinstance(payload, dict):
            raise DecodeError(f"Expected coin object, got {type(payload).__name__}")
        return cls(**{key: _identity(payload, key) for key in IDENTITY_KEYS})
