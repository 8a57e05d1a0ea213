import logging
import time

import requests

from models import CoinListing, DecodeError, MarketRecord, RateLimitError
from settings import Settings

logger = logging.getLogger(__name__)

RAW_PREVIEW_CHARS = 500


def _decode_list(resp, what):
    try:
        data = resp.json()
    except ValueError as e:
        raise DecodeError(f"Invalid JSON in {what} response: {e}") from e
    if not isinstance(data, list):
        raise DecodeError(f"Expected a JSON list in {what} response, got {type(data).__name__}")
    return data


def _backoff_delay(resp, attempt, settings):
    """Exponential backoff from the base delay, or Retry-After if longer, capped at max_backoff."""
    wait_time = settings.rate_limit_backoff * (2 ** attempt)
    retry_after = (resp.headers or {}).get("Retry-After", "")
    try:
        wait_time = max(wait_time, int(retry_after))
    except (TypeError, ValueError):
        pass  # HTTP-date or garbage, keep the exponential delay
    return min(wait_time, settings.max_backoff)


def fetch_market_page(page, settings=None):
    """Fetch one page of the market listing, ordered by market cap, descending.

    Retries on HTTP 429 up to settings.max_retries times. Connection errors,
    timeouts and other HTTP errors are raised straight away.
    """
    settings = settings or Settings()
    if not isinstance(page, int) or isinstance(page, bool) or page < 1:
        raise ValueError(f"page must be a positive integer, got {page!r}")

    url = f"{settings.base_url}/coins/markets"
    params = {
        "vs_currency": settings.vs_currency,
        "order": "market_cap_desc",
        "per_page": settings.per_page,
        "page": page,
        "sparkline": "false",
    }
    headers = {"Accept": "application/json"}

    for attempt in range(settings.max_retries + 1):
        resp = requests.get(url, params=params, headers=headers, timeout=settings.timeout)
        if resp.status_code == 429:
            if attempt >= settings.max_retries:
                raise RateLimitError(
                    f"Still rate limited on page {page} after {settings.max_retries} retries"
                )
            wait_time = _backoff_delay(resp, attempt, settings)
            logger.warning(
                f"⚠️ API rate limit hit on page {page}. Waiting {wait_time:.0f}s before retry "
                f"({attempt + 1}/{settings.max_retries})..."
            )
            time.sleep(wait_time)
            continue
        resp.raise_for_status()
        return [MarketRecord.from_api(coin) for coin in _decode_list(resp, "coins/markets")]

    # only reachable when max_retries is negative, which Settings.validate forbids
    raise RateLimitError(f"No request issued for page {page}")


def fetch_market_data(settings=None):
    """Fetch settings.pages pages of market data and return the records in order."""
    settings = settings or Settings()
    all_coins = []

    for page in range(1, settings.pages + 1):
        if page > 1:
            time.sleep(settings.page_delay)  # Crude self-imposed rate limit
        data = fetch_market_page(page, settings)
        logger.info(f"Fetched {len(data)} coins from page {page}/{settings.pages}")
        if not data:
            # Past the end of the listing
            break
        all_coins.extend(data)

    logger.info(f"Fetched {len(all_coins)} coins in total")
    return all_coins


def fetch_all_symbols(settings=None):
    """Fetch the full coin catalog (one request, no pagination) and return the coin ids."""
    settings = settings or Settings()
    resp = requests.get(f"{settings.base_url}/coins/list", timeout=settings.timeout)
    resp.raise_for_status()

    logger.debug(f"Raw API response: {resp.text[:RAW_PREVIEW_CHARS]}")

    listings = [CoinListing.from_api(coin) for coin in _decode_list(resp, "coins/list")]
    coin_ids = [coin.id for coin in listings]
    logger.info(f"Total symbols fetched: {len(coin_ids)}")
    return coin_ids
