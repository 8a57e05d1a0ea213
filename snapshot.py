"""
Top-500 CoinGecko market snapshot -> market_data_<YYYYMMDD>_<HHMMSS>.csv

    python snapshot.py            # fetch market pages and export CSV
    python snapshot.py symbols    # fetch the full coin catalog only

Configuration comes from COINGECKO_* / SNAPSHOT_OUT_DIR environment variables.
"""

import argparse
import logging
import os
import sys

import requests

from export_csv import save_to_csv
from fetch_coingecko import fetch_all_symbols, fetch_market_data
from models import CoinGeckoError
from settings import Settings

logger = logging.getLogger(__name__)


def setup_logging():
    level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def run_snapshot(settings):
    data = fetch_market_data(settings)
    return save_to_csv(data, out_dir=settings.out_dir)


def run_symbols(settings):
    coin_ids = fetch_all_symbols(settings)
    print(f"Total symbols fetched: {len(coin_ids)}")
    return coin_ids


COMMANDS = {
    "snapshot": run_snapshot,
    "symbols": run_symbols,
}


def main(argv=None):
    ap = argparse.ArgumentParser(
        prog="coingecko-snapshot",
        description="Save the top CoinGecko coins by market cap to a timestamped CSV.",
    )
    ap.add_argument("cmd", nargs="?", default="snapshot", choices=sorted(COMMANDS),
                    help="snapshot (default) or symbols")
    args = ap.parse_args(argv)

    setup_logging()
    try:
        settings = Settings.from_env()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    try:
        COMMANDS[args.cmd](settings)
    except CoinGeckoError as e:
        logger.error(f"Error fetching market data: {e}")
        return 1
    except requests.RequestException as e:
        logger.error(f"Network error talking to CoinGecko: {e}")
        return 1
    except OSError as e:
        logger.error(f"Error saving CSV: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
