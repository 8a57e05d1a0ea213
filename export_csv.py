from datetime import datetime
from pathlib import Path

import pandas as pd

from models import format_fixed, round_rank

COLUMNS = [
    "Timestamp", "ID", "Symbol", "Name", "Current Price", "Market Cap", "Market Cap Rank",
    "Total Volume", "High 24h", "Low 24h", "Price Change 24h", "Price Change % 24h", "Last Updated",
]


def _row(record, captured_at):
    rank = "" if record.market_cap_rank is None else str(round_rank(record.market_cap_rank))
    return [
        captured_at.strftime("%Y-%m-%d %H:%M:%S"),
        record.id, record.symbol, record.name,
        format_fixed(record.current_price, 2),
        format_fixed(record.market_cap, 0),
        rank,
        format_fixed(record.total_volume, 0),
        format_fixed(record.high_24h, 2),
        format_fixed(record.low_24h, 2),
        format_fixed(record.price_change_24h, 2),
        format_fixed(record.price_change_percentage_24h, 2),
        record.last_updated,
    ]


def save_to_csv(records, out_dir=".", clock=datetime.now):
    """Write records to market_data_<YYYYMMDD>_<HHMMSS>.csv in out_dir and return the path.

    Absent numbers (null in the API response) become empty cells.
    """
    out_dir = Path(out_dir)
    out_file = out_dir / f"market_data_{clock().strftime('%Y%m%d_%H%M%S')}.csv"
    out_dir.mkdir(parents=True, exist_ok=True)

    # Capture time is stamped per row
    rows = [_row(record, clock()) for record in records]
    df = pd.DataFrame(rows, columns=COLUMNS, dtype=str)
    df.to_csv(out_file, index=False)

    print(f"✅ Data saved to {out_file}")
    return out_file
