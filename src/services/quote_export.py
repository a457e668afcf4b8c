from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable

from utils.formatting import format_decimal

from .coingecko_client import CoinGeckoClient, PriceChartRow

logger = logging.getLogger(__name__)

QUOTE_HEADERS = ["Date", "Open", "Close", "High", "Low", "Volume"]


def quote_row(row: PriceChartRow) -> list[str]:
    # Daily close only: open and close share the price, high/low are unknown.
    price = format_decimal(row.price)
    volume = format_decimal(row.total_volume) if row.total_volume is not None else "0"
    return [row.snapped_at[:10], price, price, "0", "0", volume]


def write_quote_csv(rows: Iterable[PriceChartRow], path: Path) -> int:
    path.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(QUOTE_HEADERS)
        for row in rows:
            writer.writerow(quote_row(row))
            written += 1
    return written


def download_quotes(
    client: CoinGeckoClient,
    coin_ids: Iterable[str],
    output_dir: Path,
    *,
    vs_currency: str = "usd",
) -> dict[str, Path]:
    """Download and convert each coin's price chart into `<output_dir>/<coin>.csv`."""
    written: dict[str, Path] = {}
    for coin_id in coin_ids:
        rows = client.download_price_chart(coin_id, vs_currency=vs_currency)
        path = output_dir / f"{coin_id}.csv"
        count = write_quote_csv(rows, path)
        logger.info("Wrote %d quotes for %s to %s", count, coin_id, path)
        written[coin_id] = path
    return written


__all__ = ["QUOTE_HEADERS", "download_quotes", "quote_row", "write_quote_csv"]
