from __future__ import annotations

import csv
from decimal import Decimal
from pathlib import Path
from unittest.mock import Mock

from services.coingecko_client import PriceChartRow
from services.quote_export import QUOTE_HEADERS, download_quotes, quote_row, write_quote_csv


def test_quote_row_uses_price_for_open_and_close() -> None:
    row = PriceChartRow(snapped_at="2021-05-01 00:00:00 UTC", price=Decimal("2950.10"), total_volume=None)

    assert quote_row(row) == ["2021-05-01", "2950.1", "2950.1", "0", "0", "0"]


def test_write_quote_csv(tmp_path: Path) -> None:
    rows = [
        PriceChartRow(snapped_at="2021-05-01 00:00:00 UTC", price=Decimal("1.5"), total_volume=Decimal("1000")),
        PriceChartRow(snapped_at="2021-05-02 00:00:00 UTC", price=Decimal("1.6"), total_volume=Decimal("1200.25")),
    ]
    path = tmp_path / "quotes" / "cardano.csv"

    written = write_quote_csv(rows, path)

    assert written == 2
    with path.open(newline="", encoding="utf-8") as handle:
        lines = list(csv.reader(handle))
    assert lines[0] == QUOTE_HEADERS
    assert lines[1] == ["2021-05-01", "1.5", "1.5", "0", "0", "1000"]
    assert lines[2] == ["2021-05-02", "1.6", "1.6", "0", "0", "1200.25"]


def test_download_quotes_writes_one_file_per_coin(tmp_path: Path) -> None:
    client = Mock()
    client.download_price_chart.return_value = [
        PriceChartRow(snapped_at="2021-05-01 00:00:00 UTC", price=Decimal("10"), total_volume=None)
    ]

    written = download_quotes(client, ["bitcoin", "ethereum"], tmp_path)

    assert written == {"bitcoin": tmp_path / "bitcoin.csv", "ethereum": tmp_path / "ethereum.csv"}
    assert (tmp_path / "ethereum.csv").read_text(encoding="utf-8").splitlines()[1] == "2021-05-01,10,10,0,0,0"
    client.download_price_chart.assert_any_call("bitcoin", vs_currency="usd")
