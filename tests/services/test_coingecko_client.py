from __future__ import annotations

from decimal import Decimal
from unittest.mock import Mock

import pytest
import requests

from services.coingecko_client import CoinGeckoAPIError, CoinGeckoClient

EXPORT_CSV = (
    "snapped_at,price,market_cap,total_volume\n"
    "2021-05-01 00:00:00 UTC,57714.66,1078919000000.0,61727000000.5\n"
    "2021-05-02 00:00:00 UTC,57828.05,1081009000000.0,\n"
)


def _mock_response(text: str, status_code: int = 200) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.raise_for_status.return_value = None
    return response


def test_download_price_chart_parses_export() -> None:
    session = Mock()
    session.request.return_value = _mock_response(EXPORT_CSV)

    client = CoinGeckoClient(session=session)
    rows = client.download_price_chart("bitcoin")

    assert len(rows) == 2
    assert rows[0].snapped_at == "2021-05-01 00:00:00 UTC"
    assert rows[0].price == Decimal("57714.66")
    assert rows[0].total_volume == Decimal("61727000000.5")
    assert rows[1].total_volume is None

    session.request.assert_called_once()
    args, kwargs = session.request.call_args
    assert args[0] == "GET"
    assert args[1] == "https://www.coingecko.com/price_charts/export/bitcoin/usd.csv"
    assert kwargs["timeout"] == client.timeout


def test_download_price_chart_uses_vs_currency_and_base_url() -> None:
    session = Mock()
    session.request.return_value = _mock_response(EXPORT_CSV)

    client = CoinGeckoClient(base_url="http://localhost:8080/", session=session)
    client.download_price_chart("ethereum", vs_currency="eur")

    args, _ = session.request.call_args
    assert args[1] == "http://localhost:8080/price_charts/export/ethereum/eur.csv"


def test_download_price_chart_rejects_unexpected_columns() -> None:
    session = Mock()
    session.request.return_value = _mock_response("<html>rate limited</html>\n")

    client = CoinGeckoClient(session=session)
    with pytest.raises(CoinGeckoAPIError):
        client.download_price_chart("bitcoin")


def test_download_price_chart_rejects_non_numeric_price() -> None:
    session = Mock()
    session.request.return_value = _mock_response("snapped_at,price\n2021-05-01 00:00:00 UTC,n/a\n")

    client = CoinGeckoClient(session=session)
    with pytest.raises(CoinGeckoAPIError):
        client.download_price_chart("bitcoin")


def test_request_wraps_http_errors() -> None:
    session = Mock()
    response = _mock_response("Too Many Requests", status_code=429)
    response.raise_for_status.side_effect = requests.HTTPError(response=response)
    session.request.return_value = response

    client = CoinGeckoClient(session=session)

    with pytest.raises(CoinGeckoAPIError) as exc_info:
        client.download_price_chart("bitcoin")

    assert exc_info.value.status_code == 429
    assert exc_info.value.payload == "Too Many Requests"


def test_request_wraps_connection_errors() -> None:
    session = Mock()
    session.request.side_effect = requests.ConnectionError("offline")

    client = CoinGeckoClient(session=session)

    with pytest.raises(CoinGeckoAPIError):
        client.download_price_chart("bitcoin")


def test_coin_id_is_required() -> None:
    with pytest.raises(ValueError):
        CoinGeckoClient(session=Mock()).download_price_chart("")
