from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

import requests


class CoinGeckoAPIError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


@dataclass(frozen=True)
class PriceChartRow:
    snapped_at: str
    price: Decimal
    total_volume: Decimal | None


class CoinGeckoClient:
    """Downloads the public price-chart CSV export of a coin."""

    def __init__(
        self,
        *,
        base_url: str = "https://www.coingecko.com",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def download_price_chart(self, coin_id: str, *, vs_currency: str = "usd") -> list[PriceChartRow]:
        if not coin_id:
            msg = "coin_id must be provided"
            raise ValueError(msg)

        text = self._request(f"/price_charts/export/{coin_id}/{vs_currency}.csv")
        reader = csv.DictReader(io.StringIO(text))
        if reader.fieldnames is None or not {"snapped_at", "price"} <= set(reader.fieldnames):
            raise CoinGeckoAPIError("CoinGecko export is missing snapped_at/price columns", payload=text[:200])

        rows: list[PriceChartRow] = []
        for entry in reader:
            price = self._to_decimal(entry.get("price"))
            if price is None:
                raise CoinGeckoAPIError("CoinGecko export row contains non-numeric price", payload=entry)
            rows.append(
                PriceChartRow(
                    snapped_at=entry["snapped_at"],
                    price=price,
                    total_volume=self._to_decimal(entry.get("total_volume")),
                )
            )
        return rows

    def _request(self, path: str) -> str:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request("GET", url, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            resp = exc.response
            status_code = getattr(resp, "status_code", None)
            payload = resp.text if resp is not None else None
            raise CoinGeckoAPIError("CoinGecko request failed", status_code=status_code, payload=payload) from exc
        except requests.RequestException as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            raise CoinGeckoAPIError("CoinGecko request failed", status_code=status_code) from exc
        return response.text

    @staticmethod
    def _to_decimal(value: Any) -> Decimal | None:
        if value is None or value == "":
            return None
        try:
            return Decimal(str(value))
        except InvalidOperation:
            return None


__all__ = ["CoinGeckoAPIError", "CoinGeckoClient", "PriceChartRow"]
