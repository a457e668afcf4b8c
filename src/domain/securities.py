from __future__ import annotations

from typing import Iterator

from pydantic import BaseModel, ConfigDict

from .transactions import Currency, Symbol


class Security(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: Symbol
    name: str


class SecurityRegistry:
    """Distinct crypto assets seen during a rendering pass, in first-seen order."""

    def __init__(self) -> None:
        self._securities: dict[Symbol, Security] = {}

    def register(self, currency: Currency | None) -> Security | None:
        """Register a crypto currency; returns the security only when newly added."""
        if currency is None or not currency.is_crypto:
            return None
        if currency.symbol in self._securities:
            return None
        security = Security(symbol=currency.symbol, name=currency.name)
        self._securities[currency.symbol] = security
        return security

    def get(self, symbol: str) -> Security | None:
        return self._securities.get(Symbol(symbol))

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._securities

    def __iter__(self) -> Iterator[Security]:
        return iter(self._securities.values())

    def __len__(self) -> int:
        return len(self._securities)
