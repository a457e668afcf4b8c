from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from enum import StrEnum
from typing import Any, Callable, NewType

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TransactionId = NewType("TransactionId", str)
Symbol = NewType("Symbol", str)

UNKNOWN_WALLET = "Unknown"


class TransactionType(StrEnum):
    BUY = "buy"
    SELL = "sell"
    CRYPTO_DEPOSIT = "crypto_deposit"
    CRYPTO_WITHDRAWAL = "crypto_withdrawal"
    TRANSFER = "transfer"
    EXCHANGE = "exchange"
    FIAT_DEPOSIT = "fiat_deposit"
    FIAT_WITHDRAWAL = "fiat_withdrawal"


class CurrencyType(StrEnum):
    CRYPTO = "crypto"
    FIAT = "fiat"


class Currency(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    symbol: Symbol
    name: str = ""
    # Kept as a raw string; handlers report values outside CurrencyType.
    type: str

    @field_validator("name", mode="before")
    @classmethod
    def _name_or_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def is_crypto(self) -> bool:
        return self.type == CurrencyType.CRYPTO


class Wallet(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str | None = None


class Movement(BaseModel):
    """One side (`from`, `to` or `fee`) of a transaction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    amount: Decimal
    currency: Currency
    wallet: Wallet | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_as_text(cls, value: Any) -> Any:
        # Floats go through str() so Decimal keeps the exported digits.
        if isinstance(value, float):
            return str(value)
        return value

    @property
    def symbol(self) -> Symbol:
        return self.currency.symbol

    @property
    def wallet_name(self) -> str:
        if self.wallet is None or not self.wallet.name:
            return UNKNOWN_WALLET
        return self.wallet.name


class Transaction(BaseModel):
    """A single record of the Koinly transaction export."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: TransactionId
    date: datetime
    type: str
    txhash: str | None = None
    from_: Movement | None = Field(default=None, alias="from")
    to: Movement | None = None
    fee: Movement | None = None

    @model_validator(mode="before")
    @classmethod
    def _drop_empty_movements(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for key in ("from", "from_", "to", "fee"):
            if key in cleaned and not cleaned[key]:
                cleaned[key] = None
        return cleaned

    @model_validator(mode="after")
    def _validate_id(self) -> Transaction:
        if not self.id:
            raise ValueError("Transaction.id must be non-empty")
        return self

    @property
    def utc_date(self) -> datetime:
        if self.date.tzinfo is None:
            return self.date.replace(tzinfo=timezone.utc)
        return self.date.astimezone(timezone.utc)

    def movements(self) -> list[Movement]:
        return [movement for movement in (self.from_, self.to, self.fee) if movement is not None]


TransactionPredicate = Callable[[Transaction], bool]


__all__ = [
    "Currency",
    "CurrencyType",
    "Movement",
    "Symbol",
    "Transaction",
    "TransactionId",
    "TransactionPredicate",
    "TransactionType",
    "UNKNOWN_WALLET",
    "Wallet",
]
