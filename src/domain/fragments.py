"""Typed investment-transaction fragments.

A fragment is one atomic movement in the statement: a trade (units of a
security bought or sold for cash) or a transfer (units added to or removed
from the held position with no cash leg). Builders here are pure; emitting a
fragment into a rendering pass is done by :class:`domain.render_pass.RenderPass`.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

from .errors import InvalidActionError
from .transactions import Symbol

SHORT_ID_LENGTH = 7

ActionT = TypeVar("ActionT", bound=StrEnum)


class TradeAction(StrEnum):
    BUY = "buy"
    SELL = "sell"


class TransferAction(StrEnum):
    ADD = "add"
    REMOVE = "remove"


class TradeFragment(BaseModel):
    model_config = ConfigDict(frozen=True)

    fitid: str
    trade_date: datetime
    memo: str
    symbol: Symbol
    action: TradeAction
    units: Decimal
    unit_price: Decimal
    # Negative for buys (cash leaves the account), positive for sells.
    total: Decimal
    commission: Decimal | None = None

    @model_validator(mode="after")
    def _validate_fitid(self) -> TradeFragment:
        if not self.fitid:
            raise ValueError("TradeFragment.fitid must be non-empty")
        return self


class TransferFragment(BaseModel):
    model_config = ConfigDict(frozen=True)

    fitid: str
    trade_date: datetime
    memo: str
    symbol: Symbol
    action: TransferAction
    units: Decimal

    @model_validator(mode="after")
    def _validate_fitid(self) -> TransferFragment:
        if not self.fitid:
            raise ValueError("TransferFragment.fitid must be non-empty")
        return self


Fragment = TradeFragment | TransferFragment


def format_short_id(fragment_id: str) -> str:
    return fragment_id[:SHORT_ID_LENGTH]


def build_trade_fragment(
    action: TradeAction | str,
    *,
    id: str,
    date: datetime,
    primary_symbol: str,
    wallet_name: str,
    txhash: str | None,
    units: Decimal,
    total: Decimal,
    fee_amount_if_fiat: Decimal | None = None,
) -> TradeFragment:
    """Build a buy or sell of `units` of `primary_symbol` for `total` cash.

    `total` is the unsigned cash amount; the sign is derived from the action.
    Crypto fees are not part of the trade and must be emitted separately.
    """
    trade_action = coerce_action(TradeAction, action, transaction_id=id)
    if units == 0:
        raise ValueError(f"Trade units must be non-zero (transaction={id})")

    label = trade_action.value.capitalize()
    signed_total = -total if trade_action is TradeAction.BUY else total
    return TradeFragment(
        fitid=id,
        trade_date=date,
        memo=f"{format_short_id(id)} - {label} {primary_symbol} - via {wallet_name} (tx:{txhash or ''})",
        symbol=Symbol(primary_symbol),
        action=trade_action,
        units=units,
        unit_price=total / units,
        total=signed_total,
        commission=fee_amount_if_fiat,
    )


def build_transfer_fragment(
    action: TransferAction | str,
    *,
    id: str,
    date: datetime,
    memo: str,
    symbol: str,
    units: Decimal,
) -> TransferFragment:
    transfer_action = coerce_action(TransferAction, action, transaction_id=id)
    return TransferFragment(
        fitid=id,
        trade_date=date,
        memo=f"{format_short_id(id)} - {memo}",
        symbol=Symbol(symbol),
        action=transfer_action,
        units=units,
    )


def coerce_action(enum_type: type[ActionT], value: ActionT | str, *, transaction_id: str | None = None) -> ActionT:
    try:
        return enum_type(value)
    except ValueError:
        raise InvalidActionError(
            action=value,
            allowed=[member.value for member in enum_type],
            transaction_id=transaction_id,
        ) from None
