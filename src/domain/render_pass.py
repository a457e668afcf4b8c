from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from .currency_index import CurrencyTransactionIndex
from .fragments import (
    Fragment,
    TradeAction,
    TradeFragment,
    TransferAction,
    TransferFragment,
    build_trade_fragment,
    build_transfer_fragment,
)
from .securities import SecurityRegistry
from .transactions import Transaction


class RenderPass:
    """State accumulated while turning one batch of transactions into fragments.

    Owns the security catalog, the ordered fragment list and the currency index.
    Handlers receive the pass explicitly; nothing is shared between passes.
    """

    def __init__(self) -> None:
        self.securities = SecurityRegistry()
        self.currency_index = CurrencyTransactionIndex()
        self._fragments: list[Fragment] = []
        self.processed_transactions = 0
        self.skipped_transactions = 0

    @property
    def fragments(self) -> list[Fragment]:
        return list(self._fragments)

    def register_securities(self, transaction: Transaction) -> None:
        for movement in (transaction.from_, transaction.to, transaction.fee):
            if movement is None:
                continue
            if self.securities.register(movement.currency) is not None:
                self.currency_index.ensure(movement.symbol)

    def emit(self, fragment: Fragment) -> Fragment:
        self._fragments.append(fragment)
        self.currency_index.register(fragment.fitid, fragment.symbol)
        return fragment

    def build_trade_fragment(
        self,
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
        fragment = build_trade_fragment(
            action,
            id=id,
            date=date,
            primary_symbol=primary_symbol,
            wallet_name=wallet_name,
            txhash=txhash,
            units=units,
            total=total,
            fee_amount_if_fiat=fee_amount_if_fiat,
        )
        self.emit(fragment)
        return fragment

    def build_transfer_fragment(
        self,
        action: TransferAction | str,
        *,
        id: str,
        date: datetime,
        memo: str,
        symbol: str,
        units: Decimal,
    ) -> TransferFragment:
        fragment = build_transfer_fragment(action, id=id, date=date, memo=memo, symbol=symbol, units=units)
        self.emit(fragment)
        return fragment
