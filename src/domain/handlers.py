from __future__ import annotations

from enum import StrEnum

from .errors import InvalidFieldCombinationError, UnsupportedFeeCurrencyTypeError
from .fragments import TradeAction, TransferAction, coerce_action
from .render_pass import RenderPass
from .transactions import CurrencyType, Movement, Transaction


class MovementAction(StrEnum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class SplitAction(StrEnum):
    TRANSFER = "transfer"
    EXCHANGE = "exchange"


def _tx_suffix(transaction: Transaction) -> str:
    return f"(tx:{transaction.txhash or ''})"


def _require(transaction: Transaction, movement: Movement | None, field: str, reason: str) -> Movement:
    if movement is None:
        raise InvalidFieldCombinationError(reason, transaction_id=transaction.id, fields=[field])
    return movement


class TradeHandler:
    """Buy and sell: one trade fragment, plus a remove fragment for crypto fees."""

    def handle(self, render_pass: RenderPass, transaction: Transaction, *, action: TradeAction | str) -> None:
        trade_action = coerce_action(TradeAction, action, transaction_id=transaction.id)
        label = trade_action.value.capitalize()

        if trade_action is TradeAction.BUY:
            asset = _require(transaction, transaction.to, "to", "Buy requires a `to` element")
            cash = _require(transaction, transaction.from_, "from", "Buy requires a `from` element")
        else:
            asset = _require(transaction, transaction.from_, "from", "Sell requires a `from` element")
            cash = _require(transaction, transaction.to, "to", "Sell requires a `to` element")

        fee = transaction.fee
        fee_type = fee.currency.type if fee is not None else None
        if fee is not None and fee_type not in (CurrencyType.FIAT, CurrencyType.CRYPTO):
            raise UnsupportedFeeCurrencyTypeError(transaction_id=transaction.id, fee_currency_type=str(fee_type))

        render_pass.build_trade_fragment(
            trade_action,
            id=transaction.id,
            date=transaction.utc_date,
            primary_symbol=asset.symbol,
            wallet_name=asset.wallet_name,
            txhash=transaction.txhash,
            units=asset.amount,
            total=cash.amount,
            fee_amount_if_fiat=fee.amount if fee is not None and fee_type == CurrencyType.FIAT else None,
        )

        if fee is not None and fee_type == CurrencyType.CRYPTO:
            render_pass.build_transfer_fragment(
                TransferAction.REMOVE,
                id=f"{transaction.id}-FEE",
                date=transaction.utc_date,
                memo=f"{label} {asset.symbol} Fee - via {asset.wallet_name} {_tx_suffix(transaction)}",
                symbol=fee.symbol,
                units=fee.amount,
            )


class MovementHandler:
    """Crypto deposits and withdrawals of a single asset."""

    def handle(self, render_pass: RenderPass, transaction: Transaction, *, action: MovementAction | str) -> None:
        movement_action = coerce_action(MovementAction, action, transaction_id=transaction.id)

        if movement_action is MovementAction.DEPOSIT:
            unexpected = {"from": transaction.from_, "fee": transaction.fee}
        else:
            unexpected = {"to": transaction.to, "fee": transaction.fee}
        present = [name for name, movement in unexpected.items() if movement is not None]
        if present:
            raise InvalidFieldCombinationError(
                f"Unexpected element for {movement_action.value}",
                transaction_id=transaction.id,
                fields=present,
            )

        if movement_action is MovementAction.DEPOSIT:
            primary = _require(transaction, transaction.to, "to", "Deposit requires a `to` element")
            transfer_action = TransferAction.ADD
        else:
            primary = _require(transaction, transaction.from_, "from", "Withdrawal requires a `from` element")
            transfer_action = TransferAction.REMOVE

        render_pass.build_transfer_fragment(
            transfer_action,
            id=transaction.id,
            date=transaction.utc_date,
            memo=(
                f"{movement_action.value.capitalize()} {primary.symbol} - via {primary.wallet_name} "
                f"{_tx_suffix(transaction)}"
            ),
            symbol=primary.symbol,
            units=primary.amount,
        )


class SplitHandler:
    """Transfers and exchanges: a remove and an add, plus a remove for a crypto fee."""

    def handle(self, render_pass: RenderPass, transaction: Transaction, *, action: SplitAction | str) -> None:
        split_action = coerce_action(SplitAction, action, transaction_id=transaction.id)
        label = split_action.value.capitalize()
        kind = split_action.value.upper()

        source = _require(transaction, transaction.from_, "from", f"{label} requires a `from` element")
        destination = _require(transaction, transaction.to, "to", f"{label} requires a `to` element")

        # No cash leg to hang a commission on, so only crypto fees are accepted.
        fee = transaction.fee
        if fee is not None and fee.currency.type != CurrencyType.CRYPTO:
            raise UnsupportedFeeCurrencyTypeError(transaction_id=transaction.id, fee_currency_type=fee.currency.type)

        render_pass.build_transfer_fragment(
            TransferAction.REMOVE,
            id=f"{transaction.id}-{kind}-REMOVE",
            date=transaction.utc_date,
            memo=f"{label} (source) {source.symbol} - from {source.wallet_name} {_tx_suffix(transaction)}",
            symbol=source.symbol,
            units=source.amount,
        )
        render_pass.build_transfer_fragment(
            TransferAction.ADD,
            id=f"{transaction.id}-{kind}-ADD",
            date=transaction.utc_date,
            memo=f"{label} (destination) {destination.symbol} - to {destination.wallet_name} {_tx_suffix(transaction)}",
            symbol=destination.symbol,
            units=destination.amount,
        )
        if fee is not None:
            render_pass.build_transfer_fragment(
                TransferAction.REMOVE,
                id=f"{transaction.id}-{kind}-FEE",
                date=transaction.utc_date,
                memo=f"{label} Fee {fee.symbol} - from {fee.wallet_name} {_tx_suffix(transaction)}",
                symbol=fee.symbol,
                units=fee.amount,
            )
