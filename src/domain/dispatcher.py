from __future__ import annotations

import logging
from typing import Iterable

from .errors import UnsupportedTransactionTypeError
from .fragments import TradeAction
from .handlers import MovementAction, MovementHandler, SplitAction, SplitHandler, TradeHandler
from .render_pass import RenderPass
from .transactions import Transaction, TransactionPredicate, TransactionType

logger = logging.getLogger(__name__)


def classify(transaction: Transaction) -> TransactionType:
    try:
        return TransactionType(transaction.type)
    except ValueError:
        raise UnsupportedTransactionTypeError(
            transaction_id=transaction.id,
            transaction_type=transaction.type,
        ) from None


class TransactionDispatcher:
    """Route each transaction to the handler of its family."""

    def __init__(
        self,
        *,
        trade_handler: TradeHandler | None = None,
        movement_handler: MovementHandler | None = None,
        split_handler: SplitHandler | None = None,
    ) -> None:
        self._trade_handler = trade_handler or TradeHandler()
        self._movement_handler = movement_handler or MovementHandler()
        self._split_handler = split_handler or SplitHandler()

    def process(
        self,
        transactions: Iterable[Transaction],
        *,
        predicate: TransactionPredicate | None = None,
        render_pass: RenderPass | None = None,
    ) -> RenderPass:
        """Process transactions in input order; any error aborts the whole pass."""
        current = render_pass or RenderPass()
        for transaction in transactions:
            if predicate is not None and not predicate(transaction):
                continue
            self.dispatch(current, transaction)

        logger.info(
            "Processed %d transactions (%d skipped), emitted %d fragments for %d securities",
            current.processed_transactions,
            current.skipped_transactions,
            len(current.fragments),
            len(current.securities),
        )
        return current

    def dispatch(self, render_pass: RenderPass, transaction: Transaction) -> None:
        render_pass.register_securities(transaction)
        transaction_type = classify(transaction)
        render_pass.processed_transactions += 1

        if transaction_type in (TransactionType.BUY, TransactionType.SELL):
            action = TradeAction.BUY if transaction_type is TransactionType.BUY else TradeAction.SELL
            self._trade_handler.handle(render_pass, transaction, action=action)
        elif transaction_type in (TransactionType.CRYPTO_DEPOSIT, TransactionType.CRYPTO_WITHDRAWAL):
            if transaction_type is TransactionType.CRYPTO_DEPOSIT:
                movement_action = MovementAction.DEPOSIT
            else:
                movement_action = MovementAction.WITHDRAWAL
            self._movement_handler.handle(render_pass, transaction, action=movement_action)
        elif transaction_type in (TransactionType.TRANSFER, TransactionType.EXCHANGE):
            split_action = SplitAction.TRANSFER if transaction_type is TransactionType.TRANSFER else SplitAction.EXCHANGE
            self._split_handler.handle(render_pass, transaction, action=split_action)
        else:
            # Fiat movements are already reflected in the linked bank account.
            render_pass.skipped_transactions += 1
            logger.debug("Skipping %s transaction %s", transaction_type.value, transaction.id)


def render_transactions(
    transactions: Iterable[Transaction],
    predicate: TransactionPredicate | None = None,
) -> RenderPass:
    return TransactionDispatcher().process(transactions, predicate=predicate)
