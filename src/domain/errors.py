from __future__ import annotations

from typing import Iterable


class TransformError(Exception):
    """Base error for a transaction that cannot be turned into fragments."""

    def __init__(self, message: str, *, transaction_id: str | None = None) -> None:
        super().__init__(message)
        self.transaction_id = transaction_id


class UnsupportedTransactionTypeError(TransformError):
    def __init__(self, *, transaction_id: str, transaction_type: str) -> None:
        super().__init__(
            f"Transaction type `{transaction_type}` not supported (transaction={transaction_id})",
            transaction_id=transaction_id,
        )
        self.transaction_type = transaction_type


class UnsupportedFeeCurrencyTypeError(TransformError):
    def __init__(self, *, transaction_id: str, fee_currency_type: str) -> None:
        super().__init__(
            f"Fee currency type `{fee_currency_type}` not supported (transaction={transaction_id})",
            transaction_id=transaction_id,
        )
        self.fee_currency_type = fee_currency_type


class InvalidFieldCombinationError(TransformError):
    def __init__(self, reason: str, *, transaction_id: str, fields: Iterable[str]) -> None:
        self.fields = tuple(fields)
        super().__init__(
            f"{reason} (transaction={transaction_id}, fields={', '.join(self.fields)})",
            transaction_id=transaction_id,
        )


class InvalidActionError(TransformError):
    def __init__(self, *, action: object, allowed: Iterable[str], transaction_id: str | None = None) -> None:
        allowed_text = " or ".join(f"`{value}`" for value in allowed)
        super().__init__(
            f"Action `{action}` must be {allowed_text} (transaction={transaction_id})",
            transaction_id=transaction_id,
        )
        self.action = action


__all__ = [
    "InvalidActionError",
    "InvalidFieldCombinationError",
    "TransformError",
    "UnsupportedFeeCurrencyTypeError",
    "UnsupportedTransactionTypeError",
]
