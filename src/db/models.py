"""Subset of the personal-finance (Core Data / SQLite) schema touched by reconciliation.

Only the columns needed to link imported statement lines to positions are
mapped; the real database carries many more.
"""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class FiTransactionOrm(Base):
    """A statement line as imported from the QFX file, keyed by its FITID."""

    __tablename__ = "ZFITRANSACTION"

    pk: Mapped[int] = mapped_column("Z_PK", Integer, primary_key=True)
    fi_transaction_id: Mapped[str] = mapped_column("ZFITRANSACTIONID", String, nullable=False)

    transactions: Mapped[list["TransactionOrm"]] = relationship(back_populates="fi_transaction")


class TransactionOrm(Base):
    __tablename__ = "ZTRANSACTION"

    pk: Mapped[int] = mapped_column("Z_PK", Integer, primary_key=True)
    position: Mapped[int | None] = mapped_column("ZPOSITION", Integer, nullable=True)
    fi_transaction_pk: Mapped[int | None] = mapped_column(
        "ZFITRANSACTION", Integer, ForeignKey("ZFITRANSACTION.Z_PK"), nullable=True
    )

    fi_transaction: Mapped[FiTransactionOrm | None] = relationship(back_populates="transactions")
