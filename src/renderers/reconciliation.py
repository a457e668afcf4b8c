from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from sqlalchemy import Update, select, update
from sqlalchemy.dialects import sqlite
from sqlalchemy.orm import Session

from db.models import FiTransactionOrm, TransactionOrm
from domain.currency_index import CurrencyTransactionIndex

logger = logging.getLogger(__name__)

MISSING_MARKER = "MISSING"


@dataclass(frozen=True)
class ReconciliationStatement:
    """Assign one position to every imported statement line of a symbol."""

    symbol: str
    position_id: int
    fragment_ids: tuple[str, ...]

    def to_update(self) -> Update:
        fi_transaction_pks = select(FiTransactionOrm.pk).where(
            FiTransactionOrm.fi_transaction_id.in_(self.fragment_ids)
        )
        return (
            update(TransactionOrm)
            .where(TransactionOrm.fi_transaction_pk.in_(fi_transaction_pks))
            .values({TransactionOrm.position: self.position_id})
            .execution_options(synchronize_session=False)
        )

    def render(self) -> str:
        compiled = self.to_update().compile(dialect=sqlite.dialect(), compile_kwargs={"literal_binds": True})
        return f"-- Update the ZPOSITION of {self.symbol} transactions\n{compiled};\n"


@dataclass
class ReconciliationResult:
    statements: list[ReconciliationStatement] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)

    def render_sql(self) -> str:
        return "\n".join(statement.render() for statement in self.statements)

    def apply(self, session: Session) -> int:
        """Execute every statement in `session`; returns the number of updated rows."""
        updated = 0
        for statement in self.statements:
            result = session.execute(statement.to_update())
            updated += result.rowcount or 0
        session.commit()
        return updated


def format_diagnostic(symbol: str, fragment_count: int) -> str:
    return f"{symbol:<8} - {fragment_count} fragment(s) - {MISSING_MARKER}"


class ReconciliationRenderer:
    def __init__(self, position_map: Mapping[str, int]) -> None:
        self._position_map = dict(position_map)

    def render(self, currency_index: CurrencyTransactionIndex) -> ReconciliationResult:
        result = ReconciliationResult()
        for symbol, fragment_ids in currency_index.items():
            if not fragment_ids:
                continue

            position_id = self._position_map.get(symbol)
            if position_id is None:
                diagnostic = format_diagnostic(symbol, len(fragment_ids))
                logger.info("No position id mapped: %s", diagnostic)
                result.diagnostics.append(diagnostic)
                continue

            logger.info("%-8s - position %d (%d fragments)", symbol, position_id, len(fragment_ids))
            result.statements.append(
                ReconciliationStatement(
                    symbol=symbol,
                    position_id=position_id,
                    fragment_ids=tuple(fragment_ids),
                )
            )
        return result
