from __future__ import annotations

from collections import defaultdict

from .transactions import Symbol


class CurrencyTransactionIndex:
    """Fragment ids grouped by the symbol they move."""

    def __init__(self) -> None:
        self._fragment_ids: dict[Symbol, list[str]] = defaultdict(list)

    def ensure(self, symbol: str) -> None:
        # Known symbols stay listed even if no fragment ever references them.
        self._fragment_ids[Symbol(symbol)]

    def register(self, fragment_id: str, symbol: str) -> None:
        self._fragment_ids[Symbol(symbol)].append(fragment_id)

    def fragment_ids(self, symbol: str) -> list[str]:
        return list(self._fragment_ids.get(Symbol(symbol), []))

    def items(self) -> list[tuple[Symbol, list[str]]]:
        return [(symbol, list(ids)) for symbol, ids in self._fragment_ids.items()]

    def symbols(self) -> list[Symbol]:
        return list(self._fragment_ids)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._fragment_ids

    def __len__(self) -> int:
        return len(self._fragment_ids)
