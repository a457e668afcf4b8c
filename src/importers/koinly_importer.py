from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Iterable

from domain.transactions import Transaction

logger = logging.getLogger(__name__)

PAGE_PATTERN = "page*.json"
_PAGE_NUMBER = re.compile(r"(\d+)")


def _page_sort_key(path: Path) -> tuple[int, str]:
    match = _PAGE_NUMBER.search(path.stem)
    return (int(match.group(1)) if match else 0, path.name)


def discover_pages(directory: Path) -> list[Path]:
    """Export pages in numeric order (page2 before page10)."""
    return sorted(directory.glob(PAGE_PATTERN), key=_page_sort_key)


class KoinlyImporter:
    """Load transactions from Koinly API export pages, keeping file and record order."""

    def __init__(self, page_paths: Iterable[Path | str]) -> None:
        self._page_paths = [Path(path) for path in page_paths]

    @classmethod
    def from_directory(cls, directory: Path) -> KoinlyImporter:
        pages = discover_pages(directory)
        if not pages:
            raise ValueError(f"No Koinly export pages matching {PAGE_PATTERN} in {directory}")
        return cls(pages)

    def load_transactions(self) -> list[Transaction]:
        transactions: list[Transaction] = []
        for path in self._page_paths:
            page = self._read_page(path)
            transactions.extend(Transaction.model_validate(record) for record in page)
            logger.info("Loaded %d transactions from %s", len(page), path)
        return transactions

    def _read_page(self, path: Path) -> list[dict[str, Any]]:
        payload = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict) or not isinstance(payload.get("transactions"), list):
            msg = f"Koinly page {path} must be a JSON object with a 'transactions' list."
            raise ValueError(msg)
        return payload["transactions"]


__all__ = ["KoinlyImporter", "discover_pages"]
