from __future__ import annotations

import json
from pathlib import Path

import pytest

from importers.koinly_importer import KoinlyImporter, discover_pages
from tests.helpers.koinly import fiat, movement, transaction_record


def write_page(path: Path, records: list[dict]) -> Path:
    path.write_text(json.dumps({"transactions": records, "meta": {"page": 1}}))
    return path


def test_load_transactions_keeps_page_and_record_order(tmp_path: Path) -> None:
    first = write_page(
        tmp_path / "page1.json",
        [
            transaction_record(id="A", type="buy", from_=fiat("10"), to=movement("1", "ETH")),
            transaction_record(id="B", type="crypto_deposit", to=movement("2", "BTC")),
        ],
    )
    second = write_page(tmp_path / "page2.json", [transaction_record(id="C", type="fiat_deposit", to=fiat("5"))])

    transactions = KoinlyImporter([first, second]).load_transactions()

    assert [transaction.id for transaction in transactions] == ["A", "B", "C"]
    assert transactions[0].to is not None
    assert transactions[0].to.symbol == "ETH"


def test_discover_pages_sorts_numerically(tmp_path: Path) -> None:
    for number in (10, 2, 1):
        write_page(tmp_path / f"page{number}.json", [])
    (tmp_path / "notes.json").write_text("{}")

    pages = discover_pages(tmp_path)

    assert [page.name for page in pages] == ["page1.json", "page2.json", "page10.json"]


def test_from_directory_requires_pages(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        KoinlyImporter.from_directory(tmp_path)


def test_from_directory_loads_all_pages(tmp_path: Path) -> None:
    write_page(tmp_path / "page2.json", [transaction_record(id="second", type="crypto_deposit", to=movement("1", "ADA"))])
    write_page(tmp_path / "page1.json", [transaction_record(id="first", type="crypto_deposit", to=movement("1", "ADA"))])

    transactions = KoinlyImporter.from_directory(tmp_path).load_transactions()

    assert [transaction.id for transaction in transactions] == ["first", "second"]


def test_page_without_transactions_list_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "page1.json"
    path.write_text(json.dumps([{"id": "A"}]))

    with pytest.raises(ValueError):
        KoinlyImporter([path]).load_transactions()
