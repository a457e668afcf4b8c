from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from config import AppSettings, config
from domain.dispatcher import TransactionDispatcher
from domain.render_pass import RenderPass
from domain.transactions import Transaction, TransactionPredicate
from importers.koinly_importer import KoinlyImporter
from importers.position_map import load_position_map
from renderers.ofx_renderer import OfxStatementRenderer, StatementAccount
from renderers.reconciliation import ReconciliationRenderer, ReconciliationResult
from services.coingecko_client import CoinGeckoClient
from services.quote_export import download_quotes


@dataclass
class RenderedArtifacts:
    render_pass: RenderPass
    statement: str
    reconciliation: ReconciliationResult


def build_predicate(types: Sequence[str] = (), ids: Sequence[str] = ()) -> TransactionPredicate | None:
    """Combine `--type`/`--id` filters; None means every transaction is included."""
    if not types and not ids:
        return None
    wanted_types = set(types)
    wanted_ids = set(ids)

    def _include(transaction: Transaction) -> bool:
        if wanted_types and transaction.type not in wanted_types:
            return False
        if wanted_ids and transaction.id not in wanted_ids:
            return False
        return True

    return _include


def statement_account(settings: AppSettings) -> StatementAccount:
    return StatementAccount(
        org=settings.org,
        fid=settings.fid,
        broker_id=settings.broker_id,
        account_id=settings.account_id,
        currency=settings.currency,
        transaction_uid=settings.transaction_uid,
    )


def render_artifacts(
    transactions: Iterable[Transaction],
    position_map: Mapping[str, int],
    *,
    account: StatementAccount | None = None,
    predicate: TransactionPredicate | None = None,
    generated_at: datetime | None = None,
) -> RenderedArtifacts:
    """Render both artifacts in memory; raises before anything is written."""
    render_pass = TransactionDispatcher().process(transactions, predicate=predicate)
    statement = OfxStatementRenderer(account).render(render_pass, generated_at=generated_at)
    reconciliation = ReconciliationRenderer(position_map).render(render_pass.currency_index)
    return RenderedArtifacts(render_pass=render_pass, statement=statement, reconciliation=reconciliation)


def write_outputs(outputs: Mapping[Path, str]) -> None:
    """Write every file or none: contents go to sibling temp files, moved into place once all are written."""
    staged: list[tuple[Path, Path]] = []
    try:
        for path, content in outputs.items():
            path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = path.with_name(f"{path.name}.tmp")
            staged.append((temp_path, path))
            temp_path.write_text(content, encoding="utf-8")
    except OSError:
        for temp_path, _ in staged:
            temp_path.unlink(missing_ok=True)
        raise

    for temp_path, path in staged:
        temp_path.replace(path)


def run_render(
    settings: AppSettings,
    *,
    pages: Sequence[Path] = (),
    predicate: TransactionPredicate | None = None,
) -> RenderedArtifacts:
    importer = KoinlyImporter(pages) if pages else KoinlyImporter.from_directory(settings.transactions_dir)
    transactions = importer.load_transactions()
    position_map = load_position_map(settings.position_map_path)

    artifacts = render_artifacts(
        transactions,
        position_map,
        account=statement_account(settings),
        predicate=predicate,
    )

    write_outputs(
        {
            settings.qfx_output_path: artifacts.statement,
            settings.sql_output_path: artifacts.reconciliation.render_sql(),
        }
    )

    print_render_summary(artifacts, settings)
    return artifacts


def print_render_summary(artifacts: RenderedArtifacts, settings: AppSettings) -> None:
    render_pass = artifacts.render_pass
    print("Render summary:")
    print(f"  Transactions processed: {render_pass.processed_transactions}")
    print(f"  Transactions skipped:   {render_pass.skipped_transactions}")
    print(f"  Fragments:              {len(render_pass.fragments)}")
    print(f"  Securities:             {len(render_pass.securities)}")
    print(f"  Position updates:       {len(artifacts.reconciliation.statements)}")
    if artifacts.reconciliation.diagnostics:
        print("Symbols without a position id:")
        for diagnostic in artifacts.reconciliation.diagnostics:
            print(f"  {diagnostic}")
    print(f"Wrote {settings.qfx_output_path} and {settings.sql_output_path}")


def run_quotes(settings: AppSettings, coin_ids: Sequence[str], *, vs_currency: str, output_dir: Path) -> None:
    client = CoinGeckoClient(base_url=settings.coingecko_base_url)
    written = download_quotes(client, coin_ids, output_dir, vs_currency=vs_currency)
    for coin_id, path in written.items():
        print(f"Downloaded {coin_id} -> {path}")


def main(argv: Sequence[str] | None = None) -> None:
    settings = config()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    parser = argparse.ArgumentParser(description="Convert Koinly transactions into a QFX statement.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    render_parser = subparsers.add_parser("render", help="Render output.qfx and output.sql")
    render_parser.add_argument("pages", type=Path, nargs="*", help="Koinly export pages, in processing order")
    render_parser.add_argument("--transactions-dir", type=Path, default=settings.transactions_dir)
    render_parser.add_argument("--position-map", type=Path, default=settings.position_map_path)
    render_parser.add_argument("--qfx-output", type=Path, default=settings.qfx_output_path)
    render_parser.add_argument("--sql-output", type=Path, default=settings.sql_output_path)
    render_parser.add_argument("--type", dest="types", action="append", default=[], help="Only this type")
    render_parser.add_argument("--id", dest="ids", action="append", default=[], help="Only this transaction id")

    quotes_parser = subparsers.add_parser("quotes", help="Download CoinGecko quote CSVs")
    quotes_parser.add_argument("coins", nargs="+", help="CoinGecko coin ids, e.g. bitcoin ethereum")
    quotes_parser.add_argument("--vs-currency", default="usd")
    quotes_parser.add_argument("--output-dir", type=Path, default=settings.quotes_dir)

    args = parser.parse_args(argv)

    if args.command == "render":
        run_settings = settings.model_copy(
            update={
                "transactions_dir": args.transactions_dir,
                "position_map_path": args.position_map,
                "qfx_output_path": args.qfx_output,
                "sql_output_path": args.sql_output,
            }
        )
        run_render(run_settings, pages=args.pages, predicate=build_predicate(args.types, args.ids))
    else:
        run_quotes(settings, args.coins, vs_currency=args.vs_currency, output_dir=args.output_dir)


if __name__ == "__main__":
    main()
