from __future__ import annotations

from functools import cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = PROJECT_ROOT / "data"


class AppSettings(BaseSettings):
    transactions_dir: Path = DATA_DIR / "koinly-transactions"
    position_map_path: Path = DATA_DIR / "position_ids.json"
    qfx_output_path: Path = Path("output.qfx")
    sql_output_path: Path = Path("output.sql")

    # Institution and account the statement claims to come from.
    org: str = "Vanguard"
    fid: str = "15103"
    broker_id: str = "Vanguard"
    account_id: str = "CRYPTO"
    currency: str = "USD"
    transaction_uid: str = "1001"

    coingecko_base_url: str = "https://www.coingecko.com"
    quotes_dir: Path = Path("quotes")

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="KOINLY_QFX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@cache
def config() -> AppSettings:
    return AppSettings()
