from datetime import datetime, timezone

from domain.transactions import Symbol

BTC = Symbol("BTC")
ETH = Symbol("ETH")
ADA = Symbol("ADA")
BNB = Symbol("BNB")
USD = Symbol("USD")

TX_DATE = datetime(2021, 5, 1, 12, 30, 45, tzinfo=timezone.utc)
TX_DATE_OFX = "20210501123045"

BINANCE_WALLET = "Binance"
LEDGER_WALLET = "Ledger Nano"
COINBASE_WALLET = "Coinbase"
