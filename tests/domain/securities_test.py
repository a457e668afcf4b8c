from domain.securities import Security, SecurityRegistry
from domain.transactions import Currency, Symbol
from tests.constants import BTC, ETH


def _currency(symbol: str, name: str, currency_type: str = "crypto") -> Currency:
    return Currency(symbol=Symbol(symbol), name=name, type=currency_type)


def test_register_adds_each_crypto_symbol_once() -> None:
    registry = SecurityRegistry()

    first = registry.register(_currency(BTC, "Bitcoin"))
    again = registry.register(_currency(BTC, "Bitcoin"))
    registry.register(_currency(ETH, "Ethereum"))

    assert first == Security(symbol=BTC, name="Bitcoin")
    assert again is None
    assert len(registry) == 2
    assert [security.symbol for security in registry] == [BTC, ETH]


def test_first_seen_name_is_kept() -> None:
    registry = SecurityRegistry()

    registry.register(_currency(ETH, "Ethereum"))
    registry.register(_currency(ETH, "Ether (renamed)"))

    security = registry.get(ETH)
    assert security is not None
    assert security.name == "Ethereum"


def test_fiat_and_missing_currencies_are_ignored() -> None:
    registry = SecurityRegistry()

    assert registry.register(_currency("USD", "US Dollar", "fiat")) is None
    assert registry.register(None) is None

    assert len(registry) == 0
    assert "USD" not in registry
