from __future__ import annotations

import logging
from datetime import datetime, timezone
from textwrap import indent
from typing import Iterable
from xml.sax.saxutils import escape

from pydantic import BaseModel, ConfigDict

from domain.fragments import Fragment, TradeAction, TradeFragment, TransferAction, TransferFragment
from domain.render_pass import RenderPass
from domain.securities import Security
from utils.formatting import format_decimal, format_ofx_timestamp

logger = logging.getLogger(__name__)

SECURITY_SYMBOL_PREFIX = "CRYPTO-"
SECURITY_NAME_SUFFIX = " (Manual)"

OFX_HEADER = [
    "OFXHEADER:100",
    "DATA:OFXSGML",
    "VERSION:102",
    "SECURITY:NONE",
    "ENCODING:USASCII",
    "CHARSET:1252",
    "COMPRESSION:NONE",
    "OLDFILEUID:NONE",
    "NEWFILEUID:NONE",
]

LIST_START = "19000101000000"
LIST_END = "20990101000000"


class StatementAccount(BaseModel):
    """Institution and account fields written into every statement."""

    model_config = ConfigDict(frozen=True)

    org: str = "Vanguard"
    fid: str = "15103"
    broker_id: str = "Vanguard"
    account_id: str = "CRYPTO"
    currency: str = "USD"
    transaction_uid: str = "1001"


def format_security_symbol(symbol: str) -> str:
    # Prefixed so the importer never matches a real market ticker.
    return f"{SECURITY_SYMBOL_PREFIX}{symbol}"


def format_security_name(name: str) -> str:
    return f"{name}{SECURITY_NAME_SUFFIX}"


def _secid(symbol: str) -> list[str]:
    return [
        "<SECID>",
        f"  <UNIQUEID>{escape(format_security_symbol(symbol))}</UNIQUEID>",
        "  <UNIQUEIDTYPE>OTHER</UNIQUEIDTYPE>",
        "</SECID>",
    ]


def _invtran(fragment: Fragment) -> list[str]:
    return [
        "<INVTRAN>",
        f"  <FITID>{escape(fragment.fitid)}</FITID>",
        f"  <DTTRADE>{format_ofx_timestamp(fragment.trade_date)}</DTTRADE>",
        f"  <MEMO>{escape(fragment.memo)}</MEMO>",
        "</INVTRAN>",
    ]


def _nested(lines: Iterable[str], prefix: str = "  ") -> list[str]:
    return [f"{prefix}{line}" for line in lines]


def render_trade(fragment: TradeFragment) -> str:
    name = "BUY" if fragment.action is TradeAction.BUY else "SELL"
    body = [
        *_invtran(fragment),
        *_secid(fragment.symbol),
        f"<UNITS>{format_decimal(fragment.units)}</UNITS>",
        f"<UNITPRICE>{format_decimal(fragment.unit_price)}</UNITPRICE>",
        f"<TOTAL>{format_decimal(fragment.total)}</TOTAL>",
        "<SUBACCTSEC>CASH</SUBACCTSEC>",
        "<SUBACCTFUND>CASH</SUBACCTFUND>",
    ]
    if fragment.commission is not None:
        body.append(f"<COMMISSION>{format_decimal(fragment.commission)}</COMMISSION>")
    lines = [
        f"<{name}STOCK>",
        f"  <INV{name}>",
        *_nested(body, "    "),
        f"  </INV{name}>",
        f"</{name}STOCK>",
    ]
    return "\n".join(lines)


def render_transfer(fragment: TransferFragment) -> str:
    direction = "IN" if fragment.action is TransferAction.ADD else "OUT"
    body = [
        *_invtran(fragment),
        *_secid(fragment.symbol),
        "<SUBACCTSEC>CASH</SUBACCTSEC>",
        f"<UNITS>{format_decimal(fragment.units)}</UNITS>",
        f"<TFERACTION>{direction}</TFERACTION>",
        "<POSTYPE>LONG</POSTYPE>",
    ]
    return "\n".join(["<TRANSFER>", *_nested(body), "</TRANSFER>"])


def render_fragment(fragment: Fragment) -> str:
    if isinstance(fragment, TradeFragment):
        return render_trade(fragment)
    return render_transfer(fragment)


def render_security(security: Security) -> str:
    ticker = escape(format_security_symbol(security.symbol))
    lines = [
        "<SECINFO>",
        *_nested(_secid(security.symbol)),
        f"  <SECNAME>{escape(format_security_name(security.name))}</SECNAME>",
        f"  <TICKER>{ticker}</TICKER>",
        "</SECINFO>",
    ]
    return "\n".join(lines)


class OfxStatementRenderer:
    """Render a processed pass as an OFX 1.02 (SGML) investment statement."""

    def __init__(self, account: StatementAccount | None = None) -> None:
        self.account = account or StatementAccount()

    def render(self, render_pass: RenderPass, *, generated_at: datetime | None = None) -> str:
        now = generated_at or datetime.now(timezone.utc)
        timestamp = format_ofx_timestamp(now)
        fragments = render_pass.fragments
        securities = list(render_pass.securities)
        account = self.account

        transactions_block = indent("\n\n".join(render_fragment(fragment) for fragment in fragments), " " * 10)
        securities_block = indent("\n\n".join(render_security(security) for security in securities), " " * 10)

        body = f"""<OFX>
  <SIGNONMSGSRSV1>
    <SONRS>
      <STATUS>
        <CODE>0
        <SEVERITY>INFO
      </STATUS>
      <DTSERVER>{timestamp}[0:GMT]
      <LANGUAGE>ENG
      <FI>
        <ORG>{escape(account.org)}
        <FID>{escape(account.fid)}
      </FI>
      <INTU.BID>{escape(account.fid)}
    </SONRS>
  </SIGNONMSGSRSV1>
  <INVSTMTMSGSRSV1>
    <INVSTMTTRNRS>
      <TRNUID>{escape(account.transaction_uid)}</TRNUID>
      <STATUS>
        <CODE>0</CODE>
        <SEVERITY>INFO</SEVERITY>
      </STATUS>
      <INVSTMTRS>
        <DTASOF>{timestamp}
        <CURDEF>{escape(account.currency)}

        <INVACCTFROM>
          <BROKERID>{escape(account.broker_id)}
          <ACCTID>{escape(account.account_id)}
        </INVACCTFROM>

        <INVTRANLIST>
          <DTSTART>{LIST_START}</DTSTART>
          <DTEND>{LIST_END}</DTEND>

{transactions_block}
        </INVTRANLIST>

        <SECLIST>

{securities_block}
        </SECLIST>
      </INVSTMTRS>
    </INVSTMTTRNRS>
  </INVSTMTMSGSRSV1>
</OFX>
"""
        logger.info("Rendered statement with %d transactions and %d securities", len(fragments), len(securities))
        return "\n".join(OFX_HEADER) + "\n\n" + body
