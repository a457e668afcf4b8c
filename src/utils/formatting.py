from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

OFX_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def format_decimal(value: Decimal) -> str:
    quantized = value.normalize()
    # Avoid scientific notation for integers.
    if quantized == quantized.to_integral():
        return f"{quantized:.0f}"
    return format(quantized, "f")


def format_ofx_timestamp(value: datetime) -> str:
    """Fixed-width numeric timestamp (YYYYMMDDHHMMSS) in UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(OFX_TIMESTAMP_FORMAT)
