from __future__ import annotations

import json
from pathlib import Path


def load_position_map(path: Path) -> dict[str, int]:
    """Read a `{"BTC": 190, ...}` JSON object mapping symbols to position ids."""
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        msg = "Position map file must contain a JSON object of symbol to position id."
        raise ValueError(msg)

    position_map: dict[str, int] = {}
    for symbol, position_id in payload.items():
        if isinstance(position_id, bool) or not isinstance(position_id, int):
            msg = f"Position id for {symbol!r} must be an integer."
            raise ValueError(msg)
        position_map[str(symbol).strip()] = position_id
    return position_map


__all__ = ["load_position_map"]
