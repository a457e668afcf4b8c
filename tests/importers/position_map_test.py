from __future__ import annotations

import json
from pathlib import Path

import pytest

from config import DATA_DIR
from importers.position_map import load_position_map


def test_load_position_map(tmp_path: Path) -> None:
    path = tmp_path / "positions.json"
    path.write_text(json.dumps({"BTC": 190, " ETH ": 197}))

    assert load_position_map(path) == {"BTC": 190, "ETH": 197}


@pytest.mark.parametrize("payload", [[["BTC", 190]], {"BTC": "190"}, {"BTC": True}, {"BTC": 1.5}])
def test_load_position_map_rejects_malformed_content(tmp_path: Path, payload: object) -> None:
    path = tmp_path / "positions.json"
    path.write_text(json.dumps(payload))

    with pytest.raises(ValueError):
        load_position_map(path)


def test_bundled_position_map_is_valid() -> None:
    position_map = load_position_map(DATA_DIR / "position_ids.json")

    assert position_map["BTC"] == 190
    assert position_map["ETH"] == 197
