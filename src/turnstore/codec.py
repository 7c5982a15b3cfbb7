from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import CorruptGameData

SerializedGame = Dict[str, Any]

REQUIRED_KEYS = ("id", "lastSaveId", "players")


def encode_game(game: SerializedGame) -> str:
    """Encode a serialized game to indented JSON, keeping the engine's key order."""
    return json.dumps(game, ensure_ascii=False, indent=2)


def decode_game(text: str, path: Optional[Path] = None) -> SerializedGame:
    """Decode JSON text into a serialized game, checking the fields the store relies on."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptGameData(f"Invalid JSON in {path or 'game data'}: {e}", path=path) from e
    validate_game(data, path)
    return data


def validate_game(data: Any, path: Optional[Path] = None) -> None:
    where = path or "game data"
    if not isinstance(data, dict):
        raise CorruptGameData(f"{where} is not a JSON object", path=path)
    missing = [k for k in REQUIRED_KEYS if k not in data]
    if missing:
        raise CorruptGameData(f"{where} is missing keys: {', '.join(missing)}", path=path)
    if not isinstance(data["players"], list):
        raise CorruptGameData(f"{where} has a non-list 'players' field", path=path)
    for player in data["players"]:
        if not isinstance(player, dict) or "id" not in player:
            raise CorruptGameData(f"{where} has a player without an id", path=path)


def participant_ids(game: SerializedGame) -> List[str]:
    """Player ids in seat order followed by the spectator id, if any."""
    ids = [player["id"] for player in game["players"]]
    spectator = game.get("spectatorId")
    if spectator:
        ids.append(spectator)
    return ids
