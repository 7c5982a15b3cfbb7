from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from turnstore.database import LocalFilesystemDatabase  # noqa: E402


def make_game(
    game_id: str = "g1",
    save_id: int = 0,
    players: Optional[List[str]] = None,
    spectator: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    players = ["p1a", "p1b"] if players is None else players
    game: Dict[str, Any] = {
        "id": game_id,
        "lastSaveId": save_id,
        "players": [{"id": pid, "name": pid.upper()} for pid in players],
        "generation": save_id + 1,
    }
    if spectator is not None:
        game["spectatorId"] = spectator
    game.update(extra)
    return game


class FakeGame:
    """Minimal engine-side game: owns its save counter and serializes itself."""

    def __init__(self, game_id: str = "g1", players: Optional[List[str]] = None, spectator: Optional[str] = None) -> None:
        self.id = game_id
        self.last_save_id = 0
        self.players = ["p1a", "p1b"] if players is None else players
        self.spectator = spectator
        self.turn = 0

    def serialize(self) -> Dict[str, Any]:
        return make_game(self.id, self.last_save_id, self.players, self.spectator, turn=self.turn)


@pytest.fixture()
def db(tmp_path: Path) -> LocalFilesystemDatabase:
    database = LocalFilesystemDatabase(tmp_path / "db")
    database.initialize()
    return database
