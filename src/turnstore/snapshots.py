from __future__ import annotations

import logging
from pathlib import Path
from typing import Set

from .codec import SerializedGame, decode_game, encode_game, validate_game
from .errors import GameNotFound
from .fs import atomic_copy, atomic_write_text
from .paths import GamePaths

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Current state of each game, one JSON file per game id."""

    def __init__(self, paths: GamePaths) -> None:
        self.paths = paths

    def put(self, game: SerializedGame) -> Path:
        validate_game(game)
        path = self.paths.snapshot_path(game["id"])
        atomic_write_text(path, encode_game(game))
        return path

    def get(self, game_id: str) -> SerializedGame:
        path = self.paths.snapshot_path(game_id)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise GameNotFound(f"Game {game_id} not found", game_id=game_id) from e
        return decode_game(text, path)

    def exists(self, game_id: str) -> bool:
        return self.paths.snapshot_path(game_id).is_file()

    def modified_ns(self, game_id: str) -> int:
        try:
            return self.paths.snapshot_path(game_id).stat().st_mtime_ns
        except FileNotFoundError as e:
            raise GameNotFound(f"Game {game_id} not found", game_id=game_id) from e

    def copy_from(self, source: Path, game_id: str) -> Path:
        dest = self.paths.snapshot_path(game_id)
        atomic_copy(source, dest)
        return dest

    def list_game_ids(self) -> Set[str]:
        game_ids: Set[str] = set()
        if not self.paths.root.is_dir():
            return game_ids
        for entry in self.paths.root.iterdir():
            if not entry.is_file():
                continue
            game_id = self.paths.parse_snapshot_name(entry.name)
            if game_id is not None:
                game_ids.add(game_id)
        logger.debug("Found %d games in %s", len(game_ids), self.paths.root)
        return game_ids
