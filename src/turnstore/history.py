from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from .codec import SerializedGame, decode_game, encode_game, validate_game
from .errors import GameNotFound
from .fs import atomic_write_text
from .paths import GamePaths

logger = logging.getLogger(__name__)


class HistoryStore:
    """Append-only archive of every save, addressed by (game id, save id).

    The store trusts the caller's save id. Writing the same pair twice simply
    overwrites the earlier file; keeping save ids unique is the engine's job.
    """

    def __init__(self, paths: GamePaths) -> None:
        self.paths = paths

    def append(self, game_id: str, save_id: int, game: SerializedGame) -> Path:
        validate_game(game)
        path = self.paths.history_path(game_id, save_id)
        atomic_write_text(path, encode_game(game))
        return path

    def get(self, game_id: str, save_id: int) -> SerializedGame:
        path = self.paths.history_path(game_id, save_id)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise GameNotFound(
                f"Game {game_id} not found at save_id {save_id}", game_id=game_id, save_id=save_id
            ) from e
        return decode_game(text, path)

    def exists(self, game_id: str, save_id: int) -> bool:
        return self.paths.history_path(game_id, save_id).is_file()

    def path_for(self, game_id: str, save_id: int) -> Path:
        """Location of an existing entry; raises GameNotFound when absent."""
        path = self.paths.history_path(game_id, save_id)
        if not path.is_file():
            raise GameNotFound(
                f"Game {game_id} not found at save_id {save_id}", game_id=game_id, save_id=save_id
            )
        return path

    def list_save_ids(self, game_id: str) -> List[int]:
        """Save ids stored for game_id, ascending."""
        self.paths.check_game_id(game_id)
        save_ids: List[int] = []
        if not self.paths.history_dir.is_dir():
            return save_ids
        for entry in self.paths.history_dir.iterdir():
            if not entry.is_file():
                continue
            parsed = self.paths.parse_history_name(entry.name)
            if parsed is not None and parsed[0] == game_id:
                save_ids.append(parsed[1])
        save_ids.sort()
        return save_ids

    def delete_save(self, game_id: str, save_id: int) -> None:
        path = self.paths.history_path(game_id, save_id)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise GameNotFound(
                f"Game {game_id} not found at save_id {save_id}", game_id=game_id, save_id=save_id
            ) from e
        logger.debug("Deleted %s", path)
