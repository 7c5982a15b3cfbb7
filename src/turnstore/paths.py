from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from .errors import InvalidArgument
from .ids import GameIdRecognizer, is_game_id

SAVE_ID_WIDTH = 5
FILE_SUFFIX = ".json"
HISTORY_DIR_NAME = "history"


@dataclass(frozen=True)
class GamePaths:
    """Deterministic file locations for current and historical game saves.

    Layout:
      {root}/{game_id}.json                  current snapshot
      {root}/history/{game_id}-{00042}.json  one file per save id

    Save ids are zero padded so a lexicographic directory listing matches
    numeric order for the first 100000 saves.
    """

    root: Path
    history_dir_name: str = HISTORY_DIR_NAME
    recognizer: GameIdRecognizer = field(default=is_game_id, compare=False, repr=False)

    @property
    def history_dir(self) -> Path:
        return self.root / self.history_dir_name

    def ensure_dirs(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self.history_dir.mkdir(parents=True, exist_ok=True)

    def snapshot_path(self, game_id: str) -> Path:
        self.check_game_id(game_id)
        return self.root / f"{game_id}{FILE_SUFFIX}"

    def history_path(self, game_id: str, save_id: int) -> Path:
        self.check_game_id(game_id)
        if isinstance(save_id, bool) or not isinstance(save_id, int) or save_id < 0:
            raise InvalidArgument(f"invalid save id for {game_id}: {save_id!r}")
        return self.history_dir / f"{game_id}-{save_id:0{SAVE_ID_WIDTH}d}{FILE_SUFFIX}"

    def parse_snapshot_name(self, name: str) -> Optional[str]:
        if not name.endswith(FILE_SUFFIX):
            return None
        stem = name[: -len(FILE_SUFFIX)]
        return stem if self.recognizer(stem) else None

    def parse_history_name(self, name: str) -> Optional[Tuple[str, int]]:
        if not name.endswith(FILE_SUFFIX):
            return None
        # Split from the right: game ids may contain '-', save ids never do.
        game_id, sep, save_part = name[: -len(FILE_SUFFIX)].rpartition("-")
        if not sep or not (save_part.isascii() and save_part.isdigit()) or not self.recognizer(game_id):
            return None
        return game_id, int(save_part)

    def check_game_id(self, game_id: str) -> None:
        if not self.recognizer(game_id):
            raise InvalidArgument(f"invalid game id: {game_id!r}")
