from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .codec import SerializedGame, participant_ids
from .errors import GameNotFound
from .history import HistoryStore
from .snapshots import SnapshotStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParticipantEntry:
    game_id: str
    participant_ids: Tuple[str, ...]


class ParticipantLedger:
    """Reverse index from player/spectator ids to the game that owns them.

    The index is built from the current snapshots with one directory scan on
    first use, then kept current through ``record`` as games are saved or
    restored. A participant belongs to at most one game; when a newer save
    claims a participant owned elsewhere, ownership moves to the newer game.
    """

    def __init__(self, snapshots: SnapshotStore, history: HistoryStore) -> None:
        self.snapshots = snapshots
        self.history = history
        self._entries: Optional[Dict[str, List[str]]] = None
        self._owners: Dict[str, str] = {}

    def refresh(self) -> None:
        """Drop the in-memory index and rebuild it from the snapshot files.

        Snapshots are indexed oldest first, so a participant claimed by several
        games ends up with the most recently written one, as with live saves.
        If any snapshot cannot be read, no index is kept and the next lookup
        scans again.
        """
        self._entries = None
        entries: Dict[str, List[str]] = {}
        owners: Dict[str, str] = {}
        game_ids = sorted(self.snapshots.list_game_ids(), key=lambda gid: (self.snapshots.modified_ns(gid), gid))
        for game_id in game_ids:
            _index_into(entries, owners, self.snapshots.get(game_id))
        self._entries, self._owners = entries, owners
        logger.debug("Participant ledger rebuilt from %d games", len(entries))

    def record(self, game: SerializedGame) -> None:
        if self._entries is None:
            # The next lookup scans the disk, which already includes this game.
            return
        self._index(game)

    def get_participants(self) -> List[ParticipantEntry]:
        entries = self._loaded()
        return [ParticipantEntry(game_id, tuple(ids)) for game_id, ids in sorted(entries.items())]

    def get_game_id(self, participant_id: str) -> str:
        self._loaded()
        try:
            return self._owners[participant_id]
        except KeyError:
            raise GameNotFound(f"participant id {participant_id} not found") from None

    def get_player_count(self, game_id: str) -> int:
        """Number of players seated in the game's first save."""
        if not (self.snapshots.exists(game_id) and self.history.exists(game_id, 0)):
            raise GameNotFound(f"{game_id} not found", game_id=game_id, save_id=0)
        return len(self.history.get(game_id, 0)["players"])

    def _loaded(self) -> Dict[str, List[str]]:
        if self._entries is None:
            self.refresh()
        assert self._entries is not None
        return self._entries

    def _index(self, game: SerializedGame) -> None:
        assert self._entries is not None
        _index_into(self._entries, self._owners, game)


def _index_into(entries: Dict[str, List[str]], owners: Dict[str, str], game: SerializedGame) -> None:
    game_id = game["id"]
    for pid in entries.pop(game_id, []):
        if owners.get(pid) == game_id:
            del owners[pid]

    ids = participant_ids(game)
    for pid in ids:
        previous = owners.get(pid)
        if previous is not None and previous != game_id:
            logger.warning("participant %s moved from game %s to %s", pid, previous, game_id)
            entries[previous] = [p for p in entries[previous] if p != pid]
        owners[pid] = game_id
    entries[game_id] = ids
