from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, List, Protocol, Sequence, Set, Union

from .codec import SerializedGame, validate_game
from .errors import InvalidArgument, UnsupportedOperation
from .history import HistoryStore
from .ids import GameIdRecognizer, is_game_id
from .ledger import ParticipantEntry, ParticipantLedger
from .paths import HISTORY_DIR_NAME, GamePaths
from .snapshots import SnapshotStore

if TYPE_CHECKING:
    from .config import StoreConfig

logger = logging.getLogger(__name__)


class Capability(enum.Enum):
    """Operations a backend may or may not implement for real."""

    SAVE = "save"
    HISTORY = "history"
    RESTORE = "restore"
    ROLLBACK = "rollback"
    PARTICIPANT_LOOKUP = "participant_lookup"
    GAME_RESULTS = "game_results"
    CLEAN_GAME = "clean_game"
    PURGE_UNFINISHED = "purge_unfinished"
    STORE_PARTICIPANTS = "store_participants"
    RESTORE_REFERENCE = "restore_reference"


class SavableGame(Protocol):
    """What the engine hands to ``save_game``."""

    id: str
    last_save_id: int

    def serialize(self) -> SerializedGame: ...


class GameDatabase(ABC):
    """Storage contract shared by every game persistence backend.

    Backends advertise what they actually do through ``capabilities``. Methods
    outside that set are still callable: they are either no-ops or raise
    UnsupportedOperation, as documented per backend.
    """

    capabilities: FrozenSet[Capability] = frozenset()

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    @abstractmethod
    def initialize(self) -> None: ...

    @abstractmethod
    def save_game(self, game: SavableGame) -> int: ...

    @abstractmethod
    def save_serialized_game(self, game: SerializedGame) -> None: ...

    @abstractmethod
    def get_game(self, game_id: str) -> SerializedGame: ...

    @abstractmethod
    def get_game_version(self, game_id: str, save_id: int) -> SerializedGame: ...

    def load_cloneable_game(self, game_id: str) -> SerializedGame:
        """The first save of a game, used as the template for clones."""
        return self.get_game_version(game_id, 0)

    @abstractmethod
    def get_game_ids(self) -> Set[str]: ...

    @abstractmethod
    def get_save_ids(self, game_id: str) -> List[int]: ...

    @abstractmethod
    def get_participants(self) -> List[ParticipantEntry]: ...

    @abstractmethod
    def get_game_id(self, participant_id: str) -> str: ...

    @abstractmethod
    def get_player_count(self, game_id: str) -> int: ...

    @abstractmethod
    def restore_game(self, game_id: str, save_id: int) -> SerializedGame: ...

    @abstractmethod
    def restore_reference_game(self, game_id: str) -> Any: ...

    @abstractmethod
    def delete_game_nbr_saves(self, game_id: str, rollback_count: int) -> List[int]: ...

    @abstractmethod
    def save_game_results(
        self,
        game_id: str,
        players: int,
        generations: int,
        game_options: Dict[str, Any],
        scores: Sequence[Dict[str, Any]],
    ) -> None: ...

    @abstractmethod
    def clean_game(self, game_id: str) -> None: ...

    @abstractmethod
    def purge_unfinished_games(self) -> None: ...

    @abstractmethod
    def store_participants(self, entry: ParticipantEntry) -> None: ...

    @abstractmethod
    def stats(self) -> Dict[str, Union[str, int]]: ...


class LocalFilesystemDatabase(GameDatabase):
    """Game persistence on the local disk.

    Every save overwrites ``{db_dir}/{game_id}.json`` and adds
    ``{db_dir}/history/{game_id}-{save_id:05d}.json``. Single writer only:
    nothing here locks, and the two writes of a save are not atomic together.
    """

    capabilities = frozenset(
        {
            Capability.SAVE,
            Capability.HISTORY,
            Capability.RESTORE,
            Capability.ROLLBACK,
            Capability.PARTICIPANT_LOOKUP,
        }
    )

    def __init__(
        self,
        db_dir: Union[str, Path],
        history_dir_name: str = HISTORY_DIR_NAME,
        recognizer: GameIdRecognizer = is_game_id,
    ) -> None:
        self.paths = GamePaths(Path(db_dir), history_dir_name=history_dir_name, recognizer=recognizer)
        self.snapshots = SnapshotStore(self.paths)
        self.history = HistoryStore(self.paths)
        self.ledger = ParticipantLedger(self.snapshots, self.history)

    @classmethod
    def from_config(cls, config: "StoreConfig") -> "LocalFilesystemDatabase":
        return cls(config.db_dir, history_dir_name=config.history_dir_name)

    @property
    def db_dir(self) -> Path:
        return self.paths.root

    @property
    def history_dir(self) -> Path:
        return self.paths.history_dir

    def initialize(self) -> None:
        logger.info("Starting local database at %s", self.db_dir)
        self.paths.ensure_dirs()

    # Saving

    def save_game(self, game: SavableGame) -> int:
        """Persist the engine's game at its current save id and advance the counter.

        Returns the save id the engine should use for its next save.
        """
        logger.info("saving %s at position %s", game.id, game.last_save_id)
        serialized = game.serialize()
        if serialized.get("id") != game.id or serialized.get("lastSaveId") != game.last_save_id:
            raise InvalidArgument(
                f"serialized game {serialized.get('id')}@{serialized.get('lastSaveId')} "
                f"does not match {game.id}@{game.last_save_id}"
            )
        self.save_serialized_game(serialized)
        game.last_save_id += 1
        return game.last_save_id

    def save_serialized_game(self, game: SerializedGame) -> None:
        validate_game(game)
        game_id = game["id"]
        save_id = game["lastSaveId"]
        self.paths.history_path(game_id, save_id)  # validates both ids before any write
        self.snapshots.put(game)
        self.history.append(game_id, save_id, game)
        self.ledger.record(game)

    # Loading

    def get_game(self, game_id: str) -> SerializedGame:
        logger.info("Loading %s", game_id)
        return self.snapshots.get(game_id)

    def get_game_version(self, game_id: str, save_id: int) -> SerializedGame:
        logger.info("Loading %s at %s", game_id, save_id)
        return self.history.get(game_id, save_id)

    def get_game_ids(self) -> Set[str]:
        return self.snapshots.list_game_ids()

    def get_save_ids(self, game_id: str) -> List[int]:
        return self.history.list_save_ids(game_id)

    # Participants

    def get_participants(self) -> List[ParticipantEntry]:
        return self.ledger.get_participants()

    def get_game_id(self, participant_id: str) -> str:
        return self.ledger.get_game_id(participant_id)

    def get_player_count(self, game_id: str) -> int:
        return self.ledger.get_player_count(game_id)

    # Restore and rollback

    def restore_game(self, game_id: str, save_id: int) -> SerializedGame:
        """Overwrite the current snapshot with history entry ``save_id``.

        The previously current state is not backed up beyond what history
        already holds.
        """
        self.history.get(game_id, save_id)  # a corrupt entry must not replace the snapshot
        source = self.history.path_for(game_id, save_id)
        logger.info("Restoring %s to save_id %s", game_id, save_id)
        self.snapshots.copy_from(source, game_id)
        restored = self.snapshots.get(game_id)
        self.ledger.record(restored)
        return restored

    def restore_reference_game(self, game_id: str) -> Any:
        raise UnsupportedOperation(f"restore_reference_game is not supported by {type(self).__name__}")

    def delete_game_nbr_saves(self, game_id: str, rollback_count: int) -> List[int]:
        """Delete the newest ``rollback_count`` history entries of a game.

        Non-positive counts are logged and ignored. The current snapshot is
        left as is. Returns the deleted save ids.
        """
        if rollback_count <= 0:
            logger.error("invalid rollback count for %s: %s", game_id, rollback_count)
            return []
        save_ids = self.history.list_save_ids(game_id)
        to_delete = save_ids[-rollback_count:]
        for save_id in to_delete:
            self.history.delete_save(game_id, save_id)
        logger.info("Deleted saves %s of %s", to_delete, game_id)
        return to_delete

    # Declared by the contract, no-ops for this backend.

    def save_game_results(
        self,
        game_id: str,
        players: int,
        generations: int,
        game_options: Dict[str, Any],
        scores: Sequence[Dict[str, Any]],
    ) -> None:
        """No-op: results are not recorded on the local filesystem."""

    def clean_game(self, game_id: str) -> None:
        """No-op: finished games keep their full history on disk."""

    def purge_unfinished_games(self) -> None:
        """No-op: this backend never purges games."""

    def store_participants(self, entry: ParticipantEntry) -> None:
        """No-op: participants are derived from the snapshots themselves."""

    def stats(self) -> Dict[str, Union[str, int]]:
        return {
            "type": "Local Filesystem",
            "path": str(self.db_dir),
            "history_path": str(self.history_dir),
            "games": len(self.get_game_ids()),
        }

