"""
turnstore: versioned file-backed persistence for turn-based games.

This package provides:
- A snapshot store holding the current state of each game
- An append-only history of every save, for rollback and replay
- A participant ledger mapping player/spectator ids to their game
- LocalFilesystemDatabase composing the above behind the GameDatabase contract

The game engine owns game rules and the save counter; this package only
stores what it is given.
"""
from .codec import SerializedGame, decode_game, encode_game
from .config import StoreConfig
from .database import Capability, GameDatabase, LocalFilesystemDatabase, SavableGame
from .errors import (
    CorruptGameData,
    GameNotFound,
    InvalidArgument,
    PersistenceError,
    UnsupportedOperation,
)
from .history import HistoryStore
from .ids import is_game_id, is_player_id, is_spectator_id
from .ledger import ParticipantEntry, ParticipantLedger
from .paths import GamePaths
from .snapshots import SnapshotStore

__all__ = [
    "SerializedGame",
    "decode_game",
    "encode_game",
    "StoreConfig",
    "Capability",
    "GameDatabase",
    "LocalFilesystemDatabase",
    "SavableGame",
    "CorruptGameData",
    "GameNotFound",
    "InvalidArgument",
    "PersistenceError",
    "UnsupportedOperation",
    "HistoryStore",
    "is_game_id",
    "is_player_id",
    "is_spectator_id",
    "ParticipantEntry",
    "ParticipantLedger",
    "GamePaths",
    "SnapshotStore",
]
