from __future__ import annotations

from pathlib import Path
from typing import Optional


class PersistenceError(Exception):
    """Base exception for game storage errors."""


class GameNotFound(PersistenceError):
    """Raised when a snapshot, history entry or participant cannot be found."""

    def __init__(self, message: str, game_id: Optional[str] = None, save_id: Optional[int] = None) -> None:
        super().__init__(message)
        self.game_id = game_id
        self.save_id = save_id


class CorruptGameData(PersistenceError):
    """Raised when a stored file exists but does not hold a valid serialized game."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class UnsupportedOperation(PersistenceError):
    """Raised by backends for operations they declare but do not implement."""


class InvalidArgument(PersistenceError):
    """Raised when an identifier or save id is rejected before touching disk."""
