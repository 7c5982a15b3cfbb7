"""Recognizers for the identifiers handed to the store by the game engine.

Game ids start with ``g``, player ids with ``p`` and spectator ids with ``s``.
The store only needs to tell game ids apart from other file names; the
participant recognizers exist for tooling that displays ledger entries.
"""
from __future__ import annotations

import re
from typing import Any, Callable

GameIdRecognizer = Callable[[Any], bool]

_ID_BODY = r"[A-Za-z0-9_-]+"

GAME_ID_PATTERN = re.compile(rf"^g{_ID_BODY}$")
PLAYER_ID_PATTERN = re.compile(rf"^p{_ID_BODY}$")
SPECTATOR_ID_PATTERN = re.compile(rf"^s{_ID_BODY}$")


def is_game_id(value: Any) -> bool:
    return isinstance(value, str) and GAME_ID_PATTERN.match(value) is not None


def is_player_id(value: Any) -> bool:
    return isinstance(value, str) and PLAYER_ID_PATTERN.match(value) is not None


def is_spectator_id(value: Any) -> bool:
    return isinstance(value, str) and SPECTATOR_ID_PATTERN.match(value) is not None


def participant_kind(value: Any) -> str:
    """Return ``"player"``, ``"spectator"`` or ``"unknown"`` for display."""
    if is_player_id(value):
        return "player"
    if is_spectator_id(value):
        return "spectator"
    return "unknown"
