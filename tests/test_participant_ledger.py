from __future__ import annotations

import logging
import os
import time

import pytest

from turnstore.errors import CorruptGameData, GameNotFound
from turnstore.database import LocalFilesystemDatabase
from turnstore.ledger import ParticipantEntry

from conftest import make_game


def test_participants_from_snapshots(db):
    db.save_serialized_game(make_game("g1", 0, ["p1a", "p1b"], spectator="s1"))
    db.save_serialized_game(make_game("g2", 0, ["p2a", "p2b", "p2c"]))
    assert db.get_participants() == [
        ParticipantEntry("g1", ("p1a", "p1b", "s1")),
        ParticipantEntry("g2", ("p2a", "p2b", "p2c")),
    ]


def test_get_game_id(db):
    db.save_serialized_game(make_game("g1", 0, ["p1a", "p1b"], spectator="s1"))
    db.save_serialized_game(make_game("g2", 0, ["p2a"]))
    assert db.get_game_id("p1b") == "g1"
    assert db.get_game_id("s1") == "g1"
    assert db.get_game_id("p2a") == "g2"
    with pytest.raises(GameNotFound, match="participant id p9 not found"):
        db.get_game_id("p9")


def test_index_follows_later_saves(db):
    db.save_serialized_game(make_game("g1", 0, ["p1a", "p1b"]))
    assert db.get_game_id("p1b") == "g1"
    # Spectator joins and a player is replaced in the next save
    db.save_serialized_game(make_game("g1", 1, ["p1a", "p1c"], spectator="s1"))
    assert db.get_game_id("p1c") == "g1"
    assert db.get_game_id("s1") == "g1"
    with pytest.raises(GameNotFound):
        db.get_game_id("p1b")


def test_index_matches_fresh_scan(db):
    db.save_serialized_game(make_game("g1", 0, ["p1a"]))
    db.get_participants()
    db.save_serialized_game(make_game("g2", 0, ["p2a"], spectator="s2"))
    db.save_serialized_game(make_game("g1", 1, ["p1a", "p1b"]))
    fresh = LocalFilesystemDatabase(db.db_dir)
    assert db.get_participants() == fresh.get_participants()


def test_participant_owned_by_one_game(db, caplog):
    db.save_serialized_game(make_game("g1", 0, ["p1", "p2"]))
    db.get_participants()
    with caplog.at_level(logging.WARNING, logger="turnstore.ledger"):
        db.save_serialized_game(make_game("g2", 0, ["p2", "p3"]))
    assert "participant p2 moved from game g1 to g2" in caplog.text
    assert db.get_game_id("p2") == "g2"
    assert db.get_participants() == [
        ParticipantEntry("g1", ("p1",)),
        ParticipantEntry("g2", ("p2", "p3")),
    ]


def test_refresh_picks_up_external_changes(db):
    db.save_serialized_game(make_game("g1", 0, ["p1a"]))
    assert db.get_game_id("p1a") == "g1"
    db.paths.snapshot_path("g1").unlink()
    db.ledger.refresh()
    with pytest.raises(GameNotFound):
        db.get_game_id("p1a")


def backdate(path, seconds: int = 3600) -> None:
    then = time.time_ns() - seconds * 1_000_000_000
    os.utime(path, ns=(then, then))


def test_shared_participant_owner_survives_reopen(db, caplog):
    db.save_serialized_game(make_game("gZ", 0, ["p1"]))
    backdate(db.paths.snapshot_path("gZ"))
    db.get_participants()
    with caplog.at_level(logging.WARNING, logger="turnstore.ledger"):
        db.save_serialized_game(make_game("gA", 0, ["p1", "p2"]))
    assert db.get_game_id("p1") == "gA"

    fresh = LocalFilesystemDatabase(db.db_dir)
    assert fresh.get_game_id("p1") == "gA"
    assert fresh.get_participants() == db.get_participants()


def test_corrupt_snapshot_keeps_failing_until_repaired(db):
    db.save_serialized_game(make_game("g1", 0, ["p1a"]))
    db.save_serialized_game(make_game("g2", 0, ["p2a"]))
    snapshot = db.paths.snapshot_path("g1")
    good = snapshot.read_text(encoding="utf-8")
    snapshot.write_text("garbage", encoding="utf-8")

    with pytest.raises(CorruptGameData):
        db.get_participants()
    # No partial index is left behind
    with pytest.raises(CorruptGameData):
        db.get_participants()
    with pytest.raises(CorruptGameData):
        db.get_game_id("p2a")

    snapshot.write_text(good, encoding="utf-8")
    assert db.get_game_id("p1a") == "g1"
    assert db.get_game_id("p2a") == "g2"
    assert [e.game_id for e in db.get_participants()] == ["g1", "g2"]


def test_failed_refresh_drops_stale_index(db):
    db.save_serialized_game(make_game("g1", 0, ["p1a"]))
    assert db.get_game_id("p1a") == "g1"
    db.paths.snapshot_path("g1").write_text("garbage", encoding="utf-8")
    with pytest.raises(CorruptGameData):
        db.ledger.refresh()
    with pytest.raises(CorruptGameData):
        db.get_game_id("p1a")


def test_player_count_reads_first_save(db):
    db.save_serialized_game(make_game("g1", 0, ["p1", "p2", "p3"]))
    db.save_serialized_game(make_game("g1", 1, ["p1", "p2"]))
    assert db.get_player_count("g1") == 3
    assert db.get_player_count("g1") == len(db.get_game_version("g1", 0)["players"])


def test_player_count_missing(db):
    with pytest.raises(GameNotFound):
        db.get_player_count("g1")
    db.save_serialized_game(make_game("g1", 1))
    # Only save 1 exists: no first save to count from
    with pytest.raises(GameNotFound):
        db.get_player_count("g1")
