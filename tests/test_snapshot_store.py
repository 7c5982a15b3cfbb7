from __future__ import annotations

import json
from pathlib import Path

import pytest

from turnstore.errors import CorruptGameData, GameNotFound
from turnstore.paths import GamePaths
from turnstore.snapshots import SnapshotStore

from conftest import make_game


@pytest.fixture()
def store(tmp_path: Path) -> SnapshotStore:
    paths = GamePaths(tmp_path / "db")
    paths.ensure_dirs()
    return SnapshotStore(paths)


def test_put_overwrites_current_state(store: SnapshotStore):
    store.put(make_game("g1", 0))
    store.put(make_game("g1", 1))
    assert store.get("g1")["lastSaveId"] == 1
    # Overwritten, not appended
    raw = json.loads(store.paths.snapshot_path("g1").read_text(encoding="utf-8"))
    assert raw["lastSaveId"] == 1


def test_get_missing_raises_not_found(store: SnapshotStore):
    with pytest.raises(GameNotFound) as exc:
        store.get("gmissing")
    assert exc.value.game_id == "gmissing"


def test_get_corrupt_raises(store: SnapshotStore):
    store.paths.snapshot_path("g1").write_text("{ this is not valid json ", encoding="utf-8")
    with pytest.raises(CorruptGameData):
        store.get("g1")


def test_exists(store: SnapshotStore):
    assert not store.exists("g1")
    store.put(make_game("g1"))
    assert store.exists("g1")


def test_list_game_ids_skips_unrecognized(store: SnapshotStore):
    store.put(make_game("g1"))
    store.put(make_game("g2"))
    root = store.paths.root
    (root / "notes.txt").write_text("hello", encoding="utf-8")
    (root / "p1.json").write_text("{}", encoding="utf-8")
    (root / "g3.json.tmp").write_text("{}", encoding="utf-8")
    (root / "gdir.json").mkdir()
    assert store.list_game_ids() == {"g1", "g2"}


def test_list_game_ids_without_root(tmp_path: Path):
    store = SnapshotStore(GamePaths(tmp_path / "absent"))
    assert store.list_game_ids() == set()


def test_put_leaves_no_temp_files(store: SnapshotStore):
    store.put(make_game("g1"))
    assert sorted(p.name for p in store.paths.root.iterdir() if p.is_file()) == ["g1.json"]
