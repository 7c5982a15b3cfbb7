from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import StoreConfig
from .database import LocalFilesystemDatabase
from .errors import PersistenceError
from .ids import participant_kind
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def _cmd_stats(db: LocalFilesystemDatabase, args: argparse.Namespace) -> int:
    print(json.dumps(db.stats(), indent=2))
    return 0


def _cmd_list(db: LocalFilesystemDatabase, args: argparse.Namespace) -> int:
    for game_id in sorted(db.get_game_ids()):
        print(game_id)
    return 0


def _cmd_saves(db: LocalFilesystemDatabase, args: argparse.Namespace) -> int:
    for save_id in db.get_save_ids(args.game_id):
        print(save_id)
    return 0


def _cmd_show(db: LocalFilesystemDatabase, args: argparse.Namespace) -> int:
    if args.save_id is None:
        game = db.get_game(args.game_id)
    else:
        game = db.get_game_version(args.game_id, args.save_id)
    print(json.dumps(game, indent=2, ensure_ascii=False))
    return 0


def _cmd_participant(db: LocalFilesystemDatabase, args: argparse.Namespace) -> int:
    game_id = db.get_game_id(args.participant_id)
    print(f"{participant_kind(args.participant_id)} {args.participant_id} -> {game_id}")
    return 0


def _cmd_players(db: LocalFilesystemDatabase, args: argparse.Namespace) -> int:
    print(db.get_player_count(args.game_id))
    return 0


def _cmd_restore(db: LocalFilesystemDatabase, args: argparse.Namespace) -> int:
    game = db.restore_game(args.game_id, args.save_id)
    print(f"Restored {args.game_id} to save_id {game.get('lastSaveId', args.save_id)}")
    return 0


def _cmd_rollback(db: LocalFilesystemDatabase, args: argparse.Namespace) -> int:
    deleted = db.delete_game_nbr_saves(args.game_id, args.count)
    print(f"Deleted {len(deleted)} save(s) of {args.game_id}: {deleted}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="turnstore", description="Inspect and repair stored turn-based games")
    p.add_argument("--db-dir", type=Path, default=None, help="Storage root (overrides config and env)")
    p.add_argument("--config", type=Path, default=None, help="Path to a YAML config file")
    p.add_argument("--debug", action="store_true", help="Enable verbose debug logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("stats", help="Show backend type and storage paths")
    s.set_defaults(func=_cmd_stats)

    s = sub.add_parser("list", help="List stored game ids")
    s.set_defaults(func=_cmd_list)

    s = sub.add_parser("saves", help="List the save ids of a game")
    s.add_argument("game_id")
    s.set_defaults(func=_cmd_saves)

    s = sub.add_parser("show", help="Print the current or a historical state of a game")
    s.add_argument("game_id")
    s.add_argument("--save-id", type=int, default=None)
    s.set_defaults(func=_cmd_show)

    s = sub.add_parser("participant", help="Find the game a player or spectator belongs to")
    s.add_argument("participant_id")
    s.set_defaults(func=_cmd_participant)

    s = sub.add_parser("players", help="Number of players a game started with")
    s.add_argument("game_id")
    s.set_defaults(func=_cmd_players)

    s = sub.add_parser("restore", help="Make a historical save the current state")
    s.add_argument("game_id")
    s.add_argument("save_id", type=int)
    s.set_defaults(func=_cmd_restore)

    s = sub.add_parser("rollback", help="Delete the newest COUNT saves of a game")
    s.add_argument("game_id")
    s.add_argument("count", type=int)
    s.set_defaults(func=_cmd_rollback)
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = StoreConfig.load(user_path=args.config)
    if args.db_dir is not None:
        config.db_dir = args.db_dir
    configure_logging(default_level=logging.DEBUG if args.debug else config.level, override_env=args.debug)

    db = LocalFilesystemDatabase.from_config(config)
    db.initialize()
    try:
        return args.func(db, args)
    except PersistenceError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
