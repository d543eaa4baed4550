"""Succubus Realm — data maintenance launcher.

Runs the startup sequence (create likes file, integrity check) against a data
directory, plus a few operator actions.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from succubus_realm.app import Realm, create_realm
from succubus_realm.config import configure_logging, get_settings
from succubus_realm.storage import like_statistics


async def run(realm: Realm, args: argparse.Namespace) -> int:
    if args.demo:
        from succubus_realm.demo import create_demo_data
        if not await create_demo_data(realm):
            print("Demo data could not be written", file=sys.stderr)
            return 1

    if args.restore_backup:
        if not await realm.likes.restore_backup():
            print("No usable likes backup to restore", file=sys.stderr)
            return 1
        print(f"Restored {realm.settings.likes_path} from backup")

    ok = await realm.startup()

    if args.reconcile:
        report = realm.reconciler.last_report
        print(report.model_dump_json(indent=2) if report else "{}")

    if args.stats:
        likes = await realm.likes.get_all()
        ranking = await realm.characters.get_ranking(args.top)
        print(json.dumps({
            "likes": likes,
            "statistics": like_statistics(likes).model_dump(),
            "ranking": [
                {"id": c["id"], "name": c.get("name"), "likeCount": c["likeCount"]}
                for c in ranking
            ],
        }, ensure_ascii=False, indent=2))

    if not (args.reconcile or args.stats):
        for name, present in (await realm.file_status()).items():
            print(f"{name}: {'present' if present else 'missing'}")

    return 0 if ok else 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Succubus Realm data launcher")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Data storage directory (default: DATA_DIR or ./data)")
    parser.add_argument("--demo", action="store_true",
                        help="Write demo characters and reset like counters")
    parser.add_argument("--reconcile", action="store_true",
                        help="Print the integrity check report")
    parser.add_argument("--stats", action="store_true",
                        help="Print like counts, statistics and the popularity ranking")
    parser.add_argument("--top", type=int, default=None,
                        help="Limit the ranking printed by --stats")
    parser.add_argument("--restore-backup", action="store_true",
                        help="Replace the likes file with its backup before starting")
    args = parser.parse_args(argv)
    if args.top is not None and args.top < 1:
        parser.error("--top must be at least 1")

    configure_logging(get_settings().log_level)
    realm = create_realm(args.data_dir)
    return asyncio.run(run(realm, args))


if __name__ == "__main__":
    sys.exit(main())
