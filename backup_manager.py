#!/usr/bin/env python3
"""Manual backup management script."""

import argparse
import json
import sys

from config import load_config
from database.connection import Database
from database.migrations import run_migrations
from services.backup_service import BackupService


def _service(args) -> BackupService:
    db = Database(args.db_path)
    run_migrations(db, admin_password=load_config().admin_password)
    return BackupService(db, history_size=args.history_size)


def create_snapshot(args):
    """Store a snapshot in the rotating history."""
    backup_id = _service(args).snapshot("manual")
    if backup_id is None:
        print("Snapshot failed!")
        return 1
    print(f"Snapshot #{backup_id} created")
    return 0


def list_snapshots(args):
    """List the snapshot history, newest first."""
    history = _service(args).list_history(args.limit)
    if not history:
        print("No snapshots stored")
        return 0

    print(f"{len(history)} snapshot(s):")
    for entry in history:
        print(f"   #{entry['id']} - {entry['created_at']} - {entry['reason']}")
    return 0


def show_snapshot(args):
    """Print one snapshot as JSON."""
    snapshot = _service(args).get_snapshot(args.id)
    if snapshot is None:
        print(f"Snapshot #{args.id} not found")
        return 1
    print(json.dumps(snapshot, ensure_ascii=False, indent=2))
    return 0


def export_full(args):
    """Write a full export document to a file."""
    service = _service(args)
    output = args.output or service.export_filename()
    document = service.export_full()
    with open(output, "w", encoding="utf-8") as f:
        json.dump(document, f, ensure_ascii=False, indent=2, default=str)

    stats = document["stats"]
    print(f"Exported {stats['totalOrders']} order(s) and {stats['soldNumbers']} sold number(s) to {output}")
    return 0


def main(argv=None):
    config = load_config()
    parser = argparse.ArgumentParser(description="Backup Management Tool")
    parser.add_argument("--db-path", default=config.database_path, help="Database path")
    parser.add_argument("--history-size", type=int, default=config.backup_history_size,
                        help="Snapshots kept in the history")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    snapshot_parser = subparsers.add_parser("snapshot", help="Store a snapshot now")
    snapshot_parser.set_defaults(func=create_snapshot)

    list_parser = subparsers.add_parser("list", help="List stored snapshots")
    list_parser.add_argument("--limit", type=int, default=config.backup_history_size)
    list_parser.set_defaults(func=list_snapshots)

    show_parser = subparsers.add_parser("show", help="Print a stored snapshot")
    show_parser.add_argument("id", type=int)
    show_parser.set_defaults(func=show_snapshot)

    export_parser = subparsers.add_parser("export", help="Export the full dataset to a JSON file")
    export_parser.add_argument("output", nargs="?", help="Output file (default: timestamped name)")
    export_parser.set_defaults(func=export_full)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except Exception as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
