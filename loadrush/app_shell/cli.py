import argparse
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from loadrush.adapters.sqlite.handles import StoreHandle, db_path_for, init_store
from loadrush.components.archival import PurgeInput, SweepInput, run_purge, run_sweep
from loadrush.rules.loader import load_rules
from loadrush.rules.models import Rules
from loadrush.services.event_log import EventLog, init_event_log

logger = logging.getLogger("cli")

DEFAULT_RULES_PATH = "rules.yaml"
DEFAULT_DATA_DIR = "./data"


@dataclass(frozen=True)
class CliContext:
    rules: Rules
    store: StoreHandle
    event_log: EventLog


def get_context() -> CliContext:
    rules_path = Path(os.environ.get("LOADRUSH_RULES_PATH", DEFAULT_RULES_PATH))
    if not rules_path.exists():
        logger.error("Rules file %s not found.", rules_path)
        sys.exit(1)

    rules = load_rules(rules_path)
    store = init_store(db_path_for(os.environ.get("LOADRUSH_DATA_DIR", DEFAULT_DATA_DIR)))
    event_log = init_event_log(
        store.kv,
        max_entries=rules.event_log.max_entries,
        storage_key=rules.event_log.storage_key,
    )
    return CliContext(rules=rules, store=store, event_log=event_log)


def handle_archive(ctx: CliContext, args: argparse.Namespace) -> None:
    out = run_sweep(
        SweepInput(limit=args.limit),
        repo=ctx.store.loads,
        rules=ctx.rules,
        event_log=ctx.event_log,
    )
    print(f"Scanned {out.report.scanned} loads, archived {out.report.archived}.")
    if out.errors:
        print(f"{len(out.errors)} loads could not be archived; see logs.")


def handle_purge(ctx: CliContext, args: argparse.Namespace) -> None:
    out = run_purge(
        PurgeInput(older_than_days=args.days, archived_reason=args.reason, limit=args.limit),
        repo=ctx.store.loads,
        rules=ctx.rules,
        event_log=ctx.event_log,
    )
    print(f"Scanned {out.report.scanned} archived loads, purged {out.report.purged}.")
    if out.errors:
        print(f"{len(out.errors)} loads could not be purged; see logs.")


def handle_logs(ctx: CliContext, args: argparse.Namespace) -> None:
    if args.clear:
        ctx.event_log.clear()
        print("Event log cleared.")
        return

    for event in ctx.event_log.get_buffer():
        print(f"{event.ts} {event.level:<5} {event.type:<6} {event.name} {event.data or ''}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="LoadRush maintenance CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # archive
    archive_parser = subparsers.add_parser("archive", help="Archive finished loads")
    archive_parser.add_argument("--limit", type=int, help="Max loads to scan")

    # purge
    purge_parser = subparsers.add_parser("purge", help="Delete long-archived loads")
    purge_parser.add_argument("--days", type=int, help="Archived more than N days ago")
    purge_parser.add_argument("--reason", help="Only loads archived for this reason")
    purge_parser.add_argument("--limit", type=int, help="Max archived loads to scan")

    # logs
    logs_parser = subparsers.add_parser("logs", help="Show the event log")
    logs_parser.add_argument("--clear", action="store_true", help="Clear the event log")

    return parser


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)

    if getattr(args, "days", None) is not None and args.days < 0:
        logger.error("--days must be non-negative.")
        sys.exit(2)

    ctx = get_context()

    if args.command == "archive":
        handle_archive(ctx, args)
    elif args.command == "purge":
        handle_purge(ctx, args)
    elif args.command == "logs":
        handle_logs(ctx, args)


if __name__ == "__main__":
    main()
