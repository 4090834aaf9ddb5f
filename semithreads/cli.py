"""Command-line front end.

Each mutating command loads the actor's own slice from the store,
applies one session operation, publishes the full slice and prints the
resulting identifier. ``show`` prints the materialized view.

Usage::

    semithreads --actor alice thread "Hello" "Hi all" --tag intro
    semithreads --actor bob reply alice 0 "Welcome!"
    semithreads --actor carol react alice 0 like
    semithreads show
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from semithreads.config import Settings
from semithreads.errors import ThreadsError
from semithreads.logging_config import configure_from_env
from semithreads.replica import load_slice, load_view, publish
from semithreads.report import print_report
from semithreads.session import ActorSession
from semithreads.substrate import DirectorySubstrate

logger = logging.getLogger(__name__)

MUTATING = {"thread", "reply", "edit", "redact", "react", "tag"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="semithreads",
        description="Leaderless threaded discussions over a shared directory",
    )
    parser.add_argument("--store", type=Path, help="Store directory (env ST_STORE)")
    parser.add_argument("--actor", help="Actor to write as (env ST_ACTOR)")
    parser.add_argument("--device", type=int, help="Device id 0..65535 (env ST_DEVICE)")
    commands = parser.add_subparsers(dest="command", required=True)

    p = commands.add_parser("thread", help="Start a new thread")
    p.add_argument("title")
    p.add_argument("body")
    p.add_argument("--tag", action="append", default=[], dest="tags")

    p = commands.add_parser("reply", help="Reply to a message")
    p.add_argument("parent_actor")
    p.add_argument("parent_id", type=int)
    p.add_argument("body")

    p = commands.add_parser("edit", help="Add a new version of one of your messages")
    p.add_argument("local_id", type=int)
    p.add_argument("body")

    p = commands.add_parser("redact", help="Tombstone a version of one of your messages")
    p.add_argument("local_id", type=int)
    p.add_argument("version", type=int)

    p = commands.add_parser("react", help="Set or clear a reaction")
    p.add_argument("target_actor")
    p.add_argument("target_id", type=int)
    p.add_argument("reaction")
    p.add_argument("--off", action="store_true", help="Withdraw the reaction")

    p = commands.add_parser("tag", help="Vote tags up or down")
    p.add_argument("target_actor")
    p.add_argument("target_id", type=int)
    p.add_argument("--add", action="append", default=[])
    p.add_argument("--remove", action="append", default=[])

    p = commands.add_parser("show", help="Print every thread")
    p.add_argument("--no-cache", action="store_true", help="Always rebuild the view")

    return parser


def _mutate(args: argparse.Namespace, settings: Settings, substrate: DirectorySubstrate) -> str:
    slice_ = load_slice(substrate, settings.actor_id)
    session = ActorSession(settings.actor_id, settings.device_id, slice_)

    if args.command == "thread":
        actor, local_id = session.new_thread(args.title, args.body, args.tags)
        result = f"{actor} {local_id}"
    elif args.command == "reply":
        actor, local_id = session.reply((args.parent_actor, args.parent_id), args.body)
        result = f"{actor} {local_id}"
    elif args.command == "edit":
        result = str(session.edit(args.local_id, args.body))
    elif args.command == "redact":
        session.redact(args.local_id, args.version)
        result = "redacted"
    elif args.command == "react":
        session.react((args.target_actor, args.target_id), args.reaction, not args.off)
        result = "ok"
    else:
        session.adjust_tags((args.target_actor, args.target_id), args.add, args.remove)
        result = "ok"

    publish(substrate, settings.actor_id, slice_)
    return result


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_from_env()

    try:
        settings = Settings.from_env().override(
            store_path=args.store, actor_id=args.actor, device_id=args.device
        )
    except ValueError as exc:
        parser.error(str(exc))

    if args.command in MUTATING and not settings.actor_id:
        parser.error(f"{args.command} needs an actor (--actor or ST_ACTOR)")

    try:
        substrate = DirectorySubstrate(settings.store_path)
        if args.command == "show":
            print_report(load_view(substrate, use_cache=not args.no_cache))
        else:
            print(_mutate(args, settings, substrate))
    except ThreadsError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
