"""Command line inspection of a file-backed localstore substrate.

    localstore --data-file data/localstore.json list todos
    localstore show todos 3f2a91c4-...
    localstore clear todos

Output is YAML so nested payloads stay readable.
"""
from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import Iterable, Optional

import yaml

from localstore_lib.config import load_config
from localstore_lib.errors import CorruptRecordError
from localstore_lib.logging_config import configure_logging
from localstore_lib.storage import CollectionStore, FileSubstrate


def get_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="localstore", description="Inspect collections in a localstore file")
    p.add_argument("--config", help="Path to the YAML config file")
    p.add_argument("--data-file", help="Substrate JSON file (overrides the config)")
    sub = p.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="Print every record of a collection")
    p_list.add_argument("collection")

    p_show = sub.add_parser("show", help="Print one record")
    p_show.add_argument("collection")
    p_show.add_argument("id")

    p_clear = sub.add_parser("clear", help="Remove a collection and its records")
    p_clear.add_argument("collection")
    return p


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    if argv is not None:
        argv = list(argv)
    return get_parser().parse_args(argv)


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv)
    config_path = Path(args.config) if args.config else None
    configure_logging(config_path)
    cfg = load_config(config_path)

    substrate = FileSubstrate(args.data_file or cfg.data_file, quota=cfg.quota)
    store = CollectionStore(args.collection, substrate)

    if args.command == "list":
        print(yaml.safe_dump(store.find_all(), sort_keys=False), end="")
        return 0

    if args.command == "show":
        try:
            data = store.load(args.id)
        except CorruptRecordError as e:
            print(str(e), file=sys.stderr)
            return 1
        if data is None:
            print(f"No record {args.id!r} in {args.collection!r}", file=sys.stderr)
            return 1
        print(yaml.safe_dump(data, sort_keys=False), end="")
        return 0

    count = len(store.records)
    store.clear(sweep_orphans=True)
    print(f"Cleared {count} records from {args.collection!r}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
