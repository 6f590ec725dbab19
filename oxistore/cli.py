"""Command line access to an OxiStorage.

    oxistore --backend single_file --data-dir data set settings '{"theme": "dark"}'
    oxistore --backend single_file --data-dir data get settings.theme
    oxistore --backend single_file --data-dir data dump
    oxistore serve --port 8000

Values given to `set` are parsed as JSON; anything that is not valid JSON
is stored as a plain string. Results are printed as JSON.
"""
from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from typing import Any, Iterable, Optional

from oxistore.config import load_config
from oxistore.errors import OxiStorageError
from oxistore.logging_config import configure_logging
from oxistore.storage import BACKENDS
from oxistore.storage.serializer import SERIALIZERS
from oxistore.store import OxiStorage, open_storage


def get_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="oxistore", description="Read and write nested values in an OxiStore.")
    p.add_argument("--config", type=Path, help="YAML storage configuration file")
    p.add_argument("--backend", choices=BACKENDS, help="Storage backend")
    p.add_argument("--serializer", choices=sorted(SERIALIZERS) + ["encrypted"], help="Record serializer")
    p.add_argument("--data-dir", help="Directory holding the stored records")
    p.add_argument("--password", help="Password for the encrypted serializer")
    p.add_argument("--log-level", help="Logging level, e.g. INFO or DEBUG")

    sub = p.add_subparsers(dest="command", required=True)
    g = sub.add_parser("get", help="Print the value stored at a path")
    g.add_argument("path")
    g.add_argument("--shallow", action="store_true", help="Print the raw record instead of the subtree")
    s = sub.add_parser("set", help="Store a value at a path")
    s.add_argument("path")
    s.add_argument("value")
    d = sub.add_parser("delete", help="Delete a path and everything below it")
    d.add_argument("path")
    sub.add_parser("dump", help="Print the whole stored tree")
    srv = sub.add_parser("serve", help="Run the HTTP API")
    srv.add_argument("--host", default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    return p


def parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _emit(value: Any) -> None:
    print(json.dumps(value, indent=2, ensure_ascii=False))


def run(args: argparse.Namespace, store: OxiStorage) -> int:
    if args.command == "get":
        _emit(store.record(args.path) if args.shallow else store.materialize(args.path))
    elif args.command == "set":
        store.set(args.path, parse_value(args.value))
    elif args.command == "delete":
        store.delete(args.path)
    elif args.command == "dump":
        _emit(store.materialize())
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = get_parser().parse_args(list(argv) if argv is not None else None)
    try:
        config = load_config(
            args.config,
            backend=args.backend,
            serializer=args.serializer,
            data_dir=args.data_dir,
            password=args.password,
            log_level=args.log_level,
        )
        configure_logging(config.log_level)

        if args.command == "serve":
            import uvicorn
            from oxistore.main import create_app
            uvicorn.run(create_app(config), host=args.host, port=args.port)
            return 0

        return run(args, open_storage(config))
    # ValueError covers bad config files and missing encryption secrets
    except (OxiStorageError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
