from __future__ import annotations

import argparse
import json
import sys
from typing import Optional

from packmanifest import MissingEntryError, PackType, get_packer
from packmanifest.logging_utils import maybe_enable_json_logging


def _type_arg(args: argparse.Namespace) -> PackType:
    return PackType.coerce(args.type or "javascript")


def cmd_lookup(args: argparse.Namespace) -> int:
    manifest = get_packer().manifest
    try:
        print(manifest.lookup_or_fail(args.name, _type_arg(args)))
    except MissingEntryError as e:
        print(e, file=sys.stderr)
        return 1
    return 0


def cmd_entrypoint(args: argparse.Namespace) -> int:
    manifest = get_packer().manifest
    try:
        found = manifest.lookup_entrypoint_or_fail(args.name, _type_arg(args))
    except MissingEntryError as e:
        print(e, file=sys.stderr)
        return 1
    for path in found if isinstance(found, list) else [found]:
        print(path)
    return 0


def cmd_compile(_: argparse.Namespace) -> int:
    compiler = get_packer().compiler
    ok = compiler.compile()
    print("Compiled" if ok else "Compilation failed", file=sys.stdout if ok else sys.stderr)
    return 0 if ok else 1


def cmd_show_manifest(_: argparse.Namespace) -> int:
    manifest = get_packer().manifest
    print(f"# {manifest.path}")
    print(json.dumps(manifest.reload(), ensure_ascii=False, indent=2))
    return 0


def cmd_dev_server_status(_: argparse.Namespace) -> int:
    dev_server = get_packer().dev_server
    running = dev_server.running()
    print("DEV SERVER:", "RUNNING" if running else "DOWN", dev_server.host_with_port)
    return 0 if running else 1


def main(argv: Optional[list[str]] = None) -> int:
    maybe_enable_json_logging()
    parser = argparse.ArgumentParser(prog="manage", description="Pack manifest CLI")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_lookup = sub.add_parser("lookup", help="Resolve a pack name to its compiled path")
    p_lookup.add_argument("name")
    p_lookup.add_argument("--type", default="javascript", help="javascript, stylesheet or a raw extension")
    p_lookup.set_defaults(func=cmd_lookup)

    p_entry = sub.add_parser("entrypoint", help="List the chunks of an entrypoint")
    p_entry.add_argument("name")
    p_entry.add_argument("--type", default="javascript", help="javascript, stylesheet or a raw extension")
    p_entry.set_defaults(func=cmd_entrypoint)

    sub.add_parser("compile", help="Run the bundler if sources changed").set_defaults(func=cmd_compile)
    sub.add_parser("show-manifest", help="Print the manifest contents").set_defaults(func=cmd_show_manifest)
    sub.add_parser("dev-server-status", help="Check whether the dev server is reachable").set_defaults(
        func=cmd_dev_server_status
    )

    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
