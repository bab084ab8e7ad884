"""Command line entry point."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from cartbind.config import InteropConfig
from cartbind.errors import CartbindError
from cartbind.manifest import parse_manifest
from cartbind.models import BUILD_DIR
from cartbind.observability import StructuredLogger
from cartbind.planner import discover, plan_interop


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cartbind",
        description="Resolve Carthage xcframeworks into cinterop definitions.",
    )
    parser.add_argument("--build-dir", default=BUILD_DIR, help="Build products directory.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="List discovered build products.")
    scan.add_argument("root", type=Path)

    manifest = subparsers.add_parser("manifest", help="Decode an xcframework Info.plist.")
    manifest.add_argument("plist", type=Path)

    resolve = subparsers.add_parser("resolve", help="Plan interop bindings and write .def files.")
    resolve.add_argument("root", type=Path)
    resolve.add_argument(
        "--dependency",
        action="append",
        required=True,
        dest="dependencies",
        help="xcframework name without extension. Repeatable.",
    )
    resolve.add_argument(
        "--target",
        action="append",
        required=True,
        dest="targets",
        help="Compile target name, e.g. ios_arm64. Repeatable.",
    )
    resolve.add_argument("--def-dir", type=Path, default=Path("build/carthage/defs"))
    resolve.add_argument("--package-prefix", default="carthage")
    resolve.add_argument("--format", choices=("json", "cbor"), default="json")
    resolve.add_argument("--output", type=Path)
    resolve.add_argument("--log-file", type=Path)
    resolve.add_argument("--fail-fast", action="store_true")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return _run(args)
    except CartbindError as exc:
        print(json.dumps(exc.to_dict(), indent=2, sort_keys=True), file=sys.stderr)
        return 1


def _run(args: argparse.Namespace) -> int:
    if args.command == "scan":
        products = discover(args.root, config=InteropConfig(build_dir=args.build_dir))
        _emit_json(products.to_payload())
        return 0

    if args.command == "manifest":
        xcframework = parse_manifest(args.plist)
        if xcframework is None:
            print(f"{args.plist}: not an xcframework manifest", file=sys.stderr)
            return 1
        _emit_json(xcframework.to_payload())
        return 0

    config = InteropConfig(
        build_dir=args.build_dir,
        def_output_dir=args.def_dir,
        package_prefix=args.package_prefix,
        fail_fast=args.fail_fast,
    )
    logger = StructuredLogger()
    try:
        plan = plan_interop(
            args.root,
            args.dependencies,
            args.targets,
            config=config,
            logger=logger,
        )
    finally:
        if args.log_file is not None:
            logger.to_json_lines(args.log_file)

    if args.format == "cbor":
        if args.output is None:
            sys.stdout.buffer.write(plan.to_cbor())
        else:
            plan.to_cbor(args.output)
    elif args.output is None:
        sys.stdout.write(plan.to_json())
    else:
        plan.to_json(args.output)
    return 0 if plan.ok else 1


def _emit_json(payload: dict[str, object]) -> None:
    sys.stdout.write(json.dumps(payload, indent=2, sort_keys=True) + "\n")
