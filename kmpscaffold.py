#!/usr/bin/env python3
import argparse
import os
import sys
from typing import List

from kmpscaffold_lib import (
    ScaffoldConfig,
    ScaffoldError,
    list_layouts,
    load_config,
    load_layout,
    resolve_base_package,
    scaffold,
)
from kmpscaffold_lib.logging_config import setup_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kmpscaffold",
        description="Scaffold Kotlin Multiplatform feature modules (api + impl) into a Gradle project.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress (INFO)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    parser.add_argument("--debug", action="store_true", help="Log everything (DEBUG)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_scaffold = sub.add_parser("scaffold", help="Create a feature module and include it in settings.gradle.kts")
    p_scaffold.add_argument("module_name", help="Name of the new module, e.g. Payments")
    p_scaffold.add_argument(
        "--root",
        default=os.getcwd(),
        help="Project root directory (default: current directory)",
    )
    p_scaffold.add_argument(
        "--base-package",
        help="Base package for generated sources (default: derived from existing sources)",
    )
    p_scaffold.add_argument("--layout", help="Layout name (see 'layouts'; default: kmp)")
    impl = p_scaffold.add_mutually_exclusive_group()
    impl.add_argument("--impl", dest="with_impl", action="store_true", default=None,
                      help="Write a default implementation class")
    impl.add_argument("--no-impl", dest="with_impl", action="store_false", default=None,
                      help="Only write the api interface")
    p_scaffold.add_argument("--config", help="Path to a config YAML (default: <root>/.kmpscaffold.yaml)")
    p_scaffold.add_argument("--dry-run", action="store_true", help="Show what would be created without writing")

    p_resolve = sub.add_parser("resolve", help="Print the base package derived from existing sources")
    p_resolve.add_argument("--root", default=os.getcwd(), help="Project root directory (default: current directory)")
    p_resolve.add_argument("--project-name", help="Name used for the com.<name> fallback (default: root directory name)")
    p_resolve.add_argument("--config", help="Path to a config YAML (default: <root>/.kmpscaffold.yaml)")

    sub.add_parser("layouts", help="List available layouts")
    return parser


def _log_level(args: argparse.Namespace) -> str:
    if args.debug:
        return "DEBUG"
    if args.verbose:
        return "INFO"
    if args.quiet:
        return "ERROR"
    return os.environ.get("KMPSCAFFOLD_LOG_LEVEL", "WARNING")


def _load_config(args: argparse.Namespace) -> ScaffoldConfig:
    # A missing root is reported by the command itself
    if args.config is None and not os.path.isdir(args.root):
        return ScaffoldConfig()
    return load_config(args.root, args.config)


def _cmd_scaffold(args: argparse.Namespace) -> int:
    try:
        config = _load_config(args).merged(layout=args.layout, with_impl=args.with_impl)
    except ScaffoldError as e:
        print(f"{e.kind}: {e}", file=sys.stderr)
        return e.exit_code

    result = scaffold(
        args.module_name,
        args.root,
        config=config,
        base_package=args.base_package,
        dry_run=args.dry_run,
    )
    if result.error is not None:
        print(f"{result.error.kind}: {result.error}", file=sys.stderr)
        if result.rolled_back:
            print("Changes made by this run were rolled back.", file=sys.stderr)
        return result.error.exit_code

    verb = "Would create" if result.dry_run else "Created"
    for path in result.created_paths:
        print(f"{verb}: {os.path.relpath(path, args.root)}")
    for line in result.include_lines:
        print(f"{'Would append' if result.dry_run else 'Appended'}: {line}")
    if not result.dry_run:
        print(f"Feature module '{result.plan.request.module_name}' created at: {result.plan.module_dir}")
    return 0


def _cmd_resolve(args: argparse.Namespace) -> int:
    try:
        config = _load_config(args)
        package = resolve_base_package(
            args.root,
            project_name=args.project_name or config.project_name,
            source_roots=config.source_roots,
            extensions=config.source_extensions,
        )
    except ScaffoldError as e:
        print(f"{e.kind}: {e}", file=sys.stderr)
        return e.exit_code
    print(package)
    return 0


def _cmd_layouts(args: argparse.Namespace) -> int:
    for name in list_layouts():
        print(f"{name}: {load_layout(name).get('description', '')}")
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=_log_level(args), log_file=os.environ.get("KMPSCAFFOLD_LOG_FILE"))

    if args.command == "scaffold":
        return _cmd_scaffold(args)
    if args.command == "resolve":
        return _cmd_resolve(args)
    return _cmd_layouts(args)


if __name__ == "__main__":
    raise SystemExit(main())
