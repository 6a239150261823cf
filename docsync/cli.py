"""
cli.py

Responsibility: command line entrypoint for documentation sync.

Commands:
- `list`: show configured sources
- `sync KEY`: sync one source
- `sync-all`: sync every source, one after another
- `validate KEY`: validate one source's configuration
- `help`: usage, sources and rate limit notes

This module only parses arguments, loads the config file and prints results;
the work happens in `docsync.sync`.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Mapping

from docsync.config.logger_config import logger
from docsync.config.settings import (
    AUTHENTICATED_RATE_LIMIT,
    DEFAULT_CONFIG_PATH,
    TOKEN_ENV_VARS,
    UNAUTHENTICATED_RATE_LIMIT,
)
from docsync.sync.domain.errors import ConfigError, DocSyncError
from docsync.sync.infrastructure.config_file import load_docs_config
from docsync.sync.run import resolve_source, sync_all, sync_key

COMMANDS = ("list", "sync", "sync-all", "validate", "help")


def _load(args: argparse.Namespace) -> dict[str, dict[str, Any]]:
    return load_docs_config(args.config)


def list_cmd(args: argparse.Namespace) -> int:
    docs_config = _load(args)
    print("\nAvailable sources for documentation sync:\n")
    for key, raw in docs_config.items():
        if not isinstance(raw, Mapping):
            print(f"- {key}")
            print(f"   Invalid entry: expected an object, got {type(raw).__name__}\n")
            continue
        repository = raw.get("repositoryId") or raw.get("repository") or ""
        print(f"- {key}")
        print(f"   Name: {raw.get('name', '')}")
        print(f"   Type: {raw.get('type') or 'documentation'}")
        print(f"   Repository: https://github.com/{repository}")
        print(f"   Source: {raw.get('sourcePath', '')}")
        print(f"   Target: {raw.get('targetPath', '')}")
        convert = raw.get("convertFormat", raw.get("convertMdx", False))
        print(f"   Convert MDX: {'Yes' if convert else 'No'}")
        print("")
    return 0


def validate_cmd(args: argparse.Namespace) -> int:
    docs_config = _load(args)
    print(f"\nValidating configuration for: {args.key}")
    try:
        source = resolve_source(docs_config, args.key)
    except ConfigError as e:
        print(f"Configuration validation failed:\n{e}")
        return 1

    print("Configuration is valid!\n")
    print(f"   Name: {source.name}")
    print(f"   Type: {source.type}")
    print(f"   Repository: {source.repository_id}")
    print(f"   Source Path: {source.source_path}")
    print(f"   Target Path: {source.target_path}")
    print(f"   Convert MDX: {source.convert_format}")
    print(f"   File Extensions: {', '.join(source.file_extensions)}")
    if source.exclude_patterns:
        print(f"   Exclude Patterns: {', '.join(source.exclude_patterns)}")
    if source.include_patterns:
        print(f"   Include Patterns: {', '.join(source.include_patterns)}")
    return 0


def sync_cmd(args: argparse.Namespace) -> int:
    docs_config = _load(args)
    result = sync_key(docs_config, args.key, show_progress=not args.no_progress)
    print(f"\nSuccessfully synced {result.name}!")
    print(f"Files processed: {result.files_processed}")
    print(f"Duration: {result.duration_seconds}s")
    print(f"Target directory: {result.target_path}")
    return 0


def sync_all_cmd(args: argparse.Namespace) -> int:
    docs_config = _load(args)
    report = sync_all(docs_config, show_progress=not args.no_progress)
    print(f"\nSuccessful: {len(report.results)}/{report.total}")
    print(f"Failed: {len(report.failures)}/{report.total}")
    if report.results:
        print("\nSuccessful syncs:")
        for result in report.results:
            print(f"   {result.source_key}: {result.files_processed} files ({result.duration_seconds}s)")
    if report.failures:
        print("\nFailed syncs:")
        for failure in report.failures:
            print(f"   {failure.source_key}: {failure.error}")
    return 0 if report.ok else 1


def _format_sources(docs_config: Mapping[str, Mapping[str, Any]]) -> str:
    return "\n".join(
        f"  {key:<15} {raw.get('name', '')} ({raw.get('type') or 'documentation'})"
        if isinstance(raw, Mapping)
        else f"  {key:<15} (invalid entry)"
        for key, raw in docs_config.items()
    )


def help_cmd(args: argparse.Namespace) -> int:
    args.parser.print_help()
    try:
        sources = _format_sources(_load(args))
    except ConfigError as e:
        sources = f"  (unavailable: {e})"
    print("\navailable sources:")
    print(sources)
    print(
        "\nrate limits:\n"
        f"  without token: {UNAUTHENTICATED_RATE_LIMIT} requests/hour\n"
        f"  with {' or '.join(TOKEN_ENV_VARS)}: {AUTHENTICATED_RATE_LIMIT} requests/hour"
    )
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="docsync", description="Mirror upstream documentation trees into local folders")
    p.add_argument(
        "--config",
        default=str(DEFAULT_CONFIG_PATH),
        help=f"Path to the sources config file (default: {DEFAULT_CONFIG_PATH})",
    )
    p.add_argument("--no-progress", action="store_true", help="Disable progress bars")
    p.set_defaults(func=help_cmd, parser=p)
    sub = p.add_subparsers(dest="command")

    ls = sub.add_parser("list", help="List all configured sources")
    ls.set_defaults(func=list_cmd)

    s = sub.add_parser("sync", help="Sync documentation for one source")
    s.add_argument("key", help="Source key from the config file")
    s.set_defaults(func=sync_cmd)

    sa = sub.add_parser("sync-all", help="Sync documentation for every source")
    sa.set_defaults(func=sync_all_cmd)

    v = sub.add_parser("validate", help="Validate one source's configuration")
    v.add_argument("key", help="Source key from the config file")
    v.set_defaults(func=validate_cmd)

    h = sub.add_parser("help", help="Show this help message with available sources")
    h.set_defaults(func=help_cmd)
    return p


def _legacy_argv(argv: list[str]) -> list[str]:
    # Commands match case-insensitively; a bare source key is accepted as `sync KEY`.
    index = 0
    while index < len(argv):
        arg = argv[index]
        if arg == "--config":
            index += 2
            continue
        if arg.startswith("-"):
            index += 1
            continue
        if arg.lower() in COMMANDS:
            return [*argv[:index], arg.lower(), *argv[index + 1 :]]
        logger.warning("Treating '{}' as a source key (legacy mode)", arg)
        return [*argv[:index], "sync", *argv[index:]]
    return argv


def main(argv: list[str] | None = None) -> int:
    raw_argv = list(sys.argv[1:] if argv is None else argv)
    parser = _build_parser()
    args = parser.parse_args(_legacy_argv(raw_argv))
    try:
        return int(args.func(args))
    except DocSyncError as e:
        print(f"\nOperation failed:\n{e}")
        logger.debug("Operation failed: {!r}", e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
