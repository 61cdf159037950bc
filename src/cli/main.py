"""datablob CLI entry points.
This module exposes blob, manifest, and handle commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from cli.blob_command import add_blob_command, run_blob_command
from core.config import BlobConfig
from core.errors import BlobError
from core.logging_config import configure_logging, get_logger
from store.blob_sdk import BlobClient

_LOGGER = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="datablob", description="Content-addressed dataset blobs")
    parser.add_argument("--dataset-root", help="Override DATABLOB_DATASET_ROOT for this command")
    parser.add_argument("--store-root", help="Override DATABLOB_STORE_ROOT for this command")
    parser.add_argument("--remote-uri", help="Override DATABLOB_REMOTE_URI (s3://bucket[/prefix])")
    parser.add_argument(
        "--hash-cache",
        action="store_true",
        help="Reuse file hashes cached by size and modification time",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Emit debug log events")
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_blob_command(subparsers)
    _add_manifest_command(subparsers)
    _add_handle_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the datablob CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    try:
        client = _build_client(args)
        if args.command == "blob":
            return run_blob_command(client, args)
        if args.command == "manifest":
            return _run_manifest_command(client, args)
        if args.command == "handle":
            return _run_handle_command(client, args)
    except BlobError as error:
        _LOGGER.debug(
            "command_failed",
            command=args.command,
            error_type=type(error).__name__,
            blob_hash=error.blob_hash,
            path=str(error.path) if error.path else None,
        )
        print(f"error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(args: argparse.Namespace) -> BlobClient:
    """Build SDK client with optional overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Configured SDK client.
    """
    config = BlobConfig.from_env()
    if args.dataset_root:
        config = replace(config, dataset_root=Path(args.dataset_root).expanduser().resolve())
    if args.store_root:
        config = replace(config, local_store_root=Path(args.store_root).expanduser().resolve())
    if args.remote_uri:
        config = replace(config, remote_uri=args.remote_uri)
    if args.hash_cache:
        config = replace(config, use_hash_cache=True)
    return BlobClient(config)


def _run_manifest_command(client: BlobClient, args: argparse.Namespace) -> int:
    """Handle manifest command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    if args.write:
        print(client.write_manifest())
        return 0
    for relative_path, blob_hash in client.manifest(args.manifest_file).entries().items():
        print(f"{blob_hash}\t{relative_path}")
    return 0


def _run_handle_command(client: BlobClient, args: argparse.Namespace) -> int:
    """Handle handle command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    handle = client.handle(args.handle)
    print(f"handle={handle}")
    print(f"author={handle.author}")
    print(f"name={handle.name}")
    print(f"format={handle.format or '-'}")
    print(f"tag={handle.tag or '-'}")
    return 0


def _add_manifest_command(subparsers: Any) -> None:
    """Register manifest subcommand."""
    parser = subparsers.add_parser("manifest", help="List tracked files and their hashes")
    parser.add_argument("--write", action="store_true", help="Persist the Manifest file")
    parser.add_argument(
        "--manifest-file",
        action="store_true",
        help="List entries from the Manifest file instead of scanning files",
    )


def _add_handle_command(subparsers: Any) -> None:
    """Register handle subcommand."""
    parser = subparsers.add_parser("handle", help="Validate a dataset handle")
    parser.add_argument(
        "handle",
        nargs="?",
        help="author/name[.format][@tag]; read from the Datafile when omitted",
    )
