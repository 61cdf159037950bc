"""Blob command wiring for datablob CLI."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from core.hashing import short_hash
from core.types import BlobTransfer, BlobTransferRequest, StoreTarget, TransferReporter
from store.blob_sdk import BlobClient


def add_blob_command(subparsers: Any) -> None:
    """Register blob subcommand and its put/get/check/show actions."""
    parser = subparsers.add_parser(
        "blob",
        help="Manage blobs in the blobstore",
        description=(
            "Datasets are made up of files, and each file is one blob named by the "
            "SHA-1 hash of its contents. put uploads blobs, get downloads them, "
            "check verifies stored contents, and show prints them."
        ),
    )
    actions = parser.add_subparsers(dest="blob_command", required=True)

    put_parser = actions.add_parser("put", help="Upload blobs to a blobstore")
    _add_transfer_arguments(put_parser)

    get_parser = actions.add_parser("get", help="Download blobs from a blobstore")
    _add_transfer_arguments(get_parser)
    get_parser.add_argument(
        "--verify",
        action="store_true",
        help="Re-hash downloaded blobs and refuse mismatching content",
    )

    check_parser = actions.add_parser("check", help="Verify stored blob contents match <hash>")
    check_parser.add_argument("hashes", nargs="+", metavar="hash", help="Blob hash")
    _add_target_argument(check_parser, default_local=True)

    show_parser = actions.add_parser("show", help="Output blob contents named by <hash>")
    show_parser.add_argument("hash", help="Blob hash")
    _add_target_argument(show_parser, default_local=True)


def run_blob_command(client: BlobClient, args: argparse.Namespace) -> int:
    """Execute a blob action and print per-blob progress."""
    if args.blob_command == "check":
        return _run_check(client, args)
    if args.blob_command == "show":
        client.show(args.hash, sys.stdout.buffer, target=_target(args))
        sys.stdout.buffer.flush()
        return 0
    request = BlobTransferRequest(
        hashes=tuple(args.hashes),
        include_all=args.all,
        target=_target(args),
        use_manifest_file=args.manifest_file,
        verify=getattr(args, "verify", False),
    )
    reporter = _progress_printer(client.config.dataset_root)
    if args.blob_command == "put":
        client.put(request, reporter)
    else:
        client.get(request, reporter)
    return 0


def _run_check(client: BlobClient, args: argparse.Namespace) -> int:
    """Handle blob check action."""
    results = client.check(args.hashes, target=_target(args))
    for result in results:
        status = "ok" if result.ok else f"mismatch actual={result.actual_hash}"
        print(f"check blob {short_hash(result.blob_hash)} {status}")
    return 0 if all(result.ok for result in results) else 1


def _progress_printer(dataset_root: Path) -> TransferReporter:
    """Build a reporter printing one line per transferred blob."""

    def report(transfer: BlobTransfer) -> None:
        action = "put" if transfer.action == "put" else "get"
        display_path = _display_path(transfer.path, dataset_root)
        print(f"{action} blob {short_hash(transfer.blob_hash)} {display_path}")

    return report


def _display_path(path: Path, dataset_root: Path) -> str:
    """Render a path relative to the dataset root when possible."""
    try:
        return path.relative_to(dataset_root).as_posix()
    except ValueError:
        return str(path)


def _target(args: argparse.Namespace) -> StoreTarget:
    return "local" if args.local else "remote"


def _add_transfer_arguments(parser: argparse.ArgumentParser) -> None:
    """Register arguments shared by put and get."""
    parser.add_argument("hashes", nargs="*", metavar="hash", help="Blob hash")
    parser.add_argument("--all", action="store_true", help="Include all blobs in the manifest")
    parser.add_argument(
        "--manifest-file",
        action="store_true",
        help="Resolve paths from the Manifest file instead of scanning files",
    )
    _add_target_argument(parser, default_local=False)


def _add_target_argument(parser: argparse.ArgumentParser, default_local: bool) -> None:
    """Register the local/remote store switch."""
    if default_local:
        parser.add_argument(
            "--remote",
            dest="local",
            action="store_false",
            help="Use the remote blob store instead of the local one",
        )
        parser.set_defaults(local=True)
        return
    parser.add_argument(
        "--local",
        action="store_true",
        help="Use the local blob store instead of the remote one",
    )
