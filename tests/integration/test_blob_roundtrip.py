"""Integration tests for the blob put/get workflow."""

from __future__ import annotations

from dataclasses import replace

from core.config import BlobConfig
from core.types import BlobTransferRequest
from store.blob_sdk import BlobClient
from tests.blob_fakes import write_files


def test_put_then_restore_deleted_files_from_manifest_file(tmp_path) -> None:
    """Deleted dataset files come back from the local store."""
    dataset_root = tmp_path / "dataset"
    files = {
        "train/part-0.csv": b"a,b\n1,2\n",
        "train/part-1.csv": b"a,b\n3,4\n",
        "test/part-0.csv": b"a,b\n1,2\n",
    }
    write_files(dataset_root, files)
    config = replace(
        BlobConfig.from_env(),
        dataset_root=dataset_root,
        local_store_root=tmp_path / "blobstore",
    )
    client = BlobClient(config)
    local_all = BlobTransferRequest(include_all=True, target="local")

    uploaded = client.put(local_all)
    client.write_manifest()
    for relative_path in files:
        (dataset_root / relative_path).unlink()
    restored = client.get(replace(local_all, use_manifest_file=True, verify=True))

    assert len(uploaded) == 2
    assert sorted(t.action for t in restored) == ["copy", "get", "get"]
    for relative_path, content in files.items():
        assert (dataset_root / relative_path).read_bytes() == content


def test_hash_cache_survives_between_clients(tmp_path) -> None:
    """A second manifest build reuses hashes cached by the first."""
    write_files(tmp_path, {"a.bin": b"a", "b.bin": b"b"})
    config = replace(BlobConfig.from_env(), dataset_root=tmp_path, use_hash_cache=True)

    first = BlobClient(config).manifest().entries()
    second = BlobClient(config).manifest().entries()

    assert first == second
    assert (tmp_path / ".datablob" / "hash_cache.json").exists()
