import gzip
import json
from pathlib import Path

import pytest

from core.errors import NotFoundError
from persistence.fs_store import FsBlobStore


def test_blob_store_writes_gzip_json(tmp_path: Path) -> None:
    store = FsBlobStore(tmp_path)
    store.write_json("https:____example.com__", {"auditedOn": "x", "categories": {}})

    path = store.path_for("https:____example.com__")
    assert path.parent == tmp_path / "lhrs"
    with gzip.open(path, "rb") as handle:
        assert json.loads(handle.read())["auditedOn"] == "x"
    assert store.read_json("https:____example.com__") == {"auditedOn": "x", "categories": {}}


def test_blob_store_overwrites(tmp_path: Path) -> None:
    store = FsBlobStore(tmp_path)
    store.write_json("site", {"v": 1})
    store.write_json("site", {"v": 2})

    assert store.read_json("site") == {"v": 2}
    assert list(store.blobs_dir.iterdir()) == [store.path_for("site")]


def test_blob_store_missing_and_delete(tmp_path: Path) -> None:
    store = FsBlobStore(tmp_path)
    with pytest.raises(NotFoundError):
        store.read_json("missing")

    store.write_json("site", {"v": 1})
    assert store.delete("site") is True
    assert store.delete("site") is False


def test_blob_store_file_name_is_bounded_for_long_names(tmp_path: Path) -> None:
    store = FsBlobStore(tmp_path)
    name = "https:____example.com__search?" + "&".join(
        f"utm%5Fparam{i}=campaign%5Fvalue%5F{i:04d}" for i in range(20)
    )
    assert len(name) > 300

    store.write_json(name, {"v": 1})

    assert len(store.path_for(name).name) < 100
    assert store.read_json(name) == {"v": 1}
    assert store.delete(name) is True
