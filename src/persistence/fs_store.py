"""Filesystem blob store for full Lighthouse reports."""

from __future__ import annotations

import gzip
import json
import os
from pathlib import Path
from typing import Any

from core.errors import NotFoundError, StorageError
from persistence.hashing import sha256_text


class FsBlobStore:
    """Gzip-compressed JSON blobs, one file per name, overwritten on write.

    File names are the sha256 of the logical name, so their length is fixed.
    """

    def __init__(self, base_dir: str | Path, *, prefix: str = "lhrs") -> None:
        self._base_dir = Path(base_dir)
        self._blobs_dir = self._base_dir / prefix
        self._blobs_dir.mkdir(parents=True, exist_ok=True)

    @property
    def blobs_dir(self) -> Path:
        return self._blobs_dir

    def path_for(self, name: str) -> Path:
        return self._blobs_dir / f"{sha256_text(name)}.json.gz"

    def write_json(self, name: str, payload: dict[str, Any]) -> None:
        path = self.path_for(name)
        tmp_path = path.with_name(path.name + ".tmp")
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        try:
            with gzip.open(tmp_path, "wb") as handle:
                handle.write(data)
            os.replace(tmp_path, path)
        except OSError as exc:
            raise StorageError(f"Failed to write blob {name}: {exc}") from exc

    def read_json(self, name: str) -> dict[str, Any]:
        path = self.path_for(name)
        try:
            with gzip.open(path, "rb") as handle:
                return json.loads(handle.read().decode("utf-8"))
        except FileNotFoundError as exc:
            raise NotFoundError(f"No blob stored for {name}") from exc
        except OSError as exc:
            raise StorageError(f"Failed to read blob {name}: {exc}") from exc

    def delete(self, name: str) -> bool:
        path = self.path_for(name)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageError(f"Failed to delete blob {name}: {exc}") from exc
        return True


__all__ = ["FsBlobStore"]
