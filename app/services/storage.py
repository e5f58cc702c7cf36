from __future__ import annotations
from pathlib import Path


class LocalObjectStore:
    def __init__(self, base_dir: str):
        self.base = Path(base_dir)
        self.base.mkdir(parents=True, exist_ok=True)

    def put_bytes(self, *, key: str, data: bytes) -> Path:
        path = self.resolve_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    def resolve_path(self, key: str) -> Path:
        """
        Resolve a storage key to a path under self.base.
        Keys that would escape the base directory are rejected.
        """
        path = (self.base / key).resolve()
        if not path.is_relative_to(self.base.resolve()):
            raise ValueError(f"Storage key escapes base dir: {key}")
        return path

    def delete(self, *, key: str) -> None:
        self.resolve_path(key).unlink(missing_ok=True)
