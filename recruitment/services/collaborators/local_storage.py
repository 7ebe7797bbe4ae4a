"""
Local-disk file storage.
"""

import asyncio
from pathlib import Path


class LocalFileStorage:
    """Stores files under a root directory; the reference is the relative path."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def _resolve(self, ref: str) -> Path:
        path = (self.root / ref).resolve()
        if self.root.resolve() not in path.parents:
            raise ValueError("storage_ref_outside_root")
        return path

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        path = self._resolve(key)
        await asyncio.to_thread(self._write, path, data)
        return key

    async def get(self, ref: str) -> bytes:
        return await asyncio.to_thread(self._resolve(ref).read_bytes)

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
