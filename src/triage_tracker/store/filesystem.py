"""Blob store backed by one JSON file per key."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class FileBlobStore:
    """Stores each blob as ``{directory}/{key}.json``.

    Args:
        directory: Directory holding the blobs. Created on first write.
    """

    def __init__(self, directory: Path | str) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        """Path of the file backing ``key``."""
        return self._directory / f"{key}.json"

    def read(self, key: str) -> bytes | None:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            logger.debug("'%s' not in store", path)
            return None

    def write(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        self._directory.mkdir(parents=True, exist_ok=True)
        # Blobs are replaced atomically.
        tmp = path.with_suffix(".json.tmp")
        try:
            tmp.write_bytes(data)
            tmp.replace(path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)
