"""Durable blob store protocol."""

from typing import Protocol


class BlobStore(Protocol):
    """Interface for a flat key -> bytes store."""

    def read(self, key: str) -> bytes | None:
        """Return the blob stored under ``key``, or None if there is none."""
        ...

    def write(self, key: str, data: bytes) -> None:
        """Store ``data`` under ``key``, replacing any previous blob."""
        ...

    def delete(self, key: str) -> None:
        """Remove the blob under ``key``. Missing keys are ignored."""
        ...
