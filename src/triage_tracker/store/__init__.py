"""Durable blob stores used by the caches."""

from triage_tracker.store.base import BlobStore
from triage_tracker.store.filesystem import FileBlobStore
from triage_tracker.store.memory import MemoryBlobStore

__all__ = [
    "BlobStore",
    "FileBlobStore",
    "MemoryBlobStore",
]
