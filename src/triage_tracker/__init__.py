"""Triage Tracker: day-by-day issue closings and untriaged issue detection for GitHub repositories."""

from triage_tracker.cache import ActivityCache, CollectionKind, SnapshotCache
from triage_tracker.closings import ClosingsService, DayActivity, DayEntry
from triage_tracker.config import TrackerConfig, create_from_config, load_config
from triage_tracker.data import (
    ActivityLookup,
    Comment,
    Event,
    EventKind,
    Freshness,
    Issue,
    LastCommentedOn,
    NoActivitySince,
    PagingProfile,
    StateChange,
)
from triage_tracker.errors import (
    RateLimitedError,
    TrackerError,
    TransportError,
    UnsupportedPagingDepthError,
)
from triage_tracker.locator import DateWindowLocator, LocatorResult, LocatorState, estimate_start_page
from triage_tracker.remote import GitHubClient, RemoteCollection
from triage_tracker.scan_log import ScanLogger
from triage_tracker.store import BlobStore, FileBlobStore, MemoryBlobStore
from triage_tracker.triage import TriageReport, TriageResolver, Verdict, classify

__all__ = [
    # Models
    "ActivityLookup",
    "Comment",
    "DayActivity",
    "DayEntry",
    "Event",
    "EventKind",
    "Freshness",
    "Issue",
    "LastCommentedOn",
    "NoActivitySince",
    "PagingProfile",
    "StateChange",
    # Errors
    "RateLimitedError",
    "TrackerError",
    "TransportError",
    "UnsupportedPagingDepthError",
    # Protocols
    "BlobStore",
    "RemoteCollection",
    # Remote
    "GitHubClient",
    # Stores and caches
    "ActivityCache",
    "CollectionKind",
    "FileBlobStore",
    "MemoryBlobStore",
    "SnapshotCache",
    # Locator
    "DateWindowLocator",
    "LocatorResult",
    "LocatorState",
    "estimate_start_page",
    # Services
    "ClosingsService",
    "TriageReport",
    "TriageResolver",
    "Verdict",
    "classify",
    # Logging
    "ScanLogger",
    # Config
    "TrackerConfig",
    "create_from_config",
    "load_config",
]
