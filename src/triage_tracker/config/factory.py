"""Factory functions to create components from configuration."""

from datetime import date, timedelta
from pathlib import Path

from triage_tracker.cache import ActivityCache, SnapshotCache
from triage_tracker.closings import ClosingsService
from triage_tracker.config.models import (
    FileStoreConfig,
    GitHubConfig,
    MemoryStoreConfig,
    TrackerConfig,
)
from triage_tracker.remote import GitHubClient
from triage_tracker.scan_log import ScanLogger
from triage_tracker.store import BlobStore, FileBlobStore, MemoryBlobStore
from triage_tracker.triage import TriageResolver


def create_client(config: GitHubConfig) -> GitHubClient:
    """Create a GitHub client from config."""
    return GitHubClient(
        repo=config.repo,
        api_url=config.api_url,
        token=config.token,
        user_agent=config.user_agent,
        timeout=config.timeout_seconds,
    )


def create_store(config: FileStoreConfig | MemoryStoreConfig) -> BlobStore:
    """Create a blob store from config."""
    if isinstance(config, FileStoreConfig):
        return FileBlobStore(config.directory)
    if isinstance(config, MemoryStoreConfig):
        return MemoryBlobStore()
    msg = f"Unknown store config type: {type(config)}"
    raise ValueError(msg)


def create_from_config(
    config: TrackerConfig,
    *,
    today: date | None = None,
    log_override: bool | None = None,
) -> tuple[ClosingsService, TriageResolver, ScanLogger | None]:
    """Create the closings service and triage resolver from root config.

    Both share one GitHub client and one blob store.

    Args:
        config: Root configuration.
        today: Reference "today" (defaults to the current UTC date on use).
        log_override: Override the config's logging.enabled setting.

    Returns:
        Tuple of (closings, resolver, scan_logger).
        scan_logger is None if scan logging is disabled.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled

    scan_logger: ScanLogger | None = None
    if log_enabled:
        scan_logger = ScanLogger(log_dir=Path(config.logging.log_dir), enabled=True)

    client = create_client(config.github)
    store = create_store(config.store)

    closings = ClosingsService(
        client,
        SnapshotCache(store),
        today=today,
        per_page=config.locator.per_page,
        max_probes=config.locator.max_probes,
        scan_logger=scan_logger,
    )
    triage = config.triage
    resolver = TriageResolver(
        client,
        ActivityCache.load(store, key=triage.activity_key),
        today=today,
        ttl=timedelta(days=triage.ttl_days),
        yardstick_days=triage.yardstick_days,
        issues_per_page=triage.issues_per_page,
        max_issue_pages=triage.max_issue_pages,
        comments_per_page=triage.comments_per_page,
        request_delay=triage.request_delay_seconds,
    )
    return (closings, resolver, scan_logger)
