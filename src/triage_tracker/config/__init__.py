"""Configuration module for the tracker."""

from triage_tracker.config.factory import create_client, create_from_config, create_store
from triage_tracker.config.loader import get_default_config_path, load_config
from triage_tracker.config.models import (
    FileStoreConfig,
    GitHubConfig,
    LocatorConfig,
    LoggingConfig,
    MemoryStoreConfig,
    StoreConfig,
    TrackerConfig,
    TriageConfig,
)

__all__ = [
    "FileStoreConfig",
    "GitHubConfig",
    "LocatorConfig",
    "LoggingConfig",
    "MemoryStoreConfig",
    "StoreConfig",
    "TrackerConfig",
    "TriageConfig",
    "create_client",
    "create_from_config",
    "create_store",
    "get_default_config_path",
    "load_config",
]
