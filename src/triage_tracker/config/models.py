"""Pydantic configuration models for the tracker."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

# ============================================================
# Remote Config
# ============================================================


class GitHubConfig(BaseModel):
    """Configuration for GitHubClient."""

    repo: str = "rust-lang/rust"
    api_url: str = "https://api.github.com"
    user_agent: str = "triage-tracker"
    # Falls back to the GITHUB_TOKEN environment variable.
    token: str | None = None
    timeout_seconds: float = 30.0

    model_config = {"frozen": True}


# ============================================================
# Store Configs
# ============================================================


class FileStoreConfig(BaseModel):
    """Blobs as JSON files in a directory."""

    type: Literal["file"] = "file"
    directory: str = "database"

    model_config = {"frozen": True}


class MemoryStoreConfig(BaseModel):
    """Blobs kept in memory for the lifetime of the process."""

    type: Literal["memory"] = "memory"

    model_config = {"frozen": True}


StoreConfig = Annotated[
    FileStoreConfig | MemoryStoreConfig,
    Field(discriminator="type"),
]


# ============================================================
# Locator / Triage Configs
# ============================================================


class LocatorConfig(BaseModel):
    """Configuration for the date-window locators behind closings reports."""

    max_probes: int = Field(default=200, ge=1)
    per_page: int = Field(default=100, ge=1, le=100)

    model_config = {"frozen": True}


class TriageConfig(BaseModel):
    """Configuration for TriageResolver."""

    yardstick_days: int = Field(default=365, ge=0)
    ttl_days: int = Field(default=1, ge=0)
    issues_per_page: int = Field(default=10, ge=1, le=100)
    max_issue_pages: int = Field(default=1, ge=1)
    comments_per_page: int = Field(default=100, ge=1, le=100)
    request_delay_seconds: float = Field(default=0.5, ge=0)
    activity_key: str = "triage-activity"

    model_config = {"frozen": True}


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Configuration for log output and locator scan logs."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class TrackerConfig(BaseModel):
    """Root configuration for the tracker."""

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    store: FileStoreConfig | MemoryStoreConfig = Field(
        default_factory=FileStoreConfig, discriminator="type"
    )
    locator: LocatorConfig = Field(default_factory=LocatorConfig)
    triage: TriageConfig = Field(default_factory=TriageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}
