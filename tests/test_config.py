"""Tests for configuration loading and factory functions."""

from datetime import date, timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from triage_tracker.closings import ClosingsService
from triage_tracker.config import (
    FileStoreConfig,
    GitHubConfig,
    LocatorConfig,
    MemoryStoreConfig,
    TrackerConfig,
    TriageConfig,
    create_from_config,
    get_default_config_path,
    load_config,
)
from triage_tracker.config.factory import create_client, create_store
from triage_tracker.scan_log import ScanLogger
from triage_tracker.store import FileBlobStore, MemoryBlobStore
from triage_tracker.triage import TriageResolver


class TestConfigModels:
    """Tests for Pydantic config models."""

    def test_github_config_defaults(self) -> None:
        config = GitHubConfig()
        assert config.repo == "rust-lang/rust"
        assert config.api_url == "https://api.github.com"
        assert config.token is None

    def test_store_config_defaults(self) -> None:
        assert FileStoreConfig().type == "file"
        assert FileStoreConfig().directory == "database"
        assert MemoryStoreConfig().type == "memory"

    def test_triage_config_defaults(self) -> None:
        config = TriageConfig()
        assert config.yardstick_days == 365
        assert config.ttl_days == 1
        assert config.issues_per_page == 10
        assert config.comments_per_page == 100
        assert config.request_delay_seconds == 0.5

    def test_per_page_is_bounded(self) -> None:
        with pytest.raises(ValidationError):
            LocatorConfig(per_page=101)

    def test_root_config_defaults(self) -> None:
        config = TrackerConfig()
        assert isinstance(config.store, FileStoreConfig)
        assert config.locator.max_probes == 200
        assert config.logging.enabled is False

    def test_store_discriminator(self) -> None:
        config = TrackerConfig.model_validate({"store": {"type": "memory"}})
        assert isinstance(config.store, MemoryStoreConfig)

    def test_unknown_store_type_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TrackerConfig.model_validate({"store": {"type": "s3"}})

    def test_config_is_frozen(self) -> None:
        config = GitHubConfig()
        with pytest.raises(ValidationError):
            config.repo = "other/repo"


class TestLoader:
    """Tests for YAML loading."""

    def test_default_config_loads(self) -> None:
        path = get_default_config_path()
        assert path.exists()

        config = load_config(path)

        assert config.github.repo == "rust-lang/rust"
        assert isinstance(config.store, FileStoreConfig)

    def test_load_custom_config(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            "github:\n"
            "  repo: octo/repo\n"
            "store:\n"
            "  type: memory\n"
            "triage:\n"
            "  yardstick_days: 90\n"
        )

        config = load_config(path)

        assert config.github.repo == "octo/repo"
        assert isinstance(config.store, MemoryStoreConfig)
        assert config.triage.yardstick_days == 90
        assert config.triage.ttl_days == 1

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(path) == TrackerConfig()

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")


class TestFactory:
    """Tests for factory functions."""

    def test_create_client(self) -> None:
        client = create_client(GitHubConfig(repo="octo/repo", token="t", timeout_seconds=5))
        assert client.repo == "octo/repo"

    def test_create_store(self, tmp_path: Path) -> None:
        file_store = create_store(FileStoreConfig(directory=str(tmp_path)))
        assert isinstance(file_store, FileBlobStore)
        assert file_store.directory == tmp_path
        assert isinstance(create_store(MemoryStoreConfig()), MemoryBlobStore)

    def test_create_from_config(self) -> None:
        config = TrackerConfig(store=MemoryStoreConfig(), triage=TriageConfig(yardstick_days=30))
        today = date(2024, 6, 15)

        closings, resolver, scan_logger = create_from_config(config, today=today)

        assert isinstance(closings, ClosingsService)
        assert isinstance(resolver, TriageResolver)
        assert scan_logger is None
        assert closings.today == today
        assert resolver.default_yardstick() == today - timedelta(days=30)

    def test_log_override_creates_scan_logger(self, tmp_path: Path) -> None:
        config = TrackerConfig.model_validate(
            {"store": {"type": "memory"}, "logging": {"log_dir": str(tmp_path)}}
        )

        _, _, scan_logger = create_from_config(config, log_override=True)

        assert isinstance(scan_logger, ScanLogger)
        assert scan_logger.enabled
