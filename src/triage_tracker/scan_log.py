"""Scan logger for recording date-window locator decisions to JSON files."""

import uuid
from datetime import UTC, date, datetime
from pathlib import Path

from pydantic import BaseModel


class DecisionRecord(BaseModel):
    """A single decision taken by the locator after fetching a page."""

    page: int
    decision: str
    page_size: int = 0
    matched: int = 0
    pages_per_day: int = 0
    timestamp: str = ""


class ScanRecord(BaseModel):
    """Record of one locator invocation."""

    scan_id: str
    collection: str
    target_date: str
    started_at: str
    start_page: int
    completed_at: str | None = None
    state: str | None = None
    decisions: list[DecisionRecord] = []
    item_count: int = 0


class ScanLogger:
    """Accumulates locator decisions and writes a JSON log file per scan.

    When ``enabled=False``, all methods are no-ops.

    Args:
        log_dir: Directory to write JSON log files.
        enabled: If False, all methods become no-ops.
    """

    def __init__(self, log_dir: Path, *, enabled: bool = True) -> None:
        self._log_dir = log_dir
        self._enabled = enabled
        self._last_log_path: Path | None = None

    @property
    def enabled(self) -> bool:
        """Whether logging is active."""
        return self._enabled

    @property
    def last_log_path(self) -> Path | None:
        """Path to the last written log file, or None."""
        return self._last_log_path

    def start_scan(self, collection: str, target_date: date, start_page: int) -> ScanRecord | None:
        """Initialize a new scan record.

        Each scan gets its own record so concurrent scans do not interleave.

        Args:
            collection: Name of the feed being scanned (e.g. "issues", "events").
            target_date: Date the locator is looking for.
            start_page: First page the locator probes.

        Returns:
            The record to pass to ``log_decision`` / ``finish_scan``, or None if
            logging is disabled.
        """
        if not self._enabled:
            return None

        return ScanRecord(
            scan_id=str(uuid.uuid4()),
            collection=collection,
            target_date=target_date.isoformat(),
            started_at=datetime.now(tz=UTC).isoformat(),
            start_page=start_page,
        )

    def log_decision(
        self,
        record: ScanRecord | None,
        page: int,
        decision: str,
        *,
        page_size: int = 0,
        matched: int = 0,
        pages_per_day: int = 0,
    ) -> None:
        """Append a decision to the current scan."""
        if not self._enabled or record is None:
            return

        record.decisions.append(
            DecisionRecord(
                page=page,
                decision=decision,
                page_size=page_size,
                matched=matched,
                pages_per_day=pages_per_day,
                timestamp=datetime.now(tz=UTC).isoformat(),
            )
        )

    def finish_scan(self, record: ScanRecord | None, state: str, item_count: int) -> Path | None:
        """Write the scan record to a JSON file.

        Args:
            record: Record returned by ``start_scan``.
            state: Terminal locator state.
            item_count: Number of items collected.

        Returns:
            Path to the written JSON file, or None if logging is disabled.
        """
        if not self._enabled or record is None:
            return None

        record.completed_at = datetime.now(tz=UTC).isoformat()
        record.state = state
        record.item_count = item_count

        self._log_dir.mkdir(parents=True, exist_ok=True)

        # scan_2026-02-12_issues_<id>.json
        filename = (
            f"scan_{record.target_date}_{record.collection}_{record.scan_id[:8]}.json"
        )
        filepath = self._log_dir / filename

        filepath.write_text(record.model_dump_json(indent=2))
        self._last_log_path = filepath
        return filepath
