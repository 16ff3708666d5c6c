"""Tests for CSV export, statistics and the failed-record list."""

import csv
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from escow.domain.models import CandidateRecord, InputRecord, JobLog, MatchOutcome
from escow.persistence.job_store import JobStateStore
from escow.reporting import (
    CSV_HEADERS,
    compute_job_stats,
    default_export_path,
    export_job_log_csv,
    failed_records,
    load_job_stats,
    outcome_rows,
)

NOW = datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)


def _candidate(name, registry_id):
    return CandidateRecord(
        service_type="訪問介護",
        name=name,
        address="東京都港区芝1-1",
        registry_id=registry_id,
        detail_locator=f"https://example.com/{registry_id}",
    )


@pytest.fixture
def job_log():
    found = MatchOutcome.from_matches(
        InputRecord(name="さくら", address="東京都港区芝1-1"),
        [_candidate("さくら苑", "1"), _candidate('さくら "本館"', "2")],
    )
    not_found = MatchOutcome.from_matches(InputRecord(name="ひまわり", address="大阪府"), [])
    failed = MatchOutcome.from_error(InputRecord(name="すみれ", address="京都府"), "timeout")
    return JobLog(outcomes=[found, not_found, failed], last_updated=NOW)


class TestOutcomeRows:
    """Tests for outcome_rows."""

    def test_not_found_outcome_has_one_empty_row(self, job_log):
        rows = list(outcome_rows(job_log.outcomes[1]))

        assert rows == [["ひまわり", "大阪府", "FALSE", "0", "", "", "", "", ""]]

    def test_one_row_per_match(self, job_log):
        rows = list(outcome_rows(job_log.outcomes[0]))

        assert len(rows) == 2
        assert rows[0] == [
            "さくら", "東京都港区芝1-1", "TRUE", "2",
            "さくら苑", "東京都港区芝1-1", "訪問介護", "1", "https://example.com/1",
        ]


class TestExportJobLogCsv:
    """Tests for export_job_log_csv."""

    def test_file_format(self, job_log, tmp_path):
        path = tmp_path / "export.csv"

        export_job_log_csv(job_log, path)

        raw = path.read_bytes()
        assert raw.startswith(b"\xef\xbb\xbf")
        assert b"\r\n" not in raw
        text = raw.decode("utf-8-sig")
        lines = text.split("\n")
        assert lines[0] == ",".join(f'"{h}"' for h in CSV_HEADERS)
        assert '"さくら ""本館"""' in text
        assert '"FALSE","0"' in text

    def test_error_outcomes_excluded_and_counted(self, job_log, tmp_path):
        path = tmp_path / "export.csv"

        summary = export_job_log_csv(job_log, path)

        with open(path, encoding="utf-8-sig", newline="") as f:
            rows = list(csv.reader(f))
        assert len(rows) == 1 + 3
        assert all(row[0] != "すみれ" for row in rows)
        assert summary.exported == 2
        assert summary.found == 1
        assert summary.not_found == 1
        assert summary.errors == 1
        assert summary.row_count == 3

    def test_empty_log_writes_header_only(self, tmp_path):
        path = tmp_path / "export.csv"

        summary = export_job_log_csv(JobLog.empty(), path)

        assert summary.row_count == 0
        assert path.read_text(encoding="utf-8-sig").count("\n") == 1

    def test_default_export_path(self):
        assert default_export_path(Path("data"), "2025-01-15") == Path("data/wam_search_2025-01-15.csv")


class TestStats:
    """Tests for compute_job_stats and load_job_stats."""

    def test_compute_job_stats(self, job_log):
        stats = compute_job_stats(job_log)

        assert (stats.total, stats.found, stats.not_found, stats.errors) == (3, 1, 1, 1)
        assert stats.last_updated == NOW

    def test_render(self, job_log):
        text = compute_job_stats(job_log).render()

        assert "総検索数: 3" in text
        assert "見つかった: 1件" in text
        assert "見つからなかった: 1件" in text
        assert "エラー: 1件" in text

    def test_render_without_last_updated(self):
        assert "最終更新: -" in compute_job_stats(JobLog.empty()).render()

    def test_load_job_stats_missing_log(self, tmp_path):
        store = JobStateStore(tmp_path / "output.json", logger_instance=MagicMock())

        assert load_job_stats(store) is None

    def test_load_job_stats_reads_log(self, tmp_path, job_log):
        store = JobStateStore(tmp_path / "output.json", logger_instance=MagicMock())
        store.save(job_log)

        assert load_job_stats(store).total == 3


class TestFailedRecords:
    """Tests for failed_records."""

    def test_lists_error_outcomes_once(self, job_log):
        repeated = job_log.with_outcome(MatchOutcome.from_error(InputRecord(name="すみれ", address="京都府"), "again"))

        assert failed_records(repeated) == [InputRecord(name="すみれ", address="京都府")]

    def test_no_failures(self):
        assert failed_records(JobLog.empty()) == []
