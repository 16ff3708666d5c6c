"""Unit tests for domain models."""

import json
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from escow.domain.models import (
    FINGERPRINT_SEPARATOR,
    BreedingRecord,
    CandidateRecord,
    ClassificationCode,
    ExtractionBatch,
    InputRecord,
    JobLog,
    JobTotals,
    MatchOutcome,
    SubmissionRecord,
    fingerprint,
)

OBSERVED = datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def record():
    return InputRecord(name="さくら苑", address="東京都世田谷区桜新町1-2-3")


@pytest.fixture
def candidate():
    return CandidateRecord(
        service_type="通所介護",
        name="デイサービスさくら苑",
        address="東京都世田谷区桜新町1丁目2番3号",
        registry_id="1370000001",
        detail_locator="https://example.com/detail/1370000001",
    )


class TestFingerprint:
    """Tests for the resumability key."""

    def test_uses_unit_separator(self, record):
        assert record.fingerprint == f"さくら苑{FINGERPRINT_SEPARATOR}東京都世田谷区桜新町1-2-3"

    def test_field_boundary_is_unambiguous(self):
        assert fingerprint("ab", "c") != fingerprint("a", "bc")

    def test_whitespace_variants_are_distinct(self):
        assert fingerprint("さくら苑", "x") != fingerprint("さくら苑 ", "x")

    def test_outcome_fingerprint_matches_input(self, record):
        assert MatchOutcome.from_matches(record, []).fingerprint == record.fingerprint


class TestInputRecord:
    """Tests for InputRecord."""

    def test_is_frozen(self, record):
        with pytest.raises(ValidationError):
            record.name = "changed"


class TestCandidateRecord:
    """Tests for CandidateRecord."""

    def test_dumps_camel_case(self, candidate):
        data = candidate.model_dump(by_alias=True)

        assert set(data) == {"serviceType", "name", "address", "registryId", "detailLocator"}

    def test_accepts_legacy_field_names(self):
        candidate = CandidateRecord.model_validate({
            "serviceType": "訪問介護",
            "name": "さくら",
            "address": "東京都",
            "jigyoshoNo": "123",
            "detailUrl": "https://example.com/123",
        })

        assert candidate.registry_id == "123"
        assert candidate.detail_locator == "https://example.com/123"


class TestMatchOutcome:
    """Tests for MatchOutcome invariants and constructors."""

    def test_from_matches_found(self, record, candidate):
        outcome = MatchOutcome.from_matches(record, [candidate], observed_at=OBSERVED)

        assert outcome.found
        assert outcome.matches == [candidate]
        assert outcome.error is None
        assert outcome.observed_at == OBSERVED

    def test_from_matches_not_found(self, record):
        outcome = MatchOutcome.from_matches(record, [])

        assert not outcome.found
        assert not outcome.is_error
        assert outcome.observed_at.tzinfo == timezone.utc

    def test_from_error(self, record):
        outcome = MatchOutcome.from_error(record, "HTTP 503: Service Unavailable")

        assert outcome.is_error
        assert not outcome.found
        assert outcome.matches == []
        assert outcome.error.message == "HTTP 503: Service Unavailable"

    def test_found_without_matches_rejected(self):
        with pytest.raises(ValidationError, match="found must be true exactly when"):
            MatchOutcome(input_name="a", input_address="b", found=True, matches=[])

    def test_matches_without_found_rejected(self, candidate):
        with pytest.raises(ValidationError):
            MatchOutcome(input_name="a", input_address="b", found=False, matches=[candidate])

    def test_error_with_matches_rejected(self, candidate):
        with pytest.raises(ValidationError, match="cannot be found"):
            MatchOutcome(
                input_name="a",
                input_address="b",
                found=True,
                matches=[candidate],
                error={"message": "boom"},
            )

    def test_observed_at_normalized_to_utc(self, record):
        jst = timezone(timedelta(hours=9))

        outcome = MatchOutcome.from_matches(record, [], observed_at=datetime(2025, 1, 15, 19, 0, tzinfo=jst))

        assert outcome.observed_at == OBSERVED

    def test_accepts_legacy_layout(self):
        outcome = MatchOutcome.model_validate({
            "inputName": "さくら",
            "inputAddress": "東京都",
            "found": False,
            "matchedResults": [],
            "searchedAt": "2025-01-15T10:00:00.000Z",
            "error": True,
            "errorMessage": "timeout",
        })

        assert outcome.error.message == "timeout"
        assert outcome.observed_at == OBSERVED

    def test_legacy_error_false_means_no_error(self):
        outcome = MatchOutcome.model_validate({
            "inputName": "さくら",
            "inputAddress": "東京都",
            "found": False,
            "matchedResults": [],
            "searchedAt": "2025-01-15T10:00:00Z",
            "error": False,
        })

        assert outcome.error is None

    def test_to_input_record(self, record):
        assert MatchOutcome.from_error(record, "x").to_input_record() == record


class TestJobLog:
    """Tests for JobLog totals and value semantics."""

    def test_empty(self):
        log = JobLog.empty()

        assert log.outcomes == []
        assert log.last_updated is None
        assert log.totals == JobTotals()

    def test_with_outcome_returns_new_value(self, record, candidate):
        log = JobLog.empty()

        updated = log.with_outcome(MatchOutcome.from_matches(record, [candidate]), now=OBSERVED)

        assert log.outcomes == []
        assert updated.totals.processed == 1
        assert updated.totals.found == 1
        assert updated.last_updated == OBSERVED

    def test_totals_partition_processed(self, record, candidate):
        log = JobLog(outcomes=[
            MatchOutcome.from_matches(record, [candidate]),
            MatchOutcome.from_matches(InputRecord(name="b", address="c"), []),
            MatchOutcome.from_error(InputRecord(name="d", address="e"), "boom"),
        ])

        assert log.totals == JobTotals(processed=3, found=1, not_found=1, errors=1)
        assert log.totals.found + log.totals.not_found + log.totals.errors == log.totals.processed

    def test_stale_totals_are_recomputed_on_load(self, record):
        payload = {
            "outcomes": [MatchOutcome.from_matches(record, []).model_dump(mode="json", by_alias=True)],
            "lastUpdated": "2025-01-15T10:00:00Z",
            "totals": {"processed": 99, "found": 50, "notFound": 40, "errors": 9},
        }

        log = JobLog.model_validate(payload)

        assert log.totals == JobTotals(processed=1, found=0, not_found=1, errors=0)

    def test_legacy_layout_is_upgraded(self):
        payload = {
            "results": [{
                "inputName": "さくら",
                "inputAddress": "東京都",
                "found": True,
                "matchedResults": [{
                    "serviceType": "訪問介護",
                    "name": "さくら",
                    "address": "東京都",
                    "jigyoshoNo": "1",
                    "detailUrl": "",
                }],
                "searchedAt": "2025-01-15T10:00:00Z",
            }],
            "lastUpdated": "2025-01-15T10:00:00Z",
            "totalProcessed": 1,
            "totalFound": 1,
            "totalNotFound": 0,
            "totalErrors": 0,
        }

        log = JobLog.model_validate(payload)

        assert log.totals.found == 1
        assert log.outcomes[0].matches[0].registry_id == "1"

    def test_serializes_camel_case(self, record):
        log = JobLog.empty().with_outcome(MatchOutcome.from_error(record, "boom"), now=OBSERVED)

        data = json.loads(log.model_dump_json(by_alias=True))

        assert set(data) == {"outcomes", "lastUpdated", "totals"}
        assert data["totals"] == {"processed": 1, "found": 0, "notFound": 0, "errors": 1}
        assert data["outcomes"][0]["inputName"] == "さくら苑"
        assert data["outcomes"][0]["error"] == {"message": "boom"}

    def test_processed_and_failed(self, record):
        failed = MatchOutcome.from_error(InputRecord(name="x", address="y"), "boom")
        log = JobLog(outcomes=[MatchOutcome.from_matches(record, []), failed])

        assert log.processed_fingerprints() == {record.fingerprint, failed.fingerprint}
        assert log.failed_outcomes() == [failed]


class TestSubmissionRecord:
    """Tests for SubmissionRecord."""

    def _make(self, code):
        return SubmissionRecord(
            date="2025-01-15",
            owner_id="20",
            individual_id="1234567890",
            classification_code=code,
        )

    @pytest.mark.parametrize("code", ["1", "2", "3", "5", "6"])
    def test_auxiliary_selection_false(self, code):
        assert self._make(code).requires_auxiliary_selection is False

    def test_auxiliary_selection_true_for_pregnant(self):
        assert self._make(ClassificationCode.PREGNANT).requires_auxiliary_selection is True

    def test_invalid_code_rejected(self):
        with pytest.raises(ValidationError):
            self._make("7")

    def test_defaults(self):
        submission = self._make("1")

        assert submission.content_id == ""
        assert submission.quantity == 1
        assert submission.price == 0
        assert submission.staff_id is None

    def test_dump_includes_computed_field(self):
        data = self._make("4").model_dump(mode="json", by_alias=True)

        assert data["classificationCode"] == "4"
        assert data["requiresAuxiliarySelection"] is True
        assert data["ownerId"] == "20"

    def test_hand_edited_auxiliary_flag_is_ignored(self):
        submission = SubmissionRecord.model_validate({
            "date": "2025-01-15",
            "ownerId": "20",
            "individualId": "1",
            "classificationCode": "1",
            "requiresAuxiliarySelection": True,
        })

        assert submission.requires_auxiliary_selection is False

    def test_accepts_legacy_classification_id(self):
        submission = SubmissionRecord.model_validate({
            "date": "2025-01-15",
            "ownerId": "20",
            "individualId": "1",
            "classificationId": "4",
            "contentId": "",
            "quantity": 1,
            "price": 0,
            "memo": "",
            "requiresAuxiliarySelection": True,
        })

        assert submission.classification_code == "4"


class TestExtractionBatch:
    """Tests for ExtractionBatch."""

    def test_parses_breeding_batch(self):
        batch = ExtractionBatch[BreedingRecord].model_validate({
            "records": [{"cowNo": "20016", "individualId": "1", "date": "2025/01/15", "method": "AI"}],
            "scrapedAt": "2025-01-15T10:00:00Z",
            "date": "2025-01-15",
            "totalCount": 1,
        })

        assert batch.records[0].cow_no == "20016"
        assert batch.total_count == 1
