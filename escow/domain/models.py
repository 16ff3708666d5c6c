"""Core domain models for lookups, job logs, and breeding-record submissions.

This module defines the data structures used throughout the application:
- InputRecord: one facility name/address pair to look up
- CandidateRecord: one row returned by a directory search
- MatchOutcome: the recorded result of looking up one InputRecord
- JobLog: the resumable, append-only log of outcomes for a batch
- BreedingRecord / PregnancyRecord: events extracted from the herd system
- ExtractionBatch: one day's extracted events as written by the extractor
- SubmissionRecord: a billing entry derived from one extracted event

Python attributes are snake_case; documents on disk use camelCase field
names (``inputName``, ``lastUpdated``, ...), so every model reads and writes
its aliases.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Generic, List, Optional, Set, TypeVar

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from escow.utils.timestamps import ensure_utc, utc_now

# ASCII unit separator; never present in CSV cell text
FINGERPRINT_SEPARATOR = "\x1f"

_CAMEL_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}


def fingerprint(name: str, address: str) -> str:
    """Build the resumability key for a name/address pair.

    The key is the exact, order-sensitive concatenation of both fields, so
    two records differing only in whitespace are distinct inputs.
    """
    return f"{name}{FINGERPRINT_SEPARATOR}{address}"


class InputRecord(BaseModel):
    """A facility to look up, as read from the input CSV."""

    name: str = Field(..., description="Facility name as written in the input")
    address: str = Field(..., description="Facility address as written in the input")

    @property
    def fingerprint(self) -> str:
        return fingerprint(self.name, self.address)

    model_config = {**_CAMEL_CONFIG, "frozen": True}


class CandidateRecord(BaseModel):
    """One search result row from the facility directory.

    Exists only for the duration of one match operation unless it is kept
    as a match inside a MatchOutcome.
    """

    service_type: str = Field("", description="Service category shown in the result row")
    name: str = Field(..., description="Facility name")
    address: str = Field("", description="Facility address")
    registry_id: str = Field("", description="Directory registration number")
    detail_locator: str = Field("", description="Link to the facility's detail page")

    @model_validator(mode="before")
    @classmethod
    def upgrade_legacy_fields(cls, data: Any) -> Any:
        """Accept rows written by the earlier scraper (``jigyoshoNo``, ``detailUrl``)."""
        if isinstance(data, dict):
            data = dict(data)
            if "jigyoshoNo" in data:
                data.setdefault("registryId", data.pop("jigyoshoNo"))
            if "detailUrl" in data:
                data.setdefault("detailLocator", data.pop("detailUrl"))
        return data

    model_config = {**_CAMEL_CONFIG, "frozen": True, "json_schema_extra": {"example": {
        "serviceType": "訪問介護",
        "name": "さくら訪問介護ステーション",
        "address": "東京都世田谷区桜新町1-2-3",
        "registryId": "1370000001",
        "detailLocator": "https://www.wam.go.jp/sfkohyoout/COP000100E0000.do?jigyosyoCd=1370000001",
    }}}


class OutcomeError(BaseModel):
    """Failure detail attached to a MatchOutcome whose lookup raised."""

    message: str

    model_config = {"frozen": True}


class MatchOutcome(BaseModel):
    """Recorded result of looking up one InputRecord.

    Invariants (validated on construction and on load):
    - ``found`` is true iff ``matches`` is non-empty and no error is set
    - an error implies ``found`` is false and ``matches`` is empty
    """

    input_name: str = Field(..., description="InputRecord.name")
    input_address: str = Field(..., description="InputRecord.address")
    found: bool = Field(False, description="True when at least one candidate matched")
    matches: List[CandidateRecord] = Field(default_factory=list)
    observed_at: datetime = Field(default_factory=utc_now, description="When the lookup ran (UTC)")
    error: Optional[OutcomeError] = Field(None, description="Set when the lookup failed")

    @model_validator(mode="before")
    @classmethod
    def upgrade_legacy_fields(cls, data: Any) -> Any:
        """Accept outcomes written by the earlier scraper.

        That layout used ``matchedResults``, ``searchedAt`` and a boolean
        ``error`` flag next to ``errorMessage``.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "matchedResults" in data and "matches" not in data:
            data["matches"] = data.pop("matchedResults")
        if "searchedAt" in data and "observedAt" not in data and "observed_at" not in data:
            data["observedAt"] = data.pop("searchedAt")
        error = data.get("error")
        if isinstance(error, str):
            data["error"] = {"message": error}
        elif error is True:
            data["error"] = {"message": data.pop("errorMessage", "") or "unknown error"}
        elif error is False:
            data["error"] = None
        data.pop("errorMessage", None)
        return data

    @field_validator("observed_at")
    @classmethod
    def normalize_observed_at(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @model_validator(mode="after")
    def check_found_consistency(self):
        if self.error is not None:
            if self.found or self.matches:
                raise ValueError("An outcome with an error cannot be found or carry matches")
        elif self.found != bool(self.matches):
            raise ValueError("found must be true exactly when matches is non-empty")
        return self

    @classmethod
    def from_matches(
        cls,
        record: InputRecord,
        matches: List[CandidateRecord],
        observed_at: Optional[datetime] = None,
    ) -> "MatchOutcome":
        """Build a found/not-found outcome from the accepted candidates."""
        return cls(
            input_name=record.name,
            input_address=record.address,
            found=bool(matches),
            matches=list(matches),
            observed_at=observed_at or utc_now(),
        )

    @classmethod
    def from_error(
        cls,
        record: InputRecord,
        message: str,
        observed_at: Optional[datetime] = None,
    ) -> "MatchOutcome":
        """Build an error outcome for a lookup that failed."""
        return cls(
            input_name=record.name,
            input_address=record.address,
            found=False,
            matches=[],
            observed_at=observed_at or utc_now(),
            error=OutcomeError(message=message),
        )

    @property
    def fingerprint(self) -> str:
        return fingerprint(self.input_name, self.input_address)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_input_record(self) -> InputRecord:
        return InputRecord(name=self.input_name, address=self.input_address)

    model_config = {**_CAMEL_CONFIG, "frozen": True}


class JobTotals(BaseModel):
    """Outcome counters for a JobLog. Always derived, never edited by hand."""

    processed: int = 0
    found: int = 0
    not_found: int = 0
    errors: int = 0

    @classmethod
    def from_outcomes(cls, outcomes: List[MatchOutcome]) -> "JobTotals":
        errors = sum(1 for o in outcomes if o.is_error)
        found = sum(1 for o in outcomes if o.found)
        return cls(
            processed=len(outcomes),
            found=found,
            not_found=len(outcomes) - found - errors,
            errors=errors,
        )

    model_config = {**_CAMEL_CONFIG, "frozen": True}


class JobLog(BaseModel):
    """Append-only log of lookup outcomes for one batch.

    ``totals`` is recomputed from ``outcomes`` on every validation, so
    ``totals.processed == len(outcomes)`` holds for every JobLog value,
    including one loaded from a file whose totals were edited or stale.

    A JobLog is treated as a value: ``with_outcome`` returns a new log and
    leaves the receiver untouched.
    """

    outcomes: List[MatchOutcome] = Field(default_factory=list)
    last_updated: Optional[datetime] = Field(None, description="Time of the last append (UTC)")
    totals: JobTotals = Field(default_factory=JobTotals)

    @model_validator(mode="before")
    @classmethod
    def upgrade_legacy_layout(cls, data: Any) -> Any:
        """Accept the earlier ``{results, totalProcessed, totalFound, ...}`` layout."""
        if isinstance(data, dict) and "results" in data and "outcomes" not in data:
            data = dict(data)
            data["outcomes"] = data.pop("results")
            for legacy_key in ("totalProcessed", "totalFound", "totalNotFound", "totalErrors"):
                data.pop(legacy_key, None)
        return data

    @field_validator("last_updated")
    @classmethod
    def normalize_last_updated(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @model_validator(mode="after")
    def recompute_totals(self):
        self.totals = JobTotals.from_outcomes(self.outcomes)
        return self

    @classmethod
    def empty(cls) -> "JobLog":
        return cls(outcomes=[], last_updated=None)

    def with_outcome(self, outcome: MatchOutcome, now: Optional[datetime] = None) -> "JobLog":
        """Return a new log with ``outcome`` appended and lastUpdated advanced."""
        return JobLog(outcomes=[*self.outcomes, outcome], last_updated=now or utc_now())

    def processed_fingerprints(self) -> Set[str]:
        return {outcome.fingerprint for outcome in self.outcomes}

    def failed_outcomes(self) -> List[MatchOutcome]:
        return [outcome for outcome in self.outcomes if outcome.is_error]

    model_config = _CAMEL_CONFIG


class BreedingRecord(BaseModel):
    """An insemination/transfer/estrus event extracted from the herd system."""

    cow_no: str = Field("", description="Herd-local cow number")
    individual_id: str = Field("", description="National individual identification number")
    date: str = Field("", description="Event date as displayed (YYYY/MM/DD)")
    staff: str = ""
    time: str = ""
    method: str = Field("", description="Free-text method, e.g. 人工授精, 受精卵移植, 発情")
    semen_name: str = ""
    semen_no: str = Field("", description="Semen/embryo identifier used as the billed content id")
    memo: str = ""

    model_config = {**_CAMEL_CONFIG, "frozen": True}


class PregnancyRecord(BaseModel):
    """A pregnancy-check result extracted from the herd system."""

    cow_no: str = ""
    individual_id: str = ""
    date: str = ""
    staff: str = ""
    time: str = ""
    result: str = Field("", description="Free-text result, e.g. 受胎, 未受胎, +, -")
    memo: str = ""

    model_config = {**_CAMEL_CONFIG, "frozen": True}


RecordT = TypeVar("RecordT", bound=BaseModel)


class ExtractionBatch(BaseModel, Generic[RecordT]):
    """One day's extracted records as written by the extraction step."""

    records: List[RecordT] = Field(default_factory=list)
    scraped_at: Optional[datetime] = None
    date: str = Field(..., description="Batch date (YYYY-MM-DD)")
    total_count: int = Field(0, ge=0)

    model_config = _CAMEL_CONFIG


class ClassificationCode(str, Enum):
    """Billing classification codes for breeding and pregnancy entries."""

    INSEMINATION = "1"
    EMBRYO_TRANSFER = "2"
    ESTRUS = "3"
    PREGNANT = "4"
    OPEN = "5"
    UNDETERMINED = "6"


class SubmissionRecord(BaseModel):
    """A billing entry derived deterministically from one extracted event.

    ``requires_auxiliary_selection`` is computed from the classification
    code, so an operator editing the batch file cannot make the two
    disagree; any value for it found in the file is ignored on load.
    """

    date: str = Field(..., description="Entry date (YYYY-MM-DD)")
    owner_id: str = Field(..., description="Owner code derived from the cow number")
    individual_id: str = Field(..., description="National individual identification number")
    classification_code: ClassificationCode = Field(..., description="Billing classification (1-6)")
    content_id: str = Field("", description="Semen/embryo id for breeding entries")
    quantity: int = Field(1, ge=0)
    price: int = Field(0, ge=0)
    memo: str = ""
    staff_id: Optional[str] = None
    veterinarian_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def upgrade_legacy_fields(cls, data: Any) -> Any:
        """Accept entries written by the earlier tool (``classificationId``)."""
        if isinstance(data, dict) and "classificationId" in data:
            data = dict(data)
            data.setdefault("classificationCode", data.pop("classificationId"))
        return data

    @computed_field(alias="requiresAuxiliarySelection")
    @property
    def requires_auxiliary_selection(self) -> bool:
        """Pregnant entries need the insemination date picked on the billing form."""
        return self.classification_code == ClassificationCode.PREGNANT

    model_config = {**_CAMEL_CONFIG, "frozen": True, "use_enum_values": True}
