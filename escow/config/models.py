"""Configuration schema models using Pydantic."""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .duration import DurationParseError, parse_duration, validate_duration_range

DEFAULT_SEARCH_URL = "https://www.wam.go.jp/wamappl/kpdrsys.nsf/vhtml/byname?Open"
DEFAULT_QUERY_PARAM = "searchtext"
DEFAULT_USER_AGENT = "escow/0.3 (+facility-lookup)"

MIN_REQUEST_DELAY_SECONDS = 1
MAX_REQUEST_DELAY_SECONDS = 600


class DirectoryType(str, Enum):
    """Supported facility directories."""

    WAM = "wam"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class LookupConfig(BaseModel):
    """Facility directory lookup settings."""

    directory: DirectoryType = Field(DirectoryType.WAM, description="Directory to search")
    search_url: str = Field(DEFAULT_SEARCH_URL, description="Name-search endpoint")
    query_param: str = Field(DEFAULT_QUERY_PARAM, min_length=1, description="Query parameter carrying the name")
    request_timeout: int = Field(30, ge=5, le=300, description="HTTP timeout in seconds")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header")
    request_delay_min: str = Field("2s", description="Shortest pause between two lookups")
    request_delay_max: str = Field("4s", description="Longest pause between two lookups")

    # Computed fields
    request_delay_min_seconds: Optional[int] = None
    request_delay_max_seconds: Optional[int] = None

    @field_validator("search_url")
    @classmethod
    def validate_search_url(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped.startswith(("http://", "https://")):
            raise ValueError("search_url must start with http:// or https://")
        return stripped

    @field_validator("user_agent", "query_param")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @field_validator("request_delay_min", "request_delay_max")
    @classmethod
    def validate_delay(cls, v: str, info) -> str:
        try:
            seconds = parse_duration(v)
            validate_duration_range(
                seconds,
                min_seconds=MIN_REQUEST_DELAY_SECONDS,
                max_seconds=MAX_REQUEST_DELAY_SECONDS,
                label=info.field_name,
            )
        except DurationParseError as e:
            raise ValueError(str(e)) from e
        return v

    @model_validator(mode="after")
    def compute_delay_bounds(self):
        self.request_delay_min_seconds = parse_duration(self.request_delay_min)
        self.request_delay_max_seconds = parse_duration(self.request_delay_max)
        if self.request_delay_min_seconds > self.request_delay_max_seconds:
            raise ValueError(
                f"request_delay_min ({self.request_delay_min}) cannot exceed "
                f"request_delay_max ({self.request_delay_max})"
            )
        return self

    model_config = {"use_enum_values": True, "validate_default": True}


class PathsConfig(BaseModel):
    """File locations. Relative input/job-log paths are taken as-is, not under data_dir."""

    data_dir: Path = Field(Path("data"), description="Directory for batch files and exports")
    input_csv: Optional[Path] = Field(None, description="Input CSV (default: <data_dir>/input.csv)")
    job_log: Optional[Path] = Field(None, description="Job log (default: <data_dir>/output.json)")

    def resolved_input_csv(self) -> Path:
        return self.input_csv or self.data_dir / "input.csv"

    def resolved_job_log(self) -> Path:
        return self.job_log or self.data_dir / "output.json"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True, "validate_default": True}


class AppConfig(BaseModel):
    """Root configuration object for escow."""

    lookup: LookupConfig = Field(default_factory=LookupConfig, description="Directory lookup settings")
    paths: PathsConfig = Field(default_factory=PathsConfig, description="File locations")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
