"""Data models for the normalization layer."""

from dataclasses import dataclass
from typing import Optional

from escow.domain.models import CandidateRecord, InputRecord


@dataclass(frozen=True)
class AddressRegion:
    """Prefecture plus the first municipality token of a normalized address.

    Attributes:
        prefecture: One of the 47 prefecture names
        municipality: Text up to and including the first 市/区/町/村 after the
            prefecture, or None when no marker follows
    """

    prefecture: str
    municipality: Optional[str]


@dataclass(frozen=True)
class MatchableFacility:
    """Original and normalized variants of one name/address pair.

    Keeps the original strings for logs and reports while the matcher
    compares only the normalized forms.
    """

    name_original: str
    name_normalized: str
    address_original: str
    address_normalized: str

    @classmethod
    def from_values(cls, name: str, address: str) -> "MatchableFacility":
        from .service import normalize_address, normalize_name

        return cls(
            name_original=name,
            name_normalized=normalize_name(name),
            address_original=address,
            address_normalized=normalize_address(address),
        )

    @classmethod
    def from_input(cls, record: InputRecord) -> "MatchableFacility":
        return cls.from_values(record.name, record.address)

    @classmethod
    def from_candidate(cls, candidate: CandidateRecord) -> "MatchableFacility":
        return cls.from_values(candidate.name, candidate.address)
