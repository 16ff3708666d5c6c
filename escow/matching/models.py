"""Data models for the facility matching engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from escow.domain.models import CandidateRecord


class MatchBasis(str, Enum):
    """How two normalized strings were judged similar."""

    EXACT = "exact"
    CONTAINED = "contained"
    REGION = "region"


@dataclass
class CandidateDecision:
    """Verdict for one candidate against one input record.

    Attributes:
        candidate: The search result that was evaluated
        name_basis: How the names matched, or None if they did not
        address_basis: How the addresses matched, or None if they did not
    """

    candidate: CandidateRecord
    name_basis: Optional[MatchBasis] = None
    address_basis: Optional[MatchBasis] = None

    @property
    def accepted(self) -> bool:
        return self.name_basis is not None and self.address_basis is not None

    @property
    def rejection_reason(self) -> Optional[str]:
        if self.accepted:
            return None
        failed = []
        if self.name_basis is None:
            failed.append("name")
        if self.address_basis is None:
            failed.append("address")
        return "+".join(failed)


@dataclass
class MatchEvaluation:
    """Result of evaluating every candidate returned for one input record.

    Attributes:
        decisions: One decision per candidate, in search-result order
    """

    decisions: List[CandidateDecision] = field(default_factory=list)

    @property
    def matches(self) -> List[CandidateRecord]:
        """Accepted candidates, in search-result order."""
        return [d.candidate for d in self.decisions if d.accepted]

    @property
    def rejected(self) -> List[CandidateDecision]:
        return [d for d in self.decisions if not d.accepted]

    @property
    def found(self) -> bool:
        return any(d.accepted for d in self.decisions)
