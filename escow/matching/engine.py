"""Facility matching engine.

Decides which directory search results are the facility described by an
input record. A candidate is accepted only when BOTH its name and its
address are similar to the input's:

- names: equal or one contains the other, after normalization
- addresses: equal or one contains the other, after normalization; failing
  that, same prefecture and same first municipality token

There is no edit-distance or phonetic scoring.
"""

import logging
from typing import List, Optional, Sequence

from escow.domain.models import CandidateRecord, InputRecord
from escow.logging import get_logger
from escow.normalization.models import MatchableFacility
from escow.normalization.service import extract_region, normalize_address, normalize_name

from .models import CandidateDecision, MatchBasis, MatchEvaluation

logger = get_logger(__name__, component="matching")


def _containment_basis(left: str, right: str) -> Optional[MatchBasis]:
    # An empty side would be "contained" in everything, so it only equals empty
    if left == right:
        return MatchBasis.EXACT
    if left and right and (left in right or right in left):
        return MatchBasis.CONTAINED
    return None


def _address_basis(left: str, right: str) -> Optional[MatchBasis]:
    """Compare two already-normalized addresses."""
    basis = _containment_basis(left, right)
    if basis is not None:
        return basis

    left_region = extract_region(left)
    right_region = extract_region(right)
    if left_region is None or right_region is None:
        return None
    if left_region.prefecture != right_region.prefecture:
        return None
    if left_region.municipality is None or right_region.municipality is None:
        return None
    if left_region.municipality == right_region.municipality:
        return MatchBasis.REGION
    return None


def is_similar_address(input_address: str, candidate_address: str) -> bool:
    """Check whether two free-text addresses denote the same place.

    Example:
        >>> is_similar_address("東京都世田谷区桜新町１－２－３", "東京都世田谷区桜新町1丁目2番3号")
        True
        >>> is_similar_address("東京都世田谷区桜新町1-2-3", "東京都世田谷区用賀4-5")
        True
    """
    return _address_basis(normalize_address(input_address), normalize_address(candidate_address)) is not None


def is_similar_name(input_name: str, candidate_name: str) -> bool:
    """Check whether two facility names are equal or nested after normalization."""
    return _containment_basis(normalize_name(input_name), normalize_name(candidate_name)) is not None


def select_matches(record: InputRecord, candidates: Sequence[CandidateRecord]) -> List[CandidateRecord]:
    """Return the candidates whose name AND address are similar to the record's.

    Candidate order is preserved. An empty list means "not found", which is
    a normal outcome.
    """
    return FacilityMatcher().evaluate(record, candidates).matches


class FacilityMatcher:
    """Evaluates directory search results against an input record.

    Wraps the module-level similarity rules and records, per candidate, which
    rule accepted or rejected it so lookups can be debugged from the logs.
    """

    def __init__(self, logger_instance: Optional[logging.Logger] = None):
        """Initialize FacilityMatcher.

        Args:
            logger_instance: Optional logger (defaults to module logger)
        """
        self.logger = logger_instance or logger

    def evaluate(self, record: InputRecord, candidates: Sequence[CandidateRecord]) -> MatchEvaluation:
        """Evaluate every candidate for one input record.

        Algorithm:
        1. Normalize the input once
        2. For each candidate, normalize and compare names
        3. Compare addresses (containment, then region fallback)
        4. Log accepted and rejected candidates

        Args:
            record: The facility being looked up
            candidates: Search results, in the order the directory returned them

        Returns:
            MatchEvaluation with one decision per candidate
        """
        target = MatchableFacility.from_input(record)
        evaluation = MatchEvaluation()

        for candidate in candidates:
            facility = MatchableFacility.from_candidate(candidate)
            decision = CandidateDecision(
                candidate=candidate,
                name_basis=_containment_basis(target.name_normalized, facility.name_normalized),
                address_basis=_address_basis(target.address_normalized, facility.address_normalized),
            )
            evaluation.decisions.append(decision)

            if decision.accepted:
                self.logger.debug(
                    f"Candidate accepted: {candidate.name}",
                    extra={
                        "event": "matching.candidate.accepted",
                        "candidate_name": candidate.name,
                        "registry_id": candidate.registry_id,
                        "name_basis": decision.name_basis.value,
                        "address_basis": decision.address_basis.value,
                    },
                )
            else:
                self.logger.debug(
                    f"Candidate rejected: {candidate.name}",
                    extra={
                        "event": "matching.candidate.rejected",
                        "candidate_name": candidate.name,
                        "registry_id": candidate.registry_id,
                        "reason": decision.rejection_reason,
                    },
                )

        return evaluation
