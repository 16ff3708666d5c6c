"""Facility matching: which directory rows describe an input record.

This module provides:
- FacilityMatcher: evaluates every candidate and logs each decision
- MatchEvaluation / CandidateDecision: per-candidate verdicts
- is_similar_name / is_similar_address / select_matches: plain predicates
"""

from .engine import FacilityMatcher, is_similar_address, is_similar_name, select_matches
from .models import CandidateDecision, MatchBasis, MatchEvaluation

__all__ = [
    "FacilityMatcher",
    "MatchEvaluation",
    "CandidateDecision",
    "MatchBasis",
    "is_similar_address",
    "is_similar_name",
    "select_matches",
]
