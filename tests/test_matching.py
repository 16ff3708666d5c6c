"""Unit tests for the facility matching engine."""

import logging
from unittest.mock import MagicMock

from escow.domain.models import CandidateRecord, InputRecord
from escow.matching import (
    FacilityMatcher,
    MatchBasis,
    is_similar_address,
    is_similar_name,
    select_matches,
)


def _candidate(name, address, registry_id=""):
    return CandidateRecord(service_type="通所介護", name=name, address=address, registry_id=registry_id)


class TestIsSimilarName:
    """Tests for is_similar_name."""

    def test_equal_after_normalization(self):
        assert is_similar_name("デイサービス　さくら（本館）", "デイサービスさくら(本館)")

    def test_containment_either_direction(self):
        assert is_similar_name("さくら", "デイサービスさくら")
        assert is_similar_name("デイサービスさくら", "さくら")

    def test_unrelated_names(self):
        assert not is_similar_name("さくら", "ひまわり")

    def test_empty_name_only_matches_empty(self):
        assert not is_similar_name("", "さくら")
        assert not is_similar_name("さくら", "")
        assert is_similar_name("", "")


class TestIsSimilarAddress:
    """Tests for is_similar_address."""

    def test_equal_after_normalization(self):
        assert is_similar_address("東京都世田谷区桜新町１－２－３", "東京都世田谷区桜新町1丁目2番3号")

    def test_containment(self):
        assert is_similar_address("東京都世田谷区桜新町1-2-3", "世田谷区桜新町1-2")

    def test_same_prefecture_and_municipality(self):
        assert is_similar_address("東京都世田谷区桜新町1-2-3", "東京都世田谷区用賀4-5")

    def test_different_municipality(self):
        assert not is_similar_address("東京都世田谷区桜新町1-2-3", "東京都目黒区中町4-5")

    def test_different_prefecture(self):
        assert not is_similar_address("東京都府中市宮町1-1", "広島県府中市府川町1-1")

    def test_region_fallback_needs_municipality_on_both_sides(self):
        assert not is_similar_address("北海道ABC1", "北海道札幌市1")

    def test_no_prefecture_and_no_containment(self):
        assert not is_similar_address("桜新町1-2-3", "用賀4-5")


class TestSelectMatches:
    """Tests for select_matches."""

    def test_requires_both_name_and_address(self):
        record = InputRecord(name="さくら", address="東京都世田谷区桜新町1-2-3")
        candidates = [
            _candidate("デイサービスさくら", "東京都世田谷区桜新町1丁目2番3号", "1"),
            _candidate("デイサービスさくら", "大阪府大阪市北区梅田1-1", "2"),
            _candidate("ひまわり", "東京都世田谷区桜新町1-2-3", "3"),
            _candidate("さくら（分館）", "東京都世田谷区用賀4-5", "4"),
        ]

        matches = select_matches(record, candidates)

        assert [m.registry_id for m in matches] == ["1", "4"]

    def test_no_candidates_is_not_found(self):
        record = InputRecord(name="さくら", address="東京都世田谷区桜新町1-2-3")

        assert select_matches(record, []) == []


class TestFacilityMatcher:
    """Tests for FacilityMatcher.evaluate."""

    def test_decisions_carry_basis_and_rejection_reason(self):
        matcher = FacilityMatcher(logger_instance=MagicMock())
        record = InputRecord(name="さくら", address="東京都世田谷区桜新町1-2-3")
        candidates = [
            _candidate("さくら", "東京都世田谷区用賀4-5"),
            _candidate("ひまわり", "大阪府大阪市北区梅田1-1"),
            _candidate("さくら", "大阪府大阪市北区梅田1-1"),
        ]

        evaluation = matcher.evaluate(record, candidates)

        accepted = evaluation.decisions[0]
        assert accepted.accepted
        assert accepted.name_basis == MatchBasis.EXACT
        assert accepted.address_basis == MatchBasis.REGION
        assert evaluation.decisions[1].rejection_reason == "name+address"
        assert evaluation.decisions[2].rejection_reason == "address"
        assert evaluation.found
        assert evaluation.matches == [candidates[0]]
        assert len(evaluation.rejected) == 2

    def test_logs_each_decision(self):
        mock_logger = MagicMock()
        matcher = FacilityMatcher(logger_instance=mock_logger)
        record = InputRecord(name="さくら", address="東京都世田谷区桜新町1-2-3")

        matcher.evaluate(record, [_candidate("さくら", "東京都世田谷区桜新町1-2-3"), _candidate("x", "y")])

        events = [c.kwargs["extra"]["event"] for c in mock_logger.debug.call_args_list]
        assert events == ["matching.candidate.accepted", "matching.candidate.rejected"]

    def test_default_logger(self):
        assert isinstance(FacilityMatcher().logger, (logging.Logger, logging.LoggerAdapter))

    def test_empty_candidates(self):
        evaluation = FacilityMatcher().evaluate(InputRecord(name="a", address="b"), [])

        assert not evaluation.found
        assert evaluation.matches == []
