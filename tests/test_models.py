"""Tests for succubus_realm.models."""

import pytest
from pydantic import ValidationError

from succubus_realm.models import LikesDocument, ReconcileReport, empty_likes, validate_likes


class TestValidateLikes:
    def test_zero_is_valid(self) -> None:
        assert validate_likes({"likes": {"1": 0}}).valid is True

    def test_empty_map_is_valid(self) -> None:
        result = validate_likes({"likes": {}})
        assert result.valid is True
        assert result.error is None

    def test_negative_rejected(self) -> None:
        """The error names the id and the offending value."""
        result = validate_likes({"likes": {"1": -1}})
        assert result.valid is False
        assert "1" in result.error
        assert "-1" in result.error

    def test_string_count_rejected(self) -> None:
        result = validate_likes({"likes": {"1": "x"}})
        assert result.valid is False
        assert "'x'" in result.error

    def test_numeric_string_rejected(self) -> None:
        """Counts are strict ints: no coercion from strings."""
        assert validate_likes({"likes": {"1": "5"}}).valid is False

    def test_float_rejected(self) -> None:
        assert validate_likes({"likes": {"1": 1.5}}).valid is False

    def test_bool_rejected(self) -> None:
        """bool is an int subclass but not a count."""
        assert validate_likes({"likes": {"1": True}}).valid is False

    def test_null_rejected(self) -> None:
        assert validate_likes({"likes": {"1": None}}).valid is False

    def test_first_violation_reported(self) -> None:
        """Only the first bad entry is described."""
        result = validate_likes({"likes": {"1": 2, "7": -3, "9": "x"}})
        assert result.valid is False
        assert "7" in result.error
        assert "9" not in result.error

    def test_not_an_object(self) -> None:
        """Non-dict documents fail before field validation."""
        for doc in (None, [], "likes", 3):
            result = validate_likes(doc)
            assert result.valid is False
            assert result.error == "Likes document is not an object"

    def test_missing_likes_property(self) -> None:
        result = validate_likes({"succubi": []})
        assert result.valid is False
        assert "'likes'" in result.error

    def test_likes_not_an_object(self) -> None:
        assert validate_likes({"likes": [1, 2]}).valid is False
        assert validate_likes({"likes": None}).valid is False

    def test_extra_top_level_keys_allowed(self) -> None:
        assert validate_likes({"likes": {"1": 4}, "updated": "today"}).valid is True


class TestLikesDocument:
    def test_strict_counts(self) -> None:
        with pytest.raises(ValidationError):
            LikesDocument(likes={"1": "3"})

    def test_accepts_counts(self) -> None:
        doc = LikesDocument(likes={"1": 3, "2": 0})
        assert doc.likes == {"1": 3, "2": 0}


def test_empty_likes_is_fresh_each_call() -> None:
    """Callers may mutate the result freely."""
    a = empty_likes()
    a["likes"]["1"] = 5
    assert empty_likes() == {"likes": {}}


def test_report_changed() -> None:
    """Issues alone do not count as a change."""
    assert ReconcileReport().changed is False
    assert ReconcileReport(seeded=["2"]).changed is True
    assert ReconcileReport(removed=["3"]).changed is True
    assert ReconcileReport(issues=["Character 'X' has no id"]).changed is False
