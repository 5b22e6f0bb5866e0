"""Tests for the phase content provider."""

import pytest

from codehunt import content
from codehunt.exceptions import NotFoundError, ValidationError


class TestPublicQuestions:
    @pytest.mark.parametrize("phase", [2, 3, 4, 5])
    def test_answer_keys_stripped(self, phase):
        for item in content.get_public_questions(phase):
            assert "correctAnswer" not in item
            assert "acceptedAnswers" not in item
            assert "id" in item

    def test_order_and_counts(self):
        assert [q["id"] for q in content.get_public_questions(2)] == list(range(1, 11))
        assert len(content.get_public_questions(3)) == 5
        assert len(content.get_public_questions(4)) == 1
        assert len(content.get_public_questions(5)) == 3

    def test_phase3_shape(self):
        first = content.get_public_questions(3)[0]
        assert set(first) == {"id", "code", "question", "options"}
        assert first["code"].startswith("#include <stdio.h>")

    def test_phase5_carries_type(self):
        kinds = [r["type"] for r in content.get_public_questions(5)]
        assert kinds == ["mcq", "mcq", "text"]
        assert "options" not in content.get_public_questions(5)[2]

    def test_phase_without_content(self):
        with pytest.raises(NotFoundError):
            content.get_public_questions(1)

    def test_full_items_include_keys(self):
        full = content.full_items(3)
        assert [q["correctAnswer"] for q in full] == [0, 1, 0, 0, 2]


class TestCheckSingleAnswer:
    def test_mcq_strict_equality(self):
        assert content.check_single_answer(2, 1, 2) is True
        assert content.check_single_answer(2, 1, "2") is False
        assert content.check_single_answer(2, 1, 2.5) is False
        assert content.check_single_answer(2, 1, 2.0) is True
        assert content.check_single_answer(2, 1, float("nan")) is False
        assert content.check_single_answer(2, 2, False) is False

    def test_text_trim_and_case(self):
        assert content.check_single_answer(5, 3, "  Bldg 2 ") is True
        assert content.check_single_answer(5, 3, "BLDG2") is True
        assert content.check_single_answer(5, 3, "bldg 3") is False
        assert content.check_single_answer(5, 3, None) is False

    def test_unknown_item(self):
        with pytest.raises(NotFoundError):
            content.check_single_answer(5, 42, 1)

    def test_item_at_bounds(self):
        assert content.item_at(2, 0).id == 1
        assert content.item_at(2, 9).id == 10
        for bad in (-1, 10):
            with pytest.raises(ValidationError, match="Invalid question index"):
                content.item_at(2, bad)
