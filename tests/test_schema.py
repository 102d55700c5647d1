"""
Tests for question and payload validation.
"""

import pytest
from hirescore.schema import (
    clean_question,
    validate_application_payload,
    validate_job_payload,
    validate_question,
    validate_questions,
)
from hirescore.types import QuestionType


class TestValidateQuestion:
    """Test rubric validation for a single question."""

    @pytest.mark.parametrize(
        "fixture_name",
        ["single_choice_question", "multi_choice_question", "number_question", "text_question"],
    )
    def test_well_formed_questions_are_valid(self, fixture_name, request):
        """A complete question of each type has no errors."""
        question = request.getfixturevalue(fixture_name)
        assert validate_question(question) == []

    def test_single_choice_missing_correct_option(self):
        """Missing correctOption yields exactly one error."""
        errors = validate_question({
            "text": "Pick one",
            "type": "single_choice",
            "points": 10,
            "options": ["A", "B"],
        })
        assert len(errors) == 1
        assert "correctOption is required" in errors[0]

    def test_single_choice_without_options_is_valid(self):
        """options are optional for single_choice."""
        errors = validate_question({"text": "Q", "type": "single_choice", "points": 1, "correctOption": "A"})
        assert errors == []

    def test_correct_option_not_in_options(self, single_choice_question):
        single_choice_question["correctOption"] = "7"
        assert validate_question(single_choice_question) == ["correctOption must be in options list"]

    def test_multi_choice_missing_correct_options(self):
        errors = validate_question({"text": "Pick", "type": "multi_choice", "points": 10, "options": ["A", "B"]})
        assert errors == ["correctOptions is required for multi_choice type"]

    def test_multi_choice_empty_correct_options(self, multi_choice_question):
        multi_choice_question["correctOptions"] = []
        assert validate_question(multi_choice_question) == ["correctOptions is required for multi_choice type"]

    def test_multi_choice_correct_options_outside_options(self, multi_choice_question):
        multi_choice_question["correctOptions"] = ["2", "8"]
        assert validate_question(multi_choice_question) == ["All correctOptions must be in options list"]

    def test_number_missing_bounds(self):
        """Both missing bounds are reported, and no range error."""
        errors = validate_question({"text": "Enter number", "type": "number", "points": 10})
        assert errors == ["min is required for number type", "max is required for number type"]

    def test_number_inverted_range(self, number_question):
        """max < min yields only the range error since both are present."""
        number_question.update({"min": 5, "max": 2})
        errors = validate_question(number_question)
        assert errors == ["max must be greater than or equal to min"]

    def test_number_equal_bounds_are_valid(self, number_question):
        number_question.update({"min": 3, "max": 3})
        assert validate_question(number_question) == []

    def test_number_zero_min_counts_as_present(self, number_question):
        number_question.update({"min": 0, "max": 0})
        assert validate_question(number_question) == []

    def test_text_missing_keywords(self):
        errors = validate_question({"text": "Describe yourself", "type": "text", "points": 10})
        assert errors == ["keywords are required for text type"]

    def test_text_empty_keywords(self, text_question):
        text_question["keywords"] = []
        assert validate_question(text_question) == ["keywords are required for text type"]

    def test_blank_text(self, text_question):
        text_question["text"] = "   "
        assert validate_question(text_question) == ["Question text is required"]

    @pytest.mark.parametrize("points", [0, -5, None, "10", True])
    def test_points_must_be_positive_number(self, text_question, points):
        text_question["points"] = points
        assert validate_question(text_question) == ["Points must be greater than 0"]

    def test_fractional_points_are_valid(self, text_question):
        text_question["points"] = 0.5
        assert validate_question(text_question) == []

    def test_invalid_type_skips_variant_checks(self):
        """Unknown type reports only the generic errors."""
        errors = validate_question({"text": "Q", "type": "essay", "points": 5})
        assert errors == ["Invalid question type"]

    def test_errors_accumulate_in_rule_order(self):
        errors = validate_question({"text": "", "type": "number", "points": 0, "min": 4})
        assert errors == [
            "Question text is required",
            "Points must be greater than 0",
            "max is required for number type",
        ]

    @pytest.mark.parametrize("question", [None, [], "text", 42, {}])
    def test_never_raises_on_malformed_input(self, question):
        """Non-mapping input is treated as an empty question."""
        errors = validate_question(question)
        assert errors == [
            "Question text is required",
            "Invalid question type",
            "Points must be greater than 0",
        ]

    def test_wrong_typed_fields_count_as_missing(self):
        errors = validate_question({"text": "Q", "type": "number", "points": 1, "min": "0", "max": [5]})
        assert errors == ["min is required for number type", "max is required for number type"]

    def test_non_string_keywords_count_as_missing(self, text_question):
        text_question["keywords"] = ["node", 5]
        assert validate_question(text_question) == ["keywords are required for text type"]


class TestValidateQuestions:
    """Batch validation prefixes messages with the question index."""

    def test_indexes_are_one_based(self, single_choice_question):
        errors = validate_questions([single_choice_question, {"text": "Q", "type": "text", "points": 1}])
        assert errors == ["Question 2: keywords are required for text type"]

    def test_empty_batch(self):
        assert validate_questions([]) == []


class TestCleanQuestion:
    """Stored questions keep only the fields their type uses."""

    def test_drops_unrelated_fields(self, number_question):
        number_question["keywords"] = "ignored"
        cleaned = clean_question(number_question)
        assert cleaned == {
            "text": "Years of experience?",
            "type": QuestionType.NUMBER,
            "points": 10,
            "min": 0,
            "max": 20,
        }

    def test_drops_malformed_options(self):
        cleaned = clean_question({
            "text": "Q", "type": "single_choice", "points": 1, "options": "A,B", "correctOption": "A",
        })
        assert "options" not in cleaned
        assert cleaned["correctOption"] == "A"


class TestValidateJobPayload:
    """Field checks run before question validation."""

    def test_valid_payload(self, job_payload):
        assert validate_job_payload(job_payload) == []

    def test_missing_fields(self):
        errors = validate_job_payload({"title": "  ", "questions": []})
        assert errors == [
            "Title is required",
            "Location is required",
            "Customer is required",
            "Job name is required",
            "Description is required",
            "At least one question is required",
        ]

    def test_non_object_body(self):
        assert validate_job_payload(["not", "an", "object"]) == ["Request body must be a JSON object"]


class TestValidateApplicationPayload:

    def test_valid_payload(self):
        data = {
            "jobId": "00000000-0000-0000-0000-000000000000",
            "candidateName": "Test User",
            "candidateEmail": "test@example.com",
            "answers": [],
        }
        assert validate_application_payload(data) == []

    def test_invalid_fields(self):
        data = {"jobId": "abc", "candidateName": "", "candidateEmail": "invalid-email"}
        assert validate_application_payload(data) == [
            "Invalid job ID",
            "Candidate name is required",
            "Valid email is required",
            "Answers field is required",
        ]
