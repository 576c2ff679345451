"""Tests for mutation error classification."""

import logging
import re

import pytest

from beeswax_client.exceptions import StatusCodeError
from beeswax_client.models import FailureKind
from beeswax_client.utils.errors import (
    ASSOCIATED_CAMPAIGNS_MESSAGE,
    NOT_FOUND_MESSAGE,
    ErrorClassifier,
    ErrorPatterns,
    field_errors,
    payload_messages,
)

ASSOCIATED = "Cannot delete this advertiser. It has one or more associated campaigns."


def error(status, body):
    return StatusCodeError(status, error=body, method="PATCH", url="/rest/v2/advertisers/1")


@pytest.fixture
def classifier():
    return ErrorClassifier()


class TestExtraction:
    """Test message extraction helpers."""

    def test_field_errors_only_on_400(self):
        body = {"non_field_errors": ["x"]}
        assert field_errors(error(400, body)) == ["x"]
        assert field_errors(error(409, body)) == []

    def test_field_errors_string(self):
        assert field_errors(error(400, {"non_field_errors": "single"})) == ["single"]

    def test_field_errors_non_dict_body(self):
        assert field_errors(error(400, "plain text")) == []

    def test_payload_messages_flattened(self):
        body = {
            "payload": [
                {"message": ["a", "b"]},
                {"message": "c"},
                {"other": 1},
                "junk",
            ]
        }
        assert payload_messages(error(400, body)) == ["a", "b", "c"]

    def test_payload_messages_missing(self):
        assert payload_messages(error(400, {"payload": {"message": "x"}})) == []
        assert payload_messages(error(400, None)) == []


class TestClassifyUpdate:
    """Test classification of failed PATCH/PUT."""

    def test_field_errors_win_over_not_found(self, classifier):
        body = {
            "non_field_errors": ["Bad dates"],
            "payload": [{"message": ["Could not load object 1 to update"]}],
        }
        result = classifier.classify_update(error(400, body))
        assert result.message == "Error(s): Bad dates"

    def test_not_found(self, classifier):
        body = {"payload": [{"message": ["Could not load object 1 to update"]}]}
        result = classifier.classify_update(error(400, body))
        assert result.message == NOT_FOUND_MESSAGE
        assert result.code == 400
        assert result.kind == FailureKind.NOT_FOUND

    def test_not_found_with_other_status(self, classifier):
        body = {"payload": [{"message": ["Could not load object 1 to update"]}]}
        assert classifier.classify_update(error(404, body)).message == NOT_FOUND_MESSAGE

    def test_not_found_reraised(self, classifier):
        original = error(400, {"payload": [{"message": ["Could not load object 1 to update"]}]})
        with pytest.raises(StatusCodeError) as exc_info:
            classifier.classify_update(original, fail_on_not_found=True)
        assert exc_info.value is original

    def test_unrecognized_reraised(self, classifier):
        original = error(502, "bad gateway")
        with pytest.raises(StatusCodeError) as exc_info:
            classifier.classify_update(original)
        assert exc_info.value is original


class TestClassifyDelete:
    """Test classification of failed DELETE."""

    def test_associated_entities(self, classifier):
        result = classifier.classify_delete(error(400, {"non_field_errors": [ASSOCIATED]}))
        assert result.message == ASSOCIATED_CAMPAIGNS_MESSAGE
        assert result.kind == FailureKind.ASSOCIATED_ENTITY_CONFLICT

    def test_other_errors_logged_not_folded(self, classifier, caplog):
        body = {"non_field_errors": ["Locked", ASSOCIATED]}
        with caplog.at_level(logging.WARNING, logger="beeswax_client.utils.errors"):
            result = classifier.classify_delete(error(400, body))

        assert result.message == ASSOCIATED_CAMPAIGNS_MESSAGE
        assert "Locked" in caplog.text

    def test_field_errors_without_association(self, classifier):
        result = classifier.classify_delete(error(400, {"non_field_errors": ["A", "B"]}))
        assert result.message == "Error(s): A, B"

    def test_not_found(self, classifier):
        body = {"payload": [{"message": ["Could not load object 3 to delete"]}]}
        assert classifier.classify_delete(error(400, body)).message == NOT_FOUND_MESSAGE

    def test_unrecognized_reraised(self, classifier):
        with pytest.raises(StatusCodeError):
            classifier.classify_delete(error(500, {"detail": "boom"}))


class TestCustomPatterns:
    """Test that patterns are configuration."""

    def test_custom_not_found_pattern(self):
        patterns = ErrorPatterns(not_found_update=re.compile(r"does not exist"))
        classifier = ErrorClassifier(patterns)
        body = {"payload": [{"message": "Object does not exist"}]}
        assert classifier.classify_update(error(400, body)).message == NOT_FOUND_MESSAGE

    def test_custom_associated_message(self):
        patterns = ErrorPatterns(
            associated_entities=re.compile(r"has line items"),
            associated_entities_message="Campaign has line items.",
        )
        result = ErrorClassifier(patterns).classify_delete(
            error(400, {"non_field_errors": ["Campaign has line items"]})
        )
        assert result.message == "Campaign has line items."
