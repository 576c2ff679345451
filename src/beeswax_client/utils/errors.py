"""Classification of Beeswax mutation errors.

Beeswax reports the same kinds of failure in several shapes: a 400 with
a ``non_field_errors`` list, or a 400 whose ``payload`` holds objects with
``message`` lists. Edit and delete operations route their
:class:`~beeswax_client.exceptions.StatusCodeError` through
:class:`ErrorClassifier`, which turns the known patterns into soft
:class:`~beeswax_client.models.Result` failures and re-raises everything
else unchanged.

The match patterns are free-text regexes against server messages. They
live in :class:`ErrorPatterns` so they can be updated without touching
the classification logic.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Pattern

from ..exceptions import StatusCodeError
from ..models import FailureKind, Result

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Not found"
ASSOCIATED_CAMPAIGNS_MESSAGE = (
    "Cannot delete this advertiser. It has one or more associated campaigns."
)


@dataclass(frozen=True)
class ErrorPatterns:
    """Server message patterns recognized by the classifier.

    :param not_found_update: Message pattern of a missing object on edit
    :param not_found_delete: Message pattern of a missing object on delete
    :param associated_entities: Field error blocking a delete
    :param associated_entities_message: Message returned for that condition
    """

    not_found_update: Pattern[str] = field(
        default_factory=lambda: re.compile(r"Could not load object.*to update")
    )
    not_found_delete: Pattern[str] = field(
        default_factory=lambda: re.compile(r"Could not load object.*to delete")
    )
    associated_entities: Pattern[str] = field(
        default_factory=lambda: re.compile(
            r"Cannot delete this advertiser. It has one or more associated campaigns"
        )
    )
    associated_entities_message: str = ASSOCIATED_CAMPAIGNS_MESSAGE


DEFAULT_PATTERNS = ErrorPatterns()


def field_errors(error: StatusCodeError) -> List[str]:
    """Return the generic field errors of a 400 response.

    :param error: The status code error to inspect
    :type error: StatusCodeError
    :return: ``non_field_errors`` entries, empty unless status is 400
    :rtype: List[str]
    """
    if error.status_code != 400 or not isinstance(error.error, dict):
        return []
    errors = error.error.get("non_field_errors") or []
    if isinstance(errors, str):
        return [errors]
    return [str(e) for e in errors]


def payload_messages(error: StatusCodeError) -> List[str]:
    """Return every message nested in the response ``payload``.

    :param error: The status code error to inspect
    :type error: StatusCodeError
    :return: Flattened ``payload[*].message`` strings
    :rtype: List[str]
    """
    if not isinstance(error.error, dict):
        return []
    payload = error.error.get("payload")
    if not isinstance(payload, list):
        return []
    messages: List[str] = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        message: Any = item.get("message")
        if isinstance(message, str):
            messages.append(message)
        elif isinstance(message, list):
            messages.extend(str(m) for m in message)
    return messages


class ErrorClassifier:
    """Maps known mutation failures to soft :class:`Result` failures.

    :param patterns: Message patterns to match against
    :type patterns: ErrorPatterns
    """

    def __init__(self, patterns: ErrorPatterns = DEFAULT_PATTERNS):
        self.patterns = patterns

    def classify_update(
        self, error: StatusCodeError, fail_on_not_found: bool = False
    ) -> Result:
        """Classify a failed PATCH or PUT.

        :param error: The error raised by the dispatcher
        :type error: StatusCodeError
        :param fail_on_not_found: Re-raise instead of returning "Not found"
        :type fail_on_not_found: bool
        :return: A soft failure for recognized conditions
        :rtype: Result
        :raises StatusCodeError: The original error when unrecognized
        """
        errors = field_errors(error)
        if errors:
            return self._validation_conflict(errors)

        if self._matches(self.patterns.not_found_update, payload_messages(error)):
            return self._not_found(error, fail_on_not_found)

        raise error

    def classify_delete(
        self, error: StatusCodeError, fail_on_not_found: bool = False
    ) -> Result:
        """Classify a failed DELETE.

        :param error: The error raised by the dispatcher
        :type error: StatusCodeError
        :param fail_on_not_found: Re-raise instead of returning "Not found"
        :type fail_on_not_found: bool
        :return: A soft failure for recognized conditions
        :rtype: Result
        :raises StatusCodeError: The original error when unrecognized
        """
        errors = field_errors(error)
        associated = [e for e in errors if self.patterns.associated_entities.search(e)]
        others = [e for e in errors if not self.patterns.associated_entities.search(e)]

        if associated:
            if others:
                logger.warning(
                    f"Delete blocked by associated entities; also reported: {', '.join(others)}"
                )
            return Result.fail(
                400,
                self.patterns.associated_entities_message,
                FailureKind.ASSOCIATED_ENTITY_CONFLICT,
            )

        if others:
            return self._validation_conflict(others)

        if self._matches(self.patterns.not_found_delete, payload_messages(error)):
            return self._not_found(error, fail_on_not_found)

        raise error

    @staticmethod
    def _matches(pattern: Pattern[str], messages: List[str]) -> bool:
        return any(pattern.search(m) for m in messages)

    @staticmethod
    def _validation_conflict(errors: List[str]) -> Result:
        return Result.fail(
            400, f"Error(s): {', '.join(errors)}", FailureKind.VALIDATION_CONFLICT
        )

    @staticmethod
    def _not_found(error: StatusCodeError, fail_on_not_found: bool) -> Result:
        if fail_on_not_found:
            raise error
        logger.debug(f"Object not found: {error.url}")
        return Result.fail(400, NOT_FOUND_MESSAGE, FailureKind.NOT_FOUND)
