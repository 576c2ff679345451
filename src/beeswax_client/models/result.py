"""Result envelope returned by every public client operation.

Operations resolve to a :class:`Result` instead of raising for the
conditions the client knows how to classify. A successful result carries
a payload and nothing else; a failed result carries a status-like code
and a message and no payload.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FailureKind(str, Enum):
    """Kinds of soft failure a :class:`Result` can report.

    - ``VALIDATION``: the request body was rejected locally
    - ``NOT_FOUND``: the server could not load the target object
    - ``ASSOCIATED_ENTITY_CONFLICT``: associated entities block deletion
    - ``VALIDATION_CONFLICT``: the server reported non-field errors
    """

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    ASSOCIATED_ENTITY_CONFLICT = "associated_entity_conflict"
    VALIDATION_CONFLICT = "validation_conflict"


class Result(BaseModel):
    """Uniform success/failure envelope.

    :param success: Whether the operation succeeded
    :type success: bool
    :param payload: Response data, present only on success
    :type payload: Any
    :param code: Status-like failure code, present only on failure
    :type code: Optional[int]
    :param message: Failure message, present only on failure
    :type message: Optional[str]
    :param kind: Classified failure kind, only on failure
    :type kind: Optional[FailureKind]
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    payload: Any = None
    code: Optional[int] = Field(None, description="Failure code")
    message: Optional[str] = Field(None, description="Failure message")
    kind: Optional[FailureKind] = Field(None, description="Failure kind")

    @model_validator(mode="after")
    def check_envelope(self) -> "Result":
        """Enforce that success and failure fields are mutually exclusive."""
        if self.success:
            if self.code is not None or self.message is not None:
                raise ValueError("successful result cannot carry code or message")
            if self.kind is not None:
                raise ValueError("successful result cannot carry a failure kind")
        else:
            if self.code is None or self.message is None:
                raise ValueError("failed result requires code and message")
            if self.payload is not None:
                raise ValueError("failed result cannot carry a payload")
        return self

    @classmethod
    def ok(cls, payload: Any) -> "Result":
        """Build a successful result around ``payload``."""
        return cls(success=True, payload=payload)

    @classmethod
    def fail(
        cls, code: int, message: str, kind: Optional[FailureKind] = None
    ) -> "Result":
        """Build a soft failure."""
        return cls(success=False, code=code, message=message, kind=kind)

    def to_dict(self) -> Dict[str, Any]:
        """Return the bare envelope as a plain dictionary.

        :return: ``{"success", "payload"}`` or ``{"success", "code", "message"}``
        :rtype: Dict[str, Any]
        """
        if self.success:
            return {"success": True, "payload": self.payload}
        return {"success": False, "code": self.code, "message": self.message}
