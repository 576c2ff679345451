"""Structured exception classes for the Beeswax client."""

import json
from typing import Any, Dict, Optional


class BeeswaxClientError(Exception):
    """Base exception for all Beeswax client errors.

    This exception serves as the parent class for every error the client
    raises, providing a consistent interface for error handling across
    the package.

    :param message: Human-readable error message
    :param code: Optional error code for programmatic handling
    :param details: Optional dictionary containing additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the exception with message, code, and details."""
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format.

        :return: Dictionary containing error code, message, and details
        """
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_json(self) -> str:
        """Convert exception to JSON string.

        :return: JSON-encoded string representation of the exception
        """
        return json.dumps(self.to_dict(), default=str)


class ConfigurationError(BeeswaxClientError):
    """Raised for configuration-related errors.

    This exception is raised when the client is constructed without the
    settings it needs, most commonly missing credentials.

    :param message: Description of the configuration error
    :param setting: Optional name of the problematic setting
    """

    def __init__(self, message: str, setting: Optional[str] = None):
        """Initialize configuration error with message and optional setting."""
        details = {}
        if setting:
            details["setting"] = setting
        super().__init__(message=message, code="CONFIGURATION_ERROR", details=details)


class ValidationError(BeeswaxClientError):
    """Raised when local input validation fails.

    Validation errors are detected before any network call is made.

    :param message: Description of the validation error
    :param field: Optional name of the field that failed validation
    :param value: Optional value that caused the validation failure
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
    ):
        """Initialize validation error with message and optional field/value."""
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message=message, code="VALIDATION_ERROR", details=details)


class AuthenticationError(BeeswaxClientError):
    """Raised when logging in to Beeswax fails.

    The server either rejected the credentials (``success: false`` in the
    login body) or answered the login request with a non-2xx status.

    :param message: Description of the authentication failure
    :param status_code: Optional HTTP status code of the login response
    :param body: Optional parsed login response body
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[Any] = None,
    ):
        """Initialize authentication error with message and server detail."""
        details: Dict[str, Any] = {}
        if status_code:
            details["status_code"] = status_code
        if body is not None:
            details["body"] = body
        super().__init__(message=message, code="AUTHENTICATION_ERROR", details=details)
        self.status_code = status_code
        self.body = body


class TransportError(BeeswaxClientError):
    """Raised when a request never produced an HTTP response.

    Wraps connection failures, timeouts, and other httpx transport errors.

    :param message: Description of the transport failure
    :param method: Optional HTTP method of the failed request
    :param url: Optional URL of the failed request
    """

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        url: Optional[str] = None,
    ):
        """Initialize transport error with message and request context."""
        details = {}
        if method:
            details["method"] = method
        if url:
            details["url"] = url
        super().__init__(message=message, code="TRANSPORT_ERROR", details=details)
        self.method = method
        self.url = url


class StatusCodeError(BeeswaxClientError):
    """Raised for non-2xx responses that were not otherwise handled.

    Only the status code and the parsed body are kept. The raw
    ``httpx.Response`` is deliberately not attached.

    :param status_code: HTTP status code from the API response
    :param error: Parsed response body (JSON value or text)
    :param method: Optional HTTP method of the request
    :param url: Optional URL of the request
    """

    def __init__(
        self,
        status_code: int,
        error: Optional[Any] = None,
        method: Optional[str] = None,
        url: Optional[str] = None,
    ):
        """Initialize status code error with status, body, and request context."""
        message = f"{status_code} - {_describe(error)}"
        details: Dict[str, Any] = {"status_code": status_code}
        if error is not None:
            details["error"] = error
        if method:
            details["method"] = method
        if url:
            details["url"] = url
        super().__init__(message=message, code="STATUS_CODE_ERROR", details=details)
        self.status_code = status_code
        self.error = error
        self.method = method
        self.url = url


class ApplicationError(BeeswaxClientError):
    """Raised for 2xx responses whose body declares ``success: false``.

    :param body: The inspected response body
    :param method: Optional HTTP method of the request
    :param url: Optional URL of the request
    """

    def __init__(
        self,
        body: Any,
        method: Optional[str] = None,
        url: Optional[str] = None,
    ):
        """Initialize application error with the failing body."""
        details: Dict[str, Any] = {"body": body}
        if method:
            details["method"] = method
        if url:
            details["url"] = url
        super().__init__(
            message=_describe(body), code="APPLICATION_ERROR", details=details
        )
        self.body = body
        self.method = method
        self.url = url


class UploadError(BeeswaxClientError):
    """Raised when the creative asset upload pipeline fails outside the API.

    :param message: Description of the upload failure
    :param step: Optional name of the pipeline step that failed
    :param source_url: Optional source URL being uploaded
    """

    def __init__(
        self,
        message: str,
        step: Optional[str] = None,
        source_url: Optional[str] = None,
    ):
        """Initialize upload error with message and pipeline context."""
        details = {}
        if step:
            details["step"] = step
        if source_url:
            details["source_url"] = source_url
        super().__init__(message=message, code="UPLOAD_ERROR", details=details)
        self.step = step
        self.source_url = source_url


def _describe(body: Any) -> str:
    if body is None:
        return "<empty body>"
    if isinstance(body, (dict, list)):
        return json.dumps(body, default=str)
    return str(body)
