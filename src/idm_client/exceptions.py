"""Structured exception classes for the identity management client."""

import json
from typing import Any, Dict, Optional


class IdmClientError(Exception):
    """Base exception for all identity management client errors.

    This exception serves as the parent class for all client specific
    exceptions, providing a consistent interface for error handling
    across request building, transport and pagination.

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
        return json.dumps(self.to_dict())


class NetworkError(IdmClientError):
    """Raised when the HTTP transport fails to complete a request.

    Wraps any transport-level failure (connection refused, DNS failure,
    timeouts) raised while dispatching a request. The original exception
    is kept as ``__cause__`` and its message is carried in ``details``.

    :param transport_message: Message reported by the transport
    """

    MSG_REQUEST_FAILED = "Unable to complete network request; %s"

    def __init__(self, message: str, transport_message: Optional[str] = None):
        """Initialize network error with message and transport message."""
        details = {}
        if transport_message:
            details["transport_message"] = transport_message
        super().__init__(message=message, code="NETWORK_ERROR", details=details)
        self.transport_message = transport_message

    @classmethod
    def request_failed(cls, transport_message: str) -> "NetworkError":
        return cls(cls.MSG_REQUEST_FAILED % transport_message, transport_message)


class PaginatorError(IdmClientError):
    """Base class for errors raised by the response paginator.

    Construction-time validation failures are raised synchronously so the
    caller can handle them before any iteration happens.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="PAGINATOR_ERROR", details=details)


class PaginatorBadResponseError(PaginatorError):
    """Raised when a response cannot be paginated.

    Covers unsuccessful status codes, bodies that are not valid JSON and
    offset-style payloads without a ``start`` field.

    :param status_code: Optional HTTP status code of the offending response
    """

    MESSAGE = (
        "Unable to paginate request. Please ensure the endpoint you are using "
        "supports pagination, and that you are using the include_totals params."
    )

    def __init__(self, status_code: Optional[int] = None):
        details = {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(self.MESSAGE, details=details)
        self.code = "PAGINATOR_BAD_RESPONSE"
        self.status_code = status_code


class PaginatorUnsupportedMethodError(PaginatorError):
    """Raised when the request being paginated is not a GET request."""

    MESSAGE = "This request type is not supported. You can only paginate GET requests."

    def __init__(self, method: Optional[str] = None):
        details = {}
        if method:
            details["method"] = method
        super().__init__(self.MESSAGE, details=details)
        self.code = "PAGINATOR_UNSUPPORTED_METHOD"


class PaginatorUnsupportedEndpointError(PaginatorError):
    """Raised when checkpoint parameters are used on an unsupported endpoint.

    :param endpoint: Request path that carried ``from``/``take`` parameters
    """

    MESSAGE = 'The requested endpoint "%s" does not support checkpoint pagination.'

    def __init__(self, endpoint: str):
        super().__init__(self.MESSAGE % endpoint, details={"endpoint": endpoint})
        self.code = "PAGINATOR_UNSUPPORTED_ENDPOINT"
        self.endpoint = endpoint


class PaginatorCannotCountError(PaginatorError, TypeError):
    """Raised when a total count is requested for checkpoint pagination.

    The API never discloses a total for cursor-based results. This is also
    a ``TypeError`` so ``len()`` consumers such as ``list()`` treat the
    paginator as unsized instead of failing.
    """

    MESSAGE = "Cannot receive counts when using checkpoint pagination."

    def __init__(self):
        super().__init__(self.MESSAGE)
        self.code = "PAGINATOR_CANNOT_COUNT"


class ConfigurationError(IdmClientError):
    """Raised for configuration-related errors.

    :param message: Description of the configuration error
    :param setting: Optional name of the problematic setting
    """

    def __init__(self, message: str, setting: Optional[str] = None):
        """Initialize configuration error with message and optional setting."""
        details = {}
        if setting:
            details["setting"] = setting
        super().__init__(message=message, code="CONFIGURATION_ERROR", details=details)


class ArgumentError(IdmClientError):
    """Raised when a required endpoint argument is missing or empty.

    :param argument: Name of the offending argument
    """

    MSG_MISSING = "%s cannot be empty."

    def __init__(self, message: str, argument: Optional[str] = None):
        details = {}
        if argument:
            details["argument"] = argument
        super().__init__(message=message, code="ARGUMENT_ERROR", details=details)
        self.argument = argument

    @classmethod
    def missing(cls, argument: str) -> "ArgumentError":
        return cls(cls.MSG_MISSING % argument, argument)
