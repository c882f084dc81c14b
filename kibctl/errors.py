"""
Exceptions raised by kibctl.

Every exception derives from ``KibctlError`` and carries the process exit
code the command line reports for it: 1 for validation problems with the
operator's input, 2 for failures while talking to the Kibana server.
"""
from typing import Optional


class KibctlError(Exception):
    """Base class for all kibctl failures."""

    exit_code = 2


class ConfigurationError(KibctlError):
    """Raised when required command line input or configuration is missing."""

    exit_code = 1


class OperationError(KibctlError):
    """Base class for failures of an operation against the server."""


class TransportError(OperationError):
    """Raised when a request could not complete (connection, timeout, protocol).

    Attributes:
        method: HTTP method of the failed request.
        url: URL of the failed request.
    """

    def __init__(self, method: str, url: str, details: str):
        self.method = method
        self.url = url
        super().__init__(f"{method} {url} failed: {details}")


class APIError(OperationError):
    """Raised when the server answers with a non-2xx status.

    The status and the raw response body are kept verbatim for diagnostics.

    Attributes:
        action: What was being attempted (e.g. ``retrieve dashboard id abc``).
        status_code: HTTP status code of the response.
        reason: HTTP reason phrase of the response.
        body: Response body, decoded as text.
    """

    def __init__(self, action: str, status_code: int, reason: str, body: str):
        self.action = action
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(
            f"failed to {action}. Status:{status_code} {reason}. Response:{body}."
        )


class CardinalityError(OperationError):
    """Raised when a lookup that needs exactly one match finds zero or several.

    Attributes:
        object_type: Saved object type that was searched (``dashboard``, ...).
        name: Name that was looked up.
        count: Number of matches returned by the server.
    """

    def __init__(self, object_type: str, name: str, count: int):
        self.object_type = object_type
        self.name = name
        self.count = count
        if count == 0:
            message = f"no {object_type} found matching: {name}"
        else:
            message = f"more than one {object_type} found matching: {name}"
        super().__init__(message)


class ParseError(OperationError):
    """Raised when a server payload cannot be parsed.

    The message names which parse failed; the underlying exception, if any,
    is chained as ``__cause__``.
    """

    def __init__(self, what: str, details: Optional[str] = None):
        self.what = what
        message = f"could not parse {what}"
        if details:
            message = f"{message}: {details}"
        super().__init__(message)
