"""
Custom exceptions for stravapush.

Provides clear, actionable error messages instead of raw httpx.HTTPStatusError.
Parses the Strava API error format:

    {"message": "Bad Request", "errors": [{"resource": "...", "field": "...", "code": "..."}]}
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx


class StravaPushError(Exception):
    """Base exception for all stravapush errors."""


# ── Configuration ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Diagnostic:
    """A single configuration problem, tied to the provider attribute it concerns."""

    attribute: str
    summary: str
    detail: str
    severity: str = "error"

    def __str__(self) -> str:
        return f"{self.attribute}: {self.summary}"


class ConfigurationError(StravaPushError):
    """One or more provider credentials are unknown or missing.

    All problems found are reported together in ``diagnostics``.
    """

    def __init__(self, diagnostics: List[Diagnostic]):
        self.diagnostics = list(diagnostics)
        summary = "; ".join(str(d) for d in self.diagnostics) or "invalid configuration"
        super().__init__(summary)

    @property
    def attributes(self) -> List[str]:
        return [d.attribute for d in self.diagnostics]

    def __repr__(self) -> str:
        return f"ConfigurationError(diagnostics={self.diagnostics!r})"


# ── Remote API ────────────────────────────────────────────────────────────────


class StravaAPIError(StravaPushError):
    """The Strava API answered with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int = None,
        response: httpx.Response = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.response = response
        self.errors = errors or []
        super().__init__(message)

    def __repr__(self) -> str:
        parts = [f"message={self.message!r}"]
        if self.status_code:
            parts.append(f"status_code={self.status_code}")
        if self.errors:
            parts.append(f"errors={self.errors!r}")
        return f"{self.__class__.__name__}({', '.join(parts)})"


class BadRequestError(StravaAPIError):
    """Strava rejected the request, e.g. the callback URL failed validation."""
    pass


class AuthenticationError(StravaAPIError):
    """Invalid client id / client secret."""
    pass


class PermissionError(StravaAPIError):
    """Valid credentials but the application may not perform this call."""
    pass


class NotFoundError(StravaAPIError):
    """Requested subscription does not exist."""
    pass


class ValidationError(StravaAPIError):
    """Request payload failed server-side validation."""
    pass


class RateLimitError(StravaAPIError):
    """Rate limit exceeded. Check retry_after for backoff duration."""

    def __init__(self, message: str, retry_after: float = None, **kwargs):
        self.retry_after = retry_after
        super().__init__(message, **kwargs)


class ServerError(StravaAPIError):
    """Strava returned a 5xx error."""
    pass


# ── Lifecycle ─────────────────────────────────────────────────────────────────


class RemoteCallError(StravaPushError):
    """A remote call made during a lifecycle operation failed.

    ``operation`` is the lifecycle operation (create, read, update, delete, list)
    and ``phase`` the remote step that failed inside it. The underlying message
    is kept verbatim in ``message``.
    """

    def __init__(
        self,
        operation: str,
        phase: str,
        message: str,
        cause: Optional[BaseException] = None,
        remote_absent: bool = False,
    ):
        self.operation = operation
        self.phase = phase
        self.message = message
        self.cause = cause
        self.remote_absent = remote_absent
        super().__init__(f"{operation} failed during {phase}: {message}")

    @property
    def not_found(self) -> bool:
        """True when the remote record this call addressed does not exist."""
        return isinstance(self.cause, NotFoundError)

    def __repr__(self) -> str:
        return (
            f"RemoteCallError(operation={self.operation!r}, phase={self.phase!r}, "
            f"message={self.message!r})"
        )


class ImportStateError(StravaPushError):
    """The import identifier could not be parsed."""


class ImportFormatError(ImportStateError):
    """The import identifier is not of the form ``<id>,<verify_token>``."""


class ImportIDError(ImportStateError):
    """The ``<id>`` part of the import identifier is not an integer."""


# ── Status mapping ────────────────────────────────────────────────────────────


def _parse_error_body(response: httpx.Response) -> tuple:
    """
    Parse a Strava error response body.

    Returns (message, errors).
    """
    try:
        body = response.json()
    except ValueError:
        return response.text, []
    if not isinstance(body, dict):
        return response.text, []
    message = body.get("message") or response.text
    errors = body.get("errors") or []
    if not isinstance(errors, list):
        errors = []
    details = [
        "{resource} {field} {code}".format(
            resource=e.get("resource", ""), field=e.get("field", ""), code=e.get("code", "")
        ).strip()
        for e in errors
        if isinstance(e, dict)
    ]
    if details:
        message = f"{message} ({'; '.join(details)})"
    return message, errors


def raise_for_status(response: httpx.Response) -> None:
    """
    Check response status and raise the matching stravapush exception.

    Use this instead of response.raise_for_status() for better error messages.
    """
    if response.is_success:
        return

    status = response.status_code
    message, errors = _parse_error_body(response)
    kwargs = {"status_code": status, "response": response, "errors": errors}

    if status == 400:
        raise BadRequestError(f"Bad request: {message}", **kwargs)
    elif status == 401:
        raise AuthenticationError(f"Authentication failed: {message}", **kwargs)
    elif status == 403:
        raise PermissionError(f"Permission denied: {message}", **kwargs)
    elif status == 404:
        raise NotFoundError(f"Resource not found: {message}", **kwargs)
    elif status == 422:
        raise ValidationError(f"Validation error: {message}", **kwargs)
    elif status == 429:
        retry_after_raw = response.headers.get("retry-after")
        raise RateLimitError(
            f"Rate limit exceeded: {message}",
            retry_after=float(retry_after_raw) if retry_after_raw else None,
            **kwargs,
        )
    elif 400 <= status < 500:
        raise StravaAPIError(f"Client error ({status}): {message}", **kwargs)
    elif status >= 500:
        raise ServerError(f"Strava server error ({status}): {message}", **kwargs)
