# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers.

Three families of failures surface from the import/export pipeline:

- ``ConfigurationError``: bad flags, unreadable or empty input, no client.
  Raised before any remote call.
- ``ValidationError``: the first record of a batch that breaks a rule.
  Raised before any remote call.
- ``TransportError``: a remote call failed. Fatal while listing, accumulated
  per record while creating.

A partially failed import is not an exception; callers inspect
``ImportOutcome.has_failures``.
"""

from __future__ import annotations

import difflib
from collections.abc import Sequence
from enum import Enum

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_MISUSE = 2
EXIT_AUTH = 3
EXIT_FORBIDDEN = 4
EXIT_NOT_FOUND = 5
EXIT_RATE_LIMITED = 6
EXIT_SERVER_ERROR = 7
EXIT_NETWORK = 8
EXIT_TIMEOUT = 9
EXIT_SIGINT = 130


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    AUTH = "AUTH"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    SERVER_ERROR = "SERVER_ERROR"
    CLIENT_ERROR = "CLIENT_ERROR"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


class ProbePortError(Exception):
    """Base class for every error the CLI knows how to report."""

    exit_code = EXIT_ERROR


class ConfigurationError(ProbePortError):
    exit_code = EXIT_MISUSE


class InvalidFormatFlag(ConfigurationError):
    def __init__(self, value: str, valid: Sequence[str] = ("yaml", "json")):
        self.value = value
        super().__init__(invalid_value_message("--format", value, valid))


class FormatUndetectable(ConfigurationError):
    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"cannot detect format from extension {extension!r}; use --format to specify (yaml or json)")


class FileUnreadable(ConfigurationError):
    def __init__(self, path: str, reason: object):
        self.path = path
        super().__init__(f"failed to read file {path!r}: {reason}")


class FileUnwritable(ConfigurationError):
    def __init__(self, path: str, reason: object):
        self.path = path
        super().__init__(f"failed to write file {path!r}: {reason}")


class FileEmpty(ConfigurationError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"file {path!r} is empty")


class ParseFailure(ConfigurationError):
    def __init__(self, fmt: str, source: str, reason: object):
        self.format = fmt
        self.source = source
        super().__init__(f"failed to parse {fmt.upper()} from {source!r}: {reason}")


class NoConfigurationsFound(ConfigurationError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"no probe configurations found in {path!r}")


class NoProbesFound(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("no probes found matching the specified criteria")


class ClientNotConfigured(ConfigurationError):
    def __init__(self, reason: str = "no API key configured (set PROBEPORT_API_KEY)"):
        super().__init__(f"failed to initialize API client: {reason}")


class ValidationError(ProbePortError):
    """A record in an import batch broke a validation rule."""

    exit_code = EXIT_MISUSE

    def __init__(self, index: int, name: str, reason: str):
        self.index = index
        self.name = name
        self.reason = reason
        if name:
            message = f"probe {name!r} (index {index}): {reason}"
        else:
            message = f"probe at index {index}: {reason}"
        super().__init__(message)


class TransportError(ProbePortError):
    """A remote call failed; the message is the server or transport error verbatim."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR,
        operation: str | None = None,
    ):
        self.status_code = status_code
        self.category = category
        self.operation = operation
        super().__init__(message)

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        return exit_code_for(self.category)

    def wrap(self, context: str) -> "TransportError":
        """Return a copy whose message is prefixed with ``context``."""
        wrapped = TransportError(
            f"{context}: {self}",
            status_code=self.status_code,
            category=self.category,
            operation=self.operation,
        )
        wrapped.__cause__ = self
        return wrapped


class DeadlineExceeded(ProbePortError):
    exit_code = EXIT_TIMEOUT

    def __init__(self, operation: str | None = None):
        self.operation = operation
        suffix = f" during {operation}" if operation else ""
        super().__init__(f"deadline exceeded{suffix}")


def categorize_exception(exc: Exception) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    import socket
    import ssl as ssl_module

    import httpx

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, TimeoutError):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, ConnectionError):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def categorize_error_type(error_type: str | None) -> ErrorCategory:
    """Categorize a transport failure known only by its exception class name."""
    if not error_type:
        return ErrorCategory.UNKNOWN_ERROR
    if "Timeout" in error_type:
        return ErrorCategory.TIMEOUT
    if error_type in {"SSLError", "SSLCertVerificationError", "CertificateError"}:
        return ErrorCategory.SSL_ERROR
    if error_type in {"gaierror", "herror"}:
        return ErrorCategory.DNS_ERROR
    if error_type.endswith(("ConnectError", "NetworkError", "ProtocolError", "ProxyError", "ConnectionError")):
        return ErrorCategory.CONNECTION_ERROR
    return ErrorCategory.UNKNOWN_ERROR


def categorize_status(status_code: int | None) -> ErrorCategory:
    if status_code is None:
        return ErrorCategory.UNKNOWN_ERROR
    if status_code == 401:
        return ErrorCategory.AUTH
    if status_code == 403:
        return ErrorCategory.FORBIDDEN
    if status_code == 404:
        return ErrorCategory.NOT_FOUND
    if status_code == 429:
        return ErrorCategory.RATE_LIMITED
    if status_code >= 500:
        return ErrorCategory.SERVER_ERROR
    if status_code >= 400:
        return ErrorCategory.CLIENT_ERROR
    return ErrorCategory.NONE


def exit_code_for(category: ErrorCategory | None) -> int:
    mapping = {
        ErrorCategory.TIMEOUT: EXIT_TIMEOUT,
        ErrorCategory.AUTH: EXIT_AUTH,
        ErrorCategory.FORBIDDEN: EXIT_FORBIDDEN,
        ErrorCategory.NOT_FOUND: EXIT_NOT_FOUND,
        ErrorCategory.RATE_LIMITED: EXIT_RATE_LIMITED,
        ErrorCategory.SERVER_ERROR: EXIT_SERVER_ERROR,
        ErrorCategory.SSL_ERROR: EXIT_NETWORK,
        ErrorCategory.CONNECTION_ERROR: EXIT_NETWORK,
        ErrorCategory.DNS_ERROR: EXIT_NETWORK,
    }
    return mapping.get(category, EXIT_ERROR)  # type: ignore[arg-type]


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Request timed out",
        ErrorCategory.AUTH: "Authentication failed; check your API key",
        ErrorCategory.FORBIDDEN: "Permission denied",
        ErrorCategory.NOT_FOUND: "Resource not found",
        ErrorCategory.RATE_LIMITED: "Rate limited by the API",
        ErrorCategory.SERVER_ERROR: "API server error",
        ErrorCategory.CLIENT_ERROR: "Request rejected by the API",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNKNOWN_ERROR: "Unexpected API error",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Unexpected API error")


def suggest(value: str, options: Sequence[str]) -> str | None:
    """Return the closest valid option to ``value``, if any is close enough."""
    matches = difflib.get_close_matches((value or "").lower(), list(options), n=1, cutoff=0.6)
    return matches[0] if matches else None


def invalid_value_message(flag: str, value: str, options: Sequence[str]) -> str:
    message = f"invalid value {value!r} for {flag}: must be one of: {', '.join(options)}"
    suggestion = suggest(value, options)
    if suggestion and suggestion != value:
        message += f"\n  Did you mean {suggestion!r}?"
    return message
