"""Deciding whether a failed check is worth another attempt."""

from __future__ import annotations

import http.client
import socket
import urllib.error
from collections.abc import Iterator
from http import HTTPStatus

_RETRYABLE_CLIENT_ERRORS = frozenset({HTTPStatus.REQUEST_TIMEOUT, HTTPStatus.TOO_MANY_REQUESTS})

# A response cut off halfway, or a connection the server closed, is transient.
_TRANSIENT_ERRORS = (
    http.client.IncompleteRead,
    http.client.RemoteDisconnected,
    ConnectionResetError,
    ConnectionAbortedError,
)

# Failing to reach the host at all will not improve by retrying.
_CONNECT_ERRORS = (ConnectionRefusedError, socket.gaierror)


def should_retry_status(status: int) -> bool:
    """Whether a response with this HTTP status code should be retried.

    Server errors are retried, as are "request timeout" and "too many
    requests"; every other status is final.
    """
    code = int(status)
    if not 100 <= code <= 999:
        raise ValueError(f"invalid HTTP status code: {status!r}")
    if 500 <= code <= 599:
        return True
    return code in _RETRYABLE_CLIENT_ERRORS


def _error_chain(error: BaseException) -> Iterator[BaseException]:
    """Yield ``error`` and every error it was caused by, without repeats."""
    seen: set[int] = set()
    pending: list[BaseException] = [error]
    while pending:
        current = pending.pop(0)
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        if isinstance(current, urllib.error.URLError) and isinstance(
            current.reason, BaseException
        ):
            pending.append(current.reason)
        if current.__cause__ is not None:
            pending.append(current.__cause__)
        elif current.__context__ is not None and not current.__suppress_cause__:
            pending.append(current.__context__)


def should_retry_error(error: BaseException) -> bool:
    """Whether a request that failed with ``error`` should be retried.

    Timeouts, connections reset or aborted by the peer and responses cut
    off before they were complete are transient. Failures to connect and
    anything else are not.
    """
    chain = list(_error_chain(error))
    if any(isinstance(item, TimeoutError) for item in chain):
        return True
    if any(isinstance(item, _CONNECT_ERRORS) for item in chain):
        return False
    return any(isinstance(item, _TRANSIENT_ERRORS) for item in chain)