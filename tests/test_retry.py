import errno
import http.client
import socket
import urllib.error
from http import HTTPStatus

import pytest

from linksift.retry import should_retry_error, should_retry_status


@pytest.mark.parametrize("status", list(HTTPStatus))
def test_status_retry_matches_server_error_or_throttling(status):
    expected = status.value >= 500 or status in (
        HTTPStatus.REQUEST_TIMEOUT,
        HTTPStatus.TOO_MANY_REQUESTS,
    )
    assert should_retry_status(status) == expected


def test_server_errors_are_retried():
    assert should_retry_status(HTTPStatus.INTERNAL_SERVER_ERROR)
    assert should_retry_status(HTTPStatus.BAD_GATEWAY)
    assert should_retry_status(HTTPStatus.SERVICE_UNAVAILABLE)


def test_timeout_and_rate_limit_are_retried():
    assert should_retry_status(HTTPStatus.REQUEST_TIMEOUT)
    assert should_retry_status(HTTPStatus.TOO_MANY_REQUESTS)


def test_success_and_client_errors_are_final():
    assert not should_retry_status(HTTPStatus.OK)
    assert not should_retry_status(HTTPStatus.NOT_FOUND)
    assert not should_retry_status(HTTPStatus.FORBIDDEN)
    assert not should_retry_status(HTTPStatus.MOVED_PERMANENTLY)


def test_plain_int_accepted():
    assert should_retry_status(int(HTTPStatus.GATEWAY_TIMEOUT))
    assert not should_retry_status(int(HTTPStatus.NO_CONTENT))


@pytest.mark.parametrize("code", [0, 99, 1000, -1])
def test_invalid_status_raises(code):
    with pytest.raises(ValueError):
        should_retry_status(code)


def test_timeout_is_retried():
    assert should_retry_error(TimeoutError("timed out"))
    assert should_retry_error(socket.timeout("timed out"))


def test_oserror_with_timeout_errno_is_retried():
    assert should_retry_error(OSError(errno.ETIMEDOUT, "timed out"))


@pytest.mark.parametrize(
    "error",
    [
        ConnectionResetError("reset"),
        ConnectionAbortedError("aborted"),
        http.client.RemoteDisconnected("closed"),
        http.client.IncompleteRead(b"partial"),
    ],
)
def test_transient_errors_are_retried(error):
    assert should_retry_error(error)


def test_connect_errors_are_not_retried():
    assert not should_retry_error(ConnectionRefusedError("refused"))
    assert not should_retry_error(socket.gaierror("no such host"))


def test_unrelated_errors_are_not_retried():
    assert not should_retry_error(ValueError("bad"))
    assert not should_retry_error(RuntimeError("boom"))


def test_cause_chain_is_followed():
    try:
        try:
            raise ConnectionResetError("reset")
        except ConnectionResetError as inner:
            raise RuntimeError("request failed") from inner
    except RuntimeError as outer:
        assert should_retry_error(outer)


def test_implicit_context_is_followed():
    try:
        try:
            raise http.client.IncompleteRead(b"")
        except http.client.IncompleteRead:
            raise RuntimeError("request failed")
    except RuntimeError as outer:
        assert should_retry_error(outer)


def test_suppressed_context_is_ignored():
    try:
        try:
            raise ConnectionResetError("reset")
        except ConnectionResetError:
            raise RuntimeError("request failed") from None
    except RuntimeError as outer:
        assert not should_retry_error(outer)


def test_url_error_reason_is_followed():
    assert should_retry_error(urllib.error.URLError(TimeoutError("timed out")))
    assert not should_retry_error(urllib.error.URLError(ConnectionRefusedError("refused")))
    assert not should_retry_error(urllib.error.URLError("unknown url type"))


def test_timeout_wins_over_connect_error():
    error = RuntimeError("failed")
    error.__cause__ = ConnectionRefusedError("refused")
    error.__cause__.__cause__ = TimeoutError("timed out")
    assert should_retry_error(error)


def test_self_referencing_chain_terminates():
    error = RuntimeError("loop")
    error.__cause__ = error
    assert not should_retry_error(error)