"""Small assertions shared by unit and integration tests."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

PROBLEM_MIMETYPE = "application/problem+json"


@contextmanager
def not_raises(*exceptions: type[BaseException]) -> Iterator[None]:
    """Fail the test, instead of erroring it, if one of ``exceptions`` escapes."""
    try:
        yield
    except exceptions as exc:  # pragma: no cover
        raise AssertionError(f"unexpected {type(exc).__name__}: {exc}") from exc


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def assert_problem(resp: Any, status: int, code: str) -> dict[str, Any]:
    """Check an RFC 7807 error response and return its body.

    The body must carry ``status`` and ``code``, and its ``request_id``
    must match the ``X-Request-ID`` response header.
    """
    assert resp.status_code == status, resp.get_data(as_text=True)
    assert resp.mimetype == PROBLEM_MIMETYPE
    body = resp.get_json()
    assert body["status"] == status
    assert body["code"] == code
    assert body["request_id"] == resp.headers["X-Request-ID"]
    return body
