"""
HTTP Transport
==============
Builds the cookie-persisting ``requests.Session`` a login runs on, and the
single ``send()`` seam every protocol step goes through.

``send()`` turns ``requests`` network failures into ``TransportError`` naming
the URL that was attempted.  It does NOT judge status codes; each step
decides what an error status means for it.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from .errors import TransportError

logger = logging.getLogger(__name__)


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)

# Longest body excerpt written to log lines.  Exceptions keep the full body.
_LOG_BODY_LIMIT = 200


def new_session(
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: Optional[float] = None,
) -> requests.Session:
    """Create a fresh session for one login attempt.

    Args:
        user_agent: Value for the ``User-Agent`` header.
        timeout:    Per-request timeout in seconds.  ``None`` blocks forever.
    """
    session = requests.Session()
    session.headers["User-Agent"] = user_agent
    # Picked up by send(); requests itself has no session-wide timeout.
    session.request_timeout = timeout
    return session


def send(
    session: requests.Session,
    method: str,
    url: str,
    failure: str,
    **kwargs,
) -> requests.Response:
    """Issue one request, wrapping network failures.

    Args:
        session: The login's session.
        method:  ``"GET"`` or ``"POST"``.
        url:     Target URL.
        failure: Diagnostic prefix used if the request cannot be sent,
                 e.g. ``"failed to get initial auth data"``.
        **kwargs: Passed to ``requests.Session.request`` (headers, json, data).
    """
    timeout = getattr(session, "request_timeout", None)
    if timeout is not None:
        kwargs.setdefault("timeout", timeout)

    logger.debug(f"[HTTP] {method} {url}")
    try:
        resp = session.request(method, url, **kwargs)
    except requests.RequestException as e:
        raise TransportError(f'{failure} "{url}": {e}', url=url) from e

    logger.debug(f"[HTTP] {method} {url} -> {resp.status_code}")
    return resp


def is_error_status(resp: requests.Response) -> bool:
    return resp.status_code >= 400


def excerpt(text: str, limit: int = _LOG_BODY_LIMIT) -> str:
    """Single-line, truncated body for log messages."""
    flat = " ".join((text or "").split())
    if len(flat) > limit:
        return flat[:limit] + "..."
    return flat
