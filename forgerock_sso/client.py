"""
ForgeRock Client
================
Entry point for logging in to ForgeRock AM and an application that uses it
as its SAML identity provider.

Usage::

    from forgerock_sso import Credentials, ForgeRockClient

    client = ForgeRockClient("https://am.example.com/am")
    session = client.login(
        "https://zuul.example.com",
        Credentials(username="jdoe", password="..."),
    )
    session.get("https://zuul.example.com/api/tenants")

The returned ``requests.Session`` carries the cookies of both systems and
can be used for further requests to the application.
"""

from __future__ import annotations

import logging
from typing import Callable

import requests

from .auth.authenticator import ChallengeAuthenticator
from .auth.credentials import Credentials
from .auth.sso import SsoCompleter
from .errors import ConfigurationError
from .transport import new_session

logger = logging.getLogger(__name__)


class ForgeRockClient:
    """Logs in to ForgeRock AM and any service provider that uses it.

    One ``login()`` call owns one fresh session from creation until it is
    returned or discarded.  Nothing is shared between calls.
    """

    def __init__(
        self,
        base_url: str,
        *,
        session_factory: Callable[[], requests.Session] = new_session,
    ):
        """
        Args:
            base_url:        AM base URL, e.g. ``https://am.example.com/am``.
            session_factory: Builds the session for each login.

        Raises:
            ConfigurationError: *base_url* is empty.
        """
        if not base_url or not base_url.strip():
            raise ConfigurationError("missing ForgeRock base url")

        self.base_url = base_url.strip().rstrip("/")
        self.session_factory = session_factory
        self.authenticator = ChallengeAuthenticator(self.base_url)
        self.completer = SsoCompleter()

    @property
    def auth_url(self) -> str:
        return self.authenticator.auth_url

    def login(self, app_url: str, credentials: Credentials) -> requests.Session:
        """Log in to AM, then to the application at *app_url*.

        Returns:
            The authenticated session.

        Raises:
            ConfigurationError: empty credentials or *app_url* (no I/O done).
            ForgeRockError:     whichever stage failed, unchanged.  The
                                partially authenticated session is closed.
        """
        if not credentials.username or not credentials.password:
            raise ConfigurationError(
                "missing username or password for ForgeRock login"
            )
        if not app_url or not app_url.strip():
            raise ConfigurationError("missing application url for ForgeRock login")

        logger.info(f"[LOGIN] Logging in to {app_url.strip()[:80]}")
        session = self.session_factory()
        try:
            self.authenticator.authenticate(session, credentials)
            self.completer.complete(session, app_url.strip())
        except Exception:
            session.close()
            raise

        logger.info("[LOGIN] ✅ Login complete")
        return session
