"""
ForgeRock Challenge-Response Authenticator
==========================================
Logs a session in to ForgeRock Access Management through the REST
authentication tree.

Flow (one-shot, forward only):
    1. GET  {base_url}                              → baseline cookies
    2. POST {base_url}/json/realms/root/authenticate → AuthChallenge
    3. Fill NameCallback / PasswordCallback inputs from the credentials
    4. POST the filled challenge back                → LoginResult (tokenId)

After step 4 the session's cookie jar holds the AM SSO cookie.  Later
requests rely on that cookie; the token is never attached by hand.

Security:
    - Credentials are never logged.
    - Error messages carry the raw server body, never the submitted challenge.
"""

from __future__ import annotations

import logging
from typing import Dict

import requests

from ..errors import AuthenticationError, ProtocolError
from ..transport import excerpt, is_error_status, send
from .callbacks import AuthChallenge, LoginResult
from .credentials import Credentials

logger = logging.getLogger(__name__)


AUTHENTICATE_PATH = "/json/realms/root/authenticate"

_FORGEROCK_HEADERS: Dict[str, str] = {
    "Accept": "application/json",
    "Accept-API-Version": "protocol=1.0,resource=2.1",
}


def forgerock_headers() -> Dict[str, str]:
    """Headers for every call to the authenticate endpoint (fresh copy)."""
    return dict(_FORGEROCK_HEADERS)


class ChallengeAuthenticator:
    """Drives the AM authentication tree for one session.

    Usage::

        authenticator = ChallengeAuthenticator("https://am.example.com/am")
        result = authenticator.authenticate(session, creds)
        result.token_id
    """

    def __init__(self, base_url: str):
        self.base_url = base_url
        self.auth_url = base_url + AUTHENTICATE_PATH

    def authenticate(
        self, session: requests.Session, creds: Credentials
    ) -> LoginResult:
        """Run the full exchange on *session*.

        Raises:
            TransportError:      a request could not be sent.
            ProtocolError:       challenge unparsable, unsupported callback,
                                 or name/password callback missing.
            AuthenticationError: error status or empty tokenId.
        """
        self._fetch_initial_page(session)
        challenge = self._request_challenge(session)

        challenge.fill_credentials(creds)
        logger.info("[FORGEROCK] Credentials filled, submitting challenge")

        result = self._submit_challenge(session, challenge)
        logger.info(
            f"[FORGEROCK] ✅ Authenticated (realm={result.realm or '/'})"
        )
        return result

    # ------------------------------------------------------------------
    # Protocol steps
    # ------------------------------------------------------------------

    def _fetch_initial_page(self, session: requests.Session) -> None:
        logger.info(f"[FORGEROCK] Fetching initial page: {self.base_url[:80]}")
        failure = "initial page unreachable"
        resp = send(session, "GET", self.base_url, failure)
        if is_error_status(resp):
            logger.error(
                f"[FORGEROCK] Initial page returned HTTP {resp.status_code}"
            )
            raise AuthenticationError(
                f'{failure} "{self.base_url}" (HTTP {resp.status_code}): '
                f"{resp.text}",
                url=self.base_url,
                body=resp.text,
            )

    def _request_challenge(self, session: requests.Session) -> AuthChallenge:
        failure = "failed to get initial auth data"
        resp = send(
            session, "POST", self.auth_url, failure,
            headers=forgerock_headers(),
        )
        if is_error_status(resp):
            logger.error(
                f"[FORGEROCK] Authenticate endpoint returned HTTP "
                f"{resp.status_code}: {excerpt(resp.text)}"
            )
            raise AuthenticationError(
                f'{failure} "{self.auth_url}" (HTTP {resp.status_code}): '
                f"{resp.text}",
                url=self.auth_url,
                body=resp.text,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ProtocolError(
                f'{failure} "{self.auth_url}": response is not JSON: '
                f"{resp.text}",
                url=self.auth_url,
                body=resp.text,
            ) from e

        try:
            challenge = AuthChallenge.from_dict(data)
        except ProtocolError as e:
            raise ProtocolError(
                f'{failure} "{self.auth_url}": {e.message}',
                url=self.auth_url,
                body=resp.text,
            ) from e

        logger.info(
            f"[FORGEROCK] Challenge issued with {len(challenge.callbacks)} "
            f"callback(s)"
        )
        return challenge

    def _submit_challenge(
        self, session: requests.Session, challenge: AuthChallenge
    ) -> LoginResult:
        resp = send(
            session, "POST", self.auth_url, "failed to login",
            headers=forgerock_headers(),
            json=challenge.to_dict(),
        )
        if is_error_status(resp):
            logger.error(
                f"[FORGEROCK] ❌ Login rejected with HTTP {resp.status_code}"
            )
            raise AuthenticationError(
                f"error response from login: {resp.text}",
                url=self.auth_url,
                body=resp.text,
            )

        try:
            data = resp.json()
        except ValueError:
            data = None
        result = LoginResult.from_dict(data)

        if not result.is_authenticated:
            logger.error("[FORGEROCK] ❌ Login response carried no tokenId")
            raise AuthenticationError(
                f"failed to login, tokenId is empty: {resp.text}",
                url=self.auth_url,
                body=resp.text,
            )
        return result
