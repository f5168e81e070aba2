"""
SAML POST-Binding Completion
============================
Finishes single sign-on with an application that trusts ForgeRock AM,
without a browser.

Once the session holds the AM cookie, requesting the application entry
point returns the IdP's auto-submit page::

    <form method="post" action="https://app.example.com/saml/acs">
      <input type="hidden" name="SAMLResponse" value="PHNhbWxwOlJl..."/>
      <input type="hidden" name="RelayState" value="/home"/>
    </form>

A browser would submit that form from JavaScript; ``SsoCompleter`` extracts
the three values and POSTs them itself.  The extraction is deliberately
narrow: the first ``<form>``, its ``action``, and the two named inputs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from ..errors import DownstreamError, ProtocolError
from ..transport import excerpt, is_error_status, send

logger = logging.getLogger(__name__)


SAML_RESPONSE_FIELD = "SAMLResponse"
RELAY_STATE_FIELD = "RelayState"

_BS_PARSER = "lxml"


@dataclass(frozen=True)
class SsoRedirect:
    """Values of the SAML POST-binding form.  Used once, never cached."""
    action: str
    saml_response: str
    relay_state: str

    def to_form_data(self) -> Dict[str, str]:
        return {
            SAML_RESPONSE_FIELD: self.saml_response,
            RELAY_STATE_FIELD: self.relay_state,
        }


def parse_sso_redirect(html: str, page_url: Optional[str] = None) -> SsoRedirect:
    """Extract the SAML redirect form from *html*.

    Args:
        html:     Body of the application entry response.
        page_url: URL the body was served from; a relative ``action`` is
                  resolved against it.

    Raises:
        ProtocolError: no ``<form>``, or its action / SAMLResponse /
            RelayState is missing or empty.
    """
    soup = BeautifulSoup(html, _BS_PARSER)
    form = soup.find("form")
    if form is None:
        raise ProtocolError("expected a SAML redirect form, found no <form>")

    action = (form.get("action") or "").strip()
    saml_response = _input_value(form, SAML_RESPONSE_FIELD)
    relay_state = _input_value(form, RELAY_STATE_FIELD)

    missing = [
        name for name, value in (
            ("action", action),
            (SAML_RESPONSE_FIELD, saml_response),
            (RELAY_STATE_FIELD, relay_state),
        )
        if not value
    ]
    if missing:
        raise ProtocolError(
            f"SAML redirect form is missing {', '.join(missing)}"
        )

    if page_url:
        action = urljoin(page_url, action)

    return SsoRedirect(
        action=action,
        saml_response=saml_response,
        relay_state=relay_state,
    )


def _input_value(form, name: str) -> str:
    field = form.find("input", attrs={"name": name})
    if field is None:
        return ""
    return field.get("value") or ""


class SsoCompleter:
    """Replays the SAML assertion from the app entry page to its ACS URL."""

    def complete(self, session: requests.Session, app_url: str) -> SsoRedirect:
        """Log *session* in to the application at *app_url*.

        Must run after ``ChallengeAuthenticator.authenticate`` on the same
        session.

        Returns:
            The redirect that was posted (for diagnostics only).

        Raises:
            TransportError:  a request could not be sent.
            DownstreamError: error status from the app or the ACS endpoint.
            ProtocolError:   the app did not answer with a SAML redirect form.
        """
        logger.info(f"[SSO] Fetching application entry: {app_url[:80]}")
        failure = "application url unreachable"
        resp = send(session, "GET", app_url, failure)
        if is_error_status(resp):
            logger.error(
                f"[SSO] Application entry returned HTTP {resp.status_code}"
            )
            raise DownstreamError(
                f'{failure} "{app_url}" (HTTP {resp.status_code}): '
                f"{resp.text}",
                url=app_url,
                body=resp.text,
            )

        body = resp.text
        if SAML_RESPONSE_FIELD not in body:
            logger.error(
                f"[SSO] No SAMLResponse in application entry: {excerpt(body)}"
            )
            raise ProtocolError(
                f"expected response to contain SAMLResponse form: {body}",
                url=app_url,
                body=body,
            )

        page_url = getattr(resp, "url", None) or app_url
        try:
            redirect = parse_sso_redirect(body, page_url)
        except ProtocolError as e:
            raise ProtocolError(e.message, url=app_url, body=body) from e
        logger.info(f"[SSO] SAML form extracted, posting to {redirect.action[:80]}")

        self._post_assertion(session, redirect)
        logger.info("[SSO] ✅ SAML exchange complete")
        return redirect

    def _post_assertion(
        self, session: requests.Session, redirect: SsoRedirect
    ) -> None:
        failure = "error completing SAML exchange"
        resp = send(
            session, "POST", redirect.action, failure,
            data=redirect.to_form_data(),
        )
        if is_error_status(resp):
            logger.error(
                f"[SSO] ❌ Assertion consumer returned HTTP {resp.status_code}"
            )
            raise DownstreamError(
                f'{failure} "{redirect.action}" (HTTP {resp.status_code}): '
                f"{resp.text}",
                url=redirect.action,
                body=resp.text,
            )
