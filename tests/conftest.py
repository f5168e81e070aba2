"""
Shared fixtures: a scripted stand-in for ``requests.Session``.

``FakeSession`` answers requests from a queue of canned responses and
records every call, so tests can assert on the exact request sequence.
No network access happens anywhere in the suite.
"""

import json
from unittest import mock

import pytest
import requests

BASE_URL = "https://am.example.com/am"
AUTH_URL = BASE_URL + "/json/realms/root/authenticate"
APP_URL = "https://app.example.com/home"
ACS_URL = "https://app.example.com/saml/acs"


def make_response(status_code=200, body=None, *, url="", json_body=None):
    """Build a ``requests.Response`` double.

    ``json_body`` sets both ``.text`` and ``.json()``; otherwise ``.json()``
    raises ``ValueError`` like requests does for non-JSON bodies.
    """
    if json_body is not None:
        text = json.dumps(json_body)
    else:
        text = body or ""
    resp = mock.Mock(spec=requests.Response, status_code=status_code, text=text, url=url)
    if json_body is not None:
        resp.json.return_value = json_body
    else:
        resp.json.side_effect = ValueError("Expecting value")
    return resp


class FakeSession:
    """Records ``request()`` calls and replays queued responses in order."""

    def __init__(self, responses=()):
        self.responses = list(responses)
        self.calls = []
        self.closed = False
        self.cookies = requests.cookies.RequestsCookieJar()

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if not self.responses:
            raise AssertionError(f"unexpected request: {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    @property
    def urls(self):
        return [(method, url) for method, url, _ in self.calls]


# ---------------------------------------------------------------------------
# Canned server documents
# ---------------------------------------------------------------------------

def name_callback(_id=0):
    return {
        "type": "NameCallback",
        "output": [{"name": "prompt", "value": "User Name"}],
        "input": [{"name": "IDToken1", "value": ""}],
        "_id": _id,
    }


def password_callback(_id=1):
    return {
        "type": "PasswordCallback",
        "output": [{"name": "prompt", "value": "Password"}],
        "input": [{"name": "IDToken2", "value": ""}],
        "_id": _id,
    }


def challenge_doc(*callbacks):
    if not callbacks:
        callbacks = (name_callback(), password_callback())
    return {
        "authId": "eyJ0eXAiOiJKV1QiLCJhbGciOiJIUzI1NiJ9.opaque",
        "template": "",
        "stage": "DataStore1",
        "header": "Sign in",
        "callbacks": list(callbacks),
    }


LOGIN_OK = {"tokenId": "AQIC5wM2LY4Sfcx...", "successUrl": "/am/console", "realm": "/"}

SAML_FORM = f"""
<html>
  <body onload="document.forms[0].submit()">
    <form method="post" action="{ACS_URL}">
      <input type="hidden" name="SAMLResponse" value="PHNhbWxwOlJlc3BvbnNlPg=="/>
      <input type="hidden" name="RelayState" value="/home"/>
      <noscript><input type="submit" value="Continue"/></noscript>
    </form>
  </body>
</html>
"""


def happy_path_responses():
    return [
        make_response(200, "<html>login</html>", url=BASE_URL),
        make_response(200, json_body=challenge_doc(), url=AUTH_URL),
        make_response(200, json_body=LOGIN_OK, url=AUTH_URL),
        make_response(200, SAML_FORM, url=APP_URL),
        make_response(200, "<html>welcome</html>", url=ACS_URL),
    ]


@pytest.fixture
def fake_session():
    return FakeSession(happy_path_responses())
