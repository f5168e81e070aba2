"""
Authentication Module
=====================
The two protocol stages of a ForgeRock login.

Architecture:
    - ``ChallengeAuthenticator``: REST authentication tree → AM session cookie
    - ``SsoCompleter``: SAML POST-binding replay → application session
    - ``Credentials``: credential container (given, env or prompt)
    - ``AuthChallenge`` / ``Callback`` / ``LoginResult``: tree documents

``ForgeRockClient`` in ``forgerock_sso.client`` sequences the two stages;
use the stages directly only when you manage the session yourself.
"""

from .authenticator import ChallengeAuthenticator, forgerock_headers
from .callbacks import (
    AuthChallenge,
    Callback,
    CallbackField,
    CallbackKind,
    LoginResult,
)
from .credentials import Credentials, resolve_credentials
from .sso import SsoCompleter, SsoRedirect, parse_sso_redirect

__all__ = [
    "ChallengeAuthenticator",
    "forgerock_headers",
    "AuthChallenge",
    "Callback",
    "CallbackField",
    "CallbackKind",
    "LoginResult",
    "Credentials",
    "resolve_credentials",
    "SsoCompleter",
    "SsoRedirect",
    "parse_sso_redirect",
]
