"""
ForgeRock SSO Package
Browser-less login to ForgeRock Access Management and the SAML applications
that use it as their identity provider.

CLI Usage:
    python -m forgerock_sso [options]

    Options:
        --base-url      ForgeRock AM base URL
        --app-url       Application entry URL
        --username      ForgeRock username
        --password      ForgeRock password
        --fetch         GET a URL with the authenticated session
        --output-json   Write a JSON summary of the run
"""

from .auth import (
    AuthChallenge,
    Callback,
    CallbackKind,
    ChallengeAuthenticator,
    Credentials,
    LoginResult,
    SsoCompleter,
    SsoRedirect,
    parse_sso_redirect,
    resolve_credentials,
)
from .client import ForgeRockClient
from .errors import (
    AuthenticationError,
    ConfigurationError,
    DownstreamError,
    ForgeRockError,
    ProtocolError,
    TransportError,
)
from .run_config import LoginRunConfig
from .transport import new_session

__all__ = [
    'ForgeRockClient',
    'Credentials',
    'resolve_credentials',
    'LoginRunConfig',
    'new_session',
    # Protocol stages
    'ChallengeAuthenticator',
    'SsoCompleter',
    'parse_sso_redirect',
    # Documents
    'AuthChallenge',
    'Callback',
    'CallbackKind',
    'LoginResult',
    'SsoRedirect',
    # Errors
    'ForgeRockError',
    'ConfigurationError',
    'TransportError',
    'ProtocolError',
    'AuthenticationError',
    'DownstreamError',
]

__version__ = '1.0.0'
