"""
Errors
======
Exception taxonomy for the ForgeRock login flow.

Every failure is terminal for the current login attempt and surfaces to the
caller as one of these.  ``message`` is human readable and, where the server
returned something useful, includes the raw response body.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ForgeRockError(Exception):
    """Base class for all login failures."""

    code = "forgerock_error"

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.url = url
        self.body = body

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "ok": False,
            "error": {"code": self.code, "message": self.message},
        }
        if self.url:
            payload["error"]["url"] = self.url
        return payload


class ConfigurationError(ForgeRockError, ValueError):
    """Empty base URL, app URL or credentials; detected before any I/O."""

    code = "configuration_error"


class TransportError(ForgeRockError):
    """Network / connection failure talking to ``url``."""

    code = "transport_error"


class ProtocolError(ForgeRockError):
    """The server answered, but not in the shape the flow expects."""

    code = "protocol_error"


class AuthenticationError(ForgeRockError):
    """The identity provider rejected the login (error status or no token)."""

    code = "authentication_error"


class DownstreamError(ForgeRockError):
    """Error status from the application or its assertion consumer."""

    code = "downstream_error"
