"""
Authentication Tree Documents
=============================
Typed views of the JSON exchanged with ForgeRock AM's
``/json/realms/root/authenticate`` endpoint.

A challenge looks like::

    {
        "authId": "eyJ0eXAiOiJKV1Qi...",
        "callbacks": [
            {"type": "NameCallback",
             "output": [{"name": "prompt", "value": "User Name"}],
             "input":  [{"name": "IDToken1", "value": ""}],
             "_id": 0},
            {"type": "PasswordCallback",
             "output": [{"name": "prompt", "value": "Password"}],
             "input":  [{"name": "IDToken2", "value": ""}],
             "_id": 1}
        ]
    }

The server decides which callbacks appear and in what order, so filling is
data-driven: every callback is dispatched on its ``CallbackKind``, and a kind
outside the known set stops the login instead of being skipped.

Round-trip rule: ``AuthChallenge.to_dict()`` returns the document as received
except for callback input values.  Keys this module does not model are kept
in ``extra`` and written back untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..errors import ProtocolError
from .credentials import Credentials

logger = logging.getLogger(__name__)


class CallbackKind(Enum):
    """Callback types this client can answer.  Anything else is UNSUPPORTED."""
    NAME = "NameCallback"
    PASSWORD = "PasswordCallback"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_type(cls, type_name: str) -> "CallbackKind":
        for kind in (cls.NAME, cls.PASSWORD):
            if kind.value == type_name:
                return kind
        return cls.UNSUPPORTED


@dataclass
class CallbackField:
    """One ``{"name": ..., "value": ...}`` entry of a callback's input/output."""
    name: str
    value: Any = ""

    @classmethod
    def from_dict(cls, data: Any) -> "CallbackField":
        if not isinstance(data, dict) or "name" not in data:
            raise ProtocolError(f"malformed callback field: {data!r}")
        return cls(name=str(data["name"]), value=data.get("value", ""))

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}


_CALLBACK_KEYS = ("type", "output", "input", "_id")


@dataclass
class Callback:
    """One step prompt inside an ``AuthChallenge``."""
    type: str
    outputs: List[CallbackField] = field(default_factory=list)
    inputs: List[CallbackField] = field(default_factory=list)
    id: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> CallbackKind:
        return CallbackKind.from_type(self.type)

    @classmethod
    def from_dict(cls, data: Any) -> "Callback":
        if not isinstance(data, dict) or not isinstance(data.get("type"), str):
            raise ProtocolError(f"malformed callback: {data!r}")
        outputs = data.get("output") or []
        inputs = data.get("input") or []
        if not isinstance(outputs, list) or not isinstance(inputs, list):
            raise ProtocolError(f"malformed callback: {data!r}")
        return cls(
            type=data["type"],
            outputs=[CallbackField.from_dict(o) for o in outputs],
            inputs=[CallbackField.from_dict(i) for i in inputs],
            id=data.get("_id"),
            extra={k: v for k, v in data.items() if k not in _CALLBACK_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type,
            "output": [o.to_dict() for o in self.outputs],
            "input": [i.to_dict() for i in self.inputs],
        }
        if self.id is not None:
            data["_id"] = self.id
        data.update(self.extra)
        return data

    def set_input(self, value: str) -> None:
        """Write *value* into the first input slot."""
        if not self.inputs:
            raise ProtocolError(f"{self.type} has no input to fill")
        self.inputs[0].value = value

    def prompt(self) -> str:
        """The server's ``prompt`` output, if any (used in diagnostics)."""
        for out in self.outputs:
            if out.name == "prompt":
                return str(out.value)
        return ""


@dataclass
class AuthChallenge:
    """One round of the authentication tree: ``authId`` plus its callbacks."""
    auth_id: str
    callbacks: List[Callback] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "AuthChallenge":
        if not isinstance(data, dict):
            raise ProtocolError(f"auth data is not a JSON object: {data!r}")
        auth_id = data.get("authId")
        if not isinstance(auth_id, str) or not auth_id:
            raise ProtocolError(f"auth data has no authId: {data!r}")
        callbacks = data.get("callbacks")
        if not isinstance(callbacks, list):
            raise ProtocolError(f"auth data has no callbacks list: {data!r}")
        return cls(
            auth_id=auth_id,
            callbacks=[Callback.from_dict(cb) for cb in callbacks],
            extra={
                k: v for k, v in data.items()
                if k not in ("authId", "callbacks")
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "authId": self.auth_id,
            "callbacks": [cb.to_dict() for cb in self.callbacks],
        }
        data.update(self.extra)
        return data

    def describe(self) -> str:
        """Short, secret-free summary: callback types and prompts."""
        parts = []
        for cb in self.callbacks:
            prompt = cb.prompt()
            parts.append(f"{cb.type}({prompt!r})" if prompt else cb.type)
        return f"AuthChallenge(callbacks=[{', '.join(parts)}])"

    def fill_credentials(self, creds: Credentials) -> None:
        """Answer every callback from *creds*, in server order.

        Raises:
            ProtocolError: on an unsupported callback type (before anything
                is submitted), or if no NameCallback / PasswordCallback was
                present to take the username / password.
        """
        username_filled = False
        password_filled = False

        for cb in self.callbacks:
            kind = cb.kind
            if kind is CallbackKind.NAME:
                cb.set_input(creds.username)
                username_filled = True
            elif kind is CallbackKind.PASSWORD:
                cb.set_input(creds.password)
                password_filled = True
            else:
                raise ProtocolError(
                    f"unexpected auth data callback type: {cb.type}"
                )

        if not username_filled:
            raise ProtocolError(
                "failed to find NameCallback to fill in username in auth "
                f"data: {self.describe()}"
            )
        if not password_filled:
            raise ProtocolError(
                "failed to find PasswordCallback to fill in password in auth "
                f"data: {self.describe()}"
            )

        logger.debug(
            f"[FORGEROCK] Filled {len(self.callbacks)} callback(s): "
            f"{self.describe()}"
        )


@dataclass
class LoginResult:
    """Successful answer to a filled challenge."""
    token_id: str = ""
    success_url: str = ""
    realm: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "LoginResult":
        if not isinstance(data, dict):
            return cls()
        return cls(
            token_id=str(data.get("tokenId") or ""),
            success_url=str(data.get("successUrl") or ""),
            realm=str(data.get("realm") or ""),
        )

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token_id)
