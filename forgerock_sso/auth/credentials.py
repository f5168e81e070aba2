"""
Credentials
===========
Credential container for the ForgeRock login, plus resolution from
environment variables and an interactive terminal prompt.

Security:
    - The password never appears in ``repr()`` or log output.
    - Interactive entry uses ``getpass`` (no echo).
"""

from __future__ import annotations

import dataclasses
import getpass
import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


# Env-var prefixes checked in order: FORGEROCK_USERNAME, FORGEROCK_PASSWORD
DEFAULT_ENV_PREFIXES = ("FORGEROCK",)


@dataclass(frozen=True)
class Credentials:
    """Username / password pair used to answer the authentication callbacks."""
    username: str = ""
    password: str = field(default="", repr=False)

    @property
    def is_complete(self) -> bool:
        return bool(self.username and self.password)


def resolve_credentials(
    creds: Optional[Credentials] = None,
    *,
    env_prefixes: Sequence[str] = DEFAULT_ENV_PREFIXES,
    interactive: bool = True,
) -> Credentials:
    """Build ``Credentials`` from what is given, env vars, then a prompt.

    Resolution order:
        1. Fields already set on *creds*
        2. Environment variables (``{PREFIX}_USERNAME``, ``{PREFIX}_PASSWORD``)
        3. Interactive terminal prompt (if *interactive* is True)

    Returns:
        A new ``Credentials`` (may still be incomplete if nothing supplied
        the missing fields).
    """
    if creds is None:
        creds = Credentials()

    if creds.is_complete:
        return creds

    username, password = creds.username, creds.password

    # ── Env var lookup ────────────────────────────────────────────
    for prefix in env_prefixes:
        if not username:
            username = os.environ.get(f"{prefix}_USERNAME", "")
        if not password:
            password = os.environ.get(f"{prefix}_PASSWORD", "")

    creds = dataclasses.replace(creds, username=username, password=password)
    if creds.is_complete:
        logger.info("[LOGIN] Credentials resolved from environment")
        return creds

    # ── Interactive prompt ────────────────────────────────────────
    if interactive:
        creds = _prompt_credentials(creds)

    return creds


def _prompt_credentials(creds: Credentials) -> Credentials:
    """Prompt for whichever fields are still missing."""
    print(f"\n{'=' * 55}")
    print("  ForgeRock Authentication Required")
    print(f"{'=' * 55}")

    username = creds.username
    if not username:
        username = input("  ForgeRock Username: ").strip()
    else:
        print(f"  Username: {username}")

    password = creds.password
    if not password:
        password = getpass.getpass("  ForgeRock Password: ")

    print(f"{'=' * 55}\n")
    return dataclasses.replace(creds, username=username, password=password)
