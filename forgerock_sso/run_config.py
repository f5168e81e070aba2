"""
Unified Run Configuration
=========================
Single source of truth for login defaults and runtime settings.

Populated from, in increasing priority:
    1. ``_DEFAULTS`` below
    2. Environment variables (``from_env``); ``.env`` files are loaded by
       the CLI before this runs
    3. CLI flags (``from_cli_args``)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigurationError
from .transport import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Canonical defaults: the ONLY place these values live
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "base_url": "",
    "app_url": "",
    "username": "",
    "password": "",
    "user_agent": DEFAULT_USER_AGENT,
    "timeout_seconds": None,         # None = block indefinitely
    "fetch_url": None,               # optional follow-up request after login
    "output_json": None,
}

# Environment variable → config field
_ENV_VARS = {
    "FORGEROCK_BASE_URL": "base_url",
    "APP_URL": "app_url",
    "FORGEROCK_USERNAME": "username",
    "FORGEROCK_PASSWORD": "password",
    "FORGEROCK_USER_AGENT": "user_agent",
    "FORGEROCK_TIMEOUT": "timeout_seconds",
}


@dataclass
class LoginRunConfig:
    """
    Configuration for one CLI login run.

    Populate via:
      - ``LoginRunConfig()``                          → all defaults
      - ``LoginRunConfig.from_env()``                 → from os.environ
      - ``LoginRunConfig.from_cli_args(ns, base=cfg)`` → flags over *base*
    """

    # ---- Endpoints ----
    base_url: str = _DEFAULTS["base_url"]
    app_url: str = _DEFAULTS["app_url"]

    # ---- Credentials ----
    username: str = _DEFAULTS["username"]
    password: str = _DEFAULTS["password"]

    # ---- HTTP ----
    user_agent: str = _DEFAULTS["user_agent"]
    timeout_seconds: Optional[float] = _DEFAULTS["timeout_seconds"]

    # ---- After login ----
    fetch_url: Optional[str] = _DEFAULTS["fetch_url"]
    output_json: Optional[str] = _DEFAULTS["output_json"]

    # -----------------------------------------------------------------------
    # Factory helpers
    # -----------------------------------------------------------------------
    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LoginRunConfig":
        """Build config from environment variables (unset → default)."""
        if environ is None:
            environ = os.environ

        values = {}
        for var, name in _ENV_VARS.items():
            raw = environ.get(var, "").strip()
            if not raw:
                continue
            if name == "timeout_seconds":
                values[name] = _parse_timeout(raw, var)
            else:
                values[name] = raw
        return cls(**values)

    @classmethod
    def from_cli_args(
        cls, args, base: Optional["LoginRunConfig"] = None
    ) -> "LoginRunConfig":
        """Overlay an argparse Namespace (``__main__.py``) on *base*.

        Flags that were not given (``None`` / empty) keep the *base* value.
        """
        cfg = base if base is not None else cls()
        overrides = {
            "base_url": getattr(args, "base_url", None),
            "app_url": getattr(args, "app_url", None),
            "username": getattr(args, "username", None),
            "password": getattr(args, "password", None),
            "timeout_seconds": getattr(args, "timeout", None),
            "fetch_url": getattr(args, "fetch", None),
            "output_json": getattr(args, "output_json", None),
        }
        values = {k: v for k, v in overrides.items() if v not in (None, "")}
        return cls(
            base_url=values.get("base_url", cfg.base_url),
            app_url=values.get("app_url", cfg.app_url),
            username=values.get("username", cfg.username),
            password=values.get("password", cfg.password),
            user_agent=cfg.user_agent,
            timeout_seconds=values.get("timeout_seconds", cfg.timeout_seconds),
            fetch_url=values.get("fetch_url", cfg.fetch_url),
            output_json=values.get("output_json", cfg.output_json),
        )

    # -----------------------------------------------------------------------
    # Validation
    # -----------------------------------------------------------------------
    def validate(self) -> None:
        """Raise ``ConfigurationError`` for settings no login can run with.

        Credentials are not checked here; they may still come from a prompt.
        """
        if not self.base_url:
            raise ConfigurationError(
                "missing ForgeRock base url (--base-url or FORGEROCK_BASE_URL)"
            )
        if not self.app_url:
            raise ConfigurationError(
                "missing application url (--app-url or APP_URL)"
            )
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ConfigurationError(
                f"timeout must be positive, got {self.timeout_seconds}"
            )

    # -----------------------------------------------------------------------
    # Logging helper
    # -----------------------------------------------------------------------
    def log_summary(self) -> None:
        """Emit a structured summary to the logger (never the password)."""
        logger.info("=" * 60)
        logger.info("FORGEROCK LOGIN CONFIG")
        logger.info("=" * 60)
        logger.info(f"  ForgeRock:        {self.base_url}")
        logger.info(f"  Application:      {self.app_url}")
        logger.info(f"  Username:         {'set' if self.username else 'not set'}")
        logger.info(f"  Password:         {'set' if self.password else 'not set'}")
        if self.timeout_seconds is not None:
            logger.info(f"  Timeout:          {self.timeout_seconds}s per request")
        else:
            logger.info("  Timeout:          none")
        if self.fetch_url:
            logger.info(f"  Fetch After:      {self.fetch_url}")
        if self.output_json:
            logger.info(f"  Output JSON:      {self.output_json}")
        logger.info("=" * 60)


def _parse_timeout(raw: str, source: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(
            f"{source} must be a number of seconds, got {raw!r}"
        ) from None
