#!/usr/bin/env python3
"""
ForgeRock Login CLI
===================
Logs in to ForgeRock AM and a SAML application, then optionally issues one
follow-up request with the authenticated session.

All configuration flows through ``LoginRunConfig``: ``.env`` / environment
variables first, then CLI flags.  Missing credentials are prompted for.

Run with: python -m forgerock_sso
"""

import argparse
import json
import logging
import sys
from functools import partial
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .auth.credentials import Credentials, resolve_credentials
from .client import ForgeRockClient
from .errors import ConfigurationError, ForgeRockError
from .run_config import LoginRunConfig
from .transport import new_session, send

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='forgerock-sso',
        description='Log in to ForgeRock AM and a SAML application without a browser',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m forgerock_sso --base-url https://am.example.com/am --app-url https://zuul.example.com
  python -m forgerock_sso --fetch /api/tenants          # endpoints + credentials from .env
  FORGEROCK_PASSWORD=... python -m forgerock_sso --no-prompt --output-json login.json
        """
    )

    parser.add_argument('--base-url', type=str, metavar='URL',
                        help='ForgeRock AM base URL (or FORGEROCK_BASE_URL)')
    parser.add_argument('--app-url', type=str, metavar='URL',
                        help='Application entry URL (or APP_URL)')
    parser.add_argument('--timeout', type=float, metavar='SECONDS',
                        help='Per-request timeout (default: none)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Debug logging')

    # ── Authentication flags ──────────────────────────────────────
    auth_group = parser.add_argument_group('Authentication',
        'Credentials are resolved from flags, then env vars, then a prompt.')
    auth_group.add_argument(
        '--username', type=str,
        help='ForgeRock username (or FORGEROCK_USERNAME env var)',
    )
    auth_group.add_argument(
        '--password', type=str,
        help='ForgeRock password (or FORGEROCK_PASSWORD env var)',
    )
    auth_group.add_argument(
        '--no-prompt', action='store_true',
        help='Never prompt; fail if credentials are incomplete',
    )

    # ── After login ───────────────────────────────────────────────
    after_group = parser.add_argument_group('After login')
    after_group.add_argument(
        '--fetch', type=str, metavar='URL_OR_PATH',
        help='GET this URL with the authenticated session and print the body '
             '(paths are relative to --app-url)',
    )
    after_group.add_argument(
        '--output-json', type=str, metavar='PATH',
        help='Write a JSON summary of the run to PATH',
    )
    return parser


def _resolve_fetch_url(app_url: str, fetch: str) -> str:
    if fetch.startswith(('http://', 'https://')):
        return fetch
    return app_url.rstrip('/') + '/' + fetch.lstrip('/')


def _write_summary(path: str, summary: Dict[str, Any]) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(summary, f, indent=2)
    logger.info(f"[CLI] Summary written to {path}")


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI.  Returns the process exit code."""
    load_dotenv()
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%H:%M:%S'
    )

    summary: Dict[str, Any]
    output_json = getattr(args, 'output_json', None)
    try:
        cfg = LoginRunConfig.from_cli_args(args, base=LoginRunConfig.from_env())
        output_json = cfg.output_json
        cfg.validate()
        cfg.log_summary()

        creds = resolve_credentials(
            Credentials(username=cfg.username, password=cfg.password),
            interactive=not args.no_prompt,
        )
        client = ForgeRockClient(
            cfg.base_url,
            session_factory=partial(new_session, cfg.user_agent, cfg.timeout_seconds),
        )
        session = client.login(cfg.app_url, creds)
    except ConfigurationError as e:
        logger.error(f"[CLI] {e}")
        if output_json:
            _write_summary(output_json, e.to_payload())
        return 2
    except ForgeRockError as e:
        logger.error(f"[CLI] ❌ Login failed ({e.code}): {e}")
        if output_json:
            _write_summary(output_json, e.to_payload())
        return 1

    summary = {
        'ok': True,
        'app_url': cfg.app_url,
        'cookies': sorted({c.name for c in session.cookies}),
    }

    exit_code = 0
    with session:
        if cfg.fetch_url:
            url = _resolve_fetch_url(cfg.app_url, cfg.fetch_url)
            try:
                resp = send(session, 'GET', url, 'failed to fetch',
                            headers={'Accept': 'application/json'})
            except ForgeRockError as e:
                logger.error(f"[CLI] {e}")
                summary['fetch_error'] = e.message
                exit_code = 1
            else:
                summary['fetch_url'] = url
                summary['fetch_status'] = resp.status_code
                print(resp.text)
                if resp.status_code >= 400:
                    exit_code = 1

    if output_json:
        _write_summary(output_json, summary)
    return exit_code


if __name__ == '__main__':
    sys.exit(main())
