"""relnotes CLI.

Interactive: the repository and milestone are chosen from numbered menus.
The command line only carries the token and ambient settings.

    relnotes [--token TOKEN] [--config PATH] [--quiet] [--debug]
"""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Callable
from typing import Any, TextIO

from .config import CONFIG_DEFAULT, AppConfig, ConfigError, load_config
from .env_auth import EnvAuthConfig, ResolvedToken, mask_token, resolve_token
from .errors import classify_error
from .github_rest import GitHubRestClient
from .logging import configure_logging
from .orchestrator import ReleaseNotesClient, ReleaseNotesSession
from .ux import print_error, print_warning

_MAX_HELP_WIDTH = 100
EXIT_CONFIG_ERROR = 1

ClientFactory = Callable[[AppConfig, ResolvedToken], ReleaseNotesClient]


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="relnotes",
        description="Extract release notes from labelled pull requests in a GitHub milestone",
        formatter_class=_HelpFormatter,
    )
    p.add_argument(
        "--token",
        help="GitHub API token (overrides GITHUB_TOKEN and the config file)",
    )
    p.add_argument(
        "--config",
        help=f"Configuration file (default: {CONFIG_DEFAULT} if present)",
    )
    p.add_argument(
        "--quiet",
        action="store_true",
        help="Only log errors (env: RELNOTES_QUIET=1)",
    )
    p.add_argument("--debug", action="store_true", help="Log requests and matched rules")
    return p


def _log_level(cfg: AppConfig, args: Any) -> str:
    if getattr(args, "debug", False):
        return "DEBUG"
    if getattr(args, "quiet", False):
        return "ERROR"
    return cfg.logging_level


def print_token_banner(token: ResolvedToken, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    if not token:
        print_warning(
            "Warning: No GitHub token found. Access to private repositories will fail.",
            stream=stream,
        )
    else:
        print(f"Using GitHub token (last 4 chars: {mask_token(token.value)})", file=stream)


def _default_client(cfg: AppConfig, token: ResolvedToken) -> ReleaseNotesClient:
    return GitHubRestClient(token=token.value or None, base_url=cfg.api_url, timeout=cfg.timeout)


def main(
    argv: list[str] | None = None,
    *,
    client_factory: ClientFactory | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.quiet and os.environ.get("RELNOTES_QUIET") == "1":
        args.quiet = True
    stdout = stdout or sys.stdout

    try:
        cfg = load_config(args.config)
    except ConfigError as exc:
        print_error(f"Configuration error: {classify_error(exc).message}", stream=stdout)
        return EXIT_CONFIG_ERROR

    logger = configure_logging(json_logging=cfg.logging_json_enabled, level=_log_level(cfg, args))
    token = resolve_token(
        flag_token=args.token,
        config_token=cfg.token,
        config=EnvAuthConfig(
            load_dotenv=cfg.env_auth_load_dotenv,
            dotenv_path=cfg.env_auth_dotenv_path,
        ),
    )
    logger.debug("token resolved", source=token.source)
    print_token_banner(token, stream=stdout)

    client = (client_factory or _default_client)(cfg, token)
    try:
        session = ReleaseNotesSession(
            client, cfg.repositories, stdin=stdin, stdout=stdout, logger=logger
        )
        return session.run()
    finally:
        close = getattr(client, "close", None)
        if callable(close):
            close()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
