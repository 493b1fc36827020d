"""GitHub token discovery.

Precedence, highest first:

1. ``--token`` on the command line
2. ``GITHUB_TOKEN`` (then ``GH_TOKEN`` and friends) in the environment,
   after loading a ``.env`` file if one is present
3. ``github.token`` in the configuration file
4. the built-in default (empty)

The resolved value is passed to :class:`relnotes.github_rest.GitHubRestClient`;
nothing here stores it globally.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .logging import get_logger

DEFAULT_TOKEN = ""
ALTERNATIVE_TOKEN_VARS = ("GH_TOKEN", "GITHUB_ACCESS_TOKEN", "GH_ACCESS_TOKEN", "GITHUB_PAT")
DOTENV_LOCATIONS = (".env", ".env.local")


@dataclass
class EnvAuthConfig:
    """Configuration for environment-based authentication."""

    load_dotenv: bool = True
    dotenv_path: str | None = None
    github_token_var: str = "GITHUB_TOKEN"


@dataclass(frozen=True)
class ResolvedToken:
    value: str
    source: str  # flag | env:<VAR> | config | default

    def __bool__(self) -> bool:
        return bool(self.value)


class EnvironmentAuthManager:
    def __init__(self, config: EnvAuthConfig):
        self.config = config
        self.logger = get_logger()
        self._dotenv_loaded = False

        if config.load_dotenv:
            self._load_dotenv()

    @property
    def dotenv_loaded(self) -> bool:
        return self._dotenv_loaded

    def _load_dotenv(self) -> None:
        """Load the first .env file found; already-set variables win."""
        candidates = (
            [self.config.dotenv_path] if self.config.dotenv_path else list(DOTENV_LOCATIONS)
        )
        for location in candidates:
            env_path = Path(location)
            if env_path.is_file():
                load_dotenv(str(env_path), override=False)
                self._dotenv_loaded = True
                self.logger.debug(f"Loaded environment variables from {env_path}")
                return

    def get_github_token(self) -> tuple[str, str] | None:
        """Return ``(token, variable name)`` from the environment, if any."""
        for var in (self.config.github_token_var, *ALTERNATIVE_TOKEN_VARS):
            token = os.getenv(var, "").strip()
            if token:
                self.logger.debug(f"Found GitHub token in {var}")
                return token, var
        return None

    def resolve(self, flag_token: str | None = None, config_token: str | None = None) -> ResolvedToken:
        if flag_token and flag_token.strip():
            return ResolvedToken(flag_token.strip(), "flag")
        found = self.get_github_token()
        if found is not None:
            token, var = found
            return ResolvedToken(token, f"env:{var}")
        if config_token and config_token.strip():
            return ResolvedToken(config_token.strip(), "config")
        return ResolvedToken(DEFAULT_TOKEN, "default")


def mask_token(token: str, visible: int = 4) -> str:
    """Last ``visible`` characters of the token, for the startup banner."""
    return token[max(0, len(token) - visible):]


def resolve_token(
    flag_token: str | None = None,
    config_token: str | None = None,
    config: EnvAuthConfig | None = None,
) -> ResolvedToken:
    manager = EnvironmentAuthManager(config or EnvAuthConfig())
    return manager.resolve(flag_token=flag_token, config_token=config_token)


__all__ = [
    "ALTERNATIVE_TOKEN_VARS",
    "EnvAuthConfig",
    "EnvironmentAuthManager",
    "ResolvedToken",
    "mask_token",
    "resolve_token",
]
