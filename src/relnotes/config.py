from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, cast

import yaml

from .github_rest import DEFAULT_API_URL, DEFAULT_TIMEOUT
from .models import Repository

CONFIG_DEFAULT = "relnotes.config.yaml"

DEFAULT_REPOSITORIES = (
    Repository("mattermost/mattermost"),
    Repository("mattermost/enterprise"),
    Repository("mattermost/mattermost-mobile"),
    Repository("mattermost/mattermost-desktop"),
)


class ConfigError(RuntimeError):
    category = "config"


@dataclass
class AppConfig:
    source_file: Path | None = None
    api_url: str = DEFAULT_API_URL
    token: str = ""
    timeout: float = DEFAULT_TIMEOUT
    repositories: list[Repository] = field(default_factory=lambda: list(DEFAULT_REPOSITORIES))
    # Logging configuration
    logging_json_enabled: bool = False
    logging_level: str = "WARNING"
    # Environment authentication configuration
    env_auth_load_dotenv: bool = True
    env_auth_dotenv_path: str | None = None


def _resolve_env_var(value: Any) -> Any:
    """Resolve environment variable if value starts with $ (unset -> empty)."""
    if isinstance(value, str) and value.startswith('$'):
        return os.getenv(value[1:], '')
    return value


def _parse_repositories(raw: Any) -> list[Repository]:
    if raw is None:
        return list(DEFAULT_REPOSITORIES)
    if not isinstance(raw, list):
        raise ConfigError('repositories must be a list')
    repos: list[Repository] = []
    for entry in raw:
        if isinstance(entry, str) and entry.strip():
            repos.append(Repository(entry.strip()))
        elif isinstance(entry, dict) and isinstance(entry.get('slug'), str):
            repos.append(Repository(entry['slug'].strip(), str(entry.get('label') or '')))
        else:
            raise ConfigError(f'Invalid repository entry: {entry!r}')
    for repo in repos:
        if repo.slug.count('/') != 1:
            raise ConfigError(f'Repository must be owner/name: {repo.slug!r}')
    if not repos:
        raise ConfigError('At least one repository is required')
    return repos


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from YAML.

    With no explicit path the default file is optional; an explicit path must exist.
    """
    explicit = path is not None
    p = Path(path if path is not None else CONFIG_DEFAULT)
    if not p.exists():
        if explicit:
            raise ConfigError(f'Configuration file not found: {p}')
        cfg = AppConfig()
    else:
        try:
            loaded = yaml.safe_load(p.read_text(encoding='utf-8')) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f'Invalid YAML in {p}: {exc}') from exc
        if not isinstance(loaded, dict):
            raise ConfigError(f'Configuration in {p} must be a mapping')
        raw = cast(dict[str, Any], loaded)
        gh = cast(dict[str, Any], raw.get('github', {}) or {})
        logging_config = cast(dict[str, Any], raw.get('logging', {}) or {})
        env_auth = cast(dict[str, Any], raw.get('environment', {}) or {})
        try:
            timeout = float(gh.get('timeout', DEFAULT_TIMEOUT))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f'github.timeout must be a number: {exc}') from exc
        cfg = AppConfig(
            source_file=p,
            api_url=str(gh.get('api_url') or DEFAULT_API_URL),
            token=str(_resolve_env_var(gh.get('token')) or ''),
            timeout=timeout,
            repositories=_parse_repositories(raw.get('repositories')),
            logging_json_enabled=bool(logging_config.get('json_enabled', False)),
            logging_level=str(logging_config.get('level', 'WARNING')),
            env_auth_load_dotenv=bool(env_auth.get('load_dotenv', True)),
            env_auth_dotenv_path=env_auth.get('dotenv_path'),
        )
    level_override = os.environ.get('RELNOTES_LOG_LEVEL')
    if level_override:
        cfg.logging_level = level_override
    return cfg


__all__ = ["AppConfig", "CONFIG_DEFAULT", "ConfigError", "DEFAULT_REPOSITORIES", "load_config"]
