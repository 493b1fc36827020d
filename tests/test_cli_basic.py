from __future__ import annotations

import io
import textwrap
from pathlib import Path
from typing import Any

import pytest

from relnotes import cli
from relnotes.config import AppConfig
from relnotes.env_auth import ResolvedToken
from relnotes.models import Milestone, PullRequest


class _StubClient:
    def __init__(self) -> None:
        self.closed = False

    def list_open_milestones(self, repo: str) -> list[Milestone]:
        return [Milestone(3, "v5.0", origin=repo)]

    def list_release_note_pulls(self, repo: str, milestone_number: int) -> list[PullRequest]:
        return [
            PullRequest(
                number=42,
                title="Speed up startup",
                body="release-note: Improved startup time\n\nNext paragraph.",
                milestone_number=milestone_number,
                origin=repo,
            )
        ]

    def close(self) -> None:
        self.closed = True


def _factory(seen: dict[str, Any]):
    def build(cfg: AppConfig, token: ResolvedToken) -> _StubClient:
        seen["cfg"] = cfg
        seen["token"] = token
        seen["client"] = _StubClient()
        return seen["client"]

    return build


def test_main_runs_interactive_flow_with_flag_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "env-token-0000")
    seen: dict[str, Any] = {}
    stdout = io.StringIO()

    rc = cli.main(
        ["--token", "flag-token-9876"],
        client_factory=_factory(seen),
        stdin=io.StringIO("1\n1\n"),
        stdout=stdout,
    )

    out = stdout.getvalue()
    assert rc == 0
    assert seen["token"].value == "flag-token-9876"
    assert "Using GitHub token (last 4 chars: 9876)" in out
    assert "Working with mattermost/mattermost" in out
    assert "PR #42: Speed up startup\nRelease Note: Improved startup time" in out
    assert seen["client"].closed


def test_main_warns_without_token() -> None:
    seen: dict[str, Any] = {}
    stdout = io.StringIO()

    rc = cli.main([], client_factory=_factory(seen), stdin=io.StringIO("9\n"), stdout=stdout)

    out = stdout.getvalue()
    assert rc == 2
    assert "Warning: No GitHub token found. Access to private repositories will fail." in out
    assert "Invalid selection" in out
    assert seen["client"].closed


def test_main_uses_config_file(tmp_path: Path) -> None:
    config = tmp_path / "custom.yaml"
    config.write_text(
        textwrap.dedent(
            """\
            github:
              token: cfg-token-1111
              api_url: https://ghe.example.com/api/v3
            repositories: [acme/api]
            environment:
              load_dotenv: false
            """
        )
    )
    seen: dict[str, Any] = {}
    stdout = io.StringIO()

    rc = cli.main(
        ["--config", str(config)],
        client_factory=_factory(seen),
        stdin=io.StringIO("1\n1\n"),
        stdout=stdout,
    )

    assert rc == 0
    assert seen["cfg"].api_url == "https://ghe.example.com/api/v3"
    assert seen["token"].source == "config"
    assert "1: acme/api\n" in stdout.getvalue()
    assert "All repositories" not in stdout.getvalue()


def test_main_reports_config_errors(tmp_path: Path) -> None:
    stdout = io.StringIO()

    rc = cli.main(["--config", str(tmp_path / "missing.yaml")], stdout=stdout)

    assert rc == 1
    assert "Configuration error" in stdout.getvalue()


def test_default_client_is_rest_client() -> None:
    client = cli._default_client(AppConfig(timeout=7), ResolvedToken("", "default"))
    try:
        assert client.timeout == 7  # type: ignore[attr-defined]
        assert client.token is None  # type: ignore[attr-defined]
    finally:
        client.close()  # type: ignore[attr-defined]


def test_help_mentions_token(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit):
        cli.main(["--help"])
    assert "--token" in capsys.readouterr().out
