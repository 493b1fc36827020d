"""relnotes - release notes from labelled GitHub pull requests.

Library use, without the interactive menus:

from relnotes import GitHubRestClient, extract, unify

with GitHubRestClient(token="...") as client:
    sets = [client.list_open_milestones(repo) for repo in ("acme/api", "acme/web")]
    for um in unify(sets):
        for member in um.members:
            for pr in client.list_release_note_pulls(member.origin, member.number):
                print(pr.number, extract(pr.body).render())
"""

from __future__ import annotations

# Defined before the submodule imports: github_rest builds its User-Agent from it.
__version__ = "0.2.0"

from .extractor import extract, extract_with_rule, render_release_note  # noqa: E402
from .github_rest import GitHubAPIError, GitHubRestClient  # noqa: E402
from .milestones import unify  # noqa: E402
from .models import (  # noqa: E402
    NOT_FOUND,
    ExtractionResult,
    Milestone,
    PullRequest,
    Repository,
    UnifiedMilestone,
)

__all__ = [
    "NOT_FOUND",
    "ExtractionResult",
    "GitHubAPIError",
    "GitHubRestClient",
    "Milestone",
    "PullRequest",
    "Repository",
    "UnifiedMilestone",
    "extract",
    "extract_with_rule",
    "render_release_note",
    "unify",
    "__version__",
]
