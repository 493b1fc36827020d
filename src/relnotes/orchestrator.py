"""Interactive release-notes session.

repository menu -> open milestones -> (unify) -> milestone menu ->
labelled pull requests -> extracted notes.

Fetch failures follow one policy: with a single repository the first error
stops the run; across several repositories each failing repository is
reported and skipped, and the run only stops when nothing could be fetched.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import Protocol, TextIO

from .errors import InvalidSelectionError, classify_error
from .extractor import extract_with_rule
from .github_rest import GitHubAPIError
from .logging import StructuredLogger, get_logger
from .milestones import single_repository, unify
from .models import (
    EMPTY_BODY_MESSAGE,
    NOT_FOUND_MESSAGE,
    Milestone,
    PullRequest,
    Repository,
    UnifiedMilestone,
)
from .ux import print_error, print_header, print_menu, prompt_choice

EXIT_OK = 0
EXIT_FETCH_ERROR = 1
EXIT_INVALID_SELECTION = 2

ALL_REPOSITORIES = "All repositories"
INVALID_SELECTION = "Invalid selection"
NO_MILESTONES = "No open milestones found."
NO_PULLS = "No PRs with 'release-note' label found in this milestone."


class ReleaseNotesClient(Protocol):
    def list_open_milestones(self, repo: str) -> list[Milestone]: ...

    def list_release_note_pulls(self, repo: str, milestone_number: int) -> list[PullRequest]: ...


class ReleaseNotesSession:
    def __init__(
        self,
        client: ReleaseNotesClient,
        repositories: Sequence[Repository],
        *,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        logger: StructuredLogger | None = None,
    ) -> None:
        if not repositories:
            raise ValueError("at least one repository is required")
        self.client = client
        self.repositories = list(repositories)
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.logger = logger or get_logger()

    # ---- output -------------------------------------------------------
    def _print(self, message: str = "") -> None:
        print(message, file=self.stdout)

    def _report(self, prefix: str, exc: BaseException) -> None:
        # The failure itself is logged by timed_operation.
        print_error(f"{prefix}: {classify_error(exc).message}", stream=self.stdout)

    # ---- selection ----------------------------------------------------
    def _choose(self, prompt: str, upper: int) -> int | None:
        try:
            return prompt_choice(prompt, upper, stdin=self.stdin, stdout=self.stdout)
        except InvalidSelectionError as exc:
            self.logger.debug("invalid selection", raw=exc.raw, upper=exc.upper)
            self._print(INVALID_SELECTION)
            return None

    def select_repositories(self) -> list[Repository] | None:
        options = [repo.display_name for repo in self.repositories]
        if len(self.repositories) > 1:
            options.append(ALL_REPOSITORIES)
        print_menu("Select a repository:", options, stream=self.stdout)
        choice = self._choose(f"Select an option (1-{len(options)}): ", len(options))
        if choice is None:
            return None
        if choice > len(self.repositories):
            return list(self.repositories)
        return [self.repositories[choice - 1]]

    def select_milestone(
        self, milestones: Sequence[UnifiedMilestone], multi: bool
    ) -> UnifiedMilestone | None:
        labels: list[str] = []
        for um in milestones:
            if multi and len(um.members) > 1:
                labels.append(f"{um.title} ({', '.join(um.origins)})")
            else:
                labels.append(um.title)
        print_menu("Available milestones:", labels, stream=self.stdout)
        choice = self._choose("Select a milestone (number): ", len(milestones))
        if choice is None:
            return None
        return milestones[choice - 1]

    # ---- fetching -----------------------------------------------------
    def collect_milestones(self, repos: Sequence[Repository]) -> list[UnifiedMilestone] | None:
        if len(repos) == 1:
            try:
                with self.logger.timed_operation("fetch_milestones", repo=repos[0].slug):
                    milestones = self.client.list_open_milestones(repos[0].slug)
            except GitHubAPIError as exc:
                self._report("Error getting milestones", exc)
                return None
            return single_repository(milestones)

        sets: list[list[Milestone]] = []
        for repo in repos:
            try:
                with self.logger.timed_operation("fetch_milestones", repo=repo.slug):
                    sets.append(self.client.list_open_milestones(repo.slug))
            except GitHubAPIError as exc:
                self._report(f"Error getting milestones from {repo.slug}", exc)
        if not sets:
            print_error("Could not fetch milestones from any repository", stream=self.stdout)
            return None
        return unify(sets)

    def collect_pulls(self, target: UnifiedMilestone) -> list[PullRequest] | None:
        pulls: list[PullRequest] = []
        failures = 0
        for member in target.members:
            try:
                with self.logger.timed_operation(
                    "fetch_pulls", repo=member.origin, milestone=member.number
                ):
                    pulls.extend(
                        self.client.list_release_note_pulls(member.origin, member.number)
                    )
            except GitHubAPIError as exc:
                failures += 1
                self._report(f"Error getting PRs from {member.origin}", exc)
        if target.members and failures == len(target.members):
            return None
        return pulls

    # ---- report -------------------------------------------------------
    def print_release_notes(self, target: UnifiedMilestone, pulls: Sequence[PullRequest], multi: bool) -> None:
        if not pulls:
            self._print(NO_PULLS)
            return
        print_header(f"PRs with release notes in milestone {target.title}:", stream=self.stdout)
        self._print()
        for pr in pulls:
            result, rule = extract_with_rule(pr.body)
            note = result.render(NOT_FOUND_MESSAGE) if pr.body else EMPTY_BODY_MESSAGE
            self.logger.debug(
                "extract_release_note", repo=pr.origin, number=pr.number, rule=rule
            )
            self._print(f"PR #{pr.number}: {pr.title}")
            if multi:
                self._print(f"Repository: {pr.origin}")
            self._print(f"Release Note: {note}")
            self._print()

    def run(self) -> int:
        repos = self.select_repositories()
        if repos is None:
            return EXIT_INVALID_SELECTION
        multi = len(repos) > 1

        milestones = self.collect_milestones(repos)
        if milestones is None:
            return EXIT_FETCH_ERROR
        self._print(f"\nWorking with {'all repositories' if multi else repos[0].slug}")
        if not milestones:
            self._print(NO_MILESTONES)
            return EXIT_OK

        target = self.select_milestone(milestones, multi)
        if target is None:
            return EXIT_INVALID_SELECTION
        self._print(f"\nSelected milestone: {target.title}\n")

        pulls = self.collect_pulls(target)
        if pulls is None:
            return EXIT_FETCH_ERROR
        self.print_release_notes(target, pulls, multi)
        return EXIT_OK


__all__ = [
    "EXIT_FETCH_ERROR",
    "EXIT_INVALID_SELECTION",
    "EXIT_OK",
    "ReleaseNotesClient",
    "ReleaseNotesSession",
]
