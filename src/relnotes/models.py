from __future__ import annotations

from dataclasses import dataclass, field

NOT_FOUND_MESSAGE = "No release note found in expected format"
EMPTY_BODY_MESSAGE = "No release note found"


@dataclass(frozen=True)
class Repository:
    """A GitHub repository offered in the selection menu."""

    slug: str  # owner/name
    label: str = ""

    @property
    def display_name(self) -> str:
        return self.label or self.slug


@dataclass(frozen=True)
class Milestone:
    number: int
    title: str
    description: str = ""
    origin: str = ""  # slug of the repository it was fetched from


@dataclass
class UnifiedMilestone:
    """Same-titled milestones from one or more repositories.

    ``description`` comes from the first member seen; members keep their
    origin so pull requests can be fetched per repository.
    """

    title: str
    description: str = ""
    members: list[Milestone] = field(default_factory=list)

    @property
    def origins(self) -> tuple[str, ...]:
        return tuple(m.origin for m in self.members)


@dataclass(frozen=True)
class PullRequest:
    number: int
    title: str
    body: str = ""
    milestone_number: int | None = None
    labels: frozenset[str] = frozenset()
    origin: str = ""
    is_pull_request: bool = True


@dataclass(frozen=True)
class ExtractionResult:
    text: str | None = None

    @property
    def found(self) -> bool:
        return self.text is not None

    def render(self, default: str = NOT_FOUND_MESSAGE) -> str:
        return self.text if self.text is not None else default

    @classmethod
    def of(cls, text: str) -> ExtractionResult:
        return cls(text=text)


NOT_FOUND = ExtractionResult()


__all__ = [
    "EMPTY_BODY_MESSAGE",
    "NOT_FOUND",
    "NOT_FOUND_MESSAGE",
    "ExtractionResult",
    "Milestone",
    "PullRequest",
    "Repository",
    "UnifiedMilestone",
]
