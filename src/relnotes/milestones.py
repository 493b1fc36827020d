"""Cross-repository milestone unification.

Milestone numbers are per repository, titles are what people share. The
unifier groups milestones by title so a release such as ``v9.5.0`` that exists
in several repositories is offered once in the menu, while every
(repository, number) pair behind it is kept for fetching pull requests.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import Milestone, UnifiedMilestone


def unify(milestone_sets: Sequence[Sequence[Milestone]]) -> list[UnifiedMilestone]:
    """Group milestones by title, in first-occurrence order.

    The description of a group is taken from the first milestone seen with that
    title and is not updated by later members.
    """
    by_title: dict[str, UnifiedMilestone] = {}
    for milestone_set in milestone_sets:
        for milestone in milestone_set:
            existing = by_title.get(milestone.title)
            if existing is not None:
                existing.members.append(milestone)
                continue
            by_title[milestone.title] = UnifiedMilestone(
                title=milestone.title,
                description=milestone.description,
                members=[milestone],
            )
    return list(by_title.values())


def single_repository(milestones: Iterable[Milestone]) -> list[UnifiedMilestone]:
    # One entry per milestone, even if a repository repeats a title.
    return [
        UnifiedMilestone(title=m.title, description=m.description, members=[m])
        for m in milestones
    ]


__all__ = ["single_repository", "unify"]
