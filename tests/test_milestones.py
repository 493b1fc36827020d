from __future__ import annotations

from relnotes.milestones import single_repository, unify
from relnotes.models import Milestone


def test_same_title_across_repositories_is_merged():
    a = [Milestone(number=10, title="v1", origin="A")]
    b = [Milestone(number=77, title="v1", origin="B")]

    result = unify([a, b])

    assert len(result) == 1
    um = result[0]
    assert um.title == "v1"
    assert len(um.members) == 2
    assert {(m.origin, m.number) for m in um.members} == {("A", 10), ("B", 77)}
    assert um.origins == ("A", "B")


def test_disjoint_titles_give_one_entry_each():
    sets = [
        [Milestone(1, "v1", origin="A"), Milestone(2, "v2", origin="A")],
        [Milestone(3, "v3", origin="B")],
    ]
    result = unify(sets)
    assert [um.title for um in result] == ["v1", "v2", "v3"]
    assert all(len(um.members) == 1 for um in result)


def test_first_seen_description_wins():
    sets = [
        [Milestone(1, "v9.5", "first", origin="A")],
        [Milestone(4, "v9.5", "second", origin="B")],
    ]
    (um,) = unify(sets)
    assert um.description == "first"
    assert [m.description for m in um.members] == ["first", "second"]


def test_members_share_the_group_title_and_order_is_first_occurrence():
    sets = [
        [Milestone(1, "b", origin="A"), Milestone(2, "a", origin="A")],
        [Milestone(3, "a", origin="B"), Milestone(4, "c", origin="B"), Milestone(5, "b", origin="B")],
    ]
    result = unify(sets)
    assert [um.title for um in result] == ["b", "a", "c"]
    for um in result:
        assert all(m.title == um.title for m in um.members)


def test_empty_input_and_empty_title():
    assert unify([]) == []
    assert unify([[], []]) == []
    (um,) = unify([[Milestone(1, "", origin="A")], [Milestone(2, "", origin="B")]])
    assert um.title == ""
    assert len(um.members) == 2


def test_unify_does_not_mutate_input():
    a = [Milestone(1, "v1", origin="A")]
    b = [Milestone(2, "v1", origin="B")]
    unify([a, b])
    assert a == [Milestone(1, "v1", origin="A")]
    assert b == [Milestone(2, "v1", origin="B")]


def test_single_repository_keeps_duplicates_apart():
    result = single_repository([Milestone(1, "dup", origin="A"), Milestone(2, "dup", origin="A")])
    assert [len(um.members) for um in result] == [1, 1]
    assert [um.members[0].number for um in result] == [1, 2]
