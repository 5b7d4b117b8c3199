"""Tests for the breadth-first traversal and cycle detection helpers."""

from __future__ import annotations

from roles_admin.domain.hierarchy import creates_cycle, diff_grants, is_reachable, walk


def _neighbours(edges: dict[int, set[int]], calls: list[set[int]] | None = None):
    def _lookup(role_ids):
        if calls is not None:
            calls.append(set(role_ids))
        return {role_id: edges.get(role_id, set()) for role_id in role_ids}

    return _lookup


def test_walk_excludes_start_and_follows_chains():
    edges = {1: {2}, 2: {3}, 3: set()}

    assert walk(1, _neighbours(edges)) == {2, 3}
    assert walk(3, _neighbours(edges)) == set()


def test_walk_fetches_one_batch_per_level():
    edges = {1: {2, 3}, 2: {4}, 3: {4, 5}, 4: {6}}
    calls: list[set[int]] = []

    assert walk(1, _neighbours(edges, calls)) == {2, 3, 4, 5, 6}
    assert calls == [{1}, {2, 3}, {4, 5}, {6}]


def test_walk_visits_shared_descendants_once():
    edges = {1: {2, 3}, 2: {4}, 3: {4}}
    calls: list[set[int]] = []

    walk(1, _neighbours(edges, calls))

    assert sum(1 for batch in calls if 4 in batch) == 1


def test_walk_reports_start_when_stored_relation_is_cyclic():
    edges = {1: {2}, 2: {1}}

    assert walk(1, _neighbours(edges)) == {1, 2}


def test_walk_stops_early_at_target():
    edges = {1: {2}, 2: {3}, 3: {4}}
    calls: list[set[int]] = []

    reached = walk(1, _neighbours(edges, calls), stop_at=2)

    assert 2 in reached
    assert calls == [{1}]


def test_is_reachable():
    edges = {1: {2}, 2: {3}}

    assert is_reachable(1, 3, _neighbours(edges))
    assert not is_reachable(3, 1, _neighbours(edges))
    assert is_reachable(2, 2, _neighbours(edges))


def test_creates_cycle_detects_self_and_back_edges():
    edges = {1: {2}, 2: {3}}
    grants_of = _neighbours(edges)

    assert creates_cycle(1, 1, grants_of)
    assert creates_cycle(3, 1, grants_of)
    assert creates_cycle(2, 1, grants_of)
    assert not creates_cycle(1, 3, grants_of)
    assert not creates_cycle(4, 1, grants_of)


def test_diff_grants_splits_revocations_and_grants():
    diff = diff_grants({1, 2, 3}, [3, 4, 4])

    assert diff.to_revoke == frozenset({1, 2})
    assert diff.to_grant == frozenset({4})
    assert not diff.is_empty
    assert diff_grants({1}, {1}).is_empty
