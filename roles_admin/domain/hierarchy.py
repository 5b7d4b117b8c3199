"""Graph algorithms over the role grant relation.

The relation is read through a ``neighbours`` callable that maps a batch of
role ids to the ids adjacent to each of them. Walking outgoing edges yields
the roles a role inherits; walking incoming edges yields the roles that
inherit it. Traversals are breadth-first and fetch one level per call, so a
store backed by SQL issues one query per level instead of one per role.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable, Mapping
from dataclasses import dataclass

Neighbours = Callable[[Collection[int]], Mapping[int, Iterable[int]]]


def walk(start: int, neighbours: Neighbours, *, stop_at: int | None = None) -> set[int]:
    """Return every id reachable from ``start``, excluding ``start`` itself.

    When ``stop_at`` is reached the walk ends early; the returned set then
    contains ``stop_at`` but may be incomplete.
    """

    visited: set[int] = {start}
    reached: set[int] = set()
    frontier: set[int] = {start}
    while frontier:
        adjacency = neighbours(frontier)
        next_frontier: set[int] = set()
        for node in frontier:
            for adjacent in adjacency.get(node, ()):
                if adjacent == start:
                    # Only possible if the stored relation is already cyclic.
                    reached.add(adjacent)
                    continue
                if adjacent in visited:
                    continue
                visited.add(adjacent)
                reached.add(adjacent)
                if adjacent == stop_at:
                    return reached
                next_frontier.add(adjacent)
        frontier = next_frontier
    return reached


def is_reachable(source: int, target: int, neighbours: Neighbours) -> bool:
    """Return ``True`` when ``target`` can be reached from ``source``."""

    if source == target:
        return True
    return target in walk(source, neighbours, stop_at=target)


def creates_cycle(role_id: int, granted_role_id: int, grants_of: Neighbours) -> bool:
    """Return ``True`` if the edge ``role_id -> granted_role_id`` would close a cycle.

    That is the case when ``role_id`` is already reachable from
    ``granted_role_id`` along grant edges, self-grants included.
    """

    return is_reachable(granted_role_id, role_id, grants_of)


@dataclass(frozen=True)
class GrantDiff:
    """Edge changes needed to turn a current grant set into a desired one."""

    to_revoke: frozenset[int]
    to_grant: frozenset[int]

    @property
    def is_empty(self) -> bool:
        return not self.to_revoke and not self.to_grant


def diff_grants(current: Iterable[int], desired: Iterable[int]) -> GrantDiff:
    """Split the symmetric difference of ``current`` and ``desired``."""

    current_set = frozenset(current)
    desired_set = frozenset(desired)
    return GrantDiff(
        to_revoke=current_set - desired_set,
        to_grant=desired_set - current_set,
    )


__all__ = [
    "GrantDiff",
    "Neighbours",
    "creates_cycle",
    "diff_grants",
    "is_reachable",
    "walk",
]
