"""Constant-time connectivity lookups over the raw link list."""
from __future__ import annotations

from collections import defaultdict
from typing import Any, Dict, FrozenSet, Hashable, Iterable, Mapping, Set, Tuple


def _endpoint_id(endpoint: Any) -> Hashable:
    # Resolved links carry node objects; raw links carry ids.
    return getattr(endpoint, "id", endpoint)


def _link_endpoints(link: Any) -> Tuple[Hashable, Hashable]:
    if isinstance(link, tuple):
        source, target = link
    elif isinstance(link, Mapping):
        source, target = link["source"], link["target"]
    else:
        source, target = link.source, link.target
    return _endpoint_id(source), _endpoint_id(target)


class AdjacencyIndex:
    """Symmetric, reflexive "is directly linked" relation keyed by id pairs."""

    __slots__ = ("_pairs", "_neighbours")

    def __init__(self, pairs: Iterable[Tuple[Hashable, Hashable]] = ()) -> None:
        self._pairs: FrozenSet[Tuple[Hashable, Hashable]] = frozenset(pairs)
        neighbours: Dict[Hashable, Set[Hashable]] = defaultdict(set)
        for source, target in self._pairs:
            neighbours[source].add(target)
            neighbours[target].add(source)
        self._neighbours: Dict[Hashable, FrozenSet[Hashable]] = {
            node_id: frozenset(ids) for node_id, ids in neighbours.items()
        }

    @classmethod
    def build(cls, links: Iterable[Any]) -> "AdjacencyIndex":
        """Record every ``(source, target)`` pair from a link list in one pass.

        Args:
            links: Link mappings, objects with ``source``/``target`` attributes,
                or ``(source, target)`` tuples.

        Returns:
            AdjacencyIndex: Read-only index over the recorded pairs.
        """

        return cls(_link_endpoints(link) for link in links)

    def is_connected(self, a: Hashable, b: Hashable) -> bool:
        """Return True when a and b are linked in either direction or identical."""

        return a == b or (a, b) in self._pairs or (b, a) in self._pairs

    def neighbours(self, node_id: Hashable) -> FrozenSet[Hashable]:
        return self._neighbours.get(node_id, frozenset())

    def __contains__(self, pair: object) -> bool:
        return pair in self._pairs

    def __len__(self) -> int:
        return len(self._pairs)


__all__ = ["AdjacencyIndex"]
