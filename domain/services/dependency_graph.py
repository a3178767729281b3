from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from domain.models import CANONICAL_TYPE_ORDER


@dataclass(frozen=True)
class DependencyGraph:
    node_ids: list[str]
    outgoing: dict[str, list[str]]
    incoming: dict[str, list[str]]

    def roots(self) -> list[str]:
        return [node_id for node_id in self.node_ids if not self.incoming[node_id]]


def build_dependency_graph(
    node_ids: Sequence[str], edges: Iterable[tuple[str, str]]
) -> DependencyGraph:
    outgoing: dict[str, list[str]] = {node_id: [] for node_id in node_ids}
    incoming: dict[str, list[str]] = {node_id: [] for node_id in node_ids}
    for source, target in edges:
        if source == target or source not in outgoing or target not in incoming:
            continue
        if target in outgoing[source]:
            continue
        outgoing[source].append(target)
        incoming[target].append(source)
    return DependencyGraph(node_ids=list(node_ids), outgoing=outgoing, incoming=incoming)


def assign_dependency_ranks(graph: DependencyGraph) -> list[list[str]] | None:
    frontier = graph.roots()
    if not frontier:
        return None

    ranks: list[list[str]] = []
    visited: set[str] = set()
    while frontier:
        rank: list[str] = []
        next_frontier: list[str] = []
        for node_id in frontier:
            if node_id in visited:
                continue
            visited.add(node_id)
            rank.append(node_id)
            next_frontier.extend(
                target for target in graph.outgoing[node_id] if target not in visited
            )
        if rank:
            ranks.append(rank)
        frontier = next_frontier

    # Nodes only reachable through a cycle never enter the frontier.
    overflow = [node_id for node_id in graph.node_ids if node_id not in visited]
    if overflow:
        ranks.append(overflow)
    return ranks


def rank_by_type(node_ids: Sequence[str], node_types: Mapping[str, str]) -> list[list[str]]:
    ranks: list[list[str]] = []
    for node_type in CANONICAL_TYPE_ORDER:
        rank = [node_id for node_id in node_ids if node_types.get(node_id) == node_type]
        if rank:
            ranks.append(rank)
    remaining = [
        node_id for node_id in node_ids if node_types.get(node_id) not in CANONICAL_TYPE_ORDER
    ]
    if remaining:
        ranks.append(remaining)
    return ranks
