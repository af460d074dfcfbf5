"""Dependency graph over conditional visibility rules and cycle detection."""

import logging
from typing import Iterator, Sequence

from .form_schema import FieldSchema

logger = logging.getLogger(__name__)

DependencyGraph = dict[str, list[str]]


def build_dependency_graph(fields: Sequence[FieldSchema]) -> DependencyGraph:
    """Map each field id to the field ids its conditional rules read.

    Edges point from a field to the fields it depends on, in rule order and
    without duplicates. Fields without conditions map to an empty list.
    """
    graph: DependencyGraph = {}
    for field in fields:
        deps: list[str] = []
        if field.conditions is not None:
            for rule in field.conditions.rules:
                if rule.field not in deps:
                    deps.append(rule.field)
        graph[field.id] = deps
    return graph


def _find_cycle_entries(graph: DependencyGraph, root: str, visited: set[str]) -> list[str]:
    """Depth-first walk from ``root`` with an explicit stack.

    Returns every node reached while it is still on the active path, in
    discovery order. The edge back onto the path is skipped and the walk
    carries on, so each node is fully expanded. A node joins ``visited``
    (shared across roots) only once all of its dependencies are finished.
    """
    entries: list[str] = []
    on_stack = {root}
    stack: list[tuple[str, Iterator[str]]] = [(root, iter(graph.get(root, ())))]

    while stack:
        node, deps = stack[-1]
        for dep in deps:
            if dep in on_stack:
                entries.append(dep)
                continue
            if dep not in visited:
                on_stack.add(dep)
                stack.append((dep, iter(graph.get(dep, ()))))
                break
        else:
            stack.pop()
            on_stack.discard(node)
            visited.add(node)

    return entries


def detect_circular_dependencies(fields: Sequence[FieldSchema]) -> list[str]:
    """Return the ids at which a dependency cycle was re-entered.

    An id is reported for every edge that leads back onto the active path,
    in discovery order and without duplicates. This is not the full
    membership of each cycle: for A -> B -> C -> A only the re-entry point
    (A) is reported. A field whose rule depends on itself is reported as a
    one-node cycle.
    """
    graph = build_dependency_graph(fields)
    visited: set[str] = set()
    entries: list[str] = []

    for root in graph:
        if root in visited:
            continue
        for entry in _find_cycle_entries(graph, root, visited):
            if entry not in entries:
                entries.append(entry)

    if entries:
        logger.debug(f"Conditional dependency cycles re-entered at: {', '.join(entries)}")
    return entries


def find_dependents(fields: Sequence[FieldSchema], field_id: str) -> list[str]:
    """Ids of fields whose conditional rules reference ``field_id``."""
    return [
        field.id
        for field in fields
        if field.conditions is not None
        and any(rule.field == field_id for rule in field.conditions.rules)
    ]
