"""Audit Forensics - Lateral movement tracing"""

import logging
from collections import deque
from typing import Dict, Iterable, List, Optional

from .models import LogEvent
from .source import as_source

logger = logging.getLogger(__name__)

ResourceGraph = Dict[str, List[str]]


def build_resource_graph(events: Iterable[LogEvent]) -> ResourceGraph:
    """Directed graph of resources touched back to back within a session.

    Every resource that appears is a node, including the last one of each
    session. Adjacency lists keep log order and may repeat an edge.
    """
    sessions: Dict[str, List[str]] = {}
    for event in events:
        sessions.setdefault(event.session_id, []).append(event.target_resource)

    graph: ResourceGraph = {}
    for resources in sessions.values():
        for current, following in zip(resources, resources[1:]):
            graph.setdefault(current, []).append(following)
        graph.setdefault(resources[-1], [])

    return graph


def shortest_path(graph: ResourceGraph, start: str, end: str) -> Optional[List[str]]:
    """Breadth-first search for the path with the fewest edges, or None"""
    if start not in graph:
        return None
    if start == end:
        return [start]

    queue = deque([start])
    predecessor: Dict[str, Optional[str]] = {start: None}

    while queue:
        current = queue.popleft()
        if current == end:
            return _walk_back(predecessor, end)

        for neighbor in graph.get(current, []):
            if neighbor not in predecessor:
                predecessor[neighbor] = current
                queue.append(neighbor)

    return None


def _walk_back(predecessor: Dict[str, Optional[str]], end: str) -> List[str]:
    path = []
    node: Optional[str] = end
    while node is not None:
        path.append(node)
        node = predecessor[node]
    path.reverse()
    return path


def trace_contamination(source, start: Optional[str], end: Optional[str]) -> Optional[List[str]]:
    """Shortest chain of resources leading from ``start`` to ``end``, or None"""
    if not start or not end:
        return None

    source = as_source(source)
    graph = build_resource_graph(source.events())
    path = shortest_path(graph, start, end)

    if path is None:
        logger.info("No path from %s to %s in %d resources", start, end, len(graph))
    else:
        logger.info("Path from %s to %s: %d hops", start, end, len(path) - 1)
    return path
