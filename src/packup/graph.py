"""Graph view data for a collected neighborhood."""

import math
from dataclasses import asdict
from typing import Sequence

from .models import CollectedNote, Graph, GraphLink, GraphNode
from .stats.words import count_words

# Categorical palette, indexed by depth
DEPTH_COLORS = [
    "#1f77b4", "#ff7f0e", "#2ca02c", "#d62728", "#9467bd",
    "#8c564b", "#e377c2", "#7f7f7f", "#bcbd22", "#17becf",
]
MIN_RADIUS = 5.0
MAX_RADIUS = 15.0


def depth_color(depth: int) -> str:
    return DEPTH_COLORS[depth % len(DEPTH_COLORS)]


def sqrt_scale(value: float, low: float, high: float) -> float:
    """Map ``value`` from ``[low, high]`` to the radius range on a square-root scale."""
    lo, hi = math.sqrt(low), math.sqrt(high)
    if hi == lo:
        t = 0.5
    else:
        t = (math.sqrt(max(0.0, value)) - lo) / (hi - lo)
    return MIN_RADIUS + t * (MAX_RADIUS - MIN_RADIUS)


def build_graph(records: Sequence[CollectedNote]) -> Graph:
    """Nodes sized by word count, one link from each note to its discoverer."""
    if not records:
        return Graph()

    counts = [count_words(r.content) for r in records]
    low = max(0, min(counts))
    high = max(1, max(counts))

    nodes = [
        GraphNode(
            id=r.path,
            name=r.note.name,
            depth=r.depth,
            word_count=count,
            radius=sqrt_scale(count, low, high),
            color=depth_color(r.depth),
        )
        for r, count in zip(records, counts)
    ]
    links = [GraphLink(source=r.parent_path, target=r.path) for r in records if r.parent_path]
    return Graph(nodes=nodes, links=links)


def graph_to_dict(graph: Graph) -> dict:
    return {
        "nodes": [asdict(n) for n in graph.nodes],
        "links": [asdict(link) for link in graph.links],
    }
