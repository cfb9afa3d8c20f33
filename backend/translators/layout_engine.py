"""
Layered Layout Engine

Assigns each node a layer (breadth-first distance from the root states) and an
index within its layer, then derives top-to-bottom coordinates. All traversal
state is local to one call, so a single engine can be reused freely.
"""

import logging
from collections import deque
from typing import Deque, Dict, List, Optional

from schemas.process_graph import Position, ProcessGraph

logger = logging.getLogger(__name__)

DEFAULT_SPACING_X = 280.0
DEFAULT_ROW_HEIGHT = 180.0
DEFAULT_AXIS_X = 400.0
DEFAULT_ORIGIN_Y = 0.0


class LayeredLayoutEngine:
    """
    Layered (top-to-bottom) layout over the transition relation.

    Cycles are safe: a node is visited once, so back-edges are kept for
    drawing but never trigger a second layer assignment.
    """

    def __init__(
        self,
        spacing_x: float = DEFAULT_SPACING_X,
        row_height: float = DEFAULT_ROW_HEIGHT,
        axis_x: float = DEFAULT_AXIS_X,
        origin_y: float = DEFAULT_ORIGIN_Y,
    ):
        self.spacing_x = spacing_x
        self.row_height = row_height
        self.axis_x = axis_x
        self.origin_y = origin_y

    def layout(self, graph: ProcessGraph) -> ProcessGraph:
        """Return a copy of the graph with layers, in-layer indexes and positions set."""
        if not graph.nodes:
            return graph.model_copy(update={"nodes": (), "edges": ()})

        levels = self.assign_layers(graph)

        # Group by layer in discovery order (levels is insertion ordered)
        level_groups: Dict[int, List[str]] = {}
        index_in_level: Dict[str, int] = {}
        for node_id, level in levels.items():
            group = level_groups.setdefault(level, [])
            index_in_level[node_id] = len(group)
            group.append(node_id)

        positioned_nodes = []
        for node in graph.nodes:
            level = levels[node.id]
            level_nodes = level_groups[level]
            position_in_level = index_in_level[node.id]
            positioned_nodes.append(node.model_copy(update={
                "layer": level,
                "index_in_layer": position_in_level,
                "position": self.position_for(level, position_in_level, len(level_nodes)),
            }))

        positioned_edges = [
            edge.model_copy(update={"back_edge": levels.get(edge.target, 0) <= levels.get(edge.source, 0)})
            for edge in graph.edges
        ]

        logger.debug("Laid out %d nodes on %d layers", len(positioned_nodes), len(level_groups))
        return graph.model_copy(update={
            "nodes": tuple(positioned_nodes),
            "edges": tuple(positioned_edges),
        })

    def find_roots(self, graph: ProcessGraph) -> List[str]:
        """
        The synthetic start state when there is one; otherwise every node that
        is never the target of an edge. A graph that is one big cycle falls
        back to its first node.
        """
        node_ids = [n.id for n in graph.nodes]
        if graph.start_state and graph.start_state in node_ids:
            return [graph.start_state]

        targets = {edge.target for edge in graph.edges}
        roots = [node_id for node_id in node_ids if node_id not in targets]
        if not roots:
            roots = [node_ids[0]]
        return roots

    def assign_layers(self, graph: ProcessGraph) -> Dict[str, int]:
        """Multi-source BFS; returns node id -> layer in discovery order."""
        node_ids = {n.id for n in graph.nodes}
        adjacency: Dict[str, List[str]] = {}
        for edge in graph.edges:
            if edge.source not in node_ids or edge.target not in node_ids:
                continue
            adjacency.setdefault(edge.source, []).append(edge.target)

        levels: Dict[str, int] = {}
        queue: Deque[str] = deque()
        for root in self.find_roots(graph):
            levels[root] = 0
            queue.append(root)

        while queue:
            node_id = queue.popleft()
            for child in adjacency.get(node_id, []):
                if child not in levels:
                    levels[child] = levels[node_id] + 1
                    queue.append(child)

        # Nodes the traversal never reached share one layer below everything else
        unreached = [n.id for n in graph.nodes if n.id not in levels]
        if unreached:
            island_level = max(levels.values()) + 1 if levels else 0
            for node_id in unreached:
                levels[node_id] = island_level
            logger.debug("Placed %d unreachable nodes on layer %d", len(unreached), island_level)

        return levels

    def position_for(self, layer: int, index: int, layer_size: int) -> Position:
        """Center a layer's nodes around the shared vertical axis."""
        return Position(
            x=self.axis_x + (index - (layer_size - 1) / 2) * self.spacing_x,
            y=self.origin_y + layer * self.row_height,
        )


def layout(graph: ProcessGraph, engine: Optional[LayeredLayoutEngine] = None) -> ProcessGraph:
    return (engine or LayeredLayoutEngine()).layout(graph)

