"""
Graph Payload Translator

Converts a positioned ProcessGraph into the plain JSON payload the rendering
widget consumes. Layout is delegated to the layered layout engine; the
payload carries semantic keys only, styling stays with the renderer.
"""

from typing import Any, Dict, Optional

from schemas.process_graph import GraphEdge, GraphNode, ProcessGraph
from schemas.process_model import ProcessModel
from translators.layout_engine import LayeredLayoutEngine


class GraphTranslator:
    """
    Deterministic translator from ProcessGraph to the renderer payload.
    Graphs that have not been laid out yet are laid out first.
    """

    def __init__(self, layout_engine: Optional[LayeredLayoutEngine] = None):
        self.layout_engine = layout_engine or LayeredLayoutEngine()

    def translate(self, graph: ProcessGraph, model: Optional[ProcessModel] = None) -> Dict[str, Any]:
        """
        Convert a graph to the renderer payload.

        Args:
            graph: Abstract or already positioned graph
            model: Process model the graph was built from, for metadata

        Returns:
            Dict containing nodes, edges and metadata
        """
        if any(node.layer is None for node in graph.nodes):
            graph = self.layout_engine.layout(graph)

        nodes = [self._convert_node(node) for node in graph.nodes]
        edges = [self._convert_edge(edge) for edge in graph.edges]
        layers = {node.layer for node in graph.nodes}

        return {
            "nodes": nodes,
            "edges": edges,
            "metadata": {
                "processId": graph.process_id,
                "format": model.variant.value if model else None,
                "startState": graph.start_state,
                "stateCount": len(nodes),
                "transitionCount": len(model.transitions) if model else len({e.transition_id for e in graph.edges}),
                "layerCount": len(layers),
            },
        }

    def _convert_node(self, node: GraphNode) -> Dict[str, Any]:
        return {
            "id": node.id,
            "displayLabel": node.display_label,
            "layer": node.layer,
            "indexInLayer": node.index_in_layer,
            "x": node.position.x,
            "y": node.position.y,
            "synthetic": node.synthetic,
        }

    def _convert_edge(self, edge: GraphEdge) -> Dict[str, Any]:
        return {
            "id": edge.id,
            "from": edge.source,
            "to": edge.target,
            "label": edge.label,
            "colorKey": edge.color_key,
            "actor": edge.actor,
            "actions": list(edge.actions),
            "notifications": list(edge.notifications),
            "transitionId": edge.transition_id,
            "backEdge": edge.back_edge,
        }
