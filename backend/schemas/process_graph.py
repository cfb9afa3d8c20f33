from __future__ import annotations
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

# ---------- Graph Models ----------

class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0

class GraphNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    display_label: str
    synthetic: bool = False

    # Set by the layout engine
    layer: Optional[int] = None
    index_in_layer: Optional[int] = None
    position: Position = Field(default_factory=Position)

class GraphEdge(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str
    label: str
    color_key: str
    transition_id: str
    actor: str
    actions: Tuple[str, ...] = Field(default_factory=tuple)
    notifications: Tuple[str, ...] = Field(default_factory=tuple)

    # Set by the layout engine: target sits on the same or an earlier layer
    back_edge: bool = False

class ProcessGraph(BaseModel):
    model_config = ConfigDict(frozen=True)

    nodes: Tuple[GraphNode, ...] = Field(default_factory=tuple)
    edges: Tuple[GraphEdge, ...] = Field(default_factory=tuple)
    process_id: Optional[str] = None
    start_state: Optional[str] = None

    def node(self, node_id: str) -> Optional[GraphNode]:
        return next((n for n in self.nodes if n.id == node_id), None)

# ---------- Validation Helpers ----------

def validate_graph_closure(graph: ProcessGraph) -> List[str]:
    """
    Check that every edge endpoint refers to a node in the graph and that node
    ids are unique. Returns a list of problems, empty when the graph is closed.
    """
    errs: List[str] = []
    seen: Dict[str, int] = {}
    for n in graph.nodes:
        seen[n.id] = seen.get(n.id, 0) + 1
    for node_id, count in seen.items():
        if count > 1:
            errs.append(f"Node '{node_id}' appears {count} times")

    for e in graph.edges:
        if e.source not in seen:
            errs.append(f"Edge '{e.id}' source '{e.source}' not found")
        if e.target not in seen:
            errs.append(f"Edge '{e.id}' target '{e.target}' not found")
    return errs
