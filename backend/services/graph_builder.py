"""
Graph Builder

Turns a ProcessModel into an abstract graph: nodes without coordinates and one
edge per (transition, source state) pair carrying the transition's metadata.
"""

import logging
import re
from typing import Dict, List

from schemas.process_graph import GraphEdge, GraphNode, ProcessGraph
from schemas.process_model import DEFAULT_ACTOR, Actor, ProcessModel, Transition

logger = logging.getLogger(__name__)

ACTOR_COLORS = {
    Actor.CUSTOMER.value: "orange",
    Actor.PROVIDER.value: "pink",
    Actor.OPERATOR.value: "green",
    Actor.SYSTEM.value: "gray",
}
DEFAULT_COLOR = "gray"


def color_key(actor: str) -> str:
    """Map an actor to a color key; unknown actors get the default color."""
    normalized = (actor or DEFAULT_ACTOR).strip().lower()
    if normalized.startswith("actor.role/"):
        normalized = normalized[len("actor.role/"):]
    return ACTOR_COLORS.get(normalized, DEFAULT_COLOR)


def format_state_label(state: str) -> str:
    # States are already kebab case in process documents
    return state


def format_transition_label(transition_id: str) -> str:
    """camelCase ids become kebab case so labels match state naming."""
    return re.sub(r"([A-Z])", r"-\1", transition_id).lower().lstrip("-")


def edge_id(transition_id: str, source: str) -> str:
    return f"{transition_id}:{source}"


class GraphBuilder:
    """Deterministic builder from ProcessModel to an unpositioned ProcessGraph."""

    def build(self, model: ProcessModel) -> ProcessGraph:
        node_ids: Dict[str, None] = dict.fromkeys(model.states)
        edges: List[GraphEdge] = []

        for transition in model.transitions:
            for source in transition.from_states:
                edges.append(self._convert_edge(transition, source))
                node_ids.setdefault(source, None)
            node_ids.setdefault(transition.to, None)

        nodes = [
            GraphNode(
                id=state,
                display_label=format_state_label(state),
                synthetic=state == model.start_state,
            )
            for state in node_ids
        ]
        logger.debug("Built graph with %d nodes and %d edges", len(nodes), len(edges))
        return ProcessGraph(
            nodes=tuple(nodes),
            edges=tuple(edges),
            process_id=model.process_id,
            start_state=model.start_state,
        )

    def _convert_edge(self, transition: Transition, source: str) -> GraphEdge:
        return GraphEdge(
            id=edge_id(transition.id, source),
            source=source,
            target=transition.to,
            label=format_transition_label(transition.id),
            color_key=color_key(transition.actor),
            transition_id=transition.id,
            actor=transition.actor,
            actions=transition.actions,
            notifications=transition.notifications,
        )


def build(model: ProcessModel) -> ProcessGraph:
    return GraphBuilder().build(model)
