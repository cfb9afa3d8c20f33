"""
Visualization Pipeline

text -> tokens -> value tree -> process model -> abstract graph -> positioned graph

Each stage is a pure function; errors from any stage propagate unchanged so the
caller always gets either a complete graph or exactly one NotationError.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from schemas.process_graph import ProcessGraph
from schemas.process_model import ProcessModel
from services.errors import NotationError
from services.graph_builder import GraphBuilder
from services.lexer import tokenize
from services.notation_parser import parse
from services.process_extractor import ProcessExtractor
from translators.layout_engine import LayeredLayoutEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessVisualization:
    model: ProcessModel
    graph: ProcessGraph


def extract_process(text: str) -> ProcessModel:
    """Parse notation text and extract the process model, without layout."""
    tokens = tokenize(text)
    value = parse(tokens)
    return ProcessExtractor().extract(value)


def visualize(text: str, layout_engine: Optional[LayeredLayoutEngine] = None) -> ProcessVisualization:
    model = extract_process(text)
    graph = GraphBuilder().build(model)
    positioned = (layout_engine or LayeredLayoutEngine()).layout(graph)
    logger.info(
        "Visualized %s process: %d nodes, %d edges",
        model.variant.value, len(positioned.nodes), len(positioned.edges),
    )
    return ProcessVisualization(model=model, graph=positioned)


def describe_error(error: NotationError) -> Dict[str, Any]:
    """Structured, human-readable error description for the rendering side."""
    return {key: value for key, value in error.to_dict().items() if value is not None}
