"""
Deterministic Translator Layer

Lays out abstract process graphs and converts them to the renderer payload.
All positioning is deterministic and independent of the rendering widget.
"""

from .graph_translator import GraphTranslator
from .layout_engine import LayeredLayoutEngine

__all__ = ['GraphTranslator', 'LayeredLayoutEngine']
