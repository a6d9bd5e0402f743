"""Interactive force-directed explorer for typed knowledge-graph entities."""

__version__ = "1.0.0"
