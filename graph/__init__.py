"""
graph/
-----
Core data layer.  Public API:

    from graph import Graph, Node, Edge
    from graph import GraphFormatError
"""

from graph.node       import Node
from graph.edge       import Edge
from graph.graph      import Graph
from graph.exceptions import GraphFormatError

__all__ = [
    "Node",
    "Edge",
    "Graph",
    "GraphFormatError",
]
