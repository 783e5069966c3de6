"""
Exceptions raised while reading a graph description.

Traversal never raises for graph inconsistencies: unknown node ids and
unreachable targets are represented in the returned data. The only
failure on the graph side is a description that cannot be turned into a
Graph at all.
"""


class GraphFormatError(ValueError):
    """
    Raised when a graph description cannot be parsed.

    Examples:
        * An edge without a source or target
        * A zero, negative or non-numeric weight
        * A description that is not a ``{"nodes": [...], "edges": [...]}`` object
    """

    def __str__(self) -> str:
        return f"Graph Format Error: {super().__str__()}"
