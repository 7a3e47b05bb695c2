"""DOT ingestion: parsing, normalization and snapshot deltas."""

from .convert import convert_graph
from .delta import compute_delta
from .parser import DotParseError, parse_dot, read_dot

__all__ = ["DotParseError", "compute_delta", "convert_graph", "parse_dot", "read_dot"]
