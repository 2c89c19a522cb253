"""Polytope generation from plaintext Coxeter diagrams."""

from .assembler import get_relations, polygen
from .catalog import CATALOG, lookup
from .coset_table import DEFAULT_MAX_ITERATIONS, CosetTable
from .diagram import PolytopeDescription, Subpolytope, parse_diagram
from .errors import (
    DiagramSyntaxError,
    InvariantViolation,
    IterationLimitExceeded,
    PolygenError,
    UnsupportedFeatureError,
)
from .polytope import Polytope

__all__ = [
    "polygen",
    "get_relations",
    "parse_diagram",
    "PolytopeDescription",
    "Subpolytope",
    "CosetTable",
    "DEFAULT_MAX_ITERATIONS",
    "Polytope",
    "CATALOG",
    "lookup",
    "PolygenError",
    "DiagramSyntaxError",
    "UnsupportedFeatureError",
    "IterationLimitExceeded",
    "InvariantViolation",
]
