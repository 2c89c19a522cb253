"""
Plaintext Coxeter diagram parser.

Turns a diagram such as ``x4o3o`` (cube) into the matrices and per-node flags
needed to construct the polytope it describes. The notation follows
https://polytope.miraheze.org/wiki/Coxeter_diagram

SUPPORTED NOTATION:
- Active/inactive nodes: 'x' and 'o' (x4o3o = cube)
- Spaces for 2-edges (orthogonal mirrors): x x x = cube
- Fractional edges: x5/2o (pentagram)
- Virtual nodes, '*' followed by the letter of a node:
    x3o3o3*a (triangular tiling), x3o3o*b3o (hexadecachoron)
- Different edge lengths: o,v,x,q,f,h,k,u,w,F,Q,d,V,U,A,X,B (d x = 3 by 1 rectangle)
- Snub nodes 's', dual nodes 'm' (dual of x) and 'p' (dual of s)
- Compounds with matching symmetry: xo4oo3oq
- Lace prisms '&#x', lace towers '&#xt', lace tegums '&#m', lace rings '&#xr'

Compounds, laces, snubs and duals are parsed structurally only; the assembler
rejects them.
"""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from math import sqrt
from typing import List

from .errors import DiagramSyntaxError

# Canonical edge length generated by each node type
NODE_EDGE_LENGTHS = {
    "o": 0.0,
    "v": (sqrt(5) - 1) / 2,
    "x": 1.0,
    "s": 1.0,
    "m": 1.0,
    "p": 1.0,
    "q": sqrt(2),
    "f": (sqrt(5) + 1) / 2,
    "h": sqrt(3),
    "k": sqrt(sqrt(2) + 2),
    "u": 2.0,
    "w": sqrt(2) + 1,
    "F": (sqrt(5) + 3) / 2,
    "Q": 2 * sqrt(2),
    "d": 3.0,
    "V": 1 + sqrt(5),
    "U": 2 + sqrt(2),
    "A": (5 + sqrt(5)) / 4,
    "X": 1 + 2 * sqrt(2),
    "B": 2 + sqrt(5),
}
VALID_NODES = tuple(NODE_EDGE_LENGTHS)
DUAL_NODES = frozenset("mp")
SNUB_NODES = frozenset("sp")

INT_CHARS = string.digits
OTHER_CHARS = " /*"

# Letter after '*' -> index of the node it refers to
VIRTUAL_NODE_LETTERS = string.ascii_lowercase

LACE_SUFFIXES = {
    "x": "lace prism",
    "xt": "lace tower",
    "m": "lace tegum",
    "xr": "lace ring",
}
COMBINE_METHODS = ("none", "compound") + tuple(LACE_SUFFIXES.values())


@dataclass
class Subpolytope:
    """Per-node data for one polytope of a (possibly compound) diagram."""

    offsets: List[float] = field(default_factory=list)
    active: List[bool] = field(default_factory=list)
    dual: List[bool] = field(default_factory=list)
    snub: List[bool] = field(default_factory=list)


@dataclass
class PolytopeDescription:
    """Everything needed to construct the polytope(s) described by a diagram.

    ``symmetry_matrix[i][j] = k`` means mirrors i and j meet at an angle of
    pi/k (k may be fractional). ``coxeter_matrix`` holds the numerators only,
    giving the relation (g_i g_j)^k = 1.
    """

    diagram: str
    combine_method: str
    symmetry_matrix: List[List[float]]
    coxeter_matrix: List[List[int]]
    subpolytopes: List[Subpolytope]

    @property
    def node_count(self) -> int:
        return len(self.coxeter_matrix)

    @property
    def is_fractional(self) -> bool:
        n = self.node_count
        return any(
            self.symmetry_matrix[i][j] != self.coxeter_matrix[i][j]
            for i in range(n)
            for j in range(n)
        )


class _DiagramParser:
    """Single-use scanner over one diagram string."""

    def __init__(self, diagram: str):
        self.original = diagram
        self.diagram = diagram
        self.combine_method = "none"
        self.node_count = 0
        self.subpolytope_count = 0
        self.i = 0

    def fail(self, start, end, reasons):
        raise DiagramSyntaxError(self.original, start, end, reasons)

    def parse(self) -> PolytopeDescription:
        self._strip_lace_suffix()
        self._count_nodes()
        return self._parse_body()

    # -------------------- Pre-passes --------------------

    def _strip_lace_suffix(self):
        idx = self.diagram.find("&#")
        if idx < 0:
            return
        parts = self.diagram.split("&#")
        end = len(self.original)
        if len(parts) > 2:
            self.fail(idx, end, 'Multiple lace indicators "&#" found, only one should be present')
        suffix = parts[1]
        if suffix == "":
            self.fail(idx, end, 'Lace indicator "&#" found, but no lace type specified after it')
        if suffix not in LACE_SUFFIXES:
            self.fail(idx, end, f'Unknown lace type "{suffix}"')
        self.combine_method = LACE_SUFFIXES[suffix]
        self.diagram = parts[0]

    def _count_nodes(self):
        """Check every character and measure the node groups (xo3oo has two groups of size 2)."""
        diagram = self.diagram
        group_sizes: List[int] = []
        new_group = True
        node_count = 0
        for i, char in enumerate(diagram):
            if i > 0 and diagram[i - 1] == "*":
                continue  # virtual node letter
            if char in NODE_EDGE_LENGTHS:
                if new_group:
                    group_sizes.append(0)
                    new_group = False
                group_sizes[-1] += 1
                node_count += 1
            elif char not in INT_CHARS and char not in OTHER_CHARS:
                self.fail(i, i + 1, [
                    f'Invalid character "{char}"',
                    f"Valid node types are {', '.join(VALID_NODES)}",
                    f"Other valid characters are {', '.join(INT_CHARS + OTHER_CHARS)}",
                    "And anything coming straight after a '*' is allowed too",
                ])
            else:
                new_group = True

        if not group_sizes:
            self.fail(0, len(diagram), "Diagram must contain at least one node")

        size = group_sizes[0]
        if any(s != size for s in group_sizes):
            self.fail(0, len(diagram), [
                "All nodes groups must have the same size",
                f"Sizes were: {', '.join(str(s) for s in group_sizes)}",
            ])

        laced = self.combine_method.startswith("lace")
        if size == 1 and laced:
            self.fail(0, len(diagram), "Laced diagrams should have node groups of minimum size 2")
        elif size > 1 and not laced:
            # Groups larger than 1 without a lace indicator describe a compound
            self.combine_method = "compound"

        self.subpolytope_count = size
        self.node_count = node_count // size

    # -------------------- Main pass --------------------

    def _parse_body(self) -> PolytopeDescription:
        diagram = self.diagram
        n = self.node_count
        S = [[2.0] * n for _ in range(n)]
        C = [[2] * n for _ in range(n)]
        for k in range(n):
            S[k][k] = 1.0
            C[k][k] = 1
        subpolytopes = [Subpolytope() for _ in range(self.subpolytope_count)]

        if diagram[0] not in NODE_EDGE_LENGTHS:
            self.fail(0, 1, "First character must be a node")

        prev_was_edge = True
        source = -1  # edge goes from this node
        target = 0   # to this node
        self.i = 0
        while self.i < len(diagram):
            if prev_was_edge:
                self._parse_nodes(subpolytopes)
                source = target
                target += 1
                prev_was_edge = False
                continue

            # A virtual node before the edge value moves the edge's start
            if diagram[self.i] == "*":
                source = self._virtual_node_target()
                self.i += 2

            numerator, value = self._parse_edge()

            # A virtual node after the edge value makes the edge end there
            if self.i < len(diagram) and diagram[self.i] == "*":
                target -= 1
                source = self._virtual_node_target()
                self.i += 2

            if target >= n:
                self.fail(self.i, self.i + 1, "Missing a node here")

            S[source][target] = S[target][source] = value
            C[source][target] = C[target][source] = numerator
            prev_was_edge = True

        return PolytopeDescription(
            diagram=self.original,
            combine_method=self.combine_method,
            symmetry_matrix=S,
            coxeter_matrix=C,
            subpolytopes=subpolytopes,
        )

    def _parse_nodes(self, subpolytopes):
        diagram = self.diagram
        for s, subpoly in enumerate(subpolytopes):
            pos = self.i + s
            char = diagram[pos] if pos < len(diagram) else ""
            if char not in NODE_EDGE_LENGTHS:
                self.fail(pos, pos + 1, "Expected a node, is this a valid node type?")
            subpoly.offsets.append(NODE_EDGE_LENGTHS[char] / 2)
            subpoly.active.append(char != "o")
            subpoly.dual.append(char in DUAL_NODES)
            subpoly.snub.append(char in SNUB_NODES)
        self.i += len(subpolytopes)

    def _parse_edge(self):
        """Returns (numerator, value) of the edge at the cursor; a space means 2."""
        if self.i < len(self.diagram) and self.diagram[self.i] == " ":
            self.i += 1
            return 2, 2.0
        numerator = self._parse_int()
        value = float(numerator)
        if self.i < len(self.diagram) and self.diagram[self.i] == "/":
            self.i += 1
            denominator = self._parse_int()
            value = numerator / denominator
        return numerator, value

    def _parse_int(self) -> int:
        diagram = self.diagram
        start = self.i
        while self.i < len(diagram) and diagram[self.i] in INT_CHARS:
            self.i += 1
        digits = diagram[start:self.i]
        if digits == "":
            self.fail(start, self.i + 1, "Expected an integer here")
        value = int(digits)
        if value < 2:
            self.fail(start, self.i, "Integer must be at least 2")
        return value

    def _virtual_node_target(self) -> int:
        i = self.i
        if self.combine_method != "none":
            self.fail(i, i + 1, "Virtual nodes are not supported in compound/laced diagrams")
        letter = self.diagram[i + 1] if i + 1 < len(self.diagram) else ""
        target = VIRTUAL_NODE_LETTERS.find(letter) if letter else -1
        if target < 0 or target >= self.node_count:
            last = VIRTUAL_NODE_LETTERS[min(self.node_count, len(VIRTUAL_NODE_LETTERS)) - 1]
            self.fail(i, i + 2, [
                "Virtual node must point to a valid node",
                f"{letter or 'nothing'} does not lie between a and {last}",
            ])
        return target


def parse_diagram(diagram: str) -> PolytopeDescription:
    """Parse a plaintext Coxeter diagram (e.g. ``x4o3o``).

    Raises DiagramSyntaxError with the offending span and a list of reasons
    when the diagram is malformed.
    """
    if not diagram:
        raise DiagramSyntaxError(diagram, 0, 0, "Diagram must contain at least one node")
    return _DiagramParser(diagram).parse()


__all__ = [
    "NODE_EDGE_LENGTHS",
    "LACE_SUFFIXES",
    "COMBINE_METHODS",
    "Subpolytope",
    "PolytopeDescription",
    "parse_diagram",
]
