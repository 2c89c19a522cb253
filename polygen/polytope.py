"""The polytope record handed to renderers and graph tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import networkx as nx
import numpy as np

Edge = Tuple[int, int]


@dataclass
class Polytope:
    """Vertices, edges, faces and (for 4D) cells of a generated polytope.

    Faces list vertex indices in traversal order; cells list face indices.
    """

    diagram: str
    vertices: np.ndarray
    edges: List[Edge] = field(default_factory=list)
    faces: List[List[int]] = field(default_factory=list)
    cells: List[List[int]] = field(default_factory=list)

    @property
    def dimension(self) -> int:
        return int(self.vertices.shape[1]) if self.vertices.ndim == 2 else 0

    def counts(self) -> Tuple[int, int, int, int]:
        return len(self.vertices), len(self.edges), len(self.faces), len(self.cells)

    def undirected_edges(self) -> List[Edge]:
        """Edges as sorted (min, max) pairs."""
        return sorted((u, v) if u < v else (v, u) for u, v in self.edges)

    def euler_characteristic(self) -> int:
        n_vertices, n_edges, n_faces, n_cells = self.counts()
        chi = n_vertices - n_edges + n_faces
        if self.dimension >= 4:
            chi -= n_cells
        return chi

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready record with the keys the model loaders read."""
        return {
            "name": self.diagram,
            "vertices": self.vertices.tolist(),
            "edges": [list(e) for e in self.edges],
            "faces": [list(f) for f in self.faces],
            "cells": [list(c) for c in self.cells],
        }

    def to_graph(self) -> nx.Graph:
        """The 1-skeleton, with coordinates stored in the ``pos`` node attribute."""
        G = nx.Graph()
        for idx, coords in enumerate(self.vertices):
            G.add_node(idx, pos=tuple(float(c) for c in coords))
        G.add_edges_from(self.edges)
        return G


__all__ = ["Polytope", "Edge"]
