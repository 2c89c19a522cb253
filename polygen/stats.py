"""
Graph statistics for generated polytopes.

Reports the per-model numbers of a regularity survey: element counts, the
vertex degree distribution, whether the 1-skeleton is regular, connected and
bipartite, its diameter, the distribution of face sizes and the Euler
characteristic.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Iterable, Optional

import networkx as nx

from .polytope import Polytope


def format_degree_counts(values: Iterable[int]) -> str:
    """'3:8, 4:6' style summary of a multiset of integers ('-' when empty)."""
    counts = Counter(values)
    if not counts:
        return "-"
    return ", ".join(f"{value}:{counts[value]}" for value in sorted(counts))


def regularity_label(degrees) -> str:
    degree_set = set(degrees)
    if not degree_set:
        return "invalid"
    if len(degree_set) == 1:
        return f"{next(iter(degree_set))}-regular"
    return "mixed"


def compute_stats(polytope: Polytope) -> Dict[str, Any]:
    G = polytope.to_graph()
    n_vertices, n_edges, n_faces, n_cells = polytope.counts()
    degrees = [deg for _, deg in G.degree()]

    connected = n_vertices > 0 and nx.is_connected(G)
    diameter: Optional[int] = nx.diameter(G) if connected else None

    return {
        "name": polytope.diagram,
        "dimension": polytope.dimension,
        "vertices": n_vertices,
        "edges": n_edges,
        "faces": n_faces,
        "cells": n_cells,
        "degrees": sorted(set(degrees)),
        "degree_counts": format_degree_counts(degrees),
        "regularity": regularity_label(degrees),
        "connected": connected,
        "bipartite": n_vertices > 0 and nx.is_bipartite(G),
        "diameter": diameter,
        "face_sizes": format_degree_counts(len(face) for face in polytope.faces),
        "euler": polytope.euler_characteristic(),
    }


__all__ = ["compute_stats", "format_degree_counts", "regularity_label"]
