"""
Polytope assembler: Coxeter diagram -> vertices, edges, faces and cells.

Every element type is generated as an orbit. A seed element is built around
coset 0 of the vertex coset table, a second coset table over the subgroup
stabilizing that seed lists one representative word per element of the
orbit, and applying each word to the seed's vertex cosets gives the element.

PIPELINE:
1) Parse the diagram and reject what cannot be built
2) Place the mirrors and the initial vertex v0
3) Vertices: cosets of the subgroup generated by the inactive mirrors
4) Edges: one orbit per active mirror
5) Faces: one orbit per mirror pair that spans a polygon
6) Cells (4D): one orbit per mirror triple passing the active/orthogonal count rule
"""

from __future__ import annotations

import logging
import string
from dataclasses import dataclass
from itertools import combinations
from typing import List, Sequence, Tuple

import numpy as np

from .coset_table import DEFAULT_MAX_ITERATIONS, CosetTable
from .diagram import PolytopeDescription, Subpolytope, parse_diagram
from .errors import UnsupportedFeatureError
from .mirrors import is_finite_reflection_group, place_initial_vertex, place_mirrors, reflect_inplace
from .polytope import Polytope

LOGGER = logging.getLogger(__name__)

SUPPORTED_DIMENSIONS = (2, 4)

GENERATOR_LETTERS = string.ascii_lowercase


def get_relations(coxeter_matrix: Sequence[Sequence[int]], alphabet: str) -> List[str]:
    """Relator words (g_i g_j)^C[i][j] for every pair of generators."""
    n = len(coxeter_matrix)
    relations = []
    for i in range(1, n):
        for j in range(i):
            relations.append((alphabet[i] + alphabet[j]) * coxeter_matrix[i][j])
    return relations


def _check_supported(info: PolytopeDescription, max_dimension: int):
    d = info.node_count
    min_dimension = SUPPORTED_DIMENSIONS[0]
    if d < min_dimension or d > max_dimension:
        raise UnsupportedFeatureError(
            f"Only {min_dimension}-{max_dimension}D polytopes are supported, "
            f"{info.diagram} has {d} nodes"
        )
    if info.combine_method != "none":
        raise UnsupportedFeatureError(
            f"Polytope compounds/laces are not supported ({info.combine_method})"
        )
    poly = info.subpolytopes[0]
    if any(poly.dual):
        raise UnsupportedFeatureError("Dual polytopes are not supported")
    if any(poly.snub):
        raise UnsupportedFeatureError("Snub polytopes are not supported")
    if info.is_fractional:
        raise UnsupportedFeatureError("Fractional symmetry is not supported")
    if not any(poly.active):
        raise UnsupportedFeatureError("At least one node must be active")


class _Assembler:
    """Holds the shared state of one polygen() call."""

    def __init__(self, info: PolytopeDescription, max_iterations: int):
        self.S = info.symmetry_matrix
        self.C = info.coxeter_matrix
        self.poly: Subpolytope = info.subpolytopes[0]
        self.d = info.node_count
        self.alphabet = GENERATOR_LETTERS[: self.d]
        self.relations = get_relations(self.C, self.alphabet)
        self.max_iterations = max_iterations
        self.vct: CosetTable = None

    def solved_table(self, subgroup, alphabet=None, relations=None) -> CosetTable:
        table = CosetTable(
            self.alphabet if alphabet is None else alphabet,
            self.relations if relations is None else relations,
            [self.alphabet[g] for g in subgroup],
        )
        table.solve(self.max_iterations)
        return table

    def orthogonal_stabilizing_mirrors(self, generators) -> List[int]:
        """Inactive mirrors orthogonal to every mirror in ``generators``."""
        return [
            s for s in range(self.d)
            if not self.poly.active[s] and all(self.S[g][s] == 2 for g in generators)
        ]

    def orbit(self, representatives, seed) -> List[List[int]]:
        return [[self.vct.apply_word(v, rep) for v in seed] for rep in representatives]

    # -------------------- Element types --------------------

    def vertices(self, normals, v0) -> np.ndarray:
        inactive = [i for i in range(self.d) if not self.poly.active[i]]
        self.vct = self.solved_table(inactive)
        reps = self.vct.get_representatives()
        vertices = np.empty((len(reps), self.d))
        for idx, rep in enumerate(reps):
            v = v0.copy()
            for char in rep:
                reflect_inplace(v, normals[self.alphabet.index(char)])
            vertices[idx] = v
        return vertices

    def edges(self):
        edges = []
        for i in range(self.d):
            if not self.poly.active[i]:
                continue
            e0 = [0, self.vct.apply_word(0, self.alphabet[i])]
            ect = self.solved_table([i] + self.orthogonal_stabilizing_mirrors([i]))
            LOGGER.debug("Edge orbit of mirror %s: %d edges", self.alphabet[i], len(ect))
            edges.extend(tuple(e) for e in self.orbit(ect.get_representatives(), e0))
        return edges

    def face_seed(self, i, j) -> List[int]:
        a, b = self.alphabet[i], self.alphabet[j]
        active = self.poly.active
        f0 = []
        if active[i] and active[j]:
            # Both active: a 2*C[i][j]-gon alternating between the two mirrors
            for k in range(self.C[i][j]):
                word = (a + b) * k
                f0.append(self.vct.apply_word(0, word))
                f0.append(self.vct.apply_word(0, b + word))
        elif (active[i] or active[j]) and self.S[i][j] != 2:
            # One active mirror not orthogonal to the other: a C[i][j]-gon
            for k in range(self.C[i][j]):
                f0.append(self.vct.apply_word(0, (a + b) * k))
        return f0

    def faces(self):
        faces = []
        face_orbits = []
        for i, j in combinations(range(self.d), 2):
            f0 = self.face_seed(i, j)
            if not f0:
                continue
            stabilizers = [i, j] + self.orthogonal_stabilizing_mirrors([i, j])
            fct = self.solved_table(stabilizers)
            LOGGER.debug(
                "Face orbit of mirrors %s%s: %d faces with %d vertices",
                self.alphabet[i], self.alphabet[j], len(fct), len(f0),
            )
            face_orbits.append(_FaceOrbit((i, j), stabilizers, fct, len(faces)))
            faces.extend(self.orbit(fct.get_representatives(), f0))
        return faces, face_orbits

    def cells(self, face_orbits):
        cells = []
        active = self.poly.active
        for combo in combinations(range(self.d), 3):
            # Mirrors span a cell only if there are at least as many active
            # mirrors as orthogonal pairs among them
            active_count = sum(1 for m in combo if active[m])
            ortho_count = sum(1 for a, b in combinations(combo, 2) if self.S[a][b] == 2)
            if active_count == 0 or ortho_count > active_count:
                continue

            cct = self.solved_table(list(combo) + self.orthogonal_stabilizing_mirrors(combo))
            reps = cct.get_representatives()

            # The faces of cell 0 come from a coset table over just these three mirrors
            subalphabet = "".join(self.alphabet[m] for m in combo)
            subrelations = [r for r in self.relations if all(c in subalphabet for c in r)]
            members: List[List[int]] = [[] for _ in reps]
            for orbit in face_orbits:
                if not all(g in combo for g in orbit.generators):
                    continue
                substabilizers = [g for g in orbit.stabilizers if g in combo]
                sct = self.solved_table(substabilizers, subalphabet, subrelations)
                seed_faces = [orbit.table.apply_word(0, rep) for rep in sct.get_representatives()]
                for r, word in enumerate(reps):
                    members[r].extend(orbit.table.apply_word(f, word) + orbit.offset for f in seed_faces)
            LOGGER.debug("Cell orbit of mirrors %s: %d cells", subalphabet, len(members))
            cells.extend(members)
        return cells


@dataclass
class _FaceOrbit:
    generators: Tuple[int, int]
    stabilizers: List[int]
    table: CosetTable
    offset: int  # index of the orbit's first face in the face list


def polygen(
    diagram: str,
    normalize: bool = False,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    max_dimension: int = SUPPORTED_DIMENSIONS[1],
) -> Polytope:
    """Generate the polytope described by a plaintext Coxeter diagram.

    Args:
        diagram: e.g. "x4o3o" for the cube
        normalize: scale so every vertex lies on the unit sphere
        max_iterations: bound passed to every coset enumeration
        max_dimension: 3 restricts to polygons and polyhedra

    Raises:
        DiagramSyntaxError: the diagram is malformed
        UnsupportedFeatureError: compounds, laces, snubs, duals, fractional
            symmetry, unsupported dimension, or an infinite reflection group
        IterationLimitExceeded: a coset enumeration did not converge
    """
    info = parse_diagram(diagram)
    _check_supported(info, max_dimension)
    assembler = _Assembler(info, max_iterations)

    if not is_finite_reflection_group(info.symmetry_matrix):
        raise UnsupportedFeatureError(f"{diagram} does not describe a finite reflection group")
    normals = place_mirrors(info.symmetry_matrix)
    v0 = place_initial_vertex(normals, assembler.poly.offsets)
    if normalize:
        v0 /= np.linalg.norm(v0)

    vertices = assembler.vertices(normals, v0)
    edges = assembler.edges()
    faces, face_orbits = assembler.faces()
    cells = assembler.cells(face_orbits) if assembler.d > 3 else []

    LOGGER.info(
        "%s: %d vertices, %d edges, %d faces, %d cells",
        diagram, len(vertices), len(edges), len(faces), len(cells),
    )
    return Polytope(diagram=diagram, vertices=vertices, edges=edges, faces=faces, cells=cells)


__all__ = ["polygen", "get_relations", "SUPPORTED_DIMENSIONS"]
