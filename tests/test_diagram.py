import sys
from math import sqrt
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from polygen.diagram import parse_diagram
from polygen.errors import DiagramSyntaxError


def test_cube_matrices_and_nodes():
    info = parse_diagram("x4o3o")

    assert info.node_count == 3
    assert info.combine_method == "none"
    assert info.symmetry_matrix == [[1, 4, 2], [4, 1, 3], [2, 3, 1]]
    assert info.coxeter_matrix == [[1, 4, 2], [4, 1, 3], [2, 3, 1]]
    assert not info.is_fractional

    poly = info.subpolytopes[0]
    assert poly.active == [True, False, False]
    assert poly.offsets == [0.5, 0.0, 0.0]
    assert poly.dual == [False, False, False]
    assert poly.snub == [False, False, False]


def test_spaces_are_orthogonal_edges():
    info = parse_diagram("x x x")
    assert info.symmetry_matrix == [[1, 2, 2], [2, 1, 2], [2, 2, 1]]
    assert info.subpolytopes[0].active == [True, True, True]


def test_fraction_keeps_numerator_in_coxeter_matrix():
    info = parse_diagram("x5/2o")
    assert info.symmetry_matrix[0][1] == pytest.approx(2.5)
    assert info.coxeter_matrix[0][1] == 5
    assert info.is_fractional


def test_node_edge_lengths():
    poly = parse_diagram("q4f3h").subpolytopes[0]
    assert poly.offsets == pytest.approx([sqrt(2) / 2, (sqrt(5) + 1) / 4, sqrt(3) / 2])
    assert poly.active == [True, True, True]


def test_snub_and_dual_flags():
    poly = parse_diagram("s4m3p").subpolytopes[0]
    assert poly.snub == [True, False, True]
    assert poly.dual == [False, True, True]


def test_virtual_node_before_edge_value():
    # Demitesseract: the fourth node branches off the second one
    S = parse_diagram("x3o3o*b3o").symmetry_matrix
    assert S[1][3] == 3
    assert S[2][3] == 2
    assert S[0][3] == 2


def test_virtual_node_after_edge_value_closes_a_loop():
    info = parse_diagram("x3o3o3*a")
    assert info.node_count == 3
    assert info.symmetry_matrix == [[1, 3, 3], [3, 1, 3], [3, 3, 1]]


def test_compound():
    info = parse_diagram("xo4oo3oq")
    assert info.combine_method == "compound"
    assert info.node_count == 3
    assert len(info.subpolytopes) == 2
    assert info.subpolytopes[0].active == [True, False, False]
    assert info.subpolytopes[1].active == [False, False, True]
    assert info.subpolytopes[1].offsets[2] == pytest.approx(sqrt(2) / 2)


@pytest.mark.parametrize("suffix, method", [
    ("x", "lace prism"),
    ("xt", "lace tower"),
    ("m", "lace tegum"),
    ("xr", "lace ring"),
])
def test_lace_suffixes(suffix, method):
    info = parse_diagram("xx3oo&#" + suffix)
    assert info.combine_method == method
    assert info.node_count == 2
    assert len(info.subpolytopes) == 2


def test_virtual_node_error_message_and_span():
    with pytest.raises(DiagramSyntaxError) as excinfo:
        parse_diagram("x4o3o3*z")

    err = excinfo.value
    assert err.span == (6, 8)
    assert err.diagram == "x4o3o3*z"
    assert str(err) == (
        "Error parsing diagram at: x4o3o3[*z]\n"
        "- Virtual node must point to a valid node\n"
        "- z does not lie between a and c"
    )


SYNTAX_ERRORS = [
    ("", "Diagram must contain at least one node"),
    ("33", "Diagram must contain at least one node"),
    ("x#o", 'Invalid character "#"'),
    ("x3y", 'Invalid character "y"'),
    ("xo3o", "All nodes groups must have the same size"),
    ("x3o&#x", "Laced diagrams should have node groups of minimum size 2"),
    ("xx3oo&#", "no lace type specified"),
    ("xx3oo&#q", 'Unknown lace type "q"'),
    ("xx3oo&#x&#x", "Multiple lace indicators"),
    ("4x", "First character must be a node"),
    ("x4o3", "Missing a node here"),
    ("x1o", "Integer must be at least 2"),
    ("x3/o", "Expected an integer here"),
    ("xo3*aoo", "Virtual nodes are not supported in compound/laced diagrams"),
    ("x3o3*", "Virtual node must point to a valid node"),
]


@pytest.mark.parametrize("diagram, reason", SYNTAX_ERRORS)
def test_syntax_errors(diagram, reason):
    with pytest.raises(DiagramSyntaxError) as excinfo:
        parse_diagram(diagram)
    assert any(reason in r for r in excinfo.value.reasons)


def test_syntax_error_is_a_value_error():
    with pytest.raises(ValueError):
        parse_diagram("x4o3")
