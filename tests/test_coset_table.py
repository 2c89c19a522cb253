import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from polygen.assembler import get_relations
from polygen.coset_table import CosetTable
from polygen.diagram import parse_diagram
from polygen.errors import InvariantViolation, IterationLimitExceeded

GROUP_ORDERS = [
    ("x3o", 6),
    ("x5o", 10),
    ("x x x", 8),
    ("x3o3o", 24),
    ("x4o3o", 48),
    ("x5o3o", 120),
    ("x3o3o3o", 120),
    ("x4o3o3o", 384),
    ("x3o3o*b3o", 192),
]


def full_group_table(diagram):
    C = parse_diagram(diagram).coxeter_matrix
    alphabet = "abcd"[: len(C)]
    return CosetTable(alphabet, get_relations(C, alphabet), [])


def test_get_relations():
    C = [[1, 3, 2], [3, 1, 3], [2, 3, 1]]
    assert get_relations(C, "abc") == ["bababa", "caca", "cbcbcb"]


@pytest.mark.parametrize("diagram, order", GROUP_ORDERS)
def test_coxeter_group_orders(diagram, order):
    table = full_group_table(diagram)
    table.solve()
    assert len(table) == order
    assert table.is_solved


def test_cube_vertex_cosets():
    table = CosetTable("abc", ["babababa", "caca", "cbcbcb"], ["b", "c"])
    table.solve()
    assert len(table) == 8


def test_table_is_complete_and_consistent():
    table = CosetTable("abc", ["babababa", "caca", "cbcbcb"], ["c"])
    table.solve()
    assert len(table) == 24
    for coset in range(len(table)):
        for g in range(3):
            nxt = table.get_entry(coset, g)
            assert nxt is not None
            # Every generator is an involution
            assert table.get_entry(nxt, g) == coset
    for coset in range(len(table)):
        for rel in ["babababa", "caca", "cbcbcb"]:
            assert table.apply_word(coset, rel) == coset


def test_representatives_reach_their_coset():
    table = full_group_table("x4o3o")
    table.solve()
    reps = table.get_representatives()

    assert reps[0] == ""
    assert len(reps) == len(table)
    for coset, word in enumerate(reps):
        assert table.apply_word(0, word) == coset
    # Shortest words: neighbouring cosets differ in length by at most one
    for coset in range(len(table)):
        for g in range(3):
            assert abs(len(reps[table.get_entry(coset, g)]) - len(reps[coset])) <= 1


def test_solve_is_idempotent():
    table = full_group_table("x5o3o")
    table.solve()
    reps = table.get_representatives()
    table.solve()
    assert len(table) == 120
    assert table.get_representatives() == reps


def test_non_coxeter_tetrahedral_group():
    table = CosetTable("ab", ["aaa", "bbb", "abab"], [], coxeter=False)
    assert table.alphabet == "aAbB"
    table.solve()
    assert len(table) == 12

    reps = table.get_representatives()
    assert all(c in "ab" for word in reps for c in word)
    for coset, word in enumerate(reps):
        assert table.apply_word(0, word) == coset
    # a then A is the identity
    for coset in range(len(table)):
        assert table.apply_word(coset, "aA") == coset


def test_non_coxeter_subgroup_index():
    table = CosetTable("ab", ["aaa", "bbb", "abab"], ["a"], coxeter=False)
    table.solve()
    assert len(table) == 4


def test_non_coxeter_dihedral_group():
    table = CosetTable("ab", ["aaa", "bb", "abab"], [], coxeter=False)
    table.solve()
    assert len(table) == 6


def test_iteration_limit():
    table = full_group_table("x5o3o")
    with pytest.raises(IterationLimitExceeded) as excinfo:
        table.solve(max_iterations=5)
    assert excinfo.value.max_iterations == 5
    assert excinfo.value.coset_count > 5


def test_infinite_group_hits_iteration_limit():
    # Infinite dihedral group: no relation between a and b
    table = CosetTable("ab", [], [])
    with pytest.raises(IterationLimitExceeded):
        table.solve(max_iterations=50)


@pytest.mark.parametrize("generators, relations, subgroup, coxeter", [
    ("ab", ["ac"], [], True),
    ("ab", ["abab"], ["d"], True),
    ("1", [], [], False),
])
def test_invalid_generators(generators, relations, subgroup, coxeter):
    with pytest.raises(ValueError):
        CosetTable(generators, relations, subgroup, coxeter=coxeter)


def test_apply_word_rejects_unknown_letter():
    table = full_group_table("x3o")
    table.solve()
    with pytest.raises(ValueError):
        table.apply_word(0, "az")


def test_queries_on_unsolved_table():
    table = CosetTable("ab", ["ababab"], [])
    with pytest.raises(InvariantViolation):
        table.apply_word(0, "a")
    with pytest.raises(InvariantViolation):
        table.get_representatives()
