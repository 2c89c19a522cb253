import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from polygen.cli import HEADERS, main


def test_table_for_named_and_raw_diagrams(capsys):
    assert main(["cube", "x3x3o"]) == 0
    lines = capsys.readouterr().out.splitlines()

    assert lines[0] == "\t".join(HEADERS)
    assert lines[1] == "cube\tx4o3o\t8\t12\t6\t0\t3:8\t3-regular\t3\t2"
    assert lines[2].startswith("x3x3o\tx3x3o\t12\t18\t8\t0\t")
    assert len(lines) == 3


def test_catalog_flag(capsys):
    assert main(["--catalog", "3"]) == 0
    lines = capsys.readouterr().out.splitlines()
    names = [line.split("\t")[0] for line in lines[1:]]
    assert names == ["tetrahedron", "cube", "octahedron", "icosahedron", "dodecahedron"]


def test_failures_are_reported_and_skipped(capsys):
    assert main(["x5/2o3o", "x4o3", "cube"]) == 1
    out = capsys.readouterr().out

    assert "cube\tx4o3o\t8\t12" in out
    assert "SkippedDiagram\tReason" in out
    assert "x5/2o3o\tFractional symmetry is not supported" in out
    assert "x4o3\tError parsing diagram at: x4o3[]" in out


def test_max_dimension_flag(capsys):
    assert main(["--max-dimension", "3", "cell5"]) == 1
    assert "cell5\tOnly 2-3D polytopes are supported" in capsys.readouterr().out


def test_json_output(capsys):
    assert main(["--json", "--normalize", "tetrahedron"]) == 0
    data = json.loads(capsys.readouterr().out)

    assert len(data) == 1
    assert data[0]["name"] == "x3o3o"
    assert len(data[0]["vertices"]) == 4
    assert len(data[0]["edges"]) == 6
    assert len(data[0]["faces"]) == 4


def test_no_diagrams(capsys):
    assert main([]) == 1
    assert "No diagrams given" in capsys.readouterr().err


def test_progress_goes_to_stderr(capsys):
    assert main(["--progress", "cube"]) == 0
    captured = capsys.readouterr()
    assert "[1/1] cube" in captured.err
    assert "[1/1]" not in captured.out
