#!/usr/bin/env python3
"""
Generate polytopes from Coxeter diagrams and report their statistics.

Examples:
    polygen x4o3o o5o3x
    polygen --catalog 4 --progress
    polygen cube --json > cube.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .assembler import SUPPORTED_DIMENSIONS, polygen
from .catalog import CATALOG, POLYCHORA, POLYHEDRA, lookup
from .coset_table import DEFAULT_MAX_ITERATIONS
from .errors import PolygenError
from .stats import compute_stats

HEADERS = ["Name", "Diagram", "V", "E", "F", "C", "Degrees", "Regularity", "Diameter", "Euler"]

CATALOG_CHOICES = {
    "3": POLYHEDRA,
    "4": POLYCHORA,
    "all": CATALOG,
}


def format_row(name, stats):
    diameter = "-" if stats["diameter"] is None else str(stats["diameter"])
    return "\t".join([
        name,
        stats["name"],
        str(stats["vertices"]),
        str(stats["edges"]),
        str(stats["faces"]),
        str(stats["cells"]),
        stats["degree_counts"],
        stats["regularity"],
        diameter,
        str(stats["euler"]),
    ])


def print_table(rows):
    print("\t".join(HEADERS))
    for name, stats in rows:
        print(format_row(name, stats))


def build_parser():
    parser = argparse.ArgumentParser(
        description="Generate polytopes from plaintext Coxeter diagrams and report their statistics."
    )
    parser.add_argument(
        "diagrams",
        nargs="*",
        help="Coxeter diagrams (e.g. x4o3o) or catalog names (e.g. cube, cell24)",
    )
    parser.add_argument(
        "--catalog",
        choices=sorted(CATALOG_CHOICES),
        help="Also generate the named regular polyhedra (3), polychora (4) or both (all)",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=DEFAULT_MAX_ITERATIONS,
        metavar="N",
        help=f"Coset enumeration bound (default {DEFAULT_MAX_ITERATIONS})",
    )
    parser.add_argument(
        "--normalize",
        action="store_true",
        help="Scale polytopes so every vertex lies on the unit sphere",
    )
    parser.add_argument(
        "--max-dimension",
        type=int,
        choices=range(SUPPORTED_DIMENSIONS[0], SUPPORTED_DIMENSIONS[1] + 1),
        default=SUPPORTED_DIMENSIONS[1],
        help="Reject diagrams with more nodes than this",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the generated polytopes as JSON instead of the stats table",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show progress while generating",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log coset enumeration details",
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # (display name, diagram) pairs
    jobs = []
    for entry in args.diagrams:
        jobs.append((entry, lookup(entry)))
    if args.catalog:
        jobs.extend(CATALOG_CHOICES[args.catalog].items())

    if not jobs:
        parser.print_usage(sys.stderr)
        print("No diagrams given", file=sys.stderr)
        return 1

    rows = []
    polytopes = []
    errors = []
    total = len(jobs)
    last_len = 0

    def update_progress(index, name):
        nonlocal last_len
        msg = f"[{index}/{total}] {name}"
        if len(msg) < last_len:
            msg = msg.ljust(last_len)
        print(f"\r{msg}", end="", file=sys.stderr, flush=True)
        last_len = len(msg)

    for idx, (name, diagram) in enumerate(jobs, start=1):
        if args.progress:
            update_progress(idx, name)
        try:
            polytope = polygen(
                diagram,
                normalize=args.normalize,
                max_iterations=args.max_iterations,
                max_dimension=args.max_dimension,
            )
        except PolygenError as exc:
            errors.append((name, str(exc).replace("\n", " ")))
            continue
        if args.json:
            polytopes.append(polytope.to_dict())
        else:
            rows.append((name, compute_stats(polytope)))

    if args.progress:
        print(file=sys.stderr)

    if args.json:
        json.dump(polytopes, sys.stdout)
        print()
    else:
        print_table(rows)

    if errors:
        out = sys.stderr if args.json else sys.stdout
        print("\nSkippedDiagram\tReason", file=out)
        for name, msg in errors:
            print(f"{name}\t{msg}", file=out)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
