"""Named diagrams for the regular polyhedra and polychora."""

POLYHEDRA = {
    "tetrahedron": "x3o3o",
    "cube": "x4o3o",
    "octahedron": "o4o3x",
    "icosahedron": "o5o3x",
    "dodecahedron": "x5o3o",
}

POLYCHORA = {
    "cell5": "x3o3o3o",
    "cell8": "x4o3o3o",
    "cell16": "o4o3o3x",
    "cell24": "o4o3x3o",
    "cell120": "x5o3o3o",
    "cell600": "o5o3o3x",
}

CATALOG = {**POLYHEDRA, **POLYCHORA}


def lookup(name_or_diagram):
    """Diagram for a catalog name; anything else is returned unchanged."""
    return CATALOG.get(name_or_diagram.lower(), name_or_diagram)


__all__ = ["POLYHEDRA", "POLYCHORA", "CATALOG", "lookup"]
