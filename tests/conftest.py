"""Shared test fixtures for polyviewer."""

import numpy as np
import pytest

from polyviewer import get
from polyviewer.model import Polyhedron


@pytest.fixture
def cube():
    """Return an axis-aligned unit cube with outward counter-clockwise faces."""
    vertices = np.array([
        [0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0],
        [0, 0, 1], [1, 0, 1], [1, 1, 1], [0, 1, 1],
    ], dtype=float)
    faces = [
        [0, 3, 2, 1],  # bottom
        [4, 5, 6, 7],  # top
        [0, 1, 5, 4],
        [1, 2, 6, 5],
        [2, 3, 7, 6],
        [3, 0, 4, 7],
    ]
    return Polyhedron(vertices, faces)


@pytest.fixture
def tetrahedron():
    """Return the catalog tetrahedron."""
    return get("tetrahedron")


@pytest.fixture
def dodecahedron():
    """Return the catalog dodecahedron."""
    return get("dodecahedron")
