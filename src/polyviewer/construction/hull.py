"""Polygonal faces of a convex solid from its vertex coordinates."""

from collections import defaultdict, deque

import numpy as np
from scipy.spatial import ConvexHull, QhullError


def faces_from_points(
    coords: np.ndarray, cos_tol: float = 0.999,
) -> list[list[int]]:
    """Compute the polygonal faces of the convex hull of *coords*.

    The hull's triangles are merged into polygons wherever adjacent
    triangles are coplanar, and every polygon is ordered
    counter-clockwise seen from outside.

    Args:
        coords: Array of shape ``(n, 3)``; every point must be a hull
            vertex.
        cos_tol: Cosine threshold for treating normals as parallel.
            Default 0.999 (~2.5 degrees).

    Returns:
        List of faces, each a list of vertex indices.

    Raises:
        ValueError: If the points do not span a 3D volume.
    """
    coords = np.asarray(coords, dtype=float)
    try:
        hull = ConvexHull(coords)
    except QhullError as exc:
        raise ValueError(f"points do not span a solid: {exc}") from exc
    faces = _merge_coplanar_faces(coords, hull.simplices, cos_tol)
    return [_orient_outward(coords, face) for face in faces]


def _orient_outward(coords: np.ndarray, face: list[int]) -> list[int]:
    """Reverse *face* if its right-hand normal points inward."""
    pts = coords[face]
    centre = pts.mean(axis=0)
    # Newell's method is robust for any planar polygon.
    normal = np.zeros(3)
    for a, b in zip(pts, np.roll(pts, -1, axis=0)):
        normal += np.cross(a, b)
    if np.dot(normal, centre - coords.mean(axis=0)) < 0:
        return face[::-1]
    return face


def _merge_coplanar_faces(
    coords: np.ndarray,
    simplices: np.ndarray,
    cos_tol: float,
) -> list[list[int]]:
    """Merge adjacent coplanar triangles into polygonal faces.

    Args:
        coords: Vertex coordinates, shape ``(n, 3)``.
        simplices: Triangle array, shape ``(n_tri, 3)``.
        cos_tol: Cosine threshold for treating normals as parallel.

    Returns:
        List of faces, each a list of vertex indices ordered as a
        polygon loop.
    """
    n_tri = len(simplices)
    if n_tri == 0:
        return []

    v0 = coords[simplices[:, 0]]
    v1 = coords[simplices[:, 1]]
    v2 = coords[simplices[:, 2]]
    normals = np.cross(v1 - v0, v2 - v0)
    norms = np.linalg.norm(normals, axis=1, keepdims=True)
    normals = normals / np.maximum(norms, 1e-12)

    # Orient normals outward (away from centroid).
    centroid = coords.mean(axis=0)
    outward = (v0 + v1 + v2) / 3.0 - centroid
    flip = np.sum(normals * outward, axis=1) < 0
    normals[flip] *= -1

    edge_to_tris: dict[tuple[int, int], list[int]] = defaultdict(list)
    for ti, tri in enumerate(simplices):
        for a, b in [(tri[0], tri[1]), (tri[1], tri[2]), (tri[2], tri[0])]:
            edge_to_tris[(min(a, b), max(a, b))].append(ti)

    # BFS to group coplanar adjacent triangles.
    visited = np.zeros(n_tri, dtype=bool)
    groups: list[list[int]] = []
    for start in range(n_tri):
        if visited[start]:
            continue
        group = [start]
        visited[start] = True
        queue = deque([start])
        while queue:
            current = queue.popleft()
            tri = simplices[current]
            for a, b in [(tri[0], tri[1]), (tri[1], tri[2]), (tri[2], tri[0])]:
                for neighbour in edge_to_tris[(min(a, b), max(a, b))]:
                    if visited[neighbour]:
                        continue
                    if np.dot(normals[current], normals[neighbour]) > cos_tol:
                        visited[neighbour] = True
                        group.append(neighbour)
                        queue.append(neighbour)
        groups.append(group)

    faces: list[list[int]] = []
    for group in groups:
        if len(group) == 1:
            faces.append([int(i) for i in simplices[group[0]]])
            continue

        # Boundary edges appear exactly once within the group.
        edge_count: dict[tuple[int, int], int] = defaultdict(int)
        for ti in group:
            tri = simplices[ti]
            for a, b in [(tri[0], tri[1]), (tri[1], tri[2]), (tri[2], tri[0])]:
                edge_count[(min(a, b), max(a, b))] += 1
        boundary = [(a, b) for (a, b), c in edge_count.items() if c == 1]

        loop = _order_boundary_loop(boundary)
        if loop is None:
            raise ValueError(
                f"coplanar group of {len(group)} triangles has no single "
                "boundary loop"
            )
        faces.append([int(i) for i in loop])

    return faces


def _order_boundary_loop(
    edges: list[tuple[int, int]],
) -> list[int] | None:
    """Order boundary edges into a closed polygon vertex loop.

    Args:
        edges: List of ``(a, b)`` vertex index pairs.

    Returns:
        Ordered list of vertex indices, or ``None`` if the edges
        don't form a single closed loop.
    """
    if not edges:
        return None

    adj: dict[int, list[int]] = defaultdict(list)
    for a, b in edges:
        adj[a].append(b)
        adj[b].append(a)

    start = edges[0][0]
    loop = [start]
    prev = -1
    current = start

    for _ in range(len(edges)):
        next_v = next((n for n in adj[current] if n != prev), None)
        if next_v is None:
            return None
        if next_v == start:
            break
        loop.append(next_v)
        prev = current
        current = next_v
    else:
        return None

    if len(loop) != len(edges):
        return None
    return loop
