"""Vector, plane and rotation primitives.

All functions are pure and operate on numpy arrays.  Positions accumulate
floating-point error across chained operations, so comparisons go through
:func:`approx_equal` rather than ``==``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from polyviewer._constants import PRECISION


def vec(value) -> np.ndarray:
    """Return *value* as a float array of shape ``(3,)``."""
    arr = np.asarray(value, dtype=float)
    if arr.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {arr.shape}")
    return arr


def approx_equal(a, b, tol: float = PRECISION) -> bool:
    """Whether two arrays are equal element-wise within *tol*."""
    return bool(np.allclose(a, b, rtol=0.0, atol=tol))


def is_zero(value: float, tol: float = PRECISION) -> bool:
    return abs(value) <= tol


def normalize(v) -> np.ndarray:
    """Return *v* scaled to unit length.

    Raises:
        ValueError: If *v* has (near) zero length.
    """
    v = np.asarray(v, dtype=float)
    norm = np.linalg.norm(v)
    if norm < 1e-12:
        raise ValueError("cannot normalise a zero-length vector")
    return v / norm


def get_centroid(points) -> np.ndarray:
    """Return the arithmetic mean of a sequence of points."""
    points = np.asarray(points, dtype=float)
    if len(points) == 0:
        raise ValueError("centroid of an empty point set is undefined")
    return points.mean(axis=0)


def angle_between(a, b, signed_normal=None) -> float:
    """Angle in radians between two vectors.

    Unsigned by default.  With *signed_normal* the angle is negative when
    the turn from *a* to *b* is clockwise about that axis.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    cross = np.cross(a, b)
    angle = float(np.arctan2(np.linalg.norm(cross), np.dot(a, b)))
    if signed_normal is not None and np.dot(cross, signed_normal) < 0:
        return -angle
    return angle


@dataclass(frozen=True)
class Plane:
    """An oriented plane ``normal . x = offset``.

    Attributes:
        normal: Unit normal vector.
        offset: Signed distance of the plane from the origin.
    """

    normal: np.ndarray
    offset: float

    def distance_to(self, point) -> float:
        """Signed distance of *point* from the plane (positive on the
        side the normal points to)."""
        return float(np.dot(self.normal, point) - self.offset)

    def project_point(self, point) -> np.ndarray:
        """Orthogonal projection of *point* onto the plane."""
        point = np.asarray(point, dtype=float)
        return point - self.distance_to(point) * self.normal

    def contains(self, point, tol: float = PRECISION) -> bool:
        return is_zero(self.distance_to(point), tol)


def get_plane(points: Sequence) -> Plane:
    """Fit a plane through three or more points.

    Three points define the plane exactly, with the normal following the
    right-hand rule for ``p0 -> p1 -> p2``.  More points are fitted by
    least squares (SVD of the centred coordinates), the normal oriented
    to agree with the first three points.

    Raises:
        ValueError: If fewer than three points are given or the points
            are collinear.
    """
    pts = np.asarray(points, dtype=float)
    if len(pts) < 3:
        raise ValueError(f"need at least 3 points for a plane, got {len(pts)}")
    rough = np.cross(pts[1] - pts[0], pts[2] - pts[0])
    if len(pts) == 3:
        normal = normalize(rough)
    else:
        centred = pts - pts.mean(axis=0)
        _, _, vt = np.linalg.svd(centred, full_matrices=False)
        normal = vt[2]
        if np.dot(normal, rough) < 0:
            normal = -normal
    return Plane(normal=normal, offset=float(np.dot(normal, pts.mean(axis=0))))


def are_coplanar(points: Sequence, tol: float = PRECISION) -> bool:
    """Whether all *points* lie on a common plane within *tol*."""
    pts = np.asarray(points, dtype=float)
    if len(pts) <= 3:
        return True
    plane = get_plane(pts)
    return all(plane.contains(p, tol) for p in pts)


def rotation_matrix(axis, angle: float) -> np.ndarray:
    """3x3 matrix rotating counter-clockwise by *angle* about *axis*.

    Uses Rodrigues' formula; *axis* need not be normalised.
    """
    k = normalize(axis)
    kx = np.array([
        [0.0, -k[2], k[1]],
        [k[2], 0.0, -k[0]],
        [-k[1], k[0], 0.0],
    ])
    return np.eye(3) + np.sin(angle) * kx + (1 - np.cos(angle)) * (kx @ kx)


def rotate_around(point, origin, axis, angle: float) -> np.ndarray:
    """Rotate *point* by *angle* about the line through *origin* along *axis*."""
    origin = np.asarray(origin, dtype=float)
    offset = np.asarray(point, dtype=float) - origin
    return origin + rotation_matrix(axis, angle) @ offset


def translate(points, offset) -> np.ndarray:
    return np.asarray(points, dtype=float) + np.asarray(offset, dtype=float)


def align_frames(
    source_origin, source_normal, source_ref,
    target_origin, target_normal, target_ref,
) -> tuple[np.ndarray, np.ndarray]:
    """Rigid transform mapping one (origin, normal, reference point)
    frame onto another.

    Returns:
        ``(rotation, translation)`` such that ``rotation @ p +
        translation`` maps source points onto the target frame.
    """
    def basis(normal, origin, ref):
        z = normalize(normal)
        x = np.asarray(ref, dtype=float) - np.asarray(origin, dtype=float)
        x = normalize(x - np.dot(x, z) * z)
        y = np.cross(z, x)
        return np.column_stack([x, y, z])

    src = basis(source_normal, source_origin, source_ref)
    dst = basis(target_normal, target_origin, target_ref)
    rotation = dst @ src.T
    translation = np.asarray(target_origin, dtype=float) - rotation @ np.asarray(
        source_origin, dtype=float,
    )
    return rotation, translation


def plane_intersection(planes: Sequence[Plane]) -> np.ndarray:
    """Point closest (in least squares) to every plane in *planes*.

    With three or more independent planes this is their common point.
    """
    if len(planes) < 3:
        raise ValueError(
            f"need at least 3 planes to fix a point, got {len(planes)}"
        )
    a = np.array([p.normal for p in planes])
    b = np.array([p.offset for p in planes])
    point, *_ = np.linalg.lstsq(a, b, rcond=None)
    return point
