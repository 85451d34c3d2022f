"""Segment-to-segment geometry in (lon, lat) degree space."""

from .distance import LonLat

# Determinant magnitude below which two segments are treated as parallel
PARALLEL_EPSILON = 1e-10


def closest_points_between_segments(
    a1: LonLat,
    a2: LonLat,
    b1: LonLat,
    b2: LonLat,
) -> tuple[LonLat, LonLat]:
    """Approximate closest points between segments A (a1-a2) and B (b1-b2).

    Each segment parameter is computed and clamped to [0, 1] on its own:
    the parameter on A comes from projecting b1 onto A, the parameter on
    B from projecting a1 onto B. This is not the exact constrained
    minimum for skew or clamped cases, but candidate thresholds are tuned
    against it, so it must not be replaced by an exact solver.

    Args:
        a1: Start of segment A as (lon, lat)
        a2: End of segment A
        b1: Start of segment B
        b2: End of segment B

    Returns:
        Tuple of (point_on_a, point_on_b)
    """
    x1, y1 = a1
    x2, y2 = a2
    x3, y3 = b1
    x4, y4 = b2

    dx1 = x2 - x1
    dy1 = y2 - y1
    dx2 = x4 - x3
    dy2 = y4 - y3

    len1_sq = dx1 * dx1 + dy1 * dy1
    len2_sq = dx2 * dx2 + dy2 * dy2

    t1 = 0.0
    t2 = 0.0
    if len1_sq > 0:
        t1 = max(0.0, min(1.0, ((x3 - x1) * dx1 + (y3 - y1) * dy1) / len1_sq))
    if len2_sq > 0:
        t2 = max(0.0, min(1.0, ((x1 - x3) * dx2 + (y1 - y3) * dy2) / len2_sq))

    point_a = (x1 + t1 * dx1, y1 + t1 * dy1)
    point_b = (x3 + t2 * dx2, y3 + t2 * dy2)
    return point_a, point_b


def segment_segment_intersection(
    seg_a: tuple[LonLat, LonLat],
    seg_b: tuple[LonLat, LonLat],
) -> LonLat | None:
    """Exact 2D intersection of two segments.

    Args:
        seg_a: Segment as ((lon, lat), (lon, lat))
        seg_b: Segment as ((lon, lat), (lon, lat))

    Returns:
        Intersection point as (lon, lat), or None when the segments are
        (near-)parallel or do not overlap within their extents
    """
    (x1, y1), (x2, y2) = seg_a
    (x3, y3), (x4, y4) = seg_b

    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < PARALLEL_EPSILON:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / denom

    if 0 <= t <= 1 and 0 <= u <= 1:
        return (x1 + t * (x2 - x1), y1 + t * (y2 - y1))

    return None


def segment_midpoint(a: LonLat, b: LonLat) -> LonLat:
    """Planar midpoint of two (lon, lat) points."""
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)
