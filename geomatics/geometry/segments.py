"""
Curve segment tessellation for geomatics.
Converts a single curve segment into an ordered list of coordinates. Arcs
given by a center point are approximated by a fixed number of geodesic
destination points.
"""

import logging

from geomatics.exceptions import UnsupportedSegmentKindError
from geomatics.geometry.geodesy import calculate_destination
from geomatics.geometry.units import length_in_meters
from geomatics.models.geometry import (
    Arc,
    ArcByCenterPoint,
    ArcString,
    Circle,
    Coordinate,
    Geodesic,
    GeodesicString,
    LineStringSegment,
)


logger = logging.getLogger(__name__)

# Number of points on an arc, both end points included
TOTAL_ARC_POINTS = 5

# Segment kinds whose control points are returned as-is
_VERTEX_SEGMENTS = (LineStringSegment, GeodesicString, Geodesic, Arc, ArcString, Circle)


def infer_points_on_arc(segment: ArcByCenterPoint, srs_name: str) -> list[Coordinate]:
    """
    Infer points on an arc given by its center point, radius and bounding
    azimuths.

    A missing pair of angles means a full circle (0 to 360 degrees); an end
    angle of exactly 0 is read as 360 so that the arc runs clockwise.

    Args:
        segment: ArcByCenterPoint or CircleByCenterPoint segment
        srs_name: CRS of the center point

    Returns:
        TOTAL_ARC_POINTS coordinates, from the start azimuth to the end azimuth
    """
    center = segment.control_points()[0]
    radius = length_in_meters(segment.radius)
    if segment.start_angle is None:
        start, end = 0.0, 360.0
    else:
        start, end = segment.start_angle, segment.end_angle
    if end == 0.0:
        end = 360.0
    delta = (end - start) / (TOTAL_ARC_POINTS - 1)

    points = [calculate_destination(center, start, radius, srs_name)]
    for i in range(1, TOTAL_ARC_POINTS - 1):
        points.append(calculate_destination(center, start + delta * i, radius, srs_name))
    points.append(calculate_destination(center, end, radius, srs_name))
    return points


class SegmentTessellator:
    """Turns curve segments into coordinate lists."""

    def tessellate(self, segment, srs_name: str) -> list[Coordinate]:
        """
        Produce the coordinates of one curve segment.

        Args:
            segment: A curve segment model (CurveMember is not a leaf segment)
            srs_name: CRS in force for the segment

        Returns:
            Ordered list of 2D coordinates in the CRS's native axis order

        Raises:
            UnsupportedSegmentKindError: If the segment kind is not recognized
        """
        if isinstance(segment, ArcByCenterPoint):
            return infer_points_on_arc(segment, srs_name)
        if isinstance(segment, _VERTEX_SEGMENTS):
            return segment.control_points()
        kind = getattr(segment, "kind", type(segment).__name__)
        logger.warning("Unsupported curve segment: %s", kind)
        raise UnsupportedSegmentKindError(kind)
