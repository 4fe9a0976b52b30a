"""
Curve coordinate lists for geomatics.
Walks a curve (segments, composite members, orientable references and ring
members) and concatenates the segment coordinates into one ordered list.
"""

import logging
from typing import Optional

from shapely.geometry import LineString as ShapelyLineString

from geomatics.config import settings
from geomatics.exceptions import RecursionLimitExceededError, UnsupportedGeometryKindError
from geomatics.geometry.crs import CRSResolver
from geomatics.geometry.geodesy import remove_consecutive_duplicates
from geomatics.geometry.segments import SegmentTessellator
from geomatics.models.geometry import (
    CompositeCurve,
    Coordinate,
    Curve,
    CurveMember,
    LinearRing,
    LineString,
    Orientation,
    OrientableCurve,
    Ring,
)


logger = logging.getLogger(__name__)


def _extend(coords: list[Coordinate], more: list[Coordinate]) -> None:
    """Append coordinates, dropping a first point that repeats the junction."""
    if coords and more and coords[-1] == more[0]:
        more = more[1:]
    coords.extend(more)


class CurveCoordinateListFactory:
    """
    Builds the coordinate list of any curve geometry.

    Args:
        resolver: CRS resolver for the document tree (built on demand)
        max_depth: Maximum nesting of curve references
    """

    def __init__(self, resolver: Optional[CRSResolver] = None, max_depth: Optional[int] = None):
        self.resolver = resolver
        self.max_depth = settings.max_curve_depth if max_depth is None else max_depth
        self.tessellator = SegmentTessellator()

    def create_coordinate_list(self, curve, srs_name: Optional[str] = None) -> list[Coordinate]:
        """
        Create an ordered coordinate list from a curve.

        Args:
            curve: LineString, LinearRing, Curve, CompositeCurve, OrientableCurve or Ring
            srs_name: CRS in force (resolved from the tree when omitted)

        Returns:
            A new list of 2D coordinates in geometric order

        Raises:
            UnresolvedCRSError: If no CRS can be found for the curve
            RecursionLimitExceededError: If curve references nest too deeply
        """
        if srs_name is None:
            if self.resolver is None:
                self.resolver = CRSResolver(curve)
            srs_name = self.resolver.require(curve)
        return self._build(curve, srs_name, 0)

    def _build(self, curve, srs_name: str, depth: int) -> list[Coordinate]:
        if depth > self.max_depth:
            raise RecursionLimitExceededError(self.max_depth)
        srs_name = getattr(curve, "srs_name", None) or srs_name

        if isinstance(curve, (LineString, LinearRing)):
            return curve.control_points()

        coords: list[Coordinate] = []
        if isinstance(curve, Curve):
            for segment in curve.segments:
                if isinstance(segment, CurveMember):
                    _extend(coords, self._build(segment.curve, srs_name, depth + 1))
                else:
                    _extend(coords, self.tessellator.tessellate(segment, srs_name))
        elif isinstance(curve, (CompositeCurve, Ring)):
            for member in curve.members:
                _extend(coords, self._build(member, srs_name, depth + 1))
        elif isinstance(curve, OrientableCurve):
            coords = self._build(curve.base_curve, srs_name, depth + 1)
            if curve.orientation == Orientation.NEGATIVE:
                coords.reverse()
        else:
            kind = getattr(curve, "kind", type(curve).__name__)
            logger.warning("Unsupported curve geometry: %s", kind)
            raise UnsupportedGeometryKindError(kind)
        return coords


def build_line_string(curve, resolver: Optional[CRSResolver] = None) -> ShapelyLineString:
    """
    Build a shapely LineString from a curve. Consecutive duplicate points
    are removed first (1 ppm tolerance unless configured otherwise).
    """
    coords = CurveCoordinateListFactory(resolver).create_coordinate_list(curve)
    remove_consecutive_duplicates(coords, settings.duplicate_tolerance_ppm)
    return ShapelyLineString(coords)
