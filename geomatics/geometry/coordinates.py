"""
Geometry coordinate lists for geomatics.
Dispatches any supported geometry node to the curve or surface factory and
builds shapely geometries and convex hulls from the results.
"""

import logging
from typing import Optional

from shapely.geometry import (
    GeometryCollection,
    LineString as ShapelyLineString,
    MultiLineString,
    MultiPoint as ShapelyMultiPoint,
    Point as ShapelyPoint,
)
from shapely.geometry.base import BaseGeometry
from shapely.ops import transform, unary_union

from geomatics.config import settings
from geomatics.exceptions import (
    RecursionLimitExceededError,
    UnresolvedCRSError,
    UnsupportedGeometryKindError,
)
from geomatics.geometry.crs import CRSResolver, crs_transformer, same_crs, transform_coordinates
from geomatics.geometry.curves import CurveCoordinateListFactory
from geomatics.geometry.surfaces import SurfaceCoordinateListFactory
from geomatics.models.geometry import (
    CURVE_KINDS,
    SURFACE_KINDS,
    Coordinate,
    MultiCurve,
    MultiGeometry,
    MultiPoint,
    MultiSurface,
    Point,
)


logger = logging.getLogger(__name__)

COLLECTION_TYPES = (MultiPoint, MultiCurve, MultiSurface, MultiGeometry)


def _unsupported(node) -> UnsupportedGeometryKindError:
    kind = getattr(node, "kind", type(node).__name__)
    logger.warning("Unsupported geometry: %s", kind)
    return UnsupportedGeometryKindError(kind)


class GeometryCoordinateList:
    """
    Produces coordinate lists for points, curves, surfaces and collections.

    Surfaces contribute their exterior boundary; collections contribute the
    coordinates of every member in order. A collection member that declares
    its own CRS is reprojected to the CRS of the collection. Envelopes and
    any other kind are rejected with UnsupportedGeometryKindError.
    """

    def __init__(self, resolver: Optional[CRSResolver] = None, max_depth: Optional[int] = None):
        self.resolver = resolver
        self.max_depth = settings.max_curve_depth if max_depth is None else max_depth

    def _check_depth(self, depth: int) -> None:
        if depth > self.max_depth:
            raise RecursionLimitExceededError(self.max_depth)

    def _find_srs_name(self, node, depth: int) -> Optional[str]:
        self._check_depth(depth)
        if self.resolver is None:
            self.resolver = CRSResolver(node)
        srs_name = self.resolver.resolve(node)
        if srs_name or not isinstance(node, COLLECTION_TYPES):
            return srs_name
        for member in node.members:
            srs_name = self._find_srs_name(member, depth + 1)
            if srs_name:
                logger.debug("%s takes CRS %s from a member", node.kind, srs_name)
                return srs_name
        return None

    def srs_name_for(self, node) -> str:
        """
        Return the CRS reference in force for a geometry node. A collection
        without one takes the CRS of its first member that has one.

        Raises:
            UnresolvedCRSError: If no CRS can be found
        """
        srs_name = self._find_srs_name(node, 0)
        if not srs_name:
            raise UnresolvedCRSError(getattr(node, "kind", type(node).__name__), getattr(node, "id", None))
        return srs_name

    def _srs_name(self, node, srs_name: Optional[str]) -> str:
        return srs_name or self.srs_name_for(node)

    def _curves(self) -> CurveCoordinateListFactory:
        return CurveCoordinateListFactory(self.resolver, self.max_depth)

    def _surfaces(self) -> SurfaceCoordinateListFactory:
        return SurfaceCoordinateListFactory(self.resolver, self.max_depth)

    def coordinates_for(self, node, srs_name: Optional[str] = None, depth: int = 0) -> list[Coordinate]:
        """
        Return all coordinates of a geometry node in geometric order, in the
        CRS given by srs_name (or the CRS in force for the node).

        Raises:
            UnsupportedGeometryKindError: If the node kind is not supported
            UnresolvedCRSError: If no CRS can be found for the node
            RecursionLimitExceededError: If collections nest too deeply
        """
        kind = getattr(node, "kind", None)
        if kind not in CURVE_KINDS and kind not in SURFACE_KINDS and not isinstance(
            node, (Point,) + COLLECTION_TYPES
        ):
            raise _unsupported(node)
        self._check_depth(depth)
        srs_name = self._srs_name(node, srs_name)

        if isinstance(node, Point):
            return node.control_points()
        if kind in CURVE_KINDS:
            return self._curves().create_coordinate_list(node, srs_name)
        if kind in SURFACE_KINDS:
            return self._surfaces().exterior_boundary(node, srs_name)

        coords: list[Coordinate] = []
        for member in node.members:
            coords.extend(self._member_coordinates(member, srs_name, depth + 1))
        return coords

    def _member_coordinates(self, member, srs_name: str, depth: int) -> list[Coordinate]:
        member_srs_name = getattr(member, "srs_name", None) or srs_name
        coords = self.coordinates_for(member, member_srs_name, depth)
        if same_crs(member_srs_name, srs_name):
            return coords
        logger.debug("Transforming %d member coordinates from %s to %s", len(coords), member_srs_name, srs_name)
        return transform_coordinates(coords, member_srs_name, srs_name)

    def _member_shape(self, member, srs_name: str, depth: int) -> BaseGeometry:
        member_srs_name = getattr(member, "srs_name", None) or srs_name
        shape = self.to_shapely(member, member_srs_name, depth)
        if same_crs(member_srs_name, srs_name):
            return shape
        return transform(crs_transformer(member_srs_name, srs_name).transform, shape)

    def to_shapely(self, node, srs_name: Optional[str] = None, depth: int = 0) -> BaseGeometry:
        """Build a shapely geometry (native axis order) for a geometry node."""
        self._check_depth(depth)
        kind = getattr(node, "kind", None)
        if isinstance(node, Point):
            return ShapelyPoint(node.control_points()[0])
        if isinstance(node, MultiPoint):
            return ShapelyMultiPoint(self.coordinates_for(node, srs_name, depth))
        if kind in CURVE_KINDS:
            return ShapelyLineString(self.coordinates_for(node, srs_name, depth))
        if kind in SURFACE_KINDS:
            return self._surfaces().to_polygon(node, self._srs_name(node, srs_name))
        if isinstance(node, MultiCurve):
            srs_name = self._srs_name(node, srs_name)
            return MultiLineString([self._member_coordinates(m, srs_name, depth + 1) for m in node.members])
        if isinstance(node, MultiSurface):
            srs_name = self._srs_name(node, srs_name)
            return unary_union([self._member_shape(m, srs_name, depth + 1) for m in node.members])
        if isinstance(node, MultiGeometry):
            srs_name = self._srs_name(node, srs_name)
            return GeometryCollection([self._member_shape(m, srs_name, depth + 1) for m in node.members])
        raise _unsupported(node)

    def convex_hull(self, node, srs_name: Optional[str] = None) -> BaseGeometry:
        """
        Compute the convex hull of all coordinates of a geometry node.
        The result is a Polygon, or a LineString/Point for degenerate inputs.
        """
        coords = self.coordinates_for(node, srs_name)
        return ShapelyMultiPoint(coords).convex_hull


def compute_convex_hull(node, resolver: Optional[CRSResolver] = None) -> BaseGeometry:
    """Convex hull of a geometry node (see GeometryCoordinateList.convex_hull)."""
    return GeometryCoordinateList(resolver).convex_hull(node)
