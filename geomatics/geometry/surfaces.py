"""
Surface coordinate lists for geomatics.
Produces the exterior and interior boundaries of polygons and surfaces by
delegating each ring to the curve factory.
"""

import logging
from typing import Optional

from shapely.geometry import LinearRing, MultiPolygon, Polygon as ShapelyPolygon
from shapely.geometry.polygon import orient
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from geomatics.exceptions import UnsupportedGeometryKindError
from geomatics.geometry.crs import CRSResolver
from geomatics.geometry.curves import CurveCoordinateListFactory
from geomatics.models.geometry import Coordinate, Polygon, PolygonPatch, Surface


logger = logging.getLogger(__name__)


def _patches(surface) -> list:
    """Polygon-like parts of a surface (a Polygon is its own single patch)."""
    if isinstance(surface, Polygon):
        return [surface]
    if isinstance(surface, Surface):
        return surface.patches
    kind = getattr(surface, "kind", type(surface).__name__)
    logger.warning("Unsupported surface geometry: %s", kind)
    raise UnsupportedGeometryKindError(kind)


class SurfaceCoordinateListFactory:
    """
    Builds boundary coordinate lists for Polygon and Surface geometries.

    A surface with several patches is treated as the union of its patches:
    edges shared by adjacent patches cancel out and the exterior boundary is
    the outer ring of the merged polygon. Ring closure and winding are kept
    as produced by the curve factory; a merged boundary takes the winding of
    the first patch.
    """

    def __init__(self, resolver: Optional[CRSResolver] = None, max_depth: Optional[int] = None):
        self.resolver = resolver
        self.curves = CurveCoordinateListFactory(resolver, max_depth)

    def _srs_name(self, surface, srs_name: Optional[str]) -> str:
        if srs_name:
            return srs_name
        if self.resolver is None:
            self.resolver = CRSResolver(surface)
            self.curves.resolver = self.resolver
        return self.resolver.require(surface)

    def _ring(self, ring, srs_name: str) -> list[Coordinate]:
        return self.curves.create_coordinate_list(ring, srs_name)

    def _patch_polygon(self, patch: PolygonPatch, srs_name: str, with_holes: bool) -> ShapelyPolygon:
        holes = [self._ring(r, srs_name) for r in patch.interiors] if with_holes else None
        return ShapelyPolygon(self._ring(patch.exterior, srs_name), holes)

    def exterior_boundary(self, surface, srs_name: Optional[str] = None) -> list[Coordinate]:
        """
        Return the coordinates of the exterior boundary.

        Args:
            surface: Polygon or Surface
            srs_name: CRS in force (resolved from the tree when omitted)

        Returns:
            Ordered coordinate list of the outer ring
        """
        srs_name = self._srs_name(surface, srs_name)
        patches = _patches(surface)
        if len(patches) == 1:
            return self._ring(patches[0].exterior, srs_name)

        logger.debug("Merging %d surface patches", len(patches))
        first_exterior = self._ring(patches[0].exterior, srs_name)
        # merged rings keep the winding of the first patch
        sign = 1.0 if LinearRing(first_exterior).is_ccw else -1.0
        merged = unary_union([self._patch_polygon(p, srs_name, with_holes=False) for p in patches])
        parts = merged.geoms if isinstance(merged, MultiPolygon) else [merged]
        if len(parts) > 1:
            logger.debug("Surface patches form %d disjoint parts", len(parts))
        coords: list[Coordinate] = []
        for part in parts:
            coords.extend((c[0], c[1]) for c in orient(part, sign).exterior.coords)
        return coords

    def interior_boundaries(self, surface, srs_name: Optional[str] = None) -> list[list[Coordinate]]:
        """Return one coordinate list per interior ring, in patch order."""
        srs_name = self._srs_name(surface, srs_name)
        return [
            self._ring(ring, srs_name)
            for patch in _patches(surface)
            for ring in patch.interiors
        ]

    def to_polygon(self, surface, srs_name: Optional[str] = None) -> BaseGeometry:
        """Build a shapely polygon (with holes) for the surface."""
        srs_name = self._srs_name(surface, srs_name)
        polygons = [self._patch_polygon(p, srs_name, with_holes=True) for p in _patches(surface)]
        if len(polygons) == 1:
            return polygons[0]
        return unary_union(polygons)
