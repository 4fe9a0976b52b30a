"""
Geodesy utilities for geomatics.
Provides destination-point calculations using geographiclib on the ellipsoid
of the CRS in use, and axis-order corrections using pyproj.
"""

import logging
import math
from functools import lru_cache
from typing import Optional, Sequence

from geographiclib.geodesic import Geodesic
from pyproj import Transformer
from pyproj.exceptions import ProjError

from geomatics.config import settings
from geomatics.exceptions import GeodesicComputationError
from geomatics.geometry.crs import (
    CRSResolver,
    crs_from_reference,
    is_lat_first,
    right_handed_transformer,
)
from geomatics.models.geometry import Coordinate


logger = logging.getLogger(__name__)


@lru_cache(maxsize=16)
def _geodesic_for(srs_name: str) -> Geodesic:
    """Geodesic calculator for the reference ellipsoid of a CRS."""
    ellipsoid = crs_from_reference(srs_name).ellipsoid
    if ellipsoid is None:
        raise ValueError(f"CRS has no reference ellipsoid: {srs_name}")
    a = ellipsoid.semi_major_metre
    f = 1.0 / ellipsoid.inverse_flattening if ellipsoid.inverse_flattening else 0.0
    return Geodesic(a, f)


@lru_cache(maxsize=16)
def _geographic_transformers(srs_name: str) -> tuple[Transformer, Transformer, bool]:
    """Transformers between a projected CRS and its geodetic base CRS."""
    crs = crs_from_reference(srs_name)
    geographic = crs.geodetic_crs
    return (
        Transformer.from_crs(crs, geographic),
        Transformer.from_crs(geographic, crs),
        is_lat_first(geographic),
    )


def _to_lat_lon(position: Coordinate, srs_name: str) -> tuple[float, float]:
    crs = crs_from_reference(srs_name)
    if crs.is_geographic:
        return (position[0], position[1]) if is_lat_first(crs) else (position[1], position[0])
    forward, _, lat_first = _geographic_transformers(srs_name)
    a, b = forward.transform(position[0], position[1], errcheck=True)
    return (a, b) if lat_first else (b, a)


def _from_lat_lon(lat: float, lon: float, srs_name: str) -> Coordinate:
    crs = crs_from_reference(srs_name)
    if crs.is_geographic:
        return (lat, lon) if is_lat_first(crs) else (lon, lat)
    _, inverse, lat_first = _geographic_transformers(srs_name)
    args = (lat, lon) if lat_first else (lon, lat)
    x, y = inverse.transform(*args, errcheck=True)
    return x, y


def normalize_azimuth(azimuth: float) -> float:
    """Bring an azimuth into the range [-180, 180]."""
    if azimuth > 180:
        azimuth -= 360
    elif azimuth < -180:
        azimuth += 360
    return azimuth


def calculate_destination(
    position: Coordinate, azimuth: float, distance: float, srs_name: str
) -> Coordinate:
    """
    Determine the destination position given the azimuth and distance from a
    starting position.

    Args:
        position: Starting position in the CRS's native axis order
        azimuth: Horizontal angle in degrees measured clockwise from north
        distance: Geodesic distance in meters
        srs_name: CRS of the starting position

    Returns:
        The destination position (same CRS and axis order)

    Raises:
        InvalidCRSReferenceError: If srs_name is malformed
        UnknownCRSError: If srs_name is not a known CRS
        GeodesicComputationError: If the destination cannot be evaluated
    """
    azimuth = normalize_azimuth(azimuth)
    crs_from_reference(srs_name)
    try:
        lat, lon = _to_lat_lon(position, srs_name)
        result = _geodesic_for(srs_name).Direct(lat, lon, azimuth, distance)
        destination = _from_lat_lon(result["lat2"], result["lon2"], srs_name)
    except (ProjError, ValueError) as e:
        raise GeodesicComputationError(position, azimuth, distance, srs_name, str(e)) from e
    if not all(math.isfinite(v) for v in destination):
        raise GeodesicComputationError(position, azimuth, distance, srs_name, "result is not finite")
    return destination


def _relative_delta(current: float, following: float) -> float:
    if current == 0.0:
        return 0.0 if following == 0.0 else math.inf
    return abs(following / current - 1.0)


def remove_consecutive_duplicates(coords: list, tolerance_ppm: float) -> None:
    """
    Remove consecutive duplicate positions from a coordinate list, in place.

    P(n+1) is removed if it represents the same location as P(n) within the
    given tolerance, unless it is the last point in the list, in which case
    P(n) is removed instead (the last point may coincide with the first in
    order to form a cycle). Positions are compared by the ratio of their
    ordinates; the third dimension is ignored.

    Args:
        coords: A list of coordinate tuples
        tolerance_ppm: Tolerance in parts per million
    """
    if len(coords) < 2:
        return
    tolerance = tolerance_ppm * 1e-06
    i = 1
    while i < len(coords):
        current, following = coords[i - 1], coords[i]
        x_delta = _relative_delta(current[0], following[0])
        y_delta = _relative_delta(current[1], following[1])
        if x_delta <= tolerance and y_delta <= tolerance:
            if i == len(coords) - 1:
                # remove next to last item
                del coords[-2]
                break
            del coords[i]
            continue
        i += 1


def to_right_handed_axis_order(
    coords: Sequence[Coordinate],
    srs_name: str,
    remove_duplicates: bool = True,
    tolerance_ppm: Optional[float] = None,
) -> list[Coordinate]:
    """
    Transform coordinates to the right-handed convention of their CRS.

    Many computational geometry algorithms assume right-handed coordinates;
    often this is achieved simply by changing the axis order from (lat, lon)
    to (lon, lat).

    Args:
        coords: Coordinates in the CRS's native axis order
        srs_name: CRS reference
        remove_duplicates: Collapse points that became coincident
        tolerance_ppm: Duplicate tolerance (defaults to the configured value)

    Returns:
        A new list of transformed coordinates
    """
    transformer = right_handed_transformer(crs_from_reference(srs_name))
    if transformer is None:
        result = [(c[0], c[1]) for c in coords]
    else:
        result = []
        for coord in coords:
            try:
                x, y = transformer.transform(coord[0], coord[1], errcheck=True)
            except ProjError as e:
                raise GeodesicComputationError(coord, 0.0, 0.0, srs_name, f"axis transformation failed: {e}") from e
            result.append((x, y))
    if remove_duplicates:
        tolerance = settings.duplicate_tolerance_ppm if tolerance_ppm is None else tolerance_ppm
        remove_consecutive_duplicates(result, tolerance)
    return result


def transform_ring_to_right_handed(
    ring, resolver: Optional[CRSResolver] = None, remove_duplicates: bool = True
) -> Optional[list[Coordinate]]:
    """
    Build the coordinate list of a ring and transform it to a right-handed
    coordinate system.

    Args:
        ring: A ring geometry (LinearRing, Ring or any closed curve)
        resolver: CRS resolver for the tree containing the ring
        remove_duplicates: Collapse near-duplicate points (1 ppm by default)

    Returns:
        The transformed coordinates, or None if the ring's CRS is unknown
    """
    from geomatics.geometry.curves import CurveCoordinateListFactory

    resolver = resolver or CRSResolver(ring)
    srs_name = resolver.resolve(ring)
    if not srs_name:
        return None
    coords = CurveCoordinateListFactory(resolver).create_coordinate_list(ring, srs_name)
    return to_right_handed_axis_order(coords, srs_name, remove_duplicates)


def antipode(coord_tuple: Sequence[float]) -> tuple[float, ...]:
    """
    Compute the antipode of a (lat, lon, ...) tuple: (-lat, lon +/- 180).
    """
    result = list(coord_tuple)
    result[0] = -result[0]
    if result[1] < 0:
        result[1] += 180
    else:
        result[1] -= 180
    return tuple(result)
