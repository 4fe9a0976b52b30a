"""
Spatial relationships for geomatics.
Evaluates DE-9IM predicates between geometry nodes using shapely. If the two
geometries use different CRSs, the first is transformed to the CRS of the
second.
"""

import logging
from typing import Optional

from pyproj.exceptions import ProjError
from shapely.geometry.base import BaseGeometry
from shapely.ops import transform

from geomatics.geometry.coordinates import GeometryCoordinateList
from geomatics.geometry.crs import CRSResolver, crs_from_reference, crs_identifier, crs_transformer, same_crs
from geomatics.geometry.extents import calculate_envelope, transform_envelope
from geomatics.models.envelope import Envelope, SpatialOperator


logger = logging.getLogger(__name__)

_PREDICATES = {
    SpatialOperator.CONTAINS: BaseGeometry.contains,
    SpatialOperator.CROSSES: BaseGeometry.crosses,
    SpatialOperator.DISJOINT: BaseGeometry.disjoint,
    SpatialOperator.INTERSECTS: BaseGeometry.intersects,
    SpatialOperator.EQUALS: BaseGeometry.equals,
    SpatialOperator.OVERLAPS: BaseGeometry.overlaps,
    SpatialOperator.TOUCHES: BaseGeometry.touches,
    SpatialOperator.WITHIN: BaseGeometry.within,
}


def _shapely_pair(node1, node2, resolver: CRSResolver) -> tuple[BaseGeometry, BaseGeometry]:
    geometries = GeometryCoordinateList(resolver)
    srs1, srs2 = geometries.srs_name_for(node1), geometries.srs_name_for(node2)
    geom1 = geometries.to_shapely(node1, srs1)
    geom2 = geometries.to_shapely(node2, srs2)
    if not same_crs(srs1, srs2):
        logger.debug("Attempting coordinate transformation from CRS %s to %s", srs1, srs2)
        geom1 = transform(crs_transformer(srs1, srs2).transform, geom1)
    logger.debug("Shapely geometry objects:\n  %s\n  %s", geom1.wkt, geom2.wkt)
    return geom1, geom2


def relate(
    operator: SpatialOperator,
    node1,
    node2,
    distance: Optional[float] = None,
    resolver: Optional[CRSResolver] = None,
) -> bool:
    """
    Determine whether a spatial relationship holds between two geometries.

    Args:
        operator: The spatial operator to evaluate
        node1: First geometry node
        node2: Second geometry node
        distance: Distance (in units of the second geometry's CRS) for BEYOND and DWITHIN
        resolver: CRS resolver for the document tree(s) the nodes belong to

    Returns:
        True if node1 stands in the given relationship to node2

    Raises:
        ValueError: If BEYOND or DWITHIN is requested without a distance
    """
    operator = SpatialOperator(operator)
    if resolver is None:
        resolver = CRSResolver()
        resolver.add_tree(node1)
        resolver.add_tree(node2)

    if operator == SpatialOperator.BBOX:
        return envelopes_intersect(
            calculate_envelope([node1], resolver), calculate_envelope([node2], resolver)
        )

    geom1, geom2 = _shapely_pair(node1, node2, resolver)
    if operator in (SpatialOperator.BEYOND, SpatialOperator.DWITHIN):
        if distance is None:
            raise ValueError(f"{operator.value} requires a distance")
        separation = geom1.distance(geom2)
        return separation > distance if operator == SpatialOperator.BEYOND else separation <= distance
    return _PREDICATES[operator](geom1, geom2)


def intersects(node1, node2, resolver: Optional[CRSResolver] = None) -> bool:
    """
    Determine whether two geometries have at least one point in common:
    a.Intersects(b) <==> !a.Disjoint(b).
    """
    return relate(SpatialOperator.INTERSECTS, node1, node2, resolver=resolver)


def envelopes_intersect(env1: Envelope, env2: Envelope) -> bool:
    """Envelope overlap test (edges inclusive); env2 is transformed to the CRS of env1."""
    env2 = transform_envelope(env2, env1.srs_name)
    dims = min(env1.dimension, env2.dimension)
    return all(
        env1.minimum(i) <= env2.maximum(i) and env2.minimum(i) <= env1.maximum(i)
        for i in range(dims)
    )


def _describe(envelope: Envelope) -> str:
    identifier = crs_identifier(crs_from_reference(envelope.srs_name)) or envelope.srs_name
    return f"{list(envelope.lower_corner)} {list(envelope.upper_corner)} with CRS {identifier}"


def assert_intersects(env1: Envelope, env2: Envelope) -> None:
    """
    Assert that two envelopes intersect (are not disjoint).

    Raises:
        AssertionError: If the envelopes are disjoint or env2 cannot be
            transformed to the CRS of env1
    """
    try:
        intersecting = envelopes_intersect(env1, env2)
    except ProjError as e:
        raise AssertionError(
            f"Coordinate transformation failed.\n crs1 is {env1.srs_name}\n crs2 is {env2.srs_name}"
        ) from e
    if not intersecting:
        raise AssertionError(f"The envelopes do not intersect.\n{_describe(env1)}\n{_describe(env2)}")
