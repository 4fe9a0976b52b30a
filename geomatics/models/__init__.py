"""
Models package for geomatics.
Contains Pydantic models for the geometry object graph and envelopes.
"""

from geomatics.models.envelope import (
    AxisConvention,
    Envelope,
    EnvelopeBuilder,
    SpatialOperator,
)

from geomatics.models.geometry import (
    Coordinate,
    Orientation,
    Position,
    PosList,
    Length,
    LineStringSegment,
    GeodesicString,
    Geodesic,
    Arc,
    ArcString,
    Circle,
    ArcByCenterPoint,
    CircleByCenterPoint,
    CurveMember,
    Point,
    MultiPoint,
    LineString,
    LinearRing,
    Curve,
    CompositeCurve,
    OrientableCurve,
    Ring,
    Polygon,
    PolygonPatch,
    Surface,
    MultiCurve,
    MultiSurface,
    MultiGeometry,
    Feature,
    CurveSegment,
    CurveGeometry,
    RingGeometry,
    SurfaceGeometry,
    GeometryNode,
    CURVE_KINDS,
    SURFACE_KINDS,
)

__all__ = [
    # Envelopes
    "AxisConvention",
    "Envelope",
    "EnvelopeBuilder",
    "SpatialOperator",
    # Geometry
    "Coordinate",
    "Orientation",
    "Position",
    "PosList",
    "Length",
    "LineStringSegment",
    "GeodesicString",
    "Geodesic",
    "Arc",
    "ArcString",
    "Circle",
    "ArcByCenterPoint",
    "CircleByCenterPoint",
    "CurveMember",
    "Point",
    "MultiPoint",
    "LineString",
    "LinearRing",
    "Curve",
    "CompositeCurve",
    "OrientableCurve",
    "Ring",
    "Polygon",
    "PolygonPatch",
    "Surface",
    "MultiCurve",
    "MultiSurface",
    "MultiGeometry",
    "Feature",
    "CurveSegment",
    "CurveGeometry",
    "RingGeometry",
    "SurfaceGeometry",
    "GeometryNode",
    "CURVE_KINDS",
    "SURFACE_KINDS",
]
