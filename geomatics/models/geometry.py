"""
Geometry input models for the geomatics coordinate engine.
The GML curve/surface object graph, validated using Pydantic.

Instances are produced by an XML binding layer (or built directly) and are
treated as read-only by the engine.
"""

from enum import Enum
from typing import Annotated, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from geomatics.models.envelope import Envelope


Coordinate = tuple[float, float]


class Orientation(str, Enum):
    """Traversal direction of an orientable curve."""
    POSITIVE = "+"
    NEGATIVE = "-"


class Position(BaseModel):
    """A single direct position (gml:pos)."""
    coordinates: list[float] = Field(..., min_length=2, description="Ordinates in CRS axis order")
    srs_name: Optional[str] = Field(None, description="CRS reference carried by the position")

    def as_coordinate(self) -> Coordinate:
        return self.coordinates[0], self.coordinates[1]


class PosList(BaseModel):
    """A flat sequence of coordinate tuples (gml:posList)."""
    values: list[float] = Field(default_factory=list, description="Ordinate values")
    srs_dimension: int = Field(2, ge=2, le=3, description="Number of ordinates per tuple")
    srs_name: Optional[str] = Field(None, description="CRS reference carried by the list")

    @model_validator(mode="after")
    def validate_tuple_count(self) -> "PosList":
        if len(self.values) % self.srs_dimension != 0:
            raise ValueError(
                f"posList has {len(self.values)} values, not a multiple of srsDimension {self.srs_dimension}"
            )
        return self

    def coordinates(self) -> list[Coordinate]:
        """Return the (2D) coordinates; any third ordinate is dropped."""
        dim = self.srs_dimension
        return [(self.values[i], self.values[i + 1]) for i in range(0, len(self.values), dim)]


class Length(BaseModel):
    """A length measure with a unit of measure (symbol or URI reference)."""
    value: float = Field(..., ge=0, description="Length value")
    uom: str = Field(..., min_length=1, description="Unit symbol or URI with the symbol as fragment")


class _PositionedModel(BaseModel):
    """Shared access to pos / posList children."""
    pos: list[Position] = Field(default_factory=list, description="Explicit gml:pos children")
    pos_list: Optional[PosList] = Field(None, description="gml:posList child")

    def control_points(self) -> list[Coordinate]:
        if self.pos_list is not None:
            return self.pos_list.coordinates()
        return [p.as_coordinate() for p in self.pos]

    def first_position_srs_name(self) -> Optional[str]:
        """CRS reference on the first pos/posList child, if any."""
        if self.pos_list is not None and self.pos_list.srs_name:
            return self.pos_list.srs_name
        if self.pos and self.pos[0].srs_name:
            return self.pos[0].srs_name
        return None


# -----------------------------------------------------------------------------
# Curve segments
# -----------------------------------------------------------------------------

class _Segment(_PositionedModel):
    # Minimum number of direct positions required by the segment kind.
    min_positions: ClassVar[int] = 2

    @model_validator(mode="after")
    def validate_min_positions(self):
        count = len(self.control_points())
        if count < self.min_positions:
            raise ValueError(
                f"{self.kind} requires at least {self.min_positions} positions, got {count}"
            )
        return self


class LineStringSegment(_Segment):
    kind: Literal["LineStringSegment"] = "LineStringSegment"


class GeodesicString(_Segment):
    kind: Literal["GeodesicString"] = "GeodesicString"


class Geodesic(_Segment):
    kind: Literal["Geodesic"] = "Geodesic"


class Arc(_Segment):
    """Circular arc given by three control points."""
    kind: Literal["Arc"] = "Arc"
    min_positions: ClassVar[int] = 3


class ArcString(_Segment):
    kind: Literal["ArcString"] = "ArcString"
    min_positions: ClassVar[int] = 3


class Circle(_Segment):
    """Full circle through three control points."""
    kind: Literal["Circle"] = "Circle"
    min_positions: ClassVar[int] = 3


class ArcByCenterPoint(_Segment):
    """
    Arc defined by its center, radius and bounding azimuths.
    Angles are in degrees measured clockwise from north.
    """
    kind: Literal["ArcByCenterPoint"] = "ArcByCenterPoint"
    min_positions: ClassVar[int] = 1
    radius: Length = Field(..., description="Arc radius")
    start_angle: Optional[float] = Field(None, description="Start azimuth (degrees)")
    end_angle: Optional[float] = Field(None, description="End azimuth (degrees)")

    @model_validator(mode="after")
    def validate_angles(self) -> "ArcByCenterPoint":
        if (self.start_angle is None) != (self.end_angle is None):
            raise ValueError("start_angle and end_angle must be given together")
        return self


class CircleByCenterPoint(ArcByCenterPoint):
    """Full circle defined by its center and radius."""
    kind: Literal["CircleByCenterPoint"] = "CircleByCenterPoint"


class CurveMember(BaseModel):
    """A segment that refers to another curve (composite curve member)."""
    kind: Literal["CurveMember"] = "CurveMember"
    curve: "CurveGeometry"


# -----------------------------------------------------------------------------
# Geometries
# -----------------------------------------------------------------------------

class _Geometry(BaseModel):
    id: Optional[str] = Field(None, description="gml:id")
    srs_name: Optional[str] = Field(None, description="Explicit CRS reference")


class Point(_Geometry, _PositionedModel):
    kind: Literal["Point"] = "Point"

    @model_validator(mode="after")
    def validate_position(self) -> "Point":
        if len(self.control_points()) != 1:
            raise ValueError("Point requires exactly one position")
        return self


class MultiPoint(_Geometry):
    kind: Literal["MultiPoint"] = "MultiPoint"
    members: list[Point] = Field(default_factory=list)


class LineString(_Geometry, _PositionedModel):
    kind: Literal["LineString"] = "LineString"

    @model_validator(mode="after")
    def validate_vertices(self) -> "LineString":
        if len(self.control_points()) < 2:
            raise ValueError("LineString requires at least 2 positions")
        return self


class LinearRing(_Geometry, _PositionedModel):
    kind: Literal["LinearRing"] = "LinearRing"

    @model_validator(mode="after")
    def validate_vertices(self) -> "LinearRing":
        if len(self.control_points()) < 4:
            raise ValueError("LinearRing requires at least 4 positions")
        return self


class Curve(_Geometry):
    kind: Literal["Curve"] = "Curve"
    segments: list["CurveSegment"] = Field(..., min_length=1)


class CompositeCurve(_Geometry):
    kind: Literal["CompositeCurve"] = "CompositeCurve"
    members: list["CurveGeometry"] = Field(..., min_length=1)


class OrientableCurve(_Geometry):
    kind: Literal["OrientableCurve"] = "OrientableCurve"
    base_curve: "CurveGeometry"
    orientation: Orientation = Field(Orientation.POSITIVE, description="'+' or '-'")


class Ring(_Geometry):
    """A closed curve composed of curve members (gml:Ring)."""
    kind: Literal["Ring"] = "Ring"
    members: list["CurveGeometry"] = Field(..., min_length=1)


class Polygon(_Geometry):
    kind: Literal["Polygon"] = "Polygon"
    exterior: "RingGeometry"
    interiors: list["RingGeometry"] = Field(default_factory=list)


class PolygonPatch(BaseModel):
    kind: Literal["PolygonPatch"] = "PolygonPatch"
    exterior: "RingGeometry"
    interiors: list["RingGeometry"] = Field(default_factory=list)


class Surface(_Geometry):
    kind: Literal["Surface"] = "Surface"
    patches: list[PolygonPatch] = Field(..., min_length=1)


class MultiCurve(_Geometry):
    kind: Literal["MultiCurve"] = "MultiCurve"
    members: list["CurveGeometry"] = Field(default_factory=list)


class MultiSurface(_Geometry):
    kind: Literal["MultiSurface"] = "MultiSurface"
    members: list["SurfaceGeometry"] = Field(default_factory=list)


class MultiGeometry(_Geometry):
    kind: Literal["MultiGeometry"] = "MultiGeometry"
    members: list["GeometryNode"] = Field(default_factory=list)


class Feature(BaseModel):
    """
    A feature instance. Its bounding envelope supplies the CRS for contained
    geometries that do not declare one.
    """
    kind: Literal["Feature"] = "Feature"
    id: Optional[str] = Field(None, description="gml:id")
    bounded_by: Optional["Envelope"] = Field(None, description="gml:boundedBy/gml:Envelope")
    geometry: Optional["GeometryNode"] = Field(None, description="Geometry property value")
    members: list["Feature"] = Field(default_factory=list, description="Member features")


CurveSegment = Annotated[
    Union[
        LineStringSegment,
        GeodesicString,
        Geodesic,
        Arc,
        ArcString,
        Circle,
        ArcByCenterPoint,
        CircleByCenterPoint,
        CurveMember,
    ],
    Field(discriminator="kind"),
]

# Segment models that carry direct positions, with their min_positions.
POSITIONED_SEGMENT_MODELS = (
    LineStringSegment,
    GeodesicString,
    Geodesic,
    Arc,
    ArcString,
    Circle,
    ArcByCenterPoint,
    CircleByCenterPoint,
)

CurveGeometry = Annotated[
    Union[LineString, LinearRing, Curve, CompositeCurve, OrientableCurve, Ring],
    Field(discriminator="kind"),
]

RingGeometry = Annotated[Union[LinearRing, Ring], Field(discriminator="kind")]

SurfaceGeometry = Annotated[Union[Polygon, Surface], Field(discriminator="kind")]

GeometryNode = Annotated[
    Union[
        Point,
        MultiPoint,
        LineString,
        LinearRing,
        Curve,
        CompositeCurve,
        OrientableCurve,
        Ring,
        Polygon,
        Surface,
        MultiCurve,
        MultiSurface,
        MultiGeometry,
        Envelope,
    ],
    Field(discriminator="kind"),
]

# Geometry kinds whose coordinates form a single curve.
CURVE_KINDS = frozenset({"LineString", "LinearRing", "Curve", "CompositeCurve", "OrientableCurve", "Ring"})
SURFACE_KINDS = frozenset({"Polygon", "Surface"})

for _model in (
    CurveMember,
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
):
    _model.model_rebuild()
