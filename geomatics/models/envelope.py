"""
Envelope models for the geomatics coordinate engine.
Bounding boxes produced by the envelope/hull aggregator.
"""

import math
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator


class AxisConvention(str, Enum):
    """Axis order of the ordinates held by an envelope."""
    NATIVE = "native"
    RIGHT_HANDED = "right_handed"


class SpatialOperator(str, Enum):
    """
    Named spatial relationship predicates based on DE-9IM and ISO 19143.
    BEYOND and DWITHIN are derived from the minimum distance between two
    geometries.
    """
    BBOX = "BBOX"
    CONTAINS = "Contains"
    CROSSES = "Crosses"
    DISJOINT = "Disjoint"
    INTERSECTS = "Intersects"
    EQUALS = "Equals"
    OVERLAPS = "Overlaps"
    TOUCHES = "Touches"
    WITHIN = "Within"
    BEYOND = "Beyond"
    DWITHIN = "DWithin"


class Envelope(BaseModel):
    """
    A CRS-tagged axis-aligned bounding box (rectangle or cuboid).
    Corner ordinates follow the axis order given by ``axis_convention``.
    """
    kind: Literal["Envelope"] = "Envelope"
    srs_name: str = Field(..., min_length=1, description="CRS reference")
    lower_corner: tuple[float, ...] = Field(..., description="Minimum ordinates")
    upper_corner: tuple[float, ...] = Field(..., description="Maximum ordinates")
    axis_convention: AxisConvention = Field(AxisConvention.NATIVE, description="Axis order of the ordinates")

    @model_validator(mode="after")
    def validate_corners(self) -> "Envelope":
        dim = len(self.lower_corner)
        if dim not in (2, 3):
            raise ValueError(f"Envelope dimension must be 2 or 3, got {dim}")
        if len(self.upper_corner) != dim:
            raise ValueError("Lower and upper corners have different dimensions")
        for i, (lo, hi) in enumerate(zip(self.lower_corner, self.upper_corner)):
            if lo > hi:
                raise ValueError(f"Lower corner exceeds upper corner on axis {i}: {lo} > {hi}")
        return self

    @property
    def dimension(self) -> int:
        return len(self.lower_corner)

    def minimum(self, axis: int) -> float:
        return self.lower_corner[axis]

    def maximum(self, axis: int) -> float:
        return self.upper_corner[axis]


class EnvelopeBuilder:
    """
    Mutable accumulator that folds coordinates into a bounding box.
    The box is inverted (empty) until the first coordinate is added.
    """

    def __init__(self, srs_name: str, dimension: int = 2,
                 axis_convention: AxisConvention = AxisConvention.NATIVE):
        self.srs_name = srs_name
        self.axis_convention = axis_convention
        self._lower = [math.inf] * dimension
        self._upper = [-math.inf] * dimension

    @property
    def is_empty(self) -> bool:
        return self._lower[0] > self._upper[0]

    def expand_to_include(self, coord) -> "EnvelopeBuilder":
        if len(coord) < len(self._lower):
            raise ValueError(
                f"Coordinate has {len(coord)} ordinates; envelope dimension is {len(self._lower)}"
            )
        for i in range(len(self._lower)):
            value = coord[i]
            if value < self._lower[i]:
                self._lower[i] = value
            if value > self._upper[i]:
                self._upper[i] = value
        return self

    def expand_to_include_all(self, coords) -> "EnvelopeBuilder":
        for coord in coords:
            self.expand_to_include(coord)
        return self

    def expand_to_include_envelope(self, envelope: Envelope) -> "EnvelopeBuilder":
        self.expand_to_include(envelope.lower_corner)
        self.expand_to_include(envelope.upper_corner)
        return self

    def build(self) -> Optional[Envelope]:
        """Finalize the envelope, or return None if nothing was added."""
        if self.is_empty:
            return None
        return Envelope(
            srs_name=self.srs_name,
            lower_corner=tuple(self._lower),
            upper_corner=tuple(self._upper),
            axis_convention=self.axis_convention,
        )
