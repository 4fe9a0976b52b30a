"""Shared test fixtures."""

import pytest

from geomatics.models import (
    ArcByCenterPoint,
    CircleByCenterPoint,
    Curve,
    Length,
    LinearRing,
    LineString,
    LineStringSegment,
    PolygonPatch,
    Position,
    PosList,
    Surface,
)


EPSG_4326 = "urn:ogc:def:crs:EPSG::4326"

# Vancouver International Airport (lat, lon)
YVR = (49.194722, -123.183889)


def pos_list(coords, srs_name=None):
    return PosList(values=[v for c in coords for v in c], srs_name=srs_name)


@pytest.fixture
def make_line():
    """Build a LineString from (x, y) tuples."""
    def _make(coords, srs_name=None):
        return LineString(pos_list=pos_list(coords), srs_name=srs_name)
    return _make


@pytest.fixture
def make_ring():
    """Build a LinearRing from (x, y) tuples."""
    def _make(coords, srs_name=None):
        return LinearRing(pos_list=pos_list(coords), srs_name=srs_name)
    return _make


@pytest.fixture
def arc_curve():
    """Arc from the YVR center, 10 NM radius, azimuth 0 to 0 (full turn)."""
    arc = ArcByCenterPoint(
        pos=[Position(coordinates=list(YVR))],
        radius=Length(value=10, uom="[nmi_i]"),
        start_angle=0.0,
        end_angle=0.0,
    )
    return Curve(id="arc-1", srs_name=EPSG_4326, segments=[arc])


@pytest.fixture
def circle_curve():
    circle = CircleByCenterPoint(
        pos=[Position(coordinates=list(YVR))],
        radius=Length(value=5, uom="km"),
    )
    return Curve(id="circle-1", srs_name=EPSG_4326, segments=[circle])


@pytest.fixture
def two_patch_surface(make_ring):
    """A unit square and a triangle sharing the edge x=1."""
    square = PolygonPatch(exterior=make_ring([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)]))
    triangle = PolygonPatch(exterior=make_ring([(1, 0), (2, 0.5), (1, 1), (1, 0)]))
    return Surface(id="surface-2", srs_name=EPSG_4326, patches=[square, triangle])


@pytest.fixture
def two_segment_curve():
    first = LineStringSegment(pos_list=pos_list([(49.0, -123.0), (49.1, -123.1), (49.2, -123.2)]))
    second = LineStringSegment(pos_list=pos_list([(49.2, -123.2), (49.3, -123.3)]))
    return Curve(srs_name=EPSG_4326, segments=[first, second])
