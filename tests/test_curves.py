"""Tests for curve coordinate lists."""

import pytest

from geomatics.exceptions import RecursionLimitExceededError, UnresolvedCRSError, UnsupportedGeometryKindError
from geomatics.geometry.crs import CRSResolver
from geomatics.geometry.curves import CurveCoordinateListFactory, build_line_string
from geomatics.geometry.segments import TOTAL_ARC_POINTS
from geomatics.models import (
    CompositeCurve,
    Curve,
    CurveMember,
    Envelope,
    Feature,
    Orientation,
    OrientableCurve,
    Point,
    Position,
    Ring,
)

from conftest import EPSG_4326


A, B, C = (49.0, -123.0), (49.1, -123.1), (49.2, -123.2)


def test_line_string_segments_are_returned_verbatim(two_segment_curve):
    coords = CurveCoordinateListFactory().create_coordinate_list(two_segment_curve)
    assert coords == [(49.0, -123.0), (49.1, -123.1), (49.2, -123.2), (49.3, -123.3)]


def test_line_string(make_line):
    line = make_line([A, B, C], srs_name=EPSG_4326)
    assert CurveCoordinateListFactory().create_coordinate_list(line) == [A, B, C]


def test_curve_with_arc(arc_curve):
    coords = CurveCoordinateListFactory().create_coordinate_list(arc_curve)
    assert len(coords) == TOTAL_ARC_POINTS


def test_composite_curve_shares_junction_points(make_line):
    first = make_line([(0, 0), (1, 0), (2, 0)])
    second = make_line([(2, 0), (2, 1), (2, 2), (1, 2)])
    third = make_line([(1, 2), (0, 1), (0, 0.5)])
    composite = CompositeCurve(srs_name=EPSG_4326, members=[first, second, third])
    coords = CurveCoordinateListFactory().create_coordinate_list(composite)
    assert len(coords) == 3 + 4 + 3 - 2
    assert coords[0] == (0, 0)
    assert coords[-1] == (0, 0.5)


def test_composite_curve_without_shared_points(make_line):
    composite = CompositeCurve(
        srs_name=EPSG_4326,
        members=[make_line([(0, 0), (1, 0)]), make_line([(1, 1), (2, 1)])],
    )
    assert len(CurveCoordinateListFactory().create_coordinate_list(composite)) == 4


def test_orientable_curve_negative(make_line):
    curve = OrientableCurve(srs_name=EPSG_4326, base_curve=make_line([A, B, C]), orientation="-")
    assert curve.orientation == Orientation.NEGATIVE
    assert CurveCoordinateListFactory().create_coordinate_list(curve) == [C, B, A]


def test_orientable_curve_positive(make_line):
    curve = OrientableCurve(srs_name=EPSG_4326, base_curve=make_line([A, B, C]))
    assert CurveCoordinateListFactory().create_coordinate_list(curve) == [A, B, C]


def test_ring_keeps_closing_point(make_line):
    ring = Ring(
        srs_name=EPSG_4326,
        members=[
            make_line([(0, 0), (1, 0), (2, 0)]),
            make_line([(2, 0), (2, 1), (2, 2), (1, 2)]),
            make_line([(1, 2), (0, 2), (0, 1), (0, 0)]),
        ],
    )
    coords = CurveCoordinateListFactory().create_coordinate_list(ring)
    assert len(coords) == 9
    assert coords[0] == coords[-1]


def test_curve_member_segment(make_line):
    curve = Curve(
        srs_name=EPSG_4326,
        segments=[CurveMember(curve=make_line([A, B])), CurveMember(curve=make_line([B, C]))],
    )
    assert CurveCoordinateListFactory().create_coordinate_list(curve) == [A, B, C]


def test_nesting_limit(make_line):
    curve = make_line([A, B])
    for _ in range(5):
        curve = OrientableCurve(base_curve=curve, orientation="-")
    factory = CurveCoordinateListFactory(max_depth=3)
    with pytest.raises(RecursionLimitExceededError) as excinfo:
        factory.create_coordinate_list(curve, EPSG_4326)
    assert excinfo.value.depth == 3
    assert CurveCoordinateListFactory(max_depth=5).create_coordinate_list(curve, EPSG_4326) == [B, A]


def test_crs_is_required(make_line):
    with pytest.raises(UnresolvedCRSError):
        CurveCoordinateListFactory().create_coordinate_list(make_line([A, B]))


def test_crs_from_feature(make_line):
    envelope = Envelope(srs_name=EPSG_4326, lower_corner=(49.0, -123.1), upper_corner=(49.1, -123.0))
    feature = Feature(bounded_by=envelope, geometry=make_line([A, B]))
    factory = CurveCoordinateListFactory(CRSResolver(feature))
    assert factory.create_coordinate_list(feature.geometry) == [A, B]


def test_unsupported_curve():
    point = Point(srs_name=EPSG_4326, pos=[Position(coordinates=list(A))])
    with pytest.raises(UnsupportedGeometryKindError):
        CurveCoordinateListFactory().create_coordinate_list(point)


def test_build_line_string_removes_duplicates(make_line):
    line = make_line([A, B, (49.10000001, -123.10000001), C], srs_name=EPSG_4326)
    result = build_line_string(line)
    assert len(result.coords) == 3
