"""Tests for curve segment tessellation."""

import pytest
from pydantic import ValidationError

from geomatics.exceptions import UnrecognizedUnitError, UnsupportedSegmentKindError
from geomatics.geometry.geodesy import calculate_destination
from geomatics.geometry.segments import TOTAL_ARC_POINTS, SegmentTessellator, infer_points_on_arc
from geomatics.models import (
    Arc,
    ArcByCenterPoint,
    Circle,
    CurveMember,
    Length,
    LineString,
    LineStringSegment,
    Position,
    PosList,
)

from conftest import EPSG_4326, YVR


def _arc(start=None, end=None, radius=10.0, uom="[nmi_i]"):
    return ArcByCenterPoint(
        pos=[Position(coordinates=list(YVR))],
        radius=Length(value=radius, uom=uom),
        start_angle=start,
        end_angle=end,
    )


def test_infer_points_on_arc_by_center_point(arc_curve):
    coords = infer_points_on_arc(arc_curve.segments[0], EPSG_4326)
    assert len(coords) == TOTAL_ARC_POINTS
    # end of arc is 10 NM north of center point
    assert coords[-1][0] == pytest.approx(49.19472 + 0.16653, abs=0.00015)
    assert coords[-1][1] == pytest.approx(-123.18389, abs=0.00015)


def test_infer_points_on_circle_by_center_point(circle_curve):
    coords = infer_points_on_arc(circle_curve.segments[0], EPSG_4326)
    # first and last points are identical (north of center)
    assert coords[0][0] == pytest.approx(49.19472 + 0.04496, abs=0.00015)
    assert coords[0][1] == pytest.approx(-123.18389, abs=0.00015)
    assert coords[0] == coords[-1]


def test_arc_interior_points_are_evenly_spaced_in_azimuth():
    coords = infer_points_on_arc(_arc(0.0, 90.0), EPSG_4326)
    assert coords[0] == calculate_destination(YVR, 0.0, 18520.0, EPSG_4326)
    assert coords[2] == calculate_destination(YVR, 45.0, 18520.0, EPSG_4326)
    assert coords[4] == calculate_destination(YVR, 90.0, 18520.0, EPSG_4326)


def test_arc_sample_count_does_not_depend_on_radius():
    assert len(infer_points_on_arc(_arc(10.0, 20.0, radius=1.0, uom="m"), EPSG_4326)) == TOTAL_ARC_POINTS
    assert len(infer_points_on_arc(_arc(radius=500.0, uom="km"), EPSG_4326)) == TOTAL_ARC_POINTS


def test_arc_with_unrecognized_unit():
    with pytest.raises(UnrecognizedUnitError):
        infer_points_on_arc(_arc(uom="cubit"), EPSG_4326)


def test_tessellate_line_string_segment():
    segment = LineStringSegment(pos_list=PosList(values=[49, -123, 49.1, -123.1, 49.2, -123.3]))
    coords = SegmentTessellator().tessellate(segment, EPSG_4326)
    assert coords == [(49, -123), (49.1, -123.1), (49.2, -123.3)]


def test_tessellate_3d_positions_drops_height():
    segment = LineStringSegment(pos_list=PosList(values=[49, -123, 10, 50, -122, 20], srs_dimension=3))
    assert SegmentTessellator().tessellate(segment, EPSG_4326) == [(49, -123), (50, -122)]


def test_tessellate_arc_returns_control_points():
    arc = Arc(pos=[Position(coordinates=[49.0 + i * 0.1, -123.0]) for i in range(3)])
    assert len(SegmentTessellator().tessellate(arc, EPSG_4326)) == 3


def test_tessellate_circle_returns_control_points():
    circle = Circle(pos_list=PosList(values=[49.0, -123.0, 49.1, -123.1, 49.0, -123.2]))
    assert len(SegmentTessellator().tessellate(circle, EPSG_4326)) == 3


def test_tessellate_arc_by_center_point():
    assert len(SegmentTessellator().tessellate(_arc(), EPSG_4326)) == TOTAL_ARC_POINTS


def test_curve_member_is_not_a_leaf_segment():
    member = CurveMember(curve=LineString(pos_list=PosList(values=[0, 0, 1, 1])))
    with pytest.raises(UnsupportedSegmentKindError) as excinfo:
        SegmentTessellator().tessellate(member, EPSG_4326)
    assert excinfo.value.kind == "CurveMember"


def test_arc_requires_three_control_points():
    with pytest.raises(ValidationError):
        Arc(pos_list=PosList(values=[0, 0, 1, 1]))


def test_arc_angles_given_together():
    with pytest.raises(ValidationError):
        _arc(start=0.0)


def test_arc_by_center_point_requires_center():
    with pytest.raises(ValidationError):
        ArcByCenterPoint(radius=Length(value=1, uom="m"))
