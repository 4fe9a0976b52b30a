"""Tests for destination calculations, duplicate removal and axis order."""

import math

import pytest

from geomatics.exceptions import GeodesicComputationError, InvalidCRSReferenceError, UnknownCRSError
from geomatics.geometry.crs import OGC_CRS84
from geomatics.geometry.geodesy import (
    antipode,
    calculate_destination,
    normalize_azimuth,
    remove_consecutive_duplicates,
    to_right_handed_axis_order,
    transform_ring_to_right_handed,
)
from geomatics.models import LinearRing, PosList

from conftest import EPSG_4326, YVR


# -----------------------------------------------------------------------------
# Destination
# -----------------------------------------------------------------------------

def test_destination_one_nautical_mile_north():
    lat, lon = calculate_destination(YVR, 0.0, 1852.0, EPSG_4326)
    assert lat == pytest.approx(YVR[0] + 0.016667, abs=0.0001)
    assert lon == pytest.approx(YVR[1], abs=0.00015)


def test_destination_one_nautical_mile_east():
    lat, lon = calculate_destination(YVR, 90.0, 1852.0, EPSG_4326)
    assert lon == pytest.approx(YVR[1] + 0.025310, abs=0.00015)


def test_destination_one_nautical_mile_west():
    lat, lon = calculate_destination(YVR, 270.0, 1852.0, EPSG_4326)
    assert lon == pytest.approx(YVR[1] - 0.025310, abs=0.00015)


def test_destination_keeps_lon_lat_order():
    lon, lat = calculate_destination((YVR[1], YVR[0]), 0.0, 1852.0, OGC_CRS84)
    assert lat == pytest.approx(YVR[0] + 0.016667, abs=0.0001)
    assert lon == pytest.approx(YVR[1], abs=0.00015)


def test_destination_in_projected_crs():
    # UTM zone 10N, on the central meridian
    x, y = calculate_destination((500000.0, 5450000.0), 0.0, 1000.0, "EPSG:32610")
    assert x == pytest.approx(500000.0, abs=0.01)
    assert y == pytest.approx(5450999.6, abs=0.5)


def test_destination_not_finite():
    with pytest.raises(GeodesicComputationError) as excinfo:
        calculate_destination(YVR, 0.0, math.nan, EPSG_4326)
    assert excinfo.value.crs == EPSG_4326
    assert excinfo.value.position == YVR


def test_destination_with_malformed_crs_reference():
    with pytest.raises(InvalidCRSReferenceError):
        calculate_destination(YVR, 0.0, 1000.0, "bogus-ref")


def test_destination_with_unknown_crs():
    with pytest.raises(UnknownCRSError):
        calculate_destination(YVR, 0.0, 1000.0, "EPSG:999999")


@pytest.mark.parametrize("azimuth, expected", [
    (0.0, 0.0),
    (180.0, 180.0),
    (270.0, -90.0),
    (360.0, 0.0),
    (-200.0, 160.0),
])
def test_normalize_azimuth(azimuth, expected):
    assert normalize_azimuth(azimuth) == expected


# -----------------------------------------------------------------------------
# Duplicate removal
# -----------------------------------------------------------------------------

def test_remove_consecutive_duplicates_1ppm():
    coords = [
        (55.233333, -36.166667),
        (55.231164, -36.894373),
        (55.23116339, -36.89437371),
    ]
    remove_consecutive_duplicates(coords, 1.0)
    assert len(coords) == 2
    # the last point is kept
    assert coords[-1] == (55.23116339, -36.89437371)


def test_no_duplicates_in_ring():
    coords = [(0.5, 0.5), (1.5, 0.5), (1.5, 1.5), (0.5, 0.5)]
    remove_consecutive_duplicates(coords, 1.0)
    assert len(coords) == 4


def test_remove_duplicate_before_closing_point():
    coords = [
        (557434.43, 4889943.44),
        (557416.84, 4889939.73),
        (557404.80, 4889951.77),
        (557402.02, 4889961.03),
        (557400.17, 4889969.36),
        (557400.17, 4889977.33),
        (557434.86, 4889943.52),
        (557434.43, 4889943.44),
    ]
    remove_consecutive_duplicates(coords, 1.0)
    assert len(coords) == 7
    assert coords[0] == coords[-1]


def test_remove_chain_of_duplicates():
    coords = [(1.0, 1.0), (10.0, 10.0), (10.0, 10.0), (10.0, 10.0), (20.0, 20.0)]
    remove_consecutive_duplicates(coords, 1.0)
    assert coords == [(1.0, 1.0), (10.0, 10.0), (20.0, 20.0)]


def test_remove_duplicates_at_zero():
    coords = [(0.0, 0.0), (0.0, 0.0), (5.0, 5.0)]
    remove_consecutive_duplicates(coords, 1.0)
    assert coords == [(0.0, 0.0), (5.0, 5.0)]


def test_remove_duplicates_short_list():
    coords = [(1.0, 1.0)]
    remove_consecutive_duplicates(coords, 1.0)
    assert coords == [(1.0, 1.0)]


# -----------------------------------------------------------------------------
# Axis order
# -----------------------------------------------------------------------------

def test_to_right_handed_axis_order():
    result = to_right_handed_axis_order([(49.0, -123.0), (50.0, -122.0)], EPSG_4326)
    assert result[0] == pytest.approx((-123.0, 49.0))
    assert result[1] == pytest.approx((-122.0, 50.0))


def test_to_right_handed_axis_order_no_change():
    coords = [(-123.0, 49.0), (-122.0, 50.0)]
    assert to_right_handed_axis_order(coords, OGC_CRS84) == coords


def test_to_right_handed_keep_all_coords():
    coords = [(49.0, -123.0), (49.0, -123.0), (50.0, -122.0)]
    assert len(to_right_handed_axis_order(coords, EPSG_4326, remove_duplicates=False)) == 3
    assert len(to_right_handed_axis_order(coords, EPSG_4326)) == 2


def test_transform_ring_to_right_handed():
    ring = LinearRing(
        srs_name=EPSG_4326,
        pos_list=PosList(values=[49, -123, 49, -122, 50, -122, 49, -123]),
    )
    coords = transform_ring_to_right_handed(ring)
    assert len(coords) == 4
    assert coords[0] == pytest.approx((-123.0, 49.0))
    assert coords[0] == coords[-1]


def test_transform_ring_without_crs():
    ring = LinearRing(pos_list=PosList(values=[0, 0, 1, 0, 1, 1, 0, 0]))
    assert transform_ring_to_right_handed(ring) is None


def test_antipode():
    assert antipode((49.25, -123.1)) == pytest.approx((-49.25, 56.9))
    assert antipode((10.0, 20.0, 5.0)) == pytest.approx((-10.0, -160.0, 5.0))
