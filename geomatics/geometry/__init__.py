"""
Geometry package for geomatics.
Builds coordinate lists from GML curve/surface models and derives envelopes,
convex hulls and spatial relationships from them.
"""

from geomatics.geometry.units import (
    METERS_PER_UNIT,
    length_in_meters,
    min_curve_segment_length,
)

from geomatics.geometry.crs import (
    EPSG_4326,
    OGC_CRS84,
    CRSResolver,
    abbreviated_crs_identifier,
    convert_srs_name_to_urn,
    crs_from_reference,
    crs_identifier,
    crs_transformer,
    domain_of_validity,
    is_right_handed,
    right_handed_transformer,
    transform_coordinates,
)

from geomatics.geometry.geodesy import (
    antipode,
    calculate_destination,
    remove_consecutive_duplicates,
    to_right_handed_axis_order,
    transform_ring_to_right_handed,
)

from geomatics.geometry.segments import (
    TOTAL_ARC_POINTS,
    SegmentTessellator,
    infer_points_on_arc,
)

from geomatics.geometry.curves import (
    CurveCoordinateListFactory,
    build_line_string,
)

from geomatics.geometry.surfaces import SurfaceCoordinateListFactory

from geomatics.geometry.coordinates import (
    GeometryCoordinateList,
    compute_convex_hull,
)

from geomatics.geometry.extents import (
    antipodal_envelope,
    calculate_envelope,
    coalesce_bounding_boxes,
    create_envelope,
    envelope_as_gml,
    envelope_as_polygon,
    envelope_to_kvp,
    envelope_to_right_handed,
    transform_envelope,
)

from geomatics.geometry.topology import (
    assert_intersects,
    envelopes_intersect,
    intersects,
    relate,
)

__all__ = [
    # Units
    "METERS_PER_UNIT",
    "length_in_meters",
    "min_curve_segment_length",
    # CRS
    "EPSG_4326",
    "OGC_CRS84",
    "CRSResolver",
    "abbreviated_crs_identifier",
    "convert_srs_name_to_urn",
    "crs_from_reference",
    "crs_identifier",
    "crs_transformer",
    "domain_of_validity",
    "is_right_handed",
    "right_handed_transformer",
    "transform_coordinates",
    # Geodesy
    "antipode",
    "calculate_destination",
    "remove_consecutive_duplicates",
    "to_right_handed_axis_order",
    "transform_ring_to_right_handed",
    # Coordinate lists
    "TOTAL_ARC_POINTS",
    "SegmentTessellator",
    "infer_points_on_arc",
    "CurveCoordinateListFactory",
    "build_line_string",
    "SurfaceCoordinateListFactory",
    "GeometryCoordinateList",
    "compute_convex_hull",
    # Extents
    "antipodal_envelope",
    "calculate_envelope",
    "coalesce_bounding_boxes",
    "create_envelope",
    "envelope_as_gml",
    "envelope_as_polygon",
    "envelope_to_kvp",
    "envelope_to_right_handed",
    "transform_envelope",
    # Topology
    "assert_intersects",
    "envelopes_intersect",
    "intersects",
    "relate",
]
