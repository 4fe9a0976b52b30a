"""
Envelope utilities for geomatics.
Calculates, coalesces, transforms and serializes bounding boxes.
"""

import logging
from decimal import ROUND_DOWN, Decimal
from typing import Iterable, Optional, Union
from xml.etree import ElementTree as ET

from shapely.geometry import Polygon as ShapelyPolygon

from geomatics.geometry.coordinates import GeometryCoordinateList
from geomatics.geometry.crs import (
    EPSG_4326,
    OGC_CRS84,
    CRSResolver,
    convert_srs_name_to_urn,
    crs_from_reference,
    crs_identifier,
    crs_transformer,
    right_handed_transformer,
    same_crs,
    transform_coordinates,
)
from geomatics.geometry.geodesy import antipode
from geomatics.models.envelope import AxisConvention, Envelope, EnvelopeBuilder


logger = logging.getLogger(__name__)

GML_NS = "http://www.opengis.net/gml/3.2"

ET.register_namespace("gml", GML_NS)


def _identifier(srs_name: str) -> str:
    return crs_identifier(crs_from_reference(srs_name)) or srs_name


# -----------------------------------------------------------------------------
# Calculation
# -----------------------------------------------------------------------------

def calculate_envelope(nodes: Iterable, resolver: Optional[CRSResolver] = None) -> Optional[Envelope]:
    """
    Calculate the envelope that covers a collection of geometries.

    The envelope uses the CRS of the first geometry (a collection without a
    CRS of its own uses that of its first member that has one). Coordinates
    of any geometry or member in another CRS are transformed first.

    Args:
        nodes: Geometry nodes (points, curves, surfaces or collections)
        resolver: CRS resolver for the document tree the nodes belong to

    Returns:
        The minimum bounding rectangle, or None if there are no coordinates
    """
    nodes = list(nodes)
    if not nodes:
        return None
    if resolver is None:
        resolver = CRSResolver()
        for node in nodes:
            resolver.add_tree(node)
    coords_factory = GeometryCoordinateList(resolver)

    target = coords_factory.srs_name_for(nodes[0])
    builder = EnvelopeBuilder(convert_srs_name_to_urn(target))
    for node in nodes:
        srs_name = coords_factory.srs_name_for(node)
        coords = coords_factory.coordinates_for(node, srs_name)
        if not same_crs(srs_name, target):
            logger.debug("Transforming %d coordinates from %s to %s", len(coords), srs_name, target)
            coords = transform_coordinates(coords, srs_name, target)
        builder.expand_to_include_all(coords)
    return builder.build()


def envelope_as_polygon(envelope: Envelope) -> ShapelyPolygon:
    """Create a polygon having the same extent as a (2D) envelope."""
    (x0, y0), (x1, y1) = envelope.lower_corner[:2], envelope.upper_corner[:2]
    return ShapelyPolygon([(x0, y0), (x1, y0), (x1, y1), (x0, y1), (x0, y0)])


def transform_envelope(envelope: Envelope, srs_name: str) -> Envelope:
    """
    Transform an envelope to another CRS. The edges are densified so the
    result covers the whole transformed extent; a third ordinate is kept as is.
    """
    if same_crs(envelope.srs_name, srs_name):
        return envelope
    lower, upper = envelope.lower_corner, envelope.upper_corner
    min_x, min_y, max_x, max_y = crs_transformer(envelope.srs_name, srs_name).transform_bounds(
        lower[0], lower[1], upper[0], upper[1], errcheck=True
    )
    return Envelope(
        srs_name=convert_srs_name_to_urn(srs_name),
        lower_corner=(min_x, min_y) + tuple(lower[2:]),
        upper_corner=(max_x, max_y) + tuple(upper[2:]),
    )


def coalesce_bounding_boxes(boxes: Iterable) -> Optional[Envelope]:
    """
    Coalesce bounding boxes into an envelope that covers all of them.

    The result uses the CRS of the first box; the others are transformed
    to it if necessary. Boxes of mixed dimension are coalesced over the
    axes they have in common.

    Args:
        boxes: Envelope objects, or XML elements/strings accepted by create_envelope()
    """
    envelopes = [box if isinstance(box, Envelope) else create_envelope(box) for box in boxes]
    if not envelopes:
        return None
    srs_name = envelopes[0].srs_name
    builder = EnvelopeBuilder(srs_name, min(e.dimension for e in envelopes))
    for envelope in envelopes:
        builder.expand_to_include_envelope(transform_envelope(envelope, srs_name))
    return builder.build()


def envelope_to_right_handed(envelope: Envelope) -> Envelope:
    """Return the envelope with its ordinates in right-handed (east, north) order."""
    if envelope.axis_convention == AxisConvention.RIGHT_HANDED:
        return envelope
    transformer = right_handed_transformer(crs_from_reference(envelope.srs_name))
    builder = EnvelopeBuilder(envelope.srs_name, 2, AxisConvention.RIGHT_HANDED)
    for corner in (envelope.lower_corner, envelope.upper_corner):
        if transformer is None:
            builder.expand_to_include(corner)
        else:
            builder.expand_to_include(transformer.transform(corner[0], corner[1], errcheck=True))
    return builder.build()


def antipodal_envelope(envelope: Envelope) -> Envelope:
    """
    Return the envelope diametrically opposite to the given one, in WGS 84
    (EPSG:4326, lat/lon order). If the antipodal box would span the
    antimeridian its longitude range is widened to [-180, 180].
    """
    source = transform_envelope(envelope, EPSG_4326)
    lower = list(antipode(source.lower_corner))
    upper = list(antipode(source.upper_corner))
    # swap latitudes so corner positions are correct
    lower[0], upper[0] = upper[0], lower[0]
    if lower[1] > upper[1]:
        logger.debug("Antipodal envelope spans the antimeridian; using full longitude range")
        lower[1], upper[1] = -180.0, 180.0
    return Envelope(srs_name=EPSG_4326, lower_corner=tuple(lower), upper_corner=tuple(upper))


# -----------------------------------------------------------------------------
# Serialization
# -----------------------------------------------------------------------------

def envelope_to_kvp(envelope: Envelope) -> str:
    """
    Return the bounding box as a query parameter value (OGC 06-121r9, 10.2.3):
    lower corner ordinates, upper corner ordinates, then the CRS URI. The CRS
    is omitted for CRS84, which is the default.

    Examples:
        49.25,-123.1,50.0,-122.5,urn:ogc:def:crs:EPSG::4326
        -123.1,49.25,-122.5,50.0
    """
    items = [str(v) for v in envelope.lower_corner + envelope.upper_corner]
    if not same_crs(envelope.srs_name, OGC_CRS84):
        items.append(_identifier(envelope.srs_name))
    return ",".join(items)


def _format_ordinate(value: float) -> str:
    """Truncate to 2 decimal places, without trailing zeros."""
    text = format(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_DOWN), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def envelope_as_gml(envelope: Envelope) -> str:
    """
    Generate a gml:Envelope representation of an envelope. Ordinates are
    truncated to 2 decimal places.
    """
    root = ET.Element(f"{{{GML_NS}}}Envelope")
    root.set("srsName", _identifier(envelope.srs_name))
    lower = ET.SubElement(root, f"{{{GML_NS}}}lowerCorner")
    lower.text = " ".join(_format_ordinate(v) for v in envelope.lower_corner)
    upper = ET.SubElement(root, f"{{{GML_NS}}}upperCorner")
    upper.text = " ".join(_format_ordinate(v) for v in envelope.upper_corner)
    return ET.tostring(root, encoding="unicode")


def create_envelope(source: Union[str, ET.Element]) -> Envelope:
    """
    Create an envelope from ows:BoundingBox, ows:WGS84BoundingBox or
    gml:Envelope XML. A missing CRS reference means CRS84 (lon/lat order).
    """
    root = ET.fromstring(source) if isinstance(source, str) else source
    namespace = root.tag[1:root.tag.index("}")] if root.tag.startswith("{") else ""
    crs_ref = root.get("crs") or root.get("srsName") or ""
    srs_name = OGC_CRS84 if not crs_ref or crs_ref == OGC_CRS84 else convert_srs_name_to_urn(crs_ref)

    lower_name, upper_name = ("lowerCorner", "upperCorner") if namespace == GML_NS else ("LowerCorner", "UpperCorner")
    prefix = f"{{{namespace}}}" if namespace else ""
    lower = root.find(prefix + lower_name)
    upper = root.find(prefix + upper_name)
    if lower is None or upper is None or not lower.text or not upper.text:
        raise ValueError(f"Bounding box has no {lower_name}/{upper_name}: {root.tag}")
    return Envelope(
        srs_name=srs_name,
        lower_corner=tuple(float(v) for v in lower.text.split()),
        upper_corner=tuple(float(v) for v in upper.text.split()),
    )
