"""
Coordinate reference system utilities for geomatics.
CRS identifiers, authority lookup via pyproj, axis-order metadata and
inheritance of CRS references through a geometry tree.
"""

import logging
import re
from functools import lru_cache
from typing import Iterator, Optional

from pydantic import BaseModel
from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError

from geomatics.exceptions import (
    InvalidCRSReferenceError,
    UnknownCRSError,
    UnresolvedCRSError,
)
from geomatics.models.envelope import Envelope


logger = logging.getLogger(__name__)

# OGC identifier for WGS 84 (geographic 2D, lat/lon axis order)
EPSG_4326 = "urn:ogc:def:crs:EPSG::4326"

# OGC identifier for WGS 84 (lon/lat axis order)
OGC_CRS84 = "urn:ogc:def:crs:OGC:1.3:CRS84"

_ABBREVIATED_ID = re.compile(r"^[A-Za-z][\w.-]*:[\w.-]+$")
_EASTING = ("east", "west")
_NORTHING = ("north", "south")


# -----------------------------------------------------------------------------
# Identifiers
# -----------------------------------------------------------------------------

def convert_srs_name_to_urn(srs_name: str) -> str:
    """
    Convert an 'http' CRS reference to the corresponding URN.

    A reference of the form ``.../{authority}/{version}/{code}`` becomes
    ``urn:ogc:def:crs:{authority}:{version}:{code}``; a version of "" or "0"
    is omitted. Any other value is returned unchanged.

    Args:
        srs_name: An absolute URI that identifies a CRS (OGC 09-048r3)

    Returns:
        A URN-based identifier
    """
    if not srs_name.startswith("http"):
        return srs_name
    parts = srs_name.split("/")
    if len(parts) < 3:
        raise InvalidCRSReferenceError(srs_name)
    authority, version, code = parts[-3], parts[-2], parts[-1]
    if version == "0":
        version = ""
    return f"urn:ogc:def:crs:{authority}:{version}:{code}"


def abbreviated_crs_identifier(srs_name: str) -> str:
    """
    Return an abbreviated identifier of the form ``authority:code``.

    Args:
        srs_name: An 'http' or 'urn' CRS reference (OGC 09-048r3)

    Returns:
        The abbreviated identifier (e.g. "EPSG:4326")

    Raises:
        InvalidCRSReferenceError: If the reference is not in either form
    """
    if srs_name.startswith(("http://www.opengis.net", "https://www.opengis.net")):
        separator = "/"
    elif srs_name.startswith("urn:ogc"):
        separator = ":"
    else:
        raise InvalidCRSReferenceError(srs_name)
    crs_index = srs_name.find("crs")
    if crs_index < 0:
        raise InvalidCRSReferenceError(srs_name)
    parts = srs_name[crs_index + 4:].split(separator)
    if len(parts) != 3:
        raise InvalidCRSReferenceError(srs_name)
    return f"{parts[0]}:{parts[2]}"


@lru_cache(maxsize=64)
def crs_from_reference(srs_name: str) -> CRS:
    """
    Look up the CRS definition for a reference.

    Accepts 'http' URIs, URNs and abbreviated identifiers ("EPSG:4326").

    Raises:
        InvalidCRSReferenceError: If the reference is malformed
        UnknownCRSError: If the authority does not know the code
    """
    urn = convert_srs_name_to_urn(srs_name)
    code = urn if _ABBREVIATED_ID.match(urn) else abbreviated_crs_identifier(urn)
    try:
        return CRS.from_user_input(code)
    except CRSError as e:
        raise UnknownCRSError(srs_name) from e


def crs_identifier(crs: CRS) -> str:
    """
    Return a URN for a CRS (e.g. "urn:ogc:def:crs:EPSG::4326").
    EPSG definitions are not versioned. An empty string is returned if no
    identifier can be constructed.
    """
    authority = crs.to_authority()
    if authority is None:
        if crs.name.startswith("WGS84"):
            # see WMS 1.3 (ISO 19128), B.3
            return OGC_CRS84
        return ""
    auth_name, code = authority
    version = "1.3" if auth_name.upper() == "OGC" else ""
    return f"urn:ogc:def:crs:{auth_name}:{version}:{code}"


def same_crs(srs_name_a: str, srs_name_b: str) -> bool:
    if srs_name_a == srs_name_b:
        return True
    return crs_from_reference(srs_name_a) == crs_from_reference(srs_name_b)


def crs_transformer(source: str, target: str) -> Transformer:
    """Transformer between two CRS references (native axis order)."""
    return Transformer.from_crs(crs_from_reference(source), crs_from_reference(target))


def transform_coordinates(coords: list, source: str, target: str) -> list:
    """
    Transform coordinates from one CRS to another.

    Raises:
        pyproj.exceptions.ProjError: If a coordinate cannot be transformed
    """
    transformer = crs_transformer(source, target)
    return [transformer.transform(c[0], c[1], errcheck=True) for c in coords]


# -----------------------------------------------------------------------------
# Axis order
# -----------------------------------------------------------------------------

def _axis_directions(crs: CRS) -> list[str]:
    return [axis.direction.lower() for axis in crs.axis_info]


def is_lat_first(crs: CRS) -> bool:
    """True if the first axis is northing-like (e.g. lat/lon order)."""
    directions = _axis_directions(crs)
    return bool(directions) and directions[0] in _NORTHING


def right_handed_axis_order(crs: CRS) -> Optional[str]:
    """
    Return the PROJ ``axisswap`` order that maps the CRS's native axis order
    onto the right-handed (east, north) convention, or None if no change is
    needed.
    """
    directions = _axis_directions(crs)[:2]
    if len(directions) < 2:
        return None
    east = next((i for i, d in enumerate(directions) if d in _EASTING), None)
    north = next((i for i, d in enumerate(directions) if d in _NORTHING), None)
    if east is None or north is None or east == north:
        return None
    order = [
        (east + 1) * (1 if directions[east] == "east" else -1),
        (north + 1) * (1 if directions[north] == "north" else -1),
    ]
    if order == [1, 2]:
        return None
    return ",".join(str(i) for i in order)


def is_right_handed(crs: CRS) -> bool:
    return right_handed_axis_order(crs) is None


def right_handed_transformer(crs: CRS) -> Optional[Transformer]:
    """
    Create the coordinate operation from the CRS's native axis order to its
    right-handed convention. Returns None if the CRS is already right-handed.
    """
    order = right_handed_axis_order(crs)
    if order is None:
        return None
    logger.debug("Axis order of %s is not right-handed; using axisswap order=%s", crs.name, order)
    return Transformer.from_pipeline(f"+proj=axisswap +order={order}")


def domain_of_validity(srs_name: str) -> Optional[Envelope]:
    """
    Return the valid extent of a CRS as an envelope in that CRS.

    Args:
        srs_name: A CRS reference

    Returns:
        Envelope in the CRS's native axis order, or None if the CRS has no
        declared area of use
    """
    crs = crs_from_reference(srs_name)
    area = crs.area_of_use
    if area is None:
        return None
    west, south, east, north = area.bounds
    if crs.is_geographic:
        if is_lat_first(crs):
            lower, upper = (south, west), (north, east)
        else:
            lower, upper = (west, south), (east, north)
    else:
        transformer = Transformer.from_crs(CRS.from_user_input("OGC:CRS84"), crs)
        min_x, min_y, max_x, max_y = transformer.transform_bounds(west, south, east, north)
        lower, upper = (min_x, min_y), (max_x, max_y)
    return Envelope(srs_name=crs_identifier(crs) or srs_name, lower_corner=lower, upper_corner=upper)


# -----------------------------------------------------------------------------
# CRS inheritance
# -----------------------------------------------------------------------------

def _children(node: BaseModel) -> Iterator[BaseModel]:
    for name in type(node).model_fields:
        value = getattr(node, name)
        if isinstance(value, BaseModel):
            yield value
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, BaseModel):
                    yield item


class CRSResolver:
    """
    Resolves the CRS reference in force for nodes of a materialized geometry
    tree. Parent links are indexed once; resolved references are cached by
    node identity so the models themselves are never modified.

    Sources are searched in order:
    1. the node's own srs_name;
    2. the nearest ancestor with an srs_name;
    3. the bounding envelope of the nearest containing feature;
    4. the srs_name on the node's first pos/posList child.
    """

    def __init__(self, root: Optional[BaseModel] = None):
        self._roots: list[BaseModel] = []
        self._parents: dict[int, BaseModel] = {}
        self._cache: dict[int, tuple[BaseModel, str]] = {}
        if root is not None:
            self.add_tree(root)

    def add_tree(self, root: BaseModel) -> None:
        """Index the parent links of every node below root."""
        self._roots.append(root)
        visited = {id(root)}
        stack = [root]
        while stack:
            node = stack.pop()
            for child in _children(node):
                if id(child) in visited:
                    continue
                visited.add(id(child))
                self._parents[id(child)] = node
                stack.append(child)

    def parent_of(self, node: BaseModel) -> Optional[BaseModel]:
        return self._parents.get(id(node))

    def ancestors(self, node: BaseModel) -> Iterator[BaseModel]:
        parent = self.parent_of(node)
        while parent is not None:
            yield parent
            parent = self.parent_of(parent)

    def resolve(self, node: BaseModel) -> Optional[str]:
        """Return the CRS reference in force for node, or None."""
        cached = self._cache.get(id(node))
        if cached is not None and cached[0] is node:
            return cached[1]
        srs_name = self._find(node)
        if srs_name:
            self._cache[id(node)] = (node, srs_name)
        return srs_name

    def resolve_with_node(self, node: BaseModel) -> tuple[Optional[str], BaseModel]:
        return self.resolve(node), node

    def require(self, node: BaseModel) -> str:
        """Like resolve(), but raise UnresolvedCRSError if nothing is found."""
        srs_name = self.resolve(node)
        if not srs_name:
            raise UnresolvedCRSError(getattr(node, "kind", type(node).__name__), getattr(node, "id", None))
        return srs_name

    def _find(self, node: BaseModel) -> Optional[str]:
        srs_name = getattr(node, "srs_name", None)
        if srs_name:
            return srs_name

        for ancestor in self.ancestors(node):
            srs_name = getattr(ancestor, "srs_name", None)
            if srs_name:
                logger.debug("%s inherits CRS %s from ancestor %s", _label(node), srs_name, _label(ancestor))
                return srs_name

        for ancestor in self.ancestors(node):
            bounded_by = getattr(ancestor, "bounded_by", None)
            if bounded_by is not None:
                logger.debug("%s inherits CRS %s from feature envelope", _label(node), bounded_by.srs_name)
                return bounded_by.srs_name

        first_position_srs_name = getattr(node, "first_position_srs_name", None)
        if first_position_srs_name is not None:
            srs_name = first_position_srs_name()
            if srs_name:
                logger.debug("%s takes CRS %s from its first position", _label(node), srs_name)
                return srs_name
        return None


def _label(node: BaseModel) -> str:
    kind = getattr(node, "kind", type(node).__name__)
    node_id = getattr(node, "id", None)
    return f"{kind}[{node_id}]" if node_id else kind
