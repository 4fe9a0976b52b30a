"""
Errors raised by the geomatics coordinate engine.
None of these are retried: the inputs are static, so a retry reproduces the failure.
"""


class GeomaticsError(Exception):
    """Base class for coordinate engine failures."""


class UnresolvedCRSError(GeomaticsError):
    """No CRS reference could be found for a geometry."""

    def __init__(self, kind: str, geometry_id=None):
        self.kind = kind
        self.geometry_id = geometry_id
        label = f"{kind} (gml:id={geometry_id})" if geometry_id else kind
        super().__init__(f"No CRS reference found for {label}")


class UnsupportedGeometryKindError(GeomaticsError):
    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unsupported geometry kind: {kind}")


class UnsupportedSegmentKindError(GeomaticsError):
    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unsupported curve segment kind: {kind}")


class MalformedLengthError(GeomaticsError):
    """A length measure cannot be interpreted."""


class UnrecognizedUnitError(MalformedLengthError):
    def __init__(self, uom: str):
        self.uom = uom
        super().__init__(f"Unrecognized unit of length: {uom}")


class GeodesicComputationError(GeomaticsError):
    """The destination position of a geodesic could not be computed."""

    def __init__(self, position, azimuth: float, distance: float, crs: str, reason: str = ""):
        self.position = position
        self.azimuth = azimuth
        self.distance = distance
        self.crs = crs
        msg = (
            f"Failed to calculate destination from {position} "
            f"(azimuth={azimuth}, distance={distance} m, crs={crs})"
        )
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class RecursionLimitExceededError(GeomaticsError):
    def __init__(self, depth: int):
        self.depth = depth
        super().__init__(f"Geometry nesting exceeds the maximum depth of {depth}")


class InvalidCRSReferenceError(GeomaticsError, ValueError):
    """Not a CRS reference in the 'http' or 'urn' form of OGC 09-048r3."""

    def __init__(self, srs_name: str):
        self.srs_name = srs_name
        super().__init__(f"Invalid CRS reference (see OGC 09-048r3): {srs_name}")


class UnknownCRSError(GeomaticsError):
    """The CRS authority does not recognize a reference."""

    def __init__(self, srs_name: str):
        self.srs_name = srs_name
        super().__init__(f"No CRS definition found for {srs_name}")
