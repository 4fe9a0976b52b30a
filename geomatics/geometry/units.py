"""
Length and segment-size utilities.

Units of length are identified by symbol, or by a URI reference whose
fragment part is the symbol (e.g. ``http://www.opengis.net/def/uom/common/NM``).

    Unit            Symbol(s)               Length /m
    meter           m                       1
    kilometer       km                      1000
    mile            mi                      1609.34
    nautical mile   M, NM, [nmi_i]          1852
"""

from geomatics.exceptions import UnrecognizedUnitError, UnsupportedSegmentKindError
from geomatics.models.geometry import POSITIONED_SEGMENT_MODELS, Length


# Unit conversion utilities
METERS_PER_UNIT: dict[str, float] = {
    "m": 1.0,
    "km": 1000.0,
    "mi": 1609.34,
    "M": 1852.0,
    "NM": 1852.0,
    "[nmi_i]": 1852.0,
}


def unit_symbol(uom: str) -> str:
    """Extract the unit symbol from a symbol or URI reference."""
    return uom[uom.index("#") + 1:] if "#" in uom else uom


def length_in_meters(length: Length) -> float:
    """
    Convert a length measurement to meters.

    Args:
        length: A length measure

    Returns:
        The length in meters

    Raises:
        UnrecognizedUnitError: If the unit symbol is not in the conversion table
    """
    symbol = unit_symbol(length.uom)
    try:
        factor = METERS_PER_UNIT[symbol]
    except KeyError:
        raise UnrecognizedUnitError(length.uom) from None
    return length.value * factor


_SEGMENT_MODELS = {model.model_fields["kind"].default: model for model in POSITIONED_SEGMENT_MODELS}


def min_curve_segment_length(segment_kind: str) -> int:
    """
    Minimum number of direct positions required to specify a curve segment,
    as enforced by the segment model. The value falls in the range 1-3.

    Raises:
        UnsupportedSegmentKindError: If the segment kind has no direct positions
    """
    try:
        return _SEGMENT_MODELS[segment_kind].min_positions
    except KeyError:
        raise UnsupportedSegmentKindError(segment_kind) from None
