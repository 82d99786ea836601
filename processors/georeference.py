"""
Georeference record builder (OGC "Geospatial PDF" convention).

A georeferenced map area on a PDF page is described by a viewport entry in
the page's /VP array:

    /VP [ << /Type /Viewport
             /Name (Map)
             /BBox [x0 y0 x1 y1]                  % page user space
             /GCS <descriptor>
             /Measure << /Type /Measure
                         /Subtype /GEO
                         /Bounds [0 0 0 1 1 1 1 0]
                         /GCS <descriptor>
                         /GPTS [8 numbers]         % geographic corners
                         /LPTS [0 0 0 1 1 1 1 0] >> >> ]

    descriptor: << /Type /GEOGCS | /PROJCS  /WKT (...) >>

This module only builds the record as plain Python values. Writing it into a
document is the PDF engine's job (PDFEngine.add_viewport), which keeps every
validation ahead of the first mutation.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from numbers import Real
from typing import List, Optional

from errors import InvalidBounds, MissingCoordinateSystem, MissingRequiredInput

DEFAULT_VIEWPORT_NAME = "Map"

PROJECTED_PREFIX = "PROJCS["

# Corners of the unit square: bottom-left, top-left, top-right, bottom-right.
# Used for both /Bounds and /LPTS. Adobe Reader needs /LPTS even though
# it is optional.
UNIT_SQUARE = (0, 0, 0, 1, 1, 1, 1, 0)


@dataclass(frozen=True)
class CoordinateSystem:
    """The /GCS descriptor: projected (PROJCS) or geographic (GEOGCS)."""
    type: str
    wkt: str

    @property
    def is_projected(self) -> bool:
        return self.type == "PROJCS"


@dataclass(frozen=True)
class Measure:
    """The /Measure sub-record of a viewport (Subtype /GEO)."""
    bounds: tuple
    gcs: CoordinateSystem
    gpts: tuple
    lpts: tuple
    subtype: str = "GEO"


@dataclass(frozen=True)
class Viewport:
    """One /VP entry attached to a page."""
    name: str
    bbox: tuple
    gcs: CoordinateSystem
    measure: Measure


def classify_coordinate_system(wkt: str) -> CoordinateSystem:
    """
    Classify a WKT string by prefix only.

    The WKT grammar is not parsed or validated; anything that does not
    start with 'PROJCS[' is treated as a geographic coordinate system.
    """
    gcs_type = "PROJCS" if wkt.startswith(PROJECTED_PREFIX) else "GEOGCS"
    return CoordinateSystem(type=gcs_type, wkt=wkt)


def _validate_pairs(field: str, pairs, expected: int) -> None:
    if pairs is None:
        raise MissingRequiredInput(field)

    if isinstance(pairs, (str, bytes)) or not isinstance(pairs, Sequence):
        raise InvalidBounds(f"{field} must be a list of {expected} coordinate pairs")

    if len(pairs) != expected:
        raise InvalidBounds(
            f"{field} must contain {expected} coordinate pairs, got {len(pairs)}"
        )

    for index, pair in enumerate(pairs):
        if isinstance(pair, (str, bytes)) or not isinstance(pair, Sequence) or len(pair) != 2:
            raise InvalidBounds(
                f"{field}[{index}] must be a coordinate pair [x, y], got {pair!r}"
            )
        for value in pair:
            # bool is a Real subclass but never a coordinate
            if isinstance(value, bool) or not isinstance(value, Real):
                raise InvalidBounds(
                    f"{field}[{index}] contains a non-numeric value: {value!r}"
                )


def _flatten(pairs: Sequence[Sequence[float]]) -> tuple:
    flat: List[float] = []
    for x, y in pairs:
        flat.append(x)
        flat.append(y)
    return tuple(flat)


def validate_georeference_inputs(
    page_bounds,
    map_bounds,
    coordinate_system: Optional[str],
) -> None:
    """
    Validate georeference inputs without building anything.

    Raises:
        MissingCoordinateSystem: If coordinate_system is empty or missing
        MissingRequiredInput: If page_bounds or map_bounds is missing
        InvalidBounds: If page_bounds is not 2 pairs or map_bounds is not 4 pairs
    """
    if not coordinate_system:
        raise MissingCoordinateSystem()
    _validate_pairs("page_bounds", page_bounds, 2)
    _validate_pairs("map_bounds", map_bounds, 4)


def build_viewport(
    page_bounds: Sequence[Sequence[float]],
    map_bounds: Sequence[Sequence[float]],
    coordinate_system: str,
    name: Optional[str] = None,
) -> Viewport:
    """
    Build the viewport record for one georeferenced map area.

    Args:
        page_bounds: [[bottom-left x, bottom-left y], [top-right x, top-right y]]
                     in PDF user space (points, origin bottom-left)
        map_bounds: Four [lat, lon] pairs ordered bottom-left, top-left,
                    top-right, bottom-right. Need not be axis-aligned.
        coordinate_system: WKT of the map coordinates
        name: Display name for the viewport (default: "Map")

    Returns:
        Viewport ready to be attached with PDFEngine.add_viewport()

    Raises:
        MissingCoordinateSystem, MissingRequiredInput, InvalidBounds
    """
    validate_georeference_inputs(page_bounds, map_bounds, coordinate_system)

    gcs = classify_coordinate_system(coordinate_system)

    measure = Measure(
        bounds=UNIT_SQUARE,
        gcs=gcs,
        gpts=_flatten(map_bounds),
        lpts=UNIT_SQUARE,
    )

    return Viewport(
        name=name or DEFAULT_VIEWPORT_NAME,
        bbox=_flatten(page_bounds),
        gcs=gcs,
        measure=measure,
    )
