"""
Processors for Vellum

Pure input processing shared by the activities: color parsing and
georeference record construction. Nothing here touches a PDF document.
"""

from .color import Rgba, hex_to_rgba
from .georeference import (
    CoordinateSystem,
    Measure,
    Viewport,
    build_viewport,
    classify_coordinate_system,
)

__all__ = [
    'Rgba',
    'hex_to_rgba',
    'CoordinateSystem',
    'Measure',
    'Viewport',
    'build_viewport',
    'classify_coordinate_system',
]
