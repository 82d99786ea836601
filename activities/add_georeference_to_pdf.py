"""
Add Georeference To PDF activity: register a map area of a page against
real-world coordinates (OGC Geospatial PDF viewport).
"""

from dataclasses import dataclass
from typing import List, Optional

from . import register_activity
from .base import ActivityResult, require

from processors.georeference import DEFAULT_VIEWPORT_NAME, build_viewport
from utilities import Print


@dataclass
class AddGeoreferenceToPdfInputs:
    source: Optional[bytes] = None
    page_bounds: Optional[List[List[float]]] = None
    map_bounds: Optional[List[List[float]]] = None
    coordinate_system: Optional[str] = None
    page_index: int = 0
    name: str = DEFAULT_VIEWPORT_NAME


@register_activity("add_georeference_to_pdf")
class AddGeoreferenceToPdfFactory:
    """Factory for creating AddGeoreferenceToPdf activity instances."""

    @staticmethod
    def create(engine, config: dict) -> "AddGeoreferenceToPdf":
        return AddGeoreferenceToPdf(engine, config)


class AddGeoreferenceToPdf:
    """
    Adds georeference metadata to a PDF document.

    Each run appends a new viewport to the page; viewports added earlier
    are kept as they are.
    """

    inputs_type = AddGeoreferenceToPdfInputs

    def __init__(self, engine, config: dict):
        self.engine = engine

    def execute(self, inputs: AddGeoreferenceToPdfInputs) -> ActivityResult:
        require(inputs.source, "source")

        # Validates coordinate system and both bounds before anything is loaded
        viewport = build_viewport(
            page_bounds=inputs.page_bounds,
            map_bounds=inputs.map_bounds,
            coordinate_system=inputs.coordinate_system,
            name=inputs.name,
        )

        pdf = self.engine.load(inputs.source)
        self.engine.add_viewport(pdf, inputs.page_index, viewport)

        data = self.engine.save(pdf)
        Print("SUCCESS", f"Georeferenced '{viewport.name}' on page {inputs.page_index} ({viewport.gcs.type})")
        return ActivityResult(result=data)

    @property
    def name(self) -> str:
        return "add_georeference_to_pdf"
