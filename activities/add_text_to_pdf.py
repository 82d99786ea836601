"""
Add Text To PDF activity: draw a string on one page of a document.
"""

from dataclasses import dataclass
from typing import Optional

from . import register_activity
from .base import ActivityResult, require

from errors import MissingRequiredInput
from processors.color import DEFAULT_COLOR, hex_to_rgba
from utilities import Print

DEFAULT_FONT_NAME = "Helvetica"
DEFAULT_FONT_SIZE = 12


@dataclass
class AddTextToPdfInputs:
    source: Optional[bytes] = None
    text: Optional[str] = None
    x: float = 0
    y: float = 0
    font_name: str = DEFAULT_FONT_NAME
    font_size: float = DEFAULT_FONT_SIZE
    color: str = DEFAULT_COLOR
    page_index: int = 0


@register_activity("add_text_to_pdf")
class AddTextToPdfFactory:
    """Factory for creating AddTextToPdf activity instances."""

    @staticmethod
    def create(engine, config: dict) -> "AddTextToPdf":
        return AddTextToPdf(engine, config)


class AddTextToPdf:
    """
    Adds text to a PDF document.

    (x, y) is the start of the first line's baseline, in points from the
    bottom-left corner of the page. Newlines in the text start new lines.
    """

    inputs_type = AddTextToPdfInputs

    def __init__(self, engine, config: dict):
        self.engine = engine

    def execute(self, inputs: AddTextToPdfInputs) -> ActivityResult:
        require(inputs.source, "source")
        # Empty text is allowed; only a missing value is an error
        if inputs.text is None:
            raise MissingRequiredInput("text")

        rgba = hex_to_rgba(inputs.color)

        font = self.engine.standard_font(inputs.font_name)
        if font is None:
            Print("WARNING",
                f"'{inputs.font_name}' is not a standard font; using the default font. "
                f"Standard fonts: {', '.join(self.engine.standard_fonts)}"
            )

        pdf = self.engine.load(inputs.source)
        page = self.engine.get_page(pdf, inputs.page_index)
        self.engine.draw_text(
            page,
            inputs.text,
            x=inputs.x,
            y=inputs.y,
            font_name=font,
            font_size=inputs.font_size,
            color=rgba,
        )

        data = self.engine.save(pdf)
        Print("SUCCESS", f"Added text to page {inputs.page_index} at ({inputs.x}, {inputs.y})")
        return ActivityResult(result=data)

    @property
    def name(self) -> str:
        return "add_text_to_pdf"
