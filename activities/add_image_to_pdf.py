"""
Add Image To PDF activity: place a JPEG or PNG image, with optional border.
"""

from dataclasses import dataclass
from typing import Optional

from . import register_activity
from .base import ActivityResult, require

from engines.image import detect_image_format
from errors import UnsupportedImageFormat
from processors.color import DEFAULT_COLOR, hex_to_rgba
from utilities import Print


@dataclass
class AddImageToPdfInputs:
    source: Optional[bytes] = None
    image: Optional[bytes] = None
    x: float = 0
    y: float = 0
    width: Optional[float] = None
    height: Optional[float] = None
    border_width: float = 0
    border_color: str = DEFAULT_COLOR
    page_index: int = 0


@register_activity("add_image_to_pdf")
class AddImageToPdfFactory:
    """Factory for creating AddImageToPdf activity instances."""

    @staticmethod
    def create(engine, config: dict) -> "AddImageToPdf":
        return AddImageToPdf(engine, config)


class AddImageToPdf:
    """
    Adds an image to a PDF document.

    Only JPEG and PNG images are supported; the format is detected from the
    leading bytes, not from any file name. Width and height default to the
    image's pixel size (one pixel per point).
    """

    inputs_type = AddImageToPdfInputs

    def __init__(self, engine, config: dict):
        self.engine = engine
        self.image_config = config.get('images', {})

    def execute(self, inputs: AddImageToPdfInputs) -> ActivityResult:
        require(inputs.image, "image")
        require(inputs.source, "source")

        image_format = detect_image_format(inputs.image, self.image_config)
        if image_format is None:
            raise UnsupportedImageFormat("image format not supported. Must be PNG or JPG.")

        border_width = inputs.border_width or 0
        border_rgba = hex_to_rgba(inputs.border_color) if border_width > 0 else None

        pdf = self.engine.load(inputs.source)
        page = self.engine.get_page(pdf, inputs.page_index)

        image = self.engine.embed_image(pdf, inputs.image)
        width = inputs.width or image.width
        height = inputs.height or image.height

        self.engine.draw_image(page, image, x=inputs.x, y=inputs.y, width=width, height=height)

        if border_rgba is not None:
            self.engine.draw_rectangle(
                page,
                x=inputs.x,
                y=inputs.y,
                width=width,
                height=height,
                border_color=border_rgba,
                border_width=border_width,
            )

        data = self.engine.save(pdf)
        Print("SUCCESS",
            f"Added {image_format.upper()} image ({image.width}x{image.height}px) to page "
            f"{inputs.page_index} at ({inputs.x}, {inputs.y}), {width} x {height} pt"
        )
        return ActivityResult(result=data)

    @property
    def name(self) -> str:
        return "add_image_to_pdf"
