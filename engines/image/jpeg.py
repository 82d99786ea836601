"""
JPEG image embedder for Vellum

JPEG payloads are embedded as-is: PDF readers decode baseline and
progressive JPEG natively through the /DCTDecode filter, so the bytes are
never re-encoded. Pillow is only used to read the header (size and mode).
"""

import io

import pikepdf
from PIL import Image

from . import register_image_embedder
from .base import EmbeddedImage

from utilities import Print, format_bytes

JPEG_SIGNATURE = bytes([0xFF, 0xD8, 0xFF])

# Pillow mode -> (PDF color space, components)
JPEG_COLOR_SPACES = {
    'L': (pikepdf.Name.DeviceGray, 1),
    'RGB': (pikepdf.Name.DeviceRGB, 3),
    'CMYK': (pikepdf.Name.DeviceCMYK, 4),
}


@register_image_embedder("jpeg")
class JPEGEmbedderFactory:
    """Factory for creating JPEG embedder instances."""

    @staticmethod
    def create(config: dict) -> "JPEGEmbedder":
        return JPEGEmbedder(config)


class JPEGEmbedder:
    """Pass-through JPEG embedding with /DCTDecode."""

    def __init__(self, config: dict):
        self.config = config

    def matches(self, data: bytes) -> bool:
        return data[:len(JPEG_SIGNATURE)] == JPEG_SIGNATURE

    def embed(self, pdf: pikepdf.Pdf, data: bytes) -> EmbeddedImage:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
            mode = img.mode

        if mode not in JPEG_COLOR_SPACES:
            raise ValueError(f"JPEG color mode not supported: {mode}")
        color_space, components = JPEG_COLOR_SPACES[mode]

        image_stream = pikepdf.Stream(pdf, data)
        image_stream.stream_dict[pikepdf.Name.Type] = pikepdf.Name.XObject
        image_stream.stream_dict[pikepdf.Name.Subtype] = pikepdf.Name.Image
        image_stream.stream_dict[pikepdf.Name.Width] = width
        image_stream.stream_dict[pikepdf.Name.Height] = height
        image_stream.stream_dict[pikepdf.Name.ColorSpace] = color_space
        image_stream.stream_dict[pikepdf.Name.BitsPerComponent] = 8
        image_stream.stream_dict[pikepdf.Name.Filter] = pikepdf.Name.DCTDecode

        # Adobe CMYK JPEGs store inverted channel values
        if components == 4:
            image_stream.stream_dict[pikepdf.Name.Decode] = pikepdf.Array([1, 0] * 4)

        Print("DEBUG", f"JPEG: {width}x{height} {mode}, {format_bytes(len(data))} embedded as-is")

        return EmbeddedImage(
            xobject=pdf.make_indirect(image_stream),
            width=width,
            height=height,
            format=self.name,
        )

    @property
    def signature(self) -> bytes:
        return JPEG_SIGNATURE

    @property
    def name(self) -> str:
        """Embedder identifier."""
        return "jpeg"
