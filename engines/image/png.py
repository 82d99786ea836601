"""
PNG image embedder for Vellum

PDF has no PNG filter, so PNG payloads are decoded with Pillow and the raw
samples are written Flate-compressed. Transparency is split out into a
separate grayscale /SMask image.

Mode handling:
- RGB, L: written directly
- RGBA, LA: color channels written, alpha channel becomes the /SMask
- P, PA: expanded to RGB(A); palette transparency becomes the /SMask
- anything else (1, I, I;16, F, CMYK...): converted to RGB or L first
"""

import io
import zlib

import pikepdf
from PIL import Image

from . import register_image_embedder
from .base import EmbeddedImage

from utilities import Print

PNG_SIGNATURE = bytes([0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A])


@register_image_embedder("png")
class PNGEmbedderFactory:
    """Factory for creating PNG embedder instances."""

    @staticmethod
    def create(config: dict) -> "PNGEmbedder":
        return PNGEmbedder(config)


class PNGEmbedder:
    """
    Decode-and-deflate PNG embedding.

    Attributes:
        compression_level: zlib level for the sample data (0-9)
    """

    def __init__(self, config: dict):
        """
        Args:
            config: Configuration dictionary with optional keys:
                - compression_level: int - zlib level (default: 6)
        """
        self.compression_level = config.get('compression_level', 6)

    def matches(self, data: bytes) -> bool:
        return data[:len(PNG_SIGNATURE)] == PNG_SIGNATURE

    def embed(self, pdf: pikepdf.Pdf, data: bytes) -> EmbeddedImage:
        # Samples must be read before the file is closed
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            color, alpha = self._split_alpha(img)

            width, height = color.size
            color_space = pikepdf.Name.DeviceGray if color.mode == 'L' else pikepdf.Name.DeviceRGB

            image_stream = self._sample_stream(pdf, color, color_space)

            if alpha is not None:
                smask = self._sample_stream(pdf, alpha, pikepdf.Name.DeviceGray)
                image_stream.stream_dict[pikepdf.Name.SMask] = pdf.make_indirect(smask)

        Print("DEBUG",
            f"PNG: {width}x{height} {color.mode}"
            f"{' with alpha mask' if alpha is not None else ''}"
        )

        return EmbeddedImage(
            xobject=pdf.make_indirect(image_stream),
            width=width,
            height=height,
            format=self.name,
        )

    def _split_alpha(self, img: Image.Image):
        """Return (color image in RGB or L, alpha channel in L or None)."""
        if img.mode == 'P':
            img = img.convert('RGBA' if 'transparency' in img.info else 'RGB')
        elif img.mode == 'PA':
            img = img.convert('RGBA')
        elif img.mode in ('L', 'RGB') and 'transparency' in img.info:
            # tRNS chunk with a single transparent color
            img = img.convert('LA' if img.mode == 'L' else 'RGBA')

        if img.mode == 'RGBA':
            return img.convert('RGB'), img.getchannel('A')
        if img.mode == 'LA':
            return img.convert('L'), img.getchannel('A')
        if img.mode in ('RGB', 'L'):
            return img, None
        if img.mode in ('1', 'I', 'I;16', 'F'):
            return img.convert('L'), None
        return img.convert('RGB'), None

    def _sample_stream(self, pdf: pikepdf.Pdf, img: Image.Image, color_space: pikepdf.Name) -> pikepdf.Stream:
        compressed = zlib.compress(img.tobytes(), self.compression_level)

        stream = pikepdf.Stream(pdf, compressed)
        stream.stream_dict[pikepdf.Name.Type] = pikepdf.Name.XObject
        stream.stream_dict[pikepdf.Name.Subtype] = pikepdf.Name.Image
        stream.stream_dict[pikepdf.Name.Width] = img.width
        stream.stream_dict[pikepdf.Name.Height] = img.height
        stream.stream_dict[pikepdf.Name.ColorSpace] = color_space
        stream.stream_dict[pikepdf.Name.BitsPerComponent] = 8
        stream.stream_dict[pikepdf.Name.Filter] = pikepdf.Name.FlateDecode
        return stream

    @property
    def signature(self) -> bytes:
        return PNG_SIGNATURE

    @property
    def name(self) -> str:
        """Embedder identifier."""
        return "png"
