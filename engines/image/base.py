"""
Image Embedder Protocol for Vellum

Defines the contract that all image embedders must implement.
"""

from dataclasses import dataclass
from typing import Protocol

import pikepdf


@dataclass
class EmbeddedImage:
    """An image XObject written into a document, plus its natural size."""
    xobject: pikepdf.Object
    width: int
    height: int
    format: str


class ImageEmbedder(Protocol):
    """
    Protocol for image embedders.

    Embedders are responsible for:
    - Recognizing their format from the leading bytes of a payload
    - Turning the payload into an image XObject inside a document
    """

    def matches(self, data: bytes) -> bool:
        """
        Check whether the payload starts with this format's signature.

        Args:
            data: Raw image bytes

        Returns:
            True if the embedder can handle the payload
        """
        ...

    def embed(self, pdf: pikepdf.Pdf, data: bytes) -> EmbeddedImage:
        """
        Write the image into a document as an indirect image XObject.

        Args:
            pdf: Document that will own the XObject
            data: Raw image bytes

        Returns:
            EmbeddedImage with the indirect XObject and the pixel size

        Raises:
            PIL.UnidentifiedImageError: If the payload cannot be decoded
        """
        ...

    @property
    def signature(self) -> bytes:
        """Leading bytes that identify the format."""
        ...

    @property
    def name(self) -> str:
        """Embedder identifier (e.g. 'jpeg', 'png')."""
        ...
