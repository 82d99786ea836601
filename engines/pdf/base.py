"""
PDF Engine Protocol for Vellum

Defines the contract that all PDF document engines must implement.
Activities only talk to a PDF library through this interface.
"""

from typing import Protocol, List, Optional, Sequence

import pikepdf

from engines.image.base import EmbeddedImage
from processors.color import Rgba
from processors.georeference import Viewport


class PDFEngine(Protocol):
    """
    Protocol for PDF document engines.

    PDF engines are responsible for:
    - Loading documents from bytes and saving them back to bytes
    - Page access, page creation and copying pages between documents
    - Document metadata
    - Drawing text, images and rectangles onto pages
    - Attaching georeference viewports to pages
    """

    def load(self, data: bytes) -> pikepdf.Pdf:
        """
        Open a document from its bytes.

        Raises:
            pikepdf.PdfError: If the bytes are not a readable PDF
        """
        ...

    def create(self) -> pikepdf.Pdf:
        """Create an empty document with no pages."""
        ...

    def save(self, pdf: pikepdf.Pdf) -> bytes:
        """Serialize a document to bytes."""
        ...

    def page_count(self, pdf: pikepdf.Pdf) -> int:
        ...

    def get_page(self, pdf: pikepdf.Pdf, page_index: int) -> pikepdf.Page:
        """
        Get a page by zero-based index.

        Raises:
            PageIndexOutOfRange: If the index is negative or past the last page
        """
        ...

    def add_page(self, pdf: pikepdf.Pdf, width: float, height: float) -> pikepdf.Page:
        """Append a blank page of the given size in points."""
        ...

    def copy_pages(self, target: pikepdf.Pdf, source: pikepdf.Pdf) -> int:
        """
        Append every page of source to target, in order.

        The source document must stay open until target is saved.

        Returns:
            Number of pages copied
        """
        ...

    def set_metadata(
        self,
        pdf: pikepdf.Pdf,
        title: Optional[str] = None,
        author: Optional[str] = None,
        subject: Optional[str] = None,
        language: Optional[str] = None,
        keywords: Optional[Sequence[str]] = None,
        producer: Optional[str] = None,
        creator: Optional[str] = None,
    ) -> None:
        """Write document info fields. None values are left unset."""
        ...

    def embed_image(self, pdf: pikepdf.Pdf, data: bytes) -> EmbeddedImage:
        """
        Embed JPEG or PNG bytes as an image XObject.

        Raises:
            UnsupportedImageFormat: If the bytes match no known signature
        """
        ...

    def draw_image(
        self,
        page: pikepdf.Page,
        image: EmbeddedImage,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        ...

    def draw_rectangle(
        self,
        page: pikepdf.Page,
        x: float,
        y: float,
        width: float,
        height: float,
        border_color: Rgba,
        border_width: float,
    ) -> None:
        """Stroke a rectangle outline; alpha becomes stroke opacity."""
        ...

    def draw_text(
        self,
        page: pikepdf.Page,
        text: str,
        x: float,
        y: float,
        font_name: Optional[str],
        font_size: float,
        color: Rgba,
    ) -> None:
        """
        Draw text with its baseline starting at (x, y).

        Args:
            font_name: Standard font name; None uses the engine's default font
        """
        ...

    def add_viewport(self, pdf: pikepdf.Pdf, page_index: int, viewport: Viewport) -> None:
        """Append a georeference viewport to the page's /VP array."""
        ...

    def standard_font(self, font_name: Optional[str]) -> Optional[str]:
        """
        Resolve a font name to a standard (Base 14) PostScript name.

        Returns:
            PostScript name such as 'Times-Roman', or None if not a standard font
        """
        ...

    @property
    def standard_fonts(self) -> List[str]:
        ...

    @property
    def name(self) -> str:
        """
        Engine identifier for logging and debugging.

        Returns:
            Unique name of this engine (e.g., 'pikepdf')
        """
        ...
