"""
Create PDF activity: a blank one-page document with optional metadata.
"""

from dataclasses import dataclass
from typing import List, Optional

from . import register_activity
from .base import ActivityResult

from errors import InvalidPageSize
from utilities import Print, format_bytes

# A4 in points; use 612 x 792 for Letter
DEFAULT_PAGE_WIDTH = 595
DEFAULT_PAGE_HEIGHT = 842
DEFAULT_PRODUCER = "Vellum"


@dataclass
class CreatePdfInputs:
    page_width: Optional[float] = None
    page_height: Optional[float] = None
    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    language: Optional[str] = None
    keywords: Optional[List[str]] = None


@register_activity("create_pdf")
class CreatePdfFactory:
    """Factory for creating CreatePdf activity instances."""

    @staticmethod
    def create(engine, config: dict) -> "CreatePdf":
        return CreatePdf(engine, config)


class CreatePdf:
    """Creates a blank PDF document."""

    inputs_type = CreatePdfInputs

    def __init__(self, engine, config: dict):
        self.engine = engine
        self.producer = config.get('producer', DEFAULT_PRODUCER)
        self.creator = config.get('creator')

    def execute(self, inputs: CreatePdfInputs) -> ActivityResult:
        # Zero or omitted dimensions keep the A4 default
        page_width = inputs.page_width or DEFAULT_PAGE_WIDTH
        page_height = inputs.page_height or DEFAULT_PAGE_HEIGHT

        if page_width < 0 or page_height < 0:
            raise InvalidPageSize(f"Page size must be positive, got {page_width} x {page_height}")

        keywords = inputs.keywords
        if isinstance(keywords, str):
            keywords = [keywords]

        pdf = self.engine.create()
        self.engine.set_metadata(
            pdf,
            title=inputs.title,
            author=inputs.author,
            subject=inputs.subject,
            language=inputs.language,
            keywords=keywords,
            producer=self.producer,
            creator=self.creator,
        )
        self.engine.add_page(pdf, page_width, page_height)

        data = self.engine.save(pdf)
        Print("SUCCESS", f"Created {page_width} x {page_height} pt PDF ({format_bytes(len(data))})")
        return ActivityResult(result=data)

    @property
    def name(self) -> str:
        return "create_pdf"
