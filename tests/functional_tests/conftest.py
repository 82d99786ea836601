"""
Shared fixtures: real PDFs built with pikepdf and real images built with Pillow.
"""

import io
import sys
from pathlib import Path

import pikepdf
import pytest
from PIL import Image

# Add repo root to path for imports
repo_root = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(repo_root))

from engines.pdf import get_pdf_engine


def build_pdf(*page_sizes) -> bytes:
    """PDF bytes with one blank page per (width, height)."""
    pdf = pikepdf.Pdf.new()
    for size in page_sizes or [(595, 842)]:
        pdf.add_blank_page(page_size=size)
    buffer = io.BytesIO()
    pdf.save(buffer)
    return buffer.getvalue()


def build_image(fmt: str, mode: str = 'RGB', size=(4, 3), color='red', **save_args) -> bytes:
    img = Image.new(mode, size, color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt, **save_args)
    return buffer.getvalue()


def open_pdf(data: bytes) -> pikepdf.Pdf:
    return pikepdf.Pdf.open(io.BytesIO(data))


def operators(page) -> list:
    """Content stream operators of a page, in order, as strings."""
    return [instruction.operator.unparse().decode() for instruction in pikepdf.parse_content_stream(page)]


def operands(page, operator: str) -> list:
    """Operand lists of every use of one operator, in order."""
    wanted = pikepdf.Operator(operator)
    return [list(instruction.operands) for instruction in pikepdf.parse_content_stream(page)
            if instruction.operator == wanted]


def resources(page, kind: str) -> list:
    """Resource objects of one kind (Font, XObject, ExtGState) on a page."""
    entries = page.obj.Resources[pikepdf.Name("/" + kind)]
    return [entries[key] for key in entries.keys()]


@pytest.fixture
def engine():
    return get_pdf_engine("pikepdf", {})


@pytest.fixture
def blank_pdf() -> bytes:
    return build_pdf((200, 300))


@pytest.fixture
def png_bytes() -> bytes:
    return build_image('PNG')


@pytest.fixture
def jpeg_bytes() -> bytes:
    return build_image('JPEG', size=(8, 6))
