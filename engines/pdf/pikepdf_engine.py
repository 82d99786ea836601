"""
pikepdf-based PDF engine for Vellum

All drawing is done by appending small content streams to the target page,
with the needed resources (fonts, images, graphics states) registered on the
page under fresh names. Existing page content is wrapped in q/Q first so an
unbalanced graphics state left by another producer cannot leak into ours.

PDF Content Stream operators used:
- q / Q: save / restore graphics state
- gs: apply ExtGState (fill opacity /ca, stroke opacity /CA)
- cm: concatenate matrix (image placement)
- Do: paint XObject (the image)
- rg / RG: fill / stroke RGB color
- w, re, S: line width, rectangle path, stroke
- BT / ET, Tf, TL, Tm, Tj, T*: text object, font, leading, matrix, show, next line

Fonts are the PDF Base 14 standard fonts - guaranteed in all PDF readers,
never embedded.
"""

import io
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Sequence

import pikepdf

from . import register_pdf_engine
from engines.image import get_embedder_for
from engines.image.base import EmbeddedImage
from errors import PageIndexOutOfRange, UnencodableText
from processors.color import Rgba
from processors.georeference import Viewport
from utilities import Print, format_bytes


@register_pdf_engine("pikepdf")
class PikePDFEngineFactory:
    """Factory for creating pikepdf engine instances."""

    @staticmethod
    def create(config: dict) -> "PikePDFEngine":
        return PikePDFEngine(config)


class PikePDFEngine:
    """
    pikepdf implementation of the PDFEngine protocol.

    Attributes:
        default_font: PostScript name used when no standard font is requested
        line_height_ratio: Leading as a multiple of the font size
        wrap_existing_contents: Wrap existing page content in q/Q before drawing
        compress_streams: Flate-compress uncompressed streams on save
        image_config: Per-embedder configuration (keyed by 'jpeg', 'png')
    """

    # Standard font keys (as workflow authors know them) -> PostScript names
    STANDARD_FONTS = {
        'Courier': 'Courier',
        'CourierBold': 'Courier-Bold',
        'CourierOblique': 'Courier-Oblique',
        'CourierBoldOblique': 'Courier-BoldOblique',
        'Helvetica': 'Helvetica',
        'HelveticaBold': 'Helvetica-Bold',
        'HelveticaOblique': 'Helvetica-Oblique',
        'HelveticaBoldOblique': 'Helvetica-BoldOblique',
        'TimesRoman': 'Times-Roman',
        'TimesRomanBold': 'Times-Bold',
        'TimesRomanItalic': 'Times-Italic',
        'TimesRomanBoldItalic': 'Times-BoldItalic',
        'Symbol': 'Symbol',
        'ZapfDingbats': 'ZapfDingbats',
    }

    # These carry their own built-in encoding; WinAnsi does not apply
    SYMBOLIC_FONTS = {'Symbol', 'ZapfDingbats'}

    def __init__(self, config: dict):
        """
        Initialize PDF engine with configuration.

        Args:
            config: Configuration dictionary with optional keys:
                - default_font: str - Standard font name (default: 'Helvetica')
                - line_height_ratio: float - Leading / font size (default: 1.2)
                - wrap_existing_contents: bool - (default: True)
                - compress_streams: bool - (default: True)
                - images: dict - Per-embedder configuration
        """
        font_spec = config.get('default_font', 'Helvetica')
        self.default_font = self.standard_font(font_spec)
        if self.default_font is None:
            raise ValueError(
                f"default_font must be a standard font, got '{font_spec}'. "
                f"Standard fonts: {', '.join(self.STANDARD_FONTS)}"
            )

        self.line_height_ratio = config.get('line_height_ratio', 1.2)
        self.wrap_existing_contents = config.get('wrap_existing_contents', True)
        self.compress_streams = config.get('compress_streams', True)
        self.image_config = config.get('images', {})

        Print("DEBUG", f"PDF engine initialized: default_font={self.default_font}, pikepdf {pikepdf.__version__}")

    # ------------------------------------------------------------------
    # Documents and pages
    # ------------------------------------------------------------------

    def load(self, data: bytes) -> pikepdf.Pdf:
        pdf = pikepdf.Pdf.open(io.BytesIO(data))
        Print("DEBUG", f"Loaded PDF: {len(pdf.pages)} pages, {format_bytes(len(data))}")
        return pdf

    def create(self) -> pikepdf.Pdf:
        return pikepdf.Pdf.new()

    def save(self, pdf: pikepdf.Pdf) -> bytes:
        buffer = io.BytesIO()
        pdf.save(buffer, compress_streams=self.compress_streams)
        data = buffer.getvalue()
        Print("DEBUG", f"Saved PDF: {len(pdf.pages)} pages, {format_bytes(len(data))}")
        return data

    def page_count(self, pdf: pikepdf.Pdf) -> int:
        return len(pdf.pages)

    def get_page(self, pdf: pikepdf.Pdf, page_index: int) -> pikepdf.Page:
        page_count = len(pdf.pages)
        # Negative indexes would silently wrap around in Python
        if not 0 <= page_index < page_count:
            raise PageIndexOutOfRange(page_index, page_count)
        return pdf.pages[page_index]

    def add_page(self, pdf: pikepdf.Pdf, width: float, height: float) -> pikepdf.Page:
        return pdf.add_blank_page(page_size=(width, height))

    def copy_pages(self, target: pikepdf.Pdf, source: pikepdf.Pdf) -> int:
        count = len(source.pages)
        target.pages.extend(source.pages)
        return count

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
        info = pdf.docinfo

        fields = {
            pikepdf.Name.Title: title,
            pikepdf.Name.Author: author,
            pikepdf.Name.Subject: subject,
            pikepdf.Name.Producer: producer,
            pikepdf.Name.Creator: creator,
        }
        if keywords:
            fields[pikepdf.Name.Keywords] = ' '.join(keywords)

        for key, value in fields.items():
            if value:
                info[key] = pikepdf.String(value)

        now = self._pdf_date(datetime.now(timezone.utc))
        info[pikepdf.Name.CreationDate] = pikepdf.String(now)
        info[pikepdf.Name.ModDate] = pikepdf.String(now)

        # Language lives in the catalog, not the info dictionary
        if language:
            pdf.Root[pikepdf.Name.Lang] = pikepdf.String(language)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def embed_image(self, pdf: pikepdf.Pdf, data: bytes) -> EmbeddedImage:
        embedder = get_embedder_for(data, self.image_config)
        return embedder.embed(pdf, data)

    def draw_image(
        self,
        page: pikepdf.Page,
        image: EmbeddedImage,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        image_name = page.add_resource(image.xobject, pikepdf.Name.XObject, prefix='Im')

        # Image space is the unit square; cm scales it to width x height at (x, y)
        self._append_content(page, [
            b'q',
            f'{_num(width)} 0 0 {_num(height)} {_num(x)} {_num(y)} cm'.encode('latin-1'),
            f'{image_name} Do'.encode('latin-1'),
            b'Q',
        ])

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
        content = [b'q']
        if border_color.alpha < 1:
            gs_name = self._add_opacity(page, stroke=border_color.alpha)
            content.append(f'{gs_name} gs'.encode('latin-1'))

        content.extend([
            f'{_num(border_width)} w'.encode('latin-1'),
            f'{_rgb(border_color)} RG'.encode('latin-1'),
            f'{_num(x)} {_num(y)} {_num(width)} {_num(height)} re'.encode('latin-1'),
            b'S',
            b'Q',
        ])
        self._append_content(page, content)

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
        lines = text.replace('\r\n', '\n').replace('\r', '\n').split('\n')
        encoded_lines = [self._escape_pdf_string(line) for line in lines]

        base_font = self.standard_font(font_name) or self.default_font
        font_name_res = page.add_resource(self._font_dict(base_font), pikepdf.Name.Font, prefix='F')

        content = [b'q']
        if color.alpha < 1:
            gs_name = self._add_opacity(page, fill=color.alpha)
            content.append(f'{gs_name} gs'.encode('latin-1'))

        content.extend([
            b'BT',
            f'{font_name_res} {_num(font_size)} Tf'.encode('latin-1'),
            f'{_num(font_size * self.line_height_ratio)} TL'.encode('latin-1'),
            f'{_rgb(color)} rg'.encode('latin-1'),
            f'1 0 0 1 {_num(x)} {_num(y)} Tm'.encode('latin-1'),
        ])

        for i, encoded in enumerate(encoded_lines):
            if i > 0:
                content.append(b'T*')
            content.append(b'(' + encoded + b') Tj')

        content.extend([b'ET', b'Q'])
        self._append_content(page, content)

        Print("DEBUG", f"Drew {len(lines)} line{'s' if len(lines) != 1 else ''} of text in {base_font} {font_size}pt")

    # ------------------------------------------------------------------
    # Georeference
    # ------------------------------------------------------------------

    def add_viewport(self, pdf: pikepdf.Pdf, page_index: int, viewport: Viewport) -> None:
        page = self.get_page(pdf, page_index)

        # One descriptor object, referenced from both the viewport and its measure
        gcs = pdf.make_indirect(pikepdf.Dictionary(
            Type=pikepdf.Name(f'/{viewport.gcs.type}'),
            WKT=pikepdf.String(viewport.gcs.wkt),
        ))

        measure = viewport.measure
        measure_dict = pikepdf.Dictionary(
            Type=pikepdf.Name.Measure,
            Subtype=pikepdf.Name(f'/{measure.subtype}'),
            Bounds=_exact(measure.bounds),
            GCS=gcs,
            GPTS=_exact(measure.gpts),
            LPTS=_exact(measure.lpts),
        )

        vp_dict = pikepdf.Dictionary(
            Type=pikepdf.Name.Viewport,
            Name=pikepdf.String(viewport.name),
            BBox=_exact(viewport.bbox),
            GCS=gcs,
            Measure=measure_dict,
        )

        vp_array = page.obj.get(pikepdf.Name.VP)
        if isinstance(vp_array, pikepdf.Array):
            vp_array.append(vp_dict)
        else:
            if vp_array is not None:
                Print("WARNING", f"Page {page_index}: /VP is not an array, replacing it")
            vp_array = pikepdf.Array([vp_dict])
            page.obj[pikepdf.Name.VP] = vp_array

        Print("DEBUG",
            f"Page {page_index}: added viewport '{viewport.name}' ({viewport.gcs.type}), "
            f"{len(vp_array)} viewport{'s' if len(vp_array) != 1 else ''} total"
        )

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------

    def standard_font(self, font_name: Optional[str]) -> Optional[str]:
        if not font_name:
            return None
        if font_name in self.STANDARD_FONTS:
            return self.STANDARD_FONTS[font_name]
        if font_name in self.STANDARD_FONTS.values():
            return font_name
        return None

    @property
    def standard_fonts(self) -> List[str]:
        return list(self.STANDARD_FONTS)

    def _font_dict(self, base_font: str) -> pikepdf.Dictionary:
        font = pikepdf.Dictionary(
            Type=pikepdf.Name.Font,
            Subtype=pikepdf.Name.Type1,
            BaseFont=pikepdf.Name(f'/{base_font}'),
        )
        if base_font not in self.SYMBOLIC_FONTS:
            font[pikepdf.Name.Encoding] = pikepdf.Name.WinAnsiEncoding
        return font

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _append_content(self, page: pikepdf.Page, commands: List[bytes]) -> None:
        if self.wrap_existing_contents and pikepdf.Name.Contents in page.obj:
            page.contents_add(b'q\n', prepend=True)
            page.contents_add(b'\nQ\n')
        page.contents_add(b'\n'.join(commands) + b'\n')

    def _add_opacity(self, page: pikepdf.Page, fill: float = 1.0, stroke: float = 1.0) -> pikepdf.Name:
        gs = pikepdf.Dictionary(
            Type=pikepdf.Name.ExtGState,
            ca=fill,
            CA=stroke,
        )
        return page.add_resource(gs, pikepdf.Name.ExtGState, prefix='GS')

    def _pdf_date(self, when: datetime) -> str:
        return when.strftime("D:%Y%m%d%H%M%S+00'00'")

    def _escape_pdf_string(self, text: str) -> bytes:
        """
        Encode and escape one line of text for a PDF string literal.

        Base 14 fonts are used with WinAnsiEncoding (Windows-1252), so text
        is encoded as cp1252. A few typographic characters outside cp1252 are
        mapped to ASCII look-alikes first; anything else raises UnencodableText.

        Special characters escaped in the literal:
        - Backslash: \\\\
        - Open paren: \\(
        - Close paren: \\)
        """
        try:
            encoded = text.encode('cp1252')
        except UnicodeEncodeError:
            replacements = {
                '\u2212': '-',   # Minus sign
                '\u2010': '-',   # Hyphen
                '\u2011': '-',   # Non-breaking hyphen
                '\u2032': "'",   # Prime
                '\u2033': '"',   # Double prime
                '\u2009': ' ',   # Thin space
                '\u202f': ' ',   # Narrow no-break space
                '\ufb01': 'fi',  # fi ligature
                '\ufb02': 'fl',  # fl ligature
            }
            for unicode_char, ascii_char in replacements.items():
                text = text.replace(unicode_char, ascii_char)

            unencodable = ''.join(dict.fromkeys(c for c in text if not _cp1252(c)))
            if unencodable:
                raise UnencodableText(unencodable)
            encoded = text.encode('cp1252')

        encoded = encoded.replace(b'\\', b'\\\\')
        encoded = encoded.replace(b'(', b'\\(')
        encoded = encoded.replace(b')', b'\\)')
        encoded = encoded.replace(b'\t', b'\\t')
        return encoded

    @property
    def name(self) -> str:
        """Engine identifier."""
        return "pikepdf"


def _num(value: float) -> str:
    """Format a number for a content stream: no exponent, no trailing zeros."""
    text = f'{float(value):.4f}'.rstrip('0').rstrip('.')
    return '0' if text in ('', '-0') else text


def _rgb(color: Rgba) -> str:
    return ' '.join(_num(channel) for channel in color.rgb)


def _cp1252(char: str) -> bool:
    try:
        char.encode('cp1252')
    except UnicodeEncodeError:
        return False
    return True


def _exact(values) -> pikepdf.Array:
    """Number array that keeps every digit of float inputs; pikepdf writes float Reals with 6 decimals."""
    return pikepdf.Array([Decimal(repr(v)) if isinstance(v, float) else v for v in values])
