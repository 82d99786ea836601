#!/usr/bin/env python3
"""
Functional tests for the pikepdf engine.

Each test drives the engine against a real document and inspects the
resulting PDF objects and content stream operators.
"""

import pikepdf
import pytest

from conftest import build_pdf, open_pdf, operands, operators, resources
from engines.pdf import PDF_REGISTRY, get_pdf_engine
from errors import PageIndexOutOfRange, UnencodableText
from processors.color import hex_to_rgba
from processors.georeference import build_viewport
from utilities import Print

WGS84 = 'GEOGCS["WGS 84",DATUM["WGS_1984",SPHEROID["WGS 84",6378137,298.257223563]]]'
PROJECTED = 'PROJCS["NAD83 / UTM zone 17N",' + WGS84 + ']'


def test_registry():
    assert "pikepdf" in PDF_REGISTRY
    with pytest.raises(ValueError, match="Available engines: pikepdf"):
        get_pdf_engine("pdfium", {})


def test_default_font_must_be_standard():
    with pytest.raises(ValueError, match="default_font"):
        get_pdf_engine("pikepdf", {"default_font": "Comic Sans"})


def test_load_save_roundtrip_keeps_pages(engine):
    pdf = engine.load(build_pdf((100, 100), (200, 200)))
    assert engine.page_count(pdf) == 2

    reopened = open_pdf(engine.save(pdf))
    assert len(reopened.pages) == 2


def test_malformed_pdf_propagates(engine):
    with pytest.raises(pikepdf.PdfError):
        engine.load(b"this is not a pdf")


@pytest.mark.parametrize("index", [-1, 1, 5])
def test_page_index_out_of_range(engine, blank_pdf, index):
    pdf = engine.load(blank_pdf)
    with pytest.raises(PageIndexOutOfRange):
        engine.get_page(pdf, index)
    # Also an IndexError for plain Python callers
    with pytest.raises(IndexError):
        engine.get_page(pdf, index)


def test_add_page_size(engine):
    pdf = engine.create()
    engine.add_page(pdf, 612, 792)
    assert [float(v) for v in pdf.pages[0].mediabox] == [0, 0, 612, 792]


def test_copy_pages_in_order(engine):
    target = engine.create()
    first = engine.load(build_pdf((100, 100), (200, 200)))
    second = engine.load(build_pdf((300, 300)))

    assert engine.copy_pages(target, first) == 2
    assert engine.copy_pages(target, second) == 1

    merged = open_pdf(engine.save(target))
    widths = [float(page.mediabox[2]) for page in merged.pages]
    assert widths == [100, 200, 300]


def test_metadata(engine):
    pdf = engine.create()
    engine.set_metadata(
        pdf,
        title="Site plan",
        author="Survey team",
        subject="Parcel 12",
        language="en-us",
        keywords=["map", "parcel"],
        producer="Vellum",
    )
    engine.add_page(pdf, 595, 842)
    saved = open_pdf(engine.save(pdf))

    info = saved.docinfo
    assert str(info.Title) == "Site plan"
    assert str(info.Author) == "Survey team"
    assert str(info.Subject) == "Parcel 12"
    assert str(info.Keywords) == "map parcel"
    assert str(info.Producer) == "Vellum"
    assert str(info.CreationDate).startswith("D:")
    assert str(saved.Root.Lang) == "en-us"


def test_metadata_skips_missing_fields(engine):
    pdf = engine.create()
    engine.set_metadata(pdf, producer="Vellum")
    assert pikepdf.Name.Title not in pdf.docinfo
    assert pikepdf.Name.Lang not in pdf.Root


def test_standard_font_names(engine):
    assert engine.standard_font("Helvetica") == "Helvetica"
    assert engine.standard_font("TimesRoman") == "Times-Roman"
    assert engine.standard_font("Times-Roman") == "Times-Roman"
    assert engine.standard_font("CourierBoldOblique") == "Courier-BoldOblique"
    assert engine.standard_font("Arial") is None
    assert engine.standard_font(None) is None
    assert len(engine.standard_fonts) == 14


def test_draw_text(engine, blank_pdf):
    pdf = engine.load(blank_pdf)
    page = engine.get_page(pdf, 0)
    engine.draw_text(page, "Hello (world)", 72, 700, "TimesRomanBold", 18, hex_to_rgba("FF0000"))

    saved = open_pdf(engine.save(pdf))
    page = saved.pages[0]

    fonts = resources(page, "Font")
    assert [str(font.BaseFont) for font in fonts] == ["/Times-Bold"]
    assert fonts[0].Encoding == pikepdf.Name.WinAnsiEncoding

    assert [bytes(ops[0]) for ops in operands(page, "Tj")] == [b"Hello (world)"]
    assert [[float(v) for v in ops] for ops in operands(page, "rg")] == [[1, 0, 0]]
    assert [[float(v) for v in ops] for ops in operands(page, "Tm")] == [[1, 0, 0, 1, 72, 700]]

    # Opaque text needs no graphics state
    assert "gs" not in operators(page)


def test_draw_text_multiline_and_opacity(engine, blank_pdf):
    pdf = engine.load(blank_pdf)
    page = engine.get_page(pdf, 0)
    engine.draw_text(page, "first\nsecond", 10, 20, "Helvetica", 10, hex_to_rgba("00000080"))

    saved = open_pdf(engine.save(pdf))
    page = saved.pages[0]
    ops = operators(page)

    assert ops.count("Tj") == 2
    assert "T*" in ops
    assert "gs" in ops

    states = resources(page, "ExtGState")
    assert len(states) == 1
    assert float(states[0].ca) == pytest.approx(128 / 255)

    assert float(operands(page, "TL")[0][0]) == pytest.approx(12)


def test_draw_text_without_font_uses_default(engine, blank_pdf):
    pdf = engine.load(blank_pdf)
    page = engine.get_page(pdf, 0)
    engine.draw_text(page, "x", 0, 0, None, 12, hex_to_rgba())

    assert [str(font.BaseFont) for font in resources(page, "Font")] == ["/Helvetica"]


def test_draw_text_symbol_font_has_no_winansi(engine, blank_pdf):
    pdf = engine.load(blank_pdf)
    page = engine.get_page(pdf, 0)
    engine.draw_text(page, "abc", 0, 0, "Symbol", 12, hex_to_rgba())

    font = resources(page, "Font")[0]
    assert pikepdf.Name.Encoding not in font


def test_draw_text_maps_typographic_characters(engine, blank_pdf):
    pdf = engine.load(blank_pdf)
    page = engine.get_page(pdf, 0)
    engine.draw_text(page, "café \u2212 \ufb01ne", 0, 0, "Helvetica", 12, hex_to_rgba())

    assert [bytes(ops[0]) for ops in operands(page, "Tj")] == ["café - fine".encode("cp1252")]


def test_draw_text_rejects_characters_outside_winansi(engine, blank_pdf):
    pdf = engine.load(blank_pdf)
    page = engine.get_page(pdf, 0)

    with pytest.raises(UnencodableText, match="WinAnsi cannot encode") as excinfo:
        engine.draw_text(page, "Zürich 東京 Ω\n東", 0, 0, "Helvetica", 12, hex_to_rgba())

    assert excinfo.value.characters == "東京Ω"
    # Nothing was drawn and no font was registered
    assert operators(page) == []
    assert pikepdf.Name.Font not in page.obj.Resources


def test_draw_image_and_rectangle(engine, blank_pdf, png_bytes):
    pdf = engine.load(blank_pdf)
    page = engine.get_page(pdf, 0)
    image = engine.embed_image(pdf, png_bytes)
    engine.draw_image(page, image, 10, 20, 40, 30)
    engine.draw_rectangle(page, 10, 20, 40, 30, hex_to_rgba("0000FFCC"), 2)

    saved = open_pdf(engine.save(pdf))
    page = saved.pages[0]

    assert [[float(v) for v in ops] for ops in operands(page, "cm")] == [[40, 0, 0, 30, 10, 20]]
    assert [[float(v) for v in ops] for ops in operands(page, "re")] == [[10, 20, 40, 30]]
    assert [[float(v) for v in ops] for ops in operands(page, "RG")] == [[0, 0, 1]]
    assert [float(ops[0]) for ops in operands(page, "w")] == [2]

    states = resources(page, "ExtGState")
    assert float(states[0].CA) == pytest.approx(0.8)

    assert len(resources(page, "XObject")) == 1


def test_existing_content_is_wrapped(engine, blank_pdf):
    pdf = engine.load(blank_pdf)
    page = engine.get_page(pdf, 0)
    # Unbalanced state from another producer
    page.contents_add(b"2 0 0 2 0 0 cm\n")

    engine.draw_text(page, "x", 0, 0, "Helvetica", 12, hex_to_rgba())
    ops = operators(page)

    assert ops[0] == "q"
    assert ops.index("Q") < ops.index("BT")


def test_add_viewport(engine, blank_pdf):
    pdf = engine.load(blank_pdf)
    viewport = build_viewport([[0, 0], [100, 100]], [[10, 10], [10, 20], [20, 20], [20, 10]], WGS84)
    engine.add_viewport(pdf, 0, viewport)

    saved = open_pdf(engine.save(pdf))
    vp_array = saved.pages[0].obj.VP
    assert len(vp_array) == 1

    vp = vp_array[0]
    assert vp.Type == pikepdf.Name.Viewport
    assert str(vp.Name) == "Map"
    assert [float(v) for v in vp.BBox] == [0, 0, 100, 100]

    measure = vp.Measure
    assert measure.Type == pikepdf.Name.Measure
    assert measure.Subtype == pikepdf.Name.GEO
    assert [float(v) for v in measure.Bounds] == [0, 0, 0, 1, 1, 1, 1, 0]
    assert [float(v) for v in measure.LPTS] == [0, 0, 0, 1, 1, 1, 1, 0]
    assert [float(v) for v in measure.GPTS] == [10, 10, 10, 20, 20, 20, 20, 10]

    assert vp.GCS.Type == pikepdf.Name.GEOGCS
    assert str(vp.GCS.WKT) == WGS84

    # Both /GCS keys reference the same descriptor object
    assert vp.GCS.is_indirect
    assert vp.GCS.objgen == measure.GCS.objgen


def test_add_viewport_appends(engine, blank_pdf):
    pdf = engine.load(blank_pdf)
    first = build_viewport([[0, 0], [100, 100]], [[10, 10], [10, 20], [20, 20], [20, 10]], WGS84, name="Overview")
    second = build_viewport([[100, 100], [200, 250]], [[1, 2], [3, 4], [5, 6], [7, 8]], PROJECTED, name="Detail")

    engine.add_viewport(pdf, 0, first)
    engine.add_viewport(pdf, 0, second)
    Print("DEBUG", "Added two viewports to the same page")

    saved = open_pdf(engine.save(pdf))
    vp_array = saved.pages[0].obj.VP
    assert len(vp_array) == 2

    assert str(vp_array[0].Name) == "Overview"
    assert [float(v) for v in vp_array[0].BBox] == [0, 0, 100, 100]
    assert vp_array[0].GCS.Type == pikepdf.Name.GEOGCS

    assert str(vp_array[1].Name) == "Detail"
    assert [float(v) for v in vp_array[1].BBox] == [100, 100, 200, 250]
    assert vp_array[1].GCS.Type == pikepdf.Name.PROJCS
    assert vp_array[0].GCS.objgen != vp_array[1].GCS.objgen



def test_add_viewport_keeps_full_precision(engine, blank_pdf):
    pdf = engine.load(blank_pdf)
    viewport = build_viewport(
        [[12.3456789012, 0], [100, 100.0000001]],
        [[45.1234567891, -75.1234567891], [45.2, -75.1], [45.2, -75.0], [45.1, -75.0]],
        WGS84,
    )
    engine.add_viewport(pdf, 0, viewport)

    saved = open_pdf(engine.save(pdf))
    vp = saved.pages[0].obj.VP[0]
    assert [float(v) for v in vp.BBox] == [12.3456789012, 0, 100, 100.0000001]
    assert [float(v) for v in vp.Measure.GPTS][:2] == [45.1234567891, -75.1234567891]
    assert b"45.1234567891 -75.1234567891" in vp.Measure.GPTS.unparse()


def test_add_viewport_extends_indirect_array(engine, blank_pdf):
    pdf = engine.load(blank_pdf)
    page = engine.get_page(pdf, 0)
    page.obj.VP = pdf.make_indirect(pikepdf.Array())
    vp_objgen = page.obj.VP.objgen

    engine.add_viewport(pdf, 0, build_viewport([[0, 0], [1, 1]], [[0, 0], [0, 1], [1, 1], [1, 0]], WGS84))

    assert page.obj.VP.objgen == vp_objgen
    assert len(page.obj.VP) == 1

    saved = open_pdf(engine.save(pdf))
    vp_array = saved.pages[0].obj.VP
    assert vp_array.is_indirect
    assert str(vp_array[0].Name) == "Map"

def test_add_viewport_bad_page(engine, blank_pdf):
    pdf = engine.load(blank_pdf)
    viewport = build_viewport([[0, 0], [1, 1]], [[0, 0], [0, 1], [1, 1], [1, 0]], WGS84)
    with pytest.raises(PageIndexOutOfRange):
        engine.add_viewport(pdf, 3, viewport)
    assert pikepdf.Name.VP not in pdf.pages[0].obj
