from converthub.assembly.structure import (
    DocumentModel,
    PageSection,
    StructuredParagraph,
    TextSpan,
    assemble_page,
    assemble_paragraph,
    placeholder_section,
    rewrite_list_spans,
    xml_safe_text,
)
from converthub.config import ConversionConfig
from converthub.constants import ALIGN_CENTER
from converthub.extraction.paragraphs import Paragraph
from converthub.extraction.runs import Run


def test_heading_paragraph_spacing():
    paragraph = Paragraph(
        text="Title",
        runs=[Run("Title", bold=True, half_points=48, font_family="Arial")],
        is_heading=True,
        heading_level=1,
    )
    node = assemble_paragraph(paragraph)

    assert node.heading_level == 1
    assert (node.space_before, node.space_after) == (240, 200)
    assert node.line_spacing is None
    assert node.spans == [TextSpan("Title", bold=True, half_points=48, font_family="Arial")]


def test_body_paragraph_spacing():
    node = assemble_paragraph(Paragraph(text="Body", runs=[Run("Body")]))

    assert node.heading_level is None
    assert node.space_before is None
    assert node.space_after == 120
    assert node.line_spacing == 276
    assert node.left_indent is None


def test_list_paragraph_is_indented_and_prefix_normalized():
    paragraph = Paragraph(
        text="•Item one",
        runs=[Run("•Item one")],
        is_list=True,
        list_prefix="•",
    )
    node = assemble_paragraph(paragraph)

    assert node.left_indent == 720
    assert node.text == "• Item one"
    assert node.space_after == 120


def test_numbered_list_keeps_single_space():
    spans = rewrite_list_spans([TextSpan("1. First item")], "1. ")
    assert [s.text for s in spans] == ["1. First item"]


def test_list_prefix_in_its_own_span():
    spans = rewrite_list_spans(
        [TextSpan("-", bold=True), TextSpan("  bold then plain")],
        "-",
    )
    assert [s.text for s in spans] == ["- ", "bold then plain"]
    assert spans[0].bold


def test_alignment_is_carried():
    node = assemble_paragraph(Paragraph(text="x", runs=[Run("x")], alignment=ALIGN_CENTER))
    assert node.alignment == ALIGN_CENTER


def test_page_break_paragraph():
    node = assemble_paragraph(Paragraph.break_marker())
    assert node.page_break
    assert node.spans == []


def test_assemble_page_uses_configured_margins():
    config = ConversionConfig(page_margin_twips=1080)
    section = assemble_page(3, [Paragraph(text="x", runs=[Run("x")])], config)

    assert section.page_number == 3
    assert (section.margin_top, section.margin_right,
            section.margin_bottom, section.margin_left) == (1080, 1080, 1080, 1080)
    assert len(section.paragraphs) == 1
    assert not section.is_placeholder


def test_placeholder_section():
    section = placeholder_section(4)

    assert section.is_placeholder
    assert section.margin_left == 1440
    assert len(section.paragraphs) == 1

    span = section.paragraphs[0].spans[0]
    assert "Page 4" in span.text
    assert "OCR" in span.text
    assert span.italic
    assert span.half_points == 20
    assert span.color == "999999"


def test_document_paragraph_count():
    document = DocumentModel(
        title="t",
        creator="c",
        description="d",
        sections=[
            PageSection(1, [StructuredParagraph(), StructuredParagraph()]),
            PageSection(2, [StructuredParagraph()]),
        ],
    )
    assert document.paragraph_count == 3


def test_span_text_drops_xml_illegal_characters():
    span = TextSpan.from_run(Run("A\x00B\x08C\x0bD\x1fE\ufffeF"))
    assert span.text == "ABCDEF"


def test_xml_safe_text_keeps_tabs_newlines_and_unicode():
    assert xml_safe_text("a\tb\nc\rd • é") == "a\tb\nc\rd • é"
