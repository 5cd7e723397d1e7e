"""
DOCX serialization of an assembled DocumentModel using python-docx.

Each PageSection becomes one document section (new-page section breaks), so
every PDF page starts on a fresh Word page with its own margins.
"""

import logging
from io import BytesIO

from docx import Document
from docx.enum.section import WD_SECTION
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_BREAK
from docx.shared import Pt, RGBColor, Twips

from converthub.assembly.structure import DocumentModel, PageSection, StructuredParagraph
from converthub.constants import ALIGN_CENTER, ALIGN_LEFT, ALIGN_RIGHT, LINE_SPACING_UNIT

logger = logging.getLogger(__name__)

ALIGNMENT_MAP = {
    ALIGN_LEFT: WD_ALIGN_PARAGRAPH.LEFT,
    ALIGN_CENTER: WD_ALIGN_PARAGRAPH.CENTER,
    ALIGN_RIGHT: WD_ALIGN_PARAGRAPH.RIGHT,
}

HEADING_STYLES = {
    1: "Heading 1",
    2: "Heading 2",
    3: "Heading 3",
}


def _apply_margins(docx_section, section: PageSection) -> None:
    docx_section.top_margin = Twips(section.margin_top)
    docx_section.right_margin = Twips(section.margin_right)
    docx_section.bottom_margin = Twips(section.margin_bottom)
    docx_section.left_margin = Twips(section.margin_left)


def _add_paragraph(doc, node: StructuredParagraph) -> None:
    """Append one structural paragraph to the document body."""
    if node.page_break:
        doc.add_paragraph().add_run().add_break(WD_BREAK.PAGE)
        return

    style = HEADING_STYLES.get(node.heading_level) if node.heading_level else None
    para = doc.add_paragraph(style=style)

    fmt = para.paragraph_format
    if node.space_before is not None:
        fmt.space_before = Twips(node.space_before)
    if node.space_after is not None:
        fmt.space_after = Twips(node.space_after)
    if node.line_spacing is not None:
        fmt.line_spacing = node.line_spacing / LINE_SPACING_UNIT
    if node.left_indent is not None:
        fmt.left_indent = Twips(node.left_indent)
    para.alignment = ALIGNMENT_MAP.get(node.alignment, WD_ALIGN_PARAGRAPH.LEFT)

    for span in node.spans:
        run = para.add_run(span.text)
        run.bold = span.bold
        run.italic = span.italic
        if span.half_points:
            run.font.size = Pt(span.half_points / 2)
        if span.font_family:
            run.font.name = span.font_family
        if span.color:
            run.font.color.rgb = RGBColor.from_string(span.color)


def render_docx(document: DocumentModel) -> bytes:
    """
    Serialize a DocumentModel to DOCX bytes.

    Args:
        document: Assembled document with metadata and page sections.

    Returns:
        The .docx file content.
    """
    doc = Document()

    props = doc.core_properties
    props.author = document.creator
    props.title = document.title
    props.comments = document.description

    for idx, section in enumerate(document.sections):
        docx_section = doc.sections[-1] if idx == 0 else doc.add_section(WD_SECTION.NEW_PAGE)
        _apply_margins(docx_section, section)
        for node in section.paragraphs:
            _add_paragraph(doc, node)

    buffer = BytesIO()
    doc.save(buffer)
    data = buffer.getvalue()

    logger.info(
        f"Rendered DOCX: {len(document.sections)} sections, "
        f"{document.paragraph_count} paragraphs, {len(data)} bytes"
    )
    return data
