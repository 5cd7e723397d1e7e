"""Document assembly and DOCX serialization."""

from .structure import (
    TextSpan,
    StructuredParagraph,
    PageSection,
    DocumentModel,
    rewrite_list_spans,
    assemble_paragraph,
    assemble_paragraphs,
    assemble_page,
    placeholder_section,
)

from .docx_writer import (
    render_docx,
    ALIGNMENT_MAP,
    HEADING_STYLES,
)

__all__ = [
    # Structure
    "TextSpan",
    "StructuredParagraph",
    "PageSection",
    "DocumentModel",
    "rewrite_list_spans",
    "assemble_paragraph",
    "assemble_paragraphs",
    "assemble_page",
    "placeholder_section",
    # Serialization
    "render_docx",
    "ALIGNMENT_MAP",
    "HEADING_STYLES",
]
