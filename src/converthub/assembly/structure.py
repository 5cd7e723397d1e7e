"""
Document assembly: paragraphs to target-format structures.

This module converts the classified paragraphs of each page into
serializer-neutral structural objects that mirror the word-processing
format's model:
- TextSpan: a styled run (bold, italic, half-point size, family, colour)
- StructuredParagraph: spans plus heading tier, spacing, indent, alignment
- PageSection: one PDF page with uniform 1-inch margins
- DocumentModel: metadata plus ordered sections

Units follow the target format: sizes in half-points, spacing/indent/margins
in twips (1/20 pt), line spacing in 240ths of a line.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence

from converthub.config import ConversionConfig
from converthub.constants import (
    ALIGN_LEFT,
    PLACEHOLDER_COLOR,
    PLACEHOLDER_HALF_POINTS,
    PLACEHOLDER_TEXT,
    TWIPS_PER_INCH,
)
from converthub.extraction.paragraphs import Paragraph
from converthub.extraction.runs import Run

logger = logging.getLogger(__name__)

# Code points XML 1.0 cannot carry: C0 controls other than tab, LF and CR,
# lone surrogates, U+FFFE and U+FFFF
XML_ILLEGAL_RX = re.compile(
    r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]"
)


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class TextSpan:
    """A styled text span in the target document."""
    text: str
    bold: bool = False
    italic: bool = False
    half_points: Optional[int] = None
    font_family: Optional[str] = None
    color: Optional[str] = None

    @classmethod
    def from_run(cls, run: Run) -> "TextSpan":
        return cls(
            text=xml_safe_text(run.text),
            bold=run.bold,
            italic=run.italic,
            half_points=run.half_points,
            font_family=run.font_family,
        )


@dataclass
class StructuredParagraph:
    """
    One paragraph node of the target document.

    Attributes:
        spans: Styled text spans.
        heading_level: Heading tier 1-3, or None for body text.
        space_before: Space before, twips.
        space_after: Space after, twips.
        line_spacing: Line height in 240ths of a line.
        left_indent: Left indent, twips.
        alignment: "left", "center" or "right".
        page_break: Emit a page break and no text.
    """
    spans: List[TextSpan] = field(default_factory=list)
    heading_level: Optional[int] = None
    space_before: Optional[int] = None
    space_after: Optional[int] = None
    line_spacing: Optional[int] = None
    left_indent: Optional[int] = None
    alignment: str = ALIGN_LEFT
    page_break: bool = False

    @property
    def text(self) -> str:
        return "".join(s.text for s in self.spans)


@dataclass
class PageSection:
    """The paragraphs of one PDF page, with page margins in twips."""
    page_number: int
    paragraphs: List[StructuredParagraph] = field(default_factory=list)
    margin_top: int = TWIPS_PER_INCH
    margin_right: int = TWIPS_PER_INCH
    margin_bottom: int = TWIPS_PER_INCH
    margin_left: int = TWIPS_PER_INCH
    is_placeholder: bool = False


@dataclass
class DocumentModel:
    """Full document handed to the serializer."""
    title: str
    creator: str
    description: str
    sections: List[PageSection] = field(default_factory=list)

    @property
    def paragraph_count(self) -> int:
        return sum(len(s.paragraphs) for s in self.sections)


# =============================================================================
# PARAGRAPH ASSEMBLY
# =============================================================================

def xml_safe_text(text: str) -> str:
    """
    Drop characters the target format cannot store.

    Broken font encodings often map glyphs to control characters; those are
    removed rather than failing the whole document.

    Example:
        >>> xml_safe_text("Price\\x03list")
        'Pricelist'
    """
    return XML_ILLEGAL_RX.sub("", text)


def rewrite_list_spans(spans: Sequence[TextSpan], prefix: str) -> List[TextSpan]:
    """
    Normalize a list paragraph's leading prefix to "<prefix> ".

    The detected prefix is removed from the start of the first span and
    re-inserted in normalized form, followed by exactly one space.

    Example:
        >>> rewrite_list_spans([TextSpan("•Item")], "•")[0].text
        '• Item'
    """
    spans = list(spans)
    bare = prefix.strip()
    if not spans or not bare:
        return spans

    first = spans[0]
    rest = first.text.lstrip()
    if rest.startswith(bare):
        rest = rest[len(bare):]
    rest = rest.lstrip()

    # The first span held only the prefix; drop leading space from the next one
    if not rest and len(spans) > 1:
        following = spans[1].text.lstrip()
        if following:
            spans[1] = replace(spans[1], text=following)
        else:
            del spans[1]

    spans[0] = replace(first, text=f"{bare} {rest}")
    return spans


def assemble_paragraph(
    paragraph: Paragraph,
    config: Optional[ConversionConfig] = None,
) -> StructuredParagraph:
    """
    Convert one classified paragraph into a structural paragraph node.

    Args:
        paragraph: Classified paragraph.
        config: Spacing and indent settings (defaults when None).

    Returns:
        StructuredParagraph ready for serialization.
    """
    config = config or ConversionConfig()
    if paragraph.page_break:
        return StructuredParagraph(page_break=True)

    spans = [TextSpan.from_run(r) for r in paragraph.runs]
    node = StructuredParagraph(spans=spans, alignment=paragraph.alignment)

    if paragraph.is_heading:
        node.heading_level = paragraph.heading_level or 3
        node.space_before = config.heading_space_before_twips
        node.space_after = config.heading_space_after_twips
    else:
        node.space_after = config.body_space_after_twips
        node.line_spacing = config.body_line_spacing

    if paragraph.is_list:
        node.spans = rewrite_list_spans(node.spans, paragraph.list_prefix)
        node.left_indent = config.list_indent_twips

    return node


def assemble_paragraphs(
    paragraphs: Sequence[Paragraph],
    config: Optional[ConversionConfig] = None,
) -> List[StructuredParagraph]:
    """Convert a page's paragraphs into structural paragraph nodes."""
    config = config or ConversionConfig()
    return [assemble_paragraph(p, config) for p in paragraphs]


# =============================================================================
# PAGE SECTIONS
# =============================================================================

def _section(page_number: int, config: ConversionConfig) -> PageSection:
    margin = config.page_margin_twips
    return PageSection(
        page_number=page_number,
        margin_top=margin,
        margin_right=margin,
        margin_bottom=margin,
        margin_left=margin,
    )


def assemble_page(
    page_number: int,
    paragraphs: Sequence[Paragraph],
    config: Optional[ConversionConfig] = None,
) -> PageSection:
    """
    Wrap one page's paragraphs into a section with uniform margins.

    Args:
        page_number: 1-indexed PDF page number.
        paragraphs: Classified paragraphs of that page.
        config: Layout settings (defaults when None).

    Returns:
        PageSection for the page.
    """
    config = config or ConversionConfig()
    section = _section(page_number, config)
    section.paragraphs = assemble_paragraphs(paragraphs, config)
    return section


def placeholder_section(
    page_number: int,
    config: Optional[ConversionConfig] = None,
) -> PageSection:
    """
    Section for a page without extractable text.

    Contains a single italic, gray, reduced-size paragraph naming the page
    and suggesting OCR.
    """
    config = config or ConversionConfig()
    logger.warning(f"Page {page_number}: no extractable text, emitting placeholder")

    section = _section(page_number, config)
    section.is_placeholder = True
    section.paragraphs = [
        StructuredParagraph(spans=[
            TextSpan(
                text=PLACEHOLDER_TEXT.format(page_number=page_number),
                italic=True,
                half_points=PLACEHOLDER_HALF_POINTS,
                color=PLACEHOLDER_COLOR,
            )
        ])
    ]
    return section
