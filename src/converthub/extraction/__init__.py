"""PDF text extraction and layout reconstruction modules."""

from .pdf import (
    Fragment,
    PageText,
    PdfDocument,
    PdfTextExtractor,
    effective_font_size,
    fragment_from_span,
    fragments_from_text_dict,
)

from .fonts import (
    FontStyle,
    classify_font,
    BOLD_KEYWORDS,
    ITALIC_KEYWORDS,
    FAMILY_KEYWORDS,
)

from .geometry import (
    avg_char_width,
    horizontal_gap,
    needs_space,
    to_half_points,
    horizontal_extent,
    is_centered,
    shares_edge,
)

from .lines import (
    TextLine,
    LineBuildResult,
    fragments_to_frame,
    assign_line_ids,
    join_fragment_text,
    make_line,
    build_lines,
    build_lines_with_result,
)

from .runs import (
    Run,
    build_runs,
    merge_adjacent_runs,
    space_run_like,
)

from .paragraphs import (
    Paragraph,
    median_font_size,
    typical_line_gap,
    classify_heading,
    detect_list_prefix,
    detect_alignment,
    finalize_paragraph,
    segment_paragraphs,
    LIST_PREFIX_RX,
)

__all__ = [
    # PDF extraction
    "Fragment",
    "PageText",
    "PdfDocument",
    "PdfTextExtractor",
    "effective_font_size",
    "fragment_from_span",
    "fragments_from_text_dict",
    # Fonts
    "FontStyle",
    "classify_font",
    "BOLD_KEYWORDS",
    "ITALIC_KEYWORDS",
    "FAMILY_KEYWORDS",
    # Geometry
    "avg_char_width",
    "horizontal_gap",
    "needs_space",
    "to_half_points",
    "horizontal_extent",
    "is_centered",
    "shares_edge",
    # Line building
    "TextLine",
    "LineBuildResult",
    "fragments_to_frame",
    "assign_line_ids",
    "join_fragment_text",
    "make_line",
    "build_lines",
    "build_lines_with_result",
    # Runs
    "Run",
    "build_runs",
    "merge_adjacent_runs",
    "space_run_like",
    # Paragraphs
    "Paragraph",
    "median_font_size",
    "typical_line_gap",
    "classify_heading",
    "detect_list_prefix",
    "detect_alignment",
    "finalize_paragraph",
    "segment_paragraphs",
    "LIST_PREFIX_RX",
]
