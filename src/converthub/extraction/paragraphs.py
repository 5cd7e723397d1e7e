"""
Paragraph segmentation and classification.

This module consumes the top-to-bottom lines of one page and groups them into
paragraphs, then classifies each paragraph as a heading (with level), a list
item (with its prefix) or body text.

Algorithm Overview:
1. Compute page statistics: median line font size and the typical line gap
   (median of consecutive gaps, ignoring gaps of 4+ median font sizes)
2. Walk non-empty lines; break the paragraph when the gap to the previous
   line exceeds typical_gap * 1.4, or the font size / bold flag changes
3. Accumulate each line's runs, joined by a single-space run
4. On finalize: heading level from the size ratio to the page median, list
   prefix from the leading text, alignment from line geometry (opt-in)

Statistics are per page; nothing is carried across pages.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence

import numpy as np

from converthub.config import ConversionConfig
from converthub.constants import ALIGN_CENTER, ALIGN_LEFT, ALIGN_RIGHT
from converthub.extraction.geometry import is_centered, shares_edge, to_half_points
from converthub.extraction.lines import TextLine
from converthub.extraction.runs import Run, build_runs, merge_adjacent_runs, space_run_like

logger = logging.getLogger(__name__)


# =============================================================================
# REGEX PATTERNS
# =============================================================================

# Bullet glyphs, "1. " / "2) " enumerations, "a. " / "B) " letters
LIST_PREFIX_RX = re.compile(
    r"^(\s*)("
    r"[•‣◦⁃∙▪●\-\*]"
    r"|\d+[.)]\s"
    r"|[a-zA-Z][.)]\s"
    r")"
)

# Lines narrower than this share of the page can be centred single lines
CENTER_MAX_WIDTH_PCT = 0.6


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass
class Paragraph:
    """
    A vertically grouped block of lines.

    Attributes:
        text: Line texts joined with single spaces.
        runs: Style runs; adjacent runs always differ in style.
        is_heading: Heading flag.
        heading_level: 1-3 for headings, None otherwise.
        is_list: List item flag.
        list_prefix: Detected prefix, verbatim ("1. ", "•").
        alignment: "left", "center" or "right".
        page_break: Structural page-break marker with no content.
        lines: Source lines in top-to-bottom order.
    """
    text: str = ""
    runs: List[Run] = field(default_factory=list)
    is_heading: bool = False
    heading_level: Optional[int] = None
    is_list: bool = False
    list_prefix: str = ""
    alignment: str = ALIGN_LEFT
    page_break: bool = False
    lines: List[TextLine] = field(default_factory=list)

    @classmethod
    def break_marker(cls) -> "Paragraph":
        """A page-break separator paragraph."""
        return cls(page_break=True)


# =============================================================================
# PAGE STATISTICS
# =============================================================================

def median_font_size(lines: Sequence[TextLine], default: float = 12.0) -> float:
    """
    Median of the lines' average font sizes (upper median for even counts).

    Example:
        >>> median_font_size([])
        12.0
    """
    sizes = np.sort(np.array([line.avg_font_size for line in lines], dtype=float))
    if sizes.size == 0:
        return float(default)
    median = float(sizes[sizes.size // 2])
    return median if median > 0 else float(default)


def typical_line_gap(
    lines: Sequence[TextLine],
    median_size: float,
    config: Optional[ConversionConfig] = None,
) -> float:
    """
    Typical baseline-to-baseline distance between consecutive lines.

    Only gaps in (0, median_size * typical_gap_cap_factor) are considered, so
    paragraph and section gaps do not skew the estimate.

    Args:
        lines: Lines in top-to-bottom order.
        median_size: Page median font size.
        config: Heuristic thresholds (defaults when None).

    Returns:
        Upper median of the valid gaps, or median_size * 1.2 when none.
    """
    config = config or ConversionConfig()
    cap = median_size * config.typical_gap_cap_factor
    gaps = np.array(
        [abs(lines[i].y - lines[i + 1].y) for i in range(len(lines) - 1)],
        dtype=float,
    )
    gaps = np.sort(gaps[(gaps > 0) & (gaps < cap)])
    if gaps.size == 0:
        return median_size * config.default_line_gap_factor
    return float(gaps[gaps.size // 2])


# =============================================================================
# CLASSIFICATION
# =============================================================================

def classify_heading(
    avg_run_size: float,
    median_size: float,
    config: Optional[ConversionConfig] = None,
) -> Optional[int]:
    """
    Heading level from the ratio of paragraph size to page median size.

    Args:
        avg_run_size: Mean run size of the paragraph, in points.
        median_size: Page median font size, in points.
        config: Heuristic thresholds (defaults when None).

    Returns:
        1, 2 or 3 for headings; None for body text.

    Example:
        >>> classify_heading(15.0, 12.0)
        3
        >>> classify_heading(14.9, 12.0) is None
        True
    """
    config = config or ConversionConfig()
    if median_size <= 0:
        median_size = config.default_font_size
    ratio = avg_run_size / median_size

    if ratio < config.heading_size_factor:
        return None
    if ratio >= config.heading_level1_factor:
        return 1
    if ratio >= config.heading_level2_factor:
        return 2
    return 3


def detect_list_prefix(text: str) -> Optional[str]:
    """
    Detect a bullet, numbered or lettered list prefix.

    Args:
        text: Paragraph text.

    Returns:
        The prefix exactly as matched (without leading whitespace), or None.

    Example:
        >>> detect_list_prefix("1. First item")
        '1. '
        >>> detect_list_prefix("Regular sentence.") is None
        True
    """
    match = LIST_PREFIX_RX.match(text)
    return match.group(2) if match else None


def detect_alignment(
    lines: Sequence[TextLine],
    page_width: Optional[float],
    config: Optional[ConversionConfig] = None,
) -> str:
    """
    Infer paragraph alignment from line geometry.

    Centred: every line is centred on the page, and either the left edges
    vary between lines or a single line is clearly narrower than the body.
    Right: the right edges line up while the left edges do not, or a single
    line starts past the page centre.

    Args:
        lines: Paragraph lines.
        page_width: Page width; without it alignment is always left.
        config: Heuristic thresholds (defaults when None).

    Returns:
        "left", "center" or "right".
    """
    config = config or ConversionConfig()
    if not lines or not page_width or page_width <= 0:
        return ALIGN_LEFT

    mid_x = page_width / 2
    edge_tol = config.alignment_edge_tolerance
    lefts = [line.min_x for line in lines]
    rights = [line.max_x for line in lines]

    all_centered = all(
        is_centered(line.center_x, mid_x, page_width, config.alignment_tolerance_pct)
        for line in lines
    )
    if all_centered:
        if len(lines) > 1 and not shares_edge(lefts, edge_tol):
            return ALIGN_CENTER
        if len(lines) == 1 and lines[0].width < page_width * CENTER_MAX_WIDTH_PCT:
            return ALIGN_CENTER

    if len(lines) > 1:
        if shares_edge(rights, edge_tol) and not shares_edge(lefts, edge_tol):
            return ALIGN_RIGHT
    elif lines[0].min_x > mid_x:
        return ALIGN_RIGHT

    return ALIGN_LEFT


# =============================================================================
# SEGMENTATION
# =============================================================================

def _trim_line_runs(runs: List[Run]) -> List[Run]:
    """Strip outer whitespace from a line's runs so they match the line text."""
    runs = list(runs)
    while runs and not runs[0].text.lstrip():
        runs.pop(0)
    if runs:
        runs[0] = replace(runs[0], text=runs[0].text.lstrip())
    while runs and not runs[-1].text.rstrip():
        runs.pop()
    if runs:
        runs[-1] = replace(runs[-1], text=runs[-1].text.rstrip())
    return runs


def finalize_paragraph(
    lines: Sequence[TextLine],
    runs: Sequence[Run],
    median_size: float,
    config: Optional[ConversionConfig] = None,
    page_width: Optional[float] = None,
) -> Paragraph:
    """
    Build and classify a paragraph from accumulated lines and runs.

    Args:
        lines: Member lines in order.
        runs: Accumulated runs including inter-line space runs.
        median_size: Page median font size.
        config: Heuristic thresholds (defaults when None).
        page_width: Page width for alignment detection.

    Returns:
        Classified Paragraph.
    """
    config = config or ConversionConfig()
    text = " ".join(line.text for line in lines)
    merged = merge_adjacent_runs(runs)

    if not merged:
        logger.warning(f"Paragraph without runs, synthesizing default run: {text[:40]!r}")
        merged = [Run(
            text=text,
            bold=False,
            italic=False,
            half_points=to_half_points(median_size),
            font_family=config.default_font_family,
        )]

    avg_run_size = float(np.mean([r.half_points for r in merged])) / 2
    level = classify_heading(avg_run_size, median_size, config)
    prefix = detect_list_prefix(text)

    alignment = ALIGN_LEFT
    if config.detect_alignment:
        alignment = detect_alignment(lines, page_width, config)

    return Paragraph(
        text=text,
        runs=merged,
        is_heading=level is not None,
        heading_level=level,
        is_list=prefix is not None,
        list_prefix=prefix or "",
        alignment=alignment,
        lines=list(lines),
    )


def segment_paragraphs(
    lines: Sequence[TextLine],
    config: Optional[ConversionConfig] = None,
    page_width: Optional[float] = None,
) -> List[Paragraph]:
    """
    Group one page's lines into classified paragraphs.

    Args:
        lines: Lines in top-to-bottom order, as produced by build_lines.
        config: Heuristic thresholds (defaults when None).
        page_width: Page width, used only for alignment detection.

    Returns:
        Paragraphs in source order. Lines with empty text are skipped and
        never start, extend or break a paragraph.
    """
    config = config or ConversionConfig()
    if not lines:
        return []

    median_size = median_font_size(lines, config.default_font_size)
    typical_gap = typical_line_gap(lines, median_size, config)
    logger.debug(
        f"Segmenting {len(lines)} lines: median size {median_size:.2f}, "
        f"typical gap {typical_gap:.2f}"
    )

    paragraphs: List[Paragraph] = []
    cur_lines: List[TextLine] = []
    cur_runs: List[Run] = []
    prev: Optional[TextLine] = None

    for line in lines:
        if not line.text:
            continue

        if prev is not None and cur_lines:
            gap = abs(prev.y - line.y)
            gap_break = gap > typical_gap * config.paragraph_gap_factor
            style_changed = (
                abs(line.avg_font_size - prev.avg_font_size) > config.style_size_tolerance
                or line.is_bold != prev.is_bold
            )
            if gap_break or style_changed:
                paragraphs.append(
                    finalize_paragraph(cur_lines, cur_runs, median_size, config, page_width)
                )
                cur_lines, cur_runs = [], []

        line_runs = _trim_line_runs(build_runs(line, config))
        if cur_lines and line_runs:
            cur_runs.append(space_run_like(line_runs[0]))
        cur_runs.extend(line_runs)
        cur_lines.append(line)
        prev = line

    if cur_lines:
        paragraphs.append(
            finalize_paragraph(cur_lines, cur_runs, median_size, config, page_width)
        )

    logger.debug(
        f"Segmented {len(paragraphs)} paragraphs "
        f"({sum(p.is_heading for p in paragraphs)} headings, "
        f"{sum(p.is_list for p in paragraphs)} list items)"
    )
    return paragraphs
