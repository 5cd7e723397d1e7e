"""
Line-level clustering of positioned text fragments.

This module groups a page's flat fragment list into horizontal text lines:
- Fragments are sorted top-to-bottom (y descending), then left-to-right
- Consecutive fragments within the y tolerance of a line's anchor join it
- Each line is ordered by x and its text is joined with inferred spaces
- Per-line style aggregates (average size, majority bold/italic) are computed

The sort uses a total order over (y, x, text, width, font, size), so the
clustering depends only on fragment content and position, never on the
order the extractor produced them in.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from converthub.config import ConversionConfig
from converthub.extraction.fonts import classify_font
from converthub.extraction.geometry import horizontal_extent, needs_space
from converthub.extraction.pdf import Fragment

logger = logging.getLogger(__name__)

# Reading-order sort: top-to-bottom, then left-to-right, then content tie-breaks
READING_ORDER_KEYS = ["y", "x", "text", "width", "font_name", "font_size"]
READING_ORDER_ASC = [False, True, True, True, True, True]

# Left-to-right order within a finalized line
LINE_ORDER_KEYS = ["x", "text", "width", "font_name", "font_size", "y"]


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass
class TextLine:
    """
    A horizontal cluster of fragments sharing a baseline.

    Attributes:
        fragments: Fragments ordered by x ascending.
        text: Concatenated text with inferred spaces, trimmed.
        y: Y-position of the first (leftmost) fragment.
        min_x: Left edge of the line.
        max_x: Right edge of the line.
        avg_font_size: Mean fragment font size.
        is_bold: More than half of the fragments are bold.
        is_italic: More than half of the fragments are italic.
    """
    fragments: List[Fragment]
    text: str
    y: float
    min_x: float
    max_x: float
    avg_font_size: float
    is_bold: bool = False
    is_italic: bool = False

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def center_x(self) -> float:
        return (self.min_x + self.max_x) / 2


@dataclass
class LineBuildResult:
    """Result of line building for one page."""
    lines: List[TextLine] = field(default_factory=list)
    line_count: int = 0
    fragment_count: int = 0


# =============================================================================
# CORE FUNCTIONS
# =============================================================================

def fragments_to_frame(fragments: Sequence[Fragment]) -> pd.DataFrame:
    """
    Build a DataFrame of the sortable fragment attributes.

    The "idx" column points back into the input sequence.
    """
    return pd.DataFrame({
        "idx": np.arange(len(fragments), dtype=int),
        "x": [float(f.x) for f in fragments],
        "y": [float(f.y) for f in fragments],
        "text": [f.text for f in fragments],
        "width": [float(f.width) for f in fragments],
        "font_name": [f.font_name for f in fragments],
        "font_size": [float(f.font_size) for f in fragments],
    })


def assign_line_ids(ys: np.ndarray, tolerance: float) -> np.ndarray:
    """
    Assign line ids to y values already sorted in reading order.

    A new line starts whenever a value is further than tolerance from the
    current line's anchor (the first y of that line).

    Example:
        >>> assign_line_ids(np.array([103.0, 100.0, 80.0]), 3.0).tolist()
        [0, 0, 1]
    """
    ids = np.zeros(len(ys), dtype=int)
    if len(ys) == 0:
        return ids

    line_id = 0
    anchor = ys[0]
    for i, y in enumerate(ys):
        if abs(y - anchor) > tolerance:
            line_id += 1
            anchor = y
        ids[i] = line_id
    return ids


def join_fragment_text(
    fragments: Sequence[Fragment],
    config: ConversionConfig,
) -> str:
    """Concatenate x-ordered fragment text, inserting inferred word spaces."""
    parts: List[str] = []
    for i, frag in enumerate(fragments):
        if i > 0 and needs_space(
            fragments[i - 1],
            frag,
            config.min_space_factor,
            config.empty_char_width_factor,
        ):
            parts.append(" ")
        parts.append(frag.text)
    return "".join(parts)


def make_line(fragments: Sequence[Fragment], config: ConversionConfig) -> TextLine:
    """
    Finalize one line from its member fragments.

    Args:
        fragments: Members of the line, already ordered by x.
        config: Thresholds for space inference and font defaults.

    Returns:
        TextLine with text and style aggregates.
    """
    frags = list(fragments)
    styles = [classify_font(f.font_name, config.default_font_family) for f in frags]
    bold_count = sum(1 for s in styles if s.bold)
    italic_count = sum(1 for s in styles if s.italic)
    min_x, max_x = horizontal_extent(frags)

    return TextLine(
        fragments=frags,
        text=join_fragment_text(frags, config).strip(),
        y=frags[0].y,
        min_x=min_x,
        max_x=max_x,
        avg_font_size=float(np.mean([f.font_size for f in frags])),
        is_bold=bold_count > len(frags) * 0.5,
        is_italic=italic_count > len(frags) * 0.5,
    )


def build_lines_with_result(
    fragments: Sequence[Fragment],
    config: Optional[ConversionConfig] = None,
) -> LineBuildResult:
    """
    Cluster fragments into text lines.

    Args:
        fragments: Page fragments in any order.
        config: Heuristic thresholds (defaults when None).

    Returns:
        LineBuildResult with lines ordered top-to-bottom.
    """
    config = config or ConversionConfig()
    if not fragments:
        return LineBuildResult()

    df = fragments_to_frame(fragments)
    df = df.sort_values(READING_ORDER_KEYS, ascending=READING_ORDER_ASC, kind="mergesort")
    df["line_id"] = assign_line_ids(df["y"].to_numpy(), config.line_y_tolerance)

    lines: List[TextLine] = []
    for _, group in df.groupby("line_id", sort=True):
        group = group.sort_values(LINE_ORDER_KEYS, kind="mergesort")
        members = [fragments[i] for i in group["idx"]]
        lines.append(make_line(members, config))

    logger.debug(f"Built {len(lines)} lines from {len(fragments)} fragments")
    return LineBuildResult(
        lines=lines,
        line_count=len(lines),
        fragment_count=len(fragments),
    )


def build_lines(
    fragments: Sequence[Fragment],
    config: Optional[ConversionConfig] = None,
) -> List[TextLine]:
    """Cluster fragments into text lines ordered top-to-bottom."""
    return build_lines_with_result(fragments, config).lines
