"""
Geometry utilities for layout reconstruction.

This module provides the low-level spatial helpers shared by the line, run
and paragraph builders: horizontal gap measurement, word-space inference,
unit conversion, and centring/right-edge tests for alignment detection.

Key concepts:
- Fragments are positioned in PDF user space (y grows upward).
- A word space is inferred when the gap between two fragments exceeds a
  fraction of the previous fragment's average character width.
"""

import math
from typing import Iterable, Tuple

import numpy as np

from converthub.extraction.pdf import Fragment


def avg_char_width(fragment: Fragment, empty_factor: float = 0.5) -> float:
    """
    Estimate the average character width of a fragment.

    Args:
        fragment: Fragment to measure.
        empty_factor: Multiple of the font size used for empty strings.

    Returns:
        width / len(text), or font_size * empty_factor when text is empty.

    Example:
        >>> avg_char_width(Fragment("Hello", 0, 0, 40, 10))
        8.0
    """
    if fragment.text:
        return fragment.width / len(fragment.text)
    return fragment.font_size * empty_factor


def horizontal_gap(prev: Fragment, cur: Fragment) -> float:
    """Distance from the right edge of prev to the left edge of cur."""
    return cur.x - (prev.x + prev.width)


def needs_space(
    prev: Fragment,
    cur: Fragment,
    min_space_factor: float = 0.25,
    empty_factor: float = 0.5,
) -> bool:
    """
    Decide whether a word space separates two adjacent fragments.

    Args:
        prev: Fragment to the left.
        cur: Fragment to the right.
        min_space_factor: Share of the average char width a gap must exceed.
        empty_factor: See avg_char_width.

    Returns:
        True if the gap is wide enough to be a space.

    Example:
        >>> hello = Fragment("Hello", 0, 0, 40, 10)
        >>> needs_space(hello, Fragment("World", 50, 0, 40, 10))
        True
        >>> needs_space(hello, Fragment("World", 41, 0, 40, 10))
        False
    """
    gap = horizontal_gap(prev, cur)
    return gap > avg_char_width(prev, empty_factor) * min_space_factor


def to_half_points(size: float) -> int:
    """
    Convert a point size to half-point units, rounding halves up.

    Example:
        >>> to_half_points(10.25)
        21
    """
    return int(math.floor(float(size) * 2 + 0.5))


def horizontal_extent(fragments: Iterable[Fragment]) -> Tuple[float, float]:
    """Return (min_x, max_x) over the fragments' boxes, (0, 0) when empty."""
    frags = list(fragments)
    if not frags:
        return 0.0, 0.0
    xs0 = np.array([f.x for f in frags], dtype=float)
    xs1 = xs0 + np.array([f.width for f in frags], dtype=float)
    return float(xs0.min()), float(xs1.max())


def is_centered(
    line_center_x: float,
    page_mid_x: float,
    page_width: float,
    tolerance_pct: float = 0.05,
) -> bool:
    """
    Check if a line is horizontally centered on the page.

    Args:
        line_center_x: X-coordinate of the line's center.
        page_mid_x: X-coordinate of the page's center.
        page_width: Total page width.
        tolerance_pct: Percentage of page width for tolerance (default 5%).

    Returns:
        True if the line center is within tolerance of page center.

    Example:
        >>> is_centered(306, 306, 612)
        True
        >>> is_centered(100, 306, 612)
        False
    """
    tolerance = page_width * tolerance_pct
    return abs(line_center_x - page_mid_x) <= tolerance


def shares_edge(values: Iterable[float], tolerance: float) -> bool:
    """True if all values lie within tolerance of each other."""
    arr = np.asarray(list(values), dtype=float)
    if arr.size == 0:
        return False
    return float(arr.max() - arr.min()) <= tolerance

