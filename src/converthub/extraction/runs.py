"""
Style-homogeneous run segmentation.

A run is a contiguous span of text sharing bold/italic/size/family. Runs
preserve inline formatting such as a bolded word inside a body sentence.
Sizes are stored in half-point units, the target format's font-size unit.
"""

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from converthub.config import ConversionConfig
from converthub.extraction.fonts import FontStyle, classify_font
from converthub.extraction.geometry import needs_space, to_half_points
from converthub.extraction.lines import TextLine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Run:
    """
    A style-homogeneous span of text.

    Attributes:
        text: Text content.
        bold: Bold flag.
        italic: Italic flag.
        half_points: Font size in half-points (2 x point size).
        font_family: Word font family name.
    """
    text: str
    bold: bool = False
    italic: bool = False
    half_points: int = 24
    font_family: str = "Calibri"

    def same_style(self, other: "Run") -> bool:
        """True if the two runs would render identically apart from text."""
        return (
            self.bold == other.bold
            and self.italic == other.italic
            and self.half_points == other.half_points
            and self.font_family == other.font_family
        )


def _make_run(text: str, style: FontStyle, size: float) -> Run:
    return Run(
        text=text,
        bold=style.bold,
        italic=style.italic,
        half_points=to_half_points(size),
        font_family=style.family,
    )


def build_runs(line: TextLine, config: Optional[ConversionConfig] = None) -> List[Run]:
    """
    Split a line into style-homogeneous runs.

    The running style is seeded from the first fragment. A new run starts
    when a fragment's bold or italic flag differs, or its size differs by
    more than the style size tolerance. Inferred word spaces are added to
    the run receiving the fragment, before its text.

    Args:
        line: Line with x-ordered fragments.
        config: Heuristic thresholds (defaults when None).

    Returns:
        Runs in left-to-right order; empty runs are never emitted.
    """
    config = config or ConversionConfig()
    fragments = line.fragments
    if not fragments:
        return []

    runs: List[Run] = []
    cur_style = classify_font(fragments[0].font_name, config.default_font_family)
    cur_size = fragments[0].font_size
    buffer = ""

    for i, frag in enumerate(fragments):
        style = classify_font(frag.font_name, config.default_font_family)
        if (
            style.bold != cur_style.bold
            or style.italic != cur_style.italic
            or abs(frag.font_size - cur_size) > config.style_size_tolerance
        ):
            if buffer:
                runs.append(_make_run(buffer, cur_style, cur_size))
            buffer = ""
            cur_style = style
            cur_size = frag.font_size

        if i > 0 and needs_space(
            fragments[i - 1],
            frag,
            config.min_space_factor,
            config.empty_char_width_factor,
        ):
            buffer += " "
        buffer += frag.text

    if buffer:
        runs.append(_make_run(buffer, cur_style, cur_size))
    return runs


def merge_adjacent_runs(runs: Iterable[Run]) -> List[Run]:
    """
    Coalesce neighbouring runs that share the same style.

    Example:
        >>> merge_adjacent_runs([Run("a"), Run(" "), Run("b", bold=True)])
        [Run(text='a ', bold=False, italic=False, half_points=24, font_family='Calibri'), Run(text='b', bold=True, italic=False, half_points=24, font_family='Calibri')]
    """
    merged: List[Run] = []
    for run in runs:
        if not run.text:
            continue
        if merged and merged[-1].same_style(run):
            merged[-1] = replace(merged[-1], text=merged[-1].text + run.text)
        else:
            merged.append(run)
    return merged


def space_run_like(run: Run) -> Run:
    """A single-space run carrying the style of the given run."""
    return replace(run, text=" ")
