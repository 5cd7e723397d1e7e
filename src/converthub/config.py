"""
Conversion configuration for converthub.

This module defines the ConversionConfig dataclass that captures every
tunable threshold of the layout reconstruction heuristics, plus the document
metadata and credentials a single conversion needs. Each conversion receives
its own config instance, so concurrent conversions in one process never share
mutable settings.
"""

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from converthub.constants import DEFAULT_CREATOR, DEFAULT_DESCRIPTION, TWIPS_PER_INCH

ENV_PREFIX = "CONVERTHUB_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ConversionConfig:
    """
    Configuration for the PDF-to-Word reconstruction pipeline.

    Attributes:
        line_y_tolerance: Max vertical distance from a line's anchor y for a
            fragment to join that line.
        paragraph_gap_factor: A line gap larger than the typical gap times this
            factor starts a new paragraph.
        heading_size_factor: Minimum size ratio (paragraph / page median) for a
            paragraph to be a heading.
        heading_level1_factor: Size ratio for heading level 1.
        heading_level2_factor: Size ratio for heading level 2.
        min_space_factor: A horizontal gap larger than the average character
            width times this factor is rendered as a space.
        style_size_tolerance: Font size difference (points) above which two
            lines or fragments are considered differently styled.
        typical_gap_cap_factor: Only gaps below median font size times this
            factor count towards the typical line gap.
        default_line_gap_factor: Typical gap fallback as a multiple of the
            median font size.
        default_font_size: Fallback font size when none can be derived.
        empty_char_width_factor: Average character width for empty fragments,
            as a multiple of their font size.
        default_font_family: Family used when a font name matches no keyword.

        page_margin_twips: Page margin on all four sides.
        list_indent_twips: Left indent for list paragraphs.
        body_space_after_twips: Space after body paragraphs.
        body_line_spacing: Body line height in 240ths of a line.
        heading_space_before_twips: Space before headings.
        heading_space_after_twips: Space after headings.

        detect_alignment: Derive centred/right alignment from line geometry.
            When False every paragraph is left aligned.
        alignment_tolerance_pct: Centring tolerance as a share of page width.
        alignment_edge_tolerance: Max spread (points) of line edges that count
            as lined up.

        creator: Document creator metadata.
        description: Document description metadata.
        password: Password used to open encrypted PDFs.
    """

    # Line building
    line_y_tolerance: float = 3.0
    min_space_factor: float = 0.25
    empty_char_width_factor: float = 0.5

    # Paragraph segmentation
    paragraph_gap_factor: float = 1.4
    style_size_tolerance: float = 1.0
    typical_gap_cap_factor: float = 4.0
    default_line_gap_factor: float = 1.2
    default_font_size: float = 12.0

    # Heading classification
    heading_size_factor: float = 1.25
    heading_level1_factor: float = 1.8
    heading_level2_factor: float = 1.5

    # Fonts
    default_font_family: str = "Calibri"

    # Target document layout
    page_margin_twips: int = TWIPS_PER_INCH
    list_indent_twips: int = 720
    body_space_after_twips: int = 120
    body_line_spacing: int = 276
    heading_space_before_twips: int = 240
    heading_space_after_twips: int = 200

    # Alignment
    detect_alignment: bool = False
    alignment_tolerance_pct: float = 0.05
    alignment_edge_tolerance: float = 3.0

    # Metadata and credentials
    creator: str = DEFAULT_CREATOR
    description: str = DEFAULT_DESCRIPTION
    password: Optional[str] = None

    def __post_init__(self):
        """Validate threshold ordering."""
        if self.line_y_tolerance < 0:
            raise ValueError("line_y_tolerance must be non-negative")
        if not (
            self.heading_size_factor
            <= self.heading_level2_factor
            <= self.heading_level1_factor
        ):
            raise ValueError(
                "heading factors must satisfy "
                "heading_size_factor <= heading_level2_factor <= heading_level1_factor"
            )

    @classmethod
    def from_env(
        cls,
        env: Optional[Dict[str, str]] = None,
        dotenv_path: Optional[str] = None,
        **overrides: Any,
    ) -> "ConversionConfig":
        """
        Create configuration from CONVERTHUB_* environment variables.

        A .env file is loaded first (without overriding variables already set
        in the process environment). Each dataclass field can be overridden by
        an upper-cased, prefixed variable, e.g. CONVERTHUB_LINE_Y_TOLERANCE=2.5.

        Args:
            env: Mapping to read instead of os.environ (used by tests).
            dotenv_path: Explicit .env file location.
            **overrides: Field values that win over the environment.

        Returns:
            ConversionConfig with environment overrides applied.

        Raises:
            ValueError: If a variable cannot be parsed as the field's type.
        """
        if env is None:
            load_dotenv(dotenv_path=dotenv_path)
            env = dict(os.environ)

        defaults = cls()
        values: Dict[str, Any] = {}
        for f in fields(cls):
            key = f"{ENV_PREFIX}{f.name.upper()}"
            if key not in env:
                continue
            values[f.name] = _coerce(f.name, env[key], getattr(defaults, f.name))

        values.update(overrides)
        return cls(**values)


def _coerce(name: str, raw: str, default: Any) -> Any:
    """Parse an environment string using the type of the field's default."""
    raw = raw.strip()
    if isinstance(default, bool):
        lowered = raw.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"Invalid boolean for {name}: {raw!r}")
    if isinstance(default, int):
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"Invalid integer for {name}: {raw!r}")
    if isinstance(default, float):
        try:
            return float(raw)
        except ValueError:
            raise ValueError(f"Invalid number for {name}: {raw!r}")
    return raw
