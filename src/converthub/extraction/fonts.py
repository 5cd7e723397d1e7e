"""
Font style classification from PDF font names.

PDF fonts rarely carry reliable style flags, but their names usually encode
weight, slant and family ("Helvetica-BoldOblique", "TimesNewRomanPS-ItalicMT",
"ABCDEF+Calibri-Bold"). This module turns a raw font name into a FontStyle
using ordered substring keyword sets. Garbled or empty names degrade to the
default style and never raise.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

# =============================================================================
# KEYWORDS
# =============================================================================

BOLD_KEYWORDS = ("bold", "heavy", "black", "semibold", "demibold")
ITALIC_KEYWORDS = ("italic", "oblique", "slant")

# Ordered (keywords, family) groups, first match wins
FAMILY_KEYWORDS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("serif", "times"), "Times New Roman"),
    (("sans", "arial", "helvetica"), "Arial"),
    (("mono", "courier"), "Courier New"),
    (("calibri",), "Calibri"),
    (("cambria",), "Cambria"),
    (("georgia",), "Georgia"),
    (("garamond",), "Garamond"),
    (("verdana",), "Verdana"),
    (("tahoma",), "Tahoma"),
    (("trebuchet",), "Trebuchet MS"),
)

DEFAULT_FAMILY = "Calibri"


@dataclass(frozen=True)
class FontStyle:
    """Style flags and Word family name resolved from a font name."""
    bold: bool
    italic: bool
    family: str


@lru_cache(maxsize=512)
def classify_font(font_name: Optional[str], default_family: str = DEFAULT_FAMILY) -> FontStyle:
    """
    Classify a font name into bold/italic flags and a family.

    Args:
        font_name: Raw font name from the PDF (may be empty or None).
        default_family: Family returned when no family keyword matches.

    Returns:
        FontStyle for the name.

    Example:
        >>> classify_font("Helvetica-BoldOblique")
        FontStyle(bold=True, italic=True, family='Arial')
        >>> classify_font("")
        FontStyle(bold=False, italic=False, family='Calibri')
    """
    lower = str(font_name or "").lower()

    bold = any(k in lower for k in BOLD_KEYWORDS)
    italic = any(k in lower for k in ITALIC_KEYWORDS)

    family = default_family
    for keywords, name in FAMILY_KEYWORDS:
        if any(k in lower for k in keywords):
            family = name
            break

    return FontStyle(bold=bold, italic=italic, family=family)
