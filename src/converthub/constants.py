"""
Shared constants across converthub modules.

This module is the single source of truth for:
- Progress stage names
- Paragraph alignment values
- Target document units and fixed styling for placeholder pages
"""

# =============================================================================
# PROGRESS STAGES
# =============================================================================
# Stages reported to the progress callback, in the order they occur

STAGE_READING = "reading"
STAGE_ANALYZING = "analyzing"
STAGE_BUILDING = "building"
STAGE_COMPLETE = "complete"


# =============================================================================
# ALIGNMENT
# =============================================================================

ALIGN_LEFT = "left"
ALIGN_CENTER = "center"
ALIGN_RIGHT = "right"


# =============================================================================
# TARGET FORMAT UNITS
# =============================================================================

# 1 inch in twentieths of a point
TWIPS_PER_INCH = 1440

# Line spacing in the target format is expressed in 240ths of a line
LINE_SPACING_UNIT = 240


# =============================================================================
# PLACEHOLDER PAGES
# =============================================================================
# Emitted for pages that yield zero extractable fragments (likely scanned)

PLACEHOLDER_TEXT = "[Page {page_number} - no text detected. Use OCR for scanned documents.]"
PLACEHOLDER_COLOR = "999999"
PLACEHOLDER_HALF_POINTS = 20


# =============================================================================
# DOCUMENT METADATA
# =============================================================================

DEFAULT_CREATOR = "ConvertHub"
DEFAULT_DESCRIPTION = "Converted from PDF by ConvertHub - Editable Text"
