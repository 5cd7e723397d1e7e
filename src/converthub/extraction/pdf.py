"""
PDF text extraction utilities.

This module wraps PyMuPDF as the text/font extraction collaborator. It opens
a PDF from raw bytes (one handle per conversion) and yields, page by page, the
positioned text fragments the layout reconstruction consumes.

Coordinate convention:
- Fragments use PDF user space: origin at the bottom-left, y grows upward.
- PyMuPDF reports top-down coordinates, so y is flipped against page height.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from converthub.errors import DocumentLoadError

logger = logging.getLogger(__name__)

DEFAULT_FONT_SIZE = 12.0

# The header may be preceded by junk, but must appear in the first 1KB
PDF_HEADER = b"%PDF"
HEADER_SEARCH_BYTES = 1024


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class Fragment:
    """
    A positioned run of text extracted from a PDF page.

    Attributes:
        text: String content.
        x: Left origin in PDF user space.
        y: Baseline origin in PDF user space (y grows upward).
        width: Advance width of the text.
        height: Glyph box height.
        font_name: Raw font name as stored in the PDF.
        font_size: Effective font size in points.
        has_eol: True when the fragment ends an extracted text line.
    """
    text: str
    x: float
    y: float
    width: float
    height: float
    font_name: str = ""
    font_size: float = DEFAULT_FONT_SIZE
    has_eol: bool = False

    @classmethod
    def from_transform(
        cls,
        text: str,
        transform: Sequence[float],
        width: float,
        height: float,
        font_name: str = "",
        has_eol: bool = False,
    ) -> "Fragment":
        """
        Build a fragment from a text-space affine transform.

        The transform is [scaleX, skewX, skewY, scaleY, translateX, translateY].
        Font size is max(|scaleX|, |scaleY|), falling back to 12 when both are
        zero. Height falls back to the font size when missing.

        Example:
            >>> Fragment.from_transform("Hi", [10, 0, 0, 10, 72, 700], 11.1, 10).font_size
            10.0
        """
        font_size = effective_font_size(transform)
        return cls(
            text=text,
            x=float(transform[4]),
            y=float(transform[5]),
            width=float(width or 0.0),
            height=float(height or font_size),
            font_name=font_name or "",
            font_size=font_size,
            has_eol=bool(has_eol),
        )


@dataclass
class PageText:
    """Viewport and text fragments of a single page (1-indexed)."""
    page_number: int
    width: float
    height: float
    fragments: List[Fragment] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.fragments


# =============================================================================
# CONVERSION HELPERS
# =============================================================================

def effective_font_size(transform: Sequence[float]) -> float:
    """Derive a font size from a text transform, 12 when degenerate."""
    size = max(abs(float(transform[0])), abs(float(transform[3])))
    return size if size > 0 else DEFAULT_FONT_SIZE


def fragment_from_span(
    span: Dict[str, Any],
    page_height: float,
    direction: Sequence[float] = (1.0, 0.0),
    has_eol: bool = False,
) -> Optional[Fragment]:
    """
    Convert a PyMuPDF text span into a Fragment.

    Args:
        span: Span dict from page.get_text("dict").
        page_height: Page height used to flip the y axis.
        direction: Writing direction (cos, sin) of the span's line.
        has_eol: Whether the span is the last of its line.

    Returns:
        Fragment, or None for empty/whitespace-only spans or spans without
        geometry.
    """
    text = span.get("text", "")
    if not text or not text.strip():
        return None

    bbox = span.get("bbox")
    if bbox is None:
        return None
    x0, y0, x1, y1 = (float(v) for v in bbox)

    origin = span.get("origin") or (x0, y1)
    size = float(span.get("size", 0.0) or 0.0)
    cos, sin = (float(direction[0]), float(direction[1])) if direction else (1.0, 0.0)
    if math.isclose(cos, 0.0) and math.isclose(sin, 0.0):
        cos, sin = 1.0, 0.0

    transform = [
        size * cos,
        size * sin,
        -size * sin,
        size * cos,
        float(origin[0]),
        float(page_height) - float(origin[1]),
    ]
    return Fragment.from_transform(
        text=text,
        transform=transform,
        width=x1 - x0,
        height=y1 - y0,
        font_name=span.get("font", ""),
        has_eol=has_eol,
    )


def fragments_from_text_dict(text_dict: Dict[str, Any], page_height: float) -> List[Fragment]:
    """Flatten a page.get_text("dict") result into fragments in stream order."""
    fragments: List[Fragment] = []
    for block in text_dict.get("blocks", []):
        # Skip non-text blocks (images, etc.)
        if block.get("type") != 0:
            continue

        for line in block.get("lines", []):
            spans = line.get("spans", [])
            direction = line.get("dir", (1.0, 0.0))
            for s_idx, span in enumerate(spans):
                frag = fragment_from_span(
                    span,
                    page_height,
                    direction=direction,
                    has_eol=s_idx == len(spans) - 1,
                )
                if frag is not None:
                    fragments.append(frag)
    return fragments


# =============================================================================
# EXTRACTOR
# =============================================================================

class PdfDocument:
    """
    An open PDF handle owned by a single conversion.

    Pages are parsed lazily, one at a time, through page_text().
    """

    def __init__(self, doc: Any):
        self._doc = doc

    @property
    def page_count(self) -> int:
        return int(self._doc.page_count)

    def page_text(self, page_number: int) -> PageText:
        """
        Extract the fragments of one page.

        Args:
            page_number: 1-indexed page number.

        Returns:
            PageText with viewport size and fragments.
        """
        page = self._doc.load_page(page_number - 1)
        rect = page.rect
        text_dict = page.get_text("dict")
        fragments = fragments_from_text_dict(text_dict, rect.height)

        logger.debug(f"Page {page_number}: extracted {len(fragments)} fragments")
        return PageText(
            page_number=page_number,
            width=float(rect.width),
            height=float(rect.height),
            fragments=fragments,
        )

    def close(self) -> None:
        self._doc.close()

    def __enter__(self) -> "PdfDocument":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class PdfTextExtractor:
    """
    Opens PDF bytes with PyMuPDF.

    Every call to open() creates an independent document handle, and all
    options (such as the password) are instance state, so extractors can be
    used by concurrent conversions without shared global configuration.
    """

    def __init__(self, password: Optional[str] = None):
        self.password = password

    def open(self, pdf_bytes: bytes) -> PdfDocument:
        """
        Open a PDF from bytes.

        Args:
            pdf_bytes: Whole-file PDF content.

        Returns:
            PdfDocument handle (use as a context manager).

        Raises:
            ImportError: If PyMuPDF is not installed.
            DocumentLoadError: If the bytes are not a readable PDF, or the PDF
                is encrypted and cannot be opened with the given password.
        """
        try:
            import fitz  # PyMuPDF
        except ImportError:
            raise ImportError(
                "PyMuPDF not installed. Run: pip install PyMuPDF"
            )

        if not pdf_bytes:
            raise DocumentLoadError("Invalid PDF structure: empty input")
        if PDF_HEADER not in bytes(pdf_bytes[:HEADER_SEARCH_BYTES]):
            raise DocumentLoadError("Invalid PDF structure: missing %PDF header")

        try:
            doc = fitz.open(stream=bytes(pdf_bytes), filetype="pdf")
        except (RuntimeError, ValueError) as e:
            raise DocumentLoadError(f"Invalid PDF structure: {e}") from e

        if doc.needs_pass:
            if not self.password or not doc.authenticate(self.password):
                doc.close()
                raise DocumentLoadError(
                    "PDF is encrypted and the password is missing or incorrect"
                )

        logger.info(f"Opened PDF with {doc.page_count} pages")
        return PdfDocument(doc)
