"""
PDF-to-Word conversion pipeline.

Drives the per-page sequence:

    extraction -> line building -> paragraph segmentation -> assembly

and finally serializes all page sections into one DOCX document.

Stages reported to the progress callback:
- reading (5-15%): open the document, report the page count
- analyzing (15-65%): one page at a time, proportional to page number
- building (75-90%): assemble the document model and package it
- complete (100%)

Pages are processed strictly in order and only one page's fragments, lines
and paragraphs are alive at a time. Errors raised while processing a page
abort the whole conversion; no partial document is returned.
"""

import logging
import math
import re
import threading
import time
from dataclasses import dataclass
from pathlib import PurePath
from typing import Callable, Optional

from converthub.assembly import (
    DocumentModel,
    PageSection,
    assemble_page,
    placeholder_section,
    render_docx,
)
from converthub.config import ConversionConfig
from converthub.constants import (
    STAGE_ANALYZING,
    STAGE_BUILDING,
    STAGE_COMPLETE,
    STAGE_READING,
)
from converthub.errors import ConversionCancelled
from converthub.extraction import (
    PageText,
    PdfTextExtractor,
    build_lines_with_result,
    segment_paragraphs,
)

logger = logging.getLogger(__name__)

ANALYZE_START_PERCENT = 15
ANALYZE_SPAN_PERCENT = 50
BUILD_START_PERCENT = 75

PDF_SUFFIX_RX = re.compile(r"\.pdf$", re.IGNORECASE)


# =============================================================================
# PROGRESS AND CANCELLATION
# =============================================================================

@dataclass(frozen=True)
class ConversionProgress:
    """A progress update: stage name, 0-100 percent, readable message."""
    stage: str
    percent: int
    message: str


ProgressCallback = Callable[[ConversionProgress], None]


class _ProgressReporter:
    """Forwards progress to an optional callback, never moving backwards."""

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self.callback = callback
        self.last_percent = 0

    def report(self, stage: str, percent: int, message: str) -> None:
        percent = max(self.last_percent, min(100, int(percent)))
        self.last_percent = percent
        logger.debug(f"[{stage} {percent:3d}%] {message}")
        if self.callback is not None:
            self.callback(ConversionProgress(stage=stage, percent=percent, message=message))


class CancellationToken:
    """
    Cooperative cancellation flag checked between pages.

    A page that is already being processed always completes; the
    cancellation takes effect before the next page starts.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise ConversionCancelled("Conversion cancelled by caller")


def analyzing_percent(page_number: int, page_count: int) -> int:
    """
    Progress percentage while analyzing a page.

    Example:
        >>> analyzing_percent(1, 2), analyzing_percent(2, 2)
        (40, 65)
    """
    if page_count <= 0:
        return ANALYZE_START_PERCENT
    share = page_number / page_count * ANALYZE_SPAN_PERCENT
    return ANALYZE_START_PERCENT + int(math.floor(share + 0.5))


def title_from_filename(filename: Optional[str]) -> str:
    """
    Document title: the file name without directories or a .pdf extension.

    Example:
        >>> title_from_filename("reports/Q3 Summary.PDF")
        'Q3 Summary'
    """
    if not filename:
        return "document"
    name = PurePath(str(filename)).name
    return PDF_SUFFIX_RX.sub("", name) or name


# =============================================================================
# CONVERTER
# =============================================================================

class PdfToWordConverter:
    """
    Converts PDF bytes into an editable DOCX document.

    Args:
        config: Heuristic thresholds, layout settings and credentials.
        extractor: Text extraction collaborator. Defaults to a PyMuPDF
            extractor using config.password; pass one explicitly to share
            extraction options without any global state.
    """

    def __init__(
        self,
        config: Optional[ConversionConfig] = None,
        extractor: Optional[PdfTextExtractor] = None,
    ):
        self.config = config or ConversionConfig()
        self.extractor = extractor or PdfTextExtractor(password=self.config.password)

    def analyze_page(self, page: PageText) -> PageSection:
        """
        Reconstruct the structure of one page.

        Args:
            page: Extracted page text.

        Returns:
            PageSection with the page's paragraphs, or a placeholder section
            when the page has no extractable fragments.
        """
        if page.is_empty:
            return placeholder_section(page.page_number, self.config)

        line_result = build_lines_with_result(page.fragments, self.config)
        paragraphs = segment_paragraphs(line_result.lines, self.config, page_width=page.width)
        section = assemble_page(page.page_number, paragraphs, self.config)

        logger.debug(
            f"Page {page.page_number}: {line_result.fragment_count} fragments -> "
            f"{line_result.line_count} lines -> {len(section.paragraphs)} paragraphs"
        )
        return section

    def build_document(
        self,
        pdf_bytes: bytes,
        filename: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> DocumentModel:
        """
        Run extraction and reconstruction for every page.

        Args:
            pdf_bytes: Whole-file PDF content.
            filename: Source file name, used for the document title.
            on_progress: Optional progress callback.
            cancel_token: Optional token checked before each page.

        Returns:
            DocumentModel with one section per PDF page.

        Raises:
            DocumentLoadError: If the bytes cannot be opened as a PDF.
            ConversionCancelled: If cancel_token is set between pages.
        """
        reporter = _ProgressReporter(on_progress)

        reporter.report(STAGE_READING, 5, "Loading PDF...")
        sections = []
        with self.extractor.open(pdf_bytes) as pdf:
            page_count = pdf.page_count
            reporter.report(STAGE_READING, ANALYZE_START_PERCENT, f"PDF loaded - {page_count} page(s)")

            for page_number in range(1, page_count + 1):
                if cancel_token is not None:
                    cancel_token.raise_if_cancelled()
                reporter.report(
                    STAGE_ANALYZING,
                    analyzing_percent(page_number, page_count),
                    f"Analyzing page {page_number} of {page_count}...",
                )
                sections.append(self.analyze_page(pdf.page_text(page_number)))

        reporter.report(STAGE_BUILDING, BUILD_START_PERCENT, "Building Word document...")
        return DocumentModel(
            title=title_from_filename(filename),
            creator=self.config.creator,
            description=self.config.description,
            sections=sections,
        )

    def convert(
        self,
        pdf_bytes: bytes,
        filename: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> bytes:
        """
        Convert a PDF to DOCX bytes.

        Args:
            pdf_bytes: Whole-file PDF content.
            filename: Source file name, used for the document title.
            on_progress: Optional progress callback.
            cancel_token: Optional token checked before each page.

        Returns:
            The .docx file content.

        Raises:
            DocumentLoadError: If the bytes cannot be opened as a PDF.
            ConversionCancelled: If cancel_token is set between pages.
        """
        start = time.monotonic()
        document = self.build_document(
            pdf_bytes,
            filename=filename,
            on_progress=on_progress,
            cancel_token=cancel_token,
        )

        reporter = _ProgressReporter(on_progress)
        reporter.last_percent = BUILD_START_PERCENT

        reporter.report(STAGE_BUILDING, 90, "Packaging DOCX...")
        data = render_docx(document)
        reporter.report(STAGE_COMPLETE, 100, "Conversion complete!")

        logger.info(
            f"Converted {len(document.sections)} pages in "
            f"{time.monotonic() - start:.2f}s"
        )
        return data


def convert_pdf_to_docx(
    pdf_bytes: bytes,
    filename: str = "document.pdf",
    on_progress: Optional[ProgressCallback] = None,
    config: Optional[ConversionConfig] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> bytes:
    """
    Convert PDF bytes to DOCX bytes with a one-off converter.

    Example:
        >>> data = convert_pdf_to_docx(open("report.pdf", "rb").read(), "report.pdf")
    """
    converter = PdfToWordConverter(config=config)
    return converter.convert(
        pdf_bytes,
        filename=filename,
        on_progress=on_progress,
        cancel_token=cancel_token,
    )
