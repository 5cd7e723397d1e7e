"""PDF-to-Word layout reconstruction."""

from .config import ConversionConfig
from .errors import (
    ConversionError,
    DocumentLoadError,
    ConversionCancelled,
    describe_error,
)
from .pipeline import (
    ConversionProgress,
    CancellationToken,
    PdfToWordConverter,
    convert_pdf_to_docx,
)

__version__ = "0.1.0"

__all__ = [
    "ConversionConfig",
    "ConversionError",
    "DocumentLoadError",
    "ConversionCancelled",
    "describe_error",
    "ConversionProgress",
    "CancellationToken",
    "PdfToWordConverter",
    "convert_pdf_to_docx",
]
