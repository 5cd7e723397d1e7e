"""
Exceptions raised by the conversion pipeline and user-facing guidance.

Only fatal conditions are raised. Degraded inputs (unknown fonts, pages
without text, empty lines) are recovered inside the pipeline and never
surface here.
"""

from typing import Tuple


class ConversionError(Exception):
    """Base class for conversion failures."""


class DocumentLoadError(ConversionError):
    """The input bytes could not be opened as a PDF document."""


class ConversionCancelled(ConversionError):
    """The caller cancelled the conversion between pages."""


GENERIC_GUIDANCE = (
    "The PDF could not be converted. Please check the file and try again."
)

# (substring, guidance) pairs, first match wins
ERROR_GUIDANCE: Tuple[Tuple[str, str], ...] = (
    (
        "password",
        "This PDF is password-protected. Unlock it first, then convert the "
        "unlocked copy.",
    ),
    (
        "encrypted",
        "This PDF is encrypted. Unlock it first, then convert the unlocked copy.",
    ),
    (
        "invalid pdf",
        "The file is not a valid PDF or is corrupted. Try repairing it first.",
    ),
    (
        "cancelled",
        "The conversion was cancelled.",
    ),
)


def describe_error(exc: BaseException) -> str:
    """
    Map a fatal conversion error to an actionable message.

    Args:
        exc: The exception raised by the conversion.

    Returns:
        Guidance for a known failure, or a generic message.

    Example:
        >>> describe_error(DocumentLoadError("PDF is encrypted: password required"))
        'This PDF is password-protected. Unlock it first, then convert the unlocked copy.'
    """
    text = str(exc).lower()
    for needle, guidance in ERROR_GUIDANCE:
        if needle in text:
            return guidance
    return GENERIC_GUIDANCE
