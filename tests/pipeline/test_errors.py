import pytest

from converthub.errors import (
    GENERIC_GUIDANCE,
    ConversionCancelled,
    ConversionError,
    DocumentLoadError,
    describe_error,
)


@pytest.mark.parametrize("exc,fragment", [
    (DocumentLoadError("PDF is encrypted and the password is missing or incorrect"), "password-protected"),
    (DocumentLoadError("Document is ENCRYPTED"), "encrypted"),
    (DocumentLoadError("Invalid PDF structure: missing %PDF header"), "not a valid PDF"),
    (ConversionCancelled("Conversion cancelled by caller"), "cancelled"),
])
def test_known_errors_get_guidance(exc, fragment):
    assert fragment in describe_error(exc)


def test_unknown_error_is_generic():
    assert describe_error(RuntimeError("boom")) == GENERIC_GUIDANCE


def test_error_hierarchy():
    assert issubclass(DocumentLoadError, ConversionError)
    assert issubclass(ConversionCancelled, ConversionError)
