import fitz
import pytest

from converthub.errors import DocumentLoadError
from converthub.extraction.pdf import (
    Fragment,
    PdfTextExtractor,
    effective_font_size,
    fragment_from_span,
    fragments_from_text_dict,
)


def _span(text, bbox, origin, size=12.0, font="Helvetica"):
    return {"text": text, "bbox": bbox, "origin": origin, "size": size, "font": font}


def test_from_transform_reads_position_and_size():
    frag = Fragment.from_transform("Hi", [10, 0, 0, 10, 72, 700], 11.1, 10, "Arial")

    assert (frag.x, frag.y) == (72.0, 700.0)
    assert frag.font_size == 10.0
    assert frag.width == 11.1
    assert frag.font_name == "Arial"


def test_from_transform_defaults_height_to_font_size():
    frag = Fragment.from_transform("Hi", [14, 0, 0, 14, 0, 0], 10, 0)
    assert frag.height == 14.0


@pytest.mark.parametrize("transform,expected", [
    ([12, 0, 0, 12, 0, 0], 12.0),
    ([-9, 0, 0, 9, 0, 0], 9.0),
    ([0, 8, -8, 0, 0, 0], 12.0),
    ([0, 0, 0, 0, 0, 0], 12.0),
    ([5, 0, 0, 7, 0, 0], 7.0),
])
def test_effective_font_size(transform, expected):
    assert effective_font_size(transform) == expected


def test_fragment_from_span_flips_y():
    span = _span("Hello", (72.0, 62.0, 100.0, 76.0), (72.0, 74.0))
    frag = fragment_from_span(span, page_height=792.0)

    assert frag.x == 72.0
    assert frag.y == 792.0 - 74.0
    assert frag.width == pytest.approx(28.0)
    assert frag.height == pytest.approx(14.0)
    assert frag.font_size == 12.0


@pytest.mark.parametrize("text", ["", "   ", "\t"])
def test_fragment_from_span_drops_blank_text(text):
    span = _span(text, (0, 0, 10, 10), (0, 10))
    assert fragment_from_span(span, 792.0) is None


def test_fragments_from_text_dict_skips_images_and_marks_eol():
    text_dict = {
        "blocks": [
            {"type": 1, "bbox": (0, 0, 100, 100)},
            {
                "type": 0,
                "lines": [
                    {
                        "dir": (1.0, 0.0),
                        "spans": [
                            _span("Bold", (72, 60, 96, 74), (72, 72), font="Arial-Bold"),
                            _span(" rest", (96, 60, 126, 74), (96, 72)),
                        ],
                    },
                    {
                        "dir": (1.0, 0.0),
                        "spans": [_span("next", (72, 74, 96, 88), (72, 86))],
                    },
                ],
            },
        ]
    }
    fragments = fragments_from_text_dict(text_dict, page_height=792.0)

    assert [f.text for f in fragments] == ["Bold", " rest", "next"]
    assert [f.has_eol for f in fragments] == [False, True, True]
    assert fragments[0].font_name == "Arial-Bold"


# =============================================================================
# EXTRACTOR
# =============================================================================

def _make_pdf(**save_kwargs):
    doc = fitz.open()
    page = doc.new_page(width=612, height=792)
    page.insert_text((72, 72), "Hello PDF", fontsize=12, fontname="helv")
    data = doc.tobytes(**save_kwargs)
    doc.close()
    return data


def test_extractor_reads_page_text():
    with PdfTextExtractor().open(_make_pdf()) as pdf:
        assert pdf.page_count == 1
        page = pdf.page_text(1)

    assert page.page_number == 1
    assert (page.width, page.height) == (612.0, 792.0)
    assert "".join(f.text for f in page.fragments).replace(" ", "") == "HelloPDF"
    first = page.fragments[0]
    assert first.x == pytest.approx(72.0, abs=0.5)
    assert first.y == pytest.approx(720.0, abs=0.5)
    assert first.font_size == pytest.approx(12.0)


@pytest.mark.parametrize("data", [b"", b"not a pdf", b"\x00" * 2048 + b"%PDF-1.7"])
def test_extractor_rejects_invalid_bytes(data):
    with pytest.raises(DocumentLoadError, match="Invalid PDF structure"):
        PdfTextExtractor().open(data)


def test_extractor_requires_password_for_encrypted_pdf():
    data = _make_pdf(
        encryption=fitz.PDF_ENCRYPT_AES_256,
        owner_pw="owner-secret",
        user_pw="user-secret",
    )

    with pytest.raises(DocumentLoadError, match="encrypted"):
        PdfTextExtractor().open(data)
    with pytest.raises(DocumentLoadError, match="password"):
        PdfTextExtractor(password="wrong").open(data)

    with PdfTextExtractor(password="user-secret").open(data) as pdf:
        assert pdf.page_count == 1
