import random

import numpy as np

from converthub.config import ConversionConfig
from converthub.extraction.lines import assign_line_ids, build_lines, build_lines_with_result
from converthub.extraction.pdf import Fragment


def _frag(text, x, y, width=None, size=12.0, font="Helvetica"):
    if width is None:
        width = len(text) * size * 0.5
    return Fragment(text=text, x=x, y=y, width=width, height=size, font_name=font, font_size=size)


def _signature(lines):
    return [(line.text, line.y, [(f.text, f.x, f.y) for f in line.fragments]) for line in lines]


def test_empty_fragment_list_yields_no_lines():
    assert build_lines([]) == []
    result = build_lines_with_result([])
    assert result.line_count == 0
    assert result.lines == []


def test_lines_are_ordered_top_to_bottom_and_left_to_right():
    fragments = [
        _frag("world", 130, 700),
        _frag("Second", 72, 680),
        _frag("Hello", 72, 700),
    ]
    lines = build_lines(fragments)

    assert [line.text for line in lines] == ["Hello world", "Second"]
    assert [f.text for f in lines[0].fragments] == ["Hello", "world"]


def test_y_tolerance_boundary_is_inclusive():
    same = build_lines([_frag("a", 0, 100.0), _frag("b", 50, 103.0)])
    assert len(same) == 1

    split = build_lines([_frag("a", 0, 100.0), _frag("b", 50, 103.1)])
    assert len(split) == 2
    assert [line.text for line in split] == ["b", "a"]


def test_line_anchor_does_not_drift():
    # Each fragment is within tolerance of its neighbour but not of the anchor
    fragments = [_frag("a", 0, 106.0), _frag("b", 20, 103.5), _frag("c", 40, 101.0)]
    lines = build_lines(fragments)
    assert [line.text for line in lines] == ["a b", "c"]


def test_space_inserted_only_above_threshold():
    spaced = build_lines([_frag("Hello", 0, 100, width=40), _frag("World", 50, 100, width=40)])
    assert spaced[0].text == "Hello World"

    tight = build_lines([_frag("Hello", 0, 100, width=40), _frag("World", 41, 100, width=40)])
    assert tight[0].text == "HelloWorld"


def test_empty_fragment_text_uses_font_size_for_char_width():
    # avg char width = 12 * 0.5 = 6, threshold 1.5
    lines = build_lines([
        _frag("", 0, 100, width=10),
        _frag("x", 12, 100, width=6),
    ])
    assert lines[0].text == "x"
    assert len(lines[0].fragments) == 2


def test_clustering_is_independent_of_input_order():
    fragments = [
        _frag("Title", 200, 720, size=24, font="Helvetica-Bold"),
        _frag("The", 72, 680),
        _frag("quick", 100, 681.5),
        _frag("brown", 140, 679),
        _frag("fox", 72, 666),
        _frag("jumps", 100, 664.2),
        _frag("over", 150, 666.9),
        _frag("dup", 72, 640),
        _frag("dup", 72, 640),
        _frag("tail", 300, 637.5),
    ]
    expected = _signature(build_lines(fragments))

    rng = random.Random(1234)
    for _ in range(25):
        shuffled = fragments[:]
        rng.shuffle(shuffled)
        assert _signature(build_lines(shuffled)) == expected


def test_line_style_aggregates():
    fragments = [
        _frag("Bold", 0, 100, size=10, font="Arial-Bold"),
        _frag("also", 40, 100, size=12, font="Arial-BoldItalic"),
        _frag("plain", 80, 100, size=14, font="Arial"),
    ]
    line = build_lines(fragments)[0]

    assert line.avg_font_size == 12.0
    assert line.is_bold is True          # 2 of 3
    assert line.is_italic is False       # 1 of 3
    assert line.min_x == 0
    assert line.max_x == 80 + len("plain") * 14 * 0.5


def test_bold_requires_strict_majority():
    fragments = [
        _frag("a", 0, 100, font="Arial-Bold"),
        _frag("b", 20, 100, font="Arial"),
    ]
    assert build_lines(fragments)[0].is_bold is False


def test_line_y_is_leftmost_fragment():
    line = build_lines([_frag("right", 100, 102), _frag("left", 0, 100)])[0]
    assert line.y == 100


def test_custom_tolerance():
    config = ConversionConfig(line_y_tolerance=0.5)
    lines = build_lines([_frag("a", 0, 100.0), _frag("b", 50, 101.0)], config)
    assert len(lines) == 2


def test_assign_line_ids():
    ids = assign_line_ids(np.array([110.0, 108.0, 100.0, 97.5, 90.0]), 3.0)
    assert ids.tolist() == [0, 0, 1, 1, 2]
    assert assign_line_ids(np.array([]), 3.0).tolist() == []
