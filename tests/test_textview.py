import PIL.ImageFont
import pytest
from dero.commontypes import Size
from dero.editor.boundary import ConversionView
from dero.rendering.textview import TextView
from dero.settings import Settings

SIZE = Size(width=300, height=80)


@pytest.fixture
def textview():
    settings = Settings.for_test()
    return TextView(settings, font=PIL.ImageFont.load_default(size=settings.font_size))


def ink(image):
    return sum(1 for pixel in image.getdata() if pixel != (255, 255, 255))


def test_render_size_and_cursor(textview):
    image = textview.render(ConversionView(), SIZE)
    assert image.size == SIZE.as_tuple()
    assert image.mode == "RGB"
    # only the cursor is drawn
    assert ink(image) > 0


def test_more_text_more_ink(textview):
    empty = ink(textview.render(ConversionView(), SIZE))
    converted = ink(textview.render(ConversionView(converted="gana"), SIZE))
    with_residual = ink(textview.render(ConversionView(converted="gana", residual="g"), SIZE))
    assert empty < converted < with_residual


def test_residual_uses_its_own_color(textview):
    image = textview.render(ConversionView(residual="ng"), SIZE)
    assert (128, 128, 128) in set(image.getdata())


def test_runs_split_on_newlines(textview):
    lines = list(textview._runs(ConversionView(converted="a\nb", residual="c")))
    assert lines == [
        [("a", "black", False)],
        [("b", "black", False), ("c", "#808080", True), ("_", "black", False)],
    ]


def test_missing_font_falls_back(tmp_path):
    settings = Settings.for_test()
    settings.font_path = tmp_path / "nothing-here.ttf"
    textview = TextView(settings)
    assert textview.line_skip > 0
