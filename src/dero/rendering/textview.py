from __future__ import annotations

import logging
import math
import typing

import PIL.Image
import PIL.ImageDraw
import PIL.ImageFont

from ..commontypes import Point, Size

if typing.TYPE_CHECKING:
    from ..editor.boundary import ConversionView
    from ..settings import Settings

logger = logging.getLogger(__name__)

CURSOR = "_"


def load_font(settings: Settings):
    if settings.font_path is not None:
        try:
            return PIL.ImageFont.truetype(str(settings.font_path), size=settings.font_size)
        except OSError:
            logger.warning("Could not load font %s; falling back to the default font", settings.font_path)
    return PIL.ImageFont.load_default(size=settings.font_size)


class TextView:
    """Draws the converted text, then the unconverted residual, then a cursor.

    The residual is drawn in its own color and underlined so it reads as still being typed.
    """

    def __init__(self, settings: Settings, font=None):
        self.settings = settings
        self.font = font if font is not None else load_font(settings)
        ascent, descent = self.font.getmetrics()
        self.ascent = ascent
        self.line_skip = max(math.ceil(ascent * 1.25), ascent + descent)
        self.origin = Point(x=settings.text_margin, y=settings.text_margin)

    def _runs(self, view: ConversionView):
        # (text, color, underlined) pieces, split so that no piece contains a newline
        line: list[tuple[str, str, bool]] = []
        for text, color, underlined in (
            (view.converted, self.settings.text_color, False),
            (view.residual, self.settings.residual_color, True),
            (CURSOR, self.settings.text_color, False),
        ):
            first, *rest = text.split("\n")
            line.append((first, color, underlined))
            for piece in rest:
                yield line
                line = [(piece, color, underlined)]
        yield line

    def render(self, view: ConversionView, size: Size) -> PIL.Image.Image:
        image = PIL.Image.new("RGB", size.as_tuple(), self.settings.background_color)
        draw = PIL.ImageDraw.Draw(image)
        for line_number, line in enumerate(self._runs(view)):
            position = self.origin + Point(x=0, y=line_number * self.line_skip)
            x = position.x
            for text, color, underlined in line:
                if not text:
                    continue
                draw.text((x, position.y), text, font=self.font, fill=color)
                width = draw.textlength(text, font=self.font)
                if underlined:
                    underline_y = position.y + self.ascent + 1
                    draw.line([(x, underline_y), (x + width, underline_y)], fill=color, width=1)
                x += width
        return image
