from __future__ import annotations

import dataclasses
import enum
import logging
import typing

import msgspec

logger = logging.getLogger(__name__)


@dataclasses.dataclass(kw_only=True, frozen=True)
class Converted:
    text: str


@dataclasses.dataclass(kw_only=True, frozen=True)
class Rejected:
    pass


ConversionResult = Converted | Rejected
Converter = typing.Callable[[str], ConversionResult]
EscapedConverter = typing.Callable[[str], str]


class ConversionView(msgspec.Struct, frozen=True):
    converted: str = ""
    residual: str = ""

    @property
    def committed_text(self):
        # an unfinished trailing unit is committed raw rather than dropped
        return self.converted + self.residual


class ConversionPolicy(enum.Enum):
    INCREMENTAL = "incremental"
    WHOLE = "whole"


def resolve(raw: str, convert: Converter) -> ConversionView:
    """Split the raw buffer into the longest convertible prefix and the raw remainder.

    Candidate prefixes are tried from the whole buffer downwards, one scalar at a
    time; the first one the converter accepts wins. Python strings index by code
    point, so every boundary tried is a scalar boundary.
    """
    index = len(raw)
    while index > 0:
        match convert(raw[:index]):
            case Converted(text=text):
                return ConversionView(converted=text, residual=raw[index:])
            case Rejected():
                index -= 1
    return ConversionView(converted="", residual=raw)


def resolve_whole(raw: str, convert_escaped: EscapedConverter) -> ConversionView:
    return ConversionView(converted=convert_escaped(raw), residual="")


def make_projection(
    policy: ConversionPolicy, convert: Converter, convert_escaped: EscapedConverter
) -> typing.Callable[[str], ConversionView]:
    logger.debug("using %s conversion policy", policy.value)
    match policy:
        case ConversionPolicy.INCREMENTAL:
            return lambda raw: resolve(raw, convert)
        case ConversionPolicy.WHOLE:
            return lambda raw: resolve_whole(raw, convert_escaped)
