# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import enum
import typing

import msgspec


class Point(msgspec.Struct, frozen=True):
    x: int
    y: int

    def __add__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return Point(x=self.x + other.x, y=self.y + other.y)


class Size(msgspec.Struct, frozen=True):
    width: int
    height: int

    def as_tuple(self):
        return (self.width, self.height)


class Mode(enum.Enum):
    DEFAULT = "default"
    INPUT = "input"
    LOOKUP = "lookup"

    @enum.property
    def title_suffix(self):
        match self:
            case Mode.DEFAULT:
                return ""
            case Mode.INPUT:
                return " - Input"
            case Mode.LOOKUP:
                return " - Look-up"

    @classmethod
    def from_argument(cls, value: typing.Optional[str]) -> "Mode":
        # anything unrecognized, including no argument at all, starts in the default mode
        match value:
            case "input":
                return cls.INPUT
            case "lookup":
                return cls.LOOKUP
            case _:
                return cls.DEFAULT


class DeroError(Exception):
    pass


class SettingsError(DeroError):
    pass
