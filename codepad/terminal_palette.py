"""ANSI / xterm colour resolution for the embedded terminal pane.

A cell colour is one of a :class:`NamedColor`, an :class:`Indexed` entry of
the xterm 256-colour palette, or a true-colour :class:`PaletteColor`.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class PaletteColor:
    """An RGB triple, each channel 0..255."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise ValueError(f"colour channel out of range: {channel}")


@dataclass(frozen=True)
class Indexed:
    """An entry of the xterm 256-colour palette."""

    index: int

    def __post_init__(self) -> None:
        if not 0 <= self.index <= 255:
            raise ValueError(f"palette index out of range: {self.index}")


class NamedColor(enum.Enum):
    """The 16 ANSI names plus the pane sentinels and dim/bright variants."""

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7
    BRIGHT_BLACK = 8
    BRIGHT_RED = 9
    BRIGHT_GREEN = 10
    BRIGHT_YELLOW = 11
    BRIGHT_BLUE = 12
    BRIGHT_MAGENTA = 13
    BRIGHT_CYAN = 14
    BRIGHT_WHITE = 15
    FOREGROUND = 256
    BACKGROUND = 257
    CURSOR = 258
    DIM_BLACK = 259
    DIM_RED = 260
    DIM_GREEN = 261
    DIM_YELLOW = 262
    DIM_BLUE = 263
    DIM_MAGENTA = 264
    DIM_CYAN = 265
    DIM_WHITE = 266
    BRIGHT_FOREGROUND = 267
    DIM_FOREGROUND = 268

    def to_bright(self) -> NamedColor:
        """The bright counterpart; dim colours step up to normal."""
        value = self.value
        if value <= NamedColor.WHITE.value:
            return NamedColor(value + 8)
        if NamedColor.DIM_BLACK.value <= value <= NamedColor.DIM_WHITE.value:
            return NamedColor(value - NamedColor.DIM_BLACK.value)
        if self is NamedColor.FOREGROUND:
            return NamedColor.BRIGHT_FOREGROUND
        if self is NamedColor.DIM_FOREGROUND:
            return NamedColor.FOREGROUND
        return self


AnsiColor = Union[NamedColor, Indexed, PaletteColor]

DEFAULT_ANSI_16: tuple[PaletteColor, ...] = (
    PaletteColor(0x00, 0x00, 0x00),
    PaletteColor(0xCC, 0x00, 0x00),
    PaletteColor(0x4E, 0x9A, 0x06),
    PaletteColor(0xC4, 0xA0, 0x00),
    PaletteColor(0x34, 0x65, 0xA4),
    PaletteColor(0x75, 0x50, 0x7B),
    PaletteColor(0x06, 0x98, 0x9A),
    PaletteColor(0xD3, 0xD7, 0xCF),
    PaletteColor(0x55, 0x57, 0x53),
    PaletteColor(0xEF, 0x29, 0x29),
    PaletteColor(0x8A, 0xE2, 0x34),
    PaletteColor(0xFC, 0xE9, 0x4F),
    PaletteColor(0x72, 0x9F, 0xCF),
    PaletteColor(0xAD, 0x7F, 0xA8),
    PaletteColor(0x34, 0xE2, 0xE2),
    PaletteColor(0xEE, 0xEE, 0xEC),
)
"""Fallback 16-colour palette, in :class:`NamedColor` order."""

_CUBE_LEVELS = (0, 95, 135, 175, 215, 255)


@dataclass(frozen=True)
class PaletteContext:
    """Every colour needed to resolve a cell colour to RGB."""

    ansi_16: tuple[PaletteColor, ...]
    default_fg: PaletteColor
    default_bg: PaletteColor
    default_cursor: PaletteColor

    def __post_init__(self) -> None:
        palette = tuple(self.ansi_16)
        if len(palette) != 16:
            raise ValueError("ansi_16 must hold exactly 16 colours")
        object.__setattr__(self, "ansi_16", palette)

    @classmethod
    def with_defaults(
        cls,
        default_fg: PaletteColor,
        default_bg: PaletteColor,
        default_cursor: PaletteColor,
    ) -> PaletteContext:
        """A context using :data:`DEFAULT_ANSI_16` and the given sentinels."""
        return cls(DEFAULT_ANSI_16, default_fg, default_bg, default_cursor)


def xterm_256(idx: int, palette: Sequence[PaletteColor]) -> PaletteColor:
    """The xterm 256-palette entry ``idx``.

    0..15 come from ``palette``, 16..231 form the 6x6x6 cube, and 232..255
    are a greyscale ramp from 8 to 238.
    """
    if not 0 <= idx <= 255:
        raise ValueError(f"palette index out of range: {idx}")
    if idx < 16:
        return palette[idx]
    if idx < 232:
        n = idx - 16
        return PaletteColor(
            _CUBE_LEVELS[n // 36], _CUBE_LEVELS[(n // 6) % 6], _CUBE_LEVELS[n % 6]
        )
    grey = min(8 + (idx - 232) * 10, 255)
    return PaletteColor(grey, grey, grey)


def named_color(name: NamedColor, ctx: PaletteContext) -> PaletteColor:
    """RGB for a named colour; dim variants reuse their normal colour."""
    value = name.value
    if value < 16:
        return ctx.ansi_16[value]
    if NamedColor.DIM_BLACK.value <= value <= NamedColor.DIM_WHITE.value:
        return ctx.ansi_16[value - NamedColor.DIM_BLACK.value]
    if name in (
        NamedColor.FOREGROUND,
        NamedColor.BRIGHT_FOREGROUND,
        NamedColor.DIM_FOREGROUND,
    ):
        return ctx.default_fg
    if name is NamedColor.BACKGROUND:
        return ctx.default_bg
    return ctx.default_cursor


def resolve(color: AnsiColor, ctx: PaletteContext) -> PaletteColor:
    """RGB for any cell colour."""
    if isinstance(color, NamedColor):
        return named_color(color, ctx)
    if isinstance(color, Indexed):
        return xterm_256(color.index, ctx.ansi_16)
    if isinstance(color, PaletteColor):
        return color
    raise TypeError(f"not a terminal colour: {color!r}")


def brighten_named(color: AnsiColor) -> AnsiColor:
    """Bold behaviour: named colours become bright, others pass through."""
    if isinstance(color, NamedColor):
        return color.to_bright()
    return color