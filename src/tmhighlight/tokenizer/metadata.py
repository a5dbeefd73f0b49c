"""Layout of the packed token metadata produced by the grammar engine.

`Grammar.tokenizeLine2` describes each token by a single unsigned 32-bit
integer. From the least significant bit upwards it holds:

====================  ======  =====
field                 offset  bits
====================  ======  =====
language index        0       8
standard token type   8       3
font style            11      3
foreground color id   14      9
background color id   23      9
====================  ======  =====

This module is the only place that knowledge of the layout lives.
"""

import numpy

LANGUAGEID_MASK = 0b00000000000000000000000011111111
TOKEN_TYPE_MASK = 0b00000000000000000000011100000000
FONT_STYLE_MASK = 0b00000000000000000011100000000000
FOREGROUND_MASK = 0b00000000011111111100000000000000
BACKGROUND_MASK = 0b11111111100000000000000000000000

LANGUAGEID_OFFSET = 0
TOKEN_TYPE_OFFSET = 8
FONT_STYLE_OFFSET = 11
FOREGROUND_OFFSET = 14
BACKGROUND_OFFSET = 23

#: Bits which affect how a token looks.
STYLE_MASK = FONT_STYLE_MASK | FOREGROUND_MASK | BACKGROUND_MASK
#: Bits which affect how a token looks, apart from its colors.
COLORLESS_MASK = FONT_STYLE_MASK

## Font styles

FONT_STYLE_UNSET = -1
FONT_STYLE_NONE = 0
ITALIC_MASK = 1
BOLD_MASK = 2
UNDERLINE_MASK = 4


def unpack(raw, mask, offset):
    return (int(raw) & mask) >> offset


def languageIndex(raw):
    return unpack(raw, LANGUAGEID_MASK, LANGUAGEID_OFFSET)


def fontStyle(raw):
    return unpack(raw, FONT_STYLE_MASK, FONT_STYLE_OFFSET)


def foregroundId(raw):
    return unpack(raw, FOREGROUND_MASK, FOREGROUND_OFFSET)


def backgroundId(raw):
    return unpack(raw, BACKGROUND_MASK, BACKGROUND_OFFSET)


def pack(language=0, tokenType=0, font=0, foreground=0, background=0):
    """Inverse of the accessors above."""
    return (
        (language << LANGUAGEID_OFFSET)
        | (tokenType << TOKEN_TYPE_OFFSET)
        | (font << FONT_STYLE_OFFSET)
        | (foreground << FOREGROUND_OFFSET)
        | (background << BACKGROUND_OFFSET)
    ) & 0xFFFFFFFF


def findStyle(packed, startIndex):
    """Find the metadata of the segment containing offset **startIndex**.

    **packed** alternates segment start offsets and metadata; each segment
    extends to the start of the next one. Offsets past the last boundary
    (including the end of the line) belong to the last segment.
    """
    packed = numpy.asarray(packed, dtype=numpy.uint32)
    if len(packed) < 2:
        return 0
    starts = packed[0::2]
    values = packed[1::2]
    i = int(numpy.searchsorted(starts, startIndex, side="right")) - 1
    if i < 0 or i >= len(values) - 1:
        return int(values[-1])
    return int(values[i])


def unpackFontStyle(font):
    if font in (FONT_STYLE_NONE, FONT_STYLE_UNSET):
        return {}
    style = {}
    if font & ITALIC_MASK:
        style["italic"] = True
    if font & BOLD_MASK:
        style["bold"] = True
    if font & UNDERLINE_MASK:
        style["underline"] = True
    return style


def unpackStyle(raw, colors, rootStyle):
    """Turn packed metadata into a style dictionary.

    Colors are looked up in the engine's color table **colors**. A color equal
    to the one in **rootStyle** is left out, since the token inherits it.
    The engine normalizes colors to upper case, so colors are compared without
    regard to case.
    """
    style = {}
    color = _lookupColor(colors, foregroundId(raw))
    if color and not _sameColor(color, rootStyle.get("color")):
        style["color"] = color
    background = _lookupColor(colors, backgroundId(raw))
    if background and not _sameColor(background, rootStyle.get("background")):
        style["background"] = background
    style.update(unpackFontStyle(fontStyle(raw)))
    return style


def _lookupColor(colors, colorId):
    if 0 <= colorId < len(colors):
        return colors[colorId]
    return None


def _sameColor(a, b):
    return b is not None and a.upper() == b.upper()
