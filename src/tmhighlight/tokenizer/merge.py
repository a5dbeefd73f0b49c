"""Merging adjacent tokens which render the same way.

Two neighbouring tokens are merged if they have identical colors and font
style, or if they have the same font style and one of them is only
whitespace (whose color is invisible anyway). Empty tokens are dropped.
Merging never changes what the rendered line looks like; it only reduces the
number of elements needed to render it.
"""

from tmhighlight.tokenizer import Line, RawToken
from tmhighlight.tokenizer.metadata import COLORLESS_MASK, STYLE_MASK


def canMerge(a, b):
    """Whether tokens **a** and **b** can be merged, and if so the merged style."""
    if (a.style & STYLE_MASK) == (b.style & STYLE_MASK):
        return True, a.style
    if (a.style & COLORLESS_MASK) == (b.style & COLORLESS_MASK):
        if _isWhitespace(a):
            return True, b.style
        if _isWhitespace(b):
            return True, a.style
    return False, None


def mergeTokens(tokens):
    merged = []
    for token in tokens:
        if not token.content:
            continue
        if merged:
            ok, style = canMerge(merged[-1], token)
            if ok:
                merged[-1] = RawToken(merged[-1].content + token.content, style)
                continue
        merged.append(token)
    return merged


def mergeLine(line):
    return Line(content=mergeTokens(line.content), highlighted=line.highlighted)


def _isWhitespace(token):
    return token.content.isspace()
