"""Rendering a `Highlight` as JSON or HTML."""

import html
import json

#: How each style property is written in CSS.
cssProperties = {
    "color": lambda value: f"color:{value}",
    "background": lambda value: f"background:{value}",
    "italic": lambda value: "font-style:italic",
    "bold": lambda value: "font-weight:bold",
    "underline": lambda value: "text-decoration:underline",
}


def styleToCSS(style):
    return ";".join(
        cssProperties[key](value)
        for key, value in style.items()
        if key in cssProperties and value
    )


def _styleAttribute(style):
    css = styleToCSS(style)
    return f' style="{html.escape(css)}"' if css else ""


def renderToken(token):
    return f"<span{_styleAttribute(token.style)}>{html.escape(token.content)}</span>"


def renderLine(line):
    marker = ' class="highlighted"' if line.highlighted else ""
    tokens = "".join(renderToken(token) for token in line.content)
    return f"<div{marker}>{tokens}</div>"


def renderHTML(highlight):
    """One ``<div>`` per line and one ``<span>`` per token, inside a ``<pre>``."""
    lines = "".join(renderLine(line) for line in highlight.lines)
    return f"<pre{_styleAttribute(highlight.rootStyle)}>{lines}</pre>"


def renderJSON(highlight, **kwargs):
    return json.dumps(highlight.toJSON(), **kwargs)
