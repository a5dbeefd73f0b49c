"""Resolving VS Code color themes into TextMate rules and a color map.

Two kinds of theme files exist in the wild:

* TextMate themes (:file:`.tmTheme`, property lists) holding a flat list of
  rules under ``settings``, each with an optional ``scope`` and a ``settings``
  mapping;
* JSON themes with a ``colors`` mapping of UI color ids, ``tokenColors``
  (either an inline list of rules or the path of a TextMate theme), and an
  optional ``include`` naming another JSON theme this one builds upon.

`resolveTheme` turns either into a `ResolvedTheme`. Included themes are
resolved completely before the including theme, and their rules come first in
the result, so that the grammar engine (where the last matching rule wins)
lets the including theme override what it includes.

Adapted from VS Code's ``colorThemeData.ts`` (MIT License).
"""

import copy
from dataclasses import dataclass, field
import functools
import os
import plistlib
from xml.parsers.expat import ExpatError

from tmhighlight.core.errors import ThemeError
from tmhighlight.core.utils import readJson

#: Settings of a global (scope-less) rule which also define UI colors.
settingToColorIdMapping = {
    "background": ("editor.background",),
    "foreground": ("editor.foreground",),
}

#: Settings kept on a global rule; anything else only makes sense for the UI.
retainedGlobalSettings = ("foreground", "background", "fontStyle")


@dataclass
class ResolvedTheme:
    """A theme with its include chain flattened.

    Attributes:
        rules: TextMate rules, included themes' rules first.
        colorMap: Maps color ids (e.g. ``editor.background``) to colors.
    """

    rules: list = field(default_factory=list)
    colorMap: dict = field(default_factory=dict)
    name: str = ""

    @property
    def foreground(self):
        return self.colorMap.get("editor.foreground") or self.colorMap.get("foreground")

    @property
    def background(self):
        return self.colorMap.get("editor.background") or self.colorMap.get("background")

    @property
    def rootStyle(self):
        """Style of the document as a whole; keys without a color are omitted."""
        style = {}
        if self.foreground:
            style["color"] = self.foreground
        if self.background:
            style["background"] = self.background
        return style

    def forEngine(self):
        """The raw theme handed to the grammar engine's ``setTheme``.

        A scope-less rule carrying the editor colors is put first so that the
        engine's default colors agree with `rootStyle`.
        """
        defaults = {
            key: value
            for key, value in (
                ("foreground", self.foreground),
                ("background", self.background),
            )
            if value
        }
        return {
            "name": self.name,
            "settings": [{"settings": defaults}] + copy.deepcopy(self.rules),
        }


## Top-level API


def resolveTheme(path):
    """Load the theme at **path**, following its include chain.

    Resolved themes are cached per file for the life of the process; each call
    returns a fresh copy which the caller may modify.

    Raises:
        OSError: if a file in the chain cannot be read.
        ValueError: if a file in the chain is not valid JSON (or JSON5).
        ThemeError: if a file in the chain does not have the expected structure.
    """
    return copy.deepcopy(_resolveCached(os.path.realpath(path)))


def clearThemeCache():
    _resolveCached.cache_clear()


@functools.lru_cache(maxsize=None)
def _resolveCached(path):
    theme = loadRawTheme(path)
    theme.name = os.path.splitext(os.path.basename(path))[0]
    return theme


## Loading


def loadRawTheme(location, result=None, seen=()):
    """Load a theme file into **result**, which is created if not given."""
    if result is None:
        result = ResolvedTheme()
    if location in seen:
        raise ThemeError(location, "Themes include each other in a cycle.")
    seen = seen + (location,)

    if os.path.splitext(location)[1].lower() != ".json":
        loadSyntaxTokens(location, result.rules, result.colorMap)
        return result

    content = readJson(location)
    if not isinstance(content, dict):
        raise ThemeError(location, "The theme should be an object.")

    include = content.get("include")
    if include:
        included = os.path.join(os.path.dirname(location), include)
        loadRawTheme(os.path.normpath(included), result, seen)

    if isinstance(content.get("settings"), list):
        convertSettings(content["settings"], result.rules, result.colorMap, location)
        return result

    colors = content.get("colors")
    if colors:
        if not isinstance(colors, dict):
            raise ThemeError(location, "Property 'colors' is not of type 'object'.")
        for colorId, colorHex in colors.items():
            # colors set to null are ignored
            if isinstance(colorHex, str):
                result.colorMap[colorId] = colorHex

    tokenColors = content.get("tokenColors")
    if tokenColors:
        if isinstance(tokenColors, list):
            result.rules.extend(tokenColors)
        elif isinstance(tokenColors, str):
            # UI colors of a referenced TextMate theme are not used
            loadSyntaxTokens(
                os.path.join(os.path.dirname(location), tokenColors), result.rules, {}
            )
        else:
            raise ThemeError(
                location,
                "Property 'tokenColors' should be either an array specifying colors "
                "or a path to a TextMate theme file.",
            )
    return result


def loadSyntaxTokens(location, resultRules, resultColors):
    """Load the rules of a TextMate theme (a property list)."""
    with open(location, "rb") as f:
        try:
            content = plistlib.load(f)
        except (ExpatError, ValueError) as e:
            raise ThemeError(location, f"Not a TextMate theme ({e}).") from e
    settings = content.get("settings") if isinstance(content, dict) else None
    if not isinstance(settings, list):
        raise ThemeError(location, "'settings' is not array.")
    convertSettings(settings, resultRules, resultColors, location)


def convertSettings(oldSettings, resultRules, resultColors, location="<theme>"):
    """Append TextMate rules to **resultRules**, handling global rules.

    A rule without a scope applies to the whole document: its foreground and
    background become editor colors, and any other setting besides the font
    style is removed from it.
    """
    for rule in oldSettings:
        if not isinstance(rule, dict):
            raise ThemeError(location, f"Rule {rule!r} is not an object.")
        resultRules.append(rule)
        if rule.get("scope"):
            continue
        settings = rule.get("settings")
        if not settings:
            rule["settings"] = {}
            continue
        for key in list(settings):
            colorHex = settings[key]
            if isinstance(colorHex, str):
                for colorId in settingToColorIdMapping.get(key, ()):
                    resultColors[colorId] = colorHex
            if key not in retainedGlobalSettings:
                del settings[key]
