"""Theme contributions."""

import dataclasses
import os

from tmhighlight.core.utils import copyEntry, dataBlock, portable, readJson


def loadTheme(extension, dataPath, contribution):
    """Copy a theme and the files it references into the data directory."""
    block = dataBlock(dataPath, "themes")
    path = _copyTheme(extension, os.path.normpath(contribution.path), block, set())
    return dataclasses.replace(contribution, path=portable(path, dataPath))


def _copyTheme(extension, relpath, block, seen):
    source = os.path.join(extension, relpath)
    seen.add(os.path.realpath(source))
    path = copyEntry(extension, relpath, block)
    if source.endswith(".json"):
        content = readJson(source)
        # referenced files keep their place relative to the theme
        folder = os.path.dirname(relpath)
        tokenColors = content.get("tokenColors")
        if isinstance(tokenColors, str):
            copyEntry(extension, os.path.join(folder, tokenColors), block)
        include = content.get("include")
        if include:
            included = os.path.normpath(os.path.join(folder, include))
            if os.path.realpath(os.path.join(extension, included)) not in seen:
                _copyTheme(extension, included, block, seen)
    return path


def registerThemes(themes):
    registered = {}
    for theme in themes:
        registered[theme.label] = theme
    return registered
