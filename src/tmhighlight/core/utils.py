"""Assorted utility functions."""

import functools
import os
import pathlib
import shutil

import json5

from tmhighlight.core.errors import ManifestError


def cached(oldMethod):
    """Decorator for making a method with no arguments cache its result"""
    storageName = f"_cached_{oldMethod.__name__}"

    @functools.wraps(oldMethod)
    def wrapper(self):
        try:
            return self.__getattribute__(storageName)
        except AttributeError:
            value = oldMethod(self)
            object.__setattr__(self, storageName, value)
            return value

    return wrapper


def cached_property(oldMethod):
    return property(cached(oldMethod))


## Reading and writing data files


def readJson(path, transform=None):
    """Read a JSON (or JSON5) file, optionally passing the result through **transform**.

    VS Code's bundled files routinely contain comments and trailing commas,
    so everything is parsed with the JSON5 parser.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = json5.load(f)
    return transform(content) if transform else content


def writeJson(path, content):
    with open(path, "w", encoding="utf-8") as f:
        json5.dump(content, f, quote_keys=True, trailing_commas=False)


def dataBlock(dataPath, blockName):
    return os.path.join(dataPath, blockName)


def copyEntry(extension, relpath, block):
    """Copy the file **relpath** of **extension** into **block**, returning the new path.

    Each extension gets its own folder in the block, laid out like the extension
    itself, so files of different extensions never collide and relative
    references between copied files still resolve.
    """
    root = os.path.abspath(extension)
    source = os.path.normpath(os.path.join(root, relpath))
    inner = os.path.relpath(source, root)
    if inner == os.pardir or inner.startswith(os.pardir + os.sep):
        raise ManifestError(f"{relpath} is outside the extension {extension}")
    dest = os.path.join(block, os.path.basename(root), inner)
    os.makedirs(os.path.dirname(dest), exist_ok=True)
    shutil.copyfile(source, dest)
    return dest


def portable(path, dataPath):
    """Express **path** relative to **dataPath**, with forward slashes."""
    return pathlib.Path(os.path.relpath(path, dataPath)).as_posix()


def childDirectories(path):
    """Absolute paths of the subdirectories of **path**, in sorted order."""
    base = os.path.abspath(path)
    entries = sorted(os.scandir(base), key=lambda entry: entry.name)
    return [entry.path for entry in entries if entry.is_dir()]
