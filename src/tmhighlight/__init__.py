"""Syntax highlighting with VS Code grammars and themes.

Registries of languages, grammars and themes are built from VS Code extensions
ahead of time (see `tmhighlight.extensions`) and then used by a `Highlighter`
to turn code into lines of styled tokens.
"""

from tmhighlight.core.errors import setDebuggingOptions
from tmhighlight.extensions.registry import Registry, buildRegistry, loadRegistry
from tmhighlight.highlighter import Highlight, Highlighter
from tmhighlight.themes import resolveTheme
