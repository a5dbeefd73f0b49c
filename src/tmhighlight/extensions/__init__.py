"""Loading VS Code extensions and building registries from them.

Each extension is a directory containing a :file:`package.json` manifest. An
extension is loaded with `loadExtension`, which copies its grammar and theme
files into a data directory and returns an `Extension` listing what it
contributes. A list of extensions is then reduced into a `Registry` by
`buildRegistry` (see `tmhighlight.extensions.registry`).

A broken extension never stops the others from loading: `loadExtension`
catches the failure, warns about it, and returns an empty `Extension`.
"""

from dataclasses import dataclass
import os
from typing import Tuple
import warnings

from tmhighlight.core.errors import verbosePrint
from tmhighlight.core.utils import readJson
from tmhighlight.extensions.grammars import loadGrammar
from tmhighlight.extensions.languages import loadLanguage
from tmhighlight.extensions.manifest import Language, Package
from tmhighlight.extensions.themes import loadTheme


@dataclass(frozen=True)
class Extension:
    name: str
    languages: Tuple[Language, ...] = ()
    grammars: tuple = ()
    themes: tuple = ()


def loadPackage(extension):
    return readJson(os.path.join(extension, "package.json"), Package.fromJSON)


def loadExtension(extension, dataPath):
    """Load one extension directory, copying its files into **dataPath**.

    Returns:
        An `Extension`; if anything goes wrong, an empty one named
        ``failed-extension``.
    """
    try:
        package = loadPackage(extension)
        languages = tuple(
            loadLanguage(extension, language) for language in package.languages
        )
        grammars = tuple(
            loadGrammar(extension, dataPath, grammar) for grammar in package.grammars
        )
        themes = tuple(
            loadTheme(extension, dataPath, theme) for theme in package.themes
        )
    except Exception as e:
        warnings.warn(f"failed to load extension {extension}: {e}")
        return Extension(name="failed-extension")

    verbosePrint(f"{package.name} loaded.")
    verbosePrint(count(len(languages), "language"), indent=1)
    for language in languages:
        verbosePrint(f"+ {language.name}", level=2, indent=2)
    verbosePrint(count(len(grammars), "grammar"), indent=1)
    for grammar in grammars:
        verbosePrint(f"+ {grammar.scopeName}", level=2, indent=2)
    verbosePrint(count(len(themes), "theme"), indent=1)
    for theme in themes:
        verbosePrint(f"+ {theme.label}", level=2, indent=2)

    return Extension(
        name=package.name, languages=languages, grammars=grammars, themes=themes
    )


def loadExtensions(extensions, dataPath):
    """Load several extensions, in order."""
    return [loadExtension(extension, dataPath) for extension in extensions]


def count(n, name):
    return f"{n} {name}{'s' if n != 1 else ''}."
