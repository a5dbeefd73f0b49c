"""The registries consulted at highlight time.

A `Registry` is built once, by a pure reduction over an ordered list of
extensions (`buildRegistry`), or read back from a data directory where a
previous build was saved (`loadRegistry`). After construction it is never
modified, so it can be shared freely between concurrent highlight calls.
"""

import dataclasses
import os
from types import MappingProxyType

from tmhighlight.core.errors import RegistryError, verbosePrint
from tmhighlight.core.utils import cached_property, readJson, writeJson
from tmhighlight.extensions.grammars import registerGrammars, registerInitialScopes
from tmhighlight.extensions.languages import registerIndex, registerLanguages
from tmhighlight.extensions.manifest import GrammarRecord, LanguageRecord, ThemeRecord
from tmhighlight.extensions.themes import registerThemes

#: Names of the files a `Registry` is persisted to, by attribute.
registryFiles = {
    "languages": "languages.json",
    "languagesByIndex": "languagesByIndex.json",
    "grammars": "grammars.json",
    "scopesByIndex": "scopesByIndex.json",
    "themes": "themes.json",
}


class Registry:
    """Read-only lookup tables for languages, grammars and themes.

    Attributes:
        languages: Maps language ids to `LanguageRecord` objects.
        languagesByIndex: Maps language indices to language ids.
        grammars: Maps scope names to `GrammarRecord` objects.
        scopesByIndex: Maps language indices to the scope name of their grammar.
        themes: Maps theme labels to `ThemeRecord` objects.
    """

    def __init__(
        self,
        languages=None,
        languagesByIndex=None,
        grammars=None,
        scopesByIndex=None,
        themes=None,
        dataPath=None,
    ):
        self.languages = MappingProxyType(dict(languages or {}))
        self.languagesByIndex = MappingProxyType(dict(languagesByIndex or {}))
        self.grammars = MappingProxyType(dict(grammars or {}))
        self.scopesByIndex = MappingProxyType(dict(scopesByIndex or {}))
        self.themes = MappingProxyType(dict(themes or {}))
        #: Directory that relative grammar and theme paths are resolved against.
        self.dataPath = dataPath

    ## Lookups

    @cached_property
    def _lookup(self):
        table = {}
        for language in self.languages.values():
            for alias in language.aliases:
                table.setdefault(alias, language)
        # ids always take precedence over aliases
        table.update(self.languages)
        return MappingProxyType(table)

    def lookupLanguage(self, name):
        """Find a language by id or alias, returning None if there is none."""
        return self._lookup.get(name)

    def languageByIndex(self, index):
        languageId = self.languagesByIndex.get(index)
        return None if languageId is None else self.languages.get(languageId)

    def scopeForLanguage(self, language):
        return self.scopesByIndex.get(language.index)

    def languageForFilename(self, filename):
        """Guess the language of a file from its name or extension."""
        base = os.path.basename(filename)
        for language in self.languages.values():
            if base in language.filenames:
                return language
        best, bestLength = None, 0
        for language in self.languages.values():
            for extension in language.extensions:
                if base.endswith(extension) and len(extension) > bestLength:
                    best, bestLength = language, len(extension)
        return best

    def resolvePath(self, path):
        if self.dataPath is None or os.path.isabs(path):
            return path
        return os.path.join(self.dataPath, path)

    ## Persistence

    def toJSON(self):
        return {
            "languages": {
                languageId: language.toJSON()
                for languageId, language in self.languages.items()
            },
            "languagesByIndex": {
                str(index): languageId
                for index, languageId in self.languagesByIndex.items()
            },
            "grammars": {
                scope: grammar.toJSON() for scope, grammar in self.grammars.items()
            },
            "scopesByIndex": {
                str(index): scope for index, scope in self.scopesByIndex.items()
            },
            "themes": {label: theme.toJSON() for label, theme in self.themes.items()},
        }

    def save(self, dataPath):
        """Write the registry as JSON documents into **dataPath**."""
        os.makedirs(dataPath, exist_ok=True)
        for name, content in self.toJSON().items():
            writeJson(os.path.join(dataPath, registryFiles[name]), content)

    def __repr__(self):
        return (
            f"<Registry: {len(self.languages)} languages, "
            f"{len(self.grammars)} grammars, {len(self.themes)} themes>"
        )


def buildRegistry(extensions, start=1, dataPath=None):
    """Reduce an ordered list of `Extension` objects into a `Registry`.

    Args:
        extensions: Loaded extensions, in declaration order. When several
            contribute the same language id the contributions are merged in this
            order; for grammars and themes the last one wins.
        start (int): Index given to the first language (0 is reserved).
        dataPath (str): Directory the extensions' files were copied into.
    """
    languages = registerLanguages(
        (language for extension in extensions for language in extension.languages),
        start=start,
    )
    grammars = registerGrammars(
        grammar for extension in extensions for grammar in extension.grammars
    )
    scopesByIndex = registerInitialScopes(languages, grammars)
    languagesByIndex = registerIndex(languages)
    for index, scope in scopesByIndex.items():
        languageId = languagesByIndex[index]
        languages[languageId] = dataclasses.replace(languages[languageId], scope=scope)
    themes = registerThemes(theme for extension in extensions for theme in extension.themes)
    registry = Registry(
        languages=languages,
        languagesByIndex=languagesByIndex,
        grammars=grammars,
        scopesByIndex=scopesByIndex,
        themes=themes,
        dataPath=dataPath,
    )
    verbosePrint(
        f"found {len(languages)} languages, {len(scopesByIndex)} scopes "
        f"and {len(themes)} themes."
    )
    return registry


def loadRegistry(dataPath):
    """Read a `Registry` previously written with `Registry.save`."""
    content = {}
    for name, filename in registryFiles.items():
        path = os.path.join(dataPath, filename)
        if not os.path.exists(path):
            raise RegistryError(f"registry file {path} is missing")
        content[name] = readJson(path)
    languages = {
        languageId: LanguageRecord.fromJSON(data)
        for languageId, data in content["languages"].items()
    }
    languagesByIndex = {
        int(index): languageId
        for index, languageId in content["languagesByIndex"].items()
    }
    for index, languageId in languagesByIndex.items():
        if languageId not in languages:
            raise RegistryError(f"index {index} refers to unknown language {languageId!r}")
    return Registry(
        languages=languages,
        languagesByIndex=languagesByIndex,
        grammars={
            scope: GrammarRecord.fromJSON(data)
            for scope, data in content["grammars"].items()
        },
        scopesByIndex={
            int(index): scope for index, scope in content["scopesByIndex"].items()
        },
        themes={
            label: ThemeRecord.fromJSON(data)
            for label, data in content["themes"].items()
        },
        dataPath=dataPath,
    )
