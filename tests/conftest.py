import copy

import pytest

from tmhighlight.extensions import loadExtensions
from tmhighlight.extensions.registry import buildRegistry, loadRegistry
from tmhighlight.highlighter import Highlighter
from tmhighlight.themes import clearThemeCache
from tests.utils import FakeEngine, makeExtension

## Sample extensions

#: Toy grammars understood by `FakeEngine`, keyed by scope name.
grammarDefinitions = {
    "source.fake": {
        "keywords": ["def", "return"],
        "lineComment": "#",
        "blockComment": ["/*", "*/"],
    },
    "text.markup": {
        "blockComment": ["<!--", "-->"],
        "embed": {"<script>": ["source.js", "</script>"]},
    },
    "source.js": {
        "keywords": ["function", "var"],
        "lineComment": "//",
        "blockComment": ["/*", "*/"],
    },
}

baseTheme = {
    "colors": {"editor.foreground": "#d4d4d4", "editor.background": "#1e1e1e"},
    "tokenColors": [
        {"scope": "keyword", "settings": {"foreground": "#569cd6"}},
        {"scope": "comment", "settings": {"foreground": "#6a9955", "fontStyle": "italic"}},
    ],
}

darkTheme = {
    "include": "./base.json",
    "tokenColors": [
        {
            "scope": "constant.numeric",
            "settings": {"foreground": "#b5cea8", "fontStyle": "bold"},
        },
    ],
}


def writeSampleExtensions(base):
    """Write the sample extensions, returning their folders in load order."""
    fake = makeExtension(
        base,
        "fake-lang",
        languages=[
            {
                "id": "fake",
                "aliases": ["Fake", "fk"],
                "extensions": [".fk"],
                "configuration": "./language-configuration.json",
            }
        ],
        grammars=[
            {"language": "fake", "scopeName": "source.fake", "path": "./fake.tmLanguage.json"}
        ],
        files={
            "language-configuration.json": """
                {
                    // comments and trailing commas are fine here
                    "comments": {"lineComment": "#", "blockComment": ["/*", "*/"],},
                }
            """
        },
    )
    web = makeExtension(
        base,
        "web",
        languages=[
            {
                "id": "markup",
                "aliases": ["Markup"],
                "extensions": [".mu"],
                "configuration": "./markup.json",
            },
            {
                "id": "js",
                "aliases": ["JavaScript", "javascript"],
                "extensions": [".js"],
                "filenames": ["Jakefile"],
                "configuration": "./js.json",
            },
        ],
        grammars=[
            {
                "language": "markup",
                "scopeName": "text.markup",
                "path": "./syntaxes/markup.json",
                "embeddedLanguages": {"source.js": "js", "source.css": "css"},
            },
            {"language": "js", "scopeName": "source.js", "path": "./syntaxes/js.json"},
        ],
        files={
            "markup.json": {"comments": {"blockComment": ["<!--", "-->"]}},
            "js.json": {"comments": {"lineComment": "//", "blockComment": ["/*", "*/"]}},
        },
    )
    plain = makeExtension(
        base,
        "plain",
        languages=[{"id": "plain", "aliases": ["Plain Text"], "extensions": [".txt"]}],
    )
    themes = makeExtension(
        base,
        "theme-defaults",
        themes=[
            {"label": "Test Dark", "uiTheme": "vs-dark", "path": "./themes/dark.json"},
            {"label": "Test Base", "uiTheme": "vs-dark", "path": "./themes/base.json"},
        ],
        files={"themes/base.json": baseTheme, "themes/dark.json": darkTheme},
    )
    return [fake, web, plain, themes]


## Fixtures


@pytest.fixture(autouse=True)
def freshThemeCache():
    clearThemeCache()
    yield
    clearThemeCache()


@pytest.fixture
def sampleExtensions(tmp_path):
    return writeSampleExtensions(str(tmp_path / "extensions"))


@pytest.fixture
def dataPath(tmp_path):
    return str(tmp_path / "data")


@pytest.fixture
def registry(sampleExtensions, dataPath):
    """Registry built from the sample extensions, saved and read back."""
    extensions = loadExtensions(sampleExtensions, dataPath)
    buildRegistry(extensions, dataPath=dataPath).save(dataPath)
    return loadRegistry(dataPath)


@pytest.fixture
def engine():
    return FakeEngine(copy.deepcopy(grammarDefinitions))


@pytest.fixture
def highlighter(registry, engine):
    return Highlighter(registry, engine, defaultTheme="Test Dark")
