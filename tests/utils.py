"""Utilities used throughout the test suite."""

from collections import namedtuple
import inspect
import json
import os
import re

import numpy

from tmhighlight.engine import Grammar, GrammarEngine
from tmhighlight.tokenizer.metadata import pack

## A fake grammar engine
#
# The engine understands a tiny grammar format instead of TextMate grammars:
#
#   {"keywords": [...], "lineComment": "#", "blockComment": ["/*", "*/"],
#    "embed": {"<script>": ["source.js", "</script>"]}}
#
# Its rule stack is a tuple of frames ``(scopeName, inBlockComment)``, so it is
# immutable and easy to inspect in tests. Packed metadata uses the real layout.

FakeToken = namedtuple("FakeToken", ("startIndex", "endIndex", "scopes"))

wordPattern = re.compile(r"\s+|\w+|[^\w\s]")


class FakeGrammar(Grammar):
    def __init__(self, engine, scopeName, initialLanguage, embeddedLanguages):
        self.engine = engine
        self.scopeName = scopeName
        self.initialLanguage = initialLanguage
        self.embeddedLanguages = embeddedLanguages
        #: log of tokenize calls, for tests to check
        self.calls = []

    def languageOf(self, scope):
        if scope == self.scopeName:
            return self.initialLanguage
        return self.embeddedLanguages.get(scope, 0)

    def tokenizeLine(self, lineText, ruleStack):
        self.calls.append(("tokenizeLine", lineText))
        tokens, stack = self._tokenize(lineText, ruleStack)
        return [FakeToken(start, end, scopes) for start, end, scopes in tokens], stack

    def tokenizeLine2(self, lineText, ruleStack):
        self.calls.append(("tokenizeLine2", lineText))
        tokens, stack = self._tokenize(lineText, ruleStack)
        if not tokens:
            frames = ruleStack or ((self.scopeName, False),)
            tokens = [(0, 0, (frames[-1][0],))]
        packed = []
        for start, end, scopes in tokens:
            metadata = self.engine.metadataFor(scopes, self.languageOf(scopes[0]))
            if packed and packed[-1] == metadata:
                continue
            packed.extend((start, metadata))
        return numpy.array(packed, dtype=numpy.uint32), stack

    def _tokenize(self, line, ruleStack):
        frames = list(ruleStack or ((self.scopeName, False),))
        tokens = []
        i = 0
        while i < len(line):
            scope, inComment = frames[-1]
            definition = self.engine.definitions[scope]
            block = definition.get("blockComment")
            if inComment:
                close = line.find(block[1], i)
                end = len(line) if close < 0 else close + len(block[1])
                tokens.append((i, end, (scope, "comment.block")))
                if close >= 0:
                    frames.pop()
                i = end
                continue
            opened = self._match(line, i, definition.get("embed", {}))
            if opened:
                inner, _ = definition["embed"][opened]
                tokens.append((i, i + len(opened), (scope, "meta.tag")))
                frames.append((inner, False))
                i += len(opened)
                continue
            closing = self._closingTag(frames)
            if closing and line.startswith(closing, i):
                frames.pop()
                tokens.append((i, i + len(closing), (frames[-1][0], "meta.tag")))
                i += len(closing)
                continue
            lineComment = definition.get("lineComment")
            if lineComment and line.startswith(lineComment, i):
                tokens.append((i, len(line), (scope, "comment.line")))
                break
            if block and line.startswith(block[0], i):
                frames.append((scope, True))
                close = line.find(block[1], i + len(block[0]))
                end = len(line) if close < 0 else close + len(block[1])
                tokens.append((i, end, (scope, "comment.block")))
                if close >= 0:
                    frames.pop()
                i = end
                continue
            word = wordPattern.match(line, i).group()
            if word in definition.get("keywords", ()):
                kind = "keyword"
            elif word.isdigit():
                kind = "constant.numeric"
            else:
                kind = None
            scopes = (scope, kind) if kind else (scope,)
            tokens.append((i, i + len(word), scopes))
            i += len(word)
        return tokens, tuple(frames)

    def _match(self, line, i, embeds):
        for tag in embeds:
            if line.startswith(tag, i):
                return tag
        return None

    def _closingTag(self, frames):
        if len(frames) < 2:
            return None
        parentScope = frames[-2][0]
        for inner, closing in self.engine.definitions[parentScope].get("embed", {}).values():
            if inner == frames[-1][0]:
                return closing
        return None


class FakeEngine(GrammarEngine):
    """Grammar engine over the toy grammars in **definitions** (keyed by scope)."""

    fontStyles = {"italic": 1, "bold": 2, "underline": 4}

    def __init__(self, definitions):
        self.definitions = definitions
        self.loaded = []
        self.grammars = []
        self.theme = None
        self.colorMap = [None]
        self.rules = []
        self.defaults = (0, 0)

    def loadGrammarWithConfiguration(self, scopeName, initialLanguage, configuration):
        self.loaded.append((scopeName, initialLanguage, configuration))
        if scopeName not in self.definitions:
            return None
        grammar = FakeGrammar(
            self, scopeName, initialLanguage, configuration["embeddedLanguages"]
        )
        self.grammars.append(grammar)
        return grammar

    def setTheme(self, theme):
        self.theme = theme
        self.colorMap = [None]
        self.rules = []
        foreground = background = 0
        for rule in theme["settings"]:
            settings = rule.get("settings", {})
            scope = rule.get("scope")
            if not scope:
                if "foreground" in settings:
                    foreground = self.colorId(settings["foreground"])
                if "background" in settings:
                    background = self.colorId(settings["background"])
                continue
            selectors = scope if isinstance(scope, list) else scope.split(",")
            self.rules.append(([s.strip() for s in selectors], settings))
        self.defaults = (foreground, background)
        for _, settings in self.rules:
            for key in ("foreground", "background"):
                if key in settings:
                    self.colorId(settings[key])

    def colorId(self, color):
        color = color.upper()
        if color not in self.colorMap:
            self.colorMap.append(color)
        return self.colorMap.index(color)

    def getColorMap(self):
        return list(self.colorMap)

    def metadataFor(self, scopes, language):
        foreground, background = self.defaults
        font = 0
        for selectors, settings in self.rules:
            if any(_scopeMatches(selector, scopes) for selector in selectors):
                if "foreground" in settings:
                    foreground = self.colorId(settings["foreground"])
                if "background" in settings:
                    background = self.colorId(settings["background"])
                if "fontStyle" in settings:
                    font = 0
                    for word in settings["fontStyle"].split():
                        font |= self.fontStyles.get(word, 0)
        return pack(
            language=language, font=font, foreground=foreground, background=background
        )


def _scopeMatches(selector, scopes):
    return any(
        scope == selector or scope.startswith(selector + ".")
        for scope in scopes
        if scope
    )


## Building extensions and data folders on disk


def writeFile(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        if isinstance(content, str):
            f.write(inspect.cleandoc(content) + "\n")
        else:
            json.dump(content, f)
    return path


def makeExtension(base, name, languages=(), grammars=(), themes=(), files={}):
    """Write an extension with the given contributions under **base**.

    Files referenced by the contributions are created with placeholder content
    unless given in **files** (mapping relative paths to content).
    """
    folder = os.path.join(base, name)
    contributes = {}
    if languages:
        contributes["languages"] = list(languages)
    if grammars:
        contributes["grammars"] = list(grammars)
    if themes:
        contributes["themes"] = list(themes)
    writeFile(
        os.path.join(folder, "package.json"),
        {"name": name, "contributes": contributes},
    )
    for relpath, content in files.items():
        writeFile(os.path.join(folder, relpath), content)
    for grammar in grammars:
        path = os.path.join(folder, grammar["path"])
        if not os.path.exists(path):
            writeFile(path, {"scopeName": grammar["scopeName"], "patterns": []})
    for theme in themes:
        path = os.path.join(folder, theme["path"])
        if not os.path.exists(path):
            writeFile(path, {"colors": {}, "tokenColors": []})
    return folder
