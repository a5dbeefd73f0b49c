"""Highlighting whole documents.

The top-level interface is the `Highlighter` class, whose `Highlighter.highlight`
method turns a string of code into a `Highlight`: a list of lines of styled
tokens, which can be rendered as JSON or HTML.
"""

import os
import time
import warnings

import tmhighlight.core.errors as errors
from tmhighlight.core.errors import UnknownThemeError, verbosePrint
from tmhighlight.render import renderHTML
from tmhighlight.themes import resolveTheme
from tmhighlight.tokenizer import Line, Token, TokenizerState
from tmhighlight.tokenizer.directives import filterDirective
from tmhighlight.tokenizer.highlight import tokenizeLine
from tmhighlight.tokenizer.merge import mergeLine
from tmhighlight.tokenizer.metadata import unpackStyle


class Highlight:
    """The result of highlighting a document.

    Attributes:
        lines: List of `Line` objects holding `Token` objects. Directive lines
            are not included.
        rootStyle: Default style of the document (the theme's editor colors).
        degraded: True if no grammar was available, in which case each line is
            a single unstyled token.
    """

    def __init__(self, lines, rootStyle, degraded=False):
        self.lines = lines
        self.rootStyle = rootStyle
        self.degraded = degraded

    def toJSON(self):
        return {
            "style": dict(self.rootStyle),
            "content": [line.toJSON() for line in self.lines],
        }

    def toHTML(self):
        return renderHTML(self)

    def __repr__(self):
        plain = ", plain" if self.degraded else ""
        return f"<Highlight: {len(self.lines)} lines{plain}>"


class Highlighter:
    """Highlights code using a grammar engine and the registries.

    Args:
        registry (Registry): Languages, grammars and themes to use.
        engine (GrammarEngine): Grammar engine to tokenize with.
        defaultTheme (str): Label of the theme used when none is requested.

    A `Highlighter` should not be used from several threads at once, since its
    engine holds the current theme; use a separate `Highlighter` (and engine)
    per thread. The registry can be shared, as it is never modified.
    """

    def __init__(self, registry, engine, defaultTheme="Dark (Visual Studio)"):
        self.registry = registry
        self.engine = engine
        self.defaultTheme = defaultTheme

    ## Setup

    def themePath(self, label):
        theme = self.registry.themes.get(label)
        if theme is not None:
            return self.registry.resolvePath(theme.path)
        if os.path.isfile(label):
            return label
        raise UnknownThemeError(label)

    def loadTheme(self, label):
        """Resolve the theme with the given label (or path).

        Any problem with the theme is fatal and propagates to the caller.
        """
        return resolveTheme(self.themePath(label))

    def embeddedLanguages(self, grammar):
        """Map the scopes of languages embedded in **grammar** to their indices.

        Scopes whose language is unknown get index 0.
        """
        embedded = {}
        for scope, languageId in (grammar.embeddedLanguages or {}).items():
            language = self.registry.lookupLanguage(languageId)
            embedded[scope] = language.index if language else 0
        return embedded

    def loadGrammar(self, language):
        """Compile the grammar of **language**, or return None if there is none."""
        scope = self.registry.scopeForLanguage(language)
        grammar = self.registry.grammars.get(scope) if scope else None
        if grammar is None:
            warnings.warn(f"no grammar registered for language {language.id!r}")
            return None
        return self.engine.loadGrammarWithConfiguration(
            scope,
            language.index,
            {"embeddedLanguages": self.embeddedLanguages(grammar)},
        )

    ## Highlighting

    def highlight(self, code, language, theme=None):
        """Highlight a string of code.

        Args:
            code (str): The code; lines are separated by newlines.
            language (str): Id or alias of the language of the code.
            theme (str): Label of the theme to use, overriding the default.

        Returns:
            A `Highlight`. If the language or its grammar cannot be found, the
            result is degraded (unstyled) rather than an error.

        Raises:
            UnknownThemeError: if the theme does not exist.
            ThemeError, OSError, ValueError: if the theme cannot be loaded.
        """
        if errors.verbosityLevel >= 2:
            startTime = time.time()
        resolved = self.loadTheme(theme or self.defaultTheme)
        self.engine.setTheme(resolved.forEngine())
        colors = self.engine.getColorMap()
        rootStyle = resolved.rootStyle
        lines = [line.rstrip("\r") for line in code.split("\n")]

        record = self.registry.lookupLanguage(language)
        if record is None:
            warnings.warn(f"unknown language {language!r}")
            grammar = None
        else:
            grammar = self.loadGrammar(record)
        if grammar is None:
            return Highlight(
                [Line(content=[Token(line)]) for line in lines], rootStyle, degraded=True
            )

        state = TokenizerState()
        tokenized = []
        for line in lines:
            if filterDirective(line, state, grammar, self.registry, record) is None:
                continue
            raw = mergeLine(tokenizeLine(line, state, grammar))
            tokenized.append(
                Line(
                    content=[
                        Token(token.content, unpackStyle(token.style, colors, rootStyle))
                        for token in raw.content
                    ],
                    highlighted=raw.highlighted,
                )
            )

        if errors.verbosityLevel >= 2:
            totalTime = time.time() - startTime
            verbosePrint(
                f"Highlighted {len(lines)} lines of {record.id} "
                f"in {totalTime:.4g} seconds."
            )
        return Highlight(tokenized, rootStyle)
