"""Interface to the TextMate grammar engine.

tmhighlight does not interpret TextMate grammars itself. Interpreting the
grammar rules (with their Oniguruma regular expressions) is the job of a
grammar engine, which must provide the two abstract classes below. Engines
are typically thin wrappers around an existing TextMate implementation.

The engine asks us for raw grammar documents through a `GrammarLoader`.
Injection grammars are not supported: `GrammarLoader.getInjections` never
reports any.
"""

import abc
import os
import plistlib
import warnings

from tmhighlight.core.utils import readJson

#: The rule stack to use for the first line of a document.
INITIAL = None


class Grammar(abc.ABC):
    """A compiled grammar, as returned by `GrammarEngine.loadGrammarWithConfiguration`."""

    @abc.abstractmethod
    def tokenizeLine(self, lineText, ruleStack):
        """Tokenize one line into scope-name tokens.

        Returns:
            A pair ``(tokens, ruleStack)``, where each token is an object with
            ``startIndex``, ``endIndex`` and ``scopes`` attributes, and
            ``ruleStack`` is the opaque state to pass in for the next line.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def tokenizeLine2(self, lineText, ruleStack):
        """Tokenize one line into packed metadata.

        Returns:
            A pair ``(tokens, ruleStack)``, where ``tokens`` is a flat sequence of
            unsigned 32-bit integers holding alternating start offsets and
            packed metadata (see `tmhighlight.tokenizer.metadata`).
        """
        raise NotImplementedError


class GrammarEngine(abc.ABC):
    """A registry of compiled grammars plus the current theme."""

    @abc.abstractmethod
    def loadGrammarWithConfiguration(self, scopeName, initialLanguage, configuration):
        """Compile the grammar for **scopeName**.

        Args:
            scopeName (str): Scope of the grammar to load.
            initialLanguage (int): Index reported in the language id field of
                tokens produced by the grammar itself.
            configuration (dict): Has an ``embeddedLanguages`` entry mapping the
                scope names of embedded languages to their indices.

        Returns:
            A `Grammar`, or None if the grammar could not be found.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def setTheme(self, theme):
        """Use the raw theme **theme** (see `ResolvedTheme.forEngine`)."""
        raise NotImplementedError

    @abc.abstractmethod
    def getColorMap(self):
        """The color table of the current theme, indexed by packed color ids."""
        raise NotImplementedError


class GrammarLoader:
    """Provides raw grammar documents to a grammar engine, by scope name."""

    def __init__(self, registry):
        self.registry = registry

    def loadGrammar(self, scopeName):
        """Read the raw grammar for **scopeName**, or return None if it is unknown."""
        grammar = self.registry.grammars.get(scopeName)
        if grammar is None:
            warnings.warn(f"unable to find grammar for {scopeName}.")
            return None
        path = self.registry.resolvePath(grammar.path)
        if os.path.splitext(path)[1].lower() == ".json":
            return readJson(path)
        with open(path, "rb") as f:
            return plistlib.load(f)

    def getInjections(self, scopeName):
        return None
