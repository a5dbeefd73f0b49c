"""Grammar contributions: copying grammar files and linking them to languages."""

import dataclasses
import os
import warnings

from tmhighlight.core.utils import copyEntry, dataBlock, portable


def loadGrammar(extension, dataPath, contribution):
    """Copy the grammar file into the data directory and rewrite its path."""
    path = copyEntry(extension, contribution.path, dataBlock(dataPath, "grammars"))
    return dataclasses.replace(contribution, path=portable(path, dataPath))


def registerGrammars(grammars):
    """Key grammars by scope name; a later grammar shadows an earlier one."""
    registered = {}
    for grammar in grammars:
        registered[grammar.scopeName] = grammar
    return registered


def registerInitialScopes(languages, grammars):
    """Link each language index to the scope of its grammar.

    Only grammars declaring a ``language`` take part. A grammar naming a
    language nobody contributed is skipped with a warning.
    """
    scopes = {}
    for grammar in grammars.values():
        if not grammar.language:
            continue
        language = languages.get(grammar.language)
        if language is None:
            warnings.warn(
                f"grammar {grammar.scopeName} refers to unknown language "
                f"{grammar.language!r}"
            )
            continue
        scopes[language.index] = grammar.scopeName
    return scopes
