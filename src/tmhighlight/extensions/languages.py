"""Language contributions: loading, merging and index assignment."""

import dataclasses
import os

from tmhighlight.core.errors import ManifestError
from tmhighlight.core.utils import readJson
from tmhighlight.extensions.manifest import Comments, Language, LanguageRecord


def loadComments(configuration):
    if not isinstance(configuration, dict):
        raise ManifestError("language configuration should be an object")
    return Comments.fromJSON(configuration.get("comments"))


def loadLanguage(extension, contribution):
    """Turn a raw `LanguageContribution` into a `Language`.

    The first alias doubles as the display name; the id is used when there are
    no aliases. Comment syntax is read from the language configuration file.
    """
    name, *aliases = contribution.aliases or (contribution.id,)
    if contribution.configuration:
        comments = readJson(
            os.path.join(extension, contribution.configuration), loadComments
        )
    else:
        comments = Comments()
    return Language(
        id=contribution.id,
        name=name,
        aliases=tuple(aliases),
        extensions=contribution.extensions,
        filenames=contribution.filenames,
        comments=comments,
    )


def mergeLanguages(a, b):
    """Merge two contributions for the same language id.

    A name equal to the id is only a placeholder, so a later real name wins.
    Aliases, extensions and filenames are concatenated without removing
    duplicates.
    """
    return Language(
        id=a.id,
        name=b.name if a.name == a.id else a.name,
        aliases=a.aliases + b.aliases,
        extensions=a.extensions + b.extensions,
        filenames=a.filenames + b.filenames,
        comments=a.comments.merge(b.comments),
    )


def registerLanguages(languages, start=1):
    """Merge languages by id and assign each distinct id an index.

    Indices are assigned in order of first appearance, beginning at **start**.
    Returns a new dict mapping ids to `LanguageRecord` objects.
    """
    if start < 1:
        raise ValueError("language indices must start at 1 or above (0 is reserved)")
    merged = {}
    for language in languages:
        if language.id in merged:
            merged[language.id] = mergeLanguages(merged[language.id], language)
        else:
            merged[language.id] = language
    return {
        languageId: LanguageRecord(**_fields(language), index=index)
        for index, (languageId, language) in enumerate(merged.items(), start=start)
    }


def registerIndex(languages):
    """Build the index-to-id map for a set of registered languages."""
    return {language.index: language.id for language in languages.values()}


def _fields(language):
    return {f.name: getattr(language, f.name) for f in dataclasses.fields(Language)}
