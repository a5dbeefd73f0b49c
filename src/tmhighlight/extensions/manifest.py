"""Data shapes for extension manifests and the records built from them.

An extension's :file:`package.json` contributes languages, grammars and themes.
The raw contributions are parsed into the ``*Contribution`` classes below; the
registry builder then turns them into the records which are persisted and read
back at highlight time. None of these classes have any behavior beyond
conversion to and from JSON.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Optional, Tuple

from tmhighlight.core.errors import ManifestError

## Comment syntax


@dataclass(frozen=True)
class Comments:
    """Comment syntax of a language, used to recognize highlight directives."""

    blockComment: Optional[Tuple[str, str]] = None
    lineComment: Optional[str] = None

    @classmethod
    def fromJSON(cls, data):
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ManifestError(f"'comments' should be an object, not {data!r}")
        block = data.get("blockComment")
        if block is not None:
            if (
                not isinstance(block, (list, tuple))
                or len(block) != 2
                or not all(isinstance(part, str) for part in block)
            ):
                raise ManifestError(f"malformed blockComment {block!r}")
            block = tuple(block)
        line = data.get("lineComment")
        # newer configurations may give {"comment": "//", "noIndent": true}
        if isinstance(line, dict):
            line = line.get("comment")
        if line is not None and not isinstance(line, str):
            raise ManifestError(f"malformed lineComment {line!r}")
        return cls(blockComment=block, lineComment=line)

    def merge(self, other):
        """Shallow merge; keys set in **other** override ours."""
        return Comments(
            blockComment=other.blockComment or self.blockComment,
            lineComment=other.lineComment or self.lineComment,
        )

    def toJSON(self):
        result = {}
        if self.blockComment:
            result["blockComment"] = list(self.blockComment)
        if self.lineComment:
            result["lineComment"] = self.lineComment
        return result


## Raw contributions


@dataclass(frozen=True)
class LanguageContribution:
    id: str
    aliases: Tuple[str, ...] = ()
    extensions: Tuple[str, ...] = ()
    filenames: Tuple[str, ...] = ()
    #: Path of the language configuration file, relative to the extension.
    configuration: Optional[str] = None

    @classmethod
    def fromJSON(cls, data):
        if "id" not in data:
            raise ManifestError(f"language contribution without an id: {data!r}")
        return cls(
            id=data["id"],
            aliases=tuple(data.get("aliases") or ()),
            extensions=tuple(data.get("extensions") or ()),
            filenames=tuple(data.get("filenames") or ()),
            configuration=data.get("configuration"),
        )


@dataclass(frozen=True)
class GrammarRecord:
    """A TextMate grammar, keyed by its scope name.

    The same shape is used for the raw contribution and the registered record;
    only **path** changes (relative to the extension vs. the data directory).
    """

    scopeName: str
    path: str
    #: Id of the language this grammar is the primary grammar for, if any.
    language: Optional[str] = None
    tokenTypes: Optional[dict] = None
    #: Maps embedded scope names to language ids.
    embeddedLanguages: Optional[dict] = None

    @classmethod
    def fromJSON(cls, data):
        try:
            return cls(
                scopeName=data["scopeName"],
                path=data["path"],
                language=data.get("language"),
                tokenTypes=data.get("tokenTypes"),
                embeddedLanguages=data.get("embeddedLanguages"),
            )
        except KeyError as e:
            raise ManifestError(f"grammar contribution missing {e.args[0]!r}") from None

    def toJSON(self):
        return {
            key: value
            for key, value in dataclasses.asdict(self).items()
            if value is not None
        }


GrammarContribution = GrammarRecord


@dataclass(frozen=True)
class ThemeRecord:
    label: str
    path: str
    uiTheme: str = "vs-dark"
    id: Optional[str] = None

    @classmethod
    def fromJSON(cls, data):
        try:
            return cls(
                label=data["label"],
                path=data["path"],
                uiTheme=data.get("uiTheme", "vs-dark"),
                id=data.get("id"),
            )
        except KeyError as e:
            raise ManifestError(f"theme contribution missing {e.args[0]!r}") from None

    def toJSON(self):
        return {
            key: value
            for key, value in dataclasses.asdict(self).items()
            if value is not None
        }


ThemeContribution = ThemeRecord


@dataclass(frozen=True)
class Package:
    """The parts of an extension's :file:`package.json` we care about."""

    name: str
    languages: Tuple[LanguageContribution, ...] = ()
    grammars: Tuple[GrammarContribution, ...] = ()
    themes: Tuple[ThemeContribution, ...] = ()

    @classmethod
    def fromJSON(cls, data):
        if not isinstance(data, dict) or "name" not in data:
            raise ManifestError("package.json has no 'name'")
        contributes = data.get("contributes") or {}
        return cls(
            name=data["name"],
            languages=tuple(
                LanguageContribution.fromJSON(language)
                for language in contributes.get("languages", ())
            ),
            grammars=tuple(
                GrammarContribution.fromJSON(grammar)
                for grammar in contributes.get("grammars", ())
            ),
            themes=tuple(
                ThemeContribution.fromJSON(theme)
                for theme in contributes.get("themes", ())
            ),
        )


## Loaded languages


@dataclass(frozen=True)
class Language:
    """A language contribution after its configuration has been read."""

    id: str
    name: str
    aliases: Tuple[str, ...] = ()
    extensions: Tuple[str, ...] = ()
    filenames: Tuple[str, ...] = ()
    comments: Comments = field(default_factory=Comments)


@dataclass(frozen=True)
class LanguageRecord(Language):
    """A registered language, with its index in the compact index space.

    Index 0 is never assigned: it stands for "unknown language" in the packed
    token metadata produced by the grammar engine.
    """

    index: int = 0
    #: Scope name of the language's grammar, if one was contributed.
    scope: Optional[str] = None

    @classmethod
    def fromJSON(cls, data):
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            aliases=tuple(data.get("aliases", ())),
            extensions=tuple(data.get("extensions", ())),
            filenames=tuple(data.get("filenames", ())),
            comments=Comments.fromJSON(data.get("comments")),
            index=data["index"],
            scope=data.get("scope"),
        )

    def toJSON(self):
        result = {
            "id": self.id,
            "name": self.name,
            "aliases": list(self.aliases),
            "extensions": list(self.extensions),
            "filenames": list(self.filenames),
            "comments": self.comments.toJSON(),
            "index": self.index,
        }
        if self.scope:
            result["scope"] = self.scope
        return result
