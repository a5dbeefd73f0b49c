"""Line-by-line tokenization of a document.

A document is processed one line at a time, strictly in order, since each
line starts from the rule stack the previous one ended with. For each line:

1. the directive filter (`tmhighlight.tokenizer.directives`) checks whether
   the line is a highlight directive comment, in which case it is dropped;
2. otherwise the line is tokenized (`tmhighlight.tokenizer.highlight`),
   giving `RawToken` objects with packed style metadata;
3. adjacent tokens which look alike are merged (`tmhighlight.tokenizer.merge`);
4. the packed styles are unpacked into `Token` objects.
"""

from dataclasses import dataclass, field
from typing import Any, List

from tmhighlight.engine import INITIAL


@dataclass
class TokenizerState:
    """Mutable state threaded through the lines of one document.

    A fresh state is made for each document and must not be shared.
    """

    #: Opaque rule stack from the grammar engine.
    ruleStack: Any = INITIAL
    #: Whether the next line was marked by ``highlight-next-line``.
    nextLineDirective: bool = False
    #: Whether we are between ``highlight-start`` and ``highlight-end``.
    persistedHighlight: bool = False

    @property
    def highlighted(self):
        return self.nextLineDirective or self.persistedHighlight


@dataclass
class RawToken:
    content: str
    #: Packed metadata; see `tmhighlight.tokenizer.metadata`.
    style: int


@dataclass
class Token:
    content: str
    style: dict = field(default_factory=dict)

    def toJSON(self):
        return {"content": self.content, "style": dict(self.style)}


@dataclass
class Line:
    content: List[Any] = field(default_factory=list)
    highlighted: bool = False

    def toJSON(self):
        return {
            "highlighted": self.highlighted,
            "content": [token.toJSON() for token in self.content],
        }
