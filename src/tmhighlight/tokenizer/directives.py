"""Highlight directives: comments which mark lines of a document.

A line consisting only of a comment holding one of the directives below
changes which lines are marked as highlighted, and is removed from the
output. Since comment syntax varies between languages (and a document can
switch languages part way through, e.g. a script inside markup), the comment
syntax of the language in effect at the start of each line is used.
"""

import functools
import re

from tmhighlight.tokenizer.metadata import languageIndex

NEXT_LINE = "highlight-next-line"
START = "highlight-start"
END = "highlight-end"

highlightDirectives = (NEXT_LINE, START, END)


@functools.lru_cache(maxsize=None)
def createDirectiveMatcher(comments, directives=highlightDirectives):
    """Compile a pattern matching a directive comment in the given syntax.

    Returns None if the language has no comment syntax at all.
    """
    names = "|".join(re.escape(directive) for directive in directives)
    expressions = []
    if comments.blockComment:
        start, end = comments.blockComment
        expressions.append(
            rf"{re.escape(start)}\s*(?P<block>{names})\s*{re.escape(end)}"
        )
    if comments.lineComment:
        expressions.append(rf"{re.escape(comments.lineComment)}\s*(?P<line>{names})")
    if not expressions:
        return None
    return re.compile(r"\s*(?:" + "|".join(expressions) + r")\s*")


def matchDirective(line, comments):
    """The directive on **line**, or None if it is not a directive comment."""
    matcher = createDirectiveMatcher(comments)
    if matcher is None:
        return None
    match = matcher.fullmatch(line)
    if not match:
        return None
    groups = match.groupdict()
    return groups.get("block") or groups.get("line")


def currentLanguage(grammar, state, registry):
    """Peek at the language in effect at the start of the next line.

    The rule stack is opaque, so we tokenize an empty line and read back the
    language index of the single token produced. Returns None if the index is
    0 or not in the registry.
    """
    packed, _ = grammar.tokenizeLine2("", state.ruleStack)
    if len(packed) < 2:
        return None
    return registry.languageByIndex(languageIndex(packed[1]))


def filterDirective(line, state, grammar, registry, language):
    """Apply the directive on **line**, if any, to **state**.

    Args:
        line (str): The line to check.
        state (TokenizerState): Updated in place if the line is a directive.
        grammar (Grammar): Used to find the language at the start of the line.
        registry (Registry): Used to look up that language's comment syntax.
        language (LanguageRecord): Language of the document, whose comment
            syntax applies when the current language cannot be determined.

    Returns:
        None if the line is a directive (and should be dropped), otherwise the
        line itself.
    """
    current = currentLanguage(grammar, state, registry) or language
    directive = matchDirective(line, current.comments)
    if directive is None:
        return line
    if directive == NEXT_LINE:
        state.nextLineDirective = True
    elif directive == START:
        state.persistedHighlight = True
    elif directive == END:
        state.persistedHighlight = False
    return None
