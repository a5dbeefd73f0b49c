"""Tokenizing a single line with the grammar engine."""

from tmhighlight.tokenizer import Line, RawToken
from tmhighlight.tokenizer.metadata import findStyle


def tokenizeLine(line, state, grammar):
    """Tokenize **line**, advancing **state** past it.

    The scope-name tokens give the token boundaries; each token's style is
    taken from the packed metadata segment its start falls in. Both calls start
    from the same rule stack, and the one returned with the packed metadata is
    kept for the next line.

    Returns:
        A `Line` of `RawToken` objects.
    """
    tokens, _ = grammar.tokenizeLine(line, state.ruleStack)
    packed, ruleStack = grammar.tokenizeLine2(line, state.ruleStack)
    tokenized = Line(
        content=[
            RawToken(
                content=line[token.startIndex : token.endIndex],
                style=findStyle(packed, token.startIndex),
            )
            for token in tokens
        ],
        highlighted=state.highlighted,
    )
    state.ruleStack = ruleStack
    state.nextLineDirective = False
    return tokenized
