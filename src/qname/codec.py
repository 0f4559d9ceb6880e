import re
from functools import lru_cache
from typing import Iterable, List

DEFAULT_SEPARATOR = "."
DEFAULT_ESCAPE = "\\"


def _overlaps(left: str, right: str) -> bool:
    """True when a proper suffix of `left` is a prefix of `right`."""
    return any(right.startswith(left[i:]) for i in range(1, len(left)))


def validate_tokens(separator: str, escape: str) -> None:
    """
    Rejects token pairs that would make joined text ambiguous.

    Both tokens must be non-empty strings, neither may contain the other, and
    no token may end with the start of itself or of the other token. `::` is
    refused for that reason: in `a:::b` the scanner cannot tell whether the
    first segment is `a` or `a:`.
    """
    if not isinstance(separator, str) or not separator:
        raise ValueError(f"Separator must be a non-empty string, got {separator!r}.")
    if not isinstance(escape, str) or not escape:
        raise ValueError(f"Escape token must be a non-empty string, got {escape!r}.")
    if separator in escape or escape in separator:
        raise ValueError(
            f"Separator {separator!r} and escape token {escape!r} must not overlap."
        )
    for left, right in (
        (separator, separator),
        (escape, escape),
        (separator, escape),
        (escape, separator),
    ):
        if _overlaps(left, right):
            raise ValueError(
                f"Token {left!r} ends with the start of {right!r}; "
                "joined names would not parse back unambiguously."
            )


@lru_cache(maxsize=32)
def _special_pattern(separator: str, escape: str) -> re.Pattern[str]:
    return re.compile(f"{re.escape(escape)}|{re.escape(separator)}")


@lru_cache(maxsize=32)
def _token_pattern(separator: str, escape: str) -> re.Pattern[str]:
    esc = re.escape(escape)
    sep = re.escape(separator)
    return re.compile(f"{esc}(?:{esc}|{sep})?|{sep}")


def escape_segment(
    segment: str, separator: str = DEFAULT_SEPARATOR, escape: str = DEFAULT_ESCAPE
) -> str:
    """
    Doubles every escape token in the segment and prefixes every separator
    with the escape token, in a single left-to-right pass.
    """
    validate_tokens(separator, escape)
    return _special_pattern(separator, escape).sub(
        lambda m: escape + m.group(0), segment
    )


def join_segments(
    segments: Iterable[str],
    separator: str = DEFAULT_SEPARATOR,
    escape: str = DEFAULT_ESCAPE,
) -> str:
    validate_tokens(separator, escape)
    return separator.join(escape_segment(s, separator, escape) for s in segments)


def split_escaped(
    text: str, separator: str = DEFAULT_SEPARATOR, escape: str = DEFAULT_ESCAPE
) -> List[str]:
    """
    Splits text on every separator that is not escaped, and unescapes the
    resulting fragments.

    - Empty fragments (leading, trailing or repeated separators) are dropped.
    - `escape escape` collapses to one literal escape token.
    - `escape separator` collapses to one literal separator.
    - A lone escape token, including one at the end of the text, is kept as is.
    """
    validate_tokens(separator, escape)

    fragments: List[str] = []
    current: List[str] = []

    def flush() -> None:
        fragment = "".join(current)
        if fragment:
            fragments.append(fragment)
        current.clear()

    pos = 0
    for match in _token_pattern(separator, escape).finditer(text):
        current.append(text[pos : match.start()])
        token = match.group(0)
        if token == separator:
            flush()
        elif token == escape:
            current.append(escape)
        else:
            current.append(token[len(escape) :])
        pos = match.end()

    current.append(text[pos:])
    flush()
    return fragments
