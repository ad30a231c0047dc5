# moustachio/core/templating/scanner.py
"""
Splits raw template text into a flat sequence of text and tag tokens.

The scanner is where whitespace handling lives: tags that occupy a line on
their own ("standalone" tags) are removed together with the line's
indentation and its newline, so block tags leave no trace in the output.
Delimiter state is passed in and handed back, never stored globally, which
keeps scanning reentrant for partials.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

import structlog

from moustachio.exceptions import MalformedTagError

log = structlog.get_logger(__name__)

Delimiters = Tuple[str, str]

DEFAULT_DELIMITERS: Delimiters = ("{{", "}}")


class TagKind(Enum):
    VARIABLE = "variable"
    UNESCAPED = "unescaped"
    SECTION = "section"
    INVERTED = "inverted"
    CLOSE = "close"
    PARTIAL = "partial"
    COMMENT = "comment"
    SET_DELIMITERS = "set_delimiters"


_SIGILS = {
    "{": TagKind.UNESCAPED,
    "&": TagKind.UNESCAPED,
    "#": TagKind.SECTION,
    "^": TagKind.INVERTED,
    "/": TagKind.CLOSE,
    ">": TagKind.PARTIAL,
    "!": TagKind.COMMENT,
    "=": TagKind.SET_DELIMITERS,
}

# sigils whose tag body is closed by a matching character before the delimiter.
_CLOSING_SIGILS = {"{": "}", "=": "="}

STANDALONE_KINDS = frozenset({
    TagKind.SECTION,
    TagKind.INVERTED,
    TagKind.CLOSE,
    TagKind.PARTIAL,
    TagKind.COMMENT,
    TagKind.SET_DELIMITERS,
})


@dataclass(frozen=True)
class TextToken:
    text: str


@dataclass(frozen=True)
class TagToken:
    kind: TagKind
    name: str
    line: int
    column: int
    standalone: bool = False
    # leading whitespace of a standalone partial's line.
    indent: str = ""


Token = Union[TextToken, TagToken]


@dataclass
class ScanResult:
    tokens: List[Token] = field(default_factory=list)
    delimiters: Delimiters = DEFAULT_DELIMITERS


def _is_blank(text: str) -> bool:
    return not text.strip(" \t")


def _check_delimiters(delimiters: Delimiters, line: int = 1, column: int = 1) -> Delimiters:
    opening, closing = delimiters
    for delimiter in (opening, closing):
        if not delimiter or any(ch.isspace() for ch in delimiter) or "=" in delimiter:
            raise MalformedTagError(f"invalid delimiter {delimiter!r}", line, column)
    return opening, closing


def _parse_delimiters(content: str, line: int, column: int) -> Delimiters:
    parts = content.split()
    if len(parts) != 2:
        raise MalformedTagError(
            f"set-delimiter tag needs exactly two delimiters, got {content!r}", line, column
        )
    return _check_delimiters((parts[0], parts[1]), line, column)


def _check_name(kind: TagKind, content: str, line: int, column: int) -> str:
    if not content:
        raise MalformedTagError(f"empty {kind.value} tag", line, column)
    if any(ch.isspace() for ch in content):
        raise MalformedTagError(f"whitespace inside tag name {content!r}", line, column)
    if kind is not TagKind.PARTIAL and content != "." and "" in content.split("."):
        raise MalformedTagError(f"empty segment in dotted name {content!r}", line, column)
    return content


def _standalone_span(template: str, pos: int, start: int, end: int) -> Optional[Tuple[int, int]]:
    """Returns (line_start, resume) when the tag at start..end is alone on its line.

    ``pos`` is where the pending text run begins; a line start before it means
    an earlier tag shares the line.
    """
    line_start = template.rfind("\n", 0, start) + 1
    if line_start < pos or not _is_blank(template[line_start:start]):
        return None
    line_end = template.find("\n", end)
    tail = template[end:] if line_end == -1 else template[end:line_end]
    if line_end != -1 and tail.endswith("\r"):
        tail = tail[:-1]
    if not _is_blank(tail):
        return None
    return line_start, (len(template) if line_end == -1 else line_end + 1)


def scan(template: str, delimiters: Delimiters = DEFAULT_DELIMITERS) -> ScanResult:
    """Tokenizes ``template`` starting with the given delimiter pair.

    The returned result carries the delimiters in effect at the end of the
    text, after any set-delimiter tags.
    """
    opening, closing = _check_delimiters(delimiters)
    result = ScanResult()
    tokens = result.tokens
    pos = 0
    line = 1
    counted_to = 0

    while pos < len(template):
        start = template.find(opening, pos)
        if start == -1:
            tokens.append(TextToken(template[pos:]))
            break

        line += template.count("\n", counted_to, start)
        counted_to = start
        column = start - template.rfind("\n", 0, start)

        body_start = start + len(opening)
        sigil = template[body_start:body_start + 1]
        kind = _SIGILS.get(sigil)
        if kind is None:
            kind, sigil = TagKind.VARIABLE, ""
        terminator = _CLOSING_SIGILS.get(sigil, "") + closing
        body_start += len(sigil)
        body_end = template.find(terminator, body_start)
        if body_end == -1:
            raise MalformedTagError(f"unterminated tag, expected {terminator!r}", line, column)
        end = body_end + len(terminator)
        content = template[body_start:body_end].strip()

        new_delimiters = None
        if kind is TagKind.SET_DELIMITERS:
            new_delimiters = _parse_delimiters(content, line, column)
        elif kind is not TagKind.COMMENT:
            content = _check_name(kind, content, line, column)

        span = _standalone_span(template, pos, start, end) if kind in STANDALONE_KINDS else None
        if span is not None:
            line_start, resume = span
            text = template[pos:line_start]
            indent = template[line_start:start] if kind is TagKind.PARTIAL else ""
        else:
            text, resume, indent = template[pos:start], end, ""

        if text:
            tokens.append(TextToken(text))
        tokens.append(TagToken(kind, content, line, column, standalone=span is not None, indent=indent))

        if new_delimiters is not None:
            opening, closing = new_delimiters
            log.debug("delimiters_changed", opening=opening, closing=closing, line=line)
        pos = resume

    result.delimiters = (opening, closing)
    return result
