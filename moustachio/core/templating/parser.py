# moustachio/core/templating/parser.py
"""
Builds the node tree from scanner tokens and checks that sections nest.
"""
from dataclasses import dataclass, field
from typing import Iterable, List

import structlog

from moustachio.exceptions import MismatchedSectionError

from .nodes import NodeTree, PartialNode, SectionNode, TextNode, VariableNode, Node, split_path
from .scanner import DEFAULT_DELIMITERS, Delimiters, TagKind, TagToken, TextToken, Token, scan

log = structlog.get_logger(__name__)


@dataclass
class _OpenSection:
    token: TagToken
    children: List[Node] = field(default_factory=list)


def _append_text(children: List[Node], text: str) -> None:
    # adjacent text runs are merged; elided tags leave them split.
    if children and isinstance(children[-1], TextNode):
        children[-1] = TextNode(children[-1].text + text)
    else:
        children.append(TextNode(text))


def parse(tokens: Iterable[Token]) -> NodeTree:
    """Turns a token sequence into a node tree.

    Raises MismatchedSectionError for a close tag that does not match the
    innermost open section and for sections still open at the end.
    """
    root: List[Node] = []
    stack: List[_OpenSection] = []

    for token in tokens:
        children = stack[-1].children if stack else root
        if isinstance(token, TextToken):
            _append_text(children, token.text)
            continue

        kind = token.kind
        if kind is TagKind.VARIABLE or kind is TagKind.UNESCAPED:
            children.append(VariableNode(split_path(token.name), escape=kind is TagKind.VARIABLE))
        elif kind is TagKind.SECTION or kind is TagKind.INVERTED:
            stack.append(_OpenSection(token))
        elif kind is TagKind.CLOSE:
            if not stack:
                raise MismatchedSectionError(
                    token.name, f"closing tag '{token.name}' on line {token.line} has no open section"
                )
            opened = stack.pop()
            if opened.token.name != token.name:
                raise MismatchedSectionError(
                    token.name,
                    f"closing tag '{token.name}' on line {token.line} does not match "
                    f"open section '{opened.token.name}' from line {opened.token.line}",
                )
            section = SectionNode(
                split_path(opened.token.name),
                tuple(opened.children),
                inverted=opened.token.kind is TagKind.INVERTED,
            )
            (stack[-1].children if stack else root).append(section)
        elif kind is TagKind.PARTIAL:
            children.append(PartialNode(token.name, indent=token.indent))
        # comments and delimiter changes only affected scanning.

    if stack:
        unclosed = stack[-1].token
        raise MismatchedSectionError(
            unclosed.name, f"section '{unclosed.name}' opened on line {unclosed.line} is never closed"
        )
    return tuple(root)


def compile_template(template: str, delimiters: Delimiters = DEFAULT_DELIMITERS) -> NodeTree:
    """Scans and parses ``template`` into a reusable node tree."""
    result = scan(template, delimiters)
    nodes = parse(result.tokens)
    log.debug("template_compiled", tokens=len(result.tokens), nodes=len(nodes))
    return nodes
