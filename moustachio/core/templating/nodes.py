# moustachio/core/templating/nodes.py
"""
Node variants of a compiled template. Trees are immutable once parsed and can
be rendered any number of times, from any thread.
"""
from dataclasses import dataclass
from typing import Tuple, Union

# dotted names split into segments; the implicit iterator '.' is the empty path.
Path = Tuple[str, ...]


@dataclass(frozen=True)
class TextNode:
    text: str


@dataclass(frozen=True)
class VariableNode:
    path: Path
    escape: bool = True


@dataclass(frozen=True)
class SectionNode:
    path: Path
    children: Tuple["Node", ...]
    inverted: bool = False


@dataclass(frozen=True)
class PartialNode:
    name: str
    indent: str = ""


Node = Union[TextNode, VariableNode, SectionNode, PartialNode]
NodeTree = Tuple[Node, ...]


def split_path(name: str) -> Path:
    if name == ".":
        return ()
    return tuple(name.split("."))


def path_name(path: Path) -> str:
    return ".".join(path) if path else "."
