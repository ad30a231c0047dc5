# moustachio/cli/console_output.py
"""
Prints diagnostic views of compiled templates to the console (stderr).
"""
import sys
from typing import Optional

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.tree import Tree
import structlog

from moustachio.core.templating.nodes import NodeTree, PartialNode, SectionNode, TextNode, VariableNode, path_name

log = structlog.get_logger(__name__)

def _label(node) -> str:
    if isinstance(node, TextNode):
        return f"[dim]text[/dim] {escape(repr(node.text))}"
    if isinstance(node, VariableNode):
        kind = "variable" if node.escape else "unescaped"
        return f"[cyan]{kind}[/cyan] {escape(path_name(node.path))}"
    if isinstance(node, SectionNode):
        kind = "inverted" if node.inverted else "section"
        return f"[yellow]{kind}[/yellow] {escape(path_name(node.path))}"
    if isinstance(node, PartialNode):
        indent = f" (indent {node.indent!r})" if node.indent else ""
        return f"[magenta]partial[/magenta] {escape(node.name)}{indent}"
    return type(node).__name__

def _add_children(branch: Tree, nodes: NodeTree):
    for node in nodes:
        child = branch.add(_label(node), highlight=False)
        if isinstance(node, SectionNode):
            _add_children(child, node.children)

def build_node_tree_view(nodes: NodeTree, title: str = "template") -> Tree:
    """Builds a rich Tree mirroring the compiled node tree."""
    root = Tree(f"[bold]{escape(title)}[/bold]")
    _add_children(root, nodes)
    return root

def print_node_tree(nodes: NodeTree, title: str = "template", console: Optional[RichConsole] = None):
    log.debug("console_node_tree_requested", nodes=len(nodes))
    console = console or RichConsole(file=sys.stderr)
    console.print("--- compiled template ---", style="cyan", markup=False)
    console.print(build_node_tree_view(nodes, title))
