# moustachio/core/templating/renderer.py
"""
Contains the TemplateRenderer class, which walks compiled node trees against
a context stack and writes the result to a sink.
"""
import io
import sys
from typing import Any, Optional, TextIO, Union

import structlog

from moustachio.config.settings import RenderConfig
from moustachio.core.data import build_value, display_value, is_truthy
from moustachio.exceptions import RecursionLimitExceededError
from moustachio.util import escape_html, indent_lines

from .context import ContextStack
from .nodes import Node, NodeTree, PartialNode, SectionNode, TextNode, VariableNode
from .parser import compile_template
from .partials import FileSystemPartialLoader, PartialLoader, as_partial_loader

log = structlog.get_logger(__name__)


class TemplateRenderer:
    """Renders templates against data, expanding partials through a loader.

    ``partials`` may be a mapping of name to template text or any callable
    returning the text (or None) for a name. Without one, partials are read
    from ``config.partial_dirs`` when that is set.
    """
    def __init__(self, partials: Union[None, dict, PartialLoader] = None,
                 config: Optional[RenderConfig] = None):
        self.config = config or RenderConfig()
        if partials is None and self.config.partial_dirs:
            partials = FileSystemPartialLoader(self.config.partial_dirs, self.config.partial_extension)
        self.partial_loader = as_partial_loader(partials)
        self.recursion_limit = self.config.recursion_limit

    def render(self, template: Union[str, NodeTree], data: Any = None) -> str:
        """Renders the template and returns the output as a string."""
        buffer = io.StringIO()
        self.render_to(template, data, buffer)
        return buffer.getvalue()

    def render_to(self, template: Union[str, NodeTree], data: Any, sink: TextIO) -> None:
        """Renders into ``sink``; anything with a ``write(str)`` method works.

        A template given as text is compiled before anything is written, so
        syntax errors never leave partial output behind. Errors raised while
        rendering leave whatever was already written in the sink.
        """
        nodes = compile_template(template) if isinstance(template, str) else template
        root = build_value(data) if data is not None else {}
        log.debug("rendering_template", nodes=len(nodes), root_type=type(root).__name__)
        try:
            self.render_nodes(nodes, ContextStack(root), sink)
        except RecursionError as e:
            raise RecursionLimitExceededError(sys.getrecursionlimit()) from e

    def render_nodes(self, nodes: NodeTree, stack: ContextStack, sink: TextIO, depth: int = 0) -> None:
        for node in nodes:
            self._render_node(node, stack, sink, depth)

    def _render_node(self, node: Node, stack: ContextStack, sink: TextIO, depth: int) -> None:
        if isinstance(node, TextNode):
            sink.write(node.text)
        elif isinstance(node, VariableNode):
            text = display_value(stack.resolve(node.path))
            if text:
                sink.write(escape_html(text) if node.escape else text)
        elif isinstance(node, SectionNode):
            self._render_section(node, stack, sink, depth)
        elif isinstance(node, PartialNode):
            self._render_partial(node, stack, sink, depth)
        else:
            raise TypeError(f"unknown template node {type(node).__name__}")

    def _render_section(self, node: SectionNode, stack: ContextStack, sink: TextIO, depth: int) -> None:
        value = stack.resolve(node.path)
        if node.inverted:
            if not is_truthy(value):
                self.render_nodes(node.children, stack, sink, depth)
            return
        if not is_truthy(value):
            return
        for item in (value if isinstance(value, list) else (value,)):
            with stack.pushed(item):
                self.render_nodes(node.children, stack, sink, depth)

    def _render_partial(self, node: PartialNode, stack: ContextStack, sink: TextIO, depth: int) -> None:
        text = self.partial_loader(node.name)
        if text is None:
            log.debug("partial_not_found", partial=node.name)
            return
        if depth >= self.recursion_limit:
            raise RecursionLimitExceededError(self.recursion_limit, node.name)

        # partials never inherit the caller's delimiter overrides.
        nodes = compile_template(text)
        target = io.StringIO() if node.indent else sink
        try:
            self.render_nodes(nodes, stack, target, depth + 1)
        except RecursionError as e:
            raise RecursionLimitExceededError(self.recursion_limit, node.name) from e
        if node.indent:
            sink.write(indent_lines(target.getvalue(), node.indent))


def render(template: Union[str, NodeTree], data: Any = None,
           partials: Union[None, dict, PartialLoader] = None,
           sink: Optional[TextIO] = None, config: Optional[RenderConfig] = None) -> str:
    """Renders ``template`` with ``data`` in one call.

    With a ``sink`` the output is written there and an empty string is
    returned; otherwise the output is returned.
    """
    renderer = TemplateRenderer(partials=partials, config=config)
    if sink is None:
        return renderer.render(template, data)
    renderer.render_to(template, data, sink)
    return ""
