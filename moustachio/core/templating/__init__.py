# moustachio/core/templating/__init__.py
"""
Templating module for moustachio.

Provides the scanner and parser that compile Mustache templates into node
trees, and the TemplateRenderer that renders those trees against data.
"""
from .parser import compile_template, parse
from .partials import ChainedPartialLoader, DictPartialLoader, FileSystemPartialLoader
from .renderer import TemplateRenderer, render
from .scanner import DEFAULT_DELIMITERS, scan

__all__ = [
    "ChainedPartialLoader",
    "DEFAULT_DELIMITERS",
    "DictPartialLoader",
    "FileSystemPartialLoader",
    "TemplateRenderer",
    "compile_template",
    "parse",
    "render",
    "scan",
]
