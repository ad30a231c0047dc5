"""moustachio: Mustache templates compiled to node trees and rendered against data."""

__version__ = "0.1.0"

from moustachio.logging_setup import configure_library_logging

configure_library_logging()

from moustachio.core.data import MISSING, build_value
from moustachio.core.templating import (
    ChainedPartialLoader,
    DictPartialLoader,
    FileSystemPartialLoader,
    TemplateRenderer,
    compile_template,
    render,
)
from moustachio.config.settings import RenderConfig
from moustachio.exceptions import (
    MalformedTagError,
    MismatchedSectionError,
    MoustachioError,
    RecursionLimitExceededError,
    TemplateError,
)

__all__ = [
    "ChainedPartialLoader",
    "DictPartialLoader",
    "FileSystemPartialLoader",
    "MISSING",
    "MalformedTagError",
    "MismatchedSectionError",
    "MoustachioError",
    "RecursionLimitExceededError",
    "RenderConfig",
    "TemplateError",
    "TemplateRenderer",
    "build_value",
    "compile_template",
    "render",
]
