# moustachio/core/templating/partials.py
"""
Partial loaders: callables mapping a partial name to its raw template text,
or None when the name is unknown. A missing partial renders as nothing.
"""
from collections.abc import Mapping
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

import structlog

log = structlog.get_logger(__name__)

PartialLoader = Callable[[str], Optional[str]]

DEFAULT_PARTIAL_EXTENSION = ".mustache"


class DictPartialLoader:
    """Serves partials from an in-memory table."""
    def __init__(self, partials: Mapping):
        self.partials = dict(partials)

    def __call__(self, name: str) -> Optional[str]:
        return self.partials.get(name)


class FileSystemPartialLoader:
    """Looks partials up as files under one or more directories.

    ``name`` may contain subdirectories. Each directory is tried with
    ``<name><extension>`` first, then ``<name>`` as given. Names that would
    resolve outside a search directory are never read.
    """
    def __init__(self, search_dirs: Iterable[Union[str, Path]], extension: str = DEFAULT_PARTIAL_EXTENSION,
                 encoding: str = "utf-8"):
        self.search_dirs = [Path(d) for d in search_dirs]
        self.extension = extension
        self.encoding = encoding

    def _candidates(self, directory: Path, name: str):
        if self.extension:
            yield directory / f"{name}{self.extension}"
        yield directory / name

    def __call__(self, name: str) -> Optional[str]:
        for directory in self.search_dirs:
            root = directory.resolve()
            for candidate in self._candidates(directory, name):
                resolved = candidate.resolve()
                if not resolved.is_relative_to(root):
                    log.warning("partial_outside_search_dir_ignored", partial=name, path=str(resolved))
                    continue
                if resolved.is_file():
                    log.debug("partial_loaded_from_file", partial=name, path=str(resolved))
                    return resolved.read_text(encoding=self.encoding)
        return None


class ChainedPartialLoader:
    """Asks each loader in turn; the first one that knows the name wins."""
    def __init__(self, *loaders: PartialLoader):
        self.loaders = loaders

    def __call__(self, name: str) -> Optional[str]:
        for loader in self.loaders:
            text = loader(name)
            if text is not None:
                return text
        return None


def _no_partials(name: str) -> Optional[str]:
    return None


def as_partial_loader(partials: Union[None, Mapping, PartialLoader]) -> PartialLoader:
    """Accepts None, a mapping of name -> text, or a loader callable."""
    if partials is None:
        return _no_partials
    if isinstance(partials, Mapping):
        return DictPartialLoader(partials)
    if callable(partials):
        return partials
    raise TypeError(f"partials must be a mapping or a callable, not {type(partials).__name__}")
