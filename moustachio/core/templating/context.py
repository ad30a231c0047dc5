# moustachio/core/templating/context.py
"""
Scoped name resolution over the frames pushed while rendering.
"""
from contextlib import contextmanager
from typing import Any, Iterator, List

from moustachio.core.data import MISSING

from .nodes import Path


class ContextStack:
    """Frames of the data tree, innermost last.

    The first segment of a name is searched for across all frames; later
    segments are looked up only inside the value found for the previous one,
    so a dotted name never jumps back to an outer frame halfway through.
    """

    def __init__(self, root: Any):
        self._frames: List[Any] = [root]

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def top(self) -> Any:
        return self._frames[-1]

    def push(self, frame: Any) -> None:
        self._frames.append(frame)

    def pop(self) -> Any:
        if len(self._frames) == 1:
            raise IndexError("cannot pop the root frame of a context stack")
        return self._frames.pop()

    @contextmanager
    def pushed(self, frame: Any) -> Iterator["ContextStack"]:
        self.push(frame)
        try:
            yield self
        finally:
            self.pop()

    def _find_first(self, key: str) -> Any:
        for frame in reversed(self._frames):
            if isinstance(frame, dict) and key in frame:
                return frame[key]
        return MISSING

    def resolve(self, path: Path) -> Any:
        if not path:
            return self.top
        value = self._find_first(path[0])
        for key in path[1:]:
            if not isinstance(value, dict) or key not in value:
                return MISSING
            value = value[key]
        return value
