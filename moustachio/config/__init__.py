# moustachio/config/__init__.py
from .settings import DataFormat, RenderConfig

__all__ = ["DataFormat", "RenderConfig"]
