# moustachio/core/data.py
"""
The value tree templates are rendered against.

A value is one of ``str``, ``int``, ``float``, ``bool``, ``dict`` (string keys)
or ``list``. Absent keys resolve to the ``MISSING`` sentinel, which is never
stored inside a tree. ``build_value`` normalizes arbitrary native Python data
into that shape so the renderer only ever deals with the closed set of types.
"""
import dataclasses
import math
import numbers
from decimal import Decimal
from collections.abc import Iterable, Mapping
from typing import Any, Dict, List, Union

from moustachio.exceptions import TemplateDataError


class _Missing:
    """Marker for a lookup that found nothing. Falsey, renders as ''."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()

Value = Union[str, int, float, bool, Dict[str, Any], List[Any]]


def build_value(native: Any) -> Value:
    """Converts native Python data into a template value tree.

    Mappings become dicts with string keys, sequences and other non-string
    iterables become lists. ``None`` entries are dropped from both so that
    they behave like absent keys.
    """
    if isinstance(native, bool):
        return native
    if isinstance(native, str):
        return native
    if isinstance(native, numbers.Integral):
        return int(native)
    if isinstance(native, (numbers.Real, Decimal)):
        return float(native)
    if isinstance(native, Mapping):
        built: Dict[str, Value] = {}
        for k, v in native.items():
            if v is None:
                continue
            key = str(k)
            if key in built:
                raise TemplateDataError(f"key {k!r} collides with another key named '{key}' in template data")
            built[key] = build_value(v)
        return built
    if dataclasses.is_dataclass(native) and not isinstance(native, type):
        return build_value(dataclasses.asdict(native))
    if isinstance(native, (bytes, bytearray)):
        raise TemplateDataError(f"bytes values are not supported in template data: {native!r}")
    if isinstance(native, Iterable):
        return [build_value(item) for item in native if item is not None]
    raise TemplateDataError(f"unsupported value of type {type(native).__name__} in template data")


def is_truthy(value: Any) -> bool:
    # only missing, false and empty lists are falsey; "", 0 and {} are not.
    if value is MISSING or value is False:
        return False
    if isinstance(value, list) and not value:
        return False
    return True


def format_float(number: float) -> str:
    # shortest round-tripping digits in positional notation, no trailing zeros.
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    text = format(Decimal(repr(number)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def display_value(value: Any) -> str:
    """Returns the text a variable tag writes for ``value``."""
    if value is MISSING or isinstance(value, (dict, list)):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_float(value)
    return str(value)
