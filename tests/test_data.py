# tests/test_data.py
"""Tests for building value trees from native data and displaying values."""

from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction

import pytest

from moustachio.core.data import MISSING, build_value, display_value, is_truthy
from moustachio.exceptions import TemplateDataError


@dataclass
class Person:
    name: str
    age: int


class TestBuildValue:
    def test_scalars_pass_through(self):
        assert build_value("s") == "s"
        assert build_value(3) == 3
        assert build_value(1.5) == 1.5
        assert build_value(True) is True

    def test_mapping_keys_become_strings(self):
        assert build_value({1: "one"}) == {"1": "one"}

    def test_colliding_keys_are_rejected(self):
        with pytest.raises(TemplateDataError):
            build_value({1: "a", "1": "b"})

    def test_none_values_are_dropped(self):
        assert build_value({"a": None, "b": [1, None, 2]}) == {"b": [1, 2]}

    def test_tuples_and_generators_become_lists(self):
        assert build_value({"t": (1, 2), "g": (x for x in "ab")}) == {"t": [1, 2], "g": ["a", "b"]}

    def test_map_order_is_kept(self):
        value = build_value(OrderedDict([("z", 1), ("a", 2)]))
        assert list(value) == ["z", "a"]

    def test_numeric_types_are_normalized(self):
        assert build_value(Fraction(1, 4)) == 0.25
        assert build_value(Decimal("1.5")) == 1.5

    def test_dataclasses(self):
        assert build_value({"p": Person("Ann", 30)}) == {"p": {"name": "Ann", "age": 30}}

    @pytest.mark.parametrize("value", [b"bytes", object()])
    def test_unsupported_values(self, value):
        with pytest.raises(TemplateDataError):
            build_value({"x": value})


class TestTruthiness:
    @pytest.mark.parametrize("value", [MISSING, False, []])
    def test_falsey(self, value):
        assert is_truthy(value) is False

    @pytest.mark.parametrize("value", [True, "", "x", 0, 0.0, {}, {"a": 1}, [0]])
    def test_truthy(self, value):
        assert is_truthy(value) is True

    def test_missing_is_a_falsey_singleton(self):
        assert not MISSING
        assert type(MISSING)() is MISSING


class TestDisplay:
    @pytest.mark.parametrize("value,text", [
        (85, "85"),
        (1.210, "1.21"),
        (2.0, "2"),
        (-0.5, "-0.5"),
        (1e16, "10000000000000000"),
        (1e-05, "0.00001"),
        (float("-inf"), "-inf"),
        (float("nan"), "NaN"),
        (True, "true"),
        ("text", "text"),
        (MISSING, ""),
        ({"a": 1}, ""),
        ([1], ""),
    ])
    def test_display_value(self, value, text):
        assert display_value(value) == text
