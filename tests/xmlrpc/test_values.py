"""Tests for the wire value model."""

from datetime import datetime

import pytest

from typepub.xmlrpc import (
    Arr,
    Bool,
    DateTime,
    Double,
    Int,
    Nil,
    Str,
    Struct,
    classify_number,
    format_iso8601,
    to_python,
    to_value,
)


class TestClassifyNumber:
    """Integral numbers are Int regardless of their Python type."""

    def test_int(self):
        assert classify_number(5) == Int(5)

    def test_fractional_float(self):
        assert classify_number(5.5) == Double(5.5)

    def test_integral_float(self):
        result = classify_number(5.0)
        assert result == Int(5)
        assert isinstance(result.value, int)

    def test_negative_integral_float(self):
        assert classify_number(-3.0) == Int(-3)

    def test_infinity_stays_double(self):
        assert isinstance(classify_number(float("inf")), Double)


class TestToValue:
    """Tests for lifting native Python values."""

    def test_none(self):
        assert to_value(None) == Nil()

    def test_bool_before_int(self):
        assert to_value(True) == Bool(True)
        assert to_value(False) == Bool(False)

    def test_scalars(self):
        assert to_value("hi") == Str("hi")
        assert to_value(7) == Int(7)
        assert to_value(2.0) == Int(2)
        assert to_value(2.25) == Double(2.25)

    def test_datetime(self):
        when = datetime(2024, 3, 9, 7, 5, 1)
        assert to_value(when) == DateTime(when)

    def test_nested(self):
        value = to_value({"tags": ["a", 1], "meta": {"ok": True}})

        assert value == Struct(
            {
                "tags": Arr((Str("a"), Int(1))),
                "meta": Struct({"ok": Bool(True)}),
            }
        )

    def test_struct_keeps_insertion_order(self):
        value = to_value({"z": 1, "a": 2, "m": 3})
        assert list(value.members) == ["z", "a", "m"]

    def test_existing_value_unchanged(self):
        original = Str("x")
        assert to_value(original) is original

    def test_unknown_type_becomes_nil(self):
        assert to_value(object()) == Nil()


class TestDateTime:
    """Tests for timestamp rendering and equality."""

    def test_format_is_zero_padded(self):
        assert format_iso8601(datetime(2024, 1, 2, 3, 4, 5)) == "20240102T03:04:05"

    def test_format_small_year(self):
        assert format_iso8601(datetime(99, 1, 1)) == "00990101T00:00:00"

    def test_subsecond_precision_ignored(self):
        a = DateTime(datetime(2024, 1, 2, 3, 4, 5, 999999))
        b = DateTime(datetime(2024, 1, 2, 3, 4, 5))
        assert a == b

    def test_equal_to_wire_text(self):
        assert DateTime(datetime(2024, 1, 2, 3, 4, 5)) == DateTime("20240102T03:04:05")

    def test_different_seconds_not_equal(self):
        assert DateTime(datetime(2024, 1, 2, 3, 4, 5)) != DateTime(datetime(2024, 1, 2, 3, 4, 6))


class TestToPython:
    """Tests for lowering values to plain data."""

    def test_round_trip_plain_data(self):
        data = {"title": "Hi", "count": 3, "ratio": 0.5, "tags": ["a"], "none": None}
        assert to_python(to_value(data)) == data

    def test_datetime_becomes_text(self):
        assert to_python(DateTime(datetime(2024, 1, 2))) == "20240102T00:00:00"

    def test_rejects_non_value(self):
        with pytest.raises(TypeError):
            to_python("plain string")
