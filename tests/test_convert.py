import math

import pytest

from dotconfig.convert import convert, parse_float
from dotconfig.fields import FieldKind


@pytest.mark.parametrize("token", ["1", "t", "T", "TRUE", "true", "True"])
def test_truthy_tokens(token):
    assert convert(token, FieldKind.BOOL) is True


@pytest.mark.parametrize("token", ["0", "f", "F", "FALSE", "false", "False"])
def test_falsy_tokens(token):
    assert convert(token, FieldKind.BOOL) is False


@pytest.mark.parametrize("token", ["yes", "on", "tRuE", "2"])
def test_unknown_bool_tokens_fall_back_to_false(token):
    assert convert(token, FieldKind.BOOL) is False


def test_int_conversion():
    assert convert("1024", FieldKind.INT) == 1024
    assert convert("-7", FieldKind.INT) == -7
    assert convert("+7", FieldKind.INT) == 7


@pytest.mark.parametrize("value", ["1_000", "12abc", "1.5", "0x10"])
def test_invalid_int_is_zero(value):
    assert convert(value, FieldKind.INT) == 0


def test_uint_conversion():
    assert convert("13", FieldKind.UINT) == 13
    assert convert("-13", FieldKind.UINT) == 0
    assert convert("+13", FieldKind.UINT) == 0


def test_float_conversion():
    assert convert("1.19", FieldKind.FLOAT64) == pytest.approx(1.19)
    assert convert("2e3", FieldKind.FLOAT64) == 2000.0
    assert convert("abc", FieldKind.FLOAT64) == 0.0
    assert convert("1e400", FieldKind.FLOAT64) == 0.0
    assert math.isinf(convert("inf", FieldKind.FLOAT64))


def test_float32_rounds_to_single_precision():
    value = convert("1.19", FieldKind.FLOAT32)

    assert value != 1.19
    assert value == pytest.approx(1.19, rel=1e-6)
    assert convert("1e39", FieldKind.FLOAT32) == 0.0


def test_parse_float_rejects_underscores():
    with pytest.raises(ValueError):
        parse_float("1_0.5")


def test_string_is_verbatim():
    assert convert("  spaced  ", FieldKind.STRING) == "  spaced  "
