import pytest

from bunster.arithmetic import (
    compare_int,
    conditional_int,
    format_int,
    int_power,
    negate_int,
    parse_int,
    var_increment,
)
from bunster.shell import Shell


def test_parse_int_truncates_fraction():
    assert parse_int("5.5") == 5


@pytest.mark.parametrize("text", ["abc", "", " 5", "inf", "nan", "1_0"])
def test_parse_int_invalid_is_zero(text):
    assert parse_int(text) == 0


@pytest.mark.parametrize("number", [0, 7, -42, 123456789])
def test_format_parse_round_trip(number):
    assert format_int(number) == str(number)
    assert parse_int(format_int(number)) == number


def test_var_increment_post_and_pre():
    shell = Shell(environ={})
    shell.set_var("x", "5")
    assert var_increment(shell, "x", 1, True) == 5
    after_post = int(shell.read_var("x"))
    assert after_post > 5
    assert var_increment(shell, "x", 1, False) == int(shell.read_var("x"))
    assert int(shell.read_var("x")) > after_post


def test_var_increment_non_numeric_starts_from_zero():
    shell = Shell(environ={})
    shell.set_var("x", "abc")
    assert var_increment(shell, "x", 3, True) == 0
    assert shell.read_var("x") == "3"


def test_negate_int():
    assert negate_int(0) == 1
    assert negate_int(12) == 0
    assert negate_int(negate_int(12)) == 1


@pytest.mark.parametrize("base", [-3, 0, 2, 10])
def test_int_power_identities(base):
    assert int_power(base, 1) == base
    assert int_power(base, 2) == base * base


def test_int_power_special_cases():
    assert int_power(2, -1) == 0
    assert int_power(0, -1) == 0
    assert int_power(5, 0) == 1


@pytest.mark.parametrize("x,y", [(1, 2), (3, 3), (5, -1)])
def test_compare_int_complements(x, y):
    assert compare_int(x, "<", y) + compare_int(x, ">=", y) == 1
    assert compare_int(x, ">", y) + compare_int(x, "<=", y) == 1
    assert compare_int(x, "==", y) + compare_int(x, "!=", y) == 1


def test_compare_int_reflexive_and_logical():
    assert compare_int(4, "==", 4) == 1
    assert compare_int(4, "<", 4) == 0
    assert compare_int(1, "&&", 0) == 0
    assert compare_int(1, "||", 0) == 1
    assert compare_int(1, "??", 1) == 0


def test_conditional_int():
    assert conditional_int(1, 10, 20) == 10
    assert conditional_int(0, 10, 20) == 20