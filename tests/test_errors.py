import pytest

from activityquery.errors import (
    BucketQueryError,
    EmptyQuery,
    InvalidFunctionParameters,
    InvalidType,
    MathError,
    ParsingError,
    QueryError,
    RegexCompileError,
    TimeIntervalError,
    VariableNotDefined,
)


def test_empty_query_display():
    assert str(EmptyQuery()) == "EmptyQuery"


def test_empty_query_is_query_error():
    error = EmptyQuery()
    assert isinstance(error, QueryError)
    assert str(error) == "EmptyQuery"


def test_message_kept():
    assert ParsingError("no_such_function").message == "no_such_function"
    assert VariableNotDefined("no_such_function").message == "no_such_function"
    assert MathError("no_such_function").message == "no_such_function"
    assert InvalidType("no_such_function").message == "no_such_function"
    assert InvalidFunctionParameters("no_such_function").message == "no_such_function"
    assert TimeIntervalError("no_such_function").message == "no_such_function"
    assert BucketQueryError("no_such_function").message == "no_such_function"
    assert RegexCompileError("no_such_function").message == "no_such_function"


def test_display_names_variant():
    assert str(ParsingError("abc")) == 'ParsingError("abc")'
    assert str(VariableNotDefined("abc")) == 'VariableNotDefined("abc")'
    assert str(MathError("abc")) == 'MathError("abc")'
    assert str(InvalidType("abc")) == 'InvalidType("abc")'
    assert str(InvalidFunctionParameters("abc")) == 'InvalidFunctionParameters("abc")'
    assert str(TimeIntervalError("abc")) == 'TimeIntervalError("abc")'
    assert str(BucketQueryError("abc")) == 'BucketQueryError("abc")'
    assert str(RegexCompileError("abc")) == 'RegexCompileError("abc")'


@pytest.mark.parametrize(
    "error, message, display",
    [
        (VariableNotDefined("boom"), "boom", 'VariableNotDefined("boom")'),
        (RegexCompileError("bad"), "bad", 'RegexCompileError("bad")'),
    ],
)
def test_caught_as_query_error(error, message, display):
    assert isinstance(error, QueryError)
    assert error.message == message
    assert str(error) == display


def test_display_escapes_quotes():
    assert str(InvalidType('a"b')) == 'InvalidType("a\\"b")'


def test_display_escapes_newline():
    assert str(MathError("x\ny")) == 'MathError("x\\ny")'