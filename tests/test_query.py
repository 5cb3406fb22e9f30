from datetime import datetime, timedelta, timezone

import pytest

from activityquery.datatype import Event
from activityquery.errors import (
    EmptyQuery,
    InvalidType,
    MathError,
    ParsingError,
    VariableNotDefined,
)
from activityquery.functions import Datastore
from activityquery.query import query

TIME_INTERVAL = "1980-01-01T00:00:00Z/2080-01-02T00:00:00Z"
BUCKET_ID = "testid"


@pytest.fixture
def empty():
    return Datastore()


@pytest.fixture
def populated():
    now = datetime.now(timezone.utc)
    e1 = Event(timestamp=now, duration=timedelta(0), data={"key": "value"})
    e2 = Event(timestamp=datetime.now(timezone.utc), duration=timedelta(0), data={"key": "value"})
    return Datastore(
        buckets={BUCKET_ID: {"type": "testtype", "client": "testclient", "hostname": "testhost"}},
        events={BUCKET_ID: [e1, e2]},
    )


def run(code, ds):
    return query(code, TIME_INTERVAL, ds)


def test_bool(empty):
    assert run("True;False;a=True;return True;", empty) is True


def test_number(empty):
    assert run("1;1.;return 1.1;", empty) == 1.1


@pytest.mark.parametrize(
    "code, expected",
    [
        ("return 1==1;", True),
        ("return  2==1;", False),
        ('return  "a"=="a";', True),
        ('return  "a"=="b";', False),
        ("return  True==True;", True),
        ("return  False==True;", False),
    ],
)
def test_equals(empty, code, expected):
    assert run(code, empty) is expected


def test_equals_different_types(empty):
    with pytest.raises(InvalidType):
        run("return  True==1;", empty)


def test_return(empty):
    assert run("return 1;", empty) == 1.0
    assert run("RETURN=1;", empty) == 1.0
    assert run("return 1+1;", empty) == 2.0


@pytest.mark.parametrize(
    "code, expected",
    [
        ("n=1;\nif True { n=2; }\nreturn n;", 2.0),
        ("n=1;\nif False { n=2; }\nreturn n;", 1.0),
        ("a=True; n=1;\nif a { n=2; }\nreturn n;", 2.0),
        ("a=False; n=1;\nif a { n=2; }\nreturn n;", 1.0),
        ("a=False; n=1;\nif a { }\nelse { n=3; }\nreturn n;", 3.0),
        ("a=False; b=True; n=1;\nif a { n=2; }\nelif b { n=3; }\nreturn n;", 3.0),
        (
            "a=False; b=True; n=1;\nif a { n=2; }\nelif a { n=3; }\nelse { n=4; }\nreturn n;",
            4.0,
        ),
        ("a=True; n=1;\nif a { if a { n = 2; } }\nreturn n;", 2.0),
    ],
)
def test_if(empty, code, expected):
    assert run(code, empty) == expected


def test_function(empty):
    assert run("return print(1);", empty) is None
    assert run("return print(1, 2);", empty) is None
    with pytest.raises(VariableNotDefined) as info:
        run("return no_such_function(1);", empty)
    assert info.value.message == "no_such_function"
    with pytest.raises(InvalidType) as info:
        run("invalid_type=1; return invalid_type(1);", empty)
    assert info.value.message == "invalid_type"


def test_query_bucket(populated):
    events = run('return query_bucket("testid");', populated)
    assert len(events) == 2
    assert all(event.data == {"key": "value"} for event in events)


def test_all_functions(populated):
    code = """
        events = query_bucket("testid");
        events = limit_events(events, 10000);
        events = concat(events, query_bucket("testid"));
        total_duration = sum_durations(events);
        bucketnames = query_bucket_names();
        print("test", "test2");
        found = contains(bucketnames, "testid");
        return [events, total_duration, bucketnames, found];"""
    events, total, names, found = run(code, populated)
    assert len(events) == 4
    assert total == 0.0
    assert names == ["testid"]
    assert found is True


def test_string(empty):
    assert run('return "test \\" with escaped quote";', empty) == 'test " with escaped quote'


@pytest.mark.parametrize(
    "code, expected",
    [
        ("return [];", []),
        ("return [1];", [1.0]),
        ("return [1+1];", [2.0]),
        ("return [1,1];", [1.0, 1.0]),
        ("return [1,1+2];", [1.0, 3.0]),
        ("return [1,1+1,1+2+3,4/3,[1+2]];", [1.0, 2.0, 6.0, 4 / 3, [3.0]]),
    ],
)
def test_list(empty, code, expected):
    assert run(code, empty) == expected


def test_comment(empty):
    assert run("return 1;# testing 123", empty) == 1.0


@pytest.mark.parametrize(
    "code, expected",
    [
        ("return {};", {}),
        ('return {"test": 2};', {"test": 2.0}),
        ('return {"test": 2, "test2": "teststr"};', {"test": 2.0, "test2": "teststr"}),
        ('return {"test": {"test": "test"}};', {"test": {"test": "test"}}),
    ],
)
def test_dict(empty, code, expected):
    assert run(code, empty) == expected


def test_concat(empty):
    assert run("return [1]+[2];", empty) == [1.0, 2.0]
    assert run('return "a"+"b";', empty) == "ab"


@pytest.mark.parametrize(
    "code, expected",
    [
        ('a = ["b", "a"]; return contains(a, "a");', True),
        ('a = ["b", "a"]; return contains(a, "c");', False),
        ('a = {"a": 1}; return contains(a, "a");', True),
        ('a = {"b": 1}; return contains(a, "a");', False),
    ],
)
def test_contains(empty, code, expected):
    assert run(code, empty) is expected


@pytest.mark.parametrize(
    "code, expected",
    [
        ("return 1+1;", 2.0),
        ("return 1-1;", 0.0),
        ("return 3*5;", 15.0),
        ("return 4/2;", 2.0),
        ("return 2.5%1;", 0.5),
        ("return 1+1+0+1;", 3.0),
    ],
)
def test_math(empty, code, expected):
    assert run(code, empty) == expected


def test_divide_by_zero(empty):
    with pytest.raises(MathError):
        run("return 1/0;", empty)


def test_empty_query(empty):
    with pytest.raises(EmptyQuery) as info:
        run("", empty)
    assert str(info.value) == "EmptyQuery"


def test_parsing_error(empty):
    with pytest.raises(ParsingError):
        run("return 1", empty)


def test_interval_as_datetimes(populated):
    interval = (datetime(1980, 1, 1, tzinfo=timezone.utc), datetime(2080, 1, 2, tzinfo=timezone.utc))
    assert len(query('return query_bucket("testid");', interval, populated)) == 2