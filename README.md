# activityquery

`activityquery` interprets a small query language that selects and combines time-tracking
events. An event is a timestamped record with a duration and a data dict. The package also has
helpers for a local activity server: a configuration file, per-user directories, a device
identifier, logging setup, a Host-header check, a CORS policy, mapping of datastore errors to HTTP
errors, and a settings store.

## Installation

Install the package with pip. The `test` extra adds pytest, which runs the test suite.

## The query language

A program is a sequence of statements. Each statement ends with `;`, except an `if` chain. The
result of the query is the value given to the last `return` that ran. A program can also assign
to `RETURN` directly.

```
events = query_bucket("window");
events = limit_events(events, 10);
return sum_durations(events);
```

The language has these constructs:

- **Literals.** Numbers such as `1`, `1.` and `1.5` are always floats. Strings are written
  `"text"`, and `\"` inside a string stands for a quote. Booleans are `true`, `false`, `True` and
  `False`. Lists are written `[1, 2]` and dicts `{"key": 1}`. Dict keys must be string literals.
- **Operators.** `+` adds numbers and also joins two lists or two strings. `-`, `*`, `/` and `%`
  take numbers only. `==` compares two values of the same type. All operators have the same
  precedence and group from the left, so `1 + 2 * 3` is `9`. Use parentheses to group
  differently.
- **Assignment.** `name = expression;`
- **Conditionals.** `if cond { ... } elif other { ... } else { ... }`. A condition must evaluate
  to a boolean.
- **Function calls.** `name(arg, ...)`
- **Comments.** A comment starts with `#` and runs to the end of the line.

Some operations raise an error:

- comparing values of different types with `==`
- dividing by zero
- using an undefined name
- calling a value that is not a function

Tokenizing stops without an error at the first character that cannot start a token.

## Running a query

```python
from datetime import datetime, timedelta, timezone

from activityquery.datatype import Event
from activityquery.functions import Datastore
from activityquery.query import query

datastore = Datastore(
    buckets={"window": {"hostname": "myhost"}},
    events={
        "window": [
            Event(datetime(2020, 5, 1, tzinfo=timezone.utc), timedelta(seconds=30), {"app": "editor"}),
        ]
    },
)

result = query(
    'events = query_bucket("window"); return sum_durations(events);',
    "2020-01-01T00:00:00Z/2021-01-01T00:00:00Z",
    datastore,
)
assert result == 30.0
```

The interval is either a `start/end` string in ISO 8601 or a pair of datetimes. Inside the query
it is available as the `TIMEINTERVAL` variable.

`functions.Datastore` is a store that lives in memory. Any object with the following two methods
can stand in for it:

- `get_events(bucket_id, start, end, limit)`, which returns `Event` objects
- `get_buckets()`, which returns a mapping keyed by bucket id

Query values are plain Python objects: `None`, `bool`, `float`, `str`, `datatype.Event`, `list`,
`dict` and `datatype.Function`.

### Built-in functions

`functions.builtins()` returns these functions:

| Function | What it does |
| --- | --- |
| `print(args...)` | Logs each argument. |
| `query_bucket(bucket_id)` | Returns the bucket's events that overlap the time interval, newest first. |
| `query_bucket_names()` | Returns the ids of all buckets. |
| `contains(list_or_dict, item)` | Tests whether a list holds a value, or whether a dict holds a key. |
| `limit_events(events, n)` | Returns the first `n` events. |
| `sum_durations(events)` | Returns the total duration in seconds, at millisecond precision. |
| `concat(lists...)` | Joins several event lists. |

### Errors

Every query failure raises a subclass of `errors.QueryError`:

- `ParsingError`
- `EmptyQuery` (no value was returned)
- `VariableNotDefined`
- `MathError`
- `InvalidType`
- `InvalidFunctionParameters`
- `TimeIntervalError`
- `BucketQueryError`
- `RegexCompileError`

### Lower-level pieces

- `lexer.tokenize(text)` yields `Token` objects.
- `parser.parse_source(text)` returns a `syntax.Program`.
- `interpret.interpret_program(program, interval, datastore, builtins)` runs a program with any
  set of functions you supply.
- `datatype` holds the conversion helpers that functions use to check their arguments:
  - `to_events`, `to_string`, `to_count` and `to_json`
  - `to_rule`, `to_tag_rules` and `to_category_rules`, which build `Rule` objects from dicts
    such as `{"type": "regex", "regex": "...", "ignore_case": true}`
  - `query_eq`, which applies the typed equality of `==`

## Server helpers

- `config.create_config(testing, config_dir)` reads `config.toml`, or `config-testing.toml` in
  testing mode, and returns an `AWConfig`. If the file is missing, it first writes a default file
  in which every setting is commented out. `AWConfig` has these fields:
  - `address`, default `127.0.0.1`
  - `port`, default 5601, or 5667 when testing
  - `testing`
  - `cors`
  - `custom_static`
- `dirs` returns the per-user directories and creates them if needed:
  - `get_config_dir()`
  - `get_data_dir()`
  - `get_cache_dir()`
  - `get_log_dir(module)`
  - `db_path(testing)`
- `device_id.get_device_id(data_dir)` returns a UUID4 that is stored in a `device_id` file and
  reused on later calls.
- `logconfig.setup_logger(module, testing, verbose, log_dir)` sends coloured log lines to stdout
  and plain messages to a timestamped log file. It returns the path of that file. The `LOG_LEVEL`
  environment variable overrides the level; it accepts `trace`, `debug`, `info`, `warn` or
  `error`.
- `hostcheck.HostCheck(address).is_allowed(host_header)` checks the Host header:
  - If the server is bound to `127.0.0.1` or `localhost`, only those hosts are accepted, with
    any port. A missing header is rejected.
  - On any other address, every request is accepted.
- `cors.cors_policy(config)` returns a `CorsPolicy` with exact and regex origins. It allows the
  methods GET, POST and DELETE.
- `httperror.from_datastore_error(error)` turns a `DatastoreError` into an `HttpError`. The
  `HttpError` has a status and a `{"message": ...}` body. `export_disposition(bucket_ids)` gives
  the `Content-Disposition` value for an export.
- `settings` stores JSON values under the `settings.` namespace in a `KeyValueStore`. It has these
  functions:
  - `settings_get`
  - `setting_get`, which returns `None` for unset keys
  - `setting_set`, which returns 201
  - `setting_delete`

  A key of 128 bytes or more in UTF-8 is rejected with 400.

## What this package does not do

There is no HTTP server, no web interface and no command-line program. The helpers above decide
what a server would respond, but nothing here listens for requests.

There is no persistent event storage. `functions.Datastore` and `settings.KeyValueStore` keep
everything in memory.

The query language has only the built-in functions listed above. There are no functions that
flood, sort, merge, chunk, filter, categorize, tag or find buckets.