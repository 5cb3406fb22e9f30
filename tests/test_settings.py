from http import HTTPStatus

import pytest

from activityquery.httperror import HttpError, NoSuchKey
from activityquery.settings import (
    KeyValueStore,
    parse_key,
    setting_delete,
    setting_get,
    setting_set,
    settings_get,
)

LONG_KEY = (
    "thisisaverylongkthisisaverylongkthisisaverylongkthisisaverylongk"
    "thisisaverylongkthisisaverylongkthisisaverylongkthisisaverylongk"
)


@pytest.fixture
def store():
    return KeyValueStore()


def test_illegally_long_key(store):
    with pytest.raises(HttpError) as info:
        setting_set(store, LONG_KEY, "test_value")
    assert info.value.status == HTTPStatus.BAD_REQUEST
    assert info.value.message == "Too long key"


def test_parse_key_adds_namespace():
    assert parse_key("test_key") == "settings.test_key"


def test_setting_setting(store):
    assert setting_set(store, "test_key", "test_value") == HTTPStatus.CREATED


def test_get_unset_setting(store):
    assert setting_get(store, "non_existent_key") is None


def test_get_settings(store):
    assert setting_set(store, "test_key", "test_value") == HTTPStatus.CREATED
    assert setting_set(store, "test_key_2", "test_value") == HTTPStatus.CREATED
    assert settings_get(store) == {"test_key_2": "test_value", "test_key": "test_value"}


def test_get_settings_ignores_other_namespaces(store):
    store.set_key_value("other.key", '"x"')
    setting_set(store, "test_key", "test_value")
    assert settings_get(store) == {"test_key": "test_value"}


def test_get_setting(store):
    setting_set(store, "test_key", "test_value")
    assert setting_get(store, "test_key") == "test_value"


def test_get_setting_list(store):
    setting_set(store, "test_key_array", [1, 2, 3])
    assert setting_get(store, "test_key_array") == [1, 2, 3]


def test_get_setting_dict(store):
    value = {"key": "value", "another_key": "another value"}
    setting_set(store, "test_key_dict", value)
    assert setting_get(store, "test_key_dict") == value


def test_set_setting(store):
    assert setting_set(store, "test_key", "test_value") == HTTPStatus.CREATED
    assert setting_get(store, "test_key") == "test_value"
    assert setting_set(store, "test_key", "changed_test_value") == HTTPStatus.CREATED
    assert setting_get(store, "test_key") == "changed_test_value"


def test_delete_setting(store):
    setting_set(store, "test_key", "test_value")
    setting_delete(store, "test_key")
    assert setting_get(store, "test_key") is None


def test_invalid_json_value(store):
    with pytest.raises(HttpError) as info:
        setting_set(store, "test_key", object())
    assert info.value.status == HTTPStatus.BAD_REQUEST
    assert info.value.message.startswith("Invalid JSON: ")


def test_store_missing_key_raises(store):
    with pytest.raises(NoSuchKey):
        store.get_key_value("settings.missing")


def test_like_pattern_wildcards(store):
    for key in ("abc", "aXc", "abbc", "ABC"):
        store.set_key_value(key, "1")
    assert set(store.get_key_values("a_c")) == {"abc", "aXc", "ABC"}
    assert set(store.get_key_values("a%c")) == {"abc", "aXc", "abbc", "ABC"}


def test_values_stored_as_json_text(store):
    setting_set(store, "test_key_array", [1, 2, 3])
    assert store.get_key_value("settings.test_key_array") == "[1,2,3]"