import pytest

from ds_common.config import parse_bool_env, parse_float_env, parse_list_env

pytestmark = pytest.mark.unit_common


@pytest.mark.parametrize("raw", ["1", "true", "YES", " on "])
def test_parse_bool_env_truthy(raw: str) -> None:
    assert parse_bool_env(raw) is True


def test_parse_bool_env_falsy_and_missing() -> None:
    assert parse_bool_env("0") is False
    assert parse_bool_env("nope") is False
    assert parse_bool_env(None) is None


def test_parse_float_env() -> None:
    assert parse_float_env("2.5") == 2.5
    assert parse_float_env("  ") is None
    assert parse_float_env("fast") is None
    assert parse_float_env(None) is None


def test_parse_list_env_respects_quotes() -> None:
    assert parse_list_env('kitty --title "docker shell"') == ["kitty", "--title", "docker shell"]
    assert parse_list_env("") == []
    assert parse_list_env(None) == []
