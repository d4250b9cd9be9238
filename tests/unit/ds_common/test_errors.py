"""Tests for shared error helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from ds_common.errors import (
    CommandError,
    CommandFailedError,
    DSError,
    EngineUnavailableError,
    command_failed,
    error_to_payload,
    wrap_error,
)

pytestmark = pytest.mark.unit_common


def test_error_to_payload_normalizes_context() -> None:
    err = CommandFailedError(
        "boom",
        context={
            "path": Path("/tmp/test"),
            "returncode": 3,
            "nested": {"value": Path("nested")},
            "args": ("docker", Path("ps")),
        },
    )
    payload = error_to_payload(err)
    assert payload["error_type"] == "CommandFailedError"
    assert payload["error"] == "boom"
    assert payload["error_context"]["path"].endswith("test")
    assert payload["error_context"]["returncode"] == 3
    assert payload["error_context"]["nested"]["value"] == "nested"
    assert payload["error_context"]["args"] == ["docker", "ps"]


def test_wrap_error_sets_cause_and_type() -> None:
    cause = FileNotFoundError(2, "No such file or directory")
    err = wrap_error(EngineUnavailableError, "docker missing", context={"engine": "docker"}, cause=cause)

    assert isinstance(err, DSError)
    assert err.__cause__ is cause
    assert err.to_dict() == {
        "type": "EngineUnavailableError",
        "message": "docker missing",
        "context": {"engine": "docker"},
    }


def test_command_failed_uses_first_stderr_line() -> None:
    err = command_failed(
        ["docker", "ps", "--format", "json"],
        1,
        ["", "Cannot connect to the Docker daemon at unix:///var/run/docker.sock"],
    )

    assert str(err) == (
        "docker ps --format exited with status 1: "
        "Cannot connect to the Docker daemon at unix:///var/run/docker.sock"
    )
    assert err.returncode == 1
    assert err.command == ["docker", "ps", "--format", "json"]
    assert isinstance(err, CommandError)


def test_command_failed_without_stderr() -> None:
    err = command_failed(["docker", "images"], 2)

    assert str(err) == "docker images exited with status 2"
    assert err.stderr == []
