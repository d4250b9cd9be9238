"""Error types shared by the engine layer and the UI."""

from __future__ import annotations

from typing import Any, Mapping, Sequence, TypeVar


def _normalize_context_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return normalize_context(value)
    if isinstance(value, (list, tuple)):
        return [_normalize_context_value(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def normalize_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Copy ``context`` into plain JSON types (paths and other objects become str)."""
    return {key: _normalize_context_value(val) for key, val in context.items()}


class DSError(Exception):
    """Base error carrying a normalized context mapping."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.context = normalize_context(context or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def error_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.error_type, "message": str(self), "context": self.context}


class CommandError(DSError):
    """An engine invocation went wrong; ``context["args"]`` holds the argv."""

    @property
    def command(self) -> list[str]:
        return list(self.context.get("args") or [])


class EngineUnavailableError(CommandError):
    """The engine binary could not be started (not installed, not executable)."""


class CommandFailedError(CommandError):
    """The engine exited with a non-zero status."""

    @property
    def returncode(self) -> int | None:
        return self.context.get("returncode")

    @property
    def stderr(self) -> list[str]:
        return list(self.context.get("stderr") or [])


class CommandTimeoutError(CommandError):
    """The engine did not finish within the configured timeout."""


class ConfigurationError(DSError):
    """The configuration file or environment holds invalid values."""


T = TypeVar("T", bound=DSError)


def wrap_error(
    error_cls: type[T],
    message: str,
    *,
    context: Mapping[str, Any] | None = None,
    cause: Exception | None = None,
) -> T:
    """Build a typed error with optional context and cause."""
    return error_cls(message, context=context, cause=cause)


def command_failed(
    args: Sequence[str], returncode: int, stderr: Sequence[str] = ()
) -> CommandFailedError:
    """Failure for ``args``; the first non-blank stderr line goes in the message."""
    detail = next((line.strip() for line in stderr if line.strip()), "")
    message = f"{' '.join(args[:3])} exited with status {returncode}"
    if detail:
        message = f"{message}: {detail}"
    return wrap_error(
        CommandFailedError,
        message,
        context={"args": list(args), "returncode": returncode, "stderr": list(stderr)},
    )


def error_to_payload(error: DSError) -> dict[str, Any]:
    """Flatten an error for structured log records."""
    return {
        "error_type": error.error_type,
        "error": str(error),
        "error_context": error.context,
    }
