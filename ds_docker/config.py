"""dockscope configuration (engine binary, shell candidates, timeouts)."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, List, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ds_common.config import parse_float_env, parse_list_env
from ds_common.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/dockscope/config.yaml")


class ShellCandidate(BaseModel):
    """An interactive shell looked up at a well-known absolute path."""

    name: str = Field(description="Command passed to `docker run -it <image>`")
    path: str = Field(description="Absolute path tested inside the image")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_path_absolute(self) -> "ShellCandidate":
        if not self.path.startswith("/"):
            raise ValueError(f"ShellCandidate: path '{self.path}' must be absolute")
        return self


def _default_shells() -> List[ShellCandidate]:
    return [
        ShellCandidate(name="sh", path="/bin/sh"),
        ShellCandidate(name="bash", path="/bin/bash"),
        ShellCandidate(name="zsh", path="/bin/zsh"),
    ]


class DockScopeConfig(BaseModel):
    """Explicit configuration value handed to every picker and service."""

    engine: str = Field(default="docker", min_length=1, description="Container engine CLI")
    shells: List[ShellCandidate] = Field(
        default_factory=_default_shells,
        description="Shell candidates in preference order",
    )
    fallback_shell: str = Field(default="sh", min_length=1, description="Shell used when probing finds nothing")
    probe_cache_ttl: float = Field(default=60.0, ge=0, description="Seconds a probe result is reused; 0 disables")
    probe_timeout: Optional[float] = Field(default=120.0, gt=0, description="Timeout for the throwaway probe run")
    query_timeout: Optional[float] = Field(default=None, gt=0, description="Timeout for listing queries")
    terminal_command: List[str] = Field(
        default_factory=list,
        description="Prefix that opens a new terminal window for shell sessions",
    )
    fuzzy_score_cutoff: int = Field(default=50, ge=0, le=100, description="Minimum rapidfuzz score kept by the filter")

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def validate_shells_not_empty(self) -> "DockScopeConfig":
        if not self.shells:
            raise ValueError("DockScopeConfig: 'shells' must list at least one candidate")
        return self


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if environ.get("DS_ENGINE"):
        overrides["engine"] = environ["DS_ENGINE"]
    ttl = parse_float_env(environ.get("DS_PROBE_CACHE_TTL"))
    if ttl is not None:
        overrides["probe_cache_ttl"] = ttl
    timeout = parse_float_env(environ.get("DS_QUERY_TIMEOUT"))
    if timeout is not None:
        overrides["query_timeout"] = timeout
    terminal = parse_list_env(environ.get("DS_TERMINAL"))
    if terminal:
        overrides["terminal_command"] = terminal
    return overrides


def _resolve_path(path: Path | None, environ: Mapping[str, str]) -> Path | None:
    if path is not None:
        return path.expanduser()
    env_path = environ.get("DS_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    default = DEFAULT_CONFIG_PATH.expanduser()
    return default if default.exists() else None


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text()) or {}
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot read config file {path}", context={"path": path}, cause=exc
        ) from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Invalid YAML in {path}", context={"path": path}, cause=exc
        ) from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"Config file {path} must contain a mapping",
            context={"path": path, "type": type(raw).__name__},
        )
    return raw


def load_config(
    path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> DockScopeConfig:
    """Load configuration from YAML and environment overrides.

    Resolution order for the file: explicit ``path``, ``$DS_CONFIG``, then
    ``~/.config/dockscope/config.yaml`` when it exists. Environment variables
    (``DS_ENGINE``, ``DS_PROBE_CACHE_TTL``, ``DS_QUERY_TIMEOUT``,
    ``DS_TERMINAL``) win over file values.
    """
    env = os.environ if environ is None else environ
    data: dict[str, Any] = {}
    resolved = _resolve_path(path, env)
    if resolved is not None:
        logger.debug("Loading config from %s", resolved)
        data.update(_read_yaml(resolved))
    data.update(_env_overrides(env))
    try:
        return DockScopeConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid configuration: {exc.error_count()} error(s)",
            context={"path": resolved, "errors": [err["msg"] for err in exc.errors()]},
            cause=exc,
        ) from exc
