"""Entity records decoded from `docker ... --format json` output."""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

NONE_MARKER = "<none>"


class _EngineRecord(BaseModel):
    """Base for engine records: every field is an opaque, possibly empty string."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def coerce_opaque(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return value if isinstance(value, str) else str(value)

    @property
    @abstractmethod
    def key(self) -> str:
        """Identity used as the picker item id."""


class ProcessEntry(_EngineRecord):
    """One row of `docker ps`."""

    id: str = Field(default="", alias="ID")
    names: str = Field(default="", alias="Names")
    command: str = Field(default="", alias="Command")
    labels: str = Field(default="", alias="Labels")
    image: str = Field(default="", alias="Image")
    local_volumes: str = Field(default="", alias="LocalVolumes")
    mounts: str = Field(default="", alias="Mounts")
    networks: str = Field(default="", alias="Networks")
    ports: str = Field(default="", alias="Ports")
    size: str = Field(default="", alias="Size")
    state: str = Field(default="", alias="State")
    status: str = Field(default="", alias="Status")
    created_at: str = Field(default="", alias="CreatedAt")
    running_for: str = Field(default="", alias="RunningFor")

    @property
    def key(self) -> str:
        return self.id


class VolumeEntry(_EngineRecord):
    """One row of `docker volume ls`."""

    name: str = Field(default="", alias="Name")
    labels: str = Field(default="", alias="Labels")
    availability: str = Field(default="", alias="Availability")
    driver: str = Field(default="", alias="Driver")
    group: str = Field(default="", alias="Group")
    links: str = Field(default="", alias="Links")
    scope: str = Field(default="", alias="Scope")
    size: str = Field(default="", alias="Size")
    status: str = Field(default="", alias="Status")
    mountpoint: str = Field(default="", alias="Mountpoint")

    @property
    def key(self) -> str:
        return self.name


class ImageEntry(_EngineRecord):
    """One row of `docker images`."""

    repository: str = Field(default="", alias="Repository")
    tag: str = Field(default="", alias="Tag")
    id: str = Field(default="", alias="ID")
    containers: str = Field(default="", alias="Containers")
    digest: str = Field(default="", alias="Digest")
    created_at: str = Field(default="", alias="CreatedAt")
    created_since: str = Field(default="", alias="CreatedSince")
    shared_size: str = Field(default="", alias="SharedSize")
    size: str = Field(default="", alias="Size")
    unique_size: str = Field(default="", alias="UniqueSize")
    virtual_size: str = Field(default="", alias="VirtualSize")

    @property
    def reference(self) -> str:
        """Reference usable with `docker run`: repository:tag, bare repository or ID."""
        if not self.repository or self.repository == NONE_MARKER:
            return self.id
        if not self.tag or self.tag == NONE_MARKER:
            return self.repository
        return f"{self.repository}:{self.tag}"

    @property
    def key(self) -> str:
        return self.reference


EngineEntry = Union[ProcessEntry, VolumeEntry, ImageEntry]


class EntityKind(str, Enum):
    """The three listing domains."""

    PROCESS = "process"
    VOLUME = "volume"
    IMAGE = "image"

    @property
    def query_args(self) -> tuple[str, ...]:
        return _QUERY_ARGS[self]

    @property
    def model(self) -> type[EngineEntry]:
        return _MODELS[self]

    @property
    def picker_title(self) -> str:
        return _TITLES[self]


_QUERY_ARGS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.PROCESS: ("ps",),
    EntityKind.VOLUME: ("volume", "ls"),
    EntityKind.IMAGE: ("images",),
}

_MODELS: dict[EntityKind, type[EngineEntry]] = {
    EntityKind.PROCESS: ProcessEntry,
    EntityKind.VOLUME: VolumeEntry,
    EntityKind.IMAGE: ImageEntry,
}

_TITLES: dict[EntityKind, str] = {
    EntityKind.PROCESS: "Docker Processes",
    EntityKind.VOLUME: "Docker Volumes",
    EntityKind.IMAGE: "Docker Images",
}


@dataclass(frozen=True)
class PickerEntry:
    """Uniform wrapper fed to the picker: the record, its label and its match key."""

    value: EngineEntry
    display: str
    ordinal: str

    @property
    def key(self) -> str:
        return self.value.key
