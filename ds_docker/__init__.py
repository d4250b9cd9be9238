"""Container-engine integration: queries, decoding, previews and shell attach."""

from ds_docker.config import DockScopeConfig, ShellCandidate, load_config
from ds_docker.models import (
    EntityKind,
    ImageEntry,
    PickerEntry,
    ProcessEntry,
    VolumeEntry,
)
from ds_docker.service import DockerScope, Listing
from ds_docker.shells import ProbeOutcome, ShellProbe

__all__ = [
    "DockScopeConfig",
    "DockerScope",
    "EntityKind",
    "ImageEntry",
    "Listing",
    "PickerEntry",
    "ProbeOutcome",
    "ProcessEntry",
    "ShellCandidate",
    "ShellProbe",
    "VolumeEntry",
    "load_config",
]
