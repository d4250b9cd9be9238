"""Shared helpers for dockscope."""

from ds_common.api import DSError, configure_logging

__all__ = ["configure_logging", "DSError"]
