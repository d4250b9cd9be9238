"""Stable UI API surface."""

from __future__ import annotations

from ds_ui.cli import app, ctx_store, main
from ds_ui.flows.listing import ListingPicker, create_listing_picker
from ds_ui.presenters.listing import build_listing_table
from ds_ui.tui.system.headless import HeadlessUI
from ds_ui.tui.system.models import PickItem, StaticSource

__all__ = [
    "app",
    "main",
    "ctx_store",
    "build_listing_table",
    "create_listing_picker",
    "HeadlessUI",
    "ListingPicker",
    "PickItem",
    "StaticSource",
]
