"""Interactive flows built on top of the UI primitives."""

from ds_ui.flows.listing import (
    ImageListingPicker,
    ListingOutcome,
    ListingPicker,
    ProcessListingPicker,
    VolumeListingPicker,
    attach_image,
    create_listing_picker,
)

__all__ = [
    "ImageListingPicker",
    "ListingOutcome",
    "ListingPicker",
    "ProcessListingPicker",
    "VolumeListingPicker",
    "attach_image",
    "create_listing_picker",
]
