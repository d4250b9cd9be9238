from __future__ import annotations

from typing import Optional

import typer

from ds_docker.models import EntityKind, PickerEntry
from ds_ui.flows.listing import attach_image, create_listing_picker
from ds_ui.presenters.listing import build_listing_table
from ds_ui.wiring.dependencies import UIContext


def _matches(entry: PickerEntry, query: str) -> bool:
    return query.lower() in entry.ordinal.lower()


def browse(ctx: UIContext, kind: EntityKind, query: str = "") -> None:
    """Open the picker, or print a table when no full-screen UI is available."""
    if not ctx.interactive:
        listing = ctx.service.list_entries(kind)
        entries = [entry for entry in listing.entries if _matches(entry, query)] if query else listing.entries
        ctx.ui.tables.show(build_listing_table(kind, entries))
        if listing.error is not None:
            ctx.ui.present.warning(str(listing.error))
            raise typer.Exit(1)
        return

    outcome = create_listing_picker(kind, ctx.service, ctx.ui).open(query_hint=query)
    if outcome.attach is not None and outcome.attach.returncode:
        raise typer.Exit(outcome.attach.returncode)


def register_listing_commands(app: typer.Typer, ctx: UIContext) -> None:
    """Attach the ps/volumes/images commands to ``app``."""

    @app.command("ps")
    def ps(
        query: str = typer.Option("", "--query", "-q", help="Initial filter text."),
    ) -> None:
        """Browse containers (`docker ps`)."""
        browse(ctx, EntityKind.PROCESS, query)

    @app.command("volumes")
    def volumes(
        query: str = typer.Option("", "--query", "-q", help="Initial filter text."),
    ) -> None:
        """Browse volumes (`docker volume ls`)."""
        browse(ctx, EntityKind.VOLUME, query)

    @app.command("images")
    def images(
        query: str = typer.Option("", "--query", "-q", help="Initial filter text."),
        attach: Optional[str] = typer.Option(
            None,
            "--attach",
            "-a",
            metavar="IMAGE",
            help="Skip the picker and open a shell in a new container from IMAGE.",
        ),
    ) -> None:
        """Browse images; confirming one opens a shell in a new container."""
        if attach:
            result = attach_image(ctx.service, ctx.ui, attach)
            if result.returncode:
                raise typer.Exit(result.returncode)
            return
        browse(ctx, EntityKind.IMAGE, query)
