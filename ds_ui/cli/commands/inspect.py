from __future__ import annotations

import typer

from ds_docker.models import EntityKind
from ds_docker.previews import render_markdown
from ds_docker.shells import ProbeOutcome
from ds_ui.wiring.dependencies import UIContext


def register_inspect_commands(app: typer.Typer, ctx: UIContext) -> None:
    """Attach the probe/preview commands to ``app``."""

    @app.command("probe")
    def probe(image: str = typer.Argument(..., help="Image reference, e.g. alpine:3.20.")) -> None:
        """Report which interactive shell `images` would start in IMAGE."""
        result = ctx.service.probe_shell(image)
        if result.outcome is ProbeOutcome.FOUND:
            ctx.ui.present.success(f"{image}: {result.shell}")
            return
        if result.outcome is ProbeOutcome.NOT_FOUND:
            ctx.ui.present.warning(f"{image}: no supported shell found, fallback '{result.shell}'")
            return
        ctx.ui.present.error(f"{image}: probe failed ({result.error}), fallback '{result.shell}'")
        raise typer.Exit(1)

    @app.command("preview")
    def preview(
        kind: EntityKind = typer.Argument(..., help="Entity kind."),
        key: str = typer.Argument(..., help="Container ID or name, volume name, or image reference."),
    ) -> None:
        """Print the detail block shown in the picker's preview pane."""
        entry = ctx.service.find_entry(kind, key)
        if entry is None:
            ctx.ui.present.error(f"No {kind.value} matching '{key}'")
            raise typer.Exit(1)
        ctx.ui.present.markdown(render_markdown(entry))
