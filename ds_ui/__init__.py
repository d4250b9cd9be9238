"""Terminal UI for dockscope: pickers, presenters and the CLI."""
