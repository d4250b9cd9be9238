import json

import pytest

from ds_common.errors import CommandFailedError
from ds_docker.config import DockScopeConfig
from ds_docker.decoder import project
from ds_docker.models import EntityKind
from ds_docker.service import DockerScope
from ds_docker.shells import ProbeOutcome
from ds_ui.flows.listing import (
    ImageListingPicker,
    ProcessListingPicker,
    VolumeListingPicker,
    create_listing_picker,
)
from ds_ui.tui.system.headless import HeadlessUI
from ds_ui.tui.system.models import PickItem

pytestmark = pytest.mark.unit_ui


class _Completed:
    def __init__(self, returncode: int = 0) -> None:
        self.returncode = returncode


@pytest.fixture
def scope(fake_runner) -> DockerScope:
    return DockerScope(DockScopeConfig(probe_cache_ttl=0), runner=fake_runner)


@pytest.fixture
def attach_calls(monkeypatch) -> list[list[str]]:
    calls: list[list[str]] = []

    def fake_run(cmd, check=False):
        calls.append(cmd)
        return _Completed()

    monkeypatch.setattr("ds_docker.attach.subprocess.run", fake_run)
    return calls


def test_process_selection_closes_without_attach(scope, fake_runner, make_result, process_record, attach_calls):
    fake_runner.respond(("ps",), make_result([json.dumps(process_record)]))
    ui = HeadlessUI(next_pick_id="abc123")

    outcome = ProcessListingPicker(scope, ui).open()

    pick = ui.recorded_picks[0]
    assert pick.title == "Docker Processes"
    assert [(item.title, item.search_blob) for item in pick.items] == [("web", "abc123 web")]
    assert outcome.selected.display == "web"
    assert outcome.attach is None
    assert attach_calls == []


def test_image_selection_probes_and_attaches(scope, fake_runner, make_result, image_record, attach_calls):
    record = dict(image_record, Tag="")
    fake_runner.respond(("images",), make_result([json.dumps(record)]))
    fake_runner.respond(("run",), make_result(["/bin/bash"]))
    ui = HeadlessUI(next_pick_when=lambda item: item.title == "myapp")

    outcome = ImageListingPicker(scope, ui).open()

    probe_args = fake_runner.calls[1]["args"]
    assert probe_args[:4] == ["run", "--rm", "myapp", "find"]
    assert attach_calls == [["docker", "run", "-it", "myapp", "bash"]]
    assert outcome.attach.probe.outcome is ProbeOutcome.FOUND
    assert ui.recorded_messages == []


def test_image_without_shell_warns_and_uses_fallback(scope, fake_runner, make_result, image_record, attach_calls):
    fake_runner.respond(("images",), make_result([json.dumps(image_record)]))
    fake_runner.respond(("run",), make_result([], returncode=1, error=CommandFailedError("find: not found")))
    ui = HeadlessUI(next_pick_id="myapp:latest")

    ImageListingPicker(scope, ui).open()

    assert attach_calls == [["docker", "run", "-it", "myapp:latest", "sh"]]
    assert any(msg.startswith("WARNING: No supported shell found") for msg in ui.recorded_messages)


def test_engine_error_shows_warning_and_empty_list(scope, fake_runner, make_result):
    error = CommandFailedError("Cannot connect to the Docker daemon")
    fake_runner.respond(("volume", "ls"), make_result([], returncode=1, error=error))
    ui = HeadlessUI()

    outcome = VolumeListingPicker(scope, ui).open()

    assert ui.recorded_picks[0].items == []
    assert ui.recorded_picks[0].error is error
    assert ui.recorded_messages == ["WARNING: Docker Volumes: Cannot connect to the Docker daemon"]
    assert outcome.selected is None
    assert outcome.error is error


def test_dismissed_picker_returns_empty_outcome(scope, fake_runner, make_result, process_record):
    fake_runner.respond(("ps",), make_result([json.dumps(process_record)]))
    ui = HeadlessUI()

    outcome = create_listing_picker(EntityKind.PROCESS, scope, ui).open(query_hint="web")

    assert outcome.selected is None
    assert outcome.kind is EntityKind.PROCESS
    assert ui.recorded_picks[0].query_hint == "web"


def test_query_is_cancelled_when_picker_raises(scope, fake_runner, make_result):
    fake_runner.respond(("volume",), make_result([json.dumps({"Name": "data", "Driver": "local"})]))
    ui = HeadlessUI()
    seen = []

    def broken_pick(source, **_kwargs):
        seen.append(source)
        raise KeyboardInterrupt

    ui.picker.pick_one = broken_pick

    with pytest.raises(KeyboardInterrupt):
        VolumeListingPicker(scope, ui).open()

    assert seen[0].cancel.is_set()


def test_highlight_renders_preview_lines(scope, process_record):
    entry = project(EntityKind.PROCESS, process_record)
    picker = ProcessListingPicker(scope, HeadlessUI())

    lines = picker.on_highlight(entry)

    assert lines[0] == "# ID: abc123"


def test_picker_preview_renders_highlighted_entry(scope, fake_runner, make_result, process_record):
    fake_runner.respond(("ps",), make_result([json.dumps(process_record)]))
    ui = HeadlessUI()

    ProcessListingPicker(scope, ui).open()

    pick = ui.recorded_picks[0]
    rendered = pick.preview(pick.items[0])
    assert rendered.markup.startswith("# ID: abc123  \n")
    assert pick.preview(PickItem(id="x", title="x")) is None


def test_preview_goes_through_on_highlight(scope, fake_runner, make_result, process_record):
    class ShortPicker(ProcessListingPicker):
        def on_highlight(self, entry):
            return [f"only {entry.key}"]

    fake_runner.respond(("ps",), make_result([json.dumps(process_record)]))
    ui = HeadlessUI()

    ShortPicker(scope, ui).open()

    pick = ui.recorded_picks[0]
    assert pick.preview(pick.items[0]).markup == "only abc123  "
