"""Tests for the event board renderer."""

import json

import pytest

from songjog.api.events_api import build_view_models, partition_by_lifecycle, summarize_events
from songjog.output.event_board import (
    export_events,
    render_event_detail,
    render_json,
    render_markdown,
)


@pytest.fixture
def view_models(raw_events, today):
    return build_view_models(raw_events, today=today)


def test_render_json_uses_camel_case_keys(view_models):
    data = json.loads(render_json(view_models[:1]))
    assert data[0]["id"] == "evt-beach"
    assert data[0]["maxVolunteers"] == 100
    assert data[0]["fullDescription"] == "Collect plastic along the shore"
    assert "max_volunteers" not in data[0]


def test_render_markdown_lists_events(view_models):
    output = render_markdown(view_models)
    assert output.startswith("# Upcoming Events (5)")
    assert "### Beach Cleanup" in output
    assert "*Cleanup | In 5 days | Featured*" in output
    assert "45/100 [####------] 45% (55 seats left)" in output
    assert "30/30 [##########] 100% (full)" in output


def test_render_markdown_with_stats(view_models):
    partition = partition_by_lifecycle(view_models)
    output = render_markdown(partition.active, stats=summarize_events(partition), title="Active Events")
    assert output.startswith("# Active Events (3)")
    assert "**Total:** 5 | **Active:** 3 | **Draft:** 1 | **Completed:** 1" in output
    assert "**Volunteers:** 140" in output


def test_render_markdown_empty():
    output = render_markdown([])
    assert "No events found. Try adjusting your search or filters." in output


def test_render_event_detail(view_models):
    output = render_event_detail(view_models[0])
    assert "#### About" in output
    assert "- No specific requirements" in output
    assert "- **Organizer:** Green Coast" in output
    assert "Email" not in output


def test_export_json_envelope(view_models):
    data = json.loads(export_events(view_models, format="json"))
    assert data["export_schema_version"] == "1"
    assert data["exported_at_utc"].endswith("Z")
    assert [item["id"] for item in data["data"]][:2] == ["evt-beach", "65a0c0ffee"]


def test_export_to_file(view_models, tmp_path):
    out = tmp_path / "events.md"
    message = export_events(view_models, format="markdown", out=out)
    assert message == f"Exported to {out}"
    assert out.read_text(encoding="utf-8").startswith("# Upcoming Events (5)")


def test_export_rejects_unknown_format(view_models):
    with pytest.raises(ValueError, match="Unsupported format: csv"):
        export_events(view_models, format="csv")
