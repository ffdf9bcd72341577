"""Event board rendering (markdown and JSON).

This module is renderer-only. All query/transform logic lives in api/events_api.py.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..api.models import EventBoardStats
from ..events.event_models import EventViewModel
from ..utils.time import utc_now_z


def to_dicts(view_models: Sequence[EventViewModel]) -> List[Dict[str, Any]]:
    """Serialize view models with the camelCase keys presentation expects."""
    return [vm.model_dump(mode="json", by_alias=True) for vm in view_models]


def render_json(view_models: Sequence[EventViewModel]) -> str:
    return json.dumps(to_dicts(view_models), indent=2, sort_keys=True)


def _progress_bar(percent: int, width: int = 10) -> str:
    filled = round(percent / 100 * width)
    return "#" * filled + "-" * (width - filled)


def render_event_markdown(vm: EventViewModel) -> List[str]:
    lines = []
    badges = [vm.category_label, vm.status_label]
    if vm.verified:
        badges.append("Verified")
    if vm.featured:
        badges.append("Featured")
    lines.append(f"### {vm.title}")
    lines.append("")
    lines.append(f"*{' | '.join(badges)}*")
    lines.append("")
    lines.append(f"- **Organization:** {vm.organization}")
    lines.append(f"- **When:** {vm.display_date}, {vm.time} - {vm.end_time}")
    lines.append(f"- **Where:** {vm.location}")
    lines.append(
        f"- **Volunteers:** {vm.volunteers}/{vm.max_volunteers} "
        f"[{_progress_bar(vm.progress_percent)}] {vm.progress_percent}%"
        + (" (full)" if vm.is_full else f" ({vm.seats_remaining} seats left)")
    )
    lines.append(f"- **Rating:** {vm.rating:.1f} ({vm.reviews} reviews)")
    if vm.points:
        lines.append(f"- **Points:** {vm.points}")
    lines.append(f"- **ID:** `{vm.id}`")
    lines.append("")
    return lines


def render_markdown(
    view_models: Sequence[EventViewModel],
    stats: Optional[EventBoardStats] = None,
    title: str = "Upcoming Events",
) -> str:
    """Render an event listing as markdown."""
    lines = [f"# {title} ({len(view_models)})", ""]

    if stats is not None:
        lines.append("## Summary")
        lines.append("")
        lines.append(
            f"- **Total:** {stats.total} | **Active:** {stats.active} | "
            f"**Draft:** {stats.draft} | **Completed:** {stats.completed}"
        )
        lines.append(f"- **Volunteers:** {stats.total_volunteers}")
        lines.append("")

    if not view_models:
        lines.append("No events found. Try adjusting your search or filters.")
        lines.append("")
        return "\n".join(lines)

    for vm in view_models:
        lines.extend(render_event_markdown(vm))
    return "\n".join(lines)


def render_event_detail(vm: EventViewModel) -> str:
    """Single-event markdown, including the long description and requirements."""
    lines = render_event_markdown(vm)
    lines.append("#### About")
    lines.append("")
    lines.append(vm.full_description)
    lines.append("")
    lines.append("#### Requirements")
    lines.append("")
    lines.extend(f"- {req}" for req in vm.requirements)
    lines.append("")
    lines.append("#### Contact")
    lines.append("")
    lines.append(f"- **Organizer:** {vm.organizer}")
    if vm.contact.email:
        lines.append(f"- **Email:** {vm.contact.email}")
    if vm.contact.phone:
        lines.append(f"- **Phone:** {vm.contact.phone}")
    if vm.contact.website:
        lines.append(f"- **Website:** {vm.contact.website}")
    lines.append("")
    return "\n".join(lines)


def export_events(
    view_models: Sequence[EventViewModel],
    format: str = "json",
    out: Path | None = None,
) -> str:
    """
    Export view models.

    Args:
        view_models: Events to export
        format: Export format ("json" or "markdown")
        out: Output file path (if None, returns as string)

    Returns:
        Exported data as string (if out is None) or a confirmation message
    """
    if format == "json":
        export_data = {
            "export_schema_version": "1",
            "exported_at_utc": utc_now_z(),
            "data": to_dicts(view_models),
        }
        output = json.dumps(export_data, indent=2, sort_keys=True)
    elif format == "markdown":
        output = render_markdown(view_models)
    else:
        raise ValueError(f"Unsupported format: {format}")

    if out:
        out.write_text(output, encoding="utf-8")
        return f"Exported to {out}"
    return output
