"""CLI entrypoint for songjog."""

import argparse
import json
import sys
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

from songjog.api.events_api import (
    build_view_models,
    featured_events,
    find_event,
    partition_by_lifecycle,
    query_events,
    summarize_events,
)
from songjog.api.models import FilterSpec, SortKey
from songjog.config.loader import load_config
from songjog.events.draft import validate_event_draft
from songjog.events.event_models import Coordinates
from songjog.output.event_board import export_events, render_event_detail, render_json, render_markdown
from songjog.retrieval.client import EventsClient
from songjog.utils.logging import configure_logging, get_logger
from songjog.utils.time import parse_event_date_safely

logger = get_logger(__name__)


def _load_json_file(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RuntimeError(f"Unable to read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise RuntimeError(f"{path} is not valid JSON: {exc}") from exc


def _load_payload(args: argparse.Namespace, config: Dict[str, Any]) -> Any:
    """Read the raw event payload from --input, or fetch it from the API."""
    if getattr(args, "input", None):
        return _load_json_file(Path(args.input))

    client = EventsClient(getattr(args, "url", None), config=config)
    result = client.fetch_events()
    if result.status != "SUCCESS":
        print(f"[songjog] Failed to fetch events from {result.url}: {result.error}", file=sys.stderr)
        return []
    return result.items


def _resolve_today(args: argparse.Namespace) -> Optional[date]:
    raw_today = getattr(args, "today", None)
    if not raw_today:
        return None
    today = parse_event_date_safely(raw_today)
    if today is None:
        logger.warning(f"Invalid --today value: {raw_today}, using current date")
    return today


def _resolve_config(args: argparse.Namespace) -> Dict[str, Any]:
    config_path = getattr(args, "config", None)
    return load_config(Path(config_path) if config_path else None)


def cmd_list(args: argparse.Namespace) -> None:
    """List events with search, filters and sorting."""
    config = _resolve_config(args)
    payload = _load_payload(args, config)

    user_location = None
    if args.near:
        lat, lng = args.near
        user_location = Coordinates(lat=lat, lng=lng)

    filters = FilterSpec(
        search_text=args.search or "",
        category=args.category,
        date=args.date,
        distance=args.distance,
        user_location=user_location,
    )
    # With --featured, --limit caps the featured selection rather than the listing
    events = query_events(
        payload,
        filters,
        args.sort,
        today=_resolve_today(args),
        config=config,
        limit=None if args.featured else args.limit,
    )

    if args.featured:
        events = featured_events(events, limit=args.limit, config=config)

    out = Path(args.out) if args.out else None
    result = export_events(events, format=args.format, out=out)
    print(result)


def cmd_show(args: argparse.Namespace) -> None:
    """Show one event in detail."""
    config = _resolve_config(args)
    payload = _load_payload(args, config)

    event = find_event(payload, args.event_id, today=_resolve_today(args), config=config)
    if event is None:
        print(f"Event not found: {args.event_id}", file=sys.stderr)
        sys.exit(1)

    if args.format == "json":
        print(render_json([event]))
    else:
        print(render_event_detail(event))


def cmd_stats(args: argparse.Namespace) -> None:
    """Organizer dashboard counters."""
    config = _resolve_config(args)
    payload = _load_payload(args, config)

    partition = partition_by_lifecycle(build_view_models(payload, today=_resolve_today(args), config=config))
    stats = summarize_events(partition)

    if args.format == "json":
        print(json.dumps(stats.model_dump(), indent=2, sort_keys=True))
        return

    print(render_markdown(partition.active, stats=stats, title="Active Events"))


def cmd_validate(args: argparse.Namespace) -> None:
    """Validate an event draft JSON file."""
    draft = _load_json_file(Path(args.draft))
    errors = validate_event_draft(draft)

    if not errors:
        print("Draft is valid.")
        return

    print(f"{'Field':<20} Error")
    print("-" * 60)
    for field, message in errors.items():
        print(f"{field:<20} {message}")
    sys.exit(1)


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--input", type=str, help="Read events from a JSON file instead of the API")
    source.add_argument("--url", type=str, help="API base URL (default: config api.base_url)")
    parser.add_argument("--today", type=str, help="Reference date YYYY-MM-DD (default: current UTC date)")
    parser.add_argument("--config", type=str, help="Path to songjog.config.yaml")


def main() -> None:
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        prog="songjog",
        description="Volunteer event listings: normalize, filter, sort and render",
    )
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (default: WARNING)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list command
    list_parser = subparsers.add_parser("list", help="List events")
    _add_source_arguments(list_parser)
    list_parser.add_argument("--search", type=str, default="", help="Search title, organization and description")
    list_parser.add_argument("--category", type=str, default="all", help="Category id, or 'all'")
    list_parser.add_argument("--date", type=str, default=None, help="Only events on this date (YYYY-MM-DD)")
    list_parser.add_argument(
        "--distance",
        type=str,
        choices=["any", "5km", "10km", "15km"],
        default="any",
        help="Radius around --near",
    )
    list_parser.add_argument(
        "--near",
        type=float,
        nargs=2,
        metavar=("LAT", "LNG"),
        help="Your location, used by --distance and --sort distance",
    )
    list_parser.add_argument(
        "--sort",
        type=str,
        choices=[key.value for key in SortKey],
        default=SortKey.DATE.value,
        help="Sort order (default: date)",
    )
    list_parser.add_argument("--featured", action="store_true", help="Only featured (highly rated) events")
    list_parser.add_argument("--limit", type=int, default=None, help="Maximum number of events")
    list_parser.add_argument(
        "--format",
        type=str,
        choices=["markdown", "json"],
        default="markdown",
        help="Output format (default: markdown)",
    )
    list_parser.add_argument("--out", type=str, help="Write output to this file")
    list_parser.set_defaults(func=cmd_list)

    # show command
    show_parser = subparsers.add_parser("show", help="Show one event")
    show_parser.add_argument("event_id", type=str, help="eventId or _id of the event")
    _add_source_arguments(show_parser)
    show_parser.add_argument("--format", type=str, choices=["markdown", "json"], default="markdown")
    show_parser.set_defaults(func=cmd_show)

    # stats command
    stats_parser = subparsers.add_parser("stats", help="Active / draft / completed counters")
    _add_source_arguments(stats_parser)
    stats_parser.add_argument("--format", type=str, choices=["markdown", "json"], default="markdown")
    stats_parser.set_defaults(func=cmd_stats)

    # validate command
    validate_parser = subparsers.add_parser("validate", help="Validate an event draft JSON file")
    validate_parser.add_argument("draft", type=str, help="Path to draft JSON")
    validate_parser.set_defaults(func=cmd_validate)

    args = parser.parse_args()
    configure_logging(args.log_level)

    if not args.command:
        parser.print_help()
        return

    try:
        args.func(args)
    except Exception as e:
        logger.error(f"Error running command '{args.command}': {e}", exc_info=True)
        raise


if __name__ == "__main__":
    main()
