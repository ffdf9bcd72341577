"""Tests for the events API: view-model assembly, filtering and sorting."""

from datetime import date

import pytest

from songjog.api.events_api import (
    build_view_model,
    build_view_models,
    featured_events,
    filter_events,
    find_event,
    partition_by_lifecycle,
    partition_joined,
    query_events,
    sort_events,
    summarize_events,
)
from songjog.api.models import FilterSpec, SortKey
from songjog.events.event_models import Coordinates, EventLifecycle, EventStatus
from songjog.parsing.normalizer import normalize_collection

DHAKA = Coordinates(lat=23.8103, lng=90.4125)


@pytest.fixture
def view_models(raw_events, today):
    return build_view_models(raw_events, today=today)


def _ids(events):
    return [e.id for e in events]


class TestBuildViewModel:
    def test_beach_cleanup_example(self, today):
        vm = build_view_model(
            {"title": "Beach Cleanup", "volunteers": 45, "maxVolunteers": 100, "date": "2024-01-15"},
            today=today,
        )
        assert vm.days_remaining == 5
        assert vm.progress_percent == 45
        assert vm.status == EventStatus.UPCOMING_SOON
        assert vm.status_label == "In 5 days"

    def test_assembly_is_idempotent_for_a_fixed_today(self, raw_events, today):
        first = build_view_model(raw_events[0], today=today)
        second = build_view_model(raw_events[0], today=today)
        assert first == second
        assert first.model_dump_json(by_alias=True) == second.model_dump_json(by_alias=True)

    def test_days_remaining_moves_with_today(self, raw_events):
        earlier = build_view_model(raw_events[0], today=date(2024, 1, 10))
        later = build_view_model(raw_events[0], today=date(2024, 1, 14))
        assert earlier.days_remaining == 5
        assert later.days_remaining == 1

    def test_derived_fields(self, view_models):
        beach, tree, reading, clinic, draft = view_models

        assert beach.category_label == "Cleanup"
        assert beach.category_color == "bg-blue-100 text-blue-800"
        assert beach.featured is True
        assert beach.seats_remaining == 55
        assert beach.city == "Cox's Bazar"
        assert beach.region == "Chittagong"
        assert beach.display_date == "Jan 15, 2024"

        assert tree.status == EventStatus.TOMORROW
        assert tree.is_full is True
        assert tree.progress_percent == 100

        assert clinic.status == EventStatus.COMPLETED
        assert clinic.days_remaining == 0
        assert clinic.progress_percent == 100
        assert clinic.lifecycle == EventLifecycle.COMPLETED

        assert draft.lifecycle == EventLifecycle.DRAFT
        assert draft.status == EventStatus.CONFIRMED

    def test_unknown_date_is_reported_as_tbd(self, today):
        vm = build_view_model({"title": "Someday", "date": "soon"}, today=today)
        assert vm.status == EventStatus.UNKNOWN
        assert vm.days_remaining == 0
        assert vm.display_date == "Date TBD"
        assert vm.status_label == "Date TBD"

    def test_empty_record_view_model(self, today):
        vm = build_view_model({}, today=today)
        assert vm.title == "No Title"
        assert vm.max_volunteers == 10
        assert vm.volunteers == 0
        assert vm.progress_percent == 0
        assert vm.category_label == "General"
        assert vm.category_color == "bg-gray-100 text-gray-800"

    def test_camel_case_serialization(self, view_models):
        data = view_models[0].model_dump(mode="json", by_alias=True)
        assert data["progressPercent"] == 45
        assert data["daysRemaining"] == 5
        assert data["maxVolunteers"] == 100
        assert data["categoryColor"] == "bg-blue-100 text-blue-800"
        assert data["status"] == "upcoming-soon"
        assert data["date"] == "2024-01-15"

    def test_non_list_payload_is_empty(self, today):
        assert build_view_models(42, today=today) == []


class TestFilterEvents:
    def test_search_matches_title_case_insensitively(self, view_models):
        assert _ids(filter_events(view_models, FilterSpec(search_text="CLEAN"))) == ["evt-beach"]

    def test_search_matches_description(self, view_models):
        assert _ids(filter_events(view_models, FilterSpec(search_text="community"))) == ["evt-reading"]

    def test_search_matches_organization(self, view_models):
        assert _ids(filter_events(view_models, FilterSpec(search_text="roots"))) == ["65a0c0ffee"]

    def test_empty_search_matches_everything(self, view_models):
        assert filter_events(view_models, FilterSpec(search_text="")) == view_models

    def test_category_all_is_identity(self, view_models):
        assert filter_events(view_models, FilterSpec(category="all")) == filter_events(view_models, FilterSpec())
        assert filter_events(view_models, FilterSpec(category="all")) == view_models

    def test_category_exact_match(self, view_models):
        assert _ids(filter_events(view_models, FilterSpec(category="cleanup"))) == ["evt-beach"]
        assert filter_events(view_models, FilterSpec(category="clean")) == []

    def test_date_filter(self, view_models):
        matched = filter_events(view_models, FilterSpec(date="2024-01-15"))
        assert _ids(matched) == ["evt-beach", "evt-reading"]

    def test_date_filter_skips_events_with_unknown_dates(self, today):
        events = normalize_collection([{"eventId": "no-date"}], today=today)
        assert filter_events(events, FilterSpec(date=today)) == []

    def test_unparseable_filter_date_disables_predicate(self, view_models):
        assert filter_events(view_models, FilterSpec(date="whenever")) == view_models

    def test_distance_without_location_is_noop(self, view_models):
        assert filter_events(view_models, FilterSpec(distance="5km")) == view_models

    def test_distance_keeps_events_without_coordinates(self, view_models):
        matched = filter_events(view_models, FilterSpec(distance="5km", user_location=DHAKA))
        assert _ids(matched) == ["65a0c0ffee", "evt-reading", "evt-clinic", "evt-draft"]

    def test_predicates_are_combined_with_and(self, view_models):
        matched = filter_events(view_models, FilterSpec(search_text="a", category="environment"))
        assert _ids(matched) == ["65a0c0ffee"]

    def test_accepts_dict_spec_and_normalized_events(self, raw_events, today):
        events = normalize_collection(raw_events, today=today)
        assert _ids(filter_events(events, {"category": "healthcare"})) == ["evt-clinic"]

    def test_none_fields_in_dict_spec_fall_back_to_defaults(self, view_models):
        assert filter_events(view_models, {"search_text": None, "category": None}) == view_models

    def test_non_list_input(self):
        assert filter_events("junk", FilterSpec()) == []


class TestSortEvents:
    def test_date_ascending(self, view_models):
        ordered = sort_events(view_models, SortKey.DATE)
        assert _ids(ordered) == ["evt-clinic", "65a0c0ffee", "evt-beach", "evt-reading", "evt-draft"]

    def test_date_sort_is_stable(self, view_models):
        reversed_input = list(reversed(view_models))
        ordered = sort_events(reversed_input, "date")
        # evt-reading comes before evt-beach in the reversed input; same date keeps that order
        assert _ids(ordered) == ["evt-clinic", "65a0c0ffee", "evt-reading", "evt-beach", "evt-draft"]

    def test_unknown_dates_sort_last(self, today):
        events = normalize_collection(
            [{"eventId": "undated"}, {"eventId": "dated", "date": "2030-01-01"}],
            today=today,
        )
        assert _ids(sort_events(events, "date")) == ["dated", "undated"]

    def test_volunteers_descending(self, view_models):
        ordered = sort_events(view_models, "volunteers")
        assert _ids(ordered) == ["evt-clinic", "evt-beach", "65a0c0ffee", "evt-reading", "evt-draft"]

    @pytest.mark.parametrize("key", ["rating", "recommended", SortKey.RECOMMENDED])
    def test_rating_descending_missing_is_zero(self, view_models, key):
        ordered = sort_events(view_models, key)
        assert _ids(ordered) == ["evt-beach", "evt-clinic", "65a0c0ffee", "evt-reading", "evt-draft"]

    def test_distance_without_location_keeps_input_order(self, view_models):
        assert sort_events(view_models, "distance") == view_models

    def test_distance_with_location(self, view_models):
        ordered = sort_events(view_models, "distance", user_location=DHAKA)
        assert _ids(ordered) == ["65a0c0ffee", "evt-beach", "evt-reading", "evt-clinic", "evt-draft"]

    def test_unknown_key_keeps_input_order(self, view_models):
        assert sort_events(view_models, "popularity") == view_models

    def test_input_is_not_mutated(self, view_models):
        snapshot = list(view_models)
        result = sort_events(view_models, "volunteers")
        assert view_models == snapshot
        assert result is not view_models


class TestQueryEvents:
    def test_full_pipeline(self, raw_events, today):
        result = query_events(
            {"data": raw_events},
            {"category": "all", "search_text": ""},
            "rating",
            today=today,
            limit=2,
        )
        assert _ids(result) == ["evt-beach", "evt-clinic"]

    def test_offset(self, raw_events, today):
        result = query_events(raw_events, None, "date", today=today, offset=3)
        assert _ids(result) == ["evt-reading", "evt-draft"]

    def test_distance_sort_uses_filter_location(self, raw_events, today):
        result = query_events(raw_events, FilterSpec(user_location=DHAKA), "distance", today=today)
        assert _ids(result)[0] == "65a0c0ffee"

    def test_malformed_payload(self, today):
        assert query_events("not a list", None, "date", today=today) == []


class TestFindEvent:
    def test_by_event_id(self, raw_events, today):
        assert find_event(raw_events, "evt-beach", today=today).title == "Beach Cleanup"

    def test_by_mongo_id(self, raw_events, today):
        assert find_event({"events": raw_events}, "65a0c0ffee", today=today).title == "Tree Planting Drive"

    def test_missing(self, raw_events, today):
        assert find_event(raw_events, "nope", today=today) is None


class TestDashboards:
    def test_partition_by_lifecycle(self, view_models):
        partition = partition_by_lifecycle(view_models)
        assert _ids(partition.active) == ["evt-beach", "65a0c0ffee", "evt-reading"]
        assert _ids(partition.completed) == ["evt-clinic"]
        assert _ids(partition.draft) == ["evt-draft"]

    def test_summarize_excludes_draft_volunteers(self, view_models):
        stats = summarize_events(partition_by_lifecycle(view_models))
        assert stats.total == 5
        assert stats.active == 3
        assert stats.draft == 1
        assert stats.completed == 1
        assert stats.total_volunteers == 45 + 30 + 5 + 60

    def test_partition_joined(self, view_models):
        joined = partition_joined(view_models)
        assert _ids(joined.upcoming) == ["evt-beach", "65a0c0ffee", "evt-reading"]
        assert _ids(joined.past) == ["evt-clinic"]

    def test_featured_events(self, view_models):
        assert _ids(featured_events(view_models)) == ["evt-beach", "evt-clinic"]
        assert _ids(featured_events(view_models, limit=1)) == ["evt-beach"]


def test_one_oversized_number_does_not_break_the_listing(raw_events, today):
    payload = raw_events + [{"eventId": "huge", "rating": 10**400, "volunteers": 10**400}]
    view_models = build_view_models(payload, today=today)
    assert view_models[-1].id == "huge"
    assert view_models[-1].rating == 0
    assert view_models[-1].volunteers == 0
