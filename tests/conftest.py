"""Pytest configuration and fixtures."""

from datetime import date

import pytest


@pytest.fixture
def today():
    """Frozen reference date so day counts and statuses are deterministic."""
    return date(2024, 1, 10)


@pytest.fixture
def raw_events():
    """A small API payload with a mix of complete and sparse records."""
    return [
        {
            "eventId": "evt-beach",
            "title": "Beach Cleanup",
            "organization": "Green Coast",
            "description": "Collect plastic along the shore",
            "category": "cleanup",
            "date": "2024-01-15",
            "time": "08:00",
            "endTime": "11:00",
            "location": "Cox's Bazar, Chittagong",
            "coordinates": {"lat": 21.4272, "lng": 92.0058},
            "volunteers": 45,
            "maxVolunteers": 100,
            "rating": 4.8,
            "reviews": 12,
            "points": 50,
        },
        {
            "_id": "65a0c0ffee",
            "title": "Tree Planting Drive",
            "organization": "Dhaka Roots",
            "description": "Plant saplings in city parks",
            "category": "environment",
            "date": "2024-01-11",
            "location": "Dhaka",
            "coordinates": {"lat": 23.8103, "lng": 90.4125},
            "volunteers": 30,
            "maxVolunteers": 30,
            "rating": 4.2,
        },
        {
            "eventId": "evt-reading",
            "title": "Reading Circle",
            "organization": "Book Buddies",
            "description": "Read with children at the community library",
            "category": "education",
            "date": "2024-01-15",
            "volunteers": 5,
            "maxVolunteers": 20,
        },
        {
            "eventId": "evt-clinic",
            "title": "Health Camp",
            "organization": "Care First",
            "description": "Free checkups",
            "category": "healthcare",
            "date": "2023-12-20",
            "volunteers": 60,
            "maxVolunteers": 50,
            "rating": 4.6,
        },
        {
            "eventId": "evt-draft",
            "title": "Winter Clothes Drive",
            "organization": "Warm Hands",
            "category": "community",
            "date": "2024-02-01",
            "status": "draft",
            "volunteers": 3,
        },
    ]
