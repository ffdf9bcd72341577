from copy import deepcopy
from pathlib import Path
from typing import Any, Dict

import yaml
from jsonschema import Draft202012Validator, ValidationError

DEFAULT_CONFIG_PATH = Path("songjog.config.yaml")

NEUTRAL_CATEGORY_COLOR = "bg-gray-100 text-gray-800"

BASE_CATEGORY_TABLE: Dict[str, Dict[str, str]] = {
    "cleanup": {"label": "Cleanup", "color": "bg-blue-100 text-blue-800"},
    "environment": {"label": "Environment", "color": "bg-green-100 text-green-800"},
    "education": {"label": "Education", "color": "bg-purple-100 text-purple-800"},
    "community": {"label": "Community Service", "color": "bg-orange-100 text-orange-800"},
    "healthcare": {"label": "Healthcare", "color": "bg-red-100 text-red-800"},
    "other": {"label": "Other", "color": NEUTRAL_CATEGORY_COLOR},
}

# Points awarded for joining an event, keyed by category
BASE_CATEGORY_POINTS: Dict[str, int] = {
    "cleanup": 50,
    "environment": 40,
    "education": 35,
    "community": 30,
    "healthcare": 45,
    "animal welfare": 35,
    "elderly care": 40,
    "disaster relief": 60,
    "other": 25,
}

BASE_PLACEHOLDERS: Dict[str, Any] = {
    "title": "No Title",
    "organization": "Unknown Organization",
    "organizer": "Unknown Organizer",
    "description": "No description available",
    "location": "Location not specified",
    "category": "general",
    "time": "10:00",
    "end_time": "12:00",
    "requirement": "No specific requirements",
    "impact": "0",
    "region": "Bangladesh",
    "max_volunteers": 10,
    "image": "/api/placeholder/600/400",
}

BASE_CONFIG: Dict[str, Any] = {
    "version": 1,
    "api": {
        "base_url": "http://localhost:5000",
        "events_path": "/api/events",
        "timeout_seconds": 10,
        "user_agent": "songjog/0.4",
    },
    "categories": BASE_CATEGORY_TABLE,
    "neutral_color": NEUTRAL_CATEGORY_COLOR,
    "points": {
        "by_category": BASE_CATEGORY_POINTS,
        "default": 25,
    },
    "placeholders": BASE_PLACEHOLDERS,
    "featured": {
        "min_rating": 4.5,
        "limit": 3,
    },
}

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["version"],
    "properties": {
        "version": {"type": "integer"},
        "api": {
            "type": "object",
            "properties": {
                "base_url": {"type": "string", "minLength": 1},
                "events_path": {"type": "string"},
                "timeout_seconds": {"type": "number", "exclusiveMinimum": 0},
                "user_agent": {"type": "string"},
            },
        },
        "categories": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {
                    "label": {"type": "string"},
                    "color": {"type": "string"},
                },
            },
        },
        "neutral_color": {"type": "string"},
        "points": {
            "type": "object",
            "properties": {
                "by_category": {
                    "type": "object",
                    "additionalProperties": {"type": "integer", "minimum": 0},
                },
                "default": {"type": "integer", "minimum": 0},
            },
        },
        "placeholders": {
            "type": "object",
            "properties": {
                "max_volunteers": {"type": "integer", "minimum": 1},
            },
            "additionalProperties": {"type": ["string", "integer"]},
        },
        "featured": {
            "type": "object",
            "properties": {
                "min_rating": {"type": "number", "minimum": 0, "maximum": 5},
                "limit": {"type": "integer", "minimum": 0},
            },
        },
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into a copy of base; nested dicts merge, everything else replaces."""
    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


def _format_error_path(error: ValidationError) -> str:
    if not error.absolute_path:
        return "$"
    return ".".join(("$", *map(str, error.absolute_path)))


def validate_config(config: Any) -> None:
    """
    Validate a user config document against CONFIG_SCHEMA.

    Raises:
        ValueError: naming the first failing path, e.g. "$.featured.min_rating"
    """
    if not isinstance(config, dict):
        raise ValueError("Config must be a dictionary")
    validator = Draft202012Validator(CONFIG_SCHEMA)
    errors = sorted(validator.iter_errors(config), key=lambda e: list(e.absolute_path))
    if errors:
        first = errors[0]
        raise ValueError(f"Invalid config at {_format_error_path(first)}: {first.message}")


def default_config() -> Dict[str, Any]:
    """Built-in configuration, used when no config file is present."""
    return deepcopy(BASE_CONFIG)


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load configuration from YAML and merge it over the built-in defaults.

    Args:
        path: Optional path to a config file. Defaults to songjog.config.yaml
            in the working directory; if that default file is absent the
            built-in defaults are returned.

    Returns:
        Complete configuration dictionary

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist
        ValueError: If config structure is invalid
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        if path is None:
            return default_config()
        raise FileNotFoundError(f"Config file not found: {cfg_path}")

    with cfg_path.open("r", encoding="utf-8") as f:
        user_config = yaml.safe_load(f)

    validate_config(user_config)
    return _deep_merge(BASE_CONFIG, user_config)


def get_category_table(config: Dict[str, Any] | None = None) -> Dict[str, Dict[str, str]]:
    """Category display table (label and color per category id)."""
    if config is None:
        return deepcopy(BASE_CATEGORY_TABLE)
    return config.get("categories") or deepcopy(BASE_CATEGORY_TABLE)


def get_placeholders(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """Placeholder values used when an event field is missing."""
    if config is None:
        return dict(BASE_PLACEHOLDERS)
    return {**BASE_PLACEHOLDERS, **(config.get("placeholders") or {})}


def get_neutral_color(config: Dict[str, Any] | None = None) -> str:
    if config is None:
        return NEUTRAL_CATEGORY_COLOR
    return config.get("neutral_color") or NEUTRAL_CATEGORY_COLOR


def get_points_table(config: Dict[str, Any] | None = None) -> tuple[Dict[str, int], int]:
    """
    Points awarded per category, plus the fallback for unlisted categories.

    Returns:
        Tuple of (points by category, default points)
    """
    points = (config or BASE_CONFIG).get("points") or {}
    by_category = points.get("by_category") or BASE_CATEGORY_POINTS
    return dict(by_category), int(points.get("default", 25))


def get_featured_settings(config: Dict[str, Any] | None = None) -> tuple[float, int]:
    """Returns (minimum rating, maximum count) for featured events."""
    featured = (config or BASE_CONFIG).get("featured") or {}
    return float(featured.get("min_rating", 4.5)), int(featured.get("limit", 3))
