"""Chart option presets.

Presets are returned as fresh dictionaries so callers can extend them
without touching the shared templates. Tooltip callbacks are expressed as
format strings for the renderer to apply.
"""

from copy import deepcopy
from typing import Any, Dict

GRID_COLOR = "#e2e8f0"

_BASE_OPTIONS: Dict[str, Any] = {
    "responsive": True,
    "maintainAspectRatio": False,
    "interaction": {"mode": "index", "intersect": False},
    "plugins": {
        "tooltip": {"mode": "index", "intersect": False},
    },
}


def _axis(title: str) -> Dict[str, Any]:
    return {
        "title": {"display": True, "text": title},
        "grid": {"color": GRID_COLOR},
    }


def _with_plugins(base: Dict[str, Any], **plugins: Any) -> Dict[str, Any]:
    options = deepcopy(base)
    options["plugins"] = {**options.get("plugins", {}), **deepcopy(plugins)}
    return options


def hourly_options() -> Dict[str, Any]:
    """Line chart of engagement by local hour."""
    options = _with_plugins(
        _BASE_OPTIONS,
        legend={"position": "bottom", "labels": {"usePointStyle": True, "padding": 20}},
    )
    options["scales"] = {
        "y": {"beginAtZero": True, **_axis("Engagement Score")},
        "x": _axis("Hour of Day (Local Time)"),
    }
    return options


def daily_options() -> Dict[str, Any]:
    """Bar chart of engagement by day of week."""
    options = _with_plugins(_BASE_OPTIONS, legend={"display": False})
    options["scales"] = {
        "y": {"beginAtZero": True, **_axis("Average Engagement")},
        "x": _axis("Day of Week"),
    }
    return options


def pie_options() -> Dict[str, Any]:
    """Pie chart of engagement by event type."""
    return {
        "responsive": True,
        "maintainAspectRatio": False,
        "plugins": {
            "legend": {"position": "right", "labels": {"usePointStyle": True, "padding": 20}},
            "tooltip": {"labelFormat": "{label}: {value} points"},
        },
    }


def title_plugin(text: str) -> Dict[str, Any]:
    return {"display": True, "text": text, "font": {"size": 16, "weight": "bold"}}
