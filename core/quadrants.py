"""Eisenhower quadrant helpers."""
from __future__ import annotations

from typing import Any, Dict, List, Tuple

from core.settings import ThemeColors

URGENT_IMPORTANT = "Urgent & Important"
URGENT_NOT_IMPORTANT = "Urgent & Not Important"
NOT_URGENT_IMPORTANT = "Not Urgent & Important"
NOT_URGENT_NOT_IMPORTANT = "Not Urgent & Not Important"

# Display order of the 2x2 grid: row by row, urgent first.
QUADRANTS: List[str] = [
    URGENT_IMPORTANT,
    URGENT_NOT_IMPORTANT,
    NOT_URGENT_IMPORTANT,
    NOT_URGENT_NOT_IMPORTANT,
]

QUADRANT_FLAGS: Dict[str, Tuple[bool, bool]] = {
    URGENT_IMPORTANT: (True, True),
    URGENT_NOT_IMPORTANT: (True, False),
    NOT_URGENT_IMPORTANT: (False, True),
    NOT_URGENT_NOT_IMPORTANT: (False, False),
}

QUADRANT_META: Dict[str, Dict[str, str]] = {
    URGENT_IMPORTANT: {
        "key": "urgent_important",
        "short": "Do",
        "icon": "BOLT",
        "color": "#EF4444",    # red-500
    },
    URGENT_NOT_IMPORTANT: {
        "key": "urgent_not_important",
        "short": "Delegate",
        "icon": "SCHEDULE",
        "color": "#F59E0B",    # amber-500
    },
    NOT_URGENT_IMPORTANT: {
        "key": "not_urgent_important",
        "short": "Schedule",
        "icon": "TRACK_CHANGES",
        "color": "#10B981",    # emerald-500
    },
    NOT_URGENT_NOT_IMPORTANT: {
        "key": "not_urgent_not_important",
        "short": "Drop",
        "icon": "COFFEE",
        "color": "#3B82F6",    # blue-500
    },
}

DEFAULT_QUADRANT = NOT_URGENT_NOT_IMPORTANT


def quadrant_flags(label: str | None) -> Tuple[bool, bool]:
    """Map a quadrant label to ``(urgent, important)``; unknown labels are neither."""
    return QUADRANT_FLAGS.get(label or "", (False, False))


def quadrant_for(urgent: Any, important: Any) -> str:
    for label, flags in QUADRANT_FLAGS.items():
        if flags == (bool(urgent), bool(important)):
            return label
    return DEFAULT_QUADRANT


def quadrant_of(task: Any) -> str:
    return quadrant_for(getattr(task, "urgent", False), getattr(task, "important", False))


def in_quadrant(task: Any, label: str) -> bool:
    return quadrant_of(task) == label


def split_by_quadrant(tasks) -> Dict[str, list]:
    """Partition ``tasks`` into the four quadrants, preserving order."""
    buckets: Dict[str, list] = {label: [] for label in QUADRANTS}
    for task in tasks:
        buckets[quadrant_of(task)].append(task)
    return buckets


def quadrant_key(label: str) -> str:
    meta = QUADRANT_META.get(label, QUADRANT_META[DEFAULT_QUADRANT])
    return meta["key"]


def quadrant_color(label: str) -> str:
    meta = QUADRANT_META.get(label, QUADRANT_META[DEFAULT_QUADRANT])
    return meta["color"]


def quadrant_bgcolor(label: str, theme: ThemeColors) -> str:
    return getattr(theme.quadrants, quadrant_key(label))


def quadrant_options() -> Dict[str, str]:
    """Return mapping of dropdown values -> labels."""
    return {label: f"{label} ({meta['short']})" for label, meta in QUADRANT_META.items()}
