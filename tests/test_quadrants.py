from types import SimpleNamespace

import pytest

from core import quadrants
from core.settings import DARK_THEME, UI


@pytest.mark.parametrize(
    "label, flags",
    [
        (quadrants.URGENT_IMPORTANT, (True, True)),
        (quadrants.URGENT_NOT_IMPORTANT, (True, False)),
        (quadrants.NOT_URGENT_IMPORTANT, (False, True)),
        (quadrants.NOT_URGENT_NOT_IMPORTANT, (False, False)),
        ("Later maybe", (False, False)),
        (None, (False, False)),
    ],
)
def test_quadrant_flags(label, flags):
    assert quadrants.quadrant_flags(label) == flags


def test_flags_and_labels_agree():
    for label in quadrants.QUADRANTS:
        assert quadrants.quadrant_for(*quadrants.quadrant_flags(label)) == label


def test_split_preserves_order_and_covers_everything():
    tasks = [
        SimpleNamespace(id=1, urgent=True, important=True),
        SimpleNamespace(id=2, urgent=False, important=False),
        SimpleNamespace(id=3, urgent=True, important=True),
        SimpleNamespace(id=4, urgent=None, important=1),
    ]
    buckets = quadrants.split_by_quadrant(tasks)
    assert list(buckets) == quadrants.QUADRANTS
    assert [t.id for t in buckets[quadrants.URGENT_IMPORTANT]] == [1, 3]
    assert [t.id for t in buckets[quadrants.NOT_URGENT_IMPORTANT]] == [4]
    assert sum(len(items) for items in buckets.values()) == len(tasks)


def test_colors_follow_theme():
    label = quadrants.URGENT_IMPORTANT
    assert quadrants.quadrant_bgcolor(label, UI.light) == UI.light.quadrants.urgent_important
    assert quadrants.quadrant_bgcolor(label, DARK_THEME) == DARK_THEME.quadrants.urgent_important
    assert quadrants.quadrant_color("nope") == quadrants.quadrant_color(quadrants.DEFAULT_QUADRANT)


def test_quadrant_options_cover_all_labels():
    options = quadrants.quadrant_options()
    assert list(options) == quadrants.QUADRANTS
    assert options[quadrants.URGENT_IMPORTANT].endswith("(Do)")
