"""Tests for leaderboard parsing and text rendering."""

import pytest

from angelic.client.leaderboard import parse_top_ideas, render_leaderboard, render_row

pytestmark = pytest.mark.unit

PAYLOAD = {
    "total": 2,
    "ideas": [
        {
            "rank": 1,
            "idea_id": "a",
            "text": "FoodTech #001",
            "category": "FoodTech",
            "stage": None,
            "elo_score": 1612,
            "match_count": 7,
            "badge": "Gold",
            "badge_color": "#f59e0b",
            "badge_description": "Excellent",
            "is_own": False,
            "is_anonymized": True,
            "is_public": False,
            "percentile": 98,
        },
        {
            "rank": 2,
            "idea_id": "b",
            "text": "My own idea",
            "category": "EdTech",
            "elo_score": 1480,
            "match_count": 3,
            "badge": None,
            "is_own": True,
            "is_anonymized": False,
            "percentile": 31,
        },
    ],
}


def test_parse_rows():
    rows = parse_top_ideas(PAYLOAD)

    assert [row.idea_id for row in rows] == ["a", "b"]
    assert rows[0].elo == 1612
    assert rows[1].badge is None


def test_parse_empty_payload():
    assert parse_top_ideas({"total": 0, "ideas": []}) == []


def test_render_english_row():
    row = parse_top_ideas(PAYLOAD)[0]

    assert render_row(row, "en") == "#1 | Gold | FoodTech #001 (anonymous) | 1612 | 7 | top 2%"


def test_render_own_unranked_row_in_chinese():
    row = parse_top_ideas(PAYLOAD)[1]

    assert render_row(row, "zh") == "#2 | 未评级 | * My own idea | 1480 | 3 | 前69%"


def test_render_table_has_localized_header():
    table = render_leaderboard(parse_top_ideas(PAYLOAD), "zh")

    lines = table.splitlines()
    assert lines[0].startswith("排名")
    assert len(lines) == 3


def test_long_text_is_truncated():
    payload = {"ideas": [{**PAYLOAD["ideas"][1], "text": "x" * 200}]}

    line = render_row(parse_top_ideas(payload)[0], "en")

    assert "…" in line
    assert len(line) < 120
