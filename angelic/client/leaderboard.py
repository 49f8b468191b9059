"""Render the /api/top leaderboard as localized text rows."""

from dataclasses import dataclass

ANONYMOUS_LABEL = {"zh": "匿名", "en": "anonymous"}
UNRANKED_BADGE = {"zh": "未评级", "en": "Unranked"}

HEADERS = {
    "zh": ("排名", "徽章", "创意", "ELO", "对战", "百分位"),
    "en": ("Rank", "Badge", "Idea", "ELO", "Matches", "Percentile"),
}

TEXT_WIDTH = 60


@dataclass(frozen=True)
class LeaderboardRow:
    rank: int
    idea_id: str
    text: str
    category: str | None
    badge: str | None
    elo: int
    matches: int
    percentile: int
    is_own: bool
    is_anonymized: bool

    @classmethod
    def from_api(cls, data: dict) -> "LeaderboardRow":
        return cls(
            rank=int(data["rank"]),
            idea_id=str(data["idea_id"]),
            text=data.get("text") or "",
            category=data.get("category"),
            badge=data.get("badge"),
            elo=int(data.get("elo_score", 0)),
            matches=int(data.get("match_count", 0)),
            percentile=int(data.get("percentile", 0)),
            is_own=bool(data.get("is_own")),
            is_anonymized=bool(data.get("is_anonymized")),
        )


def parse_top_ideas(payload: dict) -> list[LeaderboardRow]:
    return [LeaderboardRow.from_api(row) for row in payload.get("ideas") or []]


def _truncate(text: str, width: int) -> str:
    text = " ".join(text.split())
    return text if len(text) <= width else text[: width - 1] + "…"


def render_row(row: LeaderboardRow, language: str = "en") -> str:
    badge = row.badge or UNRANKED_BADGE.get(language, UNRANKED_BADGE["en"])
    text = _truncate(row.text, TEXT_WIDTH)
    if row.is_anonymized:
        text = f"{text} ({ANONYMOUS_LABEL.get(language, ANONYMOUS_LABEL['en'])})"
    if row.is_own:
        text = f"* {text}"
    if language == "zh":
        percentile = f"前{max(1, 100 - row.percentile)}%"
    else:
        percentile = f"top {max(1, 100 - row.percentile)}%"
    return " | ".join([f"#{row.rank}", badge, text, str(row.elo), str(row.matches), percentile])


def render_leaderboard(rows: list[LeaderboardRow], language: str = "en") -> str:
    header = " | ".join(HEADERS.get(language, HEADERS["en"]))
    return "\n".join([header, *(render_row(row, language) for row in rows)])
