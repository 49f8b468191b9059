"""Pure leaderboard math: ELO updates, badge tiers, percentile and display text.

Ratings start at 1500. Each comparison moves both ideas by at most K points
(K=24). Badges need both a rating floor and a minimum number of matches so a
lucky streak of one or two wins does not earn a top tier.
"""

from dataclasses import dataclass

MIN_RANKED_MATCHES = 3
ELO_MEAN = 1500
ELO_STD_DEV = 50

WINNER_OUTCOME = {"A": 1.0, "B": 0.0, "Tie": 0.5}


@dataclass(frozen=True)
class BadgeInfo:
    badge: str | None
    color: str
    description: str


# (badge, min_elo, min_matches, color, description), best tier first
BADGE_TIERS: list[tuple[str, int, int, str, str]] = [
    ("Legendary", 1700, 10, "#9333ea", "Top 1% - Exceptional breakthrough potential"),
    ("Platinum", 1650, 8, "#0891b2", "Elite tier - Outstanding market potential"),
    ("Gold", 1600, 6, "#f59e0b", "Excellent - Strong competitive advantage"),
    ("Silver", 1550, 5, "#6b7280", "Very Good - Solid execution potential"),
    ("Bronze", 1500, 4, "#b45309", "Good - Proven viability"),
    ("Emerging", 1450, 3, "#16a34a", "Rising - Shows promise"),
]

# (min z-score, percentile), highest first
PERCENTILE_STEPS: list[tuple[float, int]] = [
    (2.5, 99),
    (2.0, 98),
    (1.5, 93),
    (1.0, 84),
    (0.5, 69),
    (0.0, 50),
    (-0.5, 31),
    (-1.0, 16),
    (-1.5, 7),
    (-2.0, 2),
]


def expected_score(rating_a: int, rating_b: int) -> float:
    return 1 / (1 + 10 ** ((rating_b - rating_a) / 400))


def calculate_new_elo(rating_a: int, rating_b: int, outcome_a: float, k: int = 24) -> tuple[int, int]:
    """Standard ELO update.

    Args:
        rating_a: Current rating of idea A
        rating_b: Current rating of idea B
        outcome_a: 1 for an A win, 0.5 for a tie, 0 for a loss
        k: K-factor

    Returns:
        (new_rating_a, new_rating_b), rounded to integers
    """
    new_a = rating_a + k * (outcome_a - expected_score(rating_a, rating_b))
    new_b = rating_b + k * ((1 - outcome_a) - expected_score(rating_b, rating_a))
    return round(new_a), round(new_b)


def outcome_for(winner: str) -> float:
    return WINNER_OUTCOME.get(winner, 0.5)


def calculate_badge(elo_score: int, match_count: int) -> BadgeInfo:
    if match_count < MIN_RANKED_MATCHES:
        return BadgeInfo(badge=None, color="gray", description="Not yet ranked")

    for badge, min_elo, min_matches, color, description in BADGE_TIERS:
        if elo_score >= min_elo and match_count >= min_matches:
            return BadgeInfo(badge=badge, color=color, description=description)

    return BadgeInfo(badge=None, color="gray", description="Needs more evaluation")


def percentile_rank(elo_score: int) -> int:
    """Approximate percentile assuming ratings are normal around 1500 with sd 50."""
    z_score = (elo_score - ELO_MEAN) / ELO_STD_DEV
    for threshold, percentile in PERCENTILE_STEPS:
        if z_score >= threshold:
            return percentile
    return 1


def display_text(
    *,
    rank: int,
    text: str,
    category: str | None,
    ai_summary: str | None,
    is_public: bool,
    is_own: bool,
) -> tuple[str, bool]:
    """Leaderboard text for one idea.

    Returns:
        (text_to_show, is_anonymized)
    """
    if is_own:
        return text, False
    if is_public and ai_summary:
        return ai_summary, True
    return f"{category or 'Startup'} #{rank:03d}", True
