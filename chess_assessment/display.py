"""
Presentation helpers for moderators.

Labels and emoticons for ranks, per-signal strength scores, the plain
text autoreport attached to an account, and a tabular export of
assessments. Nothing here feeds back into the decision logic.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Optional

import pandas as pd
from jinja2 import Environment, FileSystemLoader

from . import config
from .aggregate import AggregateAssessment
from .assessment import PlayerAssessment


TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

ASSESSMENT_LABELS = MappingProxyType({
    1: "Not cheating",
    2: "Unlikely cheating",
    3: "Unclear",
    4: "Likely cheating",
    5: "Cheating",
})

EMOTICONS = MappingProxyType({
    1: ":D",
    2: ":)",
    3: ":|",
    4: ":(",
    5: ">:(",
})

UNKNOWN_LABEL = "Undef"
UNKNOWN_EMOTICON = ":S"


def assessment_label(rank: int) -> str:
    """Human-readable label for a rank."""
    return ASSESSMENT_LABELS.get(rank, UNKNOWN_LABEL)


def emoticon(rank: int) -> str:
    return EMOTICONS.get(rank, UNKNOWN_EMOTICON)


# =============================================================================
# Signal strengths (1 = nothing, 5 = strongest)
# =============================================================================

def stockfish_sig(assessment: PlayerAssessment) -> int:
    """Strength of the engine-correlation signal."""
    flags = assessment.flags
    if flags.suspicious_error_rate and flags.always_has_advantage:
        return 5
    if flags.suspicious_error_rate:
        return 4
    if flags.always_has_advantage:
        return 3
    return 1


def move_time_sig(assessment: PlayerAssessment) -> int:
    flags = assessment.flags
    if flags.consistent_move_times and flags.no_fast_moves:
        return 5
    if flags.consistent_move_times:
        return 4
    if flags.no_fast_moves:
        return 3
    return 1


def blur_sig(assessment: PlayerAssessment) -> int:
    if assessment.flags.high_blur_rate:
        return 5
    if assessment.flags.moderate_blur_rate:
        return 4
    return 1


def hold_sig(assessment: PlayerAssessment) -> int:
    return 5 if assessment.flags.suspicious_hold_alert else 1


# =============================================================================
# Autoreport
# =============================================================================

def game_url(assessment: PlayerAssessment, base_url: Optional[str] = None) -> str:
    """Link to the game from the assessed player's side."""
    base = (base_url or config.GAME_URL_BASE).rstrip("/")
    return f"{base}/{assessment.game_id}/{assessment.color_name}"


def top_assessments(
    assessments: Iterable[PlayerAssessment],
    max_games: int,
) -> list[PlayerAssessment]:
    """Highest-ranked assessments first; equal ranks keep their original order."""
    return sorted(assessments, key=lambda a: -a.rank)[:max_games]


def report_text(
    aggregate: AggregateAssessment,
    max_games: Optional[int] = None,
    base_url: Optional[str] = None,
) -> str:
    """
    Render the moderator autoreport for an account.

    Args:
        aggregate: The account's aggregate assessment.
        max_games: Number of games to list (default from config).
        base_url: Base of game links (default from config).

    Returns:
        Report text: header, cheating counts, then one line per game.
    """
    if max_games is None:
        max_games = config.REPORT_MAX_GAMES

    games = [
        {"emoticon": emoticon(a.rank), "url": game_url(a, base_url)}
        for a in top_assessments(aggregate.player_assessments, max_games)
    ]

    env = Environment(loader=FileSystemLoader(str(TEMPLATE_DIR)))
    template = env.get_template("autoreport.txt.jinja2")
    return template.render(
        cheating_sum=aggregate.cheating_sum,
        likely_cheating_sum=aggregate.likely_cheating_sum,
        games=games,
    )


# =============================================================================
# Tabular export
# =============================================================================

def assessments_to_dataframe(assessments: Iterable[PlayerAssessment]) -> pd.DataFrame:
    """
    One row per assessment, flags flattened into columns.

    Adds the rank label and the per-signal strengths for spreadsheet review.
    """
    rows = []
    for a in assessments:
        row = a.to_dict()
        row.update(row.pop("flags"))
        row["color"] = a.color_name
        row["label"] = assessment_label(a.rank)
        row["stockfish_sig"] = stockfish_sig(a)
        row["move_time_sig"] = move_time_sig(a)
        row["blur_sig"] = blur_sig(a)
        row["hold_sig"] = hold_sig(a)
        rows.append(row)
    return pd.DataFrame(rows)
