"""
Pytest configuration and shared factories for assessment tests.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import chess
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from chess_assessment.assessment import PlayerAssessment, assessment_id
from chess_assessment.flags import PlayerFlags


FIXED_NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

FLAG_NAMES = (
    "suspicious_error_rate",
    "always_has_advantage",
    "high_blur_rate",
    "moderate_blur_rate",
    "consistent_move_times",
    "no_fast_moves",
    "suspicious_hold_alert",
)


@pytest.fixture
def make_flags():
    """Build PlayerFlags with every flag False unless overridden."""
    def _make(**overrides) -> PlayerFlags:
        values = {name: False for name in FLAG_NAMES}
        values.update(overrides)
        return PlayerFlags(**values)
    return _make


@pytest.fixture
def make_assessment(make_flags):
    """Build a PlayerAssessment with neutral defaults."""
    counter = iter(range(1_000_000))

    def _make(
        rank: int = 1,
        sf_avg: int = 30,
        sf_sd: int = 20,
        mt_avg: int = 50,
        mt_sd: int = 40,
        blurs: int = 0,
        hold: bool = False,
        white: bool = True,
        game_id: str | None = None,
        user_id: str = "someone",
    ) -> PlayerAssessment:
        game_id = game_id or f"game{next(counter):04d}"
        color = chess.WHITE if white else chess.BLACK
        return PlayerAssessment(
            id=assessment_id(game_id, color),
            game_id=game_id,
            user_id=user_id,
            white=white,
            rank=rank,
            date=FIXED_NOW,
            flags=make_flags(),
            sf_avg=sf_avg,
            sf_sd=sf_sd,
            mt_avg=mt_avg,
            mt_sd=mt_sd,
            blurs=blurs,
            hold=hold,
        )
    return _make
