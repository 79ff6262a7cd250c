"""
Tests for building per-player assessment records.

Run with: pytest tests/test_assessment.py -v
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

import chess
import pytest

from chess_assessment.assessment import (
    GameAssessments,
    PlayerAssessment,
    assess_game,
    assess_player,
    assessment_id,
)
from chess_assessment.flags import AnalysedGame, EvalInfo, PlayerData

from conftest import FIXED_NOW


GAME = AnalysedGame(
    game_id="abcd1234",
    white=PlayerData(user_id="alice", blur_percent=95, hold_alert=True),
    black=PlayerData(user_id=None, blur_percent=10, hold_alert=False),
    move_times=(50, 30, 52, 10, 48, 5, 50, 80),
    evals=tuple(EvalInfo(cp=v) for v in (20, 25, 30, 35, 40, 45, 50, 55)),
    winner=chess.WHITE,
)


class TestAssessmentId:
    def test_white(self):
        assert assessment_id("abcd1234", chess.WHITE) == "abcd1234/white"

    def test_black(self):
        assert assessment_id("abcd1234", chess.BLACK) == "abcd1234/black"


class TestAssessPlayer:
    """Tests for assess_player."""

    def test_winner_with_every_flag(self):
        a = assess_player(GAME, chess.WHITE, now=FIXED_NOW)
        assert a.id == "abcd1234/white"
        assert a.game_id == "abcd1234"
        assert a.user_id == "alice"
        assert a.white is True
        assert a.color == chess.WHITE
        assert a.rank == 5
        assert a.date == FIXED_NOW
        assert a.blurs == 95
        assert a.hold is True
        assert (a.sf_avg, a.sf_sd, a.mt_avg, a.mt_sd) == (0, 0, 50, 1)

    def test_loser_is_capped(self):
        """Black's flags reach the 'unclear' row; losing keeps it at 3."""
        a = assess_player(GAME, chess.BLACK, now=FIXED_NOW)
        assert a.rank == 3
        assert a.color_name == "black"

    def test_anonymous_player_has_empty_user_id(self):
        a = assess_player(GAME, chess.BLACK, now=FIXED_NOW)
        assert a.user_id == ""

    def test_default_timestamp_is_current_utc(self):
        before = datetime.now(timezone.utc)
        a = assess_player(GAME, chess.WHITE)
        assert before <= a.date <= datetime.now(timezone.utc)

    def test_unanalysed_game_does_not_fail(self):
        a = assess_player(AnalysedGame(game_id="empty"), chess.WHITE, now=FIXED_NOW)
        assert 1 <= a.rank <= 3
        assert (a.sf_avg, a.sf_sd, a.mt_avg, a.mt_sd) == (0, 0, 0, 0)

    def test_record_is_immutable(self):
        a = assess_player(GAME, chess.WHITE, now=FIXED_NOW)
        with pytest.raises(FrozenInstanceError):
            a.rank = 1


class TestAssessGame:
    """Tests for assess_game and GameAssessments."""

    def test_both_sides_assessed(self):
        assessments = assess_game(GAME, now=FIXED_NOW)
        assert assessments.white.id == "abcd1234/white"
        assert assessments.black.id == "abcd1234/black"
        assert assessments.white.date == assessments.black.date

    def test_lookup_by_color(self):
        assessments = assess_game(GAME, now=FIXED_NOW)
        assert assessments.color(chess.WHITE) is assessments.white
        assert assessments.color(chess.BLACK) is assessments.black

    def test_missing_side(self):
        assessments = GameAssessments(white=None, black=None)
        assert assessments.color(chess.WHITE) is None


class TestSerialization:
    """Tests for the storage representation."""

    def test_to_dict_shape(self):
        data = assess_player(GAME, chess.WHITE, now=FIXED_NOW).to_dict()
        assert data["id"] == "abcd1234/white"
        assert data["date"] == FIXED_NOW.isoformat()
        assert data["flags"]["suspicious_hold_alert"] is True

    def test_round_trip(self):
        a = assess_player(GAME, chess.BLACK, now=FIXED_NOW)
        assert PlayerAssessment.from_dict(a.to_dict()) == a

    def test_missing_field_rejected(self):
        data = assess_player(GAME, chess.WHITE, now=FIXED_NOW).to_dict()
        del data["rank"]
        with pytest.raises(KeyError):
            PlayerAssessment.from_dict(data)
