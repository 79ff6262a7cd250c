"""
Per-player, per-game assessment records.

A PlayerAssessment packages the cheating rank, the flags that produced it
and the summary statistics for one side of one analysed game. Records are
immutable and are persisted externally under "<game id>/<color>".
"""

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional

import chess

from .flags import AnalysedGame, PlayerFlags, extract_flags, summary_stats
from .ranking import rank_cheating


def assessment_id(game_id: str, color: chess.Color) -> str:
    """Storage key for one side of a game, e.g. "abcd1234/white"."""
    return f"{game_id}/{chess.COLOR_NAMES[color]}"


@dataclass(frozen=True)
class PlayerAssessment:
    """Cheating assessment of one player in one game."""
    id: str
    game_id: str
    user_id: str
    white: bool
    rank: int          # 1 = Not cheating ... 5 = Cheating
    date: datetime

    flags: PlayerFlags
    sf_avg: int        # Mean centipawn loss
    sf_sd: int         # Deviation of centipawn loss
    mt_avg: int        # Mean move time (tenths of a second)
    mt_sd: int         # Deviation of move time
    blurs: int         # Blur percentage
    hold: bool         # Hold alert raised

    @property
    def color(self) -> chess.Color:
        return chess.WHITE if self.white else chess.BLACK

    @property
    def color_name(self) -> str:
        return chess.COLOR_NAMES[self.color]

    def to_dict(self) -> dict:
        """Plain dict suitable for JSON storage."""
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "PlayerAssessment":
        """Rebuild a record produced by to_dict()."""
        return cls(
            id=data["id"],
            game_id=data["game_id"],
            user_id=data["user_id"],
            white=bool(data["white"]),
            rank=int(data["rank"]),
            date=datetime.fromisoformat(data["date"]),
            flags=PlayerFlags(**data["flags"]),
            sf_avg=int(data["sf_avg"]),
            sf_sd=int(data["sf_sd"]),
            mt_avg=int(data["mt_avg"]),
            mt_sd=int(data["mt_sd"]),
            blurs=int(data["blurs"]),
            hold=bool(data["hold"]),
        )


@dataclass(frozen=True)
class GameAssessments:
    """Both sides' assessments of one game."""
    white: Optional[PlayerAssessment] = None
    black: Optional[PlayerAssessment] = None

    def color(self, color: chess.Color) -> Optional[PlayerAssessment]:
        return self.white if color == chess.WHITE else self.black


def assess_player(
    game: AnalysedGame,
    color: chess.Color,
    now: Optional[datetime] = None,
) -> PlayerAssessment:
    """
    Build the assessment of one side of an analysed game.

    Args:
        game: Analysed game from the data provider.
        color: Side to assess.
        now: Timestamp to stamp on the record (default: current UTC time).

    Returns:
        Immutable PlayerAssessment.
    """
    flags = extract_flags(game, color)
    stats = summary_stats(game, color)
    player = game.player(color)

    return PlayerAssessment(
        id=assessment_id(game.game_id, color),
        game_id=game.game_id,
        user_id=player.user_id or "",
        white=(color == chess.WHITE),
        rank=rank_cheating(flags, game.won_by(color)),
        date=now or datetime.now(timezone.utc),
        flags=flags,
        sf_avg=stats.sf_avg,
        sf_sd=stats.sf_sd,
        mt_avg=stats.mt_avg,
        mt_sd=stats.mt_sd,
        blurs=player.blur_percent,
        hold=player.hold_alert,
    )


def assess_game(game: AnalysedGame, now: Optional[datetime] = None) -> GameAssessments:
    """Assess both sides of a game with a shared timestamp."""
    now = now or datetime.now(timezone.utc)
    return GameAssessments(
        white=assess_player(game, chess.WHITE, now),
        black=assess_player(game, chess.BLACK, now),
    )
