"""
Behavioral flag extraction for one player in one analysed game.

Turns the raw material supplied by the game/analysis provider (engine
evaluations, interleaved move times, blur percentage, hold alerts) into
seven independent boolean flags plus the summary statistics stored with
each assessment. Every function here is a pure function of its inputs.

Conventions:
- Evaluations are from White's point of view, one per ply, in the order
  the plies were played.
- Move times are in tenths of a second, interleaved by player, starting
  with the first mover.
"""

from dataclasses import dataclass, field
from typing import Optional

import chess

from .stats import (
    coefficient_of_variation,
    safe_deviation,
    safe_mean,
    skip_alternate,
)


# =============================================================================
# Thresholds
# =============================================================================

# Average centipawn loss below this is suspiciously accurate
SUSPICIOUS_ERROR_RATE = 15

# Opponent advantage (centipawns) that disqualifies "always has advantage"
ADVANTAGE_THRESHOLD = 100

HIGH_BLUR_PERCENT = 90
MODERATE_BLUR_PERCENT = 70

# Coefficient of variation of move times below this is "consistent"
CONSISTENT_MOVE_TIME_CV = 0.5

# Moves faster than this (tenths of a second) count as fast
FAST_MOVE_TIME = 10
MAX_FAST_MOVES = 2

# Evaluations are clamped to this many centipawns when computing losses;
# forced mates count as the ceiling with the sign of the mate.
SCORE_CEILING = 1000

# Evaluation assumed for the starting position
START_EVAL_CP = 15


# =============================================================================
# Input data
# =============================================================================

@dataclass(frozen=True)
class EvalInfo:
    """Engine evaluation of the position after a ply (White's perspective)."""
    cp: Optional[int] = None    # Centipawns, None if mate or unanalysed
    mate: Optional[int] = None  # Mate in N, positive = White mates

    def ceiled(self) -> Optional[int]:
        """Centipawns clamped to +/-SCORE_CEILING, mates mapped to the ceiling."""
        if self.cp is not None:
            return max(-SCORE_CEILING, min(SCORE_CEILING, self.cp))
        if self.mate is not None:
            return -SCORE_CEILING if self.mate < 0 else SCORE_CEILING
        return None


@dataclass(frozen=True)
class PlayerData:
    """Per-player telemetry for a game."""
    user_id: Optional[str] = None  # None for anonymous players
    blur_percent: int = 0          # 0-100
    hold_alert: bool = False


@dataclass(frozen=True)
class AnalysedGame:
    """A finished game together with its computer analysis."""
    game_id: str
    white: PlayerData = field(default_factory=PlayerData)
    black: PlayerData = field(default_factory=PlayerData)
    move_times: tuple[int, ...] = ()
    evals: tuple[EvalInfo, ...] = ()
    winner: Optional[chess.Color] = None  # None for draws and unfinished games
    start_color: chess.Color = chess.WHITE

    def player(self, color: chess.Color) -> PlayerData:
        return self.white if color == chess.WHITE else self.black

    def won_by(self, color: chess.Color) -> Optional[bool]:
        """True if color won, False if it lost, None if nobody won."""
        if self.winner is None:
            return None
        return self.winner == color

    def move_times_for(self, color: chess.Color) -> list[int]:
        return skip_alternate(self.move_times, 0 if color == chess.WHITE else 1)


@dataclass(frozen=True)
class PlayerFlags:
    """The seven behavioral flags for one player in one game."""
    suspicious_error_rate: bool
    always_has_advantage: bool
    high_blur_rate: bool
    moderate_blur_rate: bool
    consistent_move_times: bool
    no_fast_moves: bool
    suspicious_hold_alert: bool

    def as_tuple(self) -> tuple[bool, ...]:
        return (
            self.suspicious_error_rate,
            self.always_has_advantage,
            self.high_blur_rate,
            self.moderate_blur_rate,
            self.consistent_move_times,
            self.no_fast_moves,
            self.suspicious_hold_alert,
        )


# =============================================================================
# Evaluation loss
# =============================================================================

def centipawn_losses(game: AnalysedGame, color: chess.Color) -> list[int]:
    """
    Per-move centipawn loss for one player.

    Evaluations are walked in pairs (before, after) of the player's moves.
    When the player moved first, the starting position's evaluation is
    prepended so that the first pair covers the first move. Pairs with an
    unanalysed position are skipped, as is a trailing unpaired evaluation.

    Args:
        game: Analysed game.
        color: Player to compute losses for.

    Returns:
        List of losses, each >= 0, in move order.
    """
    infos = list(game.evals)
    if color == game.start_color:
        infos.insert(0, EvalInfo(cp=START_EVAL_CP))

    losses = []
    for i in range(0, len(infos) - 1, 2):
        before = infos[i].ceiled()
        after = infos[i + 1].ceiled()
        if before is None or after is None:
            continue
        diff = after - before
        loss = -diff if color == chess.WHITE else diff
        losses.append(max(0, loss))
    return losses


# =============================================================================
# Flags
# =============================================================================

def suspicious_error_rate(game: AnalysedGame, color: chess.Color) -> bool:
    # An unanalysed game has a mean loss of 0 and so counts as suspicious.
    return safe_mean(centipawn_losses(game, color)) < SUSPICIOUS_ERROR_RATE


def _opponent_ahead(info: EvalInfo, color: chess.Color) -> bool:
    if info.cp is not None:
        if color == chess.WHITE:
            return info.cp < -ADVANTAGE_THRESHOLD
        return info.cp > ADVANTAGE_THRESHOLD
    if info.mate is not None:
        if color == chess.WHITE:
            return info.mate < 0
        return info.mate > 0
    return False


def always_has_advantage(game: AnalysedGame, color: chess.Color) -> bool:
    """True unless some analysed position had the opponent clearly ahead."""
    return not any(_opponent_ahead(info, color) for info in game.evals)


def high_blur_rate(game: AnalysedGame, color: chess.Color) -> bool:
    return game.player(color).blur_percent > HIGH_BLUR_PERCENT


def moderate_blur_rate(game: AnalysedGame, color: chess.Color) -> bool:
    return game.player(color).blur_percent > MODERATE_BLUR_PERCENT


def consistent_move_times(game: AnalysedGame, color: chess.Color) -> bool:
    times = game.move_times_for(color)
    if not times:
        return False
    return coefficient_of_variation(times) < CONSISTENT_MOVE_TIME_CV


def no_fast_moves(game: AnalysedGame, color: chess.Color) -> bool:
    fast = sum(1 for t in game.move_times_for(color) if t < FAST_MOVE_TIME)
    return fast <= MAX_FAST_MOVES


def suspicious_hold_alert(game: AnalysedGame, color: chess.Color) -> bool:
    return game.player(color).hold_alert


def extract_flags(game: AnalysedGame, color: chess.Color) -> PlayerFlags:
    """Compute all seven flags for one player."""
    return PlayerFlags(
        suspicious_error_rate=suspicious_error_rate(game, color),
        always_has_advantage=always_has_advantage(game, color),
        high_blur_rate=high_blur_rate(game, color),
        moderate_blur_rate=moderate_blur_rate(game, color),
        consistent_move_times=consistent_move_times(game, color),
        no_fast_moves=no_fast_moves(game, color),
        suspicious_hold_alert=suspicious_hold_alert(game, color),
    )


# =============================================================================
# Summary statistics
# =============================================================================

@dataclass(frozen=True)
class SummaryStats:
    """Integer summaries stored alongside an assessment (truncated toward zero)."""
    sf_avg: int  # Mean centipawn loss
    sf_sd: int   # Deviation of centipawn loss
    mt_avg: int  # Mean move time
    mt_sd: int   # Deviation of move time


def summary_stats(game: AnalysedGame, color: chess.Color) -> SummaryStats:
    losses = centipawn_losses(game, color)
    times = game.move_times_for(color)
    return SummaryStats(
        sf_avg=int(safe_mean(losses)),
        sf_sd=int(safe_deviation(losses)),
        mt_avg=int(safe_mean(times)),
        mt_sd=int(safe_deviation(times)),
    )
