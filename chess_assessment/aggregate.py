"""
Account-level recommendation from a history of per-game assessments.

Counts how many of a user's games ranked as cheating (5) or likely
cheating (4), relates those counts to the size of the history, lowers the
bar for users linked to other accounts, and decides one of four account
actions.

Before acting automatically, the history is split three ways (blurs,
move-time variation, hold alerts) and the average centipawn loss of the
suspicious side of each split is compared to the other side. A large
history whose suspicious games are not noticeably more accurate than its
other games is only reported to moderators, never marked or banned.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property, total_ordering
from typing import Callable, Optional

from .assessment import PlayerAssessment
from .ranking import CHEATING, LIKELY_CHEATING
from .stats import count_matching, safe_mean


# =============================================================================
# Thresholds
# =============================================================================

# Absolute game counts
MARK_MIN_CHEATING = 2
MARK_MIN_LIKELY = 4
REPORT_MIN_CHEATING = 1
REPORT_MIN_LIKELY = 2

# Rates over the whole history
MARK_CHEATING_RATE = 0.05
MARK_LIKELY_RATE = 0.10
REPORT_CHEATING_RATE = 0.02
REPORT_LIKELY_RATE = 0.05

# Rate reduction for users with related accounts
RELATION_MODIFIER = 0.02

# Centipawn-loss gap that makes a split significant
SIGNIFICANT_DIFFERENCE = 10

# Below this many games the splits are not trusted to block action
MIN_GAMES_FOR_SPLITS = 50

BLUR_SPLIT_PERCENT = 70
MOVE_TIME_VARIATION_SPLIT = 0.5


# =============================================================================
# Enums
# =============================================================================

@total_ordering
class AccountAction(Enum):
    """Recommended action for an account, ordered by severity."""
    NOTHING = (1, "Not suspicious")
    REPORT = (2, "Report to mods")
    ENGINE = (3, "Mark as engine")
    ENGINE_AND_BAN = (4, "Mark and IP ban")

    def __init__(self, severity: int, description: str):
        self.severity = severity
        self.description = description

    @property
    def color_class(self) -> str:
        return str(self.severity)

    def __lt__(self, other):
        if not isinstance(other, AccountAction):
            return NotImplemented
        return self.severity < other.severity

    def __str__(self) -> str:
        return self.description


class Significance(Enum):
    """Outcome of comparing the two sides of a behavioral split."""
    UNKNOWN = "unknown"                  # One side has no games
    SIGNIFICANT = "significant"
    NOT_SIGNIFICANT = "not_significant"


def significant_difference(
    suspicious_avg: Optional[int],
    other_avg: Optional[int],
) -> Significance:
    """
    Compare average centipawn loss across a split.

    The split is significant when the suspicious side loses more than
    SIGNIFICANT_DIFFERENCE centipawns less per move than the other side.
    """
    if suspicious_avg is None or other_avg is None:
        return Significance.UNKNOWN
    if other_avg - suspicious_avg > SIGNIFICANT_DIFFERENCE:
        return Significance.SIGNIFICANT
    return Significance.NOT_SIGNIFICANT


def move_time_variation(assessment: PlayerAssessment) -> float:
    """
    Move-time coefficient of variation.

    A zero mean gives inf when the deviation is positive (high variance)
    and nan when both are zero (neither split).
    """
    if assessment.mt_avg == 0:
        return math.inf if assessment.mt_sd > 0 else math.nan
    return assessment.mt_sd / assessment.mt_avg


# =============================================================================
# Aggregate
# =============================================================================

@dataclass(frozen=True)
class AggregateAssessment:
    """
    All assessments of one user plus the user's relation cohort.

    Attributes:
        player_assessments: The user's per-game assessments.
        related_users: Accounts linked to the user (duplicates allowed).
        related_cheaters: The related accounts already marked as cheaters.
    """
    player_assessments: tuple[PlayerAssessment, ...]
    related_users: tuple[str, ...] = field(default=())
    related_cheaters: tuple[str, ...] = field(default=())

    def __post_init__(self):
        # Accept any iterable, store tuples
        object.__setattr__(self, "player_assessments", tuple(self.player_assessments))
        object.__setattr__(self, "related_users", tuple(self.related_users))
        object.__setattr__(self, "related_cheaters", tuple(self.related_cheaters))

    # -------------------------------------------------------------------------
    # Counts
    # -------------------------------------------------------------------------

    @cached_property
    def related_users_count(self) -> int:
        return len(set(self.related_users))

    @cached_property
    def related_cheaters_count(self) -> int:
        return len(set(self.related_cheaters))

    @cached_property
    def assessments_count(self) -> int:
        """History size, floored to 1 so rates never divide by zero."""
        return len(self.player_assessments) or 1

    @cached_property
    def relation_modifier(self) -> float:
        return RELATION_MODIFIER if self.related_users_count >= 1 else 0

    def count_rank(self, rank: int) -> int:
        return count_matching(self.player_assessments, lambda a: a.rank == rank)

    @cached_property
    def cheating_sum(self) -> int:
        return self.count_rank(CHEATING)

    @cached_property
    def likely_cheating_sum(self) -> int:
        return self.count_rank(LIKELY_CHEATING)

    # -------------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------------

    def _meets(
        self,
        min_cheating: int,
        min_likely: int,
        cheating_rate: float,
        likely_rate: float,
    ) -> bool:
        cheating = self.cheating_sum
        likely = cheating + self.likely_cheating_sum
        enough_games = cheating >= min_cheating or likely >= min_likely
        high_rate = (
            cheating / self.assessments_count >= cheating_rate - self.relation_modifier
            or likely / self.assessments_count >= likely_rate - self.relation_modifier
        )
        return enough_games and high_rate

    @property
    def markable(self) -> bool:
        return self._meets(MARK_MIN_CHEATING, MARK_MIN_LIKELY, MARK_CHEATING_RATE, MARK_LIKELY_RATE)

    @property
    def reportable(self) -> bool:
        return self._meets(REPORT_MIN_CHEATING, REPORT_MIN_LIKELY, REPORT_CHEATING_RATE, REPORT_LIKELY_RATE)

    @property
    def bannable(self) -> bool:
        """Every related account is already a confirmed cheater."""
        return self.related_users_count >= 1 and self.related_cheaters_count == self.related_users_count

    # -------------------------------------------------------------------------
    # Behavioral splits
    # -------------------------------------------------------------------------

    def sf_avg_given(self, predicate: Callable[[PlayerAssessment], bool]) -> Optional[int]:
        """Average sf_avg of the assessments matching predicate, None if none match."""
        selected = [a.sf_avg for a in self.player_assessments if predicate(a)]
        if not selected:
            return None
        return int(safe_mean(selected))

    @property
    def sf_avg_blurs(self) -> Optional[int]:
        return self.sf_avg_given(lambda a: a.blurs > BLUR_SPLIT_PERCENT)

    @property
    def sf_avg_no_blurs(self) -> Optional[int]:
        return self.sf_avg_given(lambda a: a.blurs <= BLUR_SPLIT_PERCENT)

    @property
    def sf_avg_low_var(self) -> Optional[int]:
        return self.sf_avg_given(lambda a: move_time_variation(a) < MOVE_TIME_VARIATION_SPLIT)

    @property
    def sf_avg_high_var(self) -> Optional[int]:
        return self.sf_avg_given(lambda a: move_time_variation(a) >= MOVE_TIME_VARIATION_SPLIT)

    @property
    def sf_avg_hold(self) -> Optional[int]:
        return self.sf_avg_given(lambda a: a.hold)

    @property
    def sf_avg_no_hold(self) -> Optional[int]:
        return self.sf_avg_given(lambda a: not a.hold)

    @property
    def split_differences(self) -> dict[str, Significance]:
        return {
            "blurs": significant_difference(self.sf_avg_blurs, self.sf_avg_no_blurs),
            "move_time_variation": significant_difference(self.sf_avg_low_var, self.sf_avg_high_var),
            "hold": significant_difference(self.sf_avg_hold, self.sf_avg_no_hold),
        }

    @property
    def actionable(self) -> bool:
        """
        Whether automatic marking is allowed.

        True when no split could be compared, when at least one split is
        significant, or when the history is too short to trust the splits.
        """
        difs = list(self.split_differences.values())
        return (
            all(d is Significance.UNKNOWN for d in difs)
            or any(d is Significance.SIGNIFICANT for d in difs)
            or self.assessments_count < MIN_GAMES_FOR_SPLITS
        )

    # -------------------------------------------------------------------------
    # Decision
    # -------------------------------------------------------------------------

    @property
    def action(self) -> AccountAction:
        markable = self.markable
        reportable = self.reportable

        if self.actionable:
            if markable and self.bannable:
                return AccountAction.ENGINE_AND_BAN
            if markable:
                return AccountAction.ENGINE
            if reportable:
                return AccountAction.REPORT
            return AccountAction.NOTHING

        if markable or reportable:
            return AccountAction.REPORT
        return AccountAction.NOTHING
