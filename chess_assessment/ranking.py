"""
Per-game cheating rank from behavioral flags.

The rank is an integer from 1 to 5:
    1 = Not cheating
    2 = Unlikely cheating
    3 = Unclear
    4 = Likely cheating
    5 = Cheating

Flags are matched against an ordered decision table; the first matching
rule wins and anything unmatched ranks 1. A player who did not win the
game is capped at 3.
"""

from dataclasses import dataclass
from typing import Optional

from .flags import PlayerFlags


NOT_CHEATING = 1
UNLIKELY_CHEATING = 2
UNCLEAR = 3
LIKELY_CHEATING = 4
CHEATING = 5

RANKS = (NOT_CHEATING, UNLIKELY_CHEATING, UNCLEAR, LIKELY_CHEATING, CHEATING)

DEFAULT_RANK = NOT_CHEATING

# Highest rank available to a player who lost or drew
NON_WIN_RANK_CAP = UNCLEAR

# Pattern entries: True / False must match exactly, None is "don't care".
_ = None


@dataclass(frozen=True)
class RankRule:
    """One row of the decision table."""
    # (error rate, advantage, high blur, moderate blur, consistent times, no fast moves, hold)
    pattern: tuple[Optional[bool], ...]
    rank: int
    reason: str

    def matches(self, flags: PlayerFlags) -> bool:
        return all(
            expected is None or expected == actual
            for expected, actual in zip(self.pattern, flags.as_tuple())
        )


RANK_RULES: tuple[RankRule, ...] = (
    #         SF1    SF2    BLR1   BLR2   MTs1   MTs2   Hold
    RankRule((True,  True,  True,  True,  True,  True,  True),  CHEATING, "all flags raised"),
    RankRule((True,  _,     _,     _,     _,     True,  True),  CHEATING, "high accuracy, no fast moves, hold alert"),
    RankRule((_,     True,  _,     _,     _,     True,  True),  CHEATING, "always has advantage, no fast moves, hold alert"),
    RankRule((True,  _,     True,  _,     _,     True,  _),     CHEATING, "high accuracy, high blurs, no fast moves"),

    RankRule((True,  _,     _,     _,     True,  True,  _),     LIKELY_CHEATING, "high accuracy, consistent move times, no fast moves"),
    RankRule((True,  _,     _,     True,  _,     True,  _),     LIKELY_CHEATING, "high accuracy, moderate blurs, no fast moves"),
    RankRule((_,     True,  _,     True,  True,  _,     _),     LIKELY_CHEATING, "always has advantage, moderate blurs, consistent move times"),
    RankRule((_,     True,  _,     _,     _,     _,     True),  LIKELY_CHEATING, "always has advantage, hold alert"),
    RankRule((_,     True,  True,  _,     _,     _,     _),     LIKELY_CHEATING, "always has advantage, high blurs"),

    RankRule((True,  _,     _,     False, False, True,  _),     UNCLEAR, "high accuracy, no fast moves, no blurs or flat move times"),

    RankRule((True,  _,     _,     _,     _,     False, _),     UNLIKELY_CHEATING, "high accuracy, but has fast moves"),

    RankRule((False, False, _,     _,     _,     _,     _),     NOT_CHEATING, "low accuracy, does not hold advantage"),
)


def matching_rule(flags: PlayerFlags) -> Optional[RankRule]:
    """First rule in the table matching the flags, or None."""
    for rule in RANK_RULES:
        if rule.matches(flags):
            return rule
    return None


def table_rank(flags: PlayerFlags) -> int:
    """Rank from the decision table alone, ignoring the game outcome."""
    rule = matching_rule(flags)
    return rule.rank if rule is not None else DEFAULT_RANK


def rank_cheating(flags: PlayerFlags, won: Optional[bool]) -> int:
    """
    Cheating rank for one player in one game.

    Args:
        flags: The player's behavioral flags.
        won: True if the player won; False or None (loss, draw) caps the rank.

    Returns:
        Rank in 1..5.
    """
    cap = CHEATING if won else NON_WIN_RANK_CAP
    return min(table_rank(flags), cap)
