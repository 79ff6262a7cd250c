"""
Chess cheat assessment.

Ranks a single player's performance in a single game from behavioral
signals, and turns a user's history of ranks plus related-account signals
into a recommended moderation action.
"""

from .stats import (
    mean,
    variance,
    deviation,
    coefficient_of_variation,
    safe_mean,
    safe_deviation,
    erf,
    normal_cdf,
    confidence_interval,
    interval_to_variance4,
    skip_alternate,
    count_matching,
)
from .flags import (
    EvalInfo,
    PlayerData,
    AnalysedGame,
    PlayerFlags,
    SummaryStats,
    centipawn_losses,
    extract_flags,
    summary_stats,
)
from .ranking import (
    RankRule,
    RANK_RULES,
    RANKS,
    matching_rule,
    table_rank,
    rank_cheating,
)
from .assessment import (
    PlayerAssessment,
    GameAssessments,
    assessment_id,
    assess_player,
    assess_game,
)
from .aggregate import (
    AccountAction,
    Significance,
    AggregateAssessment,
    significant_difference,
)
from .display import (
    assessment_label,
    emoticon,
    stockfish_sig,
    move_time_sig,
    blur_sig,
    hold_sig,
    game_url,
    report_text,
    assessments_to_dataframe,
)
from .games import (
    TimeControl,
    parse_pgn_file,
    parse_pgn_string,
    extract_move_times,
    extract_evals,
    analysed_game_from_pgn,
)
