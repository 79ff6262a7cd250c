#!/usr/bin/env python3
"""
Player Assessment CLI Tool

Assesses every game a player played in an annotated PGN file (Lichess
export with [%eval] and [%clk] comments), then combines them with any
stored history into a recommended account action.

Usage:
    python scripts/assess_player.py USERNAME PGN_FILE [options]

Example:
    python scripts/assess_player.py somebody games.pgn \\
        --history data/somebody.json --related-user alt1 --related-cheater alt1

Output:
    Per-game ranks, aggregate counts, the account action and the
    moderator autoreport. Optionally:
      - --save-json PATH: all assessments as JSON records
      - --save-csv PATH: all assessments as a CSV table
"""

import argparse
import json
import sys
from pathlib import Path

import chess

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from chess_assessment import (
    AggregateAssessment,
    PlayerAssessment,
    analysed_game_from_pgn,
    assess_player,
    assessment_label,
    assessments_to_dataframe,
    parse_pgn_file,
    report_text,
)


def player_color(game, username: str):
    """Color the user played in a PGN game, or None if they did not play."""
    if game.headers.get("White", "").lower() == username:
        return chess.WHITE
    if game.headers.get("Black", "").lower() == username:
        return chess.BLACK
    return None


def load_history(path: Path) -> list[PlayerAssessment]:
    """Load previously saved assessments."""
    if not path.exists():
        raise FileNotFoundError(f"History file not found: {path}")
    with open(path) as f:
        return [PlayerAssessment.from_dict(record) for record in json.load(f)]


def assess_pgn(username: str, pgn_path: Path) -> list[PlayerAssessment]:
    """Assess the user's side of every game in the PGN file."""
    if not pgn_path.exists():
        raise FileNotFoundError(f"PGN file not found: {pgn_path}")

    assessments = []
    for game in parse_pgn_file(pgn_path):
        color = player_color(game, username)
        if color is None:
            continue
        assessment = assess_player(analysed_game_from_pgn(game), color)
        assessments.append(assessment)
        print(
            f"  {assessment.id}: {assessment.rank} ({assessment_label(assessment.rank)}) "
            f"acpl={assessment.sf_avg} mt={assessment.mt_avg}+/-{assessment.mt_sd}"
        )
    return assessments


def merge(history: list[PlayerAssessment], new: list[PlayerAssessment]) -> list[PlayerAssessment]:
    """Combine histories, newer records replacing older ones with the same id."""
    by_id = {a.id: a for a in history}
    by_id.update((a.id, a) for a in new)
    return list(by_id.values())


def main():
    parser = argparse.ArgumentParser(description="Assess a player's games for engine use")
    parser.add_argument("username", help="Player username")
    parser.add_argument("pgn_file", type=Path, help="Annotated PGN file")
    parser.add_argument("--history", type=Path, help="JSON file of previous assessments")
    parser.add_argument("--related-user", action="append", default=[],
                        help="Account linked to the player (repeatable)")
    parser.add_argument("--related-cheater", action="append", default=[],
                        help="Linked account already marked as a cheater (repeatable)")
    parser.add_argument("--max-games", type=int, default=None,
                        help="Games listed in the autoreport")
    parser.add_argument("--save-json", type=Path, help="Write all assessments to this JSON file")
    parser.add_argument("--save-csv", type=Path, help="Write all assessments to this CSV file")
    args = parser.parse_args()

    username = args.username.lower()

    try:
        history = load_history(args.history) if args.history else []
        print(f"Assessing {username} in {args.pgn_file}...")
        new = assess_pgn(username, args.pgn_file)
        aggregate = AggregateAssessment(
            merge(history, new),
            related_users=args.related_user,
            related_cheaters=args.related_cheater,
        )
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"\nAssessed {len(new)} new games ({len(history)} from history)")
    print(f"Cheating games: {aggregate.cheating_sum}")
    print(f"Likely cheating games: {aggregate.likely_cheating_sum}")
    print(f"Related accounts: {aggregate.related_users_count} ({aggregate.related_cheaters_count} cheaters)")
    for split, significance in aggregate.split_differences.items():
        print(f"  {split}: {significance.value}")
    print(f"Action: {aggregate.action} [{aggregate.action.color_class}]")
    print()
    print(report_text(aggregate, max_games=args.max_games))

    if args.save_json:
        args.save_json.parent.mkdir(parents=True, exist_ok=True)
        with open(args.save_json, "w") as f:
            json.dump([a.to_dict() for a in aggregate.player_assessments], f, indent=2)
        print(f"\nSaved: {args.save_json}")

    if args.save_csv:
        args.save_csv.parent.mkdir(parents=True, exist_ok=True)
        assessments_to_dataframe(aggregate.player_assessments).to_csv(args.save_csv, index=False)
        print(f"Saved: {args.save_csv}")


if __name__ == "__main__":
    main()
