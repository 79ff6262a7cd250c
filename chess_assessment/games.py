"""
Build analysed games from annotated PGN.

Lichess PGN exports carry engine evaluations as [%eval ...] and clock
readings as [%clk ...] comments. This module turns such a game into the
AnalysedGame consumed by the flag extractor. Blur and hold telemetry are
not part of PGN and must be supplied separately.
"""

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, TextIO

import chess
import chess.pgn

from .flags import AnalysedGame, EvalInfo, PlayerData


def read_games(handle: TextIO) -> Iterator[chess.pgn.Game]:
    """
    Yield the games in a PGN stream, skipping any python-chess could not parse.

    A game with illegal or unparsable moves has a truncated mainline, so
    its move times and evaluations would no longer line up with the plies.
    """
    while True:
        game = chess.pgn.read_game(handle)
        if game is None:
            break
        if game.errors:
            print(f"  Skipping {game_id_from_headers(game.headers) or 'game'}: {game.errors[0]}")
            continue
        yield game


def parse_pgn_file(filepath: str | Path) -> Iterator[chess.pgn.Game]:
    """Yield the well-formed games of a PGN file."""
    with open(Path(filepath)) as pgn_file:
        yield from read_games(pgn_file)


def parse_pgn_string(pgn_text: str) -> Iterator[chess.pgn.Game]:
    """Yield the well-formed games of PGN text."""
    yield from read_games(io.StringIO(pgn_text))


@dataclass
class TimeControl:
    """Parsed time control information."""
    base_seconds: int  # Initial time in seconds
    increment_seconds: int  # Time added per move

    @classmethod
    def parse(cls, tc_string: str) -> "TimeControl":
        """
        Parse time control string (e.g., "600", "180+2", "300+5").

        Unlimited ("-") and unknown ("?") time controls parse as 0+0.

        Raises:
            ValueError: If the string is not a time control.
        """
        if not tc_string or tc_string in ("-", "?"):
            return cls(0, 0)

        try:
            if "+" in tc_string:
                base, increment = tc_string.split("+", 1)
                return cls(int(base), int(increment))
            return cls(int(tc_string), 0)
        except ValueError:
            raise ValueError(f"Invalid time control: {tc_string!r}") from None


def extract_move_times(game: chess.pgn.Game) -> list[int]:
    """
    Time spent on every ply, in tenths of a second.

    Time spent is the drop in the mover's clock plus the increment. The
    first move of each side is measured from the base time. Plies without
    a clock reading count as 0.

    Returns:
        Interleaved move times, or an empty list if the game has no clock
        annotations at all.
    """
    time_control = TimeControl.parse(game.headers.get("TimeControl", ""))
    nodes = list(game.mainline())
    if not any(node.clock() is not None for node in nodes):
        return []

    previous: dict[int, Optional[float]] = {0: None, 1: None}
    times = []
    for ply, node in enumerate(nodes):
        side = ply % 2
        clock = node.clock()
        if clock is None:
            times.append(0)
            continue

        prev_clock = previous[side]
        if prev_clock is None:
            prev_clock = time_control.base_seconds or clock
        spent = prev_clock - clock + time_control.increment_seconds
        times.append(max(0, round(spent * 10)))
        previous[side] = clock

    return times


def extract_evals(game: chess.pgn.Game) -> list[EvalInfo]:
    """Engine evaluation after every ply, White's perspective."""
    evals = []
    for node in game.mainline():
        pov_score = node.eval()
        if pov_score is None:
            evals.append(EvalInfo())
            continue
        score = pov_score.white()
        evals.append(EvalInfo(cp=score.score(), mate=score.mate()))
    return evals


def winner_from_result(result: str) -> Optional[chess.Color]:
    """Winner from a PGN Result header, None for draws and unfinished games."""
    if result == "1-0":
        return chess.WHITE
    if result == "0-1":
        return chess.BLACK
    return None


def game_id_from_headers(headers: chess.pgn.Headers) -> str:
    """
    Game identifier from PGN headers.

    Uses the GameId header when present, else the last path segment of
    the Site URL (e.g. "https://lichess.org/abcd1234" -> "abcd1234").
    """
    if headers.get("GameId"):
        return headers["GameId"]
    site = headers.get("Site", "")
    return site.rstrip("/").rsplit("/", 1)[-1]


def analysed_game_from_pgn(
    game: chess.pgn.Game,
    blurs: Optional[dict[chess.Color, int]] = None,
    holds: Optional[dict[chess.Color, bool]] = None,
) -> AnalysedGame:
    """
    Convert an annotated PGN game to an AnalysedGame.

    Args:
        game: Parsed PGN game with [%eval] and [%clk] annotations.
        blurs: Blur percentage per color, if known.
        holds: Hold alert per color, if known.

    Returns:
        AnalysedGame ready for assessment.
    """
    blurs = blurs or {}
    holds = holds or {}
    headers = game.headers

    def player(color: chess.Color, header: str) -> PlayerData:
        name = headers.get(header, "")
        return PlayerData(
            user_id=name.lower() if name and name != "?" else None,
            blur_percent=blurs.get(color, 0),
            hold_alert=holds.get(color, False),
        )

    return AnalysedGame(
        game_id=game_id_from_headers(headers),
        white=player(chess.WHITE, "White"),
        black=player(chess.BLACK, "Black"),
        move_times=tuple(extract_move_times(game)),
        evals=tuple(extract_evals(game)),
        winner=winner_from_result(headers.get("Result", "*")),
        start_color=game.board().turn,
    )
