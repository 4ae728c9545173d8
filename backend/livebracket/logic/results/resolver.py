import random
from typing import NamedTuple

from heliclockter import datetime_utc

from livebracket.logic.progression import crown_champion, eliminate, resolve_final_match
from livebracket.logic.results.draws import DrawHandling
from livebracket.models.db.tournament import (
    BracketStage,
    Match,
    Partition,
    Player,
    TournamentData,
    TournamentFormat,
)
from livebracket.utils.logging import logger
from livebracket.utils.types import assert_never, assert_some


class DrawOutcome(NamedTuple):
    applied: bool
    completed: bool
    handling: DrawHandling
    winner: str | None = None


def _players_of(data: TournamentData, match: Match) -> tuple[Player, Player]:
    return assert_some(data.get_player(match.player1)), assert_some(data.get_player(match.player2))


def apply_decisive_result(
    data: TournamentData, match: Match, winner_name: str, created: datetime_utc
) -> None:
    winner = assert_some(data.get_player(winner_name))
    loser = assert_some(data.get_player(match.other_player(winner_name)))

    match.winner = winner.name
    match.is_draw = False
    winner.wins += 1

    match data.format:
        case TournamentFormat.SINGLE_ELIMINATION:
            loser.losses += 1
            eliminate(loser)
            winner.partition = Partition.WINNERS

            other_open_matches = [
                current for current in data.current_matches if current.id != match.id
            ]
            if len(data.winners_players) == 1 and len(other_open_matches) < 1:
                crown_champion(data, winner)
                logger.info(f"Single elimination champion: {winner.name}")

        case TournamentFormat.ROUND_ROBIN:
            loser.losses += 1

        case TournamentFormat.DOUBLE_ELIMINATION:
            if match.bracket == BracketStage.FINAL:
                resolve_final_match(data, match, winner, loser, created)
                return

            winner.partition = (
                Partition.LOSERS if match.bracket == BracketStage.LOSERS else Partition.WINNERS
            )
            loser.losses += 1
            if loser.losses >= 2 or match.bracket == BracketStage.LOSERS:
                eliminate(loser)
            else:
                loser.partition = Partition.LOSERS


def _count_draw(data: TournamentData, match: Match) -> None:
    for player in _players_of(data, match):
        player.draws += 1
    match.winner = None
    match.is_draw = True


def _draws_allowed(data: TournamentData) -> bool:
    if data.format != TournamentFormat.ROUND_ROBIN:
        return True
    if not data.settings.round_robin_settings.allow_draws:
        logger.warning("Draw attempted but draws are not enabled for this round-robin tournament")
        return False
    return True


def _replay_draw(data: TournamentData, match: Match) -> DrawOutcome:
    if not _draws_allowed(data):
        return DrawOutcome(applied=False, completed=False, handling=DrawHandling.REPLAY)

    _count_draw(data, match)
    logger.info(f"Draw result, match {match.match_number} will be replayed")
    return DrawOutcome(applied=True, completed=False, handling=DrawHandling.REPLAY)


def _both_advance_draw(data: TournamentData, match: Match) -> DrawOutcome:
    if not _draws_allowed(data):
        return DrawOutcome(applied=False, completed=False, handling=DrawHandling.BOTH_ADVANCE)

    _count_draw(data, match)
    player1, player2 = _players_of(data, match)

    match match.bracket:
        case BracketStage.WINNERS:
            player1.partition = Partition.WINNERS
            player2.partition = Partition.WINNERS
        case BracketStage.LOSERS:
            player1.partition = Partition.LOSERS
            player2.partition = Partition.LOSERS
        case BracketStage.FINAL:
            logger.warning("Draw in final match with both-advance, creating rematch")
            player1.partition = Partition.WINNERS
            player2.partition = Partition.LOSERS
            data.bracket_stage = BracketStage.FINAL
        case BracketStage.ROUND_ROBIN:
            pass

    logger.info(f"Draw result, both players advance: {player1.name}, {player2.name}")
    return DrawOutcome(applied=True, completed=True, handling=DrawHandling.BOTH_ADVANCE)


def _random_draw(match: Match, rng: random.Random) -> DrawOutcome:
    winner = match.player1 if rng.random() < 0.5 else match.player2
    match.resolved_randomly = True
    match.is_draw = False
    logger.info(f"Draw result, random winner selected: {winner}")
    return DrawOutcome(applied=True, completed=True, handling=DrawHandling.RANDOM, winner=winner)


def resolve_draw(
    data: TournamentData, match: Match, handling: DrawHandling, rng: random.Random
) -> DrawOutcome:
    """
    Apply a drawn match under the given policy.

    A rejected draw leaves `data` untouched. A random draw only picks the winner, the caller
    then applies it as a regular decisive result.
    """
    match handling:
        case DrawHandling.REPLAY:
            return _replay_draw(data, match)
        case DrawHandling.BOTH_ADVANCE:
            if data.format == TournamentFormat.SINGLE_ELIMINATION:
                logger.warning("Both-advance is not suitable for single elimination, replaying")
                return _replay_draw(data, match)
            return _both_advance_draw(data, match)
        case DrawHandling.RANDOM:
            return _random_draw(match, rng)
        case _:
            assert_never(handling)


DRAW_RESULT = "draw"


def parse_match_result(result: int | str) -> int | str | None:
    """Normalize a submitted result to player number 1 or 2, or `DRAW_RESULT`."""
    if isinstance(result, str):
        normalized = result.strip().lower()
        if normalized == DRAW_RESULT:
            return DRAW_RESULT
        if normalized in ("1", "2"):
            return int(normalized)
        return None
    if isinstance(result, bool) or not isinstance(result, int):
        return None
    return result if result in (1, 2) else None
