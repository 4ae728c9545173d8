from heliclockter import datetime_utc

from livebracket.logic.scheduling.elimination import (
    create_final_match,
    create_losers_matches,
    create_winners_matches,
    has_losers_matches,
)
from livebracket.models.db.tournament import (
    BracketStage,
    Match,
    Partition,
    Player,
    TournamentData,
    TournamentFormat,
)
from livebracket.utils.logging import logger


def crown_champion(data: TournamentData, champion: Player) -> None:
    data.winner = champion.name
    champion.partition = Partition.WINNERS


def eliminate(player: Player) -> None:
    player.eliminated = True
    player.partition = Partition.ELIMINATED


def resolve_final_match(
    data: TournamentData, match: Match, winner: Player, loser: Player, created: datetime_utc
) -> None:
    """
    Apply a double elimination final result; the winner's `wins` is already counted.

    A winner without prior losses takes the tournament. When the losers-bracket finalist beats
    the undefeated player, both now have one loss and a second, always terminal, final is
    scheduled between them.
    """
    prior_winner_losses = winner.losses
    prior_loser_losses = loser.losses
    loser.losses += 1

    logger.info(
        f"Final {match.match_number}: {winner.name} ({prior_winner_losses} losses) defeats "
        f"{loser.name} ({prior_loser_losses} losses)"
    )

    if (
        prior_winner_losses == 1
        and prior_loser_losses == 0
        and not data.true_final_played
    ):
        logger.info("Losers bracket champion won the first final, scheduling true final")
        data.require_true_final = True
        data.true_final_played = True
        create_final_match(data, winner, loser, 2, created)
        return

    crown_champion(data, winner)
    eliminate(loser)


def advance_to_finals(data: TournamentData, created: datetime_utc) -> None:
    data.bracket_stage = BracketStage.FINAL
    winners = sorted(data.winners_players, key=lambda player: player.seed)
    losers = sorted(data.losers_players, key=lambda player: player.seed)

    if len(losers) < 1:
        logger.info(f"Only {winners[0].name} is left, declaring winner")
        crown_champion(data, winners[0])
        return

    # A final replayed after a drawn true final keeps the true final round number.
    final_round = 2 if data.true_final_played else 1
    create_final_match(data, winners[0], losers[0], final_round, created)


def _advance_single_elimination(data: TournamentData, created: datetime_utc) -> None:
    winners = data.winners_players
    if len(winners) == 1:
        crown_champion(data, winners[0])
        logger.info(f"Single elimination tournament complete, winner: {winners[0].name}")
        return

    if len(winners) >= 2:
        data.winners_round += 1
        create_winners_matches(data, created)


def _advance_double_elimination(data: TournamentData, created: datetime_utc) -> None:
    winners = data.winners_players
    losers = data.losers_players

    if len(winners) == 1 and len(losers) <= 1:
        advance_to_finals(data, created)
    elif len(winners) >= 2:
        data.winners_round += 1
        data.bracket_stage = BracketStage.WINNERS
        create_winners_matches(data, created)
    elif len(losers) >= 2:
        if has_losers_matches(data):
            data.losers_round += 1
        data.bracket_stage = BracketStage.LOSERS
        create_losers_matches(data, created)
    elif len(winners) + len(losers) == 1:
        crown_champion(data, [*winners, *losers][0])


def advance_to_next_round(data: TournamentData, created: datetime_utc) -> None:
    if len(data.current_matches) > 0:
        logger.info(
            f"Not advancing {data.title}, {len(data.current_matches)} matches are still open"
        )
        return

    logger.info(
        f"Advancing {data.format}: winners={len(data.winners_players)}, "
        f"losers={len(data.losers_players)}"
    )
    match data.format:
        case TournamentFormat.SINGLE_ELIMINATION:
            _advance_single_elimination(data, created)
        case TournamentFormat.DOUBLE_ELIMINATION:
            _advance_double_elimination(data, created)
        case TournamentFormat.ROUND_ROBIN:
            # Every pairing exists from the start, there is nothing to generate.
            pass


def is_bracket_exhausted(data: TournamentData) -> bool:
    if data.format == TournamentFormat.ROUND_ROBIN:
        return len(data.current_matches) < 1
    return data.winner is not None
