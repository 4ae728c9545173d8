from typing import NamedTuple

from heliclockter import datetime_utc

from livebracket.logic.scheduling.shared import create_match, pair_consecutive, pair_folded
from livebracket.models.db.tournament import (
    BracketStage,
    Match,
    Player,
    TournamentData,
)


class DropInfo(NamedTuple):
    drop_round: int
    match_number: int
    seed: int


def get_number_of_rounds_single_elimination(player_count: int) -> int:
    if player_count < 2:
        return 0
    return (player_count - 1).bit_length()


def create_initial_elimination_matches(data: TournamentData, created: datetime_utc) -> list[Match]:
    players = sorted(data.winners_players, key=lambda player: player.seed)
    if len(players) < 2:
        return []

    pairs, _ = pair_folded(players)
    return [
        create_match(data, player1, player2, BracketStage.WINNERS, data.winners_round, created)
        for player1, player2 in pairs
    ]


def create_winners_matches(data: TournamentData, created: datetime_utc) -> list[Match]:
    """
    Pair the waiting winners pool by seed for the current winners round.

    An odd player out stays in the winners pool untouched and is paired on the next call.
    """
    players = sorted(data.winners_players, key=lambda player: player.seed)
    pairs, _ = pair_consecutive(players)
    return [
        create_match(data, player1, player2, BracketStage.WINNERS, data.winners_round, created)
        for player1, player2 in pairs
    ]


def get_drop_info(data: TournamentData, player: Player) -> DropInfo:
    drop_round, match_number = 1, 0
    for match in data.completed_matches:
        if match.bracket == BracketStage.WINNERS and match.winner is not None:
            if match.loser() == player.name:
                drop_round, match_number = match.round, match.match_number
    return DropInfo(drop_round, match_number, player.seed)


def order_by_drop_order(data: TournamentData, players: list[Player]) -> list[Player]:
    """Earlier winners-bracket drops first, then by the dropping match number, then by seed."""
    return sorted(players, key=lambda player: get_drop_info(data, player))


def create_losers_matches(data: TournamentData, created: datetime_utc) -> list[Match]:
    players = order_by_drop_order(data, data.losers_players)
    pairs, _ = pair_consecutive(players)
    return [
        create_match(data, player1, player2, BracketStage.LOSERS, data.losers_round, created)
        for player1, player2 in pairs
    ]


def create_final_match(
    data: TournamentData, player1: Player, player2: Player, round_: int, created: datetime_utc
) -> Match:
    return create_match(data, player1, player2, BracketStage.FINAL, round_, created)


def has_losers_matches(data: TournamentData) -> bool:
    return any(
        match.bracket == BracketStage.LOSERS
        for match in [*data.completed_matches, *data.current_matches]
    )
