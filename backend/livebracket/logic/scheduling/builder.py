import random

from heliclockter import datetime_utc

from livebracket.logic.scheduling.elimination import create_initial_elimination_matches
from livebracket.logic.scheduling.round_robin import create_round_robin_matches
from livebracket.models.db.tournament import (
    BracketStage,
    Match,
    Partition,
    Player,
    TournamentData,
    TournamentFormat,
)


def build_initial_matches(data: TournamentData, created: datetime_utc) -> list[Match]:
    match data.format:
        case TournamentFormat.ROUND_ROBIN:
            return create_round_robin_matches(data, created)
        case TournamentFormat.SINGLE_ELIMINATION | TournamentFormat.DOUBLE_ELIMINATION:
            return create_initial_elimination_matches(data, created)


def seed_players(
    player_names: list[str], format_: TournamentFormat, rng: random.Random
) -> list[Player]:
    shuffled = list(player_names)
    rng.shuffle(shuffled)
    is_round_robin = format_ == TournamentFormat.ROUND_ROBIN
    partition = Partition.ROUND_ROBIN if is_round_robin else Partition.WINNERS
    return [
        Player(name=name, seed=index + 1, partition=partition)
        for index, name in enumerate(shuffled)
    ]


def rebuild_tournament_data(
    data: TournamentData, player_names: list[str], rng: random.Random, created: datetime_utc
) -> TournamentData:
    """
    Start the bracket over from the given roster.

    Everything except title, settings and styles is thrown away: players are reshuffled into
    fresh seeds and the first round is generated for the configured format.
    """
    format_ = data.format
    rebuilt = TournamentData(
        title=data.title,
        settings=data.settings,
        styles=data.styles,
        players=seed_players(player_names, format_, rng),
        bracket_stage=(
            BracketStage.ROUND_ROBIN
            if format_ == TournamentFormat.ROUND_ROBIN
            else BracketStage.WINNERS
        ),
        initial_player_count=len(player_names),
        standings={} if format_ == TournamentFormat.ROUND_ROBIN else None,
    )
    build_initial_matches(rebuilt, created)
    return rebuilt
