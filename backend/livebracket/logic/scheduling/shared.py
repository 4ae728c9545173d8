from heliclockter import datetime_utc

from livebracket.models.db.tournament import BracketStage, Match, Partition, Player, TournamentData
from livebracket.utils.id_types import MatchId


def create_match(
    data: TournamentData,
    player1: Player,
    player2: Player,
    bracket: BracketStage,
    round_: int,
    created: datetime_utc,
) -> Match:
    data.match_counter += 1
    timestamp_ms = int(created.timestamp() * 1000)
    match = Match(
        id=MatchId(f"match-{timestamp_ms}-{data.match_counter}"),
        match_number=data.match_counter,
        player1=player1.name,
        player2=player2.name,
        bracket=bracket,
        round=round_,
    )
    data.current_matches.append(match)
    if bracket != BracketStage.ROUND_ROBIN:
        player1.partition = Partition.PLAYING
        player2.partition = Partition.PLAYING
    return match


def pair_consecutive(players: list[Player]) -> tuple[list[tuple[Player, Player]], Player | None]:
    """Pair (0, 1), (2, 3), ... and return the unpaired trailing player, who gets a bye."""
    pairs = [(players[i], players[i + 1]) for i in range(0, len(players) - 1, 2)]
    bye = players[-1] if len(players) % 2 != 0 else None
    return pairs, bye


def pair_folded(players: list[Player]) -> tuple[list[tuple[Player, Player]], Player | None]:
    """Pair the top seed with the bottom seed, working inwards; an odd middle seed gets a bye."""
    half = (len(players) + 1) // 2
    pairs = [(players[i], players[len(players) - 1 - i]) for i in range(len(players) // 2)]
    bye = players[half - 1] if len(players) % 2 != 0 else None
    return pairs, bye
