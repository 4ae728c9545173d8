from heliclockter import datetime_utc

from livebracket.logic.scheduling.shared import create_match
from livebracket.models.db.tournament import BracketStage, Match, RoundRobinStanding, TournamentData


def get_number_of_matches_round_robin(player_count: int) -> int:
    return player_count * (player_count - 1) // 2


def create_round_robin_matches(data: TournamentData, created: datetime_utc) -> list[Match]:
    players = data.players
    data.standings = {player.name: RoundRobinStanding() for player in players}

    return [
        create_match(data, players[i], players[j], BracketStage.ROUND_ROBIN, 1, created)
        for i in range(len(players))
        for j in range(i + 1, len(players))
    ]
