from collections import defaultdict

from livebracket.models.db.tournament import (
    BracketStage,
    Match,
    Player,
    RoundRobinSettings,
    RoundRobinStanding,
    TournamentData,
)


def calculate_standings(
    players: list[Player], completed_matches: list[Match], settings: RoundRobinSettings
) -> dict[str, RoundRobinStanding]:
    """
    Derive round-robin standings from scratch out of the completed matches.

    Never updated incrementally: point values can change after matches were played, and
    recomputing everything keeps the table consistent with the rules currently configured.
    """
    standings = {player.name: RoundRobinStanding() for player in players}

    for match in completed_matches:
        if match.bracket != BracketStage.ROUND_ROBIN:
            continue

        standing1 = standings.setdefault(match.player1, RoundRobinStanding())
        standing2 = standings.setdefault(match.player2, RoundRobinStanding())
        standing1.played += 1
        standing2.played += 1

        if match.winner is None:
            for standing in (standing1, standing2):
                standing.draws += 1
                standing.points += settings.points_per_draw
            continue

        if match.winner == match.player1:
            winner, loser = standing1, standing2
        else:
            winner, loser = standing2, standing1
        winner.wins += 1
        winner.points += settings.points_per_win
        loser.losses += 1
        loser.points += settings.points_per_loss

    return standings


def recalculate_standings(data: TournamentData) -> dict[str, RoundRobinStanding]:
    data.standings = calculate_standings(
        data.players, data.completed_matches, data.settings.round_robin_settings
    )
    return data.standings


def _head_to_head_points(
    group: set[str], completed_matches: list[Match], settings: RoundRobinSettings
) -> dict[str, float]:
    points: dict[str, float] = defaultdict(float)
    for match in completed_matches:
        if match.bracket != BracketStage.ROUND_ROBIN:
            continue
        if match.player1 not in group or match.player2 not in group:
            continue

        if match.winner is None:
            points[match.player1] += settings.points_per_draw
            points[match.player2] += settings.points_per_draw
        else:
            points[match.winner] += settings.points_per_win
            points[match.other_player(match.winner)] += settings.points_per_loss
    return points


def rank_players(data: TournamentData) -> list[Player]:
    """
    Order players by points, then head-to-head points among the players tied on points,
    then wins, then seed.
    """
    standings = data.standings or {}
    settings = data.settings.round_robin_settings

    def points_of(player: Player) -> float:
        standing = standings.get(player.name)
        return standing.points if standing is not None else 0

    tied_groups: dict[float, set[str]] = defaultdict(set)
    for player in data.players:
        tied_groups[points_of(player)].add(player.name)

    head_to_head: dict[str, float] = {}
    for group in tied_groups.values():
        if len(group) > 1:
            head_to_head.update(_head_to_head_points(group, data.completed_matches, settings))

    return sorted(
        data.players,
        key=lambda player: (
            -points_of(player),
            -head_to_head.get(player.name, 0),
            -(standings[player.name].wins if player.name in standings else 0),
            player.seed,
        ),
    )


def determine_round_robin_winner(data: TournamentData) -> Player | None:
    if data.standings is None or len(data.players) < 1:
        return None
    return rank_players(data)[0]
