from livebracket.models.db.tournament import Match, TournamentData
from livebracket.utils.logging import logger


def normalize_player_name(name: str | None) -> str | None:
    if name is None:
        return None
    trimmed = name.strip()
    return trimmed if trimmed != "" else None


def roster_names(data: TournamentData) -> list[str]:
    return [player.name for player in sorted(data.players, key=lambda player: player.seed)]


def roster_with_player_added(data: TournamentData, name: str) -> list[str] | None:
    names = roster_names(data)
    if name in names:
        logger.warning(f"Player {name} is already part of {data.title}")
        return None
    return [*names, name]


def roster_with_player_removed(data: TournamentData, name: str) -> list[str] | None:
    names = roster_names(data)
    if name not in names:
        logger.warning(f"Player {name} is not part of {data.title}")
        return None
    return [existing for existing in names if existing != name]


def _rename_in_match(match: Match, old_name: str, new_name: str) -> None:
    if match.player1 == old_name:
        match.player1 = new_name
    if match.player2 == old_name:
        match.player2 = new_name
    if match.winner == old_name:
        match.winner = new_name


def rename_player(data: TournamentData, old_name: str, new_name: str) -> bool:
    """Rename a player everywhere it is referenced, keeping seed, record and bracket position."""
    player = data.get_player(old_name)
    if player is None:
        logger.warning(f"Player {old_name} is not part of {data.title}")
        return False
    if data.get_player(new_name) is not None:
        logger.warning(f"Player {new_name} is already part of {data.title}")
        return False

    player.name = new_name
    for match in [*data.current_matches, *data.completed_matches]:
        _rename_in_match(match, old_name, new_name)
    if data.winner == old_name:
        data.winner = new_name
    if data.standings is not None and old_name in data.standings:
        data.standings = {
            (new_name if name == old_name else name): standing
            for name, standing in data.standings.items()
        }
    return True
