from livebracket.logic.scheduling.elimination import get_number_of_rounds_single_elimination
from livebracket.models.db.tournament import BracketStage, Match, TournamentData, TournamentFormat

ROUND_ORDINALS = ["First", "Second", "Third", "Fourth", "Fifth", "Sixth", "Seventh", "Eighth"]
TOURNAMENT_COMPLETE = "Tournament Complete"


def _single_elimination_status(data: TournamentData) -> str:
    if data.winner is not None:
        return TOURNAMENT_COMPLETE

    remaining = len(data.winners_players) + len(data.current_matches) * 2
    total_rounds = get_number_of_rounds_single_elimination(data.initial_player_count)
    current_round = total_rounds - get_number_of_rounds_single_elimination(remaining) + 1

    match remaining:
        case 2:
            round_name = "Finals"
        case 4:
            round_name = "Semifinals"
        case 8:
            round_name = "Quarterfinals"
        case _:
            round_name = f"Round {current_round}"
    return f"Single Elimination - {round_name}"


def _elimination_round_name(current_round: int, total_rounds: int, bracket_name: str) -> str:
    finals = f"{bracket_name} Finals"
    if total_rounds >= 4:
        if current_round <= total_rounds - 3:
            index = min(max(current_round, 1), len(ROUND_ORDINALS)) - 1
            return f"{ROUND_ORDINALS[index]} Round"
        if current_round == total_rounds - 2:
            return "Quarterfinals"
        if current_round == total_rounds - 1:
            return "Semifinals"
        return finals
    if total_rounds == 3:
        if current_round == 1:
            return "First Round"
        if current_round == 2:
            return "Semifinals"
        return finals
    if total_rounds == 2 and current_round == 1:
        return "Semifinals"
    return finals


def _double_elimination_status(data: TournamentData) -> str:
    if data.winner is not None:
        return TOURNAMENT_COMPLETE

    if data.bracket_stage == BracketStage.FINAL:
        if data.require_true_final:
            return "Tournament Finals - True Final"
        return "Tournament Finals"

    in_winners = data.bracket_stage == BracketStage.WINNERS
    bracket_name = "Main" if in_winners else "Redemption"
    current_round = data.winners_round if in_winners else data.losers_round
    bracket_players = (
        data.initial_player_count if in_winners else (data.initial_player_count + 1) // 2
    )
    total_rounds = get_number_of_rounds_single_elimination(bracket_players)

    round_name = _elimination_round_name(current_round, total_rounds, bracket_name)
    return f"{bracket_name} Bracket - {round_name}"


def get_status_text(data: TournamentData) -> str:
    match data.format:
        case TournamentFormat.ROUND_ROBIN:
            completed = len(data.completed_matches)
            total = completed + len(data.current_matches)
            return f"Round Robin - {completed}/{total} Matches Complete"
        case TournamentFormat.SINGLE_ELIMINATION:
            return _single_elimination_status(data)
        case TournamentFormat.DOUBLE_ELIMINATION:
            return _double_elimination_status(data)


def get_current_match(data: TournamentData) -> Match | None:
    return data.current_matches[0] if len(data.current_matches) > 0 else None
