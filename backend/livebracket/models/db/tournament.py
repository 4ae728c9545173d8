from typing import Any

from heliclockter import datetime_utc
from pydantic import BaseModel, ConfigDict, Field

from livebracket.models.db.shared import BaseModelORM
from livebracket.utils.id_types import BackupId, MatchId
from livebracket.utils.types import EnumAutoStr


class TournamentFormat(EnumAutoStr):
    SINGLE_ELIMINATION = "single-elimination"
    DOUBLE_ELIMINATION = "double-elimination"
    ROUND_ROBIN = "round-robin"


class BracketStage(EnumAutoStr):
    WINNERS = "winners"
    LOSERS = "losers"
    FINAL = "final"
    ROUND_ROBIN = "round-robin"


class Partition(EnumAutoStr):
    """
    Where a player currently sits in the roster.

    Every player carries exactly one partition, so a player can never be waiting in two
    pools at once. PLAYING means the player is seated in an open match and waits in no pool.
    """

    WINNERS = "winners"
    LOSERS = "losers"
    ELIMINATED = "eliminated"
    PLAYING = "playing"
    ROUND_ROBIN = "round-robin"


class Player(BaseModel):
    name: str
    seed: int
    wins: int = 0
    losses: int = 0
    draws: int = 0
    eliminated: bool = False
    partition: Partition = Partition.WINNERS


class Match(BaseModel):
    id: MatchId
    match_number: int
    player1: str
    player2: str
    bracket: BracketStage
    round: int
    winner: str | None = None
    is_draw: bool = False
    resolved_randomly: bool = False

    def other_player(self, player_name: str) -> str:
        return self.player2 if player_name == self.player1 else self.player1

    def loser(self) -> str | None:
        return self.other_player(self.winner) if self.winner is not None else None


class RoundRobinSettings(BaseModel):
    points_per_win: float = 3
    points_per_draw: float = 1
    points_per_loss: float = 0
    allow_draws: bool = False


class RoundRobinStanding(BaseModel):
    points: float = 0
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0


class CustomCoords(BaseModel):
    top: float | None = None
    bottom: float | None = None
    left: float | None = None
    right: float | None = None


class TournamentSettings(BaseModel):
    # Display-only settings the engine does not interpret are carried through untouched.
    model_config = ConfigDict(extra="allow")

    format: TournamentFormat = TournamentFormat.DOUBLE_ELIMINATION
    display_duration: int = 30
    show_seed: bool = True
    show_bracket: bool = True
    show_standings: bool = False
    max_visible_matches: int = 2
    max_visible_standings: int = 5
    standings_position: str = "Middle Right"
    round_robin_settings: RoundRobinSettings = Field(default_factory=RoundRobinSettings)


class TournamentData(BaseModel):
    title: str
    players: list[Player] = Field(default_factory=list)
    current_matches: list[Match] = Field(default_factory=list)
    completed_matches: list[Match] = Field(default_factory=list)
    match_counter: int = 0
    winners_round: int = 1
    losers_round: int = 1
    bracket_stage: BracketStage = BracketStage.WINNERS
    winner: str | None = None
    require_true_final: bool = False
    true_final_played: bool = False
    initial_player_count: int = 0
    settings: TournamentSettings = Field(default_factory=TournamentSettings)
    styles: dict[str, Any] = Field(default_factory=dict)
    standings: dict[str, RoundRobinStanding] | None = None

    @property
    def format(self) -> TournamentFormat:
        return self.settings.format

    def get_player(self, name: str) -> Player | None:
        return next((player for player in self.players if player.name == name), None)

    def pool(self, partition: Partition) -> list[Player]:
        return [player for player in self.players if player.partition == partition]

    @property
    def winners_players(self) -> list[Player]:
        return self.pool(Partition.WINNERS)

    @property
    def losers_players(self) -> list[Player]:
        return self.pool(Partition.LOSERS)

    @property
    def eliminated_players(self) -> list[Player]:
        return self.pool(Partition.ELIMINATED)

    def find_current_match(self, match_id: MatchId) -> Match | None:
        return next((match for match in self.current_matches if match.id == match_id), None)

    def complete_match(self, match: Match) -> None:
        self.current_matches = [
            current for current in self.current_matches if current.id != match.id
        ]
        self.completed_matches.append(match)


class TournamentState(BaseModelORM):
    uuid: str
    tournament_data: TournamentData
    ended: bool = False
    paused: bool = False
    manually_ended: bool = False
    created_at: datetime_utc
    updated_at: datetime_utc
    position: str = "Middle"
    custom_coords: CustomCoords = Field(default_factory=CustomCoords)
    overlay_instance: str = ""


class BackupTournament(TournamentState):
    removed_at: datetime_utc
    id: BackupId | None = None

    def to_tournament_state(self) -> TournamentState:
        return TournamentState.model_validate(self.model_dump(exclude={"removed_at", "id"}))


class TournamentSummary(BaseModel):
    tournament_id: str
    display_title: str
    status: str


class RoundRobinSettingsUpdate(BaseModel):
    points_per_win: float | None = None
    points_per_draw: float | None = None
    points_per_loss: float | None = None
    allow_draws: bool | None = None


class TournamentSettingsUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    format: TournamentFormat | None = None
    display_duration: int | None = None
    show_seed: bool | None = None
    show_bracket: bool | None = None
    show_standings: bool | None = None
    max_visible_matches: int | None = None
    max_visible_standings: int | None = None
    standings_position: str | None = None
    round_robin_settings: RoundRobinSettingsUpdate | None = None
