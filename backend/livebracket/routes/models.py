from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from livebracket.models.db.tournament import (
    BackupTournament,
    CustomCoords,
    Match,
    TournamentSettings,
    TournamentState,
    TournamentSummary,
)
from livebracket.utils.id_types import BackupId
from livebracket.utils.types import EnumAutoStr


class SuccessResponse(BaseModel):
    success: bool = True


DataT = TypeVar("DataT")


class DataResponse(BaseModel, Generic[DataT]):
    data: DataT


class TournamentResponse(DataResponse[TournamentState]):
    pass


class TournamentsResponse(DataResponse[list[TournamentSummary]]):
    pass


class StatusResponse(DataResponse[str]):
    pass


class CurrentMatchResponse(DataResponse[Match | None]):
    pass


class BackupsResponse(DataResponse[list[BackupTournament]]):
    pass


class BackupIdResponse(DataResponse[BackupId]):
    pass


class CleanupResult(BaseModel):
    backups_removed: int
    tournaments_removed: int


class CleanupResponse(DataResponse[CleanupResult]):
    pass


class TournamentCreateBody(BaseModel):
    title: str
    players: list[str]
    settings: TournamentSettings | None = None
    styles: dict[str, Any] | None = None
    position: str = "Middle"
    custom_coords: CustomCoords | None = None
    overlay_instance: str = ""
    tournament_id: str | None = None
    overwrite: bool = False
    start: bool = True


class MatchResultBody(BaseModel):
    # 1 or 2 for the winning player, or "draw".
    result: int | str
    # Unknown policies fall back to replay.
    draw_handling: str | None = None


class PlayerAction(EnumAutoStr):
    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"


class PlayerActionBody(BaseModel):
    action: PlayerAction
    name: str
    new_name: str | None = None


class DisplayUpdateBody(BaseModel):
    styles: dict[str, Any] | None = None
    position: str | None = None
    custom_coords: CustomCoords | None = None
    overlay_instance: str | None = None
    visible: bool | None = None


class RestoreBody(BaseModel):
    overwrite: bool = False
