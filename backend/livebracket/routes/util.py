from fastapi import Depends, HTTPException, Request
from starlette import status

from livebracket.manager import TournamentManager
from livebracket.models.db.tournament import TournamentState
from livebracket.utils.id_types import TournamentId


def tournament_manager_dependency(request: Request) -> TournamentManager:
    manager: TournamentManager = request.app.state.tournament_manager
    return manager


async def tournament_dependency(
    tournament_id: TournamentId,
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> TournamentState:
    tournament = await manager.get_tournament(tournament_id)
    if tournament is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Could not find tournament with id {tournament_id}",
        )
    return tournament


def raise_if_failed(success: bool, status_code: int, detail: str) -> None:
    if not success:
        raise HTTPException(status_code=status_code, detail=detail)
