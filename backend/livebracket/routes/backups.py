from fastapi import APIRouter, Depends, HTTPException
from starlette import status

from livebracket.config import config
from livebracket.manager import TournamentManager
from livebracket.models.db.tournament import TournamentState
from livebracket.routes.models import (
    BackupIdResponse,
    BackupsResponse,
    CleanupResponse,
    CleanupResult,
    RestoreBody,
    SuccessResponse,
)
from livebracket.routes.util import (
    raise_if_failed,
    tournament_dependency,
    tournament_manager_dependency,
)
from livebracket.utils.id_types import BackupId, TournamentId
from livebracket.utils.types import assert_some

router = APIRouter(prefix=config.api_prefix)


async def _ensure_backup_exists(manager: TournamentManager, backup_id: BackupId) -> None:
    if await manager.get_backup_tournament(backup_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Could not find backup with id {backup_id}",
        )


@router.get("/backups", response_model=BackupsResponse)
async def get_backups(
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> BackupsResponse:
    return BackupsResponse(data=await manager.get_backup_tournaments())


@router.post("/tournaments/{tournament_id}/backup", response_model=BackupIdResponse)
async def backup_tournament(
    tournament_id: TournamentId,
    _: TournamentState = Depends(tournament_dependency),
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> BackupIdResponse:
    return BackupIdResponse(data=assert_some(await manager.backup_tournament(tournament_id)))


@router.post("/backups/{backup_id}/restore", response_model=SuccessResponse)
async def restore_backup(
    backup_id: BackupId,
    body: RestoreBody | None = None,
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> SuccessResponse:
    await _ensure_backup_exists(manager, backup_id)

    overwrite = body.overwrite if body is not None else False
    raise_if_failed(
        await manager.restore_tournament(backup_id, overwrite=overwrite),
        status.HTTP_409_CONFLICT,
        "A live tournament with this id exists, restore with overwrite to replace it",
    )
    return SuccessResponse()


@router.delete("/backups/{backup_id}", response_model=SuccessResponse)
async def delete_backup(
    backup_id: BackupId,
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> SuccessResponse:
    raise_if_failed(
        await manager.remove_backup_tournament(backup_id),
        status.HTTP_404_NOT_FOUND,
        f"Could not find backup with id {backup_id}",
    )
    return SuccessResponse()


@router.post("/cleanup", response_model=CleanupResponse)
async def cleanup(
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> CleanupResponse:
    report = await manager.cleanup_old_backups()
    return CleanupResponse(
        data=CleanupResult(
            backups_removed=report.backups_removed,
            tournaments_removed=report.tournaments_removed,
        )
    )
