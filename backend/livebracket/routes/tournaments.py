from fastapi import APIRouter, Depends, HTTPException
from starlette import status

from livebracket.config import config
from livebracket.manager import TournamentManager
from livebracket.models.db.tournament import TournamentSettingsUpdate, TournamentState
from livebracket.routes.models import (
    CurrentMatchResponse,
    DisplayUpdateBody,
    MatchResultBody,
    PlayerAction,
    PlayerActionBody,
    StatusResponse,
    SuccessResponse,
    TournamentCreateBody,
    TournamentResponse,
    TournamentsResponse,
)
from livebracket.routes.util import (
    raise_if_failed,
    tournament_dependency,
    tournament_manager_dependency,
)
from livebracket.utils.id_types import MatchId, TournamentId, tournament_id_from_title
from livebracket.utils.types import assert_never, assert_some

router = APIRouter(prefix=config.api_prefix)


@router.get("/tournaments", response_model=TournamentsResponse)
async def get_tournaments(
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> TournamentsResponse:
    return TournamentsResponse(data=await manager.get_all_tournaments_with_status())


@router.post("/tournaments", response_model=TournamentResponse)
async def create_tournament(
    body: TournamentCreateBody,
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> TournamentResponse:
    tournament_id = tournament_id_from_title(body.tournament_id or body.title)
    if not body.overwrite and await manager.check_tournament_exists(tournament_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Tournament {tournament_id} already exists",
        )

    tournament = await manager.create_tournament(
        title=body.title,
        player_names=body.players,
        settings=body.settings,
        styles=body.styles,
        position=body.position,
        custom_coords=body.custom_coords,
        overlay_instance=body.overlay_instance,
        tournament_id=tournament_id,
        overwrite=body.overwrite,
    )
    if tournament is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Tournament needs at least two players with unique, non-empty names",
        )

    if body.start:
        await manager.start_tournament(tournament_id)
    return TournamentResponse(data=assert_some(await manager.get_tournament(tournament_id)))


@router.get("/tournaments/{tournament_id}", response_model=TournamentResponse)
async def get_tournament(
    tournament: TournamentState = Depends(tournament_dependency),
) -> TournamentResponse:
    return TournamentResponse(data=tournament)


@router.get("/tournaments/{tournament_id}/status", response_model=StatusResponse)
async def get_tournament_status(
    tournament_id: TournamentId,
    _: TournamentState = Depends(tournament_dependency),
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> StatusResponse:
    return StatusResponse(data=await manager.get_status(tournament_id))


@router.get("/tournaments/{tournament_id}/current_match", response_model=CurrentMatchResponse)
async def get_current_match(
    tournament_id: TournamentId,
    _: TournamentState = Depends(tournament_dependency),
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> CurrentMatchResponse:
    return CurrentMatchResponse(data=await manager.get_current_match(tournament_id))


@router.post(
    "/tournaments/{tournament_id}/matches/{match_id}/result", response_model=TournamentResponse
)
async def set_match_result(
    tournament_id: TournamentId,
    match_id: MatchId,
    body: MatchResultBody,
    tournament: TournamentState = Depends(tournament_dependency),
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> TournamentResponse:
    if tournament.tournament_data.find_current_match(match_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Could not find open match with id {match_id}",
        )

    success = await manager.set_match_winner(
        tournament_id, match_id, body.result, body.draw_handling
    )
    raise_if_failed(
        success,
        status.HTTP_400_BAD_REQUEST,
        "Result was rejected, check the player number and whether draws are allowed",
    )
    return TournamentResponse(data=assert_some(await manager.get_tournament(tournament_id)))


@router.post("/tournaments/{tournament_id}/players", response_model=TournamentResponse)
async def update_players(
    tournament_id: TournamentId,
    body: PlayerActionBody,
    _: TournamentState = Depends(tournament_dependency),
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> TournamentResponse:
    match body.action:
        case PlayerAction.ADD:
            success = await manager.add_player(tournament_id, body.name)
        case PlayerAction.REMOVE:
            success = await manager.remove_player(tournament_id, body.name)
        case PlayerAction.REPLACE:
            if body.new_name is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Replacing a player requires new_name",
                )
            success = await manager.replace_player(tournament_id, body.name, body.new_name)
        case _:
            assert_never(body.action)

    raise_if_failed(success, status.HTTP_400_BAD_REQUEST, f"Could not {body.action} {body.name}")
    return TournamentResponse(data=assert_some(await manager.get_tournament(tournament_id)))


@router.post("/tournaments/{tournament_id}/reset", response_model=TournamentResponse)
async def reset_tournament(
    tournament_id: TournamentId,
    _: TournamentState = Depends(tournament_dependency),
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> TournamentResponse:
    raise_if_failed(
        await manager.reset_tournament_with_undo(tournament_id),
        status.HTTP_409_CONFLICT,
        "A reset of this tournament is already in progress",
    )
    return TournamentResponse(data=assert_some(await manager.get_tournament(tournament_id)))


@router.post("/tournaments/{tournament_id}/undo_reset", response_model=TournamentResponse)
async def undo_reset(
    tournament_id: TournamentId,
    _: TournamentState = Depends(tournament_dependency),
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> TournamentResponse:
    raise_if_failed(
        await manager.undo_reset(tournament_id),
        status.HTTP_409_CONFLICT,
        "There is no reset to undo for this tournament",
    )
    return TournamentResponse(data=assert_some(await manager.get_tournament(tournament_id)))


@router.post("/tournaments/{tournament_id}/start", response_model=SuccessResponse)
async def start_tournament(
    tournament_id: TournamentId,
    _: TournamentState = Depends(tournament_dependency),
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> SuccessResponse:
    await manager.start_tournament(tournament_id)
    return SuccessResponse()


@router.post("/tournaments/{tournament_id}/stop", response_model=SuccessResponse)
async def stop_tournament(
    tournament_id: TournamentId,
    _: TournamentState = Depends(tournament_dependency),
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> SuccessResponse:
    await manager.end_tournament(tournament_id, manual=True)
    return SuccessResponse()


@router.patch("/tournaments/{tournament_id}/settings", response_model=TournamentResponse)
async def update_settings(
    tournament_id: TournamentId,
    body: TournamentSettingsUpdate,
    _: TournamentState = Depends(tournament_dependency),
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> TournamentResponse:
    raise_if_failed(
        await manager.update_settings(tournament_id, body),
        status.HTTP_409_CONFLICT,
        "A reset of this tournament is already in progress",
    )
    return TournamentResponse(data=assert_some(await manager.get_tournament(tournament_id)))


@router.patch("/tournaments/{tournament_id}/display", response_model=SuccessResponse)
async def update_display(
    tournament_id: TournamentId,
    body: DisplayUpdateBody,
    _: TournamentState = Depends(tournament_dependency),
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> SuccessResponse:
    if body.styles is not None:
        await manager.update_styles(tournament_id, body.styles)
    if body.position is not None:
        await manager.update_position(tournament_id, body.position, body.custom_coords)
    if body.overlay_instance is not None:
        await manager.update_overlay_instance(tournament_id, body.overlay_instance)
    if body.visible is not None:
        await manager.set_visibility(tournament_id, body.visible)
    return SuccessResponse()


@router.delete("/tournaments/{tournament_id}", response_model=SuccessResponse)
async def delete_tournament(
    tournament_id: TournamentId,
    _: TournamentState = Depends(tournament_dependency),
    manager: TournamentManager = Depends(tournament_manager_dependency),
) -> SuccessResponse:
    await manager.remove_tournament(tournament_id)
    return SuccessResponse()
