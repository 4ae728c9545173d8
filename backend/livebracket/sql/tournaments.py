from pydantic import ValidationError

from livebracket.models.db.tournament import TournamentState, TournamentSummary
from livebracket.stores import DocumentStore
from livebracket.utils.id_types import TournamentId
from livebracket.utils.logging import logger

TOURNAMENTS_COLLECTION = "tournaments"


def _tournament_path(tournament_id: TournamentId) -> str:
    return f"{TOURNAMENTS_COLLECTION}/{tournament_id}"


async def sql_get_tournament(
    store: DocumentStore, tournament_id: TournamentId
) -> TournamentState | None:
    document = await store.get(_tournament_path(tournament_id))
    if document is None:
        return None
    return TournamentState.model_validate(document)


async def sql_tournament_exists(store: DocumentStore, tournament_id: TournamentId) -> bool:
    return await store.get(_tournament_path(tournament_id)) is not None


async def sql_save_tournament(
    store: DocumentStore, tournament_id: TournamentId, tournament: TournamentState
) -> None:
    await store.set(_tournament_path(tournament_id), tournament.model_dump(mode="json"))


async def sql_delete_tournament(store: DocumentStore, tournament_id: TournamentId) -> None:
    await store.delete(_tournament_path(tournament_id))


async def sql_get_tournaments(store: DocumentStore) -> dict[TournamentId, TournamentState]:
    result: dict[TournamentId, TournamentState] = {}
    for key, document in (await store.get_collection(TOURNAMENTS_COLLECTION)).items():
        try:
            result[TournamentId(key)] = TournamentState.model_validate(document)
        except ValidationError:
            logger.warning(f"Skipping unreadable tournament document: {key}")
    return result


async def sql_get_tournament_summaries(store: DocumentStore) -> list[TournamentSummary]:
    return [
        TournamentSummary(
            tournament_id=tournament_id,
            display_title=tournament.tournament_data.title,
            status="ended" if tournament.ended else "active",
        )
        for tournament_id, tournament in (await sql_get_tournaments(store)).items()
    ]
