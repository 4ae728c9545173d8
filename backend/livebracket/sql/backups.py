from pydantic import ValidationError

from livebracket.models.db.tournament import BackupTournament
from livebracket.stores import DocumentStore
from livebracket.utils.id_types import BackupId, TournamentId, tournament_id_of_backup
from livebracket.utils.logging import logger

BACKUPS_COLLECTION = "backups"


def _backup_path(backup_id: BackupId) -> str:
    return f"{BACKUPS_COLLECTION}/{backup_id}"


async def sql_get_backup(store: DocumentStore, backup_id: BackupId) -> BackupTournament | None:
    document = await store.get(_backup_path(backup_id))
    if document is None:
        return None
    return BackupTournament.model_validate({**document, "id": backup_id})


async def sql_create_backup(
    store: DocumentStore, backup_id: BackupId, backup: BackupTournament
) -> None:
    await store.set(_backup_path(backup_id), backup.model_dump(mode="json", exclude={"id"}))


async def sql_delete_backup(store: DocumentStore, backup_id: BackupId) -> None:
    await store.delete(_backup_path(backup_id))


async def sql_get_backups(store: DocumentStore) -> list[BackupTournament]:
    backups: list[BackupTournament] = []
    for key, document in (await store.get_collection(BACKUPS_COLLECTION)).items():
        try:
            backups.append(BackupTournament.model_validate({**document, "id": key}))
        except ValidationError:
            logger.warning(f"Skipping unreadable backup document: {key}")
    return backups


async def sql_get_latest_backup_for_tournament(
    store: DocumentStore, tournament_id: TournamentId
) -> BackupTournament | None:
    candidates = [
        backup
        for backup in await sql_get_backups(store)
        if backup.id is not None and tournament_id_of_backup(backup.id) == tournament_id
    ]
    if len(candidates) < 1:
        return None
    return max(candidates, key=lambda backup: backup.removed_at)
