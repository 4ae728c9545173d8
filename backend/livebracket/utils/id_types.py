import re
from typing import NewType

TournamentId = NewType("TournamentId", str)
MatchId = NewType("MatchId", str)
BackupId = NewType("BackupId", str)

TOURNAMENT_ID_PREFIX = "tournament_"
BACKUP_ID_SEPARATOR = "::backup::"


def tournament_id_from_title(title: str) -> TournamentId:
    if title.startswith(TOURNAMENT_ID_PREFIX):
        return TournamentId(title)
    return TournamentId(f"{TOURNAMENT_ID_PREFIX}{re.sub(r'[^a-zA-Z0-9]', '_', title)}")


def build_backup_id(tournament_id: TournamentId, timestamp_ms: int) -> BackupId:
    return BackupId(f"{tournament_id}{BACKUP_ID_SEPARATOR}{timestamp_ms}")


def tournament_id_of_backup(backup_id: BackupId) -> TournamentId:
    return TournamentId(backup_id.split(BACKUP_ID_SEPARATOR)[0])


def display_title_of(tournament_id: TournamentId) -> str:
    return tournament_id.removeprefix(TOURNAMENT_ID_PREFIX)
