from typing import NamedTuple

from heliclockter import datetime_utc, timedelta

from livebracket.models.db.tournament import BackupTournament, TournamentState
from livebracket.utils.id_types import TournamentId


class ResetSnapshot(NamedTuple):
    state: TournamentState
    taken_at: datetime_utc


class ResetLocks:
    """Advisory, per-tournament locks that keep resets and undos from interleaving."""

    def __init__(self) -> None:
        self._held: set[TournamentId] = set()

    def is_held(self, tournament_id: TournamentId) -> bool:
        return tournament_id in self._held

    def try_acquire(self, tournament_id: TournamentId) -> bool:
        if tournament_id in self._held:
            return False
        self._held.add(tournament_id)
        return True

    def release(self, tournament_id: TournamentId) -> None:
        self._held.discard(tournament_id)


class ResetSnapshotStore:
    def __init__(self, retention: timedelta) -> None:
        self.retention = retention
        self._snapshots: dict[TournamentId, ResetSnapshot] = {}

    def _is_live(self, snapshot: ResetSnapshot, now: datetime_utc) -> bool:
        return now - snapshot.taken_at < self.retention

    def remember(
        self, tournament_id: TournamentId, state: TournamentState, now: datetime_utc
    ) -> None:
        self._snapshots[tournament_id] = ResetSnapshot(state.model_copy(deep=True), now)

    def peek(self, tournament_id: TournamentId, now: datetime_utc) -> TournamentState | None:
        snapshot = self._snapshots.get(tournament_id)
        if snapshot is None or not self._is_live(snapshot, now):
            return None
        return snapshot.state.model_copy(deep=True)

    def discard(self, tournament_id: TournamentId) -> None:
        self._snapshots.pop(tournament_id, None)

    def purge_expired(self, now: datetime_utc) -> int:
        expired = [
            tournament_id
            for tournament_id, snapshot in self._snapshots.items()
            if not self._is_live(snapshot, now)
        ]
        for tournament_id in expired:
            del self._snapshots[tournament_id]
        return len(expired)


class CleanupReport(NamedTuple):
    backups_removed: int
    tournaments_removed: int


def backup_is_expired(backup: BackupTournament, now: datetime_utc, retention: timedelta) -> bool:
    return now - backup.removed_at > retention


def ended_tournament_is_expired(
    tournament: TournamentState, now: datetime_utc, retention: timedelta
) -> bool:
    return tournament.ended and now - tournament.updated_at > retention
