import random
from collections.abc import Callable
from typing import Any
from uuid import uuid4

from heliclockter import datetime_utc, timedelta

from livebracket.config import config
from livebracket.logic.progression import advance_to_next_round, is_bracket_exhausted
from livebracket.logic.ranking.standings import determine_round_robin_winner, recalculate_standings
from livebracket.logic.results.draws import DRAW_EVENT_LABELS, DRAW_MESSAGES, DrawHandling
from livebracket.logic.results.resolver import (
    DRAW_RESULT,
    DrawOutcome,
    apply_decisive_result,
    parse_match_result,
    resolve_draw,
)
from livebracket.logic.roster import (
    normalize_player_name,
    rename_player,
    roster_names,
    roster_with_player_added,
    roster_with_player_removed,
)
from livebracket.logic.safety import (
    CleanupReport,
    ResetLocks,
    ResetSnapshotStore,
    backup_is_expired,
    ended_tournament_is_expired,
)
from livebracket.logic.scheduling.builder import rebuild_tournament_data
from livebracket.logic.status import get_current_match, get_status_text
from livebracket.models.db.tournament import (
    BackupTournament,
    CustomCoords,
    Match,
    RoundRobinStanding,
    TournamentData,
    TournamentFormat,
    TournamentSettings,
    TournamentSettingsUpdate,
    TournamentState,
    TournamentSummary,
)
from livebracket.notifications.display import (
    DisplayChannel,
    DisplayMessageType,
    push_display,
    push_draw_notification,
)
from livebracket.notifications.events import (
    MATCH_UPDATED_EVENT,
    TOURNAMENT_ENDED_EVENT,
    TOURNAMENT_STARTED_EVENT,
    EventSink,
    MatchUpdatedEvent,
    TournamentEndedEvent,
    TournamentStartedEvent,
    emit_event,
)
from livebracket.sql.backups import (
    sql_create_backup,
    sql_delete_backup,
    sql_get_backup,
    sql_get_backups,
    sql_get_latest_backup_for_tournament,
)
from livebracket.sql.tournaments import (
    sql_delete_tournament,
    sql_get_tournament,
    sql_get_tournament_summaries,
    sql_get_tournaments,
    sql_save_tournament,
    sql_tournament_exists,
)
from livebracket.stores import DocumentStore
from livebracket.utils.id_types import (
    BACKUP_ID_SEPARATOR,
    BackupId,
    MatchId,
    TournamentId,
    build_backup_id,
    tournament_id_from_title,
    tournament_id_of_backup,
)
from livebracket.utils.logging import logger
from livebracket.utils.timers import Scheduler
from livebracket.utils.types import assert_some

MIN_PLAYER_COUNT = 2
TOURNAMENT_NOT_FOUND = "Tournament Not Found"


def _unique_player_names(player_names: list[str]) -> list[str] | None:
    names: list[str] = []
    for raw_name in player_names:
        name = normalize_player_name(raw_name)
        if name is None:
            logger.warning("Player names must not be empty")
            return None
        if name in names:
            logger.warning(f"Duplicate player name: {name}")
            return None
        names.append(name)
    return names


def _merge_settings(
    settings: TournamentSettings, update: TournamentSettingsUpdate
) -> TournamentSettings:
    changes = update.model_dump(exclude_unset=True, exclude_none=True)
    round_robin_changes = changes.pop("round_robin_settings", {})
    merged = settings.model_dump()
    merged.update(changes)
    merged["round_robin_settings"] = {**merged["round_robin_settings"], **round_robin_changes}
    return TournamentSettings.model_validate(merged)


class TournamentManager:
    """
    Owns every mutation of tournament state.

    Each mutating operation loads the stored state, applies its whole effect to a private copy
    and persists once, so a failed operation never leaves a half-applied tournament behind.
    Events and display messages go out only after the new state is stored. Failures are logged
    and reported through the return value, never raised.
    """

    def __init__(
        self,
        store: DocumentStore,
        event_sink: EventSink,
        display: DisplayChannel,
        scheduler: Scheduler,
        rng: random.Random | None = None,
        clock: Callable[[], datetime_utc] = datetime_utc.now,
        undo_retention: timedelta = timedelta(seconds=config.undo_retention_seconds),
        backup_retention: timedelta = timedelta(days=config.backup_retention_days),
        ended_retention: timedelta = timedelta(days=config.ended_retention_days),
        default_display_duration: int = config.default_display_duration_seconds,
    ) -> None:
        self.store = store
        self.event_sink = event_sink
        self.display = display
        self.scheduler = scheduler
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock
        self.backup_retention = backup_retention
        self.ended_retention = ended_retention
        self.default_display_duration = default_display_duration
        self._reset_locks = ResetLocks()
        self._reset_snapshots = ResetSnapshotStore(undo_retention)

    async def _load(self, tournament_id: TournamentId) -> TournamentState | None:
        tournament = await sql_get_tournament(self.store, tournament_id)
        if tournament is None:
            logger.warning(f"Tournament not found: {tournament_id}")
        return tournament

    async def _save(self, tournament_id: TournamentId, tournament: TournamentState) -> None:
        tournament.updated_at = self.clock()
        await sql_save_tournament(self.store, tournament_id, tournament)

    async def _push(
        self,
        message_type: DisplayMessageType,
        tournament_id: TournamentId,
        tournament: TournamentState,
        **flags: bool,
    ) -> None:
        await push_display(self.display, message_type, tournament_id, tournament, **flags)

    async def get_tournament(self, tournament_id: TournamentId) -> TournamentState | None:
        return await sql_get_tournament(self.store, tournament_id)

    async def check_tournament_exists(self, tournament_id: TournamentId) -> bool:
        return await sql_tournament_exists(self.store, tournament_id)

    async def is_tournament_active(self, tournament_id: TournamentId) -> bool:
        tournament = await self.get_tournament(tournament_id)
        return tournament is not None and not tournament.ended

    async def get_active_tournaments(self) -> list[TournamentId]:
        tournaments = await sql_get_tournaments(self.store)
        return [tournament_id for tournament_id, state in tournaments.items() if not state.ended]

    async def get_ended_tournaments(self) -> list[TournamentId]:
        tournaments = await sql_get_tournaments(self.store)
        return [tournament_id for tournament_id, state in tournaments.items() if state.ended]

    async def get_all_tournaments_with_status(self) -> list[TournamentSummary]:
        return await sql_get_tournament_summaries(self.store)

    async def create_tournament(
        self,
        title: str,
        player_names: list[str],
        settings: TournamentSettings | None = None,
        styles: dict[str, Any] | None = None,
        position: str = "Middle",
        custom_coords: CustomCoords | None = None,
        overlay_instance: str = "",
        tournament_id: str | None = None,
        overwrite: bool = False,
    ) -> TournamentState | None:
        new_tournament_id = tournament_id_from_title(tournament_id or title)
        names = _unique_player_names(player_names)
        if names is None:
            return None
        if len(names) < MIN_PLAYER_COUNT:
            logger.warning(f"A tournament needs at least {MIN_PLAYER_COUNT} players")
            return None
        if not overwrite and await self.check_tournament_exists(new_tournament_id):
            logger.warning(f"Tournament {new_tournament_id} already exists")
            return None

        now = self.clock()
        template = TournamentData(
            title=title,
            settings=settings or TournamentSettings(),
            styles=styles or {},
        )
        tournament = TournamentState(
            uuid=str(uuid4()),
            tournament_data=rebuild_tournament_data(template, names, self.rng, now),
            created_at=now,
            updated_at=now,
            position=position,
            custom_coords=custom_coords or CustomCoords(),
            overlay_instance=overlay_instance,
        )
        await self._save(new_tournament_id, tournament)
        logger.info(f"Created tournament {new_tournament_id} with {len(names)} players")

        await self._push(DisplayMessageType.UPDATE, new_tournament_id, tournament)
        return tournament

    async def start_tournament(self, tournament_id: TournamentId) -> bool:
        tournament = await self._load(tournament_id)
        if tournament is None:
            return False

        tournament.ended = False
        tournament.manually_ended = False
        await self._save(tournament_id, tournament)

        await emit_event(
            self.event_sink,
            TOURNAMENT_STARTED_EVENT,
            TournamentStartedEvent(
                tournament_id=tournament_id,
                title=tournament.tournament_data.title,
                players=roster_names(tournament.tournament_data),
            ),
        )
        await self._push(DisplayMessageType.UPDATE, tournament_id, tournament)
        return True

    def _mark_ended(self, tournament: TournamentState, manual: bool) -> None:
        tournament.ended = True
        tournament.manually_ended = manual

        data = tournament.tournament_data
        if data.format == TournamentFormat.ROUND_ROBIN and data.winner is None and not manual:
            winner = determine_round_robin_winner(data)
            if winner is not None:
                data.winner = winner.name

    async def _retract_display(self, tournament_id: TournamentId, uuid: str) -> None:
        tournament = await self.get_tournament(tournament_id)
        if tournament is None or tournament.uuid != uuid or not tournament.ended:
            logger.info(f"Skipping display removal for {tournament_id}, it changed in the meantime")
            return
        await self._push(DisplayMessageType.REMOVE, tournament_id, tournament)

    async def _announce_end(self, tournament_id: TournamentId, tournament: TournamentState) -> None:
        data = tournament.tournament_data
        if data.winner is not None:
            await emit_event(
                self.event_sink,
                TOURNAMENT_ENDED_EVENT,
                TournamentEndedEvent(
                    tournament_id=tournament_id,
                    title=data.title,
                    winner=data.winner,
                    matches_played=len(data.completed_matches),
                    duration=int((self.clock() - tournament.created_at).total_seconds()),
                ),
            )

        if tournament.manually_ended or data.winner is None:
            await self._push(DisplayMessageType.REMOVE, tournament_id, tournament)
            return

        await self._push(DisplayMessageType.UPDATE, tournament_id, tournament, ended=True)
        display_duration = data.settings.display_duration or self.default_display_duration
        uuid = tournament.uuid

        async def retract() -> None:
            await self._retract_display(tournament_id, uuid)

        self.scheduler.call_later(display_duration, f"retract-display-{tournament_id}", retract)

    async def end_tournament(self, tournament_id: TournamentId, manual: bool = False) -> bool:
        tournament = await self._load(tournament_id)
        if tournament is None:
            return False

        self._mark_ended(tournament, manual)
        await self._save(tournament_id, tournament)
        logger.info(f"Tournament {tournament_id} ended (manually: {manual})")

        await self._announce_end(tournament_id, tournament)
        return True

    def _apply_draw(
        self, data: TournamentData, match: Match, draw_handling: DrawHandling | str | None
    ) -> DrawOutcome:
        outcome = resolve_draw(data, match, DrawHandling.parse(draw_handling), self.rng)
        if outcome.applied and outcome.winner is not None:
            apply_decisive_result(data, match, outcome.winner, self.clock())
        return outcome

    def _progress(self, tournament: TournamentState) -> bool:
        """Move the bracket along after a completed match, returns whether the tournament ended."""
        data = tournament.tournament_data
        if data.format != TournamentFormat.ROUND_ROBIN and data.winner is None:
            if len(data.current_matches) < 1:
                advance_to_next_round(data, self.clock())

        if is_bracket_exhausted(data):
            self._mark_ended(tournament, manual=False)
            return True
        return False

    async def set_match_winner(
        self,
        tournament_id: TournamentId,
        match_id: MatchId,
        result: int | str,
        draw_handling: DrawHandling | str | None = None,
    ) -> bool:
        tournament = await self._load(tournament_id)
        if tournament is None:
            return False
        if tournament.ended:
            logger.warning(f"Tournament {tournament_id} has ended, ignoring result for {match_id}")
            return False

        parsed_result = parse_match_result(result)
        if parsed_result is None:
            logger.error(f"Invalid player number: {result}")
            return False

        working = tournament.model_copy(deep=True)
        data = working.tournament_data
        match = data.find_current_match(match_id)
        if match is None:
            logger.error(f"Match not found in current matches: {match_id}")
            return False

        logger.info(
            f"Result for {tournament_id} match {match.match_number} "
            f"({match.bracket}, round {match.round}): {parsed_result}"
        )

        draw_outcome: DrawOutcome | None = None
        if parsed_result == DRAW_RESULT:
            draw_outcome = self._apply_draw(data, match, draw_handling)
            if not draw_outcome.applied:
                return False
            completed = draw_outcome.completed
        else:
            match.resolved_randomly = False
            winner_name = match.player1 if parsed_result == 1 else match.player2
            apply_decisive_result(data, match, winner_name, self.clock())
            completed = True

        ended = False
        if completed:
            data.complete_match(match)
            if data.format == TournamentFormat.ROUND_ROBIN:
                recalculate_standings(data)
            ended = self._progress(working)

        await self._save(tournament_id, working)

        await emit_event(
            self.event_sink,
            MATCH_UPDATED_EVENT,
            self._match_event(tournament_id, working, match, draw_outcome),
        )
        if draw_outcome is not None:
            await push_draw_notification(
                self.display,
                tournament_id,
                working,
                match,
                draw_outcome.handling,
                DRAW_MESSAGES[draw_outcome.handling],
            )

        if ended:
            await self._announce_end(tournament_id, working)
        else:
            await self._push(DisplayMessageType.UPDATE, tournament_id, working)
        return True

    def _match_event(
        self,
        tournament_id: TournamentId,
        tournament: TournamentState,
        match: Match,
        draw_outcome: DrawOutcome | None,
    ) -> MatchUpdatedEvent:
        winner_label = match.winner or ""
        is_draw = False
        draw_handling = None
        if draw_outcome is not None:
            draw_handling = str(draw_outcome.handling)
            if draw_outcome.handling == DrawHandling.RANDOM:
                winner_label = f"{draw_outcome.winner} (Random)"
            else:
                winner_label = DRAW_EVENT_LABELS[draw_outcome.handling]
                is_draw = True

        return MatchUpdatedEvent(
            tournament_id=tournament_id,
            title=tournament.tournament_data.title,
            match_number=match.match_number,
            player1=match.player1,
            player2=match.player2,
            winner=winner_label,
            bracket_stage=str(match.bracket),
            round=match.round,
            is_draw=is_draw,
            draw_handling=draw_handling,
        )

    async def advance_to_next_round(self, tournament_id: TournamentId) -> bool:
        tournament = await self._load(tournament_id)
        if tournament is None:
            return False
        if tournament.ended:
            logger.warning(f"Tournament {tournament_id} has ended, nothing to advance")
            return False
        if len(tournament.tournament_data.current_matches) > 0:
            logger.info(f"Tournament {tournament_id} still has open matches, not advancing")
            return True

        working = tournament.model_copy(deep=True)
        data = working.tournament_data
        if data.winner is None:
            advance_to_next_round(data, self.clock())

        ended = data.winner is not None
        if ended:
            self._mark_ended(working, manual=False)
        await self._save(tournament_id, working)

        if ended:
            await self._announce_end(tournament_id, working)
        else:
            await self._push(DisplayMessageType.UPDATE, tournament_id, working)
        return True

    async def recalculate_standings(
        self, tournament_id: TournamentId
    ) -> dict[str, RoundRobinStanding] | None:
        tournament = await self._load(tournament_id)
        if tournament is None or tournament.tournament_data.format != TournamentFormat.ROUND_ROBIN:
            return None

        standings = recalculate_standings(tournament.tournament_data)
        await self._save(tournament_id, tournament)
        return standings

    async def update_settings(
        self, tournament_id: TournamentId, update: TournamentSettingsUpdate
    ) -> bool:
        tournament = await self._load(tournament_id)
        if tournament is None:
            return False

        data = tournament.tournament_data
        previous = data.settings
        merged = _merge_settings(previous, update)

        if merged.format != previous.format:
            logger.info(
                f"Format of {tournament_id} changed from {previous.format} to "
                f"{merged.format}, resetting bracket"
            )
            # The new settings are only stored by the reset, under its lock.
            return await self.reset_tournament_with_undo(
                tournament_id, snapshot_override=tournament, settings=merged
            )

        data.settings = merged

        if (
            data.format == TournamentFormat.ROUND_ROBIN
            and data.settings.round_robin_settings != previous.round_robin_settings
        ):
            recalculate_standings(data)

        await self._save(tournament_id, tournament)
        await self._push(DisplayMessageType.UPDATE, tournament_id, tournament)
        return True

    async def update_styles(self, tournament_id: TournamentId, styles: dict[str, Any]) -> bool:
        tournament = await self._load(tournament_id)
        if tournament is None:
            return False

        tournament.tournament_data.styles = styles
        await self._save(tournament_id, tournament)
        await self._push(DisplayMessageType.UPDATE, tournament_id, tournament)
        return True

    async def update_position(
        self,
        tournament_id: TournamentId,
        position: str,
        custom_coords: CustomCoords | None = None,
    ) -> bool:
        tournament = await self._load(tournament_id)
        if tournament is None:
            return False

        tournament.position = position
        if custom_coords is not None:
            tournament.custom_coords = custom_coords
        await self._save(tournament_id, tournament)
        await self._push(DisplayMessageType.UPDATE, tournament_id, tournament)
        return True

    async def update_overlay_instance(
        self, tournament_id: TournamentId, overlay_instance: str
    ) -> bool:
        tournament = await self._load(tournament_id)
        if tournament is None:
            return False

        tournament.overlay_instance = overlay_instance
        await self._save(tournament_id, tournament)
        await self._push(DisplayMessageType.UPDATE, tournament_id, tournament)
        return True

    async def set_visibility(self, tournament_id: TournamentId, visible: bool) -> bool:
        tournament = await self._load(tournament_id)
        if tournament is None:
            return False

        message_type = DisplayMessageType.SHOW if visible else DisplayMessageType.HIDE
        await self._push(message_type, tournament_id, tournament)
        return True

    async def add_player(self, tournament_id: TournamentId, player_name: str) -> bool:
        name = normalize_player_name(player_name)
        if name is None:
            logger.warning("Player name must not be empty")
            return False
        tournament = await self._load(tournament_id)
        if tournament is None:
            return False

        names = roster_with_player_added(tournament.tournament_data, name)
        if names is None:
            return False
        return await self.reset_tournament_with_undo(tournament_id, player_names=names)

    async def remove_player(self, tournament_id: TournamentId, player_name: str) -> bool:
        name = normalize_player_name(player_name)
        if name is None:
            logger.warning("Player name must not be empty")
            return False
        tournament = await self._load(tournament_id)
        if tournament is None:
            return False

        names = roster_with_player_removed(tournament.tournament_data, name)
        if names is None:
            return False
        if len(names) < MIN_PLAYER_COUNT:
            logger.warning(
                f"Cannot remove {name}, a tournament needs at least {MIN_PLAYER_COUNT} players"
            )
            return False
        return await self.reset_tournament_with_undo(tournament_id, player_names=names)

    async def replace_player(
        self, tournament_id: TournamentId, old_name: str, new_name: str
    ) -> bool:
        old = normalize_player_name(old_name)
        new = normalize_player_name(new_name)
        if old is None or new is None:
            logger.warning("Player names must not be empty")
            return False
        tournament = await self._load(tournament_id)
        if tournament is None:
            return False

        if not rename_player(tournament.tournament_data, old, new):
            return False
        await self._save(tournament_id, tournament)
        await self._push(DisplayMessageType.UPDATE, tournament_id, tournament)
        return True

    async def reset_tournament(
        self,
        tournament_id: TournamentId,
        player_names: list[str] | None = None,
        settings: TournamentSettings | None = None,
    ) -> bool:
        tournament = await self._load(tournament_id)
        if tournament is None:
            return False

        data = tournament.tournament_data
        if settings is not None:
            data.settings = settings
        names = player_names if player_names is not None else roster_names(data)
        tournament.tournament_data = rebuild_tournament_data(data, names, self.rng, self.clock())
        tournament.ended = False
        tournament.paused = False
        tournament.manually_ended = False
        await self._save(tournament_id, tournament)
        logger.info(f"Reset tournament {tournament_id} with {len(names)} players")

        await self._push(
            DisplayMessageType.UPDATE, tournament_id, tournament, ended=False, is_resetting=True
        )
        return True

    async def reset_tournament_with_undo(
        self,
        tournament_id: TournamentId,
        snapshot_override: TournamentState | None = None,
        player_names: list[str] | None = None,
        settings: TournamentSettings | None = None,
    ) -> bool:
        if not self._reset_locks.try_acquire(tournament_id):
            logger.warning(f"Reset already in progress for tournament {tournament_id}")
            return False

        try:
            current = snapshot_override or await self._load(tournament_id)
            if current is None:
                return False

            now = self.clock()
            self._reset_snapshots.remember(tournament_id, current, now)
            self._reset_snapshots.purge_expired(now)

            async def expire_snapshot() -> None:
                self._reset_snapshots.purge_expired(self.clock())

            self.scheduler.call_later(
                self._reset_snapshots.retention.total_seconds(),
                f"expire-reset-snapshot-{tournament_id}",
                expire_snapshot,
            )
            return await self.reset_tournament(tournament_id, player_names, settings)
        finally:
            self._reset_locks.release(tournament_id)

    async def undo_reset(self, tournament_id: TournamentId) -> bool:
        if not self._reset_locks.try_acquire(tournament_id):
            logger.warning(f"Reset in progress for tournament {tournament_id}, cannot undo")
            return False

        try:
            snapshot = self._reset_snapshots.peek(tournament_id, self.clock())
            if snapshot is None:
                logger.info(f"Nothing to undo for tournament {tournament_id}")
                return False

            # Written verbatim, the restored document is identical to the one before the reset.
            await sql_save_tournament(self.store, tournament_id, snapshot)
            self._reset_snapshots.discard(tournament_id)
            logger.info(f"Undid reset of tournament {tournament_id}")
        finally:
            self._reset_locks.release(tournament_id)

        await self._push(DisplayMessageType.UPDATE, tournament_id, snapshot)
        return True

    async def can_undo_reset(self, tournament_id: TournamentId) -> bool:
        return self._reset_snapshots.peek(tournament_id, self.clock()) is not None

    async def backup_tournament(self, tournament_id: TournamentId) -> BackupId | None:
        tournament = await self._load(tournament_id)
        if tournament is None:
            return None

        now = self.clock()
        backup_id = build_backup_id(tournament_id, int(now.timestamp() * 1000))
        backup = BackupTournament.model_validate({**tournament.model_dump(), "removed_at": now})
        await sql_create_backup(self.store, backup_id, backup)
        logger.info(f"Backed up tournament {tournament_id} as {backup_id}")
        return backup_id

    async def remove_tournament(self, tournament_id: TournamentId) -> bool:
        tournament = await self._load(tournament_id)
        if tournament is None:
            return False

        if await self.backup_tournament(tournament_id) is None:
            return False
        await sql_delete_tournament(self.store, tournament_id)
        logger.info(f"Removed tournament {tournament_id}")

        await self._push(DisplayMessageType.REMOVE, tournament_id, tournament)
        return True

    async def get_backup_tournaments(self) -> list[BackupTournament]:
        backups = await sql_get_backups(self.store)
        return sorted(backups, key=lambda backup: backup.removed_at, reverse=True)

    async def get_backup_tournament(self, backup_id: BackupId) -> BackupTournament | None:
        if BACKUP_ID_SEPARATOR in backup_id:
            return await sql_get_backup(self.store, backup_id)
        return await sql_get_latest_backup_for_tournament(self.store, TournamentId(backup_id))

    async def remove_backup_tournament(self, backup_id: BackupId) -> bool:
        if await sql_get_backup(self.store, backup_id) is None:
            logger.warning(f"Backup not found: {backup_id}")
            return False

        await sql_delete_backup(self.store, backup_id)
        return True

    async def restore_tournament(self, backup_id: BackupId, overwrite: bool = False) -> bool:
        """
        Put a backup back into the live set under its original tournament id.

        `backup_id` may also be a bare tournament id, in which case its most recent backup is
        used. An existing live tournament is only replaced when `overwrite` is set.
        """
        backup = await self.get_backup_tournament(backup_id)
        if backup is None:
            logger.warning(f"No backup found for: {backup_id}")
            return False

        resolved_backup_id = assert_some(backup.id)
        tournament_id = tournament_id_of_backup(resolved_backup_id)
        if not overwrite and await self.check_tournament_exists(tournament_id):
            logger.warning(
                f"Tournament {tournament_id} already exists, not restoring {resolved_backup_id}"
            )
            return False
        if not self._reset_locks.try_acquire(tournament_id):
            logger.warning(f"Reset in progress for tournament {tournament_id}, cannot restore")
            return False

        try:
            tournament = backup.to_tournament_state()
            await sql_save_tournament(self.store, tournament_id, tournament)
            await sql_delete_backup(self.store, resolved_backup_id)
            logger.info(f"Restored tournament {tournament_id} from {resolved_backup_id}")
        finally:
            self._reset_locks.release(tournament_id)

        await self._push(DisplayMessageType.UPDATE, tournament_id, tournament)
        return True

    async def cleanup_old_backups(self) -> CleanupReport:
        now = self.clock()

        backups_removed = 0
        for backup in await sql_get_backups(self.store):
            if backup.id is not None and backup_is_expired(backup, now, self.backup_retention):
                await sql_delete_backup(self.store, backup.id)
                backups_removed += 1

        tournaments_removed = 0
        for tournament_id, tournament in (await sql_get_tournaments(self.store)).items():
            if ended_tournament_is_expired(tournament, now, self.ended_retention):
                await sql_delete_tournament(self.store, tournament_id)
                tournaments_removed += 1

        self._reset_snapshots.purge_expired(now)
        logger.info(
            f"Cleanup removed {backups_removed} backups and {tournaments_removed} ended tournaments"
        )
        return CleanupReport(backups_removed, tournaments_removed)

    async def get_status(self, tournament_id: TournamentId) -> str:
        tournament = await self.get_tournament(tournament_id)
        if tournament is None:
            return TOURNAMENT_NOT_FOUND
        return get_status_text(tournament.tournament_data)

    async def get_current_match(self, tournament_id: TournamentId) -> Match | None:
        tournament = await self.get_tournament(tournament_id)
        if tournament is None:
            return None
        return get_current_match(tournament.tournament_data)
