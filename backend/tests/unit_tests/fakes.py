import random
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from heliclockter import datetime_utc

from livebracket.manager import TournamentManager
from livebracket.models.db.tournament import Match, TournamentSettings, TournamentState
from livebracket.notifications.display import DisplayMessage, DisplayMessageType
from livebracket.stores.memory import InMemoryDocumentStore
from livebracket.utils.id_types import TournamentId, tournament_id_from_title
from livebracket.utils.timers import TimedCallback
from livebracket.utils.types import assert_some

MOCK_TIME = datetime(2026, 3, 14, 18, 30, 0, tzinfo=timezone.utc)
PLAYER_NAMES = ["Ada", "Bram", "Cleo", "Dex", "Eli", "Fay", "Gus", "Hana", "Ivo", "Jun", "Kai"]


class FakeClock:
    def __init__(self, start: datetime = MOCK_TIME) -> None:
        self._now = start

    def __call__(self) -> datetime_utc:
        return datetime_utc.from_datetime(self._now)

    def advance(self, **kwargs: float) -> None:
        self._now += timedelta(**kwargs)


class RecordingEventSink:
    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict[str, Any]]] = []

    async def emit(self, source_id: str, event_id: str, payload: dict[str, Any]) -> None:
        self.events.append((source_id, event_id, payload))

    def payloads(self, event_id: str) -> list[dict[str, Any]]:
        return [payload for _, emitted_id, payload in self.events if emitted_id == event_id]


class RecordingDisplayChannel:
    def __init__(self) -> None:
        self.messages: list[tuple[str, DisplayMessage]] = []

    async def push(self, channel: str, message: DisplayMessage) -> None:
        self.messages.append((channel, message))

    def types(self) -> list[DisplayMessageType]:
        return [message.type for _, message in self.messages]


class ManualScheduler:
    def __init__(self) -> None:
        self.pending: list[tuple[float, str, TimedCallback]] = []

    def call_later(self, delay_seconds: float, name: str, callback: TimedCallback) -> None:
        self.pending.append((delay_seconds, name, callback))

    def delays(self, name_prefix: str) -> list[float]:
        return [delay for delay, name, _ in self.pending if name.startswith(name_prefix)]

    async def run(self, name_prefix: str) -> int:
        due = [entry for entry in self.pending if entry[1].startswith(name_prefix)]
        self.pending = [entry for entry in self.pending if not entry[1].startswith(name_prefix)]
        for _, _, callback in due:
            await callback()
        return len(due)


class ManagerHarness:
    def __init__(self, seed: int = 7) -> None:
        self.store = InMemoryDocumentStore()
        self.events = RecordingEventSink()
        self.display = RecordingDisplayChannel()
        self.scheduler = ManualScheduler()
        self.clock = FakeClock()
        self.manager = TournamentManager(
            self.store,
            self.events,
            self.display,
            self.scheduler,
            rng=random.Random(seed),
            clock=self.clock,
        )

    async def create(
        self, player_count: int, settings: TournamentSettings, title: str = "Test Cup"
    ) -> TournamentId:
        created = await self.manager.create_tournament(
            title, PLAYER_NAMES[:player_count], settings=settings
        )
        assert created is not None
        return tournament_id_from_title(title)

    async def state(self, tournament_id: TournamentId) -> TournamentState:
        return assert_some(await self.manager.get_tournament(tournament_id))

    async def first_open_match(self, tournament_id: TournamentId) -> Match:
        return (await self.state(tournament_id)).tournament_data.current_matches[0]

    async def play_to_completion(
        self,
        tournament_id: TournamentId,
        pick: Callable[[Match], int | str],
        check: Callable[[TournamentState], None] | None = None,
        max_results: int = 200,
    ) -> TournamentState:
        for _ in range(max_results):
            state = await self.state(tournament_id)
            if state.ended:
                return state
            match = state.tournament_data.current_matches[0]
            assert await self.manager.set_match_winner(tournament_id, match.id, pick(match))
            if check is not None:
                check(await self.state(tournament_id))
        raise AssertionError(f"{tournament_id} did not finish after {max_results} results")
