from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from livebracket.utils.logging import logger

EVENT_SOURCE_ID = "livebracket:tournament-system"
TOURNAMENT_STARTED_EVENT = "tournamentStart"
MATCH_UPDATED_EVENT = "tournamentMatchUpdate"
TOURNAMENT_ENDED_EVENT = "tournamentEnd"


class EventSink(Protocol):
    async def emit(self, source_id: str, event_id: str, payload: dict[str, Any]) -> None: ...


class EventPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    tournament_id: str
    title: str


class TournamentStartedEvent(EventPayload):
    players: list[str]


class MatchUpdatedEvent(EventPayload):
    match_number: int
    player1: str
    player2: str
    winner: str
    bracket_stage: str
    round: int
    is_draw: bool = False
    draw_handling: str | None = None


class TournamentEndedEvent(EventPayload):
    winner: str
    matches_played: int
    duration: int


class LoggingEventSink:
    """Event sink that only writes events to the log, used when no transport is wired up."""

    async def emit(self, source_id: str, event_id: str, payload: dict[str, Any]) -> None:
        logger.info(f"Event {source_id}/{event_id}: {payload}")


async def emit_event(sink: EventSink, event_id: str, payload: EventPayload) -> None:
    try:
        await sink.emit(EVENT_SOURCE_ID, event_id, payload.model_dump(by_alias=True))
    except Exception as exc:
        logger.error(f"Could not emit event {event_id}: {exc}")
