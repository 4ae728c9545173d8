import asyncio
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from livebracket.models.db.tournament import Match, TournamentState
from livebracket.utils.id_types import TournamentId, display_title_of
from livebracket.utils.logging import logger
from livebracket.utils.types import EnumAutoStr

DISPLAY_CHANNEL = "tournament-updater"


class DisplayMessageType(EnumAutoStr):
    UPDATE = "update"
    REMOVE = "remove"
    HIDE = "hide"
    SHOW = "show"
    DRAW_NOTIFICATION = "draw-notification"


class OverlayConfig(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    tournament_id: str
    tournament_title: str
    tournament_data: dict[str, Any] | None = None
    styles: dict[str, Any] | None = None
    settings: dict[str, Any] | None = None
    position: str | None = None
    custom_coords: dict[str, Any] | None = None
    ended: bool | None = None
    is_resetting: bool | None = None
    match_number: int | None = None
    player1: str | None = None
    player2: str | None = None
    handling: str | None = None
    message: str | None = None


class DisplayMessage(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: DisplayMessageType
    overlay_instance: str
    config: OverlayConfig

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DisplayChannel(Protocol):
    async def push(self, channel: str, message: DisplayMessage) -> None: ...


def build_overlay_config(tournament_id: TournamentId, state: TournamentState) -> OverlayConfig:
    data = state.tournament_data
    return OverlayConfig(
        tournament_id=tournament_id,
        tournament_title=display_title_of(tournament_id),
        tournament_data=data.model_dump(mode="json"),
        styles=data.styles,
        settings=data.settings.model_dump(mode="json"),
        position=state.position,
        custom_coords=state.custom_coords.model_dump(mode="json"),
    )


def build_display_message(
    message_type: DisplayMessageType,
    tournament_id: TournamentId,
    state: TournamentState,
    **flags: bool,
) -> DisplayMessage:
    if message_type in (DisplayMessageType.UPDATE, DisplayMessageType.SHOW):
        config = build_overlay_config(tournament_id, state).model_copy(update=flags)
    else:
        config = OverlayConfig(
            tournament_id=tournament_id, tournament_title=display_title_of(tournament_id)
        )
    return DisplayMessage(
        type=message_type, overlay_instance=state.overlay_instance, config=config
    )


class BroadcastDisplayChannel:
    """Fans display messages out to every connected overlay, one queue per subscriber."""

    def __init__(self) -> None:
        self._subscribers: set[asyncio.Queue[dict[str, Any]]] = set()

    def subscribe(self) -> asyncio.Queue[dict[str, Any]]:
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[dict[str, Any]]) -> None:
        self._subscribers.discard(queue)

    async def push(self, channel: str, message: DisplayMessage) -> None:
        payload = {"channel": channel, **message.to_payload()}
        for queue in list(self._subscribers):
            queue.put_nowait(payload)


async def push_display(
    display: DisplayChannel,
    message_type: DisplayMessageType,
    tournament_id: TournamentId,
    state: TournamentState,
    **flags: bool,
) -> None:
    try:
        await display.push(
            DISPLAY_CHANNEL, build_display_message(message_type, tournament_id, state, **flags)
        )
    except Exception as exc:
        logger.error(f"Could not push {message_type} for {tournament_id} to display: {exc}")


async def push_draw_notification(
    display: DisplayChannel,
    tournament_id: TournamentId,
    state: TournamentState,
    match: Match,
    handling: str,
    message: str,
) -> None:
    config = OverlayConfig(
        tournament_id=tournament_id,
        tournament_title=display_title_of(tournament_id),
        match_number=match.match_number,
        player1=match.player1,
        player2=match.player2,
        handling=handling,
        message=message,
    )
    try:
        await display.push(
            DISPLAY_CHANNEL,
            DisplayMessage(
                type=DisplayMessageType.DRAW_NOTIFICATION,
                overlay_instance=state.overlay_instance,
                config=config,
            ),
        )
    except Exception as exc:
        logger.error(f"Could not push draw notification for {tournament_id}: {exc}")
