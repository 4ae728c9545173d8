from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from livebracket.config import config
from livebracket.notifications.display import BroadcastDisplayChannel
from livebracket.utils.logging import logger

router = APIRouter(prefix=config.api_prefix)


@router.websocket("/overlay")
async def overlay_updates(websocket: WebSocket) -> None:
    display: BroadcastDisplayChannel = websocket.app.state.display_channel
    await websocket.accept()
    queue = display.subscribe()
    logger.info("Overlay connected")
    try:
        while True:
            await websocket.send_json(await queue.get())
    except WebSocketDisconnect:
        logger.info("Overlay disconnected")
    finally:
        display.unsubscribe(queue)
