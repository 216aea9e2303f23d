"""WebSocket endpoints: /ws/echo replies to the sender, /ws/chat broadcasts to everyone connected."""
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from routemeter.settings import settings

logger = logging.getLogger("routemeter.chat")

router = APIRouter(prefix="/ws", tags=["ws"])


async def _receive_text(websocket: WebSocket) -> str | None:
    """Next text frame, or None for a binary frame. Raises WebSocketDisconnect when the peer leaves."""
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE), message.get("reason"))
    return message.get("text")


def _close_code(message: str | None) -> int | None:
    """Close code for a frame the endpoints refuse, or None if it is acceptable."""
    if message is None:
        return status.WS_1003_UNSUPPORTED_DATA
    if len(message.encode("utf-8")) > settings.CHAT_MAX_MESSAGE_BYTES:
        return status.WS_1009_MESSAGE_TOO_BIG
    return None


@router.websocket("/echo")
async def echo(websocket: WebSocket):
    await websocket.accept()
    try:
        while True:
            message = await _receive_text(websocket)
            code = _close_code(message)
            if code is not None:
                await websocket.close(code=code)
                return
            await websocket.send_text(message)
    except WebSocketDisconnect:
        logger.debug("echo client disconnected")


@router.websocket("/chat")
async def chat(websocket: WebSocket):
    hub = websocket.app.state.chat
    total = await hub.connect(websocket)
    try:
        # Sent after registration, so the client knows it will see broadcasts from here on
        await websocket.send_text(f"welcome: {total} client(s) connected")
        while True:
            message = await _receive_text(websocket)
            code = _close_code(message)
            if code is not None:
                # leave the hub before the close frame goes out
                await hub.disconnect(websocket)
                await websocket.close(code=code)
                return
            await hub.broadcast(message)
    except WebSocketDisconnect:
        logger.debug("chat client left")
    finally:
        await hub.disconnect(websocket)
