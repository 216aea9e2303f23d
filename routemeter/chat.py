"""In-memory WebSocket chat hub: tracks connected clients and broadcasts text frames. Not distributed."""
import asyncio
import logging

from fastapi import WebSocket

logger = logging.getLogger("routemeter.chat")


class ChatHub:
    def __init__(self) -> None:
        self._clients: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> int:
        await websocket.accept()
        async with self._lock:
            self._clients.add(websocket)
            total = len(self._clients)
        logger.info("chat client connected clients=%s", total)
        return total

    async def disconnect(self, websocket: WebSocket) -> None:
        """Remove a client. Safe to call more than once for the same socket."""
        async with self._lock:
            if websocket not in self._clients:
                return
            self._clients.discard(websocket)
            total = len(self._clients)
        logger.info("chat client disconnected clients=%s", total)

    async def broadcast(self, message: str) -> int:
        """
        Send message to every connected client. Return how many received it.
        A client whose send fails is dropped; the rest still get the message.
        """
        async with self._lock:
            clients = list(self._clients)
        delivered = 0
        for client in clients:
            try:
                await client.send_text(message)
                delivered += 1
            except Exception as e:
                logger.warning("chat send failed, dropping client: %s", e)
                await self.disconnect(client)
        return delivered

    @property
    def client_count(self) -> int:
        return len(self._clients)
