"""WebSocket endpoint and ConnectionManager. Route: /ws (hold/transition events)."""
import asyncio
import json
import logging
from typing import Any, Dict, Iterable, Set

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

router = APIRouter(tags=["ws"])
logger = logging.getLogger(__name__)


class ConnectionManager:
	def __init__(self) -> None:
		self._clients: Set[WebSocket] = set()
		self._lock = asyncio.Lock()

	async def connect(self, websocket: WebSocket) -> None:
		await websocket.accept()
		async with self._lock:
			self._clients.add(websocket)

	async def disconnect(self, websocket: WebSocket) -> None:
		async with self._lock:
			self._clients.discard(websocket)

	@property
	def client_count(self) -> int:
		return len(self._clients)

	async def broadcast_json(self, message: Dict[str, Any]) -> None:
		payload = json.dumps(message, separators=(",", ":"))
		async with self._lock:
			clients = list(self._clients)
		if not clients:
			return
		results = await asyncio.gather(*(self._send(ws, payload) for ws in clients), return_exceptions=True)
		for ws, ok in zip(clients, results):
			if ok is not True:
				await self.disconnect(ws)

	async def broadcast_events(self, events: Iterable[Dict[str, Any]]) -> None:
		for ev in events:
			await self.broadcast_json(ev)

	@staticmethod
	async def _send(ws: WebSocket, payload: str) -> bool:
		try:
			await ws.send_text(payload)
			return True
		except (WebSocketDisconnect, RuntimeError) as e:
			logger.debug("[WS] Dropping client after send failure: %r", e)
			try:
				await ws.close()
			except RuntimeError:
				pass
			return False


@router.websocket("/ws")
async def ws_endpoint(websocket: WebSocket):
	manager: ConnectionManager = websocket.app.state.state.manager
	await manager.connect(websocket)
	try:
		while True:
			await websocket.receive_text()
	except WebSocketDisconnect:
		pass
	finally:
		await manager.disconnect(websocket)
