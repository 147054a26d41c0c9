"""Room-based fan-out of realtime events to connected websockets."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Set

from fastapi import WebSocket

LOGGER = logging.getLogger(__name__)


def encode_frame(event: str, payload: Any = None) -> str:
	"""Serialize one outbound frame; NaN and Infinity raise ValueError since browsers cannot parse them."""
	return json.dumps({"type": event, "data": payload}, allow_nan=False)


class RoomHub:
	"""Track connected clients and the stream rooms they joined.

	Sends happen one after another on the event loop, so frames with the
	same event name reach a room in the order they were broadcast.
	"""

	def __init__(self) -> None:
		self._clients: Dict[str, WebSocket] = {}
		self._rooms: Dict[str, Set[str]] = {}

	def connect(self, client_id: str, websocket: WebSocket) -> None:
		self._clients[client_id] = websocket

	def join(self, client_id: str, stream_id: str) -> None:
		"""Add a connected client to a stream room."""
		if client_id not in self._clients:
			raise KeyError(f"Client {client_id} is not connected")
		self._rooms.setdefault(stream_id, set()).add(client_id)
		LOGGER.info("Client %s joined stream %s", client_id, stream_id)

	def disconnect(self, client_id: str) -> None:
		"""Forget a client and remove it from every room."""
		self._clients.pop(client_id, None)
		for stream_id in list(self._rooms):
			members = self._rooms[stream_id]
			members.discard(client_id)
			if not members:
				del self._rooms[stream_id]

	def members(self, stream_id: str) -> List[str]:
		return sorted(self._rooms.get(stream_id, ()))

	def is_connected(self, client_id: str) -> bool:
		return client_id in self._clients

	async def broadcast(self, stream_id: str, event: str, payload: Any = None) -> int:
		"""Deliver one event to every member of ``stream_id``; returns the delivery count."""
		frame = encode_frame(event, payload)
		delivered = 0
		for client_id in self.members(stream_id):
			if await self._deliver(client_id, frame):
				delivered += 1
		return delivered

	async def send(self, client_id: str, event: str, payload: Any = None) -> bool:
		"""Deliver an event to a single client, used for sender-only replies."""
		return await self._deliver(client_id, encode_frame(event, payload))

	async def send_error(self, client_id: str, detail: str) -> bool:
		return await self._deliver(client_id, json.dumps({"type": "error", "detail": detail}))

	async def _deliver(self, client_id: str, frame: str) -> bool:
		websocket = self._clients.get(client_id)
		if websocket is None:
			return False
		try:
			await websocket.send_text(frame)
		except Exception as exc:
			LOGGER.warning("Dropping client %s after failed send: %s", client_id, exc)
			self.disconnect(client_id)
			return False
		return True
