"""Dispatch realtime websocket events to the hub and the audience scheduler."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from services.realtime.audience_scheduler import AudienceScheduler
from services.realtime.room_hub import RoomHub

LOGGER = logging.getLogger(__name__)


def _stream_id(data: Any) -> str:
	"""Accept either a bare stream id or an object carrying ``streamId``."""
	if isinstance(data, dict):
		value = data.get("streamId") or data.get("stream_id")
	else:
		value = data
	stream_id = str(value).strip() if value is not None else ""
	if not stream_id:
		raise ValueError("streamId is required.")
	return stream_id


def _object(data: Any) -> Dict[str, Any]:
	if not isinstance(data, dict):
		raise ValueError("Event payload must be an object.")
	return data


def _confidence(data: Dict[str, Any]) -> Optional[float]:
	value = data.get("confidence")
	if value is None:
		return None
	try:
		return float(value)
	except (TypeError, ValueError) as exc:
		raise ValueError("confidence must be a number.") from exc


class RealtimeSessionHandler:
	"""Route websocket frames from one connected client."""

	def __init__(self, hub: RoomHub, scheduler: AudienceScheduler) -> None:
		self.hub = hub
		self.scheduler = scheduler

	async def handle(self, client_id: str, payload: Dict[str, Any]) -> None:
		"""Process a single inbound frame; problems are reported to the sender only."""
		message_type = payload.get("type")
		data = payload.get("data")
		try:
			if message_type == "join-stream":
				await self._join(client_id, _stream_id(data))
			elif message_type == "start-fake-audience":
				await self.scheduler.start(_stream_id(data))
			elif message_type == "stop-fake-audience":
				await self.scheduler.stop(_stream_id(data))
			elif message_type == "speech-detected":
				body = _object(data)
				self.scheduler.on_speech(_stream_id(body), body.get("speechContent"), _confidence(body))
			elif message_type == "face-detected":
				body = _object(data)
				await self.scheduler.on_face_detected(_stream_id(body), body)
			elif message_type == "face-left":
				body = _object(data)
				await self.scheduler.on_face_left(_stream_id(body), body)
			elif message_type == "faces-left":
				body = _object(data)
				await self.scheduler.on_faces_left(_stream_id(body), body)
			elif message_type == "current-faces":
				body = _object(data)
				await self.scheduler.on_current_faces(_stream_id(body), body)
			elif message_type == "chat-message":
				body = _object(data)
				await self.scheduler.relay_chat(_stream_id(body), body.get("username"), body.get("message"))
			elif message_type == "update-streamer-name":
				body = _object(data)
				self.scheduler.update_streamer_name(_stream_id(body), body.get("streamerName"))
			else:
				raise ValueError("Unsupported message type.")
		except Exception as exc:
			LOGGER.debug("Rejected %s frame from %s: %s", message_type, client_id, exc)
			await self.hub.send_error(client_id, str(exc))

	async def _join(self, client_id: str, stream_id: str) -> None:
		self.hub.join(client_id, stream_id)
		registry = self.scheduler.registry
		if registry.exists(stream_id):
			await self.hub.send(client_id, "audience-update", registry.get(stream_id).audience_size)
