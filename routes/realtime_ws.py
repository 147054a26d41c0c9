"""WebSocket endpoint for the stream rooms."""

from __future__ import annotations

import json
import logging
from uuid import uuid4

from fastapi import APIRouter, WebSocket
from starlette.websockets import WebSocketDisconnect

from services.realtime.ws_session import RealtimeSessionHandler

router = APIRouter()
LOGGER = logging.getLogger(__name__)


@router.websocket("/ws")
async def realtime_socket(websocket: WebSocket):
	"""Handle join, control, and trigger events for one connected browser."""
	await websocket.accept()
	hub = websocket.app.state.room_hub
	client_id = uuid4().hex
	hub.connect(client_id, websocket)
	LOGGER.info("Client %s connected", client_id)

	handler = RealtimeSessionHandler(hub, websocket.app.state.audience_scheduler)
	try:
		while True:
			try:
				raw = await websocket.receive_text()
			except WebSocketDisconnect:
				break
			try:
				payload = json.loads(raw)
			except ValueError:
				await hub.send_error(client_id, "Payload must be JSON")
				continue
			if not isinstance(payload, dict):
				await hub.send_error(client_id, "Payload must be a JSON object")
				continue
			await handler.handle(client_id, payload)
	finally:
		hub.disconnect(client_id)
		LOGGER.info("Client %s disconnected", client_id)
