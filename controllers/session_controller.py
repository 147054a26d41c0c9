"""Read-only stream session helpers for the HTTP surface."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import HTTPException, Request

from services.realtime.session_store import SessionRegistry


async def list_streams(request: Request) -> List[Dict[str, Any]]:
	"""Return a summary of every active stream."""
	registry: SessionRegistry = request.app.state.session_registry
	return [state.summary() for state in registry.list()]


async def get_stream(request: Request, stream_id: str) -> Dict[str, Any]:
	"""Return one stream or a 404 when it is not active."""
	registry: SessionRegistry = request.app.state.session_registry
	try:
		state = registry.get(stream_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail="Stream not found") from exc
	return state.summary()
