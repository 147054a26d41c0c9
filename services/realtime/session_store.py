"""Simple in-memory registry of active stream sessions."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from models.session_models import StreamSession

LOGGER = logging.getLogger(__name__)


class SessionRegistry:
	"""Own the stream-id -> session map and each session's lifecycle.

	Only the event loop thread touches the registry, so no locking is done.
	"""

	def __init__(self) -> None:
		self._sessions: Dict[str, StreamSession] = {}

	def exists(self, session_id: str) -> bool:
		return session_id in self._sessions

	def create(self, session_id: str, display_name: str = "Streamer") -> StreamSession:
		"""Return the session for ``session_id``, creating it only when absent."""
		state = self._sessions.get(session_id)
		if state is not None:
			return state
		state = StreamSession(session_id=session_id, display_name=display_name)
		self._sessions[session_id] = state
		LOGGER.info("Session %s created", session_id)
		return state

	def get(self, session_id: str) -> StreamSession:
		"""Return a session or raise KeyError if missing."""
		state = self._sessions.get(session_id)
		if state is None:
			raise KeyError(f"Stream {session_id} not found")
		return state

	def update(self, session_id: str, mutator: Callable[[StreamSession], None]) -> StreamSession:
		"""Apply ``mutator`` to an existing session and return it."""
		state = self.get(session_id)
		mutator(state)
		return state

	def destroy(self, session_id: str) -> Optional[StreamSession]:
		"""Remove a session and cancel its timers in one step; None if it did not exist."""
		state = self._sessions.pop(session_id, None)
		if state is None:
			return None
		state.active = False
		state.cancel_tasks()
		LOGGER.info("Session %s destroyed", session_id)
		return state

	def is_current(self, state: StreamSession) -> bool:
		"""True while ``state`` is still the registered session for its id."""
		return self._sessions.get(state.session_id) is state

	def list(self) -> List[StreamSession]:
		return list(self._sessions.values())

	def clear(self) -> None:
		for session_id in list(self._sessions):
			self.destroy(session_id)
