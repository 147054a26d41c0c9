"""Session domain models for simulated live streams."""

from __future__ import annotations

import asyncio
import itertools
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set, Tuple

from models.face_record import EnrolledFace

_event_ids = itertools.count(int(time.time() * 1000))


def next_event_id() -> int:
	"""Return a process-unique, increasing chat event id."""
	return next(_event_ids)


@dataclass(frozen=True)
class Persona:
	"""A synthetic viewer identity shared read-only by every stream."""

	name: str
	voice_profile: str
	emoji: str
	aliases: Tuple[str, ...] = ()


@dataclass
class ChatEvent:
	"""One chat line delivered to a stream room."""

	username: str
	message: str
	id: int = field(default_factory=next_event_id)
	timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
	emoji: Optional[str] = None
	is_synthetic: bool = False
	is_real: bool = False
	is_system: bool = False
	is_donation: bool = False
	is_contextual: bool = False
	is_fallback: bool = False
	based_on_speech: Optional[str] = None

	def to_payload(self) -> Dict[str, Any]:
		"""Return the wire representation used by the browser client."""
		payload: Dict[str, Any] = {
			"id": self.id,
			"username": self.username,
			"message": self.message,
			"timestamp": self.timestamp,
			"isSynthetic": self.is_synthetic,
			"isReal": self.is_real,
			"isSystem": self.is_system,
			"isDonation": self.is_donation,
			"isContextual": self.is_contextual,
			"isFallback": self.is_fallback,
		}
		if self.emoji:
			payload["emoji"] = self.emoji
		if self.based_on_speech:
			payload["basedOnSpeech"] = self.based_on_speech
		return payload


@dataclass
class StreamSession:
	"""In-memory state for one active simulated stream."""

	session_id: str
	display_name: str = "Streamer"
	active: bool = True
	audience_size: int = 0
	known_present_faces: Set[str] = field(default_factory=set)
	last_mention_at: Optional[float] = None
	gallery: List[EnrolledFace] = field(default_factory=list)
	created_at: float = field(default_factory=lambda: time.time())
	idle_task: Optional[asyncio.Task] = field(default=None, repr=False)
	pending_tasks: Set[asyncio.Task] = field(default_factory=set, repr=False)

	def track(self, task: asyncio.Task) -> asyncio.Task:
		"""Keep a reference to background work so it can be canceled with the session."""
		self.pending_tasks.add(task)
		task.add_done_callback(self.pending_tasks.discard)
		return task

	def cancel_tasks(self) -> None:
		"""Cancel the idle timer and every outstanding burst or greeting."""
		if self.idle_task is not None:
			self.idle_task.cancel()
			self.idle_task = None
		for task in list(self.pending_tasks):
			task.cancel()
		self.pending_tasks.clear()

	def summary(self) -> Dict[str, Any]:
		"""Return a JSON-friendly view for the HTTP surface."""
		return {
			"id": self.session_id,
			"display_name": self.display_name,
			"active": self.active,
			"audience_size": self.audience_size,
			"known_present_faces": sorted(self.known_present_faces),
			"created_at": self.created_at,
		}
