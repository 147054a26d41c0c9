"""Decide when synthetic viewers talk and push their lines to the stream room.

Every stream moves through three states: no session, an active session
with a running idle-chatter timer, and destroyed (timer canceled, session
removed). All registry mutation happens on the event loop; the only
concurrency is the fan-out of completion calls inside a burst, whose
results are gathered back before anything is broadcast.
"""
from __future__ import annotations

import asyncio
import logging
import random
import time
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence

from models.face_record import EnrolledFace
from models.session_models import ChatEvent, Persona, StreamSession
from services.realtime.audience_config import AudienceConfig
from services.realtime.chat_policy import FALLBACK_LINE
from services.realtime.face_matcher import UNKNOWN_LABEL, match
from services.realtime.mention_detector import detect_mentions
from services.realtime.personas import IDLE_TOPICS, PERSONAS
from services.realtime.prompts import idle_trigger, welcome_trigger
from services.realtime.response_generator import ChatResponseGenerator
from services.realtime.room_hub import RoomHub
from services.realtime.session_store import SessionRegistry
from utils.descriptor_validation import ensure_descriptor

LOGGER = logging.getLogger(__name__)

GalleryLoader = Callable[[], Awaitable[Iterable[EnrolledFace]]]
_UNKNOWN_NAMES = {"", "unknown", "unknown person"}


def is_unknown(person: Optional[str]) -> bool:
	return (person or "").strip().lower() in _UNKNOWN_NAMES


class AudienceScheduler:
	"""Drive idle chatter, speech bursts, and face greetings for every stream."""

	def __init__(
		self,
		registry: SessionRegistry,
		hub: RoomHub,
		generator: ChatResponseGenerator,
		config: Optional[AudienceConfig] = None,
		catalogue: Optional[Sequence[Persona]] = None,
		gallery_loader: Optional[GalleryLoader] = None,
		rng: Optional[random.Random] = None,
		clock: Callable[[], float] = time.monotonic,
	) -> None:
		self.registry = registry
		self.hub = hub
		self.generator = generator
		self.config = config or AudienceConfig()
		self.catalogue: List[Persona] = list(catalogue or PERSONAS)
		if not self.catalogue:
			raise ValueError("Persona catalogue must not be empty.")
		self.gallery_loader = gallery_loader
		self._rng = rng or random.Random()
		self._clock = clock

	# lifecycle

	async def start(self, stream_id: str) -> StreamSession:
		"""Activate a stream; a repeated start returns the existing session untouched."""
		if self.registry.exists(stream_id):
			LOGGER.debug("Stream %s already active; ignoring start", stream_id)
			return self.registry.get(stream_id)

		state = self.registry.create(stream_id)
		state.audience_size = self.config.audience_initial
		state.idle_task = asyncio.create_task(self._idle_loop(state))

		if self.gallery_loader is not None:
			try:
				state.gallery = list(await self.gallery_loader())
			except Exception:
				LOGGER.exception("Failed to load face gallery for stream %s", stream_id)

		if self.registry.is_current(state):
			await self.hub.broadcast(stream_id, "audience-update", state.audience_size)
		return state

	async def stop(self, stream_id: str) -> bool:
		"""Destroy a stream's session; unknown ids are a no-op."""
		if self.registry.destroy(stream_id) is None:
			return False
		await self.hub.broadcast(stream_id, "stream-stopped")
		return True

	def shutdown(self) -> None:
		self.registry.clear()

	async def close(self) -> None:
		"""Destroy every session and wait for its canceled work to unwind."""
		tasks = []
		for state in self.registry.list():
			if state.idle_task is not None:
				tasks.append(state.idle_task)
			tasks.extend(state.pending_tasks)
		self.shutdown()
		if tasks:
			await asyncio.gather(*tasks, return_exceptions=True)

	def update_streamer_name(self, stream_id: str, streamer_name: str) -> bool:
		name = (streamer_name or "").strip()
		if not name or not self.registry.exists(stream_id):
			return False
		self.registry.update(stream_id, lambda state: setattr(state, "display_name", name))
		return True

	# policy helpers

	def in_cooldown(self, state: StreamSession) -> bool:
		"""True while a recent persona mention keeps idle chatter quiet."""
		if state.last_mention_at is None:
			return False
		return (self._clock() - state.last_mention_at) < self.config.mention_cooldown_seconds

	def accepts_transcript(self, text: Optional[str], confidence: Optional[float]) -> bool:
		if confidence is not None and confidence < self.config.min_speech_confidence:
			return False
		return len((text or "").strip()) >= self.config.min_speech_length

	def pick_personas(self, count: int) -> List[Persona]:
		"""Return up to ``count`` distinct random personas."""
		return self._rng.sample(self.catalogue, min(count, len(self.catalogue)))

	def next_audience_size(self, current: int) -> int:
		step = self.config.audience_walk_step
		return self.config.clamp_audience(current + self._rng.randint(-step, step))

	# idle chatter

	async def _idle_loop(self, state: StreamSession) -> None:
		while self.registry.is_current(state):
			await asyncio.sleep(self._rng.uniform(self.config.idle_min_seconds, self.config.idle_max_seconds))
			if not self.registry.is_current(state):
				return
			if self.in_cooldown(state):
				LOGGER.debug("Idle chatter for %s suppressed by mention cooldown", state.session_id)
				continue
			try:
				await self._idle_tick(state)
			except Exception:
				LOGGER.exception("Idle chatter tick failed for stream %s", state.session_id)

	async def _idle_tick(self, state: StreamSession) -> None:
		persona = self._rng.choice(self.catalogue)
		topic = self._rng.choice(IDLE_TOPICS)
		line = await self.generator.generate(state.display_name, persona, idle_trigger(topic))
		if not self.registry.is_current(state) or self.in_cooldown(state):
			return
		event = self._chat_event(persona, line, is_fallback=line == FALLBACK_LINE)
		await self.hub.broadcast(state.session_id, "fake-chat-message", event.to_payload())

		if not self.registry.is_current(state):
			return
		state.audience_size = self.next_audience_size(state.audience_size)
		await self.hub.broadcast(state.session_id, "audience-update", state.audience_size)

	# speech bursts

	def on_speech(self, stream_id: str, text: Optional[str], confidence: Optional[float] = None) -> Optional[asyncio.Task]:
		"""Schedule a response burst for a transcript; None when the transcript is dropped."""
		if not self.registry.exists(stream_id):
			return None
		if not self.accepts_transcript(text, confidence):
			LOGGER.debug("Dropping weak transcript for %s (confidence=%s)", stream_id, confidence)
			return None

		state = self.registry.get(stream_id)
		transcript = (text or "").strip()
		mentioned = detect_mentions(transcript, self.catalogue)
		if mentioned:
			state.last_mention_at = self._clock()
			LOGGER.info("Stream %s mentioned %s", stream_id, ", ".join(p.name for p in mentioned))
		return state.track(asyncio.create_task(self._burst(state, transcript, mentioned)))

	async def _burst(self, state: StreamSession, transcript: str, mentioned: List[Persona]) -> None:
		personas = mentioned or self.pick_personas(self.config.burst_size)
		results = await asyncio.gather(
			*(self.generator.complete(state.display_name, persona, transcript) for persona in personas),
			return_exceptions=True,
		)

		lines = []
		for persona, result in zip(personas, results):
			if isinstance(result, BaseException):
				LOGGER.warning("Burst generation for %s raised: %s", persona.name, result)
			elif result:
				lines.append((persona, result))
		fallback = not lines
		if fallback:
			lines = [(personas[0], FALLBACK_LINE)]

		for index, (persona, line) in enumerate(lines):
			if index:
				await asyncio.sleep(self.config.burst_stagger_seconds)
			if not self.registry.is_current(state):
				return
			event = self._chat_event(persona, line, is_contextual=True, is_fallback=fallback, based_on_speech=transcript)
			await self.hub.broadcast(state.session_id, "fake-chat-message", event.to_payload())

		# talking draws viewers in, one per line that reached chat
		if not self.registry.is_current(state):
			return
		state.audience_size = self.config.clamp_audience(state.audience_size + len(lines))
		await self.hub.broadcast(state.session_id, "audience-update", state.audience_size)

	# faces

	def resolve_person(self, state: Optional[StreamSession], payload: Dict[str, Any]) -> str:
		"""Return the label carried by a face event, matching a raw descriptor when needed."""
		person = (payload.get("person") or "").strip()
		if person:
			return person
		raw = payload.get("descriptor")
		if state is None or not raw:
			return UNKNOWN_LABEL
		try:
			descriptor = ensure_descriptor(raw)
		except ValueError as exc:
			LOGGER.debug("Ignoring unusable descriptor on %s: %s", state.session_id, exc)
			return UNKNOWN_LABEL
		result = match(descriptor, state.gallery, self.config.face_match_threshold)
		return result.label if result else UNKNOWN_LABEL

	async def on_face_detected(self, stream_id: str, payload: Dict[str, Any]) -> Optional[asyncio.Task]:
		"""Re-broadcast a detection and greet a label that was not already on screen."""
		state = self.registry.get(stream_id) if self.registry.exists(stream_id) else None
		person = self.resolve_person(state, payload)

		outbound = {key: value for key, value in payload.items() if key != "descriptor"}
		outbound["person"] = person
		await self.hub.broadcast(stream_id, "face-detected", outbound)

		if state is None or not self.registry.is_current(state):
			return None
		if is_unknown(person) or person in state.known_present_faces:
			return None
		state.known_present_faces.add(person)
		return state.track(asyncio.create_task(self._greet(state, person)))

	async def on_face_left(self, stream_id: str, payload: Dict[str, Any]) -> None:
		person = (payload.get("person") or "").strip()
		if self.registry.exists(stream_id):
			self.registry.update(stream_id, lambda state: state.known_present_faces.discard(person))
		await self.hub.broadcast(stream_id, "face-left", payload)

	async def on_faces_left(self, stream_id: str, payload: Dict[str, Any]) -> None:
		if self.registry.exists(stream_id):
			self.registry.update(stream_id, lambda state: state.known_present_faces.clear())
		await self.hub.broadcast(stream_id, "faces-left", payload)

	async def on_current_faces(self, stream_id: str, payload: Dict[str, Any]) -> None:
		await self.hub.broadcast(stream_id, "current-faces", payload)

	async def _greet(self, state: StreamSession, person: str) -> None:
		await asyncio.sleep(self.config.greeting_delay_seconds)
		if not self.registry.is_current(state):
			return
		persona = self._rng.choice(self.catalogue)
		line = await self.generator.generate(state.display_name, persona, welcome_trigger(person))
		if not self.registry.is_current(state):
			return
		event = self._chat_event(persona, line, is_contextual=True, is_fallback=line == FALLBACK_LINE)
		await self.hub.broadcast(state.session_id, "fake-chat-message", event.to_payload())

	# real viewers

	async def relay_chat(self, stream_id: str, username: str, message: str) -> Optional[ChatEvent]:
		"""Pass a real viewer's message through to the room."""
		text = (message or "").strip()
		if not text:
			return None
		event = ChatEvent(username=(username or "viewer").strip() or "viewer", message=text, is_real=True)
		await self.hub.broadcast(stream_id, "real-chat-message", event.to_payload())
		return event

	@staticmethod
	def _chat_event(persona: Persona, line: str, **flags: Any) -> ChatEvent:
		return ChatEvent(username=persona.name, message=line, emoji=persona.emoji, is_synthetic=True, **flags)
