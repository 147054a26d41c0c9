import asyncio
import json
import random

import pytest

from services.realtime.audience_config import AudienceConfig
from services.realtime.audience_scheduler import AudienceScheduler
from services.realtime.response_generator import ChatResponseGenerator
from services.realtime.room_hub import RoomHub
from services.realtime.session_store import SessionRegistry


class FakeResponse:
	def __init__(self, text):
		self.output_text = text
		self.output = []
		self.usage = None


class FakeResponses:
	"""Stand-in for ``AsyncOpenAI().responses``."""

	def __init__(self, reply="nice stream", error=None, delay=0.0):
		self.reply = reply
		self.error = error
		self.delay = delay
		self.calls = []

	async def create(self, **kwargs):
		self.calls.append(kwargs)
		if self.delay:
			await asyncio.sleep(self.delay)
		if self.error is not None:
			raise self.error
		reply = self.reply(kwargs) if callable(self.reply) else self.reply
		return FakeResponse(reply)


class FakeCompletionClient:
	def __init__(self, **kwargs):
		self.responses = FakeResponses(**kwargs)


class RecordingSocket:
	"""Collects frames the hub sends to one client."""

	def __init__(self):
		self.frames = []

	async def send_text(self, text):
		self.frames.append(json.loads(text))

	def events(self, event_type=None):
		return [frame for frame in self.frames if event_type is None or frame["type"] == event_type]


class BrokenSocket:
	async def send_text(self, text):
		raise RuntimeError("socket closed")


@pytest.fixture
def fast_config():
	return AudienceConfig(
		idle_min_seconds=30,
		idle_max_seconds=30,
		burst_stagger_seconds=0.01,
		greeting_delay_seconds=0.01,
		generation_timeout=0.5,
		mention_cooldown_seconds=10,
	)


@pytest.fixture
async def build_scheduler(fast_config):
	"""Return a factory wiring a scheduler to a hub with one viewer in room ``s1``."""
	created = []

	def _build(client=None, config=None, **kwargs):
		config = config or fast_config
		registry = SessionRegistry()
		hub = RoomHub()
		socket = RecordingSocket()
		hub.connect("viewer", socket)
		hub.join("viewer", "s1")
		generator = ChatResponseGenerator(client or FakeCompletionClient(), config)
		scheduler = AudienceScheduler(registry, hub, generator, config=config, rng=random.Random(7), **kwargs)
		created.append(scheduler)
		return scheduler, socket

	yield _build

	for scheduler in created:
		await scheduler.close()
