"""Persona-voiced chat lines built on the OpenAI Responses API."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from openai import AsyncOpenAI

from models.session_models import Persona
from services.realtime.audience_config import AudienceConfig
from services.realtime.chat_policy import FALLBACK_LINE, sanitize, strip_speaker_prefix
from services.realtime.prompts import viewer_system_prompt, viewer_user_prompt
from services.realtime.response_parser import extract_text, extract_usage

LOGGER = logging.getLogger(__name__)


class ChatResponseGenerator:
	"""Turn a streamer context and persona into one short chat line."""

	def __init__(self, client: Optional[AsyncOpenAI], config: Optional[AudienceConfig] = None) -> None:
		self.client = client
		self.config = config or AudienceConfig()

	async def complete(self, streamer_name: str, persona: Persona, trigger_text: Optional[str] = None) -> Optional[str]:
		"""Return a sanitized line, or None when the upstream call fails, times out, or yields nothing."""
		if self.client is None:
			LOGGER.warning("No OpenAI client configured; %s falls back", persona.name)
			return None
		inputs = [
			{"type": "message", "role": "system", "content": [{"type": "input_text", "text": viewer_system_prompt(persona)}]},
			{"type": "message", "role": "user", "content": [{"type": "input_text", "text": viewer_user_prompt(streamer_name, trigger_text)}]},
		]
		start = time.time()
		try:
			response = await asyncio.wait_for(
				self.client.responses.create(
					model=self.config.chat_model,
					input=inputs,
					max_output_tokens=self.config.max_output_tokens,
					temperature=self.config.temperature,
				),
				timeout=self.config.generation_timeout,
			)
		except asyncio.TimeoutError:
			LOGGER.warning("Chat generation for %s timed out after %.1fs", persona.name, self.config.generation_timeout)
			return None
		except Exception as exc:
			LOGGER.warning("Chat generation for %s failed: %s", persona.name, exc)
			return None

		LOGGER.debug(
			"Chat line for %s in %.3fs, usage=%s", persona.name, time.time() - start, extract_usage(response)
		)
		raw = strip_speaker_prefix(extract_text(response), names=(persona.name, streamer_name))
		line = sanitize(raw)
		return line or None

	async def generate(self, streamer_name: str, persona: Persona, trigger_text: Optional[str] = None) -> str:
		"""Return a chat line, substituting the fallback line on any failure."""
		line = await self.complete(streamer_name, persona, trigger_text)
		return line if line is not None else FALLBACK_LINE
