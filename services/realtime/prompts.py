"""Prompt helpers for synthetic viewer chat lines."""

from __future__ import annotations

from typing import Optional

from models.session_models import Persona
from services.realtime.personas import GREETING_CONTEXT


def viewer_system_prompt(persona: Persona) -> str:
	"""Return the persona-voiced system prompt."""
	return (
		f"You are {persona.name}, {persona.voice_profile}, typing in a live stream chat. "
		"Reply with one short, casual chat message in lowercase with no punctuation, "
		"never more than one sentence. Only respond as your character: do not prefix the message "
		"with your own name, the streamer's name, or any speaker tag."
	)


def viewer_user_prompt(streamer_name: str, trigger_text: Optional[str]) -> str:
	"""Return the user prompt that grounds the reply in what just happened on stream."""
	context = (trigger_text or "").strip() or GREETING_CONTEXT
	return (
		f'The streamer "{streamer_name}" is live. What just happened: "{context}".\n\n'
		"Respond naturally as this viewer would, appropriate to what was said."
	)


def idle_trigger(topic: str) -> str:
	return f"nothing specific, you are {topic}"


def welcome_trigger(person: str) -> str:
	return f"{person} just appeared on camera next to the streamer, welcome them to the stream"
