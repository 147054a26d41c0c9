"""Tunables for the simulated audience, read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any


def _env_float(name: str, default: float) -> float:
	raw = os.getenv(name)
	if raw is None or not raw.strip():
		return default
	try:
		return float(raw)
	except ValueError as exc:
		raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _env_int(name: str, default: int) -> int:
	raw = os.getenv(name)
	if raw is None or not raw.strip():
		return default
	try:
		return int(raw)
	except ValueError as exc:
		raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class AudienceConfig:
	"""Timing, burst, and band settings shared by every stream."""

	chat_model: str = "gpt-4o-mini"
	max_output_tokens: int = 50
	temperature: float = 0.8
	generation_timeout: float = 8.0
	idle_min_seconds: float = 5.0
	idle_max_seconds: float = 13.0
	burst_size: int = 3
	burst_stagger_seconds: float = 0.2
	mention_cooldown_seconds: float = 10.0
	min_speech_confidence: float = 0.3
	min_speech_length: int = 2
	audience_min: int = 0
	audience_max: int = 100
	audience_initial: int = 5
	audience_walk_step: int = 3
	greeting_delay_seconds: float = 1.5
	face_match_threshold: float = 0.6

	def __post_init__(self) -> None:
		if self.idle_min_seconds <= 0 or self.idle_max_seconds < self.idle_min_seconds:
			raise ValueError("Idle chatter interval band is invalid.")
		if self.audience_max < self.audience_min:
			raise ValueError("AUDIENCE_MAX must not be below AUDIENCE_MIN.")
		if self.burst_size < 1:
			raise ValueError("BURST_SIZE must be at least 1.")
		clamped = min(max(self.audience_initial, self.audience_min), self.audience_max)
		object.__setattr__(self, "audience_initial", clamped)

	def clamp_audience(self, value: int) -> int:
		"""Return ``value`` forced into the configured audience band."""
		return min(max(value, self.audience_min), self.audience_max)

	def with_overrides(self, **changes: Any) -> "AudienceConfig":
		return replace(self, **changes)

	@classmethod
	def from_env(cls) -> "AudienceConfig":
		"""Build a config from the process environment, keeping defaults for unset keys."""
		defaults = cls()
		return cls(
			chat_model=os.getenv("OPENAI_CHAT_MODEL", defaults.chat_model),
			max_output_tokens=_env_int("CHAT_MAX_OUTPUT_TOKENS", defaults.max_output_tokens),
			temperature=_env_float("CHAT_TEMPERATURE", defaults.temperature),
			generation_timeout=_env_float("CHAT_GENERATION_TIMEOUT", defaults.generation_timeout),
			idle_min_seconds=_env_float("IDLE_CHATTER_MIN_SECONDS", defaults.idle_min_seconds),
			idle_max_seconds=_env_float("IDLE_CHATTER_MAX_SECONDS", defaults.idle_max_seconds),
			burst_size=_env_int("BURST_SIZE", defaults.burst_size),
			burst_stagger_seconds=_env_float("BURST_STAGGER_SECONDS", defaults.burst_stagger_seconds),
			mention_cooldown_seconds=_env_float("MENTION_COOLDOWN_SECONDS", defaults.mention_cooldown_seconds),
			min_speech_confidence=_env_float("MIN_SPEECH_CONFIDENCE", defaults.min_speech_confidence),
			min_speech_length=_env_int("MIN_SPEECH_LENGTH", defaults.min_speech_length),
			audience_min=_env_int("AUDIENCE_MIN", defaults.audience_min),
			audience_max=_env_int("AUDIENCE_MAX", defaults.audience_max),
			audience_initial=_env_int("AUDIENCE_INITIAL", defaults.audience_initial),
			audience_walk_step=_env_int("AUDIENCE_WALK_STEP", defaults.audience_walk_step),
			greeting_delay_seconds=_env_float("GREETING_DELAY_SECONDS", defaults.greeting_delay_seconds),
			face_match_threshold=_env_float("FACE_MATCH_THRESHOLD", defaults.face_match_threshold),
		)
