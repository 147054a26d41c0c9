"""Find personas named in a streamer transcript."""

from __future__ import annotations

from typing import Iterable, List

from models.session_models import Persona


def _needles(persona: Persona) -> List[str]:
	names = [persona.name, *persona.aliases]
	return [name.lower() for name in names if name.strip()]


def detect_mentions(transcript: str, catalogue: Iterable[Persona]) -> List[Persona]:
	"""Return the personas whose name or alias appears in ``transcript``.

	Matching is a case-insensitive substring test; the result keeps
	catalogue order and lists each persona at most once.
	"""
	text = (transcript or "").lower()
	if not text.strip():
		return []
	return [persona for persona in catalogue if any(needle in text for needle in _needles(persona))]
