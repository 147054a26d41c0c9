"""Deterministic clean-up applied to every generated chat line."""

from __future__ import annotations

import re
from typing import Dict, Iterable, Optional

FALLBACK_LINE = "bro this stream wild"

# keyword -> the single emoji appended when the keyword appears
ENTHUSIASM_EMOJI: Dict[str, str] = {
	"fire": "\U0001F525",
	"amazing": "\U0001F929",
	"best": "\U0001F3C6",
	"insane": "\U0001F92F",
	"hype": "\U0001F680",
	"lets go": "\U0001F680",
	"goat": "\U0001F410",
}

_QUOTES = re.compile("[\"'`\u2018\u2019\u201a\u201b\u201c\u201d\u201e\u00ab\u00bb]")
_EMOJI = re.compile(
	"["
	"\U0001F1E6-\U0001F1FF"
	"\U0001F300-\U0001FAFF"
	"\u2600-\u27bf"
	"\u2b00-\u2bff"
	"\u200d\ufe0e\ufe0f\u20e3"
	"]+"
)
_WHITESPACE = re.compile(r"\s+")
_SPEAKER_TAG = re.compile(r"^[A-Za-z0-9_]{2,24}:\s*")


def strip_speaker_prefix(text: str, names: Iterable[str] = ()) -> str:
	"""Drop a leading ``Name:`` tag the model sometimes prepends."""
	cleaned = (text or "").strip()
	for name in (*names, "Streamer"):
		prefix = f"{name}:"
		if cleaned.lower().startswith(prefix.lower()):
			cleaned = cleaned[len(prefix):].lstrip()
	return _SPEAKER_TAG.sub("", cleaned, count=1)


def enthusiasm_emoji(text: str) -> Optional[str]:
	"""Return the emoji for the first enthusiasm keyword found in ``text``."""
	for keyword, emoji in ENTHUSIASM_EMOJI.items():
		if re.search(rf"\b{re.escape(keyword)}\b", text):
			return emoji
	return None


def sanitize(text: str) -> str:
	"""Normalize a raw completion into a chat line.

	Quotes and apostrophes are removed, the text is lowercased, every
	emoji is dropped and whitespace collapsed. At most one emoji is then
	appended, only when an enthusiasm keyword is present.
	"""
	cleaned = _QUOTES.sub("", text or "")
	cleaned = _EMOJI.sub(" ", cleaned)
	cleaned = _WHITESPACE.sub(" ", cleaned.lower()).strip()
	if not cleaned:
		return ""
	emoji = enthusiasm_emoji(cleaned)
	return f"{cleaned} {emoji}" if emoji else cleaned
