"""Synthetic viewer catalogue: voice archetypes, personas, aliases, idle topics."""

from __future__ import annotations

from typing import Dict, List, Tuple

from models.session_models import Persona

# archetype -> (voice style, decoration emoji)
VOICE_ARCHETYPES: Dict[str, Tuple[str, str]] = {
	"gamer": (
		"an enthusiastic gaming fan who loves reactions and hype and gets excited about gameplay",
		"🎮",
	),
	"supportive": (
		"a supportive viewer who loves the streamer, asks questions and gives compliments",
		"❤️",
	),
	"technical": (
		"a tech-savvy viewer who notices audio quality, camera setup and streaming equipment",
		"⚡",
	),
	"curious": (
		"a curious new viewer who just discovered the stream and asks about the streamer and content",
		"👋",
	),
	"energetic": (
		"an extremely energetic viewer who creates excitement and momentum in chat",
		"🔥",
	),
	"chill": (
		"a relaxed, laid back viewer who enjoys casual conversation and calm vibes",
		"😌",
	),
}

# (name, archetype)
PERSONA_TABLE: List[Tuple[str, str]] = [
	("Kai Cenat", "gamer"),
	("Ninja", "supportive"),
	("Ibai Llanos", "technical"),
	("AuronPlay", "curious"),
	("Rubius", "energetic"),
	("xQc", "chill"),
	("TheGrefg", "gamer"),
	("Pokimane", "supportive"),
	("Tfue", "technical"),
	("Shroud", "curious"),
	("NICKMERCS", "energetic"),
	("TimTheTatman", "chill"),
	("Summit1g", "gamer"),
	("Amouranth", "supportive"),
	("HasanAbi", "technical"),
	("Gaules", "curious"),
	("TommyInnit", "energetic"),
	("Adin Ross", "chill"),
	("Ludwig", "gamer"),
	("Juansguarnizo", "supportive"),
	("ElSpreen", "technical"),
	("Tarik", "curious"),
	("Quackity", "energetic"),
	("Sodapoppin", "chill"),
	("Myth", "gamer"),
	("Fuslie", "supportive"),
	("Sykkuno", "technical"),
	("Mizkif", "curious"),
	("Valkyrae", "energetic"),
	("Clix", "chill"),
]

# Extra spellings speech-to-text produces for a name. The canonical name is always matched.
ALIASES: Dict[str, Tuple[str, ...]] = {
	"Kai Cenat": ("kai cenat", "kaicenat", "kai senat"),
	"Ibai Llanos": ("ibai",),
	"AuronPlay": ("auron play", "auron"),
	"xQc": ("x q c", "x qc", "xq c", "ex q c"),
	"TheGrefg": ("the grefg", "grefg"),
	"Pokimane": ("poki mane", "poki"),
	"NICKMERCS": ("nick mercs", "nickmercs"),
	"TimTheTatman": ("tim the tatman", "tatman"),
	"Summit1g": ("summit 1g", "summit one g"),
	"HasanAbi": ("hasan abi", "hasan"),
	"TommyInnit": ("tommy innit", "tommyinnit"),
	"Adin Ross": ("adin ross", "adinross"),
	"ElSpreen": ("el spreen", "spreen"),
	"Sodapoppin": ("soda poppin", "sodapoppin"),
}

IDLE_TOPICS: List[str] = [
	"just vibing in chat",
	"asking what the plan is for today's stream",
	"hyping up the stream",
	"complimenting the stream quality",
	"asking how long the stream will go",
	"saying hi to everyone in chat",
	"reacting to the streamer's energy",
	"asking the streamer a random question",
]

GREETING_CONTEXT = "the streamer just started talking and said hi to chat"


def build_catalogue() -> List[Persona]:
	"""Return the immutable persona catalogue."""
	catalogue = []
	for name, archetype in PERSONA_TABLE:
		style, emoji = VOICE_ARCHETYPES[archetype]
		catalogue.append(Persona(name=name, voice_profile=style, emoji=emoji, aliases=ALIASES.get(name, ())))
	return catalogue


PERSONAS: List[Persona] = build_catalogue()


def persona_by_name(name: str) -> Persona:
	for persona in PERSONAS:
		if persona.name == name:
			return persona
	raise KeyError(f"Persona {name} not found")
