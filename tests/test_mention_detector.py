from models.session_models import Persona
from services.realtime.mention_detector import detect_mentions
from services.realtime.personas import PERSONAS


def _names(personas):
	return [persona.name for persona in personas]


def test_canonical_name_is_case_insensitive():
	assert _names(detect_mentions("yo XQC what do you think", PERSONAS)) == ["xQc"]


def test_alias_spellings_match():
	assert _names(detect_mentions("hey x q c you there", PERSONAS)) == ["xQc"]
	assert _names(detect_mentions("shout out to poki", PERSONAS)) == ["Pokimane"]


def test_multiple_personas_keep_catalogue_order():
	assert _names(detect_mentions("pokimane and ninja joined", PERSONAS)) == ["Ninja", "Pokimane"]


def test_no_mentions():
	assert detect_mentions("hello everyone", PERSONAS) == []
	assert detect_mentions("", PERSONAS) == []


def test_catalogue_is_data_driven():
	catalogue = [Persona(name="Luna", voice_profile="a night owl", emoji="x", aliases=("moony",))]

	assert _names(detect_mentions("good night moony", catalogue)) == ["Luna"]


def test_plain_words_do_not_trigger_a_mention():
	assert detect_mentions("we finally reached the summit", PERSONAS) == []
	assert _names(detect_mentions("summit one g would love this", PERSONAS)) == ["Summit1g"]
