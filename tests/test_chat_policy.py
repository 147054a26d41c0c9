from services.realtime.chat_policy import enthusiasm_emoji, sanitize, strip_speaker_prefix


def test_sanitize_lowercases_and_strips_quotes():
	assert sanitize('"That\'s So COOL"') == "thats so cool"


def test_sanitize_removes_emoji_without_keyword():
	assert sanitize("nice setup \U0001F60E\U0001F44D") == "nice setup"


def test_sanitize_appends_at_most_one_emoji():
	line = sanitize("this is AMAZING \U0001F525\U0001F525\U0001F525 best stream")

	assert line == "this is amazing best stream \U0001F929"


def test_sanitize_collapses_whitespace():
	assert sanitize("  hey\n\nthere   chat \t") == "hey there chat"


def test_sanitize_handles_apostrophe_keywords():
	assert sanitize("Let's go!!") == "lets go!! \U0001F680"


def test_sanitize_empty_after_cleanup():
	assert sanitize("\U0001F525 \"\" ") == ""


def test_keywords_match_whole_words_only():
	assert enthusiasm_emoji("my bestie") is None
	assert enthusiasm_emoji("that was fire") == "\U0001F525"


def test_strip_speaker_prefix():
	assert strip_speaker_prefix("xQc: yo chat", names=("xQc",)) == "yo chat"
	assert strip_speaker_prefix("Streamer: hi", names=()) == "hi"
	assert strip_speaker_prefix("GamingFan123: lets go") == "lets go"
	assert strip_speaker_prefix("no tag here") == "no tag here"
