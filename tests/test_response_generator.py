from conftest import FakeCompletionClient
from services.realtime.audience_config import AudienceConfig
from services.realtime.chat_policy import FALLBACK_LINE
from services.realtime.personas import persona_by_name
from services.realtime.response_generator import ChatResponseGenerator

XQC = persona_by_name("xQc")


async def test_generated_line_is_sanitized():
	client = FakeCompletionClient(reply='xQc: "That Was FIRE \U0001F525\U0001F525"')
	generator = ChatResponseGenerator(client)

	line = await generator.generate("Abi", XQC, "watch this jump")

	assert line == "that was fire \U0001F525"


async def test_request_carries_persona_voice_and_bounds():
	client = FakeCompletionClient()
	generator = ChatResponseGenerator(client, AudienceConfig(chat_model="test-model"))

	await generator.generate("Abi", XQC, "watch this jump")

	call = client.responses.calls[0]
	assert call["model"] == "test-model"
	assert call["max_output_tokens"] == 50
	assert call["temperature"] == 0.8
	system_text = call["input"][0]["content"][0]["text"]
	user_text = call["input"][1]["content"][0]["text"]
	assert XQC.voice_profile in system_text
	assert "watch this jump" in user_text


async def test_missing_trigger_uses_greeting_context():
	client = FakeCompletionClient()
	generator = ChatResponseGenerator(client)

	await generator.generate("Abi", XQC, None)

	user_text = client.responses.calls[0]["input"][1]["content"][0]["text"]
	assert "said hi to chat" in user_text


async def test_upstream_error_falls_back():
	generator = ChatResponseGenerator(FakeCompletionClient(error=RuntimeError("boom")))

	assert await generator.complete("Abi", XQC, "hi") is None
	assert await generator.generate("Abi", XQC, "hi") == FALLBACK_LINE


async def test_timeout_falls_back():
	client = FakeCompletionClient(delay=1.0)
	generator = ChatResponseGenerator(client, AudienceConfig(generation_timeout=0.05))

	assert await generator.generate("Abi", XQC, "hi") == FALLBACK_LINE


async def test_empty_completion_falls_back():
	generator = ChatResponseGenerator(FakeCompletionClient(reply="\U0001F525"))

	assert await generator.complete("Abi", XQC, "hi") is None


async def test_without_client_every_line_is_fallback():
	generator = ChatResponseGenerator(None)

	assert await generator.generate("Abi", XQC, "hi") == FALLBACK_LINE
