import pytest
from types import SimpleNamespace
from unittest.mock import Mock, patch

from app.core.errors import GenerationFailedError
from app.services.description_service import (
    SYSTEM_INSTRUCTION,
    DescriptionGenerator,
    OpenAITextGenerator,
    get_description_generator,
)
from tests.conftest import FakeTextGenerator


def _completion(*contents):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=c)) for c in contents]
    )


class TestDescriptionGenerator:
    """Test the fault-isolation boundary around the text provider."""

    def test_returns_text_verbatim(self):
        fake = FakeTextGenerator(text="  An epic.\n")
        generator = DescriptionGenerator(fake, max_tokens=100)

        assert generator.generate_description("Describe Dune") == "  An epic.\n"
        assert fake.calls == [(SYSTEM_INSTRUCTION, "Describe Dune", 100)]

    @pytest.mark.parametrize(
        "error",
        [TimeoutError("read timeout"), ConnectionError("reset"), ValueError("bad json"), RuntimeError("429")],
    )
    def test_any_provider_failure_is_opaque(self, error):
        generator = DescriptionGenerator(FakeTextGenerator(error=error))

        with pytest.raises(GenerationFailedError) as exc_info:
            generator.generate_description("Describe Dune")

        assert exc_info.value.message == "Error generating description from AI."
        assert exc_info.value.__cause__ is error

    def test_no_retry(self):
        fake = FakeTextGenerator(error=TimeoutError())
        generator = DescriptionGenerator(fake)

        with pytest.raises(GenerationFailedError):
            generator.generate_description("Describe Dune")

        assert len(fake.calls) == 1


class TestOpenAITextGenerator:
    def test_generate_sends_chat_completion(self):
        client = Mock()
        client.chat.completions.create.return_value = _completion("First.", "Second.")
        generator = OpenAITextGenerator(api_key="sk-test", model="gpt-test")
        generator._client = client

        text = generator.generate("system text", "user text", 100)

        assert text == "First."
        client.chat.completions.create.assert_called_once_with(
            model="gpt-test",
            messages=[
                {"role": "system", "content": "system text"},
                {"role": "user", "content": "user text"},
            ],
            max_tokens=100,
        )

    def test_generate_rejects_empty_choices(self):
        client = Mock()
        client.chat.completions.create.return_value = _completion()
        generator = OpenAITextGenerator(api_key="sk-test")
        generator._client = client

        with pytest.raises(ValueError):
            generator.generate("s", "p", 100)

    def test_generate_rejects_missing_content(self):
        client = Mock()
        client.chat.completions.create.return_value = _completion(None)
        generator = OpenAITextGenerator(api_key="sk-test")
        generator._client = client

        with pytest.raises(ValueError):
            generator.generate("s", "p", 100)

    def test_client_built_lazily_without_retries(self):
        with patch("app.services.description_service.OpenAI") as openai_cls:
            generator = OpenAITextGenerator(api_key="sk-test", timeout=5.0)
            openai_cls.assert_not_called()

            assert generator.client is openai_cls.return_value
            assert generator.client is openai_cls.return_value

        openai_cls.assert_called_once_with(api_key="sk-test", timeout=5.0, max_retries=0)

    def test_provider_error_maps_to_generation_failed(self):
        client = Mock()
        client.chat.completions.create.side_effect = RuntimeError("rate limited")
        text_generator = OpenAITextGenerator(api_key="sk-test")
        text_generator._client = client

        with pytest.raises(GenerationFailedError):
            DescriptionGenerator(text_generator).generate_description("Describe Dune")


def test_get_description_generator_is_process_wide():
    assert get_description_generator() is get_description_generator()
    assert get_description_generator().max_tokens == 100
