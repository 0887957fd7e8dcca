"""Tests for the bilingual LLM client."""

from unittest.mock import MagicMock, patch

import pytest

from seo_section_writer.llm_client import (
    LLMClient,
    LLMClientError,
    parse_bilingual_response,
)
from seo_section_writer.models import BilingualText, GenerationRequest
from seo_section_writer.sections import SYSTEM_INSTRUCTION


def _response(text: str) -> MagicMock:
    response = MagicMock()
    response.content = [MagicMock(text=text)]
    return response


class TestParseBilingualResponse:
    """Tests for parse_bilingual_response."""

    def test_plain_json(self):
        result = parse_bilingual_response('{"english": "Title: Hi", "chinese": "标题: 你好"}')
        assert result == BilingualText(english="Title: Hi", chinese="标题: 你好")

    def test_fenced_json(self):
        text = 'Here you go:\n```json\n{"english": "A\\nB", "chinese": "甲\\n乙"}\n```'
        result = parse_bilingual_response(text)
        assert result.english == "A\nB"
        assert result.chinese == "甲\n乙"

    def test_json_surrounded_by_prose(self):
        result = parse_bilingual_response('Sure! {"english": "x", "chinese": "y"} Done.')
        assert result.english == "x"

    def test_strips_whitespace(self):
        result = parse_bilingual_response('{"english": "  x \\n", "chinese": " y "}')
        assert result == BilingualText("x", "y")

    @pytest.mark.parametrize("text,message", [
        ("", "Empty response"),
        ("no json here", "No JSON object"),
        ('{"english": "x"', "Invalid JSON"),
        ('{"english": "x",}', "Invalid JSON"),
        ('{"english": "x"}', "missing key"),
        ("[1, 2]", "No JSON object"),
    ])
    def test_invalid_responses(self, text, message):
        with pytest.raises(LLMClientError, match=message):
            parse_bilingual_response(text)


class TestLLMClient:
    """Tests for LLMClient with a mocked Anthropic SDK."""

    def test_requires_api_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(LLMClientError, match="No API key"):
            LLMClient()

    @patch("seo_section_writer.llm_client.anthropic.Anthropic")
    def test_generate_section(self, mock_anthropic):
        sdk = mock_anthropic.return_value
        sdk.messages.create.return_value = _response('{"english": "Title: Hi", "chinese": "标题: 你好"}')

        client = LLMClient(api_key="sk-test", model="test-model", max_tokens=123)
        result = client.generate_section(GenerationRequest(prompt="Write a hero"))

        assert result.english == "Title: Hi"
        kwargs = sdk.messages.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["max_tokens"] == 123
        assert kwargs["system"] == SYSTEM_INSTRUCTION
        assert kwargs["messages"] == [{"role": "user", "content": "Write a hero"}]

    @patch("seo_section_writer.llm_client.anthropic.Anthropic")
    def test_is_callable_as_generator(self, mock_anthropic):
        mock_anthropic.return_value.messages.create.return_value = _response('{"english": "a", "chinese": "b"}')
        client = LLMClient(api_key="sk-test")
        assert client(GenerationRequest(prompt="p")) == BilingualText("a", "b")

    @patch("seo_section_writer.llm_client.anthropic.Anthropic")
    def test_request_credential_uses_separate_client(self, mock_anthropic):
        default_sdk, user_sdk = MagicMock(), MagicMock()
        mock_anthropic.side_effect = [default_sdk, user_sdk]
        user_sdk.messages.create.return_value = _response('{"english": "a", "chinese": "b"}')

        client = LLMClient(api_key="sk-default")
        client.generate_section(GenerationRequest(prompt="p", credential="sk-user"))
        client.generate_section(GenerationRequest(prompt="p", credential="sk-user"))

        assert mock_anthropic.call_count == 2
        assert mock_anthropic.call_args.kwargs["api_key"] == "sk-user"
        assert user_sdk.messages.create.call_count == 2
        default_sdk.messages.create.assert_not_called()

    @patch("seo_section_writer.llm_client.anthropic.Anthropic")
    def test_api_failure_wrapped(self, mock_anthropic):
        mock_anthropic.return_value.messages.create.side_effect = RuntimeError("429 Too Many Requests")
        client = LLMClient(api_key="sk-test")

        with pytest.raises(LLMClientError, match="LLM API call failed: 429"):
            client.generate_section(GenerationRequest(prompt="p"))

    @patch("seo_section_writer.llm_client.anthropic.Anthropic")
    def test_empty_prompt_rejected_without_call(self, mock_anthropic):
        client = LLMClient(api_key="sk-test")

        with pytest.raises(LLMClientError, match="empty prompt"):
            client.generate_section(GenerationRequest(prompt="   "))
        mock_anthropic.return_value.messages.create.assert_not_called()

    @patch("seo_section_writer.llm_client.anthropic.Anthropic")
    def test_optional_default_key_uses_request_credential(self, mock_anthropic, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        mock_anthropic.return_value.messages.create.return_value = _response('{"english": "a", "chinese": "b"}')

        client = LLMClient(require_key=False)
        assert client.client is None
        mock_anthropic.assert_not_called()

        result = client.generate_section(GenerationRequest(prompt="p", credential="sk-user"))

        assert result == BilingualText("a", "b")
        assert mock_anthropic.call_args.kwargs["api_key"] == "sk-user"

    @patch("seo_section_writer.llm_client.anthropic.Anthropic")
    def test_optional_default_key_without_credential_fails(self, mock_anthropic, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        client = LLMClient(require_key=False)

        with pytest.raises(LLMClientError, match="No API key"):
            client.generate_section(GenerationRequest(prompt="p"))
        mock_anthropic.assert_not_called()
