"""Tests for the LiteLLM client wrapper."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from clipnote.rag.llm_client import complete, is_available, provider_of, validate_api_key


def _response(content):
    mock_response = MagicMock()
    mock_response.choices[0].message.content = content
    return mock_response


# ------------------------------------------------------------------
# validate_api_key
# ------------------------------------------------------------------


def test_provider_of():
    assert provider_of("openrouter/meta-llama/llama-3.1-8b-instruct") == "openrouter"
    assert provider_of("gpt-4o") == "openai"


def test_validate_api_key_raises_if_missing():
    with pytest.raises(EnvironmentError, match="OPENROUTER_API_KEY"):
        validate_api_key("openrouter/meta-llama/llama-3.1-8b-instruct")


def test_validate_api_key_passes_if_set(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-test")
    validate_api_key("openrouter/meta-llama/llama-3.1-8b-instruct")  # should not raise


def test_validate_api_key_ollama_no_key_required():
    validate_api_key("ollama/llama3")


def test_validate_api_key_unknown_provider_uses_prefix(monkeypatch):
    monkeypatch.delenv("FIREWORKS_API_KEY", raising=False)
    with pytest.raises(EnvironmentError, match="FIREWORKS_API_KEY"):
        validate_api_key("fireworks/some-model")


def test_validate_api_key_bare_model_treated_as_openai():
    with pytest.raises(EnvironmentError, match="OPENAI_API_KEY"):
        validate_api_key("gpt-4o-mini")


# ------------------------------------------------------------------
# complete()
# ------------------------------------------------------------------


def test_complete_returns_stripped_content():
    with patch("clipnote.rag.llm_client.litellm.completion", return_value=_response("  Hi!\n")):
        assert complete("openai/gpt-4o", [{"role": "user", "content": "Hi"}]) == "Hi!"


def test_complete_returns_empty_string_on_none_content():
    with patch("clipnote.rag.llm_client.litellm.completion", return_value=_response(None)):
        assert complete("openai/gpt-4o", [{"role": "user", "content": "Hi"}]) == ""


def test_complete_passes_params_to_litellm():
    with patch("clipnote.rag.llm_client.litellm.completion", return_value=_response("ok")) as mock_c:
        complete(
            "openai/gpt-4o-mini",
            [{"role": "user", "content": "test"}],
            max_tokens=512,
            temperature=0.5,
            num_retries=2,
            timeout=12.0,
        )

    call_kwargs = mock_c.call_args.kwargs
    assert call_kwargs["model"] == "openai/gpt-4o-mini"
    assert call_kwargs["max_tokens"] == 512
    assert call_kwargs["temperature"] == 0.5
    assert call_kwargs["num_retries"] == 2
    assert call_kwargs["timeout"] == 12.0


def test_complete_propagates_errors():
    with patch("clipnote.rag.llm_client.litellm.completion", side_effect=RuntimeError("down")):
        with pytest.raises(RuntimeError):
            complete("openai/gpt-4o", [{"role": "user", "content": "Hi"}])


# ------------------------------------------------------------------
# is_available()
# ------------------------------------------------------------------


def test_is_available_false_without_key_and_no_network_call():
    with patch("clipnote.rag.llm_client.litellm.completion") as mock_c:
        assert is_available("openrouter/meta-llama/llama-3.1-8b-instruct") is False
    mock_c.assert_not_called()


def test_is_available_true_when_probe_answers(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    with patch("clipnote.rag.llm_client.litellm.completion", return_value=_response("Hello!")) as mock_c:
        assert is_available("openai/gpt-4o-mini") is True
    kwargs = mock_c.call_args.kwargs
    assert kwargs["max_tokens"] == 10
    assert kwargs["num_retries"] == 0


def test_is_available_false_when_probe_fails(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    with patch("clipnote.rag.llm_client.litellm.completion", side_effect=TimeoutError("slow")):
        assert is_available("openai/gpt-4o-mini") is False


def test_is_available_false_on_empty_reply(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    with patch("clipnote.rag.llm_client.litellm.completion", return_value=_response("")):
        assert is_available("openai/gpt-4o-mini") is False


def test_is_available_local_provider_probes_without_key():
    with patch("clipnote.rag.llm_client.litellm.completion", return_value=_response("hey")):
        assert is_available("ollama/llama3") is True
