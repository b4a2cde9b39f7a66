"""LiteLLM client wrapper with retry, timeout, API key validation and availability probe.

All LLM calls (summaries, chat answers) route through this module.
LiteLLM's built-in retry is used (num_retries, exponential backoff).
Callers probe availability once per request with is_available() and pick the
LLM tier or the local heuristic tier from that single answer.
"""

from __future__ import annotations

import logging
import os

import litellm

# Disable LiteLLM verbose logging unless explicitly enabled
litellm.suppress_debug_info = True
litellm.set_verbose = False  # type: ignore[assignment]

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Provider → env var mapping for API key validation
# ------------------------------------------------------------------

_PROVIDER_ENV: dict[str, str | None] = {
    "openai": "OPENAI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "azure": "AZURE_API_KEY",
    "cohere": "COHERE_API_KEY",
    "google": "GOOGLE_API_KEY",
    "mistral": "MISTRAL_API_KEY",
    "groq": "GROQ_API_KEY",
    "together_ai": "TOGETHERAI_API_KEY",
    "ollama": None,  # Local, no key required
    "ollama_chat": None,
}

_PROBE_TIMEOUT = 5.0


def provider_of(model: str) -> str:
    """Return the provider prefix of a 'provider/model' string (default openai)."""
    return model.split("/")[0].lower() if "/" in model else "openai"


def validate_api_key(model: str) -> None:
    """Check that the required API key env var is set for *model*.

    Args:
        model: LiteLLM model string in 'provider/model' format.

    Raises:
        EnvironmentError: If the required key is missing from environment.
    """
    provider = provider_of(model)
    env_var = _PROVIDER_ENV.get(provider, f"{provider.upper()}_API_KEY")

    if env_var is None:
        return  # No key required (e.g. ollama)

    if not os.getenv(env_var):
        raise EnvironmentError(
            f"API key not found for provider '{provider}'. "
            f"Set the {env_var} environment variable."
        )


def complete(
    model: str,
    messages: list[dict],
    max_tokens: int = 1000,
    temperature: float = 0.0,
    num_retries: int = 2,
    timeout: float = 30.0,
) -> str:
    """Call litellm.completion() with retry/backoff. Returns stripped content string.

    Args:
        model: LiteLLM model string (provider/model format).
        messages: OpenAI-style message list.
        max_tokens: Maximum output tokens.
        temperature: Sampling temperature (0 = deterministic).
        num_retries: Number of retries on transient errors (exponential backoff).
        timeout: Request timeout in seconds.

    Returns:
        The text content of the first choice ("" if the model returned none).

    Raises:
        litellm.exceptions.APIError: On persistent API failure after retries.
    """
    response = litellm.completion(
        model=model,
        messages=messages,
        max_tokens=max_tokens,
        temperature=temperature,
        num_retries=num_retries,
        timeout=timeout,
    )
    return (response.choices[0].message.content or "").strip()


def is_available(model: str) -> bool:
    """Probe whether *model* can answer right now. Never raises.

    A missing API key short-circuits to False without a network call;
    otherwise a tiny completion is attempted with a short timeout.
    """
    try:
        validate_api_key(model)
    except EnvironmentError as exc:
        logger.debug("LLM unavailable: %s", exc)
        return False

    try:
        reply = complete(
            model,
            [{"role": "user", "content": "Hello"}],
            max_tokens=10,
            num_retries=0,
            timeout=_PROBE_TIMEOUT,
        )
    except Exception as exc:
        logger.debug("LLM probe failed for %s: %s", model, exc)
        return False
    return bool(reply)
