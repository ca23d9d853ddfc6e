"""
infrastructure.llm.llm_builder - Centralized chat model construction.

Single source of truth for building the tool-calling chat model. The
provider is controlled by the LLM_PROVIDER environment variable.

Supported providers:
    - "openai"    → langchain_openai.ChatOpenAI
    - "anthropic" → langchain_anthropic.ChatAnthropic
    - "groq"      → langchain_groq.ChatGroq
    - "ollama"    → langchain_ollama.ChatOllama
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from langchain_core.language_models import BaseChatModel

from domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def build_chat_model(
    *,
    provider: str,
    model: str,
    temperature: float = 0,
    ollama_base_url: str = "http://localhost:11434/",
    openai_api_key: str = "",
    anthropic_api_key: str = "",
    groq_api_key: str = "",
    max_tokens: Optional[int] = None,
) -> BaseChatModel:
    """Build a chat model instance for the given provider.

    Args:
        provider: One of "openai", "anthropic", "groq", "ollama".
        model: Model name for the selected provider.
        temperature: Sampling temperature.
        ollama_base_url: Ollama server URL (only used when provider="ollama").
        openai_api_key: API key for OpenAI.
        anthropic_api_key: API key for Anthropic.
        groq_api_key: API key for Groq.
        max_tokens: Maximum tokens in the reply.

    Returns:
        A configured LangChain chat model that supports bind_tools().

    Raises:
        ConfigurationError: If the provider is unknown or required credentials are missing.
    """
    provider = provider.lower().strip()

    if provider == "openai":
        from langchain_openai import ChatOpenAI

        if not openai_api_key:
            raise ConfigurationError("OPENAI_API_KEY is required when LLM_PROVIDER='openai'")

        kwargs: Dict[str, Any] = {
            "model": model,
            "temperature": temperature,
            "api_key": openai_api_key,
        }
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        logger.info("Building OpenAI chat model (model=%s)", model)
        return ChatOpenAI(**kwargs)

    elif provider == "anthropic":
        from langchain_anthropic import ChatAnthropic

        if not anthropic_api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY is required when LLM_PROVIDER='anthropic'")

        kwargs = {
            "model": model,
            "temperature": temperature,
            "api_key": anthropic_api_key,
            # Anthropic requires an explicit output budget.
            "max_tokens": max_tokens if max_tokens is not None else 1024,
        }

        logger.info("Building Anthropic chat model (model=%s)", model)
        return ChatAnthropic(**kwargs)

    elif provider == "groq":
        from langchain_groq import ChatGroq

        if not groq_api_key:
            raise ConfigurationError("GROQ_API_KEY is required when LLM_PROVIDER='groq'")

        kwargs = {
            "model": model,
            "temperature": temperature,
            "api_key": groq_api_key,
            "max_tokens": max_tokens if max_tokens is not None else 512,
        }

        logger.info("Building Groq chat model (model=%s)", model)
        return ChatGroq(**kwargs)

    elif provider == "ollama":
        from langchain_ollama import ChatOllama

        kwargs = {
            "model": model,
            "temperature": temperature,
            "base_url": ollama_base_url,
        }

        logger.info("Building ChatOllama (model=%s, base_url=%s)", model, ollama_base_url)
        return ChatOllama(**kwargs)

    else:
        raise ConfigurationError(
            f"Unsupported LLM_PROVIDER: '{provider}'. "
            "Must be 'openai', 'anthropic', 'groq', or 'ollama'."
        )


def history_needs_tool_definitions(provider: str) -> bool:
    """Whether the provider rejects tool calls in history when no tools are bound."""
    return provider.lower().strip() == "anthropic"
