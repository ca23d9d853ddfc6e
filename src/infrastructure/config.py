"""
infrastructure.config - Typed, injectable configuration.

A frozen dataclass that can be constructed from environment or passed
explicitly in tests. Credentials are checked once at startup by
validate(); a missing key is a ConfigurationError, not a silent failure
on the first model call.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from domain.exceptions import ConfigurationError

SUPPORTED_PROVIDERS = ("openai", "anthropic", "groq", "ollama")


@dataclass(frozen=True)
class Settings:
    """Centralized configuration for the contact assistant."""

    # ── LLM Provider ────────────────────────────────────────────
    # Allowed: "openai", "anthropic", "groq", "ollama"
    llm_provider: str = "openai"

    # Model names — only the one matching llm_provider is used.
    llm_model_openai: str = "gpt-4o-mini"
    llm_model_anthropic: str = "claude-3-5-sonnet-latest"
    llm_model_groq: str = "llama-3.3-70b-versatile"
    llm_model_ollama: str = "llama3.2"

    llm_temperature: float = 0.0
    llm_max_tokens: int = 1024
    llm_timeout_seconds: float = 60.0

    # Connection details
    ollama_base_url: str = "http://localhost:11434/"
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    groq_api_key: str = ""

    # Database
    db_path: str = "contacts.db"

    # REST
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    cors_origins: tuple[str, ...] = field(default=("*",))

    log_level: str = "INFO"

    @property
    def active_llm_model(self) -> str:
        """Return the model name for the currently active LLM provider."""
        if self.llm_provider == "openai":
            return self.llm_model_openai
        elif self.llm_provider == "anthropic":
            return self.llm_model_anthropic
        elif self.llm_provider == "groq":
            return self.llm_model_groq
        return self.llm_model_ollama

    @property
    def active_api_key(self) -> str:
        return {
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
            "groq": self.groq_api_key,
        }.get(self.llm_provider, "")

    def validate(self) -> None:
        """Fail fast on an unusable provider configuration.

        Raises:
            ConfigurationError: unknown provider, or missing API key for a
                hosted provider.
        """
        if self.llm_provider not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(
                f"Unsupported LLM_PROVIDER: '{self.llm_provider}'. "
                f"Must be one of {', '.join(SUPPORTED_PROVIDERS)}."
            )
        if self.llm_provider != "ollama" and not self.active_api_key:
            env_name = f"{self.llm_provider.upper()}_API_KEY"
            raise ConfigurationError(
                f"{env_name} is required when LLM_PROVIDER='{self.llm_provider}'"
            )
        if self.llm_timeout_seconds <= 0:
            raise ConfigurationError("LLM_TIMEOUT_SECONDS must be positive")

    @classmethod
    def from_env(cls) -> Settings:
        """Build Settings from environment variables (and a .env file if present)."""
        from dotenv import load_dotenv
        load_dotenv()

        cors = os.getenv("CORS_ORIGINS", "*")

        return cls(
            llm_provider=os.getenv("LLM_PROVIDER", "openai").lower().strip(),
            llm_model_openai=os.getenv("LLM_MODEL_OPENAI", "gpt-4o-mini"),
            llm_model_anthropic=os.getenv("LLM_MODEL_ANTHROPIC", "claude-3-5-sonnet-latest"),
            llm_model_groq=os.getenv("LLM_MODEL_GROQ", "llama-3.3-70b-versatile"),
            llm_model_ollama=os.getenv("LLM_MODEL_OLLAMA", "llama3.2"),
            llm_temperature=float(os.getenv("LLM_TEMPERATURE", "0")),
            llm_max_tokens=int(os.getenv("LLM_MAX_TOKENS", "1024")),
            llm_timeout_seconds=float(os.getenv("LLM_TIMEOUT_SECONDS", "60")),
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434/"),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            # CLAUDE_API_KEY is the legacy name; accept both.
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or os.getenv("CLAUDE_API_KEY", ""),
            groq_api_key=os.getenv("GROQ_API_KEY", ""),
            db_path=os.getenv("DB_PATH", "contacts.db"),
            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=int(os.getenv("API_PORT", "3000")),
            cors_origins=tuple(o.strip() for o in cors.split(",") if o.strip()),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
