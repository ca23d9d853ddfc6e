"""
Run the Contact CRM Assistant REST API.

Usage:
    python run_api.py

Environment variables (all optional unless noted):
    LLM_PROVIDER         "openai", "anthropic", "groq" or "ollama" (default: openai)
    LLM_MODEL_OPENAI     Model when LLM_PROVIDER=openai (default: gpt-4o-mini)
    LLM_MODEL_ANTHROPIC  Model when LLM_PROVIDER=anthropic (default: claude-3-5-sonnet-latest)
    OPENAI_API_KEY       Required when LLM_PROVIDER=openai
    ANTHROPIC_API_KEY    Required when LLM_PROVIDER=anthropic (CLAUDE_API_KEY also accepted)
    GROQ_API_KEY         Required when LLM_PROVIDER=groq
    LLM_TIMEOUT_SECONDS  Upper bound for one model call (default: 60)
    DB_PATH              SQLite database file path (default: contacts.db)
    API_HOST / API_PORT  Bind address (default: 0.0.0.0:3000)
    LOG_LEVEL            Logging level (default: INFO)
"""

import sys
from pathlib import Path

# Ensure src/ is importable
sys.path.insert(0, str(Path(__file__).parent / "src"))

import uvicorn

from infrastructure.config import Settings
from infrastructure.logging_setup import configure_logging

if __name__ == "__main__":
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(
        "adapters.rest.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
        log_config=None,
    )
