"""
infrastructure.logging_setup - Process-wide logging configuration.

Entry points (run_api.py, the CLI) call configure_logging() once. Library
modules only ever do ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO", *, rich: bool = False) -> None:
    """Configure the root logger.

    Args:
        level: Log level name, e.g. "INFO" or "DEBUG".
        rich:  Render through rich's handler (used by the CLI so log lines
               don't tear the console output).
    """
    numeric = getattr(logging, level.upper(), logging.INFO)

    if rich:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=numeric,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
            force=True,
        )
    else:
        logging.basicConfig(level=numeric, format=_FORMAT, force=True)

    # Provider SDKs are chatty at INFO (one line per HTTP request).
    for noisy in ("httpx", "httpcore", "openai", "anthropic"):
        logging.getLogger(noisy).setLevel(max(numeric, logging.WARNING))
