"""
application.context - Request-scoped turn context.

Every agent turn gets its own TurnContext; nothing in it outlives the
HTTP request. Two concurrent requests get two different instances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4

from domain.entities import utc_now


@dataclass
class TurnContext:
    """Per-request context passed to the agent and its tools.

    Attributes:
        request_id: Unique per request, for tracing/logging.
        now:        The instant the turn started. Used for the date in the
                    system prompt and as the default interaction time.
    """
    request_id: str = field(default_factory=lambda: uuid4().hex)
    now: datetime = field(default_factory=utc_now)

    @property
    def today(self) -> str:
        """Current date as YYYY-MM-DD."""
        return self.now.date().isoformat()
