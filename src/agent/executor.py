"""
agent.executor - Agent execution engine.

Runs one conversation turn: prompt → model → (tools → model) → answer.
At most one tool round per turn; the follow-up call offers no tools.
No component construction, no global state, no business logic.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

from application.context import TurnContext
from domain.exceptions import DomainError, ValidationError
from domain.models import AgentTurnResult, ConversationMessage
from domain.ports import LanguageModelClient
from agent.prompt import build_system_prompt
from agent.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

NO_TOOL_FALLBACK = "I can help you manage your contacts."
TOOL_FALLBACK = "Action completed successfully."


class TurnState(str, Enum):
    AWAITING_MODEL = "awaiting_model"
    TOOLS_REQUESTED = "tools_requested"
    EXECUTING_TOOLS = "executing_tools"
    AWAITING_FOLLOW_UP = "awaiting_follow_up"
    DONE = "done"


class AgentExecutor:
    """Runs the LLM + tool dispatch cycle for a single request.

    Constructed by factory.py with all dependencies injected. Holds no
    per-request state; the conversation lives in run_turn's locals.
    """

    def __init__(self, llm: LanguageModelClient, tools: ToolRegistry):
        self._llm = llm
        self._tools = tools

    async def run_turn(
        self, prompt: Any, ctx: Optional[TurnContext] = None,
    ) -> AgentTurnResult:
        """Process a user prompt and return the final answer.

        Never raises: invalid input and every downstream failure come back
        as ``AgentTurnResult(success=False, error_kind=...)``.

        Args:
            prompt: The user's message text.
            ctx:    Turn context; a fresh one is created when omitted.

        Returns:
            The answer and the ordered names of the tools dispatched.
        """
        if not isinstance(prompt, str) or not prompt.strip():
            return _failure(ValidationError("Prompt is required and must be a string"))

        ctx = ctx or TurnContext()
        logger.info("Agent turn %s: %s", ctx.request_id, prompt[:80])

        try:
            return await self._run(ctx, prompt)
        except DomainError as exc:
            logger.warning("Agent turn %s failed (%s): %s", ctx.request_id, exc.kind, exc)
            return _failure(exc)
        except Exception as exc:
            logger.exception("Agent turn %s failed unexpectedly", ctx.request_id)
            return AgentTurnResult(
                success=False,
                error=f"Failed to process agent request: {exc}",
                error_kind=DomainError.kind,
            )

    async def _run(self, ctx: TurnContext, prompt: str) -> AgentTurnResult:
        system_prompt = build_system_prompt(self._tools, ctx.today)
        history = [ConversationMessage.user(prompt)]

        state = self._transition(ctx, None, TurnState.AWAITING_MODEL)
        reply = await self._llm.converse(system_prompt, history, self._tools.descriptors())

        if not reply.wants_tools:
            self._transition(ctx, state, TurnState.DONE)
            return AgentTurnResult(
                success=True, response=reply.text or NO_TOOL_FALLBACK, tools_used=[],
            )

        state = self._transition(ctx, state, TurnState.TOOLS_REQUESTED)
        history.append(ConversationMessage.assistant(reply))

        state = self._transition(ctx, state, TurnState.EXECUTING_TOOLS)
        tools_used: list[str] = []
        for request in reply.tool_invocations:
            result = await self._tools.invoke(request, ctx)
            tools_used.append(request.tool_name)
            history.append(ConversationMessage.tool(result))

        state = self._transition(ctx, state, TurnState.AWAITING_FOLLOW_UP)
        follow_up = await self._llm.converse(system_prompt, history, None)

        self._transition(ctx, state, TurnState.DONE)
        return AgentTurnResult(
            success=True, response=follow_up.text or TOOL_FALLBACK, tools_used=tools_used,
        )

    @staticmethod
    def _transition(
        ctx: TurnContext, current: Optional[TurnState], new: TurnState,
    ) -> TurnState:
        logger.debug(
            "Turn %s: %s -> %s",
            ctx.request_id, current.value if current else "start", new.value,
        )
        return new


def _failure(exc: DomainError) -> AgentTurnResult:
    return AgentTurnResult(success=False, error=str(exc), error_kind=exc.kind)
