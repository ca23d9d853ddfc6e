"""
infrastructure.llm.model_client - LanguageModelClient over LangChain chat models.

One adapter for every vendor: LangChain's message types already normalise
OpenAI function calls and Anthropic tool_use blocks, so this module only
translates between domain messages and LangChain messages and enforces
the call timeout.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Sequence
from uuid import uuid4

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)
from langchain_core.utils.function_calling import convert_to_openai_tool

from domain.exceptions import UpstreamServiceError
from domain.models import (
    ConversationMessage,
    ModelReply,
    ToolDescriptor,
    ToolInvocationRequest,
)

logger = logging.getLogger(__name__)

_EXECUTED_TOOL_DESCRIPTION = "Already executed for this request; do not call again."


class LangChainModelClient:
    """Implements the LanguageModelClient port with any LangChain chat model.

    Args:
        chat_model:     Model built by llm_builder.build_chat_model().
        timeout_seconds: Upper bound for one converse() call.
        echo_tool_definitions: Re-declare tools that appear in the history
            when no tools are offered (Anthropic rejects tool_use blocks
            otherwise). Any calls the model makes against them are dropped.
    """

    def __init__(
        self,
        chat_model: BaseChatModel,
        timeout_seconds: float = 60.0,
        echo_tool_definitions: bool = False,
    ):
        self._model = chat_model
        self._timeout = timeout_seconds
        self._echo_tool_definitions = echo_tool_definitions

    async def converse(
        self,
        system_instruction: str,
        messages: Sequence[ConversationMessage],
        tools: Optional[Sequence[ToolDescriptor]] = None,
    ) -> ModelReply:
        lc_messages: list[BaseMessage] = [SystemMessage(content=system_instruction)]
        lc_messages.extend(_to_langchain(m) for m in messages)

        runnable: Any = self._model
        if tools:
            runnable = self._model.bind_tools([_tool_spec(t) for t in tools])
        elif self._echo_tool_definitions:
            executed = _executed_tool_specs(messages)
            if executed:
                runnable = self._model.bind_tools(executed)

        try:
            response = await asyncio.wait_for(
                runnable.ainvoke(lc_messages), timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            logger.warning("Language model call timed out after %.1fs", self._timeout)
            raise UpstreamServiceError(
                f"Language model did not respond within {self._timeout:g} seconds"
            ) from exc
        except Exception as exc:
            logger.exception("Language model call failed")
            raise UpstreamServiceError(f"Language model call failed: {exc}") from exc

        if not isinstance(response, AIMessage):
            raise UpstreamServiceError(
                f"Unexpected response type from language model: {type(response).__name__}"
            )
        return _from_langchain(response, allow_tools=bool(tools))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _to_langchain(message: ConversationMessage) -> BaseMessage:
    if message.role == "user":
        return HumanMessage(content=message.content)
    if message.role == "assistant":
        return AIMessage(
            content=message.content,
            tool_calls=[
                {"name": inv.tool_name, "args": inv.arguments, "id": inv.id, "type": "tool_call"}
                for inv in message.tool_invocations
            ],
        )
    if message.role == "tool":
        result = message.tool_result
        return ToolMessage(
            content=message.content,
            tool_call_id=result.id if result else "",
            name=result.tool_name if result else None,
            status="success" if result is None or result.success else "error",
        )
    raise ValueError(f"Unknown conversation role: {message.role!r}")


def _from_langchain(response: AIMessage, allow_tools: bool) -> ModelReply:
    text = _extract_text(response.content)
    invalid = getattr(response, "invalid_tool_calls", None) or []

    if not allow_tools:
        if response.tool_calls or invalid:
            logger.info(
                "Dropping %d tool call(s) requested when no tools were offered",
                len(response.tool_calls) + len(invalid),
            )
        return ModelReply(text=text)

    invocations = [
        ToolInvocationRequest(
            id=call.get("id") or _new_call_id(),
            tool_name=call["name"],
            arguments=dict(call.get("args") or {}),
        )
        for call in response.tool_calls
    ]
    # Undecodable arguments are answered with a failure result, not executed.
    for bad in invalid:
        name = bad.get("name") or "unknown"
        logger.warning("Model sent malformed arguments for %s: %s", name, bad.get("error"))
        invocations.append(ToolInvocationRequest(
            id=bad.get("id") or _new_call_id(),
            tool_name=name,
            argument_error=(
                f"Invalid arguments for {name}: could not decode "
                f"{bad.get('args')!r} ({bad.get('error') or 'malformed JSON'})"
            ),
        ))
    return ModelReply(text=text, tool_invocations=tuple(invocations))


def _new_call_id() -> str:
    return f"call_{uuid4().hex[:12]}"


def _extract_text(content: Any) -> Optional[str]:
    """Plain text from an AIMessage content (str or list of content blocks)."""
    if isinstance(content, str):
        return content.strip() or None
    parts: list[str] = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    joined = "".join(parts).strip()
    return joined or None


def _tool_spec(descriptor: ToolDescriptor) -> dict[str, Any]:
    """OpenAI-format tool definition; every chat model's bind_tools() accepts it."""
    return convert_to_openai_tool({
        **descriptor.to_json_schema(),
        "title": descriptor.name,
        "description": descriptor.description,
    })


def _executed_tool_specs(messages: Sequence[ConversationMessage]) -> list[dict[str, Any]]:
    names: list[str] = []
    for message in messages:
        for inv in message.tool_invocations:
            if inv.tool_name not in names:
                names.append(inv.tool_name)
    return [
        convert_to_openai_tool({
            "title": name,
            "description": _EXECUTED_TOOL_DESCRIPTION,
            "type": "object",
            "properties": {},
        })
        for name in names
    ]
