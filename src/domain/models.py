"""
domain.models - Value objects for the tool-calling conversation.

Immutable data containers with no dependencies on infrastructure (no
LangChain, no SQLite). Provider adapters translate to and from these.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ToolDescriptor:
    """Name, model-facing description and argument schema of one tool."""
    name: str
    description: str
    argument_schema: type[BaseModel]

    def to_json_schema(self) -> dict[str, Any]:
        """JSON schema of the arguments, trimmed of pydantic's titles."""
        schema = self.argument_schema.model_json_schema()
        schema.pop("title", None)
        for prop in schema.get("properties", {}).values():
            prop.pop("title", None)
        return schema


@dataclass(frozen=True)
class ToolInvocationRequest:
    """A tool call requested by the model. ``id`` correlates the result.

    ``argument_error`` is set when the provider could not decode the
    arguments the model produced; such a call is answered with a failure
    result instead of being executed.
    """
    id: str
    tool_name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    argument_error: Optional[str] = None


@dataclass(frozen=True)
class ToolInvocationResult:
    """Outcome of one tool call, always produced, never raised."""
    id: str
    tool_name: str
    success: bool
    data: dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def ok(cls, request: ToolInvocationRequest, data: dict[str, Any]) -> ToolInvocationResult:
        return cls(id=request.id, tool_name=request.tool_name, success=True, data=data)

    @classmethod
    def failure(
        cls, request: ToolInvocationRequest, error: str, kind: str,
    ) -> ToolInvocationResult:
        return cls(
            id=request.id, tool_name=request.tool_name, success=False,
            error=error, error_kind=kind,
        )

    def to_payload(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, **self.data}
        return {"success": False, "error": self.error, "errorKind": self.error_kind}

    def to_json(self) -> str:
        return json.dumps(self.to_payload(), default=str)


# ---------------------------------------------------------------------------
# Conversation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ModelReply:
    """What the language model answered: text, tool calls, or both."""
    text: Optional[str] = None
    tool_invocations: tuple[ToolInvocationRequest, ...] = ()

    @property
    def wants_tools(self) -> bool:
        return bool(self.tool_invocations)


@dataclass(frozen=True)
class ConversationMessage:
    """One entry of a request-scoped conversation turn.

    role is "user", "assistant" or "tool". Assistant messages may carry the
    tool calls they requested; tool messages carry exactly one result.
    """
    role: str
    content: str = ""
    tool_invocations: tuple[ToolInvocationRequest, ...] = ()
    tool_result: Optional[ToolInvocationResult] = None

    @classmethod
    def user(cls, content: str) -> ConversationMessage:
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, reply: ModelReply) -> ConversationMessage:
        return cls(
            role="assistant",
            content=reply.text or "",
            tool_invocations=reply.tool_invocations,
        )

    @classmethod
    def tool(cls, result: ToolInvocationResult) -> ConversationMessage:
        return cls(role="tool", content=result.to_json(), tool_result=result)


@dataclass(frozen=True)
class AgentTurnResult:
    """Outcome of one agent turn, shaped for the HTTP envelope."""
    success: bool
    response: Optional[str] = None
    tools_used: list[str] = field(default_factory=list)
    error: Optional[str] = None
    error_kind: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {
                "success": True,
                "response": self.response,
                "toolsUsed": list(self.tools_used),
            }
        return {"success": False, "error": self.error, "errorKind": self.error_kind}
