"""
agent.tools.registry - Tool registration, discovery, and invocation.

Central catalog of the tools the model may call. Built once at process
start, frozen, then shared by every request. invoke() validates the
model's arguments against the tool's schema and always returns a
ToolInvocationResult; it never raises.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError as SchemaValidationError

from application.context import TurnContext
from domain.exceptions import DomainError, UnknownToolError, ValidationError
from domain.models import ToolDescriptor, ToolInvocationRequest, ToolInvocationResult
from agent.tools.base import BaseTool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Manages tool registration and invocation."""

    def __init__(self):
        self._tools: dict[str, BaseTool] = {}
        self._descriptors: tuple[ToolDescriptor, ...] | None = None

    def register(self, tool: BaseTool) -> None:
        """Register a tool by its name. Not allowed once frozen."""
        if self._descriptors is not None:
            raise RuntimeError("ToolRegistry is frozen; register tools before first use")
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' already registered")
        self._tools[tool.name] = tool
        logger.debug("Registered tool: %s", tool.name)

    def freeze(self) -> ToolRegistry:
        self._descriptors = tuple(t.descriptor() for t in self._tools.values())
        return self

    def get(self, name: str) -> BaseTool:
        """Get a tool by name."""
        if name not in self._tools:
            raise UnknownToolError(f"Unknown function: {name}")
        return self._tools[name]

    def names(self) -> list[str]:
        """Return all registered tool names."""
        return list(self._tools.keys())

    def descriptors(self) -> tuple[ToolDescriptor, ...]:
        """The ordered catalog handed verbatim to every model call."""
        if self._descriptors is None:
            self.freeze()
        return self._descriptors

    async def invoke(
        self, request: ToolInvocationRequest, ctx: TurnContext,
    ) -> ToolInvocationResult:
        """Validate arguments, run the tool, and wrap the outcome."""
        try:
            tool = self.get(request.tool_name)
        except UnknownToolError as exc:
            logger.warning("Model requested unknown tool '%s'", request.tool_name)
            return ToolInvocationResult.failure(request, str(exc), exc.kind)

        if request.argument_error is not None:
            logger.info(
                "Rejected arguments (request=%s): %s", ctx.request_id, request.argument_error,
            )
            return ToolInvocationResult.failure(
                request, request.argument_error, ValidationError.kind,
            )

        try:
            args = tool.get_schema().model_validate(request.arguments)
        except SchemaValidationError as exc:
            message = _describe_schema_errors(request.tool_name, exc)
            logger.info("Rejected arguments (request=%s): %s", ctx.request_id, message)
            return ToolInvocationResult.failure(request, message, ValidationError.kind)

        logger.info(
            "Invoking tool %s (request=%s, call=%s)",
            tool.name, ctx.request_id, request.id,
        )
        try:
            data = await tool.execute(ctx, **args.model_dump())
        except DomainError as exc:
            logger.info("Tool %s failed with %s: %s", tool.name, exc.kind, exc)
            return ToolInvocationResult.failure(request, str(exc), exc.kind)
        except Exception as exc:
            logger.exception("Tool %s raised unexpectedly", tool.name)
            return ToolInvocationResult.failure(
                request, str(exc) or type(exc).__name__, DomainError.kind,
            )

        return ToolInvocationResult.ok(request, data)


def _describe_schema_errors(tool_name: str, exc: SchemaValidationError) -> str:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "arguments"
        problems.append(f"{location}: {err.get('msg')}")
    return f"Invalid arguments for {tool_name}: " + "; ".join(problems)
