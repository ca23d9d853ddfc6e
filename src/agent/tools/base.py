"""
agent.tools.base - Base tool interface.

All agent tools inherit from BaseTool. execute() returns the success
payload as a plain dict and signals failure by raising a DomainError;
the registry turns either outcome into a ToolInvocationResult.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from application.context import TurnContext
from domain.models import ToolDescriptor


class BaseTool(ABC):
    """Abstract base for all agent tools."""

    name: str
    description: str

    @abstractmethod
    async def execute(self, ctx: TurnContext, **kwargs) -> dict[str, Any]:
        """Execute the tool with validated arguments and return its payload."""
        ...

    @abstractmethod
    def get_schema(self) -> type[BaseModel]:
        """Return the Pydantic schema for this tool's input arguments."""
        ...

    def descriptor(self) -> ToolDescriptor:
        return ToolDescriptor(
            name=self.name,
            description=self.description,
            argument_schema=self.get_schema(),
        )
