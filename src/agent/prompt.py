"""
agent.prompt - System prompt for the contact assistant.

Built per turn so it always carries today's date, and from the registry
so only rules for registered tools are stated.
"""

from __future__ import annotations

from agent.tools.registry import ToolRegistry


def build_system_prompt(registry: ToolRegistry, today: str) -> str:
    """Build the system instruction for one turn.

    Args:
        registry: The tool registry with all registered tools.
        today:    Current date as YYYY-MM-DD.

    Returns:
        The system prompt string.
    """
    tool_names = registry.names()

    rules = []
    if "resolveContact" in tool_names:
        rules.append(
            "If the user implies an action such as adding someone, updating their "
            "details, or mentioning that they met or contacted someone, call "
            "'resolveContact'. Convert relative dates like 'yesterday' into an "
            "ISO date for interactionDate."
        )
    if "searchContacts" in tool_names:
        rules.append(
            "If the user asks a question about their existing contacts, call "
            "'searchContacts' with the most distinctive word from the question."
        )
    rules.append("Otherwise, answer directly without calling any tool.")

    numbered = "\n".join(f"{i}. {rule}" for i, rule in enumerate(rules, start=1))

    return (
        f"You are a CRM assistant. Today's date is {today}. "
        "Manage contacts intelligently.\n\n"
        f"{numbered}\n\n"
        "Always summarize what you did in the final response."
    )
