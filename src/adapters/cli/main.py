"""
adapters.cli.main - CLI adapter for the contact assistant.

Mirrors src/adapters/rest/ but for terminal use. Uses the same
ServiceFactory, ContactService and AgentExecutor as the REST API so all
behaviour is identical.

Commands
--------
  init       Create the contacts database schema
  ask        One-shot prompt to the assistant
  chat       Interactive session (each line is an independent turn)
  contacts   List contacts, optionally filtered by name/email
  add        Create a contact directly
  delete     Delete a contact by id

Usage
-----
  python run_cli.py ask "I met Sam Lee, sam@x.com, yesterday"
  python run_cli.py contacts --query sam
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from domain.entities import Contact, ContactPatch, format_timestamp
from domain.exceptions import ConfigurationError, DomainError
from domain.models import AgentTurnResult
from factory import ServiceFactory
from infrastructure.config import Settings
from infrastructure.logging_setup import configure_logging

__version__ = "0.1.0"

console = Console()
app = typer.Typer(
    help="Contact CRM Assistant CLI",
    add_completion=False,
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

async def _make_factory(*, with_agent: bool) -> ServiceFactory:
    """Create and initialise a ServiceFactory.

    with_agent=False skips LLM setup, so CRUD commands work without an
    API key.
    """
    config = Settings.from_env()
    configure_logging(config.log_level, rich=True)
    try:
        factory = ServiceFactory(config, with_agent=with_agent)
    except ConfigurationError as exc:
        console.print(f"[bold red]Configuration error:[/bold red] {exc}")
        raise typer.Exit(code=2)
    await factory.initialize()
    return factory


def _contacts_table(contacts: list[Contact], title: str) -> Table:
    t = Table(title=title, box=box.SIMPLE_HEAVY)
    t.add_column("ID", justify="right", style="bold")
    t.add_column("Name")
    t.add_column("Email")
    t.add_column("Phone")
    t.add_column("Last contacted")
    for c in contacts:
        t.add_row(
            str(c.id),
            c.name or "[dim]—[/dim]",
            c.email or "[dim]—[/dim]",
            c.phone or "[dim]—[/dim]",
            format_timestamp(c.last_contacted_at) or "[dim]never[/dim]",
        )
    return t


def _print_turn(result: AgentTurnResult) -> None:
    if not result.success:
        console.print(
            f"[bold red]Agent failed[/bold red] ({result.error_kind}): {result.error}"
        )
        return
    console.print(Panel(result.response or "", title="Assistant", border_style="green"))
    if result.tools_used:
        console.print(f"[dim]Tools used: {', '.join(result.tools_used)}[/dim]")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"contact-crm v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Contact CRM Assistant."""


# ---------------------------------------------------------------------------
# Commands: Setup
# ---------------------------------------------------------------------------

@app.command()
def init() -> None:
    """Create the contacts table if it doesn't exist."""
    async def _run() -> None:
        factory = await _make_factory(with_agent=False)
        console.print(f"[green]Database ready:[/green] {factory.connection.db_path}")

    asyncio.run(_run())


# ---------------------------------------------------------------------------
# Commands: Agent
# ---------------------------------------------------------------------------

@app.command()
def ask(prompt: str = typer.Argument(..., help="What to tell or ask the assistant")) -> None:
    """Run one assistant turn and print the answer."""
    async def _run() -> None:
        factory = await _make_factory(with_agent=True)
        agent = factory.create_agent()
        with console.status("[bold cyan]Thinking…", spinner="dots"):
            result = await agent.run_turn(prompt)
        _print_turn(result)
        if not result.success:
            raise typer.Exit(code=1)

    asyncio.run(_run())


@app.command()
def chat() -> None:
    """Interactive session. Turns are independent: nothing is remembered between them."""
    async def _run() -> None:
        factory = await _make_factory(with_agent=True)
        agent = factory.create_agent()
        console.print(Panel(
            "Tell me about people you met, or ask about your contacts.\n"
            "Type [bold]exit[/bold] to quit.",
            title="Contact Assistant", border_style="blue",
        ))
        while True:
            prompt = await asyncio.to_thread(Prompt.ask, "[bold]You[/bold]")
            if prompt.strip().lower() in {"quit", "exit"}:
                break
            if not prompt.strip():
                continue
            with console.status("[bold cyan]Thinking…", spinner="dots"):
                result = await agent.run_turn(prompt)
            _print_turn(result)

    asyncio.run(_run())


# ---------------------------------------------------------------------------
# Commands: Contacts (DB only — no LLM needed)
# ---------------------------------------------------------------------------

@app.command()
def contacts(
    query: Optional[str] = typer.Option(None, "--query", "-q", help="Name/email substring"),
) -> None:
    """List contacts."""
    async def _run() -> None:
        factory = await _make_factory(with_agent=False)
        found = await factory.create_contact_service().list_contacts(query)
        if not found:
            console.print("[dim]No contacts found.[/dim]")
            return
        title = f"Contacts matching '{query}'" if query else "Contacts"
        console.print(_contacts_table(found, title))

    asyncio.run(_run())


@app.command()
def add(
    name: Optional[str] = typer.Option(None, help="Full name"),
    email: Optional[str] = typer.Option(None, help="Email address (unique)"),
    phone: Optional[str] = typer.Option(None, help="Phone number"),
    notes: Optional[str] = typer.Option(None, help="Initial notes"),
) -> None:
    """Create a contact."""
    async def _run() -> None:
        factory = await _make_factory(with_agent=False)
        try:
            contact = await factory.create_contact_service().create_contact(
                ContactPatch(name=name, email=email, phone=phone, notes=notes)
            )
        except DomainError as exc:
            console.print(f"[bold red]Could not create contact:[/bold red] {exc}")
            raise typer.Exit(code=1)
        console.print(f"[green]Created contact #{contact.id}.[/green]")

    asyncio.run(_run())


@app.command()
def delete(
    contact_id: int = typer.Argument(..., help="Contact id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a contact."""
    if not yes and not Confirm.ask(f"Delete contact #{contact_id}?"):
        return

    async def _run() -> None:
        factory = await _make_factory(with_agent=False)
        try:
            contact = await factory.create_contact_service().delete_contact(contact_id)
        except DomainError as exc:
            console.print(f"[bold red]{exc}[/bold red]")
            raise typer.Exit(code=1)
        label = contact.name or contact.email
        console.print(f"[green]Deleted contact #{contact.id} ({label}).[/green]")

    asyncio.run(_run())


if __name__ == "__main__":
    app()
