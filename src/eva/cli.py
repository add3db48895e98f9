"""EVA command line interface."""

from __future__ import annotations

import asyncio
import threading

import typer
from rich.console import Console
from rich.table import Table

from eva.config import get_settings
from eva.core import AssistantOrchestrator
from eva.errors import ConfigurationError
from eva.roles import RoleProfileProvider
from eva.session import Message
from eva.types import MessageType, Role

EXIT_COMMANDS = frozenset({"quit", "exit", "q"})


class Renderer:
    """CLI renderer using Rich for terminal output."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self._print_lock = threading.Lock()

    def message(self, session_id: str, message: Message) -> None:
        if message.type is MessageType.USER:
            return
        if message.type is MessageType.TOOL_RESULT:
            self._print(f"[dim]{session_id}[/dim] [bold green]Tools:[/bold green] {message.content}")
            return
        self._print(f"[dim]{session_id}[/dim] [bold yellow]EVA:[/bold yellow] {message.content}")

    def info(self, message: str) -> None:
        self._print(message)

    def _print(self, message: str) -> None:
        with self._print_lock:
            self.console.print(message, markup=True, highlight=False)


def _build_orchestrator(delay: float | None, *, log_profile: str | None = None) -> AssistantOrchestrator:
    overrides: dict[str, object] = {}
    if log_profile is not None:
        overrides["log_profile"] = log_profile
    if delay is not None:
        overrides["tool_delay_seconds"] = delay
    try:
        settings = get_settings(**overrides)
    except ConfigurationError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc
    return AssistantOrchestrator(settings=settings)


async def _chat_loop(orchestrator: AssistantOrchestrator, renderer: Renderer, *, session_id: str, role: str) -> None:
    unsubscribe = orchestrator.store.on_append(renderer.message)
    try:
        orchestrator.greet(session_id, role=role)
        while True:
            raw = await asyncio.to_thread(renderer.console.input, "[bold cyan]You:[/bold cyan] ")
            if raw.strip().lower() in EXIT_COMMANDS:
                break
            await orchestrator.submit(raw, session_id=session_id, role=role)
    finally:
        await orchestrator.aclose()
        unsubscribe()


async def _run_once(orchestrator: AssistantOrchestrator, *, message: str, session_id: str, role: str) -> list[Message]:
    await orchestrator.submit(message, session_id=session_id, role=role)
    await orchestrator.drain()
    return list(orchestrator.get_messages(session_id))


def create_cli_app() -> typer.Typer:
    app = typer.Typer(name="eva", help="Role-aware lending assistant", add_completion=False)

    @app.command("chat")
    def chat(
        role: str = typer.Option("borrower", "--role", "-r", help="Role to chat as"),
        session_id: str = typer.Option("cli", "--session", "-s", help="Session id"),
        delay: float | None = typer.Option(None, "--delay", help="Simulated tool delay in seconds"),
    ) -> None:
        """Start an interactive chat session."""

        orchestrator = _build_orchestrator(delay, log_profile="chat")
        renderer = Renderer()
        renderer.info(f"[bold blue]EVA[/bold blue] ({role}) - type 'quit' to leave")
        try:
            asyncio.run(_chat_loop(orchestrator, renderer, session_id=session_id, role=role))
        except (KeyboardInterrupt, EOFError):
            renderer.info("[dim]bye[/dim]")

    @app.command("run")
    def run(
        message: str = typer.Argument(..., help="Message to send"),
        role: str = typer.Option("borrower", "--role", "-r", help="Role to send as"),
        session_id: str = typer.Option("cli", "--session", "-s", help="Session id"),
        delay: float | None = typer.Option(None, "--delay", help="Simulated tool delay in seconds"),
    ) -> None:
        """Send one message and print the reply and tool results."""

        orchestrator = _build_orchestrator(delay)
        messages = asyncio.run(_run_once(orchestrator, message=message, session_id=session_id, role=role))
        for item in messages:
            if item.type is MessageType.USER:
                continue
            typer.echo(f"[{item.type.value}] {item.content}")

    @app.command("tools")
    def list_tools(
        role: str | None = typer.Option(None, "--role", "-r", help="Only show tools for this role"),
    ) -> None:
        """Show the tool catalog."""

        provider = RoleProfileProvider()
        typer.echo(provider.catalog.render(role))

    @app.command("prompts")
    def list_prompts(
        role: str = typer.Option("borrower", "--role", "-r", help="Role to show prompts for"),
    ) -> None:
        """Show example prompts and goals for a role."""

        provider = RoleProfileProvider()
        profile = provider.profile(role)
        console = Console()
        if Role.from_value(role) is None:
            console.print(f"[dim]Unknown role '{role}', using {profile.role.value} profile[/dim]")

        for prompt in profile.prompts:
            console.print(f"• {prompt}")

        table = Table(title=f"{profile.role.value.title()} goals")
        table.add_column("Goal")
        table.add_column("Priority")
        table.add_column("Expected outcome")
        table.add_column("Timeframe")
        for goal in profile.goals:
            table.add_row(goal.title, goal.priority, goal.expected_outcome, goal.timeframe)
        console.print(table)

    return app


app = create_cli_app()
