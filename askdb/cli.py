"""
AskDB CLI

Command-line interface for AskDB.

Usage:
    askdb ask "How many users signed up today?" --uri postgresql://...
    askdb chat --uri postgresql://... --name prod    # Interactive REPL
    askdb suggest --uri postgresql://...              # Sample questions
    askdb quota status                                # Shared counter usage
    askdb quota reset --password ...                  # Zero the counter
    askdb serve --port 8000                           # Run the HTTP API
"""

import asyncio
import logging
import sys
from functools import partial

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from askdb import __version__
from askdb.chat.controller import ChatController
from askdb.config import get_settings
from askdb.connectors.base import ConnectorError
from askdb.connectors.postgres import execute_sql, fetch_schema
from askdb.errors import AskDBError
from askdb.models.chat import QueryResult
from askdb.quota.limiter import reset_password_matches
from askdb.services import Services, open_services

console = Console()

URI_ENVVAR = "ASKDB_DATABASE_URI"

REPL_HELP = (
    "Commands: /run [SQL], /regen, /fix, /new, /history, /load ID, /clear, exit"
)


def configure_cli_logging() -> None:
    logging.disable(logging.CRITICAL)
    for logger_name in ("askdb", "httpx", "openai", "asyncio", "asyncpg"):
        logging.getLogger(logger_name).setLevel(logging.CRITICAL)


def print_sql(sql: str) -> None:
    console.print(Panel(sql, title="SQL", border_style="cyan", highlight=True))


def print_result(result: QueryResult | None) -> None:
    if result is None:
        return
    table = Table(show_header=True, header_style="bold cyan")
    for column in result.columns:
        table.add_column(column)
    for row in result.rows:
        table.add_row(*[str(row.get(column, "")) for column in result.columns])
    console.print(table)
    console.print(f"[dim]{result.row_count} rows in {result.execution_time_ms:.1f}ms[/dim]")


def print_state(controller: ChatController) -> None:
    if controller.sql:
        print_sql(controller.sql)
    if controller.execution_error:
        console.print(f"[red]Execution error: {controller.execution_error}[/red]")
        console.print("[yellow]Type /fix to ask for a corrected query.[/yellow]")
    else:
        print_result(controller.result)


async def _with_services(work) -> None:
    services = await open_services(get_settings())
    try:
        await work(services)
    finally:
        await services.close()


def _run(work) -> None:
    try:
        asyncio.run(_with_services(work))
    except (AskDBError, ConnectorError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="AskDB")
def cli():
    """AskDB - Natural language to SQL for PostgreSQL."""
    configure_cli_logging()


@cli.command()
@click.argument("prompt")
@click.option("--uri", envvar=URI_ENVVAR, required=True, help="Target database URL.")
@click.option("--samples/--no-samples", default=False, help="Send sample rows with the schema.")
@click.option("--execute/--no-execute", default=True, help="Run the generated SQL.")
def ask(prompt: str, uri: str, samples: bool, execute: bool):
    """Generate SQL for a single question and run it."""

    async def work(services: Services) -> None:
        with console.status("[cyan]Reading schema...[/cyan]", spinner="dots"):
            schema = await fetch_schema(uri, include_samples=samples)
        with console.status("[cyan]Generating SQL...[/cyan]", spinner="dots"):
            sql = await services.sql_generator.generate(schema, prompt=prompt)
        print_sql(sql)
        if execute:
            print_result(await execute_sql(uri, sql))

    _run(work)


@cli.command()
@click.option("--uri", envvar=URI_ENVVAR, required=True, help="Target database URL.")
@click.option("--name", default="default", show_default=True, help="Connection name for history.")
@click.option("--samples/--no-samples", default=False, help="Send sample rows with the schema.")
def chat(uri: str, name: str, samples: bool):
    """Interactive REPL with session history, regenerate and auto-fix."""
    console.print(
        Panel.fit(
            f"[bold green]AskDB Interactive Mode[/bold green] ({name})\n{REPL_HELP}",
            border_style="green",
        )
    )

    async def work(services: Services) -> None:
        controller = services.chats.get(name)
        with console.status("[cyan]Reading schema...[/cyan]", spinner="dots"):
            controller.schema = await fetch_schema(uri, include_samples=samples)
        controller.executor = partial(execute_sql, uri)

        while True:
            try:
                line = console.input("[bold cyan]You:[/bold cyan] ").strip()
            except (EOFError, KeyboardInterrupt):
                console.print("\n[yellow]Goodbye![/yellow]")
                break
            if not line:
                continue
            if line.lower() in {"exit", "quit", "q"}:
                console.print("[yellow]Goodbye![/yellow]")
                break
            try:
                await handle_repl_line(controller, line)
            except AskDBError as e:
                console.print(f"[red]Error: {e.message}[/red]")

    _run(work)


async def handle_repl_line(controller: ChatController, line: str) -> None:
    """Dispatch one REPL line to the chat controller."""
    command, _, argument = line.partition(" ")
    argument = argument.strip()

    if command == "/regen":
        if not await controller.regenerate():
            console.print("[yellow]Nothing to regenerate.[/yellow]")
            return
    elif command == "/fix":
        if not await controller.auto_fix():
            console.print("[yellow]No execution error to fix.[/yellow]")
            return
    elif command == "/run":
        await controller.run(argument or None)
    elif command == "/new":
        controller.new_chat()
        console.print("[green]Started a new chat.[/green]")
        return
    elif command == "/history":
        sessions = await controller.sessions()
        if not sessions:
            console.print("[dim]No saved sessions.[/dim]")
            return
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("ID")
        table.add_column("Title")
        table.add_column("Created")
        for session in sessions:
            table.add_row(session.id, session.title or "(untitled)", session.created.isoformat())
        console.print(table)
        return
    elif command == "/load":
        if not argument or not await controller.load(argument):
            console.print(f"[yellow]Unknown session: {argument}[/yellow]")
            return
        for message in controller.messages:
            console.print(f"[bold]{message.role}:[/bold] {message.content}")
    elif command == "/clear":
        await controller.clear_history()
        console.print("[green]History cleared.[/green]")
        return
    elif command.startswith("/"):
        console.print(f"[yellow]Unknown command. {REPL_HELP}[/yellow]")
        return
    else:
        with console.status("[cyan]Generating SQL...[/cyan]", spinner="dots"):
            await controller.submit(line)

    print_state(controller)


@cli.command()
@click.option("--uri", envvar=URI_ENVVAR, required=True, help="Target database URL.")
def suggest(uri: str):
    """Suggest example questions for the target database."""

    async def work(services: Services) -> None:
        schema = await fetch_schema(uri)
        with console.status("[cyan]Thinking of questions...[/cyan]", spinner="dots"):
            suggestions = await services.sample_questions.generate(schema)
        if not suggestions:
            console.print("[yellow]No suggestions available.[/yellow]")
        for index, question in enumerate(suggestions, 1):
            console.print(f"{index}. {question}")

    _run(work)


@cli.group(name="quota")
def quota():
    """Inspect or reset the shared request counter."""


@quota.command(name="status")
def quota_status():
    async def work(services: Services) -> None:
        usage = await services.rate_limiter.usage()
        ttl = usage["ttl"]
        console.print(
            f"Used {usage['count']}/{usage['limit']} "
            f"({usage['remaining']} remaining)"
            + (f", resets in {ttl}s" if ttl is not None else "")
        )

    _run(work)


@quota.command(name="reset")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    help="Shared reset secret (QUOTA_RESET_PASSWORD).",
)
def quota_reset(password: str):
    """Zero the shared request counter."""
    if not reset_password_matches(get_settings().quota.reset_password, password):
        console.print("[red]Error: Unauthorized[/red]")
        sys.exit(1)

    async def work(services: Services) -> None:
        await services.rate_limiter.reset()
        console.print("[green]Quota counter reset.[/green]")

    _run(work)


@cli.command()
@click.option("--host", default=None, help="Bind address (defaults to API_HOST).")
@click.option("--port", default=None, type=int, help="Port (defaults to API_PORT).")
@click.option("--reload", is_flag=True, help="Reload on code changes.")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "askdb.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
    )


# ============================================================================
# Entry Point
# ============================================================================


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
