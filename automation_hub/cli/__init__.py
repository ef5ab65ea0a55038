"""
Command Line Interface for Automation Hub.
"""

import asyncio
from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..agents import list_agent_templates
from ..config import get_settings
from ..db.base import get_session_local, init_database
from ..db.services import (
    AutomationService,
    MessageService,
    SessionService,
    apply_extracted_context,
)
from ..errors import AutomationHubError
from ..integrations.openrouter import OpenRouterClient
from ..logging_config import configure_logging
from ..services.code_generator import (
    CodeGenerationRequest,
    generate_automation_code,
    summarize_conversation,
)
from ..services.context_extractor import extract_context_from_messages

app = typer.Typer(help="Automation Hub - LLM-assisted automation sessions")
console = Console()


@app.command()
def serve(
    port: Optional[int] = typer.Option(None, help="Port to run the API server on"),
    host: Optional[str] = typer.Option(None, help="Host to bind the server to"),
    dev: bool = typer.Option(False, help="Run in development mode with reload"),
):
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    rprint(Panel.fit("Starting Automation Hub", style="bold blue"))
    uvicorn.run(
        "automation_hub.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=dev,
        workers=1 if dev else settings.api_workers,
    )


@app.command()
def init_db():
    """Create all database tables."""
    configure_logging()
    asyncio.run(init_database())
    console.print("✅ Database initialized")


@app.command()
def agents():
    """List the available agent templates."""
    table = Table(title="Agent Templates", show_header=True, header_style="bold cyan")
    table.add_column("Type", style="yellow")
    table.add_column("Name", style="green")
    table.add_column("Questions", style="blue")
    table.add_column("Description")

    for template in list_agent_templates():
        table.add_row(
            template.id,
            template.name,
            str(len(template.questions)),
            template.description,
        )

    console.print(table)


@app.command()
def sessions(user_id: str = typer.Argument(..., help="Owner of the sessions")):
    """List a user's sessions, most recently updated first."""
    db = get_session_local()()
    try:
        rows = SessionService(db).list_sessions(user_id)
    finally:
        db.close()

    if not rows:
        console.print("No sessions found")
        return

    table = Table(title=f"Sessions for {user_id}", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan")
    table.add_column("Agent", style="yellow")
    table.add_column("Title")
    table.add_column("Status", style="green")
    table.add_column("Updated")

    for row in rows:
        summary = row.to_summary()
        table.add_row(
            summary["id"],
            summary["agentType"],
            summary["title"],
            summary["status"],
            summary["updatedAt"] or "",
        )

    console.print(table)


@app.command()
def extract(
    user_id: str = typer.Argument(..., help="Owner of the session"),
    session_id: str = typer.Argument(..., help="Session to extract context from"),
):
    """Run context extraction for a stored session."""
    configure_logging()
    settings = get_settings()

    async def run() -> None:
        db = get_session_local()()
        client = OpenRouterClient.from_settings(settings)
        try:
            db_session = SessionService(db).require_session(user_id, session_id)
            messages = MessageService(db).list_messages(session_id)
            extracted = await extract_context_from_messages(
                messages, db_session.agent_type, client, model=settings.extraction_model
            )
            if extracted is None:
                console.print("❌ Extraction failed; stored context left unchanged")
                raise typer.Exit(code=1)
            _, created = apply_extracted_context(db, db_session, extracted)
        finally:
            await client.close()
            db.close()

        console.print_json(data=extracted.to_dict())
        console.print(f"✅ {len(created)} new integration(s)")

    try:
        asyncio.run(run())
    except AutomationHubError as e:
        console.print(f"❌ {e.message}")
        raise typer.Exit(code=1)


@app.command()
def generate(
    user_id: str = typer.Argument(..., help="Owner of the session"),
    session_id: str = typer.Argument(..., help="Session to generate code for"),
    language: Optional[str] = typer.Option(None, help="Preferred language"),
):
    """Generate automation code for a stored session."""
    configure_logging()
    settings = get_settings()

    async def run() -> None:
        db = get_session_local()()
        client = OpenRouterClient.from_settings(settings)
        try:
            db_session = SessionService(db).require_session(user_id, session_id)
            messages = MessageService(db).list_messages(session_id)
            metadata = db_session.session_metadata
            request = CodeGenerationRequest(
                agent_type=db_session.agent_type,
                requirements=metadata.requirements,
                tech_stack=metadata.tech_stack,
                constraints=metadata.constraints,
                conversation_summary=summarize_conversation(
                    messages, settings.conversation_summary_limit
                ),
                language=language,
            )
            files = await generate_automation_code(
                request, client, model=settings.generation_model
            )
            automations = AutomationService(db).create_from_generated(db_session, files)
            for automation in automations:
                console.print(
                    f"✅ {automation.name} ({automation.language}) -> {automation.id}"
                )
        finally:
            await client.close()
            db.close()

    try:
        asyncio.run(run())
    except AutomationHubError as e:
        console.print(f"❌ {e.message}")
        raise typer.Exit(code=1)


@app.command()
def version():
    """Show version information."""
    from .. import __version__

    rprint(Panel.fit(f"Automation Hub v{__version__}", style="bold green"))


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
