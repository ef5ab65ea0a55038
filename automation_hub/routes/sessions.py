"""
Session API Routes.

REST endpoints for sessions and their messages, integrations and
automations. All endpoints are prefixed with /api/sessions.

Every handler resolves the session through ``(session_id, caller id)``
first; a session owned by someone else is reported as not found.
"""

import re
from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response

from ..agents import get_agent_template
from ..context import RequestContext, get_request_context
from ..db.services import (
    AutomationService,
    IntegrationService,
    MessageService,
    SessionService,
    apply_extracted_context,
)
from ..errors import NotFoundError, UpstreamError
from ..integrations.openrouter import OpenRouterClient, get_llm_client
from ..schemas.enums import FILE_EXTENSIONS, MessageRole
from ..schemas.session_v1 import (
    ExtractedContext,
    GenerateCodeRequest,
    IntegrationCreate,
    IntegrationUpdate,
    MessageCreate,
    SessionCreate,
    SessionUpdate,
)
from ..services.code_generator import (
    CodeGenerationRequest,
    generate_automation_code,
    summarize_conversation,
)
from ..services.context_extractor import extract_context_from_messages

logger = structlog.get_logger()

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


def default_title(agent_type: str) -> str:
    template = get_agent_template(agent_type)
    return f"{template.name} Session" if template else "General Session"


def download_filename(name: str, language: str) -> str:
    """``<name>.<ext>`` with whitespace runs collapsed to ``-``."""
    ext = FILE_EXTENSIONS.get(language, "txt")
    safe_name = re.sub(r"\s+", "-", name).replace('"', "")
    return f"{safe_name}.{ext}"


# =============================================================================
# Session Endpoints
# =============================================================================


@router.post("", status_code=201)
async def create_session(
    body: SessionCreate,
    ctx: RequestContext = Depends(get_request_context),
) -> Dict[str, Any]:
    """Create a new session, optionally seeded with the user's first message."""
    agent_type = body.agent_type.value
    db_session = SessionService(ctx.db).create_session(
        user_id=ctx.user_id,
        agent_type=agent_type,
        title=body.title or default_title(agent_type),
        description=body.description,
    )
    if body.initial_message:
        MessageService(ctx.db).append_message(
            db_session, MessageRole.USER.value, body.initial_message
        )

    logger.info(
        "Session created",
        session_id=db_session.id,
        user_id=ctx.user_id,
        agent_type=agent_type,
    )
    return {"sessionId": db_session.id, "agentType": agent_type}


@router.get("")
async def list_sessions(
    ctx: RequestContext = Depends(get_request_context),
) -> Dict[str, Any]:
    """List the caller's sessions, most recently updated first."""
    sessions = SessionService(ctx.db).list_sessions(ctx.user_id)
    return {"sessions": [s.to_summary() for s in sessions]}


@router.get("/{session_id}")
async def get_session(
    session_id: str,
    ctx: RequestContext = Depends(get_request_context),
) -> Dict[str, Any]:
    """Get a session with its messages, integrations and automations."""
    db_session = SessionService(ctx.db).require_session(ctx.user_id, session_id)
    return {
        "session": db_session.to_dict(),
        "messages": [
            m.to_dict() for m in MessageService(ctx.db).list_messages(session_id)
        ],
        "integrations": [
            i.to_dict()
            for i in IntegrationService(ctx.db).list_integrations(session_id)
        ],
        "automations": [
            a.to_dict()
            for a in AutomationService(ctx.db).list_automations(session_id)
        ],
    }


@router.patch("/{session_id}")
async def update_session(
    session_id: str,
    body: SessionUpdate,
    ctx: RequestContext = Depends(get_request_context),
) -> Dict[str, Any]:
    """Update title, description or status."""
    service = SessionService(ctx.db)
    db_session = service.require_session(ctx.user_id, session_id)
    db_session = service.update_session(db_session, body)
    return {"session": db_session.to_dict()}


@router.delete("/{session_id}")
async def delete_session(
    session_id: str,
    ctx: RequestContext = Depends(get_request_context),
) -> Dict[str, Any]:
    """Delete a session and everything it owns."""
    if not SessionService(ctx.db).delete_session(ctx.user_id, session_id):
        raise NotFoundError("Session")

    logger.info("Session deleted", session_id=session_id, user_id=ctx.user_id)
    return {"success": True}


# =============================================================================
# Message Endpoints
# =============================================================================


@router.get("/{session_id}/messages")
async def list_messages(
    session_id: str,
    ctx: RequestContext = Depends(get_request_context),
) -> Dict[str, Any]:
    SessionService(ctx.db).require_session(ctx.user_id, session_id)
    messages = MessageService(ctx.db).list_messages(session_id)
    return {"messages": [m.to_dict() for m in messages]}


@router.post("/{session_id}/messages", status_code=201)
async def append_message(
    session_id: str,
    body: MessageCreate,
    ctx: RequestContext = Depends(get_request_context),
) -> Dict[str, Any]:
    """Append a message to the session's conversation log."""
    db_session = SessionService(ctx.db).require_session(ctx.user_id, session_id)
    message = MessageService(ctx.db).append_message(
        db_session, body.role.value, body.content, body.metadata
    )
    return {"messageId": message.id}


# =============================================================================
# Extraction and Generation Endpoints
# =============================================================================


@router.post("/{session_id}/extract-context")
async def extract_context(
    session_id: str,
    ctx: RequestContext = Depends(get_request_context),
    llm: OpenRouterClient = Depends(get_llm_client),
) -> Dict[str, Any]:
    """Extract structured context from the conversation and store it.

    Upstream and parse failures report an empty extraction and leave the
    stored metadata and integrations untouched.
    """
    db_session = SessionService(ctx.db).require_session(ctx.user_id, session_id)
    messages = MessageService(ctx.db).list_messages(session_id)

    extracted = await extract_context_from_messages(
        messages,
        db_session.agent_type,
        llm,
        model=ctx.settings.extraction_model,
    )
    if extracted is None:
        logger.warning("Context extraction produced nothing", session_id=session_id)
        return {
            "extracted": ExtractedContext.empty().to_dict(),
            "integrationsCreated": 0,
        }

    db_session, created = apply_extracted_context(ctx.db, db_session, extracted)

    logger.info(
        "Context extracted",
        session_id=session_id,
        requirements=len(extracted.requirements),
        integrations_created=len(created),
    )
    return {"extracted": extracted.to_dict(), "integrationsCreated": len(created)}


@router.post("/{session_id}/generate-code")
async def generate_code(
    session_id: str,
    body: Optional[GenerateCodeRequest] = None,
    ctx: RequestContext = Depends(get_request_context),
    llm: OpenRouterClient = Depends(get_llm_client),
) -> Dict[str, Any]:
    """Generate automation code from the session context and store it."""
    db_session = SessionService(ctx.db).require_session(ctx.user_id, session_id)
    messages = MessageService(ctx.db).list_messages(session_id)
    metadata = db_session.session_metadata
    language = body.language.value if body and body.language else None

    request = CodeGenerationRequest(
        agent_type=db_session.agent_type,
        requirements=metadata.requirements,
        tech_stack=metadata.tech_stack,
        constraints=metadata.constraints,
        conversation_summary=summarize_conversation(
            messages, ctx.settings.conversation_summary_limit
        ),
        language=language,
    )

    try:
        files = await generate_automation_code(
            request, llm, model=ctx.settings.generation_model
        )
    except UpstreamError as e:
        logger.error("Code generation failed", session_id=session_id, error=str(e))
        raise HTTPException(status_code=500, detail="Code generation failed")

    automations = AutomationService(ctx.db).create_from_generated(db_session, files)
    logger.info(
        "Code generated", session_id=session_id, generated=len(automations)
    )
    return {
        "generated": len(automations),
        "automationIds": [a.id for a in automations],
    }


# =============================================================================
# Automation Endpoints
# =============================================================================


@router.get("/{session_id}/automations")
async def list_automations(
    session_id: str,
    ctx: RequestContext = Depends(get_request_context),
) -> Dict[str, Any]:
    SessionService(ctx.db).require_session(ctx.user_id, session_id)
    automations = AutomationService(ctx.db).list_automations(session_id)
    return {"automations": [a.to_dict() for a in automations]}


@router.get("/{session_id}/automations/{automation_id}/download")
async def download_automation(
    session_id: str,
    automation_id: str,
    ctx: RequestContext = Depends(get_request_context),
) -> Response:
    """Return the automation's code as an attachment and mark it downloaded."""
    SessionService(ctx.db).require_session(ctx.user_id, session_id)
    service = AutomationService(ctx.db)
    automation = service.require_automation(session_id, automation_id)
    automation = service.mark_downloaded(automation)

    filename = download_filename(automation.name, automation.language)
    return Response(
        content=automation.code,
        media_type="text/plain",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# =============================================================================
# Integration Endpoints
# =============================================================================


@router.get("/{session_id}/integrations")
async def list_integrations(
    session_id: str,
    ctx: RequestContext = Depends(get_request_context),
) -> Dict[str, Any]:
    SessionService(ctx.db).require_session(ctx.user_id, session_id)
    integrations = IntegrationService(ctx.db).list_integrations(session_id)
    return {"integrations": [i.to_dict() for i in integrations]}


@router.post("/{session_id}/integrations", status_code=201)
async def create_integration(
    session_id: str,
    body: IntegrationCreate,
    ctx: RequestContext = Depends(get_request_context),
) -> Dict[str, Any]:
    """Add an integration by hand."""
    db_session = SessionService(ctx.db).require_session(ctx.user_id, session_id)
    integration = IntegrationService(ctx.db).create_integration(db_session, body)
    return {"integration": integration.to_dict()}


@router.patch("/{session_id}/integrations/{integration_id}")
async def update_integration(
    session_id: str,
    integration_id: str,
    body: IntegrationUpdate,
    ctx: RequestContext = Depends(get_request_context),
) -> Dict[str, Any]:
    db_session = SessionService(ctx.db).require_session(ctx.user_id, session_id)
    service = IntegrationService(ctx.db)
    integration = service.require_integration(session_id, integration_id)
    integration = service.update_integration(db_session, integration, body)
    return {"integration": integration.to_dict()}


@router.delete("/{session_id}/integrations/{integration_id}")
async def delete_integration(
    session_id: str,
    integration_id: str,
    ctx: RequestContext = Depends(get_request_context),
) -> Dict[str, Any]:
    db_session = SessionService(ctx.db).require_session(ctx.user_id, session_id)
    service = IntegrationService(ctx.db)
    integration = service.require_integration(session_id, integration_id)
    service.delete_integration(db_session, integration)
    return {"success": True}
