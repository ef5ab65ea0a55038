"""
Chat-completion proxy routes.

The browser never sees the provider credential; it posts its chat turns
here and the server forwards them to OpenRouter.
"""

from typing import Any, Dict, List

import structlog
from fastapi import APIRouter, Depends

from ..agents import get_agent_template
from ..context import RequestContext, get_current_user_id, get_request_context
from ..db.services import MessageService, SessionService
from ..integrations.openrouter import OpenRouterClient, get_llm_client
from ..schemas.enums import MessageRole
from ..schemas.session_v1 import ChatRequest

logger = structlog.get_logger()

router = APIRouter(prefix="/api/ai", tags=["ai"])

# Free-tier models offered to the front end. Unknown ids are passed through.
AVAILABLE_MODELS: List[Dict[str, str]] = [
    {
        "id": "meta-llama/llama-3.2-3b-instruct:free",
        "name": "Llama 3.2 3B Instruct",
        "provider": "meta",
        "description": "Meta's latest 3B parameter model with instruction following capabilities",
    },
    {
        "id": "google/gemma-2-9b-it:free",
        "name": "Gemma 2 9B IT",
        "provider": "google",
        "description": "Google's Gemma 2 model with 9B parameters, optimized for instruction following",
    },
    {
        "id": "microsoft/phi-3-mini-128k-instruct:free",
        "name": "Phi-3 Mini 128K",
        "provider": "microsoft",
        "description": "Microsoft's Phi-3 model with 128K context window, optimized for instructions",
    },
    {
        "id": "meta-llama/llama-3.1-8b-instruct:free",
        "name": "Llama 3.1 8B Instruct",
        "provider": "meta",
        "description": "Meta's Llama 3.1 model with 8B parameters and instruction tuning",
    },
    {
        "id": "nousresearch/hermes-3-llama-3.1-405b:free",
        "name": "Hermes 3 Llama 3.1 405B",
        "provider": "nousresearch",
        "description": "Nous Research's Hermes 3 based on Llama 3.1 405B, fine-tuned for chat",
    },
    {
        "id": "google/gemini-flash-1.5:free",
        "name": "Gemini Flash 1.5",
        "provider": "google",
        "description": "Google's Gemini Flash model with 1.5M context window, fast and efficient",
    },
]


@router.get("/models", dependencies=[Depends(get_current_user_id)])
async def list_models() -> Dict[str, Any]:
    return {"models": AVAILABLE_MODELS}


@router.post("/chat")
async def chat(
    body: ChatRequest,
    ctx: RequestContext = Depends(get_request_context),
    llm: OpenRouterClient = Depends(get_llm_client),
) -> Dict[str, Any]:
    """Forward chat turns to the model and return the assistant reply.

    With ``sessionId`` the session's agent system prompt is prepended (unless
    the client already sent a system message) and the reply is appended to
    that session's conversation log.
    """
    messages = [{"role": m.role.value, "content": m.content} for m in body.messages]

    db_session = None
    if body.session_id:
        db_session = SessionService(ctx.db).require_session(
            ctx.user_id, body.session_id
        )
        template = get_agent_template(db_session.agent_type)
        has_system = any(m["role"] == MessageRole.SYSTEM.value for m in messages)
        if template and not has_system:
            messages.insert(
                0, {"role": MessageRole.SYSTEM.value, "content": template.system_prompt}
            )

    model = body.model or ctx.settings.chat_model
    content = await llm.chat_completion(model=model, messages=messages)

    if db_session is not None:
        MessageService(ctx.db).append_message(
            db_session, MessageRole.ASSISTANT.value, content
        )

    logger.info("Chat completion", user_id=ctx.user_id, model=model)
    return {
        "message": {"role": MessageRole.ASSISTANT.value, "content": content},
        "model": model,
    }
