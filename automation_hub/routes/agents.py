"""
Agent template routes.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from ..agents import get_agent_template, list_agent_templates
from ..context import get_current_user_id

router = APIRouter(
    prefix="/api/agents",
    tags=["agents"],
    dependencies=[Depends(get_current_user_id)],
)


@router.get("")
async def list_agents() -> Dict[str, Any]:
    """List all available agent templates."""
    return {"agents": [t.summary() for t in list_agent_templates()]}


@router.get("/{agent_type}")
async def get_agent(agent_type: str) -> Dict[str, Any]:
    """Get a specific agent template, including its question flow."""
    template = get_agent_template(agent_type)
    if template is None:
        raise HTTPException(status_code=404, detail="Agent not found")
    return {"agent": template.to_dict()}
