"""
Agent template registry.

``general`` sessions have no template; lookups for it return ``None``.
"""

from typing import Dict, List, Optional

from .base import AgentQuestion, AgentTemplate
from .implementations import research_agent, web_crawler_agent, webapp_developer_agent

AGENT_TEMPLATES: Dict[str, AgentTemplate] = {
    "research": research_agent,
    "webapp_developer": webapp_developer_agent,
    "web_crawler": web_crawler_agent,
}


def get_agent_template(agent_type: str) -> Optional[AgentTemplate]:
    return AGENT_TEMPLATES.get(agent_type)


def list_agent_templates() -> List[AgentTemplate]:
    return list(AGENT_TEMPLATES.values())


__all__ = [
    "AGENT_TEMPLATES",
    "AgentQuestion",
    "AgentTemplate",
    "get_agent_template",
    "list_agent_templates",
]
