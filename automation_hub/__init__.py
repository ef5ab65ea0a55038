"""
Automation Hub

Automation sessions backed by an LLM: chat, context extraction and code
generation.
"""

import importlib.metadata

__version__ = importlib.metadata.version("automation-hub")

from .agents import AgentTemplate, get_agent_template, list_agent_templates
from .errors import ConfigurationError, NotFoundError, UpstreamError
from .schemas import ExtractedContext, GeneratedFile

__all__ = [
    "AgentTemplate",
    "ConfigurationError",
    "ExtractedContext",
    "GeneratedFile",
    "NotFoundError",
    "UpstreamError",
    "get_agent_template",
    "list_agent_templates",
]
