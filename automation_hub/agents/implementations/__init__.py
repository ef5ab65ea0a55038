"""
Built-in agent templates.
"""

from .research import research_agent
from .web_crawler import web_crawler_agent
from .webapp_developer import webapp_developer_agent

__all__ = ["research_agent", "web_crawler_agent", "webapp_developer_agent"]
