"""
HTTP routers for Automation Hub.
"""

from .agents import router as agents_router
from .ai import router as ai_router
from .sessions import router as sessions_router

__all__ = ["agents_router", "ai_router", "sessions_router"]
