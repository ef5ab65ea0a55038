"""
Database package for Automation Hub.
"""

from .base import Base, get_db, get_engine, get_session_local, init_database
from .models import AutomationModel, IntegrationModel, MessageModel, SessionModel

__all__ = [
    "Base",
    "get_db",
    "get_engine",
    "get_session_local",
    "init_database",
    "SessionModel",
    "MessageModel",
    "IntegrationModel",
    "AutomationModel",
]
