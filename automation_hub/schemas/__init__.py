"""
Pydantic schemas for Automation Hub request bodies and stored JSON blobs.
"""

from .enums import (
    FILE_EXTENSIONS,
    AgentType,
    AutomationLanguage,
    AutomationStatus,
    IntegrationStatus,
    IntegrationType,
    MessageRole,
    SessionStatus,
)
from .session_v1 import (
    ChatMessage,
    ChatRequest,
    ExtractedContext,
    ExtractedDatabase,
    ExtractedIntegration,
    GenerateCodeRequest,
    GeneratedFile,
    IntegrationCreate,
    IntegrationUpdate,
    MessageCreate,
    SessionCreate,
    SessionMetadata,
    SessionUpdate,
)

__all__ = [
    "FILE_EXTENSIONS",
    "AgentType",
    "AutomationLanguage",
    "AutomationStatus",
    "ChatMessage",
    "ChatRequest",
    "ExtractedContext",
    "ExtractedDatabase",
    "ExtractedIntegration",
    "GenerateCodeRequest",
    "GeneratedFile",
    "IntegrationCreate",
    "IntegrationStatus",
    "IntegrationType",
    "IntegrationUpdate",
    "MessageCreate",
    "MessageRole",
    "SessionCreate",
    "SessionMetadata",
    "SessionStatus",
    "SessionUpdate",
]
