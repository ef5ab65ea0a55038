"""
Canonical enums for sessions and their child records.

Values are stored verbatim in the database and returned verbatim by the API.
"""

from enum import Enum


class AgentType(str, Enum):
    """Which guided flow and generation instructions apply to a session."""

    RESEARCH = "research"
    WEBAPP_DEVELOPER = "webapp_developer"
    WEB_CRAWLER = "web_crawler"
    GENERAL = "general"


class SessionStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class IntegrationType(str, Enum):
    """External systems an automation may talk to."""

    EMAIL = "email"
    GITHUB = "github"
    CALENDAR = "calendar"
    API = "api"
    DATABASE = "database"


class IntegrationStatus(str, Enum):
    """Integration status.

    No progression is enforced; any value may follow any other.
    """

    PENDING = "pending"
    CONFIGURED = "configured"
    CONNECTED = "connected"
    FAILED = "failed"


class AutomationLanguage(str, Enum):
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    BASH = "bash"


class AutomationStatus(str, Enum):
    """Automation status.

    Generation stores ``ready``; a successful download sets ``downloaded``.
    """

    DRAFT = "draft"
    READY = "ready"
    DOWNLOADED = "downloaded"
    EXECUTED = "executed"


# Download filename extensions, keyed by language.
FILE_EXTENSIONS = {
    AutomationLanguage.PYTHON.value: "py",
    AutomationLanguage.JAVASCRIPT.value: "js",
    AutomationLanguage.TYPESCRIPT.value: "ts",
    AutomationLanguage.BASH.value: "sh",
}
