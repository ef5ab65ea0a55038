"""
SQLAlchemy models for Automation Hub.

A session owns its messages, integrations and automations; deleting the
session deletes all of them (ORM cascade plus ON DELETE CASCADE).
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from ..schemas.session_v1 import SessionMetadata
from .base import Base


def generate_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class SessionModel(Base):
    """SQLAlchemy model for automation sessions."""

    __tablename__ = "automation_sessions"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(128), nullable=False, index=True)
    agent_type = Column(
        Enum(
            "research",
            "webapp_developer",
            "web_crawler",
            "general",
            name="agent_type",
        ),
        nullable=False,
    )
    title = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        Enum("active", "completed", "archived", name="session_status"),
        nullable=False,
        default="active",
    )
    # "metadata" is reserved on declarative classes, hence the attribute name
    meta = Column("metadata", JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    messages = relationship(
        "MessageModel",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by=lambda: [MessageModel.created_at, MessageModel.sequence],
    )
    integrations = relationship(
        "IntegrationModel",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="IntegrationModel.created_at",
    )
    automations = relationship(
        "AutomationModel",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="AutomationModel.created_at",
    )

    __table_args__ = (
        Index("ix_automation_sessions_user_updated", "user_id", "updated_at"),
    )

    @property
    def session_metadata(self) -> SessionMetadata:
        """Typed, validated view of the stored metadata blob."""
        return SessionMetadata.from_stored(self.meta)

    def touch(self) -> None:
        self.updated_at = utc_now()

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "agentType": self.agent_type,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "metadata": self.session_metadata.to_stored(),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    def to_summary(self) -> Dict[str, Any]:
        """Listing view without the metadata blob."""
        return {
            "id": self.id,
            "title": self.title,
            "agentType": self.agent_type,
            "status": self.status,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class MessageModel(Base):
    """SQLAlchemy model for the append-only conversation log."""

    __tablename__ = "session_messages"

    id = Column(String(36), primary_key=True, default=generate_id)
    session_id = Column(
        String(36),
        ForeignKey("automation_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Per-session insertion order; breaks created_at ties
    sequence = Column(Integer, nullable=False, default=0)
    role = Column(
        Enum("user", "assistant", "system", name="message_role"), nullable=False
    )
    content = Column(Text, nullable=False)
    meta = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    session = relationship("SessionModel", back_populates="messages")

    __table_args__ = (
        Index("ix_session_messages_session_created", "session_id", "created_at"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sessionId": self.session_id,
            "role": self.role,
            "content": self.content,
            "metadata": self.meta if isinstance(self.meta, dict) else None,
            "createdAt": _iso(self.created_at),
        }


class IntegrationModel(Base):
    """SQLAlchemy model for external systems a session's automation talks to."""

    __tablename__ = "session_integrations"

    id = Column(String(36), primary_key=True, default=generate_id)
    session_id = Column(
        String(36),
        ForeignKey("automation_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    integration_type = Column(
        Enum(
            "email",
            "github",
            "calendar",
            "api",
            "database",
            name="integration_type",
        ),
        nullable=False,
    )
    name = Column(String(256), nullable=False)
    status = Column(
        Enum(
            "pending",
            "configured",
            "connected",
            "failed",
            name="integration_status",
        ),
        nullable=False,
        default="pending",
    )
    config = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    session = relationship("SessionModel", back_populates="integrations")

    __table_args__ = (
        Index("ix_session_integrations_session_name", "session_id", "name"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sessionId": self.session_id,
            "type": self.integration_type,
            "name": self.name,
            "status": self.status,
            "config": self.config if isinstance(self.config, dict) else None,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class AutomationModel(Base):
    """SQLAlchemy model for generated code artifacts."""

    __tablename__ = "session_automations"

    id = Column(String(36), primary_key=True, default=generate_id)
    session_id = Column(
        String(36),
        ForeignKey("automation_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    language = Column(
        Enum(
            "python",
            "javascript",
            "typescript",
            "bash",
            name="automation_language",
        ),
        nullable=False,
    )
    code = Column(Text, nullable=False)
    dependencies = Column(JSON, nullable=True)
    setup_instructions = Column(Text, nullable=True)
    status = Column(
        Enum(
            "draft",
            "ready",
            "downloaded",
            "executed",
            name="automation_status",
        ),
        nullable=False,
        default="draft",
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    session = relationship("SessionModel", back_populates="automations")

    @property
    def dependency_list(self) -> List[str]:
        if not isinstance(self.dependencies, list):
            return []
        return [d for d in self.dependencies if isinstance(d, str)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sessionId": self.session_id,
            "name": self.name,
            "description": self.description,
            "language": self.language,
            "code": self.code,
            "dependencies": self.dependency_list,
            "setupInstructions": self.setup_instructions,
            "status": self.status,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
