"""
Database services for Automation Hub.

Every lookup that starts from a session is scoped by ``(session_id, user_id)``;
a session that exists but belongs to someone else is reported exactly like
one that does not exist.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..schemas.enums import AutomationStatus, IntegrationStatus
from ..schemas.session_v1 import (
    ExtractedContext,
    GeneratedFile,
    IntegrationCreate,
    IntegrationUpdate,
    SessionMetadata,
    SessionUpdate,
)
from .models import (
    AutomationModel,
    IntegrationModel,
    MessageModel,
    SessionModel,
    utc_now,
)

logger = logging.getLogger(__name__)


class SessionService:
    """Service for managing automation sessions in the database."""

    def __init__(self, db: Session):
        self.db = db

    def create_session(
        self,
        user_id: str,
        agent_type: str,
        title: str,
        description: Optional[str] = None,
    ) -> SessionModel:
        """Create a new, empty session owned by ``user_id``."""
        now = utc_now()
        db_session = SessionModel(
            user_id=user_id,
            agent_type=agent_type,
            title=title,
            description=description,
            status="active",
            meta=SessionMetadata().to_stored(),
            created_at=now,
            updated_at=now,
        )

        self.db.add(db_session)
        self.db.commit()
        self.db.refresh(db_session)
        return db_session

    def get_session(self, user_id: str, session_id: str) -> Optional[SessionModel]:
        """Get a session by ID, only if owned by ``user_id``."""
        return (
            self.db.query(SessionModel)
            .filter(SessionModel.id == session_id, SessionModel.user_id == user_id)
            .first()
        )

    def require_session(self, user_id: str, session_id: str) -> SessionModel:
        """Like ``get_session`` but raises ``NotFoundError``."""
        db_session = self.get_session(user_id, session_id)
        if db_session is None:
            raise NotFoundError("Session")
        return db_session

    def list_sessions(self, user_id: str) -> List[SessionModel]:
        """List a user's sessions, most recently updated first."""
        return (
            self.db.query(SessionModel)
            .filter(SessionModel.user_id == user_id)
            .order_by(desc(SessionModel.updated_at))
            .all()
        )

    def update_session(
        self, db_session: SessionModel, update: SessionUpdate
    ) -> SessionModel:
        if update.title is not None:
            db_session.title = update.title
        if update.description is not None:
            db_session.description = update.description
        if update.status is not None:
            db_session.status = update.status.value
        db_session.touch()

        self.db.commit()
        self.db.refresh(db_session)
        return db_session

    def update_metadata(self, db_session: SessionModel, **fields: Any) -> SessionModel:
        """Replace the given metadata keys, keeping every other key.

        Keys use their stored names (``techStack``, not ``tech_stack``).
        """
        merged = dict(db_session.meta) if isinstance(db_session.meta, dict) else {}
        merged.update(fields)
        # Assign a fresh dict so the JSON column is flagged dirty
        db_session.meta = SessionMetadata.from_stored(merged).to_stored()
        db_session.touch()

        self.db.commit()
        self.db.refresh(db_session)
        return db_session

    def delete_session(self, user_id: str, session_id: str) -> bool:
        """Delete a session and, through the cascade, everything it owns."""
        db_session = self.get_session(user_id, session_id)
        if db_session is None:
            return False

        self.db.delete(db_session)
        self.db.commit()
        return True


class MessageService:
    """Append-only conversation log for a session."""

    def __init__(self, db: Session):
        self.db = db

    def append_message(
        self,
        db_session: SessionModel,
        role: str,
        content: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> MessageModel:
        """Append a message and bump the parent session's ``updated_at``."""
        last_sequence = (
            self.db.query(func.max(MessageModel.sequence))
            .filter(MessageModel.session_id == db_session.id)
            .scalar()
        )
        message = MessageModel(
            session_id=db_session.id,
            sequence=(last_sequence or 0) + 1,
            role=role,
            content=content,
            meta=metadata or {},
            created_at=utc_now(),
        )
        db_session.touch()

        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message

    def list_messages(self, session_id: str) -> List[MessageModel]:
        """All messages of a session in creation order."""
        return (
            self.db.query(MessageModel)
            .filter(MessageModel.session_id == session_id)
            .order_by(MessageModel.created_at, MessageModel.sequence)
            .all()
        )


class IntegrationService:
    """Service for managing a session's integrations."""

    def __init__(self, db: Session):
        self.db = db

    def list_integrations(self, session_id: str) -> List[IntegrationModel]:
        return (
            self.db.query(IntegrationModel)
            .filter(IntegrationModel.session_id == session_id)
            .order_by(IntegrationModel.created_at)
            .all()
        )

    def get_integration(
        self, session_id: str, integration_id: str
    ) -> Optional[IntegrationModel]:
        return (
            self.db.query(IntegrationModel)
            .filter(
                IntegrationModel.id == integration_id,
                IntegrationModel.session_id == session_id,
            )
            .first()
        )

    def require_integration(
        self, session_id: str, integration_id: str
    ) -> IntegrationModel:
        integration = self.get_integration(session_id, integration_id)
        if integration is None:
            raise NotFoundError("Integration")
        return integration

    def create_integration(
        self, db_session: SessionModel, integration: IntegrationCreate
    ) -> IntegrationModel:
        """Create an integration from a manual request."""
        now = utc_now()
        db_integration = IntegrationModel(
            session_id=db_session.id,
            integration_type=integration.type.value,
            name=integration.name,
            status=integration.status.value,
            config=integration.config,
            created_at=now,
            updated_at=now,
        )
        db_session.touch()

        self.db.add(db_integration)
        self.db.commit()
        self.db.refresh(db_integration)
        return db_integration

    def update_integration(
        self,
        db_session: SessionModel,
        db_integration: IntegrationModel,
        update: IntegrationUpdate,
    ) -> IntegrationModel:
        """Apply a partial update. Status may move to any value."""
        if update.name is not None:
            db_integration.name = update.name
        if update.status is not None:
            db_integration.status = update.status.value
        if update.config is not None:
            db_integration.config = dict(update.config)
        db_integration.updated_at = utc_now()
        db_session.touch()

        self.db.commit()
        self.db.refresh(db_integration)
        return db_integration

    def delete_integration(
        self, db_session: SessionModel, db_integration: IntegrationModel
    ) -> None:
        self.db.delete(db_integration)
        db_session.touch()
        self.db.commit()

    def create_missing(
        self, db_session: SessionModel, extracted: ExtractedContext
    ) -> List[IntegrationModel]:
        """Insert extracted integrations whose name is not yet in the session.

        Names match exactly (case-sensitive). Duplicates inside one
        extraction are collapsed too. New rows start as ``pending``.
        """
        existing = {
            name
            for (name,) in self.db.query(IntegrationModel.name).filter(
                IntegrationModel.session_id == db_session.id
            )
        }

        created: List[IntegrationModel] = []
        for item in extracted.integrations:
            if item.name in existing:
                continue
            now = utc_now()
            db_integration = IntegrationModel(
                session_id=db_session.id,
                integration_type=item.type.value,
                name=item.name,
                status=IntegrationStatus.PENDING.value,
                config=item.config,
                created_at=now,
                updated_at=now,
            )
            self.db.add(db_integration)
            existing.add(item.name)
            created.append(db_integration)

        if created:
            self.db.commit()
        return created


class AutomationService:
    """Service for generated code artifacts."""

    def __init__(self, db: Session):
        self.db = db

    def list_automations(self, session_id: str) -> List[AutomationModel]:
        return (
            self.db.query(AutomationModel)
            .filter(AutomationModel.session_id == session_id)
            .order_by(AutomationModel.created_at)
            .all()
        )

    def get_automation(
        self, session_id: str, automation_id: str
    ) -> Optional[AutomationModel]:
        return (
            self.db.query(AutomationModel)
            .filter(
                AutomationModel.id == automation_id,
                AutomationModel.session_id == session_id,
            )
            .first()
        )

    def require_automation(
        self, session_id: str, automation_id: str
    ) -> AutomationModel:
        automation = self.get_automation(session_id, automation_id)
        if automation is None:
            raise NotFoundError("Automation")
        return automation

    def create_from_generated(
        self, db_session: SessionModel, files: List[GeneratedFile]
    ) -> List[AutomationModel]:
        """Persist every generated artifact as a ``ready`` automation."""
        created: List[AutomationModel] = []
        for generated in files:
            now = utc_now()
            automation = AutomationModel(
                session_id=db_session.id,
                name=generated.name,
                description=generated.description,
                language=generated.language.value,
                code=generated.code,
                dependencies=list(generated.dependencies),
                setup_instructions=generated.setup_instructions,
                status=AutomationStatus.READY.value,
                created_at=now,
                updated_at=now,
            )
            self.db.add(automation)
            created.append(automation)

        db_session.touch()
        self.db.commit()
        for automation in created:
            self.db.refresh(automation)
        return created

    def mark_downloaded(self, automation: AutomationModel) -> AutomationModel:
        """Set status to ``downloaded``. Idempotent; never reverted."""
        automation.status = AutomationStatus.DOWNLOADED.value
        automation.updated_at = utc_now()
        automation.session.touch()
        self.db.commit()
        self.db.refresh(automation)
        return automation


def apply_extracted_context(
    db: Session, db_session: SessionModel, extracted: ExtractedContext
) -> Tuple[SessionModel, List[IntegrationModel]]:
    """Persist an extraction result.

    Creates integrations that are new by name, then replaces the
    requirements, constraints, techStack and databases metadata keys.
    """
    created = IntegrationService(db).create_missing(db_session, extracted)
    stored = extracted.to_dict()
    db_session = SessionService(db).update_metadata(
        db_session,
        requirements=stored["requirements"],
        constraints=stored["constraints"],
        techStack=stored["techStack"],
        databases=stored["databases"],
    )
    logger.info(
        "Applied extracted context to session %s (%d new integrations)",
        db_session.id,
        len(created),
    )
    return db_session, created
