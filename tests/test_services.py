"""Database service tests against in-memory SQLite."""

from automation_hub.db.models import AutomationModel, IntegrationModel
from automation_hub.db.services import (
    AutomationService,
    MessageService,
    SessionService,
    apply_extracted_context,
)
from automation_hub.schemas.enums import AutomationLanguage
from automation_hub.schemas.session_v1 import ExtractedContext, GeneratedFile


def _session(db, user_id="alice"):
    return SessionService(db).create_session(
        user_id=user_id, agent_type="research", title="Test"
    )


def test_get_session_is_scoped_by_owner(db):
    created = _session(db)
    service = SessionService(db)

    assert service.get_session("alice", created.id) is not None
    assert service.get_session("bob", created.id) is None


def test_message_sequence_increases(db):
    db_session = _session(db)
    messages = MessageService(db)

    first = messages.append_message(db_session, "user", "one")
    second = messages.append_message(db_session, "assistant", "two")

    assert (first.sequence, second.sequence) == (1, 2)
    assert [m.content for m in messages.list_messages(db_session.id)] == [
        "one",
        "two",
    ]


def test_update_metadata_keeps_unrelated_keys(db):
    db_session = _session(db)
    service = SessionService(db)
    service.update_metadata(db_session, lastStep="frequency")

    apply_extracted_context(
        db, db_session, ExtractedContext.from_raw({"requirements": ["r1"]})
    )

    db.expire_all()
    stored = service.get_session("alice", db_session.id).meta
    assert stored["lastStep"] == "frequency"
    assert stored["requirements"] == ["r1"]


def test_apply_extracted_context_dedupes_within_and_across_runs(db):
    db_session = _session(db)
    extracted = ExtractedContext.from_raw(
        {
            "integrations": [
                {"type": "github", "name": "GitHub"},
                {"type": "api", "name": "GitHub"},
            ]
        }
    )

    _, first = apply_extracted_context(db, db_session, extracted)
    _, second = apply_extracted_context(db, db_session, extracted)

    assert len(first) == 1
    assert second == []
    assert db.query(IntegrationModel).filter_by(session_id=db_session.id).count() == 1


def test_delete_cascades_to_automations(db):
    db_session = _session(db)
    AutomationService(db).create_from_generated(
        db_session,
        [
            GeneratedFile(
                name="a",
                description="d",
                language=AutomationLanguage.PYTHON,
                code="pass",
                setup_instructions="none",
            )
        ],
    )

    assert SessionService(db).delete_session("alice", db_session.id) is True
    assert db.query(AutomationModel).count() == 0


def test_delete_by_non_owner_is_refused(db):
    db_session = _session(db)

    assert SessionService(db).delete_session("bob", db_session.id) is False
    assert SessionService(db).get_session("alice", db_session.id) is not None


def test_mark_downloaded_is_idempotent(db):
    db_session = _session(db)
    service = AutomationService(db)
    (automation,) = service.create_from_generated(
        db_session,
        [
            GeneratedFile(
                name="a",
                description="d",
                language=AutomationLanguage.BASH,
                code="true",
                setup_instructions="none",
            )
        ],
    )

    service.mark_downloaded(automation)
    service.mark_downloaded(automation)

    assert automation.status == "downloaded"
