from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    constr,
    field_validator,
)

from .enums import (
    AgentType,
    AutomationLanguage,
    IntegrationStatus,
    IntegrationType,
    MessageRole,
    SessionStatus,
)


def _string_list(value: Any) -> List[str]:
    """Coerce a loosely-typed value into a list of strings.

    Anything that is not a list becomes ``[]``; non-string items are dropped.
    """
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _record_list(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _valid_entries(model: type[BaseModel], value: Any) -> List[Any]:
    """Validate each record against ``model``, dropping the ones that fail."""
    entries = []
    for item in _record_list(value):
        try:
            entries.append(model.model_validate(item))
        except ValidationError:
            continue
    return entries


# =============================================================================
# Stored JSON blobs
# =============================================================================


class SessionMetadata(BaseModel):
    """Typed view of the ``automation_sessions.metadata`` blob.

    Invariants:
    - requirements, constraints, techStack and databases are always lists.
    - Unknown keys are preserved untouched.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    requirements: List[str] = Field(default_factory=list)
    constraints: List[str] = Field(default_factory=list)
    tech_stack: List[str] = Field(default_factory=list, alias="techStack")
    databases: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("requirements", "constraints", "tech_stack", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> List[str]:
        return _string_list(value)

    @field_validator("databases", mode="before")
    @classmethod
    def _coerce_records(cls, value: Any) -> List[Dict[str, Any]]:
        return _record_list(value)

    @classmethod
    def from_stored(cls, raw: Any) -> "SessionMetadata":
        """Build from whatever is in the column, never trusting its shape."""
        if not isinstance(raw, dict):
            return cls()
        return cls.model_validate(raw)

    def to_stored(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ExtractedIntegration(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: IntegrationType = IntegrationType.API
    name: constr(min_length=1, max_length=256)
    config: Optional[Dict[str, Any]] = None

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> Any:
        if isinstance(value, str) and value in {t.value for t in IntegrationType}:
            return value
        return IntegrationType.API.value

    @field_validator("config", mode="before")
    @classmethod
    def _coerce_config(cls, value: Any) -> Optional[Dict[str, Any]]:
        return value if isinstance(value, dict) else None


class ExtractedDatabase(BaseModel):
    """A data source mentioned in conversation (postgresql, mysql, mongodb, sqlite, api)."""

    model_config = ConfigDict(extra="ignore")

    type: str = "api"
    name: constr(min_length=1, max_length=256)
    config: Optional[Dict[str, Any]] = None

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> str:
        return value if isinstance(value, str) and value else "api"

    @field_validator("config", mode="before")
    @classmethod
    def _coerce_config(cls, value: Any) -> Optional[Dict[str, Any]]:
        return value if isinstance(value, dict) else None


class ExtractedContext(BaseModel):
    """Structured summary extracted from a conversation transcript."""

    model_config = ConfigDict(populate_by_name=True)

    integrations: List[ExtractedIntegration] = Field(default_factory=list)
    databases: List[ExtractedDatabase] = Field(default_factory=list)
    requirements: List[str] = Field(default_factory=list)
    constraints: List[str] = Field(default_factory=list)
    tech_stack: List[str] = Field(default_factory=list, alias="techStack")

    @classmethod
    def empty(cls) -> "ExtractedContext":
        return cls()

    @classmethod
    def from_raw(cls, raw: Any) -> "ExtractedContext":
        """Coerce a parsed model response into a well-typed result.

        Each of the five keys is handled independently: a missing key, a
        value of the wrong type, or an unusable entry falls back to empty
        rather than invalidating the whole result.
        """
        if not isinstance(raw, dict):
            return cls.empty()

        return cls(
            integrations=_valid_entries(ExtractedIntegration, raw.get("integrations")),
            databases=_valid_entries(ExtractedDatabase, raw.get("databases")),
            requirements=_string_list(raw.get("requirements")),
            constraints=_string_list(raw.get("constraints")),
            tech_stack=_string_list(raw.get("techStack")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class GeneratedFile(BaseModel):
    """One code artifact produced by the generator."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    language: AutomationLanguage
    code: str
    dependencies: List[str] = Field(default_factory=list)
    setup_instructions: str = Field(alias="setupInstructions")


# =============================================================================
# Request bodies
# =============================================================================


class SessionCreate(BaseModel):
    """Schema for creating a new session."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    agent_type: AgentType = Field(alias="agentType")
    title: Optional[constr(min_length=1, max_length=256)] = None
    description: Optional[str] = None
    initial_message: Optional[constr(min_length=1)] = Field(
        None, alias="initialMessage"
    )


class SessionUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[constr(min_length=1, max_length=256)] = None
    description: Optional[str] = None
    status: Optional[SessionStatus] = None


class MessageCreate(BaseModel):
    """Schema for appending a message to the conversation log."""

    model_config = ConfigDict(extra="forbid")

    role: MessageRole
    content: constr(min_length=1)
    metadata: Optional[Dict[str, Any]] = None


class IntegrationCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: IntegrationType
    name: constr(min_length=1, max_length=256)
    config: Optional[Dict[str, Any]] = None
    status: IntegrationStatus = IntegrationStatus.PENDING


class IntegrationUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[constr(min_length=1, max_length=256)] = None
    status: Optional[IntegrationStatus] = None
    config: Optional[Dict[str, Any]] = None


class GenerateCodeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    language: Optional[AutomationLanguage] = None


class ChatMessage(BaseModel):
    role: MessageRole
    content: str


class ChatRequest(BaseModel):
    """Body for the chat-completion proxy."""

    model_config = ConfigDict(populate_by_name=True)

    messages: List[ChatMessage] = Field(..., min_length=1)
    model: Optional[str] = None
    session_id: Optional[str] = Field(None, alias="sessionId")
