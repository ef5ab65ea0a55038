"""
Agent template definitions.

An agent template drives the guided conversation for a session's agent
type: the system prompt sent with chat turns, the greeting, and the
questions the front end walks the user through.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class AgentQuestion(BaseModel):
    """One step of an agent's guided question flow."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    question: str
    type: Literal["text", "choice", "multiple", "file"]
    options: Optional[List[str]] = None
    required: bool = True
    placeholder: Optional[str] = None
    helper_text: Optional[str] = Field(None, alias="helperText")
    # Question ID this depends on
    depends_on: Optional[str] = Field(None, alias="dependsOn")


class AgentTemplate(BaseModel):
    """Static description of an agent type."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str
    description: str
    icon: str
    system_prompt: str = Field(alias="systemPrompt")
    initial_message: str = Field(alias="initialMessage")
    questions: List[AgentQuestion] = Field(default_factory=list)
    capabilities: List[str] = Field(default_factory=list)
    example_outputs: List[str] = Field(default_factory=list, alias="exampleOutputs")

    def summary(self) -> Dict[str, Any]:
        """Listing view used by ``GET /api/agents``."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "capabilities": list(self.capabilities),
        }

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
