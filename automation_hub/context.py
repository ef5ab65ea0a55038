"""
Request-scoped context.

Handlers receive the caller identity, the database session and settings
through one explicit object instead of module-level globals.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from .config import Settings, get_settings
from .db.base import get_db

USER_ID_HEADER = "X-User-Id"


@dataclass(frozen=True)
class RequestContext:
    """Everything a handler needs to act on behalf of one caller."""

    user_id: str
    db: Session
    settings: Settings


def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias=USER_ID_HEADER),
) -> str:
    """Caller identity as forwarded by the authenticating gateway."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Not authenticated")
    return x_user_id.strip()


def get_request_context(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> RequestContext:
    return RequestContext(user_id=user_id, db=db, settings=settings)
