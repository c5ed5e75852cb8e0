"""Admin schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.core.enums import ReviewDecisionEnum


class AdminActionRead(BaseModel):
    """Admin action response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    admin_id: UUID | None
    action: str
    target_type: str
    target_id: str | None
    payload: dict
    created_at: datetime
    updated_at: datetime


class ApplicationReviewRequest(BaseModel):
    """Reviewer decision on a pending teacher application."""

    decision: ReviewDecisionEnum
    notes: str | None = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def require_notes_on_reject(self) -> ApplicationReviewRequest:
        if self.decision == ReviewDecisionEnum.REJECT and not (self.notes and self.notes.strip()):
            raise ValueError("notes are required when rejecting an application")
        return self
