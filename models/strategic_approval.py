# models/strategic_approval.py

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field

from models.enums import ApprovalStatus, Priority


class StrategicApprovalCreate(BaseModel):
    title: str
    description: str
    category: str = Field(..., description="e.g. Financial, Strategic, Technology")
    priority: Priority = Priority.medium


class StrategicApprovalRead(BaseModel):
    id: str
    title: str
    description: str = ""
    category: str
    priority: Priority = Priority.medium
    status: ApprovalStatus

    requested_by: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    notes: Optional[str] = None
