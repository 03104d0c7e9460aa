"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from typing import Annotated, Optional, List, Any, Dict
from datetime import datetime
from enum import Enum

from app.models.opportunity import parse_skill_list


# ============================================================
# ENUMS
# ============================================================

class OpportunityStatus(str, Enum):
    active = "active"
    completed = "completed"


class ApplicationStatus(str, Enum):
    pending = "pending"


# Accepts ["React", "CSS"] or "React, CSS"
SkillList = Annotated[List[str], BeforeValidator(parse_skill_list)]


# ============================================================
# PROJECT SCHEMAS
# ============================================================

class ProjectCreate(BaseModel):
    # title/description are checked by the service so a blank value
    # surfaces as a 400 ValidationError rather than a 422
    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    status: OpportunityStatus = OpportunityStatus.active
    apply_url: Optional[str] = None
    skills: SkillList = []
    owner_name: Optional[str] = None
    github_url: Optional[str] = None
    demo_url: Optional[str] = None

class ProjectResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    description: str
    image_url: Optional[str] = None
    status: str = "active"
    apply_url: Optional[str] = None
    skills: SkillList = []
    owner_name: Optional[str] = None
    github_url: Optional[str] = None
    demo_url: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# ============================================================
# INTERNSHIP SCHEMAS
# ============================================================

class InternshipCreate(BaseModel):
    title: Optional[str] = None
    company_name: Optional[str] = None
    description: Optional[str] = None
    status: OpportunityStatus = OpportunityStatus.active
    location: Optional[str] = None
    remote: bool = False
    duration: Optional[str] = None
    stipend: Optional[str] = None
    skills: SkillList = []
    apply_url: Optional[str] = None

class InternshipResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    company_name: Optional[str] = None
    description: str
    status: str = "active"
    location: Optional[str] = None
    remote: bool = False
    duration: Optional[str] = None
    stipend: Optional[str] = None
    skills: SkillList = []
    apply_url: Optional[str] = None
    source: Optional[str] = None
    source_id: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# ============================================================
# SYNC SCHEMAS
# ============================================================

class SyncCandidate(BaseModel):
    """One externally sourced internship. Validated item by item."""
    title: str = Field(..., min_length=1)
    company_name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    status: OpportunityStatus = OpportunityStatus.active
    location: Optional[str] = None
    remote: bool = False
    duration: Optional[str] = None
    stipend: Optional[str] = None
    skills: SkillList = []
    apply_url: Optional[str] = None
    source: Optional[str] = None
    source_id: Optional[str] = None

    @field_validator("title", "company_name", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @property
    def has_natural_key(self) -> bool:
        return bool(self.source) and bool(self.source_id)

class SyncRequest(BaseModel):
    # Raw items so one malformed entry (even a non-object) does not reject
    # the whole batch; each is validated on its own during sync
    items: Optional[List[Any]] = None

class SyncResponse(BaseModel):
    status: str = "ok"
    upserted: int


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    message: Optional[str] = None
    applicant_name: Optional[str] = None
    applicant_email: Optional[str] = None

class ApplicationResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    target_kind: str
    target_id: str
    message: str
    applicant_name: str
    applicant_email: Optional[str] = None
    status: ApplicationStatus = ApplicationStatus.pending
    created_at: datetime


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class ProfileUpsert(BaseModel):
    id: Optional[str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    metadata: Dict[str, Any] = {}

class ProfileResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    metadata: Dict[str, Any] = {}
    created_at: datetime
    updated_at: datetime


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    version: str

class HealthResponse(BaseModel):
    status: str = "ok"
    db: str
    backend: str

class ErrorResponse(BaseModel):
    error: str


# Documented on every router: domain errors come back as {"error": ...}
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or blank required field"},
    404: {"model": ErrorResponse, "description": "Record not found"},
}
