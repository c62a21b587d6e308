"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Domain enums are reused directly so the wire values match the domain.
"""

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field

from placement_hub.models import (
    ApplicationStatus, CompanyRep, Internship, InternshipApplication, InternshipLevel,
    InternshipStatus, Student, WithdrawalRequest, WithdrawalRequestStatus,
)
from placement_hub.models.policy import MAX_SLOTS_PER_POSTING
from placement_hub.models.withdrawal import REASON_MAX_LENGTH


# ============================================================
# DIRECTORY SCHEMAS
# ============================================================

class StudentCreate(BaseModel):
    student_id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=200)
    major: str = Field(..., min_length=1, max_length=200)
    year_of_study: int = Field(..., ge=1, le=4)
    email: Optional[EmailStr] = None

class StudentResponse(BaseModel):
    student_id: str
    name: str
    major: str
    year_of_study: int
    email: str

    @classmethod
    def from_entity(cls, s: Student) -> "StudentResponse":
        return cls(student_id=s.student_id, name=s.name, major=s.major,
                   year_of_study=s.year_of_study, email=s.email)

class CompanyRepRegister(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=200)
    company_name: str = Field(..., min_length=1, max_length=200)
    department: str = Field(..., min_length=1, max_length=200)
    position: str = Field(..., min_length=1, max_length=200)

class CompanyRepResponse(BaseModel):
    rep_id: str
    name: str
    company_name: str
    department: str
    position: str
    approved: bool
    rejection_reason: str = ""

    @classmethod
    def from_entity(cls, r: CompanyRep) -> "CompanyRepResponse":
        return cls(rep_id=r.rep_id, name=r.name, company_name=r.company_name,
                   department=r.department, position=r.position,
                   approved=r.approved, rejection_reason=r.rejection_reason)

class RepRejection(BaseModel):
    reason: Optional[str] = None


# ============================================================
# INTERNSHIP SCHEMAS
# ============================================================

class InternshipCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    level: InternshipLevel
    preferred_major: str = Field(..., min_length=1, max_length=200)
    open_date: date
    close_date: date
    max_slots: int = Field(1, ge=1, le=MAX_SLOTS_PER_POSTING)

class VisibilityUpdate(BaseModel):
    visible: bool

class InternshipApproval(BaseModel):
    visible: bool = True

class InternshipResponse(BaseModel):
    internship_id: str
    title: str
    description: str
    level: InternshipLevel
    preferred_major: str
    open_date: date
    close_date: date
    company_name: str
    max_slots: int
    confirmed_slots: int
    visible: bool
    status: InternshipStatus

    @classmethod
    def from_entity(cls, i: Internship) -> "InternshipResponse":
        return cls(
            internship_id=i.internship_id, title=i.title, description=i.description,
            level=i.level, preferred_major=i.preferred_major, open_date=i.open_date,
            close_date=i.close_date, company_name=i.company_name, max_slots=i.max_slots,
            confirmed_slots=i.confirmed_slots, visible=i.visible, status=i.status,
        )


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    internship_id: str

class ApplicationDecision(BaseModel):
    status: ApplicationStatus

class ApplicationResponse(BaseModel):
    application_id: str
    student_id: str
    internship_id: str
    internship_title: Optional[str] = None
    company_name: Optional[str] = None
    applied_on: date
    status: ApplicationStatus
    student_accepted: bool

    @classmethod
    def from_entity(cls, a: InternshipApplication) -> "ApplicationResponse":
        internship = a.internship
        return cls(
            application_id=a.application_id, student_id=a.student_id,
            internship_id=a.internship_id,
            internship_title=internship.title if internship else None,
            company_name=internship.company_name if internship else None,
            applied_on=a.applied_on, status=a.status, student_accepted=a.student_accepted,
        )

class ApplicationSummaryResponse(BaseModel):
    student_id: str
    active_applications: int
    max_active_applications: int
    can_apply_more: bool
    has_confirmed_placement: bool


# ============================================================
# WITHDRAWAL SCHEMAS
# ============================================================

class WithdrawalCreate(BaseModel):
    reason: str = Field(..., min_length=1, max_length=REASON_MAX_LENGTH * 2)

class WithdrawalReasonUpdate(BaseModel):
    reason: str = Field(..., min_length=1, max_length=REASON_MAX_LENGTH * 2)

class StaffDecision(BaseModel):
    note: Optional[str] = None

class WithdrawalResponse(BaseModel):
    request_id: str
    application_id: str
    requested_by: str
    requested_on: date
    reason: str
    status: WithdrawalRequestStatus
    processed_by: Optional[str] = None
    processed_on: Optional[date] = None
    staff_note: str = ""

    @classmethod
    def from_entity(cls, w: WithdrawalRequest) -> "WithdrawalResponse":
        return cls(
            request_id=w.request_id, application_id=w.application.application_id,
            requested_by=w.requested_by.student_id, requested_on=w.requested_on,
            reason=w.reason, status=w.status,
            processed_by=w.processed_by.staff_id if w.processed_by else None,
            processed_on=w.processed_on, staff_note=w.staff_note,
        )


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class SnapshotResponse(BaseModel):
    message: str
    counts: Dict[str, int]

class ActorResponse(BaseModel):
    actor_id: str
    role: str

class InternshipListResponse(BaseModel):
    internships: List[InternshipResponse]
    total: int
