"""
Career Center Staff Routes

POST /staff/students                          - Register a student
GET  /staff/reps/pending                      - Reps awaiting approval
PUT  /staff/reps/{rep_id}/approve             - Approve rep
PUT  /staff/reps/{rep_id}/reject              - Reject rep
GET  /staff/internships                       - All postings (optional ?status=)
GET  /staff/internships/pending               - Postings awaiting approval
PUT  /staff/internships/{id}/approve          - Approve (and choose visibility)
PUT  /staff/internships/{id}/reject           - Reject
GET  /staff/withdrawals/pending               - Withdrawal requests awaiting decision
PUT  /staff/withdrawals/{id}/approve          - Approve withdrawal
PUT  /staff/withdrawals/{id}/reject           - Reject withdrawal
POST /staff/snapshot                          - Save the store to the database now
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from placement_hub.core.auth import get_current_staff
from placement_hub.db.database import get_db_session, init_db
from placement_hub.services.placement_service import PlacementService, get_placement_service
from placement_hub.schemas.schemas import (
    CompanyRepResponse, InternshipApproval, InternshipResponse, RepRejection, SnapshotResponse,
    StaffDecision, StudentCreate, StudentResponse, WithdrawalResponse,
)

router = APIRouter(prefix="/staff", tags=["Career Center Staff"])


@router.post("/students", response_model=StudentResponse, status_code=201)
async def register_student(
    data: StudentCreate,
    staff: dict = Depends(get_current_staff),
    service: PlacementService = Depends(get_placement_service),
):
    student = service.register_student(
        data.student_id, data.name, data.major, data.year_of_study, data.email or "",
    )
    return StudentResponse.from_entity(student)


# ---------- Company reps ----------

@router.get("/reps/pending", response_model=List[CompanyRepResponse])
async def list_pending_reps(
    staff: dict = Depends(get_current_staff),
    service: PlacementService = Depends(get_placement_service),
):
    return [CompanyRepResponse.from_entity(r) for r in service.list_pending_reps()]


@router.put("/reps/{rep_id}/approve", response_model=CompanyRepResponse)
async def approve_rep(
    rep_id: str,
    staff: dict = Depends(get_current_staff),
    service: PlacementService = Depends(get_placement_service),
):
    return CompanyRepResponse.from_entity(service.approve_company_rep(staff["staff_id"], rep_id))


@router.put("/reps/{rep_id}/reject", response_model=CompanyRepResponse)
async def reject_rep(
    rep_id: str,
    data: RepRejection,
    staff: dict = Depends(get_current_staff),
    service: PlacementService = Depends(get_placement_service),
):
    return CompanyRepResponse.from_entity(service.reject_company_rep(staff["staff_id"], rep_id, data.reason))


# ---------- Internships ----------

@router.get("/internships", response_model=List[InternshipResponse])
async def list_internships(
    status: Optional[str] = Query(None, description="PENDING, APPROVED, REJECTED, CLOSED or FILLED"),
    staff: dict = Depends(get_current_staff),
    service: PlacementService = Depends(get_placement_service),
):
    return [InternshipResponse.from_entity(i) for i in service.list_all_internships(status)]


@router.get("/internships/pending", response_model=List[InternshipResponse])
async def list_pending_internships(
    staff: dict = Depends(get_current_staff),
    service: PlacementService = Depends(get_placement_service),
):
    return [InternshipResponse.from_entity(i) for i in service.list_pending_internships()]


@router.put("/internships/{internship_id}/approve", response_model=InternshipResponse)
async def approve_internship(
    internship_id: str,
    data: InternshipApproval,
    staff: dict = Depends(get_current_staff),
    service: PlacementService = Depends(get_placement_service),
):
    internship = service.approve_internship(staff["staff_id"], internship_id, data.visible)
    return InternshipResponse.from_entity(internship)


@router.put("/internships/{internship_id}/reject", response_model=InternshipResponse)
async def reject_internship(
    internship_id: str,
    staff: dict = Depends(get_current_staff),
    service: PlacementService = Depends(get_placement_service),
):
    return InternshipResponse.from_entity(service.reject_internship(staff["staff_id"], internship_id))


# ---------- Withdrawals ----------

@router.get("/withdrawals/pending", response_model=List[WithdrawalResponse])
async def list_pending_withdrawals(
    staff: dict = Depends(get_current_staff),
    service: PlacementService = Depends(get_placement_service),
):
    return [WithdrawalResponse.from_entity(w) for w in service.list_pending_withdrawals()]


@router.put("/withdrawals/{request_id}/approve", response_model=WithdrawalResponse)
async def approve_withdrawal(
    request_id: str,
    data: StaffDecision,
    staff: dict = Depends(get_current_staff),
    service: PlacementService = Depends(get_placement_service),
):
    """Approve: an accepted placement frees its slot, anything still active is withdrawn."""
    return WithdrawalResponse.from_entity(service.approve_withdrawal(staff["staff_id"], request_id, data.note))


@router.put("/withdrawals/{request_id}/reject", response_model=WithdrawalResponse)
async def reject_withdrawal(
    request_id: str,
    data: StaffDecision,
    staff: dict = Depends(get_current_staff),
    service: PlacementService = Depends(get_placement_service),
):
    return WithdrawalResponse.from_entity(service.reject_withdrawal(staff["staff_id"], request_id, data.note))


# ---------- Persistence ----------

@router.post("/snapshot", response_model=SnapshotResponse)
async def save_snapshot(
    staff: dict = Depends(get_current_staff),
    service: PlacementService = Depends(get_placement_service),
):
    init_db()
    with get_db_session() as db:
        counts = service.save(db)
    return SnapshotResponse(message="Snapshot saved", counts=counts)
