"""
Student Routes

GET  /students/me                              - Own profile
GET  /students/internships                     - Eligible (and already-applied) internships
GET  /students/applications                    - My applications
GET  /students/applications/summary            - Active count, cap, confirmed placement
GET  /students/applications/{id}               - One of my applications
POST /students/applications                    - Apply to an internship
POST /students/applications/{id}/accept        - Confirm a SUCCESSFUL offer
POST /students/applications/{id}/withdrawal    - Request withdrawal (staff decides)
GET  /students/withdrawals                     - My withdrawal requests
PUT  /students/withdrawals/{id}/reason         - Edit reason while PENDING
"""

from typing import List

from fastapi import APIRouter, Depends

from placement_hub.core.auth import get_current_student
from placement_hub.services.placement_service import PlacementService, get_placement_service
from placement_hub.schemas.schemas import (
    ApplicationCreate, ApplicationResponse, ApplicationSummaryResponse, InternshipListResponse,
    InternshipResponse, StudentResponse, WithdrawalCreate, WithdrawalReasonUpdate, WithdrawalResponse,
)

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("/me", response_model=StudentResponse)
async def get_profile(
    student: dict = Depends(get_current_student),
    service: PlacementService = Depends(get_placement_service),
):
    """Get current student's profile."""
    return StudentResponse.from_entity(service.get_student(student["student_id"]))


@router.get("/internships", response_model=InternshipListResponse)
async def list_internships(
    student: dict = Depends(get_current_student),
    service: PlacementService = Depends(get_placement_service),
):
    """Open, visible postings the student's year allows, plus ones already applied to."""
    internships = service.list_eligible_internships(student["student_id"])
    return InternshipListResponse(
        internships=[InternshipResponse.from_entity(i) for i in internships],
        total=len(internships),
    )


@router.get("/applications", response_model=List[ApplicationResponse])
async def get_my_applications(
    student: dict = Depends(get_current_student),
    service: PlacementService = Depends(get_placement_service),
):
    """Get all applications for current student."""
    return [ApplicationResponse.from_entity(a) for a in service.list_my_applications(student["student_id"])]


@router.get("/applications/summary", response_model=ApplicationSummaryResponse)
async def get_application_summary(
    student: dict = Depends(get_current_student),
    service: PlacementService = Depends(get_placement_service),
):
    return ApplicationSummaryResponse(**service.application_summary(student["student_id"]))


@router.get("/applications/{application_id}", response_model=ApplicationResponse)
async def get_my_application(
    application_id: str,
    student: dict = Depends(get_current_student),
    service: PlacementService = Depends(get_placement_service),
):
    return ApplicationResponse.from_entity(service.get_my_application(student["student_id"], application_id))


@router.post("/applications", response_model=ApplicationResponse, status_code=201)
async def apply(
    data: ApplicationCreate,
    student: dict = Depends(get_current_student),
    service: PlacementService = Depends(get_placement_service),
):
    """
    Apply to an internship.

    Refused when the posting is not open, the student's year is not eligible
    for its level, the student already has a placement, already holds 3
    active applications, or already applied to this posting.
    """
    app = service.apply_for_internship(student["student_id"], data.internship_id)
    return ApplicationResponse.from_entity(app)


@router.post("/applications/{application_id}/accept", response_model=ApplicationResponse)
async def accept_offer(
    application_id: str,
    student: dict = Depends(get_current_student),
    service: PlacementService = Depends(get_placement_service),
):
    """Confirm a SUCCESSFUL offer. All other active applications are withdrawn."""
    app = service.confirm_acceptance(student["student_id"], application_id)
    return ApplicationResponse.from_entity(app)


@router.post("/applications/{application_id}/withdrawal", response_model=WithdrawalResponse, status_code=201)
async def request_withdrawal(
    application_id: str,
    data: WithdrawalCreate,
    student: dict = Depends(get_current_student),
    service: PlacementService = Depends(get_placement_service),
):
    request = service.request_withdrawal(student["student_id"], application_id, data.reason)
    return WithdrawalResponse.from_entity(request)


@router.get("/withdrawals", response_model=List[WithdrawalResponse])
async def get_my_withdrawals(
    student: dict = Depends(get_current_student),
    service: PlacementService = Depends(get_placement_service),
):
    return [WithdrawalResponse.from_entity(w) for w in service.list_my_withdrawals(student["student_id"])]


@router.put("/withdrawals/{request_id}/reason", response_model=WithdrawalResponse)
async def update_withdrawal_reason(
    request_id: str,
    data: WithdrawalReasonUpdate,
    student: dict = Depends(get_current_student),
    service: PlacementService = Depends(get_placement_service),
):
    request = service.update_withdrawal_reason(student["student_id"], request_id, data.reason)
    return WithdrawalResponse.from_entity(request)
