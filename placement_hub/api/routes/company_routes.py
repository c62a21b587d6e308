"""
Company Routes

POST   /companies/reps                               - Register as a company rep (pending staff approval)
GET    /companies/me                                 - Own rep profile
POST   /companies/internships                        - Create posting (cap: 5 PENDING + APPROVED)
GET    /companies/internships                        - Company's postings
PUT    /companies/internships/{id}                   - Edit PENDING posting (re-issued under a new id)
DELETE /companies/internships/{id}                   - Delete PENDING / REJECTED posting
PUT    /companies/internships/{id}/visibility        - Toggle visibility (APPROVED only)
GET    /companies/internships/{id}/applications      - Applications received
PUT    /companies/applications/{id}/status           - Mark SUCCESSFUL / UNSUCCESSFUL
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from placement_hub.core.auth import get_current_rep
from placement_hub.models.enums import ApplicationStatus
from placement_hub.services.placement_service import PlacementService, get_placement_service
from placement_hub.schemas.schemas import (
    ApplicationDecision, ApplicationResponse, CompanyRepRegister, CompanyRepResponse,
    InternshipCreate, InternshipResponse, MessageResponse, VisibilityUpdate,
)

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("/reps", response_model=CompanyRepResponse, status_code=201)
async def register_rep(data: CompanyRepRegister, service: PlacementService = Depends(get_placement_service)):
    """Register a company representative. Staff must approve before postings can be created."""
    rep = service.register_company_rep(
        email=data.email, name=data.name, company_name=data.company_name,
        department=data.department, position=data.position,
    )
    return CompanyRepResponse.from_entity(rep)


@router.get("/me", response_model=CompanyRepResponse)
async def get_profile(
    rep: dict = Depends(get_current_rep),
    service: PlacementService = Depends(get_placement_service),
):
    return CompanyRepResponse.from_entity(service.get_company_rep(rep["rep_id"]))


@router.post("/internships", response_model=InternshipResponse, status_code=201)
async def create_internship(
    data: InternshipCreate,
    rep: dict = Depends(get_current_rep),
    service: PlacementService = Depends(get_placement_service),
):
    """Create a posting. It starts PENDING and invisible until staff approve it."""
    internship = service.create_internship(rep["rep_id"], **data.model_dump())
    return InternshipResponse.from_entity(internship)


@router.get("/internships", response_model=List[InternshipResponse])
async def get_company_internships(
    rep: dict = Depends(get_current_rep),
    service: PlacementService = Depends(get_placement_service),
):
    """Get all postings owned by this rep's company."""
    return [InternshipResponse.from_entity(i) for i in service.list_company_internships(rep["rep_id"])]


@router.put("/internships/{internship_id}", response_model=InternshipResponse)
async def edit_internship(
    internship_id: str,
    data: InternshipCreate,
    rep: dict = Depends(get_current_rep),
    service: PlacementService = Depends(get_placement_service),
):
    """Edit a PENDING posting. The edited posting gets a new id."""
    internship = service.edit_internship(rep["rep_id"], internship_id, **data.model_dump())
    return InternshipResponse.from_entity(internship)


@router.delete("/internships/{internship_id}", response_model=MessageResponse)
async def delete_internship(
    internship_id: str,
    rep: dict = Depends(get_current_rep),
    service: PlacementService = Depends(get_placement_service),
):
    service.delete_internship(rep["rep_id"], internship_id)
    return MessageResponse(message=f"Internship {internship_id} deleted")


@router.put("/internships/{internship_id}/visibility", response_model=InternshipResponse)
async def set_visibility(
    internship_id: str,
    data: VisibilityUpdate,
    rep: dict = Depends(get_current_rep),
    service: PlacementService = Depends(get_placement_service),
):
    internship = service.set_internship_visibility(rep["rep_id"], internship_id, data.visible)
    return InternshipResponse.from_entity(internship)


@router.get("/internships/{internship_id}/applications", response_model=List[ApplicationResponse])
async def get_applications(
    internship_id: str,
    rep: dict = Depends(get_current_rep),
    service: PlacementService = Depends(get_placement_service),
):
    """Get all applications for one of the company's postings."""
    apps = service.list_internship_applications(rep["rep_id"], internship_id)
    return [ApplicationResponse.from_entity(a) for a in apps]


@router.put("/applications/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    update: ApplicationDecision,
    rep: dict = Depends(get_current_rep),
    service: PlacementService = Depends(get_placement_service),
):
    """Decide on a PENDING application."""
    if update.status == ApplicationStatus.SUCCESSFUL:
        app = service.mark_application_successful(rep["rep_id"], application_id)
    elif update.status == ApplicationStatus.UNSUCCESSFUL:
        app = service.mark_application_unsuccessful(rep["rep_id"], application_id)
    else:
        raise HTTPException(status_code=400, detail="Status must be SUCCESSFUL or UNSUCCESSFUL")
    return ApplicationResponse.from_entity(app)
