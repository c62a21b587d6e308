# tests/conftest.py
"""
Pytest configuration and fixtures.

Every service here runs on a fixed clock so application windows are
deterministic.
"""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from placement_hub.core.auth import create_access_token
from placement_hub.db.memory_store import MemoryStore
from placement_hub.models.internship import Internship
from placement_hub.models.users import CareerCenterStaff, Student
from placement_hub.services.placement_service import PlacementService, get_placement_service

TODAY = date(2026, 3, 2)


def make_internship(store: MemoryStore, company_name="Acme", level="BASIC", max_slots=1,
                    approved=True, visible=True, **overrides) -> Internship:
    """Build an internship straight into the store, bypassing the rep workflow."""
    fields = dict(
        title="Backend Intern",
        description="Build APIs",
        level=level,
        preferred_major="Computer Science",
        open_date=TODAY - timedelta(days=7),
        close_date=TODAY + timedelta(days=30),
        company_name=company_name,
        max_slots=max_slots,
    )
    fields.update(overrides)
    internship = Internship(new_id=store.internship_ids, **fields)
    if approved:
        internship.approve()
        internship.set_visible(visible)
    return store.internships.add(internship)


def make_student(store: MemoryStore, student_id="S001", year_of_study=3) -> Student:
    return store.students.add(Student(student_id, f"Student {student_id}", "Computer Science", year_of_study))


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def service(store):
    return PlacementService(store, clock=lambda: TODAY)


@pytest.fixture
def staff(service) -> CareerCenterStaff:
    return service.register_staff("STF01", "Grace Tan")


@pytest.fixture
def rep(service, staff):
    rep = service.register_company_rep("hr@acme.com", "Alice Lim", "Acme", "HR", "Recruiter")
    service.approve_company_rep(staff.staff_id, rep.rep_id)
    return rep


@pytest.fixture
def post_internship(service, rep, staff):
    """Create a posting as the rep and have staff approve it (visible)."""
    def _post(level="BASIC", max_slots=1, title="Backend Intern", by=None):
        owner = by or rep
        internship = service.create_internship(
            owner.rep_id, title=title, description="Build APIs", level=level,
            preferred_major="Computer Science",
            open_date=TODAY - timedelta(days=7), close_date=TODAY + timedelta(days=30),
            max_slots=max_slots,
        )
        return service.approve_internship(staff.staff_id, internship.internship_id, True)
    return _post


# ============================================================
# API
# ============================================================

def auth_headers(actor_id: str, role: str) -> dict:
    token = create_access_token({"sub": actor_id, "role": role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(service):
    from placement_hub.main import app

    app.dependency_overrides[get_placement_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
