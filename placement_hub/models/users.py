"""
Actors of the marketplace.

Students and company reps are policy holders rather than state machines:
they answer "may I?" questions using read ports over the whole store.
Staff carry no rules of their own; they are stamped onto the requests
they process.
"""

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Callable, Optional

from placement_hub.core.errors import (
    AuthorizationError, EligibilityError, IllegalStateError, InvalidArgumentError,
    LimitReachedError, require_text,
)
from placement_hub.models import policy
from placement_hub.models.enums import InternshipLevel

if TYPE_CHECKING:
    from placement_hub.models.internship import Internship


@dataclass(eq=False)
class Student:
    student_id: str
    name: str
    major: str
    year_of_study: int
    email: str = ""

    def __post_init__(self):
        self.student_id = require_text(self.student_id, "student_id")
        self.name = require_text(self.name, "name")
        self.major = require_text(self.major, "major")
        self.email = (self.email or "").strip()
        if not isinstance(self.year_of_study, int) or not 1 <= self.year_of_study <= 4:
            raise InvalidArgumentError("year_of_study must be between 1 and 4")

    # -------------------- Queries --------------------

    def is_eligible_for(self, level: Optional[InternshipLevel]) -> bool:
        return policy.is_eligible_for(level, self.year_of_study)

    def active_applications_count(self, apps: policy.ApplicationReadPort) -> int:
        return apps.count_active_applications(self.student_id)

    def has_confirmed_placement(self, apps: policy.ApplicationReadPort) -> bool:
        return apps.has_confirmed_placement(self.student_id)

    def can_start_another_application(self, apps: policy.ApplicationReadPort) -> bool:
        return policy.can_start_another_application(self.active_applications_count(apps))

    # -------------------- Guards --------------------

    def assert_can_apply(self, internship: "Internship", apps: policy.ApplicationReadPort, on: date) -> None:
        """Creation-time checks, in order: open, eligible, no placement, under cap."""
        if not internship.is_open_for_applications(on):
            raise IllegalStateError(
                "Internship is not open/visible for applications",
                {"internship_id": internship.internship_id, "status": internship.status.value,
                 "visible": internship.visible},
            )
        if not self.is_eligible_for(internship.level):
            raise EligibilityError(
                f"Student not eligible for level {internship.level.value}",
                {"year_of_study": self.year_of_study, "level": internship.level.value},
            )
        self.assert_no_confirmed_placement(apps)
        if not self.can_start_another_application(apps):
            raise LimitReachedError(
                f"Student reached application cap ({policy.MAX_ACTIVE_APPLICATIONS})",
                {"active_applications": self.active_applications_count(apps)},
            )

    def assert_no_confirmed_placement(self, apps: policy.ApplicationReadPort) -> None:
        if self.has_confirmed_placement(apps):
            raise IllegalStateError("Student already has a confirmed placement",
                                    {"student_id": self.student_id})


@dataclass(eq=False)
class CompanyRep:
    rep_id: str
    name: str
    company_name: str
    department: str
    position: str
    email: str
    approved: bool = False
    rejection_reason: str = ""

    def __post_init__(self):
        self.rep_id = require_text(self.rep_id, "rep_id")
        self.name = require_text(self.name, "name")
        self.company_name = require_text(self.company_name, "company_name")
        self.department = require_text(self.department, "department")
        self.position = require_text(self.position, "position")
        self.email = require_text(self.email, "email")

    @property
    def is_rejected(self) -> bool:
        return not self.approved and bool(self.rejection_reason)

    @property
    def is_pending(self) -> bool:
        return not self.approved and not self.is_rejected

    # ---------- Registration (staff decisions) ----------

    def approve(self) -> None:
        self.approved = True
        self.rejection_reason = ""

    def reject(self, reason: Optional[str]) -> None:
        self.approved = False
        self.rejection_reason = (reason or "").strip() or "Rejected by Career Center staff"

    # ---------- Ownership ----------

    def owns(self, internship: Optional["Internship"]) -> bool:
        if internship is None:
            return False
        return self.company_name.casefold() == internship.company_name.casefold()

    def ensure_owns(self, internship: Optional["Internship"]) -> None:
        if internship is None:
            raise IllegalStateError("Internship details not attached; cannot check ownership")
        if not self.owns(internship):
            raise AuthorizationError(
                "Rep can only manage their own company's postings",
                {"rep_company": self.company_name, "internship_company": internship.company_name},
            )

    # ---------- Posting management ----------

    def can_create_another_posting(self, port: policy.PostingReadPort) -> bool:
        return policy.can_create_another_posting(port.count_active_postings(self.company_name))

    def create_internship(self, port: policy.PostingReadPort, new_id: Callable[[], str], **fields) -> "Internship":
        """Build a PENDING posting for this rep's company; the cap is checked first."""
        from placement_hub.models.internship import Internship

        if not self.approved:
            raise IllegalStateError("Company representative is not approved", {"rep_id": self.rep_id})
        if not self.can_create_another_posting(port):
            raise LimitReachedError(
                f"Posting cap reached ({policy.MAX_POSTINGS})",
                {"company_name": self.company_name,
                 "active_postings": port.count_active_postings(self.company_name)},
            )
        return Internship(new_id=new_id, company_name=self.company_name, **fields)


@dataclass(eq=False)
class CareerCenterStaff:
    staff_id: str
    name: str
    department: str = "Career Center"
    email: str = ""

    def __post_init__(self):
        self.staff_id = require_text(self.staff_id, "staff_id")
        self.name = require_text(self.name, "name")
        self.department = (self.department or "").strip()
        self.email = (self.email or "").strip()
