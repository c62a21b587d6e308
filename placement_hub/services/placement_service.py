"""
Placement Service - cross-aggregate consistency.

PURPOSE:
No single entity can see all of a student's applications or all of a
company's postings, so the rules that span aggregates live here:

1. Acceptance exclusivity: once a student confirms one offer, every other
   PENDING or SUCCESSFUL application of that student becomes WITHDRAWN.
2. Posting cap: a company holds at most 5 PENDING + APPROVED postings.
3. Duplicate guard: one application per (student, internship).
4. Single pending withdrawal per application.

CONCURRENCY:
Each public method runs under one re-entrant lock, which is the single
writer for the whole store. Composite steps (accept then auto-withdraw,
guard then construct) therefore never interleave with another request.

Actors arrive as already-verified ids; this layer authorizes ownership
(company name match, student id match) and nothing else.
"""

import logging
import threading
from datetime import date
from functools import lru_cache, wraps
from typing import Callable, Dict, List, Optional

from placement_hub.core.errors import (
    AuthorizationError, IllegalStateError, InvalidArgumentError, PlacementError, require_text,
)
from placement_hub.db.memory_store import MemoryStore
from placement_hub.db.snapshot import load_snapshot, save_snapshot
from placement_hub.models.application import InternshipApplication
from placement_hub.models.enums import ApplicationStatus, InternshipStatus, parse_enum
from placement_hub.models.internship import Internship
from placement_hub.models.policy import MAX_ACTIVE_APPLICATIONS
from placement_hub.models.users import CareerCenterStaff, CompanyRep, Student
from placement_hub.models.withdrawal import WithdrawalRequest

logger = logging.getLogger(__name__)

DEFAULT_APPROVE_NOTE = "Approved by Career Center staff"
DEFAULT_REJECT_NOTE = "Rejected by Career Center staff"


def serialized(method):
    """Run the method while holding the service lock; refusals are logged and re-raised."""
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            try:
                return method(self, *args, **kwargs)
            except PlacementError as exc:
                logger.info("%s refused: %s", method.__name__, exc)
                raise
    return wrapper


class PlacementService:
    """
    Orchestrates students, company reps and staff over one MemoryStore.

    Usage:
        service = PlacementService(MemoryStore())
        app_id = service.apply_for_internship("S001", "INT0001")
    """

    def __init__(self, store: Optional[MemoryStore] = None, clock: Callable[[], date] = date.today):
        self.store = store or MemoryStore()
        self.clock = clock
        self._lock = threading.RLock()

    # ============================================================
    # DIRECTORY
    # ============================================================

    @serialized
    def register_student(self, student_id: str, name: str, major: str,
                         year_of_study: int, email: str = "") -> Student:
        student = self.store.students.add(Student(student_id, name, major, year_of_study, email))
        logger.info("Registered student %s (year %s)", student.student_id, student.year_of_study)
        return student

    @serialized
    def register_staff(self, staff_id: str, name: str, department: str = "Career Center",
                       email: str = "") -> CareerCenterStaff:
        staff = self.store.staff.add(CareerCenterStaff(staff_id, name, department, email))
        logger.info("Registered staff %s", staff.staff_id)
        return staff

    @serialized
    def register_company_rep(self, email: str, name: str, company_name: str,
                             department: str, position: str) -> CompanyRep:
        """Reps register themselves and wait for staff approval; the email is the rep id."""
        rep_id = require_text(email, "email").lower()
        rep = self.store.reps.add(CompanyRep(rep_id, name, company_name, department, position, rep_id))
        logger.info("Company rep %s registered for %s (pending approval)", rep.rep_id, rep.company_name)
        return rep

    def get_student(self, student_id: str) -> Student:
        return self.store.students.require(student_id)

    def get_company_rep(self, rep_id: str) -> CompanyRep:
        return self.store.reps.require((rep_id or "").lower())

    def get_staff(self, staff_id: str) -> CareerCenterStaff:
        return self.store.staff.require(staff_id)

    @serialized
    def list_pending_reps(self) -> List[CompanyRep]:
        return [r for r in self.store.reps if r.is_pending]

    @serialized
    def approve_company_rep(self, staff_id: str, rep_id: str) -> CompanyRep:
        self.get_staff(staff_id)
        rep = self.get_company_rep(rep_id)
        if rep.approved:
            raise IllegalStateError("Company representative is already approved", {"rep_id": rep.rep_id})
        rep.approve()
        logger.info("Staff %s approved company rep %s", staff_id, rep.rep_id)
        return rep

    @serialized
    def reject_company_rep(self, staff_id: str, rep_id: str, reason: Optional[str] = None) -> CompanyRep:
        self.get_staff(staff_id)
        rep = self.get_company_rep(rep_id)
        if rep.is_rejected:
            raise IllegalStateError("Company representative is already rejected", {"rep_id": rep.rep_id})
        rep.reject(reason)
        logger.info("Staff %s rejected company rep %s", staff_id, rep.rep_id)
        return rep

    # ============================================================
    # COMPANY REP ACTIONS
    # ============================================================

    @serialized
    def create_internship(self, rep_id: str, title: str, description: str, level,
                          preferred_major: str, open_date: date, close_date: date,
                          max_slots: int) -> Internship:
        """Posting cap is checked before anything is constructed."""
        rep = self.get_company_rep(rep_id)
        internship = rep.create_internship(
            self.store.internships, self.store.internship_ids,
            title=title, description=description, level=level, preferred_major=preferred_major,
            open_date=open_date, close_date=close_date, max_slots=max_slots,
        )
        self.store.internships.add(internship)
        logger.info("Rep %s created internship %s for %s", rep.rep_id, internship.internship_id,
                    internship.company_name)
        return internship

    @serialized
    def edit_internship(self, rep_id: str, internship_id: str, title: str, description: str, level,
                        preferred_major: str, open_date: date, close_date: date,
                        max_slots: int) -> Internship:
        """
        Editing a PENDING posting replaces it with a new one under a new id.

        The replacement is built first, so invalid fields leave the old
        posting untouched.
        """
        rep = self.get_company_rep(rep_id)
        old = self._owned_internship(rep, internship_id)
        if not old.is_editable():
            raise IllegalStateError(
                "Cannot edit internship that has been approved or rejected",
                {"internship_id": internship_id, "status": old.status.value},
            )
        replacement = Internship(
            new_id=self.store.internship_ids, title=title, description=description, level=level,
            preferred_major=preferred_major, open_date=open_date, close_date=close_date,
            company_name=rep.company_name, max_slots=max_slots,
        )
        self.store.internships.delete(old.internship_id)
        self.store.internships.add(replacement)
        logger.info("Rep %s replaced internship %s with %s", rep.rep_id, internship_id,
                    replacement.internship_id)
        return replacement

    @serialized
    def delete_internship(self, rep_id: str, internship_id: str) -> None:
        rep = self.get_company_rep(rep_id)
        internship = self._owned_internship(rep, internship_id)
        if not internship.can_be_deleted():
            raise IllegalStateError(
                "Cannot delete internship that has been approved",
                {"internship_id": internship_id, "status": internship.status.value},
            )
        self.store.internships.delete(internship_id)
        logger.info("Rep %s deleted internship %s", rep.rep_id, internship_id)

    @serialized
    def set_internship_visibility(self, rep_id: str, internship_id: str, visible: bool) -> Internship:
        rep = self.get_company_rep(rep_id)
        internship = self._owned_internship(rep, internship_id)
        internship.set_visible(visible)
        logger.info("Rep %s set internship %s visible=%s", rep.rep_id, internship_id, internship.visible)
        return internship

    @serialized
    def list_company_internships(self, rep_id: str) -> List[Internship]:
        rep = self.get_company_rep(rep_id)
        return self.store.internships.find_by_company(rep.company_name)

    @serialized
    def list_internship_applications(self, rep_id: str, internship_id: str) -> List[InternshipApplication]:
        rep = self.get_company_rep(rep_id)
        internship = self._owned_internship(rep, internship_id)
        apps = self.store.applications.find_by_internship(internship_id)
        for app in apps:
            app.attach_internship(internship)
        return apps

    @serialized
    def mark_application_successful(self, rep_id: str, application_id: str) -> InternshipApplication:
        rep = self.get_company_rep(rep_id)
        app = self._attached_application(application_id)
        rep.ensure_owns(app.internship)
        app.mark_successful()
        logger.info("Rep %s marked application %s SUCCESSFUL", rep.rep_id, application_id)
        return app

    @serialized
    def mark_application_unsuccessful(self, rep_id: str, application_id: str) -> InternshipApplication:
        rep = self.get_company_rep(rep_id)
        app = self._attached_application(application_id)
        rep.ensure_owns(app.internship)
        app.mark_unsuccessful()
        logger.info("Rep %s marked application %s UNSUCCESSFUL", rep.rep_id, application_id)
        return app

    # ============================================================
    # STUDENT ACTIONS
    # ============================================================

    @serialized
    def list_eligible_internships(self, student_id: str) -> List[Internship]:
        """Open, visible and level-eligible postings, plus any the student already applied to."""
        student = self.get_student(student_id)
        today = self.clock()
        applied = {a.internship_id for a in self.store.applications.find_by_student(student_id)}
        return [
            i for i in self.store.internships
            if i.internship_id in applied
            or (i.is_open_for_applications(today) and student.is_eligible_for(i.level))
        ]

    @serialized
    def apply_for_internship(self, student_id: str, internship_id: str) -> InternshipApplication:
        student = self.get_student(student_id)
        internship = self.store.internships.require(internship_id)
        self.ensure_not_already_applied(student_id, internship_id)
        app = InternshipApplication(
            new_id=self.store.application_ids,
            applied_on=self.clock(),
            student=student,
            internship=internship,
            apps=self.store.applications,
        )
        self.store.applications.add(app)
        logger.info("Student %s applied to %s (%s)", student_id, internship_id, app.application_id)
        return app

    @serialized
    def confirm_acceptance(self, student_id: str, application_id: str) -> InternshipApplication:
        app = self._attached_application(application_id)
        self._ensure_student_owns(student_id, app)
        app.confirm_acceptance(self.store.applications)
        withdrawn = self.withdraw_sibling_applications(app)
        logger.info("Student %s accepted %s; auto-withdrew %s", student_id, application_id,
                    [a.application_id for a in withdrawn] or "none")
        return app

    @serialized
    def request_withdrawal(self, student_id: str, application_id: str, reason: str) -> WithdrawalRequest:
        app = self.store.applications.require(application_id)
        self._ensure_student_owns(student_id, app)
        if reason is None or not reason.strip():
            raise InvalidArgumentError("Withdrawal reason is required")
        self.ensure_no_pending_withdrawal(application_id)
        request = WithdrawalRequest(
            new_id=self.store.withdrawal_ids,
            application=app,
            requested_by=app.student,
            reason=reason,
            requested_on=self.clock(),
        )
        self.store.withdrawals.add(request)
        logger.info("Student %s requested withdrawal %s for %s", student_id, request.request_id,
                    application_id)
        return request

    @serialized
    def update_withdrawal_reason(self, student_id: str, request_id: str, reason: str) -> WithdrawalRequest:
        request = self.store.withdrawals.require(request_id)
        if request.requested_by.student_id != student_id:
            raise AuthorizationError("Cannot edit another student's withdrawal request",
                                     {"request_id": request_id})
        if reason is None or not reason.strip():
            raise InvalidArgumentError("Withdrawal reason is required")
        request.set_reason(reason)
        logger.info("Student %s updated reason on withdrawal %s", student_id, request_id)
        return request

    @serialized
    def list_my_applications(self, student_id: str) -> List[InternshipApplication]:
        self.get_student(student_id)
        apps = self.store.applications.find_by_student(student_id)
        for app in apps:
            app.attach_internship(self.store.internships.get(app.internship_id))
        return apps

    @serialized
    def get_my_application(self, student_id: str, application_id: str) -> InternshipApplication:
        app = self._attached_application(application_id)
        self._ensure_student_owns(student_id, app)
        return app

    @serialized
    def list_my_withdrawals(self, student_id: str) -> List[WithdrawalRequest]:
        self.get_student(student_id)
        return self.store.withdrawals.find_by_student(student_id)

    @serialized
    def application_summary(self, student_id: str) -> Dict[str, object]:
        student = self.get_student(student_id)
        apps = self.store.applications
        return {
            "student_id": student.student_id,
            "active_applications": student.active_applications_count(apps),
            "max_active_applications": MAX_ACTIVE_APPLICATIONS,
            "can_apply_more": student.can_start_another_application(apps),
            "has_confirmed_placement": student.has_confirmed_placement(apps),
        }

    # ============================================================
    # STAFF ACTIONS
    # ============================================================

    @serialized
    def list_pending_internships(self) -> List[Internship]:
        return self.store.internships.find_by_status(InternshipStatus.PENDING)

    @serialized
    def list_all_internships(self, status=None) -> List[Internship]:
        if status is None:
            return self.store.internships.all()
        return self.store.internships.find_by_status(parse_enum(InternshipStatus, status))

    @serialized
    def approve_internship(self, staff_id: str, internship_id: str, make_visible: bool) -> Internship:
        self.get_staff(staff_id)
        internship = self._pending_internship(internship_id, "approved")
        internship.approve()
        internship.set_visible(make_visible)
        logger.info("Staff %s approved internship %s (visible=%s)", staff_id, internship_id, make_visible)
        return internship

    @serialized
    def reject_internship(self, staff_id: str, internship_id: str) -> Internship:
        self.get_staff(staff_id)
        internship = self._pending_internship(internship_id, "rejected")
        internship.reject()
        logger.info("Staff %s rejected internship %s", staff_id, internship_id)
        return internship

    @serialized
    def list_pending_withdrawals(self) -> List[WithdrawalRequest]:
        return self.store.withdrawals.find_pending()

    @serialized
    def approve_withdrawal(self, staff_id: str, request_id: str, note: Optional[str] = None) -> WithdrawalRequest:
        staff = self.get_staff(staff_id)
        request = self.store.withdrawals.require(request_id)
        app = request.application
        # slot rollback needs the live internship
        app.attach_internship(self.store.internships.get(app.internship_id))
        request.approve(staff, note or DEFAULT_APPROVE_NOTE, self.clock())
        logger.info("Staff %s approved withdrawal %s (application %s now %s, accepted=%s)",
                    staff_id, request_id, app.application_id, app.status.value, app.student_accepted)
        return request

    @serialized
    def reject_withdrawal(self, staff_id: str, request_id: str, note: Optional[str] = None) -> WithdrawalRequest:
        staff = self.get_staff(staff_id)
        request = self.store.withdrawals.require(request_id)
        request.reject(staff, note or DEFAULT_REJECT_NOTE, self.clock())
        logger.info("Staff %s rejected withdrawal %s", staff_id, request_id)
        return request

    # ============================================================
    # CONSISTENCY RULES
    # ============================================================

    def ensure_not_already_applied(self, student_id: str, internship_id: str) -> None:
        if self.store.applications.exists_for(student_id, internship_id):
            raise IllegalStateError(
                "You have already applied to this internship",
                {"student_id": student_id, "internship_id": internship_id},
            )

    def ensure_no_pending_withdrawal(self, application_id: str) -> None:
        pending = self.store.withdrawals.find_pending_for_application(application_id)
        if pending is not None:
            raise IllegalStateError(
                "There is already a pending withdrawal request for this application",
                {"application_id": application_id, "request_id": pending.request_id},
            )

    def withdraw_sibling_applications(self, accepted: InternshipApplication) -> List[InternshipApplication]:
        """Every other PENDING/SUCCESSFUL application of the same student becomes WITHDRAWN."""
        withdrawn = []
        for other in self.store.applications.find_by_student(accepted.student_id):
            if other.application_id == accepted.application_id:
                continue
            if other.status in (ApplicationStatus.PENDING, ApplicationStatus.SUCCESSFUL):
                other.mark_withdrawn()
                withdrawn.append(other)
        return withdrawn

    # ============================================================
    # PERSISTENCE
    # ============================================================

    @serialized
    def save(self, db) -> Dict[str, int]:
        return save_snapshot(self.store, db)

    @serialized
    def load(self, db) -> Dict[str, int]:
        return load_snapshot(self.store, db)

    # ============================================================
    # HELPERS
    # ============================================================

    def _attached_application(self, application_id: str) -> InternshipApplication:
        """Resolve an application and re-attach its internship from the store."""
        app = self.store.applications.require(application_id)
        app.attach_internship(self.store.internships.get(app.internship_id))
        return app

    def _owned_internship(self, rep: CompanyRep, internship_id: str) -> Internship:
        internship = self.store.internships.require(internship_id)
        rep.ensure_owns(internship)
        return internship

    def _pending_internship(self, internship_id: str, verb: str) -> Internship:
        internship = self.store.internships.require(internship_id)
        if internship.status != InternshipStatus.PENDING:
            raise IllegalStateError(
                f"Only pending internships can be {verb}",
                {"internship_id": internship_id, "status": internship.status.value},
            )
        return internship

    @staticmethod
    def _ensure_student_owns(student_id: str, app: InternshipApplication) -> None:
        if app.student is None or app.student_id != student_id:
            raise AuthorizationError(
                "You can only act on your own application",
                {"application_id": app.application_id},
            )


@lru_cache()
def get_placement_service() -> PlacementService:
    """Process-wide service instance (FastAPI dependency; tests override it)."""
    return PlacementService(MemoryStore())
