"""
Internship Application - review & acceptance state machine.

    PENDING    -> SUCCESSFUL | UNSUCCESSFUL   (company decision)
    SUCCESSFUL -> accepted flag set            (student confirms; takes a slot)
    any        -> WITHDRAWN                    (auto-withdraw or approved withdrawal)

The internship is referenced twice: durably by id, and through a live
handle that can be missing after a reload from storage. Operations that
touch slots refuse to run until the handle is attached again.

Duplicate (student, internship) pairs are NOT checked here; the placement
service guards that before construction.
"""

from datetime import date
from typing import Callable, Optional

from placement_hub.core.errors import IllegalStateError, InvalidArgumentError
from placement_hub.models.enums import ApplicationStatus, parse_enum
from placement_hub.models.internship import Internship
from placement_hub.models.policy import ApplicationReadPort
from placement_hub.models.users import Student


class InternshipApplication:

    def __init__(
        self,
        new_id: Callable[[], str],
        applied_on: date,
        student: Student,
        internship: Internship,
        apps: ApplicationReadPort,
    ):
        if applied_on is None:
            raise InvalidArgumentError("applied_on is required")
        if student is None:
            raise InvalidArgumentError("student is required")
        if internship is None:
            raise InvalidArgumentError("internship is required")

        # open, eligible, no confirmed placement, under cap
        student.assert_can_apply(internship, apps, applied_on)

        self.applied_on = applied_on
        self._student = student
        self._internship_id = internship.internship_id
        self._internship: Optional[Internship] = internship
        self.status = ApplicationStatus.PENDING
        self.student_accepted = False
        self._application_id = new_id()

    @classmethod
    def restore(cls, application_id: str, student: Student, internship_id: str,
                applied_on: date, status, student_accepted: bool) -> "InternshipApplication":
        """Rebuild from storage; the internship handle starts detached."""
        obj = cls.__new__(cls)
        obj._application_id = application_id
        obj._student = student
        obj._internship_id = internship_id
        obj._internship = None
        obj.applied_on = applied_on
        obj.status = parse_enum(ApplicationStatus, status)
        obj.student_accepted = bool(student_accepted)
        return obj

    # ---------- Queries ----------

    @property
    def application_id(self) -> str:
        return self._application_id

    @property
    def student(self) -> Student:
        return self._student

    @property
    def student_id(self) -> str:
        return self._student.student_id

    @property
    def internship_id(self) -> str:
        return self._internship_id

    @property
    def internship(self) -> Optional[Internship]:
        """May be None until re-attached after a load."""
        return self._internship

    def can_accept(self) -> bool:
        return self.status == ApplicationStatus.SUCCESSFUL and not self.student_accepted

    def is_active(self) -> bool:
        """Counts toward the application cap."""
        return (self.status == ApplicationStatus.PENDING
                or (self.status == ApplicationStatus.SUCCESSFUL and not self.student_accepted))

    def is_confirmed_placement(self) -> bool:
        return self.status == ApplicationStatus.SUCCESSFUL and self.student_accepted

    # ---------- Re-attachment ----------

    def attach_internship(self, internship: Optional[Internship]) -> None:
        if internship is None:
            self._internship = None
            return
        if internship.internship_id != self._internship_id:
            raise InvalidArgumentError(
                "Internship does not match this application",
                {"expected": self._internship_id, "given": internship.internship_id},
            )
        self._internship = internship

    def _require_internship(self, action: str) -> Internship:
        if self._internship is None:
            raise IllegalStateError(
                f"Internship details not attached; cannot {action}",
                {"application_id": self.application_id, "internship_id": self._internship_id},
            )
        return self._internship

    # ---------- Company decisions ----------

    def mark_successful(self) -> None:
        self._ensure_status(ApplicationStatus.PENDING, "Only PENDING can be marked SUCCESSFUL")
        self.status = ApplicationStatus.SUCCESSFUL

    def mark_unsuccessful(self) -> None:
        # unreachable while the PENDING guard below holds; kept as its own refusal
        if self.status == ApplicationStatus.SUCCESSFUL and self.student_accepted:
            raise IllegalStateError("Cannot reject after student accepted",
                                    {"application_id": self.application_id})
        self._ensure_status(ApplicationStatus.PENDING, "Only PENDING can be marked UNSUCCESSFUL")
        self.status = ApplicationStatus.UNSUCCESSFUL

    def mark_withdrawn(self) -> None:
        self.status = ApplicationStatus.WITHDRAWN

    # ---------- Student decisions ----------

    def confirm_acceptance(self, apps: ApplicationReadPort) -> None:
        if not self.can_accept():
            raise IllegalStateError(
                f"Cannot accept in status {self.status.value}",
                {"application_id": self.application_id, "status": self.status.value,
                 "student_accepted": self.student_accepted},
            )
        self._student.assert_no_confirmed_placement(apps)
        internship = self._require_internship("confirm acceptance")
        # CapacityError propagates unchanged
        internship.increment_confirmed_slots()
        self.student_accepted = True

    def revoke_acceptance_after_approved_withdrawal(self) -> None:
        if not self.student_accepted:
            raise IllegalStateError("No accepted placement to revoke",
                                    {"application_id": self.application_id})
        internship = self._require_internship("revoke acceptance")
        internship.decrement_confirmed_slots()
        self.student_accepted = False

    # ---------- Helpers ----------

    def _ensure_status(self, expected: ApplicationStatus, msg: str) -> None:
        if self.status != expected:
            raise IllegalStateError(
                f"{msg} (current={self.status.value})",
                {"application_id": self.application_id, "status": self.status.value},
            )

    def __repr__(self) -> str:
        return (f"<InternshipApplication(id={self.application_id}, student={self.student_id}, "
                f"internship={self.internship_id}, status={self.status.value}, "
                f"accepted={self.student_accepted})>")
