"""
Withdrawal Request - staff-mediated exit from an application.

    PENDING -> APPROVED | REJECTED   (both terminal)

Approval is where "free a slot" and "just cancel" are told apart:
- accepted placement   -> revoke acceptance (slot freed, status stays SUCCESSFUL)
- PENDING / SUCCESSFUL -> mark WITHDRAWN
- anything else        -> no change to the application

At most one PENDING request per application is enforced by the placement
service, not here.
"""

from datetime import date
from typing import Callable, Optional

from placement_hub.core.errors import AuthorizationError, IllegalStateError, InvalidArgumentError
from placement_hub.models.application import InternshipApplication
from placement_hub.models.enums import ApplicationStatus, WithdrawalRequestStatus, parse_enum
from placement_hub.models.users import CareerCenterStaff, Student

REASON_MAX_LENGTH = 2000


def sanitize(text: Optional[str]) -> str:
    if text is None:
        return ""
    return text.strip()[:REASON_MAX_LENGTH]


class WithdrawalRequest:

    def __init__(
        self,
        new_id: Callable[[], str],
        application: InternshipApplication,
        requested_by: Student,
        reason: Optional[str],
        requested_on: date,
    ):
        if application is None:
            raise InvalidArgumentError("application is required")
        if requested_by is None:
            raise InvalidArgumentError("requested_by is required")
        if application.student is None or application.student_id != requested_by.student_id:
            raise AuthorizationError(
                "Requester must be the owner of the application",
                {"application_id": application.application_id, "requested_by": requested_by.student_id},
            )
        self._application = application
        self._requested_by = requested_by
        self.requested_on = requested_on
        self.reason = sanitize(reason)
        self.status = WithdrawalRequestStatus.PENDING
        self.processed_by: Optional[CareerCenterStaff] = None
        self.processed_on: Optional[date] = None
        self.staff_note = ""
        self._request_id = new_id()

    @classmethod
    def restore(cls, request_id: str, application: InternshipApplication, requested_by: Student,
                requested_on: date, reason: str, status, processed_by: Optional[CareerCenterStaff],
                processed_on: Optional[date], staff_note: str) -> "WithdrawalRequest":
        obj = cls.__new__(cls)
        obj._request_id = request_id
        obj._application = application
        obj._requested_by = requested_by
        obj.requested_on = requested_on
        obj.reason = reason or ""
        obj.status = parse_enum(WithdrawalRequestStatus, status)
        obj.processed_by = processed_by
        obj.processed_on = processed_on
        obj.staff_note = staff_note or ""
        return obj

    # ---------- Queries ----------

    @property
    def request_id(self) -> str:
        return self._request_id

    @property
    def application(self) -> InternshipApplication:
        return self._application

    @property
    def requested_by(self) -> Student:
        return self._requested_by

    def is_pending(self) -> bool:
        return self.status == WithdrawalRequestStatus.PENDING

    # ---------- Commands ----------

    def set_reason(self, reason: Optional[str]) -> None:
        self._ensure_pending()
        self.reason = sanitize(reason)

    def approve(self, staff: CareerCenterStaff, note: Optional[str], on: date) -> None:
        if staff is None:
            raise InvalidArgumentError("staff is required")
        self._ensure_pending()

        app = self._application
        if app.student_accepted:
            app.revoke_acceptance_after_approved_withdrawal()
        elif app.status in (ApplicationStatus.PENDING, ApplicationStatus.SUCCESSFUL):
            app.mark_withdrawn()

        self.status = WithdrawalRequestStatus.APPROVED
        self._stamp(staff, note, on)

    def reject(self, staff: CareerCenterStaff, note: Optional[str], on: date) -> None:
        if staff is None:
            raise InvalidArgumentError("staff is required")
        self._ensure_pending()
        self.status = WithdrawalRequestStatus.REJECTED
        self._stamp(staff, note, on)

    # ---------- Helpers ----------

    def _ensure_pending(self) -> None:
        if not self.is_pending():
            raise IllegalStateError(
                f"Request already processed: {self.status.value}",
                {"request_id": self.request_id, "status": self.status.value},
            )

    def _stamp(self, staff: CareerCenterStaff, note: Optional[str], on: date) -> None:
        self.processed_by = staff
        self.processed_on = on
        self.staff_note = sanitize(note)

    def __repr__(self) -> str:
        return (f"<WithdrawalRequest(id={self.request_id}, app={self._application.application_id}, "
                f"by={self._requested_by.student_id}, status={self.status.value})>")
