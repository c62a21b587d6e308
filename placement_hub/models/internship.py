"""
Internship Capacity State Machine

States:
    PENDING  -> APPROVED | REJECTED     (staff decision)
    APPROVED <-> FILLED                  (driven by confirmed slot count)
    REJECTED, CLOSED                     (terminal w.r.t. slots)

Invariants:
- 0 <= confirmed_slots <= max_slots
- visible only once APPROVED (set_visible is the single gate; FILLED keeps it)
- FILLED exactly when confirmed_slots == max_slots
"""

from datetime import date
from typing import Callable, Optional

from placement_hub.core.errors import CapacityError, IllegalStateError, InvalidArgumentError, require_text
from placement_hub.models.enums import InternshipLevel, InternshipStatus, parse_enum
from placement_hub.models.policy import MAX_SLOTS_PER_POSTING


class Internship:

    def __init__(
        self,
        new_id: Callable[[], str],
        title: str,
        description: str,
        level,
        preferred_major: str,
        open_date: date,
        close_date: date,
        company_name: str,
        max_slots: int,
    ):
        self.title = require_text(title, "title")
        self.description = require_text(description, "description")
        self.level: InternshipLevel = parse_enum(InternshipLevel, level)
        self.preferred_major = require_text(preferred_major, "preferred_major")
        self.company_name = require_text(company_name, "company_name")
        if open_date is None:
            raise InvalidArgumentError("open_date is required")
        if close_date is None:
            raise InvalidArgumentError("close_date is required")
        if close_date < open_date:
            raise InvalidArgumentError("close_date cannot be before open_date")
        if not isinstance(max_slots, int) or not 1 <= max_slots <= MAX_SLOTS_PER_POSTING:
            raise InvalidArgumentError(f"max_slots must be between 1 and {MAX_SLOTS_PER_POSTING}")
        self.open_date = open_date
        self.close_date = close_date
        self.max_slots = max_slots
        self.confirmed_slots = 0
        self.visible = False
        self.status = InternshipStatus.PENDING
        # id is taken last so a rejected construction never consumes one
        self._internship_id = new_id()

    @classmethod
    def restore(cls, internship_id: str, **state) -> "Internship":
        """Rebuild from storage without re-running creation checks."""
        obj = cls.__new__(cls)
        obj._internship_id = internship_id
        obj.title = state["title"]
        obj.description = state["description"]
        obj.level = parse_enum(InternshipLevel, state["level"])
        obj.preferred_major = state["preferred_major"]
        obj.open_date = state["open_date"]
        obj.close_date = state["close_date"]
        obj.company_name = state["company_name"]
        obj.max_slots = state["max_slots"]
        obj.confirmed_slots = state["confirmed_slots"]
        obj.visible = state["visible"]
        obj.status = parse_enum(InternshipStatus, state["status"])
        obj._check_restored_state()
        return obj

    def _check_restored_state(self) -> None:
        context = {"internship_id": self._internship_id}
        if not isinstance(self.max_slots, int) or self.max_slots < 1:
            raise InvalidArgumentError("max_slots must be at least 1", context)
        if not 0 <= self.confirmed_slots <= self.max_slots:
            raise InvalidArgumentError(
                f"confirmed_slots must be between 0 and {self.max_slots}",
                {**context, "confirmed_slots": self.confirmed_slots},
            )
        # filling a posting does not hide it
        if self.visible and self.status not in (InternshipStatus.APPROVED, InternshipStatus.FILLED):
            raise InvalidArgumentError(
                "Only approved internships can be visible",
                {**context, "status": self.status.value},
            )

    @property
    def internship_id(self) -> str:
        return self._internship_id

    @property
    def remaining_slots(self) -> int:
        return self.max_slots - self.confirmed_slots

    # ---------- Staff decisions ----------

    def approve(self) -> None:
        if self.status == InternshipStatus.APPROVED:
            return
        if self.status != InternshipStatus.PENDING:
            raise IllegalStateError(
                "Only PENDING internships can be approved",
                {"internship_id": self.internship_id, "status": self.status.value},
            )
        self.status = InternshipStatus.APPROVED

    def reject(self) -> None:
        self.status = InternshipStatus.REJECTED
        self.visible = False

    def set_visible(self, visible: bool) -> None:
        if visible and self.status != InternshipStatus.APPROVED:
            raise IllegalStateError(
                "Only approved internships can be made visible",
                {"internship_id": self.internship_id, "status": self.status.value},
            )
        self.visible = bool(visible)

    # ---------- Queries ----------

    def is_open_for_applications(self, today: Optional[date]) -> bool:
        if self.status != InternshipStatus.APPROVED or not self.visible:
            return False
        if today is None:
            return False
        return self.open_date <= today <= self.close_date and self.confirmed_slots < self.max_slots

    def is_editable(self) -> bool:
        return self.status == InternshipStatus.PENDING

    def can_be_deleted(self) -> bool:
        return self.status in (InternshipStatus.PENDING, InternshipStatus.REJECTED)

    # ---------- Slot accounting (called by InternshipApplication) ----------

    def increment_confirmed_slots(self) -> None:
        if self.confirmed_slots >= self.max_slots:
            # a late second caller still leaves the posting marked FILLED
            self.status = InternshipStatus.FILLED
            raise CapacityError(
                "No remaining slots",
                {"internship_id": self.internship_id, "confirmed_slots": self.confirmed_slots,
                 "max_slots": self.max_slots},
            )
        self.confirmed_slots += 1
        if self.confirmed_slots >= self.max_slots:
            self.status = InternshipStatus.FILLED

    def decrement_confirmed_slots(self) -> None:
        if self.confirmed_slots > 0:
            self.confirmed_slots -= 1
        if self.status == InternshipStatus.FILLED and self.confirmed_slots < self.max_slots:
            self.status = InternshipStatus.APPROVED

    def __repr__(self) -> str:
        return (f"<Internship(id={self.internship_id}, company={self.company_name!r}, "
                f"status={self.status.value}, slots={self.confirmed_slots}/{self.max_slots})>")
