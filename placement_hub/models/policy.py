"""
Eligibility & Cap Policy

Pure rules, no state:
- Year 1-2 students may apply to BASIC internships only.
- Year 3-4 students may apply to any level.
- A student may hold at most MAX_ACTIVE_APPLICATIONS active applications
  (PENDING, or SUCCESSFUL and not yet accepted).
- A company may hold at most MAX_POSTINGS active postings (PENDING + APPROVED).

The counts themselves come from read ports implemented by the store.
"""

from typing import Optional, Protocol

from placement_hub.models.enums import InternshipLevel

MAX_ACTIVE_APPLICATIONS = 3
MAX_POSTINGS = 5
MAX_SLOTS_PER_POSTING = 10


class ApplicationReadPort(Protocol):
    """Read-only view over every application, keyed by student id."""

    def count_active_applications(self, student_id: str) -> int: ...

    def has_confirmed_placement(self, student_id: str) -> bool: ...


class PostingReadPort(Protocol):
    """Read-only view over every internship, keyed by company."""

    def count_active_postings(self, company_name: str) -> int: ...


def is_eligible_for(level: Optional[InternshipLevel], year_of_study: int) -> bool:
    if level is None:
        return False
    if year_of_study <= 2:
        return level == InternshipLevel.BASIC
    return level in (InternshipLevel.BASIC, InternshipLevel.INTERMEDIATE, InternshipLevel.ADVANCED)


def can_start_another_application(active_applications: int) -> bool:
    return active_applications < MAX_ACTIVE_APPLICATIONS


def can_create_another_posting(active_postings: int) -> bool:
    return active_postings < MAX_POSTINGS
