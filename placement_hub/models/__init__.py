"""
Models module - domain aggregates and the rules they enforce.

- Internship: approval status and slot accounting for one posting
- InternshipApplication: one student's application to one internship
- WithdrawalRequest: staff-mediated exit from an application
- Student / CompanyRep / CareerCenterStaff: actors and their policies
"""

from placement_hub.models.enums import (
    ApplicationStatus, InternshipLevel, InternshipStatus, WithdrawalRequestStatus,
)
from placement_hub.models.internship import Internship
from placement_hub.models.application import InternshipApplication
from placement_hub.models.withdrawal import WithdrawalRequest
from placement_hub.models.users import CareerCenterStaff, CompanyRep, Student

__all__ = [
    "ApplicationStatus",
    "InternshipLevel",
    "InternshipStatus",
    "WithdrawalRequestStatus",
    "Internship",
    "InternshipApplication",
    "WithdrawalRequest",
    "CareerCenterStaff",
    "CompanyRep",
    "Student",
]
