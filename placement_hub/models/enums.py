"""
Status and level enums shared by the domain, the schemas and the snapshot tables.
"""

from enum import Enum

from placement_hub.core.errors import InvalidArgumentError


class InternshipLevel(str, Enum):
    BASIC = "BASIC"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class InternshipStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CLOSED = "CLOSED"
    FILLED = "FILLED"


class ApplicationStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESSFUL = "SUCCESSFUL"
    UNSUCCESSFUL = "UNSUCCESSFUL"
    WITHDRAWN = "WITHDRAWN"


class WithdrawalRequestStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


def parse_enum(enum_cls, raw):
    """Case-insensitive lookup; unknown values raise InvalidArgumentError."""
    if isinstance(raw, enum_cls):
        return raw
    if raw is None:
        raise InvalidArgumentError(f"{enum_cls.__name__} is required")
    try:
        return enum_cls(str(raw).strip().upper())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidArgumentError(f"Unknown {enum_cls.__name__} '{raw}' (expected one of: {allowed})")
