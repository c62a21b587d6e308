"""
Error taxonomy for the placement engine.

Every guard in the domain either succeeds or raises one of these.
main.py turns them into JSON responses; nothing below the API layer
catches them.
"""

from typing import Any, Dict, Optional


class PlacementError(Exception):
    code = "PLACEMENT_ERROR"
    status_code = 400

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


# ============================================================
# CALLER ERRORS (bad input, unknown ids)
# ============================================================

class InvalidArgumentError(PlacementError):
    code = "INVALID_ARGUMENT"
    status_code = 400


class NotFoundError(InvalidArgumentError):
    code = "NOT_FOUND"
    status_code = 404


# ============================================================
# STATE ERRORS (transition refused given current facts)
# ============================================================

class IllegalStateError(PlacementError):
    code = "ILLEGAL_STATE"
    status_code = 409


class CapacityError(IllegalStateError):
    """No remaining slots on an internship."""
    code = "CAPACITY_EXCEEDED"


class LimitReachedError(IllegalStateError):
    """Posting cap or active-application cap reached."""
    code = "LIMIT_REACHED"


class EligibilityError(IllegalStateError):
    code = "NOT_ELIGIBLE"


# ============================================================
# OWNERSHIP
# ============================================================

class AuthorizationError(PlacementError):
    code = "FORBIDDEN"
    status_code = 403


def require_text(value: Optional[str], field: str) -> str:
    """Trim a required text field; blank or missing is an InvalidArgumentError."""
    if value is None or not value.strip():
        raise InvalidArgumentError(f"{field} is required")
    return value.strip()
