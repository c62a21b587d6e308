"""
Actor identity - JWT verification for the external authenticator.

Login and credential storage live outside this service. The authenticator
hands clients a bearer token whose claims are:
- sub:  actor id (student id, rep email, staff id)
- role: "student" | "company" | "staff"

This module only verifies the token and checks the role; ownership rules
(company name match, student id match) are enforced by the placement service.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from placement_hub.core.config import get_settings
from placement_hub.services.placement_service import PlacementService, get_placement_service

ROLES = ("student", "company", "staff")

# Bearer token extractor
bearer_scheme = HTTPBearer()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token (used by the authenticator and by tests)."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_actor(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> dict:
    """
    FastAPI dependency - Get the verified actor behind the request.

    Usage:
        @router.get("/protected")
        async def route(actor: dict = Depends(get_current_actor)):
            return actor
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    actor_id = payload.get("sub")
    role = payload.get("role")
    if not actor_id or role not in ROLES:
        raise credentials_exception

    return {"actor_id": actor_id, "role": role}


async def get_current_student(
    actor: dict = Depends(get_current_actor),
    service: PlacementService = Depends(get_placement_service),
) -> dict:
    """Dependency - Require student role and a registered student profile."""
    if actor["role"] != "student":
        raise HTTPException(status_code=403, detail="Students only")

    service.get_student(actor["actor_id"])
    actor["student_id"] = actor["actor_id"]
    return actor


async def get_current_rep(
    actor: dict = Depends(get_current_actor),
    service: PlacementService = Depends(get_placement_service),
) -> dict:
    """Dependency - Require company role and a registered rep."""
    if actor["role"] != "company":
        raise HTTPException(status_code=403, detail="Company representatives only")

    rep = service.get_company_rep(actor["actor_id"])
    actor["rep_id"] = rep.rep_id
    actor["company_name"] = rep.company_name
    return actor


async def get_current_staff(
    actor: dict = Depends(get_current_actor),
    service: PlacementService = Depends(get_placement_service),
) -> dict:
    """Dependency - Require staff role and a registered staff member."""
    if actor["role"] != "staff":
        raise HTTPException(status_code=403, detail="Career Center staff only")

    service.get_staff(actor["actor_id"])
    actor["staff_id"] = actor["actor_id"]
    return actor
