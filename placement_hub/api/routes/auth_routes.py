"""
Authentication Routes

Login happens in the external authenticator; this service only verifies
the bearer token it issued.

GET /auth/me - Get the verified actor behind the token
"""

from fastapi import APIRouter, Depends

from placement_hub.core.auth import get_current_actor
from placement_hub.schemas.schemas import ActorResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get("/me", response_model=ActorResponse)
async def get_me(actor: dict = Depends(get_current_actor)):
    """Get current authenticated actor's id and role."""
    return ActorResponse(actor_id=actor["actor_id"], role=actor["role"])
