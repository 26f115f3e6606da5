from fastapi import APIRouter, Depends, Query
import uuid

from docshare.api.deps import get_identity_service, get_requester
from docshare.domains.identity.entities import Identity
from docshare.domains.identity.schemas import IdentityResponse, UserSearchResponse
from docshare.domains.identity.services import IdentityService

router = APIRouter(prefix="/users", tags=["users"])


def _to_response(user: Identity) -> IdentityResponse:
    return IdentityResponse(id=user.id, name=user.display_name, email=user.email)


@router.get("/search", response_model=UserSearchResponse)
async def search_users(
    q: str = Query("", max_length=100),
    requester_id: uuid.UUID = Depends(get_requester),
    service: IdentityService = Depends(get_identity_service)
):
    """Поиск пользователей по имени или email"""
    users = await service.search_users(q, requester_id=requester_id)
    return UserSearchResponse(users=[_to_response(user) for user in users])


@router.get("/profile/{user_id}", response_model=IdentityResponse)
async def get_user_profile(
    user_id: uuid.UUID,
    requester_id: uuid.UUID = Depends(get_requester),
    service: IdentityService = Depends(get_identity_service)
):
    """Профиль пользователя"""
    user = await service.get_user_profile(user_id)
    return _to_response(user)
