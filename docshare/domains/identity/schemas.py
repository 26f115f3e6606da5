from pydantic import BaseModel, ConfigDict
from typing import List
import uuid


class IdentityResponse(BaseModel):
    """Публичные данные пользователя"""
    id: uuid.UUID
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class UserSearchResponse(BaseModel):
    users: List[IdentityResponse]
