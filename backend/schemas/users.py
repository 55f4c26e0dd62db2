# Pydantic schemas for user-related requests/responses
# fastapi-users provides the base schemas; the organization scope is read-only.

from typing import Optional
from uuid import UUID

from fastapi_users import schemas


class UserRead(schemas.BaseUser[UUID]):
    full_name: Optional[str] = None
    organization_id: Optional[UUID] = None


class UserCreate(schemas.BaseUserCreate):
    full_name: Optional[str] = None


class UserUpdate(schemas.BaseUserUpdate):
    full_name: Optional[str] = None
