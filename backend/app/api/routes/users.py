"""Users — list, register and delete users with their profile images.

Invariants:
    - POST accepts multipart form fields name, age and file field image
    - Missing form fields reach the service as None so it reports which one failed
    - The upload is read at most asset_max_bytes + 1 bytes into memory
    - Routes contain no business logic (delegate to services)
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from app.api.dependencies import (
    get_app_settings, get_query_service, get_registration_service,
)
from app.config import Settings
from app.core.domain_types import ImageUpload, UserId
from app.schemas.user import MessageResponse, UserResponse
from app.services.registration import RegistrationService
from app.services.user_query import UserQueryService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    service: UserQueryService = Depends(get_query_service),
):
    """All users, newest first."""
    return await service.list_users()


@router.post(
    "", response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    name: str | None = Form(None),
    age: str | None = Form(None),
    image: UploadFile | None = File(None),
    service: RegistrationService = Depends(get_registration_service),
    settings: Settings = Depends(get_app_settings),
):
    """Register a user with a profile image."""
    upload = None
    if image is not None:
        try:
            # One byte past the limit is enough to detect oversize uploads
            content = await image.read(settings.asset_max_bytes + 1)
        finally:
            await image.close()
        upload = ImageUpload(
            content=content,
            filename=image.filename or "",
            content_type=image.content_type or "",
        )
    return await service.create_user(name, age, upload)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    service: RegistrationService = Depends(get_registration_service),
):
    """Delete a user and their profile image."""
    await service.delete_user(UserId(user_id))
    return MessageResponse(message="User deleted successfully")
