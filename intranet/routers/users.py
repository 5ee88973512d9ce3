from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.database import get_db
from intranet.schemas import NotificationSettingsUpdate, UserCreate, UserResponse
from intranet.services import user_service

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(organization_id: int | None = None, db: AsyncSession = Depends(get_db)):
    return await user_service.get_users(db, organization_id)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    user = await user_service.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("", status_code=201, response_model=UserResponse)
async def create_user(data: UserCreate, db: AsyncSession = Depends(get_db)):
    try:
        return await user_service.create_user(db, data)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="A user with this email already exists")


@router.patch("/{user_id}/notification-settings", response_model=UserResponse)
async def update_notification_settings(
    user_id: int, data: NotificationSettingsUpdate, db: AsyncSession = Depends(get_db)
):
    user = await user_service.update_notification_settings(db, user_id, data)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
