from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.database import get_db
from intranet.schemas import PostCreate, PostResponse, WallCreate, WallResponse
from intranet.services import post_service

router = APIRouter(prefix="/api/v1/walls", tags=["walls"])


@router.post("", status_code=201, response_model=WallResponse)
async def create_wall(data: WallCreate, db: AsyncSession = Depends(get_db)):
    return await post_service.create_wall(db, data)


@router.get("/{wall_id}/posts", response_model=list[PostResponse])
async def list_posts(wall_id: int, db: AsyncSession = Depends(get_db)):
    return await post_service.get_posts(db, wall_id)


@router.post("/{wall_id}/posts", status_code=201, response_model=PostResponse)
async def create_post(wall_id: int, data: PostCreate, db: AsyncSession = Depends(get_db)):
    post = await post_service.create_post(db, wall_id, data)
    if not post:
        raise HTTPException(status_code=404, detail="Wall not found")
    return post
