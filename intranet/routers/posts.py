from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.database import get_db
from intranet.mailing import EmailService, get_email_service
from intranet.schemas import CommentCreate, CommentResponse
from intranet.services import comment_notification_service, comment_service, post_service

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(post_id: int, db: AsyncSession = Depends(get_db)):
    return await comment_service.get_comments(db, post_id)


@router.post("/{post_id}/comments", status_code=201, response_model=CommentResponse)
async def add_comment(
    post_id: int,
    data: CommentCreate,
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    created = await comment_service.create_comment(db, post_id, data)
    if not created:
        raise HTTPException(status_code=404, detail="Post not found")

    await comment_notification_service.send_email_notification(db, created, email_service)
    return await comment_service.get_comment(db, created.comment_id)


@router.put("/{post_id}/watchers/{user_id}", status_code=204)
async def watch_post(post_id: int, user_id: int, db: AsyncSession = Depends(get_db)):
    if not await post_service.watch_post(db, post_id, user_id):
        raise HTTPException(status_code=404, detail="Post not found")


@router.delete("/{post_id}/watchers/{user_id}", status_code=204)
async def unwatch_post(post_id: int, user_id: int, db: AsyncSession = Depends(get_db)):
    if not await post_service.unwatch_post(db, post_id, user_id):
        raise HTTPException(status_code=404, detail="Not watching this post")
