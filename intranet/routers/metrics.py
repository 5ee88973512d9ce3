from fastapi import APIRouter, Depends
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.cache import cache
from intranet.database import get_db
from intranet.models import Comment, Event, Post, User
from intranet.schemas import MetricsResponse

router = APIRouter(prefix="/api/v1/metrics", tags=["metrics"])


@router.get("", response_model=MetricsResponse)
async def get_metrics(db: AsyncSession = Depends(get_db)):
    total_users = (await db.execute(select(func.count()).select_from(User))).scalar_one()
    total_posts = (await db.execute(select(func.count()).select_from(Post))).scalar_one()
    total_comments = (await db.execute(select(func.count()).select_from(Comment))).scalar_one()
    total_events = (await db.execute(select(func.count()).select_from(Event))).scalar_one()

    avg_comments = total_comments / total_posts if total_posts > 0 else 0

    return MetricsResponse(
        total_users=total_users,
        total_posts=total_posts,
        total_comments=total_comments,
        total_events=total_events,
        avg_comments_per_post=round(avg_comments, 2),
        cache_info=cache.stats,
    )
