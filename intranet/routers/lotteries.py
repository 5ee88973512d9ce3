from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.clock import SystemClock
from intranet.database import get_db
from intranet.dependencies import get_clock, get_user_and_organization
from intranet.schemas import LotteryCreate, LotteryResponse, UserAndOrganization
from intranet.services import lottery_service

router = APIRouter(prefix="/api/v1/lotteries", tags=["lotteries"])


@router.get("", response_model=list[LotteryResponse])
async def list_lotteries(
    user_org: UserAndOrganization = Depends(get_user_and_organization),
    db: AsyncSession = Depends(get_db),
):
    return await lottery_service.get_lotteries(db, user_org)


@router.post("", status_code=201, response_model=LotteryResponse)
async def create_lottery(
    data: LotteryCreate,
    user_org: UserAndOrganization = Depends(get_user_and_organization),
    clock: SystemClock = Depends(get_clock),
    db: AsyncSession = Depends(get_db),
):
    return await lottery_service.create_lottery(db, data, user_org, clock)
