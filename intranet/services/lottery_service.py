"""Lottery service — lottery creation and listing for an organization."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from intranet import error_codes
from intranet.clock import SystemClock, as_utc
from intranet.config import settings
from intranet.enums import LotteryStatus
from intranet.exceptions import LotteryError
from intranet.models import Lottery
from intranet.schemas import LotteryCreate, UserAndOrganization

# Only these statuses are valid for a lottery that is being created.
_CREATABLE_STATUSES = frozenset({LotteryStatus.DRAFTED, LotteryStatus.STARTED})


def _lottery_to_dict(lottery: Lottery) -> dict:
    return {
        "id": lottery.id,
        "organization_id": lottery.organization_id,
        "title": lottery.title,
        "description": lottery.description,
        "end_date": lottery.end_date.isoformat(),
        "entry_fee": lottery.entry_fee,
        "status": lottery.status,
    }


def _validate_new_lottery(data: LotteryCreate, clock: SystemClock) -> None:
    if not data.title.strip():
        raise LotteryError(error_codes.LOTTERY_TITLE_REQUIRED, "Lottery title is required")
    if data.description and len(data.description) > settings.MAX_POST_MESSAGE_BODY_LENGTH:
        raise LotteryError(
            error_codes.LOTTERY_DESCRIPTION_TOO_LONG,
            f"Description exceeds {settings.MAX_POST_MESSAGE_BODY_LENGTH} characters",
        )
    if as_utc(data.end_date) < as_utc(clock.utc_now()):
        raise LotteryError(error_codes.LOTTERY_END_DATE_IN_PAST, "Lottery can't end in the past")
    if data.entry_fee < 1:
        raise LotteryError(error_codes.LOTTERY_INVALID_ENTRY_FEE, "Invalid entry fee")
    if data.status not in _CREATABLE_STATUSES:
        raise LotteryError(error_codes.LOTTERY_INVALID_STATUS, "Invalid status of created lottery")


async def create_lottery(
    db: AsyncSession,
    data: LotteryCreate,
    user_org: UserAndOrganization,
    clock: SystemClock,
) -> dict:
    _validate_new_lottery(data, clock)

    lottery = Lottery(
        organization_id=user_org.organization_id,
        title=data.title.strip(),
        description=data.description,
        end_date=data.end_date,
        entry_fee=data.entry_fee,
        status=data.status.value,
    )
    db.add(lottery)
    await db.flush()
    return _lottery_to_dict(lottery)


async def get_lotteries(db: AsyncSession, user_org: UserAndOrganization) -> list[dict]:
    """Return the organization's lotteries except deleted ones, latest end date first."""
    q = (
        select(Lottery)
        .where(Lottery.organization_id == user_org.organization_id)
        .where(Lottery.status != LotteryStatus.DELETED.value)
        .order_by(Lottery.end_date.desc(), Lottery.id.desc())
    )
    result = await db.execute(q)
    return [_lottery_to_dict(lot) for lot in result.scalars().all()]
