"""
Organization service — organizations and their offices.

Organization lookups sit on the hot path of every notification e-mail
(links need the organization short name), so single-organization reads go
through the cache-aside pattern.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.cache import cache
from intranet.config import settings
from intranet.models import Office, Organization
from intranet.schemas import OfficeCreate, OrganizationCreate


def _organization_to_dict(organization: Organization) -> dict:
    return {
        "id": organization.id,
        "name": organization.name,
        "short_name": organization.short_name,
    }


def _office_to_dict(office: Office) -> dict:
    return {"id": office.id, "name": office.name, "organization_id": office.organization_id}


async def create_organization(db: AsyncSession, data: OrganizationCreate) -> dict:
    """Create an organization.  Duplicate short names raise IntegrityError."""
    organization = Organization(name=data.name, short_name=data.short_name)
    db.add(organization)
    await db.flush()
    return _organization_to_dict(organization)


async def get_organization_by_id(db: AsyncSession, organization_id: int) -> dict | None:
    async def load() -> dict | None:
        result = await db.execute(select(Organization).where(Organization.id == organization_id))
        organization = result.scalar_one_or_none()
        return _organization_to_dict(organization) if organization else None

    return await cache.get_or_load(
        cache.organization_key(organization_id), load, ttl=settings.CACHE_TTL_ORGANIZATION
    )


async def create_office(db: AsyncSession, organization_id: int, data: OfficeCreate) -> dict | None:
    """Add an office to the organization; None when it does not exist."""
    if await get_organization_by_id(db, organization_id) is None:
        return None
    office = Office(name=data.name, organization_id=organization_id)
    db.add(office)
    await db.flush()
    return _office_to_dict(office)


async def get_offices(db: AsyncSession, organization_id: int) -> list[dict]:
    q = select(Office).where(Office.organization_id == organization_id).order_by(Office.name)
    result = await db.execute(q)
    return [_office_to_dict(o) for o in result.scalars().all()]
