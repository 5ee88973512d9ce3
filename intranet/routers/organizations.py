from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.database import get_db
from intranet.schemas import OfficeCreate, OfficeResponse, OrganizationCreate, OrganizationResponse
from intranet.services import organization_service

router = APIRouter(prefix="/api/v1/organizations", tags=["organizations"])


@router.post("", status_code=201, response_model=OrganizationResponse)
async def create_organization(data: OrganizationCreate, db: AsyncSession = Depends(get_db)):
    try:
        return await organization_service.create_organization(db, data)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="An organization with this short name already exists")


@router.get("/{organization_id}", response_model=OrganizationResponse)
async def get_organization(organization_id: int, db: AsyncSession = Depends(get_db)):
    organization = await organization_service.get_organization_by_id(db, organization_id)
    if not organization:
        raise HTTPException(status_code=404, detail="Organization not found")
    return organization


@router.get("/{organization_id}/offices", response_model=list[OfficeResponse])
async def list_offices(organization_id: int, db: AsyncSession = Depends(get_db)):
    return await organization_service.get_offices(db, organization_id)


@router.post("/{organization_id}/offices", status_code=201, response_model=OfficeResponse)
async def create_office(organization_id: int, data: OfficeCreate, db: AsyncSession = Depends(get_db)):
    office = await organization_service.create_office(db, organization_id, data)
    if not office:
        raise HTTPException(status_code=404, detail="Organization not found")
    return office
