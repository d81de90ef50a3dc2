"""Org Unit API Routes - Organizational hierarchy"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from ..deps import get_org_unit_service
from ..responses import ok
from ...domain.enums import DepartmentCode
from ...services.org_unit_service import OrgUnitService

router = APIRouter()


class CreateOrgUnitRequest(BaseModel):
    """Request to create an org unit; level and status are derived"""
    name: str = Field(..., min_length=1, max_length=200)
    department_code: DepartmentCode
    parent_id: Optional[str] = None
    description: str = Field("", max_length=2000)


@router.get("")
async def get_org_tree(
    department_code: Optional[DepartmentCode] = Query(None),
    service: OrgUnitService = Depends(get_org_unit_service)
):
    """Whole hierarchy as a nested tree"""
    tree = service.get_tree(department_code.value if department_code else None)
    return ok(tree, root_count=len(tree))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_org_unit(
    request: CreateOrgUnitRequest,
    service: OrgUnitService = Depends(get_org_unit_service)
):
    """Create an org unit"""
    unit = service.create_org_unit(
        name=request.name,
        department_code=request.department_code,
        parent_id=request.parent_id,
        description=request.description
    )
    return ok(unit, message="Organization unit created successfully")


@router.get("/{org_unit_id}")
async def get_org_unit(org_unit_id: str, service: OrgUnitService = Depends(get_org_unit_service)):
    """Get one org unit"""
    return ok(service.get_org_unit(org_unit_id))


@router.delete("/{org_unit_id}")
async def delete_org_unit(org_unit_id: str, service: OrgUnitService = Depends(get_org_unit_service)):
    """Delete a leaf org unit"""
    service.delete_org_unit(org_unit_id)
    return ok(message="Organization unit deleted successfully")


@router.get("/{org_unit_id}/employees")
async def get_org_unit_employees(
    org_unit_id: str,
    service: OrgUnitService = Depends(get_org_unit_service)
):
    """Employees placed in the unit or anywhere below it"""
    employees = service.get_employees(org_unit_id)
    return ok(employees, count=len(employees), org_unit_id=org_unit_id)
