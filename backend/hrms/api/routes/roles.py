"""Role API Routes - Role catalogue and role salary rules"""
from typing import Optional
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from ..deps import get_role_service, get_salary_service
from ..responses import ok
from ...domain.enums import DepartmentCode
from ...domain.models import SalaryRules
from ...services.role_service import RoleService
from ...services.salary_service import SalaryService

router = APIRouter()


# ============================================================================
# Request Models
# ============================================================================

class CreateRoleRequest(BaseModel):
    """Request to declare a role"""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    department_code: Optional[DepartmentCode] = None
    salary_rules: Optional[SalaryRules] = None


# ============================================================================
# Endpoints
# ============================================================================

@router.get("")
async def list_roles(service: RoleService = Depends(get_role_service)):
    """List all roles"""
    roles = service.list_roles()
    return ok(roles, count=len(roles))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_role(
    request: CreateRoleRequest,
    service: RoleService = Depends(get_role_service)
):
    """Declare a role, optionally with salary rules"""
    role = service.create_role(
        name=request.name,
        department_code=request.department_code,
        description=request.description,
        salary_rules=request.salary_rules
    )
    return ok(role, message="Role created successfully")


@router.delete("/{role_id}")
async def delete_role(role_id: str, service: RoleService = Depends(get_role_service)):
    """Delete a role nobody currently holds"""
    service.delete_role(role_id)
    return ok(message="Role deleted successfully")


@router.get("/{role_id}/salary-rules")
async def get_salary_rules(role_id: str, service: SalaryService = Depends(get_salary_service)):
    """Salary rules of a role (by ID or name)"""
    role = service.get_role_salary_rules(role_id)
    return ok({"role_id": role.role_id, "name": role.name, "salary_rules": role.salary_rules})


@router.put("/{role_id}/salary-rules")
async def update_salary_rules(
    role_id: str,
    salary_rules: SalaryRules,
    service: SalaryService = Depends(get_salary_service)
):
    """Replace the salary rules of a role"""
    role = service.update_role_salary_rules(role_id, salary_rules)
    return ok(role, message="Salary rules updated")
