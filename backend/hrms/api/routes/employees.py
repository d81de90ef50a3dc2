"""Employee API Routes - Directory and role assignments"""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from pydantic import BaseModel, EmailStr, Field

from ..deps import get_employee_service, get_event_router
from ..responses import ok
from ...domain.enums import DepartmentCode
from ...events.router import EventRouter
from ...services.role_service import EmployeeService

router = APIRouter()


# ============================================================================
# Request Models
# ============================================================================

class CreateEmployeeRequest(BaseModel):
    """Request to add an employee to the directory"""
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    department_code: Optional[DepartmentCode] = None


class AssignRoleRequest(BaseModel):
    """Request to grant a role"""
    role_id: str = Field(..., min_length=1)
    department_code: DepartmentCode
    org_unit_id: Optional[str] = None
    effective_from: Optional[datetime] = None
    effective_until: Optional[datetime] = None
    assigned_by: Optional[str] = None
    notes: str = Field("", max_length=2000)


# ============================================================================
# Employees
# ============================================================================

@router.get("/employees")
async def list_employees(
    department_code: Optional[DepartmentCode] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: EmployeeService = Depends(get_employee_service)
):
    """List employees"""
    employees = service.list_employees(
        department_code.value if department_code else None, skip, limit
    )
    return ok(employees, count=len(employees))


@router.post("/employees", status_code=status.HTTP_201_CREATED)
async def create_employee(
    request: CreateEmployeeRequest,
    background_tasks: BackgroundTasks,
    service: EmployeeService = Depends(get_employee_service),
    events: EventRouter = Depends(get_event_router)
):
    """Add an employee"""
    employee = service.create_employee(
        name=request.name,
        email=request.email,
        department_code=request.department_code
    )
    background_tasks.add_task(events.drain)
    return ok(employee, message="Employee created successfully")


@router.get("/employees/{employee_id}")
async def get_employee(employee_id: str, service: EmployeeService = Depends(get_employee_service)):
    """Get one employee"""
    return ok(service.get_employee(employee_id))


# ============================================================================
# Role Assignments
# ============================================================================

@router.get("/employees/{employee_id}/role-assignments")
async def list_role_assignments(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service)
):
    """Assignment history of an employee, newest first"""
    assignments = service.list_assignments(employee_id)
    return ok(assignments, count=len(assignments))


@router.post("/employees/{employee_id}/role-assignments", status_code=status.HTTP_201_CREATED)
async def assign_role(
    employee_id: str,
    request: AssignRoleRequest,
    background_tasks: BackgroundTasks,
    service: EmployeeService = Depends(get_employee_service),
    events: EventRouter = Depends(get_event_router)
):
    """Grant a role to an employee"""
    assignment = service.assign_role(
        employee_id=employee_id,
        role_id=request.role_id,
        department_code=request.department_code,
        org_unit_id=request.org_unit_id,
        effective_from=request.effective_from,
        effective_until=request.effective_until,
        assigned_by=request.assigned_by,
        notes=request.notes
    )
    background_tasks.add_task(events.drain)
    return ok(assignment, message="Role assigned successfully")


@router.post("/role-assignments/{assignment_id}/end")
async def end_role_assignment(
    assignment_id: str,
    service: EmployeeService = Depends(get_employee_service)
):
    """End an assignment (kept for history)"""
    return ok(service.end_assignment(assignment_id), message="Role assignment ended")
