"""Salary API Routes - Breakup files and payment"""
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from pydantic import BaseModel, Field

from ..deps import get_salary_service, get_event_router
from ..responses import ok
from ...domain.models import SalaryRules
from ...events.router import EventRouter
from ...services.salary_service import SalaryService

router = APIRouter()


class CreateBreakupRequest(BaseModel):
    """Request to compute a breakup file; salary_rules overrides the role's"""
    employee_id: str = Field(..., min_length=1)
    role_id: str = Field(..., min_length=1)
    month: str = Field(..., min_length=1, max_length=20)
    year: int = Field(..., ge=1900, le=9999)
    salary_rules: Optional[SalaryRules] = None


@router.post("/breakups", status_code=status.HTTP_201_CREATED)
async def create_breakup(
    request: CreateBreakupRequest,
    background_tasks: BackgroundTasks,
    service: SalaryService = Depends(get_salary_service),
    events: EventRouter = Depends(get_event_router)
):
    """Compute and store a breakup file for one pay period"""
    breakup = service.create_breakup_file(
        employee_id=request.employee_id,
        role_id=request.role_id,
        month=request.month,
        year=request.year,
        salary_rules=request.salary_rules
    )
    background_tasks.add_task(events.drain)
    return ok(breakup, message="Breakup file created successfully")


@router.get("/breakups")
async def list_breakups(
    month: Optional[str] = Query(None),
    year: Optional[int] = Query(None),
    paid: Optional[bool] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: SalaryService = Depends(get_salary_service)
):
    """List breakup files"""
    breakups = service.list_breakups(month=month, year=year, paid=paid, skip=skip, limit=limit)
    return ok(breakups, count=len(breakups))


@router.get("/breakups/{breakup_id}")
async def get_breakup(breakup_id: str, service: SalaryService = Depends(get_salary_service)):
    """Get one breakup file"""
    return ok(service.get_breakup(breakup_id))


@router.post("/breakups/{breakup_id}/pay")
async def pay_breakup(
    breakup_id: str,
    background_tasks: BackgroundTasks,
    service: SalaryService = Depends(get_salary_service),
    events: EventRouter = Depends(get_event_router)
):
    """Mark a breakup file as paid"""
    breakup = service.mark_paid(breakup_id)
    background_tasks.add_task(events.drain)
    return ok(breakup, message="Salary marked as paid")


@router.get("/employees/{employee_id}/latest")
async def get_latest_breakup(employee_id: str, service: SalaryService = Depends(get_salary_service)):
    """Most recent breakup file of an employee"""
    return ok(service.get_latest_breakup(employee_id))


@router.get("/employees/{employee_id}/history")
async def get_salary_history(employee_id: str, service: SalaryService = Depends(get_salary_service)):
    """Salary history of an employee, newest first"""
    history = service.get_salary_history(employee_id)
    return ok(history, count=len(history))
