"""Breakup Rule API Routes - Transaction split rules"""
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from ..deps import get_breakup_rule_service
from ..responses import ok
from ...domain.enums import IncrementType, SplitType, DebitOrCredit
from ...services.breakup_rule_service import BreakupRuleService

router = APIRouter()


# ============================================================================
# Request Models
# ============================================================================

class MirrorRequest(BaseModel):
    field_line_id: Optional[int] = None
    summary_id: Optional[int] = None
    debit_or_credit: Optional[DebitOrCredit] = None


class SplitRequest(BaseModel):
    component_name: str = Field(..., min_length=1)
    type: Optional[SplitType] = None
    field_line_id: Optional[int] = None
    summary_id: Optional[int] = None
    debit_or_credit: DebitOrCredit
    percentage: float = 0
    fixed_amount: float = 0
    mirrors: List[MirrorRequest] = Field(default_factory=list)


class SplitUpdateRequest(BaseModel):
    """Partial split update; omitted fields are left alone"""
    component_name: Optional[str] = Field(None, min_length=1)
    type: Optional[SplitType] = None
    field_line_id: Optional[int] = None
    summary_id: Optional[int] = None
    debit_or_credit: Optional[DebitOrCredit] = None
    percentage: Optional[float] = None
    fixed_amount: Optional[float] = None


class CreateBreakupRuleRequest(BaseModel):
    transaction_type: str = Field(..., min_length=1)
    increment_type: IncrementType = IncrementType.BOTH
    splits: List[SplitRequest] = Field(default_factory=list)


class UpdateBreakupRuleRequest(BaseModel):
    transaction_type: Optional[str] = Field(None, min_length=1)
    increment_type: Optional[IncrementType] = None


# ============================================================================
# Rules
# ============================================================================

@router.get("")
async def list_breakup_rules(service: BreakupRuleService = Depends(get_breakup_rule_service)):
    """List breakup rules"""
    rules = service.list_rules()
    return ok(rules, count=len(rules))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_breakup_rule(
    request: CreateBreakupRuleRequest,
    service: BreakupRuleService = Depends(get_breakup_rule_service)
):
    """Create a breakup rule with its splits"""
    rule = service.create_rule(
        transaction_type=request.transaction_type,
        increment_type=request.increment_type,
        splits=[s.model_dump() for s in request.splits]
    )
    return ok(rule, message="Breakup rule created successfully")


@router.get("/{rule_id}")
async def get_breakup_rule(rule_id: str, service: BreakupRuleService = Depends(get_breakup_rule_service)):
    return ok(service.get_rule(rule_id))


@router.put("/{rule_id}")
async def update_breakup_rule(
    rule_id: str,
    request: UpdateBreakupRuleRequest,
    service: BreakupRuleService = Depends(get_breakup_rule_service)
):
    rule = service.update_rule(rule_id, request.model_dump(exclude_unset=True))
    return ok(rule, message="Breakup rule updated successfully")


@router.delete("/{rule_id}")
async def delete_breakup_rule(rule_id: str, service: BreakupRuleService = Depends(get_breakup_rule_service)):
    service.delete_rule(rule_id)
    return ok(message="Breakup rule deleted successfully")


# ============================================================================
# Splits
# ============================================================================

@router.post("/{rule_id}/splits", status_code=status.HTTP_201_CREATED)
async def add_split(
    rule_id: str,
    request: SplitRequest,
    service: BreakupRuleService = Depends(get_breakup_rule_service)
):
    return ok(service.add_split(rule_id, request.model_dump()), message="Split added successfully")


@router.put("/{rule_id}/splits/{split_id}")
async def update_split(
    rule_id: str,
    split_id: str,
    request: SplitUpdateRequest,
    service: BreakupRuleService = Depends(get_breakup_rule_service)
):
    rule = service.update_split(rule_id, split_id, request.model_dump(exclude_unset=True))
    return ok(rule, message="Split updated successfully")


@router.delete("/{rule_id}/splits/{split_id}")
async def delete_split(
    rule_id: str,
    split_id: str,
    service: BreakupRuleService = Depends(get_breakup_rule_service)
):
    return ok(service.delete_split(rule_id, split_id), message="Split deleted successfully")


# ============================================================================
# Mirrors
# ============================================================================

@router.post("/{rule_id}/splits/{split_id}/mirrors", status_code=status.HTTP_201_CREATED)
async def add_mirror(
    rule_id: str,
    split_id: str,
    request: MirrorRequest,
    service: BreakupRuleService = Depends(get_breakup_rule_service)
):
    rule = service.add_mirror(rule_id, split_id, request.model_dump())
    return ok(rule, message="Mirror added successfully")


@router.put("/{rule_id}/splits/{split_id}/mirrors/{mirror_id}")
async def update_mirror(
    rule_id: str,
    split_id: str,
    mirror_id: str,
    request: MirrorRequest,
    service: BreakupRuleService = Depends(get_breakup_rule_service)
):
    rule = service.update_mirror(rule_id, split_id, mirror_id, request.model_dump(exclude_unset=True))
    return ok(rule, message="Mirror updated successfully")


@router.delete("/{rule_id}/splits/{split_id}/mirrors/{mirror_id}")
async def delete_mirror(
    rule_id: str,
    split_id: str,
    mirror_id: str,
    service: BreakupRuleService = Depends(get_breakup_rule_service)
):
    rule = service.delete_mirror(rule_id, split_id, mirror_id)
    return ok(rule, message="Mirror deleted successfully")
