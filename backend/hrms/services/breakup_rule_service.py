"""Breakup Rule Service - Transaction split rules with nested splits and mirrors"""
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from ..domain.models import BreakupRule, Split, Mirror
from ..domain.enums import IncrementType
from ..domain.errors import ValidationError, BreakupRuleNotFoundError
from ..repositories.breakup_rule_repo import BreakupRuleRepository
from ..utils.idgen import generate_breakup_rule_id, generate_split_id, generate_mirror_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


# Identity and children are managed here, never overwritten by callers
PROTECTED_SPLIT_FIELDS = {"split_id", "mirrors"}
PROTECTED_MIRROR_FIELDS = {"mirror_id"}
PROTECTED_RULE_FIELDS = {"rule_id", "splits", "created_at", "updated_at"}


def _invalid(e: PydanticValidationError) -> ValidationError:
    return ValidationError(
        "Invalid breakup rule data",
        details={"errors": e.errors(include_url=False, include_context=False)}
    )


def _new_split(data: Dict[str, Any]) -> Split:
    fields = {k: v for k, v in data.items() if k not in PROTECTED_SPLIT_FIELDS}
    mirrors = [_new_mirror(m) for m in data.get("mirrors") or []]
    try:
        return Split(split_id=generate_split_id(), mirrors=mirrors, **fields)
    except PydanticValidationError as e:
        raise _invalid(e)


def _new_mirror(data: Dict[str, Any]) -> Mirror:
    fields = {k: v for k, v in data.items() if k not in PROTECTED_MIRROR_FIELDS}
    try:
        return Mirror(mirror_id=generate_mirror_id(), **fields)
    except PydanticValidationError as e:
        raise _invalid(e)


def _merge(model, updates: Dict[str, Any], protected: set):
    data = model.model_dump()
    data.update({k: v for k, v in updates.items() if k not in protected})
    try:
        return type(model).model_validate(data)
    except PydanticValidationError as e:
        raise _invalid(e)


class BreakupRuleService:
    """Service for breakup rule CRUD"""

    def __init__(self, repo: Optional[BreakupRuleRepository] = None):
        self.repo = repo or BreakupRuleRepository()

    # =========================================================================
    # Rules
    # =========================================================================

    def list_rules(self) -> List[BreakupRule]:
        return self.repo.list_rules()

    def get_rule(self, rule_id: str) -> BreakupRule:
        """Get rule or raise"""
        rule = self.repo.get_rule(rule_id)
        if rule is None:
            raise BreakupRuleNotFoundError(f"Breakup rule {rule_id} not found")
        return rule

    def create_rule(
        self,
        transaction_type: str,
        increment_type: IncrementType = IncrementType.BOTH,
        splits: Optional[List[Dict[str, Any]]] = None
    ) -> BreakupRule:
        """Create a rule with its initial splits"""
        transaction_type = (transaction_type or "").strip()
        if not transaction_type:
            raise ValidationError("transaction_type is required")

        now = utc_now()
        rule = BreakupRule(
            rule_id=generate_breakup_rule_id(),
            transaction_type=transaction_type,
            increment_type=increment_type,
            splits=[_new_split(s) for s in splits or []],
            created_at=now,
            updated_at=now
        )
        return self.repo.create_rule(rule)

    def update_rule(self, rule_id: str, updates: Dict[str, Any]) -> BreakupRule:
        """Update top-level rule fields"""
        rule = _merge(self.get_rule(rule_id), updates, PROTECTED_RULE_FIELDS)
        return self._save(rule)

    def delete_rule(self, rule_id: str) -> None:
        if not self.repo.delete_rule(rule_id):
            raise BreakupRuleNotFoundError(f"Breakup rule {rule_id} not found")
        logger.info("Deleted breakup rule", extra={"rule_id": rule_id})

    # =========================================================================
    # Splits
    # =========================================================================

    def add_split(self, rule_id: str, data: Dict[str, Any]) -> BreakupRule:
        """Append a split; mirrors start empty unless given"""
        rule = self.get_rule(rule_id)
        rule.splits.append(_new_split(data))
        return self._save(rule)

    def update_split(self, rule_id: str, split_id: str, updates: Dict[str, Any]) -> BreakupRule:
        rule = self.get_rule(rule_id)
        index, split = self._find_split(rule, split_id)
        rule.splits[index] = _merge(split, updates, PROTECTED_SPLIT_FIELDS)
        return self._save(rule)

    def delete_split(self, rule_id: str, split_id: str) -> BreakupRule:
        rule = self.get_rule(rule_id)
        index, _ = self._find_split(rule, split_id)
        del rule.splits[index]
        return self._save(rule)

    # =========================================================================
    # Mirrors
    # =========================================================================

    def add_mirror(self, rule_id: str, split_id: str, data: Dict[str, Any]) -> BreakupRule:
        rule = self.get_rule(rule_id)
        _, split = self._find_split(rule, split_id)
        split.mirrors.append(_new_mirror(data))
        return self._save(rule)

    def update_mirror(
        self,
        rule_id: str,
        split_id: str,
        mirror_id: str,
        updates: Dict[str, Any]
    ) -> BreakupRule:
        rule = self.get_rule(rule_id)
        _, split = self._find_split(rule, split_id)
        index, mirror = self._find_mirror(split, mirror_id)
        split.mirrors[index] = _merge(mirror, updates, PROTECTED_MIRROR_FIELDS)
        return self._save(rule)

    def delete_mirror(self, rule_id: str, split_id: str, mirror_id: str) -> BreakupRule:
        rule = self.get_rule(rule_id)
        _, split = self._find_split(rule, split_id)
        index, _ = self._find_mirror(split, mirror_id)
        del split.mirrors[index]
        return self._save(rule)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _find_split(self, rule: BreakupRule, split_id: str) -> Tuple[int, Split]:
        for index, split in enumerate(rule.splits):
            if split.split_id == split_id:
                return index, split
        raise BreakupRuleNotFoundError(
            "Split not found",
            details={"rule_id": rule.rule_id, "split_id": split_id}
        )

    def _find_mirror(self, split: Split, mirror_id: str) -> Tuple[int, Mirror]:
        for index, mirror in enumerate(split.mirrors):
            if mirror.mirror_id == mirror_id:
                return index, mirror
        raise BreakupRuleNotFoundError(
            "Mirror not found",
            details={"split_id": split.split_id, "mirror_id": mirror_id}
        )

    def _save(self, rule: BreakupRule) -> BreakupRule:
        rule.updated_at = utc_now()
        return self.repo.save_rule(rule)
