"""Breakup Rule Repository - Transaction split rules with nested splits and mirrors"""
from typing import List, Optional
from pymongo.collection import Collection
from pymongo import ASCENDING

from .mongo_client import get_collection
from ..domain.models import BreakupRule
from ..utils.logger import get_logger

logger = get_logger(__name__)


class BreakupRuleRepository:
    """Repository for breakup rules; splits and mirrors are saved with their rule"""
    
    COLLECTION_NAME = "breakup_rules"
    
    def __init__(self):
        self._rules: Collection = get_collection(self.COLLECTION_NAME)
    
    def create_rule(self, rule: BreakupRule) -> BreakupRule:
        """Create a breakup rule"""
        doc = rule.model_dump()
        doc["_id"] = rule.rule_id
        self._rules.insert_one(doc)
        logger.info(f"Created breakup rule for {rule.transaction_type}", extra={"rule_id": rule.rule_id})
        return rule
    
    def get_rule(self, rule_id: str) -> Optional[BreakupRule]:
        """Get breakup rule by ID"""
        doc = self._rules.find_one({"rule_id": rule_id})
        if doc:
            doc.pop("_id", None)
            return BreakupRule.model_validate(doc)
        return None
    
    def list_rules(self) -> List[BreakupRule]:
        """All breakup rules"""
        rules = []
        for doc in self._rules.find().sort("transaction_type", ASCENDING):
            doc.pop("_id", None)
            rules.append(BreakupRule.model_validate(doc))
        return rules
    
    def save_rule(self, rule: BreakupRule) -> BreakupRule:
        """Overwrite a rule with its current splits and mirrors"""
        doc = rule.model_dump()
        doc["_id"] = rule.rule_id
        self._rules.replace_one({"rule_id": rule.rule_id}, doc)
        return rule
    
    def delete_rule(self, rule_id: str) -> bool:
        """Delete a breakup rule. Returns True if deleted."""
        result = self._rules.delete_one({"rule_id": rule_id})
        return result.deleted_count > 0
