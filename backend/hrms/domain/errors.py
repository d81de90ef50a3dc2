"""Domain Errors - Centralized Exception Hierarchy"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error - all errors extend this"""

    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to API response envelope"""
        return {
            "success": False,
            "message": self.message,
            "error": {
                "code": self.error_code,
                "details": self.details
            }
        }


# Validation Errors
class ValidationError(DomainError):
    """Input validation failed"""
    error_code = "VALIDATION_ERROR"
    http_status = 400


class AlreadyExistsError(ValidationError):
    """Unique key already taken"""
    error_code = "ALREADY_EXISTS"


class DuplicateBreakupError(AlreadyExistsError):
    """A breakup file already exists for the employee and period"""
    error_code = "DUPLICATE_BREAKUP"


class SalaryAlreadyPaidError(DuplicateBreakupError):
    """Salary for the period has been paid"""
    error_code = "SALARY_ALREADY_PAID"


class SalaryAlreadyProcessingError(DuplicateBreakupError):
    """Salary for the period is processed but not yet paid"""
    error_code = "SALARY_ALREADY_PROCESSING"


class OrgUnitHasChildrenError(ValidationError):
    """Org unit cannot be removed while it still has children"""
    error_code = "ORG_UNIT_HAS_CHILDREN"


# Not Found Errors
class NotFoundError(DomainError):
    """Resource not found"""
    error_code = "NOT_FOUND"
    http_status = 404


class EmployeeNotFoundError(NotFoundError):
    """Employee not found"""
    error_code = "EMPLOYEE_NOT_FOUND"


class RoleNotFoundError(NotFoundError):
    """Role not found"""
    error_code = "ROLE_NOT_FOUND"


class RoleAssignmentNotFoundError(NotFoundError):
    """Role assignment not found"""
    error_code = "ROLE_ASSIGNMENT_NOT_FOUND"


class OrgUnitNotFoundError(NotFoundError):
    """Org unit not found"""
    error_code = "ORG_UNIT_NOT_FOUND"


class BreakupFileNotFoundError(NotFoundError):
    """Salary breakup file not found"""
    error_code = "BREAKUP_FILE_NOT_FOUND"


class BreakupRuleNotFoundError(NotFoundError):
    """Breakup rule, split or mirror not found"""
    error_code = "BREAKUP_RULE_NOT_FOUND"


class SellerNotFoundError(NotFoundError):
    """Seller not found"""
    error_code = "SELLER_NOT_FOUND"


class NotificationNotFoundError(NotFoundError):
    """Notification or notification rule not found"""
    error_code = "NOTIFICATION_NOT_FOUND"


# Integrity Errors
class CycleDetectedError(DomainError):
    """Org unit parent pointers form a cycle"""
    error_code = "CYCLE_DETECTED"
    http_status = 500


# External Service Errors
class ExternalServiceError(DomainError):
    """External service failure"""
    error_code = "EXTERNAL_SERVICE_ERROR"
    http_status = 500


class BusinessApiError(ExternalServiceError):
    """Business API call failed"""
    error_code = "BUSINESS_API_ERROR"


# Rate Limiting
class RateLimitError(DomainError):
    """Rate limit exceeded"""
    error_code = "RATE_LIMIT_EXCEEDED"
    http_status = 429
