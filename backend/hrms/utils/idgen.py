"""ID Generation Utilities"""
import uuid
from typing import Optional

from .time import utc_now


def generate_id(prefix: Optional[str] = None) -> str:
    """
    Generate a unique ID with optional prefix
    
    Args:
        prefix: Optional prefix for the ID (e.g., 'EMP', 'ROLE', 'NTF')
        
    Returns:
        Unique ID string
        
    Examples:
        >>> generate_id('EMP')
        'EMP-a1b2c3d4e5f6'
        >>> generate_id()
        'a1b2c3d4e5f6'
    """
    unique_part = uuid.uuid4().hex[:12]
    
    if prefix:
        return f"{prefix}-{unique_part}"
    return unique_part


def generate_employee_id() -> str:
    """Generate employee ID"""
    return generate_id("EMP")


def generate_role_id() -> str:
    """Generate role ID"""
    return generate_id("ROLE")


def generate_role_assignment_id() -> str:
    """Generate role assignment ID"""
    return generate_id("RA")


def generate_notification_rule_id() -> str:
    """Generate notification rule ID"""
    return generate_id("NR")


def generate_notification_id() -> str:
    """Generate notification ID"""
    return generate_id("NTF")


def generate_breakup_id() -> str:
    """Generate salary breakup file ID"""
    return generate_id("SAL")


def generate_org_unit_id() -> str:
    """Generate org unit ID"""
    return generate_id("OU")


def generate_seller_id() -> str:
    """Generate local seller ID"""
    return generate_id("SEL")


def generate_breakup_rule_id() -> str:
    """Generate breakup rule ID"""
    return generate_id("BR")


def generate_split_id() -> str:
    """Generate breakup rule split ID"""
    return generate_id("SPL")


def generate_mirror_id() -> str:
    """Generate split mirror ID"""
    return generate_id("MIR")


def generate_correlation_id() -> str:
    """
    Generate a correlation ID for request tracing
    
    Returns:
        Correlation ID string with timestamp prefix
    """
    timestamp = utc_now().strftime("%Y%m%d%H%M%S")
    unique_part = uuid.uuid4().hex[:8]
    return f"COR-{timestamp}-{unique_part}"
