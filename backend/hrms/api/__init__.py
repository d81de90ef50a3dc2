"""API module - Routes, dependencies and middleware"""
from .deps import get_employee_id_dep, get_event_router

__all__ = ["get_employee_id_dep", "get_event_router"]
