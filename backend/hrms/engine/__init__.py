"""Rules engine - recipient targeting, rendering, salary and hierarchy logic"""
from .recipient_resolver import RecipientResolver
from .template_renderer import TemplateRenderer, render
from .salary_calculator import calculate_breakup, component_value, round_half_up
from .org_tree import build_org_tree

__all__ = [
    "RecipientResolver",
    "TemplateRenderer",
    "render",
    "calculate_breakup",
    "component_value",
    "round_half_up",
    "build_org_tree",
]
