"""Salary Calculator - Compute a salary breakup from a role's rule set"""
import math
from typing import List, Tuple

from ..domain.models import SalaryRules, SalaryComponent, BreakdownItem, CalculatedBreakup
from ..domain.enums import ComponentType, BreakdownCategory


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity"""
    return int(math.floor(value + 0.5))


def component_value(base_salary: float, component: SalaryComponent) -> float:
    """
    Contribution of a single component.

    Percentage components are rounded individually; fixed components pass
    through unchanged.
    """
    if component.type == ComponentType.PERCENTAGE:
        return round_half_up(base_salary * component.value / 100)
    return component.value


def _describe(base_salary: float, component: SalaryComponent) -> str:
    if component.type == ComponentType.PERCENTAGE:
        return f"{component.value:g}% of {base_salary:g}"
    return "Fixed amount"


def _price_components(
    base_salary: float,
    components: List[SalaryComponent],
    category: BreakdownCategory,
    exclude_from_totals: bool = False
) -> Tuple[List[BreakdownItem], float]:
    items = []
    total = 0
    for component in components:
        value = component_value(base_salary, component)
        total += value
        items.append(BreakdownItem(
            name=component.name,
            category=category,
            value=value,
            calculation=_describe(base_salary, component),
            exclude_from_totals=exclude_from_totals
        ))
    return items, total


def calculate_breakup(salary_rules: SalaryRules) -> CalculatedBreakup:
    """
    Build the breakdown for a salary rule set.

    Order: base salary, allowances, deductions, terminal benefits, net.
    Terminal benefits are disclosed but excluded from totals, so
    net = base + allowances - deductions.
    """
    base = salary_rules.base_salary

    breakdown = [BreakdownItem(
        name="Base Salary",
        category=BreakdownCategory.BASE,
        value=base,
        calculation=f"{salary_rules.salary_type} base"
    )]

    allowance_items, total_allowances = _price_components(
        base, salary_rules.allowances, BreakdownCategory.ALLOWANCE
    )
    deduction_items, total_deductions = _price_components(
        base, salary_rules.deductions, BreakdownCategory.DEDUCTION
    )
    terminal_items, _ = _price_components(
        base, salary_rules.terminal_benefits, BreakdownCategory.TERMINAL, exclude_from_totals=True
    )
    breakdown.extend(allowance_items)
    breakdown.extend(deduction_items)
    breakdown.extend(terminal_items)

    net_salary = base + total_allowances - total_deductions
    breakdown.append(BreakdownItem(
        name="Net Salary",
        category=BreakdownCategory.NET,
        value=net_salary,
        calculation="base + allowances - deductions"
    ))

    return CalculatedBreakup(
        breakdown=breakdown,
        total_allowances=total_allowances,
        total_deductions=total_deductions,
        net_salary=net_salary
    )
