"""Costing, revenue inversion and quotation roll-up."""

from .allocator import (
    AllocationContext,
    CostComponents,
    allocate_costs,
    monthly_allowances,
    monthly_company_overheads,
)
from .report import (
    CalculationResult,
    CostStats,
    DetailedBreakdownRow,
    LineCalculation,
    MatrixRow,
    calculate_quotation,
)
from .revenue import (
    RevenueFigures,
    billable_months,
    gross_up_for_guarantee,
    invert_revenue,
    target_revenue,
)

__all__ = [
    "AllocationContext",
    "CalculationResult",
    "CostComponents",
    "CostStats",
    "DetailedBreakdownRow",
    "LineCalculation",
    "MatrixRow",
    "RevenueFigures",
    "allocate_costs",
    "billable_months",
    "calculate_quotation",
    "gross_up_for_guarantee",
    "invert_revenue",
    "monthly_allowances",
    "monthly_company_overheads",
    "target_revenue",
]
