"""Quotation roll-up: totals, category stats, matrix rows and breakdown."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Literal, Sequence

from manpower_quoter.config import get_logger
from manpower_quoter.domain_models.params import ParameterSet
from manpower_quoter.domain_models.positions import SelectedPosition

from .allocator import AllocationContext, CostComponents, allocate_costs
from .revenue import RevenueFigures, billable_months, invert_revenue

if TYPE_CHECKING:  # pragma: no cover - only used for type checking
    import pandas as pd

logger = get_logger("pricing")

RowKind = Literal["input", "text", "money", "percent"]
Cell = float | int | str


@dataclass
class CostStats:
    """Contract totals by cost category across all lines."""

    salary: float = 0.0
    allow: float = 0.0
    benefits: float = 0.0
    company_overheads: float = 0.0
    sub_con_alloc: float = 0.0
    coordination: float = 0.0
    financials: float = 0.0  # guarantee cost plus one-offs


@dataclass(frozen=True)
class MatrixRow:
    """One display line of the breakdown; ``values`` follow selection order."""

    id: str
    label: str
    kind: RowKind
    values: tuple[Cell, ...]
    total: Cell | None = None
    is_bold: bool = False
    is_highlight: bool = False


@dataclass(frozen=True)
class DetailedBreakdownRow:
    """Flat per-position record for export (duration totals, per person)."""

    position: str
    qty: int
    duration: float
    working_days: float
    base_salary: float
    allowances_total: float
    benefits_total: float
    company_overheads_total: float
    sub_con_alloc_total: float
    coordination_total: float
    one_off_total: float
    total_cost: float
    target_margin: float
    bg_rate: float
    unit_rate: float
    revenue: float
    profit: float


@dataclass(frozen=True)
class LineCalculation:
    selection: SelectedPosition
    costs: CostComponents
    revenue: RevenueFigures


@dataclass(frozen=True)
class CalculationResult:
    total_revenue: float
    total_cost: float
    gross_profit: float
    margin_percent: float
    stats: CostStats
    rows: tuple[MatrixRow, ...]
    detailed_breakdown: tuple[DetailedBreakdownRow, ...]
    lines: tuple[LineCalculation, ...] = field(default=(), repr=False)

    def row(self, row_id: str) -> MatrixRow | None:
        return next((row for row in self.rows if row.id == row_id), None)

    def row_ids(self) -> list[str]:
        return [row.id for row in self.rows]

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view (the per-line intermediates are omitted)."""

        return {
            "total_revenue": self.total_revenue,
            "total_cost": self.total_cost,
            "gross_profit": self.gross_profit,
            "margin_percent": self.margin_percent,
            "stats": asdict(self.stats),
            "rows": [
                {**asdict(row), "values": list(row.values)}
                for row in self.rows
            ],
            "detailed_breakdown": [asdict(record) for record in self.detailed_breakdown],
        }

    def breakdown_frame(self) -> "pd.DataFrame":
        """Return the detailed breakdown as a pandas ``DataFrame``."""

        import pandas as pd

        columns = list(DetailedBreakdownRow.__dataclass_fields__)
        return pd.DataFrame(
            [asdict(record) for record in self.detailed_breakdown],
            columns=columns,
        )


def _price_line(
    params: ParameterSet,
    selection: SelectedPosition,
    context: AllocationContext,
    months: float,
) -> LineCalculation:
    costs = allocate_costs(params, selection, context)
    revenue = invert_revenue(costs.cost_per_person, params, selection.qty, months=months)
    return LineCalculation(selection=selection, costs=costs, revenue=revenue)


def _breakdown_record(params: ParameterSet, line: LineCalculation) -> DetailedBreakdownRow:
    costs, revenue = line.costs, line.revenue
    return DetailedBreakdownRow(
        position=line.selection.name,
        qty=line.selection.qty,
        duration=params.duration,
        working_days=params.working_days,
        base_salary=costs.base_total,
        allowances_total=costs.allowances_total,
        benefits_total=costs.benefits_total,
        company_overheads_total=costs.company_overheads_total,
        sub_con_alloc_total=costs.sub_con_alloc_total,
        coordination_total=costs.coordination_total,
        one_off_total=costs.total_one_off_per_person,
        total_cost=revenue.cost_with_bg,
        target_margin=params.margin,
        bg_rate=params.bank_guarantee_rate,
        unit_rate=revenue.unit_billable_monthly,
        revenue=revenue.final_revenue,
        profit=revenue.line_profit,
    )


def _plain_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _build_rows(
    params: ParameterSet,
    lines: Sequence[LineCalculation],
    months: float,
    totals: tuple[float, float, float],
) -> list[MatrixRow]:
    total_revenue, total_cost, gross_profit = totals
    rows: list[MatrixRow] = []

    def add(
        row_id: str,
        label: str,
        kind: RowKind,
        value: Callable[[LineCalculation], Cell],
        total: Cell | None = None,
        *,
        is_bold: bool = False,
        is_highlight: bool = False,
    ) -> None:
        rows.append(
            MatrixRow(
                id=row_id,
                label=label,
                kind=kind,
                values=tuple(value(line) for line in lines),
                total=total,
                is_bold=is_bold,
                is_highlight=is_highlight,
            )
        )

    add(
        "qty",
        "Quantity",
        "input",
        lambda line: line.selection.qty,
        sum(line.selection.qty for line in lines),
        is_highlight=True,
    )
    add(
        "duration",
        f"Billable Mos. (of {_plain_number(params.duration)})",
        "text",
        lambda line: f"{months:.1f}",
    )
    add("base", "Base Salary", "money", lambda line: line.selection.base_salary)

    if params.allowances_enabled:
        add("allow", "Total Allowances", "money", lambda line: line.costs.monthly_allowances)

    add("benefits", "Statutory Benefits", "money", lambda line: line.costs.monthly_benefits)

    if params.coordination_rate > 0:
        add(
            "coord",
            f"Coordination ({_plain_number(params.coordination_rate)}%)",
            "money",
            lambda line: line.costs.coordination_cost,
        )

    if params.enable_company_overheads:
        add("compOver", "Company Overheads", "money", lambda line: line.costs.company_overheads)

    if params.enable_sub_con:
        add("subcon", "Sub-Con Alloc.", "money", lambda line: line.costs.sub_con_alloc_per_person)

    if any(line.selection.specific_tool_cost for line in lines):
        add(
            "tools",
            "Tool Cost (Total)",
            "money",
            lambda line: line.costs.line_tool_cost_total,
            sum(line.costs.line_tool_cost_total for line in lines),
        )

    add("mob", "Mobilization (One-Off)", "money", lambda line: line.costs.mob_cost)

    add(
        "unitBill",
        "UNIT MONTHLY RATE",
        "money",
        lambda line: line.revenue.unit_billable_monthly,
        is_bold=True,
        is_highlight=True,
    )
    add("unitCost", "UNIT MONTHLY COST", "money", lambda line: line.revenue.unit_cost_monthly)
    add(
        "lineTotal",
        "TOTAL CONTRACT VALUE",
        "money",
        lambda line: line.revenue.line_total_billable,
        total_revenue,
        is_bold=True,
        is_highlight=True,
    )
    add(
        "totalCost",
        "TOTAL CONTRACT COST",
        "money",
        lambda line: line.revenue.line_total_cost_with_bg,
        total_cost,
        is_bold=True,
    )
    add(
        "grossProfit",
        "GROSS PROFIT",
        "money",
        lambda line: line.revenue.line_profit,
        gross_profit,
        is_bold=True,
    )
    return rows


def calculate_quotation(
    params: ParameterSet, selections: Sequence[SelectedPosition]
) -> CalculationResult:
    """Cost, price and roll up every selected position for one quotation."""

    selections = list(selections)
    context = AllocationContext.for_selection(params, selections)
    months = billable_months(params)
    lines = [_price_line(params, selection, context, months) for selection in selections]

    stats = CostStats()
    total_revenue = 0.0
    total_cost = 0.0
    for line in lines:
        qty = line.selection.qty
        costs, revenue = line.costs, line.revenue

        total_revenue += revenue.line_total_billable
        total_cost += costs.cost_per_person * qty + revenue.bg_cost * qty

        stats.salary += costs.base_total * qty
        stats.allow += costs.allowances_total * qty
        stats.benefits += costs.benefits_total * qty
        stats.company_overheads += costs.company_overheads_total * qty
        stats.sub_con_alloc += costs.sub_con_alloc_total * qty
        stats.coordination += costs.coordination_total * qty
        stats.financials += revenue.bg_cost * qty + costs.total_one_off_per_person * qty

    gross_profit = total_revenue - total_cost
    margin_percent = gross_profit / total_revenue * 100.0 if total_revenue > 0 else 0.0

    rows = _build_rows(params, lines, months, (total_revenue, total_cost, gross_profit))
    breakdown = tuple(_breakdown_record(params, line) for line in lines)

    logger.debug(
        "Quoted %d lines (headcount %d): revenue=%.2f cost=%.2f margin=%.2f%%",
        len(lines),
        context.total_headcount,
        total_revenue,
        total_cost,
        margin_percent,
    )

    return CalculationResult(
        total_revenue=total_revenue,
        total_cost=total_cost,
        gross_profit=gross_profit,
        margin_percent=margin_percent,
        stats=stats,
        rows=tuple(rows),
        detailed_breakdown=breakdown,
        lines=tuple(lines),
    )


__all__ = [
    "CalculationResult",
    "CostStats",
    "DetailedBreakdownRow",
    "LineCalculation",
    "MatrixRow",
    "calculate_quotation",
]
