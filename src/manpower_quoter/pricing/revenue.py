"""Revenue inversion: margin mark-up and bank-guarantee gross-up."""

from __future__ import annotations

from dataclasses import dataclass

from manpower_quoter.domain_models.params import ParameterSet


def billable_months(params: ParameterSet) -> float:
    """Months over which contract revenue is rate-distributed.

    Leave days reduce the billable span whether or not the leave benefit is
    costed. Never below one month.
    """

    yearly_leave_ratio = params.leave_days / params.effective_working_days
    non_billable = (params.duration / 12.0) * yearly_leave_ratio
    return max(1.0, params.duration - non_billable)


def target_revenue(cost: float, margin: float) -> float:
    """Revenue that leaves ``margin`` percent after ``cost``; zero at 100% or more."""

    margin_decimal = margin / 100.0
    if margin_decimal >= 1.0:
        return 0.0
    return cost / (1.0 - margin_decimal)


def gross_up_for_guarantee(revenue: float, bank_guarantee_rate: float) -> float:
    bg_decimal = bank_guarantee_rate / 100.0
    if bg_decimal >= 1.0:
        return 0.0
    return revenue / (1.0 - bg_decimal)


@dataclass(frozen=True)
class RevenueFigures:
    """Revenue side of one quotation line (per-person unless prefixed ``line_``)."""

    cost: float
    qty: int
    billable_months: float
    target_revenue: float
    final_revenue: float

    @property
    def bg_cost(self) -> float:
        """Implicit cost of the guarantee gross-up."""

        return self.final_revenue - self.target_revenue

    @property
    def cost_with_bg(self) -> float:
        return self.cost + self.bg_cost

    @property
    def unit_billable_monthly(self) -> float:
        return self.final_revenue / self.billable_months

    @property
    def unit_cost_monthly(self) -> float:
        return self.cost_with_bg / self.billable_months

    @property
    def line_total_billable(self) -> float:
        return self.final_revenue * self.qty

    @property
    def line_total_cost_with_bg(self) -> float:
        return self.cost_with_bg * self.qty

    @property
    def line_profit(self) -> float:
        return self.line_total_billable - self.line_total_cost_with_bg


def invert_revenue(
    cost: float,
    params: ParameterSet,
    qty: int = 1,
    *,
    months: float | None = None,
) -> RevenueFigures:
    """Convert a per-person contract cost into billable revenue.

    ``months`` lets a caller reuse a billable-month figure already computed for
    the same parameter snapshot.
    """

    target = target_revenue(cost, params.margin)
    final = gross_up_for_guarantee(target, params.bank_guarantee_rate)
    return RevenueFigures(
        cost=cost,
        qty=qty,
        billable_months=billable_months(params) if months is None else months,
        target_revenue=target,
        final_revenue=final,
    )


__all__ = [
    "RevenueFigures",
    "billable_months",
    "gross_up_for_guarantee",
    "invert_revenue",
    "target_revenue",
]
