"""Per-position monthly cost allocation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from manpower_quoter.domain_models.params import ParameterSet
from manpower_quoter.domain_models.positions import SelectedPosition


@dataclass(frozen=True)
class AllocationContext:
    """Quotation-wide figures shared by every position being costed."""

    total_headcount: int = 0
    sub_con_monthly_pool: float = 0.0

    @classmethod
    def for_selection(
        cls, params: ParameterSet, selections: Iterable[SelectedPosition]
    ) -> "AllocationContext":
        headcount = sum(selection.qty for selection in selections)
        pool = params.subcon_manpower + params.subcon_equip if params.enable_sub_con else 0.0
        return cls(total_headcount=headcount, sub_con_monthly_pool=pool)

    @property
    def sub_con_per_person(self) -> float:
        if self.total_headcount <= 0:
            return 0.0
        return self.sub_con_monthly_pool / self.total_headcount


@dataclass(frozen=True)
class CostComponents:
    """Cost build-up for one person on one quotation line.

    Monthly figures unless the name says otherwise; ``*_total`` fields cover
    the full contract duration for a single person.
    """

    daily_rate: float
    base_salary: float
    monthly_allowances: float
    leave_cost: float
    sick_cost: float
    holiday_cost: float
    eosb_cost: float
    insurance_cost: float
    coordination_cost: float
    company_overheads: float
    sub_con_alloc_per_person: float

    tool_cost_unit: float
    mob_cost: float
    total_one_off_per_person: float
    line_tool_cost_total: float

    duration: float

    @property
    def monthly_benefits(self) -> float:
        return (
            self.leave_cost
            + self.sick_cost
            + self.holiday_cost
            + self.eosb_cost
            + self.insurance_cost
        )

    @property
    def monthly_cost(self) -> float:
        return (
            self.base_salary
            + self.monthly_allowances
            + self.monthly_benefits
            + self.coordination_cost
            + self.company_overheads
            + self.sub_con_alloc_per_person
        )

    @property
    def base_total(self) -> float:
        return self.base_salary * self.duration

    @property
    def allowances_total(self) -> float:
        return self.monthly_allowances * self.duration

    @property
    def benefits_total(self) -> float:
        return self.monthly_benefits * self.duration

    @property
    def coordination_total(self) -> float:
        return self.coordination_cost * self.duration

    @property
    def company_overheads_total(self) -> float:
        return self.company_overheads * self.duration

    @property
    def sub_con_alloc_total(self) -> float:
        return self.sub_con_alloc_per_person * self.duration

    @property
    def cost_per_person(self) -> float:
        """Operational cost of one person over the contract, before guarantee."""

        return (
            self.base_total
            + self.allowances_total
            + self.benefits_total
            + self.coordination_total
            + self.company_overheads_total
            + self.sub_con_alloc_total
            + self.total_one_off_per_person
        )


def monthly_company_overheads(params: ParameterSet) -> float:
    """Return the per-person monthly overhead; the air ticket is annual."""

    if not params.enable_company_overheads:
        return 0.0
    return (
        params.co_accommodation
        + params.co_transport
        + params.co_fuel
        + params.co_medical
        + params.co_visa
        + params.co_ppe
        + params.co_gate_pass
        + params.co_air_ticket / 12.0
    )


def monthly_allowances(params: ParameterSet) -> float:
    return (
        (params.val_hra if params.enable_hra else 0.0)
        + (params.val_food if params.enable_food else 0.0)
        + (params.val_trans if params.enable_trans else 0.0)
        + (params.val_others if params.enable_others else 0.0)
    )


def allocate_costs(
    params: ParameterSet,
    selection: SelectedPosition,
    context: AllocationContext,
) -> CostComponents:
    """Compute every cost component for one person on ``selection``."""

    base_salary = selection.base_salary
    daily_rate = base_salary / params.effective_working_days

    leave = daily_rate * (params.leave_days / 12.0) if params.enable_leave else 0.0
    sick = daily_rate * (params.sick_days / 12.0) if params.enable_sick else 0.0
    holiday = daily_rate * (params.holiday_days / 12.0) if params.enable_holiday else 0.0
    eosb = daily_rate * (params.eosb_days / 12.0) if params.enable_eosb else 0.0
    insurance = base_salary * (params.insurance_rate / 100.0) if params.enable_insurance else 0.0

    allowances = monthly_allowances(params)

    # Coordination is charged on salary, allowances and leave only.
    coordination = (base_salary + allowances + leave) * (params.coordination_rate / 100.0)

    tool_cost_unit = selection.specific_tool_cost or 0.0
    mob_cost = params.val_mob if params.enable_mob else 0.0

    return CostComponents(
        daily_rate=daily_rate,
        base_salary=base_salary,
        monthly_allowances=allowances,
        leave_cost=leave,
        sick_cost=sick,
        holiday_cost=holiday,
        eosb_cost=eosb,
        insurance_cost=insurance,
        coordination_cost=coordination,
        company_overheads=monthly_company_overheads(params),
        sub_con_alloc_per_person=context.sub_con_per_person,
        tool_cost_unit=tool_cost_unit,
        mob_cost=mob_cost,
        total_one_off_per_person=tool_cost_unit + mob_cost,
        line_tool_cost_total=tool_cost_unit * selection.qty,
        duration=params.duration,
    )


__all__ = [
    "AllocationContext",
    "CostComponents",
    "allocate_costs",
    "monthly_allowances",
    "monthly_company_overheads",
]
