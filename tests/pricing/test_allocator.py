from __future__ import annotations

import math

import pytest

from manpower_quoter.domain_models import ParameterSet
from manpower_quoter.pricing.allocator import (
    AllocationContext,
    allocate_costs,
    monthly_allowances,
    monthly_company_overheads,
)


def test_daily_rate_and_cost_per_person_for_plain_salary(bare_params, make_selection) -> None:
    selection = make_selection(salary=5000)
    context = AllocationContext.for_selection(bare_params, [selection])

    costs = allocate_costs(bare_params, selection, context)

    assert costs.daily_rate == pytest.approx(166.6667, rel=1e-4)
    assert costs.monthly_benefits == 0
    assert costs.cost_per_person == pytest.approx(60000.0)


def test_benefits_accrue_from_daily_rate(make_selection) -> None:
    params = ParameterSet(working_days=30, leave_days=30, sick_days=12, holiday_days=6, eosb_days=24)
    selection = make_selection(salary=3000)

    costs = allocate_costs(params, selection, AllocationContext(total_headcount=1))

    assert costs.daily_rate == pytest.approx(100.0)
    assert costs.leave_cost == pytest.approx(250.0)
    assert costs.sick_cost == pytest.approx(100.0)
    assert costs.holiday_cost == pytest.approx(50.0)
    assert costs.eosb_cost == pytest.approx(200.0)
    assert costs.insurance_cost == pytest.approx(45.0)
    assert costs.monthly_benefits == pytest.approx(645.0)


def test_zero_working_days_fall_back_to_thirty(make_selection) -> None:
    params = ParameterSet(working_days=0)

    costs = allocate_costs(params, make_selection(salary=3000), AllocationContext())

    assert costs.daily_rate == pytest.approx(100.0)


def test_coordination_base_is_salary_allowances_and_leave_only(make_selection) -> None:
    params = ParameterSet(
        working_days=30,
        leave_days=30,
        enable_hra=True,
        val_hra=500,
        coordination_rate=5,
        sick_days=60,
        co_accommodation=999,
    )
    costs = allocate_costs(params, make_selection(salary=3000), AllocationContext(1))

    # (3000 + 500 + 250) * 5%
    assert costs.coordination_cost == pytest.approx(187.5)


def test_company_overheads_spread_air_ticket_over_year() -> None:
    params = ParameterSet(co_accommodation=100, co_visa=50, co_air_ticket=1200)
    assert monthly_company_overheads(params) == pytest.approx(250.0)

    disabled = params.with_overrides({"enable_company_overheads": False})
    assert monthly_company_overheads(disabled) == 0.0


def test_allowances_only_count_enabled_items() -> None:
    params = ParameterSet(
        enable_hra=True,
        val_hra=400,
        enable_food=False,
        val_food=300,
        enable_trans=True,
        val_trans=150,
        val_others=75,
    )
    assert monthly_allowances(params) == pytest.approx(550.0)
    assert params.allowances_enabled


def test_sub_con_pool_is_split_across_total_headcount(make_selection) -> None:
    params = ParameterSet(subcon_manpower=1000, subcon_equip=500)
    selections = [make_selection("A", qty=2), make_selection("B", qty=1)]

    context = AllocationContext.for_selection(params, selections)

    assert context.total_headcount == 3
    for selection in selections:
        costs = allocate_costs(params, selection, context)
        assert costs.sub_con_alloc_per_person == pytest.approx(500.0)


def test_sub_con_pool_ignored_when_disabled(make_selection) -> None:
    params = ParameterSet(enable_sub_con=False, subcon_manpower=1000)
    context = AllocationContext.for_selection(params, [make_selection()])
    assert context.sub_con_per_person == 0.0


def test_zero_headcount_never_divides() -> None:
    context = AllocationContext(total_headcount=0, sub_con_monthly_pool=1500)
    assert context.sub_con_per_person == 0.0


def test_one_offs_are_not_multiplied_by_duration(bare_params, make_selection) -> None:
    params = bare_params.with_overrides({"enable_mob": True, "val_mob": 2500})
    selection = make_selection(salary=1000, qty=3, tool_cost=300)

    costs = allocate_costs(params, selection, AllocationContext.for_selection(params, [selection]))

    assert costs.total_one_off_per_person == pytest.approx(2800.0)
    assert costs.line_tool_cost_total == pytest.approx(900.0)
    assert math.isclose(costs.cost_per_person, 1000 * 12 + 2800)


def test_duration_totals_scale_monthly_figures(make_selection) -> None:
    params = ParameterSet(duration=10, enable_hra=True, val_hra=200, co_ppe=30)
    costs = allocate_costs(params, make_selection(salary=2000), AllocationContext(1))

    assert costs.base_total == pytest.approx(20000.0)
    assert costs.allowances_total == pytest.approx(2000.0)
    assert costs.company_overheads_total == pytest.approx(300.0)
    assert costs.benefits_total == pytest.approx(costs.monthly_benefits * 10)
    assert costs.coordination_total == pytest.approx(costs.coordination_cost * 10)
