from __future__ import annotations

from typing import Callable, Iterator

import pytest

from manpower_quoter import config
from manpower_quoter.domain_models import ParameterSet, Position, SelectedPosition, new_id


@pytest.fixture(autouse=True)
def _fresh_settings_cache(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv(config.APP_SETTINGS_ENV_VAR, raising=False)
    monkeypatch.delenv(config.DEBUG_ENV_VAR, raising=False)
    monkeypatch.setattr(config, "_APP_SETTINGS_CACHE", None)
    yield


@pytest.fixture
def bare_params() -> ParameterSet:
    """Parameters with every benefit, allowance and overhead switched off."""

    return ParameterSet(
        duration=12,
        margin=20,
        working_days=30,
        enable_leave=False,
        enable_sick=False,
        enable_holiday=False,
        enable_eosb=False,
        enable_insurance=False,
        enable_mob=False,
        enable_company_overheads=False,
        coordination_rate=0,
        bank_guarantee_rate=0,
        enable_sub_con=False,
    )


@pytest.fixture
def make_selection() -> Callable[..., SelectedPosition]:
    def _make(
        name: str = "Technician",
        salary: float = 5000.0,
        qty: int = 1,
        tool_cost: float | None = None,
    ) -> SelectedPosition:
        position = Position(
            id=new_id(),
            name=name,
            base_salary=salary,
            specific_tool_cost=tool_cost,
        )
        return SelectedPosition.from_position(position, qty)

    return _make
