"""Commercial parameter snapshot consumed by the costing engine."""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

from .values import to_flag, to_float

DEFAULT_WORKING_DAYS = 30.0

# Keys used by exported project files and the browser front end.
LEGACY_KEYS: dict[str, str] = {
    "workingDays": "working_days",
    "leaveDays": "leave_days",
    "sickDays": "sick_days",
    "holidayDays": "holiday_days",
    "eosbDays": "eosb_days",
    "enableLeave": "enable_leave",
    "enableSick": "enable_sick",
    "enableHoliday": "enable_holiday",
    "enableEOSB": "enable_eosb",
    "enableInsurance": "enable_insurance",
    "insuranceRate": "insurance_rate",
    "enableHRA": "enable_hra",
    "valHRA": "val_hra",
    "enableFood": "enable_food",
    "valFood": "val_food",
    "enableTrans": "enable_trans",
    "valTrans": "val_trans",
    "enableOthers": "enable_others",
    "valOthers": "val_others",
    "enableMob": "enable_mob",
    "valMob": "val_mob",
    "enableCompanyOverheads": "enable_company_overheads",
    "co_airTicket": "co_air_ticket",
    "co_gatePass": "co_gate_pass",
    "coordinationRate": "coordination_rate",
    "bankGuaranteeRate": "bank_guarantee_rate",
    "enableSubCon": "enable_sub_con",
}


@dataclass(frozen=True)
class ParameterSet:
    """Snapshot of the global commercial assumptions for one quotation.

    Monetary values are per person per month unless noted; rates are percents.
    """

    duration: float = 24.0
    margin: float = 15.0
    working_days: float = DEFAULT_WORKING_DAYS

    leave_days: float = 30.0
    sick_days: float = 14.0
    holiday_days: float = 10.0
    eosb_days: float = 21.0
    enable_leave: bool = True
    enable_sick: bool = True
    enable_holiday: bool = True
    enable_eosb: bool = True

    insurance_rate: float = 1.5
    enable_insurance: bool = True

    enable_hra: bool = False
    val_hra: float = 0.0
    enable_food: bool = False
    val_food: float = 0.0
    enable_trans: bool = False
    val_trans: float = 0.0
    enable_others: bool = False
    val_others: float = 0.0

    # one-off, per person
    enable_mob: bool = True
    val_mob: float = 2500.0

    enable_company_overheads: bool = True
    co_accommodation: float = 0.0
    co_transport: float = 0.0
    co_fuel: float = 0.0
    co_medical: float = 0.0
    co_air_ticket: float = 0.0  # annual
    co_visa: float = 0.0
    co_ppe: float = 0.0
    co_gate_pass: float = 0.0

    coordination_rate: float = 5.0
    bank_guarantee_rate: float = 1.0

    # shared monthly pools split across the whole headcount
    enable_sub_con: bool = True
    subcon_manpower: float = 0.0
    subcon_equip: float = 0.0

    @property
    def effective_working_days(self) -> float:
        """Working days per month, falling back to 30 when unset or invalid."""

        return self.working_days if self.working_days > 0 else DEFAULT_WORKING_DAYS

    @property
    def allowances_enabled(self) -> bool:
        return self.enable_hra or self.enable_food or self.enable_trans or self.enable_others

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(item.name for item in fields(cls))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ParameterSet":
        """Build a snapshot from loosely typed data, defaulting bad values."""

        return cls().with_overrides(data or {})

    def with_overrides(self, overrides: Mapping[str, Any]) -> "ParameterSet":
        """Return a copy with ``overrides`` applied; unknown keys are ignored."""

        known = {item.name for item in fields(self)}
        changes: dict[str, Any] = {}
        for raw_key, value in overrides.items():
            key = LEGACY_KEYS.get(str(raw_key), str(raw_key))
            if key not in known:
                continue
            current = getattr(self, key)
            if isinstance(current, bool):
                changes[key] = to_flag(value, default=current)
            else:
                numeric = to_float(value)
                changes[key] = current if numeric is None else numeric
        return replace(self, **changes) if changes else self

    def to_dict(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.field_names()}


__all__ = ["DEFAULT_WORKING_DAYS", "LEGACY_KEYS", "ParameterSet"]
