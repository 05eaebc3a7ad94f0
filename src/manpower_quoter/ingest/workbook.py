"""Heuristic extraction of positions, clients and parameters from workbooks.

Workbooks arrive as a mapping of sheet name to a 2-D grid (a list of rows) or
a pandas ``DataFrame``. Nothing here raises for dirty data: unreadable numbers
become zero and sheets without a recognisable layout contribute nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Sequence

import pandas as pd

from manpower_quoter.config import (
    get_logger,
    header_scan_rows,
    load_default_params,
    position_sheet_aliases,
)
from manpower_quoter.domain_models.params import ParameterSet
from manpower_quoter.domain_models.positions import (
    Client,
    Position,
    PositionCatalog,
    SelectedPosition,
    new_id,
)
from manpower_quoter.domain_models.values import cell_text, is_blank, safe_float

logger = get_logger("ingest")

Grid = Sequence[Sequence[Any]]
Sheet = Grid | pd.DataFrame
Workbook = Mapping[str, Sheet]

CLIENTS_SHEET = "Clients"
PARAMETERS_SHEET = "Parameters"
UNKNOWN_CLIENT = "Unknown Client"

NAME_HEADER_TOKENS = ("position", "title")
SALARY_HEADER_TOKENS = ("basic", "salary", "rate")
TOOL_HEADER_TOKENS = ("tools", "ppe")
QTY_HEADER_TOKENS = ("qty", "quantity")


def sheet_grid(sheet: Sheet | None) -> list[list[Any]]:
    """Return ``sheet`` as a list of rows with blank cells normalised to ``None``.

    A ``DataFrame`` read with a header row keeps that header as the first grid
    row. One read with ``header=None`` has the positional labels ``0..n-1`` on
    its columns, whatever the index type, and those are not emitted.
    """

    if sheet is None:
        return []
    if isinstance(sheet, pd.DataFrame):
        rows: list[list[Any]] = []
        if list(sheet.columns) != list(range(sheet.shape[1])):
            rows.append([None if is_blank(col) else col for col in sheet.columns])
        for values in sheet.itertuples(index=False, name=None):
            rows.append([None if _missing(value) else value for value in values])
        return rows
    return [[None if _missing(value) else value for value in row] for row in sheet]


def _missing(value: Any) -> bool:
    if isinstance(value, str):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _cell(row: Sequence[Any], index: int | None) -> Any:
    if index is None or index >= len(row):
        return None
    return row[index]


def _first_match(cells: Sequence[str], tokens: Iterable[str]) -> int | None:
    tokens = tuple(tokens)
    for index, text in enumerate(cells):
        if any(token in text for token in tokens):
            return index
    return None


# ---------------------------------------------------------------------------
# Position tables
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HeaderSchema:
    """Column layout of a position table; ``None`` marks a missing column."""

    row_index: int
    name_col: int
    salary_col: int | None = None
    tool_col: int | None = None
    qty_col: int | None = None

    @property
    def is_usable(self) -> bool:
        return self.salary_col is not None


def find_header_schema(grid: Grid, scan_rows: int | None = None) -> HeaderSchema | None:
    """Locate the header row of a position table.

    The first row, among at most ``scan_rows``, holding a cell that mentions
    "position" or "title" is the header; ``None`` when no row does.
    """

    limit = header_scan_rows() if scan_rows is None else scan_rows
    for row_index, row in enumerate(grid[:limit]):
        cells = [cell_text(value).lower() for value in row]
        name_col = _first_match(cells, NAME_HEADER_TOKENS)
        if name_col is None:
            continue
        return HeaderSchema(
            row_index=row_index,
            name_col=name_col,
            salary_col=_first_match(cells, SALARY_HEADER_TOKENS),
            tool_col=_first_match(cells, TOOL_HEADER_TOKENS),
            qty_col=_first_match(cells, QTY_HEADER_TOKENS),
        )
    return None


@dataclass(frozen=True)
class PreSelection:
    """Headcount requested for a catalogue position by a pre-filled sheet."""

    position_id: str
    qty: int


@dataclass(frozen=True)
class PositionRow:
    name: str
    base_salary: float
    specific_tool_cost: float | None
    qty: float


def iter_position_rows(grid: Grid, schema: HeaderSchema) -> Iterable[PositionRow]:
    """Yield table rows below the header until the first blank name cell."""

    for row in grid[schema.row_index + 1 :]:
        name = cell_text(_cell(row, schema.name_col))
        if not name:
            break
        tool_cost = (
            safe_float(_cell(row, schema.tool_col)) if schema.tool_col is not None else None
        )
        yield PositionRow(
            name=name,
            base_salary=safe_float(_cell(row, schema.salary_col)),
            specific_tool_cost=tool_cost or None,
            qty=safe_float(_cell(row, schema.qty_col)) if schema.qty_col is not None else 0.0,
        )


def read_positions(
    workbook: Workbook,
    sheet_names: Sequence[str] | None = None,
    *,
    scan_rows: int | None = None,
) -> tuple[PositionCatalog, tuple[PreSelection, ...]]:
    """Collect positions from every candidate sheet, first name occurrence wins."""

    names = position_sheet_aliases() if sheet_names is None else tuple(sheet_names)
    positions: dict[str, Position] = {}
    selections: list[PreSelection] = []

    for sheet_name in names:
        if sheet_name not in workbook:
            continue
        grid = sheet_grid(workbook[sheet_name])
        schema = find_header_schema(grid, scan_rows)
        if schema is None:
            logger.debug("No position header found in sheet %r", sheet_name)
            continue
        if not schema.is_usable:
            logger.debug("Sheet %r has a position header but no salary column", sheet_name)
            continue
        logger.debug("Reading positions from %r using %s", sheet_name, schema)

        for row in iter_position_rows(grid, schema):
            existing = positions.get(row.name)
            if existing is None:
                existing = Position(
                    id=new_id(),
                    name=row.name,
                    base_salary=row.base_salary,
                    specific_tool_cost=row.specific_tool_cost,
                )
                positions[row.name] = existing
            if row.qty > 0:
                selections.append(
                    PreSelection(position_id=existing.id, qty=max(1, int(round(row.qty))))
                )

    catalog = PositionCatalog(positions.values()).sorted_by_name()
    return catalog, tuple(selections)


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


def _records(grid: Grid) -> list[dict[str, Any]]:
    """Turn a header-first grid into dicts, skipping fully blank rows."""

    if not grid:
        return []
    header = [cell_text(value) for value in grid[0]]
    records: list[dict[str, Any]] = []
    for row in grid[1:]:
        if all(is_blank(value) for value in row):
            continue
        records.append(
            {key: _cell(row, index) for index, key in enumerate(header) if key}
        )
    return records


def read_clients(grid: Grid) -> tuple[Client, ...]:
    return tuple(
        Client(
            id=index,
            name=cell_text(record.get("Client Name")) or UNKNOWN_CLIENT,
            address=cell_text(record.get("Address")),
            attn=cell_text(record.get("Attention")),
        )
        for index, record in enumerate(_records(grid))
    )


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


def _has(*needles: str) -> Callable[[str], bool]:
    return lambda key: any(needle in key for needle in needles)


def _has_but_not(needle: str, excluded: str) -> Callable[[str], bool]:
    return lambda key: needle in key and excluded not in key


@dataclass(frozen=True)
class ParameterRule:
    """Map parameter rows whose lower-cased name satisfies ``predicate``.

    The row value always lands in ``value_field``. With ``enable_only`` the row's
    Enabled flag can switch ``flag_field`` on but never off.
    """

    name: str
    predicate: Callable[[str], bool]
    value_field: str
    flag_field: str | None = None
    enable_only: bool = False

    def matches(self, key: str) -> bool:
        return self.predicate(key)

    def apply(self, overrides: dict[str, Any], value: float, enabled: bool) -> None:
        overrides[self.value_field] = value
        if self.flag_field is None:
            return
        if not self.enable_only:
            overrides[self.flag_field] = enabled
        elif enabled:
            overrides[self.flag_field] = True


# Every matching rule applies, in this order.
PARAMETER_RULES: tuple[ParameterRule, ...] = (
    ParameterRule("leave", _has_but_not("leave", "sick"), "leave_days", "enable_leave"),
    ParameterRule("sick", _has("sick"), "sick_days", "enable_sick"),
    ParameterRule("holiday", _has("holiday"), "holiday_days", "enable_holiday"),
    ParameterRule("eosb", _has("eosb"), "eosb_days", "enable_eosb"),
    ParameterRule("margin", _has("margin"), "margin"),
    ParameterRule("working_days", _has("working days"), "working_days"),
    ParameterRule("duration", _has("duration"), "duration"),
    ParameterRule("insurance", _has("insurance rate"), "insurance_rate", "enable_insurance"),
    ParameterRule(
        "hra",
        lambda key: "hra" in key or ("accom" in key and "company" not in key),
        "val_hra",
        "enable_hra",
    ),
    ParameterRule("food", _has("food"), "val_food", "enable_food"),
    ParameterRule("transport", _has_but_not("transport", "fees"), "val_trans", "enable_trans"),
    ParameterRule("others", _has("others"), "val_others", "enable_others"),
    ParameterRule("mobilisation", _has("mob", "demob"), "val_mob", "enable_mob"),
    ParameterRule(
        "company_accommodation",
        _has("company_accommodation"),
        "co_accommodation",
        "enable_company_overheads",
        enable_only=True,
    ),
    ParameterRule("transport_fees", _has("transport_fees"), "co_transport"),
    ParameterRule("fuel", _has("fuel"), "co_fuel"),
    ParameterRule("medical", _has("medical"), "co_medical"),
    ParameterRule("air_ticket", _has("air_ticket"), "co_air_ticket"),
    ParameterRule("visa", _has("visa"), "co_visa"),
    ParameterRule("ppe", _has("ppe"), "co_ppe"),
    ParameterRule("gate_pass", _has("gate_pass"), "co_gate_pass"),
    ParameterRule("bank_guarantee", _has("bank_guarantee"), "bank_guarantee_rate"),
    ParameterRule("coordination", _has("coordination"), "coordination_rate"),
    ParameterRule(
        "subcon_manpower",
        _has("third-party", "subcon_manpower"),
        "subcon_manpower",
        "enable_sub_con",
        enable_only=True,
    ),
    ParameterRule("subcon_equip", _has("equipment", "subcon_equip"), "subcon_equip"),
)


def matching_rules(
    parameter: str, rules: Sequence[ParameterRule] = PARAMETER_RULES
) -> list[ParameterRule]:
    key = parameter.strip().lower()
    return [rule for rule in rules if rule.matches(key)]


def apply_parameter_rules(
    overrides: dict[str, Any],
    parameter: str,
    value: float,
    enabled: bool,
    rules: Sequence[ParameterRule] = PARAMETER_RULES,
) -> list[str]:
    """Apply every rule matching ``parameter``; returns the names applied."""

    applied = matching_rules(parameter, rules)
    for rule in applied:
        rule.apply(overrides, value, enabled)
    return [rule.name for rule in applied]


def _enabled(value: Any) -> bool:
    if value is True:
        return True
    return cell_text(value).lower() == "true"


def read_parameters(grid: Grid) -> dict[str, Any]:
    """Return ``ParameterSet`` overrides from a Parameter/Value/Enabled sheet."""

    overrides: dict[str, Any] = {}
    for record in _records(grid):
        parameter = cell_text(record.get("Parameter"))
        if not parameter:
            continue
        applied = apply_parameter_rules(
            overrides,
            parameter,
            safe_float(record.get("Value")),
            _enabled(record.get("Enabled")),
        )
        if not applied:
            logger.debug("Ignoring unrecognised parameter %r", parameter)
    return overrides


# ---------------------------------------------------------------------------
# Whole workbook
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IngestResult:
    positions: PositionCatalog = field(default_factory=PositionCatalog)
    clients: tuple[Client, ...] = ()
    params: dict[str, Any] = field(default_factory=dict)
    initial_selections: tuple[PreSelection, ...] = ()

    def parameter_set(self, base: ParameterSet | None = None) -> ParameterSet:
        """Apply the ingested overrides on top of ``base`` (defaults when omitted)."""

        if base is None:
            base = load_default_params()
        return base.with_overrides(self.params)

    def selections(self) -> list[SelectedPosition]:
        return materialize_selections(self.initial_selections, self.positions)


def ingest_workbook(workbook: Workbook, *, scan_rows: int | None = None) -> IngestResult:
    """Extract positions, clients and parameter overrides from ``workbook``."""

    positions, selections = read_positions(workbook, scan_rows=scan_rows)

    clients: tuple[Client, ...] = ()
    if CLIENTS_SHEET in workbook:
        clients = read_clients(sheet_grid(workbook[CLIENTS_SHEET]))

    params: dict[str, Any] = {}
    if PARAMETERS_SHEET in workbook:
        params = read_parameters(sheet_grid(workbook[PARAMETERS_SHEET]))

    logger.info(
        "Ingested %d positions, %d clients, %d parameter overrides, %d pre-selections",
        len(positions),
        len(clients),
        len(params),
        len(selections),
    )
    return IngestResult(
        positions=positions,
        clients=clients,
        params=params,
        initial_selections=selections,
    )


def materialize_selections(
    initial_selections: Iterable[PreSelection], positions: PositionCatalog
) -> list[SelectedPosition]:
    """Resolve pre-selections against the catalogue, dropping unknown ids."""

    resolved: list[SelectedPosition] = []
    for pending in initial_selections:
        position = positions.get(pending.position_id)
        if position is None:
            logger.debug("Dropping pre-selection for unknown position %s", pending.position_id)
            continue
        resolved.append(SelectedPosition.from_position(position, pending.qty))
    return resolved


__all__ = [
    "CLIENTS_SHEET",
    "HeaderSchema",
    "IngestResult",
    "PARAMETERS_SHEET",
    "PARAMETER_RULES",
    "ParameterRule",
    "PositionRow",
    "PreSelection",
    "UNKNOWN_CLIENT",
    "apply_parameter_rules",
    "find_header_schema",
    "ingest_workbook",
    "iter_position_rows",
    "materialize_selections",
    "matching_rules",
    "read_clients",
    "read_parameters",
    "read_positions",
    "sheet_grid",
]
