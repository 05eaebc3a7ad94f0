"""Sheet grids for master-data files and quotation reports.

Every builder returns plain rows (lists of cells) keyed by sheet name so the
same data can be written with :func:`manpower_quoter.io.write_workbook` or fed
straight back into :func:`manpower_quoter.ingest.ingest_workbook`.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Iterable, Sequence

from manpower_quoter.config import load_template_params
from manpower_quoter.domain_models.params import ParameterSet
from manpower_quoter.domain_models.positions import Client, Position
from manpower_quoter.formatting import format_percent
from manpower_quoter.ingest.workbook import CLIENTS_SHEET, PARAMETERS_SHEET
from manpower_quoter.pricing.report import CalculationResult

Row = list[Any]
SheetGrids = dict[str, list[Row]]

POSITIONS_SHEET = "Reference Salary (A)"
PNL_SHEET = "Project P&L Statement"
MATRIX_SHEET = "Detailed Matrix"

POSITION_HEADER = ["Position Title", "Basic Salary", "Tools Cost", "Qty"]
CLIENT_HEADER = ["Client Name", "Address", "Attention"]
PARAMETER_HEADER = ["Parameter", "Value", "Enabled"]

PNL_TITLE = "PROJECT PROFIT & LOSS STATEMENT"

MATRIX_HEADER = [
    "Position Title",
    "Qty",
    "Duration",
    "Working Days",
    "Base Salary",
    "Allowances",
    "Benefits",
    "Co. Overheads",
    "SubCon Alloc",
    "Coordination",
    "One-Offs",
    "Total Cost",
    "Target Margin %",
    "Bank Guarantee %",
    "Unit Monthly Rate",
    "Total Revenue",
    "Net Profit",
]


def parameter_rows(params: ParameterSet) -> list[Row]:
    """Parameter/Value/Enabled rows keyed so the ingestor maps each one back."""

    overheads = params.enable_company_overheads
    sub_con = params.enable_sub_con
    return [
        ["Duration", params.duration, True],
        ["Working Days", params.working_days, True],
        ["Annual Leave Days", params.leave_days, params.enable_leave],
        ["Sick Leave Days", params.sick_days, params.enable_sick],
        ["Public Holidays", params.holiday_days, params.enable_holiday],
        ["EOSB Days", params.eosb_days, params.enable_eosb],
        ["Insurance Rate %", params.insurance_rate, params.enable_insurance],
        ["HRA / Accom.", params.val_hra, params.enable_hra],
        ["Food Allow.", params.val_food, params.enable_food],
        ["Transport Allow.", params.val_trans, params.enable_trans],
        ["Others Allow.", params.val_others, params.enable_others],
        ["Mob/Demob Cost", params.val_mob, params.enable_mob],
        ["company_accommodation", params.co_accommodation, overheads],
        ["transport_fees", params.co_transport, overheads],
        ["fuel_expense", params.co_fuel, overheads],
        ["medical_insurance_per_month", params.co_medical, overheads],
        ["air_ticket_per_annum", params.co_air_ticket, overheads],
        ["visa_cost", params.co_visa, overheads],
        ["ppe", params.co_ppe, overheads],
        ["gate_pass", params.co_gate_pass, overheads],
        ["bank_guarantee_charges", params.bank_guarantee_rate, True],
        ["coordination_cost", params.coordination_rate, True],
        ["subcon_manpower", params.subcon_manpower, sub_con],
        ["subcon_equip", params.subcon_equip, sub_con],
        ["margin", params.margin, True],
    ]


def master_data_workbook(
    positions: Iterable[Position],
    clients: Iterable[Client],
    params: ParameterSet,
) -> SheetGrids:
    """Positions (with a zeroed Qty column), clients and parameters."""

    return {
        POSITIONS_SHEET: [
            list(POSITION_HEADER),
            *(
                [position.name, position.base_salary, position.specific_tool_cost or 0, 0]
                for position in positions
            ),
        ],
        CLIENTS_SHEET: [
            list(CLIENT_HEADER),
            *([client.name, client.address, client.attn] for client in clients),
        ],
        PARAMETERS_SHEET: [list(PARAMETER_HEADER), *parameter_rows(params)],
    }


def blank_template_workbook(params: ParameterSet | None = None) -> SheetGrids:
    """Master-data layout with no positions or clients."""

    return master_data_workbook((), (), params or load_template_params())


def _share(amount: float, revenue: float) -> str:
    return format_percent(amount / revenue * 100.0 if revenue else 0.0)


def pnl_statement_grid(
    result: CalculationResult,
    quote_ref: str,
    client_name: str,
    duration: float,
    as_of: _dt.date | None = None,
    *,
    title: str = PNL_TITLE,
) -> list[Row]:
    revenue = result.total_revenue
    stats = result.stats
    when = as_of or _dt.date.today()
    months = int(duration) if float(duration).is_integer() else duration

    def line(label: str, amount: float) -> Row:
        return [label, amount, _share(amount, revenue)]

    return [
        [title],
        ["Reference:", quote_ref],
        ["Client:", client_name],
        ["Duration:", f"{months} Months"],
        ["Date:", when.isoformat()],
        [],
        ["DESCRIPTION", "AMOUNT", "% OF REV"],
        ["REVENUE", "", ""],
        ["Total Contract Value", revenue, format_percent(100.0 if revenue else 0.0)],
        [],
        ["DIRECT COSTS", "", ""],
        line("  Manpower Base Salaries", stats.salary),
        line("  Monthly Allowances", stats.allow),
        line("  Statutory Benefits", stats.benefits),
        line("  Company Overheads (Visa/Med/etc)", stats.company_overheads),
        line("  Coordination Costs", stats.coordination),
        line("  Sub-Contractor Allocations", stats.sub_con_alloc),
        line("  One-Offs & Bank Guarantee Costs", stats.financials),
        [],
        line("TOTAL PROJECT COST", result.total_cost),
        [],
        ["NET PROFIT", result.gross_profit, format_percent(result.margin_percent)],
    ]


def detailed_matrix_grid(result: CalculationResult) -> list[Row]:
    """One row per breakdown record, a blank spacer, then contract totals."""

    rows: list[Row] = [list(MATRIX_HEADER)]
    for record in result.detailed_breakdown:
        rows.append(
            [
                record.position,
                record.qty,
                record.duration,
                record.working_days,
                record.base_salary,
                record.allowances_total,
                record.benefits_total,
                record.company_overheads_total,
                record.sub_con_alloc_total,
                record.coordination_total,
                record.one_off_total,
                record.total_cost,
                record.target_margin,
                record.bg_rate,
                record.unit_rate,
                record.revenue,
                record.profit,
            ]
        )
    stats = result.stats
    rows.append([])
    rows.append(
        [
            "TOTALS",
            "",
            "",
            "",
            stats.salary,
            stats.allow,
            stats.benefits,
            stats.company_overheads,
            stats.sub_con_alloc,
            stats.coordination,
            stats.financials,
            result.total_cost,
            "",
            "",
            "",
            result.total_revenue,
            result.gross_profit,
        ]
    )
    return rows


def quotation_report_workbook(
    result: CalculationResult,
    quote_ref: str,
    client_name: str,
    duration: float,
    as_of: _dt.date | None = None,
) -> SheetGrids:
    return {
        PNL_SHEET: pnl_statement_grid(result, quote_ref, client_name, duration, as_of),
        MATRIX_SHEET: detailed_matrix_grid(result),
    }


def report_filename(quote_ref: str) -> str:
    safe_ref = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in quote_ref.strip())
    return f"P&L_Analysis_{safe_ref or 'quote'}.xlsx"


def column_widths(sheet_name: str, row_width: int) -> Sequence[int]:
    """Character widths applied when a report sheet is written to disk."""

    if sheet_name == PNL_SHEET:
        return [40, 20, 15][:row_width] + [15] * max(0, row_width - 3)
    if sheet_name == MATRIX_SHEET:
        return [35] + [15] * max(0, row_width - 1)
    return [20] * row_width


__all__ = [
    "MATRIX_HEADER",
    "MATRIX_SHEET",
    "PNL_SHEET",
    "POSITIONS_SHEET",
    "blank_template_workbook",
    "column_widths",
    "detailed_matrix_grid",
    "master_data_workbook",
    "parameter_rows",
    "pnl_statement_grid",
    "quotation_report_workbook",
    "report_filename",
]
