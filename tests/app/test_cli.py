from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from manpower_quoter import cli
from manpower_quoter.config import load_default_params
from manpower_quoter.domain_models import Position
from manpower_quoter.export import master_data_workbook
from manpower_quoter.io import read_workbook, write_workbook


@pytest.fixture
def prefilled_workbook(tmp_path: Path) -> Path:
    sheets = master_data_workbook(
        [
            Position(id="a", name="Welder", base_salary=4000, specific_tool_cost=200),
            Position(id="b", name="Fitter", base_salary=3500),
        ],
        [],
        load_default_params(),
    )
    # Pre-fill a headcount for the welder.
    sheets["Reference Salary (A)"][1][3] = 2
    return write_workbook(tmp_path / "prefilled.xlsx", sheets)


def test_quote_json_uses_workbook_quantities(prefilled_workbook: Path) -> None:
    out = io.StringIO()

    code = cli.main(["quote", str(prefilled_workbook), "--json"], out=out)

    assert code == 0
    payload = json.loads(out.getvalue())
    assert [record["position"] for record in payload["detailed_breakdown"]] == ["Welder"]
    assert payload["detailed_breakdown"][0]["qty"] == 2
    assert payload["total_revenue"] > payload["total_cost"] > 0


def test_quote_with_explicit_selection_and_overrides(prefilled_workbook: Path, tmp_path: Path) -> None:
    out = io.StringIO()
    report = tmp_path / "report.xlsx"

    code = cli.main(
        [
            "quote",
            str(prefilled_workbook),
            "--select",
            "Fitter=3",
            "--margin",
            "0",
            "--duration",
            "12",
            "--currency",
            "usd",
            "--output",
            str(report),
        ],
        out=out,
    )

    assert code == 0
    text = out.getvalue()
    assert "Fitter" in text
    assert "Billable Mos. (of 12)" in text
    assert "$" in text
    sheets = read_workbook(report)
    assert set(sheets) == {"Project P&L Statement", "Detailed Matrix"}
    assert sheets["Detailed Matrix"][1][0] == "Fitter"


def test_quote_rejects_unknown_position(prefilled_workbook: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["quote", str(prefilled_workbook), "--select", "Painter=1"], out=io.StringIO())

    assert code == 2
    assert "Painter" in capsys.readouterr().err


def test_quote_reports_missing_workbook(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["quote", str(tmp_path / "absent.xlsx")], out=io.StringIO())

    assert code == 1
    assert "error:" in capsys.readouterr().err


def test_bad_selection_argument_exits() -> None:
    with pytest.raises(SystemExit):
        cli.main(["quote", "book.xlsx", "--select", "Welder"])


def test_template_command_writes_blank_master_data(tmp_path: Path) -> None:
    out = io.StringIO()
    target = tmp_path / "template.xlsx"

    assert cli.main(["template", str(target)], out=out) == 0

    sheets = read_workbook(target)
    assert sheets["Reference Salary (A)"] == [["Position Title", "Basic Salary", "Tools Cost", "Qty"]]
    assert sheets["Parameters"][0] == ["Parameter", "Value", "Enabled"]


def test_master_data_command_normalises_workbook(tmp_path: Path) -> None:
    source = write_workbook(
        tmp_path / "legacy.xlsx",
        {
            "Salary Ref (Base)": [
                ["Legacy salary list"],
                ["Title", "Basic Rate", "PPE"],
                ["Rigger", 2500, 120],
            ],
        },
    )
    target = tmp_path / "normalised.xlsx"

    assert cli.main(["master-data", str(source), str(target)], out=io.StringIO()) == 0

    positions = read_workbook(target)["Reference Salary (A)"]
    assert positions[1] == ["Rigger", 2500, 120, 0]


def test_render_matrix_aligns_columns(make_selection) -> None:
    from manpower_quoter.domain_models import ParameterSet
    from manpower_quoter.formatting import Currency
    from manpower_quoter.pricing import calculate_quotation

    selections = [make_selection("Welder", qty=2)]
    result = calculate_quotation(ParameterSet(), selections)

    lines = cli.render_matrix(result, selections, Currency.QAR)

    assert lines[0].split() == ["Welder", "TOTAL"]
    assert lines[1].startswith("Quantity")
    assert lines[-1].startswith("Margin: ")
