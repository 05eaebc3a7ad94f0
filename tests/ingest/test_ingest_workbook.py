from __future__ import annotations

import logging

import pandas as pd
import pytest

from manpower_quoter.domain_models import ParameterSet, Position, PositionCatalog
from manpower_quoter.ingest import (
    PreSelection,
    ingest_workbook,
    materialize_selections,
    sheet_grid,
)


def _workbook() -> dict[str, list[list[object]]]:
    return {
        "Salary Ref (Base)": [
            ["Position", "Basic", "Tools", "Qty"],
            ["Welder", 4000, 0, 2],
            ["Electrician", "4,500", 350, None],
        ],
        "Positions": [
            ["Title", "Salary", "Qty"],
            ["Welder", 9999, 1],
            ["Crane Operator", 6000, 0.4],
        ],
        "Unrelated": [["Position", "Salary"], ["Ignored", 1]],
        "Clients": [
            ["Client Name", "Address", "Attention"],
            ["North Gas", "Industrial Area", "Procurement"],
            [None, None, None],
            [None, "Doha", None],
        ],
        "Parameters": [
            ["Parameter", "Value", "Enabled"],
            ["margin", 18, True],
            ["Working Days", 26, True],
        ],
    }


def test_positions_deduplicate_by_name_and_sort() -> None:
    result = ingest_workbook(_workbook())

    assert result.positions.names() == ["Crane Operator", "Electrician", "Welder"]
    welder = result.positions.find_by_name("Welder")
    assert welder is not None
    assert welder.base_salary == 4000
    assert welder.specific_tool_cost is None
    electrician = result.positions.find_by_name("Electrician")
    assert electrician is not None and electrician.specific_tool_cost == 350


def test_quantities_become_pre_selections() -> None:
    result = ingest_workbook(_workbook())
    welder = result.positions.find_by_name("Welder")
    crane = result.positions.find_by_name("Crane Operator")
    assert welder is not None and crane is not None

    assert result.initial_selections == (
        PreSelection(welder.id, 2),
        PreSelection(welder.id, 1),
        PreSelection(crane.id, 1),
    )

    selections = result.selections()
    assert [(s.name, s.qty) for s in selections] == [
        ("Welder", 2),
        ("Welder", 1),
        ("Crane Operator", 1),
    ]
    assert len({s.unique_id for s in selections}) == 3


def test_clients_skip_blank_rows_and_default_name() -> None:
    clients = ingest_workbook(_workbook()).clients

    assert [(c.id, c.name, c.address) for c in clients] == [
        (0, "North Gas", "Industrial Area"),
        (1, "Unknown Client", "Doha"),
    ]
    assert clients[0].attn == "Procurement"


def test_parameters_apply_over_base() -> None:
    result = ingest_workbook(_workbook())

    params = result.parameter_set(ParameterSet(duration=36))

    assert params.margin == 18
    assert params.working_days == 26
    assert params.duration == 36


def test_empty_workbook_contributes_nothing(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="manpower_quoter.ingest"):
        result = ingest_workbook({})

    assert len(result.positions) == 0
    assert result.clients == ()
    assert result.params == {}
    assert result.parameter_set() == ParameterSet()
    assert "Ingested 0 positions" in caplog.text


def test_unresolved_pre_selections_are_dropped() -> None:
    catalog = PositionCatalog([Position(id="known", name="Cook", base_salary=1500)])

    selections = materialize_selections(
        [PreSelection("missing", 3), PreSelection("known", 2)], catalog
    )

    assert [(s.id, s.qty) for s in selections] == [("known", 2)]


def test_dataframe_sheets_are_accepted() -> None:
    frame = pd.DataFrame(
        {"Position Title": ["Rigger", "Helper"], "Basic Salary": [2500.0, None], "Qty": [3, None]}
    )

    result = ingest_workbook({"Positions": frame})

    rigger = result.positions.find_by_name("Rigger")
    helper = result.positions.find_by_name("Helper")
    assert rigger is not None and rigger.base_salary == 2500
    assert helper is not None and helper.base_salary == 0
    assert [s.qty for s in result.initial_selections] == [3]


def test_sheet_grid_keeps_headerless_frames_as_is() -> None:
    frame = pd.DataFrame([["Position", "Salary"], ["Welder", float("nan")]])

    assert sheet_grid(frame) == [["Position", "Salary"], ["Welder", None]]


def test_sheet_grid_treats_positional_int_labels_as_headerless() -> None:
    frame = pd.DataFrame([["Parameter", "Value"], ["margin", 20]])
    frame.columns = pd.Index([0, 1], dtype="int64")

    assert sheet_grid(frame) == [["Parameter", "Value"], ["margin", 20]]
