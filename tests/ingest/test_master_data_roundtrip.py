from __future__ import annotations

import pytest

from manpower_quoter.config import load_template_params
from manpower_quoter.domain_models import Client, ParameterSet, Position
from manpower_quoter.export import blank_template_workbook, master_data_workbook
from manpower_quoter.ingest import ingest_workbook
from manpower_quoter.io import read_workbook, write_workbook

POSITIONS = [
    Position(id="a", name="Welder", base_salary=4200, specific_tool_cost=350),
    Position(id="b", name="Electrician", base_salary=4800),
    Position(id="c", name="HSE Officer", base_salary=7500.5, specific_tool_cost=90),
]

CLIENTS = [Client(id=0, name="North Gas", address="Industrial Area", attn="Procurement")]

PARAMS = ParameterSet(
    duration=18,
    margin=22,
    working_days=26,
    leave_days=21,
    enable_sick=False,
    eosb_days=28,
    insurance_rate=2,
    enable_hra=True,
    val_hra=600,
    enable_trans=True,
    val_trans=200,
    val_mob=1800,
    co_accommodation=450,
    co_transport=120,
    co_fuel=80,
    co_medical=95,
    co_air_ticket=2400,
    co_visa=150,
    co_ppe=40,
    co_gate_pass=25,
    coordination_rate=4,
    bank_guarantee_rate=1.5,
    subcon_manpower=1200,
    subcon_equip=350,
)


def _assert_positions_match(ingested, expected) -> None:
    assert len(ingested) == len(expected)
    by_name = {position.name: position for position in expected}
    for position in ingested:
        source = by_name[position.name]
        assert position.base_salary == pytest.approx(source.base_salary)
        assert position.specific_tool_cost == source.specific_tool_cost


def test_master_data_grids_round_trip() -> None:
    result = ingest_workbook(master_data_workbook(POSITIONS, CLIENTS, PARAMS))

    _assert_positions_match(result.positions, POSITIONS)
    assert result.initial_selections == ()
    assert [(c.name, c.address, c.attn) for c in result.clients] == [
        ("North Gas", "Industrial Area", "Procurement")
    ]
    assert result.parameter_set() == PARAMS


def test_blank_template_round_trips_to_template_params() -> None:
    result = ingest_workbook(blank_template_workbook())

    assert len(result.positions) == 0
    assert result.clients == ()
    params = result.parameter_set()
    assert params == load_template_params()
    assert params.coordination_rate == 0
    assert params.bank_guarantee_rate == 0


def test_master_data_round_trips_through_xlsx(tmp_path) -> None:
    path = write_workbook(tmp_path / "master.xlsx", master_data_workbook(POSITIONS, CLIENTS, PARAMS))

    result = ingest_workbook(read_workbook(path))

    _assert_positions_match(result.positions, POSITIONS)
    assert result.parameter_set() == PARAMS


def test_xlsx_parameters_and_clients_survive_reading(tmp_path) -> None:
    path = write_workbook(tmp_path / "master.xlsx", master_data_workbook(POSITIONS, CLIENTS, PARAMS))

    sheets = read_workbook(path)
    result = ingest_workbook(sheets)

    assert sheets["Parameters"][0] == ["Parameter", "Value", "Enabled"]
    assert sheets["Clients"][0] == ["Client Name", "Address", "Attention"]
    assert result.params["margin"] == 22
    assert result.params["co_visa"] == 150
    assert [(c.name, c.address, c.attn) for c in result.clients] == [
        ("North Gas", "Industrial Area", "Procurement")
    ]
