import pytest

from cdp.errors import EmptyDatasetError, MissingColumnError
from cdp.sheets.readers import build_rows, project_columns, read_sheet_rows
from cdp.sheets.schema import DATA_COLUMNS_OPTIONAL_V1, DATA_COLUMNS_V1
from cdp.sheets.tables import Cell, Column, Table, table_from_csv

SCENARIO_HEADER = "company_name,market,url,contact_email,contact_phone,contact_url,observed_on"
SCENARIO_COLUMNS = SCENARIO_HEADER.split(",")


def test_project_columns_maps_names_to_indices():
    header = ["market", "company_name", "extra"]
    assert project_columns(header, ["company_name", "market"]) == {"company_name": 1, "market": 0}


def test_project_columns_optional_missing_maps_to_none():
    idx = project_columns(["campaign"], ["campaign"], optional=["identifier"])
    assert idx == {"campaign": 0, "identifier": None}


def test_missing_required_column_names_it():
    with pytest.raises(MissingColumnError) as exc:
        project_columns(["company_name", "url"], ["company_name", "market", "url"], sheet="data")
    assert exc.value.column == "market"
    assert '"market"' in str(exc.value)


def test_csv_row_with_quoted_comma():
    text = SCENARIO_HEADER + '\n"Acme, Inc.",Downtown,acme.com,,555-1111,,2024-01-15\n'
    rows = read_sheet_rows(table_from_csv("data", text), SCENARIO_COLUMNS, sheet="data")
    assert rows == [
        {
            "company_name": "Acme, Inc.",
            "market": "Downtown",
            "url": "acme.com",
            "contact_email": "",
            "contact_phone": "555-1111",
            "contact_url": "",
            "observed_on": "2024-01-15",
        }
    ]


def test_missing_market_column_fails_whole_sheet():
    text = "company_name,url\nAcme,acme.com\nBeta,beta.com\n"
    with pytest.raises(MissingColumnError) as exc:
        read_sheet_rows(table_from_csv("data", text), ["company_name", "market", "url"], sheet="data")
    assert exc.value.column == "market"


def test_blank_leading_column_skips_row():
    text = "company_name,market\nAcme,Downtown\n  ,Midtown\nBeta,\n"
    rows = read_sheet_rows(table_from_csv("data", text), ["company_name", "market"])
    assert [r["company_name"] for r in rows] == ["Acme", "Beta"]


def test_short_rows_fill_missing_cells_with_empty():
    text = "company_name,market,url\nAcme\n"
    rows = read_sheet_rows(table_from_csv("data", text), ["company_name", "market", "url"])
    assert rows == [{"company_name": "Acme", "market": "", "url": ""}]


def test_build_rows_uses_column_types():
    table = Table(
        columns=[Column("company_name"), Column("observed_on", "date")],
        rows=[[Cell(v="Acme"), Cell(v="Date(2024,0,15)")], [Cell(v="Beta"), Cell(v=45000)]],
    )
    rows = build_rows(table, {"company_name": 0, "observed_on": 1})
    assert rows == [
        {"company_name": "Acme", "observed_on": "2024-01-15"},
        {"company_name": "Beta", "observed_on": "2023-03-15"},
    ]


def test_data_sheet_without_identifier_column_still_reads():
    header = ",".join(DATA_COLUMNS_V1)
    line = "X,Food Bank!,Downtown,,,,,,,true"
    rows = read_sheet_rows(
        table_from_csv("data", header + "\n" + line + "\n"),
        DATA_COLUMNS_V1,
        optional=DATA_COLUMNS_OPTIONAL_V1,
        sheet="data",
    )
    assert rows[0]["identifier"] == ""
    assert rows[0]["company_name"] == "Food Bank!"


def test_identifier_as_leading_column_is_warned(caplog):
    header = ",".join(["identifier", *DATA_COLUMNS_V1])
    lines = ["acme,X,Acme,Downtown,,,,,,,true", ",X,Beta,Downtown,,,,,,,true"]
    with caplog.at_level("WARNING", logger="cdp.sheets.readers"):
        rows = read_sheet_rows(
            table_from_csv("data", "\n".join([header, *lines]) + "\n"),
            DATA_COLUMNS_V1,
            optional=DATA_COLUMNS_OPTIONAL_V1,
            sheet="data",
        )
    assert [r["company_name"] for r in rows] == ["Acme"]
    assert "leading column of data is optional column 'identifier'" in caplog.text


def test_required_leading_column_is_not_warned(caplog):
    header = ",".join([*DATA_COLUMNS_V1, "identifier"])
    with caplog.at_level("WARNING", logger="cdp.sheets.readers"):
        read_sheet_rows(
            table_from_csv("data", header + "\nX,Acme,Downtown,,,,,,,true,\n"),
            DATA_COLUMNS_V1,
            optional=DATA_COLUMNS_OPTIONAL_V1,
            sheet="data",
        )
    assert "leading column" not in caplog.text


def test_header_only_sheet_is_empty_dataset():
    with pytest.raises(EmptyDatasetError):
        read_sheet_rows(table_from_csv("data", "company_name,market\n"), ["company_name"], sheet="data")


def test_blank_body_is_empty_dataset():
    with pytest.raises(EmptyDatasetError) as exc:
        read_sheet_rows(table_from_csv("campaigns", ""), ["name"], sheet="campaigns")
    assert exc.value.sheet == "campaigns"
