import socket
from types import SimpleNamespace
from unittest import mock

import pytest
from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error

from librestock.sheets.client import (
    GoogleSheetsClient,
    MemorySheetsClient,
    SheetsError,
    StoreNotConfigured,
    parse_a1,
    quote_sheet_name,
)


def test_parse_a1_ranges():
    assert parse_a1("Productos!A:J") == {"sheet": "Productos", "col1": 0, "col2": 9, "row1": None, "row2": None}
    assert parse_a1("Productos!A5:J5") == {"sheet": "Productos", "col1": 0, "col2": 9, "row1": 5, "row2": 5}
    assert parse_a1("'Mi hoja'!B2")["sheet"] == "Mi hoja"
    with pytest.raises(SheetsError):
        parse_a1("not a range")


def test_memory_client_update_pads_and_read_trims():
    client = MemorySheetsClient({"Productos": []})
    client.update_range("Productos!A3:J3", [["x"] * 10])

    assert client.sheets["Productos"][:2] == [[], []]
    assert client.read_range("Productos!A:J") == [[], [], ["x"] * 10]
    assert client.read_range("Productos!A3:B3") == [["x", "x"]]


def test_memory_client_delete_unknown_grid():
    with pytest.raises(SheetsError):
        MemorySheetsClient().delete_row_range(7, 0, 1)


@pytest.fixture
def google():
    client = GoogleSheetsClient("sheet-123")
    client._service = mock.MagicMock()
    return client


def test_google_read_range(google):
    values = google._service.spreadsheets.return_value.values.return_value
    values.get.return_value.execute.return_value = {"values": [["ID"], ["1"]]}

    assert google.read_range("Productos!A:J") == [["ID"], ["1"]]
    values.get.assert_called_once_with(
        spreadsheetId="sheet-123",
        range="Productos!A:J",
        valueRenderOption="UNFORMATTED_VALUE",
        dateTimeRenderOption="FORMATTED_STRING",
    )


def test_google_read_range_without_values(google):
    values = google._service.spreadsheets.return_value.values.return_value
    values.get.return_value.execute.return_value = {}
    assert google.read_range("Productos!A:J") == []


def test_google_delete_builds_dimension_request(google):
    google.delete_row_range(0, 4, 5)
    batch = google._service.spreadsheets.return_value.batchUpdate
    body = batch.call_args.kwargs["body"]
    assert body["requests"][0]["deleteDimension"]["range"] == {
        "sheetId": 0, "dimension": "ROWS", "startIndex": 4, "endIndex": 5,
    }


def test_google_http_errors_are_wrapped(google):
    values = google._service.spreadsheets.return_value.values.return_value
    values.append.return_value.execute.side_effect = HttpError(
        resp=SimpleNamespace(status=503, reason="Service Unavailable"), content=b""
    )
    with pytest.raises(SheetsError):
        google.append_row("Productos!A:J", ["1"])


def test_google_sheet_id_lookup(google):
    google._service.spreadsheets.return_value.get.return_value.execute.return_value = {
        "sheets": [{"properties": {"sheetId": 0, "title": "Hoja 1"}},
                   {"properties": {"sheetId": 812, "title": "Productos"}}]
    }
    assert google.sheet_id_for("Productos") == 812
    assert google.sheet_id_for("Missing") is None


def test_google_client_requires_configuration():
    with pytest.raises(StoreNotConfigured):
        GoogleSheetsClient("").read_range("Productos!A:J")
    with pytest.raises(StoreNotConfigured):
        GoogleSheetsClient("sheet-123").read_range("Productos!A:J")


def test_private_key_newlines_are_restored():
    client = GoogleSheetsClient("sheet-123", client_email="svc@example.iam", private_key="line1\\nline2")
    assert client._private_key == "line1\nline2"


@pytest.mark.parametrize("failure", [
    RefreshError("invalid_grant: Invalid JWT Signature."),
    HttpLib2Error("connection reset"),
    socket.timeout("timed out"),
])
def test_google_auth_and_transport_errors_are_wrapped(google, failure):
    values = google._service.spreadsheets.return_value.values.return_value
    values.update.return_value.execute.side_effect = failure
    with pytest.raises(SheetsError) as excinfo:
        google.update_range("Productos!A2:J2", [["1"]])
    assert excinfo.value.__cause__ is failure


def test_quoted_sheet_names_round_trip_through_parse_a1():
    assert quote_sheet_name("Mi hoja") == "'Mi hoja'"
    assert quote_sheet_name("Libros d'Ana") == "'Libros d''Ana'"
    title = "Libros d'Ana"
    assert parse_a1(quote_sheet_name(title) + "!A2:J2")["sheet"] == title
