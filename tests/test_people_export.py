import csv
import io

from openpyxl import load_workbook

from backend.services.people_export import (
    EXPORT_COLUMNS,
    export_filename,
    person_to_export_row,
    render_people_export,
)
from conftest import auth_headers


def _seed_people(client):
    response = client.post(
        "/v1/tables/people",
        json={"rows": [
            {"name": "Bo", "role": "Client", "skills": ["Go"], "tags": ["work"]},
            {
                "name": "Ana",
                "profession": "Engineer",
                "role": "Friend",
                "skills": ["Python", "SQL"],
                "tags": ["python"],
                "contacts": {"email": "ana@example.com", "github": "ana"},
                "notes": "Met at PyCon",
            },
        ]},
        headers=auth_headers(),
    )
    assert response.status_code == 200


def test_export_row_flattens_lists_and_contacts():
    row = person_to_export_row({
        "name": "Ana",
        "skills": ["Python", "SQL"],
        "tags": None,
        "contacts": {"email": "ana@example.com"},
        "created_at": "2025-03-04T10:11:12.123456",
    })
    assert row["skills"] == "Python, SQL"
    assert row["tags"] == ""
    assert row["email"] == "ana@example.com"
    assert row["github"] == ""
    assert row["created_at"] == "2025-03-04"
    assert list(row) == EXPORT_COLUMNS


def test_export_filename():
    assert export_filename("nocbook-people", "csv", now_ms=1700000000000) == "nocbook-people-1700000000000.csv"


def test_xls_is_served_as_xlsx():
    _, media_type, extension = render_people_export([{"name": "Ana"}], "xls")
    assert extension == "xlsx"
    assert media_type.endswith("spreadsheetml.sheet")


def test_csv_export_sorted_by_name(client):
    _seed_people(client)
    response = client.get("/v1/people/export", params={"format": "csv"}, headers=auth_headers())
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="nocbook-people-')
    assert disposition.endswith('.csv"')

    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert [row["name"] for row in rows] == ["Ana", "Bo"]
    assert rows[0]["skills"] == "Python, SQL"
    assert rows[0]["github"] == "ana"
    assert list(rows[0]) == EXPORT_COLUMNS


def test_xlsx_export_with_filters(client):
    _seed_people(client)
    response = client.get(
        "/v1/people/export",
        params={"format": "xlsx", "role": "Friend", "skill": "Python"},
        headers=auth_headers(),
    )
    assert response.status_code == 200
    workbook = load_workbook(io.BytesIO(response.content))
    sheet = workbook["People"]
    values = list(sheet.iter_rows(values_only=True))
    assert list(values[0]) == EXPORT_COLUMNS
    assert [row[0] for row in values[1:]] == ["Ana"]


def test_export_without_matches_is_404(client):
    response = client.get("/v1/people/export", params={"format": "csv"}, headers=auth_headers())
    assert response.status_code == 404
    assert response.json()["detail"] == "No data to export"

    _seed_people(client)
    response = client.get("/v1/people/export", params={"format": "csv", "tag": "nobody"}, headers=auth_headers())
    assert response.status_code == 404


def test_unknown_export_format(client):
    response = client.get("/v1/people/export", params={"format": "pdf"}, headers=auth_headers())
    assert response.status_code == 400
