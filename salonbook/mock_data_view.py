"""Routes for browsing the in-memory booking data used in mock mode."""
from __future__ import annotations

import html
import json
from typing import Any, Dict, Iterable, List, Mapping

from fastapi import APIRouter, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from salonbook.services.mock_store import MockDataStore, get_mock_store

router = APIRouter()


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (str, int, float, bool)):
        return str(value)
    return json.dumps(value, default=str)


def _rows(models: Iterable[BaseModel], *, exclude: set[str] | None = None) -> List[Dict[str, Any]]:
    return [model.model_dump(mode="json", exclude=exclude) for model in models]


def _build_table(title: str, rows: Iterable[Mapping[str, Any]]) -> str:
    row_list: List[Dict[str, Any]] = [dict(row) for row in rows]
    parts = [f"<section><h2>{html.escape(title)}</h2>"]
    if not row_list:
        parts.append("<p>No records found.</p></section>")
        return "".join(parts)

    columns: List[str] = []
    for row in row_list:
        for key in row:
            if key not in columns:
                columns.append(key)

    header = "".join(f"<th>{html.escape(column)}</th>" for column in columns)
    body = "".join(
        "<tr>"
        + "".join(f"<td>{html.escape(_stringify(row.get(column)))}</td>" for column in columns)
        + "</tr>"
        for row in row_list
    )
    parts.append(f"<table><thead><tr>{header}</tr></thead><tbody>{body}</tbody></table></section>")
    return "".join(parts)


def _employee_rows(store: MockDataStore) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for employee in store.directory.list_employees():
        rows.append(
            {
                "id": employee.id,
                "name": employee.name,
                "branch_id": employee.branch_id,
                "position": employee.position,
                "visible_in_booking": employee.visible_in_booking,
                "service_ids": [item.service_id for item in employee.services],
            }
        )
    return rows


@router.get("/mock-data", response_class=HTMLResponse)
async def view_mock_data() -> HTMLResponse:
    """Render the shared mock store as HTML tables."""
    store = get_mock_store()

    branches = [
        branch
        for company in store.directory.list_companies()
        for branch in store.directory.list_branches(company.id)
    ]
    sections = [
        _build_table("Branches", _rows(branches)),
        _build_table("Services", _rows(store.directory.list_services())),
        _build_table("Employees", _employee_rows(store)),
        _build_table("Shifts", _rows(store.shifts._shifts.values())),
        _build_table("Appointments", _rows(await store.appointments.list())),
        _build_table("Customers", _rows(store.customers._customers.values())),
    ]

    html_content = f"""
    <html>
        <head>
            <title>Mock Booking Data</title>
            <style>
                body {{ font-family: Arial, sans-serif; margin: 2rem; }}
                h1 {{ text-align: center; }}
                section {{ margin-bottom: 2rem; }}
                table {{ border-collapse: collapse; width: 100%; }}
                th, td {{ border: 1px solid #ccc; padding: 0.5rem; text-align: left; }}
                th {{ background-color: #f0f0f0; }}
                tbody tr:nth-child(even) {{ background-color: #fafafa; }}
            </style>
        </head>
        <body>
            <h1>Mock Booking Data</h1>
            {"".join(sections)}
        </body>
    </html>
    """
    return HTMLResponse(content=html_content)


@router.delete("/mock-data/{collection}/{record_id}")
async def delete_mock_record(collection: str, record_id: str) -> Dict[str, str]:
    """Remove a record from one of the mock repositories."""

    store = get_mock_store()
    collection_map = {
        "appointment": ("appointments", store.appointments.delete),
        "appointments": ("appointments", store.appointments.delete),
        "shift": ("shifts", store.shifts.delete),
        "shifts": ("shifts", store.shifts.delete),
        "customer": ("customers", store.customers.delete),
        "customers": ("customers", store.customers.delete),
    }

    mapping = collection_map.get(collection.strip().lower())
    if not mapping:
        raise HTTPException(status_code=404, detail="Unsupported mock data collection")

    canonical_name, delete_fn = mapping
    try:
        deleted = await delete_fn(record_id)
    except ValueError:
        deleted = False
    if not deleted:
        raise HTTPException(status_code=404, detail="Record not found")

    return {"status": "deleted", "collection": canonical_name, "record_id": record_id}
