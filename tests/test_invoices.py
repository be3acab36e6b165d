"""Invoice tests — totals from items, wholesale item replacement, type
filter, PDF rendering and the company/admin gate."""

from __future__ import annotations

import os

import pytest

from shift_manager.common.constants import UserRole
from shift_manager.config import settings
from shift_manager.invoices.pdf import resolve_fonts


def _invoice(**overrides) -> dict:
    body = {
        "invoiceNumber": "2025001",
        "type": "issued",
        "date": "2025-03-01T00:00:00Z",
        "dateDue": "2025-03-15T00:00:00Z",
        "customerName": "Kavárna Slavia",
        "customerAddress": "Smetanovo nábřeží 2, Praha",
        "customerIC": "12345678",
        "customerDIC": "CZ12345678",
        "supplierName": "Firma s.r.o.",
        "bankAccount": "123456789/0100",
        "items": [
            {"description": "Obsluha baru", "quantity": 10, "unit": "hod", "pricePerUnit": 250},
            {"description": "Úklid", "quantity": 2, "pricePerUnit": 175.5},
        ],
    }
    body.update(overrides)
    return body


async def test_create_computes_amount_from_items(client, company, auth_headers_for):
    resp = await client.post("/api/invoices", json=_invoice(), headers=await auth_headers_for(company))
    assert resp.status_code == 201
    data = resp.json()
    assert data["amount"] == 2851.0
    assert data["customerIC"] == "12345678"
    assert data["paymentMethod"] == "bank"
    assert data["isVatPayer"] is True
    assert data["isPaid"] is False
    assert len(data["items"]) == 2
    # Missing unit falls back to the default
    assert data["items"][1]["unit"] == "ks"


async def test_explicit_amount_wins(client, company, auth_headers_for):
    resp = await client.post(
        "/api/invoices", json=_invoice(amount=1000), headers=await auth_headers_for(company),
    )
    assert resp.json()["amount"] == 1000


async def test_received_invoice_falls_back_to_supplier(client, company, auth_headers_for):
    resp = await client.post(
        "/api/invoices",
        json=_invoice(
            type="received",
            customerName=None,
            customerAddress=None,
            supplierName="Makro Cash & Carry",
            supplierAddress="Jeremiášova 1249, Praha",
            dateReceived="nevím",
        ),
        headers=await auth_headers_for(company),
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["customerName"] == "Makro Cash & Carry"
    assert data["customerAddress"] == "Jeremiášova 1249, Praha"
    assert data["dateReceived"] is None


async def test_invoice_number_required(client, company, auth_headers_for):
    resp = await client.post(
        "/api/invoices", json=_invoice(invoiceNumber=None), headers=await auth_headers_for(company),
    )
    assert resp.status_code == 400


async def test_update_replaces_items(client, company, auth_headers_for):
    headers = await auth_headers_for(company)
    created = await client.post("/api/invoices", json=_invoice(), headers=headers)
    invoice_id = created.json()["id"]

    resp = await client.put(
        f"/api/invoices/{invoice_id}",
        json=_invoice(items=[{"description": "Inventura", "quantity": 4, "pricePerUnit": 300}]),
        headers=headers,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert [i["description"] for i in data["items"]] == ["Inventura"]
    assert data["amount"] == 1200.0

    fetched = await client.get(f"/api/invoices/{invoice_id}", headers=headers)
    assert len(fetched.json()["items"]) == 1


async def test_list_filters_by_type(client, company, auth_headers_for):
    headers = await auth_headers_for(company)
    await client.post("/api/invoices", json=_invoice(), headers=headers)
    await client.post("/api/invoices", json=_invoice(invoiceNumber="P-17", type="received"), headers=headers)

    issued = await client.get("/api/invoices", params={"type": "issued"}, headers=headers)
    assert [i["invoiceNumber"] for i in issued.json()] == ["2025001"]

    everything = await client.get("/api/invoices", headers=headers)
    assert len(everything.json()) == 2


async def test_pdf_link_and_render(client, company, auth_headers_for):
    headers = await auth_headers_for(company)
    created = await client.post("/api/invoices", json=_invoice(), headers=headers)
    invoice_id = created.json()["id"]

    link = await client.get(f"/api/invoices/generate-pdf/{invoice_id}", headers=headers)
    assert link.status_code == 200
    assert link.json() == {
        "success": True,
        "message": "PDF generated",
        "pdfUrl": f"/api/invoices/pdf/{invoice_id}",
    }

    pdf = await client.get(link.json()["pdfUrl"], headers=headers)
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content.startswith(b"%PDF")


@pytest.mark.skipif(
    not (os.path.isfile(settings.PDF_FONT_PATH) and os.path.isfile(settings.PDF_BOLD_FONT_PATH)),
    reason="DejaVu fonts not installed",
)
async def test_pdf_uses_truetype_font_for_czech_text(client, company, auth_headers_for):
    headers = await auth_headers_for(company)
    created = await client.post("/api/invoices", json=_invoice(type="received"), headers=headers)

    pdf = await client.get(f"/api/invoices/pdf/{created.json()['id']}", headers=headers)
    assert pdf.status_code == 200
    assert b"DejaVuSans" in pdf.content


def test_missing_font_files_fall_back_to_helvetica(tmp_path):
    missing = str(tmp_path / "missing.ttf")
    assert resolve_fonts(missing, missing) == ("Helvetica", "Helvetica-Bold")


async def test_worker_cannot_touch_invoices(client, worker, auth_headers_for):
    resp = await client.get("/api/invoices", headers=await auth_headers_for(worker))
    assert resp.status_code == 403


async def test_foreign_invoice_forbidden(client, company, make_user, auth_headers_for):
    other = await make_user(role=UserRole.company)
    created = await client.post("/api/invoices", json=_invoice(), headers=await auth_headers_for(other))
    invoice_id = created.json()["id"]

    headers = await auth_headers_for(company)
    assert (await client.get(f"/api/invoices/{invoice_id}", headers=headers)).status_code == 403
    assert (await client.get(f"/api/invoices/pdf/{invoice_id}", headers=headers)).status_code == 403


async def test_delete_invoice(client, company, auth_headers_for):
    headers = await auth_headers_for(company)
    created = await client.post("/api/invoices", json=_invoice(), headers=headers)
    invoice_id = created.json()["id"]

    assert (await client.delete(f"/api/invoices/{invoice_id}", headers=headers)).status_code == 204
    assert (await client.get(f"/api/invoices/{invoice_id}", headers=headers)).status_code == 404
