"""Invoices router — CRUD with items, PDF link and A4 PDF rendering."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.auth.access import has_data_access
from shift_manager.auth.dependencies import get_current_user, require_role
from shift_manager.auth.models import User
from shift_manager.common.constants import Resource, UserRole
from shift_manager.database import get_db
from shift_manager.invoices.pdf import render_invoice_pdf
from shift_manager.invoices.schemas import (
    GeneratePdfResponse,
    InvoiceDetail,
    InvoicePayload,
    InvoiceResponse,
)
from shift_manager.invoices.service import InvoiceService

router = APIRouter(
    prefix="",
    tags=["invoices"],
    dependencies=[Depends(require_role(UserRole.admin, UserRole.company))],
)


# ── GET /: list (optionally by type) ───────────────────────────────

@router.get("", response_model=list[InvoiceResponse])
async def list_invoices(
    type: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await InvoiceService.list_invoices(db, user, type)


# ── GET /generate-pdf/{id}: PDF link ──────────────────────────────

@router.get("/generate-pdf/{id}", response_model=GeneratePdfResponse)
async def generate_invoice_pdf(
    id: int,
    user: User = Depends(has_data_access(Resource.invoice)),
):
    return GeneratePdfResponse(
        success=True,
        message="PDF generated",
        pdf_url=f"/api/invoices/pdf/{id}",
    )


# ── GET /pdf/{id}: rendered PDF ───────────────────────────────────

@router.get("/pdf/{id}")
async def download_invoice_pdf(
    id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(has_data_access(Resource.invoice)),
):
    invoice = await InvoiceService.get_invoice(db, id)
    content = render_invoice_pdf(invoice)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="faktura-{invoice.id}.pdf"'},
    )


# ── GET /{id}: detail with items ──────────────────────────────────

@router.get("/{id}", response_model=InvoiceDetail)
async def get_invoice(
    id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(has_data_access(Resource.invoice)),
):
    return await InvoiceService.get_invoice(db, id)


# ── POST /: create ────────────────────────────────────────────────

@router.post("", response_model=InvoiceDetail, status_code=201)
async def create_invoice(
    body: InvoicePayload,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await InvoiceService.create_invoice(db, body, user)


# ── PUT /{id}: update, items replaced ─────────────────────────────

@router.put("/{id}", response_model=InvoiceDetail)
async def update_invoice(
    id: int,
    body: InvoicePayload,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(has_data_access(Resource.invoice)),
):
    return await InvoiceService.update_invoice(db, id, body)


# ── DELETE /{id} ───────────────────────────────────────────────────

@router.delete("/{id}", status_code=204)
async def delete_invoice(
    id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(has_data_access(Resource.invoice)),
):
    await InvoiceService.delete_invoice(db, id, user)
    return Response(status_code=204)
