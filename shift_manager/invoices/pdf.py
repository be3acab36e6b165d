"""A4 invoice rendering with reportlab."""

from __future__ import annotations

import io
import logging
import os
from datetime import datetime
from functools import lru_cache
from typing import Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from shift_manager.common.constants import InvoiceType
from shift_manager.config import settings
from shift_manager.invoices.models import Invoice

logger = logging.getLogger(__name__)


@lru_cache
def resolve_fonts(regular_path: str, bold_path: str) -> tuple[str, str]:
    """Register the TrueType pair once and return (regular, bold) font names.

    The base-14 Helvetica has no glyphs for č, ř or ě, so it is only used when
    the configured font files are missing.
    """
    if not (os.path.isfile(regular_path) and os.path.isfile(bold_path)):
        logger.warning("PDF fonts not found at %s; Czech characters will not render", regular_path)
        return "Helvetica", "Helvetica-Bold"
    pdfmetrics.registerFont(TTFont("InvoiceSans", regular_path))
    pdfmetrics.registerFont(TTFont("InvoiceSans-Bold", bold_path))
    return "InvoiceSans", "InvoiceSans-Bold"


def _fmt_date(value: Optional[datetime]) -> str:
    return value.strftime("%d.%m.%Y") if value else ""


def _fmt_money(value: float) -> str:
    return f"{value:,.2f}".replace(",", " ").replace(".", ",") + " Kč"


def render_invoice_pdf(invoice: Invoice) -> bytes:
    """Render *invoice* and its items to PDF bytes."""
    regular, bold = resolve_fonts(settings.PDF_FONT_PATH, settings.PDF_BOLD_FONT_PATH)
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    w, h = A4

    title = "Faktura" if invoice.type == InvoiceType.issued.value else "Přijatá faktura"
    c.setTitle(f"{title} {invoice.invoice_number}")
    c.setFont(bold, 18)
    c.drawString(20*mm, h-25*mm, f"{title} č. {invoice.invoice_number}")

    # Parties
    c.setFont(bold, 11)
    c.drawString(20*mm, h-40*mm, "Dodavatel")
    c.drawString(110*mm, h-40*mm, "Odběratel")
    c.setFont(regular, 10)
    supplier = [
        invoice.supplier_name or "",
        invoice.supplier_address or "",
        f"IČO: {invoice.supplier_ic}" if invoice.supplier_ic else "",
        f"DIČ: {invoice.supplier_dic}" if invoice.supplier_dic else "",
    ]
    customer = [
        invoice.customer_name,
        invoice.customer_address,
        f"IČO: {invoice.customer_ic}" if invoice.customer_ic else "",
        f"DIČ: {invoice.customer_dic}" if invoice.customer_dic else "",
    ]
    y = h - 46*mm
    for left, right in zip(supplier, customer):
        c.drawString(20*mm, y, left)
        c.drawString(110*mm, y, right)
        y -= 5*mm

    # Dates + payment
    y -= 5*mm
    c.drawString(20*mm, y, f"Datum vystavení: {_fmt_date(invoice.date_issued or invoice.date)}")
    c.drawString(110*mm, y, f"Datum splatnosti: {_fmt_date(invoice.date_due)}")
    y -= 5*mm
    c.drawString(20*mm, y, f"Způsob platby: {invoice.payment_method}")
    if invoice.bank_account:
        c.drawString(110*mm, y, f"Bankovní účet: {invoice.bank_account}")
    if not invoice.is_vat_payer:
        y -= 5*mm
        c.drawString(20*mm, y, "Dodavatel není plátcem DPH.")

    # Items table
    y -= 12*mm
    c.setLineWidth(0.6)
    c.line(20*mm, y, w-20*mm, y); y -= 6*mm
    c.setFont(bold, 10)
    c.drawString(22*mm, y, "Popis")
    c.drawRightString(w-85*mm, y, "Množství")
    c.drawRightString(w-55*mm, y, "Cena/j.")
    c.drawRightString(w-20*mm, y, "Celkem")
    y -= 3*mm
    c.line(20*mm, y, w-20*mm, y); y -= 5*mm
    c.setFont(regular, 10)

    for item in invoice.items:
        if y < 30*mm:
            c.showPage()
            y = h - 20*mm
            c.setFont(regular, 10)
        c.drawString(22*mm, y, item.description[:60])
        c.drawRightString(w-85*mm, y, f"{item.quantity:g} {item.unit}")
        c.drawRightString(w-55*mm, y, _fmt_money(item.price_per_unit))
        c.drawRightString(w-20*mm, y, _fmt_money(item.total))
        y -= 6*mm

    y -= 2*mm
    c.line(w-90*mm, y, w-20*mm, y); y -= 7*mm
    c.setFont(bold, 12)
    c.drawString(w-90*mm, y, "Celkem k úhradě:")
    c.drawRightString(w-20*mm, y, _fmt_money(invoice.amount))

    if invoice.notes:
        y -= 12*mm
        c.setFont(regular, 9)
        c.drawString(20*mm, y, f"Poznámka: {invoice.notes[:110]}")

    c.showPage()
    c.save()
    return buffer.getvalue()
