# backend/utils/pdf.py

import io
from typing import List, Sequence

from reportlab.graphics.barcode import code128
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from config import settings
from models.order import Order
from models.variant import Variant
from utils.formatting import format_currency, format_datetime

FONT_REGULAR_NAME = "Helvetica"
FONT_BOLD_NAME = "Helvetica-Bold"

# Thermal roll: 80 mm paper, 72 mm printable
RECEIPT_WIDTH = 80 * mm
RECEIPT_MARGIN = 4 * mm
RECEIPT_ROW = 4.5 * mm

# Label grid on A4
LABEL_COLUMNS = 3
LABEL_WIDTH = 63 * mm
LABEL_HEIGHT = 32 * mm
LABEL_MARGIN_X = 10.5 * mm
LABEL_MARGIN_Y = 12 * mm

SEPARATOR = "-" * 40


def _draw_text(c, x, y, text, font=FONT_REGULAR_NAME, size=8, align="left"):
    c.setFont(font, size)
    text_str = str(text) if text is not None else ""
    if align == "right":
        c.drawRightString(x, y, text_str)
    elif align == "center":
        c.drawCentredString(x, y, text_str)
    else:
        c.drawString(x, y, text_str)


def receipt_height(item_count: int) -> float:
    # header + order info + table header, item rows, totals + footer
    return 52 * mm + item_count * RECEIPT_ROW + 48 * mm


def generate_receipt_pdf(order: Order) -> bytes:
    """
    Renders an 80 mm thermal receipt for a saved order:
    - store header (name, address, phone)
    - invoice number, time, customer and contact
    - item table (item, qty, price, total after discount)
    - subtotal, discount, total, tendered, change, payment method
    - footer
    """
    items = list(order.items)
    height = receipt_height(len(items))
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=(RECEIPT_WIDTH, height))
    c.setTitle(f"Invoice #{order.id}")

    left = RECEIPT_MARGIN
    right = RECEIPT_WIDTH - RECEIPT_MARGIN
    center = RECEIPT_WIDTH / 2

    # --- 1. HEADER ---
    y = height - 8 * mm
    _draw_text(c, center, y, settings.STORE_NAME, font=FONT_BOLD_NAME, size=10, align="center")
    y -= 5 * mm
    _draw_text(c, center, y, settings.STORE_ADDRESS, size=6, align="center")
    y -= 3.5 * mm
    _draw_text(c, center, y, f"Tel: {settings.STORE_PHONE}", size=6, align="center")
    y -= 5 * mm
    _draw_text(c, center, y, SEPARATOR, align="center")

    # --- 2. ORDER INFO ---
    y -= 5 * mm
    created = format_datetime(order.created_at) if order.created_at else ""
    _draw_text(c, left, y, f"INV#: {order.id} | {created}")
    y -= RECEIPT_ROW
    _draw_text(c, left, y, f"Customer: {order.customer_name or 'CASH SALE'}")
    y -= RECEIPT_ROW
    _draw_text(c, left, y, f"Contact: {order.phone_number or '-'}")

    # --- 3. ITEMS ---
    y -= 6 * mm
    c.setFont(FONT_BOLD_NAME, 8)
    c.drawString(left, y, "Item")
    c.drawRightString(40 * mm, y, "Qty")
    c.drawRightString(56 * mm, y, "Price")
    c.drawRightString(right, y, "Total")
    c.setLineWidth(0.5)
    c.line(left, y - 1.5 * mm, right, y - 1.5 * mm)
    y -= RECEIPT_ROW + 1 * mm

    c.setFont(FONT_REGULAR_NAME, 7)
    for it in items:
        c.drawString(left, y, str(it.product_name)[:18])
        c.drawRightString(40 * mm, y, str(it.quantity))
        c.drawRightString(56 * mm, y, f"{it.price:,.2f}")
        c.drawRightString(right, y, f"{it.total_after_discount:,.2f}")
        if it.discount_percentage:
            c.setFont(FONT_REGULAR_NAME, 6)
            c.drawString(left + 2 * mm, y - 2.5 * mm, f"disc. {it.discount_percentage:g}%")
            c.setFont(FONT_REGULAR_NAME, 7)
        y -= RECEIPT_ROW

    y -= 1 * mm
    _draw_text(c, center, y, SEPARATOR, align="center")

    # --- 4. TOTALS ---
    y -= 5 * mm
    rows = [
        ("Subtotal:", order.subtotal_amount, FONT_REGULAR_NAME),
        ("Discount:", order.discount_amount, FONT_REGULAR_NAME),
        ("TOTAL:", order.total_amount, FONT_BOLD_NAME),
        ("Tendered:", order.tendered_amount, FONT_REGULAR_NAME),
        ("Change:", order.change_amount, FONT_REGULAR_NAME),
    ]
    for label, amount, font in rows:
        _draw_text(c, 44 * mm, y, label, font=font, align="right")
        _draw_text(c, right, y, format_currency(amount), font=font, align="right")
        y -= RECEIPT_ROW
    _draw_text(c, left, y, f"Payment Method: {order.payment_method}")

    # --- 5. FOOTER ---
    y -= 6 * mm
    _draw_text(c, center, y, SEPARATOR, align="center")
    y -= 5 * mm
    _draw_text(c, center, y, "Thank you for shopping with us!", size=7, align="center")

    c.showPage()
    c.save()
    return buffer.getvalue()


def _label_positions(count: int) -> List[tuple]:
    """Bottom-left corners of `count` labels, row by row, page by page."""
    _, page_height = A4
    rows_per_page = int((page_height - 2 * LABEL_MARGIN_Y) // LABEL_HEIGHT)
    per_page = rows_per_page * LABEL_COLUMNS

    positions = []
    for i in range(count):
        page, slot = divmod(i, per_page)
        row, col = divmod(slot, LABEL_COLUMNS)
        x = LABEL_MARGIN_X + col * LABEL_WIDTH
        y = page_height - LABEL_MARGIN_Y - (row + 1) * LABEL_HEIGHT
        positions.append((page, x, y))
    return positions


def generate_labels_pdf(variants: Sequence[Variant]) -> bytes:
    """Barcode label sheet: size and price on top, Code128 of the variant id, id underneath."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle("Print Barcodes")

    current_page = 0
    for variant, (page, x, y) in zip(variants, _label_positions(len(variants))):
        if page != current_page:
            c.showPage()
            current_page = page

        center = x + LABEL_WIDTH / 2
        _draw_text(c, center, y + LABEL_HEIGHT - 7 * mm,
                   f"Size: {variant.size} | Price: {format_currency(variant.price)}",
                   size=8, align="center")

        barcode = code128.Code128(variant.id, barHeight=14 * mm, barWidth=0.5, humanReadable=False)
        barcode.drawOn(c, center - barcode.width / 2, y + 8 * mm)

        _draw_text(c, center, y + 4 * mm, variant.id, size=7, align="center")

    c.showPage()
    c.save()
    return buffer.getvalue()
