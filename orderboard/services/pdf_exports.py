"""PDF exports for dashboard reports and order tickets."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from io import BytesIO
from typing import Any
from xml.sax.saxutils import escape

from orderboard.schemas.report import DashboardResponse, PrintOrderRead
from orderboard.utils.pdf_fonts import register_pdf_font


def _reportlab():
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
    from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

    return {
        "colors": colors,
        "A4": A4,
        "ParagraphStyle": ParagraphStyle,
        "getSampleStyleSheet": getSampleStyleSheet,
        "Paragraph": Paragraph,
        "SimpleDocTemplate": SimpleDocTemplate,
        "Spacer": Spacer,
        "Table": Table,
        "TableStyle": TableStyle,
    }


def sanitize_filename(value: str, max_length: int = 80) -> str:
    """Return a filesystem-friendly filename fragment."""
    normalized = re.sub(r"[\\/:*?\"<>|]+", "_", (value or "").strip())
    normalized = re.sub(r"\s+", "_", normalized)
    normalized = re.sub(r"_+", "_", normalized).strip("._")
    return (normalized or "report")[:max_length]


def _build_styles() -> dict[str, Any]:
    font_name = register_pdf_font()
    rl = _reportlab()
    styles = rl["getSampleStyleSheet"]()
    return {
        "font_name": font_name,
        "title": rl["ParagraphStyle"]("PdfTitle", parent=styles["Title"], fontName=font_name),
        "heading": rl["ParagraphStyle"]("PdfHeading2", parent=styles["Heading2"], fontName=font_name),
        "normal": rl["ParagraphStyle"]("PdfNormal", parent=styles["Normal"], fontName=font_name),
    }


def _grid_table(rows: list[list[str]], col_widths: list[int], styles: dict[str, Any]) -> Any:
    rl = _reportlab()
    table = rl["Table"](rows, colWidths=col_widths)
    table.setStyle(
        rl["TableStyle"](
            [
                ("BACKGROUND", (0, 0), (-1, 0), rl["colors"].lightgrey),
                ("GRID", (0, 0), (-1, -1), 0.5, rl["colors"].black),
                ("FONTNAME", (0, 0), (-1, -1), styles["font_name"]),
                ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
            ]
        )
    )
    return table


def _build_pdf(story: list[Any]) -> bytes:
    rl = _reportlab()
    buffer = BytesIO()
    rl["SimpleDocTemplate"](buffer, pagesize=rl["A4"]).build(story)
    return buffer.getvalue()


def render_dashboard_pdf(report: DashboardResponse, generated_at: datetime | None = None) -> bytes:
    """Render the per-day series and totals of a dashboard report."""
    styles = _build_styles()
    rl = _reportlab()
    generated = (generated_at or datetime.now(timezone.utc)).strftime("%Y-%m-%d %H:%M UTC")

    story: list[Any] = [
        rl["Paragraph"](f"Order report: {escape(report.site.name)}", styles["title"]),
        rl["Paragraph"](
            f"Mode: {report.mode} • Timezone: {report.tz} • "
            f"Window: {report.window.start.isoformat()} to {report.window.end.isoformat()}",
            styles["normal"],
        ),
        rl["Paragraph"](f"Generated: {generated}", styles["normal"]),
        rl["Spacer"](1, 10),
    ]

    rows: list[list[str]] = [["Day", "Orders", "Revenue", "Customers"]]
    for label, orders, revenue, customers in zip(report.labels, report.orders, report.revenue, report.customers):
        rows.append([label, str(orders), f"{revenue:.2f}", str(customers)])
    story.append(_grid_table(rows, [160, 100, 120, 100], styles))
    story.append(rl["Spacer"](1, 12))

    totals = report.totals
    story.append(rl["Paragraph"]("Totals", styles["heading"]))
    story.append(
        _grid_table(
            [
                ["Orders", "Revenue", "Unique customers", "Unique menu items"],
                [str(totals.orders), f"{totals.revenue:.2f}", str(totals.customers_unique), str(totals.menu_unique)],
            ],
            [100, 120, 120, 140],
            styles,
        )
    )
    return _build_pdf(story)


def render_order_ticket_pdf(order: PrintOrderRead) -> bytes:
    """Render a single order as a printable ticket."""
    styles = _build_styles()
    rl = _reportlab()
    reference = order.order_number or f"#{order.id}"
    site_name = order.site.name if order.site else "-"

    story: list[Any] = [
        rl["Paragraph"](f"{escape(site_name)} • Order {escape(reference)}", styles["title"]),
        rl["Paragraph"](f"Placed: {order.created_at.isoformat()} • Status: {order.status or '-'}", styles["normal"]),
        rl["Paragraph"](
            f"{order.fulfillment_type.capitalize()} • Payment: {order.payment_method or '-'}",
            styles["normal"],
        ),
        rl["Paragraph"](f"Customer: {escape(order.customer_name or '-')} • {escape(order.phone or order.email or '-')}", styles["normal"]),
        rl["Paragraph"](f"Note: {escape(order.note or '-')}", styles["normal"]),
        rl["Spacer"](1, 10),
    ]

    rows: list[list[str]] = [["Item", "Qty", "Price"]]
    for item in order.items:
        name = f"{item.name} ({item.size})" if item.size else item.name
        price = f"{(item.price_cents or 0) / 100:.2f}" if item.price_cents is not None else "-"
        rows.append([name, str(item.quantity), price])
    story.append(_grid_table(rows, [300, 60, 100], styles))
    story.append(rl["Spacer"](1, 10))

    for label, amount in (
        ("Tax", order.tax_amount),
        ("Tip", order.tip_amount),
        ("Delivery fee", order.delivery_fee_amount),
        ("Total", order.total_amount),
    ):
        story.append(rl["Paragraph"](f"{label}: {amount}", styles["normal"]))
    return _build_pdf(story)
