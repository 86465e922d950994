"""Spreadsheet and PDF renderings of a shipping result.

Both exporters only format what the engine produced; nothing is recomputed.
"""
from __future__ import annotations

import io
import logging
from typing import Sequence

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from models import Package, ShippingResult
from services.package_import import packages_to_frame

logger = logging.getLogger(__name__)

REPORT_TITLE = "Shipping Calculation Report"


def summary_rows(result: ShippingResult, use_pallet: bool) -> list[tuple[str, str]]:
    rows = [
        ("Shipping Cost", f"{result.currency_code} {result.shipping_cost:.2f}"),
        ("Tax", f"{result.currency_code} {result.tax:.2f}"),
        ("Total Cost", f"{result.currency_code} {result.total_cost:.2f}"),
        ("Total Weight", f"{result.total_weight:.2f} kg"),
    ]
    if use_pallet:
        rows.append(("Pallets Needed", str(result.pallets_needed)))
    return rows


def export_to_excel(packages: Sequence[Package], result: ShippingResult, use_pallet: bool) -> bytes:
    buffer = io.BytesIO()
    summary = pd.DataFrame(summary_rows(result, use_pallet), columns=["Setting", "Value"])
    notes = pd.DataFrame(
        [("Warning", w) for w in result.warnings]
        + [("Recommendation", r) for r in result.recommendations]
        + [("Calculation", c) for c in result.calculations],
        columns=["Kind", "Detail"],
    )
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        packages_to_frame(list(packages)).to_excel(writer, sheet_name="Packages", index=False)
        summary.to_excel(writer, sheet_name="Summary", index=False)
        notes.to_excel(writer, sheet_name="Calculations", index=False)
    logger.info("Exported %d package row(s) to spreadsheet", len(packages))
    return buffer.getvalue()


def _build_table(data: Sequence[Sequence[str]], column_widths: Sequence[float]) -> Table:
    table = Table(data, colWidths=column_widths)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F1F1F1")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.HexColor("#333333")),
                ("ALIGN", (0, 0), (-1, -1), "LEFT"),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#DDDDDD")),
            ]
        )
    )
    return table


def _packages_table(packages: Sequence[Package]) -> Table:
    data = [["#", "Dimensions", "Weight", "Quantity"]]
    for index, pkg in enumerate(packages, start=1):
        data.append(
            [
                str(index),
                f"{pkg.length}x{pkg.width}x{pkg.height} {pkg.length_unit}",
                f"{pkg.weight} {pkg.weight_unit}",
                str(pkg.quantity),
            ]
        )
    return _build_table(data, column_widths=[12 * mm, 80 * mm, 45 * mm, 30 * mm])


def generate_pdf_report(packages: Sequence[Package], result: ShippingResult, use_pallet: bool) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=20 * mm,
        rightMargin=20 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=REPORT_TITLE,
    )

    styles = getSampleStyleSheet()
    subtitle_style = ParagraphStyle("Subtitle", parent=styles["Heading2"], textColor=colors.HexColor("#666666"))
    warning_style = ParagraphStyle("Warning", parent=styles["BodyText"], textColor=colors.HexColor("#D32F2F"))
    recommendation_style = ParagraphStyle("Recommendation", parent=styles["BodyText"], textColor=colors.HexColor("#1976D2"))

    story: list = [
        Paragraph(REPORT_TITLE, styles["Title"]),
        Spacer(1, 6 * mm),
        Paragraph("Package Details", subtitle_style),
        _packages_table(packages),
        Spacer(1, 6 * mm),
        Paragraph("Cost Summary", subtitle_style),
        _build_table([["Metric", "Value"], *summary_rows(result, use_pallet)], column_widths=[60 * mm, 100 * mm]),
    ]

    if result.warnings:
        story.extend([Spacer(1, 6 * mm), Paragraph("Warnings", subtitle_style)])
        story.extend(Paragraph(w, warning_style) for w in result.warnings)

    if result.recommendations:
        story.extend([Spacer(1, 6 * mm), Paragraph("Recommendations", subtitle_style)])
        story.extend(Paragraph(r, recommendation_style) for r in result.recommendations)

    story.extend([Spacer(1, 6 * mm), Paragraph("Calculation Details", subtitle_style)])
    story.extend(Paragraph(c, styles["BodyText"]) for c in result.calculations)

    doc.build(story)
    logger.info("Rendered PDF report for %d package row(s)", len(packages))
    return buffer.getvalue()
