# cplcore/apps/dashboard/services/exports.py
from __future__ import annotations

import json
import logging
from datetime import datetime
from io import BytesIO
from typing import Iterable, List, Optional

from django.utils import timezone
from django.utils.html import escape
from openpyxl import Workbook
from openpyxl.styles import Font
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.utils import ImageReader
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Table, TableStyle

from cplcore.apps.registration.images import decode_data_url
from cplcore.apps.registration.models import Player

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    "json": "application/json",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pdf": "application/pdf",
}

SHEET_HEADERS = ["S.No", "Player Name", "Role", "Mobile Number", "Submission Time"]
PDF_HEADERS = ["S.No", "Player Name", "Role", "Mobile Number", "Image", "Submission Time"]
PDF_IMAGE_COL = 4
PDF_THUMB_MAX = 32  # pt


def export_filename(ext: str, now: Optional[datetime] = None) -> str:
    now = timezone.localtime(now or timezone.now())
    return f"cpl-players-{now:%Y-%m-%dT%H-%M-%S}.{ext}"


def _local_str(dt: datetime) -> str:
    return timezone.localtime(dt).strftime("%d/%m/%Y, %H:%M:%S")


# ---------- JSON ----------
def build_json(players: Iterable[Player]) -> bytes:
    data = [p.to_export_dict() for p in players]
    return json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")


# ---------- Excel ----------
def build_xlsx(players: Iterable[Player]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Players"
    ws.append(SHEET_HEADERS)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for i, p in enumerate(players, start=1):
        ws.append([i, p.name, p.role, p.mobile, p.created_at.isoformat()])

    for col, width in zip("ABCDE", (6, 28, 16, 16, 30)):
        ws.column_dimensions[col].width = width

    output = BytesIO()
    wb.save(output)
    return output.getvalue()


# ---------- PDF ----------
def _thumbnail(data_url: str, size: float = PDF_THUMB_MAX):
    """
    Miniatura cuadrada para la celda 'Image'.
    Si la imagen no se puede leer se deja la celda vacía (no rompe el export).
    """
    try:
        _, raw = decode_data_url(data_url)
        ImageReader(BytesIO(raw)).getSize()
        return Image(BytesIO(raw), width=size, height=size)
    except Exception as exc:  # imagen corrupta / formato no soportado
        logger.warning("PDF export: skipping unreadable image (%s)", exc)
        return ""


def build_pdf(players: Iterable[Player]) -> bytes:
    players: List[Player] = list(players)
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=36,
        rightMargin=36,
        topMargin=36,
        bottomMargin=36,
        title="CPL Players",
    )
    styles = getSampleStyleSheet()
    cell_style = styles["BodyText"].clone("cell", fontSize=9, leading=11)

    data: list = [PDF_HEADERS]
    for i, p in enumerate(players, start=1):
        data.append([
            i,
            Paragraph(escape(p.name), cell_style),
            p.role,
            p.mobile,
            _thumbnail(p.image_data_url),
            _local_str(p.created_at),
        ])

    # 523pt = ancho útil de A4 con márgenes de 36
    table = Table(data, colWidths=[32, 130, 80, 85, 44, 152], repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.black),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("LEFTPADDING", (0, 0), (-1, -1), 4),
                ("RIGHTPADDING", (0, 0), (-1, -1), 4),
                ("TOPPADDING", (0, 0), (-1, -1), 4),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ("LEFTPADDING", (PDF_IMAGE_COL, 1), (PDF_IMAGE_COL, -1), 2),
                ("RIGHTPADDING", (PDF_IMAGE_COL, 1), (PDF_IMAGE_COL, -1), 2),
            ]
        )
    )

    doc.build([table])
    return buffer.getvalue()


BUILDERS = {
    "json": build_json,
    "xlsx": build_xlsx,
    "pdf": build_pdf,
}


def build_export(fmt: str, players: Iterable[Player]) -> bytes:
    try:
        builder = BUILDERS[fmt]
    except KeyError:
        raise ValueError(f"Unknown export format: {fmt}") from None
    return builder(players)
