"""Build per-audit reports and export them to Excel, PDF, and CSV."""

import csv
import io
import logging
from collections.abc import Sequence
from datetime import datetime

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from reportlab.lib.pagesizes import A4
from reportlab.lib import colors
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle

from models.audit import Audit
from schemas.report import AuditReport, ReportRow
from services.scoring import recommendation_for_score

logger = logging.getLogger(__name__)

VALUE_LABELS = {0: "No", 1: "Partial", 2: "Yes"}
UNANSWERED = "Unanswered"
ROW_HEADERS = ["#", "Control", "Question", "Answer", "Comment", "Non-conformity"]


def build_audit_report(audit: Audit, questions: Sequence, answers: Sequence) -> AuditReport:
    by_question = {a.question_id: a for a in answers}
    rows = []
    for number, q in enumerate(questions, 1):
        ans = by_question.get(q.id)
        rows.append(ReportRow(
            number=number,
            question_id=q.id,
            control_ref=q.control_ref,
            question=q.text,
            answer=VALUE_LABELS.get(ans.value, UNANSWERED) if ans else UNANSWERED,
            comment=(ans.comment or "") if ans else "",
            non_compliance_level=(ans.non_compliance_level or "") if ans else "",
        ))
    return AuditReport(
        audit_id=audit.id,
        title=audit.title,
        iso_control=audit.iso_control,
        status=audit.status,
        score=audit.score,
        risk_level=audit.risk_level,
        recommendation=recommendation_for_score(audit.score),
        rows=rows,
    )


def _row_values(row: ReportRow) -> list:
    return [row.number, row.control_ref or "", row.question, row.answer, row.comment, row.non_compliance_level]


def export_to_excel(report: AuditReport) -> bytes:
    wb = Workbook()

    header_font = Font(bold=True, color="FFFFFF", size=11)
    header_fill = PatternFill(start_color="1E3A8A", end_color="1E3A8A", fill_type="solid")
    border = Border(
        left=Side(style="thin"), right=Side(style="thin"),
        top=Side(style="thin"), bottom=Side(style="thin"),
    )

    # Summary sheet
    ws = wb.active
    ws.title = "Summary"
    summary = [
        ("Audit", report.title),
        ("Framework", report.iso_control),
        ("Status", report.status.value),
        ("Score", report.score),
        ("Risk Level", report.risk_level.value),
        ("Recommendation", report.recommendation),
    ]
    for row_idx, (label, value) in enumerate(summary, 1):
        ws.cell(row=row_idx, column=1, value=label).font = Font(bold=True)
        ws.cell(row=row_idx, column=2, value=value).alignment = Alignment(wrap_text=True)
    ws.column_dimensions["A"].width = 18
    ws.column_dimensions["B"].width = 80

    # Questions sheet
    ws2 = wb.create_sheet("Questions")
    for col, h in enumerate(ROW_HEADERS, 1):
        cell = ws2.cell(row=1, column=col, value=h)
        cell.font = header_font
        cell.fill = header_fill
        cell.border = border
    for row_idx, row in enumerate(report.rows, 2):
        for col, value in enumerate(_row_values(row), 1):
            ws2.cell(row=row_idx, column=col, value=value).border = border
    for col, width in zip("ABCDEF", (6, 10, 60, 12, 40, 16)):
        ws2.column_dimensions[col].width = width

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def export_to_csv(report: AuditReport) -> bytes:
    buf = io.StringIO()
    writer = csv.writer(buf)

    writer.writerow(ROW_HEADERS)
    for row in report.rows:
        writer.writerow(_row_values(row))

    return buf.getvalue().encode("utf-8")


def export_to_pdf(report: AuditReport) -> bytes:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, topMargin=0.5 * inch, bottomMargin=0.5 * inch)
    styles = getSampleStyleSheet()
    elements = []

    title_style = ParagraphStyle("CustomTitle", parent=styles["Title"], fontSize=18, textColor=colors.HexColor("#1E3A8A"))
    heading_style = ParagraphStyle("CustomHeading", parent=styles["Heading2"], textColor=colors.HexColor("#1E3A8A"))

    elements.append(Paragraph("Audit Report", title_style))
    elements.append(Spacer(1, 12))
    elements.append(Paragraph(f"Audit: {report.title}", styles["Heading3"]))
    elements.append(Paragraph(f"Framework: {report.iso_control}", styles["Normal"]))
    elements.append(Paragraph(f"Generated: {datetime.utcnow().strftime('%Y-%m-%d %H:%M UTC')}", styles["Normal"]))
    elements.append(Paragraph(f"Score: {report.score}/100 ({report.risk_level.value})", styles["Normal"]))
    elements.append(Paragraph(report.recommendation, styles["Normal"]))
    elements.append(Spacer(1, 20))

    elements.append(Paragraph("Detail by Question", heading_style))
    elements.append(Spacer(1, 8))
    data = [["#", "Control", "Question", "Answer", "NC"]]
    for row in report.rows:
        data.append([row.number, row.control_ref or "", row.question[:70], row.answer, row.non_compliance_level])
    if len(data) > 1:
        t = Table(data, colWidths=[25, 50, 290, 60, 50])
        t.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#1E3A8A")),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTSIZE", (0, 0), (-1, -1), 8),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#EFF6FF")]),
        ]))
        elements.append(t)

    doc.build(elements)
    logger.debug("Rendered PDF report for audit %s", report.audit_id)
    return buf.getvalue()
