"""
Tests for audit report building and file exports.
"""
import csv
import io

import pytest

from models import Answer, Audit, AuditStatus, Question, RiskLevel
from services.export_service import build_audit_report, export_to_csv, export_to_excel, export_to_pdf


@pytest.fixture
def report():
    audit = Audit(
        id=7, title="Data centre review", iso_control="ISO/IEC 27001:2022",
        status=AuditStatus.COMPLETED, score=50, risk_level=RiskLevel.HIGH,
    )
    questions = [
        Question(id=1, text="¿Existe un inventario actualizado de activos?", control_ref="A.8"),
        Question(id=2, text="¿El acceso físico está controlado?", control_ref="A.11"),
        Question(id=3, text="¿Hay protección contra incendios?", control_ref=None),
    ]
    answers = [
        Answer(id=10, audit_id=7, question_id=1, value=2),
        Answer(id=11, audit_id=7, question_id=2, value=0, comment="Badge readers offline", non_compliance_level="MAYOR"),
    ]
    return build_audit_report(audit, questions, answers)


@pytest.mark.unit
class TestBuildAuditReport:
    def test_summary(self, report):
        assert report.audit_id == 7
        assert report.score == 50
        assert report.risk_level == RiskLevel.HIGH
        assert report.recommendation.startswith("High risk")

    def test_one_row_per_question(self, report):
        assert [(r.number, r.answer) for r in report.rows] == [(1, "Yes"), (2, "No"), (3, "Unanswered")]
        assert report.rows[1].comment == "Badge readers offline"
        assert report.rows[1].non_compliance_level == "MAYOR"
        assert report.rows[2].control_ref is None


@pytest.mark.unit
class TestExports:
    def test_csv(self, report):
        rows = list(csv.reader(io.StringIO(export_to_csv(report).decode("utf-8"))))

        assert rows[0] == ["#", "Control", "Question", "Answer", "Comment", "Non-conformity"]
        assert rows[2] == ["2", "A.11", "¿El acceso físico está controlado?", "No", "Badge readers offline", "MAYOR"]
        assert len(rows) == 4

    def test_excel(self, report):
        from openpyxl import load_workbook

        wb = load_workbook(io.BytesIO(export_to_excel(report)))

        assert wb.sheetnames == ["Summary", "Questions"]
        assert wb["Summary"]["B1"].value == "Data centre review"
        assert wb["Questions"]["D3"].value == "No"

    def test_pdf(self, report):
        assert export_to_pdf(report).startswith(b"%PDF")
