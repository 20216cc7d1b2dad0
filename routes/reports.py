"""Reporting routes"""
import logging
from datetime import datetime

from flask import Blueprint, render_template, send_file, abort, current_app
from flask_login import login_required, current_user
from sqlalchemy import desc

from models import Payment, Student, SchoolClass
from receipts.data import payment_method_label
from utils import ExportData, export_to_excel, export_to_pdf, format_currency, format_date

logger = logging.getLogger(__name__)

reports_bp = Blueprint('reports', __name__)

EXPORT_FORMATS = {
    'xlsx': (export_to_excel, 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'),
    'pdf': (export_to_pdf, 'application/pdf'),
}


def payments_report(user_id, currency):
    payments = Payment.query.filter_by(user_id=user_id) \
        .order_by(desc(Payment.payment_date)).all()
    rows = [[
        format_date(p.payment_date),
        p.student.name,
        p.student.admission_number or '',
        p.student.class_name,
        format_currency(p.amount, currency),
        payment_method_label(p.payment_method),
        p.notes or ''
    ] for p in payments]
    return ExportData('Payments Report',
                      ['Date', 'Student', 'Adm. No.', 'Class', 'Amount', 'Method', 'Notes'],
                      rows)


def students_report(user_id, currency):
    students = Student.query.filter_by(user_id=user_id).order_by(Student.name).all()
    rows = [[
        s.name,
        s.admission_number or '',
        s.class_name,
        s.parent_name or '',
        s.phone or '',
        s.status.value.title() if s.status else '',
        format_currency(s.class_fee, currency)
    ] for s in students]
    return ExportData('Students Report',
                      ['Name', 'Adm. No.', 'Class', 'Parent', 'Phone', 'Status', 'Class Fee'],
                      rows)


def balances_report(user_id, currency):
    rows = []
    students = Student.query.filter_by(user_id=user_id).order_by(Student.name).all()
    for student in students:
        balance = student.get_current_balance()
        if balance > 0:
            rows.append([
                student.name,
                student.admission_number or '',
                student.class_name,
                format_currency(student.class_fee, currency),
                format_currency(student.class_fee - balance, currency),
                format_currency(balance, currency),
                balance,
            ])
    rows.sort(key=lambda row: row[-1], reverse=True)
    return ExportData('Outstanding Balances',
                      ['Student', 'Adm. No.', 'Class', 'Fee', 'Paid', 'Balance'],
                      [row[:-1] for row in rows])


def class_summary_report(user_id, currency):
    rows = []
    for school_class in SchoolClass.query.filter_by(user_id=user_id).order_by(SchoolClass.name).all():
        students = school_class.students
        expected = school_class.monthly_fee * len(students)
        collected = sum((s.class_fee - s.get_current_balance() for s in students), 0)
        rows.append([
            school_class.name,
            len(students),
            format_currency(school_class.monthly_fee, currency),
            format_currency(expected, currency),
            format_currency(collected, currency),
            format_currency(expected - collected, currency),
        ])
    return ExportData('Class Summary',
                      ['Class', 'Students', 'Fee', 'Expected', 'Collected', 'Outstanding'],
                      rows)


REPORTS = {
    'payments': payments_report,
    'students': students_report,
    'balances': balances_report,
    'classes': class_summary_report,
}


@reports_bp.route('/')
@login_required
def index():
    return render_template('reports/index.html', reports=REPORTS)


@reports_bp.route('/<kind>')
@login_required
def show(kind):
    if kind not in REPORTS:
        abort(404)
    report = REPORTS[kind](current_user.id, current_app.config['CURRENCY_CODE'])
    return render_template('reports/show.html', report=report, kind=kind)


@reports_bp.route('/<kind>/export/<fmt>')
@login_required
def export(kind, fmt):
    if kind not in REPORTS or fmt not in EXPORT_FORMATS:
        abort(404)

    report = REPORTS[kind](current_user.id, current_app.config['CURRENCY_CODE'])
    writer, mimetype = EXPORT_FORMATS[fmt]
    buffer = writer(report)
    filename = f"{kind}-report-{datetime.now().strftime('%Y%m%d')}.{fmt}"

    logger.info("Exported %s report (%d rows) as %s for user %s",
                kind, len(report.rows), fmt, current_user.id)
    return send_file(buffer, mimetype=mimetype, as_attachment=True, download_name=filename)
