"""Utility functions"""
from datetime import datetime
from decimal import Decimal
from io import BytesIO

import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer


def format_currency(amount, currency='KES'):
    """KES 15,000 for whole amounts, KES 1,250.50 otherwise"""
    if amount is None:
        return 'Unknown'
    value = Decimal(str(amount))
    if value == value.to_integral_value():
        return f"{currency} {value:,.0f}"
    return f"{currency} {value:,.2f}"


def format_date(value, fmt='%d/%m/%Y'):
    if not value:
        return ''
    if isinstance(value, str):
        value = datetime.strptime(value[:10], '%Y-%m-%d')
    return value.strftime(fmt)


# ===========================
#  REPORT EXPORTS
# ===========================
class ExportData:
    """A titled table ready to be written as Excel or PDF"""

    def __init__(self, title, headers, rows):
        self.title = title
        self.headers = headers
        self.rows = rows


def create_excel_workbook():
    """Create a new Excel workbook with default styling"""
    wb = openpyxl.Workbook()
    return wb


def style_header_row(ws, row_num=1):
    """Apply styling to header row"""
    header_fill = PatternFill(start_color="1E3A8A", end_color="1E3A8A", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF", size=11)

    for cell in ws[row_num]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal='center', vertical='center')


def auto_adjust_column_width(ws):
    """Auto-adjust column widths"""
    for column in ws.columns:
        max_length = 0
        column_letter = get_column_letter(column[0].column)
        for cell in column:
            if cell.value is not None and len(str(cell.value)) > max_length:
                max_length = len(str(cell.value))
        adjusted_width = min(max_length + 2, 50)
        ws.column_dimensions[column_letter].width = adjusted_width


def export_to_excel(data):
    """Single-sheet workbook with a styled header row"""
    wb = create_excel_workbook()
    ws = wb.active
    # Sheet titles are capped at 31 characters by Excel
    ws.title = data.title[:31]

    ws.append(data.headers)
    for row in data.rows:
        ws.append([float(value) if isinstance(value, Decimal) else value for value in row])

    style_header_row(ws)
    auto_adjust_column_width(ws)

    buffer = BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer


def export_to_pdf(data, generated_on=None):
    """Title, generation date and a striped table"""
    generated_on = generated_on or datetime.now()
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4,
                            rightMargin=14 * mm, leftMargin=14 * mm,
                            topMargin=14 * mm, bottomMargin=14 * mm,
                            title=data.title)

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        'ReportTitle',
        parent=styles['Heading1'],
        fontSize=18,
        textColor=colors.Color(33 / 255, 37 / 255, 41 / 255),
        spaceAfter=2,
        fontName='Helvetica-Bold'
    )
    date_style = ParagraphStyle(
        'ReportDate',
        parent=styles['Normal'],
        fontSize=10,
        textColor=colors.Color(108 / 255, 117 / 255, 125 / 255),
    )

    elements = [
        Paragraph(data.title, title_style),
        Paragraph(f"Generated on: {generated_on.strftime('%d/%m/%Y')}", date_style),
        Spacer(1, 5 * mm),
    ]

    table_data = [data.headers] + [[str(value) for value in row] for row in data.rows]
    table = Table(table_data, repeatRows=1)
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.Color(30 / 255, 58 / 255, 138 / 255)),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1),
         [colors.white, colors.Color(245 / 255, 247 / 255, 250 / 255)]),
        ('TOPPADDING', (0, 0), (-1, -1), 4),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
    ]))
    elements.append(table)

    doc.build(elements)
    buffer.seek(0)
    return buffer
