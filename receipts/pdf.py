"""Vector PDF receipts drawn with the reportlab canvas.

Everything is positioned absolutely on a page the exact size of the chosen
paper. Text sizes and margins come from ``receipts.sizes`` so the PDF
matches the preview and the print document.
"""
import logging
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import landscape, portrait
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from utils import format_currency
from .sizes import get_font_scale, get_paper, parse_size, pdf_margin_mm, scaled_font_sizes

logger = logging.getLogger(__name__)

FONT = 'Helvetica'
FONT_BOLD = 'Helvetica-Bold'
LINE_SPACING = 1.35

# The table is drawn on a fixed-width page, so long names are cut
NAME_MAX_CHARS = 20
TABLE_HEADERS = ['Student', 'Adm. No.', 'Class', 'Amount', 'Balance']
TABLE_WIDTHS = [0.28, 0.18, 0.18, 0.18, 0.18]
MONEY_COLUMNS = (3, 4)

BLACK = colors.black
GREY = colors.Color(156 / 255, 163 / 255, 175 / 255)
LIGHT_GREY = colors.Color(249 / 255, 250 / 255, 251 / 255)
RED = colors.Color(220 / 255, 38 / 255, 38 / 255)
GREEN = colors.Color(21 / 255, 128 / 255, 61 / 255)
BANNER_FILL = colors.Color(219 / 255, 234 / 255, 254 / 255)
BANNER_STROKE = colors.Color(59 / 255, 130 / 255, 246 / 255)
BANNER_TEXT = colors.Color(30 / 255, 64 / 255, 175 / 255)


def pdf_page_size(size):
    """Page size in points; landscape only when the paper is wider than tall"""
    paper = get_paper(size)
    dimensions = (paper.width_mm * mm, paper.height_mm * mm)
    if paper.width_mm > paper.height_mm:
        return landscape(dimensions)
    return portrait(dimensions)


def pdf_filename(data):
    return f"Receipt-{data.receipt_number}.pdf"


def truncate_name(name, limit=NAME_MAX_CHARS):
    return name[:limit]


class _Page:
    """Top-down cursor over one canvas page"""

    def __init__(self, c, size):
        self.c = c
        self.width, self.height = pdf_page_size(size)
        self.scale = get_font_scale(size)
        self.margin = pdf_margin_mm(size) * mm
        self.left = self.margin
        self.right = self.width - self.margin
        self.content_width = self.width - 2 * self.margin
        self.fonts = scaled_font_sizes(size)
        self.top = self.margin

    def line(self, key, bold=False, color=BLACK):
        """Set the font for ``key``, advance one line and return its baseline"""
        font_size = self.fonts[key]
        self.c.setFont(FONT_BOLD if bold else FONT, font_size)
        self.c.setFillColor(color)
        self.top += font_size
        baseline = self.height - self.top
        self.top += font_size * (LINE_SPACING - 1)
        return baseline

    def wrapped(self, text, key, bold=False):
        lines = simpleSplit(text, FONT_BOLD if bold else FONT, self.fonts[key], self.content_width)
        for part in lines:
            self.c.drawString(self.left, self.line(key, bold), part)

    def gap(self, points):
        self.top += points * self.scale

    def rule(self, color=GREY, width=0.75):
        y = self.height - self.top
        self.c.setStrokeColor(color)
        self.c.setLineWidth(width)
        self.c.line(self.left, y, self.right, y)


def draw_receipt(c, data, size):
    """Draw one receipt page onto ``c``"""
    page = _Page(c, parse_size(size))

    _draw_header(page, data)
    _draw_info(page, data)
    if data.is_family:
        _draw_family_table(page, data)
    else:
        _draw_single_student(page, data)
    _draw_summary(page, data)
    _draw_footer(page, data)

    c.showPage()


def render_pdf(data, size):
    """PDF bytes for the receipt"""
    size = parse_size(size)
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=pdf_page_size(size))
    c.setTitle(f"Receipt - {data.receipt_number}")
    draw_receipt(c, data, size)
    c.save()
    logger.info("Generated PDF %s on %s", pdf_filename(data), size.value)
    return buffer.getvalue()


def _draw_header(page, data):
    c = page.c
    centre = page.width / 2

    if data.school_name:
        c.drawCentredString(centre, page.line('school_name', bold=True), data.school_name.upper())
    if data.school_address:
        c.drawCentredString(centre, page.line('school_detail'), data.school_address)
    if data.school_phone:
        c.drawCentredString(centre, page.line('school_detail'), f"Tel: {data.school_phone}")

    page.gap(3)
    page.rule(color=BLACK, width=1)
    page.gap(5)
    c.drawCentredString(centre, page.line('title', bold=True), 'PAYMENT RECEIPT')
    page.gap(4)


def _draw_info(page, data):
    c = page.c

    page.rule()
    page.gap(3)
    y = page.line('info', bold=True)
    c.drawString(page.left, y, f"Receipt No: {data.receipt_number}")
    c.setFillColor(RED)
    c.drawRightString(page.right, y, f"Date: {data.payment_date}")
    page.gap(1)
    page.rule()
    page.gap(3)

    c.drawString(page.left, page.line('info', bold=True), f"Payment Method: {data.payment_method}")
    page.gap(4)


def _draw_family_table(page, data):
    c = page.c
    font_size = page.fonts['banner']

    # Banner
    banner_height = font_size * 2
    banner_bottom = page.height - page.top - banner_height
    c.setFillColor(BANNER_FILL)
    c.setStrokeColor(BANNER_STROKE)
    c.rect(page.left, banner_bottom, page.content_width, banner_height, fill=1, stroke=1)
    c.setFont(FONT_BOLD, font_size)
    c.setFillColor(BANNER_TEXT)
    c.drawCentredString(page.width / 2, banner_bottom + banner_height / 2 - font_size * 0.35,
                        'FAMILY RECEIPT - COMBINED PAYMENT')
    page.top += banner_height
    page.gap(5)

    lefts = []
    x = page.left
    for fraction in TABLE_WIDTHS:
        lefts.append(x)
        x += fraction * page.content_width
    rights = lefts[1:] + [page.right]
    padding = 1.5 * page.scale

    def cells(values, key, bold_name, colours):
        y = page.line(key, bold=bold_name)
        for i, value in enumerate(values):
            c.setFillColor(colours[i])
            c.setFont(FONT_BOLD if (bold_name and i == 0) or i in MONEY_COLUMNS else FONT, page.fonts[key])
            if i in MONEY_COLUMNS:
                c.drawRightString(rights[i] - padding, y, value)
            else:
                c.drawString(lefts[i] + padding, y, value)

    header_colours = [BLACK, BLACK, BLACK, BLACK, RED]
    cells(TABLE_HEADERS, 'table_header', True, header_colours)
    page.gap(1)
    page.rule()
    page.gap(3)

    row_colours = [BLACK, BLACK, BLACK, GREEN, RED]
    for index, line in enumerate(data.students):
        if index % 2 == 1:
            row_height = page.fonts['table'] * LINE_SPACING
            c.setFillColor(LIGHT_GREY)
            c.rect(page.left, page.height - page.top - row_height + page.fonts['table'] * 0.1,
                   page.content_width, row_height, fill=1, stroke=0)
        cells([
            truncate_name(line.student_name),
            line.admission_number or '-',
            line.class_name,
            format_currency(line.amount_paid, data.currency),
            format_currency(line.balance, data.currency),
        ], 'table', True, row_colours)


def _draw_single_student(page, data):
    c = page.c
    student = data.students[0]

    c.drawString(page.left, page.line('student', bold=True), f"Student Name: {student.student_name}")
    c.drawString(page.left, page.line('student'), f"Admission No: {student.admission_number or 'N/A'}")
    c.drawString(page.left, page.line('student'), f"Class: {student.class_name or 'N/A'}")


def _draw_summary(page, data):
    c = page.c

    page.gap(3)
    page.rule()
    page.gap(4)

    c.drawString(page.left, page.line('amount_paid', bold=True),
                 f"Amount Paid: {format_currency(data.total_paid, data.currency)}")
    page.wrapped(f"In Words: {data.amount_in_words} Shillings Only", 'words')

    balance = data.total_balance if data.is_family else data.students[0].balance
    y = page.line('balance', bold=True)
    c.drawString(page.left, y, f"{data.balance_label}:")
    c.setFillColor(RED)
    c.drawRightString(page.right, y, format_currency(balance, data.currency))

    if data.notes:
        page.gap(2)
        page.wrapped(f"Notes: {data.notes}", 'notes')


def _draw_footer(page, data):
    """Anchored to the bottom margin regardless of how long the body ran"""
    c = page.c
    fonts = page.fonts

    thanks_y = page.margin
    c.setFont(FONT_BOLD, fonts['thanks'])
    c.setFillColor(BLACK)
    c.drawCentredString(page.width / 2, thanks_y, 'Thank you for your payment!')

    label_y = thanks_y + fonts['thanks'] * 2.5
    c.setFont(FONT, fonts['signature'])
    c.drawString(page.left, label_y, data.signature_label)

    signature_y = label_y + fonts['signature'] * 1.3
    c.setStrokeColor(BLACK)
    c.setLineWidth(0.75)
    c.line(page.left, signature_y, page.left + page.content_width * 0.4, signature_y)
