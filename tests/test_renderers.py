import re
from unittest.mock import MagicMock

import pytest

from receipts import pdf
from receipts.data import ReceiptMode, build_receipt_data
from receipts.preview import render_preview
from receipts.printing import render_print_document
from receipts.sizes import scaled_font_sizes


def text_of(html):
    """Visible text with tags stripped and whitespace collapsed"""
    html = re.sub(r'<(script|style)[^>]*>.*?</\1>', ' ', html, flags=re.S)
    return re.sub(r'\s+', ' ', re.sub(r'<[^>]+>', ' ', html)).replace(' :', ':')


@pytest.fixture
def individual(jane_payment, members, school_info, fields):
    return build_receipt_data(ReceiptMode.INDIVIDUAL, jane_payment, [], members, school_info, fields,
                              'RCP-240305-0042')


@pytest.fixture
def family(jane_payment, members, school_info, fields):
    return build_receipt_data(ReceiptMode.FAMILY, jane_payment, [2, 3], members, school_info, fields,
                              'RCP-240305-0042')


@pytest.fixture
def request_context(app):
    with app.test_request_context():
        yield


def test_preview_individual(request_context, individual):
    text = text_of(render_preview(individual, 'A5'))
    assert 'SUNRISE ACADEMY' in text
    assert 'Sunrise Academy' not in text
    assert 'Receipt No: RCP-240305-0042' in text
    assert 'Student Name: Jane Doe' in text
    assert 'Amount Paid: KES 15,000' in text
    assert 'Balance: KES 5,000' in text
    assert 'Fifteen Thousand Shillings Only' in text
    assert 'FAMILY RECEIPT' not in text


def test_preview_family(request_context, family):
    text = text_of(render_preview(family, 'A5'))
    assert 'FAMILY RECEIPT - COMBINED PAYMENT' in text
    assert 'John Doe' in text
    assert 'KES 1,250.50' in text
    assert 'Total Balance: KES 9,250.50' in text


def test_preview_is_sized_to_fit(request_context, individual):
    html = str(render_preview(individual, 'A4'))
    assert 'height: 520.0px' in html


def test_print_document(request_context, individual):
    html = render_print_document(individual, 'A6')
    assert '@page { size: 105mm 148mm; margin: 8mm; }' in html
    assert 'window.print()' in html
    assert 'window.close()' in html
    text = text_of(html)
    assert 'Amount Paid: KES 15,000' in text
    assert 'Balance: KES 5,000' in text


def test_print_fonts_follow_scale(request_context, individual):
    html = render_print_document(individual, 'A7')
    assert f"font-size: {scaled_font_sizes('A7')['title']}pt" in html


def test_unknown_balance_is_labelled(request_context, jane_payment, members, school_info, fields):
    members[2] = members[2].__class__(2, 'John Doe', 'ADM002', 'Grade 1', None, None)
    data = build_receipt_data(ReceiptMode.FAMILY, jane_payment, [2], members, school_info, fields, 'RCP-1')
    assert 'Total Balance: Unknown' in text_of(render_print_document(data, 'A5'))


def drawn_text(c):
    calls = c.drawString.call_args_list + c.drawRightString.call_args_list + c.drawCentredString.call_args_list
    return [call.args[2] for call in calls]


def test_pdf_fonts_scale_with_size(individual):
    c = MagicMock()
    pdf.draw_receipt(c, individual, 'A7')

    used = {call.args[1] for call in c.setFont.call_args_list}
    expected = set(scaled_font_sizes('A7').values())
    assert used <= expected
    assert max(used) == pytest.approx(16 * 0.6)
    c.showPage.assert_called_once()


def test_pdf_individual_text(individual):
    c = MagicMock()
    pdf.draw_receipt(c, individual, 'A5')
    text = drawn_text(c)

    assert 'SUNRISE ACADEMY' in text
    assert 'PAYMENT RECEIPT' in text
    assert 'Student Name: Jane Doe' in text
    assert 'Amount Paid: KES 15,000' in text
    assert 'KES 5,000' in text
    assert 'Thank you for your payment!' in text


def test_pdf_family_table_truncates_names(family):
    c = MagicMock()
    pdf.draw_receipt(c, family, 'A6')
    text = drawn_text(c)

    assert 'FAMILY RECEIPT - COMBINED PAYMENT' in text
    assert 'Bartholomew Alexande' in text
    assert 'Bartholomew Alexander Doe' not in text
    assert 'Total Balance:' in text
    assert 'KES 9,250.50' in text


def test_pdf_page_orientation():
    width, height = pdf.pdf_page_size('A4')
    assert width < height


def test_render_pdf_bytes(family):
    content = pdf.render_pdf(family, 'A7')
    assert content.startswith(b'%PDF')


def test_pdf_filename(individual):
    assert pdf.pdf_filename(individual) == 'Receipt-RCP-240305-0042.pdf'
