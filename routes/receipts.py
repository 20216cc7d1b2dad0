"""Receipt routes: preview, print and PDF for a payment"""
import logging

from flask import (Blueprint, render_template, request, redirect, url_for, flash, make_response,
                   session, current_app, abort)
from flask_login import login_required, current_user

from models import Payment
from receipts import (ReceiptMode, ReceiptSession, ReceiptSessionStore, PaymentContext, RECEIPT_SIZES,
                      build_receipt_data, render_preview, render_print_document, render_pdf, pdf_filename)
from receipts.lookups import fetch_school_info, load_family_members, filter_members

logger = logging.getLogger(__name__)

receipts_bp = Blueprint('receipts', __name__)


def get_tenant_payment(payment_id):
    return Payment.query.filter_by(id=payment_id, user_id=current_user.id).first_or_404()


def load_receipt_session(token):
    """The open receipt session, or None after flashing why it is gone"""
    receipt_session = ReceiptSessionStore(session).get(token)
    if receipt_session is None:
        flash('This receipt was closed or has expired. Open it again from the payments list.', 'warning')
    return receipt_session


def build_current_receipt(receipt_session):
    """Rebuild the document from the payment, the lookups and the session's settings"""
    payment = PaymentContext.from_payment(get_tenant_payment(receipt_session.payment_id))
    members = load_family_members(
        current_user.id,
        payment.student_id,
        fallback=current_app.config['RECEIPT_BALANCE_FALLBACK'],
        include_all=receipt_session.mode == ReceiptMode.FAMILY
    )
    data = build_receipt_data(
        receipt_session.mode,
        payment,
        receipt_session.selected_ids,
        members,
        receipt_session.school,
        receipt_session.fields,
        receipt_session.receipt_number,
        currency=current_app.config['CURRENCY_CODE']
    )
    return data, members


@receipts_bp.route('/open/<int:payment_id>')
@login_required
def open(payment_id):
    payment = PaymentContext.from_payment(get_tenant_payment(payment_id))
    receipt_session = ReceiptSession.open(
        payment,
        fetch_school_info(current_user.id),
        size=current_app.config['RECEIPT_DEFAULT_SIZE'],
        signature_label=current_app.config['RECEIPT_SIGNATURE_LABEL']
    )
    ReceiptSessionStore(session).add(receipt_session)
    logger.info("Opened receipt %s for payment %s", receipt_session.receipt_number, payment_id)
    return redirect(url_for('receipts.view', token=receipt_session.token))


@receipts_bp.route('/<token>', methods=['GET', 'POST'])
@login_required
def view(token):
    store = ReceiptSessionStore(session)
    receipt_session = load_receipt_session(token)
    if receipt_session is None:
        return redirect(url_for('payments.list'))

    if request.method == 'POST':
        try:
            receipt_session.update(
                mode=request.form.get('mode'),
                size=request.form.get('size'),
                payment_date=request.form.get('payment_date'),
                amount_in_words=request.form.get('amount_in_words'),
                notes=request.form.get('notes'),
                signature_label=request.form.get('signature_label')
            )
        except ValueError as e:
            flash(str(e), 'error')
        else:
            store.save(receipt_session)
        return redirect(url_for('receipts.view', token=token))

    data, members = build_current_receipt(receipt_session)
    search = request.args.get('q', '')

    return render_template('receipts/view.html',
                           receipt_session=receipt_session,
                           data=data,
                           preview=render_preview(data, receipt_session.size),
                           sizes=RECEIPT_SIZES,
                           paper=RECEIPT_SIZES[receipt_session.size],
                           family_members=filter_members(members, search),
                           search=search,
                           ReceiptMode=ReceiptMode)


@receipts_bp.route('/<token>/toggle/<int:student_id>', methods=['POST'])
@login_required
def toggle_student(token, student_id):
    store = ReceiptSessionStore(session)
    receipt_session = load_receipt_session(token)
    if receipt_session is None:
        return redirect(url_for('payments.list'))

    if not receipt_session.toggle_student(student_id):
        flash('The student who made this payment is always on the receipt.', 'info')
    else:
        store.save(receipt_session)

    return redirect(url_for('receipts.view', token=token, q=request.args.get('q', '')))


@receipts_bp.route('/<token>/print')
@login_required
def print_receipt(token):
    receipt_session = load_receipt_session(token)
    if receipt_session is None:
        return redirect(url_for('payments.list'))

    data, _ = build_current_receipt(receipt_session)
    return render_print_document(data, receipt_session.size)


@receipts_bp.route('/<token>/pdf')
@login_required
def download_pdf(token):
    receipt_session = load_receipt_session(token)
    if receipt_session is None:
        return redirect(url_for('payments.list'))

    data, _ = build_current_receipt(receipt_session)
    if not data.students:
        abort(404)

    response = make_response(render_pdf(data, receipt_session.size))
    response.headers['Content-Type'] = 'application/pdf'
    response.headers['Content-Disposition'] = f'attachment; filename={pdf_filename(data)}'
    return response


@receipts_bp.route('/<token>/close', methods=['POST'])
@login_required
def close(token):
    ReceiptSessionStore(session).discard(token)
    return redirect(url_for('payments.list'))
