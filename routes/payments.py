"""Payment management routes"""
from datetime import datetime, date
from decimal import Decimal, InvalidOperation

from flask import Blueprint, render_template, request, redirect, url_for, flash
from flask_login import login_required, current_user
from sqlalchemy import func, desc, or_
from sqlalchemy.exc import SQLAlchemyError

from models import db, Payment, PaymentMethod, Student

payments_bp = Blueprint('payments', __name__)


def tenant_payments():
    return Payment.query.filter(Payment.user_id == current_user.id)


def parse_filter_date(value, label):
    """A YYYY-MM-DD filter date, or None (with a flash) when it can't be read"""
    if not value:
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        flash(f'{label} date "{value}" is not a valid date and was ignored', 'warning')
        return None


@payments_bp.route('/')
@login_required
def list():
    page = request.args.get('page', 1, type=int)
    per_page = 20
    search = request.args.get('search', '')
    payment_method = request.args.get('payment_method', '')
    from_date = request.args.get('from_date', '')
    to_date = request.args.get('to_date', '')

    query = tenant_payments()

    if search:
        query = query.join(Student).filter(or_(
            Student.admission_number.contains(search),
            Student.name.contains(search)
        ))

    if payment_method:
        query = query.filter(Payment.payment_method == payment_method)

    start = parse_filter_date(from_date, 'From')
    if start:
        query = query.filter(Payment.payment_date >= start)

    end = parse_filter_date(to_date, 'To')
    if end:
        query = query.filter(Payment.payment_date <= end)

    total_amount = query.with_entities(func.sum(Payment.amount)).scalar() or 0
    payment_count = query.count()
    average_amount = Decimal(str(total_amount)) / payment_count if payment_count else Decimal('0')

    payments = query.order_by(desc(Payment.payment_date), desc(Payment.created_at)) \
        .paginate(page=page, per_page=per_page, error_out=False)

    return render_template('payments/list.html',
                           payments=payments,
                           search=search,
                           total_amount=Decimal(str(total_amount)),
                           average_amount=average_amount)


@payments_bp.route('/add', methods=['GET', 'POST'])
@login_required
def add():
    students = Student.query.filter_by(user_id=current_user.id).order_by(Student.name).all()

    if request.method == 'POST':
        student_id = request.form.get('student_id', type=int)
        student = Student.query.filter_by(id=student_id, user_id=current_user.id).first()
        if not student:
            flash('Please choose a student', 'error')
            return render_template('payments/add.html', students=students, today_date=date.today().isoformat())

        try:
            amount = Decimal(request.form['amount'])
            if amount <= 0:
                raise InvalidOperation

            payment = Payment(
                user_id=current_user.id,
                student_id=student.id,
                amount=amount,
                payment_date=datetime.strptime(request.form['payment_date'], '%Y-%m-%d').date(),
                payment_method=PaymentMethod(request.form.get('payment_method', 'cash')).value,
                payment_type=request.form.get('payment_type') or 'tuition',
                notes=request.form.get('notes')
            )
            db.session.add(payment)
            db.session.commit()

            flash(f'Payment of {amount:,.2f} recorded for {student.name}', 'success')
            return redirect(url_for('receipts.open', payment_id=payment.id))

        except (InvalidOperation, KeyError, ValueError):
            flash('Please enter a positive amount, a valid date and payment method', 'error')
        except SQLAlchemyError as e:
            db.session.rollback()
            flash(f'Error recording payment: {str(e)}', 'error')

    return render_template('payments/add.html',
                           students=students,
                           today_date=date.today().isoformat())


@payments_bp.route('/<int:payment_id>/delete', methods=['POST'])
@login_required
def delete(payment_id):
    payment = tenant_payments().filter(Payment.id == payment_id).first_or_404()

    try:
        db.session.delete(payment)
        db.session.commit()
        flash('Payment deleted successfully', 'success')
    except SQLAlchemyError as e:
        db.session.rollback()
        flash(f'Error deleting payment: {str(e)}', 'error')

    return redirect(url_for('payments.list'))
