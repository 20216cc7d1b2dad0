"""Dashboard routes"""
from decimal import Decimal, InvalidOperation

from flask import Blueprint, render_template, request, redirect, url_for, flash
from flask_login import login_required, current_user
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError

from models import (db, Payment, Student, StudentStatus, get_tenant_totals,
                    get_collection_target, get_monthly_analysis)

dashboard_bp = Blueprint('dashboard', __name__)


def top_balances(user_id, limit=10):
    """Active students who still owe, largest balance first"""
    owing = []
    for student in Student.query.filter_by(user_id=user_id, status=StudentStatus.ACTIVE):
        balance = student.get_current_balance()
        if balance > 0:
            owing.append({'student': student, 'balance': balance})

    owing.sort(key=lambda row: row['balance'], reverse=True)
    return owing[:limit]


@dashboard_bp.route('/dashboard')
@login_required
def dashboard():
    recent_payments = Payment.query.filter_by(user_id=current_user.id) \
        .order_by(desc(Payment.created_at)).limit(10).all()
    stats = get_tenant_totals(current_user.id)

    return render_template('dashboard.html',
                           stats=stats,
                           target=get_collection_target(current_user, stats),
                           analysis=get_monthly_analysis(current_user.id),
                           recent_payments=recent_payments,
                           students_with_balances=top_balances(current_user.id))


@dashboard_bp.route('/dashboard/target', methods=['POST'])
@login_required
def set_target():
    """Track this month's collections against expected fees or a fixed amount"""
    if request.form.get('target_type') == 'expected':
        current_user.monthly_target = None
    else:
        try:
            amount = Decimal(request.form.get('amount') or '')
        except InvalidOperation:
            amount = None
        if amount is None or not amount.is_finite() or amount <= 0:
            flash('Enter a target amount greater than zero', 'error')
            return redirect(url_for('dashboard.dashboard'))
        current_user.monthly_target = amount.quantize(Decimal('0.01'))

    try:
        db.session.commit()
        flash('Monthly target updated', 'success')
    except SQLAlchemyError as e:
        db.session.rollback()
        flash(f'Error saving target: {str(e)}', 'error')

    return redirect(url_for('dashboard.dashboard'))
