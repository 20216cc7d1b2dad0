"""Super-admin console: every tenant and its subscription"""
import logging
from datetime import datetime, timedelta
from functools import wraps

from flask import Blueprint, render_template, request, redirect, url_for, flash, abort
from flask_login import login_required, current_user
from sqlalchemy import func, desc
from sqlalchemy.exc import SQLAlchemyError

from models import db, User, UserRole, Student, Payment, SchoolClass, SubscriptionStatus
from .billing import PLANS

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__)

# Months offered when activating a subscription, as days
DURATIONS = {1: 30, 3: 90, 6: 180, 12: 365, 24: 730}


def super_admin_required(f):
    @wraps(f)
    @login_required
    def decorated(*args, **kwargs):
        if not current_user.is_super_admin:
            abort(403)
        return f(*args, **kwargs)
    return decorated


def apply_subscription(tenant, status, plan=None, max_students=None, months=None, now=None):
    """Change a tenant's subscription; activating starts a fresh paid period"""
    now = now or datetime.utcnow()
    status = SubscriptionStatus(status)

    if status == SubscriptionStatus.ACTIVE:
        if months not in DURATIONS:
            raise ValueError(f"Duration must be one of {sorted(DURATIONS)} months")
        tenant.subscription_end_date = now + timedelta(days=DURATIONS[months])

    tenant.subscription_status = status
    if plan:
        tenant.subscription_plan = plan
    if max_students:
        if max_students < 1:
            raise ValueError("Max students must be positive")
        tenant.max_students = max_students


@admin_bp.route('/')
@super_admin_required
def tenants():
    owners = User.query.filter_by(role=UserRole.OWNER).order_by(desc(User.created_at)).all()

    counts = dict(db.session.query(User.subscription_status, func.count(User.id))
                  .filter(User.role == UserRole.OWNER)
                  .group_by(User.subscription_status).all())
    status_counts = {status: counts.get(status, 0) for status in SubscriptionStatus}

    student_counts = dict(db.session.query(Student.user_id, func.count(Student.id))
                          .group_by(Student.user_id).all())

    return render_template('admin/tenants.html',
                           tenants=owners,
                           status_counts=status_counts,
                           student_counts=student_counts,
                           plans=PLANS,
                           durations=DURATIONS)


@admin_bp.route('/<int:user_id>/subscription', methods=['POST'])
@super_admin_required
def update_subscription(user_id):
    tenant = User.query.filter_by(id=user_id, role=UserRole.OWNER).first_or_404()

    try:
        apply_subscription(
            tenant,
            request.form['status'],
            plan=request.form.get('plan'),
            max_students=request.form.get('max_students', type=int),
            months=request.form.get('months', type=int)
        )
        db.session.commit()
        logger.info("%s set subscription of %s to %s (plan %s)",
                    current_user.email, tenant.email, tenant.subscription_status.value,
                    tenant.subscription_plan)
        flash(f'Subscription updated for {tenant.school_name or tenant.email}', 'success')
    except (KeyError, ValueError) as e:
        flash(f'Invalid subscription update: {e}', 'error')
    except SQLAlchemyError as e:
        db.session.rollback()
        flash(f'Error updating subscription: {str(e)}', 'error')

    return redirect(url_for('admin.tenants'))


@admin_bp.route('/<int:user_id>/delete', methods=['POST'])
@super_admin_required
def delete_tenant(user_id):
    """Remove a school with all of its classes, students and payments"""
    tenant = User.query.filter_by(id=user_id, role=UserRole.OWNER).first_or_404()
    name = tenant.school_name or tenant.email

    try:
        Payment.query.filter_by(user_id=tenant.id).delete()
        Student.query.filter_by(user_id=tenant.id).delete()
        SchoolClass.query.filter_by(user_id=tenant.id).delete()
        db.session.delete(tenant)
        db.session.commit()
        logger.warning("%s deleted school %s (%s)", current_user.email, name, tenant.email)
        flash(f'School {name} deleted', 'success')
    except SQLAlchemyError as e:
        db.session.rollback()
        flash(f'Error deleting school: {str(e)}', 'error')

    return redirect(url_for('admin.tenants'))
