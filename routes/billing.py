"""Subscription status and plans"""
from collections import namedtuple
from datetime import datetime

from flask import Blueprint, render_template
from flask_login import login_required, current_user

from models import SubscriptionStatus

billing_bp = Blueprint('billing', __name__)

Plan = namedtuple('Plan', 'name price max_students')

PLANS = [
    Plan('Small', 999.99, 200),
    Plan('Medium', 1499.99, 500),
    Plan('Large', 1999.99, 1000),
]


def days_remaining(user, now=None):
    """Days left on the trial or paid period, None if open-ended"""
    now = now or datetime.utcnow()
    if user.subscription_status == SubscriptionStatus.TRIAL:
        end = user.trial_end_date
    elif user.subscription_status == SubscriptionStatus.ACTIVE:
        end = user.subscription_end_date
    else:
        return 0
    if end is None:
        return None
    return max((end - now).days, 0)


@billing_bp.route('/')
@login_required
def index():
    return render_template('billing/index.html',
                           plans=PLANS,
                           expired=current_user.is_subscription_expired(),
                           days_left=days_remaining(current_user))
