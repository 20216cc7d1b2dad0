"""Authentication routes"""
import logging
from datetime import datetime

from flask import Blueprint, render_template, redirect, url_for, flash, current_app
from flask_login import login_user, logout_user, login_required, current_user

from models import db, User, UserRole
from extensions import google

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


def get_or_create_user(user_info, trial_days, now=None):
    """Account for a Google profile. First sign-in opens a school on a free trial."""
    now = now or datetime.utcnow()
    user = User.query.filter_by(email=user_info['email']).first()

    if user is None:
        user = User(
            google_id=user_info['sub'],
            email=user_info['email'],
            name=user_info.get('name') or user_info['email'],
            role=UserRole.OWNER
        )
        user.start_trial(trial_days, now=now)
        db.session.add(user)
        logger.info("New school account %s on a %s day trial", user.email, trial_days)
    elif not user.google_id:
        # Accounts created by seed scripts have no Google id until first sign-in
        user.google_id = user_info['sub']

    user.last_active = now
    db.session.commit()
    return user


@auth_bp.route('/')
def index():
    if current_user.is_authenticated:
        return redirect(url_for('dashboard.dashboard'))
    return render_template('auth/login.html')


@auth_bp.route('/login')
def login():
    redirect_uri = url_for('auth.auth_callback', _external=True)
    return google.authorize_redirect(redirect_uri)


@auth_bp.route('/auth/callback')
def auth_callback():
    token = google.authorize_access_token()
    user_info = token.get('userinfo')

    if not user_info:
        logger.warning("Google sign-in returned no profile")
        flash('Authentication failed', 'error')
        return redirect(url_for('auth.index'))

    user = get_or_create_user(user_info, current_app.config['TRIAL_DAYS'])
    if not user.is_active:
        flash('This account has been disabled', 'error')
        return redirect(url_for('auth.index'))

    login_user(user)

    if not user.school_name and not user.is_super_admin:
        flash('Add your school details. They appear on every receipt.', 'info')
        return redirect(url_for('settings.profile'))
    return redirect(url_for('dashboard.dashboard'))


@auth_bp.route('/logout')
@login_required
def logout():
    logout_user()
    return redirect(url_for('auth.index'))
