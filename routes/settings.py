"""School profile settings"""
from flask import Blueprint, render_template, request, redirect, url_for, flash
from flask_login import login_required, current_user
from sqlalchemy.exc import SQLAlchemyError

from models import db

settings_bp = Blueprint('settings', __name__)


@settings_bp.route('/', methods=['GET', 'POST'])
@login_required
def profile():
    if request.method == 'POST':
        school_name = request.form.get('school_name', '').strip()
        if not school_name:
            flash('School name is required', 'error')
            return render_template('settings/profile.html')

        try:
            current_user.school_name = school_name
            current_user.school_address = request.form.get('school_address', '').strip() or None
            current_user.school_phone = request.form.get('school_phone', '').strip() or None
            db.session.commit()
            flash('School profile updated. New receipts will use these details.', 'success')
            return redirect(url_for('settings.profile'))
        except SQLAlchemyError as e:
            db.session.rollback()
            flash(f'Error saving profile: {str(e)}', 'error')

    return render_template('settings/profile.html')
