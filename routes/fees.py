"""Fee structure routes"""
from decimal import Decimal, InvalidOperation

from flask import Blueprint, render_template, request, redirect, url_for, flash
from flask_login import login_required, current_user
from sqlalchemy.exc import SQLAlchemyError

from models import db, SchoolClass

fees_bp = Blueprint('fees', __name__)


@fees_bp.route('/')
@login_required
def list():
    classes = SchoolClass.query.filter_by(user_id=current_user.id) \
        .order_by(SchoolClass.name).all()
    return render_template('fees/list.html', classes=classes)


@fees_bp.route('/add', methods=['GET', 'POST'])
@login_required
def add():
    if request.method == 'POST':
        try:
            school_class = SchoolClass(
                user_id=current_user.id,
                name=request.form['name'].strip(),
                monthly_fee=Decimal(request.form.get('monthly_fee') or '0'),
                annual_fee=Decimal(request.form.get('annual_fee') or '0'),
                term=request.form.get('term') or 'Term 1',
                academic_year=request.form.get('academic_year')
            )
            db.session.add(school_class)
            db.session.commit()
            flash(f'Class {school_class.name} added successfully', 'success')
            return redirect(url_for('fees.list'))

        except (InvalidOperation, KeyError):
            flash('Please enter a class name and valid fee amounts', 'error')
        except SQLAlchemyError as e:
            db.session.rollback()
            flash(f'Error adding class: {str(e)}', 'error')

    return render_template('fees/add.html')


@fees_bp.route('/<int:class_id>/edit', methods=['GET', 'POST'])
@login_required
def edit(class_id):
    school_class = SchoolClass.query.filter_by(id=class_id, user_id=current_user.id).first_or_404()

    if request.method == 'POST':
        try:
            name = request.form['name'].strip()
            if not name:
                raise KeyError('name')
            school_class.name = name
            school_class.monthly_fee = Decimal(request.form.get('monthly_fee') or '0')
            school_class.annual_fee = Decimal(request.form.get('annual_fee') or '0')
            school_class.term = request.form.get('term') or school_class.term
            school_class.academic_year = request.form.get('academic_year')

            db.session.commit()
            flash(f'Class {school_class.name} updated', 'success')
            return redirect(url_for('fees.list'))

        except (InvalidOperation, KeyError):
            db.session.rollback()
            flash('Please enter a class name and valid fee amounts', 'error')
        except SQLAlchemyError as e:
            db.session.rollback()
            flash(f'Error updating class: {str(e)}', 'error')

    return render_template('fees/edit.html', school_class=school_class)


@fees_bp.route('/<int:class_id>/delete', methods=['POST'])
@login_required
def delete(class_id):
    school_class = SchoolClass.query.filter_by(id=class_id, user_id=current_user.id).first_or_404()

    if school_class.students:
        flash('Cannot delete a class that still has students. Move them first.', 'error')
        return redirect(url_for('fees.list'))

    try:
        db.session.delete(school_class)
        db.session.commit()
        flash(f'Class {school_class.name} deleted', 'success')
    except SQLAlchemyError as e:
        db.session.rollback()
        flash(f'Error deleting class: {str(e)}', 'error')

    return redirect(url_for('fees.list'))
