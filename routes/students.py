"""Student management routes"""
from datetime import datetime

from flask import Blueprint, render_template, request, redirect, url_for, flash
from flask_login import login_required, current_user
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from models import db, Student, StudentStatus, SchoolClass

students_bp = Blueprint('students', __name__)


@students_bp.route('/')
@login_required
def list():
    page = request.args.get('page', 1, type=int)
    per_page = 20
    search = request.args.get('search', '')
    class_id = request.args.get('class_id', type=int)

    query = Student.query.filter_by(user_id=current_user.id)

    if search:
        query = query.filter(or_(
            Student.admission_number.contains(search),
            Student.name.contains(search)
        ))

    if class_id:
        query = query.filter_by(class_id=class_id)

    students = query.order_by(Student.name).paginate(page=page, per_page=per_page, error_out=False)
    classes = SchoolClass.query.filter_by(user_id=current_user.id).all()

    return render_template('students/list.html',
                           students=students,
                           classes=classes,
                           search=search,
                           selected_class=class_id)


@students_bp.route('/add', methods=['GET', 'POST'])
@login_required
def add():
    classes = SchoolClass.query.filter_by(user_id=current_user.id).all()

    if request.method == 'POST':
        active_count = Student.query.filter_by(user_id=current_user.id, status=StudentStatus.ACTIVE).count()
        if current_user.max_students and active_count >= current_user.max_students:
            flash(f'Your plan allows {current_user.max_students} students. Upgrade to add more.', 'error')
            return redirect(url_for('billing.index'))

        class_id = request.form.get('class_id', type=int)
        if class_id and not any(c.id == class_id for c in classes):
            flash('Invalid class', 'error')
            return render_template('students/add.html', classes=classes)

        try:
            admission_date = request.form.get('admission_date')
            student = Student(
                user_id=current_user.id,
                name=request.form['name'].strip(),
                admission_number=request.form.get('admission_number') or None,
                class_id=class_id,
                parent_name=request.form.get('parent_name'),
                phone=request.form.get('phone'),
                email=request.form.get('email'),
                admission_date=datetime.strptime(admission_date, '%Y-%m-%d').date() if admission_date else None
            )
            db.session.add(student)
            db.session.commit()
            flash('Student added successfully', 'success')
            return redirect(url_for('students.list'))

        except (KeyError, ValueError):
            flash('Please provide the student name and a valid admission date', 'error')
        except SQLAlchemyError as e:
            db.session.rollback()
            flash(f'Error adding student: {str(e)}', 'error')

    return render_template('students/add.html', classes=classes)


@students_bp.route('/<int:student_id>/edit', methods=['GET', 'POST'])
@login_required
def edit(student_id):
    student = Student.query.filter_by(id=student_id, user_id=current_user.id).first_or_404()
    classes = SchoolClass.query.filter_by(user_id=current_user.id).all()

    if request.method == 'POST':
        class_id = request.form.get('class_id', type=int)
        if class_id and not any(c.id == class_id for c in classes):
            flash('Invalid class', 'error')
            return render_template('students/edit.html', student=student, classes=classes)

        try:
            admission_date = request.form.get('admission_date')
            name = request.form['name'].strip()
            if not name:
                raise KeyError('name')
            student.name = name
            student.admission_number = request.form.get('admission_number') or None
            student.class_id = class_id
            student.parent_name = request.form.get('parent_name')
            student.phone = request.form.get('phone')
            student.email = request.form.get('email')
            student.status = StudentStatus(request.form.get('status') or student.status.value)
            student.admission_date = datetime.strptime(admission_date, '%Y-%m-%d').date() if admission_date else None

            db.session.commit()
            flash('Student updated successfully', 'success')
            return redirect(url_for('students.list'))

        except (KeyError, ValueError):
            db.session.rollback()
            flash('Please provide the student name and a valid admission date', 'error')
        except SQLAlchemyError as e:
            db.session.rollback()
            flash(f'Error updating student: {str(e)}', 'error')

    return render_template('students/edit.html', student=student, classes=classes)


@students_bp.route('/<int:student_id>/delete', methods=['POST'])
@login_required
def delete(student_id):
    student = Student.query.filter_by(id=student_id, user_id=current_user.id).first_or_404()

    try:
        db.session.delete(student)
        db.session.commit()
        flash(f'Student {student.name} deleted', 'success')
    except SQLAlchemyError as e:
        db.session.rollback()
        flash(f'Error deleting student: {str(e)}', 'error')

    return redirect(url_for('students.list'))
